"""Testy lokalizacji interfejsu użytkownika."""

from __future__ import annotations

import pytest

from file_scanner.core.models import ScanStatus
from file_scanner.ui.localization import LocalizationManager


def test_localization_switches_language() -> None:
    manager = LocalizationManager()
    assert manager.text("button.choose") == "Choose Directory"

    manager.set_locale("pl")
    assert manager.text("button.choose") == "Wybierz katalog"


def test_localization_formats_values() -> None:
    manager = LocalizationManager()
    assert manager.text("metrics.summary", files=2, elapsed=120) == "Scanned 2 files in 120 milliseconds."
    assert manager.text("entry.size", size=2.54) == "2.5 KB"


def test_status_label_groups_thousands_per_locale() -> None:
    manager = LocalizationManager()
    assert manager.status_label(ScanStatus.READY, 10) == "Ready"
    assert manager.status_label(ScanStatus.SCANNING, 0) == "Scanning..."
    assert manager.status_label(ScanStatus.SCANNING, 12500) == "Scanning 12,500 items..."

    manager.set_locale("pl")
    assert manager.status_label(ScanStatus.SCANNING, 12500) == "Skanowanie 12\u00a0500 elementów..."


def test_localization_rejects_unknown_locale() -> None:
    manager = LocalizationManager()
    with pytest.raises(ValueError):
        manager.set_locale("de")


def test_missing_key_raises_error() -> None:
    manager = LocalizationManager()
    with pytest.raises(KeyError):
        manager.text("nonexistent.key")


def test_all_locales_share_keys() -> None:
    manager = LocalizationManager()
    english = {key: manager.text(key) for key in ("app.title", "list.empty", "location.none")}
    manager.set_locale("pl")
    for key in english:
        assert manager.text(key)
