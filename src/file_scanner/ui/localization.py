"""Proste zarządzanie lokalizacją tekstów interfejsu użytkownika."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from file_scanner.core.models import ScanStatus


_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "app.title": "High-Performance File Scanner",
        "app.description": "Built to prove speed with instant scan metrics and clear metadata.",
        "button.choose": "Choose Directory",
        "dialog.choose.title": "Choose Directory",
        "status.ready": "Ready",
        "status.scanning": "Scanning...",
        "status.scanning.count": "Scanning {count} items...",
        "metrics.summary": "Scanned {files} files in {elapsed} milliseconds.",
        "location.selected": "Directory: {path}",
        "location.none": "No directory selected.",
        "list.empty": "No results yet. Choose a directory to scan.",
        "entry.folder": "Folder",
        "entry.size": "{size:.1f} KB",
        "column.name": "Name",
        "column.details": "Details",
        "language.label": "Language:",
        "language.polish": "Polish",
        "language.english": "English",
    },
    "pl": {
        "app.title": "Wydajny skaner plików",
        "app.description": "Błyskawiczne metryki skanowania i czytelne metadane.",
        "button.choose": "Wybierz katalog",
        "dialog.choose.title": "Wybierz katalog",
        "status.ready": "Gotowy",
        "status.scanning": "Skanowanie...",
        "status.scanning.count": "Skanowanie {count} elementów...",
        "metrics.summary": "Przeskanowano {files} plików w {elapsed} milisekund.",
        "location.selected": "Katalog: {path}",
        "location.none": "Nie wybrano katalogu.",
        "list.empty": "Brak wyników. Wybierz katalog do przeskanowania.",
        "entry.folder": "Folder",
        "entry.size": "{size:.1f} KB",
        "column.name": "Nazwa",
        "column.details": "Szczegóły",
        "language.label": "Język:",
        "language.polish": "Polski",
        "language.english": "English",
    },
}

# Separator tysięcy dla liczników wyświetlanych w danym języku.
_GROUPING: Dict[str, str] = {"en": ",", "pl": "\u00a0"}


@dataclass(slots=True)
class LocalizationManager:
    """Eksponuje teksty interfejsu w zależności od wybranego języka."""

    locale: str = "en"

    def set_locale(self, locale: str) -> None:
        if locale not in _TRANSLATIONS:
            raise ValueError(f"Unsupported locale: {locale}")
        self.locale = locale

    def text(self, key: str, **values: Any) -> str:
        table = _TRANSLATIONS.get(self.locale, _TRANSLATIONS["en"])
        try:
            template = table[key]
        except KeyError as exc:
            raise KeyError(f"Missing translation for key '{key}' in locale '{self.locale}'") from exc
        return template.format(**values) if values else template

    def format_count(self, value: int) -> str:
        return f"{value:,}".replace(",", _GROUPING.get(self.locale, ","))

    def status_label(self, status: ScanStatus, scanned_count: int) -> str:
        if status is ScanStatus.READY:
            return self.text("status.ready")
        if scanned_count:
            return self.text("status.scanning.count", count=self.format_count(scanned_count))
        return self.text("status.scanning")

    def available_locales(self) -> Mapping[str, str]:
        return {
            "en": _TRANSLATIONS["en"]["language.english"],
            "pl": _TRANSLATIONS["pl"]["language.polish"],
        }


__all__ = ["LocalizationManager"]
