"""Testy konfiguracji aplikacji."""

from __future__ import annotations

import logging

import pytest

from file_scanner.shared.config import AppConfig


def test_default_config_matches_engine_defaults() -> None:
    config = AppConfig.default()

    assert config.notification_timeout == 4.0
    assert config.batch_size == 250
    assert config.progress_every == 250
    assert config.session_timeout is None
    assert config.locale == "en"
    assert config.log_level == logging.INFO


def test_from_env_reads_overrides() -> None:
    config = AppConfig.from_env(
        {
            "FILESCANNER_NOTIFICATION_TIMEOUT": "2.5",
            "FILESCANNER_BATCH_SIZE": "100",
            "FILESCANNER_PROGRESS_EVERY": "10",
            "FILESCANNER_SESSION_TIMEOUT": "30",
            "FILESCANNER_LOCALE": "PL",
            "FILESCANNER_LOG_LEVEL": "debug",
        }
    )

    assert config.notification_timeout == 2.5
    assert config.batch_size == 100
    assert config.progress_every == 10
    assert config.session_timeout == 30.0
    assert config.locale == "pl"
    assert config.log_level == logging.DEBUG


def test_from_env_ignores_blank_values() -> None:
    config = AppConfig.from_env({"FILESCANNER_BATCH_SIZE": "  "})
    assert config.batch_size == 250


def test_from_env_names_invalid_variable() -> None:
    with pytest.raises(ValueError, match="FILESCANNER_BATCH_SIZE"):
        AppConfig.from_env({"FILESCANNER_BATCH_SIZE": "many"})


def test_from_env_rejects_unknown_log_level() -> None:
    with pytest.raises(ValueError, match="FILESCANNER_LOG_LEVEL"):
        AppConfig.from_env({"FILESCANNER_LOG_LEVEL": "chatty"})


@pytest.mark.parametrize(
    "overrides",
    [{"batch_size": 0}, {"progress_every": 0}, {"notification_timeout": -1.0}, {"session_timeout": 0.0}],
)
def test_rejects_non_positive_values(overrides: dict[str, float]) -> None:
    with pytest.raises(ValueError):
        AppConfig(**overrides)
