"""Konfiguracja aplikacji."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, TypeVar

from file_scanner.core.notifications import DEFAULT_NOTIFICATION_TIMEOUT
from file_scanner.transport.local import DEFAULT_BATCH_SIZE, DEFAULT_PROGRESS_EVERY


ENV_PREFIX = "FILESCANNER_"

_T = TypeVar("_T")


@dataclass(slots=True)
class AppConfig:
    """Konfiguracja ogólna aplikacji."""

    notification_timeout: float = DEFAULT_NOTIFICATION_TIMEOUT
    batch_size: int = DEFAULT_BATCH_SIZE
    progress_every: int = DEFAULT_PROGRESS_EVERY
    session_timeout: float | None = None
    locale: str = "en"
    log_level: int = logging.INFO

    def __post_init__(self) -> None:
        if self.notification_timeout <= 0:
            raise ValueError("notification_timeout must be positive")
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.progress_every <= 0:
            raise ValueError("progress_every must be positive")
        if self.session_timeout is not None and self.session_timeout <= 0:
            raise ValueError("session_timeout must be positive")

    @classmethod
    def default(cls) -> "AppConfig":
        """Tworzy domyślną konfigurację."""

        return cls()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """Tworzy konfigurację z domyślnych wartości nadpisanych zmiennymi ``FILESCANNER_*``."""

        env = os.environ if environ is None else environ
        defaults = cls()

        def read(name: str, parse: Callable[[str], _T], fallback: _T) -> _T:
            key = ENV_PREFIX + name
            raw = (env.get(key) or "").strip()
            if not raw:
                return fallback
            try:
                return parse(raw)
            except ValueError as exc:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from exc

        return cls(
            notification_timeout=read("NOTIFICATION_TIMEOUT", float, defaults.notification_timeout),
            batch_size=read("BATCH_SIZE", int, defaults.batch_size),
            progress_every=read("PROGRESS_EVERY", int, defaults.progress_every),
            session_timeout=read("SESSION_TIMEOUT", float, defaults.session_timeout),
            locale=read("LOCALE", str.lower, defaults.locale),
            log_level=read("LOG_LEVEL", _parse_log_level, defaults.log_level),
        )


def _parse_log_level(raw: str) -> int:
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {raw}")
    return level
