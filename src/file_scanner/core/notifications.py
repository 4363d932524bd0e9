"""Krótkotrwałe powiadomienia o błędach, wygaszane automatycznie."""

from __future__ import annotations

import asyncio
import time
from typing import Callable, List

import structlog

from .models import Notification


DEFAULT_NOTIFICATION_TIMEOUT = 4.0

Listener = Callable[[], None]


class NotificationSink:
    """Przechowuje co najwyżej jeden komunikat i wygasza go po stałym czasie.

    Każde nowe powiadomienie zastępuje poprzednie i planuje wygaszenie od nowa.
    Wygaszenie jest zadaniem asyncio, anulowanym przy kolejnym ``notify``
    lub ``dismiss``. ``notify`` wymaga działającej pętli zdarzeń.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_NOTIFICATION_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"Notification timeout must be positive, got {timeout}")
        self._timeout = timeout
        self._clock = clock
        self._current: Notification | None = None
        self._expiry: asyncio.Task[None] | None = None
        self._listeners: List[Listener] = []
        self._logger = structlog.get_logger(__name__)

    # ------------------------------------------------------------------
    # API publiczne
    # ------------------------------------------------------------------

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def current(self) -> Notification | None:
        return self._current

    @property
    def message(self) -> str | None:
        return self._current.message if self._current is not None else None

    @property
    def pending(self) -> asyncio.Task[None] | None:
        """Zaplanowane wygaszenie bieżącego komunikatu, jeśli istnieje."""

        return self._expiry

    def notify(self, message: str) -> None:
        loop = asyncio.get_running_loop()
        self._cancel_expiry()
        self._current = Notification(message=message, expires_at=self._clock() + self._timeout)
        self._expiry = loop.create_task(self._expire_after(self._timeout))
        self._logger.info("notification-shown", message=message)
        self._emit()

    def dismiss(self) -> None:
        self._cancel_expiry()
        if self._current is None:
            return
        self._current = None
        self._emit()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ------------------------------------------------------------------
    # Operacje pomocnicze
    # ------------------------------------------------------------------

    async def _expire_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._expiry = None
        self._current = None
        self._emit()

    def _cancel_expiry(self) -> None:
        if self._expiry is not None:
            self._expiry.cancel()
            self._expiry = None

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener()


__all__ = ["DEFAULT_NOTIFICATION_TIMEOUT", "NotificationSink"]
