"""Koordynacja cyklu życia sesji skanowania katalogu."""

from __future__ import annotations

import asyncio
import time
from functools import partial
from typing import Any, Callable, List, Protocol, Tuple

import structlog

from file_scanner.transport.base import ScanTransport, Subscription
from .models import FileMetadata, ScanEventKind, ScanStatus, StartOutcome
from .notifications import NotificationSink
from .session import ScanSession, format_status_label


GENERIC_FAILURE_MESSAGE = "Unable to scan directory."
TIMEOUT_MESSAGE = "Scan timed out."

Listener = Callable[[], None]


class DirectoryPicker(Protocol):
    """Modalny wybór pojedynczego katalogu."""

    async def select_directory(self) -> str | None:
        """Zwraca bezwzględną ścieżkę lub ``None``, gdy użytkownik zrezygnował."""


class ScanCoordinator:
    """Prowadzi pojedyncze skanowanie od wyboru katalogu do finalizacji.

    Zdarzenia transportu trafiają do jednej funkcji przejść ``dispatch``,
    związanej z konkretną instancją sesji. Zdarzenia sesji zastąpionej lub
    sfinalizowanej są ignorowane, więc nie mogą zmienić stanu kolejnej sesji.
    W danej chwili aktywna jest co najwyżej jedna sesja.
    """

    def __init__(
        self,
        transport: ScanTransport,
        *,
        notifications: NotificationSink | None = None,
        clock: Callable[[], float] = time.perf_counter,
        session_timeout: float | None = None,
    ) -> None:
        if session_timeout is not None and session_timeout <= 0:
            raise ValueError(f"session_timeout must be positive, got {session_timeout}")
        self._transport = transport
        self._notifications = notifications or NotificationSink()
        self._clock = clock
        self._session_timeout = session_timeout
        self._session: ScanSession | None = None
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._listeners: List[Listener] = []
        self._logger = structlog.get_logger(__name__)

    # ------------------------------------------------------------------
    # Stan widoczny dla warstwy prezentacji
    # ------------------------------------------------------------------

    @property
    def session(self) -> ScanSession | None:
        return self._session

    @property
    def notifications(self) -> NotificationSink:
        return self._notifications

    @property
    def status(self) -> ScanStatus:
        return self._session.status if self._session is not None else ScanStatus.READY

    @property
    def is_scanning(self) -> bool:
        return self.status is ScanStatus.SCANNING

    @property
    def target_path(self) -> str | None:
        return self._session.target_path if self._session is not None else None

    @property
    def entries(self) -> Tuple[FileMetadata, ...]:
        return tuple(self._session.entries) if self._session is not None else ()

    @property
    def entry_count(self) -> int:
        return len(self._session.entries) if self._session is not None else 0

    @property
    def scanned_count(self) -> int:
        return self._session.scanned_count if self._session is not None else 0

    @property
    def elapsed_ms(self) -> int:
        return self._session.elapsed_ms if self._session is not None else 0

    @property
    def file_count(self) -> int:
        return self._session.file_count if self._session is not None else 0

    @property
    def directory_count(self) -> int:
        return self._session.directory_count if self._session is not None else 0

    @property
    def status_label(self) -> str:
        if self._session is None:
            return format_status_label(ScanStatus.READY, 0)
        return self._session.status_label

    @property
    def active_subscriptions(self) -> Tuple[Subscription, ...]:
        return tuple(self._session.subscriptions) if self._session is not None else ()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Rejestruje callback wywoływany po każdej zmianie stanu."""

        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ------------------------------------------------------------------
    # Zarządzanie sesją
    # ------------------------------------------------------------------

    async def choose_and_scan(self, picker: DirectoryPicker) -> StartOutcome:
        """Pyta o katalog i uruchamia dla niego skanowanie."""

        if self.is_scanning:
            self._logger.info("scan-already-running", path=self.target_path)
            return StartOutcome.ALREADY_SCANNING

        path = await picker.select_directory()
        if not path:
            self._logger.debug("selection-cancelled")
            return StartOutcome.SELECTION_CANCELLED
        return await self.start_scan(path)

    async def start_scan(self, path: str) -> StartOutcome:
        """Rozpoczyna nową sesję; wyniki przychodzą wyłącznie jako zdarzenia."""

        if not path:
            raise ValueError("Scan path must not be empty")
        if self.is_scanning:
            self._logger.info("scan-already-running", path=self.target_path, requested=path)
            return StartOutcome.ALREADY_SCANNING

        session = ScanSession(target_path=path, started_at=self._clock())
        self._session = session
        self._logger.info("scan-started", path=path)
        self._arm_timeout(session)
        self._emit()

        try:
            for kind in ScanEventKind:
                subscription = await self._transport.subscribe(kind.value, partial(self.dispatch, session, kind))
                if session.finalized:
                    subscription.release()
                else:
                    session.subscriptions.append(subscription)
            await self._transport.invoke_scan(path)
        except asyncio.CancelledError:
            self.finalize(session)
            raise
        except Exception as exc:
            if session.finalized:
                # Sesja zakończona wcześniej (timeout), komunikat już pokazany.
                self._logger.debug("late-scan-failure-ignored", path=path, error=str(exc))
                return StartOutcome.FAILED
            message = str(exc) or GENERIC_FAILURE_MESSAGE
            self._logger.warning("scan-failed", path=path, error=message, error_type=type(exc).__name__)
            self._notifications.notify(message)
            self.finalize(session)
            return StartOutcome.FAILED

        return StartOutcome.STARTED

    def dispatch(self, session: ScanSession, kind: ScanEventKind, payload: Any) -> None:
        """Stosuje zdarzenie transportu do stanu sesji."""

        if session is not self._session or session.finalized:
            self._logger.debug("stale-event-ignored", event=kind.value, path=session.target_path)
            return

        if kind is ScanEventKind.BATCH:
            session.append_batch([FileMetadata.from_payload(item) for item in payload])
        elif kind is ScanEventKind.PROGRESS:
            session.scanned_count = int(payload)
        elif kind is ScanEventKind.COMPLETE:
            session.scanned_count = int(payload)
            session.elapsed_ms = round((self._clock() - session.started_at) * 1000)
            self._logger.info(
                "scan-completed",
                path=session.target_path,
                files=session.file_count,
                scanned=session.scanned_count,
                elapsed_ms=session.elapsed_ms,
            )
            self.finalize(session)
            return
        else:  # pragma: no cover - wszystkie rodzaje obsłużone wyżej
            raise ValueError(f"Unsupported scan event: {kind!r}")

        self._emit()

    def finalize(self, session: ScanSession | None = None) -> None:
        """Zwalnia subskrypcje sesji i przywraca stan ``READY`` (idempotentne)."""

        session = session or self._session
        if session is None or not session.finalize():
            return
        if session is self._session:
            self._cancel_timeout()
        self._emit()

    # ------------------------------------------------------------------
    # Operacje pomocnicze
    # ------------------------------------------------------------------

    def _arm_timeout(self, session: ScanSession) -> None:
        if self._session_timeout is None or session.finalized:
            return
        self._cancel_timeout()
        loop = asyncio.get_running_loop()
        self._timeout_handle = loop.call_later(self._session_timeout, self._on_timeout, session)

    def _on_timeout(self, session: ScanSession) -> None:
        self._timeout_handle = None
        if session is not self._session or session.finalized:
            return
        self._logger.warning("scan-timed-out", path=session.target_path, timeout=self._session_timeout)
        self._notifications.notify(TIMEOUT_MESSAGE)
        self.finalize(session)

    def _cancel_timeout(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener()


__all__ = [
    "DirectoryPicker",
    "GENERIC_FAILURE_MESSAGE",
    "ScanCoordinator",
    "TIMEOUT_MESSAGE",
]
