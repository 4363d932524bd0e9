"""Modele widoków wykorzystywane przez GUI skanera plików."""

from __future__ import annotations

import asyncio
from typing import Callable, List

from PySide6.QtCore import QObject, Signal

from file_scanner.core import DirectoryPicker, NotificationSink, ScanCoordinator, ScanStatus, StartOutcome
from file_scanner.shared import AppConfig
from file_scanner.transport import LocalScanTransport


def build_coordinator(config: AppConfig) -> ScanCoordinator:
    """Składa koordynator z lokalnym silnikiem skanującym."""

    transport = LocalScanTransport(batch_size=config.batch_size, progress_every=config.progress_every)
    return ScanCoordinator(
        transport,
        notifications=NotificationSink(timeout=config.notification_timeout),
        session_timeout=config.session_timeout,
    )


class ScanViewModel(QObject):
    """Warstwa MVVM pośrednicząca między GUI a koordynatorem skanowania."""

    stateChanged = Signal()
    scanStarted = Signal(str)
    scanFinished = Signal()
    notificationChanged = Signal(str)

    def __init__(self, coordinator: ScanCoordinator | None = None, *, config: AppConfig | None = None) -> None:
        super().__init__()
        self._coordinator = coordinator or build_coordinator(config or AppConfig.default())
        self._last_status = self._coordinator.status
        self._pending: asyncio.Task[StartOutcome] | None = None
        self._unsubscribe: List[Callable[[], None]] = [
            self._coordinator.add_listener(self._on_state_changed),
            self._coordinator.notifications.add_listener(self._on_notification_changed),
        ]

    # ------------------------------------------------------------------
    # API publiczne
    # ------------------------------------------------------------------

    def coordinator(self) -> ScanCoordinator:
        return self._coordinator

    def can_start(self) -> bool:
        return not self._coordinator.is_scanning and (self._pending is None or self._pending.done())

    def choose_directory(self, picker: DirectoryPicker) -> asyncio.Task[StartOutcome] | None:
        """Planuje wybór katalogu i skanowanie w bieżącej pętli zdarzeń."""

        if not self.can_start():
            return None
        self._pending = asyncio.ensure_future(self._coordinator.choose_and_scan(picker))
        return self._pending

    def start_scan(self, path: str) -> asyncio.Task[StartOutcome] | None:
        if not self.can_start():
            return None
        self._pending = asyncio.ensure_future(self._coordinator.start_scan(path))
        return self._pending

    def dismiss_notification(self) -> None:
        self._coordinator.notifications.dismiss()

    def close(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe.clear()

    # ------------------------------------------------------------------
    # Sloty wewnętrzne
    # ------------------------------------------------------------------

    def _on_state_changed(self) -> None:
        status = self._coordinator.status
        if status is not self._last_status:
            self._last_status = status
            if status is ScanStatus.SCANNING:
                self.scanStarted.emit(self._coordinator.target_path or "")
            else:
                self.scanFinished.emit()
        self.stateChanged.emit()

    def _on_notification_changed(self) -> None:
        self.notificationChanged.emit(self._coordinator.notifications.message or "")


__all__ = ["ScanViewModel", "build_coordinator"]
