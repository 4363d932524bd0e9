"""Obsługa stanu pojedynczej sesji skanowania."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from file_scanner.transport.base import Subscription
from .models import FileMetadata, ScanStatus


def format_status_label(status: ScanStatus, scanned_count: int) -> str:
    """Zwraca etykietę stanu widoczną w nagłówku widoku."""

    if status is ScanStatus.READY:
        return "Ready"
    if scanned_count:
        return f"Scanning {scanned_count:,} items..."
    return "Scanning..."


@dataclass(slots=True, eq=False)
class ScanSession:
    """Reprezentuje pojedynczą próbę skanowania katalogu.

    Stan mutuje wyłącznie koordynator. Lista subskrypcji zawiera dokładnie
    uchwyty utworzone dla tej sesji i jest pusta po finalizacji.
    """

    target_path: str
    started_at: float
    status: ScanStatus = ScanStatus.SCANNING
    entries: List[FileMetadata] = field(default_factory=list)
    scanned_count: int = 0
    elapsed_ms: int = 0
    subscriptions: List[Subscription] = field(default_factory=list)
    finalized: bool = False

    @property
    def file_count(self) -> int:
        """Liczba wpisów niebędących katalogami (liczona przy każdym odczycie)."""

        return sum(1 for entry in self.entries if not entry.is_dir)

    @property
    def directory_count(self) -> int:
        return sum(1 for entry in self.entries if entry.is_dir)

    @property
    def status_label(self) -> str:
        return format_status_label(self.status, self.scanned_count)

    def append_batch(self, batch: Iterable[FileMetadata]) -> None:
        self.entries.extend(batch)

    def finalize(self) -> bool:
        """Zwalnia subskrypcje i przywraca stan ``READY``.

        Zwraca ``False``, jeśli sesja była już sfinalizowana.
        """

        if self.finalized:
            return False
        self.finalized = True
        for subscription in self.subscriptions:
            subscription.release()
        self.subscriptions.clear()
        self.status = ScanStatus.READY
        return True
