"""Modele danych używane w rdzeniu aplikacji."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class ScanStatus(str, Enum):
    """Stan cyklu życia sesji skanowania."""

    READY = "ready"
    SCANNING = "scanning"


class ScanEventKind(str, Enum):
    """Nazwane strumienie zdarzeń publikowane przez silnik skanujący."""

    BATCH = "scan_batch"
    PROGRESS = "scan_progress"
    COMPLETE = "scan_complete"


class StartOutcome(str, Enum):
    """Wynik próby uruchomienia sesji skanowania."""

    STARTED = "started"
    ALREADY_SCANNING = "already_scanning"
    SELECTION_CANCELLED = "selection_cancelled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Metadane pojedynczego wpisu katalogu."""

    name: str
    is_dir: bool
    size_kb: float = 0.0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Entry name must not be empty")
        if self.size_kb < 0:
            raise ValueError(f"Entry size must not be negative: {self.size_kb}")

    @classmethod
    def from_payload(cls, payload: "FileMetadata | Mapping[str, Any]") -> "FileMetadata":
        """Buduje rekord z obiektu lub słownika w formacie przesyłanym przez silnik."""

        if isinstance(payload, FileMetadata):
            return payload
        return cls(
            name=str(payload["name"]),
            is_dir=bool(payload["is_dir"]),
            size_kb=float(payload.get("size_kb", 0.0)),
        )

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "is_dir": self.is_dir, "size_kb": self.size_kb}


@dataclass(frozen=True, slots=True)
class Notification:
    """Krótkotrwały komunikat o błędzie widoczny dla użytkownika."""

    message: str
    expires_at: float
