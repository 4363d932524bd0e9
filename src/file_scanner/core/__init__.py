"""Warstwa logiki domenowej: sesje skanowania, koordynator i powiadomienia."""

from . import models, session
from .coordinator import DirectoryPicker, ScanCoordinator
from .models import FileMetadata, Notification, ScanEventKind, ScanStatus, StartOutcome
from .notifications import NotificationSink
from .session import ScanSession

__all__ = [
	"models",
	"session",
	"DirectoryPicker",
	"FileMetadata",
	"Notification",
	"NotificationSink",
	"ScanCoordinator",
	"ScanEventKind",
	"ScanSession",
	"ScanStatus",
	"StartOutcome",
]
