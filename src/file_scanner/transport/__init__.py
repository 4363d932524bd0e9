"""Granica polecenie + zdarzenia do silnika skanującego."""

from .base import EventHandler, ScanError, ScanInvocationError, ScanTransport, Subscription
from .local import LocalScanTransport

__all__ = [
	"EventHandler",
	"LocalScanTransport",
	"ScanError",
	"ScanInvocationError",
	"ScanTransport",
	"Subscription",
]
