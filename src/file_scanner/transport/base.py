"""Interfejs bazowy dla transportu do zewnętrznego silnika skanującego."""

from __future__ import annotations

from typing import Any, Callable, Protocol


EventHandler = Callable[[Any], None]


class ScanError(RuntimeError):
    """Błąd specyficzny dla skanowania katalogów."""


class ScanInvocationError(ScanError):
    """Silnik odrzucił polecenie skanowania lub nie zdołał go wykonać."""


class Subscription:
    """Uchwyt rejestracji obsługi nazwanego strumienia zdarzeń.

    Zwolnienie uchwytu odłącza handler; kolejne wywołania ``release`` nic nie robią.
    """

    __slots__ = ("event_name", "_detach", "_released")

    def __init__(self, event_name: str, detach: Callable[[], None]) -> None:
        self.event_name = event_name
        self._detach = detach
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._detach()

    def __repr__(self) -> str:
        state = "released" if self._released else "active"
        return f"Subscription({self.event_name!r}, {state})"


class ScanTransport(Protocol):
    """Minimalny interfejs granicy polecenie + zdarzenia do silnika skanującego."""

    async def invoke_scan(self, path: str) -> None:
        """Zleca skanowanie katalogu; wyniki przychodzą wyłącznie jako zdarzenia."""

    async def subscribe(self, event_name: str, handler: EventHandler) -> Subscription:
        """Rejestruje handler dla nazwanego strumienia zdarzeń."""
