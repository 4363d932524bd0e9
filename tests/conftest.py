"""Wspólne fixtures: transport, zegar i picker zastępujące silnik oraz GUI."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Callable, Dict, List, Tuple

import pytest

from file_scanner.transport.base import EventHandler, Subscription


class FakeTransport:
    """Transport w pamięci; zdarzenia wysyła test przez ``emit``."""

    def __init__(self) -> None:
        self.handlers: Dict[str, Dict[int, EventHandler]] = defaultdict(dict)
        self.history: List[Tuple[str, EventHandler]] = []
        self.detached: List[str] = []
        self.invocations: List[str] = []
        self.fail_with: BaseException | None = None
        self.gate: asyncio.Event | None = None
        self.on_invoke: Callable[["FakeTransport"], None] | None = None
        self._next_token = 0

    async def subscribe(self, event_name: str, handler: EventHandler) -> Subscription:
        token = self._next_token
        self._next_token += 1
        self.handlers[event_name][token] = handler
        self.history.append((event_name, handler))

        def detach() -> None:
            self.detached.append(event_name)
            self.handlers[event_name].pop(token, None)

        return Subscription(event_name, detach)

    async def invoke_scan(self, path: str) -> None:
        self.invocations.append(path)
        if self.on_invoke is not None:
            self.on_invoke(self)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    def emit(self, event_name: str, payload: Any) -> None:
        for handler in list(self.handlers[event_name].values()):
            handler(payload)

    def active_handlers(self) -> int:
        return sum(len(handlers) for handlers in self.handlers.values())


class FakeClock:
    """Ręcznie przesuwany zegar w sekundach."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePicker:
    """Picker zwracający z góry ustaloną ścieżkę (``None`` = anulowanie)."""

    def __init__(self, result: str | None) -> None:
        self.result = result
        self.calls = 0

    async def select_directory(self) -> str | None:
        self.calls += 1
        return self.result


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_picker() -> Callable[[str | None], FakePicker]:
    return FakePicker
