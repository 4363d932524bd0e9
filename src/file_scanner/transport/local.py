"""Lokalny silnik skanujący uruchamiany w puli wątków pętli zdarzeń."""

from __future__ import annotations

import asyncio
import itertools
import os
import threading
from collections import defaultdict
from concurrent.futures import Executor
from pathlib import Path
from typing import AbstractSet, Any, Callable, Dict, List, Mapping

import structlog

from file_scanner.core.models import FileMetadata, ScanEventKind
from .base import EventHandler, ScanInvocationError, Subscription


DEFAULT_BATCH_SIZE = 250
DEFAULT_PROGRESS_EVERY = 250

Emitter = Callable[[str, Any], None]


def scan_directory(
    path: Path,
    emit: Emitter,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    progress_every: int = DEFAULT_PROGRESS_EVERY,
) -> int:
    """Skanuje bezpośrednią zawartość katalogu i publikuje wyniki przez ``emit``.

    Katalogi trafiają na początek listy, w obrębie grupy obowiązuje kolejność nazw.
    Paczki zawierają rekordy w formacie słownikowym (``FileMetadata.to_payload``).
    Zwraca liczbę przetworzonych wpisów.
    """

    try:
        root = path.resolve(strict=True)
    except OSError as exc:
        raise ScanInvocationError(f"Unable to access directory: {exc}") from exc
    if not root.is_dir():
        raise ScanInvocationError("Selected path is not a directory.")

    entries: List[FileMetadata] = []
    processed = 0
    try:
        with os.scandir(root) as iterator:
            for item in iterator:
                try:
                    is_dir = item.is_dir(follow_symlinks=False)
                    size_kb = 0.0 if is_dir else item.stat(follow_symlinks=False).st_size / 1024
                except OSError as exc:
                    raise ScanInvocationError(f"Metadata error: {exc}") from exc

                entries.append(FileMetadata(name=item.name, is_dir=is_dir, size_kb=size_kb))
                processed += 1
                if processed % progress_every == 0:
                    emit(ScanEventKind.PROGRESS.value, processed)
    except OSError as exc:
        raise ScanInvocationError(f"Unable to read directory: {exc}") from exc

    entries.sort(key=lambda entry: (not entry.is_dir, entry.name))

    for start in range(0, len(entries), batch_size):
        emit(ScanEventKind.BATCH.value, [entry.to_payload() for entry in entries[start : start + batch_size]])
    emit(ScanEventKind.COMPLETE.value, len(entries))
    return len(entries)


class LocalScanTransport:
    """Transport skanujący katalogi w tym samym procesie.

    Praca blokująca wykonywana jest w executorze pętli, a zdarzenia są
    przekazywane do wątku pętli przez ``call_soon_threadsafe``. Dzięki temu
    handlery zawsze działają w wątku pętli i zostają wywołane, zanim
    ``invoke_scan`` zwróci sterowanie.

    Zdarzenia danego wywołania trafiają tylko do handlerów zarejestrowanych
    przed jego startem i wciąż aktywnych, więc przeterminowany przebieg nie
    zasila subskrypcji kolejnej sesji.
    """

    name = "local"

    def __init__(
        self,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
        executor: Executor | None = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if progress_every <= 0:
            raise ValueError(f"progress_every must be positive, got {progress_every}")
        self._batch_size = batch_size
        self._progress_every = progress_every
        self._executor = executor
        self._handlers: Dict[str, Dict[int, EventHandler]] = defaultdict(dict)
        self._tokens = itertools.count()
        self._logger = structlog.get_logger(__name__)

    async def subscribe(self, event_name: str, handler: EventHandler) -> Subscription:
        token = next(self._tokens)
        self._handlers[event_name][token] = handler
        return Subscription(event_name, lambda: self._handlers[event_name].pop(token, None))

    async def invoke_scan(self, path: str) -> None:
        loop = asyncio.get_running_loop()
        audience: Mapping[str, AbstractSet[int]] = {
            event_name: frozenset(handlers) for event_name, handlers in self._handlers.items()
        }
        abandoned = threading.Event()

        def emit(event_name: str, payload: Any) -> None:
            if abandoned.is_set() or loop.is_closed():
                return
            loop.call_soon_threadsafe(self._deliver, event_name, payload, audience.get(event_name, frozenset()))

        self._logger.debug("scan-engine-started", path=path)
        try:
            total = await loop.run_in_executor(
                self._executor,
                lambda: scan_directory(
                    Path(path),
                    emit,
                    batch_size=self._batch_size,
                    progress_every=self._progress_every,
                ),
            )
        except asyncio.CancelledError:
            abandoned.set()
            self._logger.debug("scan-engine-abandoned", path=path)
            raise
        self._logger.debug("scan-engine-finished", path=path, entries=total)

    def handler_count(self, event_name: str) -> int:
        """Liczba aktywnych handlerów dla strumienia (pomocne w diagnostyce)."""

        return len(self._handlers.get(event_name, {}))

    def _deliver(self, event_name: str, payload: Any, audience: AbstractSet[int] | None = None) -> None:
        for token, handler in list(self._handlers.get(event_name, {}).items()):
            if audience is None or token in audience:
                handler(payload)


__all__ = ["DEFAULT_BATCH_SIZE", "DEFAULT_PROGRESS_EVERY", "LocalScanTransport", "scan_directory"]
