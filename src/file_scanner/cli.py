"""Interfejs wiersza poleceń do uruchamiania skanowania bez GUI."""

from __future__ import annotations

import asyncio
import logging
import sys
from argparse import ArgumentParser, Namespace
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Sequence

import structlog

from file_scanner.core import NotificationSink, ScanCoordinator, StartOutcome
from file_scanner.shared import AppConfig, configure_logging
from file_scanner.transport import LocalScanTransport


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="file-scanner",
        description="Skanuje katalog i raportuje liczniki oraz czas skanowania.",
    )
    parser.add_argument("path", type=Path, help="Katalog do przeskanowania")
    parser.add_argument(
        "--batch-size",
        type=int,
        help="Liczba wpisów w jednej paczce wyników (domyślnie z konfiguracji: 250)",
    )
    parser.add_argument(
        "--progress-every",
        type=int,
        help="Co ile wpisów publikować postęp (domyślnie z konfiguracji: 250)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Maksymalny czas oczekiwania na zakończenie skanowania w sekundach",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Wypisuje zebrane wpisy na standardowe wyjście",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Wyświetla szczegółowe logi",
    )
    return parser


def _config_for(args: Namespace, base: AppConfig) -> AppConfig:
    return AppConfig(
        notification_timeout=base.notification_timeout,
        batch_size=args.batch_size if args.batch_size is not None else base.batch_size,
        progress_every=args.progress_every if args.progress_every is not None else base.progress_every,
        session_timeout=args.timeout if args.timeout is not None else base.session_timeout,
        locale=base.locale,
        log_level=base.log_level,
    )


async def _scan(args: Namespace, config: AppConfig) -> int:
    logger = structlog.get_logger(__name__)
    # Własny executor: wątek zawieszonego skanu nie blokuje zamykania pętli po timeoucie.
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="file-scanner")
    coordinator = ScanCoordinator(
        LocalScanTransport(batch_size=config.batch_size, progress_every=config.progress_every, executor=executor),
        notifications=NotificationSink(timeout=config.notification_timeout),
        session_timeout=config.session_timeout,
    )
    finished = asyncio.Event()
    last_count = 0
    last_entries = 0

    def on_change() -> None:
        nonlocal last_count, last_entries
        if coordinator.entry_count != last_entries:
            logger.debug("scan-batch", received=coordinator.entry_count - last_entries, total=coordinator.entry_count)
            last_entries = coordinator.entry_count
        if coordinator.scanned_count != last_count:
            last_count = coordinator.scanned_count
            logger.debug("scan-progress", scanned=last_count)
        if coordinator.session is not None and not coordinator.is_scanning:
            finished.set()

    remove = coordinator.add_listener(on_change)
    try:
        scan = asyncio.ensure_future(coordinator.start_scan(str(args.path)))
        await finished.wait()
        if scan.done() and scan.result() is not StartOutcome.STARTED:
            logger.error("scan-not-started", path=str(args.path), error=coordinator.notifications.message)
            return 1
        if coordinator.notifications.current is not None:
            logger.error("scan-aborted", path=str(args.path), error=coordinator.notifications.message)
            return 1
        await scan
    finally:
        remove()
        executor.shutdown(wait=False, cancel_futures=True)

    if args.list:
        for entry in coordinator.entries:
            details = "<DIR>" if entry.is_dir else f"{entry.size_kb:.1f} KB"
            print(f"{details:>14}  {entry.name}")

    logger.info(
        "scan-summary",
        path=coordinator.target_path,
        files=coordinator.file_count,
        directories=coordinator.directory_count,
        entries=coordinator.entry_count,
        scanned=coordinator.scanned_count,
        elapsed_ms=coordinator.elapsed_ms,
    )
    return 0


def _run_scan(args: Namespace, config: AppConfig | None = None) -> int:
    logger = structlog.get_logger(__name__)
    try:
        effective = _config_for(args, config or AppConfig.default())
    except ValueError as exc:
        logger.error("invalid-arguments", error=str(exc))
        return 1
    return asyncio.run(_scan(args, effective))


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = AppConfig.from_env()
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(level=logging.DEBUG if args.verbose else config.log_level)
    return _run_scan(args, config)


if __name__ == "__main__":
    sys.exit(main())
