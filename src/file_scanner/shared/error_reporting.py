from __future__ import annotations

import asyncio
import faulthandler
import json
import os
import platform
import sys
import threading
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Any, IO
from uuid import uuid4

import structlog


_TRUTHY = {"1", "true", "yes", "on"}

_ORIGINAL_SYS_EXCEPTHOOK = None
_FAULTHANDLER_FILE: IO[str] | None = None

_logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ErrorReport:
    path: Path
    created_at: datetime


def get_error_reports_dir() -> Path:
    """Returns a writable directory for error reports.

    Priority:
    1) `FILESCANNER_ERROR_DIR` env var
    2) Project root: `./error_reports` (next to `pyproject.toml`)
    3) Windows fallback: `%LOCALAPPDATA%/FileScanner/error_reports`
    4) Other OS fallback: `~/.file_scanner/error_reports`
    """

    override = (os.getenv("FILESCANNER_ERROR_DIR") or "").strip()
    base: Path
    if override:
        base = Path(override)
    else:
        project_root = _find_project_root()
        if project_root is not None:
            base = project_root / "error_reports"
        elif os.name == "nt":
            root = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home())
            base = Path(root) / "FileScanner" / "error_reports"
        else:
            base = Path.home() / ".file_scanner" / "error_reports"

    base.mkdir(parents=True, exist_ok=True)
    return base


def _find_project_root() -> Path | None:
    for start in (Path.cwd(), Path(__file__).resolve().parent):
        for current in (start, *start.parents):
            if (current / "pyproject.toml").is_file():
                return current
    return None


def _app_version() -> str:
    try:
        return metadata.version("file-scanner")
    except metadata.PackageNotFoundError:
        return "unknown"


def _scanner_environment() -> dict[str, str]:
    return {key: value for key, value in os.environ.items() if key.startswith("FILESCANNER_")}


def write_error_report(
    error: BaseException,
    *,
    where: str,
    context: dict[str, Any] | None = None,
) -> ErrorReport:
    """Writes a timestamped error report and returns its path."""

    created_at = datetime.now(timezone.utc)
    path = get_error_reports_dir() / f"error_{created_at:%Y%m%d_%H%M%S}_{uuid4().hex[:8]}.txt"

    header = {
        "created_at": created_at.isoformat(),
        "where": where,
        "app_version": _app_version(),
        "python": sys.version.replace("\n", " "),
        "platform": platform.platform(),
        "cwd": str(Path.cwd()),
        "environment": _scanner_environment(),
        "context": context or {},
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    content = (
        "File Scanner Error Report\n"
        "=========================\n\n"
        + json.dumps(header, ensure_ascii=False, indent=2, default=str)
        + "\n\nTraceback\n---------\n"
        + tb
    )
    path.write_text(content, encoding="utf-8", errors="replace")
    return ErrorReport(path=path, created_at=created_at)


def _report_quietly(error: BaseException, *, where: str, context: dict[str, Any]) -> None:
    # Runs inside crash hooks: write failures are logged, never raised.
    try:
        write_error_report(error, where=where, context=context)
    except OSError as exc:
        _logger.warning("error-report-write-failed", where=where, error=str(exc))


def install_crash_reporting(*, enable_faulthandler: bool = True) -> None:
    """Installs best-effort crash reporting.

    Covers unhandled exceptions in the main thread and in worker threads, plus
    native crashes via `faulthandler`. Disabled with
    `FILESCANNER_DISABLE_CRASH_HOOKS=1` and, unless
    `FILESCANNER_ENABLE_CRASH_HOOKS=1`, inside pytest runs.
    """

    if (os.getenv("FILESCANNER_DISABLE_CRASH_HOOKS") or "").strip().lower() in _TRUTHY:
        return
    if os.getenv("PYTEST_CURRENT_TEST") and (os.getenv("FILESCANNER_ENABLE_CRASH_HOOKS") or "").strip() != "1":
        return

    global _ORIGINAL_SYS_EXCEPTHOOK, _FAULTHANDLER_FILE
    if _ORIGINAL_SYS_EXCEPTHOOK is None:
        _ORIGINAL_SYS_EXCEPTHOOK = sys.excepthook

    def _sys_excepthook(exc_type, exc, tb):  # type: ignore[no-untyped-def]
        _report_quietly(exc, where="sys.excepthook", context={"exc_type": exc_type.__name__})
        _ORIGINAL_SYS_EXCEPTHOOK(exc_type, exc, tb)

    sys.excepthook = _sys_excepthook

    original_threading_hook = threading.excepthook

    def _threading_excepthook(args):  # type: ignore[no-untyped-def]
        _report_quietly(
            args.exc_value,
            where="threading.excepthook",
            context={"thread": getattr(args.thread, "name", None), "exc_type": args.exc_type.__name__},
        )
        original_threading_hook(args)

    threading.excepthook = _threading_excepthook

    if enable_faulthandler and _FAULTHANDLER_FILE is None:
        created_at = datetime.now(timezone.utc)
        path = get_error_reports_dir() / f"fatal_{created_at:%Y%m%d_%H%M%S}_{uuid4().hex[:8]}.log"
        _FAULTHANDLER_FILE = open(path, "w", encoding="utf-8", errors="replace")
        faulthandler.enable(file=_FAULTHANDLER_FILE, all_threads=True)


def install_loop_exception_handler(loop: asyncio.AbstractEventLoop) -> None:
    """Routes exceptions raised in event-loop callbacks to error reports.

    Covers failures inside event handlers delivered by the scan transport,
    which never reach the coroutine that started the scan.
    """

    def _handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        error = context.get("exception")
        if isinstance(error, BaseException):
            _report_quietly(error, where="event-loop", context={"message": context.get("message")})
        loop.default_exception_handler(context)

    loop.set_exception_handler(_handler)
