"""Punkt wejściowy dla aplikacji GUI."""

from __future__ import annotations

import asyncio
import sys

import PySide6.QtAsyncio as QtAsyncio
from PySide6.QtWidgets import QApplication

from file_scanner.shared import AppConfig, configure_logging
from file_scanner.shared.error_reporting import install_crash_reporting, install_loop_exception_handler
from file_scanner.ui.main_window import MainWindow


async def _watch_loop_errors() -> None:
    install_loop_exception_handler(asyncio.get_running_loop())


def main() -> int:
    """Uruchamia aplikację GUI na pętli asyncio osadzonej w pętli Qt."""
    install_crash_reporting()
    config = AppConfig.from_env()
    configure_logging(config.log_level)
    app = QApplication(sys.argv)
    app.setApplicationName("File Scanner")
    app.setOrganizationName("File Scanner Team")

    window = MainWindow(config=config)
    window.show()

    QtAsyncio.run(_watch_loop_errors(), keep_running=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
