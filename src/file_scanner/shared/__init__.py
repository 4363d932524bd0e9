"""Moduły współdzielone: konfiguracja, logowanie, raporty błędów."""

from .config import AppConfig
from .error_reporting import (
	ErrorReport,
	get_error_reports_dir,
	install_crash_reporting,
	install_loop_exception_handler,
	write_error_report,
)
from .logging import configure_logging

__all__ = [
	"AppConfig",
	"configure_logging",
	"ErrorReport",
	"get_error_reports_dir",
	"install_crash_reporting",
	"install_loop_exception_handler",
	"write_error_report",
]
