"""Shared modules: settings, logging, error reports."""

from .config import RunnerSettings
from .error_reporting import ErrorReport, get_error_reports_dir, write_error_report
from .logging import configure_logging, parse_level

__all__ = [
	"RunnerSettings",
	"configure_logging",
	"parse_level",
	"ErrorReport",
	"get_error_reports_dir",
	"write_error_report",
]
