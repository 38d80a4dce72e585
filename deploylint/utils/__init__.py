"""Utility modules for the linter."""

from .logging import (
    setup_logging,
    get_logger,
    LogContext,
    LintContextFilter,
    JSONFormatter,
    log_check,
    log_report,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "LogContext",
    "LintContextFilter",
    "JSONFormatter",
    "log_check",
    "log_report",
]
