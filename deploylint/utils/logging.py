"""
Structured logging for lint runs.

Records pick up the lint context set with LogContext (config file,
check index, report totals) and the JSON formatter emits it as
top-level fields, one object per line.
"""

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO

from ..config.report import Report

LOGGER_NAME = "deploylint"
TEXT_FORMAT = "%(asctime)s %(levelname)s [%(config_file)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUPS = 5

# Attributes every LogRecord has; anything else came from extra= or the context
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                entry[key] = value

        return json.dumps(entry, default=str)


class LintContextFilter(logging.Filter):
    """Copy the current thread's lint context onto each record."""

    _context = threading.local()

    @classmethod
    def get_context(cls) -> dict:
        return dict(getattr(cls._context, "data", {}))

    @classmethod
    def set_context(cls, **kwargs) -> None:
        cls._context.data = {**cls.get_context(), **kwargs}

    @classmethod
    def clear_context(cls) -> None:
        cls._context.data = {}

    def filter(self, record: logging.LogRecord) -> bool:
        context = self.get_context()
        # TEXT_FORMAT always names the config file
        context.setdefault("config_file", "-")
        for key, value in context.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class LogContext:
    """Context manager for scoped logging context."""

    def __init__(self, **kwargs):
        self.context = kwargs
        self.previous_context: dict = {}

    def __enter__(self):
        self.previous_context = LintContextFilter.get_context()
        LintContextFilter.set_context(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        LintContextFilter.clear_context()
        LintContextFilter.set_context(**self.previous_context)
        return False


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the deploylint logger.

    Console records go to stderr (or `stream`) so a report printed on
    stdout stays machine-readable. Calling this again replaces the
    handlers from the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Rotating log file to write as well (optional)
        json_format: Emit JSON lines instead of text
        stream: Console stream, defaults to sys.stderr

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS)
        )

    formatter = JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        # Handler filters also see records propagated from child loggers
        handler.addFilter(LintContextFilter())
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child of the deploylint logger."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


_SEVERITY_LEVELS = {
    "pass": logging.INFO,
    "warning": logging.WARNING,
    "fail": logging.ERROR,
}


def log_check(
    logger: logging.Logger,
    severity: str,
    check_type: str,
    message: str,
    **kwargs,
) -> None:
    """Log a validation check with structured data."""
    logger.log(
        _SEVERITY_LEVELS.get(severity, logging.INFO),
        f"{check_type}: {message}",
        extra={
            "event_type": "check",
            "severity": severity,
            "check_type": check_type,
            **kwargs,
        },
    )


def log_report(logger: logging.Logger, report: Report) -> None:
    """Log each check of a report in order, then one summary record."""
    for index, check in enumerate(report.checks):
        with LogContext(check_index=index):
            log_check(logger, check.severity.value, check.check_type.value, check.message)

    failures = len(report.failures)
    warnings = len(report.warnings)
    with LogContext(passed=report.passed, failures=failures, warnings=warnings):
        logger.log(
            logging.INFO if report.passed else logging.ERROR,
            f"{report.source}: {'passed' if report.passed else 'failed'} "
            f"with {failures} failure(s), {warnings} warning(s)",
            extra={"event_type": "report"},
        )
