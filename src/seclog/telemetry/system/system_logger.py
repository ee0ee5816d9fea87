"""System logger for operational events.

This module provides a singleton system logger for operational events of the
archive engine (archive runs, per-file failures, lock timeouts, unreadable log
files, scheduler lifecycle). These are NOT the security logs being managed;
those are plain-text daily files read by seclog.engine.

Logging strategy:
- Console (stderr): ALL operational messages (INFO, WARNING, ERROR, CRITICAL)
- File (system.jsonl): Only issues (WARNING, ERROR, CRITICAL) - no INFO to save disk space

The file handler is configured separately via configure_system_logger_file() once
the user's log_dir from config is available.
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "log_system_event",
]

import logging
import sys
from pathlib import Path

from seclog.constants import APP_NAME
from seclog.telemetry.models.system import SystemEvent
from seclog.utils.file_helpers import set_secure_permissions
from seclog.utils.logging.iso_formatter import ISO8601Formatter


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages for cleaner stderr output.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human-readable console output.

        Args:
            record: The log record to format.

        Returns:
            str: Formatted log message with level prefix.
        """
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"


# Module-level singleton logger
_system_logger: logging.Logger | None = None
_file_handler: logging.FileHandler | None = None


def get_system_logger() -> logging.Logger:
    """Get the singleton system logger instance.

    Creates the logger on first call with stderr handler only.
    File handler is added later via configure_system_logger_file().

    Returns:
        logging.Logger: Configured system logger instance.

    Example:
        >>> logger = get_system_logger()
        >>> logger.warning({"event": "archive_file_failed", "message": "..."})
    """
    global _system_logger

    if _system_logger is not None:
        return _system_logger

    _system_logger = logging.getLogger(f"{APP_NAME}.system")
    _system_logger.setLevel(logging.INFO)
    _system_logger.propagate = False  # Don't propagate to root logger

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in _system_logger.handlers:
        handler.close()
    _system_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.setFormatter(ConsoleFormatter())
    _system_logger.addHandler(stderr_handler)

    return _system_logger


def configure_system_logger_file(log_path: Path, log_level: str = "INFO") -> None:
    """Configure the system logger's file handler with the user's log path.

    Should be called once after config is loaded. The file handler logs
    WARNING, ERROR, CRITICAL only (persistent issues). With log_level
    "DEBUG" the console also shows DEBUG messages.

    Args:
        log_path: Path to the system log file.
        log_level: Console level from config ("DEBUG" or "INFO").
    """
    global _file_handler

    logger = get_system_logger()
    if log_level == "DEBUG":
        logger.setLevel(logging.DEBUG)
        for handler in logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(logging.DEBUG)

    # Only configure once
    if _file_handler is not None:
        return

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        set_secure_permissions(log_path.parent, is_directory=True)
    except OSError:
        return  # If we can't create log dir, stderr will still work

    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.WARNING)  # File: only WARNING, ERROR, CRITICAL
    file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(file_handler)

    _file_handler = file_handler


def log_system_event(level: int, event: SystemEvent) -> None:
    """Log a SystemEvent at the specified level.

    Serializes the event to a dict (excluding None values) and logs it.
    The ISO8601Formatter adds the timestamp during serialization.

    Args:
        level: Logging level (e.g., logging.INFO, logging.WARNING).
        event: The event to log.
    """
    get_system_logger().log(level, event.model_dump(exclude_none=True))
