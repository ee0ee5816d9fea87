"""Daily security log writer (the files the engine reads and archives).

Output contract:
    <log_root>/security-YYYY-MM-DD.log, one entry per line:
    [YYYY-MM-DD HH:MM:SS] <environment>.<LEVEL>: <message>[ <json-context>]

The date in the file name and the line timestamp both come from the record's
creation time in local time, so a file only ever holds its own day. Appends
take an exclusive fcntl lock so concurrent writers never interleave a line.

Usage:
    logger = get_security_logger(config)
    logger.warning("Failed login attempt", extra={"context": {"email": "a@b.c"}})
"""

from __future__ import annotations

__all__ = [
    "NOTICE",
    "DailySecurityLogHandler",
    "SecurityLineFormatter",
    "get_security_logger",
]

import fcntl
import json
import logging
import os
from datetime import datetime
from pathlib import Path

from seclog.config import AppConfig
from seclog.constants import APP_NAME, DAILY_FILE_PREFIX, LINE_DATETIME_FORMAT

# Between INFO and WARNING, as in syslog severities
NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")


class SecurityLineFormatter(logging.Formatter):
    """Formats a record as one security log line (no trailing newline).

    Newlines in the message are folded into spaces; a continuation line
    would not match the line format and would be dropped on read.
    """

    def __init__(self, environment: str) -> None:
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(LINE_DATETIME_FORMAT)
        message = " ".join(record.getMessage().splitlines())
        line = f"[{timestamp}] {self.environment}.{record.levelname}: {message}"

        context = getattr(record, "context", None)
        if context:
            line += " " + json.dumps(context, default=str, ensure_ascii=False)
        return line


class DailySecurityLogHandler(logging.Handler):
    """Appends formatted records to the file for the record's local date."""

    def __init__(self, log_root: Path, environment: str) -> None:
        super().__init__()
        self.log_root = log_root
        self.setFormatter(SecurityLineFormatter(environment))

    def path_for(self, record: logging.LogRecord) -> Path:
        """Daily file that receives this record."""
        day = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d")
        return self.log_root / f"{DAILY_FILE_PREFIX}{day}.log"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record) + "\n"
            path = self.path_for(record)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    f.write(line)
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except Exception:
            self.handleError(record)


def get_security_logger(config: AppConfig) -> logging.Logger:
    """Get the security event logger writing daily files under the log root.

    Args:
        config: Application configuration (log root and environment label).

    Returns:
        logging.Logger named "seclog.security" with a single daily-file handler.
    """
    logger = logging.getLogger(f"{APP_NAME}.security")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    logger.addHandler(DailySecurityLogHandler(config.storage.log_root_path, config.storage.environment))
    return logger
