"""Security log line parser.

Line format:
    [YYYY-MM-DD HH:MM:SS] <environment>.<level>: <message>[ <json-context>]

Lines that do not match (blank lines, stack trace continuation lines,
truncated writes) yield no record. A trailing JSON object is moved from the
message into the record context; if it does not decode, the message is kept
as written and the context stays empty. Nothing raises out of parse_line().
"""

from __future__ import annotations

__all__ = [
    "LogParser",
    "compute_record_id",
    "parse_line",
]

import hashlib
import json
from collections.abc import Iterable, Iterator
from datetime import datetime
from typing import Any

from seclog.constants import LINE_DATETIME_FORMAT, LINE_PATTERN
from seclog.engine.models import LogRecord

_decoder = json.JSONDecoder()


def compute_record_id(datetime_text: str, message: str) -> str:
    """Fingerprint of a record: md5 hex of datetime text + message."""
    return hashlib.md5(f"{datetime_text}{message}".encode("utf-8")).hexdigest()


def _split_context(message: str) -> tuple[str, dict[str, Any]]:
    """Separate a trailing JSON object from the message.

    Tries each "{" from left to right and takes the first one whose JSON
    object runs exactly to the end of the message.

    Returns:
        Tuple of (message without the object, decoded object). When no
        trailing object decodes, returns the message unchanged and {}.
    """
    if not message.endswith("}"):
        return message, {}

    start = message.find("{")
    while start != -1:
        try:
            obj, end = _decoder.raw_decode(message, start)
        except ValueError:
            obj, end = None, -1
        if end == len(message) and isinstance(obj, dict):
            return message[:start].strip(), obj
        start = message.find("{", start + 1)

    return message, {}


class LogParser:
    """Turns raw security log lines into LogRecords."""

    def parse_line(self, line: str) -> LogRecord | None:
        """Parse one line.

        Args:
            line: Raw line, with or without trailing newline.

        Returns:
            LogRecord, or None if the line carries no record.
        """
        match = LINE_PATTERN.match(line.rstrip("\r\n"))
        if match is None:
            return None

        datetime_text, environment, level, message = match.groups()
        try:
            timestamp = datetime.strptime(datetime_text, LINE_DATETIME_FORMAT)
        except ValueError:
            return None  # e.g. month 13

        message, context = _split_context(message)

        return LogRecord(
            id=compute_record_id(datetime_text, message),
            datetime=timestamp,
            environment=environment,
            level=level,
            message=message,
            context=context,
        )

    def parse_lines(self, lines: Iterable[str]) -> Iterator[LogRecord]:
        """Parse many lines, skipping those without a record."""
        for line in lines:
            record = self.parse_line(line)
            if record is not None:
                yield record

    def parse_text(self, text: str) -> list[LogRecord]:
        """Parse newline-delimited content (a whole daily file)."""
        return list(self.parse_lines(text.split("\n")))

    def parse_bytes(self, content: bytes) -> list[LogRecord]:
        """Parse raw file bytes. Invalid UTF-8 is replaced, not rejected."""
        return self.parse_text(content.decode("utf-8", errors="replace"))


_default_parser = LogParser()


def parse_line(line: str) -> LogRecord | None:
    """Parse one line with the shared parser."""
    return _default_parser.parse_line(line)
