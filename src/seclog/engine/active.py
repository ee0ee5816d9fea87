"""Reader for the active (not yet archived) daily security log files.

Every call rescans the log root. The log writer may create, grow, or (after
compaction) remove files while a scan runs; a file that disappears between
listing and reading simply contributes no records.
"""

from __future__ import annotations

__all__ = ["ActiveLogReader", "list_daily_files"]

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from seclog.constants import DAILY_FILE_PATTERN
from seclog.engine.models import LogRecord, PaginatedResult
from seclog.engine.pagination import paginate, sort_newest_first
from seclog.engine.parser import LogParser
from seclog.telemetry.models import SystemEvent
from seclog.telemetry.system import log_system_event


def list_daily_files(log_root: Path) -> list[Path]:
    """List daily files (security-YYYY-MM-DD.log) in the log root, by name.

    Args:
        log_root: Directory holding the daily files.

    Returns:
        Paths sorted by filename (chronological); [] if the directory is missing.
    """
    try:
        entries = list(log_root.iterdir())
    except FileNotFoundError:
        return []

    files = [path for path in entries if DAILY_FILE_PATTERN.fullmatch(path.name) and path.is_file()]
    files.sort(key=lambda path: path.name)
    return files


class ActiveLogReader:
    """Paginated, newest-first view over all active daily files.

    Attributes:
        log_root: Directory holding the daily files.
        workers: Threads used to parse files; 1 parses inline.
    """

    def __init__(self, log_root: Path, parser: LogParser | None = None, workers: int = 1) -> None:
        self.log_root = log_root
        self.workers = max(1, workers)
        self._parser = parser or LogParser()

    def _read_file(self, path: Path) -> list[LogRecord]:
        """Parse one daily file; unreadable or vanished files yield nothing."""
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            return []  # archived or removed mid-scan
        except OSError as e:
            log_system_event(
                logging.WARNING,
                SystemEvent(
                    event="log_file_read_failed",
                    message=f"Failed to read log file {path}: {e}",
                    component="active_reader",
                    filename=path.name,
                    error_type=type(e).__name__,
                    error_message=str(e),
                ),
            )
            return []
        return self._parser.parse_bytes(content)

    def list_records(self) -> list[LogRecord]:
        """All active records, newest first."""
        files = list_daily_files(self.log_root)

        if self.workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map() keeps input order, so the result matches the inline path
                per_file = list(executor.map(self._read_file, files))
        else:
            per_file = [self._read_file(path) for path in files]

        records = [record for file_records in per_file for record in file_records]
        return sort_newest_first(records)

    def list_page(self, per_page: int, page: int) -> PaginatedResult[LogRecord]:
        """One page of active records.

        Args:
            per_page: Page size, at least 1.
            page: 1-based page number; pages past the end are empty.

        Raises:
            ValueError: If per_page or page is below 1.
        """
        return paginate(self.list_records(), per_page, page)
