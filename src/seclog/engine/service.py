"""Security log service: the operation surface used by the API and CLI.

Operations:
    get_active_page(page, per_page)              -> PaginatedResult[LogRecord]
    get_archive_list()                           -> list[ArchiveMetadata]
    get_archive_page(archive_id, page, per_page) -> ArchivePage | ArchiveError
    archive_now()                                -> ArchiveReport
    get_statistics()                             -> LogStatistics
    prune_archives(retention_months)             -> PruneReport
    resolve_archive(archive_id)                  -> Path | ArchiveError

Authorization is the caller's responsibility.
"""

from __future__ import annotations

__all__ = ["SecurityLogService"]

import threading
from collections import Counter
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from seclog.config import AppConfig
from seclog.constants import ARCHIVE_DIRNAME, DEFAULT_PER_PAGE
from seclog.engine.active import ActiveLogReader
from seclog.engine.compactor import ArchiveCompactor
from seclog.engine.models import (
    ArchiveError,
    ArchiveMetadata,
    ArchivePage,
    ArchiveReport,
    LogRecord,
    LogStatistics,
    PaginatedResult,
    PruneReport,
)
from seclog.engine.parser import LogParser
from seclog.engine.reader import ArchiveReader


class SecurityLogService:
    """Facade over the active reader, archive reader and compactor.

    Args:
        log_root: Directory holding the daily security log files.
        archive_dir: Directory for monthly archives (default <log_root>/archived).
        archive_format: Container for new archives.
        lock_timeout: Seconds to wait for a competing archive writer.
        parse_workers: Threads for parsing active files.
        clock: Source of "now" for the current-month boundary.
    """

    def __init__(
        self,
        log_root: Path,
        archive_dir: Path | None = None,
        *,
        archive_format: str = "zip",
        lock_timeout: float = 30.0,
        parse_workers: int = 1,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        parser = LogParser()
        self.log_root = log_root
        self.archive_dir = archive_dir if archive_dir is not None else log_root / ARCHIVE_DIRNAME
        self.active_reader = ActiveLogReader(log_root, parser=parser, workers=parse_workers)
        self.archive_reader = ArchiveReader(self.archive_dir, parser=parser)
        self.compactor = ArchiveCompactor(
            log_root,
            self.archive_dir,
            archive_format=archive_format,
            lock_timeout=lock_timeout,
            clock=clock,
        )

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "SecurityLogService":
        """Build a service from application configuration."""
        return cls(
            config.storage.log_root_path,
            config.storage.archive_dir_path,
            archive_format=config.archive.format,
            lock_timeout=config.archive.lock_timeout_seconds,
            parse_workers=config.reader.parse_workers,
            clock=clock,
        )

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    def get_active_page(self, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> PaginatedResult[LogRecord]:
        """Page of active (current, unarchived) records, newest first."""
        return self.active_reader.list_page(per_page, page)

    def get_archive_list(self) -> list[ArchiveMetadata]:
        """Available archives, newest first."""
        return self.archive_reader.list_archives()

    def get_archive_page(
        self,
        archive_id: str,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> ArchivePage | ArchiveError:
        """Page of records from one archive, or an ArchiveError."""
        return self.archive_reader.read_page(archive_id, per_page, page)

    def resolve_archive(self, archive_id: str) -> Path | ArchiveError:
        """Path of an existing archive (for download), or an ArchiveError."""
        return self.archive_reader.resolve(archive_id)

    def get_statistics(self) -> LogStatistics:
        """Counters over active records and archives."""
        active = self.active_reader.list_records()
        archives = self.archive_reader.list_archives()
        levels = Counter(record.level for record in active)
        return LogStatistics(
            active_count=len(active),
            archived_count=len(archives),
            archived_size=sum(archive.size for archive in archives),
            level_distribution=dict(levels),
        )

    # -------------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------------

    def archive_now(self, cancel: threading.Event | None = None) -> ArchiveReport:
        """Move past-month daily files into their monthly archives."""
        return self.compactor.archive_old_logs(cancel=cancel)

    def prune_archives(self, retention_months: int) -> PruneReport:
        """Delete archives older than the retention window."""
        return self.compactor.prune_archives(retention_months)
