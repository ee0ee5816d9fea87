"""Reader for monthly security log archives.

Archive identifiers are validated against the archive naming pattern before
any filesystem access, so traversal strings never reach a path join.
Lookups return an ArchiveError value for bad identifiers, missing archives,
and unreadable containers.

Readers take no lock: writers replace archives by atomic rename, so an open
archive is always a complete file.
"""

from __future__ import annotations

__all__ = ["ArchiveReader", "validate_archive_id"]

from datetime import datetime
from pathlib import Path

from seclog.constants import ARCHIVE_ID_PATTERN, DAILY_FILE_PATTERN
from seclog.engine.containers import read_entries
from seclog.engine.models import (
    ArchiveError,
    ArchiveErrorKind,
    ArchiveMetadata,
    ArchivePage,
    LogRecord,
)
from seclog.engine.pagination import paginate, sort_newest_first
from seclog.engine.parser import LogParser
from seclog.exceptions import ArchiveOpenFailure


def validate_archive_id(archive_id: str) -> ArchiveError | None:
    """Check an archive identifier against security-logs-YYYY-MM.(zip|gz).

    Returns:
        None if valid, otherwise an INVALID_IDENTIFIER ArchiveError.
    """
    if ARCHIVE_ID_PATTERN.fullmatch(archive_id) is None:
        return ArchiveError(
            kind=ArchiveErrorKind.INVALID_IDENTIFIER,
            archive_id=archive_id,
            message="Invalid archive identifier",
        )
    return None


def _is_daily_entry(name: str) -> bool:
    return DAILY_FILE_PATTERN.fullmatch(name) is not None


class ArchiveReader:
    """Lists archives and paginates records out of one archive."""

    def __init__(self, archive_dir: Path, parser: LogParser | None = None) -> None:
        self.archive_dir = archive_dir
        self._parser = parser or LogParser()

    def resolve(self, archive_id: str) -> Path | ArchiveError:
        """Map a validated identifier to an existing archive path."""
        error = validate_archive_id(archive_id)
        if error is not None:
            return error
        path = self.archive_dir / archive_id
        if not path.is_file():
            return ArchiveError(
                kind=ArchiveErrorKind.NOT_FOUND,
                archive_id=archive_id,
                message="Archive not found",
            )
        return path

    def read_records(self, archive_id: str) -> list[LogRecord] | ArchiveError:
        """All records of one archive, newest first.

        Only entries named like daily files are read; anything else in the
        container is ignored.
        """
        resolved = self.resolve(archive_id)
        if isinstance(resolved, ArchiveError):
            return resolved

        try:
            entries = read_entries(resolved, accept=_is_daily_entry)
        except FileNotFoundError:
            # pruned between resolve() and open
            return ArchiveError(ArchiveErrorKind.NOT_FOUND, archive_id, "Archive not found")
        except ArchiveOpenFailure as e:
            return ArchiveError(ArchiveErrorKind.OPEN_FAILED, archive_id, f"Cannot open archive: {e.reason}")

        records: list[LogRecord] = []
        for entry in entries:
            records.extend(self._parser.parse_bytes(entry.content))
        return sort_newest_first(records)

    def read_page(self, archive_id: str, per_page: int, page: int) -> ArchivePage | ArchiveError:
        """One page of records from one archive, echoing the archive name.

        Raises:
            ValueError: If per_page or page is below 1.
        """
        if per_page < 1 or page < 1:
            raise ValueError(f"per_page and page must be >= 1, got {per_page}, {page}")

        records = self.read_records(archive_id)
        if isinstance(records, ArchiveError):
            return records

        result = paginate(records, per_page, page)
        return ArchivePage(
            data=result.data,
            total=result.total,
            per_page=result.per_page,
            current_page=result.current_page,
            last_page=result.last_page,
            has_more_pages=result.has_more_pages,
            archive_name=archive_id,
        )

    def list_archives(self) -> list[ArchiveMetadata]:
        """Archives in the archive directory, newest first by modification time."""
        try:
            candidates = list(self.archive_dir.iterdir())
        except FileNotFoundError:
            return []

        archives: list[ArchiveMetadata] = []
        for path in candidates:
            match = ARCHIVE_ID_PATTERN.fullmatch(path.name)
            if match is None:
                continue
            try:
                stat = path.stat()
            except OSError:
                continue  # Skip files we can't stat
            archives.append(
                ArchiveMetadata(
                    name=path.name,
                    month=match.group(1),
                    format=match.group(2),
                    size=stat.st_size,
                    created_at=datetime.fromtimestamp(stat.st_mtime).replace(microsecond=0),
                    path=str(path),
                )
            )

        archives.sort(key=lambda archive: (archive.created_at, archive.name), reverse=True)
        return archives
