"""Value types for the security log engine.

Records are created transiently on every read; the file line is the source
of truth. Read operations that can fail for expected reasons (bad identifier,
missing archive) return an ArchiveError value instead of raising.
"""

from __future__ import annotations

__all__ = [
    "ArchiveError",
    "ArchiveErrorKind",
    "ArchiveMetadata",
    "ArchivePage",
    "ArchiveReport",
    "ArchivedFile",
    "LogLevel",
    "LogRecord",
    "LogStatistics",
    "PaginatedResult",
    "PruneReport",
]

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from seclog.constants import LINE_DATETIME_FORMAT
from seclog.utils.file_helpers import format_size

T = TypeVar("T")


class LogLevel(str, Enum):
    """Known severities. Unrecognized levels are kept verbatim on the record."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    NOTICE = "NOTICE"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True, slots=True)
class LogRecord:
    """One parsed log line.

    Attributes:
        id: md5 hex of the datetime string and the stripped message. Stable
            across reads; identical lines share an id.
        datetime: Naive timestamp, second precision.
        environment: Deployment label (e.g. "production").
        level: Severity as written in the line.
        message: Message text with any trailing JSON object removed.
        context: Parsed trailing JSON object, empty if absent or invalid.
    """

    id: str
    datetime: datetime
    environment: str
    level: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def severity(self) -> LogLevel | None:
        """Level as a LogLevel, or None if it is not one of the known values."""
        try:
            return LogLevel(self.level.upper())
        except ValueError:
            return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the datetime in log-line format."""
        return {
            "id": self.id,
            "datetime": self.datetime.strftime(LINE_DATETIME_FORMAT),
            "environment": self.environment,
            "level": self.level,
            "message": self.message,
            "context": self.context,
        }


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """One page of a fully sorted result set."""

    data: list[T]
    total: int
    per_page: int
    current_page: int
    last_page: int
    has_more_pages: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [item.to_dict() if hasattr(item, "to_dict") else item for item in self.data],
            "total": self.total,
            "per_page": self.per_page,
            "current_page": self.current_page,
            "last_page": self.last_page,
            "has_more_pages": self.has_more_pages,
        }


@dataclass(frozen=True)
class ArchivePage(PaginatedResult[LogRecord]):
    """A page of records read from one monthly archive."""

    archive_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        result = PaginatedResult.to_dict(self)
        result["archive_name"] = self.archive_name
        return result


class ArchiveErrorKind(str, Enum):
    """Expected read-path failures."""

    INVALID_IDENTIFIER = "invalid_identifier"
    NOT_FOUND = "not_found"
    OPEN_FAILED = "open_failed"


@dataclass(frozen=True, slots=True)
class ArchiveError:
    """Typed failure returned by archive lookups (never raised)."""

    kind: ArchiveErrorKind
    archive_id: str
    message: str


@dataclass(frozen=True, slots=True)
class ArchiveMetadata:
    """One archive file as seen in the archive directory."""

    name: str
    month: str
    format: str
    size: int
    created_at: datetime
    path: str

    @property
    def size_human(self) -> str:
        return format_size(self.size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "filename": self.name,
            "month": self.month,
            "format": self.format,
            "size": self.size,
            "size_human": self.size_human,
            "created_at": self.created_at.strftime(LINE_DATETIME_FORMAT),
            "path": self.path,
        }


@dataclass(frozen=True, slots=True)
class ArchivedFile:
    """A daily file that was moved into an archive."""

    source: str
    archive_name: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.source, "to": self.archive_name, "size": self.size}


@dataclass
class ArchiveReport:
    """Outcome of one compaction run."""

    archived: list[ArchivedFile] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "archived": [item.to_dict() for item in self.archived],
            "errors": list(self.errors),
        }


@dataclass
class PruneReport:
    """Outcome of one retention pruning run."""

    pruned: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"pruned": list(self.pruned), "errors": list(self.errors)}


@dataclass(frozen=True, slots=True)
class LogStatistics:
    """Aggregate counters over active records and archives."""

    active_count: int
    archived_count: int
    archived_size: int
    level_distribution: dict[str, int]

    @property
    def archived_size_human(self) -> str:
        return format_size(self.archived_size)

    def to_dict(self) -> dict[str, Any]:
        return {
            "active_count": self.active_count,
            "archived_count": self.archived_count,
            "archived_size": self.archived_size,
            "archived_size_human": self.archived_size_human,
            "level_distribution": dict(self.level_distribution),
        }
