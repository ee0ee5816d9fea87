"""Security log API schemas."""

from __future__ import annotations

__all__ = [
    "ArchiveInfo",
    "ArchivePageResponse",
    "ArchiveRunResponse",
    "ArchivedFileInfo",
    "LogRecordResponse",
    "PaginatedLogsResponse",
    "StatisticsResponse",
]

from typing import Any

from pydantic import BaseModel, Field


class LogRecordResponse(BaseModel):
    """One parsed security log line."""

    id: str
    datetime: str
    environment: str
    level: str
    message: str
    context: dict[str, Any]


class PaginatedLogsResponse(BaseModel):
    """A page of records, newest first."""

    data: list[LogRecordResponse]
    total: int
    per_page: int
    current_page: int
    last_page: int
    has_more_pages: bool


class ArchivePageResponse(PaginatedLogsResponse):
    """A page of records read from one monthly archive."""

    archive_name: str


class ArchiveInfo(BaseModel):
    """Metadata for one monthly archive."""

    name: str
    filename: str
    month: str
    format: str
    size: int
    size_human: str
    created_at: str
    path: str


class ArchivedFileInfo(BaseModel):
    """A daily file moved into an archive during a run."""

    # "from" is a keyword, so the field is aliased
    source: str = Field(serialization_alias="from", validation_alias="from")
    to: str
    size: int


class ArchiveRunResponse(BaseModel):
    """Result of a manual archive run."""

    success: bool
    message: str
    archived: int
    files: list[ArchivedFileInfo]
    errors: list[str]


class StatisticsResponse(BaseModel):
    """Counters over active records and archives."""

    active_count: int
    archived_count: int
    archived_size: int
    archived_size_human: str
    level_distribution: dict[str, int]
