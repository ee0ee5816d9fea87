"""API schemas (Pydantic models) for response validation."""

from __future__ import annotations

from seclog.api.schemas.security_logs import (
    ArchivedFileInfo,
    ArchiveInfo,
    ArchivePageResponse,
    ArchiveRunResponse,
    LogRecordResponse,
    PaginatedLogsResponse,
    StatisticsResponse,
)

__all__ = [
    "ArchiveInfo",
    "ArchivePageResponse",
    "ArchiveRunResponse",
    "ArchivedFileInfo",
    "LogRecordResponse",
    "PaginatedLogsResponse",
    "StatisticsResponse",
]
