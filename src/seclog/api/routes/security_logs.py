"""Security log API endpoints.

Active logs:
- GET /api/security-logs - Current (unarchived) records, newest first

Archives:
- GET /api/security-logs/archives - Available monthly archives
- GET /api/security-logs/archives/{archive_id} - Records from one archive
- GET /api/security-logs/archives/{archive_id}/download - Raw archive file
- POST /api/security-logs/archive-now - Archive past-month files immediately

Metadata:
- GET /api/security-logs/statistics - Counters and level distribution

Routes mounted at: /api/security-logs
"""

from __future__ import annotations

__all__ = ["router"]

import asyncio

from fastapi import APIRouter, Query
from fastapi.responses import FileResponse

from seclog.api.deps import ConfigDep, ServiceDep
from seclog.api.errors import APIError, ErrorCode, archive_error_to_api_error
from seclog.api.schemas import (
    ArchivedFileInfo,
    ArchiveInfo,
    ArchivePageResponse,
    ArchiveRunResponse,
    PaginatedLogsResponse,
    StatisticsResponse,
)
from seclog.config import AppConfig
from seclog.constants import MAX_PER_PAGE
from seclog.engine.models import ArchiveError

router = APIRouter()

_MEDIA_TYPES = {
    "zip": "application/zip",
    "gz": "application/gzip",
}


# =============================================================================
# Shared Query Parameters
# =============================================================================

PageQuery = Query(default=1, ge=1, description="1-based page number")
PerPageQuery = Query(
    default=None,
    ge=1,
    le=MAX_PER_PAGE,
    description="Records per page (defaults to api.default_per_page)",
)


def _resolve_per_page(config: AppConfig, per_page: int | None) -> int:
    """Apply the configured default and upper bound to per_page.

    Raises:
        APIError: 422 VALIDATION_ERROR if per_page exceeds api.max_per_page.
    """
    if per_page is None:
        return config.api.default_per_page
    if per_page > config.api.max_per_page:
        raise APIError(
            status_code=422,
            code=ErrorCode.VALIDATION_ERROR,
            message=f"per_page: must be at most {config.api.max_per_page}",
            details={"per_page": per_page, "max_per_page": config.api.max_per_page},
        )
    return per_page


# =============================================================================
# Active Logs
# =============================================================================


@router.get("", response_model=PaginatedLogsResponse)
async def get_active_logs(
    service: ServiceDep,
    config: ConfigDep,
    page: int = PageQuery,
    per_page: int | None = PerPageQuery,
) -> PaginatedLogsResponse:
    """Get a page of current security log records, newest first."""
    result = service.get_active_page(page=page, per_page=_resolve_per_page(config, per_page))
    return PaginatedLogsResponse.model_validate(result.to_dict())


# =============================================================================
# Archives
# =============================================================================


@router.get("/archives", response_model=list[ArchiveInfo])
async def list_archives(service: ServiceDep) -> list[ArchiveInfo]:
    """List available monthly archives, newest first."""
    return [ArchiveInfo.model_validate(archive.to_dict()) for archive in service.get_archive_list()]


@router.get("/archives/{archive_id}", response_model=ArchivePageResponse)
async def get_archive_logs(
    archive_id: str,
    service: ServiceDep,
    config: ConfigDep,
    page: int = PageQuery,
    per_page: int | None = PerPageQuery,
) -> ArchivePageResponse:
    """Get a page of records from one archive.

    Raises:
        APIError: 400 ARCHIVE_ID_INVALID, 404 ARCHIVE_NOT_FOUND or
            422 ARCHIVE_UNREADABLE.
    """
    result = service.get_archive_page(
        archive_id,
        page=page,
        per_page=_resolve_per_page(config, per_page),
    )
    if isinstance(result, ArchiveError):
        raise archive_error_to_api_error(result)
    return ArchivePageResponse.model_validate(result.to_dict())


@router.get("/archives/{archive_id}/download", response_model=None)
async def download_archive(archive_id: str, service: ServiceDep) -> FileResponse:
    """Download the raw archive file.

    Raises:
        APIError: 400 ARCHIVE_ID_INVALID or 404 ARCHIVE_NOT_FOUND.
    """
    result = service.resolve_archive(archive_id)
    if isinstance(result, ArchiveError):
        raise archive_error_to_api_error(result)
    extension = result.name.rsplit(".", 1)[-1]
    return FileResponse(
        result,
        media_type=_MEDIA_TYPES.get(extension, "application/octet-stream"),
        filename=result.name,
    )


@router.post("/archive-now", response_model=ArchiveRunResponse)
async def archive_now(service: ServiceDep) -> ArchiveRunResponse:
    """Archive all past-month daily files now.

    Per-file failures do not fail the request; they are listed in errors
    and the files stay in place for the next run.
    """
    report = await asyncio.to_thread(service.archive_now)
    count = len(report.archived)
    if report.errors:
        message = f"Archived {count} log file(s) with {len(report.errors)} error(s)"
    elif count:
        message = f"Archived {count} log file(s)"
    else:
        message = "No logs to archive"
    return ArchiveRunResponse(
        success=not report.errors,
        message=message,
        archived=count,
        files=[ArchivedFileInfo.model_validate(item.to_dict()) for item in report.archived],
        errors=report.errors,
    )


# =============================================================================
# Statistics
# =============================================================================


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(service: ServiceDep) -> StatisticsResponse:
    """Get record counts, archive totals and level distribution."""
    return StatisticsResponse.model_validate(service.get_statistics().to_dict())
