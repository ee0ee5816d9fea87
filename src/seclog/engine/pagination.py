"""Ordering and page slicing shared by the active and archive readers."""

from __future__ import annotations

__all__ = ["paginate", "sort_newest_first"]

import math
from collections.abc import Sequence
from typing import TypeVar

from seclog.engine.models import LogRecord, PaginatedResult

T = TypeVar("T")


def sort_newest_first(records: list[LogRecord]) -> list[LogRecord]:
    """Sort by datetime descending.

    The sort is stable, so records with equal timestamps keep the order in
    which they were read (file order, then line order).
    """
    return sorted(records, key=lambda record: record.datetime, reverse=True)


def paginate(items: Sequence[T], per_page: int, page: int) -> PaginatedResult[T]:
    """Slice one page out of an already sorted sequence.

    Pages past the end return no data but keep the totals.

    Args:
        items: Full, sorted result set.
        per_page: Page size, at least 1.
        page: 1-based page number, at least 1.

    Returns:
        PaginatedResult for the requested page.

    Raises:
        ValueError: If per_page or page is below 1.
    """
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")

    total = len(items)
    last_page = math.ceil(total / per_page)
    offset = (page - 1) * per_page

    return PaginatedResult(
        data=list(items[offset : offset + per_page]),
        total=total,
        per_page=per_page,
        current_page=page,
        last_page=last_page,
        has_more_pages=page < last_page,
    )
