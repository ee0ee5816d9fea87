"""Pydantic models for system/operational logs.

The 'time' field is not part of the model: ISO8601Formatter adds the
timestamp during log serialization, so there is a single source of truth
for timestamps.
"""

from __future__ import annotations

__all__ = ["SystemEvent"]

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class SystemEvent(BaseModel):
    """
    One system/operational log entry (system.jsonl).

    Used for archive runs, per-file archival failures, lock timeouts,
    unreadable log files and scheduler lifecycle events.
    """

    # --- core ---
    event: str  # machine-friendly event name
    message: Optional[str] = None  # human-readable description

    # --- component / context ---
    component: Optional[str] = None  # "compactor", "active_reader", "scheduler", ...
    archive_name: Optional[str] = None  # if tied to one archive
    filename: Optional[str] = None  # if tied to one daily file

    # --- error details ---
    error_type: Optional[str] = None  # Exception class, e.g. PermissionError
    error_message: Optional[str] = None  # Short error message

    # --- additional structured details ---
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")
