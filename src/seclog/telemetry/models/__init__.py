"""Pydantic models for log event types."""

from seclog.telemetry.models.system import SystemEvent

__all__ = ["SystemEvent"]
