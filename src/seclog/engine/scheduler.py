"""Daily archival trigger.

Runs archive_now() once a day at a configured local time while the API
server is up. The compactor itself serializes writers per archive, so a run
that overlaps a manual trigger is safe.
"""

from __future__ import annotations

__all__ = ["RetentionScheduler"]

import asyncio
import logging
import threading
import traceback
from collections.abc import Callable
from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING

from seclog.constants import DEFAULT_DAILY_AT
from seclog.engine.models import ArchiveReport
from seclog.telemetry.models import SystemEvent
from seclog.telemetry.system import log_system_event

if TYPE_CHECKING:
    from seclog.engine.service import SecurityLogService

_COMPONENT = "scheduler"


def _parse_daily_at(daily_at: str) -> time:
    hours, minutes = daily_at.split(":")
    return time(hour=int(hours), minute=int(minutes))


class RetentionScheduler:
    """Background task that archives old logs once a day.

    A failing run is logged and the loop keeps going; the next day's run
    retries whatever the failed run left behind.

    Attributes:
        daily_at: Local time of day for the run.
        retention_months: If set, prune archives after each run.
    """

    def __init__(
        self,
        service: "SecurityLogService",
        daily_at: str = DEFAULT_DAILY_AT,
        *,
        retention_months: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._service = service
        self.daily_at = _parse_daily_at(daily_at)
        self.retention_months = retention_months
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._cancel = threading.Event()
        self.last_report: ArchiveReport | None = None

    @property
    def is_running(self) -> bool:
        """True while the background task is alive."""
        return self._task is not None and not self._task.done()

    def next_run_at(self, now: datetime | None = None) -> datetime:
        """Next scheduled run strictly after now."""
        now = now or self._clock()
        candidate = datetime.combine(now.date(), self.daily_at)
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate

    async def start(self) -> None:
        """Start the background task (no-op if already running)."""
        if self.is_running:
            return
        self._cancel.clear()
        self._task = asyncio.create_task(self._loop(), name="retention_scheduler")
        log_system_event(
            logging.INFO,
            SystemEvent(
                event="scheduler_started",
                message=f"Daily archival scheduled at {self.daily_at.strftime('%H:%M')}",
                component=_COMPONENT,
                details={"next_run_at": self.next_run_at().isoformat()},
            ),
        )

    async def stop(self) -> None:
        """Stop the background task and wait for it to finish.

        A run in progress stops between months.
        """
        self._cancel.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def run_once(self) -> ArchiveReport:
        """Archive (and optionally prune) now, in a worker thread."""
        report = await asyncio.to_thread(self._service.archive_now, self._cancel)
        if self.retention_months is not None:
            await asyncio.to_thread(self._service.prune_archives, self.retention_months)
        self.last_report = report
        return report

    async def _loop(self) -> None:
        while True:
            delay = (self.next_run_at() - self._clock()).total_seconds()
            await asyncio.sleep(max(delay, 0.0))
            try:
                await self.run_once()
            except asyncio.CancelledError:
                raise  # Normal shutdown, re-raise
            except Exception as e:
                log_system_event(
                    logging.ERROR,
                    SystemEvent(
                        event="scheduler_run_failed",
                        message=f"Scheduled archival failed: {e}",
                        component=_COMPONENT,
                        error_type=type(e).__name__,
                        error_message=str(e),
                        details={"traceback": traceback.format_exc()},
                    ),
                )
