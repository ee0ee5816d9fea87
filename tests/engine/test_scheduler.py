"""Unit tests for the daily RetentionScheduler.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from seclog.engine.models import ArchivedFile, ArchiveReport, PruneReport
from seclog.engine.scheduler import RetentionScheduler


@pytest.fixture
def mock_service() -> MagicMock:
    service = MagicMock()
    service.archive_now.return_value = ArchiveReport(
        archived=[ArchivedFile("security-2025-01-15.log", "security-logs-2025-01.zip", 512)]
    )
    service.prune_archives.return_value = PruneReport()
    return service


class TestNextRunAt:
    """Tests for next run computation."""

    def test_later_today(self, mock_service):
        scheduler = RetentionScheduler(mock_service, "01:00")
        assert scheduler.next_run_at(datetime(2025, 2, 10, 0, 30)) == datetime(2025, 2, 10, 1, 0)

    def test_tomorrow_when_past(self, mock_service, fixed_clock):
        scheduler = RetentionScheduler(mock_service, "01:00", clock=fixed_clock)
        assert scheduler.next_run_at() == datetime(2025, 2, 11, 1, 0)

    def test_exactly_now_goes_to_tomorrow(self, mock_service):
        scheduler = RetentionScheduler(mock_service, "01:00")
        assert scheduler.next_run_at(datetime(2025, 2, 10, 1, 0)) == datetime(2025, 2, 11, 1, 0)

    def test_month_rollover(self, mock_service):
        scheduler = RetentionScheduler(mock_service, "23:30")
        assert scheduler.next_run_at(datetime(2025, 1, 31, 23, 45)) == datetime(2025, 2, 1, 23, 30)


class TestRunOnce:
    """Tests for a single archival run."""

    @pytest.mark.asyncio
    async def test_archives_and_stores_report(self, mock_service):
        """A run calls archive_now in a worker thread and keeps the report."""
        # Arrange
        scheduler = RetentionScheduler(mock_service)

        # Act
        report = await scheduler.run_once()

        # Assert
        mock_service.archive_now.assert_called_once()
        mock_service.prune_archives.assert_not_called()
        assert scheduler.last_report is report
        assert len(report.archived) == 1

    @pytest.mark.asyncio
    async def test_prunes_when_retention_set(self, mock_service):
        scheduler = RetentionScheduler(mock_service, retention_months=6)
        await scheduler.run_once()
        mock_service.prune_archives.assert_called_once_with(6)


class TestLifecycle:
    """Tests for start/stop of the background task."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, mock_service):
        """Given a started scheduler, stop() ends the task without running."""
        # Arrange
        scheduler = RetentionScheduler(mock_service, "01:00")

        # Act
        with patch("seclog.engine.scheduler.log_system_event") as mock_log:
            await scheduler.start()
            running = scheduler.is_running
            await scheduler.stop()

        # Assert
        assert running is True
        assert scheduler.is_running is False
        assert mock_log.call_args_list[0].args[1].event == "scheduler_started"
        mock_service.archive_now.assert_not_called()

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, mock_service):
        scheduler = RetentionScheduler(mock_service, "01:00")
        await scheduler.start()
        task = scheduler._task
        await scheduler.start()
        assert scheduler._task is task
        await scheduler.stop()

    @pytest.mark.asyncio
    async def test_failed_run_is_logged_and_loop_survives(self, mock_service):
        """Given a run that raises, the failure is logged and the loop keeps going."""
        # Arrange
        mock_service.archive_now.side_effect = RuntimeError("disk on fire")
        now = datetime(2025, 2, 10, 1, 0)
        scheduler = RetentionScheduler(mock_service, "01:00", clock=lambda: now)

        # Act
        with (
            patch.object(scheduler, "next_run_at", return_value=now),
            patch("seclog.engine.scheduler.log_system_event") as mock_log,
        ):
            await scheduler.start()
            for _ in range(50):
                await asyncio.sleep(0.01)
                if mock_service.archive_now.call_count >= 2:
                    break
            still_running = scheduler.is_running
            await scheduler.stop()

        # Assert
        events = [call.args[1].event for call in mock_log.call_args_list]
        assert "scheduler_run_failed" in events
        assert mock_service.archive_now.call_count >= 2
        assert still_running is True
