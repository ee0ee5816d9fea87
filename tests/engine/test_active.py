"""Unit tests for the active log reader and shared pagination.

Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from seclog.engine.active import ActiveLogReader, list_daily_files
from seclog.engine.pagination import paginate, sort_newest_first
from seclog.engine.parser import parse_line


# =============================================================================
# Tests: paginate / sort_newest_first
# =============================================================================


class TestPaginate:
    """Tests for page slicing."""

    def test_fewer_items_than_page(self):
        """Given 10 items and per_page 25, there is one page and no more."""
        # Act
        result = paginate(list(range(10)), per_page=25, page=1)

        # Assert
        assert result.total == 10
        assert result.last_page == 1
        assert result.has_more_pages is False
        assert len(result.data) == 10

    def test_empty_set_has_zero_pages(self):
        result = paginate([], per_page=25, page=1)
        assert result.data == []
        assert result.total == 0
        assert result.last_page == 0
        assert result.has_more_pages is False

    def test_last_partial_page(self):
        """Given 51 items and per_page 25, page 3 holds one item."""
        # Act
        result = paginate(list(range(51)), per_page=25, page=3)

        # Assert
        assert result.data == [50]
        assert result.last_page == 3
        assert result.has_more_pages is False

    def test_middle_page_has_more(self):
        result = paginate(list(range(51)), per_page=25, page=2)
        assert result.data == list(range(25, 50))
        assert result.has_more_pages is True

    def test_page_past_end_keeps_totals(self):
        result = paginate(list(range(5)), per_page=2, page=9)
        assert result.data == []
        assert result.total == 5
        assert result.current_page == 9
        assert result.last_page == 3

    @pytest.mark.parametrize(("per_page", "page"), [(0, 1), (1, 0), (-5, 1)])
    def test_rejects_values_below_one(self, per_page, page):
        with pytest.raises(ValueError):
            paginate([1, 2], per_page=per_page, page=page)


class TestSortNewestFirst:
    """Tests for record ordering."""

    def test_sorts_descending_and_stable(self):
        """Records with equal timestamps keep their read order."""
        # Arrange
        records = [
            parse_line("[2025-01-15 10:00:00] production.INFO: first"),
            parse_line("[2025-01-15 11:00:00] production.INFO: later"),
            parse_line("[2025-01-15 10:00:00] production.INFO: second"),
        ]

        # Act
        ordered = sort_newest_first(records)

        # Assert
        assert [r.message for r in ordered] == ["later", "first", "second"]


# =============================================================================
# Tests: list_daily_files
# =============================================================================


class TestListDailyFiles:
    """Tests for daily file discovery."""

    def test_missing_directory_is_empty(self, tmp_path):
        assert list_daily_files(tmp_path / "nope") == []

    def test_only_exact_daily_names(self, log_root):
        """Given look-alike names, only security-YYYY-MM-DD.log files are listed."""
        # Arrange
        for name in [
            "security-2025-01-16.log",
            "security-2025-01-15.log",
            "security-2025-01-15.log.bak",
            "security-2025-1-15.log",
            "laravel-2025-01-15.log",
            "security-2025-01-15.log.lock",
        ]:
            (log_root / name).write_text("")
        (log_root / "security-2025-01-17.log").mkdir()

        # Act
        files = list_daily_files(log_root)

        # Assert
        assert [p.name for p in files] == ["security-2025-01-15.log", "security-2025-01-16.log"]


# =============================================================================
# Tests: ActiveLogReader
# =============================================================================


class TestActiveLogReader:
    """Tests for reading active daily files."""

    def test_records_newest_first_across_files(self, log_root, write_daily, make_line):
        """Given several daily files, records come back newest first."""
        # Arrange
        write_daily("2025-02-01", [make_line("2025-02-01 08:00:00", "a"), make_line("2025-02-01 09:00:00", "b")])
        write_daily("2025-02-02", [make_line("2025-02-02 07:00:00", "c")])
        reader = ActiveLogReader(log_root)

        # Act
        records = reader.list_records()

        # Assert
        assert [r.message for r in records] == ["c", "b", "a"]

    def test_parallel_parse_matches_inline(self, log_root, write_daily, make_line):
        """Given several files, any worker count yields the same ordered result."""
        # Arrange
        for day in range(1, 8):
            write_daily(
                f"2025-02-0{day}",
                [make_line(f"2025-02-0{day} 10:00:00", f"msg-{day}-{i}") for i in range(5)],
            )

        # Act
        inline = ActiveLogReader(log_root, workers=1).list_records()
        parallel = ActiveLogReader(log_root, workers=4).list_records()

        # Assert
        assert [r.id for r in parallel] == [r.id for r in inline]
        assert len(inline) == 35

    def test_list_page(self, log_root, write_daily, make_line):
        # Arrange
        write_daily("2025-02-01", [make_line(f"2025-02-01 10:00:{i:02d}", f"m{i}") for i in range(30)])

        # Act
        page = ActiveLogReader(log_root).list_page(per_page=25, page=2)

        # Assert
        assert page.total == 30
        assert page.last_page == 2
        assert [r.message for r in page.data] == ["m4", "m3", "m2", "m1", "m0"]

    def test_missing_root_gives_empty_page(self, tmp_path):
        page = ActiveLogReader(tmp_path / "missing").list_page(per_page=25, page=1)
        assert page.total == 0
        assert page.data == []

    def test_vanished_file_contributes_nothing(self, log_root):
        """Given a file removed between listing and reading, no error is raised."""
        reader = ActiveLogReader(log_root)
        assert reader._read_file(log_root / "security-2025-02-01.log") == []

    def test_unreadable_file_is_logged_and_skipped(self, log_root, write_daily, make_line):
        """Given a file that cannot be read, it is skipped and the failure logged."""
        # Arrange
        path = write_daily("2025-02-01", [make_line("2025-02-01 10:00:00")])
        reader = ActiveLogReader(log_root)

        # Act
        with (
            patch.object(Path, "read_bytes", side_effect=PermissionError("denied")),
            patch("seclog.engine.active.log_system_event") as mock_log,
        ):
            records = reader._read_file(path)

        # Assert
        assert records == []
        event = mock_log.call_args.args[1]
        assert event.event == "log_file_read_failed"
        assert event.filename == "security-2025-02-01.log"

    def test_records_are_not_rstripped_beyond_newline(self, log_root, write_daily):
        write_daily("2025-02-01", ["[2025-02-01 10:00:00] production.INFO: padded  "])
        records = ActiveLogReader(log_root).list_records()
        assert records[0].message == "padded  "
        assert records[0].datetime == datetime(2025, 2, 1, 10, 0, 0)
