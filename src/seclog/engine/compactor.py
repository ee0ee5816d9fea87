"""Compaction of past-month daily files into monthly archives.

A daily file is eligible once its month differs from the current calendar
month (taken from the clock at call time). Eligible files are grouped by
month and moved into archived/security-logs-YYYY-MM.<ext>:

    1. Take the archive's writer lock.
    2. Read the existing archive, if any (a damaged archive fails the group
       and is left as is).
    3. Read each daily file; build the new entry list. A name already in the
       archive with identical bytes needs no rewrite. When the daily file
       extends the archived copy it replaces the entry; when it diverges
       (recreated after archival) its new lines are appended to the
       archived copy, so no archived line is ever dropped.
    4. Write the new archive to a temp file, verify it, rename it into place.
    5. Only then delete each source file, and only if it is unchanged since
       it was read.

Any failure leaves the source file in place, so the next run retries it.
Running again with nothing eligible is a no-op.
"""

from __future__ import annotations

__all__ = ["ArchiveCompactor", "merge_entry_content", "month_key"]

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from seclog.constants import (
    ARCHIVE_EXTENSIONS,
    ARCHIVE_ID_PATTERN,
    ARCHIVE_NAME_PREFIX,
    DAILY_FILE_PATTERN,
)
from seclog.engine.active import list_daily_files
from seclog.engine.containers import ArchiveEntry, read_entries, write_archive
from seclog.engine.locking import archive_lock
from seclog.engine.models import ArchivedFile, ArchiveReport, PruneReport
from seclog.exceptions import ArchiveLockTimeout, ArchiveOpenFailure, ArchiveWriteFailure
from seclog.telemetry.models import SystemEvent
from seclog.telemetry.system import log_system_event

_COMPONENT = "compactor"


def month_key(filename: str) -> str | None:
    """Month key ("YYYY-MM") embedded in a daily file name, or None."""
    match = DAILY_FILE_PATTERN.fullmatch(filename)
    return match.group(1) if match else None


def merge_entry_content(archived: bytes, active: bytes) -> bytes:
    """Content for a daily file whose name is already inside the archive.

    Usually the daily file extends the archived copy (a run stopped between
    writing the archive and deleting the source), and it is taken as is. If
    the archived copy already holds the daily file, it is kept. Otherwise the
    daily file was recreated after archival: the archived bytes are kept and
    the daily file's lines that are not already archived are appended.
    """
    if active.startswith(archived):
        return active
    if archived.startswith(active):
        return archived
    known = {line.rstrip(b"\r\n") for line in archived.splitlines()}
    merged = archived if archived.endswith(b"\n") else archived + b"\n"
    extra = [line for line in active.splitlines(keepends=True) if line.rstrip(b"\r\n") not in known]
    return merged + b"".join(extra)


def _month_index(key: str) -> int:
    year, month = key.split("-")
    return int(year) * 12 + int(month) - 1


class ArchiveCompactor:
    """Moves daily files of past months into compressed monthly archives.

    Attributes:
        log_root: Directory holding the daily files.
        archive_dir: Directory holding the monthly archives.
        archive_format: Container for new archives ("zip" or "gz").
        lock_timeout: Seconds to wait for a competing writer per archive.
    """

    def __init__(
        self,
        log_root: Path,
        archive_dir: Path,
        *,
        archive_format: str = "zip",
        lock_timeout: float = 30.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if archive_format not in ARCHIVE_EXTENSIONS:
            raise ValueError(f"Unsupported archive format: {archive_format}")
        self.log_root = log_root
        self.archive_dir = archive_dir
        self.archive_format = archive_format
        self.lock_timeout = lock_timeout
        self._clock = clock

    def current_month(self) -> str:
        """Current calendar month key from the clock."""
        return self._clock().strftime("%Y-%m")

    def archive_path_for(self, month: str) -> Path:
        """Archive path for a month.

        An existing archive for the month is reused whatever its format, so a
        month never ends up split across two containers.
        """
        for extension in ARCHIVE_EXTENSIONS:
            candidate = self.archive_dir / f"{ARCHIVE_NAME_PREFIX}{month}.{extension}"
            if candidate.exists():
                return candidate
        return self.archive_dir / f"{ARCHIVE_NAME_PREFIX}{month}.{self.archive_format}"

    def eligible_files(self) -> dict[str, list[Path]]:
        """Daily files outside the current month, grouped by month (oldest first)."""
        current = self.current_month()
        groups: dict[str, list[Path]] = {}
        for path in list_daily_files(self.log_root):
            key = month_key(path.name)
            if key is None or key == current:
                continue
            groups.setdefault(key, []).append(path)
        return dict(sorted(groups.items()))

    # -------------------------------------------------------------------------
    # Compaction
    # -------------------------------------------------------------------------

    def archive_old_logs(self, cancel: threading.Event | None = None) -> ArchiveReport:
        """Move every eligible daily file into its monthly archive.

        Args:
            cancel: Optional event checked between months; when set, remaining
                months are left for the next run.

        Returns:
            ArchiveReport listing moved files and per-file failures.
        """
        report = ArchiveReport()
        groups = self.eligible_files()
        if not groups:
            return report

        try:
            self.archive_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            for files in groups.values():
                self._record_failures(
                    report, files, self.archive_dir.name, f"Cannot create archive directory: {e}"
                )
            return report

        for month, files in groups.items():
            if cancel is not None and cancel.is_set():
                break
            self._archive_month(month, files, report)

        log_system_event(
            logging.INFO,
            SystemEvent(
                event="archive_run_completed",
                message=f"Archived {len(report.archived)} file(s), {len(report.errors)} error(s)",
                component=_COMPONENT,
                details={
                    "archived": len(report.archived),
                    "errors": len(report.errors),
                    "months": list(groups),
                },
            ),
        )
        return report

    def _archive_month(self, month: str, files: list[Path], report: ArchiveReport) -> None:
        archive_path = self.archive_path_for(month)
        try:
            with archive_lock(archive_path, self.lock_timeout):
                self._archive_month_locked(archive_path, files, report)
        except ArchiveLockTimeout as e:
            log_system_event(
                logging.WARNING,
                SystemEvent(
                    event="archive_lock_timeout",
                    message=str(e),
                    component=_COMPONENT,
                    archive_name=archive_path.name,
                ),
            )
            self._record_failures(report, files, archive_path.name, str(e))
        except OSError as e:
            self._record_failures(report, files, archive_path.name, f"Cannot lock archive: {e}")

    def _archive_month_locked(self, archive_path: Path, files: list[Path], report: ArchiveReport) -> None:
        archive_name = archive_path.name

        try:
            existing = read_entries(archive_path) if archive_path.exists() else []
        except (ArchiveOpenFailure, FileNotFoundError) as e:
            log_system_event(
                logging.ERROR,
                SystemEvent(
                    event="archive_open_failed",
                    message=str(e),
                    component=_COMPONENT,
                    archive_name=archive_name,
                    error_type=type(e).__name__,
                    error_message=str(e),
                ),
            )
            self._record_failures(report, files, archive_name, f"Cannot open existing archive: {e}")
            return

        # Stage sources; a vanished file was already moved by another run
        staged: list[tuple[Path, bytes]] = []
        for path in files:
            try:
                staged.append((path, path.read_bytes()))
            except FileNotFoundError:
                continue
            except OSError as e:
                self._record_failures(report, [path], archive_name, f"Cannot read source file: {e}")
        if not staged:
            return

        entries = list(existing)
        positions = {entry.name: index for index, entry in enumerate(entries)}
        changed = False
        for path, content in staged:
            index = positions.get(path.name)
            if index is None:
                positions[path.name] = len(entries)
                entries.append(ArchiveEntry(path.name, content))
                changed = True
            elif entries[index].content != content:
                archived = entries[index].content
                if archived.startswith(content):
                    continue
                if not content.startswith(archived):
                    log_system_event(
                        logging.WARNING,
                        SystemEvent(
                            event="archive_entry_merged",
                            message=f"{path.name} diverges from its archived copy; merging lines",
                            component=_COMPONENT,
                            archive_name=archive_name,
                            filename=path.name,
                        ),
                    )
                entries[index] = ArchiveEntry(path.name, merge_entry_content(archived, content))
                changed = True

        try:
            size = write_archive(archive_path, entries) if changed else archive_path.stat().st_size
        except (OSError, ValueError) as e:
            self._record_failures(report, [path for path, _ in staged], archive_name, str(e))
            return

        for path, content in staged:
            self._remove_source(path, len(content), archive_name, size, report)

    def _remove_source(
        self,
        path: Path,
        archived_size: int,
        archive_name: str,
        size: int,
        report: ArchiveReport,
    ) -> None:
        """Delete a source file now durably held by its archive."""
        try:
            if path.stat().st_size != archived_size:
                self._record_failures(
                    report, [path], archive_name, "File changed during archival; will retry"
                )
                return
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            self._record_failures(report, [path], archive_name, f"Archived but could not delete source: {e}")
            return
        report.archived.append(ArchivedFile(source=path.name, archive_name=archive_name, size=size))

    def _record_failures(
        self,
        report: ArchiveReport,
        files: list[Path],
        archive_name: str,
        reason: str,
    ) -> None:
        for path in files:
            failure = ArchiveWriteFailure(path.name, archive_name, reason)
            report.errors.append(str(failure))
            log_system_event(
                logging.WARNING,
                SystemEvent(
                    event="archive_file_failed",
                    message=str(failure),
                    component=_COMPONENT,
                    archive_name=archive_name,
                    filename=path.name,
                    error_type=type(failure).__name__,
                    error_message=reason,
                ),
            )

    # -------------------------------------------------------------------------
    # Retention
    # -------------------------------------------------------------------------

    def prune_archives(self, retention_months: int) -> PruneReport:
        """Delete archives older than the retention window.

        An archive for month M is deleted when M is more than
        retention_months before the current month. The current month and
        anything newer are never touched.

        Args:
            retention_months: Months of archives to keep, at least 1.

        Raises:
            ValueError: If retention_months is below 1.
        """
        if retention_months < 1:
            raise ValueError(f"retention_months must be >= 1, got {retention_months}")

        report = PruneReport()
        cutoff = _month_index(self.current_month()) - retention_months
        try:
            candidates = sorted(self.archive_dir.iterdir(), key=lambda path: path.name)
        except FileNotFoundError:
            return report

        for path in candidates:
            match = ARCHIVE_ID_PATTERN.fullmatch(path.name)
            if match is None or _month_index(match.group(1)) >= cutoff:
                continue
            try:
                with archive_lock(path, self.lock_timeout):
                    path.unlink()
            except FileNotFoundError:
                continue
            except (ArchiveLockTimeout, OSError) as e:
                report.errors.append(f"Failed to prune {path.name}: {e}")
                continue
            report.pruned.append(path.name)
            log_system_event(
                logging.INFO,
                SystemEvent(
                    event="archive_pruned",
                    message=f"Pruned archive {path.name}",
                    component=_COMPONENT,
                    archive_name=path.name,
                    details={"retention_months": retention_months},
                ),
            )
        return report
