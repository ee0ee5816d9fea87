"""Per-archive advisory write lock.

All writers targeting the same archive (scheduler run, manual trigger,
another process) serialize on an fcntl lock held on a sidecar file:
    archived/security-logs-2025-01.zip.lock

flock() locks belong to the open file description, so two threads of one
process that each open the lock file exclude each other as well. Readers
never take the lock: archives are replaced by atomic rename, so a reader
always sees either the old or the new complete file.
"""

from __future__ import annotations

__all__ = ["archive_lock", "lock_path_for"]

import fcntl
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from seclog.constants import LOCK_POLL_INTERVAL_SECONDS, LOCK_SUFFIX
from seclog.exceptions import ArchiveLockTimeout


def lock_path_for(archive_path: Path) -> Path:
    """Sidecar lock file for an archive."""
    return archive_path.with_name(archive_path.name + LOCK_SUFFIX)


@contextmanager
def archive_lock(archive_path: Path, timeout: float) -> Iterator[None]:
    """Context manager for exclusive locking of one archive.

    Acquires an exclusive lock on the archive's sidecar lock file, creating
    it if needed. The lock is released when exiting the context.

    Args:
        archive_path: Archive being written (need not exist yet).
        timeout: Seconds to wait for a competing writer; 0 tries once.

    Yields:
        None when lock is acquired.

    Raises:
        ArchiveLockTimeout: If the lock is still held after timeout.
        OSError: If the lock file cannot be opened.
    """
    lock_file = open(lock_path_for(archive_path), "a")
    try:
        deadline = time.monotonic() + timeout
        while True:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise ArchiveLockTimeout(archive_path.name, timeout) from None
                time.sleep(LOCK_POLL_INTERVAL_SECONDS)
        try:
            yield
        finally:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            except OSError:
                pass
    finally:
        lock_file.close()
