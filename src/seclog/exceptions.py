"""Custom exceptions for seclog.

Expected read-path outcomes (bad identifier, missing archive, unreadable
archive) are not exceptions; they are returned as ArchiveError values
(see seclog.engine.models). The exceptions here cover:

Collected Errors (run continues):
    - ArchiveOpenFailure: An existing archive is corrupted; every file bound
      for it in this run is reported as failed and the archive is kept.
    - ArchiveLockTimeout: Another writer held the archive for too long.
    - ArchiveWriteFailure: A daily file could not be moved into its archive.
      Caught by the compactor and recorded in the run report.

Startup Errors:
    - ConfigurationError: Config file is unreadable or fails validation.

Usage:
    from seclog.exceptions import ArchiveWriteFailure, ConfigurationError
"""

from __future__ import annotations

__all__ = [
    "ArchiveLockTimeout",
    "ArchiveOpenFailure",
    "ArchiveWriteFailure",
    "ConfigurationError",
]


class ArchiveWriteFailure(Exception):
    """A daily file could not be written into its monthly archive.

    The source file is preserved so the next run retries it.

    Attributes:
        filename: Basename of the daily file that failed.
        archive_name: Target archive basename.
        reason: Human-readable cause.
    """

    def __init__(self, filename: str, archive_name: str, reason: str) -> None:
        self.filename = filename
        self.archive_name = archive_name
        self.reason = reason
        super().__init__(f"Failed to archive {filename}: {reason}")


class ArchiveLockTimeout(Exception):
    """Timed out waiting for another writer to release an archive."""

    def __init__(self, archive_name: str, timeout: float) -> None:
        self.archive_name = archive_name
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:g}s waiting for lock on {archive_name}")


class ConfigurationError(ValueError):
    """Configuration is invalid or unreadable.

    Raised when:
    - Config file contains invalid JSON
    - Config file fails Pydantic validation
    """


class ArchiveOpenFailure(Exception):
    """An existing archive could not be opened or read (corrupted container).

    The archive itself is left untouched.
    """

    def __init__(self, archive_name: str, reason: str) -> None:
        self.archive_name = archive_name
        self.reason = reason
        super().__init__(f"Cannot open archive {archive_name}: {reason}")
