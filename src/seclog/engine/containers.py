"""Compressed container formats for monthly archives.

Two formats share the archive naming scheme security-logs-YYYY-MM.<ext>:
- zip: deflated zip archive, one entry per daily file
- gz:  gzip-compressed tar archive, one member per daily file

Archives are never modified in place. write_archive() builds the complete
new container in a temporary file beside the target, re-reads it to confirm
every entry round-trips, fsyncs it, then renames it over the target. A crash
or error at any point leaves the previous archive intact.
"""

from __future__ import annotations

__all__ = [
    "ArchiveEntry",
    "format_for",
    "read_entries",
    "write_archive",
]

import gzip
import hashlib
import io
import os
import tarfile
import tempfile
import time
import zipfile
import zlib
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import NamedTuple

from seclog.exceptions import ArchiveOpenFailure
from seclog.utils.file_helpers import fsync_directory, set_secure_permissions

# Errors raised by zipfile/tarfile/gzip on damaged or unsupported containers.
# zipfile raises RuntimeError for encrypted entries and NotImplementedError
# for unsupported compression methods.
_CORRUPTION_ERRORS: tuple[type[BaseException], ...] = (
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    tarfile.TarError,
    gzip.BadGzipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
)


class ArchiveEntry(NamedTuple):
    """One daily file inside an archive."""

    name: str
    content: bytes


def format_for(path: Path) -> str:
    """Container format ("zip" or "gz") from the archive file extension.

    Raises:
        ValueError: For any other extension.
    """
    suffix = path.suffix.lower().lstrip(".")
    if suffix not in ("zip", "gz"):
        raise ValueError(f"Unsupported archive extension: {path.name}")
    return suffix


# =============================================================================
# Reading
# =============================================================================


def _read_zip(path: Path, accept: Callable[[str], bool]) -> list[ArchiveEntry]:
    entries: list[ArchiveEntry] = []
    with zipfile.ZipFile(path, "r") as archive:
        for info in archive.infolist():
            if info.is_dir() or not accept(info.filename):
                continue
            entries.append(ArchiveEntry(info.filename, archive.read(info)))
    return entries


def _read_tar(path: Path, accept: Callable[[str], bool]) -> list[ArchiveEntry]:
    entries: list[ArchiveEntry] = []
    with tarfile.open(path, "r:gz") as archive:
        for member in archive:
            if not member.isfile() or not accept(member.name):
                continue
            extracted = archive.extractfile(member)
            if extracted is None:
                continue
            with extracted:
                entries.append(ArchiveEntry(member.name, extracted.read()))
    return entries


def read_entries(path: Path, accept: Callable[[str], bool] | None = None) -> list[ArchiveEntry]:
    """Read entries of an archive into memory, in container order.

    Args:
        path: Archive file.
        accept: Optional predicate on entry names; rejected entries are not read.

    Returns:
        List of ArchiveEntry.

    Raises:
        FileNotFoundError: If the archive does not exist.
        ArchiveOpenFailure: If the container is damaged or unreadable.
    """
    accept = accept or (lambda _name: True)
    reader = _read_zip if format_for(path) == "zip" else _read_tar
    try:
        return reader(path, accept)
    except FileNotFoundError:
        raise
    except _CORRUPTION_ERRORS as e:
        raise ArchiveOpenFailure(path.name, f"{type(e).__name__}: {e}") from e
    except OSError as e:
        raise ArchiveOpenFailure(path.name, str(e)) from e


# =============================================================================
# Writing
# =============================================================================


def _write_zip(handle: io.BufferedWriter, entries: list[ArchiveEntry]) -> None:
    with zipfile.ZipFile(handle, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for entry in entries:
            archive.writestr(entry.name, entry.content)


def _write_tar(handle: io.BufferedWriter, entries: list[ArchiveEntry]) -> None:
    now = time.time()
    with tarfile.open(fileobj=handle, mode="w:gz") as archive:
        for entry in entries:
            info = tarfile.TarInfo(name=entry.name)
            info.size = len(entry.content)
            info.mtime = int(now)
            info.mode = 0o600
            archive.addfile(info, io.BytesIO(entry.content))


def _digest_map(entries: Iterable[ArchiveEntry]) -> dict[str, str]:
    return {entry.name: hashlib.sha256(entry.content).hexdigest() for entry in entries}


def write_archive(path: Path, entries: list[ArchiveEntry]) -> int:
    """Atomically replace (or create) an archive with exactly these entries.

    Args:
        path: Target archive path; its extension selects the format.
        entries: Entries in the order they should be stored. Names must be unique.

    Returns:
        Size in bytes of the written archive.

    Raises:
        ValueError: If entry names repeat.
        OSError: If writing, verifying or renaming fails. The previous
            archive (if any) is untouched and the temporary file is removed.
    """
    names = [entry.name for entry in entries]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate entry names for {path.name}")

    if format_for(path) == "zip":
        writer, reader = _write_zip, _read_zip
    else:
        writer, reader = _write_tar, _read_tar
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            writer(handle, entries)
            handle.flush()
            os.fsync(handle.fileno())

        # Verify before the rename: every entry must read back byte-identical
        try:
            written = reader(tmp_path, lambda _name: True)
        except _CORRUPTION_ERRORS as e:
            raise OSError(f"Verification of {path.name} failed: {e}") from e
        if _digest_map(written) != _digest_map(entries):
            raise OSError(f"Verification of {path.name} failed: content mismatch")

        set_secure_permissions(tmp_path)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    fsync_directory(path.parent)
    return path.stat().st_size
