"""Shared file utilities for seclog.

Provides common utilities used by config, the CLI and the archive engine:
- get_app_dir: OS-appropriate application directory
- format_size: Human-readable byte sizes
- set_secure_permissions: Secure file/directory permissions
- load_validated_json: Validated JSON loading
- fsync_directory: Flush a directory entry after rename
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import TypeVar

import click
from pydantic import BaseModel, ValidationError

from seclog.constants import APP_NAME

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)

__all__ = [
    "format_size",
    "fsync_directory",
    "get_app_dir",
    "load_validated_json",
    "set_secure_permissions",
]

_SIZE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB")


def get_app_dir() -> Path:
    """Get the OS-appropriate application directory.

    Uses click.get_app_dir() which returns:
    - macOS: ~/Library/Application Support/seclog
    - Linux: ~/.config/seclog (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\seclog

    Returns:
        Path to the application directory.
    """
    return Path(click.get_app_dir(APP_NAME))


def format_size(size_bytes: int, precision: int = 2) -> str:
    """Format a byte count for display (e.g. "1.5 KB").

    Divides by 1024 while the value is above 1024, capped at GB.

    Args:
        size_bytes: Size in bytes.
        precision: Decimal places to keep.

    Returns:
        Human-readable size string.
    """
    value = float(size_bytes)
    unit_index = 0
    while value > 1024 and unit_index < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1
    rounded = round(value, precision)
    if rounded == int(rounded):
        rounded = int(rounded)
    return f"{rounded} {_SIZE_UNITS[unit_index]}"


def set_secure_permissions(path: Path, *, is_directory: bool = False) -> None:
    """Set secure permissions on file or directory.

    Sets permissions to restrict access to owner only:
    - Directory: 0o700 (rwx------)
    - File: 0o600 (rw-------)

    Does nothing on Windows. Silently ignores permission errors
    (some systems don't allow permission changes).

    Args:
        path: Path to file or directory.
        is_directory: If True, use directory permissions (0o700).
    """
    if sys.platform == "win32":
        return

    try:
        mode = 0o700 if is_directory else 0o600
        path.chmod(mode)
    except OSError:
        pass  # Permission changes might fail on some systems


def fsync_directory(directory: Path) -> None:
    """Flush directory metadata so a completed rename survives a crash.

    No-op on Windows, where directories cannot be opened.
    """
    if sys.platform == "win32":
        return
    fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
    recovery_hint: str | None = None,
    encoding: str | None = None,
) -> T:
    """Load JSON file and validate against Pydantic model.

    Combines file reading, JSON parsing, and Pydantic validation with
    consistent error messages.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "config").
        recovery_hint: Optional hint appended to validation errors.
        encoding: File encoding. If None, uses system default.

    Returns:
        Validated Pydantic model instance.

    Raises:
        ValueError: If JSON is invalid or validation fails.
    """
    try:
        with open(file_path, "r", encoding=encoding) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")

        hint = f"\n\n{recovery_hint}" if recovery_hint else ""
        raise ValueError(
            f"Invalid {file_type} configuration in {file_path}:\n" + "\n".join(errors) + hint
        ) from e
