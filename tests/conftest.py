"""Shared fixtures for seclog tests.

Daily files are written under tmp_path; the compactor and service get a
fixed clock (2025-02-10 12:00) so "current month" is deterministic.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

FIXED_NOW = datetime(2025, 2, 10, 12, 0, 0)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock frozen at 2025-02-10 12:00:00."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_line() -> Callable[..., str]:
    """Factory for one security log line (without newline)."""

    def _make(
        timestamp: str,
        message: str = "Event",
        level: str = "INFO",
        environment: str = "production",
        context: dict[str, Any] | None = None,
    ) -> str:
        line = f"[{timestamp}] {environment}.{level}: {message}"
        if context:
            line += " " + json.dumps(context)
        return line

    return _make


@pytest.fixture
def log_root(tmp_path: Path) -> Path:
    """Empty log root directory."""
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture
def archive_dir(log_root: Path) -> Path:
    """Archive directory path under the log root (not created)."""
    return log_root / "archived"


@pytest.fixture
def write_daily(log_root: Path) -> Callable[[str, list[str]], Path]:
    """Factory writing security-<day>.log with the given lines."""

    def _write(day: str, lines: list[str]) -> Path:
        path = log_root / f"security-{day}.log"
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def mark_zip_encrypted() -> Callable[[Path], None]:
    """Set the "encrypted" flag bit on every entry of a zip file.

    zipfile then refuses to read the entries without a password.
    """

    def _mark(path: Path) -> None:
        data = bytearray(path.read_bytes())
        # local file header flags at +6, central directory flags at +8
        for signature, offset in ((b"PK\x03\x04", 6), (b"PK\x01\x02", 8)):
            start = data.find(signature)
            while start != -1:
                data[start + offset] |= 0x01
                start = data.find(signature, start + 4)
        path.write_bytes(bytes(data))

    return _mark
