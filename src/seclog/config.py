"""Application configuration for seclog.

Defines configuration models for log storage, archive format, the retention
scheduler, the HTTP API and operational logging. Config is stored as JSON at
the OS-appropriate location (via click.get_app_dir) unless overridden by the
SECLOG_CONFIG environment variable or the --config CLI option. A missing file
is not an error: defaults apply.

Example usage:
    # Load from config file (defaults if absent)
    config = AppConfig.load_or_default(config_path)

    # Save configuration
    config.save_to_file(config_path)
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_LOG_DIR",
    "ApiConfig",
    "AppConfig",
    "ArchiveConfig",
    "LoggingConfig",
    "ReaderConfig",
    "SchedulerConfig",
    "StorageConfig",
    "get_config_path",
]

import json
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from seclog.constants import (
    APP_NAME,
    ARCHIVE_DIRNAME,
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_DAILY_AT,
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    DEFAULT_PER_PAGE,
    MAX_LOCK_TIMEOUT_SECONDS,
    MAX_PARSE_WORKERS,
    MAX_PER_PAGE,
)
from seclog.exceptions import ConfigurationError
from seclog.utils.file_helpers import get_app_dir, load_validated_json, set_secure_permissions


# =============================================================================
# Platform-specific defaults
# =============================================================================


def _get_platform_log_dir() -> str:
    """Get platform-appropriate base log directory following OS conventions.

    Returns:
        Platform-specific base log directory path (unexpanded).

    Platform conventions:
        - macOS: ~/Library/Logs
        - Linux: ~/.local/state (XDG Base Directory Specification for logs/state)
        - Windows: ~/AppData/Local
    """
    if sys.platform == "darwin":
        return "~/Library/Logs"
    elif sys.platform == "win32":
        return "~/AppData/Local"
    else:
        return os.environ.get("XDG_STATE_HOME", "~/.local/state")


# Default base log directory (platform-specific, follows OS conventions)
DEFAULT_LOG_DIR = _get_platform_log_dir()


def get_config_path(override: str | Path | None = None) -> Path:
    """Resolve the config file path.

    Precedence: explicit override, then SECLOG_CONFIG, then the app dir.

    Args:
        override: Path given on the command line, if any.

    Returns:
        Path to the config JSON file (may not exist).
    """
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return get_app_dir() / CONFIG_FILENAME


# =============================================================================
# Sections
# =============================================================================


class StorageConfig(BaseModel):
    """Where security logs live.

    Layout:
        <log_root>/
        ├── security-YYYY-MM-DD.log      # active daily files (appended only)
        └── archived/
            └── security-logs-YYYY-MM.zip

    Attributes:
        log_root: Directory holding the daily security log files.
        environment: Environment label written by the log writer.
    """

    log_root: str = Field(
        default=f"{DEFAULT_LOG_DIR}/{APP_NAME}/security",
        min_length=1,
    )
    environment: str = Field(default=DEFAULT_ENVIRONMENT, pattern=r"^\w+$")

    @property
    def log_root_path(self) -> Path:
        """Expanded log root directory."""
        return Path(self.log_root).expanduser()

    @property
    def archive_dir_path(self) -> Path:
        """Expanded archive directory (<log_root>/archived)."""
        return self.log_root_path / ARCHIVE_DIRNAME


class ArchiveConfig(BaseModel):
    """Monthly archive settings.

    Attributes:
        format: Container for new archives. "zip" is a deflated zip archive;
            "gz" is a gzip-compressed tar archive. Both are always readable.
        lock_timeout_seconds: How long a writer waits for another writer on
            the same archive before giving up on that month for this run.
        retention_months: Archives older than this many months are removed by
            prune. None disables pruning.
    """

    format: Literal["zip", "gz"] = "zip"
    lock_timeout_seconds: float = Field(
        default=DEFAULT_LOCK_TIMEOUT_SECONDS,
        ge=0,
        le=MAX_LOCK_TIMEOUT_SECONDS,
    )
    retention_months: int | None = Field(default=None, ge=1)


class SchedulerConfig(BaseModel):
    """Daily archival trigger.

    Attributes:
        enabled: Run archival automatically while the API server is up.
        daily_at: Local time of day to run, "HH:MM".
    """

    enabled: bool = True
    daily_at: str = Field(default=DEFAULT_DAILY_AT, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class ApiConfig(BaseModel):
    """HTTP API settings."""

    host: str = DEFAULT_API_HOST
    port: int = Field(default=DEFAULT_API_PORT, ge=1, le=65535)
    default_per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE)
    max_per_page: int = Field(default=MAX_PER_PAGE, ge=1)


class ReaderConfig(BaseModel):
    """Read path tuning.

    Attributes:
        parse_workers: Threads used to parse independent daily files.
            Results are identical for any value.
    """

    parse_workers: int = Field(default=1, ge=1, le=MAX_PARSE_WORKERS)


class LoggingConfig(BaseModel):
    """Operational logging configuration.

    Attributes:
        log_dir: Directory for the operational system log (system.jsonl).
        log_level: Console level (DEBUG or INFO).
    """

    log_dir: str = Field(default=f"{DEFAULT_LOG_DIR}/{APP_NAME}", min_length=1)
    log_level: Literal["DEBUG", "INFO"] = "INFO"

    @property
    def system_log_path(self) -> Path:
        """Path to system.jsonl."""
        return Path(self.log_dir).expanduser() / "system.jsonl"


# =============================================================================
# Root
# =============================================================================


class AppConfig(BaseModel):
    """Main application configuration for seclog.

    Attributes:
        storage: Daily log and archive locations.
        archive: Archive container and retention settings.
        scheduler: Daily archival trigger.
        api: HTTP API settings.
        reader: Read path tuning.
        logging: Operational logging.
    """

    storage: StorageConfig = Field(default_factory=StorageConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file.

        Creates parent directories if they don't exist and restricts
        permissions to the owner.

        Args:
            config_path: Path where the config JSON file should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)
        set_secure_permissions(config_path.parent, is_directory=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)

        set_secure_permissions(config_path)

    @classmethod
    def load_from_files(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config JSON file.

        Returns:
            AppConfig instance with loaded configuration.

        Raises:
            ConfigurationError: If config file is invalid.
        """
        try:
            return load_validated_json(
                config_path,
                cls,
                file_type="config",
                recovery_hint=f"Fix the file or run '{APP_NAME} config init --force'.",
                encoding="utf-8",
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def load_or_default(cls, config_path: Path) -> "AppConfig":
        """Load configuration, falling back to defaults when the file is absent.

        Raises:
            ConfigurationError: If the file exists but is invalid.
        """
        if not config_path.exists():
            return cls()
        return cls.load_from_files(config_path)
