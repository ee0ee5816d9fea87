"""Application-wide constants for seclog.

Constants that define application behavior.
For user-configurable settings per deployment, see config.py.
"""

import re

__all__ = [
    # Application identity
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    # File naming
    "DAILY_FILE_PATTERN",
    "DAILY_FILE_PREFIX",
    "ARCHIVE_DIRNAME",
    "ARCHIVE_ID_PATTERN",
    "ARCHIVE_NAME_PREFIX",
    "ARCHIVE_EXTENSIONS",
    "LOCK_SUFFIX",
    # Line format
    "LINE_PATTERN",
    "LINE_DATETIME_FORMAT",
    # Defaults
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_PER_PAGE",
    "MAX_PER_PAGE",
    "DEFAULT_API_HOST",
    "DEFAULT_API_PORT",
    "DEFAULT_DAILY_AT",
    "DEFAULT_LOCK_TIMEOUT_SECONDS",
    "MAX_LOCK_TIMEOUT_SECONDS",
    "LOCK_POLL_INTERVAL_SECONDS",
    "MAX_PARSE_WORKERS",
]

# =============================================================================
# Application identity
# =============================================================================

APP_NAME = "seclog"

# Environment variable that overrides the config file location
CONFIG_ENV_VAR = "SECLOG_CONFIG"

CONFIG_FILENAME = "config.json"

# =============================================================================
# File naming (compatible with existing archives and readers)
# =============================================================================

DAILY_FILE_PREFIX = "security-"

# security-YYYY-MM-DD.log; group 1 is the month key, group 2 the day
DAILY_FILE_PATTERN = re.compile(r"^security-(\d{4}-\d{2})-(\d{2})\.log$")

ARCHIVE_DIRNAME = "archived"

ARCHIVE_NAME_PREFIX = "security-logs-"

# Validated before any filesystem access, rejects traversal by construction
ARCHIVE_ID_PATTERN = re.compile(r"^security-logs-(\d{4}-\d{2})\.(zip|gz)$")

ARCHIVE_EXTENSIONS: tuple[str, ...] = ("zip", "gz")

# Sidecar lock file next to each archive: security-logs-2025-01.zip.lock
LOCK_SUFFIX = ".lock"

# =============================================================================
# Line format: [YYYY-MM-DD HH:MM:SS] <environment>.<level>: <message>[ <json>]
# =============================================================================

LINE_PATTERN = re.compile(r"^\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})\]\s+(\w+)\.(\w+):\s+(.*)$")

LINE_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_ENVIRONMENT = "production"

# Page size used by the admin panel
DEFAULT_PER_PAGE = 25
MAX_PER_PAGE = 500

DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8780

# Daily archival run (local time, HH:MM)
DEFAULT_DAILY_AT = "01:00"

# Per-archive writer lock
DEFAULT_LOCK_TIMEOUT_SECONDS = 30.0
MAX_LOCK_TIMEOUT_SECONDS = 600.0
LOCK_POLL_INTERVAL_SECONDS = 0.05

MAX_PARSE_WORKERS = 32
