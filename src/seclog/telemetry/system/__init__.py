"""System operational logging.

Provides the system logger for operational events (archive runs,
per-file failures, scheduler lifecycle).
"""

from seclog.telemetry.system.system_logger import (
    ConsoleFormatter,
    configure_system_logger_file,
    get_system_logger,
    log_system_event,
)

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "log_system_event",
]
