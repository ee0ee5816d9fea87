"""Shared helpers for CLI commands.

Commands read the --config path from the click context object set up by the
root group and load configuration from it.
"""

from __future__ import annotations

__all__ = [
    "get_context_config_path",
    "load_config_or_exit",
]

from pathlib import Path

import click

from seclog.config import AppConfig, get_config_path
from seclog.exceptions import ConfigurationError
from seclog.telemetry.system import configure_system_logger_file


def get_context_config_path(ctx: click.Context) -> Path:
    """Config path from the root group's --config option (or the default)."""
    obj = ctx.find_root().obj or {}
    return get_config_path(obj.get("config_path"))


def load_config_or_exit(ctx: click.Context) -> AppConfig:
    """Load configuration, defaulting when the file is absent.

    Also attaches the system log file handler for the configured log_dir.

    Returns:
        AppConfig instance.

    Raises:
        click.ClickException: If the config file exists but is invalid.
    """
    config_path = get_context_config_path(ctx)
    try:
        config = AppConfig.load_or_default(config_path)
    except ConfigurationError as e:
        raise click.ClickException(f"Failed to load configuration: {e}") from e
    configure_system_logger_file(config.logging.system_log_path, log_level=config.logging.log_level)
    return config
