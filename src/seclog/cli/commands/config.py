"""Config command group for seclog CLI.

Provides configuration management subcommands.
"""

from __future__ import annotations

__all__ = ["config"]

import json
import sys
from pathlib import Path

import click

from seclog.config import AppConfig
from seclog.exceptions import ConfigurationError
from seclog.utils.cli import get_context_config_path

from ..styling import style_dim, style_error, style_header, style_success


def _load_raw_config(config_path: Path) -> dict[str, object]:
    """Load raw JSON from config file without Pydantic defaults."""
    with open(config_path, encoding="utf-8") as f:
        result: dict[str, object] = json.load(f)
        return result


def _is_default(raw_config: dict[str, object], *keys: str) -> bool:
    """Check if a config path is missing from raw file (using default).

    Args:
        raw_config: Raw JSON dict from file.
        *keys: Path to the value (e.g., "archive", "format").

    Returns:
        True if the key path is missing from raw config.
    """
    current: object = raw_config
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return True
        current = current[key]
    return False


def _default_marker() -> str:
    """Return styled (default) marker."""
    return click.style(" (default)", dim=True)


@click.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Display current configuration.

    Values marked (default) are not in the config file - using built-in defaults.
    """
    config_file_path = get_context_config_path(ctx)

    try:
        loaded_config = AppConfig.load_or_default(config_file_path)
        raw_config = _load_raw_config(config_file_path) if config_file_path.exists() else {}
    except (ConfigurationError, OSError, ValueError) as e:
        click.echo("\n" + style_error(f"Error: {e}"), err=True)
        sys.exit(1)

    if as_json:
        config_dict = loaded_config.model_dump(mode="json")
        config_dict["_computed"] = {
            "config_file": str(config_file_path),
            "archive_dir": str(loaded_config.storage.archive_dir_path),
            "system_log": str(loaded_config.logging.system_log_path),
        }
        click.echo(json.dumps(config_dict, indent=2))
        return

    click.echo("\nseclog configuration:\n")

    for section_name, section in loaded_config:
        header = style_header(section_name.capitalize())
        click.echo(header + (_default_marker() if _is_default(raw_config, section_name) else ""))
        for field_name, value in section:
            marker = _default_marker() if _is_default(raw_config, section_name, field_name) else ""
            click.echo(f"  {field_name}: {value}{marker}")
        click.echo()

    click.echo(f"Archive dir: {loaded_config.storage.archive_dir_path}")
    click.echo(f"Config file: {config_file_path}")
    if not config_file_path.exists():
        click.echo(style_dim("(file does not exist - run 'seclog config init' to create)"))


@config.command("path")
@click.pass_context
def config_path_cmd(ctx: click.Context) -> None:
    """Show config file path.

    Resolved from --config, then SECLOG_CONFIG, then the OS-appropriate
    application directory.
    """
    path = get_context_config_path(ctx)
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist - run 'seclog config init' to create)", err=True)


@config.command("init")
@click.option("--log-root", help="Directory holding the daily security log files")
@click.option("--format", "archive_format", type=click.Choice(["zip", "gz"]), help="Archive format")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def config_init(
    ctx: click.Context,
    log_root: str | None,
    archive_format: str | None,
    force: bool,
) -> None:
    """Write a config file with default values."""
    path = get_context_config_path(ctx)
    if path.exists() and not force:
        click.echo(style_error(f"Config already exists at {path}"), err=True)
        click.echo("Use --force to overwrite.", err=True)
        sys.exit(1)

    new_config = AppConfig()
    if log_root:
        new_config.storage.log_root = log_root
    if archive_format:
        new_config.archive.format = archive_format  # type: ignore[assignment]

    try:
        new_config.save_to_file(path)
    except OSError as e:
        click.echo(style_error(f"Failed to write config: {e}"), err=True)
        sys.exit(1)

    click.echo(style_success(f"Configuration written to {path}"))
