"""Main CLI entry point for seclog.

Defines the CLI group and registers all subcommands.

Commands:
    archive - Monthly archives (run, list, show, prune)
    config  - Configuration management (show, path, init)
    logs    - Active security logs (show, stats)
    serve   - Start the HTTP API server

Subcommand help:
    seclog COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from seclog import __version__

from .commands.archive import archive
from .commands.config import config
from .commands.logs import logs
from .commands.serve import serve


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Quick Start:
  seclog config init --log-root /var/log/app    Write a config file
  seclog logs show                              Newest active records
  seclog archive run                            Archive past months now
  seclog serve                                  Start the API (with daily archival)

Config file location (first match wins):
  --config PATH, $SECLOG_CONFIG, then 'seclog config path'
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to config file",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, config_path: str | None) -> None:
    """seclog: Security log archival and retrieval."""
    if version:
        click.echo(f"seclog {__version__}")
        sys.exit(0)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(archive)
cli.add_command(config)
cli.add_command(logs)
cli.add_command(serve)


def main() -> None:
    """CLI entry point."""
    cli()
