"""Logs command group for seclog CLI.

Reads the active (unarchived) daily security log files directly from disk.
No running server required.
"""

from __future__ import annotations

__all__ = ["format_record", "logs"]

import json

import click

from seclog.constants import MAX_PER_PAGE
from seclog.engine.models import LogRecord
from seclog.engine.service import SecurityLogService
from seclog.utils.cli import load_config_or_exit

from ..styling import style_dim, style_header, style_label, style_level


def format_record(record: LogRecord) -> str:
    """Render one record as a single console line."""
    data = record.to_dict()
    line = f"[{data['datetime']}] {record.environment}.{style_level(record.level)}: {record.message}"
    if record.context:
        line += " " + style_dim(json.dumps(record.context, ensure_ascii=False))
    return line


def _page_footer(current_page: int, last_page: int, total: int) -> str:
    return style_dim(f"Page {current_page} of {max(last_page, 1)} ({total} records)")


@click.group()
def logs() -> None:
    """Active security log commands.

    Shows records from the current daily files, newest first.
    """
    pass


@logs.command("show")
@click.option("--page", "-p", default=1, type=click.IntRange(min=1), help="Page number (default: 1)")
@click.option(
    "--per-page",
    "-n",
    type=click.IntRange(min=1, max=MAX_PER_PAGE),
    default=None,
    help="Records per page (default: api.default_per_page)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def logs_show(ctx: click.Context, page: int, per_page: int | None, as_json: bool) -> None:
    """Show a page of active security log records."""
    config = load_config_or_exit(ctx)
    service = SecurityLogService.from_config(config)
    result = service.get_active_page(page=page, per_page=per_page or config.api.default_per_page)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    if not result.data:
        click.echo(style_dim("No log entries."))
        return

    for record in result.data:
        click.echo(format_record(record))
    click.echo()
    click.echo(_page_footer(result.current_page, result.last_page, result.total))


@logs.command("stats")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def logs_stats(ctx: click.Context, as_json: bool) -> None:
    """Show counts of active records and archives."""
    stats = SecurityLogService.from_config(load_config_or_exit(ctx)).get_statistics()

    if as_json:
        click.echo(json.dumps(stats.to_dict(), indent=2))
        return

    click.echo("\n" + style_header("Security Logs"))
    click.echo(style_label("Active records") + f" {stats.active_count}")
    click.echo(style_label("Archives") + f" {stats.archived_count}")
    click.echo(style_label("Archived size") + f" {stats.archived_size_human}")

    if stats.level_distribution:
        click.echo()
        click.echo(style_label("Levels"))
        for level, count in sorted(stats.level_distribution.items(), key=lambda item: (-item[1], item[0])):
            click.echo(f"  {level:10} {count}")
