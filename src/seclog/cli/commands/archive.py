"""Archive command group for seclog CLI.

Provides monthly archive subcommands: run compaction, list and read
archives, and prune archives past the retention window.
"""

from __future__ import annotations

__all__ = ["archive"]

import json

import click

from seclog.constants import MAX_PER_PAGE
from seclog.engine.models import ArchiveError
from seclog.engine.service import SecurityLogService
from seclog.utils.cli import load_config_or_exit
from seclog.utils.file_helpers import format_size

from ..styling import style_dim, style_error, style_label, style_success, style_warning
from .logs import format_record


@click.group()
def archive() -> None:
    """Monthly archive commands.

    Daily files from past months are compressed into one archive per month
    (security-logs-YYYY-MM.zip or .gz) under <log_root>/archived.
    """
    pass


@archive.command("run")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def archive_run(ctx: click.Context, as_json: bool) -> None:
    """Archive all daily files from past months now.

    Files that fail are reported and left in place for the next run;
    the command still exits 0.
    """
    config = load_config_or_exit(ctx)
    report = SecurityLogService.from_config(config).archive_now()

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if not report.archived and not report.errors:
        click.echo("No logs to archive")
        return

    for item in report.archived:
        click.echo(f"{item.source} → {item.archive_name} ({format_size(item.size)})")

    if report.archived:
        click.echo(style_success(f"Archived {len(report.archived)} file(s)"))

    if report.errors:
        click.echo(style_warning(f"{len(report.errors)} file(s) could not be archived"), err=True)
        for error in report.errors:
            click.echo("  " + style_error(error), err=True)


@archive.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def archive_list(ctx: click.Context, as_json: bool) -> None:
    """List available archives, newest first."""
    archives = SecurityLogService.from_config(load_config_or_exit(ctx)).get_archive_list()

    if as_json:
        click.echo(json.dumps([item.to_dict() for item in archives], indent=2))
        return

    if not archives:
        click.echo(style_dim("No archives."))
        return

    click.echo(style_label("Archives") + f" {len(archives)}")
    for item in archives:
        click.echo(f"  {item.name}  {item.size_human:>10}  {item.created_at:%Y-%m-%d %H:%M:%S}")


@archive.command("show")
@click.argument("archive_id")
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
def archive_show(
    ctx: click.Context,
    archive_id: str,
    page: int,
    per_page: int | None,
    as_json: bool,
) -> None:
    """Show records from ARCHIVE_ID (e.g. security-logs-2025-01.zip)."""
    config = load_config_or_exit(ctx)
    service = SecurityLogService.from_config(config)
    result = service.get_archive_page(
        archive_id,
        page=page,
        per_page=per_page or config.api.default_per_page,
    )
    if isinstance(result, ArchiveError):
        raise click.ClickException(f"{result.message}: {archive_id}")

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    if not result.data:
        click.echo(style_dim(f"No log entries in {result.archive_name}."))
        return

    for record in result.data:
        click.echo(format_record(record))
    click.echo()
    click.echo(
        style_dim(
            f"{result.archive_name}: page {result.current_page} of {result.last_page} "
            f"({result.total} records)"
        )
    )


@archive.command("prune")
@click.option(
    "--months",
    "-m",
    type=click.IntRange(min=1),
    default=None,
    help="Months of archives to keep (default: archive.retention_months)",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def archive_prune(ctx: click.Context, months: int | None, yes: bool) -> None:
    """Delete archives older than the retention window.

    The current month and the previous MONTHS months are kept.
    """
    config = load_config_or_exit(ctx)
    retention = months if months is not None else config.archive.retention_months
    if retention is None:
        raise click.ClickException("No retention configured. Pass --months or set archive.retention_months.")

    if not yes:
        click.confirm(f"Delete archives older than {retention} month(s)?", abort=True)

    report = SecurityLogService.from_config(config).prune_archives(retention)

    if not report.pruned and not report.errors:
        click.echo(style_dim("No archives to prune."))
        return

    for name in report.pruned:
        click.echo(f"  pruned {name}")
    if report.pruned:
        click.echo(style_success(f"Pruned {len(report.pruned)} archive(s)"))
    for error in report.errors:
        click.echo(style_error(error), err=True)
