"""Serve command for seclog CLI.

Runs the security log HTTP API with uvicorn. The daily archival scheduler
runs inside the server process when scheduler.enabled is set.
"""

from __future__ import annotations

__all__ = ["serve"]

import click
import uvicorn

from seclog.api.server import create_api_app
from seclog.utils.cli import load_config_or_exit

from ..styling import style_label


@click.command()
@click.option("--host", default=None, help="Bind address (default: api.host)")
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="Port (default: api.port)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the security log API server."""
    config = load_config_or_exit(ctx)
    bind_host = host or config.api.host
    bind_port = port or config.api.port

    click.echo(style_label("Serving") + f" http://{bind_host}:{bind_port}/api/security-logs")
    if config.scheduler.enabled:
        click.echo(style_label("Daily archival") + f" {config.scheduler.daily_at}")

    app = create_api_app(config)
    server_config = uvicorn.Config(
        app,
        host=bind_host,
        port=bind_port,
        log_config=None,
        ws="none",
    )
    uvicorn.Server(server_config).run()
