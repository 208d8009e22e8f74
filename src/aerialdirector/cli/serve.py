"""Serve command: run the HTTP API."""

from __future__ import annotations

import click
import uvicorn

from aerialdirector.config import settings


@click.command()
@click.option("--host", default=None, help="Bind address (defaults to API_HOST).")
@click.option("--port", default=None, type=int, help="Bind port (defaults to API_PORT).")
def serve(host: str | None, port: int | None) -> None:
    """Run the Aerial Director API with uvicorn."""
    uvicorn.run(
        "aerialdirector.api.server:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=str(settings.log_level).lower(),
    )


def register(cli: click.Group) -> None:
    cli.add_command(serve)
