"""Aerial Director command-line interface."""

from __future__ import annotations

import click

from aerialdirector.app_version import get_app_version
from aerialdirector.observability import init_observability


@click.group()
@click.version_option(version=get_app_version(), prog_name="aerialdirector")
def cli() -> None:
    """Aerial Director - reference photo to drone-shot video."""
    init_observability(log_format="console")


def _register_commands() -> None:
    from aerialdirector.cli import config, generate, serve

    config.register(cli)
    generate.register(cli)
    serve.register(cli)


_register_commands()


if __name__ == "__main__":
    cli()
