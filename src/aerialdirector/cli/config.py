"""Configuration CLI commands."""

from __future__ import annotations

import click
from rich.table import Table

from aerialdirector.cli.ui import console, mask_secret
from aerialdirector.config import effective_gemini_provider, settings


@click.group()
def config() -> None:
    """Inspect configuration."""


@config.command("show")
def config_show() -> None:
    """Show key configuration settings."""
    table = Table(title="Aerial Director Configuration", show_lines=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Environment", settings.environment)
    table.add_row("Provider", effective_gemini_provider(settings))
    table.add_row("Gemini API Key", mask_secret(settings.gemini_api_key))
    table.add_row("Gemini Base URL", settings.gemini_base_url)
    table.add_row("Director Model", settings.director_model)
    table.add_row("Video Model", settings.video_model)
    table.add_row("Poll Interval (s)", f"{settings.video_poll_interval_s:g}")
    timeout = settings.video_poll_timeout_s
    table.add_row("Poll Timeout (s)", f"{timeout:g}" if timeout else "unbounded")
    table.add_row("Video Output Dir", settings.video_output_dir)
    table.add_row("API Host", settings.api_host)
    table.add_row("API Port", str(settings.api_port))
    table.add_row("Log Level", f"{settings.log_level} ({settings.log_format})")

    console.print(table)


def register(cli: click.Group) -> None:
    cli.add_command(config)
