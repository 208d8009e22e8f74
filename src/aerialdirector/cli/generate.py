"""Generate command: photo in, drone-shot video out."""

from __future__ import annotations

import shutil
from functools import partial
from pathlib import Path

import anyio
import click
from rich.panel import Panel

from aerialdirector.cli.ui import console, print_status
from aerialdirector.config import get_settings
from aerialdirector.errors import DomainError
from aerialdirector.workflows.generation import build_workflow
from aerialdirector.workflows.state import ErrorKind, GenerationStep, ImageReference


@click.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--out",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Copy the finished MP4 here.",
)
@click.option("--mime-type", default=None, help="Override the detected image media type.")
@click.option("--api-key", default=None, help="Gemini API key (defaults to GEMINI_API_KEY).")
@click.option("--fake", is_flag=True, help="Use the deterministic fake provider.")
def generate(
    image: Path, out: Path | None, mime_type: str | None, api_key: str | None, fake: bool
) -> None:
    """Turn IMAGE into a vertical drone-shot video."""
    cfg = get_settings()
    if fake:
        cfg = cfg.model_copy(update={"gemini_provider": "fake"})

    try:
        reference = ImageReference.from_path(image, mime_type)
        reference.validate()
        workflow = build_workflow(cfg, api_key=api_key, listeners=[print_status])
    except DomainError as exc:
        raise click.ClickException(str(exc)) from exc

    final = anyio.run(partial(workflow.run, reference))

    if final.step is GenerationStep.ERROR:
        if final.error_kind is ErrorKind.CREDENTIAL_EXPIRED:
            console.print("Set a valid paid key with --api-key or GEMINI_API_KEY.")
        raise click.ClickException(final.message)

    result = workflow.result
    if result is None:
        raise click.ClickException("Generation finished without a result")

    console.print(Panel(result.director_prompt, title="Director prompt", expand=False))
    if out is not None and result.video_path is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(result.video_path, out)
        console.print(f"Saved video to {out}")
    else:
        console.print(f"Video: {result.video_url}")


def register(cli: click.Group) -> None:
    cli.add_command(generate)
