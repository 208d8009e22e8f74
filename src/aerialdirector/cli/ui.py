"""Shared CLI UI helpers (Rich formatting)."""

from __future__ import annotations

from rich.console import Console

from aerialdirector.workflows.state import GenerationStatus, GenerationStep

console = Console()

_STEP_COLORS = {
    GenerationStep.IDLE: "grey62",
    GenerationStep.ANALYZING: "cyan",
    GenerationStep.GENERATING: "magenta",
    GenerationStep.POLLING: "magenta",
    GenerationStep.COMPLETED: "green",
    GenerationStep.ERROR: "red",
}


def format_step(step: GenerationStep) -> str:
    """Return colorized step label for terminal output."""
    color = _STEP_COLORS.get(step, "white")
    return f"[{color}]{step.value}[/{color}]"


def print_status(status: GenerationStatus) -> None:
    console.print(f"{format_step(status.step)} {status.message}")


def mask_secret(value: str) -> str:
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}...{value[-4:]}"
