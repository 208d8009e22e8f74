"""Aerial Director observability - structured logging.

Usage:
    from aerialdirector.observability import get_logger

    logger = get_logger(__name__)
    logger.info("video_job_submitted", operation=name)
"""

from __future__ import annotations

from aerialdirector.observability.logging import LogFormat, configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "init_observability",
]

_OBSERVABILITY_INITIALIZED = False


def init_observability(log_format: LogFormat | None = None) -> None:
    """Initialize logging for the process (idempotent).

    `log_format` overrides `settings.log_format` (the CLI passes "console").

    Not executed on import so `aerialdirector` can be used as a library without
    mutating global logging configuration.
    """
    global _OBSERVABILITY_INITIALIZED
    if _OBSERVABILITY_INITIALIZED:
        return
    from aerialdirector.config import settings

    configure_logging(settings.log_level, log_format or settings.log_format)
    _OBSERVABILITY_INITIALIZED = True
