"""structlog setup for the API server and the CLI.

Events are snake_case (`video_job_submitted`, `generation_completed`) with
keyword fields. API requests carry the `X-Request-ID` value on every event
logged while the request is handled, including the background generation
started by `POST /v1/generations`.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any, Literal, MutableMapping

import structlog

LogFormat = Literal["json", "console"]

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def _add_request_id(
    _logger: logging.Logger,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    request_id = request_id_var.get("")
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def _renderer(log_format: LogFormat) -> Any:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging(level: str = "INFO", log_format: LogFormat = "json") -> None:
    """Route structlog through stdlib logging at `level`.

    `json` suits the server; `console` keeps CLI stderr readable next to the
    rich status lines.
    """

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_request_id,
            structlog.processors.format_exc_info,
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)


def get_request_id() -> str:
    return request_id_var.get("")


logger = get_logger("aerialdirector")
