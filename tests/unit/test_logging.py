from __future__ import annotations

import pytest
import structlog

from aerialdirector.observability.logging import (
    _add_request_id,
    _renderer,
    configure_logging,
    get_logger,
    get_request_id,
    request_id_var,
)


def test_request_id_context_propagation() -> None:
    token = request_id_var.set("test-request-id")
    try:
        assert get_request_id() == "test-request-id"
    finally:
        request_id_var.reset(token)

    assert get_request_id() == ""


def test_request_id_processor_only_adds_when_set() -> None:
    assert _add_request_id(None, "info", {"event": "x"}) == {"event": "x"}

    token = request_id_var.set("abc")
    try:
        assert _add_request_id(None, "info", {"event": "x"}) == {"event": "x", "request_id": "abc"}
    finally:
        request_id_var.reset(token)


def test_configured_logger_accepts_structured_events() -> None:
    configure_logging("DEBUG")

    get_logger(__name__).info("video_job_poll", operation="op-1", poll=1)


def test_renderer_follows_log_format() -> None:
    assert isinstance(_renderer("json"), structlog.processors.JSONRenderer)
    assert isinstance(_renderer("console"), structlog.dev.ConsoleRenderer)


def test_console_format_accepts_structured_events() -> None:
    configure_logging("INFO", "console")
    try:
        get_logger(__name__).info("video_saved", path="/tmp/a.mp4", bytes=10)
    finally:
        configure_logging("INFO")


@pytest.mark.anyio
async def test_api_request_carries_request_id_header(async_client) -> None:
    resp = await async_client.get("/v1/credentials")

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
