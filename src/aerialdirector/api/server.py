"""FastAPI application for the Aerial Director API."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Awaitable, Callable
from uuid import uuid4

from fastapi import FastAPI, HTTPException
from fastapi.requests import Request
from fastapi.responses import JSONResponse, Response

from aerialdirector.api import routes
from aerialdirector.api.errors import to_http_exception
from aerialdirector.api.session import CredentialStore, GenerationSession
from aerialdirector.app_version import get_app_version
from aerialdirector.config import effective_gemini_provider, settings
from aerialdirector.errors import DomainError
from aerialdirector.observability.logging import logger, request_id_var


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the process-local credential store and generation session."""
    from aerialdirector.observability import init_observability

    init_observability()
    logger.info("api_starting", provider_mode=effective_gemini_provider(settings))

    credentials = CredentialStore(settings.gemini_api_key)
    app.state.credentials = credentials
    app.state.generation_session = GenerationSession(settings, credentials)

    yield

    await app.state.generation_session.aclose()
    logger.info("api_stopped")


app = FastAPI(
    title="Aerial Director API",
    description="Reference photo to vertical drone-shot video",
    version=get_app_version(),
    lifespan=lifespan,
)


@app.middleware("http")
async def request_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Manage the X-Request-ID header and contextvar propagation."""

    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    token = request_id_var.set(request_id)
    start = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "request_complete",
        path=str(request.url.path),
        method=request.method,
        status=response.status_code,
        duration_ms=round(duration_ms, 2),
        request_id=request_id,
    )
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return consistent error envelope."""
    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error", "http_error")
        detail = detail.get("detail", detail)
    else:
        error_code = "http_error"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_code, "detail": detail},
        headers=exc.headers,
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    return await http_exception_handler(request, to_http_exception(exc))


app.include_router(routes.health.router)
app.include_router(routes.credentials.router)
app.include_router(routes.generations.router)


__all__ = ["app"]
