"""Helpers for turning domain errors into consistent API errors."""

from __future__ import annotations

from fastapi import HTTPException

from aerialdirector.errors import DomainError


def to_http_exception(err: DomainError) -> HTTPException:
    """Convert DomainError to HTTPException with consistent payload."""
    return HTTPException(
        status_code=err.status_code,
        detail={"error": err.error, "detail": str(err)},
    )
