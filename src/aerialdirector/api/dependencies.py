"""Common FastAPI dependencies for the Aerial Director API."""

from __future__ import annotations

from fastapi import Request

from aerialdirector.api.session import CredentialStore, GenerationSession

__all__ = ["get_credentials", "get_generation_session"]


def get_generation_session(request: Request) -> GenerationSession:
    """Return the process-wide generation session created at startup."""

    return request.app.state.generation_session


def get_credentials(request: Request) -> CredentialStore:
    """Return the process-wide credential store created at startup."""

    return request.app.state.credentials
