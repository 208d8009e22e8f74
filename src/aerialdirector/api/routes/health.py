"""Health check endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from aerialdirector.api.dependencies import get_credentials
from aerialdirector.api.schemas import HealthResponse
from aerialdirector.api.session import CredentialStore
from aerialdirector.app_version import get_app_version
from aerialdirector.config import effective_gemini_provider, settings

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(credentials: CredentialStore = Depends(get_credentials)) -> dict[str, Any]:
    """Liveness probe; also reports provider mode and credential selection."""

    return {
        "status": "healthy",
        "version": get_app_version(),
        "provider_mode": effective_gemini_provider(settings),
        "credential_selected": credentials.selected,
    }
