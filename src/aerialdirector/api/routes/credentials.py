"""Credential selection endpoints.

Stand-in for the hosted environment's key picker: the browser UI lets the
user (re)select a paid API key, here a client PUTs it. The key is never
echoed back.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from aerialdirector.api.dependencies import get_credentials
from aerialdirector.api.schemas import CredentialRequest, CredentialResponse
from aerialdirector.api.session import CredentialStore

router = APIRouter(prefix="/v1/credentials", tags=["Credentials"])


@router.get("", response_model=CredentialResponse)
async def get_credential_state(
    credentials: CredentialStore = Depends(get_credentials),
) -> CredentialResponse:
    return CredentialResponse(selected=credentials.selected)


@router.put("", response_model=CredentialResponse)
async def select_credential(
    body: CredentialRequest,
    credentials: CredentialStore = Depends(get_credentials),
) -> CredentialResponse:
    credentials.select(body.api_key)
    return CredentialResponse(selected=credentials.selected)


@router.delete("", response_model=CredentialResponse)
async def clear_credential(
    credentials: CredentialStore = Depends(get_credentials),
) -> CredentialResponse:
    credentials.clear()
    return CredentialResponse(selected=False)
