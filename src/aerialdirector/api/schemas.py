"""Pydantic request/response models for the HTTP API."""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Machine-readable error code")
    detail: Optional[str] = Field(None, description="Human-readable error detail")


class HealthResponse(BaseModel):
    status: str
    version: str
    provider_mode: str
    credential_selected: bool


class CredentialRequest(BaseModel):
    api_key: str = Field(..., min_length=1, max_length=512, description="Hosted model API key")


class CredentialResponse(BaseModel):
    selected: bool


class StartGenerationRequest(BaseModel):
    image_base64: str = Field(
        ...,
        min_length=1,
        description="Base64 image bytes (a data: URL is accepted too)",
    )
    mime_type: str = Field(..., max_length=64, description="Image media type, e.g. image/jpeg")


class StatusModel(BaseModel):
    step: str
    message: str = ""
    progress: Optional[float] = None
    error_kind: Optional[str] = None


class ResultModel(BaseModel):
    video_url: str = Field(..., description="Playable URL of the finished video")
    director_prompt: str


class GenerationResponse(BaseModel):
    status: StatusModel
    result: Optional[ResultModel] = None
