"""Generation endpoints: upload a photo, watch the status, fetch the video."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import FileResponse

from aerialdirector.api.dependencies import get_generation_session
from aerialdirector.api.errors import to_http_exception
from aerialdirector.api.schemas import (
    ErrorResponse,
    GenerationResponse,
    ResultModel,
    StartGenerationRequest,
    StatusModel,
)
from aerialdirector.api.session import GenerationSession
from aerialdirector.errors import DomainError
from aerialdirector.observability.logging import get_logger
from aerialdirector.workflows.state import GenerationStep, ImageReference

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/generations", tags=["Generations"])

VIDEO_ROUTE_NAME = "get_current_video"


def _build_response(request: Request, session: GenerationSession) -> GenerationResponse:
    current = session.status
    result = None
    if current.step is GenerationStep.COMPLETED and session.result is not None:
        result = ResultModel(
            video_url=str(request.url_for(VIDEO_ROUTE_NAME)),
            director_prompt=session.result.director_prompt,
        )
    return GenerationResponse(status=StatusModel(**current.to_dict()), result=result)


@router.post(
    "",
    response_model=GenerationResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        412: {"model": ErrorResponse},
    },
)
async def start_generation(
    body: StartGenerationRequest,
    request: Request,
    session: GenerationSession = Depends(get_generation_session),
) -> GenerationResponse:
    """Start a generation for the uploaded photo and return immediately."""
    try:
        image = ImageReference.from_base64(body.image_base64, body.mime_type)
        session.start(image)
    except DomainError as exc:
        raise to_http_exception(exc) from exc

    logger.info("generation_started", mime_type=image.mime_type, bytes=len(image.data))
    return _build_response(request, session)


@router.get("/current", response_model=GenerationResponse)
async def get_current_generation(
    request: Request,
    session: GenerationSession = Depends(get_generation_session),
) -> GenerationResponse:
    return _build_response(request, session)


@router.delete(
    "/current",
    response_model=GenerationResponse,
    responses={409: {"model": ErrorResponse}},
)
async def clear_current_generation(
    request: Request,
    session: GenerationSession = Depends(get_generation_session),
) -> GenerationResponse:
    """Drop the photo/result and return to idle."""
    try:
        session.clear()
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return _build_response(request, session)


@router.get("/current/video", name=VIDEO_ROUTE_NAME, responses={404: {"model": ErrorResponse}})
async def get_current_video(
    download: bool = False,
    session: GenerationSession = Depends(get_generation_session),
) -> FileResponse:
    """Stream the finished MP4; `download=true` serves it as an attachment."""
    result = session.result
    if result is None or result.video_path is None or not result.video_path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "video_not_ready", "detail": "No finished video available"},
        )
    filename = "aerial-director.mp4" if download else None
    return FileResponse(result.video_path, media_type="video/mp4", filename=filename)
