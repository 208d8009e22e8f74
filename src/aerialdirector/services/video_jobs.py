"""Veo video job submission, polling and download."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Sequence
from uuid import uuid4

import anyio

from aerialdirector.backends.protocols import GenerativeBackend, VideoOperation
from aerialdirector.errors import (
    CaptureFailedError,
    CredentialExpiredError,
    GenerationTimeoutError,
    VideoGenerationError,
)
from aerialdirector.observability.logging import get_logger
from aerialdirector.workflows.state import ImageReference

logger = get_logger(__name__)

__all__ = [
    "DownloadedVideo",
    "ProgressCallback",
    "StatusMessageRotation",
    "VideoJobClient",
]

DEFAULT_VIDEO_MODEL = "veo-3.1-fast-generate-preview"

# Output format is fixed: one vertical 720p clip per request.
ASPECT_RATIO = "9:16"
RESOLUTION = "720p"
NUMBER_OF_VIDEOS = 1

DEFAULT_POLL_INTERVAL_S = 8.0

CREDENTIAL_REJECTED_MARKER = "Requested entity was not found"

INITIALIZING_MESSAGE = "Initializing cinematic sequence..."
SUBMITTED_MESSAGE = "Aerial drone in flight... framing the shot."

# Cosmetic only: these say "still running" and nothing about real progress.
STATUS_MESSAGES: tuple[str, ...] = (
    "Stabilizing gimbal trajectory...",
    "Adjusting aperture for natural lighting...",
    "Calculating parallax between layers...",
    "Rendering cinematic motion blur...",
    "Ensuring fluid drone physics...",
    "Finalizing commercial-grade output...",
)

ProgressCallback = Callable[[str], None]


class StatusMessageRotation:
    """Cycle through a fixed pool of waiting messages by index."""

    def __init__(self, messages: Sequence[str] = STATUS_MESSAGES, *, start: int = 0) -> None:
        if not messages:
            raise ValueError("StatusMessageRotation requires at least one message")
        self._messages = tuple(messages)
        self._index = start % len(self._messages)

    def __iter__(self) -> "StatusMessageRotation":
        return self

    def __next__(self) -> str:
        message = self._messages[self._index]
        self._index = (self._index + 1) % len(self._messages)
        return message


@dataclass(frozen=True)
class DownloadedVideo:
    path: Path
    source_uri: str

    @property
    def url(self) -> str:
        return self.path.resolve().as_uri()


def _write_video(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def _is_credential_rejection(exc: Exception) -> bool:
    # Unknown model names also come back as 404 NOT_FOUND without the marker.
    return CREDENTIAL_REJECTED_MARKER in str(exc)


class VideoJobClient:
    """Submit an image-to-video job and wait for the finished clip.

    The wait is unbounded unless `poll_timeout_s` is set, in which case
    GenerationTimeoutError is raised once the deadline passes.
    """

    def __init__(
        self,
        backend: GenerativeBackend,
        *,
        output_dir: Path,
        model: str = DEFAULT_VIDEO_MODEL,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
        poll_timeout_s: float = 0.0,
        messages: StatusMessageRotation | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.backend = backend
        self.output_dir = Path(output_dir)
        self.model = model
        self.poll_interval_s = poll_interval_s
        self.poll_timeout_s = poll_timeout_s
        self.messages = messages or StatusMessageRotation()
        self._clock = clock
        self._sleep = sleep

    async def generate_video(
        self,
        prompt: str,
        image: ImageReference,
        on_update: ProgressCallback,
    ) -> DownloadedVideo:
        """Generate one video for `prompt` + `image` and download it locally.

        Raises:
            ValueError: If the prompt is empty
            CredentialExpiredError: If submission was rejected for the credential
            GenerationTimeoutError: If `poll_timeout_s` elapsed before completion
            VideoGenerationError: If the finished job reports an error
            CaptureFailedError: If the finished job has no video locator
        """
        if not (prompt or "").strip():
            raise ValueError("Director prompt cannot be empty")

        on_update(INITIALIZING_MESSAGE)
        operation = await self._submit(prompt, image)
        logger.info("video_job_submitted", operation=operation.name, model=self.model)
        on_update(SUBMITTED_MESSAGE)

        operation = await self._wait(operation, on_update)

        if operation.error:
            logger.error("video_job_failed", operation=operation.name, error=operation.error)
            raise VideoGenerationError(f"Video generation failed: {operation.error}")
        if not operation.video_uri:
            logger.error("video_job_missing_uri", operation=operation.name)
            raise CaptureFailedError("Video generation failed to return a URI.")

        return await self._download(operation.video_uri)

    async def _submit(self, prompt: str, image: ImageReference) -> VideoOperation:
        try:
            return await self.backend.generate_videos(
                model=self.model,
                prompt=prompt,
                image=image,
                aspect_ratio=ASPECT_RATIO,
                resolution=RESOLUTION,
                number_of_videos=NUMBER_OF_VIDEOS,
            )
        except Exception as exc:
            if _is_credential_rejection(exc):
                logger.warning("video_job_credential_rejected", model=self.model)
                raise CredentialExpiredError("API key was rejected or has expired") from exc
            raise

    async def _wait(self, operation: VideoOperation, on_update: ProgressCallback) -> VideoOperation:
        started = self._clock()
        polls = 0
        while not operation.done:
            elapsed = self._clock() - started
            if self.poll_timeout_s and elapsed >= self.poll_timeout_s:
                logger.error(
                    "video_job_timeout",
                    operation=operation.name,
                    polls=polls,
                    elapsed_s=round(elapsed, 1),
                )
                raise GenerationTimeoutError(
                    f"Video generation did not finish within {self.poll_timeout_s:g} seconds"
                )
            delay = self.poll_interval_s
            if self.poll_timeout_s:
                delay = min(delay, self.poll_timeout_s - elapsed)
            await self._sleep(delay)
            operation = await self.backend.get_videos_operation(operation)
            polls += 1
            logger.debug("video_job_poll", operation=operation.name, poll=polls, done=operation.done)
            on_update(next(self.messages))
        logger.info("video_job_done", operation=operation.name, polls=polls)
        return operation

    async def _download(self, uri: str) -> DownloadedVideo:
        data = await self.backend.download(uri)
        path = self.output_dir / f"aerial_{uuid4().hex}.mp4"
        await anyio.to_thread.run_sync(_write_video, path, data)
        logger.info("video_saved", path=str(path), bytes=len(data))
        return DownloadedVideo(path=path, source_uri=uri)
