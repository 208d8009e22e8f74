"""Protocol interface for the hosted generative model service.

Kept small so the prompt composer and video job client depend on this
boundary instead of HTTP details.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from aerialdirector.workflows.state import ImageReference


@dataclass(frozen=True)
class VideoOperation:
    """Handle to an asynchronous video generation job.

    Attributes:
        name: Operation resource name used to re-fetch status
        done: True once the hosted job has finished (successfully or not)
        video_uri: Locator of the first generated video, when present
        error: Error message reported by a finished job
    """

    name: str
    done: bool = False
    video_uri: str | None = None
    error: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "VideoOperation":
        """Parse a long-running operation resource.

        The video locator lives at
        `response.generateVideoResponse.generatedSamples[0].video.uri`.
        """
        response = payload.get("response") or {}
        video_response = response.get("generateVideoResponse") or {}
        samples = video_response.get("generatedSamples") or []
        video_uri = None
        if samples and isinstance(samples[0], Mapping):
            video = samples[0].get("video") or {}
            video_uri = video.get("uri") or None

        error = payload.get("error")
        error_message = None
        if isinstance(error, Mapping):
            error_message = str(error.get("message") or error.get("status") or "unknown error")
        elif error:
            error_message = str(error)

        return cls(
            name=str(payload.get("name") or ""),
            done=bool(payload.get("done", False)),
            video_uri=video_uri,
            error=error_message,
        )


class GenerativeBackend(Protocol):
    async def generate_content(
        self,
        *,
        model: str,
        image: ImageReference,
        system_instruction: str,
        temperature: float,
        top_p: float,
        top_k: int,
    ) -> str | None: ...

    async def generate_videos(
        self,
        *,
        model: str,
        prompt: str,
        image: ImageReference,
        aspect_ratio: str,
        resolution: str,
        number_of_videos: int,
    ) -> VideoOperation: ...

    async def get_videos_operation(self, operation: VideoOperation) -> VideoOperation: ...

    async def download(self, uri: str) -> bytes: ...
