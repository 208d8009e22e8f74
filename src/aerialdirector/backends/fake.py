"""Deterministic stand-in for the Gemini API used in development and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from aerialdirector.backends.protocols import VideoOperation
from aerialdirector.workflows.state import ImageReference

__all__ = ["FAKE_DIRECTOR_PROMPT", "FAKE_VIDEO_BYTES", "FakeGeminiBackend"]

FAKE_DIRECTOR_PROMPT = (
    "Wide aerial establishing shot of the scene at golden hour, the drone glides "
    "forward while descending, orbits the subject and ends on a slow pull-away."
)

# ISO BMFF header ("ftyp" box) so players recognise the payload as MP4.
FAKE_VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"

_DEFAULT_URI = object()


@dataclass
class FakeGeminiBackend:
    """Fake backend that completes video jobs after a fixed number of polls.

    Set `description` to "" or None to simulate an empty model answer, set
    `video_uri` to None to simulate a job finishing without a locator, and
    set `submit_error` to make `generate_videos` raise.
    """

    description: str | None = FAKE_DIRECTOR_PROMPT
    polls_until_done: int = 2
    video_bytes: bytes = FAKE_VIDEO_BYTES
    video_uri: Any = _DEFAULT_URI
    operation_error: str | None = None
    submit_error: Exception | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)
    status_checks: int = 0
    downloads: list[str] = field(default_factory=list)

    async def generate_content(
        self,
        *,
        model: str,
        image: ImageReference,
        system_instruction: str,
        temperature: float,
        top_p: float,
        top_k: int,
    ) -> str | None:
        self.calls.append(
            {
                "op": "generate_content",
                "model": model,
                "mime_type": image.mime_type,
                "system_instruction": system_instruction,
                "temperature": temperature,
                "top_p": top_p,
                "top_k": top_k,
            }
        )
        return self.description

    async def generate_videos(
        self,
        *,
        model: str,
        prompt: str,
        image: ImageReference,
        aspect_ratio: str,
        resolution: str,
        number_of_videos: int,
    ) -> VideoOperation:
        self.calls.append(
            {
                "op": "generate_videos",
                "model": model,
                "prompt": prompt,
                "mime_type": image.mime_type,
                "aspect_ratio": aspect_ratio,
                "resolution": resolution,
                "number_of_videos": number_of_videos,
            }
        )
        if self.submit_error is not None:
            raise self.submit_error
        name = f"models/{model}/operations/fake-{len(self.calls)}"
        return self._operation(name, done=self.polls_until_done <= 0)

    async def get_videos_operation(self, operation: VideoOperation) -> VideoOperation:
        self.status_checks += 1
        return self._operation(operation.name, done=self.status_checks >= self.polls_until_done)

    async def download(self, uri: str) -> bytes:
        self.downloads.append(uri)
        return self.video_bytes

    def _operation(self, name: str, *, done: bool) -> VideoOperation:
        if not done:
            return VideoOperation(name=name)
        uri = self.video_uri
        if uri is _DEFAULT_URI:
            uri = f"https://fake.gemini.local/v1beta/files/{name.rsplit('/', 1)[-1]}:download?alt=media"
        return VideoOperation(name=name, done=True, video_uri=uri, error=self.operation_error)
