"""Generation state: image input, status model and result types."""

from __future__ import annotations

import base64
import binascii
import mimetypes
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from aerialdirector.errors import InvalidImageError

SUPPORTED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/webp",
        "image/heic",
        "image/heif",
        "image/gif",
    }
)


@dataclass(frozen=True)
class ImageReference:
    """Reference photo captured from user input.

    Attributes:
        data: Raw image bytes
        mime_type: Media type, e.g. "image/jpeg"
    """

    data: bytes = field(repr=False)
    mime_type: str

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str) -> "ImageReference":
        """Build from transport-encoded bytes.

        Accepts either bare base64 or a `data:<type>;base64,<payload>` URL, in
        which case the payload after the comma is used.
        """
        payload = (encoded or "").strip()
        if payload.startswith("data:") and "," in payload:
            payload = payload.split(",", 1)[1]
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidImageError("Image data is not valid base64") from exc
        return cls(data=raw, mime_type=(mime_type or "").strip().lower())

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "ImageReference":
        guessed = mime_type or mimetypes.guess_type(path.name)[0] or ""
        return cls(data=path.read_bytes(), mime_type=guessed.lower())

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def validate(self) -> None:
        """Raise InvalidImageError unless the image is non-empty and a supported type."""
        if not self.data:
            raise InvalidImageError("Image is empty")
        if self.mime_type not in SUPPORTED_IMAGE_TYPES:
            raise InvalidImageError(f"Unsupported image type: {self.mime_type or 'unknown'}")


class GenerationStep(str, Enum):
    """Step of the generation workflow.

    Attributes:
        IDLE: No active request
        ANALYZING: Director prompt being composed
        GENERATING: Video job being submitted
        POLLING: Video job submitted, waiting for completion
        COMPLETED: Video ready (terminal)
        ERROR: Generation failed (terminal)
    """

    IDLE = "idle"
    ANALYZING = "analyzing"
    GENERATING = "generating"
    POLLING = "polling"
    COMPLETED = "completed"
    ERROR = "error"


class ErrorKind(str, Enum):
    CREDENTIAL_EXPIRED = "credential_expired"
    CREDENTIAL_MISSING = "credential_missing"
    TIMEOUT = "timeout"
    CAPTURE_FAILED = "capture_failed"
    INTERRUPTED = "interrupted"


_BUSY_STEPS = frozenset({GenerationStep.ANALYZING, GenerationStep.GENERATING, GenerationStep.POLLING})
_TERMINAL_STEPS = frozenset({GenerationStep.COMPLETED, GenerationStep.ERROR})


@dataclass(frozen=True)
class GenerationStatus:
    step: GenerationStep
    message: str = ""
    progress: Optional[float] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def is_busy(self) -> bool:
        return self.step in _BUSY_STEPS

    @property
    def is_terminal(self) -> bool:
        return self.step in _TERMINAL_STEPS

    def with_message(self, message: str) -> "GenerationStatus":
        return GenerationStatus(
            step=self.step,
            message=message,
            progress=self.progress,
            error_kind=self.error_kind,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step.value,
            "message": self.message,
            "progress": self.progress,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


IDLE_STATUS = GenerationStatus(step=GenerationStep.IDLE)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful generation.

    Attributes:
        video_url: Playable locator for the downloaded video
        director_prompt: Prompt that produced the video
        video_path: Local file holding the video bytes
    """

    video_url: str
    director_prompt: str
    video_path: Optional[Path] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["video_path"] = str(self.video_path) if self.video_path else None
        return data
