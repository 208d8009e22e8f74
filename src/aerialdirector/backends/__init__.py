"""Hosted model provider boundary.

App logic depends on the small `GenerativeBackend` protocol; `GeminiClient`
talks to the real service and `FakeGeminiBackend` stands in for it.
"""

from __future__ import annotations

from aerialdirector.backends.factory import get_backend
from aerialdirector.backends.fake import FakeGeminiBackend
from aerialdirector.backends.gemini import GeminiAPIError, GeminiClient
from aerialdirector.backends.protocols import GenerativeBackend, VideoOperation

__all__ = [
    "FakeGeminiBackend",
    "GeminiAPIError",
    "GeminiClient",
    "GenerativeBackend",
    "VideoOperation",
    "get_backend",
]
