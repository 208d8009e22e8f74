"""Factory for the hosted model backend (real vs fake)."""

from __future__ import annotations

from typing import Any

from aerialdirector.backends.fake import FakeGeminiBackend
from aerialdirector.backends.gemini import GeminiClient
from aerialdirector.backends.protocols import GenerativeBackend
from aerialdirector.config import effective_gemini_provider
from aerialdirector.errors import ConfigurationError


def get_backend(settings: Any, *, api_key: str | None = None) -> GenerativeBackend:
    """Return a deterministic fake in fake mode, otherwise a real Gemini client.

    `api_key` overrides `settings.gemini_api_key` (runtime-selected credential).
    """

    mode = effective_gemini_provider(settings)
    if mode == "off":
        raise ConfigurationError("Gemini provider is disabled (GEMINI_PROVIDER=off)")
    if mode == "fake":
        return FakeGeminiBackend(polls_until_done=int(getattr(settings, "fake_video_polls", 2)))

    return GeminiClient(
        api_key=api_key if api_key is not None else settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout=float(settings.http_timeout_s),
    )
