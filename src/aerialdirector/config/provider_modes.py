"""Provider mode helpers.

Rule:
- `GEMINI_PROVIDER` is the source of truth ("real" | "fake" | "off")
- `use_fake_providers=True` downgrades "real" to "fake" (but never
  overrides "off")
"""

from __future__ import annotations

from typing import Any, Literal

ProviderMode = Literal["real", "fake", "off"]


def _coerce_mode(value: object, *, default: ProviderMode) -> ProviderMode:
    """Best-effort normalize provider mode.

    Unknown/invalid values fall back to `default` (fail-closed when default="real").
    """
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in {"real", "fake", "off"}:
            return lowered  # type: ignore[return-value]
    return default


def _coerce_bool(value: object, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "y", "on"}:
            return True
        if lowered in {"0", "false", "no", "n", "off"}:
            return False
    return default


def effective_gemini_provider(settings: Any) -> ProviderMode:
    mode = _coerce_mode(getattr(settings, "gemini_provider", "real"), default="real")
    use_fake = _coerce_bool(getattr(settings, "use_fake_providers", False), default=False)
    if use_fake and mode == "real":
        return "fake"
    return mode
