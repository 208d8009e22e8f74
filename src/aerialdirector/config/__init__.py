"""Aerial Director configuration module."""

from aerialdirector.config.provider_modes import ProviderMode, effective_gemini_provider
from aerialdirector.config.settings import Settings, get_settings, reset_settings_cache, settings

__all__ = [
    "settings",
    "Settings",
    "get_settings",
    "reset_settings_cache",
    "ProviderMode",
    "effective_gemini_provider",
]
