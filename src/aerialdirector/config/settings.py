"""Application settings using Pydantic."""

import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = Field(
        default=os.getenv("ENVIRONMENT", "development"),
        description="Deployment environment (development|production)",
    )

    # Hosted model service (Gemini / Veo)
    gemini_api_key: str = Field(
        default="",
        description="Initial API key for the hosted model service. Can be replaced at runtime.",
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_provider: Literal["real", "fake", "off"] = Field(
        default="real",
        description="Provider mode: real=call Gemini, fake=deterministic local stand-in, off=disable.",
    )
    use_fake_providers: bool = Field(
        default=False,
        description=(
            "Convenience switch: treat the hosted provider as fake in dev/tests. "
            "Overrides GEMINI_PROVIDER=real (off still disables)."
        ),
    )
    director_model: str = "gemini-3-flash-preview"
    video_model: str = "veo-3.1-fast-generate-preview"
    http_timeout_s: float = Field(
        default=60.0,
        description="Timeout (seconds) for individual calls to the hosted service.",
    )

    # Video job polling
    video_poll_interval_s: float = Field(
        default=8.0,
        description="Delay (seconds) between video operation status checks.",
    )
    video_poll_timeout_s: float = Field(
        default=0.0,
        description="Give up waiting for a video job after this many seconds (0 = wait forever).",
    )
    video_output_dir: str = Field(
        default=str(Path(tempfile.gettempdir()) / "aerialdirector_videos"),
        description="Directory where downloaded videos are written for playback/export.",
    )

    # Fake provider behavior
    fake_video_polls: int = Field(
        default=2,
        description="Number of status checks before a fake video job reports completion.",
    )

    # API Configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    log_level: str = "INFO"
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log renderer when the API runs under uvicorn directly; CLI commands use console.",
    )

    @field_validator("video_poll_interval_s", "video_poll_timeout_s")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Poll interval and timeout must be non-negative")
        return v

    @field_validator("http_timeout_s")
    @classmethod
    def validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("HTTP_TIMEOUT_S must be greater than 0")
        return v

    @field_validator("fake_video_polls")
    @classmethod
    def validate_fake_polls(cls, v: int) -> int:
        if v < 0:
            raise ValueError("FAKE_VIDEO_POLLS must be non-negative")
        return v

    @field_validator("gemini_base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Lazily construct Settings so tests and CLIs can set env vars before first access.
    return Settings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()


class _SettingsProxy:
    """Lazy proxy for Settings.

    This avoids eager settings instantiation at import time, which can make tests
    order-dependent when env vars are changed during `pytest_configure()`.
    """

    def __getattr__(self, name: str) -> Any:
        return getattr(get_settings(), name)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<SettingsProxy {get_settings()!r}>"


settings = _SettingsProxy()
