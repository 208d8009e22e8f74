"""Pytest configuration and shared fixtures."""

import os
import sys
import tempfile
from pathlib import Path

import httpx
import pytest

# Ensure source tree is importable without editable install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

# Minimal JPEG: SOI + APP0 marker + EOI. Never decoded, only transported.
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


def pytest_configure(config):
    """Configure environment for tests.

    These MUST override any developer shell/.env values to keep the test run deterministic.
    """
    os.environ["ENVIRONMENT"] = "test"
    os.environ["GEMINI_PROVIDER"] = "fake"
    os.environ["USE_FAKE_PROVIDERS"] = "false"
    os.environ["GEMINI_API_KEY"] = ""
    os.environ["VIDEO_POLL_INTERVAL_S"] = "0"
    os.environ["VIDEO_POLL_TIMEOUT_S"] = "0"
    os.environ["FAKE_VIDEO_POLLS"] = "2"
    os.environ["VIDEO_OUTPUT_DIR"] = tempfile.mkdtemp(prefix="aerialdirector_test_videos_")

    from aerialdirector.config import reset_settings_cache

    reset_settings_cache()


@pytest.fixture(autouse=True)
def block_external_http(monkeypatch):
    """Fail the run if code tries to hit the public internet.

    Allowlist only the ASGI/mock test host and loopback.
    """

    allowed_hosts = {"test", "testserver", "localhost", "127.0.0.1"}

    async def _async_guard(self, method, url, *args, **kwargs):  # type: ignore[no-untyped-def]
        u = httpx.URL(url) if not isinstance(url, httpx.URL) else url
        if u.scheme in {"http", "https"} and (u.host or "") not in allowed_hosts:
            raise RuntimeError(f"External HTTP blocked in tests: {u!s}")
        return await _orig_async_request(self, method, url, *args, **kwargs)

    _orig_async_request = httpx.AsyncClient.request
    monkeypatch.setattr(httpx.AsyncClient, "request", _async_guard, raising=True)

    yield


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def jpeg_image():
    from aerialdirector.workflows.state import ImageReference

    return ImageReference(data=JPEG_BYTES, mime_type="image/jpeg")


@pytest.fixture
def video_output_dir(tmp_path: Path) -> Path:
    return tmp_path / "videos"


@pytest.fixture
async def async_client():
    """httpx AsyncClient wired to the FastAPI app with lifespan enabled."""
    from httpx import ASGITransport, AsyncClient

    from aerialdirector.api.server import app

    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
