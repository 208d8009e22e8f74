from __future__ import annotations

from itertools import islice

import pytest

from aerialdirector.backends.fake import FAKE_VIDEO_BYTES, FakeGeminiBackend
from aerialdirector.backends.gemini import GeminiAPIError
from aerialdirector.errors import (
    CaptureFailedError,
    CredentialExpiredError,
    GenerationTimeoutError,
    VideoGenerationError,
)
from aerialdirector.services import video_jobs
from aerialdirector.services.video_jobs import (
    INITIALIZING_MESSAGE,
    STATUS_MESSAGES,
    SUBMITTED_MESSAGE,
    StatusMessageRotation,
    VideoJobClient,
)


class _FakeClock:
    def __init__(self, step: float) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


def _client(backend, output_dir, **kwargs) -> VideoJobClient:  # type: ignore[no-untyped-def]
    kwargs.setdefault("poll_interval_s", 0)
    return VideoJobClient(backend, output_dir=output_dir, model="veo-test", **kwargs)


@pytest.mark.asyncio
async def test_generate_video_polls_until_done_and_saves_file(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=3)
    updates: list[str] = []

    video = await _client(backend, video_output_dir).generate_video(
        "orbit the lighthouse", jpeg_image, updates.append
    )

    assert backend.status_checks == 3
    assert updates == [INITIALIZING_MESSAGE, SUBMITTED_MESSAGE, *STATUS_MESSAGES[:3]]
    assert video.path.parent == video_output_dir
    assert video.path.suffix == ".mp4"
    assert video.path.read_bytes() == FAKE_VIDEO_BYTES
    assert video.url.startswith("file://")
    assert backend.downloads == [video.source_uri]


@pytest.mark.asyncio
async def test_generate_video_submits_fixed_output_format(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=1)

    await _client(backend, video_output_dir).generate_video("p", jpeg_image, lambda _m: None)

    submit = backend.calls[0]
    assert submit["op"] == "generate_videos"
    assert submit["model"] == "veo-test"
    assert submit["prompt"] == "p"
    assert (submit["aspect_ratio"], submit["resolution"], submit["number_of_videos"]) == (
        "9:16",
        "720p",
        1,
    )


@pytest.mark.asyncio
async def test_already_done_operation_is_not_polled(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=0)
    updates: list[str] = []

    await _client(backend, video_output_dir).generate_video("p", jpeg_image, updates.append)

    assert backend.status_checks == 0
    assert updates == [INITIALIZING_MESSAGE, SUBMITTED_MESSAGE]


@pytest.mark.asyncio
async def test_empty_prompt_is_rejected_before_submission(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend()

    with pytest.raises(ValueError):
        await _client(backend, video_output_dir).generate_video("  ", jpeg_image, lambda _m: None)

    assert backend.calls == []


@pytest.mark.parametrize(
    "error",
    [
        GeminiAPIError("Requested entity was not found.", status_code=404, status="NOT_FOUND"),
        RuntimeError("upstream said: Requested entity was not found."),
    ],
)
@pytest.mark.asyncio
async def test_credential_rejection_is_translated(jpeg_image, video_output_dir, error) -> None:
    backend = FakeGeminiBackend(submit_error=error)

    with pytest.raises(CredentialExpiredError) as excinfo:
        await _client(backend, video_output_dir).generate_video("p", jpeg_image, lambda _m: None)

    assert excinfo.value.__cause__ is error
    assert backend.status_checks == 0


@pytest.mark.parametrize(
    "error",
    [
        GeminiAPIError("quota exceeded", status_code=429, status="RESOURCE_EXHAUSTED"),
        GeminiAPIError(
            "models/veo-typo is not found for API version v1beta, or is not supported "
            "for predictLongRunning.",
            status_code=404,
            status="NOT_FOUND",
        ),
    ],
)
@pytest.mark.asyncio
async def test_other_submit_errors_propagate_unchanged(
    jpeg_image, video_output_dir, error
) -> None:
    backend = FakeGeminiBackend(submit_error=error)

    with pytest.raises(GeminiAPIError) as excinfo:
        await _client(backend, video_output_dir).generate_video("p", jpeg_image, lambda _m: None)

    assert excinfo.value is error


@pytest.mark.asyncio
async def test_missing_video_uri_is_capture_failure(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=1, video_uri=None)

    with pytest.raises(CaptureFailedError, match="failed to return a URI"):
        await _client(backend, video_output_dir).generate_video("p", jpeg_image, lambda _m: None)

    assert backend.downloads == []
    assert not video_output_dir.exists()


@pytest.mark.asyncio
async def test_operation_error_is_reported(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=1, operation_error="prompt blocked")

    with pytest.raises(VideoGenerationError, match="prompt blocked"):
        await _client(backend, video_output_dir).generate_video("p", jpeg_image, lambda _m: None)

    assert backend.downloads == []


@pytest.mark.asyncio
async def test_poll_timeout_raises(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=100)
    client = _client(backend, video_output_dir, poll_timeout_s=30, clock=_FakeClock(step=10))

    with pytest.raises(GenerationTimeoutError):
        await client.generate_video("p", jpeg_image, lambda _m: None)

    assert 0 < backend.status_checks < 100
    assert backend.downloads == []


class _SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.asyncio
async def test_sleep_is_capped_at_remaining_deadline(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=100)
    sleep = _SleepRecorder()
    client = _client(
        backend,
        video_output_dir,
        poll_interval_s=25,
        poll_timeout_s=30,
        clock=_FakeClock(step=10),
        sleep=sleep,
    )

    with pytest.raises(GenerationTimeoutError):
        await client.generate_video("p", jpeg_image, lambda _m: None)

    assert sleep.delays == [20, 10]
    assert backend.status_checks == 2


@pytest.mark.asyncio
async def test_sleep_uses_full_interval_without_deadline(jpeg_image, video_output_dir) -> None:
    sleep = _SleepRecorder()
    client = _client(
        FakeGeminiBackend(polls_until_done=3),
        video_output_dir,
        poll_interval_s=8,
        clock=_FakeClock(step=100),
        sleep=sleep,
    )

    await client.generate_video("p", jpeg_image, lambda _m: None)

    assert sleep.delays == [8, 8, 8]


@pytest.mark.asyncio
async def test_video_file_is_written_off_the_event_loop(
    jpeg_image, video_output_dir, monkeypatch
) -> None:
    offloaded = []
    run_sync = video_jobs.anyio.to_thread.run_sync

    async def _recording_run_sync(func, *args, **kwargs):  # type: ignore[no-untyped-def]
        offloaded.append(func.__name__)
        return await run_sync(func, *args, **kwargs)

    monkeypatch.setattr(video_jobs.anyio.to_thread, "run_sync", _recording_run_sync)

    video = await _client(FakeGeminiBackend(polls_until_done=0), video_output_dir).generate_video(
        "p", jpeg_image, lambda _m: None
    )

    assert offloaded == ["_write_video"]
    assert video.path.read_bytes() == FAKE_VIDEO_BYTES


@pytest.mark.asyncio
async def test_zero_timeout_waits_indefinitely(jpeg_image, video_output_dir) -> None:
    backend = FakeGeminiBackend(polls_until_done=12)
    client = _client(backend, video_output_dir, poll_timeout_s=0, clock=_FakeClock(step=3600))

    video = await client.generate_video("p", jpeg_image, lambda _m: None)

    assert backend.status_checks == 12
    assert video.path.exists()


def test_status_rotation_cycles_in_order() -> None:
    rotation = StatusMessageRotation(["a", "b", "c"], start=1)

    assert list(islice(rotation, 5)) == ["b", "c", "a", "b", "c"]


def test_status_rotation_requires_messages() -> None:
    with pytest.raises(ValueError):
        StatusMessageRotation([])
