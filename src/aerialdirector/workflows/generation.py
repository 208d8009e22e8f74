"""Generation workflow: analyze the photo, generate the video, report status.

One generation runs at a time. Every failure ends in a terminal `error`
status with a user-facing message; nothing is retried.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from aerialdirector.backends.factory import get_backend
from aerialdirector.backends.protocols import GenerativeBackend
from aerialdirector.errors import (
    CaptureFailedError,
    CredentialExpiredError,
    GenerationTimeoutError,
    WorkflowBusyError,
)
from aerialdirector.observability.logging import get_logger
from aerialdirector.services.prompt_composer import PromptComposer
from aerialdirector.services.video_jobs import VideoJobClient
from aerialdirector.workflows.state import (
    IDLE_STATUS,
    ErrorKind,
    GenerationResult,
    GenerationStatus,
    GenerationStep,
    ImageReference,
)

logger = get_logger(__name__)

StatusListener = Callable[[GenerationStatus], None]

ANALYZING_MESSAGE = "Director analyzing reference images..."
GENERATING_MESSAGE = "Starting drone flight sequence..."
COMPLETED_MESSAGE = "Production complete."
CREDENTIAL_EXPIRED_MESSAGE = "Please re-select your paid API key and try again."
INTERRUPTED_MESSAGE = "Production interrupted. Check console for details."
TIMEOUT_MESSAGE = "Production timed out waiting for the video. Please try again."
CAPTURE_FAILED_MESSAGE = "Video capture failed: the generated clip was not returned."


class GenerationWorkflow:
    """Sequence PromptComposer -> VideoJobClient and track the status.

    Attributes:
        status: Current GenerationStatus
        result: GenerationResult of the last successful run, if any
        history: Status transitions of the current run, oldest first
    """

    def __init__(
        self,
        composer: PromptComposer,
        video_client: VideoJobClient,
        *,
        listeners: Iterable[StatusListener] = (),
        on_credential_expired: Optional[Callable[[], None]] = None,
    ) -> None:
        self.composer = composer
        self.video_client = video_client
        self.on_credential_expired = on_credential_expired
        self.status: GenerationStatus = IDLE_STATUS
        self.result: Optional[GenerationResult] = None
        self.history: list[GenerationStatus] = []
        self._listeners: list[StatusListener] = list(listeners)

    @property
    def busy(self) -> bool:
        return self.status.is_busy

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    async def run(self, image: ImageReference) -> GenerationStatus:
        """Run one generation to a terminal status and return it."""
        self._claim(image)
        return await self._execute(image)

    def start(self, image: ImageReference) -> "asyncio.Task[GenerationStatus]":
        """Claim the workflow now and run the generation in a background task.

        The claim happens before returning, so a second `start()` raises
        WorkflowBusyError even if the first task has not been scheduled yet.
        """
        self._claim(image)
        return asyncio.create_task(self._execute(image))

    def reset(self) -> None:
        """Return to idle and drop the last result (e.g. the user cleared the photo)."""
        if self.busy:
            raise WorkflowBusyError("A generation is already in progress")
        self._discard_result()
        self.history = []
        self._set(IDLE_STATUS)

    def _claim(self, image: ImageReference) -> None:
        if self.busy:
            raise WorkflowBusyError("A generation is already in progress")
        image.validate()
        self._discard_result()
        self.history = []
        self._set(
            GenerationStatus(
                step=GenerationStep.ANALYZING, message=ANALYZING_MESSAGE, progress=0.1
            )
        )

    async def _execute(self, image: ImageReference) -> GenerationStatus:
        try:
            director_prompt = await self.composer.compose(image)

            self._set(
                GenerationStatus(
                    step=GenerationStep.GENERATING, message=GENERATING_MESSAGE, progress=0.3
                )
            )
            video = await self.video_client.generate_video(
                director_prompt, image, self._on_video_update
            )

            self.result = GenerationResult(
                video_url=video.url,
                director_prompt=director_prompt,
                video_path=video.path,
            )
            self._set(
                GenerationStatus(
                    step=GenerationStep.COMPLETED, message=COMPLETED_MESSAGE, progress=1.0
                )
            )
            logger.info("generation_completed", video_path=str(video.path))
        except CredentialExpiredError:
            logger.warning("generation_credential_expired")
            if self.on_credential_expired is not None:
                self.on_credential_expired()
            self._fail(ErrorKind.CREDENTIAL_EXPIRED, CREDENTIAL_EXPIRED_MESSAGE)
        except GenerationTimeoutError as exc:
            logger.error("generation_timeout", error=str(exc))
            self._fail(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE)
        except CaptureFailedError as exc:
            logger.error("generation_capture_failed", error=str(exc))
            self._fail(ErrorKind.CAPTURE_FAILED, CAPTURE_FAILED_MESSAGE)
        except asyncio.CancelledError:
            self._fail(ErrorKind.INTERRUPTED, INTERRUPTED_MESSAGE)
            raise
        except Exception:
            logger.exception("generation_failed", step=self.status.step.value)
            self._fail(ErrorKind.INTERRUPTED, INTERRUPTED_MESSAGE)
        return self.status

    def _discard_result(self) -> None:
        """Forget the last result and delete its downloaded video."""
        result, self.result = self.result, None
        if result is None or result.video_path is None:
            return
        try:
            result.video_path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("video_cleanup_failed", path=str(result.video_path), error=str(exc))
        else:
            logger.info("video_discarded", path=str(result.video_path))

    def _on_video_update(self, message: str) -> None:
        self._set(self.status.with_message(message))

    def _fail(self, kind: ErrorKind, message: str) -> None:
        self._set(GenerationStatus(step=GenerationStep.ERROR, message=message, error_kind=kind))

    def _set(self, status: GenerationStatus) -> None:
        self.status = status
        if status.step is not GenerationStep.IDLE:
            self.history.append(status)
        for listener in self._listeners:
            listener(status)


def build_workflow(
    settings: Any,
    *,
    api_key: str | None = None,
    backend: GenerativeBackend | None = None,
    listeners: Iterable[StatusListener] = (),
    on_credential_expired: Optional[Callable[[], None]] = None,
) -> GenerationWorkflow:
    """Wire a GenerationWorkflow from settings and an explicit credential."""
    if backend is None:
        backend = get_backend(settings, api_key=api_key)
    composer = PromptComposer(backend, model=settings.director_model)
    video_client = VideoJobClient(
        backend,
        output_dir=Path(settings.video_output_dir),
        model=settings.video_model,
        poll_interval_s=float(settings.video_poll_interval_s),
        poll_timeout_s=float(settings.video_poll_timeout_s),
    )
    return GenerationWorkflow(
        composer,
        video_client,
        listeners=listeners,
        on_credential_expired=on_credential_expired,
    )
