"""Process-local generation session and credential store for the API.

A single user drives a single generation at a time, so both live on
`app.state` for the lifetime of the process.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from aerialdirector.backends.factory import get_backend
from aerialdirector.backends.protocols import GenerativeBackend
from aerialdirector.config import effective_gemini_provider
from aerialdirector.errors import CredentialRequiredError, WorkflowBusyError
from aerialdirector.observability.logging import get_logger
from aerialdirector.workflows.generation import GenerationWorkflow, build_workflow
from aerialdirector.workflows.state import (
    IDLE_STATUS,
    GenerationResult,
    GenerationStatus,
    ImageReference,
)

logger = get_logger(__name__)

BackendFactory = Callable[[str], GenerativeBackend]


class CredentialStore:
    """Holds the currently selected hosted-service API key."""

    def __init__(self, api_key: str = "") -> None:
        self._api_key = (api_key or "").strip()

    @property
    def selected(self) -> bool:
        return bool(self._api_key)

    def get(self) -> str:
        return self._api_key

    def select(self, api_key: str) -> None:
        self._api_key = api_key.strip()
        logger.info("credential_selected")

    def clear(self) -> None:
        self._api_key = ""
        logger.info("credential_cleared")


class GenerationSession:
    """The current generation, if any, plus the task running it."""

    def __init__(
        self,
        settings: Any,
        credentials: CredentialStore,
        *,
        backend_factory: Optional[BackendFactory] = None,
    ) -> None:
        self.settings = settings
        self.credentials = credentials
        self.backend_factory = backend_factory
        self.workflow: Optional[GenerationWorkflow] = None
        self.task: Optional[asyncio.Task[GenerationStatus]] = None

    @property
    def status(self) -> GenerationStatus:
        return self.workflow.status if self.workflow else IDLE_STATUS

    @property
    def result(self) -> Optional[GenerationResult]:
        return self.workflow.result if self.workflow else None

    def start(self, image: ImageReference) -> GenerationStatus:
        if self.workflow is not None and self.workflow.busy:
            raise WorkflowBusyError("A generation is already in progress")
        image.validate()

        real = effective_gemini_provider(self.settings) == "real"
        if real and self.backend_factory is None and not self.credentials.selected:
            raise CredentialRequiredError("Select an API key before starting a generation")

        api_key = self.credentials.get()
        if self.backend_factory is not None:
            backend = self.backend_factory(api_key)
        else:
            backend = get_backend(self.settings, api_key=api_key)

        if self.workflow is not None:
            # Drops the previous result and its video file.
            self.workflow.reset()

        self.workflow = build_workflow(
            self.settings,
            backend=backend,
            on_credential_expired=self.credentials.clear,
        )
        self.task = self.workflow.start(image)
        return self.workflow.status

    def clear(self) -> GenerationStatus:
        if self.workflow is not None:
            self.workflow.reset()
        return self.status

    async def aclose(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                logger.info("generation_cancelled_on_shutdown")
