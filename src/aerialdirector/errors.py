"""Domain exceptions shared by the services, the workflow and the API."""

from __future__ import annotations

from http import HTTPStatus


class DomainError(Exception):
    """Base class for domain errors."""

    error: str = "domain_error"
    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, *, error: str | None = None, status_code: int | None = None):
        super().__init__(message)
        if error:
            self.error = error
        if status_code:
            self.status_code = status_code


class InvalidImageError(DomainError):
    error = "invalid_image"
    status_code = HTTPStatus.BAD_REQUEST


class ConfigurationError(DomainError):
    error = "configuration_error"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class CredentialRequiredError(DomainError):
    error = "credential_required"
    status_code = HTTPStatus.PRECONDITION_FAILED


class WorkflowBusyError(DomainError):
    error = "generation_in_progress"
    status_code = HTTPStatus.CONFLICT


class GenerationError(DomainError):
    """A generation could not produce a video."""

    error = "generation_failed"
    status_code = HTTPStatus.BAD_GATEWAY


class CredentialExpiredError(GenerationError):
    """The hosted service rejected the credential (invalid, expired or unbilled)."""

    error = "credential_expired"
    status_code = HTTPStatus.UNAUTHORIZED


class CaptureFailedError(GenerationError):
    """The video job completed without a video locator."""

    error = "capture_failed"


class GenerationTimeoutError(GenerationError):
    error = "timeout"
    status_code = HTTPStatus.GATEWAY_TIMEOUT


class VideoGenerationError(GenerationError):
    """The hosted video job finished with an error."""

    error = "video_generation_failed"
