"""Gemini REST API adapter (text/vision + Veo video generation)."""

from __future__ import annotations

from typing import Any

import httpx

from aerialdirector.backends.protocols import VideoOperation
from aerialdirector.errors import CredentialRequiredError
from aerialdirector.observability.logging import get_logger
from aerialdirector.workflows.state import ImageReference

logger = get_logger(__name__)

__all__ = ["GeminiAPIError", "GeminiClient"]


class GeminiAPIError(RuntimeError):
    """Non-2xx response from the Gemini API.

    Attributes:
        status_code: HTTP status code
        status: Google RPC status string (e.g. "NOT_FOUND"), if reported
        message: Error message from the response envelope
    """

    def __init__(self, message: str, *, status_code: int = 0, status: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = status

    @classmethod
    def from_response(cls, response: httpx.Response) -> "GeminiAPIError":
        message = response.text or response.reason_phrase
        status = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            envelope = payload["error"]
            message = str(envelope.get("message") or message)
            status = envelope.get("status") or None
        return cls(message, status_code=response.status_code, status=status)


def _extract_text(payload: dict[str, Any]) -> str | None:
    candidates = payload.get("candidates") or []
    if not candidates:
        return None
    content = candidates[0].get("content") or {}
    texts = [
        part["text"]
        for part in content.get("parts") or []
        if isinstance(part.get("text"), str) and not part.get("thought")
    ]
    if not texts:
        return None
    return "".join(texts)


class GeminiClient:
    """Thin async wrapper around the Gemini REST API.

    The API key is passed explicitly and sent on every request; the video
    download additionally carries it as a `key` query parameter.
    """

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        api_key = (api_key or "").strip()
        if not api_key:
            raise CredentialRequiredError("A Gemini API key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(timeout, read=max(timeout, 120.0))
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            headers={"x-goog-api-key": self._api_key},
            follow_redirects=True,
        )

    async def _request(
        self, method: str, url: str, *, json: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.request(method, url, json=json)
        if response.is_error:
            raise GeminiAPIError.from_response(response)
        payload = response.json()
        if not isinstance(payload, dict):
            raise GeminiAPIError(
                "Gemini response must be an object", status_code=response.status_code
            )
        return payload

    async def generate_content(
        self,
        *,
        model: str,
        image: ImageReference,
        system_instruction: str,
        temperature: float,
        top_p: float,
        top_k: int,
    ) -> str | None:
        body = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"inlineData": {"mimeType": image.mime_type, "data": image.to_base64()}}
                    ],
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                "topP": top_p,
                "topK": top_k,
            },
        }
        payload = await self._request(
            "POST", f"{self._base_url}/models/{model}:generateContent", json=body
        )
        return _extract_text(payload)

    async def generate_videos(
        self,
        *,
        model: str,
        prompt: str,
        image: ImageReference,
        aspect_ratio: str,
        resolution: str,
        number_of_videos: int,
    ) -> VideoOperation:
        body = {
            "instances": [
                {
                    "prompt": prompt,
                    "image": {
                        "bytesBase64Encoded": image.to_base64(),
                        "mimeType": image.mime_type,
                    },
                }
            ],
            "parameters": {
                "aspectRatio": aspect_ratio,
                "resolution": resolution,
                "sampleCount": number_of_videos,
            },
        }
        payload = await self._request(
            "POST", f"{self._base_url}/models/{model}:predictLongRunning", json=body
        )
        return VideoOperation.from_payload(payload)

    async def get_videos_operation(self, operation: VideoOperation) -> VideoOperation:
        if not operation.name:
            raise ValueError("Missing operation name for status retrieval")
        payload = await self._request("GET", f"{self._base_url}/{operation.name}")
        return VideoOperation.from_payload(payload)

    async def download(self, uri: str) -> bytes:
        url = httpx.URL(uri).copy_merge_params({"key": self._api_key})
        async with self._client() as client:
            response = await client.get(url)
        if response.is_error:
            raise GeminiAPIError.from_response(response)
        logger.info("gemini_video_downloaded", bytes=len(response.content))
        return response.content
