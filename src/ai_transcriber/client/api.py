"""HTTP adapter between the UI controller and the proxy endpoints.

One request per user action, no retries. Every failure, whether a transport
error, a non-2xx status or an unreadable file, is raised as ApiError carrying
a short message.
"""

import asyncio
import base64
import logging
import mimetypes
from pathlib import Path

import httpx
from pydantic import TypeAdapter, ValidationError

from ai_transcriber.config import Settings
from ai_transcriber.schemas.summary import SummaryOptions
from ai_transcriber.schemas.transcription import TranscriptionOptions, TranscriptSegment

logger = logging.getLogger(__name__)

TRANSCRIBE_FAILED = "The transcription request failed."
SUMMARY_FAILED = "The summary request failed."

_DEFAULT_MIME_TYPE = "application/octet-stream"

_transcript_adapter = TypeAdapter(list[TranscriptSegment])


class ApiError(Exception):
    """Raised when a proxy call fails for any reason."""


async def file_to_base64(path: Path) -> str:
    """Read the whole file off the event loop and return its base64 text."""
    try:
        data = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as e:
        raise ApiError(f"Could not read {path}: {e}") from e
    return base64.b64encode(data).decode("ascii")


def guess_mime_type(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or _DEFAULT_MIME_TYPE


def _error_from_response(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return fallback


class TranscriberApiClient:
    """Async client for the /transcribe and /summarize endpoints."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=settings.api_base_url.rstrip("/"),
            timeout=httpx.Timeout(settings.api_timeout, connect=30.0),
            transport=transport,
        )

    async def _post(self, path: str, payload: dict, fallback: str) -> httpx.Response:
        try:
            response = await self._client.post(path, json=payload)
        except httpx.HTTPError as e:
            logger.warning("POST %s failed: %r", path, e)
            raise ApiError(fallback) from e

        if not response.is_success:
            message = _error_from_response(response, fallback)
            logger.warning("POST %s returned %d: %s", path, response.status_code, message)
            raise ApiError(message)
        return response

    async def transcribe(
        self,
        path: Path,
        options: TranscriptionOptions,
        mime_type: str | None = None,
    ) -> list[TranscriptSegment]:
        path = Path(path)
        payload = {
            "fileData": await file_to_base64(path),
            "mimeType": mime_type or guess_mime_type(path),
            "options": options.model_dump(),
        }
        response = await self._post("/transcribe", payload, TRANSCRIBE_FAILED)
        try:
            return _transcript_adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise ApiError(TRANSCRIBE_FAILED) from e

    async def summarize(self, transcript: str, options: SummaryOptions) -> str:
        payload = {
            "transcript": transcript,
            "options": options.model_dump(by_alias=True),
        }
        response = await self._post("/summarize", payload, SUMMARY_FAILED)
        try:
            return response.json()["summary"]
        except (ValueError, KeyError, TypeError) as e:
            raise ApiError(SUMMARY_FAILED) from e

    async def close(self) -> None:
        await self._client.aclose()
