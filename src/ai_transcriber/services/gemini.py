"""Gemini REST client using httpx.

Wraps the ``models/{model}:generateContent`` endpoint. A request is a list of
content parts (text or inline base64 media) plus an optional generation
config; the reply is the concatenated text of the first candidate.

The credential is read on every call so a missing key surfaces as a
ConfigurationError at request time instead of failing service startup.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from ai_transcriber.config import Settings
from ai_transcriber.exceptions import ConfigurationError, GenerationError

logger = logging.getLogger(__name__)


# generateContent reply envelope; only the fields read below are declared.
class _Part(BaseModel):
    text: str | None = None


class _Content(BaseModel):
    parts: list[_Part] = Field(default_factory=list)


class _Candidate(BaseModel):
    content: _Content | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class _UsageMetadata(BaseModel):
    total_token_count: int | None = Field(default=None, alias="totalTokenCount")


class _GenerateContentReply(BaseModel):
    candidates: list[_Candidate] = Field(default_factory=list)
    prompt_feedback: dict[str, Any] | None = Field(default=None, alias="promptFeedback")
    usage_metadata: _UsageMetadata | None = Field(default=None, alias="usageMetadata")
    model_version: str | None = Field(default=None, alias="modelVersion")


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def inline_data_part(mime_type: str, data: str) -> dict[str, Any]:
    """Media part carrying base64 bytes exactly as the client uploaded them."""
    return {"inline_data": {"mime_type": mime_type, "data": data}}


@dataclass(frozen=True)
class GenerationResponse:
    text: str
    model: str
    finish_reason: str | None = None
    total_token_count: int | None = None


class GeminiClient:
    """Async client for Gemini's generateContent endpoint."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._base_url = settings.llm_base_url.rstrip("/")
        self._model = settings.llm_model_name
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=30.0,
                read=settings.llm_timeout,
                write=settings.llm_timeout,  # inline media uploads can be large
                pool=30.0,
            ),
            transport=transport,
        )

    @property
    def model(self) -> str:
        return self._model

    def _api_key(self) -> str:
        api_key = self._settings.api_key.strip()
        if not api_key:
            raise ConfigurationError("API_KEY environment variable not set.")
        return api_key

    async def generate(
        self,
        parts: list[dict[str, Any]],
        *,
        temperature: float | None = None,
        response_mime_type: str | None = None,
        response_schema: dict[str, Any] | None = None,
    ) -> GenerationResponse:
        """Send a single generateContent request. No retries."""
        api_key = self._api_key()

        generation_config: dict[str, Any] = {}
        if temperature is not None:
            generation_config["temperature"] = temperature
        if response_mime_type is not None:
            generation_config["responseMimeType"] = response_mime_type
        if response_schema is not None:
            generation_config["responseSchema"] = response_schema

        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
        if generation_config:
            payload["generationConfig"] = generation_config

        url = f"{self._base_url}/v1beta/models/{self._model}:generateContent"
        try:
            response = await self._client.post(
                url,
                json=payload,
                headers={"x-goog-api-key": api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise GenerationError(
                f"Gemini returned HTTP {e.response.status_code}: {_error_message(e.response)}"
            ) from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Gemini request failed: {e!r}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise GenerationError("Gemini returned a non-JSON response body") from e
        return _parse_generation(body, self._model)

    async def is_reachable(self) -> bool:
        """Check that the model endpoint answers with the configured key."""
        if not self._settings.api_key_configured:
            return False
        try:
            response = await self._client.get(
                f"{self._base_url}/v1beta/models/{self._model}",
                headers={"x-goog-api-key": self._settings.api_key.strip()},
                timeout=httpx.Timeout(5.0),
            )
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("message", ""))
    return response.text[:200]


def _parse_generation(body: Any, default_model: str) -> GenerationResponse:
    try:
        envelope = _GenerateContentReply.model_validate(body)
    except ValidationError as e:
        raise GenerationError(
            f"Gemini reply has an unexpected shape: {e.error_count()} error(s)"
        ) from e

    if not envelope.candidates:
        raise GenerationError(
            f"Gemini returned no candidates (promptFeedback={envelope.prompt_feedback})"
        )

    candidate = envelope.candidates[0]
    parts = candidate.content.parts if candidate.content else []
    text = "".join(p.text for p in parts if p.text)
    if not text:
        raise GenerationError(
            f"Gemini returned an empty reply (finishReason={candidate.finish_reason})"
        )

    logger.debug("Gemini response (first 200 chars): %s", text[:200])
    return GenerationResponse(
        text=text,
        model=envelope.model_version or default_model,
        finish_reason=candidate.finish_reason,
        total_token_count=(
            envelope.usage_metadata.total_token_count if envelope.usage_metadata else None
        ),
    )
