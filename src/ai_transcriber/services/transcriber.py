"""Transcription via the hosted model.

The media is sent inline with an instruction prompt, and the model is
constrained to a JSON schema. The reply is validated as a whole: if it does not
parse or does not match the schema, the call fails. There is no partial
recovery of segments.
"""

import json
import logging

from pydantic import ValidationError

from ai_transcriber.exceptions import ResponseFormatError
from ai_transcriber.schemas.transcription import (
    TranscriptionOptions,
    TranscriptionReply,
    TranscriptSegment,
)
from ai_transcriber.services.gemini import GeminiClient, inline_data_part, text_part

logger = logging.getLogger(__name__)

_BASE_INSTRUCTIONS = (
    "You are an expert audio transcription service. Transcribe the content of the provided audio file.",
    "The final output must be a JSON object matching the provided schema.",
    "Do not include any other text, comments, or markdown formatting in your response. Only the JSON object is allowed.",
)

_DIARIZATION_INSTRUCTION = (
    "Perform speaker diarization, labeling speakers as 'SPEAKER_00', 'SPEAKER_01', etc."
)

_TIMESTAMP_INSTRUCTION = "Include timestamps for each segment in the format [HH:MM:SS.mmm]."

# Gemini OpenAPI-subset schema; the provider enforces it during generation.
TRANSCRIPT_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "transcript": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "speaker": {"type": "STRING", "nullable": True},
                    "timestamp": {"type": "STRING", "nullable": True},
                    "text": {"type": "STRING"},
                },
                "required": ["text"],
            },
        },
    },
}


def build_transcription_prompt(options: TranscriptionOptions) -> str:
    parts = list(_BASE_INSTRUCTIONS)
    if options.diarization:
        parts.append(_DIARIZATION_INSTRUCTION)
    if options.timestamps:
        parts.append(_TIMESTAMP_INSTRUCTION)
    return " ".join(parts)


def parse_transcription_reply(raw: str) -> list[TranscriptSegment]:
    """Parse the model's JSON reply into segments, rejecting anything off-schema."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"Model reply is not valid JSON: {e}") from e

    try:
        reply = TranscriptionReply.model_validate(data)
    except ValidationError as e:
        raise ResponseFormatError(
            f"Model reply does not match the transcript schema: {e.error_count()} error(s)"
        ) from e
    return reply.transcript


class TranscriptionService:
    def __init__(self, client: GeminiClient) -> None:
        self._client = client

    async def transcribe(
        self,
        file_data: str,
        mime_type: str,
        options: TranscriptionOptions,
    ) -> list[TranscriptSegment]:
        prompt = build_transcription_prompt(options)
        logger.info(
            "Transcribing %s payload (%d base64 chars, diarization=%s, timestamps=%s)",
            mime_type,
            len(file_data),
            options.diarization,
            options.timestamps,
        )

        response = await self._client.generate(
            [text_part(prompt), inline_data_part(mime_type, file_data)],
            response_mime_type="application/json",
            response_schema=TRANSCRIPT_RESPONSE_SCHEMA,
        )

        segments = parse_transcription_reply(response.text)
        logger.info("Transcription done: %d segments (model=%s)", len(segments), response.model)
        return segments
