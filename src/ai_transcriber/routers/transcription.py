import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from ai_transcriber.config import settings
from ai_transcriber.dependencies import get_llm_client, get_transcription_service
from ai_transcriber.exceptions import TranscriberError
from ai_transcriber.schemas.transcription import (
    HealthResponse,
    TranscribeRequest,
    TranscriptSegment,
)
from ai_transcriber.services.gemini import GeminiClient
from ai_transcriber.services.transcriber import TranscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcription"])

MISSING_PARAMETERS = "Missing required parameters."
TRANSCRIPTION_FAILED = "Failed to process transcription."


@router.post(
    "/transcribe",
    response_model=list[TranscriptSegment],
    response_model_exclude_none=True,
)
async def transcribe(
    body: TranscribeRequest,
    service: TranscriptionService = Depends(get_transcription_service),
):
    """Transcribe an inline base64 media payload into a list of segments."""
    if not body.is_complete():
        return PlainTextResponse(MISSING_PARAMETERS, status_code=400)

    try:
        return await service.transcribe(body.file_data, body.mime_type, body.options)
    except TranscriberError as e:
        logger.error("Error in transcribe endpoint: %s", e)
        return JSONResponse(
            status_code=500,
            content={"error": TRANSCRIPTION_FAILED, "details": str(e)},
        )
    except Exception as e:
        logger.exception("Unexpected error in transcribe endpoint")
        return JSONResponse(
            status_code=500,
            content={"error": TRANSCRIPTION_FAILED, "details": str(e)},
        )


@router.get("/health", response_model=HealthResponse)
async def health(
    client: GeminiClient = Depends(get_llm_client),
) -> HealthResponse:
    """Check service health: credential configured and model endpoint reachable."""
    return HealthResponse(
        api_key_configured=settings.api_key_configured,
        llm_reachable=await client.is_reachable(),
    )
