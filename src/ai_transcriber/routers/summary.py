import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from ai_transcriber.dependencies import get_summarizer
from ai_transcriber.exceptions import TranscriberError
from ai_transcriber.routers.transcription import MISSING_PARAMETERS
from ai_transcriber.schemas.summary import SummarizeRequest, SummaryResponse
from ai_transcriber.services.summarizer import SummarizerService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["summary"])

SUMMARY_FAILED = "Failed to generate summary."


@router.post("/summarize", response_model=SummaryResponse)
async def summarize(
    body: SummarizeRequest,
    summarizer: SummarizerService = Depends(get_summarizer),
):
    """Summarize transcript text and/or extract a task list from it."""
    if not body.is_complete():
        return PlainTextResponse(MISSING_PARAMETERS, status_code=400)

    try:
        summary = await summarizer.summarize(body.transcript, body.options)
    except TranscriberError as e:
        logger.error("Error in summarize endpoint: %s", e)
        return JSONResponse(
            status_code=500,
            content={"error": SUMMARY_FAILED, "details": str(e)},
        )
    except Exception as e:
        logger.exception("Unexpected error in summarize endpoint")
        return JSONResponse(
            status_code=500,
            content={"error": SUMMARY_FAILED, "details": str(e)},
        )
    return SummaryResponse(summary=summary)
