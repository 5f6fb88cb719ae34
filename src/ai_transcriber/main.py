import logging
from contextlib import asynccontextmanager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from ai_transcriber.config import settings
from ai_transcriber.routers import summary, transcription
from ai_transcriber.services.gemini import GeminiClient
from ai_transcriber.services.summarizer import SummarizerService
from ai_transcriber.services.transcriber import TranscriptionService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared model client on startup, close it on shutdown."""
    logger.info("Starting transcriber service ...")

    llm_client = GeminiClient(settings)
    try:
        app.state.llm_client = llm_client
        app.state.transcriber = TranscriptionService(llm_client)
        app.state.summarizer = SummarizerService(
            llm_client, temperature=settings.summary_temperature
        )
        if not settings.api_key_configured:
            logger.warning("API_KEY is not set; transcribe and summarize will fail until it is.")

        logger.info("Transcriber service ready (model=%s).", llm_client.model)
        yield
    finally:
        logger.info("Shutting down transcriber service ...")
        await llm_client.close()


app = FastAPI(
    title="AI Transcriber",
    description="Transcription and summarization proxy for a hosted Gemini model",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transcription.router)
app.include_router(summary.router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return PlainTextResponse(transcription.MISSING_PARAMETERS, status_code=400)

