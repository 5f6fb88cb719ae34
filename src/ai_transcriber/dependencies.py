from fastapi import Request

from ai_transcriber.services.gemini import GeminiClient
from ai_transcriber.services.summarizer import SummarizerService
from ai_transcriber.services.transcriber import TranscriptionService


def get_llm_client(request: Request) -> GeminiClient:
    """Retrieve the GeminiClient singleton from app state."""
    return request.app.state.llm_client


def get_transcription_service(request: Request) -> TranscriptionService:
    """Retrieve the TranscriptionService singleton from app state."""
    return request.app.state.transcriber


def get_summarizer(request: Request) -> SummarizerService:
    """Retrieve the SummarizerService singleton from app state."""
    return request.app.state.summarizer
