from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from ai_transcriber.services.gemini import GeminiClient
from ai_transcriber.services.summarizer import SummarizerService
from ai_transcriber.services.transcriber import TranscriptionService


@pytest.fixture
def mock_transcriber() -> MagicMock:
    """Create a mocked TranscriptionService for router tests."""
    service = MagicMock(spec=TranscriptionService)
    service.transcribe = AsyncMock(return_value=[])
    return service


@pytest.fixture
def mock_summarizer() -> MagicMock:
    """Create a mocked SummarizerService for router tests."""
    service = MagicMock(spec=SummarizerService)
    service.summarize = AsyncMock(return_value="")
    return service


@pytest.fixture
def mock_llm_client() -> MagicMock:
    client = MagicMock(spec=GeminiClient)
    client.is_reachable = AsyncMock(return_value=True)
    return client


@pytest.fixture
def test_app(mock_transcriber: MagicMock, mock_summarizer: MagicMock, mock_llm_client: MagicMock):
    """Create a test FastAPI app with mocked dependencies."""
    from fastapi import FastAPI
    from ai_transcriber.main import validation_error_handler
    from ai_transcriber.routers.summary import router as summary_router
    from ai_transcriber.routers.transcription import router as transcription_router

    app = FastAPI()
    app.state.transcriber = mock_transcriber
    app.state.summarizer = mock_summarizer
    app.state.llm_client = mock_llm_client
    app.include_router(transcription_router)
    app.include_router(summary_router)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


@pytest.fixture
def client(test_app) -> TestClient:
    return TestClient(test_app)
