from unittest.mock import AsyncMock

import httpx
import pytest

from ai_transcriber.config import Settings
from ai_transcriber.exceptions import ConfigurationError, ResponseFormatError
from ai_transcriber.schemas.transcription import TranscriptionOptions, TranscriptSegment
from ai_transcriber.services.gemini import GeminiClient
from ai_transcriber.services.transcriber import TranscriptionService

VALID_BODY = {
    "fileData": "ZmFrZS1hdWRpbw==",
    "mimeType": "audio/mpeg",
    "options": {"diarization": True, "timestamps": True},
}


class TestTranscribeEndpoint:
    def test_transcribe_success(self, client, mock_transcriber):
        mock_transcriber.transcribe = AsyncMock(
            return_value=[
                TranscriptSegment(speaker="SPEAKER_00", timestamp="[00:00:01.000]", text="Hello"),
                TranscriptSegment(text="No metadata"),
            ]
        )

        response = client.post("/transcribe", json=VALID_BODY)

        assert response.status_code == 200
        assert response.json() == [
            {"speaker": "SPEAKER_00", "timestamp": "[00:00:01.000]", "text": "Hello"},
            {"text": "No metadata"},
        ]
        mock_transcriber.transcribe.assert_awaited_once_with(
            "ZmFrZS1hdWRpbw==",
            "audio/mpeg",
            TranscriptionOptions(diarization=True, timestamps=True),
        )

    @pytest.mark.parametrize("missing", ["fileData", "mimeType", "options"])
    def test_missing_field_is_rejected_before_model_call(self, client, mock_transcriber, missing):
        body = {k: v for k, v in VALID_BODY.items() if k != missing}

        response = client.post("/transcribe", json=body)

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Missing required parameters."
        mock_transcriber.transcribe.assert_not_called()

    def test_empty_file_data_is_rejected(self, client, mock_transcriber):
        response = client.post("/transcribe", json={**VALID_BODY, "fileData": ""})

        assert response.status_code == 400
        mock_transcriber.transcribe.assert_not_called()

    def test_malformed_body_is_rejected(self, client, mock_transcriber):
        response = client.post(
            "/transcribe",
            content=b"not json",
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 400
        mock_transcriber.transcribe.assert_not_called()

    def test_missing_option_keys_default_to_false(self, client, mock_transcriber):
        response = client.post("/transcribe", json={**VALID_BODY, "options": {}})

        assert response.status_code == 200
        options = mock_transcriber.transcribe.call_args[0][2]
        assert options == TranscriptionOptions(diarization=False, timestamps=False)

    def test_missing_credential_returns_500(self, client, mock_transcriber):
        mock_transcriber.transcribe = AsyncMock(
            side_effect=ConfigurationError("API_KEY environment variable not set.")
        )

        response = client.post("/transcribe", json=VALID_BODY)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to process transcription.",
            "details": "API_KEY environment variable not set.",
        }

    def test_bad_model_reply_returns_500_with_details(self, client, mock_transcriber):
        mock_transcriber.transcribe = AsyncMock(
            side_effect=ResponseFormatError("Model reply is not valid JSON")
        )

        response = client.post("/transcribe", json=VALID_BODY)

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Failed to process transcription."
        assert "not valid JSON" in data["details"]

    def test_get_is_not_allowed(self, client):
        response = client.get("/transcribe")
        assert response.status_code == 405


class TestHealthEndpoint:
    def test_health_check(self, client, monkeypatch):
        from ai_transcriber.config import settings

        monkeypatch.setattr(settings, "api_key", "test-key")
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"api_key_configured": True, "llm_reachable": True}

    def test_health_without_key(self, client, mock_llm_client, monkeypatch):
        from ai_transcriber.config import settings

        monkeypatch.setattr(settings, "api_key", "")
        mock_llm_client.is_reachable = AsyncMock(return_value=False)
        response = client.get("/health")

        assert response.json() == {"api_key_configured": False, "llm_reachable": False}


class TestUpstreamFailures:
    @pytest.mark.parametrize(
        "reply",
        [
            {"candidates": ["oops"]},
            {"candidates": [{"content": {"parts": [{"text": None}]}}]},
        ],
    )
    def test_malformed_model_reply_keeps_error_shape(self, client, test_app, reply):
        llm_client = GeminiClient(
            Settings(api_key="test-key", llm_base_url="https://gemini.test"),
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=reply)),
        )
        test_app.state.transcriber = TranscriptionService(llm_client)

        response = client.post("/transcribe", json=VALID_BODY)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json()["error"] == "Failed to process transcription."
        assert response.json()["details"]

    def test_unexpected_exception_keeps_error_shape(self, client, mock_transcriber):
        mock_transcriber.transcribe = AsyncMock(side_effect=RuntimeError("boom"))

        response = client.post("/transcribe", json=VALID_BODY)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to process transcription.", "details": "boom"}
