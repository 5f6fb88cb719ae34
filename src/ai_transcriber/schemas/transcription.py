from pydantic import BaseModel, ConfigDict, Field


class TranscriptionOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    diarization: bool = False
    timestamps: bool = False


class TranscriptSegment(BaseModel):
    speaker: str | None = None
    timestamp: str | None = None
    text: str


class TranscriptionReply(BaseModel):
    """Shape the model is asked to produce; anything else is rejected."""

    transcript: list[TranscriptSegment]


class TranscribeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_data: str | None = Field(default=None, alias="fileData")
    mime_type: str | None = Field(default=None, alias="mimeType")
    options: TranscriptionOptions | None = None

    def is_complete(self) -> bool:
        return bool(self.file_data) and bool(self.mime_type) and self.options is not None


class HealthResponse(BaseModel):
    api_key_configured: bool
    llm_reachable: bool
