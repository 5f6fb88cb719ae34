"""Request, reply and option models shared by the proxy and the client."""

from ai_transcriber.schemas.summary import (
    SummarizeRequest,
    SummaryOptions,
    SummaryResponse,
)
from ai_transcriber.schemas.transcription import (
    TranscribeRequest,
    TranscriptionOptions,
    TranscriptionReply,
    TranscriptSegment,
)

Transcript = list[TranscriptSegment]

__all__ = [
    "SummarizeRequest",
    "SummaryOptions",
    "SummaryResponse",
    "TranscribeRequest",
    "Transcript",
    "TranscriptionOptions",
    "TranscriptionReply",
    "TranscriptSegment",
]
