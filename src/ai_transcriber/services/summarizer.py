import logging

from ai_transcriber.schemas.summary import SummaryOptions
from ai_transcriber.services.gemini import GeminiClient, text_part

logger = logging.getLogger(__name__)

_ROLE_INSTRUCTION = (
    "You are an expert assistant specialized in summarizing meeting transcripts and conversations."
)

_KEY_POINTS_REQUEST = "a concise summary of the key points and main decisions"
_TASK_LIST_REQUEST = (
    "a detailed task list of all action items, including assigned individuals and deadlines if mentioned"
)

_PRESERVE_LANGUAGE_INSTRUCTION = (
    "When generating the output, try to preserve the original tone and specific phrasing "
    "from the transcript where appropriate."
)

_HEADINGS_INSTRUCTION = (
    "Structure your response with clear headings for each section (e.g., 'Key Points', 'Task List')."
)


def build_summary_prompt(options: SummaryOptions) -> str:
    requested: list[str] = []
    if options.key_points:
        requested.append(_KEY_POINTS_REQUEST)
    if options.task_list:
        requested.append(_TASK_LIST_REQUEST)
    # Direct API callers may select nothing; the client UI refuses earlier.
    if not requested:
        requested.append(_KEY_POINTS_REQUEST)

    parts = [
        _ROLE_INSTRUCTION,
        f"Based on the following transcript, please generate {' and '.join(requested)}.",
    ]
    if options.preserve_language:
        parts.append(_PRESERVE_LANGUAGE_INSTRUCTION)
    parts.append(_HEADINGS_INSTRUCTION)
    return " ".join(parts)


def wrap_transcript(transcript: str) -> str:
    return f"\n\n--- TRANSCRIPT START ---\n\n{transcript}\n\n--- TRANSCRIPT END ---"


class SummarizerService:
    def __init__(self, client: GeminiClient, temperature: float = 0.2) -> None:
        self._client = client
        self._temperature = temperature

    async def summarize(self, transcript: str, options: SummaryOptions) -> str:
        """Return the model's reply verbatim; the summary is free text."""
        logger.info(
            "Summarizing %d chars (key_points=%s, task_list=%s, preserve_language=%s)",
            len(transcript),
            options.key_points,
            options.task_list,
            options.preserve_language,
        )
        response = await self._client.generate(
            [text_part(build_summary_prompt(options)), text_part(wrap_transcript(transcript))],
            temperature=self._temperature,
        )
        logger.info("Summary done: %d chars (model=%s)", len(response.text), response.model)
        return response.text
