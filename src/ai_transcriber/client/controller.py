"""UI state for the transcribe / edit / summarize workflow.

All user-facing state lives in one TranscriberState owned by the controller
and is only changed through the controller's methods. The view layer reads
the state and the derived properties and renders them; it never mutates the
state directly.

The transcript text shown to the user is derived from the segment list, the
transcription options and the speaker-name overrides. It seeds an editable
buffer. A new transcript always replaces the buffer. Option or speaker-name
changes only refresh it while the user has not typed into it.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

from ai_transcriber.client.api import ApiError
from ai_transcriber.schemas.summary import SummaryOptions
from ai_transcriber.schemas.transcription import TranscriptionOptions, TranscriptSegment
from ai_transcriber.utils.export import (
    DocxUnavailableError,
    export_basename,
    transcript_docx,
    transcript_txt,
)

logger = logging.getLogger(__name__)

TranscriptionOption = Literal["diarization", "timestamps"]
SummaryOption = Literal["key_points", "task_list", "preserve_language"]

NO_FILE_ERROR = "Please select a file first."
TRANSCRIBE_ERROR = "Failed to transcribe the audio. Please try again."
EMPTY_TRANSCRIPT_ERROR = "The transcript is empty."
NO_SUMMARY_SECTION_ERROR = 'Please select at least "Summarize key points" or "Make a task list".'
SUMMARY_ERROR = "Failed to generate summary. Please try again."
DOCX_MISSING_ERROR = (
    "DOCX library not found. Install python-docx to export Word documents."
)
DOCX_FAILED_ERROR = "Failed to create DOCX file."
COPY_OK_MESSAGE = "Copied to clipboard! You can now paste it into Google Docs."
COPY_FAILED_MESSAGE = "Failed to copy to clipboard."


class TranscriberApi(Protocol):
    async def transcribe(
        self, path: Path, options: TranscriptionOptions
    ) -> list[TranscriptSegment]: ...

    async def summarize(self, transcript: str, options: SummaryOptions) -> str: ...


@dataclass
class TranscriberState:
    file: Path | None = None
    options: TranscriptionOptions = field(
        default_factory=lambda: TranscriptionOptions(diarization=True, timestamps=True)
    )
    all_options: bool = True
    transcript_data: list[TranscriptSegment] | None = None
    edited_transcript: str = ""
    buffer_edited: bool = False
    # bumped on every file selection; responses for an older file are dropped
    file_generation: int = 0
    speaker_names: dict[str, str] = field(default_factory=dict)
    is_loading: bool = False
    error: str | None = None

    summary: str | None = None
    is_summarizing: bool = False
    summary_error: str | None = None
    summary_options: SummaryOptions = field(
        default_factory=lambda: SummaryOptions(key_points=True)
    )


def format_transcript(
    segments: list[TranscriptSegment],
    options: TranscriptionOptions,
    speaker_names: dict[str, str],
) -> str:
    lines = []
    for segment in segments:
        line = ""
        if options.timestamps and segment.timestamp:
            line += f"{segment.timestamp} "
        if options.diarization and segment.speaker:
            line += f"{speaker_names.get(segment.speaker) or segment.speaker}: "
        line += segment.text
        lines.append(line)
    return "\n".join(lines)


class TranscriberController:
    def __init__(self, api: TranscriberApi, state: TranscriberState | None = None) -> None:
        self._api = api
        self.state = state or TranscriberState()

    # ------------------------------------------------------------------ #
    #  Derived views
    # ------------------------------------------------------------------ #

    @property
    def unique_speakers(self) -> list[str]:
        """Distinct speaker labels in first-seen order, for the naming form."""
        s = self.state
        if not s.transcript_data or not s.options.diarization:
            return []
        return list(dict.fromkeys(seg.speaker for seg in s.transcript_data if seg.speaker))

    @property
    def formatted_transcript(self) -> str:
        s = self.state
        if not s.transcript_data:
            return ""
        return format_transcript(s.transcript_data, s.options, s.speaker_names)

    @property
    def can_transcribe(self) -> bool:
        return self.state.file is not None and not self.state.is_loading

    @property
    def can_summarize(self) -> bool:
        return bool(self.state.edited_transcript) and not self.state.is_summarizing

    def _refresh_buffer(self, *, replace: bool = False) -> None:
        formatted = self.formatted_transcript
        if not formatted and not replace:
            return
        if replace or not self.state.buffer_edited:
            self.state.edited_transcript = formatted
            self.state.buffer_edited = False

    # ------------------------------------------------------------------ #
    #  File and transcription
    # ------------------------------------------------------------------ #

    def select_file(self, path: Path) -> None:
        s = self.state
        s.file = Path(path)
        s.file_generation += 1
        s.transcript_data = None
        s.edited_transcript = ""
        s.buffer_edited = False
        s.error = None
        s.speaker_names = {}
        s.summary = None
        s.summary_error = None

    async def transcribe(self) -> None:
        s = self.state
        if s.file is None:
            s.error = NO_FILE_ERROR
            return
        if s.is_loading:
            return

        s.is_loading = True
        s.error = None
        s.transcript_data = None
        path, generation = s.file, s.file_generation
        try:
            transcript = await self._api.transcribe(path, s.options)
        except ApiError as e:
            logger.warning("Transcription failed for %s: %s", path.name, e)
            if s.file_generation == generation:
                s.error = TRANSCRIBE_ERROR
        else:
            if s.file_generation != generation:
                logger.info("Discarding transcript for %s; another file was selected", path.name)
                return
            s.transcript_data = list(transcript)
            self._refresh_buffer(replace=True)
        finally:
            s.is_loading = False

    def toggle_option(self, option: TranscriptionOption) -> None:
        s = self.state
        if s.all_options:
            return
        s.options = s.options.model_copy(update={option: not getattr(s.options, option)})
        self._refresh_buffer()

    def toggle_all_options(self) -> None:
        s = self.state
        s.all_options = not s.all_options
        if s.all_options:
            s.options = TranscriptionOptions(diarization=True, timestamps=True)
            self._refresh_buffer()

    def set_speaker_name(self, speaker: str, name: str) -> None:
        self.state.speaker_names = {**self.state.speaker_names, speaker: name}
        self._refresh_buffer()

    def edit_transcript(self, text: str) -> None:
        self.state.edited_transcript = text
        self.state.buffer_edited = True

    # ------------------------------------------------------------------ #
    #  Summary
    # ------------------------------------------------------------------ #

    def toggle_summary_option(self, option: SummaryOption) -> None:
        opts = self.state.summary_options
        self.state.summary_options = opts.model_copy(update={option: not getattr(opts, option)})

    async def summarize(self) -> None:
        s = self.state
        if not s.edited_transcript:
            s.summary_error = EMPTY_TRANSCRIPT_ERROR
            return
        if not s.summary_options.key_points and not s.summary_options.task_list:
            s.summary_error = NO_SUMMARY_SECTION_ERROR
            return
        if s.is_summarizing:
            return

        s.is_summarizing = True
        s.summary = None
        s.summary_error = None
        generation = s.file_generation
        try:
            summary = await self._api.summarize(s.edited_transcript, s.summary_options)
        except ApiError as e:
            logger.warning("Summary failed: %s", e)
            if s.file_generation == generation:
                s.summary_error = SUMMARY_ERROR
        else:
            if s.file_generation == generation:
                s.summary = summary
        finally:
            s.is_summarizing = False

    # ------------------------------------------------------------------ #
    #  Export
    # ------------------------------------------------------------------ #

    def _export_name(self, suffix: str) -> str:
        name = self.state.file.name if self.state.file else None
        return f"{export_basename(name)}_transcript.{suffix}"

    def export_txt(self) -> tuple[str, bytes]:
        return self._export_name("txt"), transcript_txt(self.state.edited_transcript)

    def export_docx(self) -> tuple[str, bytes] | None:
        """Return (filename, content), or None with ``state.error`` set on failure."""
        try:
            content = transcript_docx(self.state.edited_transcript)
        except DocxUnavailableError:
            self.state.error = DOCX_MISSING_ERROR
            return None
        except (OSError, ValueError) as e:
            logger.warning("DOCX export failed: %s", e)
            self.state.error = DOCX_FAILED_ERROR
            return None
        return self._export_name("docx"), content

    def copy_to_clipboard(self, write: Callable[[str], None]) -> str:
        try:
            write(self.state.edited_transcript)
        except (OSError, RuntimeError) as e:
            logger.warning("Clipboard copy failed: %s", e)
            return COPY_FAILED_MESSAGE
        return COPY_OK_MESSAGE
