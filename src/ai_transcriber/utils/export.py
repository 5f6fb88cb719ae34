"""Transcript export helpers: plain text and Word documents."""

import io


class DocxUnavailableError(RuntimeError):
    """Raised when python-docx is not installed."""


def export_basename(filename: str | None) -> str:
    """Name up to the first dot, so 'meeting.2024.mp3' exports as 'meeting'."""
    name = (filename or "").split(".")[0]
    return name or "transcript"


def transcript_txt(text: str) -> bytes:
    return text.encode("utf-8")


def transcript_docx(text: str) -> bytes:
    """Build a .docx with one paragraph per line of the transcript."""
    try:
        from docx import Document
    except ImportError as e:
        raise DocxUnavailableError("python-docx is not installed") from e

    document = Document()
    for line in text.split("\n"):
        document.add_paragraph(line)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
