"""Transcription and summarization proxy for a hosted Gemini model."""

__version__ = "0.1.0"
