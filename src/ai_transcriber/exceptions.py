class TranscriberError(Exception):
    """Base exception for the transcriber service."""


class ConfigurationError(TranscriberError):
    """Raised when the server-side credential for the hosted model is missing."""


class GenerationError(TranscriberError):
    """Raised when the hosted model call fails or returns no content."""


class ResponseFormatError(TranscriberError):
    """Raised when the model reply is not valid JSON or does not match the schema."""
