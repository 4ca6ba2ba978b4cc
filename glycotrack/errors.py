"""Exceptions raised by the collaborators around the HbA1c core."""
from typing import Optional


class GlycotrackError(Exception):
    """Base class for application errors."""


class LLMConfigurationError(GlycotrackError):
    """The LLM client is missing required configuration (e.g. the API key)."""


class LLMServiceError(GlycotrackError):
    """The LLM API call failed or returned an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class StorageError(GlycotrackError):
    """A read or write against the report store failed."""


class PdfExtractionError(GlycotrackError):
    """The uploaded file could not be read as a PDF."""
