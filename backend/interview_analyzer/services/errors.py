"""Errors raised by the upstream AI service wrappers."""

from typing import Optional


class UpstreamServiceError(Exception):
    """A transcription/extraction/evaluation call failed.

    Carries the same opaque shape the API returns to the browser:
    a short message plus an optional detail string.
    """

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
