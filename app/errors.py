"""
Error types raised by the transcription pipeline.
Each carries the HTTP status code it maps to at the handler boundary.
"""
from typing import Optional


class TranscriberError(Exception):
    """Base error for every failure the handler reports to the caller."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MethodNotAllowedError(TranscriberError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class InputValidationError(TranscriberError):
    """Missing or disallowed request input."""

    status_code = 400


class UpstreamFetchError(TranscriberError):
    """
    Media download failure.

    Bad status or content type from the media host is a client error (400);
    a transport failure reaching it is a server error (500).
    """

    status_code = 400


class UpstreamTranscriptionError(TranscriberError):
    """Failure calling the transcription API."""

    status_code = 500


class UploadTooLargeError(UpstreamTranscriptionError):
    """Media exceeds the configured upload ceiling."""
