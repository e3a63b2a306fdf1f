"""
Request handler for synchronous URL-to-transcript requests.

Pipeline (each step short-circuits to an error response):
1. Validate method and body
2. Reject webpage URLs
3. Download the media and check its content type
4. Upload it to the transcription API
5. Return the transcript
"""
import logging
from typing import Any, Optional
import httpx
from pydantic import ValidationError
from .config import Settings
from .errors import TranscriberError, MethodNotAllowedError, InputValidationError
from .file_fetcher import validate_audio_url, fetch_media
from .schemas import TranscriptionRequest, TranscriptionResponse, ErrorResponse, HandlerResponse
from .stt import transcribe_media, FALLBACK_ERROR_MESSAGE

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> HandlerResponse:
    return HandlerResponse(
        status_code=status_code,
        body=ErrorResponse(error=message).model_dump()
    )


class TranscriptionRequestHandler:
    """
    Turns one (method, body) pair into a status code and JSON body.

    Args:
        settings: Configuration, including the API credential
        http_client: Client for both outbound calls. When omitted a client
            is opened per request and closed when the request finishes.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        self.http_client = http_client

    def parse_request(self, method: str, body: Any) -> TranscriptionRequest:
        """
        Validate method, body and URL in order.

        Raises:
            MethodNotAllowedError: If method is not POST
            InputValidationError: If audioUrl is missing, empty or a webpage URL
        """
        if (method or "").upper() != "POST":
            raise MethodNotAllowedError()

        if not isinstance(body, dict):
            raise InputValidationError("audioUrl is required")

        try:
            request = TranscriptionRequest.model_validate(body)
        except ValidationError as e:
            if any(err["loc"] and err["loc"][0] == "audioUrl" for err in e.errors()):
                raise InputValidationError("audioUrl is required")
            raise InputValidationError("language must be a string")

        validate_audio_url(request.audioUrl, self.settings)
        return request

    def _run(self, request: TranscriptionRequest, client: httpx.Client) -> str:
        media = fetch_media(request.audioUrl, client, self.settings)
        return transcribe_media(media, request.language, client, self.settings)

    def transcribe(self, request: TranscriptionRequest) -> str:
        """Fetch the media and return its transcript."""
        if self.http_client is not None:
            return self._run(request, self.http_client)
        with httpx.Client() as client:
            return self._run(request, client)

    def handle(self, method: str, body: Any) -> HandlerResponse:
        """
        Process one request. Never raises: every failure becomes an error body.

        Args:
            method: HTTP method of the inbound request
            body: Decoded JSON body, or None when absent/unparseable

        Returns:
            HandlerResponse with status code and JSON body
        """
        try:
            request = self.parse_request(method, body)
            logger.info(
                f"Received transcription request for: {request.audioUrl} "
                f"(language={request.language})"
            )
            transcript = self.transcribe(request)

        except TranscriberError as e:
            return _error_response(e.status_code, e.message)
        except Exception as e:
            logger.error(f"Unexpected error handling transcription request: {str(e)}", exc_info=True)
            return _error_response(500, str(e) or FALLBACK_ERROR_MESSAGE)

        return HandlerResponse(
            status_code=200,
            body=TranscriptionResponse(transcript=transcript).model_dump()
        )
