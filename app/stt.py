"""
Speech-to-text client for the hosted Whisper transcription API.
Builds the multipart upload and maps API failures to UpstreamTranscriptionError.
"""
import logging
import mimetypes
from typing import Tuple, Dict, Any, Optional
import httpx
from .config import Settings
from .errors import UpstreamTranscriptionError, UploadTooLargeError
from .schemas import FetchedMedia

logger = logging.getLogger(__name__)

FALLBACK_ERROR_MESSAGE = "Transcription failed"
UPLOAD_FILENAME = "audiofile"

# Extensions the API recognises, keyed by media type
_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mpga": "mpga",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/m4a": "m4a",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/flac": "flac",
    "audio/x-flac": "flac",
    "video/mp4": "mp4",
    "video/mpeg": "mpeg",
    "video/webm": "webm",
}


def check_upload_size(size: int, max_bytes: int) -> None:
    """
    Enforce the upload ceiling.

    Raises:
        UploadTooLargeError: If size exceeds max_bytes
    """
    if size > max_bytes:
        message = f"File size {size} bytes exceeds maximum upload size of {max_bytes} bytes"
        logger.error(f"Transcription error: {message}")
        raise UploadTooLargeError(message)


def _upload_filename(content_type: str) -> str:
    """Pick a filename whose extension matches the media type."""
    base_type = content_type.split(";")[0].strip().lower()
    extension = _EXTENSIONS.get(base_type)
    if extension is None:
        guessed = mimetypes.guess_extension(base_type)
        extension = guessed.lstrip(".") if guessed else "mp3"
    return f"{UPLOAD_FILENAME}.{extension}"


def build_transcription_payload(
    media: FetchedMedia,
    language: str,
    settings: Settings
) -> Tuple[Dict[str, Tuple[str, bytes, str]], Dict[str, str]]:
    """
    Build the multipart form for the transcription API.

    Args:
        media: Downloaded media
        language: Language code, or "auto" to let the API detect it
        settings: Settings with model name and default content type

    Returns:
        Tuple of (files, data) ready for httpx multipart encoding
    """
    content_type = media.content_type or settings.DEFAULT_CONTENT_TYPE
    files = {
        "file": (_upload_filename(content_type), media.content, content_type)
    }
    data = {"model": settings.TRANSCRIPTION_MODEL}
    if language != "auto":
        data["language"] = language
    return files, data


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _upstream_error_message(payload: Any) -> Optional[str]:
    """Extract error.message from an API error body."""
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return message if isinstance(message, str) and message else None
    if isinstance(error, str) and error:
        return error
    return None


def transcribe_media(
    media: FetchedMedia,
    language: str,
    client: httpx.Client,
    settings: Settings
) -> str:
    """
    Send media to the transcription API and return the transcript text.

    Args:
        media: Downloaded media
        language: Language code, or "auto"
        client: HTTP client used for the request
        settings: Settings with API URL, key, model and upload ceiling

    Returns:
        Transcript text

    Raises:
        UpstreamTranscriptionError: On network error, non-2xx, or oversize upload
    """
    check_upload_size(media.size, settings.MAX_UPLOAD_BYTES)

    files, data = build_transcription_payload(media, language, settings)
    logger.info(
        f"Starting transcription for {media.source_url} "
        f"(model={settings.TRANSCRIPTION_MODEL}, language={language}, {media.size} bytes)"
    )

    try:
        response = client.post(
            settings.TRANSCRIPTION_API_URL,
            files=files,
            data=data,
            headers={"Authorization": f"Bearer {settings.OPENAI_API_KEY}"},
            timeout=settings.TRANSCRIPTION_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        result = response.json()

    except httpx.HTTPStatusError as e:
        payload = _error_payload(e.response)
        logger.error(f"Transcription error: {e.response.status_code} - {payload}")
        raise UpstreamTranscriptionError(
            _upstream_error_message(payload) or str(e) or FALLBACK_ERROR_MESSAGE
        )
    except httpx.RequestError as e:
        logger.error(f"Transcription error: {str(e)}")
        raise UpstreamTranscriptionError(str(e) or FALLBACK_ERROR_MESSAGE)
    except ValueError as e:
        logger.error(f"Transcription error: invalid JSON response - {str(e)}")
        raise UpstreamTranscriptionError(FALLBACK_ERROR_MESSAGE)

    text = result.get("text") if isinstance(result, dict) else None
    if not isinstance(text, str):
        logger.error(f"Transcription error: response has no text field - {result}")
        raise UpstreamTranscriptionError(FALLBACK_ERROR_MESSAGE)

    logger.info(f"Transcription completed. Length: {len(text)} chars")
    return text
