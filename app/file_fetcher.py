"""
File fetcher for downloading media files from remote locations.
Rejects known webpage URLs and anything the host does not serve as audio/video.
"""
import logging
from typing import Optional
import httpx
from .config import Settings
from .errors import InputValidationError, UpstreamFetchError
from .schemas import FetchedMedia
from .stt import check_upload_size

logger = logging.getLogger(__name__)

WEBPAGE_URL_MESSAGE = (
    "This URL points to a webpage, not a media file. "
    "Please provide a direct link to an audio or video file (e.g. .mp3, .mp4, .wav)."
)

MEDIA_TYPE_PREFIXES = ("audio", "video")


def _blocked_pattern(url: str, patterns) -> Optional[str]:
    """Return the first denylisted pattern found in url, if any."""
    lowered = url.lower()
    for pattern in patterns:
        if pattern.lower() in lowered:
            return pattern
    return None


def validate_audio_url(audio_url: str, settings: Settings) -> str:
    """
    Check that the URL can plausibly be a direct media link.

    Args:
        audio_url: URL supplied by the caller
        settings: Settings holding BLOCKED_URL_PATTERNS

    Returns:
        The URL, stripped of surrounding whitespace

    Raises:
        InputValidationError: If the URL names a webpage host
    """
    audio_url = audio_url.strip()
    pattern = _blocked_pattern(audio_url, settings.BLOCKED_URL_PATTERNS)
    if pattern:
        logger.warning(f"Rejected webpage URL ({pattern}): {audio_url}")
        raise InputValidationError(WEBPAGE_URL_MESSAGE)

    return audio_url


def is_media_content_type(content_type: Optional[str]) -> bool:
    """Check whether a Content-Type header names audio or video."""
    if not content_type:
        return False
    return content_type.strip().lower().startswith(MEDIA_TYPE_PREFIXES)


def fetch_media(audio_url: str, client: httpx.Client, settings: Settings) -> FetchedMedia:
    """
    Download a media file into memory.

    The status code is inspected explicitly instead of raising on non-2xx,
    and the body is only read once status and content type have passed.

    Args:
        audio_url: HTTP/HTTPS URL to download from
        client: HTTP client used for the request
        settings: Settings with timeout, chunk size and upload ceiling

    Returns:
        FetchedMedia with the body, content type and source URL

    Raises:
        UpstreamFetchError: 500 on transport failure, 400 on bad status or type
        UploadTooLargeError: If the body exceeds MAX_UPLOAD_BYTES
    """
    logger.info(f"Downloading media file from URL: {audio_url}")

    try:
        with client.stream(
            "GET",
            audio_url,
            timeout=settings.DOWNLOAD_TIMEOUT_SECONDS,
            follow_redirects=True
        ) as response:
            if response.status_code != 200:
                logger.warning(f"Media host returned {response.status_code} for {audio_url}")
                raise UpstreamFetchError(
                    f"Failed to fetch file. Status code: {response.status_code}"
                )

            content_type = response.headers.get("content-type")
            if not is_media_content_type(content_type):
                logger.warning(f"Non-media Content-Type {content_type!r} for {audio_url}")
                raise UpstreamFetchError(
                    "URL does not point to an audio/video file. "
                    f"Content-Type: {content_type or 'unknown'}"
                )

            declared_size = response.headers.get("content-length")
            if declared_size and declared_size.isdigit():
                check_upload_size(int(declared_size), settings.MAX_UPLOAD_BYTES)

            chunks = []
            downloaded = 0
            for chunk in response.iter_bytes(chunk_size=settings.DOWNLOAD_CHUNK_SIZE):
                downloaded += len(chunk)
                # Stop buffering as soon as the ceiling is crossed
                check_upload_size(downloaded, settings.MAX_UPLOAD_BYTES)
                chunks.append(chunk)

    except (httpx.RequestError, httpx.InvalidURL) as e:
        logger.error(f"Failed to download file from {audio_url}: {str(e)}")
        raise UpstreamFetchError(
            f"Failed to download file: {str(e) or type(e).__name__}", status_code=500
        )

    media = FetchedMedia(
        content=b"".join(chunks),
        content_type=content_type,
        source_url=audio_url
    )
    logger.info(
        f"Download completed: {audio_url} "
        f"({media.size / (1024 * 1024):.2f} MB, {content_type})"
    )
    return media
