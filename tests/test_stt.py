import logging
import httpx
import pytest
from app.errors import UpstreamTranscriptionError, UploadTooLargeError
from app.schemas import FetchedMedia
from app.stt import (
    build_transcription_payload,
    check_upload_size,
    transcribe_media,
    _upstream_error_message,
)
from tests.conftest import API_URL, MEDIA_URL


def _media(content_type="audio/mpeg", content=b"abc"):
    return FetchedMedia(content=content, content_type=content_type, source_url=MEDIA_URL)


def test_payload_without_language(settings):
    files, data = build_transcription_payload(_media(), "auto", settings)
    assert files == {"file": ("audiofile.mp3", b"abc", "audio/mpeg")}
    assert data == {"model": "whisper-1"}


def test_payload_with_language(settings):
    _, data = build_transcription_payload(_media(), "de", settings)
    assert data == {"model": "whisper-1", "language": "de"}


@pytest.mark.parametrize("content_type,filename", [
    ("video/mp4", "audiofile.mp4"),
    ("audio/wav", "audiofile.wav"),
    ("audio/x-m4a", "audiofile.m4a"),
    ("audio/webm; codecs=opus", "audiofile.webm"),
    ("audio/x-unknown-format", "audiofile.mp3"),
])
def test_payload_filename_matches_type(settings, content_type, filename):
    files, _ = build_transcription_payload(_media(content_type), "auto", settings)
    assert files["file"][0] == filename
    assert files["file"][2] == content_type


def test_payload_defaults_content_type(settings):
    files, _ = build_transcription_payload(_media(content_type=None), "auto", settings)
    assert files["file"] == ("audiofile.mp3", b"abc", "audio/mpeg")


def test_check_upload_size_boundary():
    check_upload_size(10, 10)
    with pytest.raises(UploadTooLargeError) as exc:
        check_upload_size(11, 10)
    assert exc.value.message == "File size 11 bytes exceeds maximum upload size of 10 bytes"


def test_default_ceiling_is_500_mib(settings):
    assert settings.MAX_UPLOAD_BYTES == 524288000


@pytest.mark.parametrize("payload,expected", [
    ({"error": {"message": "Invalid API key"}}, "Invalid API key"),
    ({"error": "quota exceeded"}, "quota exceeded"),
    ({"error": {"message": ""}}, None),
    ({"detail": "nope"}, None),
    ("plain text", None),
])
def test_upstream_error_message(payload, expected):
    assert _upstream_error_message(payload) == expected


def test_transcribe_media_missing_text_field(settings, http_client, upstream):
    upstream.route(API_URL, httpx.Response(200, json={"segments": []}))
    with pytest.raises(UpstreamTranscriptionError) as exc:
        transcribe_media(_media(), "auto", http_client, settings)
    assert exc.value.message == "Transcription failed"


def test_transcribe_media_invalid_json(settings, http_client, upstream):
    upstream.route(API_URL, httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(UpstreamTranscriptionError) as exc:
        transcribe_media(_media(), "auto", http_client, settings)
    assert exc.value.message == "Transcription failed"


def test_transcribe_media_empty_transcript_is_valid(settings, http_client, upstream):
    upstream.route(API_URL, httpx.Response(200, json={"text": ""}))
    assert transcribe_media(_media(), "auto", http_client, settings) == ""


def test_check_upload_size_logs_error(caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(UploadTooLargeError):
            check_upload_size(2, 1)
    assert [r.getMessage() for r in caplog.records] == [
        "Transcription error: File size 2 bytes exceeds maximum upload size of 1 bytes"
    ]
