"""
Test configuration and fixtures.

Outbound HTTP is faked with httpx.MockTransport: media URLs and the
transcription API are routed to per-test callables, and every request the
handler makes is recorded.
"""
from typing import Callable, Dict, List
import httpx
import pytest
from app.config import Settings
from app.handler import TranscriptionRequestHandler

API_URL = "https://api.test/v1/audio/transcriptions"
MEDIA_URL = "https://cdn.example.com/podcast/episode.mp3"


def media_response(content: bytes = b"ID3fake-mp3-bytes", content_type: str = "audio/mpeg") -> httpx.Response:
    return httpx.Response(200, content=content, headers={"Content-Type": content_type})


def transcript_response(text: str = "hello world") -> httpx.Response:
    return httpx.Response(200, json={"text": text})


class FakeUpstream:
    """Routes requests by URL and records them."""

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def route(self, url: str, responder) -> None:
        if isinstance(responder, httpx.Response):
            template = responder
            responder = lambda request: httpx.Response(
                template.status_code, headers=template.headers, content=template.content
            )
        self.routes[url] = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get(str(request.url))
        if responder is None:
            return httpx.Response(404)
        return responder(request)

    @property
    def media_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    @property
    def api_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == API_URL]


@pytest.fixture
def settings():
    return Settings(
        OPENAI_API_KEY="sk-test",
        TRANSCRIPTION_API_URL=API_URL,
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    with httpx.Client(transport=httpx.MockTransport(upstream)) as client:
        yield client


@pytest.fixture
def handler(settings, http_client):
    return TranscriptionRequestHandler(settings, http_client=http_client)
