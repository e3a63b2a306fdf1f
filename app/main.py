"""
FastAPI application for the transcriber service.
Provides the API endpoint that turns a media URL into a transcript.
"""
import json
import logging
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from .config import settings
from .handler import TranscriptionRequestHandler


# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

# Every method is routed so non-POST requests get the JSON 405 body
ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "TRACE", "CONNECT"]

# Create FastAPI app
app = FastAPI(
    title="Transcriber Service",
    description="Transcribes audio/video URLs with the Whisper API",
    version="1.0.0"
)


def get_handler() -> TranscriptionRequestHandler:
    """Build the request handler from process settings."""
    return TranscriptionRequestHandler(settings)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.api_route("/api/transcribe", methods=ALL_METHODS)
async def transcribe(
    request: Request,
    handler: TranscriptionRequestHandler = Depends(get_handler)
):
    """
    Transcribe the audio/video file at a URL.

    Body: {"audioUrl": "https://.../file.mp3", "language": "en"}
    language is optional and defaults to "auto".

    Returns:
        200 {"transcript": ...} or 400/405/500 {"error": ...}
    """
    body = None
    if request.method == "POST":
        raw = await request.body()
        if raw:
            try:
                body = json.loads(raw)
            except ValueError:
                logger.warning("Request body is not valid JSON")

    # Outbound calls are blocking; keep them off the event loop
    result = await run_in_threadpool(handler.handle, request.method, body)
    return JSONResponse(status_code=result.status_code, content=result.body)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
