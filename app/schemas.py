"""
Pydantic models for request/response validation.
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, field_validator


class TranscriptionRequest(BaseModel):
    """Request model for transcription endpoint."""

    audioUrl: str
    language: Optional[str] = "auto"

    @field_validator('audioUrl')
    @classmethod
    def validate_audio_url(cls, v: str) -> str:
        """Ensure audioUrl is not empty."""
        if not v or not v.strip():
            raise ValueError("audioUrl is required")
        return v.strip()

    @field_validator('language')
    @classmethod
    def default_language(cls, v: Optional[str]) -> str:
        """Absent or blank language means auto-detect."""
        if v is None or not str(v).strip():
            return "auto"
        return str(v).strip()


class TranscriptionResponse(BaseModel):
    transcript: str


class ErrorResponse(BaseModel):
    error: str


class FetchedMedia(BaseModel):
    """Downloaded media held in memory for the duration of one request."""

    content: bytes
    content_type: Optional[str] = None
    source_url: str

    @property
    def size(self) -> int:
        return len(self.content)


class HandlerResponse(BaseModel):
    """Framework-independent status code and JSON body."""

    status_code: int
    body: Dict[str, Any]
