"""
Configuration management for the transcriber service.
Loads settings from environment variables using Pydantic.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Transcription API configuration
    OPENAI_API_KEY: str = ""
    TRANSCRIPTION_API_URL: str = "https://api.openai.com/v1/audio/transcriptions"
    TRANSCRIPTION_MODEL: str = "whisper-1"
    TRANSCRIPTION_TIMEOUT_SECONDS: int = 600

    # Upload ceiling shared by download and upload (500 MiB)
    MAX_UPLOAD_BYTES: int = 500 * 1024 * 1024
    DEFAULT_CONTENT_TYPE: str = "audio/mpeg"

    # Remote file download configuration
    DOWNLOAD_TIMEOUT_SECONDS: int = 300  # 5 minutes for large files
    DOWNLOAD_CHUNK_SIZE: int = 65536

    # Webpage hosts that never serve the media itself at the shared URL
    BLOCKED_URL_PATTERNS: List[str] = [
        "youtube.com",
        "youtu.be",
        "tiktok.com",
        "instagram.com",
        "facebook.com",
        "fb.watch",
        "twitter.com",
        "vimeo.com",
    ]

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Singleton settings instance
settings = Settings()
