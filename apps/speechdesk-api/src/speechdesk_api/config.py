"""Configuration for speechdesk-api."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from speechdesk_common.config import get_env, get_env_float, get_env_int, get_env_list
from speechdesk_common.logging import get_logger

log = get_logger(__name__)


@dataclass
class VoiceDefaults:
    """Voice parameters applied when a request leaves them out.

    ``speaking_rate`` is a multiplier (0.25 to 4.0) and ``pitch`` an offset in
    semitones (-20.0 to 20.0). ``ssml_gender`` is only sent to the provider
    when no explicit voice name was requested.
    """

    voice_name: str = field(default_factory=lambda: get_env("DEFAULT_VOICE_NAME", "en-US-Standard-C"))
    language_code: str = field(default_factory=lambda: get_env("DEFAULT_LANGUAGE_CODE", "en-US"))
    ssml_gender: str = field(default_factory=lambda: get_env("DEFAULT_SSML_GENDER", "NEUTRAL"))
    speaking_rate: float = field(default_factory=lambda: get_env_float("DEFAULT_SPEAKING_RATE", 1.0))
    pitch: float = field(default_factory=lambda: get_env_float("DEFAULT_PITCH", 0.0))


@dataclass
class APIConfig:
    """Service configuration from environment variables."""

    # Storage: metadata rows in SQL, MP3 blobs on disk
    database_url: str = field(default_factory=lambda: get_env("DATABASE_URL", "sqlite:///data/speechdesk.db"))
    audio_dir: str = field(default_factory=lambda: get_env("AUDIO_DIR", "data/audio"))

    # Synthesis provider
    provider: str = field(default_factory=lambda: get_env("TTS_PROVIDER", "google"))
    preview_text: str = field(default_factory=lambda: get_env("PREVIEW_TEXT", "This is a voice preview."))
    max_text_length: int = field(default_factory=lambda: get_env_int("MAX_TEXT_LENGTH", 5000))
    voice: VoiceDefaults = field(default_factory=VoiceDefaults)

    # HTTP
    host: str = field(default_factory=lambda: get_env("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: get_env_int("PORT", 8000))
    cors_origins: list[str] = field(default_factory=lambda: get_env_list("CORS_ORIGINS", "*"))

    # Logging
    log_level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: get_env("LOG_FORMAT", "console"))

    # Development
    environment: str = field(default_factory=lambda: get_env("APP_ENV", "development"))
    credentials_file: str = field(
        default_factory=lambda: get_env("GOOGLE_CREDENTIALS_FILE", "config/google-credentials.json")
    )


def configure_google_credentials(config: APIConfig) -> str | None:
    """Point the Google client libraries at a service-account key file.

    ``GOOGLE_APPLICATION_CREDENTIALS_JSON_PATH`` wins when set. In development
    a key file at ``config.credentials_file`` is used if it exists. Returns the
    path that was configured, if any.
    """
    explicit = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS_JSON_PATH")
    if explicit:
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = explicit
        log.info("google_credentials_configured", source="env", path=explicit)
        return explicit

    if config.environment == "development" and Path(config.credentials_file).is_file():
        path = str(Path(config.credentials_file).resolve())
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = path
        log.info("google_credentials_configured", source="file", path=path)
        return path

    return os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
