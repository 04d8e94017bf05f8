"""Request/response schemas for the speech API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SynthesizeRequest(BaseModel):
    text: str | None = None
    voice_name: str | None = None
    language_code: str | None = None
    speaking_rate: float | None = Field(None, ge=0.25, le=4.0)
    pitch: float | None = Field(None, ge=-20.0, le=20.0)


class PreviewResponse(BaseModel):
    audioContent: str  # base64 MP3


class Voice(BaseModel):
    name: str
    language_codes: list[str]
    ssml_gender: str
    natural_sample_rate_hertz: int


class VoicesResponse(BaseModel):
    voices: list[Voice]


class SpeechRecord(BaseModel):
    id: int
    text: str
    voice_name: str | None = None
    language_code: str | None = None
    speaking_rate: float | None = None
    pitch: float | None = None
    audio_url: str | None = None
    created_at: str


class ErrorBody(BaseModel):
    error: str
