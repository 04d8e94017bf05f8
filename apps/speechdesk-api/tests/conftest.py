import pytest
from fastapi.testclient import TestClient

from speechdesk_api.config import APIConfig
from speechdesk_api.engine import SynthesisGateway, VoiceDescriptor
from speechdesk_api.main import create_app

FAKE_MP3 = b"ID3\x04\x00fake-mp3-frames"


class FakeGateway(SynthesisGateway):
    """Records calls and returns canned audio instead of calling a provider."""

    def __init__(self, audio: bytes = FAKE_MP3):
        self.audio = audio
        self.error: Exception | None = None
        self.calls = []
        self.voices = [
            VoiceDescriptor("en-US-Standard-C", ["en-US"], "FEMALE", 24000),
            VoiceDescriptor("en-US-Wavenet-D", ["en-US"], "MALE", 24000),
            VoiceDescriptor("de-DE-Standard-B", ["de-DE"], "MALE", 24000),
        ]

    @property
    def name(self) -> str:
        return "fake"

    def synthesize(self, text, params):
        self.calls.append((text, params))
        if self.error:
            raise self.error
        return self.audio

    def list_voices(self, language_code=None):
        if self.error:
            raise self.error
        return [v for v in self.voices if language_code is None or language_code in v.language_codes]


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def config(tmp_path):
    return APIConfig(
        database_url=f"sqlite:///{tmp_path / 'speechdesk.db'}",
        audio_dir=str(tmp_path / "audio"),
        cors_origins=["*"],
    )


@pytest.fixture()
def client(config, gateway):
    app = create_app(config, gateway=gateway)
    with TestClient(app) as c:
        yield c
