"""Voice selection state shared by the CLI commands."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class VoiceSettings:
    voice_name: str
    language_code: str
    speaking_rate: float = 1.0
    pitch: float = 0.0

    def to_request(self) -> dict:
        return {
            "voice_name": self.voice_name,
            "language_code": self.language_code,
            "speaking_rate": self.speaking_rate,
            "pitch": self.pitch,
        }


def settings_for_voice(voice: dict, speaking_rate: float = 1.0, pitch: float = 0.0) -> VoiceSettings:
    """Build settings from a voice descriptor; its first language code is primary."""
    return VoiceSettings(
        voice_name=voice["name"],
        language_code=voice["language_codes"][0],
        speaking_rate=speaking_rate,
        pitch=pitch,
    )


def pick_default_voice(voices: Sequence[dict]) -> dict | None:
    """Prefer a female en-US Standard voice, then any en-US voice, then the first."""
    for voice in voices:
        if voice["name"].startswith("en-US-Standard") and voice.get("ssml_gender") == "FEMALE":
            return voice
    for voice in voices:
        if voice["name"].startswith("en-US"):
            return voice
    return voices[0] if voices else None


class VoiceSettingsTracker:
    """Reports settings to ``on_change`` only when their value actually changes."""

    def __init__(self, on_change: Callable[[VoiceSettings | None], None]) -> None:
        self._on_change = on_change
        self._last: VoiceSettings | None = None

    @property
    def current(self) -> VoiceSettings | None:
        return self._last

    def update(self, settings: VoiceSettings | None) -> bool:
        """Record new settings. Returns True if ``on_change`` was called."""
        if settings == self._last:
            return False
        self._last = settings
        self._on_change(settings)
        return True
