"""Abstract speech synthesis gateway interface."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

# Whole input wrapped in one element, e.g. <speak>...</speak>
_MARKUP_RE = re.compile(r"\A<([A-Za-z][\w:.-]*)(?:\s[^>]*)?>.*</\1\s*>\Z", re.DOTALL)


def is_ssml(text: str) -> bool:
    """Return True when ``text`` looks like SSML markup.

    A tag-delimiter check only: the trimmed text must open with a tag and end
    with the matching closing tag. Malformed markup is left for the provider
    to reject.
    """
    return bool(_MARKUP_RE.match(text.strip()))


@dataclass(frozen=True)
class VoiceParams:
    voice_name: str | None = None
    language_code: str | None = None
    speaking_rate: float = 1.0
    pitch: float = 0.0
    ssml_gender: str | None = None


@dataclass
class VoiceDescriptor:
    name: str
    language_codes: list[str] = field(default_factory=list)
    ssml_gender: str = "SSML_VOICE_GENDER_UNSPECIFIED"
    natural_sample_rate_hertz: int = 0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "language_codes": list(self.language_codes),
            "ssml_gender": self.ssml_gender,
            "natural_sample_rate_hertz": self.natural_sample_rate_hertz,
        }


class SynthesisGateway(ABC):
    """Base class for speech synthesis providers.

    Implementations raise ``ProviderError`` for failures the provider
    reports; anything else propagates unchanged.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def synthesize(self, text: str, params: VoiceParams) -> bytes:
        """Synthesize text or SSML to MP3 bytes. May return b"" if the provider sent no audio."""
        ...

    @abstractmethod
    def list_voices(self, language_code: str | None = None) -> list[VoiceDescriptor]:
        """Return the provider's voice catalog, optionally filtered by language."""
        ...

    def preview(self, params: VoiceParams, text: str) -> bytes:
        """Synthesize a short sample for auditioning a voice; nothing is stored."""
        return self.synthesize(text, params)
