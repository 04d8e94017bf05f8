"""Google Cloud Text-to-Speech gateway."""

from __future__ import annotations

from google.api_core import exceptions as google_exceptions
from google.cloud import texttospeech as tts

from speechdesk_common.errors import ProviderError
from speechdesk_common.logging import get_logger

from ..engine import SynthesisGateway, VoiceDescriptor, VoiceParams, is_ssml

log = get_logger(__name__)


def _gender_name(value) -> str:
    try:
        return tts.SsmlVoiceGender(value).name
    except ValueError:
        return str(value)


class GoogleSynthesisGateway(SynthesisGateway):
    """Synthesizes MP3 audio with ``google-cloud-texttospeech``.

    The client is created once and shared across requests; credentials come
    from ``GOOGLE_APPLICATION_CREDENTIALS`` (see ``configure_google_credentials``).
    """

    def __init__(self, client: tts.TextToSpeechClient | None = None) -> None:
        self._client = client if client is not None else tts.TextToSpeechClient()

    @property
    def name(self) -> str:
        return "google"

    def build_request(self, text: str, params: VoiceParams) -> dict:
        """Marshal text and voice parameters into the provider's request shape."""
        if is_ssml(text):
            synthesis_input = tts.SynthesisInput(ssml=text)
        else:
            synthesis_input = tts.SynthesisInput(text=text)

        voice_kwargs = {"language_code": params.language_code or ""}
        if params.voice_name:
            voice_kwargs["name"] = params.voice_name
        if params.ssml_gender:
            voice_kwargs["ssml_gender"] = tts.SsmlVoiceGender[params.ssml_gender]

        return {
            "input": synthesis_input,
            "voice": tts.VoiceSelectionParams(**voice_kwargs),
            "audio_config": tts.AudioConfig(
                audio_encoding=tts.AudioEncoding.MP3,
                speaking_rate=params.speaking_rate,
                pitch=params.pitch,
            ),
        }

    def synthesize(self, text: str, params: VoiceParams) -> bytes:
        request = self.build_request(text, params)
        log.info(
            "synthesize_request",
            voice_name=params.voice_name,
            language_code=params.language_code,
            ssml=bool(request["input"].ssml),
            text_length=len(text),
        )
        try:
            response = self._client.synthesize_speech(**request)
        except google_exceptions.GoogleAPICallError as e:
            log.error("tts_provider_error", operation="synthesize", error=str(e))
            raise ProviderError(f"Google Text-to-Speech API error: {e.message}") from e
        return response.audio_content or b""

    def list_voices(self, language_code: str | None = None) -> list[VoiceDescriptor]:
        try:
            if language_code:
                response = self._client.list_voices(language_code=language_code)
            else:
                response = self._client.list_voices()
        except google_exceptions.GoogleAPICallError as e:
            log.error("tts_provider_error", operation="list_voices", error=str(e))
            raise ProviderError(f"Google Text-to-Speech API error: {e.message}") from e

        return [
            VoiceDescriptor(
                name=voice.name,
                language_codes=list(voice.language_codes),
                ssml_gender=_gender_name(voice.ssml_gender),
                natural_sample_rate_hertz=voice.natural_sample_rate_hertz,
            )
            for voice in response.voices
        ]
