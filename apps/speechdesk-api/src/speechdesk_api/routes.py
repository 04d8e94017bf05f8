"""Speech API routes: voices, preview, create/list/delete saved speeches."""

from __future__ import annotations

import base64

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from speechdesk_common.errors import NotFoundError, ValidationError, error_response
from speechdesk_common.logging import get_logger

from .config import APIConfig, VoiceDefaults
from .engine import SynthesisGateway, VoiceParams
from .schemas import ErrorBody, PreviewResponse, SpeechRecord, SynthesizeRequest, VoicesResponse
from .store import SpeechStore

log = get_logger(__name__)

router = APIRouter(tags=["tts"], responses={500: {"model": ErrorBody}})

PREVIEW_REQUIRED = "Text, voice name, and language code are required for preview."
NO_AUDIO = "Text-to-speech provider returned no audio content."

# largest value an SQL INTEGER primary key can hold
MAX_SPEECH_ID = 2**63 - 1


def get_gateway(request: Request) -> SynthesisGateway:
    return request.app.state.gateway


def get_store(request: Request) -> SpeechStore:
    return request.app.state.store


def get_config(request: Request) -> APIConfig:
    return request.app.state.config


def parse_speech_id(raw: str) -> int:
    """Turn a path id into a store key; ids the store could never hold are unknown."""
    if not raw.isascii() or not raw.isdigit() or int(raw) > MAX_SPEECH_ID:
        raise NotFoundError("Speech not found")
    return int(raw)


def check_text_length(text: str, config: APIConfig) -> None:
    if len(text) > config.max_text_length:
        raise ValidationError(f"Text too long. Maximum: {config.max_text_length} characters.")


def language_from_voice(voice_name: str) -> str | None:
    """Derive ``en-US`` from a voice name like ``en-US-Standard-C``."""
    parts = voice_name.split("-")
    return "-".join(parts[:2]) if len(parts) >= 3 else None


def resolve_voice_params(req: SynthesizeRequest, defaults: VoiceDefaults) -> VoiceParams:
    """Fill in configured defaults for anything the request left out."""
    rate = req.speaking_rate if req.speaking_rate is not None else defaults.speaking_rate
    pitch = req.pitch if req.pitch is not None else defaults.pitch

    if not req.voice_name and not req.language_code:
        return VoiceParams(
            voice_name=defaults.voice_name or None,
            language_code=defaults.language_code,
            speaking_rate=rate,
            pitch=pitch,
            ssml_gender=None if defaults.voice_name else defaults.ssml_gender,
        )

    language_code = req.language_code
    if not language_code and req.voice_name:
        language_code = language_from_voice(req.voice_name) or defaults.language_code
    return VoiceParams(
        voice_name=req.voice_name or None,
        language_code=language_code,
        speaking_rate=rate,
        pitch=pitch,
    )


def serialize_speech(request: Request, item: dict) -> dict:
    """Replace the internal blob key with a playable audio URL."""
    data = dict(item)
    audio_key = data.pop("audio_key", None)
    data["audio_url"] = str(request.url_for("get_speech_audio", speech_id=data["id"])) if audio_key else None
    return data


@router.get("/voices", response_model=VoicesResponse)
def list_voices(
    language_code: str | None = None,
    gateway: SynthesisGateway = Depends(get_gateway),
) -> dict:
    """List the provider's voices, optionally for one language."""
    voices = gateway.list_voices(language_code=language_code or None)
    log.info("voices_listed", language_code=language_code, count=len(voices))
    return {"voices": [v.to_dict() for v in voices]}


@router.post("/preview_tts", response_model=PreviewResponse, responses={400: {"model": ErrorBody}})
def preview_tts(
    req: SynthesizeRequest,
    gateway: SynthesisGateway = Depends(get_gateway),
    config: APIConfig = Depends(get_config),
) -> dict:
    """Synthesize a voice sample without saving it. Returns base64 MP3."""
    text = req.text if req.text is not None else config.preview_text
    if not text.strip() or not req.voice_name or not req.language_code:
        raise ValidationError(PREVIEW_REQUIRED)
    check_text_length(text, config)

    params = VoiceParams(
        voice_name=req.voice_name,
        language_code=req.language_code,
        speaking_rate=req.speaking_rate if req.speaking_rate is not None else 1.0,
        pitch=req.pitch if req.pitch is not None else 0.0,
    )
    audio = gateway.preview(params, text=text)
    return {"audioContent": base64.b64encode(audio).decode("ascii")}


@router.post(
    "/tts",
    status_code=201,
    response_model=SpeechRecord,
    responses={400: {"model": ErrorBody}, 422: {"model": ErrorBody}},
)
def create_speech(
    req: SynthesizeRequest,
    request: Request,
    gateway: SynthesisGateway = Depends(get_gateway),
    store: SpeechStore = Depends(get_store),
    config: APIConfig = Depends(get_config),
):
    """Synthesize text and save it with its audio.

    Clients sending ``Accept: audio/mpeg`` get the MP3 itself back instead of
    the JSON record.
    """
    text = req.text
    if text is None or not text.strip():
        raise ValidationError("Text is required.")
    check_text_length(text, config)

    params = resolve_voice_params(req, config.voice)
    audio = gateway.synthesize(text, params)
    if not audio:
        log.error("tts_no_audio", text_length=len(text), voice_name=params.voice_name)
        return error_response(NO_AUDIO, 422)

    try:
        item = store.create(text, params, audio)
    except ValidationError as e:
        log.error("speech_validation_failed", error=e.message)
        return error_response(e.message, 422)

    if "audio/mpeg" in request.headers.get("accept", ""):
        return Response(
            content=audio,
            status_code=201,
            media_type="audio/mpeg",
            headers={"Content-Disposition": f'inline; filename="speech-{item["id"]}.mp3"'},
        )
    return serialize_speech(request, item)


@router.get("/speeches", response_model=list[SpeechRecord])
def list_speeches(request: Request, store: SpeechStore = Depends(get_store)) -> list[dict]:
    """List saved speeches, newest first."""
    return [serialize_speech(request, item) for item in store.list()]


@router.get("/speeches/{speech_id}/audio", name="get_speech_audio", responses={404: {"model": ErrorBody}})
def get_speech_audio(speech_id: str, store: SpeechStore = Depends(get_store)) -> Response:
    """Stream a saved speech's MP3 for inline playback."""
    audio = store.get_audio(parse_speech_id(speech_id))
    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={"Content-Disposition": f'inline; filename="speech-{speech_id}.mp3"'},
    )


@router.delete("/speeches/{speech_id}", status_code=204, responses={404: {"model": ErrorBody}})
def delete_speech(speech_id: str, store: SpeechStore = Depends(get_store)) -> Response:
    """Delete a saved speech and its audio."""
    store.delete(parse_speech_id(speech_id))
    return Response(status_code=204)
