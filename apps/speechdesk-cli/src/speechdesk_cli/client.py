"""HTTP client for the speechdesk API."""

from __future__ import annotations

from typing import Any

import httpx

from .config import settings
from .voice_settings import VoiceSettings


class SpeechdeskError(Exception):
    """An API call failed. ``message`` is the server's error text, unchanged."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class SpeechdeskClient:
    """Synchronous client for every speechdesk endpoint."""

    def __init__(
        self,
        server_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=(server_url or settings.server_url).rstrip("/"),
            timeout=timeout if timeout is not None else settings.timeout,
            transport=transport,
        )

    def __enter__(self) -> SpeechdeskClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self._client.request(method, path, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("error") or response.text
            except ValueError:
                message = response.text or f"HTTP error! Status: {response.status_code}"
            raise SpeechdeskError(response.status_code, message)
        return response

    def list_voices(self, language_code: str | None = None) -> list[dict]:
        params = {"language_code": language_code} if language_code else None
        return self._request("GET", "/voices", params=params).json()["voices"]

    def preview(self, settings: VoiceSettings, text: str | None = None) -> str:
        """Return base64 MP3 for a voice sample."""
        body = settings.to_request()
        if text is not None:
            body["text"] = text
        return self._request("POST", "/preview_tts", json=body).json()["audioContent"]

    def create_speech(self, text: str, settings: VoiceSettings | None = None) -> dict:
        body: dict[str, Any] = {"text": text}
        if settings is not None:
            body.update(settings.to_request())
        return self._request("POST", "/tts", json=body).json()

    def list_speeches(self) -> list[dict]:
        return self._request("GET", "/speeches").json()

    def download_audio(self, audio_url: str) -> bytes:
        return self._request("GET", audio_url).content

    def delete_speech(self, speech_id: int) -> None:
        self._request("DELETE", f"/speeches/{speech_id}")
