import base64
from pathlib import Path

from speechdesk_common.errors import ProviderError, ValidationError


def test_speech_create_list_delete(client, gateway):
    # Create
    resp = client.post("/tts", json={"text": "Hello world"})
    assert resp.status_code == 201
    speech = resp.json()
    assert speech["text"] == "Hello world"
    assert speech["audio_url"].endswith(f"/speeches/{speech['id']}/audio")
    assert speech["created_at"]

    # Defaults reach the gateway when no voice was chosen
    text, params = gateway.calls[0]
    assert text == "Hello world"
    assert params.voice_name == "en-US-Standard-C"
    assert params.language_code == "en-US"
    assert params.speaking_rate == 1.0
    assert params.pitch == 0.0

    # List
    resp = client.get("/speeches")
    assert resp.status_code == 200
    assert [s["id"] for s in resp.json()] == [speech["id"]]

    # Audio locator is playable
    resp = client.get(speech["audio_url"])
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.headers["content-disposition"].startswith("inline")
    assert resp.content == gateway.audio

    # Delete, then delete again
    assert client.delete(f"/speeches/{speech['id']}").status_code == 204
    resp = client.delete(f"/speeches/{speech['id']}")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Speech not found"}
    assert client.get("/speeches").json() == []


def test_create_with_voice_settings(client, gateway):
    resp = client.post("/tts", json={
        "text": "Guten Tag",
        "voice_name": "de-DE-Standard-B",
        "language_code": "de-DE",
        "speaking_rate": 1.25,
        "pitch": -2.5,
    })
    assert resp.status_code == 201
    speech = resp.json()
    assert speech["voice_name"] == "de-DE-Standard-B"
    assert speech["language_code"] == "de-DE"
    assert speech["speaking_rate"] == 1.25
    assert speech["pitch"] == -2.5

    _, params = gateway.calls[0]
    assert params.ssml_gender is None


def test_language_derived_from_voice_name(client, gateway):
    resp = client.post("/tts", json={"text": "Hi", "voice_name": "en-GB-Neural2-A"})
    assert resp.status_code == 201
    assert gateway.calls[0][1].language_code == "en-GB"


def test_ssml_text_is_forwarded_unchanged(client, gateway):
    resp = client.post("/tts", json={"text": "<speak>Hello</speak>"})
    assert resp.status_code == 201
    assert gateway.calls[0][0] == "<speak>Hello</speak>"
    assert resp.json()["text"] == "<speak>Hello</speak>"


def test_blank_text_rejected(client, gateway):
    for body in ({"text": ""}, {"text": "   \n"}, {}, {"text": None}):
        resp = client.post("/tts", json=body)
        assert resp.status_code == 400
        assert "error" in resp.json()
    assert gateway.calls == []
    assert client.get("/speeches").json() == []


def test_out_of_range_voice_params_rejected(client, gateway):
    resp = client.post("/tts", json={"text": "Hi", "speaking_rate": 5.0})
    assert resp.status_code == 400
    assert "speaking_rate" in resp.json()["error"]

    resp = client.post("/tts", json={"text": "Hi", "pitch": -25})
    assert resp.status_code == 400
    assert gateway.calls == []


def test_no_audio_content_is_422(client, gateway):
    gateway.audio = b""
    resp = client.post("/tts", json={"text": "Hello"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "Text-to-speech provider returned no audio content."
    assert client.get("/speeches").json() == []


def test_store_validation_failure_is_422(client, monkeypatch):
    def reject(*args, **kwargs):
        raise ValidationError("Text can't be blank")

    monkeypatch.setattr(client.app.state.store, "create", reject)
    resp = client.post("/tts", json={"text": "Hello"})
    assert resp.status_code == 422
    assert resp.json() == {"error": "Text can't be blank"}


def test_provider_error_is_500(client, gateway):
    gateway.error = ProviderError("Google Text-to-Speech API error: quota exceeded")
    resp = client.post("/tts", json={"text": "Hello"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Google Text-to-Speech API error: quota exceeded"}
    assert client.get("/speeches").json() == []


def test_unexpected_error_is_500(client, gateway):
    gateway.error = RuntimeError("connection reset")
    resp = client.post("/tts", json={"text": "Hello"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "An unexpected error occurred: connection reset"}


def test_accept_audio_returns_mp3(client, gateway):
    resp = client.post("/tts", json={"text": "Hello"}, headers={"Accept": "audio/mpeg"})
    assert resp.status_code == 201
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.headers["content-disposition"].startswith("inline")
    assert resp.content == gateway.audio
    assert len(client.get("/speeches").json()) == 1


def test_speeches_newest_first(client):
    for text in ("first", "second", "third"):
        assert client.post("/tts", json={"text": text}).status_code == 201

    speeches = client.get("/speeches").json()
    assert [s["text"] for s in speeches] == ["third", "second", "first"]
    created = [s["created_at"] for s in speeches]
    assert created == sorted(created, reverse=True)
    assert all(s["audio_url"] for s in speeches)


def test_missing_blob_reports_null_audio_url(client, config):
    speech = client.post("/tts", json={"text": "Hello"}).json()
    for f in Path(config.audio_dir).glob("*.mp3"):
        f.unlink()

    listed = client.get("/speeches").json()
    assert listed[0]["id"] == speech["id"]
    assert listed[0]["audio_url"] is None
    assert client.get(f"/speeches/{speech['id']}/audio").status_code == 404


def test_delete_releases_audio(client, config):
    speech = client.post("/tts", json={"text": "Hello"}).json()
    assert len(list(Path(config.audio_dir).glob("*.mp3"))) == 1

    assert client.delete(f"/speeches/{speech['id']}").status_code == 204
    assert list(Path(config.audio_dir).glob("*.mp3")) == []


def test_delete_unknown_id(client):
    resp = client.delete("/speeches/987654")
    assert resp.status_code == 404
    assert "error" in resp.json()


def test_list_voices_filtered(client):
    resp = client.get("/voices", params={"language_code": "en-US"})
    assert resp.status_code == 200
    voices = resp.json()["voices"]
    assert len(voices) == 2
    assert all("en-US" in v["language_codes"] for v in voices)

    resp = client.get("/voices")
    assert len(resp.json()["voices"]) == 3
    assert set(resp.json()["voices"][0]) == {"name", "language_codes", "ssml_gender", "natural_sample_rate_hertz"}


def test_list_voices_provider_error(client, gateway):
    gateway.error = ProviderError("Google Text-to-Speech API error: permission denied")
    resp = client.get("/voices")
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Google Text-to-Speech API error")


def test_preview_returns_base64_without_saving(client, gateway):
    resp = client.post("/preview_tts", json={
        "voice_name": "en-US-Wavenet-D",
        "language_code": "en-US",
        "speaking_rate": 0.8,
    })
    assert resp.status_code == 200
    assert base64.b64decode(resp.json()["audioContent"]) == gateway.audio

    text, params = gateway.calls[0]
    assert text == "This is a voice preview."
    assert params.voice_name == "en-US-Wavenet-D"
    assert params.speaking_rate == 0.8
    assert params.pitch == 0.0
    assert client.get("/speeches").json() == []


def test_preview_requires_voice_and_language(client, gateway):
    for body in ({"language_code": "en-US"}, {"voice_name": "en-US-Wavenet-D"}, {"text": "hi"}):
        resp = client.post("/preview_tts", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Text, voice name, and language code are required for preview."}
    assert gateway.calls == []


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["service"] == "speechdesk-api"


def test_index_page_served(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert client.get("/static/app.js").status_code == 200


def test_unstorable_ids_are_not_found(client):
    speech = client.post("/tts", json={"text": "Hello"}).json()

    for bad_id in ("99999999999999999999", "abc", "-1", "1.5"):
        resp = client.delete(f"/speeches/{bad_id}")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Speech not found"}

        resp = client.get(f"/speeches/{bad_id}/audio")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Speech not found"}

    assert [s["id"] for s in client.get("/speeches").json()] == [speech["id"]]


def test_preview_text_length_limited(client, config, gateway):
    resp = client.post("/preview_tts", json={
        "text": "a" * (config.max_text_length + 1),
        "voice_name": "en-US-Wavenet-D",
        "language_code": "en-US",
    })
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Text too long")
    assert gateway.calls == []


def test_request_id_echoed(client):
    resp = client.get("/speeches", headers={"x-request-id": "req-42"})
    assert resp.headers["x-request-id"] == "req-42"
    assert client.get("/speeches").headers["x-request-id"]
