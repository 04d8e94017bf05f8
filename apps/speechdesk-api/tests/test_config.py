import json
import os

import pytest

from speechdesk_api.config import APIConfig, configure_google_credentials


@pytest.fixture(autouse=True)
def clean_credentials_env(monkeypatch):
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS_JSON_PATH", raising=False)
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)


def _key_file(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"type": "service_account"}), encoding="utf-8")
    return path


def test_explicit_path_is_copied(monkeypatch, tmp_path):
    key = _key_file(tmp_path / "keys" / "tts.json")
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS_JSON_PATH", str(key))
    config = APIConfig(credentials_file=str(tmp_path / "unused.json"))

    assert configure_google_credentials(config) == str(key)
    assert os.environ["GOOGLE_APPLICATION_CREDENTIALS"] == str(key)


def test_development_key_file_used(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    _key_file(tmp_path / "config" / "google-credentials.json")
    config = APIConfig(environment="development", credentials_file="config/google-credentials.json")

    expected = str((tmp_path / "config" / "google-credentials.json").resolve())
    assert configure_google_credentials(config) == expected
    assert os.environ["GOOGLE_APPLICATION_CREDENTIALS"] == expected


def test_key_file_ignored_outside_development(monkeypatch, tmp_path):
    key = _key_file(tmp_path / "config" / "google-credentials.json")
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "/etc/speechdesk/key.json")
    config = APIConfig(environment="production", credentials_file=str(key))

    assert configure_google_credentials(config) == "/etc/speechdesk/key.json"
    assert os.environ["GOOGLE_APPLICATION_CREDENTIALS"] == "/etc/speechdesk/key.json"


def test_nothing_configured(tmp_path):
    config = APIConfig(environment="development", credentials_file=str(tmp_path / "missing.json"))
    assert configure_google_credentials(config) is None
    assert "GOOGLE_APPLICATION_CREDENTIALS" not in os.environ
