"""Configuration for speechdesk-cli."""

from __future__ import annotations

from speechdesk_common.config import get_env, get_env_float


class CLIConfig:
    """CLI configuration from environment variables."""

    server_url: str = get_env("SPEECHDESK_SERVER_URL", "http://localhost:8000")
    timeout: float = get_env_float("SPEECHDESK_TIMEOUT", 60.0)
    voice_name: str = get_env("SPEECHDESK_VOICE_NAME", "")


settings = CLIConfig()
