"""Base configuration utilities for speechdesk services."""

from __future__ import annotations

import os


def get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.environ.get(key, default)


def get_env_int(key: str, default: int = 0) -> int:
    """Get environment variable as integer."""
    return int(os.environ.get(key, str(default)))


def get_env_float(key: str, default: float = 0.0) -> float:
    """Get environment variable as float."""
    return float(os.environ.get(key, str(default)))


def get_env_list(key: str, default: str = "") -> list[str]:
    """Get a comma-separated environment variable as a list of non-empty items."""
    raw = os.environ.get(key, default)
    return [item.strip() for item in raw.split(",") if item.strip()]
