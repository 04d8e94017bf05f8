"""Helpers for base64 audio returned by the preview endpoint."""

from __future__ import annotations

import base64
import binascii
import tempfile
from pathlib import Path


def decode_audio(base64_string: str) -> bytes:
    try:
        return base64.b64decode(base64_string, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 audio: {e}") from e


def save_audio(data: bytes, path: str | Path | None = None, suffix: str = ".mp3") -> Path:
    """Write audio to ``path``, or to a fresh temporary file when none is given."""
    if path is None:
        with tempfile.NamedTemporaryFile(prefix="speechdesk-", suffix=suffix, delete=False) as f:
            f.write(data)
            return Path(f.name)
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    return target
