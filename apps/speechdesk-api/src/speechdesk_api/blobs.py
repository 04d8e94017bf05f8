"""Filesystem storage for synthesized audio blobs."""
from __future__ import annotations
import os
import secrets
import tempfile
from pathlib import Path

from speechdesk_common.errors import PersistenceError
from speechdesk_common.logging import get_logger

log = get_logger(__name__)


class FileBlobStore:
    """Stores MP3 payloads as individual files under ``root``.

    Keys are bare file names; anything that would escape ``root`` is rejected.
    """

    def __init__(self, root: str, suffix: str = ".mp3"):
        self.root = Path(root)
        self.suffix = suffix
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not key or os.path.basename(key) != key or key in (".", ".."):
            raise ValueError(f"invalid blob key: {key!r}")
        return self.root / key

    def new_key(self) -> str:
        return f"{secrets.token_hex(8)}{self.suffix}"

    def put(self, data: bytes) -> str:
        """Write ``data`` under a fresh key and return the key."""
        key = self.new_key()
        path = self._path(key)
        try:
            fd, tmp = tempfile.mkstemp(dir=self.root, prefix=".tmp_", suffix=self.suffix)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, path)
            finally:
                if os.path.exists(tmp):
                    os.remove(tmp)
        except OSError as e:
            log.error("blob_write_failed", key=key, error=str(e))
            raise PersistenceError(f"Failed to store audio: {e}") from e
        return key

    def get(self, key: str) -> bytes:
        return self._path(key).read_bytes()

    def exists(self, key: str | None) -> bool:
        if not key:
            return False
        try:
            return self._path(key).is_file()
        except ValueError:
            return False

    def delete(self, key: str) -> bool:
        """Remove a blob. Returns False when it was already gone."""
        path = self._path(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
