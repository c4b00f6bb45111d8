"""
Local filesystem storage backend.

Writes are atomic per file: content goes to a temporary file in the target
directory which is then renamed over the destination.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from .interface import StorageBackend

logger = get_logger(__name__)


class LocalStorageBackend(StorageBackend):
    """Local filesystem storage backend."""

    def __init__(self, base_path: Path) -> None:
        """Initialize local storage.

        Args:
            base_path: Base directory for all storage operations
        """
        self.base_path = Path(base_path).resolve()

    def _get_full_path(self, key: str) -> Path:
        """Resolve a key inside the base directory.

        Raises:
            ValidationError: If the key escapes the base directory.
        """
        clean_key = key.lstrip("/\\")
        full_path = (self.base_path / clean_key).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise ValidationError(
                message="storage key escapes the output directory",
                field_name="key",
                context={"key": key},
                cause=e,
            ) from e
        return full_path

    def _write_atomic(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def store_bytes(self, key: str, data: bytes) -> str:
        full_path = self._get_full_path(key)
        self._write_atomic(full_path, data)
        logger.debug("Stored artifact", key=key, size=len(data))
        return key

    def store_text(self, key: str, content: str) -> str:
        return self.store_bytes(key, content.encode("utf-8"))

    def load_bytes(self, key: str) -> bytes:
        full_path = self._get_full_path(key)
        if not full_path.exists():
            raise FileNotFoundError(f"Key not found: {key}")
        return full_path.read_bytes()

    def load_text(self, key: str) -> str:
        return self.load_bytes(key).decode("utf-8")

    def exists(self, key: str) -> bool:
        return self._get_full_path(key).exists()

    def delete(self, key: str) -> bool:
        full_path = self._get_full_path(key)
        if not full_path.is_file():
            return False
        full_path.unlink()
        return True

    def list_keys(self, prefix: str = "") -> list[str]:
        if not self.base_path.exists():
            return []
        keys = []
        for path in self.base_path.rglob("*"):
            if path.is_file() and not path.name.endswith(".tmp"):
                key = path.relative_to(self.base_path).as_posix()
                if key.startswith(prefix):
                    keys.append(key)
        return sorted(keys)

    def get_local_path(self, key: str) -> Path | None:
        return self._get_full_path(key)
