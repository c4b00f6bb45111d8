"""
Storage backend interface.

Generated layouts and sources are written through this interface so the
decompile service never touches the filesystem directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class StorageBackend(ABC):
    """Abstract storage backend interface."""

    @abstractmethod
    def store_bytes(self, key: str, data: bytes) -> str:
        """Store raw bytes and return the storage key.

        Args:
            key: Storage key/path relative to the backend root.
            data: Raw bytes to store.

        Returns:
            The final storage key.
        """
        ...

    @abstractmethod
    def store_text(self, key: str, content: str) -> str:
        """Store UTF-8 text and return the storage key."""
        ...

    @abstractmethod
    def load_bytes(self, key: str) -> bytes:
        ...

    @abstractmethod
    def load_text(self, key: str) -> str:
        ...

    @abstractmethod
    def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key.

        Returns:
            True if the key existed and was removed.
        """
        ...

    @abstractmethod
    def list_keys(self, prefix: str = "") -> list[str]:
        """List stored keys starting with ``prefix``, sorted."""
        ...

    @abstractmethod
    def get_local_path(self, key: str) -> Path | None:
        """Local filesystem path of a key, for backends that have one."""
        ...
