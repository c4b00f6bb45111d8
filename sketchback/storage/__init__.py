"""Storage abstraction for generated artifacts."""

from .interface import StorageBackend
from .local import LocalStorageBackend

__all__ = ["StorageBackend", "LocalStorageBackend"]
