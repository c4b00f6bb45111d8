"""
Core type definitions for sketchback.

Provides the section vocabulary and the result wrapper returned by services.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar


class SectionName(str, Enum):
    """The six sections every project carries."""

    LOGIC = "logic"
    VIEW = "view"
    FILE = "file"
    LIBRARY = "library"
    RESOURCE = "resource"
    PROJECT = "project"


SECTION_NAMES: tuple[str, ...] = tuple(s.value for s in SectionName)

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """Result wrapper for service operations.

    Provides a consistent return type that includes success/failure status,
    the result data, the error message and run metadata such as timings.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T, **metadata: Any) -> ServiceResult[T]:
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata: Any) -> ServiceResult[T]:
        """Create a failed result."""
        return cls(success=False, error=error, metadata=metadata)
