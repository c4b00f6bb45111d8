"""
Custom exception hierarchy for sketchback.

All exceptions inherit from SketchbackError to enable consistent error handling
across the pipeline. Each decoding stage has its own exception type carrying
enough context (section, line, screen, tag) to diagnose a failure without
re-running with extra logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SketchbackError(Exception):
    """Base exception for all sketchback errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ValidationError(SketchbackError):
    """Raised when caller-supplied arguments are invalid."""

    field_name: str | None = None

    def __str__(self) -> str:
        base = super().__str__()
        if self.field_name:
            return f"Validation failed for '{self.field_name}': {base}"
        return f"Validation failed: {base}"


@dataclass
class ServiceError(SketchbackError):
    """Raised when a service operation fails for a reason outside decoding."""

    service_name: str = ""
    operation: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.service_name}.{self.operation}]: {base}"


@dataclass
class MalformedContainer(SketchbackError):
    """Raised when a backup container is truncated or misses a section."""

    section: str = ""

    def __str__(self) -> str:
        return f"Malformed container (section '{self.section}'): {super().__str__()}"


@dataclass
class DecryptionFailed(SketchbackError):
    """Raised when a ciphertext does not decode to valid text."""

    section: str = ""

    def __str__(self) -> str:
        where = f" section '{self.section}'" if self.section else ""
        return f"Decryption failed for{where or ' buffer'}: {super().__str__()}"


@dataclass
class MalformedSection(SketchbackError):
    """Raised when a section's plaintext cannot be parsed into records."""

    section: str = ""
    line: int = 0

    def __str__(self) -> str:
        return f"Malformed section '{self.section}' at line {self.line}: {super().__str__()}"


@dataclass
class MalformedLogicTree(SketchbackError):
    """Raised when logic records violate a structural invariant."""

    screen: str = ""
    handler: str = ""
    block_id: str = ""

    def __str__(self) -> str:
        where = f"{self.screen}/{self.handler}" if self.handler else self.screen
        block = f" block {self.block_id}" if self.block_id else ""
        return f"Malformed logic tree in {where}{block}: {super().__str__()}"


@dataclass
class MalformedViewTree(SketchbackError):
    """Raised when view records do not form a single rooted tree."""

    screen: str = ""
    view_id: str = ""

    def __str__(self) -> str:
        view = f" view '{self.view_id}'" if self.view_id else ""
        return f"Malformed view tree in {self.screen}{view}: {super().__str__()}"


@dataclass
class UnsupportedComponent(SketchbackError):
    """Raised when a component tag or attribute has no mapping entry."""

    tag: str = ""
    screen: str = ""

    def __str__(self) -> str:
        return f"Unsupported component '{self.tag}' in {self.screen}: {super().__str__()}"


@dataclass
class UnsupportedBlock(SketchbackError):
    """Raised when a block, expression or event tag has no template entry.

    Never emitted as a comment or skipped: dropping a block would generate
    code that silently omits behavior.
    """

    tag: str = ""
    screen: str = ""
    handler: str = ""

    def __str__(self) -> str:
        return (
            f"Unsupported block '{self.tag}' in {self.screen}/{self.handler}: "
            f"{super().__str__()}"
        )
