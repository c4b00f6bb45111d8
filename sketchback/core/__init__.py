"""Core infrastructure components for sketchback."""

from .config import Config, get_config
from .exceptions import (
    DecryptionFailed,
    MalformedContainer,
    MalformedLogicTree,
    MalformedSection,
    MalformedViewTree,
    ServiceError,
    SketchbackError,
    UnsupportedBlock,
    UnsupportedComponent,
    ValidationError,
)
from .logging import get_logger, setup_logging
from .types import SECTION_NAMES, SectionName, ServiceResult

__all__ = [
    "Config",
    "get_config",
    "SketchbackError",
    "ValidationError",
    "ServiceError",
    "MalformedContainer",
    "DecryptionFailed",
    "MalformedSection",
    "MalformedLogicTree",
    "MalformedViewTree",
    "UnsupportedComponent",
    "UnsupportedBlock",
    "get_logger",
    "setup_logging",
    "SectionName",
    "SECTION_NAMES",
    "ServiceResult",
]
