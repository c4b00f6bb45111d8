"""Record parsing for the six project sections."""

from .cells import parse_attributes, parse_parameters
from .sections import (
    parse_file,
    parse_library,
    parse_logic,
    parse_project,
    parse_resource,
    parse_sections,
    parse_view,
)

__all__ = [
    "parse_attributes",
    "parse_parameters",
    "parse_file",
    "parse_library",
    "parse_logic",
    "parse_project",
    "parse_resource",
    "parse_sections",
    "parse_view",
]
