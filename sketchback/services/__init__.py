"""Services package for sketchback."""

from .decompile import DecompileService

__all__ = ["DecompileService"]
