"""Decompile orchestration."""

from .service import DecompileInput, DecompileOutput, DecompileService

__all__ = ["DecompileInput", "DecompileOutput", "DecompileService"]
