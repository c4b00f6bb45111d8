"""
Configuration management for sketchback.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for the decoding and generation stages.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()


class DecodingConfig(BaseModel):
    """Container and cipher configuration."""

    cipher_key: str = Field(
        default="sketchwaresecure", description="AES key of the section transform (16 bytes)"
    )
    cipher_iv: str = Field(
        default="sketchwaresecure", description="AES IV of the section transform (16 bytes)"
    )
    skipped_view_extensions: list[str] = Field(
        default_factory=lambda: ["xml_fab"],
        description="View section header extensions that are not decoded",
    )

    @field_validator("cipher_key", "cipher_iv")
    @classmethod
    def _sixteen_bytes(cls, value: str) -> str:
        if len(value.encode("utf-8")) != 16:
            raise ValueError("AES-128 key and IV must be exactly 16 bytes")
        return value


class OutputConfig(BaseModel):
    """Generated project layout configuration."""

    base_path: Path = Field(default=Path("./output"), description="Default output directory")
    layout_dir: str = Field(default="res/layout", description="Directory for XML layouts")
    source_dir: str = Field(default="java", description="Root directory for Java sources")
    source_extension: Literal["java"] = Field(default="java", description="Source file extension")
    indent: str = Field(default="    ", description="Indentation unit for generated files")


class Config(BaseModel):
    """Root configuration for sketchback."""

    project_name: str = Field(default="sketchback", description="Project identifier")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    decoding: DecodingConfig = Field(default_factory=DecodingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        return cls(
            log_level=os.environ.get("SKB_LOG_LEVEL", "INFO"),  # type: ignore
            decoding=DecodingConfig(
                cipher_key=os.environ.get("SKB_CIPHER_KEY", "sketchwaresecure"),
                cipher_iv=os.environ.get("SKB_CIPHER_IV", "sketchwaresecure"),
            ),
            output=OutputConfig(
                base_path=Path(os.environ.get("SKB_OUTPUT_PATH", "./output")),
                layout_dir=os.environ.get("SKB_LAYOUT_DIR", "res/layout"),
                source_dir=os.environ.get("SKB_SOURCE_DIR", "java"),
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
