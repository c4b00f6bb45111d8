"""
Logging for sketchback.

structlog renders each event to a single line and hands it to the stdlib
root logger, where a rich handler adds the timestamp, level and colour. In
verbose (DEBUG) runs every line also carries the function and line that
emitted it, and tracebacks show local variables.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config

_CALLSITE = structlog.processors.CallsiteParameterAdder(
    {
        structlog.processors.CallsiteParameter.FUNC_NAME,
        structlog.processors.CallsiteParameter.LINENO,
    }
)


def build_processors(debug: bool) -> list[structlog.types.Processor]:
    """Processor chain for one run.

    Args:
        debug: Add call-site fields to every event

    Returns:
        Processors ending in a plain console renderer
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if debug:
        processors.append(_CALLSITE)
    processors.append(structlog.dev.ConsoleRenderer(colors=False, pad_event=32))
    return processors


def setup_logging(config: Config | None = None) -> None:
    """Configure logging for a CLI run.

    Safe to call repeatedly: the root handler is replaced every time.

    Args:
        config: Optional configuration. If None, uses INFO level.
    """
    log_level = config.log_level if config else "INFO"
    level = getattr(logging, log_level, logging.INFO)
    debug = level <= logging.DEBUG

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=build_processors(debug),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured bound logger
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind context variables (e.g. the current screen) to later log entries."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
