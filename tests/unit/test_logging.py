"""Unit tests for logging setup."""

import logging

import structlog
from rich.logging import RichHandler

from sketchback.core.config import Config
from sketchback.core.logging import build_processors, get_logger, setup_logging


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def _rich_handlers():
    return [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]


class TestProcessors:
    """Tests for the processor chain."""

    def test_debug_adds_callsite(self):
        assert any(isinstance(p, structlog.processors.CallsiteParameterAdder) for p in build_processors(True))
        assert not any(isinstance(p, structlog.processors.CallsiteParameterAdder) for p in build_processors(False))

    def test_renders_to_console(self):
        assert isinstance(build_processors(False)[-1], structlog.dev.ConsoleRenderer)


class TestSetup:
    """Tests for setup_logging."""

    def test_level_follows_config(self):
        setup_logging(Config(log_level="WARNING"))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(_rich_handlers()) == 1

    def test_repeated_setup_replaces_handler(self):
        setup_logging(Config(log_level="DEBUG"))
        setup_logging()
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(_rich_handlers()) == 1

    def test_events_reach_stdlib(self):
        setup_logging(Config(log_level="INFO"))
        collect = _Collect()
        logging.getLogger().addHandler(collect)
        try:
            get_logger("sketchback.test").info("Section decoded", section="logic")
            get_logger("sketchback.test").debug("Record detail")
        finally:
            logging.getLogger().removeHandler(collect)
        assert len(collect.messages) == 1
        assert "Section decoded" in collect.messages[0]
        assert "section=logic" in collect.messages[0]
