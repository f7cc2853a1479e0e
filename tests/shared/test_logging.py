"""Tests for shared/logging.py."""

import logging

import pytest
from rich.logging import RichHandler

import shared.logging as shared_logging
from shared.logging import configure_logging


@pytest.fixture
def clean_root():
    """Restore the root logger after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    shared_logging._configured = False
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    shared_logging._configured = False


class TestConfigureLogging:
    def test_installs_single_rich_handler(self, clean_root):
        """Repeated calls should not stack handlers."""
        configure_logging("INFO")
        configure_logging("INFO")

        rich_handlers = [h for h in clean_root.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1

    def test_sets_level(self, clean_root):
        """The root level should follow the argument."""
        configure_logging("debug")
        assert clean_root.level == logging.DEBUG

        configure_logging("WARNING")
        assert clean_root.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, clean_root):
        """An unknown level name should not break startup."""
        configure_logging("chatty")
        assert clean_root.level == logging.INFO
