"""Tests for logging setup."""

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from podsite.config.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(logging.NOTSET)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_default_level(self) -> None:
        """Test INFO with a rich console handler."""
        setup_logging()

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert any(isinstance(h, RichHandler) for h in root.handlers)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_verbose(self) -> None:
        """Test verbose forces DEBUG everywhere."""
        setup_logging(verbose=True, level="ERROR")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_configured_level(self) -> None:
        """Test the level name is honoured."""
        setup_logging(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_log_file(self, tmp_path: Path) -> None:
        """Test messages are also written to the log file."""
        log_file = tmp_path / "logs" / "podsite.log"
        setup_logging(log_file=log_file)

        logging.getLogger("podsite.test").info("feed refreshed")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text()
        assert "INFO podsite.test: feed refreshed" in content
