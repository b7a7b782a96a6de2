"""Tests for logging setup."""

import logging
import tempfile
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

from capture_hub.logging_config import LOG_FILE_NAME, LOG_RETENTION_DAYS, configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_only(self, monkeypatch) -> None:
        """Test the default console handler and level."""
        monkeypatch.delenv("LOG_DIR", raising=False)
        monkeypatch.setenv("LOG_LEVEL", "warning")

        configure_logging()

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert [type(h) for h in root.handlers] == [RichHandler]

    def test_rotating_file(self) -> None:
        """Test daily-rotated file logging."""
        with tempfile.TemporaryDirectory() as tmpdir:
            configure_logging(level="DEBUG", log_dir=tmpdir)

            root = logging.getLogger()
            file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
            assert len(file_handlers) == 1
            assert file_handlers[0].backupCount == LOG_RETENTION_DAYS

            logging.getLogger("capture_hub.test").info("hello")
            file_handlers[0].flush()
            assert "hello" in (Path(tmpdir) / LOG_FILE_NAME).read_text()

            configure_logging(level="INFO", log_dir=None)
            file_handlers[0].close()
