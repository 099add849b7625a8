"""Tests for log file setup."""
import logging
import re
import sys

import pytest

from repeaty.config import LoggingConfig
from repeaty.logging_setup import setup_logging


@pytest.fixture
def logger(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    result = setup_logging(LoggingConfig(level="INFO", log_file=tmp_path / "repeaty.log"))
    yield result
    for handler in list(result.handlers):
        handler.close()
        result.removeHandler(handler)


@pytest.mark.unit
class TestSetupLogging:
    def test_line_format(self, logger, tmp_path):
        logging.getLogger("repeaty.services.encoder").info("Записано out.png")
        for handler in logger.handlers:
            handler.flush()
        line = (tmp_path / "repeaty.log").read_text(encoding="utf-8").strip()
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} - INFO - Записано out\.png", line)

    def test_excepthook_logs_uncaught_errors(self, logger, tmp_path):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            sys.excepthook(*sys.exc_info())
        text = (tmp_path / "repeaty.log").read_text(encoding="utf-8")
        assert "CRITICAL - Uncaught exception:" in text
        assert "RuntimeError: boom" in text
