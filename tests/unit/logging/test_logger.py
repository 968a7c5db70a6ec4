# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — formatters and setup."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from soilsense.logging.context import clear_context, set_report_context, set_stage
from soilsense.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def _reset():
    clear_context()
    yield
    clear_context()
    root = logging.getLogger("soilsense")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)


def _record(msg="Analysis complete", level=logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord("soilsense.test", level, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "soilsense.test"
        assert entry["message"] == "Analysis complete"
        assert "context" not in entry

    def test_context_injected(self):
        set_report_context("r-42")
        set_stage("analysis")
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["context"] == {"report_id": "r-42", "stage": "analysis"}

    def test_extra_data(self):
        entry = json.loads(JsonFormatter().format(_record(data={"score": 75})))
        assert entry["data"] == {"score": 75}

    def test_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "soilsense.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        entry = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]


class TestTextFormatter:
    def test_context_rendered(self):
        set_report_context("r-7")
        set_stage("persist")
        line = TextFormatter().format(_record())
        assert "[report=r-7]" in line
        assert "(persist)" in line
        assert line.endswith("- Analysis complete")


class TestSetupLogging:
    def test_json_to_stream(self):
        stream = io.StringIO()
        setup_logging(level="DEBUG", log_format="json", stream=stream)
        get_logger("tests").debug("hello")
        entry = json.loads(stream.getvalue().strip())
        assert entry["logger"] == "soilsense.tests"
        assert entry["message"] == "hello"

    def test_reinit_does_not_duplicate_handlers(self):
        setup_logging(stream=io.StringIO())
        setup_logging(stream=io.StringIO())
        assert len(logging.getLogger("soilsense").handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "soilsense.log"
        setup_logging(log_format="text", log_file=str(log_file), stream=io.StringIO())
        logging.getLogger("soilsense.api").info("written")
        for handler in logging.getLogger("soilsense").handlers:
            handler.flush()
        assert "written" in log_file.read_text(encoding="utf-8")

    def test_level(self):
        setup_logging(level="WARNING", stream=io.StringIO())
        assert logging.getLogger("soilsense").level == logging.WARNING
