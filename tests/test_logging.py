"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging

import structlog

from pnl_core.logging import get_logger, setup_logging
from pnl_core.report import build_report


class TestSetupLogging:
    def test_json_format(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_json")
        logger.info("test message", wallet="0xabc")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["event"] == "test message"
        assert line["wallet"] == "0xabc"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_console_format(self, capsys):
        setup_logging(level="INFO", log_format="console")
        logger = get_logger("test_console")
        logger.info("hello console", outcome="Yes")

        captured = capsys.readouterr()
        assert "hello console" in captured.err
        assert "Yes" in captured.err

    def test_log_level_filtering(self, capsys):
        setup_logging(level="WARNING", log_format="json")
        logger = get_logger("test_level")
        logger.info("should be hidden")
        logger.warning("should appear")

        captured = capsys.readouterr()
        assert "should be hidden" not in captured.err
        assert "should appear" in captured.err

    def test_get_logger_with_context(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_ctx", wallet="0xdef", method="fifo")
        logger.info("context test")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["wallet"] == "0xdef"
        assert line["method"] == "fifo"

    def test_contextvars_binding(self, capsys):
        setup_logging(level="INFO", log_format="json")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id="abc123")

        logger = get_logger("test_ctxvars")
        logger.info("with context var")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["request_id"] == "abc123"

        structlog.contextvars.clear_contextvars()

    def test_stdlib_records_rendered(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logging.getLogger("some.library").warning("plain stdlib")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["event"] == "plain stdlib"
        assert line["logger"] == "some.library"

    def test_noisy_loggers_quieted(self):
        setup_logging(level="DEBUG", log_format="json")
        assert logging.getLogger("httpx").level == logging.WARNING


class TestReportLogging:
    def test_pnl_computed_event(self, make_fill, capsys):
        setup_logging(level="INFO", log_format="json")
        build_report([make_fill("BUY", 10, 0.4), make_fill("SELL", 10, 0.5)], wallet="0xabc")

        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        event = next(line for line in lines if line["event"] == "pnl_computed")
        assert event["trades"] == 2
        assert event["positions"] == 1
        assert event["oversells"] == 0
