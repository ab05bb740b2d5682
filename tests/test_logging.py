"""Tests for the structured log formatter."""

import json
import logging

from modelbridge.utils.logging import (
    QUIET_LOGGERS,
    StructuredFormatter,
    configure_logging,
    get_logger,
    log,
)


def _record(logger_name: str = "modelbridge") -> logging.LogRecord:
    captured = []

    class Capture(logging.Handler):
        def emit(self, record):
            captured.append(record)

    logger = logging.getLogger(logger_name)
    handler = Capture()
    logger.addHandler(handler)
    old_level = logger.level
    logger.setLevel(logging.DEBUG)
    try:
        log.warning(logger, "llm.retry", "attempt_failed", "Attempt raised",
                    attempt=2, error="boom", skipped=None)
    finally:
        logger.removeHandler(handler)
        logger.setLevel(old_level)
    return captured[0]


def test_json_output_has_queryable_fields():
    data = json.loads(StructuredFormatter().format(_record()))
    assert data["level"] == "WARNING"
    assert data["module"] == "llm.retry"
    assert data["action"] == "attempt_failed"
    assert data["msg"] == "Attempt raised"
    assert data["attempt"] == 2
    assert data["error"] == "boom"
    assert "skipped" not in data


def test_pretty_output():
    line = StructuredFormatter(pretty=True).format(_record())
    assert "W [LLM.RETRY   ] attempt_failed: Attempt raised" in line
    assert "attempt=2" in line


def test_third_party_records_are_wrapped():
    record = logging.LogRecord("httpx", logging.INFO, __file__, 1, "HTTP Request", None, None)
    data = json.loads(StructuredFormatter().format(record))
    assert data["module"] == "httpx"
    assert data["action"] == "log"


def test_get_logger_namespacing():
    assert get_logger().name == "modelbridge"
    assert get_logger("scripts").name == "modelbridge.scripts"


def test_configure_logging_installs_formatter_and_quiets_dependencies(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "pretty")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    saved_quiet = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    try:
        configure_logging()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        formatter = root.handlers[0].formatter
        assert isinstance(formatter, StructuredFormatter) and formatter.pretty
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("langchain_core").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        for name, level in saved_quiet.items():
            logging.getLogger(name).setLevel(level)
