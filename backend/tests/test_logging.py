"""Tests for structured logging."""

import io
import json
import logging

from chunkwise.core.logging import JsonFormatter, configure_logging


def test_context_extras_are_grouped() -> None:
    record = logging.LogRecord("chunkwise.test", logging.INFO, __file__, 1, "Processed %s", ("a.txt",), None)
    record.ctx_filename = "a.txt"
    record.ctx_strategy = "smart"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Processed a.txt"
    assert payload["level"] == "INFO"
    assert payload["context"] == {"filename": "a.txt", "strategy": "smart"}


def test_text_format_from_environment(monkeypatch) -> None:
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    monkeypatch.setenv("CHKW_LOG_FORMAT", "text")
    stream = io.StringIO()
    try:
        configure_logging(level="DEBUG", stream=stream)
        logging.getLogger("chunkwise.test").debug("plain line")
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
    assert "DEBUG chunkwise.test: plain line" in stream.getvalue()
