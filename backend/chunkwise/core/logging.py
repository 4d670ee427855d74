"""Structured logging for the service and the CLI.

Records are rendered as one JSON object per line. Values passed through
``extra`` under a ``ctx_`` prefix are collected into a ``context`` object,
e.g. ``logger.info("done", extra={"ctx_filename": name})``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO

import orjson

LEVEL_ENV = "CHKW_LOG_LEVEL"
FORMAT_ENV = "CHKW_LOG_FORMAT"
CONTEXT_PREFIX = "ctx_"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = {
            key[len(CONTEXT_PREFIX) :]: value
            for key, value in record.__dict__.items()
            if key.startswith(CONTEXT_PREFIX)
        }
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(
    level: str | int | None = None,
    use_json: bool | None = None,
    stream: TextIO | None = None,
) -> None:
    """Install a single root handler; unset arguments fall back to ``CHKW_LOG_*``."""
    if level is None:
        level = os.environ.get(LEVEL_ENV, "INFO").upper()
    if use_json is None:
        use_json = os.environ.get(FORMAT_ENV, "json").lower() != "text"

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(TEXT_FORMAT))

    logging.captureWarnings(True)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]


def get_logger(name: str = "chunkwise") -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
