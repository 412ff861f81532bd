"""Structured JSON logging for the triage service."""

from __future__ import annotations

import logging
import re
import sys

from pythonjsonlogger import jsonlogger

# Gemini authenticates with a query parameter; httpx logs full request URLs
_KEY_PARAM = re.compile(r"([?&]key=)[^&\s]+")

# Client libraries that log one INFO line per request
_NOISY_LOGGERS = ("httpx", "httpcore", "groq", "anthropic", "asyncpg")


class RedactKeyFilter(logging.Filter):
    """Mask API keys carried in URLs before a record is formatted."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _KEY_PARAM.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(service_name: str, env: str, level: str = "INFO") -> None:
    """Configure JSON logging; every record carries service and environment."""
    handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(request_id)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "severity"},
    )
    handler.setFormatter(formatter)
    handler.addFilter(RedactKeyFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):  # type: ignore[no-untyped-def]
        record = old_factory(*args, **kwargs)
        record.service = service_name  # type: ignore[attr-defined]
        record.environment = env  # type: ignore[attr-defined]
        return record

    logging.setLogRecordFactory(record_factory)
