"""JSON logging for the order bot: one JSON object per line on stdout."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Iterable

QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "fontTools", "fpdf")


class JSONFormatter(logging.Formatter):
    """Format log records as JSON, carrying structured fields from `extra={"context": ...}`."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Decimal totals and similar values are logged as strings
        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", quiet: Iterable[str] = QUIET_LOGGERS) -> None:
    """Route the root logger to stdout as JSON. Safe to call more than once."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"orderbot.{name}")


def mask_recipient(recipient: str | None) -> str:
    """Keep the last four digits of a phone number for log lines."""
    if not recipient:
        return ""
    if len(recipient) <= 4:
        return "*" * len(recipient)
    return "*" * (len(recipient) - 4) + recipient[-4:]


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that merges a bound context with per-call `context=` kwargs."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = kwargs.pop("context", None)
        if context or self.extra:
            kwargs["extra"] = {"context": {**self.extra, **(context or {})}}
        return msg, kwargs

    def bind(self, **context: Any) -> "ContextAdapter":
        return ContextAdapter(self.logger, {**self.extra, **context})
