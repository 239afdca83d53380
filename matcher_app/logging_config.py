"""JSON logging for compatibility scoring calls.

Every record carries the correlation id of the scoring request it belongs to.
Outfit, item and user identifiers are masked before they reach a handler;
counts, tiers and percentages are logged as-is.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import time
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)

_RECORD_ATTRIBUTES = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}
_IDENTIFIER_KEYS = {
    "user_id",
    "outfit_id",
    "item_id",
    "matched_item_ids",
    "exact_item_ids",
    "loose_item_ids",
}
REDACTED = "[redacted]"


class JsonFormatter(logging.Formatter):
    """One JSON object per record: level, logger, event, correlation id and extras."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", None) or record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        }
        payload.update(redact_for_log(extras))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Route the root logger through :class:`JsonFormatter` on stderr."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.root.handlers.clear()
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler])


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def redact_for_log(payload: Any) -> Any:
    """Mask identifier fields at any depth, leaving scores and counts readable."""

    if isinstance(payload, dict):
        return {
            key: REDACTED if key in _IDENTIFIER_KEYS and value is not None else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple)):
        return [redact_for_log(item) for item in payload]
    if payload is None or isinstance(payload, (str, int, float, bool)):
        return payload
    return str(payload)


def bind_correlation_id(correlation_id: str | None = None) -> str:
    """Return the active correlation id, binding ``correlation_id`` or a fresh one if unset."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    fresh = uuid.uuid4().hex
    CORRELATION_ID.set(fresh)
    return fresh


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    token = CORRELATION_ID.set(correlation_id or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Emit ``event`` with redacted ``fields`` attached as record extras."""

    correlation_id = bind_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[Dict[str, Any]]:
    """Run one scoring operation under its own correlation id.

    Yields a dict the caller fills with result figures (percentage, slot
    counts); it is logged with the elapsed time as ``<name>_completed``, or
    ``<name>_failed`` if the block raises.
    """

    logger = logging.getLogger(__name__)
    summary: Dict[str, Any] = {}
    start = time.perf_counter()
    with correlation_context(attributes.pop("correlation_id", None)):
        try:
            yield summary
        except Exception:
            log_event(
                logger,
                logging.ERROR,
                f"{name}_failed",
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                exc_info=True,
                **attributes,
            )
            raise
        log_event(
            logger,
            logging.INFO,
            f"{name}_completed",
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            **attributes,
            **summary,
        )


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "bind_correlation_id",
    "configure_logging",
    "correlation_context",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
