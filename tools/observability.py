"""Instrumentation for compatibility tool calls.

Requests and results are logged as shape summaries (slot and wardrobe counts,
tier tallies, percentages), never as the garment rows themselves.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from matcher_app.logging_config import bind_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

_RESULT_FIGURES = {
    "status": "status",
    "percentage": "percentage",
    "percentages": "percentages",
    "level": "match_level",
    "tier": "match_tier",
}


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _present(rows: Any) -> int:
    return sum(1 for row in rows if row is not None) if isinstance(rows, list) else 0


def request_summary(kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Count outfit slots, empty slots and wardrobe items of a tool request."""

    summary: Dict[str, Any] = {"wardrobe_items": _present(kwargs.get("wardrobe"))}
    outfit = kwargs.get("outfit")
    if isinstance(outfit, list):
        summary["outfit_slots"] = len(outfit)
        summary["empty_slots"] = len(outfit) - _present(outfit)
    outfits = kwargs.get("outfits")
    if isinstance(outfits, list):
        summary["outfits"] = len(outfits)
    return summary


def result_summary(result: Any) -> Dict[str, Any]:
    """Pick the score figures and per-tier slot tallies out of a tool response."""

    if not isinstance(result, dict):
        return {}
    summary = {name: result[key] for key, name in _RESULT_FIGURES.items() if key in result}
    slots = result.get("slots")
    if slots:
        summary["tier_counts"] = dict(Counter(slot["tier"] for slot in slots if not slot.get("empty")))
    return summary


def instrument_tool(
    tool_name: str,
    input_model: type[BaseModel] | None = None,
    on_validation_error: Callable[[ValidationError], R] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Validate keyword input against ``input_model`` and log the scoring call.

    Events: ``compatibility_request_rejected`` when validation fails,
    ``compatibility_scored`` on success, ``compatibility_request_failed`` with
    the traceback when the tool raises.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = bind_correlation_id()
            start = time.perf_counter()

            if input_model:
                try:
                    kwargs = input_model.model_validate(kwargs).model_dump()
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "compatibility_request_rejected",
                        tool=tool_name,
                        correlation_id=correlation_id,
                        error_count=exc.error_count(),
                        error_locations=[list(error["loc"]) for error in exc.errors()],
                    )
                    if on_validation_error:
                        return on_validation_error(exc)
                    raise

            request = request_summary(kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "compatibility_request_failed",
                    tool=tool_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    exc_info=True,
                    **request,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "compatibility_scored",
                tool=tool_name,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
                **request,
                **result_summary(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_tool", "request_summary", "result_summary"]
