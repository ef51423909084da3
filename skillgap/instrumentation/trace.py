"""Sampled JSON tracepoints for the analysis pipeline.

Traces are loguru records whose message is a compact JSON object, so a host
can grep ``analysis.*`` events out of its normal log stream. They are off
unless ``TRACE_MODE`` is set; ``TRACE_SAMPLING`` thins out completion events
while rejections are always written. Every event carries the id of the
assignment bound with :func:`assignment_context`.
"""

from __future__ import annotations

import json
import random
import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator

from loguru import logger

from skillgap.config import settings

_assignment_ctx: ContextVar[str | None] = ContextVar("trace_assignment_id", default=None)


def get_assignment_id() -> str | None:
    return _assignment_ctx.get()


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(key): _jsonable(val) for key, val in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_jsonable(item) for item in value]
    return str(value)


def _sampled_out() -> bool:
    rate = settings.trace_sampling
    return rate <= 0.0 or (rate < 1.0 and random.random() > rate)


def _write(name: str, fields: Dict[str, Any], *, always: bool = False) -> None:
    if not settings.trace_mode or (not always and _sampled_out()):
        return
    event: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        "evt": "trace",
        "name": name,
        "assignment_id": get_assignment_id() or "",
    }
    event.update({key: _jsonable(value) for key, value in fields.items()})
    logger.info(json.dumps(event, default=_jsonable, ensure_ascii=False, separators=(",", ":")))


def tracepoint(name: str, **fields: Any) -> None:
    _write(name, fields)


def trace_exception(name: str, exc: Exception, **fields: Any) -> None:
    """Record a rejected analysis; ``AppError`` code and status are included."""

    summary: Dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    for attr in ("code", "status_code"):
        value = getattr(exc, attr, None)
        if value is not None:
            summary[attr] = value
    lines = traceback.format_exception_only(type(exc), exc)
    summary["stack"] = [line.strip() for line in lines if line.strip()][:4]
    _write(name, {"exception": summary, **fields}, always=True)


@contextmanager
def assignment_context(assignment_id: str | int) -> Iterator[None]:
    """Correlate every trace emitted inside the block with ``assignment_id``."""

    bound = str(assignment_id)
    token = _assignment_ctx.set(bound)
    try:
        with logger.contextualize(assignment=bound):
            yield
    finally:
        _assignment_ctx.reset(token)
