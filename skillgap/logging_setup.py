"""Centralised logging configuration for hosts embedding the scoring core."""

from __future__ import annotations

import sys
from typing import Any

from loguru import logger

from skillgap.config import settings


def _inject_defaults(record: dict[str, Any]) -> None:
    """Guarantee required ``extra`` keys exist for the log formatter."""

    extra = record.setdefault("extra", {})
    extra.setdefault("assignment", "")


def setup_logging(level: str | None = None, *, sink: Any = None) -> int:
    """Configure Loguru with a single structured sink and return its handler id."""

    logger.remove()
    logger.configure(extra={"assignment": ""}, patcher=_inject_defaults)
    fmt = (
        "{time:YYYY-MM-DDTHH:mm:ss.SSS} | {level} | "
        "assignment={extra[assignment]} | {name} | msg={message}"
    )
    return logger.add(
        sink if sink is not None else sys.stdout,
        format=fmt,
        level=(level or settings.log_level or "INFO").upper(),
        backtrace=False,
        diagnose=False,
    )
