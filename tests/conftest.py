from __future__ import annotations

import os
from collections.abc import Generator
from typing import List

import pytest

# Ensure deterministic settings exist before importing package modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("TRACE_MODE", "false")
os.environ.setdefault("GAP_THRESHOLD", "60")
os.environ.setdefault("LEVEL_HIGH", "80")
os.environ.setdefault("LEVEL_MEDIUM", "50")

from loguru import logger

from skillgap.config import settings


@pytest.fixture
def log_messages() -> Generator[List[str], None, None]:
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), format="{level} {message}", level="DEBUG")
    try:
        yield messages
    finally:
        logger.remove(handler_id)


@pytest.fixture
def tracing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "trace_mode", True)
    monkeypatch.setattr(settings, "trace_sampling", 1.0)
