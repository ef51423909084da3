"""Configuration module that loads environment variables from ``.env``."""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillgap.domain.schemas import LevelThresholds


_BASE_ENV_PATH = Path(".env")
if _BASE_ENV_PATH.exists():
    load_dotenv(_BASE_ENV_PATH, override=False)

_LOCAL_ENV_PATH = Path(".env.local")
if "PYTEST_CURRENT_TEST" not in os.environ and _LOCAL_ENV_PATH.exists():
    load_dotenv(_LOCAL_ENV_PATH, override=False)


class Settings(BaseSettings):
    """Host-level defaults for the aggregation thresholds and diagnostics."""

    model_config = SettingsConfigDict(env_file=(".env",), extra="ignore", populate_by_name=True)

    env: Literal["dev", "staging", "prod", "test"] = Field(default="dev", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    trace_mode: bool = Field(default=False, alias="TRACE_MODE")
    trace_sampling: float = Field(default=1.0, alias="TRACE_SAMPLING")

    # --- Scoring thresholds (percentages) ---------------------------------------
    gap_threshold: float = Field(default=60, alias="GAP_THRESHOLD")
    level_high: float = Field(default=80, alias="LEVEL_HIGH")
    level_medium: float = Field(default=50, alias="LEVEL_MEDIUM")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: str | None) -> str:
        if value is None:
            return "INFO"
        trimmed = str(value).strip().upper()
        return trimmed or "INFO"

    @field_validator("trace_sampling", mode="after")
    @classmethod
    def _clamp_sampling(cls, value: float) -> float:
        if math.isnan(value):
            return 0.0
        return max(0.0, min(value, 1.0))

    @field_validator("gap_threshold", "level_high", "level_medium", mode="after")
    @classmethod
    def _percentage(cls, value: float) -> float:
        if not math.isfinite(value) or value < 0 or value > 100:
            raise ValueError("threshold must be a percentage between 0 and 100")
        return value

    def level_thresholds(self) -> LevelThresholds:
        """Return the configured level boundaries; ordering is checked at analysis time."""

        return LevelThresholds(high=self.level_high, medium=self.level_medium)


settings = Settings()
