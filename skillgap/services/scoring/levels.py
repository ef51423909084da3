from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

from skillgap.config import settings
from skillgap.domain.errors import InvalidConfigurationError
from skillgap.domain.schemas import LevelThresholds, SkillLevel


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer with ties going up (``44.5 -> 45``)."""

    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rounded_mean(values: Iterable[float]) -> int:
    """Exact arithmetic mean of ``values`` rounded half-up."""

    total = Decimal(0)
    count = 0
    for value in values:
        total += Decimal(str(value))
        count += 1
    if count == 0:
        raise ValueError("mean of an empty sequence")
    return round_half_up(total / count)


def _percentage(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidConfigurationError(f"{name} must be numeric, got {value!r}")
    number = float(value)
    if not math.isfinite(number) or number < 0 or number > 100:
        raise InvalidConfigurationError(f"{name} must lie between 0 and 100, got {value!r}")
    return number


def resolve_thresholds(level_thresholds: LevelThresholds | Mapping[str, Any]) -> LevelThresholds:
    """Validate level boundaries; ``high`` must be strictly greater than ``medium``."""

    if isinstance(level_thresholds, LevelThresholds):
        high, medium = level_thresholds.high, level_thresholds.medium
    elif isinstance(level_thresholds, Mapping):
        defaults = settings.level_thresholds()
        high = level_thresholds.get("high", defaults.high)
        medium = level_thresholds.get("medium", defaults.medium)
    else:
        raise InvalidConfigurationError(f"Unsupported level thresholds: {level_thresholds!r}")

    high = _percentage("levelThresholds.high", high)
    medium = _percentage("levelThresholds.medium", medium)
    if high <= medium:
        raise InvalidConfigurationError(
            f"levelThresholds.high ({high:g}) must be greater than levelThresholds.medium ({medium:g})"
        )
    return LevelThresholds(high=high, medium=medium)


def resolve_gap_threshold(gap_threshold: Any) -> float:
    return _percentage("gapThreshold", gap_threshold)


def classify_level(average_score: float, thresholds: LevelThresholds) -> SkillLevel:
    if average_score >= thresholds.high:
        return "high"
    if average_score >= thresholds.medium:
        return "medium"
    return "low"


def gap_priority(level: SkillLevel) -> int:
    # low skills are trained first; high only appears with a generous gap threshold
    return {"low": 1, "medium": 2, "high": 3}[level]
