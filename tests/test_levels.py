from __future__ import annotations

from decimal import Decimal

import pytest

from skillgap.config import settings
from skillgap.domain.errors import InvalidConfigurationError
from skillgap.domain.schemas import LevelThresholds
from skillgap.services.scoring.levels import (
    classify_level,
    gap_priority,
    resolve_gap_threshold,
    resolve_thresholds,
    round_half_up,
    rounded_mean,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(44.5, 45), (89.5, 90), (0.5, 1), (2.4999, 2), (Decimal("59.5"), 60), (100, 100), (0, 0)],
)
def test_round_half_up(value, expected) -> None:
    assert round_half_up(value) == expected


def test_rounded_mean_is_exact() -> None:
    assert rounded_mean([80, 90, 100]) == 90
    assert rounded_mean([40, 50, 30]) == 40
    assert rounded_mean([0.1, 0.2, 0.3, 0.4]) == 0
    assert rounded_mean([33.5, 33.5]) == 34
    with pytest.raises(ValueError):
        rounded_mean([])


def test_classify_level_uses_inclusive_lower_bounds() -> None:
    thresholds = LevelThresholds()
    assert classify_level(80, thresholds) == "high"
    assert classify_level(79.99, thresholds) == "medium"
    assert classify_level(50, thresholds) == "medium"
    assert classify_level(49, thresholds) == "low"


def test_resolve_thresholds_accepts_mappings() -> None:
    assert resolve_thresholds({"high": 90, "medium": 60}) == LevelThresholds(high=90, medium=60)
    assert resolve_thresholds({"high": 90}) == LevelThresholds(high=90, medium=50)
    assert resolve_thresholds(LevelThresholds(high=75.5, medium=40)).high == 75.5


def test_partial_mapping_filled_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "level_high", 90)
    monkeypatch.setattr(settings, "level_medium", 70)

    thresholds = resolve_thresholds({"medium": 40})

    assert thresholds == LevelThresholds(high=90, medium=40)
    assert classify_level(85, thresholds) == "medium"
    assert resolve_thresholds({"high": 95}) == LevelThresholds(high=95, medium=70)


@pytest.mark.parametrize(
    "thresholds",
    [
        {"high": 50, "medium": 60},
        {"high": 60, "medium": 60},
        {"high": "80", "medium": 50},
        {"high": 120, "medium": 50},
        {"high": 80, "medium": -1},
        [80, 50],
    ],
)
def test_resolve_thresholds_rejects_bad_configuration(thresholds) -> None:
    with pytest.raises(InvalidConfigurationError):
        resolve_thresholds(thresholds)


def test_resolve_gap_threshold() -> None:
    assert resolve_gap_threshold(60) == 60.0
    assert resolve_gap_threshold(Decimal("42.5")) == 42.5
    with pytest.raises(InvalidConfigurationError):
        resolve_gap_threshold(True)


def test_gap_priority_orders_low_first() -> None:
    assert [gap_priority(level) for level in ("low", "medium", "high")] == [1, 2, 3]
