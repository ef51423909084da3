from __future__ import annotations

import pytest
from pydantic import ValidationError

from skillgap.config import Settings
from skillgap.domain.schemas import LevelThresholds


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GAP_THRESHOLD", "LEVEL_HIGH", "LEVEL_MEDIUM", "LOG_LEVEL", "TRACE_SAMPLING"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.gap_threshold == 60
    assert config.level_thresholds() == LevelThresholds(high=80, medium=50)
    assert config.log_level == "INFO"
    assert config.trace_mode is False


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GAP_THRESHOLD", "55")
    monkeypatch.setenv("LEVEL_HIGH", "90")
    monkeypatch.setenv("LEVEL_MEDIUM", "65")
    monkeypatch.setenv("LOG_LEVEL", " warning ")
    monkeypatch.setenv("TRACE_SAMPLING", "3")

    config = Settings(_env_file=None)

    assert config.gap_threshold == 55
    assert config.level_thresholds() == LevelThresholds(high=90, medium=65)
    assert config.log_level == "WARNING"
    assert config.trace_sampling == 1.0


@pytest.mark.parametrize("name", ["GAP_THRESHOLD", "LEVEL_HIGH", "LEVEL_MEDIUM"])
def test_thresholds_must_be_percentages(monkeypatch: pytest.MonkeyPatch, name: str) -> None:
    monkeypatch.setenv(name, "150")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
