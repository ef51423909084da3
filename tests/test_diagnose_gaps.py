from __future__ import annotations

import io
import json
import sys
from pathlib import Path

import pytest
from loguru import logger

from skillgap.scripts import diagnose_gaps

RESPONSES = [
    {"question_id": "q1", "skill_id": "S1", "score": 40},
    {"question_id": "q2", "skill_id": "S1", "score": 50},
    {"question_id": "q3", "skill_id": None, "score": 30},
]


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    logger.remove()
    logger.add(sys.stderr)


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "responses.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_report_from_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, RESPONSES)

    assert diagnose_gaps.main([str(path)]) == 0

    out = capsys.readouterr().out
    assert "Overall score: 40% (Intermediate)" in out
    assert "Skill S1: 45% (low, 2 questions)" in out
    assert "Without skill_id: 1" in out
    assert "WARNING: 1 questions have no skill_id" in out
    assert "priority=1 difficulty=intermediate" in out


def test_json_from_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO(json.dumps({"responses": RESPONSES})))

    assert diagnose_gaps.main(["--json", "--gap-threshold", "40"]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["overall_score"] == 40
    assert result["gaps"] == []
    assert result["unlinked_question_count"] == 1


def test_level_overrides(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, RESPONSES)

    diagnose_gaps.main([str(path), "--medium", "45", "--json"])

    result = json.loads(capsys.readouterr().out)
    assert result["skill_scores"]["S1"]["level"] == "medium"


def test_unlinked_only_reports_problem(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, [{"question_id": "q1", "skill_id": None, "score": 70}])

    diagnose_gaps.main([str(path)])

    assert "PROBLEM: no question is linked to a skill" in capsys.readouterr().out


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ([], "empty_input"),
        ([{"question_id": "q7", "skill_id": "S1", "score": -3}], "q7"),
        ({"rows": []}, "Expected a JSON array"),
    ],
)
def test_failures_exit_with_message(tmp_path: Path, payload, message: str) -> None:
    path = _write(tmp_path, payload)

    with pytest.raises(SystemExit) as exc:
        diagnose_gaps.main([str(path)])

    assert message in str(exc.value)


def test_inverted_levels_exit(tmp_path: Path) -> None:
    path = _write(tmp_path, RESPONSES)

    with pytest.raises(SystemExit) as exc:
        diagnose_gaps.main([str(path), "--high", "40"])

    assert "invalid_configuration" in str(exc.value)


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        diagnose_gaps.main([str(path)])

    assert "not valid JSON" in str(exc.value)
