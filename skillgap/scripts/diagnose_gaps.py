"""Diagnose skill linkage and gap calculation for an exported set of graded responses.

Usage::

    python -m skillgap.scripts.diagnose_gaps responses.json
    cat responses.json | python -m skillgap.scripts.diagnose_gaps --json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence

from skillgap.config import settings
from skillgap.domain.errors import AppError
from skillgap.domain.schemas import AssessmentAnalysisResult
from skillgap.logging_setup import setup_logging
from skillgap.services.scoring.aggregator import analyze
from skillgap.services.scoring.categorizer import categorize_gaps

RULE = "-" * 72


def load_responses(raw: str) -> List[Dict[str, Any]]:
    """Accept either a JSON array of responses or an object with a ``responses`` key."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Payload is not valid JSON: {exc}") from None
    if isinstance(payload, dict):
        payload = payload.get("responses")
    if not isinstance(payload, list):
        raise SystemExit("Expected a JSON array of responses or an object with a 'responses' array")
    return payload


def render_report(result: AssessmentAnalysisResult) -> str:
    lines = [
        "SKILL GAP DIAGNOSIS",
        RULE,
        f"Responses: {result.total_responses}",
        f"Overall score: {result.overall_score}% ({result.proficiency.label_en})",
        f"  With skill_id: {result.total_responses - result.unlinked_question_count}",
        f"  Without skill_id: {result.unlinked_question_count}",
        "",
        f"Skill scores ({len(result.skill_scores)} skills):",
    ]
    for entry in result.skill_scores.values():
        lines.append(
            f"  - Skill {entry.skill_id}: {entry.average_score}% ({entry.level}, {entry.question_count} questions)"
        )
    lines.append("")
    lines.append(f"Gaps ({len(result.gaps)}):")
    for gap in categorize_gaps(result.gaps):
        lines.append(
            f"  - Skill {gap.skill_id}: {gap.average_score}% gap={gap.gap_percentage}% "
            f"priority={gap.priority} difficulty={gap.recommended_difficulty}"
        )
    lines.append("")
    lines.append("DIAGNOSIS")
    lines.append(RULE)
    if not result.skill_scores:
        lines.append("PROBLEM: no question is linked to a skill; link questions to skills before analysis")
    elif result.unlinked_question_count:
        lines.append(
            f"WARNING: {result.unlinked_question_count} questions have no skill_id; skill coverage is incomplete"
        )
    if result.skill_scores and not result.gaps:
        lines.append("OK: every skill is at or above the gap threshold")
    elif result.gaps:
        lines.append(f"GAPS: {len(result.gaps)} skills need training")
    return "\n".join(lines)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the skill gap analysis over exported responses")
    parser.add_argument("path", type=Path, nargs="?", help="Path to a JSON file (defaults to stdin)")
    parser.add_argument("--gap-threshold", type=float, default=None, help="Score below which a skill is a gap")
    parser.add_argument("--high", type=float, default=None, help="Lower bound of the high level")
    parser.add_argument("--medium", type=float, default=None, help="Lower bound of the medium level")
    parser.add_argument("--json", action="store_true", help="Print the analysis result as JSON")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL for this run")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, sink=sys.stderr)

    raw = sys.stdin.read() if args.path is None else args.path.read_text(encoding="utf-8")
    responses = load_responses(raw)

    level_thresholds = None
    if args.high is not None or args.medium is not None:
        level_thresholds = {
            "high": settings.level_high if args.high is None else args.high,
            "medium": settings.level_medium if args.medium is None else args.medium,
        }

    try:
        result = analyze(responses, gap_threshold=args.gap_threshold, level_thresholds=level_thresholds)
    except AppError as exc:
        raise SystemExit(f"{exc.code}: {exc.message}") from exc

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        print(render_report(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
