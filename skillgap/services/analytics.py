"""Cross-assessment analytics over an employee's analysis history."""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Sequence

from skillgap.domain.schemas import (
    AnalyticsSummary,
    AssessmentAnalysisResult,
    PriorityGap,
    SkillLevel,
    SkillTrend,
    StrengthOverview,
    TrendDirection,
)
from skillgap.services.scoring.levels import round_half_up, rounded_mean

TREND_WINDOW = 3
TREND_TOLERANCE = 5
MAX_PRIORITY_GAPS = 10


def _mean(values: Sequence[int]) -> Decimal:
    return sum((Decimal(value) for value in values), Decimal(0)) / len(values)


def _window_change(values: Sequence[int]) -> Decimal:
    window = min(TREND_WINDOW, len(values))
    return _mean(values[-window:]) - _mean(values[:window])


def _direction(change: Decimal) -> TrendDirection:
    if change > TREND_TOLERANCE:
        return "improving"
    if change < -TREND_TOLERANCE:
        return "declining"
    return "stable"


def _percent_of(count: int, total: int) -> int:
    return round_half_up(Decimal(count) * 100 / total)


def _skill_trends(results: Sequence[AssessmentAnalysisResult]) -> List[SkillTrend]:
    scores: Dict[str, List[int]] = defaultdict(list)
    levels: Dict[str, SkillLevel] = {}
    for result in results:
        for skill_id, entry in result.skill_scores.items():
            scores[skill_id].append(entry.average_score)
            levels[skill_id] = entry.level

    trends = []
    for skill_id, history in scores.items():
        if len(history) >= 2:
            change = _window_change(history)
            trend = SkillTrend(
                skill_id=skill_id,
                scores=history,
                current_level=levels[skill_id],
                trend=_direction(change),
                average_score=rounded_mean(history),
                latest_score=history[-1],
                change=round_half_up(change),
            )
        else:
            trend = SkillTrend(
                skill_id=skill_id,
                scores=history,
                current_level=levels[skill_id],
                average_score=history[0],
                latest_score=history[0],
            )
        trends.append(trend)
    trends.sort(key=lambda t: (-t.latest_score, t.skill_id))
    return trends


def _strengths_overview(results: Sequence[AssessmentAnalysisResult]) -> List[StrengthOverview]:
    scores: Dict[str, List[int]] = defaultdict(list)
    for result in results:
        for strength in result.strengths:
            scores[strength.skill_id].append(strength.average_score)

    overview = [
        StrengthOverview(
            skill_id=skill_id,
            count=len(history),
            avg_score=rounded_mean(history),
            consistency=_percent_of(len(history), len(results)),
        )
        for skill_id, history in scores.items()
    ]
    overview.sort(key=lambda s: (-s.consistency, s.skill_id))
    return overview


def _priority_gaps(results: Sequence[AssessmentAnalysisResult]) -> List[PriorityGap]:
    gaps: Dict[str, List[int]] = defaultdict(list)
    priorities: Dict[str, List[int]] = defaultdict(list)
    for result in results:
        for gap in result.gaps:
            gaps[gap.skill_id].append(gap.gap_percentage)
            priorities[gap.skill_id].append(gap.priority)

    ranked = [
        PriorityGap(
            skill_id=skill_id,
            count=len(history),
            avg_gap=rounded_mean(history),
            persistence=_percent_of(len(history), len(results)),
            priority=sum(priorities[skill_id]) / len(priorities[skill_id]),
        )
        for skill_id, history in gaps.items()
    ]
    ranked.sort(key=lambda g: (-g.persistence, -g.avg_gap, g.skill_id))
    return ranked[:MAX_PRIORITY_GAPS]


def summarize_assessments(results: Sequence[AssessmentAnalysisResult]) -> AnalyticsSummary:
    """Summarise chronologically ordered analyses (oldest first) for one employee.

    Trends compare the mean of the last three scores against the first three;
    a shift of more than five points either way counts as improving/declining.
    """

    history = list(results)
    if not history:
        return AnalyticsSummary()

    overall = [result.overall_score for result in history]
    improvement = round_half_up(_window_change(overall)) if len(overall) >= 2 else 0

    return AnalyticsSummary(
        total_assessments=len(history),
        overall_average=rounded_mean(overall),
        improvement_rate=improvement,
        skill_trends=_skill_trends(history),
        strengths_overview=_strengths_overview(history),
        priority_gaps=_priority_gaps(history),
    )
