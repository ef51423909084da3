"""Turn graded question responses into per-skill competency scores and gaps."""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Sequence

from loguru import logger
from pydantic import ValidationError

from skillgap.config import settings
from skillgap.domain.errors import AppError, EmptyInputError, InvalidResponseError
from skillgap.domain.schemas import (
    AssessmentAnalysisResult,
    GapEntry,
    LevelThresholds,
    QuestionResponse,
    SkillScoreEntry,
    StrengthEntry,
)
from skillgap.instrumentation.trace import trace_exception, tracepoint
from skillgap.services.scoring.categorizer import categorize_score
from skillgap.services.scoring.levels import (
    classify_level,
    gap_priority,
    resolve_gap_threshold,
    resolve_thresholds,
    rounded_mean,
)


def _raw_question_id(item: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get("question_id")
    return getattr(item, "question_id", None)


def _check_score(response: QuestionResponse) -> QuestionResponse:
    if not math.isfinite(response.score) or response.score < 0 or response.score > 100:
        raise InvalidResponseError(
            f"Response for question {response.question_id} has score {response.score!r} outside 0-100",
            question_id=response.question_id,
        )
    return response


def _coerce_response(item: Any) -> QuestionResponse:
    if isinstance(item, QuestionResponse):
        return _check_score(item)
    question_id = _raw_question_id(item)
    if not isinstance(item, Mapping):
        raise InvalidResponseError(
            f"Response for question {question_id} is not a mapping: {type(item).__name__}",
            question_id=question_id,
        )
    try:
        response = QuestionResponse.model_validate(dict(item))
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'response'}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidResponseError(
            f"Response for question {question_id} is invalid ({details})",
            question_id=question_id,
        ) from exc
    return _check_score(response)


def _validate_responses(responses: Sequence[Any] | None) -> List[QuestionResponse]:
    items = list(responses or ())
    if not items:
        raise EmptyInputError()
    return [_coerce_response(item) for item in items]


def analyze(
    responses: Sequence[QuestionResponse | Mapping[str, Any]],
    gap_threshold: float | None = None,
    level_thresholds: LevelThresholds | Mapping[str, Any] | None = None,
) -> AssessmentAnalysisResult:
    """Aggregate one assignment's graded responses into an :class:`AssessmentAnalysisResult`.

    Skills are scored by the rounded mean of their questions. ``overall_score`` is
    weighted by question count and includes questions with no linked skill.
    Skills averaging below ``gap_threshold`` are reported as gaps, worst first.
    Omitted thresholds fall back to :data:`skillgap.config.settings`.
    """

    try:
        thresholds = resolve_thresholds(
            settings.level_thresholds() if level_thresholds is None else level_thresholds
        )
        cutoff = resolve_gap_threshold(settings.gap_threshold if gap_threshold is None else gap_threshold)
        graded = _validate_responses(responses)
    except AppError as exc:
        trace_exception(f"analysis.{exc.code}", exc, question_id=getattr(exc, "question_id", None))
        raise

    by_skill: Dict[str, List[float]] = defaultdict(list)
    unlinked = 0
    for response in graded:
        if response.skill_id is None:
            unlinked += 1
        else:
            by_skill[response.skill_id].append(response.score)

    skill_scores: Dict[str, SkillScoreEntry] = {}
    for skill_id in sorted(by_skill):
        scores = by_skill[skill_id]
        average = rounded_mean(scores)
        skill_scores[skill_id] = SkillScoreEntry(
            skill_id=skill_id,
            question_count=len(scores),
            average_score=average,
            level=classify_level(average, thresholds),
        )

    overall = rounded_mean(response.score for response in graded)

    gaps = tuple(
        GapEntry(
            skill_id=entry.skill_id,
            average_score=entry.average_score,
            gap_percentage=100 - entry.average_score,
            priority=gap_priority(entry.level),
        )
        for entry in sorted(skill_scores.values(), key=lambda e: (e.average_score, e.skill_id))
        if entry.average_score < cutoff
    )
    strengths = tuple(
        StrengthEntry(skill_id=entry.skill_id, average_score=entry.average_score)
        for entry in sorted(skill_scores.values(), key=lambda e: (-e.average_score, e.skill_id))
        if entry.level == "high"
    )

    if unlinked:
        logger.warning(
            "{} of {} responses have no linked skill; skill coverage is incomplete",
            unlinked,
            len(graded),
        )
    if not skill_scores:
        logger.warning("No response is linked to a skill; skill_scores will be empty")
    logger.debug(
        "Analysed {} responses: overall={} skills={} gaps={}",
        len(graded),
        overall,
        len(skill_scores),
        len(gaps),
    )
    tracepoint(
        "analysis.completed",
        responses=len(graded),
        overall_score=overall,
        skills=len(skill_scores),
        gaps=[gap.skill_id for gap in gaps],
        unlinked=unlinked,
    )

    return AssessmentAnalysisResult(
        overall_score=overall,
        skill_scores=skill_scores,
        gaps=gaps,
        strengths=strengths,
        unlinked_question_count=unlinked,
        total_responses=len(graded),
        proficiency=categorize_score(overall),
    )
