"""Proficiency bands used to choose course difficulty for recommendations.

These bands (advanced >= 70, intermediate >= 40) are the display-oriented
categories shown to employees; they are independent of the configurable
``high``/``medium`` competency levels used for skill scores.
"""

from __future__ import annotations

from typing import Any, Iterable, List

from skillgap.domain.schemas import CategorizedGap, GapEntry, ProficiencyCategory

BEGINNER = ProficiencyCategory(
    key="beginner",
    min=0,
    max=39,
    label_en="Beginner",
    label_ar="مبتدئ",
    recommended_difficulty="beginner",
)
INTERMEDIATE = ProficiencyCategory(
    key="intermediate",
    min=40,
    max=69,
    label_en="Intermediate",
    label_ar="متوسط",
    recommended_difficulty="intermediate",
)
ADVANCED = ProficiencyCategory(
    key="advanced",
    min=70,
    max=100,
    label_en="Advanced",
    label_ar="متقدم",
    recommended_difficulty="advanced",
)

_DIFFICULTY_LADDER = {
    "advanced": ["advanced", "intermediate", "beginner"],
    "intermediate": ["intermediate", "beginner"],
}


def _as_number(score: Any) -> float:
    if isinstance(score, bool):
        return 0.0
    try:
        number = float(score)
    except (TypeError, ValueError):
        return 0.0
    return number if number == number else 0.0


def categorize_score(score: Any) -> ProficiencyCategory:
    """Return the proficiency band of ``score``; unparseable scores count as 0."""

    numeric = _as_number(score)
    if numeric >= ADVANCED.min:
        return ADVANCED
    if numeric >= INTERMEDIATE.min:
        return INTERMEDIATE
    return BEGINNER


def valid_difficulty_levels(category_key: str) -> List[str]:
    """Course difficulties an employee in ``category_key`` may be offered (own level or below)."""

    return list(_DIFFICULTY_LADDER.get(category_key, ["beginner"]))


def categorize_gaps(gaps: Iterable[GapEntry]) -> List[CategorizedGap]:
    categorized: List[CategorizedGap] = []
    for gap in gaps:
        proficiency = 100 - gap.gap_percentage
        category = categorize_score(proficiency)
        categorized.append(
            CategorizedGap(
                skill_id=gap.skill_id,
                average_score=gap.average_score,
                gap_percentage=gap.gap_percentage,
                priority=gap.priority,
                proficiency_score=proficiency,
                category=category.key,
                category_label_en=category.label_en,
                category_label_ar=category.label_ar,
                recommended_difficulty=category.recommended_difficulty,
                needs_training=gap.gap_percentage > 0,
            )
        )
    return categorized
