"""Pydantic records exchanged with the grading and persistence collaborators."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

SkillLevel = Literal["high", "medium", "low"]
CategoryKey = Literal["beginner", "intermediate", "advanced"]
TrendDirection = Literal["improving", "declining", "stable"]


def _identifier(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("identifier must be a string or integer")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    raise ValueError("identifier must be a string or integer")


class QuestionResponse(BaseModel):
    """One graded answer belonging to a completed assignment."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    skill_id: Optional[str] = None
    score: float

    @field_validator("question_id", mode="before")
    @classmethod
    def _require_question_id(cls, value: Any) -> str:
        normalised = _identifier(value)
        if normalised is None:
            raise ValueError("question_id required")
        return normalised

    @field_validator("skill_id", mode="before")
    @classmethod
    def _optional_skill_id(cls, value: Any) -> Optional[str]:
        return _identifier(value)

    @field_validator("score", mode="before")
    @classmethod
    def _numeric_score(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            raise ValueError("score must be numeric")
        return value


class LevelThresholds(BaseModel):
    """Lower bounds of the ``high`` and ``medium`` competency bands."""

    model_config = ConfigDict(frozen=True)

    high: float = 80
    medium: float = 50


class SkillScoreEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_id: str
    question_count: int = Field(ge=1)
    average_score: int = Field(ge=0, le=100)
    level: SkillLevel


class GapEntry(BaseModel):
    """A skill scoring below the gap threshold, i.e. a training need."""

    model_config = ConfigDict(frozen=True)

    skill_id: str
    average_score: int = Field(ge=0, le=100)
    gap_percentage: int = Field(ge=0, le=100)
    priority: int = Field(ge=1, le=3)


class StrengthEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill_id: str
    average_score: int = Field(ge=0, le=100)


class ProficiencyCategory(BaseModel):
    """Display band of a score, used to pick course difficulty."""

    model_config = ConfigDict(frozen=True)

    key: CategoryKey
    min: int
    max: int
    label_en: str
    label_ar: str
    recommended_difficulty: CategoryKey


class AssessmentAnalysisResult(BaseModel):
    """Terminal analysis record of one completed assignment."""

    model_config = ConfigDict(frozen=True)

    overall_score: int = Field(ge=0, le=100)
    skill_scores: Dict[str, SkillScoreEntry]
    gaps: Tuple[GapEntry, ...] = ()
    strengths: Tuple[StrengthEntry, ...] = ()
    unlinked_question_count: int = Field(ge=0)
    total_responses: int = Field(ge=1)
    proficiency: ProficiencyCategory


class CategorizedGap(BaseModel):
    skill_id: str
    average_score: int
    gap_percentage: int
    priority: int
    proficiency_score: int
    category: CategoryKey
    category_label_en: str
    category_label_ar: str
    recommended_difficulty: CategoryKey
    needs_training: bool


class SkillTrend(BaseModel):
    skill_id: str
    scores: List[int]
    current_level: SkillLevel
    trend: TrendDirection = "stable"
    average_score: int
    latest_score: int
    change: int = 0


class StrengthOverview(BaseModel):
    skill_id: str
    count: int
    avg_score: int
    consistency: int


class PriorityGap(BaseModel):
    skill_id: str
    count: int
    avg_gap: int
    persistence: int
    priority: float


class AnalyticsSummary(BaseModel):
    """Cross-assessment view of one employee's results over time."""

    total_assessments: int = 0
    overall_average: int = 0
    improvement_rate: int = 0
    skill_trends: List[SkillTrend] = Field(default_factory=list)
    strengths_overview: List[StrengthOverview] = Field(default_factory=list)
    priority_gaps: List[PriorityGap] = Field(default_factory=list)
