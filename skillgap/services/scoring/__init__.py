from .aggregator import analyze
from .categorizer import categorize_gaps, categorize_score, valid_difficulty_levels
from .levels import classify_level, round_half_up

__all__ = [
    "analyze",
    "categorize_gaps",
    "categorize_score",
    "valid_difficulty_levels",
    "classify_level",
    "round_half_up",
]
