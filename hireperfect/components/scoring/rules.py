"""Scoring constants: per-question points and length thresholds."""

from ...platform.config import settings

QUESTION_TYPES = ("mcq", "scenario", "coding")

# Points awarded per question type when the answer qualifies
QUESTION_POINTS = {
    "mcq": 1.0,
    "scenario": 0.5,
    "coding": 1.0,
}

MAX_SCORE = 100.0
SCORE_DECIMALS = 2


def scenario_min_chars() -> int:
    """Trimmed free-text length that a scenario answer must exceed."""
    return settings.SCENARIO_MIN_ANSWER_CHARS


def coding_min_chars() -> int:
    """Trimmed code length that a coding answer must exceed."""
    return settings.CODING_MIN_ANSWER_CHARS
