"""
Model enums.
"""
from enum import Enum


class CEFRLevel(str, Enum):
    """CEFR language proficiency levels."""
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


class TargetStatus(str, Enum):
    """Lifecycle of a practice phrase: planned -> attempted -> mastered."""
    PLANNED = "planned"
    ATTEMPTED = "attempted"
    MASTERED = "mastered"


class ErrorType(str, Enum):
    """Category of a learner mistake."""
    GRAMMAR = "grammar"
    VOCAB = "vocab"
    PRON = "pron"


class CorrectionMode(str, Enum):
    """How eagerly the tutor corrects the learner."""
    IMMEDIATE = "immediate"
    BALANCED = "balanced"
    GENTLE = "gentle"


CEFR_LEVELS = [level.value for level in CEFRLevel]


def next_cefr_level(cefr: str) -> str:
    """Return the level one step above `cefr` (C2 and unknown levels stay put)."""
    if cefr not in CEFR_LEVELS:
        return cefr
    index = CEFR_LEVELS.index(cefr)
    return CEFR_LEVELS[min(index + 1, len(CEFR_LEVELS) - 1)]
