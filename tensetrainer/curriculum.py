"""
Curriculum - The fixed tense sequence and practice constants.

Tenses are practised strictly in this order; each one unlocks the next.
"""

from typing import Optional, Sequence


TENSES: tuple[str, ...] = (
    "Present Simple",
    "Present Continuous",
    "Present Perfect",
    "Present Perfect Continuous",
    "Past Simple",
    "Past Continuous",
    "Past Perfect",
    "Past Perfect Continuous",
    "Future Simple",
    "Future Continuous",
    "Future Perfect",
    "Future Perfect Continuous",
    "Mixed Tenses",
)

# Cumulative practice tier; does not gate the daily streak
MIXED_TENSES = "Mixed Tenses"

PASS_THRESHOLD = 0.8
EXERCISE_COUNT = 10
QUIZ_QUESTION_COUNT = 10
DAILY_WORD_COUNT = 8
REVISION_CARD_COUNT = 3
BLANK_MARKER = "___"


def next_tense(tense: str, tenses: Sequence[str] = TENSES) -> Optional[str]:
    """Get the tense that follows `tense`, or None at the end / if unknown."""
    if tense not in tenses:
        return None
    idx = tenses.index(tense)
    if idx + 1 >= len(tenses):
        return None
    return tenses[idx + 1]


def previous_tense(tense: str, tenses: Sequence[str] = TENSES) -> Optional[str]:
    """Get the tense before `tense`, or None at the start / if unknown."""
    if tense not in tenses:
        return None
    idx = tenses.index(tense)
    if idx <= 0:
        return None
    return tenses[idx - 1]


def tense_position(tense: str, tenses: Sequence[str] = TENSES) -> tuple[int, int]:
    """
    Get tense position as (current, total).

    Returns (0, total) if the tense is not in the sequence.
    """
    if tense not in tenses:
        return (0, len(tenses))
    return (tenses.index(tense) + 1, len(tenses))


def streak_gating_tenses(
    tenses: Sequence[str] = TENSES,
    exempt: Optional[str] = MIXED_TENSES,
) -> list[str]:
    """Tenses that must all be completed for a day to count toward the streak."""
    return [t for t in tenses if t != exempt]
