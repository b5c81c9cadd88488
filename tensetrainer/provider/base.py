"""
ContentProvider - The contract for generated lesson content.

Implementations are asynchronous and fallible: every operation either
returns validated schema objects or raises ContentFetchError.
"""

from abc import ABC, abstractmethod

from tensetrainer.curriculum import (
    DAILY_WORD_COUNT,
    EXERCISE_COUNT,
    QUIZ_QUESTION_COUNT,
    REVISION_CARD_COUNT,
)
from tensetrainer.schemas import (
    Exercise,
    QuizQuestion,
    RevisionCard,
    TenseDetail,
    VocabularyItem,
)


class ContentProvider(ABC):
    """Source of tense details, exercises, quizzes and vocabulary."""

    @abstractmethod
    async def tense_detail(self, tense: str) -> TenseDetail:
        """Reference material for a tense."""

    @abstractmethod
    async def fill_in_the_blanks(self, tense: str, count: int = EXERCISE_COUNT) -> list[Exercise]:
        """Fill-in-the-blank exercises with ids "{tense}-{index}"."""

    @abstractmethod
    async def quiz(self, tense: str, count: int = QUIZ_QUESTION_COUNT) -> list[QuizQuestion]:
        """Well-formed quiz questions with ids "quiz-{tense}-{index}"."""

    @abstractmethod
    async def daily_vocabulary(self, count: int = DAILY_WORD_COUNT) -> list[VocabularyItem]:
        """A fresh batch of vocabulary cards."""

    @abstractmethod
    async def lookup_word(self, word: str) -> VocabularyItem:
        """A vocabulary card for exactly `word`."""

    @abstractmethod
    async def revision_cards(self, count: int = REVISION_CARD_COUNT) -> list[RevisionCard]:
        """Short grammar tips for daily review."""
