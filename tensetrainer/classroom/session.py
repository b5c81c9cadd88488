"""
PracticeSession - One round of practice for the active tense.

Fetches the tense detail, exercises and quiz concurrently, collects
answers, and grades both sections against the pass threshold. Passing
both sections reports the tense as completed through `on_pass`.

Phases:
    IDLE → LOADING → READY → GRADED
               ↘ ERROR
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from tensetrainer.curriculum import EXERCISE_COUNT, PASS_THRESHOLD, QUIZ_QUESTION_COUNT
from tensetrainer.errors import ContentFetchError, SessionStateError
from tensetrainer.schemas import Exercise, QuizQuestion, TenseDetail


logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Could not load exercises. Please refresh and try again."


class SessionPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"
    GRADED = "graded"


class AnswerKind(str, Enum):
    FILL_IN = "fill_in"
    QUIZ = "quiz"


def is_fill_in_correct(answer: Optional[str], exercise: Exercise) -> bool:
    """Trimmed, case-insensitive match against the expected verb form."""
    if answer is None:
        return False
    return answer.strip().lower() == exercise.correct_answer.lower()


def is_quiz_correct(answer: Optional[str], question: QuizQuestion) -> bool:
    """Exact match of the selected option."""
    return answer is not None and answer == question.correct_answer


def section_passed(correct: int, total: int, threshold: float = PASS_THRESHOLD) -> bool:
    """An empty section never passes."""
    if total == 0:
        return False
    return correct / total >= threshold


@dataclass
class SectionScore:
    """Score for one graded section (fill-in or quiz)."""
    correct: int
    total: int
    passed: bool
    item_results: dict[str, bool] = field(default_factory=dict)  # item id → correct

    @property
    def percent(self) -> int:
        if self.total == 0:
            return 0
        return round(self.correct / self.total * 100)


@dataclass
class GradeReport:
    fill_in: SectionScore
    quiz: SectionScore

    @property
    def passed(self) -> bool:
        return self.fill_in.passed and self.quiz.passed


class PracticeSession:
    """
    Practice session controller for one tense at a time.

    Content and answers are discarded whenever a new load starts, so a
    retry always works on freshly generated material.
    """

    def __init__(
        self,
        provider,
        on_pass: Optional[Callable[[str], None]] = None,
        exercise_count: int = EXERCISE_COUNT,
        question_count: int = QUIZ_QUESTION_COUNT,
        pass_threshold: float = PASS_THRESHOLD,
    ):
        """
        Initialize a practice session.

        Args:
            provider: ContentProvider supplying the lesson content
            on_pass: Called with the tense name when both sections pass
            exercise_count: Exercises to request per load
            question_count: Quiz questions to request per load
            pass_threshold: Fraction of correct answers needed per section
        """
        self.provider = provider
        self.on_pass = on_pass
        self.exercise_count = exercise_count
        self.question_count = question_count
        self.pass_threshold = pass_threshold

        self.tense: Optional[str] = None
        self.phase = SessionPhase.IDLE
        self.error: Optional[str] = None
        self.detail: Optional[TenseDetail] = None
        self.exercises: list[Exercise] = []
        self.questions: list[QuizQuestion] = []
        self.fill_in_answers: dict[str, str] = {}
        self.quiz_answers: dict[str, str] = {}
        self.report: Optional[GradeReport] = None
        self._load_seq = 0

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _reset(self, tense: str):
        self.tense = tense
        self.phase = SessionPhase.LOADING
        self.error = None
        self.detail = None
        self.exercises = []
        self.questions = []
        self.fill_in_answers = {}
        self.quiz_answers = {}
        self.report = None

    async def load_session(self, tense: str) -> SessionPhase:
        """
        Fetch fresh content for `tense`.

        The three requests run concurrently; the first failure cancels the
        others and puts the session in the ERROR phase with no partial
        content. Returns the resulting phase.
        """
        self._load_seq += 1
        seq = self._load_seq
        self._reset(tense)

        tasks = [
            asyncio.ensure_future(self.provider.tense_detail(tense)),
            asyncio.ensure_future(self.provider.fill_in_the_blanks(tense, self.exercise_count)),
            asyncio.ensure_future(self.provider.quiz(tense, self.question_count)),
        ]
        try:
            detail, exercises, questions = await asyncio.gather(*tasks)
        except ContentFetchError as e:
            if self._abort_load(tasks, seq):
                logger.error(f"Failed to fetch content for {tense}: {e}")
            return self.phase
        except Exception:
            # Providers are pluggable; anything they raise is a failed load
            if self._abort_load(tasks, seq):
                logger.exception(f"Content provider crashed while loading {tense}")
            return self.phase

        if seq != self._load_seq:
            logger.debug(f"Discarding stale content for {tense}")
            return self.phase

        self.detail = detail
        self.exercises = list(exercises)
        self.questions = list(questions)
        self.phase = SessionPhase.READY
        logger.info(
            f"Session ready for {tense}: {len(self.exercises)} exercises, "
            f"{len(self.questions)} questions"
        )
        return self.phase

    def _abort_load(self, tasks: list[asyncio.Future], seq: int) -> bool:
        """Cancel pending fetches; enter ERROR unless a newer load took over."""
        for task in tasks:
            task.cancel()
        if seq != self._load_seq:
            return False
        self.phase = SessionPhase.ERROR
        self.error = LOAD_ERROR_MESSAGE
        return True

    @property
    def load_count(self) -> int:
        """Number of loads started; changes whenever content is replaced."""
        return self._load_seq

    async def retry(self) -> SessionPhase:
        """Start over on the same tense with newly generated content."""
        if self.tense is None:
            raise SessionStateError("No tense has been loaded yet")
        return await self.load_session(self.tense)

    # -------------------------------------------------------------------------
    # Answers
    # -------------------------------------------------------------------------

    def record_answer(self, kind: AnswerKind, item_id: str, value: str):
        """
        Store a candidate answer. Only allowed before grading.

        Raises:
            SessionStateError: If the session is not READY
            KeyError: If no item has this id
            ValueError: If a quiz answer is not one of the question's options
        """
        if self.phase != SessionPhase.READY:
            raise SessionStateError(f"Cannot record answers while {self.phase.value}")

        kind = AnswerKind(kind)
        if kind == AnswerKind.FILL_IN:
            self._exercise(item_id)
            self.fill_in_answers[item_id] = value
        else:
            question = self._question(item_id)
            if value not in question.options:
                raise ValueError(f"'{value}' is not an option for {item_id}")
            self.quiz_answers[item_id] = value

    def _exercise(self, item_id: str) -> Exercise:
        for exercise in self.exercises:
            if exercise.id == item_id:
                return exercise
        raise KeyError(item_id)

    def _question(self, item_id: str) -> QuizQuestion:
        for question in self.questions:
            if question.id == item_id:
                return question
        raise KeyError(item_id)

    # -------------------------------------------------------------------------
    # Grading
    # -------------------------------------------------------------------------

    def grade(self) -> GradeReport:
        """
        Grade both sections and freeze the answers.

        Completes the tense through `on_pass` only if both sections pass.
        """
        if self.phase != SessionPhase.READY:
            raise SessionStateError(f"Cannot grade while {self.phase.value}")

        fill_in_results = {
            ex.id: is_fill_in_correct(self.fill_in_answers.get(ex.id), ex)
            for ex in self.exercises
        }
        quiz_results = {
            q.id: is_quiz_correct(self.quiz_answers.get(q.id), q)
            for q in self.questions
        }

        fill_in_correct = sum(fill_in_results.values())
        quiz_correct = sum(quiz_results.values())

        self.report = GradeReport(
            fill_in=SectionScore(
                correct=fill_in_correct,
                total=len(self.exercises),
                passed=section_passed(fill_in_correct, len(self.exercises), self.pass_threshold),
                item_results=fill_in_results,
            ),
            quiz=SectionScore(
                correct=quiz_correct,
                total=len(self.questions),
                passed=section_passed(quiz_correct, len(self.questions), self.pass_threshold),
                item_results=quiz_results,
            ),
        )
        self.phase = SessionPhase.GRADED
        logger.info(
            f"Graded {self.tense}: fill-in {fill_in_correct}/{len(self.exercises)}, "
            f"quiz {quiz_correct}/{len(self.questions)}"
        )

        if self.report.passed and self.on_pass is not None:
            self.on_pass(self.tense)
        return self.report

    def is_exercise_correct(self, item_id: str) -> Optional[bool]:
        """Per-item result for review; None before grading."""
        if self.report is None:
            return None
        return self.report.fill_in.item_results.get(item_id)

    def is_question_correct(self, item_id: str) -> Optional[bool]:
        """Per-item result for review; None before grading."""
        if self.report is None:
            return None
        return self.report.quiz.item_results.get(item_id)

    @property
    def is_read_only(self) -> bool:
        """Answer inputs are frozen once graded."""
        return self.phase == SessionPhase.GRADED
