"""Shared fixtures: a scripted content provider and a controllable clock."""

import asyncio
from datetime import date

import pytest

from tensetrainer.classroom import MemoryStore
from tensetrainer.errors import ContentFetchError
from tensetrainer.provider import ContentProvider
from tensetrainer.schemas import (
    Exercise,
    QuizQuestion,
    RevisionCard,
    SentenceStructure,
    TenseDetail,
    VocabularyItem,
)


TODAY = date(2024, 5, 15)


class FakeClock:
    """Callable returning a settable calendar day."""

    def __init__(self, today: date = TODAY):
        self.today = today

    def __call__(self) -> date:
        return self.today


def make_exercises(tense: str, count: int = 10) -> list[Exercise]:
    return [
        Exercise(
            id=f"{tense}-{i}",
            sentence=f"She ___ to school every day ({i}).",
            correct_answer="goes",
            base_verb="go",
            explanation="Third-person singular takes -es.",
        )
        for i in range(count)
    ]


def make_questions(tense: str, count: int = 10) -> list[QuizQuestion]:
    return [
        QuizQuestion(
            id=f"quiz-{tense}-{i}",
            question=f"Which sentence is correct? ({i})",
            options=["He go", "He goes", "He going", "He gone"],
            correct_answer="He goes",
        )
        for i in range(count)
    ]


def make_word(word: str, is_verb: bool = False) -> VocabularyItem:
    return VocabularyItem(
        word=word,
        source="From the movie 'Inception'",
        example=f"This is how you use {word}.",
        translation=f"{word}-tarjuma",
        is_verb=is_verb,
        base_form=word if is_verb else None,
        past_form=f"{word}ed" if is_verb else None,
        past_participle=f"{word}ed" if is_verb else None,
    )


class FakeProvider(ContentProvider):
    """
    Scripted content provider.

    `fail` holds operation names that raise ContentFetchError; `gates`
    holds events an operation waits on before answering.
    """

    def __init__(self, exercise_count: int = 10, question_count: int = 10):
        self.exercise_count = exercise_count
        self.question_count = question_count
        self.calls: list[tuple] = []
        self.fail: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.word_gates: dict[str, asyncio.Event] = {}
        self.vocabulary_batches = 0

    async def _enter(self, name: str, *args):
        self.calls.append((name, *args))
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        if name in self.fail:
            raise ContentFetchError(f"{name} failed")

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def tense_detail(self, tense: str) -> TenseDetail:
        await self._enter("tense_detail", tense)
        return TenseDetail(
            tense_name=tense,
            description=f"Use {tense} for habits.",
            structures=[
                SentenceStructure(type="Positive", formula="S + V(s/es)", example="She works."),
            ],
        )

    async def fill_in_the_blanks(self, tense: str, count: int = 10) -> list[Exercise]:
        await self._enter("fill_in_the_blanks", tense, count)
        return make_exercises(tense, self.exercise_count)

    async def quiz(self, tense: str, count: int = 10) -> list[QuizQuestion]:
        await self._enter("quiz", tense, count)
        return make_questions(tense, self.question_count)

    async def daily_vocabulary(self, count: int = 8) -> list[VocabularyItem]:
        await self._enter("daily_vocabulary", count)
        self.vocabulary_batches += 1
        return [make_word(f"word{self.vocabulary_batches}_{i}") for i in range(count)]

    async def lookup_word(self, word: str) -> VocabularyItem:
        self.calls.append(("lookup_word", word))
        gate = self.word_gates.get(word)
        if gate is not None:
            await gate.wait()
        if "lookup_word" in self.fail:
            raise ContentFetchError(f"lookup of {word} failed")
        return make_word(word)

    async def revision_cards(self, count: int = 3) -> list[RevisionCard]:
        await self._enter("revision_cards", count)
        return [RevisionCard(title=f"Tip {i}", content="Use 'since' with a point in time.") for i in range(count)]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()
