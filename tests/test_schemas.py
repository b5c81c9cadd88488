"""
Schema validation tests for TenseTrainer.

Tests the Pydantic models to ensure they validate correctly.
"""

import pytest
from datetime import date
from pydantic import ValidationError

from tensetrainer.schemas import (
    # Content
    SentenceStructure,
    TenseDetail,
    ExerciseDraft,
    Exercise,
    QuizQuestion,
    VocabularyItem,
    RevisionCard,
    # Progress
    TenseStatus,
    ProgressState,
    DailyVocabulary,
)


class TestContentSchemas:
    """Test content models."""

    def test_tense_detail(self):
        detail = TenseDetail(
            tense_name="Present Continuous",
            description="Actions happening now.",
            structures=[
                SentenceStructure(type="Positive", formula="S + am/is/are + V-ing", example="I am reading."),
            ],
        )
        assert detail.structures[0].formula.startswith("S +")

    def test_exercise_extends_draft(self):
        draft = ExerciseDraft(
            sentence="I ___ here since 2010.",
            correct_answer="have lived",
            base_verb="live",
            explanation="Present Perfect with 'since'.",
        )
        exercise = Exercise(id="Present Perfect-0", **draft.model_dump())
        assert exercise.correct_answer == "have lived"
        assert exercise.id == "Present Perfect-0"

    def test_exercise_requires_id(self):
        with pytest.raises(ValidationError):
            Exercise(sentence="x ___", correct_answer="y", base_verb="y", explanation="z")

    def test_quiz_question(self):
        question = QuizQuestion(
            id="quiz-Past Simple-0",
            question="Which is correct?",
            options=["I go yesterday", "I went yesterday"],
            correct_answer="I went yesterday",
        )
        assert question.correct_answer in question.options

    def test_revision_card(self):
        card = RevisionCard(title="Its vs It's", content="It's = it is.")
        assert card.model_dump() == {"title": "Its vs It's", "content": "It's = it is."}


class TestVocabularyItem:
    """Verb forms only exist for verbs."""

    def test_verb_forms(self):
        item = VocabularyItem(
            word="forsake",
            source="From the movie 'Dune'",
            example="I will not forsake you.",
            translation="chhor dena",
            is_verb=True,
            base_form="forsake",
            past_form="forsook",
            past_participle="forsaken",
        )
        assert item.verb_forms == ("forsake", "forsook", "forsaken")

    def test_non_verb_clears_forms(self):
        item = VocabularyItem(
            word="vivid",
            source="Often used by YouTuber MKBHD",
            example="The display is vivid.",
            translation="wazeh",
            base_form="vivid",
            past_form="vivided",
        )
        assert item.is_verb is False
        assert item.base_form is None
        assert item.past_form is None
        assert item.verb_forms is None

    def test_missing_translation_rejected(self):
        with pytest.raises(ValidationError):
            VocabularyItem(word="vivid", source="s", example="e")


class TestProgressSchemas:
    """Test progress models."""

    def test_status_values(self):
        assert TenseStatus("completed") == TenseStatus.COMPLETED
        assert TenseStatus.LOCKED.value == "locked"

    def test_progress_state_round_trip(self):
        state = ProgressState(
            status_by_tense={"Present Simple": TenseStatus.COMPLETED, "Past Simple": TenseStatus.UNLOCKED},
            last_completed_date=date(2024, 5, 14),
            streak=2,
        )
        data = state.model_dump(mode="json")
        assert data["status_by_tense"]["Present Simple"] == "completed"
        assert data["last_completed_date"] == "2024-05-14"
        assert ProgressState.model_validate(data) == state

    def test_negative_streak_rejected(self):
        with pytest.raises(ValidationError):
            ProgressState(status_by_tense={}, streak=-1)

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            ProgressState(status_by_tense={"Present Simple": "mastered"})

    def test_daily_vocabulary_date_parsing(self):
        batch = DailyVocabulary.model_validate({"fetched_on": "2024-05-15", "words": []})
        assert batch.fetched_on == date(2024, 5, 15)
