"""
Content schemas for TenseTrainer.

Pydantic models for everything the content provider generates:
- Tense reference material (description + sentence structures)
- Fill-in-the-blank exercises
- Multiple-choice quiz questions
- Vocabulary entries and daily revision cards

The *Draft models describe the provider's output; ids are assigned by the
caller after receipt.
"""

from pydantic import BaseModel, model_validator
from typing import Optional


class SentenceStructure(BaseModel):
    type: str     # Positive, Negative, Interrogative
    formula: str  # e.g. "Subject + verb(s/es) + object"
    example: str


class TenseDetail(BaseModel):
    tense_name: str
    description: str
    structures: list[SentenceStructure]


# -----------------------------------------------------------------------------
# Exercises
# -----------------------------------------------------------------------------

class ExerciseDraft(BaseModel):
    sentence: str        # contains the "___" blank marker
    correct_answer: str
    base_verb: str
    explanation: str


class Exercise(ExerciseDraft):
    """Fill-in-the-blank exercise, id unique within a session."""
    id: str


class QuizQuestionDraft(BaseModel):
    question: str
    options: list[str]
    correct_answer: str


class QuizQuestion(QuizQuestionDraft):
    """Multiple-choice question; correct_answer is one of the options."""
    id: str


# -----------------------------------------------------------------------------
# Vocabulary
# -----------------------------------------------------------------------------

class VocabularyItem(BaseModel):
    """
    Vocabulary card. `word` is the identity key for the revision list.

    Verb forms are only meaningful for verbs and are cleared otherwise.
    """
    word: str
    source: str         # e.g. "From the movie 'Inception'"
    example: str
    translation: str    # in the learner's native language
    is_verb: bool = False
    base_form: Optional[str] = None        # V1
    past_form: Optional[str] = None        # V2
    past_participle: Optional[str] = None  # V3

    @model_validator(mode="after")
    def clear_verb_forms(self):
        if not self.is_verb:
            self.base_form = None
            self.past_form = None
            self.past_participle = None
        return self

    @property
    def verb_forms(self) -> Optional[tuple[Optional[str], Optional[str], Optional[str]]]:
        """(V1, V2, V3) for verbs, None otherwise."""
        if not self.is_verb:
            return None
        return (self.base_form, self.past_form, self.past_participle)


class RevisionCard(BaseModel):
    title: str
    content: str
