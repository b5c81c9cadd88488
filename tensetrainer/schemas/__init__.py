"""
TenseTrainer Schemas - Pydantic models for the tense practice app.

This module exports all schema classes for:
- Content: tense details, exercises, quiz questions, vocabulary, revision cards
- Progress: tense status, progress state, daily vocabulary batch
"""

# Content schemas
from .content import (
    SentenceStructure,
    TenseDetail,
    ExerciseDraft,
    Exercise,
    QuizQuestionDraft,
    QuizQuestion,
    VocabularyItem,
    RevisionCard,
)

# Progress schemas
from .progress import (
    TenseStatus,
    ProgressState,
    DailyVocabulary,
)

__all__ = [
    # Content
    'SentenceStructure',
    'TenseDetail',
    'ExerciseDraft',
    'Exercise',
    'QuizQuestionDraft',
    'QuizQuestion',
    'VocabularyItem',
    'RevisionCard',
    # Progress
    'TenseStatus',
    'ProgressState',
    'DailyVocabulary',
]
