"""
TenseTrainer Classroom - Runtime components for practice and progress.

This module provides:
- Key-value stores: SQLiteStore, MemoryStore
- ProgressTracker: tense unlocks, daily reset and streak
- PracticeSession: content loading and grading for one tense
- VocabularyManager: daily words, search and the revision list
"""

from .store import (
    KeyValueStore,
    MemoryStore,
    SQLiteStore,
    DEFAULT_STORE_DB,
    PROGRESS_KEY,
    DAILY_VOCABULARY_KEY,
    MARKED_VOCABULARY_KEY,
)

from .progress import ProgressTracker

from .session import (
    PracticeSession,
    SessionPhase,
    AnswerKind,
    SectionScore,
    GradeReport,
    is_fill_in_correct,
    is_quiz_correct,
    section_passed,
)

from .vocabulary import (
    VocabularyManager,
    LoadState,
)

__all__ = [
    # Store
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "DEFAULT_STORE_DB",
    "PROGRESS_KEY",
    "DAILY_VOCABULARY_KEY",
    "MARKED_VOCABULARY_KEY",
    # Progress
    "ProgressTracker",
    # Session
    "PracticeSession",
    "SessionPhase",
    "AnswerKind",
    "SectionScore",
    "GradeReport",
    "is_fill_in_correct",
    "is_quiz_correct",
    "section_passed",
    # Vocabulary
    "VocabularyManager",
    "LoadState",
]
