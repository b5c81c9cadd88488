"""
TenseTrainer Provider - Generated lesson content.

This module provides:
- ContentProvider: the async contract used by the classroom components
- GeminiContentProvider: Gemini API implementation
- Parsing helpers that validate and filter raw model output
"""

from .base import ContentProvider

from .parsing import (
    extract_json_from_response,
    is_well_formed_quiz_item,
    parse_tense_detail,
    parse_exercises,
    parse_quiz_questions,
    parse_vocabulary_list,
    parse_vocabulary_item,
    parse_revision_cards,
)

from .gemini import GeminiContentProvider

__all__ = [
    "ContentProvider",
    "GeminiContentProvider",
    "extract_json_from_response",
    "is_well_formed_quiz_item",
    "parse_tense_detail",
    "parse_exercises",
    "parse_quiz_questions",
    "parse_vocabulary_list",
    "parse_vocabulary_item",
    "parse_revision_cards",
]
