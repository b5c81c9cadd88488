"""
Response parsing - Turn raw model output into validated schema objects.

Provides:
- JSON extraction (raw or wrapped in markdown code blocks)
- Quiz item shape filtering
- Synthetic id assignment for exercises and quiz questions
"""

import json
import logging
import re
from typing import Any

from pydantic import TypeAdapter

from tensetrainer.schemas import (
    Exercise,
    ExerciseDraft,
    QuizQuestion,
    QuizQuestionDraft,
    RevisionCard,
    TenseDetail,
    VocabularyItem,
)


logger = logging.getLogger(__name__)

_EXERCISE_LIST = TypeAdapter(list[ExerciseDraft])
_QUIZ_LIST = TypeAdapter(list[QuizQuestionDraft])
_VOCABULARY_LIST = TypeAdapter(list[VocabularyItem])
_REVISION_CARD_LIST = TypeAdapter(list[RevisionCard])

_CLOSERS = {"{": "}", "[": "]"}


def extract_json_from_response(text: str) -> Any:
    """Extract JSON from LLM response, handling markdown code blocks."""
    # Try to find JSON in code blocks first
    code_block_pattern = r'```(?:json)?\s*([\s\S]*?)```'
    for match in re.findall(code_block_pattern, text):
        try:
            return json.loads(match.strip())
        except json.JSONDecodeError:
            continue

    text = text.strip()

    # Try the first balanced object or array (ignores trailing chatter)
    if text and text[0] in _CLOSERS:
        opener, closer = text[0], _CLOSERS[text[0]]
        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(text):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    try:
                        return json.loads(text[:i + 1])
                    except json.JSONDecodeError:
                        break

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not extract JSON from response: {e}\n\nResponse:\n{text[:500]}...")


def is_well_formed_quiz_item(item: Any) -> bool:
    """
    Check that a raw quiz item can be shown and graded.

    The question and answer must be text, options a list of text, and the
    answer one of the options.
    """
    if not isinstance(item, dict):
        return False
    question = item.get("question")
    options = item.get("options")
    answer = item.get("correct_answer")
    return (
        isinstance(question, str)
        and isinstance(options, list)
        and all(isinstance(opt, str) for opt in options)
        and isinstance(answer, str)
        and answer in options
    )


def _require_list(data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of {what}, got {type(data).__name__}")
    return data


def parse_tense_detail(data: Any) -> TenseDetail:
    return TenseDetail.model_validate(data)


def parse_exercises(data: Any, tense: str) -> list[Exercise]:
    """Validate an exercise batch and assign ids "{tense}-{index}"."""
    drafts = _EXERCISE_LIST.validate_python(_require_list(data, "exercises"))
    return [
        Exercise(id=f"{tense}-{idx}", **draft.model_dump())
        for idx, draft in enumerate(drafts)
    ]


def parse_quiz_questions(data: Any, tense: str) -> list[QuizQuestion]:
    """
    Drop malformed quiz items, then assign ids "quiz-{tense}-{index}".

    A malformed item never fails the whole batch.
    """
    items = _require_list(data, "quiz questions")
    valid = [item for item in items if is_well_formed_quiz_item(item)]
    dropped = len(items) - len(valid)
    if dropped:
        logger.warning(f"Dropped {dropped} malformed quiz item(s) for {tense}")

    drafts = _QUIZ_LIST.validate_python(valid)
    return [
        QuizQuestion(id=f"quiz-{tense}-{idx}", **draft.model_dump())
        for idx, draft in enumerate(drafts)
    ]


def parse_vocabulary_list(data: Any) -> list[VocabularyItem]:
    return _VOCABULARY_LIST.validate_python(_require_list(data, "vocabulary items"))


def parse_vocabulary_item(data: Any, word: str) -> VocabularyItem:
    """Validate a lookup result; the entry is always keyed by the requested word."""
    item = VocabularyItem.model_validate(data)
    if item.word != word:
        logger.debug(f"Lookup returned '{item.word}' for '{word}'; keeping requested word")
        item = item.model_copy(update={"word": word})
    return item


def parse_revision_cards(data: Any) -> list[RevisionCard]:
    return _REVISION_CARD_LIST.validate_python(_require_list(data, "revision cards"))
