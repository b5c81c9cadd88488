#!/usr/bin/env python3
"""
preview_content.py - Fetch generated content and print it as JSON.

Sends the same requests the app sends, through the real Gemini provider,
and prints the validated result. Handy when editing prompt templates.

Usage:
  python scripts/preview_content.py session "Present Perfect"   # detail + exercises + quiz
  python scripts/preview_content.py vocabulary --count 3
  python scripts/preview_content.py lookup serendipity
  python scripts/preview_content.py tips
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tensetrainer.config import get_settings, setup_logging
from tensetrainer.curriculum import (
    DAILY_WORD_COUNT,
    EXERCISE_COUNT,
    QUIZ_QUESTION_COUNT,
    REVISION_CARD_COUNT,
    TENSES,
)
from tensetrainer.errors import ContentFetchError
from tensetrainer.provider import ContentProvider, GeminiContentProvider

logger = logging.getLogger(__name__)


def dump(value) -> str:
    """Serialize schema objects (or lists of them) as pretty JSON."""
    if isinstance(value, list):
        data = [item.model_dump(mode="json") for item in value]
    elif isinstance(value, dict):
        data = {key: json.loads(dump(item)) for key, item in value.items()}
    else:
        data = value.model_dump(mode="json")
    return json.dumps(data, indent=2, ensure_ascii=False)


async def fetch(provider: ContentProvider, args: argparse.Namespace):
    if args.command == "session":
        detail, exercises, questions = await asyncio.gather(
            provider.tense_detail(args.tense),
            provider.fill_in_the_blanks(args.tense, args.count or EXERCISE_COUNT),
            provider.quiz(args.tense, args.count or QUIZ_QUESTION_COUNT),
        )
        return {"detail": detail, "exercises": exercises, "questions": questions}
    if args.command == "vocabulary":
        return await provider.daily_vocabulary(args.count or DAILY_WORD_COUNT)
    if args.command == "lookup":
        return await provider.lookup_word(args.word.strip())
    return await provider.revision_cards(args.count or REVISION_CARD_COUNT)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--count", type=int, default=None, help="Override the item count")

    parser = argparse.ArgumentParser(description="Preview generated TenseTrainer content")
    sub = parser.add_subparsers(dest="command", required=True)

    session = sub.add_parser("session", parents=[common], help="Tense detail, exercises and quiz")
    session.add_argument("tense", choices=TENSES)

    sub.add_parser("vocabulary", parents=[common], help="A daily vocabulary batch")

    lookup = sub.add_parser("lookup", help="A single word entry")
    lookup.add_argument("word")

    sub.add_parser("tips", parents=[common], help="Daily revision cards")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        provider = GeminiContentProvider.from_settings(settings)
        result = asyncio.run(fetch(provider, args))
    except ContentFetchError as e:
        logger.error(str(e))
        return 1

    print(dump(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
