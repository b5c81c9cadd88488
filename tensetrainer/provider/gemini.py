"""
Gemini-backed content provider.

Each request renders a YAML prompt, asks Gemini for JSON constrained by a
response schema, and validates the result with the pydantic schemas. The
provider's own schema check is not trusted: everything is validated again
here, and quiz items are filtered one by one.

API key is expected in the environment (or a .env file):

    GEMINI_API_KEY=...
"""

import asyncio
import logging
from typing import Any, Callable, Optional, TypeVar

from google import genai
from google.genai import types as genai_types

from tensetrainer.curriculum import (
    BLANK_MARKER,
    DAILY_WORD_COUNT,
    EXERCISE_COUNT,
    QUIZ_QUESTION_COUNT,
    REVISION_CARD_COUNT,
)
from tensetrainer.config import DEFAULT_MODEL, Settings
from tensetrainer.errors import ContentFetchError
from tensetrainer.schemas import (
    ExerciseDraft,
    Exercise,
    QuizQuestionDraft,
    QuizQuestion,
    RevisionCard,
    TenseDetail,
    VocabularyItem,
)
from tensetrainer.utils import RenderedPrompt, render_prompt

from .base import ContentProvider
from .parsing import (
    extract_json_from_response,
    parse_exercises,
    parse_quiz_questions,
    parse_revision_cards,
    parse_tense_detail,
    parse_vocabulary_item,
    parse_vocabulary_list,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRY_DELAY = 1.0


class GeminiContentProvider(ContentProvider):
    """Content provider backed by the Gemini API, with retries and timeouts."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: Optional[float] = None,
        native_language: str = "Urdu",
        request_timeout: Optional[float] = 60.0,
        max_retries: int = 3,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        client: Optional[genai.Client] = None,
    ):
        """
        Initialize the provider.

        Args:
            api_key: Gemini API key (ignored when `client` is given)
            model: Gemini model name
            temperature: Overrides the per-prompt temperature when set
            native_language: Learner's language for translations and prompts
            request_timeout: Seconds before a single attempt is abandoned; None waits forever
            max_retries: Attempts per request before giving up
            retry_delay: Base delay between attempts (grows linearly)
            client: Pre-built genai client
        """
        if client is None:
            if not api_key:
                raise ContentFetchError("GEMINI_API_KEY not set. Check your .env file.")
            client = genai.Client(api_key=api_key)

        self.client = client
        self.model_name = model
        self.temperature = temperature
        self.native_language = native_language
        self.request_timeout = request_timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiContentProvider":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.model,
            temperature=settings.temperature,
            native_language=settings.native_language,
            request_timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _generate(self, prompt: RenderedPrompt, response_schema: Any) -> str:
        """Single Gemini call returning the response text."""
        temperature = self.temperature if self.temperature is not None else prompt.temperature
        call = self.client.aio.models.generate_content(
            model=self.model_name,
            contents=prompt.user,
            config=genai_types.GenerateContentConfig(
                system_instruction=prompt.system,
                temperature=temperature,
                response_mime_type="application/json",
                response_schema=response_schema,
            ),
        )
        if self.request_timeout is not None:
            response = await asyncio.wait_for(call, timeout=self.request_timeout)
        else:
            response = await call

        if response.text is None:
            if response.candidates and len(response.candidates) > 0:
                candidate = response.candidates[0]
                if candidate.content and candidate.content.parts:
                    text = candidate.content.parts[0].text
                    if text:
                        return text
            raise ValueError("Empty response from API")

        return response.text

    async def _request(
        self,
        prompt_name: str,
        response_schema: Any,
        parse: Callable[[Any], T],
        **params,
    ) -> T:
        """
        Render, send, parse and validate one request, retrying on failure.

        Raises:
            ContentFetchError: When every attempt failed
        """
        try:
            prompt = render_prompt(prompt_name, native_language=self.native_language, **params)
        except (OSError, KeyError, ValueError) as e:
            raise ContentFetchError(f"Could not render prompt '{prompt_name}': {e}") from e

        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                text = await self._generate(prompt, response_schema)
                return parse(extract_json_from_response(text))
            except asyncio.TimeoutError:
                last_error = TimeoutError(f"no response within {self.request_timeout}s")
            except Exception as e:
                last_error = e

            logger.warning(
                f"{prompt_name} request failed (attempt {attempt + 1}/{self.max_retries}): {last_error}"
            )
            if attempt < self.max_retries - 1:
                await asyncio.sleep(self.retry_delay * (attempt + 1))

        logger.error(f"{prompt_name} request gave up after {self.max_retries} attempt(s)")
        raise ContentFetchError(f"{prompt_name} request failed: {last_error}") from last_error

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    async def tense_detail(self, tense: str) -> TenseDetail:
        return await self._request(
            "tense_detail", TenseDetail, parse_tense_detail, tense=tense,
        )

    async def fill_in_the_blanks(self, tense: str, count: int = EXERCISE_COUNT) -> list[Exercise]:
        return await self._request(
            "fill_in_the_blanks",
            list[ExerciseDraft],
            lambda data: parse_exercises(data, tense),
            tense=tense,
            count=count,
            blank_marker=BLANK_MARKER,
        )

    async def quiz(self, tense: str, count: int = QUIZ_QUESTION_COUNT) -> list[QuizQuestion]:
        return await self._request(
            "quiz",
            list[QuizQuestionDraft],
            lambda data: parse_quiz_questions(data, tense),
            tense=tense,
            count=count,
        )

    async def daily_vocabulary(self, count: int = DAILY_WORD_COUNT) -> list[VocabularyItem]:
        return await self._request(
            "daily_vocabulary", list[VocabularyItem], parse_vocabulary_list, count=count,
        )

    async def lookup_word(self, word: str) -> VocabularyItem:
        return await self._request(
            "word_lookup",
            VocabularyItem,
            lambda data: parse_vocabulary_item(data, word),
            word=word,
        )

    async def revision_cards(self, count: int = REVISION_CARD_COUNT) -> list[RevisionCard]:
        return await self._request(
            "revision_cards", list[RevisionCard], parse_revision_cards, count=count,
        )
