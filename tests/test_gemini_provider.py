"""
Gemini provider tests.

The genai client is replaced by a scripted stand-in exposing the same
`client.aio.models.generate_content` coroutine, so no network is used.
"""

import asyncio
import json
from types import SimpleNamespace

import pytest

from tensetrainer.config import Settings
from tensetrainer.errors import ContentFetchError
from tensetrainer.provider import GeminiContentProvider


class ScriptedModels:
    """Returns queued replies in order; exceptions in the queue are raised."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []

    async def generate_content(self, model, contents, config):
        self.requests.append({"model": model, "contents": contents, "config": config})
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        if reply == "hang":
            await asyncio.sleep(10)
        return reply


def text_reply(data) -> SimpleNamespace:
    text = data if isinstance(data, str) else json.dumps(data)
    return SimpleNamespace(text=text, candidates=None)


def make_provider(*replies, **kwargs):
    models = ScriptedModels(replies)
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    kwargs.setdefault("retry_delay", 0)
    return GeminiContentProvider(client=client, **kwargs), models


QUIZ = [
    {"question": "Pick one.", "options": ["I am", "I is"], "correct_answer": "I am"},
    {"question": "Broken.", "options": ["a", "b"], "correct_answer": "c"},
]

WORD = {
    "word": "serendipity",
    "source": "From the movie 'Serendipity'",
    "example": "Meeting you was pure serendipity.",
    "translation": "khush qismati",
    "is_verb": False,
}


class TestConstruction:
    def test_missing_key_raises(self):
        with pytest.raises(ContentFetchError):
            GeminiContentProvider(api_key=None)

    def test_from_settings_copies_options(self):
        settings = Settings(
            gemini_api_key="test-key",
            model="gemini-test",
            temperature=0.3,
            native_language="Hindi",
            request_timeout=5.0,
            max_retries=2,
        )
        provider = GeminiContentProvider.from_settings(settings)
        assert provider.model_name == "gemini-test"
        assert provider.temperature == 0.3
        assert provider.native_language == "Hindi"
        assert provider.request_timeout == 5.0
        assert provider.max_retries == 2


class TestRequests:
    """Successful requests are parsed and validated."""

    @pytest.mark.asyncio
    async def test_quiz_is_filtered_and_numbered(self):
        provider, models = make_provider(text_reply(QUIZ))
        questions = await provider.quiz("Present Simple", count=2)

        assert [q.id for q in questions] == ["quiz-Present Simple-0"]
        request = models.requests[0]
        assert request["config"].response_mime_type == "application/json"
        assert "Present Simple" in request["contents"]

    @pytest.mark.asyncio
    async def test_prompt_temperature_used_by_default(self):
        provider, models = make_provider(text_reply([]))
        await provider.revision_cards()
        assert models.requests[0]["config"].temperature is not None

    @pytest.mark.asyncio
    async def test_configured_temperature_overrides_prompt(self):
        provider, models = make_provider(text_reply([]), temperature=0.1)
        await provider.revision_cards()
        assert models.requests[0]["config"].temperature == 0.1

    @pytest.mark.asyncio
    async def test_native_language_reaches_prompt(self):
        provider, models = make_provider(text_reply([WORD]), native_language="Punjabi")
        await provider.daily_vocabulary(count=1)
        assert "Punjabi" in models.requests[0]["contents"]

    @pytest.mark.asyncio
    async def test_code_block_reply(self):
        provider, _ = make_provider(text_reply(f"```json\n{json.dumps(WORD)}\n```"))
        item = await provider.lookup_word("serendipity")
        assert item.word == "serendipity"

    @pytest.mark.asyncio
    async def test_text_from_candidate_parts(self):
        part = SimpleNamespace(text=json.dumps(WORD))
        candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]))
        reply = SimpleNamespace(text=None, candidates=[candidate])
        provider, _ = make_provider(reply)
        assert (await provider.lookup_word("serendipity")).translation == "khush qismati"

    @pytest.mark.asyncio
    async def test_exercise_ids(self):
        exercises = [{
            "sentence": "He ___ tea every morning.",
            "correct_answer": "drinks",
            "base_verb": "drink",
            "explanation": "Third person singular.",
        }]
        provider, models = make_provider(text_reply(exercises))
        result = await provider.fill_in_the_blanks("Present Simple", count=1)
        assert result[0].id == "Present Simple-0"
        assert "___" in models.requests[0]["contents"]


class TestRetries:
    """Failures are retried, then surfaced as ContentFetchError."""

    @pytest.mark.asyncio
    async def test_transient_error_then_success(self):
        provider, models = make_provider(RuntimeError("503"), text_reply([]))
        assert await provider.revision_cards() == []
        assert len(models.requests) == 2

    @pytest.mark.asyncio
    async def test_invalid_json_is_retried(self):
        provider, models = make_provider(text_reply("not json at all"), text_reply([WORD]))
        assert len(await provider.daily_vocabulary(count=1)) == 1
        assert len(models.requests) == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        provider, models = make_provider(
            RuntimeError("a"), RuntimeError("b"), RuntimeError("c"), max_retries=3,
        )
        with pytest.raises(ContentFetchError):
            await provider.tense_detail("Past Simple")
        assert len(models.requests) == 3

    @pytest.mark.asyncio
    async def test_empty_response_is_a_failure(self):
        empty = SimpleNamespace(text=None, candidates=[])
        provider, _ = make_provider(empty, max_retries=1)
        with pytest.raises(ContentFetchError):
            await provider.revision_cards()

    @pytest.mark.asyncio
    async def test_schema_mismatch_is_a_failure(self):
        provider, _ = make_provider(text_reply({"unexpected": True}), max_retries=1)
        with pytest.raises(ContentFetchError):
            await provider.tense_detail("Past Simple")

    @pytest.mark.asyncio
    async def test_timeout_is_retried(self):
        provider, models = make_provider("hang", text_reply([]), request_timeout=0.01)
        assert await provider.revision_cards() == []
        assert len(models.requests) == 2

    @pytest.mark.asyncio
    async def test_unknown_prompt_is_a_fetch_error(self):
        provider, models = make_provider()
        with pytest.raises(ContentFetchError):
            await provider._request("no_such_prompt", dict, lambda data: data)
        assert models.requests == []
