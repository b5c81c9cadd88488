"""
VocabularyManager - Daily words, word lookup and the revision list.

Provides:
- A daily batch of vocabulary cards, fetched once per calendar day
- Single-word lookup (newest search wins)
- A durable "marked" revision list keyed by word text
"""

import logging
from datetime import date
from enum import Enum
from typing import Callable, Optional

from pydantic import TypeAdapter, ValidationError

from tensetrainer.curriculum import DAILY_WORD_COUNT
from tensetrainer.errors import ContentFetchError
from tensetrainer.schemas import DailyVocabulary, VocabularyItem

from .store import DAILY_VOCABULARY_KEY, MARKED_VOCABULARY_KEY, KeyValueStore


logger = logging.getLogger(__name__)

DAILY_ERROR_MESSAGE = "Could not load new vocabulary. Please try again later."

_VOCABULARY_LIST = TypeAdapter(list[VocabularyItem])


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


class VocabularyManager:
    """
    Own the learner's vocabulary state.

    The marked list is independent of the daily batch and survives daily
    resets.
    """

    def __init__(
        self,
        store: KeyValueStore,
        provider,
        today: Callable[[], date] = date.today,
        daily_count: int = DAILY_WORD_COUNT,
    ):
        """
        Initialize vocabulary manager.

        Args:
            store: Key-value store for the daily batch and marked list
            provider: ContentProvider for new words and lookups
            today: Clock returning the current calendar day
            daily_count: Size of the daily batch
        """
        self.store = store
        self.provider = provider
        self._today = today
        self.daily_count = daily_count

        self.daily_state = LoadState.IDLE
        self.daily_error: Optional[str] = None
        self._daily_words: list[VocabularyItem] = []

        self.is_searching = False
        self.search_result: Optional[VocabularyItem] = None
        self.search_error: Optional[str] = None
        self._search_seq = 0

        self._marked: list[VocabularyItem] = self._load_marked()

    # -------------------------------------------------------------------------
    # Daily words
    # -------------------------------------------------------------------------

    def _load_cached_batch(self) -> Optional[DailyVocabulary]:
        raw = self.store.get(DAILY_VOCABULARY_KEY)
        if raw is None:
            return None
        try:
            return DailyVocabulary.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Stored daily vocabulary is malformed, ignoring it: {e}")
            return None

    async def daily_words(self) -> list[VocabularyItem]:
        """
        Get today's words.

        The first call each calendar day fetches a new batch and stores it
        tagged with the date; later calls that day reuse it. A failed fetch
        sets the ERROR state and returns an empty list (no automatic retry).
        """
        today = self._today()
        cached = self._load_cached_batch()
        if cached is not None and cached.fetched_on == today:
            self._daily_words = list(cached.words)
            self.daily_state = LoadState.READY
            self.daily_error = None
            return list(self._daily_words)

        self.daily_state = LoadState.LOADING
        self.daily_error = None
        try:
            words = await self.provider.daily_vocabulary(self.daily_count)
        except ContentFetchError as e:
            logger.error(f"Failed to fetch vocabulary: {e}")
            self._daily_words = []
            self.daily_state = LoadState.ERROR
            self.daily_error = DAILY_ERROR_MESSAGE
            return []

        self._daily_words = list(words)
        self.daily_state = LoadState.READY
        batch = DailyVocabulary(fetched_on=today, words=self._daily_words)
        self.store.set(DAILY_VOCABULARY_KEY, batch.model_dump(mode="json"))
        logger.info(f"Fetched {len(self._daily_words)} new words for {today}")
        return list(self._daily_words)

    @property
    def words(self) -> list[VocabularyItem]:
        """Words from the last daily_words() call."""
        return list(self._daily_words)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    async def search(self, word: str) -> Optional[VocabularyItem]:
        """
        Look up a single word.

        Blank input is ignored without touching the previous result or
        error. A newer search supersedes any search still in flight.
        """
        word = word.strip()
        if not word:
            return None

        self._search_seq += 1
        seq = self._search_seq
        self.is_searching = True
        self.search_result = None
        self.search_error = None

        try:
            result = await self.provider.lookup_word(word)
        except ContentFetchError as e:
            if seq == self._search_seq:
                logger.error(f"Failed to search for word '{word}': {e}")
                self.search_error = f'Could not find "{word}". Please try another word.'
                self.is_searching = False
            return None

        if seq != self._search_seq:
            return None

        self.search_result = result
        self.is_searching = False
        return result

    # -------------------------------------------------------------------------
    # Marked words
    # -------------------------------------------------------------------------

    def _load_marked(self) -> list[VocabularyItem]:
        raw = self.store.get(MARKED_VOCABULARY_KEY)
        if raw is None:
            return []
        try:
            items = _VOCABULARY_LIST.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Stored marked words are malformed, starting empty: {e}")
            return []

        unique: list[VocabularyItem] = []
        seen: set[str] = set()
        for item in items:
            if item.word not in seen:
                seen.add(item.word)
                unique.append(item)
        return unique

    def _save_marked(self):
        payload = [item.model_dump(mode="json") for item in self._marked]
        if not self.store.set(MARKED_VOCABULARY_KEY, payload):
            logger.warning("Marked words not persisted; keeping in-memory list for this session")

    @property
    def marked_words(self) -> list[VocabularyItem]:
        """Marked words in the order they were marked."""
        return list(self._marked)

    def is_marked(self, item: VocabularyItem) -> bool:
        return any(w.word == item.word for w in self._marked)

    def toggle_mark(self, item: VocabularyItem) -> bool:
        """
        Mark an unmarked word, or unmark a marked one (matched by exact word).

        Returns True if the word is marked afterwards.
        """
        if self.is_marked(item):
            self._marked = [w for w in self._marked if w.word != item.word]
            marked = False
        else:
            self._marked = [*self._marked, item]
            marked = True
        self._save_marked()
        return marked
