"""
ProgressTracker - Tense unlock state and the daily streak.

Owns a single ProgressState and persists it after every mutation:
- Tense status (locked → unlocked → completed)
- Daily reset: completions are revoked each new calendar day
- Streak of consecutive days on which every gating tense was completed
"""

import logging
from datetime import date, timedelta
from typing import Callable, Optional, Sequence

from pydantic import ValidationError

from tensetrainer.curriculum import MIXED_TENSES, TENSES, next_tense, streak_gating_tenses
from tensetrainer.schemas import ProgressState, TenseStatus

from .store import PROGRESS_KEY, KeyValueStore


logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Track tense progression and the daily streak.

    State is loaded once on construction (applying the daily reset) and is
    authoritative in memory afterwards; a failed write is logged and the
    session carries on.
    """

    def __init__(
        self,
        store: KeyValueStore,
        tenses: Sequence[str] = TENSES,
        exempt_tense: Optional[str] = MIXED_TENSES,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize progress tracker.

        Args:
            store: Key-value store holding the progress blob
            tenses: Fixed tense sequence, in practice order
            exempt_tense: Tense that does not gate the streak
            today: Clock returning the current calendar day
        """
        if not tenses:
            raise ValueError("At least one tense is required")
        self.store = store
        self.tenses = tuple(tenses)
        self.exempt_tense = exempt_tense
        self._today = today
        self.state = self.load()

    # -------------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------------

    def default_state(self) -> ProgressState:
        """First tense unlocked, everything else locked, no streak."""
        return ProgressState(
            status_by_tense={
                tense: TenseStatus.UNLOCKED if idx == 0 else TenseStatus.LOCKED
                for idx, tense in enumerate(self.tenses)
            },
        )

    def load(self) -> ProgressState:
        """
        Read persisted progress and apply the daily reset.

        Missing or unparsable data falls back to the default state.
        """
        raw = self.store.get(PROGRESS_KEY)
        if raw is None:
            return self.default_state()

        try:
            state = ProgressState.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Stored progress is malformed, starting fresh: {e}")
            return self.default_state()

        state.status_by_tense = {
            tense: state.status_by_tense.get(tense, TenseStatus.LOCKED)
            for tense in self.tenses
        }

        if self._apply_daily_reset(state):
            self._save(state)
        return state

    def _apply_daily_reset(self, state: ProgressState) -> bool:
        """
        Revoke yesterday's completions; zero the streak after a missed day.

        Returns True if the state changed.
        """
        today = self._today()
        if state.last_completed_date == today:
            return False

        changed = False
        if state.last_completed_date != today - timedelta(days=1) and state.streak != 0:
            logger.info(f"Streak of {state.streak} broken (last completed {state.last_completed_date})")
            state.streak = 0
            changed = True

        for tense, status in state.status_by_tense.items():
            if status == TenseStatus.COMPLETED:
                state.status_by_tense[tense] = TenseStatus.UNLOCKED
                changed = True

        if changed:
            logger.info("Daily reset applied to progress")
        return changed

    def _save(self, state: Optional[ProgressState] = None):
        """Persist the full state; failures are logged by the store."""
        state = state or self.state
        if not self.store.set(PROGRESS_KEY, state.model_dump(mode="json")):
            logger.warning("Progress not persisted; keeping in-memory state for this session")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def streak(self) -> int:
        return self.state.streak

    @property
    def last_completed_date(self) -> Optional[date]:
        return self.state.last_completed_date

    def status(self, tense: str) -> TenseStatus:
        """Get the status of a tense; unknown tenses count as locked."""
        return self.state.status_by_tense.get(tense, TenseStatus.LOCKED)

    def statuses(self) -> dict[str, TenseStatus]:
        """Status of every tense, in sequence order."""
        return {tense: self.status(tense) for tense in self.tenses}

    def active_tense(self) -> Optional[str]:
        """
        Get the tense to practise now.

        Returns the first unlocked tense in sequence order, or None when
        nothing is left to do today.
        """
        for tense in self.tenses:
            if self.status(tense) == TenseStatus.UNLOCKED:
                return tense
        return None

    def status_indicator(self, tense: str) -> str:
        """
        Get status indicator for sidebar display.

        Returns:
            ✓ for completed
            → for the active tense
            ○ for unlocked
            ◌ for locked
        """
        status = self.status(tense)
        if status == TenseStatus.COMPLETED:
            return "✓"
        elif tense == self.active_tense():
            return "→"
        elif status == TenseStatus.UNLOCKED:
            return "○"
        else:
            return "◌"

    def completion_stats(self) -> dict:
        """Get completion statistics for display."""
        statuses = self.statuses()
        total = len(statuses)
        completed = sum(1 for s in statuses.values() if s == TenseStatus.COMPLETED)
        unlocked = sum(1 for s in statuses.values() if s == TenseStatus.UNLOCKED)

        return {
            "total": total,
            "completed": completed,
            "unlocked": unlocked,
            "locked": total - completed - unlocked,
            "completion_percent": round(completed / total * 100, 1) if total > 0 else 0,
            "streak": self.state.streak,
        }

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def complete_tense(self, tense: str):
        """
        Mark a tense as completed and unlock its successor.

        When every gating tense is completed, the streak grows by one, at
        most once per calendar day.
        """
        if tense not in self.tenses:
            raise ValueError(f"Unknown tense: {tense}")

        state = self.state
        state.status_by_tense[tense] = TenseStatus.COMPLETED
        logger.info(f"Tense completed: {tense}")

        following = next_tense(tense, self.tenses)
        if following and state.status_by_tense.get(following) == TenseStatus.LOCKED:
            state.status_by_tense[following] = TenseStatus.UNLOCKED
            logger.info(f"Tense unlocked: {following}")

        all_completed = all(
            state.status_by_tense.get(t) == TenseStatus.COMPLETED
            for t in streak_gating_tenses(self.tenses, self.exempt_tense)
        )
        if all_completed:
            today = self._today()
            if state.last_completed_date != today:
                state.streak += 1
                state.last_completed_date = today
                logger.info(f"All tenses completed for {today}; streak is now {state.streak}")

        self._save()

    def reset_progress(self):
        """Reset all progress to the default state."""
        self.state = self.default_state()
        self._save()
