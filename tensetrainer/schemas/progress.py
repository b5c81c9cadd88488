"""
Progress schemas for TenseTrainer.

Defines Pydantic models for learner state including:
- Tense status tracking
- Progress state (statuses, streak, last completion day)
- The cached daily vocabulary batch
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import date
from enum import Enum

from .content import VocabularyItem


class TenseStatus(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    COMPLETED = "completed"


class ProgressState(BaseModel):
    status_by_tense: dict[str, TenseStatus]
    last_completed_date: Optional[date] = None  # calendar day all gating tenses were completed
    streak: int = Field(default=0, ge=0)


class DailyVocabulary(BaseModel):
    fetched_on: date  # calendar day the batch was generated
    words: list[VocabularyItem]
