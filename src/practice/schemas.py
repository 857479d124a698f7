from __future__ import annotations

import datetime as dt
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.practice.config import EASE_FACTOR_FLOOR
from src.practice.models import Flashcard, SRSData


class SRSDataRecord(BaseModel):
    """
    Storage form of SRSData.

    Serializes as {interval, repetition, easeFactor, dueDate} with the due
    date as an ISO-8601 date string. A stored datetime is truncated to its
    calendar date on load.
    """

    model_config = ConfigDict(populate_by_name=True)

    interval: int = Field(..., ge=0, description="Days until the next review")
    repetition: int = Field(..., ge=0, description="Consecutive passing reviews")
    ease_factor: float = Field(..., alias="easeFactor", ge=EASE_FACTOR_FLOOR)
    due_date: dt.date = Field(..., alias="dueDate")

    @field_validator("due_date", mode="before")
    @classmethod
    def _truncate_due_date(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            # fromisoformat() rejects a trailing "Z" before Python 3.11.
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return dt.datetime.fromisoformat(text).date()
        return value

    @classmethod
    def from_srs_data(cls, srs: SRSData) -> "SRSDataRecord":
        return cls(
            interval=srs.interval,
            repetition=srs.repetition,
            ease_factor=srs.ease_factor,
            due_date=srs.due_date,
        )

    def to_srs_data(self) -> SRSData:
        return SRSData(
            interval=self.interval,
            repetition=self.repetition,
            ease_factor=self.ease_factor,
            due_date=self.due_date,
        )

    def to_storage(self) -> dict:
        """Plain dict using the stored field names."""
        return self.model_dump(mode="json", by_alias=True)


class FlashcardIn(BaseModel):
    """Flashcard payload supplied by the item source."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    front: str
    back: str
    category: Optional[str] = None
    type: Literal["item", "structure"] = "item"
    srs_data: Optional[SRSDataRecord] = Field(default=None, alias="srsData")

    def to_flashcard(self) -> Flashcard:
        return Flashcard(
            id=self.id,
            front=self.front,
            back=self.back,
            category=self.category,
            srs_data=self.srs_data.to_srs_data() if self.srs_data else None,
            type=self.type,
        )

    @classmethod
    def from_flashcard(cls, card: Flashcard) -> "FlashcardIn":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            category=card.category,
            type=card.type,
            srs_data=SRSDataRecord.from_srs_data(card.srs_data) if card.srs_data else None,
        )


class WritingGradeRequest(BaseModel):
    """Request body for POST /api/practice/grade/writing."""

    user_input: str
    correct_answer: str


class OrderingGradeRequest(BaseModel):
    """Request body for POST /api/practice/grade/ordering."""

    moves_made: int
    min_moves_possible: int


class GradeResponse(BaseModel):
    grade: int = Field(..., ge=0, le=5)


class NextReviewRequest(BaseModel):
    """Request body for POST /api/practice/next-review."""

    model_config = ConfigDict(populate_by_name=True)

    grade: int = Field(..., description="Review grade from 0 (blackout) to 5 (perfect)")
    srs_data: Optional[SRSDataRecord] = Field(default=None, alias="srsData")


class NextReviewResponse(BaseModel):
    srs_data: SRSDataRecord
    status: Literal["learning", "learned", "mastered"]


class SessionStatsOut(BaseModel):
    correct: int
    incorrect: int
    xp_earned: int
    streak: int
    best_streak: int


class SessionSnapshot(BaseModel):
    session_id: str
    status: Literal["active", "complete"]
    current_card: Optional[FlashcardIn] = None
    current_index: int = Field(..., ge=0)
    completed_count: int = Field(..., ge=0)
    total_cards: int = Field(..., ge=0)
    progress: float = Field(..., ge=0, le=100)
    is_session_complete: bool
    stats: SessionStatsOut


class SessionStartRequest(BaseModel):
    items: List[FlashcardIn] = Field(default_factory=list)


class SessionReviewRequest(BaseModel):
    grade: int = Field(..., description="Review grade from 0 (blackout) to 5 (perfect)")


class SessionReviewResponse(BaseModel):
    reviewed_card: Optional[FlashcardIn] = None
    session: SessionSnapshot


class PracticeResultOut(BaseModel):
    item_id: str
    grade: int = Field(..., ge=0, le=5)
    type: Literal["item", "structure"]
    timestamp: dt.datetime


class SessionResultsResponse(BaseModel):
    """Review log and the cards handed to the persistence sink."""

    session_id: str
    finished: bool
    results: List[PracticeResultOut] = Field(default_factory=list)
    updated_cards: List[FlashcardIn] = Field(default_factory=list)


class SessionFinishResponse(BaseModel):
    ok: bool
    session_id: str
