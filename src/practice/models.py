from __future__ import annotations

import dataclasses
import datetime as dt
import enum
from dataclasses import dataclass, field
from typing import Literal, Optional

ItemType = Literal["item", "structure"]

# 0-2 is a failed recall, 3-5 a pass.
ReviewGrade = int
MIN_GRADE = 0
MAX_GRADE = 5
PASSING_GRADE = 3


def is_passing_grade(grade: ReviewGrade) -> bool:
    return grade >= PASSING_GRADE


class SessionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETE = "complete"


class SRSStatus(str, enum.Enum):
    LEARNING = "learning"
    LEARNED = "learned"
    MASTERED = "mastered"


@dataclass(frozen=True)
class SRSData:
    """
    Spaced-repetition state for a single flashcard.

    Instances are immutable; the scheduler always returns a new value.
    `due_date` is a calendar date, so reviews computed on the same day
    agree regardless of the time they ran.
    """

    interval: int
    repetition: int
    ease_factor: float
    due_date: dt.date

    @classmethod
    def initial(
        cls,
        *,
        today: Optional[dt.date] = None,
        ease_factor: float = 2.5,
    ) -> "SRSData":
        return cls(
            interval=0,
            repetition=0,
            ease_factor=ease_factor,
            due_date=today or dt.date.today(),
        )


@dataclass(frozen=True)
class Flashcard:
    """A practice item supplied by the item store. Read-only to the engine."""

    id: str
    front: str
    back: str
    category: Optional[str] = None
    srs_data: Optional[SRSData] = None
    type: ItemType = "item"
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    def with_srs_data(
        self,
        srs_data: SRSData,
        *,
        updated_at: Optional[dt.datetime] = None,
    ) -> "Flashcard":
        """Return a copy of this card carrying new scheduling state."""
        return dataclasses.replace(
            self,
            srs_data=srs_data,
            updated_at=updated_at or self.updated_at,
        )


def is_due(card: Flashcard, today: Optional[dt.date] = None) -> bool:
    """True when a card has never been reviewed or its due date has arrived."""
    if card.srs_data is None:
        return True
    return card.srs_data.due_date <= (today or dt.date.today())


@dataclass(frozen=True)
class PracticeResult:
    """Log record of one graded review, for external persistence."""

    item_id: str
    grade: ReviewGrade
    type: ItemType = "item"
    timestamp: dt.datetime = field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )


@dataclass
class SessionStats:
    correct: int = 0
    incorrect: int = 0
    # Supplied by an external scoring collaborator; never computed here.
    xp_earned: int = 0
    streak: int = 0
    best_streak: int = 0
