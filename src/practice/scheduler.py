from __future__ import annotations

import datetime as dt
import logging
import math
from dataclasses import dataclass
from typing import Optional

from src.practice.config import EASE_FACTOR_FLOOR, PracticeConfig
from src.practice.errors import InvalidGradeError
from src.practice.models import (
    MAX_GRADE,
    MIN_GRADE,
    ReviewGrade,
    SRSData,
    SRSStatus,
    is_passing_grade,
)

logger = logging.getLogger(__name__)


@dataclass
class SM2Config:
    """Config values for the SM-2 scheduler."""

    min_ease_factor: float = EASE_FACTOR_FLOOR
    initial_ease_factor: float = 2.5

    @classmethod
    def from_practice_config(cls, config: PracticeConfig) -> "SM2Config":
        return cls(
            min_ease_factor=max(EASE_FACTOR_FLOOR, config.min_ease_factor),
            initial_ease_factor=max(EASE_FACTOR_FLOOR, config.initial_ease_factor),
        )


def validate_grade(grade: object) -> ReviewGrade:
    """Return `grade` unchanged if it is an int in [0, 5], else raise."""
    if isinstance(grade, bool) or not isinstance(grade, int):
        raise InvalidGradeError(grade)
    if grade < MIN_GRADE or grade > MAX_GRADE:
        raise InvalidGradeError(grade)
    return grade


def _round_half_up(value: float) -> int:
    # Halves round up, not to even.
    return int(math.floor(value + 0.5))


def _as_date(value: Optional[dt.date]) -> dt.date:
    if value is None:
        return dt.date.today()
    if isinstance(value, dt.datetime):
        return value.date()
    return value


class SM2Scheduler:
    """
    SM-2 spaced repetition scheduler.

    Variant of the SuperMemo-2 algorithm used for practice reviews:

        - grade is an integer in [0, 5]
        - grade < 3 is a failed recall: repetition resets, interval is 1 day
        - the ease factor is adjusted after every review, pass or fail,
          and never drops below `min_ease_factor`
        - interval is in days and determines the next due date
    """

    def __init__(self, config: Optional[SM2Config] = None) -> None:
        self.config = config or SM2Config()

    def initial_state(self, *, today: Optional[dt.date] = None) -> SRSData:
        return SRSData.initial(
            today=_as_date(today),
            ease_factor=self.config.initial_ease_factor,
        )

    def compute_next(
        self,
        grade: ReviewGrade,
        prior: Optional[SRSData] = None,
        *,
        today: Optional[dt.date] = None,
    ) -> SRSData:
        """
        Compute the scheduling state that follows a review.

        `prior` is left untouched; a new SRSData is returned. `today` may be
        a date or a datetime (its time of day is dropped).
        """
        validate_grade(grade)
        today = _as_date(today)

        if prior is None:
            interval = 0
            repetition = 0
            ef = self.config.initial_ease_factor
        else:
            interval = prior.interval
            repetition = prior.repetition
            ef = prior.ease_factor

        if is_passing_grade(grade):
            if repetition == 0:
                interval = 1
            elif repetition == 1:
                interval = 6
            else:
                interval = _round_half_up(interval * ef)
            repetition += 1
        else:
            repetition = 0
            interval = 1

        q_delta = 5 - grade
        ef = ef + (0.1 - q_delta * (0.08 + q_delta * 0.02))
        floor = max(EASE_FACTOR_FLOOR, self.config.min_ease_factor)
        if ef < floor:
            ef = floor

        logger.debug(
            "SM-2 review grade=%s -> interval=%s repetition=%s ease_factor=%.2f",
            grade,
            interval,
            repetition,
            ef,
        )

        return SRSData(
            interval=interval,
            repetition=repetition,
            ease_factor=ef,
            due_date=today + dt.timedelta(days=interval),
        )


_default_scheduler = SM2Scheduler()


def compute_next_review(
    grade: ReviewGrade,
    prior: Optional[SRSData] = None,
    *,
    today: Optional[dt.date] = None,
) -> SRSData:
    """Apply one review to `prior` using the default SM-2 settings."""
    return _default_scheduler.compute_next(grade, prior, today=today)


def classify_status(interval: int, config: Optional[PracticeConfig] = None) -> SRSStatus:
    """Bucket an interval (days) into learning, learned or mastered."""
    config = config or PracticeConfig()
    if interval < config.learned_interval_days:
        return SRSStatus.LEARNING
    if interval < config.mastered_interval_days:
        return SRSStatus.LEARNED
    return SRSStatus.MASTERED
