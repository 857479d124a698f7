from __future__ import annotations

import dataclasses
import datetime as dt
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from src.practice.models import (
    Flashcard,
    PracticeResult,
    ReviewGrade,
    SessionStats,
    SessionStatus,
    is_passing_grade,
)
from src.practice.scheduler import SM2Scheduler, validate_grade

logger = logging.getLogger(__name__)

ReviewCallback = Callable[[str, ReviewGrade, Flashcard], None]
CompleteCallback = Callable[[], None]
Clock = Callable[[], dt.datetime]
Today = Callable[[], dt.date]


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class PracticeSession:
    """
    One practice pass over a fixed, ordered queue of flashcards.

    The queue is snapshotted at construction and never reordered. Each
    `submit_review` schedules the current card with SM-2, notifies the
    `on_review` sink with an updated copy, and moves to the next card.
    After the last card the session is complete and `on_complete` fires
    once. Submitting once there is no current card does nothing.

    Not safe to share between threads; one instance drives one pass.
    """

    def __init__(
        self,
        items: Iterable[Flashcard],
        *,
        on_review: Optional[ReviewCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        scheduler: Optional[SM2Scheduler] = None,
        clock: Optional[Clock] = None,
        today: Optional[Today] = None,
    ) -> None:
        self.on_review = on_review
        self.on_complete = on_complete
        self.scheduler = scheduler or SM2Scheduler()
        self._clock = clock or _utc_now
        # Due dates use the local calendar date.
        self._today = today or dt.date.today
        self.reset(items)

    def reset(self, items: Iterable[Flashcard]) -> None:
        """Start over with a new queue; previous stats and results are dropped."""
        self._queue: Tuple[Flashcard, ...] = tuple(items)
        self._current_index = 0
        self._completed_count = 0
        self._stats = SessionStats()
        self._results: List[PracticeResult] = []
        self._status = SessionStatus.ACTIVE
        logger.debug("Practice session started with %s cards", len(self._queue))

    @property
    def queue(self) -> Tuple[Flashcard, ...]:
        return self._queue

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_item(self) -> Optional[Flashcard]:
        if self._status is SessionStatus.COMPLETE or not self._queue:
            return None
        return self._queue[self._current_index]

    @property
    def total_cards(self) -> int:
        return len(self._queue)

    @property
    def completed_count(self) -> int:
        return self._completed_count

    @property
    def is_session_complete(self) -> bool:
        return self._completed_count > 0 and self._completed_count == len(self._queue)

    @property
    def progress(self) -> float:
        """Percentage of the queue reviewed so far, 0-100."""
        if not self._queue:
            return 0.0
        return self._completed_count / len(self._queue) * 100

    @property
    def stats(self) -> SessionStats:
        return dataclasses.replace(self._stats)

    @property
    def results(self) -> List[PracticeResult]:
        return list(self._results)

    def award_xp(self, points: int) -> None:
        """Record XP granted by an external scoring collaborator."""
        if points < 0:
            raise ValueError("points must be non-negative")
        self._stats.xp_earned += points

    def submit_review(self, grade: ReviewGrade) -> Optional[Flashcard]:
        """
        Grade the current card and advance.

        Returns the card carrying its new SRS data, or None when there was
        no current card to review.
        """
        card = self.current_item
        if card is None:
            logger.debug("submit_review ignored: no current card")
            return None

        validate_grade(grade)
        now = self._clock()
        updated_srs = self.scheduler.compute_next(grade, card.srs_data, today=self._today())
        updated_card = card.with_srs_data(updated_srs, updated_at=now)

        if is_passing_grade(grade):
            self._stats.correct += 1
            self._stats.streak += 1
            self._stats.best_streak = max(self._stats.best_streak, self._stats.streak)
        else:
            self._stats.incorrect += 1
            self._stats.streak = 0

        self._results.append(
            PracticeResult(item_id=card.id, grade=grade, type=card.type, timestamp=now)
        )

        if self.on_review is not None:
            try:
                self.on_review(card.id, grade, updated_card)
            except Exception:
                # Persistence failures belong to the sink; the pass goes on.
                logger.exception("on_review callback failed for card %s", card.id)

        self._completed_count += 1

        if self._current_index < len(self._queue) - 1:
            self._current_index += 1
        else:
            self._status = SessionStatus.COMPLETE
            logger.debug(
                "Practice session complete: correct=%s incorrect=%s",
                self._stats.correct,
                self._stats.incorrect,
            )
            if self.on_complete is not None:
                try:
                    self.on_complete()
                except Exception:
                    logger.exception("on_complete callback failed")

        return updated_card


def create_session(
    items: Iterable[Flashcard],
    *,
    on_review: Optional[ReviewCallback] = None,
    on_complete: Optional[CompleteCallback] = None,
    scheduler: Optional[SM2Scheduler] = None,
    clock: Optional[Clock] = None,
    today: Optional[Today] = None,
) -> PracticeSession:
    """Build a PracticeSession over `items` in the order given."""
    return PracticeSession(
        items,
        on_review=on_review,
        on_complete=on_complete,
        scheduler=scheduler,
        clock=clock,
        today=today,
    )
