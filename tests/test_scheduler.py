from __future__ import annotations

import datetime as dt
import itertools

import pytest

from src.practice.config import PracticeConfig
from src.practice.errors import InvalidGradeError
from src.practice.models import SRSData, SRSStatus
from src.practice.scheduler import (
    SM2Config,
    SM2Scheduler,
    classify_status,
    compute_next_review,
)

TODAY = dt.date(2025, 1, 1)


def _make_state(
    *,
    interval: int = 0,
    repetition: int = 0,
    ease_factor: float = 2.5,
) -> SRSData:
    return SRSData(
        interval=interval,
        repetition=repetition,
        ease_factor=ease_factor,
        due_date=TODAY,
    )


def test_first_success_review_from_defaults():
    updated = compute_next_review(5, None, today=TODAY)

    assert updated.repetition == 1
    assert updated.interval == 1
    assert updated.ease_factor == pytest.approx(2.6)
    assert updated.due_date == dt.date(2025, 1, 2)


def test_second_and_third_success_reviews():
    state = compute_next_review(5, None, today=TODAY)
    state = compute_next_review(5, state, today=TODAY)

    assert state.repetition == 2
    assert state.interval == 6
    assert state.ease_factor == pytest.approx(2.7)
    assert state.due_date == dt.date(2025, 1, 7)

    state = compute_next_review(4, state, today=TODAY)

    # round(6 * 2.7) with the ease factor from before this review
    assert state.repetition == 3
    assert state.interval == 16
    assert state.ease_factor == pytest.approx(2.7)
    assert state.due_date == TODAY + dt.timedelta(days=16)


def test_failed_review_resets_repetition_and_interval():
    prior = _make_state(interval=16, repetition=3, ease_factor=2.7)

    updated = compute_next_review(1, prior, today=TODAY)

    assert updated.repetition == 0
    assert updated.interval == 1
    assert updated.due_date == dt.date(2025, 1, 2)
    # Ease factor is adjusted on failures too.
    assert updated.ease_factor == pytest.approx(2.7 - 0.54)


def test_ease_factor_is_floored():
    state = compute_next_review(0, None, today=TODAY)
    assert state.ease_factor == pytest.approx(1.7)

    state = compute_next_review(0, state, today=TODAY)
    assert state.ease_factor == 1.3


def test_interval_rounds_half_up():
    prior = _make_state(interval=5, repetition=2, ease_factor=2.5)

    updated = compute_next_review(3, prior, today=TODAY)

    assert updated.interval == 13
    assert updated.ease_factor == pytest.approx(2.36)


def test_prior_state_is_not_mutated():
    prior = _make_state(interval=6, repetition=2, ease_factor=2.5)
    snapshot = SRSData(**vars(prior))

    updated = compute_next_review(5, prior, today=TODAY)

    assert prior == snapshot
    assert updated is not prior


def test_datetime_today_is_truncated_to_date():
    late = dt.datetime(2025, 1, 1, 23, 59, 59)
    early = dt.datetime(2025, 1, 1, 0, 0, 1)

    a = compute_next_review(5, None, today=late)
    b = compute_next_review(5, None, today=early)

    assert a == b
    assert a.due_date == dt.date(2025, 1, 2)
    assert not isinstance(a.due_date, dt.datetime)


@pytest.mark.parametrize("grade", [3, 4, 5])
@pytest.mark.parametrize("repetition,interval", [(0, 0), (1, 1), (2, 6), (7, 120)])
def test_passing_grade_increments_repetition(grade, repetition, interval):
    prior = _make_state(interval=interval, repetition=repetition, ease_factor=1.3)

    updated = compute_next_review(grade, prior, today=TODAY)

    assert updated.repetition == repetition + 1
    assert updated.interval > 0


@pytest.mark.parametrize("grade", [0, 1, 2])
def test_failing_grade_always_resets(grade):
    prior = _make_state(interval=40, repetition=5, ease_factor=2.9)

    updated = compute_next_review(grade, prior, today=TODAY)

    assert updated.repetition == 0
    assert updated.interval == 1


def test_ease_factor_never_below_floor_for_any_sequence():
    for grades in itertools.product(range(6), repeat=4):
        state = None
        for grade in grades:
            state = compute_next_review(grade, state, today=TODAY)
            assert state.ease_factor >= 1.3
            assert state.interval >= 0
            assert state.repetition >= 0


@pytest.mark.parametrize("grade", [-1, 6, 2.5, "3", None, True])
def test_invalid_grade_is_rejected(grade):
    with pytest.raises(InvalidGradeError):
        compute_next_review(grade, None, today=TODAY)  # type: ignore[arg-type]


def test_invalid_grade_is_a_value_error():
    with pytest.raises(ValueError):
        compute_next_review(7, None, today=TODAY)


def test_custom_config_changes_defaults_and_floor():
    scheduler = SM2Scheduler(SM2Config(min_ease_factor=2.0, initial_ease_factor=2.2))

    updated = scheduler.compute_next(0, None, today=TODAY)

    assert updated.ease_factor == 2.0
    assert scheduler.initial_state(today=TODAY).ease_factor == 2.2


def test_classify_status_thresholds():
    assert classify_status(0) is SRSStatus.LEARNING
    assert classify_status(6) is SRSStatus.LEARNING
    assert classify_status(7) is SRSStatus.LEARNED
    assert classify_status(29) is SRSStatus.LEARNED
    assert classify_status(30) is SRSStatus.MASTERED

    config = PracticeConfig(learned_interval_days=3, mastered_interval_days=10)
    assert classify_status(3, config) is SRSStatus.LEARNED
    assert classify_status(10, config) is SRSStatus.MASTERED


def test_config_floor_below_minimum_still_holds_ease_factor():
    scheduler = SM2Scheduler(SM2Config(min_ease_factor=1.0))

    state = None
    for _ in range(4):
        state = scheduler.compute_next(0, state, today=TODAY)

    assert state.ease_factor == 1.3
