from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict

from fastapi import APIRouter, HTTPException, Request, status

from src.practice.config import PracticeConfig, load_config
from src.practice.errors import PracticeError
from src.practice.grading import compute_ordering_grade, compute_writing_grade
from src.practice.models import Flashcard, ReviewGrade
from src.practice.scheduler import SM2Config, SM2Scheduler, classify_status
from src.practice.schemas import (
    FlashcardIn,
    GradeResponse,
    NextReviewRequest,
    NextReviewResponse,
    OrderingGradeRequest,
    PracticeResultOut,
    SessionFinishResponse,
    SessionResultsResponse,
    SessionReviewRequest,
    SessionReviewResponse,
    SessionSnapshot,
    SessionStartRequest,
    SessionStatsOut,
    SRSDataRecord,
    WritingGradeRequest,
)
from src.practice.session import PracticeSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/practice", tags=["practice"])


@dataclass
class SessionHandle:
    """A running session plus the cards its review sink has received."""

    session_id: str
    session: PracticeSession
    updated_cards: Dict[str, Flashcard] = field(default_factory=dict)
    finished: bool = False

    def record_review(self, item_id: str, grade: ReviewGrade, card: Flashcard) -> None:
        self.updated_cards[item_id] = card

    def mark_finished(self) -> None:
        self.finished = True


def _get_config(request: Request) -> PracticeConfig:
    config = getattr(request.app.state, "config", None)
    if config is None:
        config = load_config()
        request.app.state.config = config
    return config


def _get_sessions(request: Request) -> dict[str, SessionHandle]:
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None:
        request.app.state.sessions = {}
        sessions = request.app.state.sessions
    return sessions


def _get_handle(request: Request, session_id: str) -> SessionHandle:
    handle = _get_sessions(request).get(session_id)
    if handle is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return handle


def _snapshot(handle: SessionHandle) -> SessionSnapshot:
    session = handle.session
    current = session.current_item
    stats = session.stats
    return SessionSnapshot(
        session_id=handle.session_id,
        status=session.status.value,
        current_card=FlashcardIn.from_flashcard(current) if current else None,
        current_index=session.current_index,
        completed_count=session.completed_count,
        total_cards=session.total_cards,
        progress=session.progress,
        is_session_complete=session.is_session_complete,
        stats=SessionStatsOut(
            correct=stats.correct,
            incorrect=stats.incorrect,
            xp_earned=stats.xp_earned,
            streak=stats.streak,
            best_streak=stats.best_streak,
        ),
    )


def _unprocessable(exc: PracticeError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=str(exc),
    )


@router.post("/grade/writing", response_model=GradeResponse)
async def grade_writing(payload: WritingGradeRequest) -> GradeResponse:
    """Grade a typed answer against the expected text."""
    grade = compute_writing_grade(payload.user_input, payload.correct_answer)
    return GradeResponse(grade=grade)


@router.post("/grade/ordering", response_model=GradeResponse)
async def grade_ordering(payload: OrderingGradeRequest) -> GradeResponse:
    """Grade an ordering exercise by move efficiency."""
    try:
        grade = compute_ordering_grade(payload.moves_made, payload.min_moves_possible)
    except PracticeError as exc:
        raise _unprocessable(exc) from exc
    return GradeResponse(grade=grade)


@router.post("/next-review", response_model=NextReviewResponse)
async def next_review(payload: NextReviewRequest, request: Request) -> NextReviewResponse:
    """Compute the next SM-2 state for a single review."""
    config = _get_config(request)
    scheduler = SM2Scheduler(SM2Config.from_practice_config(config))
    prior = payload.srs_data.to_srs_data() if payload.srs_data else None
    try:
        updated = scheduler.compute_next(payload.grade, prior)
    except PracticeError as exc:
        raise _unprocessable(exc) from exc
    return NextReviewResponse(
        srs_data=SRSDataRecord.from_srs_data(updated),
        status=classify_status(updated.interval, config).value,
    )


@router.post("/sessions", response_model=SessionSnapshot, status_code=status.HTTP_201_CREATED)
async def start_session(payload: SessionStartRequest, request: Request) -> SessionSnapshot:
    """Start a practice pass over the cards in the order supplied."""
    config = _get_config(request)
    if len(payload.items) > config.max_session_items:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"A session may contain at most {config.max_session_items} cards",
        )

    session_id = str(uuid.uuid4())
    session = PracticeSession(
        [item.to_flashcard() for item in payload.items],
        scheduler=SM2Scheduler(SM2Config.from_practice_config(config)),
    )
    handle = SessionHandle(session_id=session_id, session=session)
    session.on_review = handle.record_review
    session.on_complete = handle.mark_finished

    _get_sessions(request)[session_id] = handle
    logger.info("Started practice session %s with %s cards", session_id, session.total_cards)
    return _snapshot(handle)


@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session(session_id: str, request: Request) -> SessionSnapshot:
    """Return the current state of a practice session."""
    return _snapshot(_get_handle(request, session_id))


@router.post("/sessions/{session_id}/review", response_model=SessionReviewResponse)
async def submit_review(
    session_id: str,
    payload: SessionReviewRequest,
    request: Request,
) -> SessionReviewResponse:
    """Grade the current card of a session and advance to the next one."""
    handle = _get_handle(request, session_id)
    try:
        reviewed = handle.session.submit_review(payload.grade)
    except PracticeError as exc:
        raise _unprocessable(exc) from exc

    return SessionReviewResponse(
        reviewed_card=FlashcardIn.from_flashcard(reviewed) if reviewed else None,
        session=_snapshot(handle),
    )


@router.get("/sessions/{session_id}/results", response_model=SessionResultsResponse)
async def get_session_results(session_id: str, request: Request) -> SessionResultsResponse:
    """Return the review log and the updated cards a client should persist."""
    handle = _get_handle(request, session_id)
    return SessionResultsResponse(
        session_id=session_id,
        finished=handle.finished,
        results=[
            PracticeResultOut(
                item_id=result.item_id,
                grade=result.grade,
                type=result.type,
                timestamp=result.timestamp,
            )
            for result in handle.session.results
        ],
        updated_cards=[FlashcardIn.from_flashcard(card) for card in handle.updated_cards.values()],
    )


@router.delete("/sessions/{session_id}", response_model=SessionFinishResponse)
async def finish_session(session_id: str, request: Request) -> SessionFinishResponse:
    """Discard a practice session."""
    sessions = _get_sessions(request)
    if sessions.pop(session_id, None) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return SessionFinishResponse(ok=True, session_id=session_id)
