"""
Adaptive practice engine.

Provides the pieces of a review pass:
- SM-2 scheduling of flashcards
- Heuristic grading of typed and ordering answers
- A session controller that walks a queue of cards
"""

from .errors import InvalidGradeError, OutOfRangeMovesError, PracticeError
from .grading import (
    compute_ordering_grade,
    compute_writing_grade,
    grade_unscramble,
    levenshtein_distance,
)
from .models import (
    Flashcard,
    PracticeResult,
    SessionStats,
    SessionStatus,
    SRSData,
    SRSStatus,
    is_due,
    is_passing_grade,
)
from .scheduler import SM2Config, SM2Scheduler, classify_status, compute_next_review
from .session import PracticeSession, create_session

__all__ = [
    "Flashcard",
    "PracticeResult",
    "SessionStats",
    "SessionStatus",
    "SRSData",
    "SRSStatus",
    "is_due",
    "is_passing_grade",
    "PracticeError",
    "InvalidGradeError",
    "OutOfRangeMovesError",
    "compute_writing_grade",
    "compute_ordering_grade",
    "grade_unscramble",
    "levenshtein_distance",
    "SM2Config",
    "SM2Scheduler",
    "classify_status",
    "compute_next_review",
    "PracticeSession",
    "create_session",
]
