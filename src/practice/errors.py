"""
Errors raised by the practice engine when a caller breaks an input contract.
"""

from __future__ import annotations


class PracticeError(ValueError):
    """Base class for invalid input handed to the practice engine."""


class InvalidGradeError(PracticeError):
    """A review grade outside the integer range [0, 5]."""

    def __init__(self, grade: object) -> None:
        super().__init__(f"grade must be an integer between 0 and 5, got {grade!r}")
        self.grade = grade


class OutOfRangeMovesError(PracticeError):
    """Negative move counts passed to the ordering grader."""

    def __init__(self, moves_made: int, min_moves_possible: int) -> None:
        super().__init__(
            "moves_made and min_moves_possible must be non-negative, "
            f"got moves_made={moves_made}, min_moves_possible={min_moves_possible}"
        )
        self.moves_made = moves_made
        self.min_moves_possible = min_moves_possible
