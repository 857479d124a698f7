"""
Heuristic graders that turn an exercise outcome into a 0-5 review grade.

All functions here are pure, so they can be called from any thread.
"""

from __future__ import annotations

from typing import Sequence

from src.practice.errors import OutOfRangeMovesError
from src.practice.models import ReviewGrade


def _normalize(text: str) -> str:
    return text.strip().lower()


def levenshtein_distance(s1: str, s2: str) -> int:
    """Minimum number of single-character edits turning `s1` into `s2`."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def compute_writing_grade(user_input: str, correct_answer: str) -> ReviewGrade:
    """
    Grade a typed answer against the expected text.

    Comparison ignores case and surrounding whitespace. An exact match is a
    5; otherwise the edit distance relative to the expected answer's length
    picks the grade:

        ratio <= 0.2 -> 4
        ratio <= 0.4 -> 3
        ratio <= 0.6 -> 2
        otherwise    -> 1

    An expected answer that is empty after normalization grades 0.
    """
    user = _normalize(user_input)
    correct = _normalize(correct_answer)

    if user == correct:
        return 5

    distance = levenshtein_distance(user, correct)
    if len(correct) == 0:
        return 0

    error_ratio = distance / len(correct)
    if error_ratio <= 0.2:
        return 4
    if error_ratio <= 0.4:
        return 3
    if error_ratio <= 0.6:
        return 2
    return 1


def compute_ordering_grade(moves_made: int, min_moves_possible: int) -> ReviewGrade:
    """
    Grade an ordering exercise by how many moves it took versus the minimum.

    Exactly twice the minimum still grades 2; only strictly more grades 1.
    Negative inputs raise OutOfRangeMovesError.
    """
    if moves_made < 0 or min_moves_possible < 0:
        raise OutOfRangeMovesError(moves_made, min_moves_possible)

    if moves_made <= min_moves_possible:
        return 5
    if moves_made <= min_moves_possible + 1:
        return 4
    if moves_made <= min_moves_possible + 3:
        return 3
    if moves_made > min_moves_possible * 2:
        return 1
    return 2


def grade_unscramble(
    is_correct: bool,
    moves_made: int,
    correct_order: Sequence[str],
) -> ReviewGrade:
    """
    Grade a sentence-unscramble attempt.

    A wrong final order is always a 1. A correct one is graded on efficiency,
    taking the number of words as the minimum number of moves.
    """
    if not is_correct:
        return 1
    return compute_ordering_grade(moves_made, len(correct_order))
