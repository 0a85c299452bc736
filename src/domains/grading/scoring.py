# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment scoring, GPA mapping and cumulative GPA.

Pure functions; nothing here reads or writes the store.

The course total is out of 100:
- Assignments: 10 (average of per-entry percentages)
- Quizzes: 15 (average of per-entry percentages)
- Mid-term: 25
- Final: 50

Example:
    >>> marks = GradeMarks(mid=20, max_mid=25, final=45, max_final=50)
    >>> calculate_total(marks)
    65.0
    >>> calculate_gpa(65.0)
    2.33
"""

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from src.models.grade import GradeMarks, GradeRecord

GRADE_WEIGHTS: dict[str, float] = {
    "assignments": 10.0,
    "quizzes": 15.0,
    "mid": 25.0,
    "final": 50.0,
}

# (lowest total in band, grade points, letter), highest band first
GPA_SCALE: tuple[tuple[float, float, str], ...] = (
    (85.0, 4.00, "A"),
    (80.0, 3.66, "A-"),
    (75.0, 3.33, "B+"),
    (71.0, 3.00, "B"),
    (68.0, 2.66, "B-"),
    (64.0, 2.33, "C+"),
    (61.0, 2.00, "C"),
    (58.0, 1.66, "C-"),
    (55.0, 1.33, "D+"),
    (50.0, 1.00, "D"),
)
FAILING_GPA = 0.00
FAILING_LETTER = "F"

DEFAULT_COMPONENT_MAX = 100.0
TOTAL_DECIMAL_PLACES = 9


def average_percentage(
    scores: Sequence[float],
    maxima: Sequence[float],
    default_max: float = DEFAULT_COMPONENT_MAX,
) -> float:
    """Average the per-entry percentages of a list of scores.

    An entry with no maximum, or a maximum of zero, is scored out of
    ``default_max``.

    Returns:
        Average percentage, or 0.0 for an empty list.
    """
    if not scores:
        return 0.0

    percentages = []
    for index, score in enumerate(scores):
        maximum = maxima[index] if index < len(maxima) else 0
        if not maximum:
            maximum = default_max
        percentages.append(score / maximum * 100)

    return sum(percentages) / len(percentages)


def calculate_total(
    marks: GradeMarks,
    default_component_max: float = DEFAULT_COMPONENT_MAX,
) -> float:
    """Calculate the weighted course total on a 0-100 scale.

    Empty assignment or quiz lists contribute 0. A mid-term or final with
    a maximum of 0 contributes 0. The result is rounded to nine decimal
    places, which clears float noise but keeps band edges strict.

    Args:
        marks: Raw assessment marks.
        default_component_max: Maximum for assignment or quiz entries
            that have none.

    Returns:
        Weighted total (nominally 0-100), rounded to nine decimal places.
    """
    assignment_score = (
        average_percentage(marks.assignments, marks.max_assignments, default_component_max)
        / 100
        * GRADE_WEIGHTS["assignments"]
    )
    quiz_score = (
        average_percentage(marks.quizzes, marks.max_quizzes, default_component_max)
        / 100
        * GRADE_WEIGHTS["quizzes"]
    )
    mid_score = marks.mid / marks.max_mid * GRADE_WEIGHTS["mid"] if marks.max_mid > 0 else 0.0
    final_score = (
        marks.final / marks.max_final * GRADE_WEIGHTS["final"] if marks.max_final > 0 else 0.0
    )

    total = assignment_score + quiz_score + mid_score + final_score
    return round(total, TOTAL_DECIMAL_PLACES)


def _band(total: float) -> tuple[float, str]:
    for lower, gpa, letter in GPA_SCALE:
        if total >= lower:
            return gpa, letter
    return FAILING_GPA, FAILING_LETTER


def calculate_gpa(total: float) -> float:
    """Map a course total to grade points on the 0.00-4.00 scale.

    Each band includes its lower bound: 50 maps to 1.00, 49.99 to 0.00.
    """
    return _band(total)[0]


def letter_grade(total: float) -> str:
    """Map a course total to its letter grade."""
    return _band(total)[1]


def round_half_up(value: float, places: int) -> float:
    """Round to a number of decimal places, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def calculate_student_cgpa(
    grades: Iterable[GradeRecord | GradeMarks],
    decimal_places: int = 2,
    default_component_max: float = DEFAULT_COMPONENT_MAX,
) -> float:
    """Calculate a student's cumulative GPA.

    Unweighted mean of the per-course GPAs. A student with no graded
    courses has a CGPA of 0.00.

    Args:
        grades: Grade records (or bare marks) for one student.
        decimal_places: Rounding applied to the mean.
        default_component_max: Passed through to calculate_total.

    Returns:
        Cumulative GPA.
    """
    points = []
    for grade in grades:
        marks = grade.marks if isinstance(grade, GradeRecord) else grade
        points.append(calculate_gpa(calculate_total(marks, default_component_max)))

    if not points:
        return 0.0

    return round_half_up(sum(points) / len(points), decimal_places)
