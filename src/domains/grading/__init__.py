# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading domain package.

This package provides:
- Weighted scoring of raw assessment marks
- GPA and letter grade mapping
- Cumulative GPA across a student's courses
- Grade entry and retrieval
"""

from src.domains.grading.repository import GradeRepository
from src.domains.grading.scoring import (
    GPA_SCALE,
    GRADE_WEIGHTS,
    calculate_gpa,
    calculate_student_cgpa,
    calculate_total,
    letter_grade,
)
from src.domains.grading.service import GradeService

__all__ = [
    "GradeService",
    "GradeRepository",
    "GRADE_WEIGHTS",
    "GPA_SCALE",
    "calculate_total",
    "calculate_gpa",
    "letter_grade",
    "calculate_student_cgpa",
]
