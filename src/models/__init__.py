# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic models exchanged between repositories and domain services."""

from src.models.academic import CourseRecord, StudentRecord
from src.models.enrollment import (
    EnrollmentCreateResult,
    EnrollmentDeletionResult,
    EnrollmentRecord,
    EnrollmentStatus,
    PromotionResult,
    StatusChangeResult,
)
from src.models.grade import GradeDetail, GradeMarks, GradeRecord

__all__ = [
    # Academic
    "StudentRecord",
    "CourseRecord",
    # Enrollment
    "EnrollmentStatus",
    "EnrollmentRecord",
    "EnrollmentCreateResult",
    "StatusChangeResult",
    "EnrollmentDeletionResult",
    "PromotionResult",
    # Grade
    "GradeMarks",
    "GradeRecord",
    "GradeDetail",
]
