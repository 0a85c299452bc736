# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the academic records database."""

from src.infrastructure.database.models.academic import Course, Enrollment, Grade, Student
from src.infrastructure.database.models.base import Base, TimestampMixin, UUIDMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "Student",
    "Course",
    "Enrollment",
    "Grade",
]
