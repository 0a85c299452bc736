# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade records.

Only raw marks are persisted. Totals, GPA and letter grades are derived on
every read so they can never go stale against edited marks.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.utils.datetime import utc_now


class GradeMarks(BaseModel):
    """Raw assessment marks for one student in one course.

    Assignment and quiz maxima are matched to scores by position.
    """

    model_config = ConfigDict(from_attributes=True)

    assignments: list[float] = Field(default_factory=list)
    max_assignments: list[float] = Field(default_factory=list)
    quizzes: list[float] = Field(default_factory=list)
    max_quizzes: list[float] = Field(default_factory=list)
    mid: float = Field(default=0.0, ge=0)
    max_mid: float = Field(default=0.0, ge=0)
    final: float = Field(default=0.0, ge=0)
    max_final: float = Field(default=0.0, ge=0)


class GradeRecord(BaseModel):
    """Persisted grade: raw marks keyed by (student_id, course_code)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    course_code: str
    marks: GradeMarks
    created_at: datetime = Field(default_factory=utc_now)


class GradeDetail(BaseModel):
    """Grade with its derived values."""

    student_id: str
    course_code: str
    marks: GradeMarks
    total: float = Field(description="Weighted percentage on a 0-100 scale")
    gpa: float = Field(description="Grade points on a 0.00-4.00 scale")
    letter_grade: str
