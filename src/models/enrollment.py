# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment records and lifecycle results."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from src.utils.datetime import utc_now


class EnrollmentStatus(str, Enum):
    """Status of a physical enrollment record."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"
    DROPPED = "dropped"
    WITHDRAWN = "withdrawn"


class EnrollmentRecord(BaseModel):
    """One physical enrollment record.

    Several records may share the same (student_id, course_code) pair;
    the authoritative one is chosen by status priority.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_id: str
    course_code: str
    status: EnrollmentStatus
    created_at: datetime = Field(default_factory=utc_now)


class StatusChangeResult(BaseModel):
    """Outcome of a status transition.

    ``warning`` is set when the status write committed but the follow-up
    credit-hour write failed; the student's balance is then stale.
    """

    enrollment: EnrollmentRecord
    previous_status: EnrollmentStatus
    credit_hours_delta: int = 0
    current_credit_hours: int
    warning: str | None = None


class EnrollmentCreateResult(BaseModel):
    """Outcome of creating an enrollment.

    Requests create pending records and never touch credit hours; direct
    enrollments reserve the course's hours on creation.
    """

    enrollment: EnrollmentRecord
    replaced_records: int = 0
    current_credit_hours: int
    warning: str | None = None


class EnrollmentDeletionResult(BaseModel):
    """Outcome of deleting every record for a pair."""

    student_id: str
    course_code: str
    deleted_records: int
    released_credit_hours: int = 0
    current_credit_hours: int | None = None
    warning: str | None = None


class PromotionResult(BaseModel):
    """Outcome of promoting a student to the next semester."""

    student_id: str
    previous_semester: int
    semester: int
    completed_enrollments: int
    current_credit_hours: int
    warning: str | None = None
