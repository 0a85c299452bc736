# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Typed errors for the academic domains.

This module defines the exception hierarchy shared by the enrollment and
grading services:
- AcademicError: Base exception for all academic domain errors
- NotFoundError: Student, course, enrollment or grade missing
- AlreadyEnrolledError / RequestAlreadyPendingError: Enrollment conflicts
- InsufficientCreditCapacityError: Credit-hour capacity exceeded
- InvalidStatusTransitionError: Transition rejected by the state machine
- SemesterLimitError: Promotion past the final semester
- PersistenceFailureError: Underlying store failure

Validation errors are raised before any write. PersistenceFailureError wraps
the store's own exception in ``original_error``.
"""

from typing import Any


class AcademicError(Exception):
    """Base exception for all academic domain errors.

    Attributes:
        message: Human-readable error description.
        details: Dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize academic error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class NotFoundError(AcademicError):
    """Raised when a student, course, enrollment or grade does not exist.

    Attributes:
        entity: Kind of record that was looked up.
        key: Lookup key that matched nothing.
    """

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(
            f"{entity.capitalize()} {key} not found",
            {"entity": entity, "key": key},
        )


class AlreadyEnrolledError(AcademicError):
    """Raised when the student already holds an approved enrollment."""

    def __init__(self, student_id: str, course_code: str):
        super().__init__(
            f"Student {student_id} is already enrolled in {course_code}",
            {"student_id": student_id, "course_code": course_code},
        )


class RequestAlreadyPendingError(AcademicError):
    """Raised when an enrollment request for the pair is already pending."""

    def __init__(self, student_id: str, course_code: str):
        super().__init__(
            f"Enrollment request for {student_id} in {course_code} is already pending",
            {"student_id": student_id, "course_code": course_code},
        )


class InsufficientCreditCapacityError(AcademicError):
    """Raised when a course would exceed the student's credit-hour capacity.

    Attributes:
        required: Credit hours the course costs.
        available: Credit hours left before the student's maximum.
    """

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient credit hours: course requires {required}, "
            f"student has {available} available",
            {"required": required, "available": available},
        )


class InvalidStatusTransitionError(AcademicError):
    """Raised when the requested status is not reachable from the current one.

    Attributes:
        current: Status of the authoritative record.
        requested: Status the caller asked for.
    """

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change enrollment status from {current} to {requested}",
            {"current": current, "requested": requested},
        )


class SemesterLimitError(AcademicError):
    """Raised when promoting a student who is already in the final semester.

    Attributes:
        semester: Student's current semester.
        max_semester: Final semester allowed.
    """

    def __init__(self, semester: int, max_semester: int):
        self.semester = semester
        self.max_semester = max_semester
        super().__init__(
            f"Student is already in the final semester ({max_semester})",
            {"semester": semester, "max_semester": max_semester},
        )


class PersistenceFailureError(AcademicError):
    """Raised when the underlying store fails.

    Attributes:
        original_error: The exception raised by the store, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with the store error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message
