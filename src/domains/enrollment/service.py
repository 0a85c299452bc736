# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing the enrollment lifecycle.

This module provides the EnrollmentService class for:
- Enrollment requests and direct (administrator) enrollment
- Status transitions with credit-hour reservation and release
- Deleting every record for a (student, course) pair
- Bulk completion and semester promotion

A student's ``current_credit_hours`` is only ever written here. Hours are
reserved when a record enters ``approved`` and released when it leaves it.

Writes happen in two steps: the enrollment record first, then the
student's balance. When the second step fails the first is kept, the
inconsistency is logged and the result carries a ``warning``.
"""

from __future__ import annotations

import logging

from src.core.config import EnrollmentSettings, get_settings
from src.domains.enrollment.locks import StudentLockRegistry
from src.domains.enrollment.repository import EnrollmentRepository
from src.domains.enrollment.status import (
    is_transition_allowed,
    select_authoritative,
    sort_by_priority,
)
from src.domains.errors import (
    AlreadyEnrolledError,
    InsufficientCreditCapacityError,
    InvalidStatusTransitionError,
    NotFoundError,
    PersistenceFailureError,
    RequestAlreadyPendingError,
    SemesterLimitError,
)
from src.models.academic import CourseRecord, StudentRecord
from src.models.enrollment import (
    EnrollmentCreateResult,
    EnrollmentDeletionResult,
    EnrollmentRecord,
    EnrollmentStatus,
    PromotionResult,
    StatusChangeResult,
)

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for the enrollment lifecycle.

    Every operation that touches a student's enrollments or balance runs
    under that student's lock.

    Attributes:
        repository: Store for students, courses and enrollments.
        locks: Per-student lock registry.
        settings: Enrollment settings.
    """

    def __init__(
        self,
        repository: EnrollmentRepository,
        locks: StudentLockRegistry | None = None,
        settings: EnrollmentSettings | None = None,
    ) -> None:
        """Initialize enrollment service.

        Args:
            repository: Store implementing EnrollmentRepository.
            locks: Lock registry shared with other services touching the
                same students. A private registry is created if omitted.
            settings: Enrollment settings. Loaded from the environment if
                omitted.
        """
        self.repository = repository
        self.locks = locks if locks is not None else StudentLockRegistry()
        self.settings = settings or get_settings().enrollment

    # =========================================================================
    # Creation
    # =========================================================================

    async def request_enrollment(
        self,
        student_id: str,
        course_code: str,
    ) -> EnrollmentCreateResult:
        """Request enrollment of a student in a course.

        A terminal record (rejected, completed, dropped, withdrawn) for the
        pair does not block a new request; it is deleted and replaced.
        No credit hours are reserved until the request is approved.

        Args:
            student_id: Student identity key.
            course_code: Course code.

        Returns:
            The new pending enrollment.

        Raises:
            NotFoundError: If the student or course does not exist.
            AlreadyEnrolledError: If an approved record exists.
            RequestAlreadyPendingError: If a pending record exists.
            InsufficientCreditCapacityError: If the course does not fit.
            PersistenceFailureError: If the store fails.
        """
        async with self.locks.hold(student_id):
            return await self._create(student_id, course_code, EnrollmentStatus.PENDING)

    async def enroll_directly(
        self,
        student_id: str,
        course_code: str,
    ) -> EnrollmentCreateResult:
        """Enroll a student as approved, skipping the request step.

        Same checks as request_enrollment. The course's credit hours are
        reserved right away.

        Raises:
            NotFoundError: If the student or course does not exist.
            AlreadyEnrolledError: If an approved record exists.
            RequestAlreadyPendingError: If a pending record exists.
            InsufficientCreditCapacityError: If the course does not fit.
            PersistenceFailureError: If the enrollment write fails.
        """
        async with self.locks.hold(student_id):
            return await self._create(student_id, course_code, EnrollmentStatus.APPROVED)

    async def _create(
        self,
        student_id: str,
        course_code: str,
        status: EnrollmentStatus,
    ) -> EnrollmentCreateResult:
        student = await self._get_student(student_id)
        course = await self._get_course(course_code)

        records = await self.repository.find_enrollments(student_id, course_code)
        existing = select_authoritative(records)
        if existing is not None:
            if existing.status == EnrollmentStatus.APPROVED:
                logger.info(
                    "Enrollment rejected, already enrolled: student=%s, course=%s",
                    student_id,
                    course_code,
                )
                raise AlreadyEnrolledError(student_id, course_code)
            if existing.status == EnrollmentStatus.PENDING:
                logger.info(
                    "Enrollment rejected, request pending: student=%s, course=%s",
                    student_id,
                    course_code,
                )
                raise RequestAlreadyPendingError(student_id, course_code)

        self._check_capacity(student, course)

        # Only terminal records remain at this point
        for stale in records:
            await self.repository.delete_enrollment(stale.id)

        enrollment = await self.repository.create_enrollment(student_id, course_code, status)

        credit_hours = student.current_credit_hours
        warning = None
        if status == EnrollmentStatus.APPROVED:
            credit_hours, warning = await self._write_credit_hours(
                student,
                student.current_credit_hours + course.credit_hours,
                enrollment.id,
            )

        logger.info(
            "Created enrollment: student=%s, course=%s, status=%s, replaced=%d",
            student_id,
            course_code,
            status.value,
            len(records),
        )

        return EnrollmentCreateResult(
            enrollment=enrollment,
            replaced_records=len(records),
            current_credit_hours=credit_hours,
            warning=warning,
        )

    # =========================================================================
    # Transitions
    # =========================================================================

    async def set_status(
        self,
        student_id: str,
        course_code: str,
        new_status: EnrollmentStatus | str,
    ) -> StatusChangeResult:
        """Move the authoritative enrollment for a pair to a new status.

        Allowed: pending -> approved/rejected, approved -> completed/dropped/
        withdrawn, and re-applying the current status. Entering approved
        reserves the course's credit hours; leaving approved releases them
        (floored at zero). Leaving approved moves every approved duplicate
        for the pair as well, and the hours are released once. Any other
        change leaves the balance alone.

        Args:
            student_id: Student identity key.
            course_code: Course code.
            new_status: Target status.

        Returns:
            Transition result with the student's resulting balance.

        Raises:
            NotFoundError: If no enrollment, student or course exists.
            InvalidStatusTransitionError: If the transition is not allowed.
            InsufficientCreditCapacityError: If approval does not fit.
            PersistenceFailureError: If the status write fails.
        """
        async with self.locks.hold(student_id):
            records = await self.repository.find_enrollments(student_id, course_code)
            current = select_authoritative(records)
            if current is None:
                raise NotFoundError("enrollment", f"{student_id}/{course_code}")

            previous = current.status
            try:
                requested = EnrollmentStatus(new_status)
            except ValueError:
                raise InvalidStatusTransitionError(previous.value, str(new_status)) from None

            if not is_transition_allowed(previous, requested):
                logger.info(
                    "Invalid status transition: student=%s, course=%s, %s -> %s",
                    student_id,
                    course_code,
                    previous.value,
                    requested.value,
                )
                raise InvalidStatusTransitionError(previous.value, requested.value)

            student = await self._get_student(student_id)

            entering = (
                requested == EnrollmentStatus.APPROVED
                and previous != EnrollmentStatus.APPROVED
            )
            leaving = (
                previous == EnrollmentStatus.APPROVED
                and requested != EnrollmentStatus.APPROVED
            )

            course: CourseRecord | None = None
            if entering or leaving:
                course = await self._get_course(course_code)
            if entering and course is not None:
                self._check_capacity(student, course)

            updated = await self.repository.update_enrollment_status(current.id, requested)
            if leaving:
                # Approved duplicates leave with it; the hours are released once
                duplicates = [
                    r
                    for r in records
                    if r.id != current.id and r.status == EnrollmentStatus.APPROVED
                ]
                for duplicate in duplicates:
                    await self.repository.update_enrollment_status(duplicate.id, requested)

            credit_hours = student.current_credit_hours
            warning = None
            if course is not None and entering:
                credit_hours, warning = await self._write_credit_hours(
                    student, student.current_credit_hours + course.credit_hours, updated.id
                )
            elif course is not None and leaving:
                credit_hours, warning = await self._write_credit_hours(
                    student, max(0, student.current_credit_hours - course.credit_hours), updated.id
                )

            logger.info(
                "Changed enrollment status: student=%s, course=%s, %s -> %s, credit_hours=%d",
                student_id,
                course_code,
                previous.value,
                requested.value,
                credit_hours,
            )

            return StatusChangeResult(
                enrollment=updated,
                previous_status=previous,
                credit_hours_delta=credit_hours - student.current_credit_hours,
                current_credit_hours=credit_hours,
                warning=warning,
            )

    async def approve(self, student_id: str, course_code: str) -> StatusChangeResult:
        """Approve an enrollment, reserving its credit hours."""
        return await self.set_status(student_id, course_code, EnrollmentStatus.APPROVED)

    async def reject(self, student_id: str, course_code: str) -> StatusChangeResult:
        """Reject a pending enrollment request."""
        return await self.set_status(student_id, course_code, EnrollmentStatus.REJECTED)

    async def complete(self, student_id: str, course_code: str) -> StatusChangeResult:
        """Mark an approved enrollment completed, releasing its credit hours."""
        return await self.set_status(student_id, course_code, EnrollmentStatus.COMPLETED)

    async def drop(self, student_id: str, course_code: str) -> StatusChangeResult:
        """Drop an approved enrollment, releasing its credit hours."""
        return await self.set_status(student_id, course_code, EnrollmentStatus.DROPPED)

    async def withdraw(self, student_id: str, course_code: str) -> StatusChangeResult:
        """Withdraw from an approved enrollment, releasing its credit hours."""
        return await self.set_status(student_id, course_code, EnrollmentStatus.WITHDRAWN)

    # =========================================================================
    # Deletion
    # =========================================================================

    async def delete_enrollment(
        self,
        student_id: str,
        course_code: str,
    ) -> EnrollmentDeletionResult:
        """Delete every physical record for a (student, course) pair.

        If any of them was approved the course's credit hours are released
        once, however many approved duplicates there were.

        Args:
            student_id: Student identity key.
            course_code: Course code.

        Returns:
            Deletion result with the number of records removed.

        Raises:
            NotFoundError: If no record exists for the pair, or an approved
                record exists but its student or course is missing.
            PersistenceFailureError: If a record delete fails.
        """
        async with self.locks.hold(student_id):
            records = await self.repository.find_enrollments(student_id, course_code)
            if not records:
                raise NotFoundError("enrollment", f"{student_id}/{course_code}")

            had_approved = any(r.status == EnrollmentStatus.APPROVED for r in records)

            student: StudentRecord | None
            course: CourseRecord | None = None
            if had_approved:
                student = await self._get_student(student_id)
                course = await self._get_course(course_code)
            else:
                student = await self.repository.get_student(student_id)

            for record in records:
                await self.repository.delete_enrollment(record.id)

            credit_hours = student.current_credit_hours if student else None
            released = 0
            warning = None
            if student is not None and course is not None:
                target = max(0, student.current_credit_hours - course.credit_hours)
                credit_hours, warning = await self._write_credit_hours(
                    student, target, sort_by_priority(records)[0].id
                )
                released = student.current_credit_hours - credit_hours

            logger.info(
                "Deleted enrollment: student=%s, course=%s, records=%d, released=%d",
                student_id,
                course_code,
                len(records),
                released,
            )

            return EnrollmentDeletionResult(
                student_id=student_id,
                course_code=course_code,
                deleted_records=len(records),
                released_credit_hours=released,
                current_credit_hours=credit_hours,
                warning=warning,
            )

    # =========================================================================
    # Bulk operations
    # =========================================================================

    async def complete_all_approved(self, student_id: str) -> int:
        """Mark every approved enrollment of a student completed.

        Credit hours are not touched; promote_semester resets them.

        Returns:
            Number of enrollments completed.

        Raises:
            NotFoundError: If the student does not exist.
            PersistenceFailureError: If a status write fails.
        """
        async with self.locks.hold(student_id):
            await self._get_student(student_id)
            return await self._complete_all_approved(student_id)

    async def promote_semester(self, student_id: str) -> PromotionResult:
        """Move a student to the next semester.

        Completes all approved enrollments, advances the semester and,
        when ``reset_credit_hours_on_promotion`` is set, resets the
        credit-hour balance to zero. A failed reset is reported in the
        result's ``warning``.

        Raises:
            NotFoundError: If the student does not exist.
            SemesterLimitError: If the student is in the final semester.
            PersistenceFailureError: If a status or semester write fails.
        """
        async with self.locks.hold(student_id):
            student = await self._get_student(student_id)

            next_semester = student.semester + 1
            if next_semester > self.settings.max_semester:
                raise SemesterLimitError(student.semester, self.settings.max_semester)

            completed = await self._complete_all_approved(student_id)
            await self.repository.update_student_semester(student_id, next_semester)

            credit_hours = student.current_credit_hours
            warning = None
            if self.settings.reset_credit_hours_on_promotion:
                credit_hours, warning = await self._write_credit_hours(student, 0)

            logger.info(
                "Promoted student: student=%s, semester=%d -> %d, completed=%d",
                student_id,
                student.semester,
                next_semester,
                completed,
            )

            return PromotionResult(
                student_id=student_id,
                previous_semester=student.semester,
                semester=next_semester,
                completed_enrollments=completed,
                current_credit_hours=credit_hours,
                warning=warning,
            )

    async def _complete_all_approved(self, student_id: str) -> int:
        approved = await self.repository.list_enrollments(
            student_id=student_id,
            status=EnrollmentStatus.APPROVED,
        )
        for enrollment in approved:
            await self.repository.update_enrollment_status(
                enrollment.id, EnrollmentStatus.COMPLETED
            )

        logger.info(
            "Completed approved enrollments: student=%s, count=%d",
            student_id,
            len(approved),
        )
        return len(approved)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_enrollment(self, student_id: str, course_code: str) -> EnrollmentRecord:
        """Get the authoritative enrollment for a pair.

        Raises:
            NotFoundError: If no record exists for the pair.
        """
        records = await self.repository.find_enrollments(student_id, course_code)
        current = select_authoritative(records)
        if current is None:
            raise NotFoundError("enrollment", f"{student_id}/{course_code}")
        return current

    async def list_student_enrollments(self, student_id: str) -> list[EnrollmentRecord]:
        """List a student's enrollments, one authoritative record per course."""
        records = await self.repository.list_enrollments(student_id=student_id)
        return _authoritative_per_pair(records)

    async def list_course_enrollments(
        self,
        course_code: str,
        status: EnrollmentStatus | None = None,
    ) -> list[EnrollmentRecord]:
        """List a course's enrollments, one authoritative record per student.

        The status filter applies after duplicates are collapsed.
        """
        records = await self.repository.list_enrollments(course_code=course_code)
        current = _authoritative_per_pair(records)
        if status is not None:
            current = [r for r in current if r.status == status]
        return current

    async def list_pending_enrollments(self) -> list[EnrollmentRecord]:
        """List every pending enrollment request."""
        return await self.repository.list_enrollments(status=EnrollmentStatus.PENDING)

    async def count_course_enrollments(self, course_code: str) -> int:
        """Count students holding an approved enrollment in a course."""
        approved = await self.list_course_enrollments(
            course_code, status=EnrollmentStatus.APPROVED
        )
        return len(approved)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_student(self, student_id: str) -> StudentRecord:
        """Get student by identity key.

        Raises:
            NotFoundError: If not found.
        """
        student = await self.repository.get_student(student_id)
        if student is None:
            raise NotFoundError("student", student_id)
        return student

    async def _get_course(self, course_code: str) -> CourseRecord:
        """Get course by code.

        Raises:
            NotFoundError: If not found.
        """
        course = await self.repository.get_course(course_code)
        if course is None:
            raise NotFoundError("course", course_code)
        return course

    def _check_capacity(self, student: StudentRecord, course: CourseRecord) -> None:
        """Ensure the course fits in the student's remaining capacity.

        Raises:
            InsufficientCreditCapacityError: If it does not.
        """
        available = student.max_credit_hours - student.current_credit_hours
        if course.credit_hours > available:
            logger.info(
                "Insufficient credit capacity: student=%s, course=%s, required=%d, available=%d",
                student.student_id,
                course.code,
                course.credit_hours,
                available,
            )
            raise InsufficientCreditCapacityError(course.credit_hours, available)

    async def _write_credit_hours(
        self,
        student: StudentRecord,
        value: int,
        enrollment_id: str | None = None,
    ) -> tuple[int, str | None]:
        """Write a student's new balance after the primary write.

        A missing student row is reported the same way as a store failure.

        Returns:
            Tuple of (balance now on record, warning or None). On failure
            the balance on record is the old one.
        """
        try:
            await self.repository.update_student_credit_hours(student.student_id, value)
        except (PersistenceFailureError, NotFoundError) as e:
            logger.warning(
                "Credit hours inconsistent: student=%s, enrollment=%s, recorded=%d, intended=%d, error=%s",
                student.student_id,
                enrollment_id or "-",
                student.current_credit_hours,
                value,
                e,
            )
            return student.current_credit_hours, (
                f"Changes saved but credit hours were not updated "
                f"(recorded {student.current_credit_hours}, intended {value})"
            )
        return value, None


def _authoritative_per_pair(records: list[EnrollmentRecord]) -> list[EnrollmentRecord]:
    """Collapse duplicates to one authoritative record per pair.

    Pairs keep the order in which they first appear.
    """
    groups: dict[tuple[str, str], list[EnrollmentRecord]] = {}
    for record in records:
        groups.setdefault((record.student_id, record.course_code), []).append(record)
    return [sort_by_priority(group)[0] for group in groups.values()]
