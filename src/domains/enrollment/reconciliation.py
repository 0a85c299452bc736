# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Duplicate enrollment reconciliation.

Collapses every (student, course) pair that has more than one physical
enrollment record down to its highest-priority record. Credit-hour
balances are left as they are.

Each duplicate group is re-read under the student's lock before anything
is deleted, so the sweep can run next to lifecycle calls and can be run
again at any time; a second run finds nothing to delete.

Example:
    reconciler = EnrollmentReconciler(repository, locks=locks)
    deleted = await reconciler.reconcile_duplicates()
"""

import logging

from src.domains.enrollment.locks import StudentLockRegistry
from src.domains.enrollment.repository import EnrollmentRepository
from src.domains.enrollment.status import sort_by_priority
from src.models.enrollment import EnrollmentRecord

logger = logging.getLogger(__name__)


class EnrollmentReconciler:
    """Maintenance sweep that removes duplicate enrollment records.

    Attributes:
        repository: Store for enrollment records.
        locks: Per-student lock registry shared with EnrollmentService.
    """

    def __init__(
        self,
        repository: EnrollmentRepository,
        locks: StudentLockRegistry | None = None,
    ) -> None:
        self.repository = repository
        self.locks = locks if locks is not None else StudentLockRegistry()

    async def reconcile_duplicates(self) -> int:
        """Keep one record per (student, course) pair.

        Within a pair the record kept is the first by priority
        approved > pending > rejected > completed; records of equal
        priority keep their scan order.

        Returns:
            Number of records deleted.

        Raises:
            PersistenceFailureError: If the store fails. Groups already
                collapsed stay collapsed.
        """
        records = await self.repository.list_all_enrollments()
        groups = find_duplicate_groups(records)

        logger.info(
            "Starting enrollment reconciliation: records=%d, duplicate_groups=%d",
            len(records),
            len(groups),
        )

        deleted = 0
        for student_id, course_code in groups:
            async with self.locks.hold(student_id):
                deleted += await self._collapse(student_id, course_code)

        logger.info("Enrollment reconciliation complete: deleted=%d", deleted)
        return deleted

    async def _collapse(self, student_id: str, course_code: str) -> int:
        records = await self.repository.find_enrollments(student_id, course_code)
        if len(records) < 2:
            return 0

        ordered = sort_by_priority(records)
        keep, extras = ordered[0], ordered[1:]

        logger.info(
            "Keeping enrollment %s (%s) for student=%s, course=%s",
            keep.id,
            keep.status.value,
            student_id,
            course_code,
        )
        for record in extras:
            logger.info(
                "Deleting duplicate enrollment %s (%s) for student=%s, course=%s",
                record.id,
                record.status.value,
                student_id,
                course_code,
            )
            await self.repository.delete_enrollment(record.id)

        return len(extras)


def find_duplicate_groups(
    records: list[EnrollmentRecord],
) -> list[tuple[str, str]]:
    """Find the (student_id, course_code) pairs that have duplicates.

    Pairs are returned in the order they first appear.
    """
    counts: dict[tuple[str, str], int] = {}
    for record in records:
        key = (record.student_id, record.course_code)
        counts[key] = counts.get(key, 0) + 1
    return [key for key, count in counts.items() if count > 1]
