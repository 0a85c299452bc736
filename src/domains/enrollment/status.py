# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment status rules.

Two explicit tables drive the lifecycle:
- STATUS_PRIORITY ranks statuses for picking the authoritative record
  among duplicates (lower rank wins).
- ALLOWED_TRANSITIONS lists the statuses reachable from each status.

Priority is kept as its own lookup so it does not depend on the order
members are declared in EnrollmentStatus.
"""

from collections.abc import Iterable

from src.models.enrollment import EnrollmentRecord, EnrollmentStatus

STATUS_PRIORITY: dict[EnrollmentStatus, int] = {
    EnrollmentStatus.APPROVED: 0,
    EnrollmentStatus.PENDING: 1,
    EnrollmentStatus.REJECTED: 2,
    EnrollmentStatus.COMPLETED: 3,
    # Optional terminal statuses rank with completed
    EnrollmentStatus.DROPPED: 3,
    EnrollmentStatus.WITHDRAWN: 3,
}

ALLOWED_TRANSITIONS: dict[EnrollmentStatus, frozenset[EnrollmentStatus]] = {
    EnrollmentStatus.PENDING: frozenset(
        {EnrollmentStatus.APPROVED, EnrollmentStatus.REJECTED}
    ),
    EnrollmentStatus.APPROVED: frozenset(
        {
            EnrollmentStatus.COMPLETED,
            EnrollmentStatus.DROPPED,
            EnrollmentStatus.WITHDRAWN,
        }
    ),
    EnrollmentStatus.REJECTED: frozenset(),
    EnrollmentStatus.COMPLETED: frozenset(),
    EnrollmentStatus.DROPPED: frozenset(),
    EnrollmentStatus.WITHDRAWN: frozenset(),
}

TERMINAL_STATUSES: frozenset[EnrollmentStatus] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def status_priority(status: EnrollmentStatus) -> int:
    """Get the conflict-resolution rank of a status (0 is highest)."""
    return STATUS_PRIORITY[status]


def sort_by_priority(records: Iterable[EnrollmentRecord]) -> list[EnrollmentRecord]:
    """Sort records from most to least authoritative.

    The sort is stable, so records of equal priority keep their input order.
    """
    return sorted(records, key=lambda record: status_priority(record.status))


def select_authoritative(
    records: Iterable[EnrollmentRecord],
) -> EnrollmentRecord | None:
    """Pick the authoritative record among duplicates for one pair.

    Returns:
        The highest-priority record, or None if there are no records.
    """
    ordered = sort_by_priority(records)
    return ordered[0] if ordered else None


def is_terminal(status: EnrollmentStatus) -> bool:
    """Check whether no further transition is allowed from a status."""
    return status in TERMINAL_STATUSES


def is_transition_allowed(
    current: EnrollmentStatus,
    requested: EnrollmentStatus,
) -> bool:
    """Check whether a status change is permitted.

    Re-applying the current status is accepted as an idempotent no-op.
    """
    if current == requested:
        return True
    return requested in ALLOWED_TRANSITIONS[current]
