# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides the enrollment lifecycle including:
- Enrollment requests, approvals and other status transitions
- Credit-hour reservation and release
- Deletion, bulk completion and semester promotion
- Duplicate record reconciliation
"""

from src.domains.enrollment.locks import StudentLockRegistry
from src.domains.enrollment.reconciliation import (
    EnrollmentReconciler,
    find_duplicate_groups,
)
from src.domains.enrollment.repository import EnrollmentRepository
from src.domains.enrollment.service import EnrollmentService
from src.domains.enrollment.status import (
    ALLOWED_TRANSITIONS,
    STATUS_PRIORITY,
    is_transition_allowed,
    select_authoritative,
    sort_by_priority,
)

__all__ = [
    "EnrollmentService",
    "EnrollmentReconciler",
    "EnrollmentRepository",
    "StudentLockRegistry",
    "ALLOWED_TRANSITIONS",
    "STATUS_PRIORITY",
    "is_transition_allowed",
    "select_authoritative",
    "sort_by_priority",
    "find_duplicate_groups",
]
