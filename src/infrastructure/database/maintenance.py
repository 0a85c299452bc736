# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database maintenance tasks.

This module provides one-off jobs run against the academic records
database:
- Duplicate enrollment reconciliation

Missing tables are created first.

Run with: python -m src.infrastructure.database.maintenance
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.enrollment import EnrollmentReconciler, StudentLockRegistry
from src.infrastructure.database.repository import AcademicRepository
from src.utils.logging import get_logger

logger = get_logger(__name__)


async def reconcile_enrollments(
    session: AsyncSession,
    locks: StudentLockRegistry | None = None,
) -> int:
    """Collapse duplicate enrollment records.

    Args:
        session: Database session.
        locks: Lock registry shared with running enrollment services.

    Returns:
        Number of records deleted.
    """
    reconciler = EnrollmentReconciler(AcademicRepository(session), locks=locks)
    deleted = await reconciler.reconcile_duplicates()
    logger.info("enrollments_reconciled", deleted=deleted)
    return deleted


if __name__ == "__main__":
    from src.core.config import get_settings
    from src.infrastructure.database.connection import (
        close_database,
        create_schema,
        get_session,
        init_database,
    )
    from src.utils.logging import setup_logging

    async def main():
        settings = get_settings()
        setup_logging(settings)
        await init_database(settings)
        try:
            await create_schema()
            async with get_session() as session:
                await reconcile_enrollments(session)
        finally:
            await close_database()

    asyncio.run(main())
