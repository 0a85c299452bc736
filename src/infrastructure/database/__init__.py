# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""PostgreSQL-backed store for academic records.

Example:
    from src.infrastructure.database import (
        AcademicRepository,
        get_session,
        init_database,
    )

    await init_database(settings)
    async with get_session() as session:
        repository = AcademicRepository(session)
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    close_database,
    create_schema,
    get_session,
    init_database,
)
from src.infrastructure.database.repository import AcademicRepository

__all__ = [
    "DatabaseError",
    "close_database",
    "create_schema",
    "get_session",
    "init_database",
    "AcademicRepository",
]
