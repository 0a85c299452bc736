# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-student serialization for enrollment writes.

A student's credit-hour balance and the set of enrollment records for each
of their courses are read, checked and written back in separate store
calls. Holding the student's lock across that cycle stops two concurrent
calls from both passing a capacity check or both applying the same
credit-hour adjustment.

The locks are process-local. Deployments that run several worker
processes against one database need the store to serialize as well.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class StudentLockRegistry:
    """Hands out one asyncio.Lock per student id.

    An entry lives only while some caller holds or waits for it, so the
    registry stays as small as the number of students being written.

    Example:
        locks = StudentLockRegistry()
        async with locks.hold("S-001"):
            ...  # read-modify-write for S-001
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, student_id: str) -> AsyncIterator[None]:
        """Hold a student's lock for the duration of the block."""
        lock = self._locks.get(student_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[student_id] = lock
        self._holders[student_id] = self._holders.get(student_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._holders[student_id] - 1
            if remaining:
                self._holders[student_id] = remaining
            else:
                del self._holders[student_id]
                del self._locks[student_id]

    def is_locked(self, student_id: str) -> bool:
        """Check whether a student's lock is currently held."""
        lock = self._locks.get(student_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
