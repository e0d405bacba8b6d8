# ============================================================================
# DATABASE READINESS PROBE
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - PostgreSQL round-trip check
# PURPOSE: Verify the host's connection pool can run a query
# CREATED: 18 OCT 2026
# ============================================================================
"""
Database Readiness Probe

Runs SELECT 1 over the AsyncConnectionPool the host process already owns.
Auth failures, unreachable hosts and pool timeouts all surface as
exceptions from check(), which the Probe base turns into a failed outcome.
"""

import asyncio
from typing import Optional

from psycopg_pool import AsyncConnectionPool

from core.errors import ProbeError
from core.logging import get_logger
from health.core import Probe

logger = get_logger(__name__)


class PostgresProbe(Probe):
    """
    PostgreSQL connectivity probe.

    Borrows one connection per attempt (pool.connection) and returns it
    before attempt() completes. The pool itself is never closed here.
    """

    name = "PostgreSQL"
    HEALTH_QUERY = "SELECT 1 AS health_check"

    def __init__(
        self,
        pool: AsyncConnectionPool,
        timeout_seconds: Optional[float] = None,
    ):
        super().__init__(timeout_seconds)
        self.pool = pool

    async def check(self) -> None:
        async with self.pool.connection(timeout=self.timeout_seconds) as conn:
            cursor = await asyncio.wait_for(
                conn.execute(self.HEALTH_QUERY),
                timeout=self.timeout_seconds,
            )
            row = await cursor.fetchone()

        if row is None or row[0] != 1:
            raise ProbeError(
                f"PostgreSQL query returned unexpected result: {row!r}",
                dependency=self.name,
            )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "PostgresProbe",
]
