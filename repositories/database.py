# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Core - Async PostgreSQL connection management
# PURPOSE: Own the psycopg3 async pool the readiness probe borrows from
# CREATED: 18 OCT 2026
# ============================================================================
"""
Database Connection Pool

Manages async PostgreSQL connections using psycopg3 and psycopg_pool.
The pool is opened without waiting for connections, so an unreachable
database does not fail here: the readiness gate's PostgresProbe finds
out and retries.

Connection string (first match wins):
1. DATABASE_URL
2. Individual POSTGRES_* components

Usage:
    from repositories.database import DatabasePool

    async with DatabasePool() as pool:
        async with pool.connection() as conn:
            await conn.execute("SELECT 1")
"""

import os
from typing import Optional

from psycopg_pool import AsyncConnectionPool

from core.logging import get_logger

logger = get_logger(__name__)

# Global pool instance
_pool: Optional[AsyncConnectionPool] = None


def get_connection_string() -> str:
    """
    Get database connection string from environment.

    Returns:
        PostgreSQL connection string
    """
    if url := os.environ.get("DATABASE_URL"):
        return url

    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    name = os.environ.get("POSTGRES_DB", "postgres")
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "")
    sslmode = os.environ.get("POSTGRES_SSLMODE", "prefer")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


def mask_conninfo(conninfo: str) -> str:
    """Strip credentials from a connection string for logging."""
    if "@" in conninfo:
        return conninfo.split("@")[-1]
    if "password=" in conninfo:
        head, _, tail = conninfo.partition("password=")
        rest = tail.split(" ", 1)[1] if " " in tail else ""
        return f"{head}password=*** {rest}".strip()
    return conninfo


async def init_pool(
    min_size: int = 1,
    max_size: int = 4,
    connection_string: Optional[str] = None,
) -> AsyncConnectionPool:
    """
    Initialize the global connection pool.

    Args:
        min_size: Minimum connections to maintain
        max_size: Maximum connections allowed
        connection_string: Override connection string (defaults to env)

    Returns:
        AsyncConnectionPool instance
    """
    global _pool

    if _pool is not None:
        logger.warning("Pool already initialized, returning existing pool")
        return _pool

    conninfo = connection_string or get_connection_string()
    logger.info(f"Initializing connection pool: {mask_conninfo(conninfo)}")

    _pool = AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )

    # wait=False: reachability is the readiness gate's job
    await _pool.open(wait=False)
    logger.info(f"Connection pool opened (min={min_size}, max={max_size})")

    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Connection pool closed")


class DatabasePool:
    """
    Context manager for pool lifecycle.

    Usage:
        async with DatabasePool() as pool:
            async with pool.connection() as conn:
                ...
    """

    def __init__(
        self,
        min_size: int = 1,
        max_size: int = 4,
        connection_string: Optional[str] = None,
    ):
        self.min_size = min_size
        self.max_size = max_size
        self.connection_string = connection_string
        self._pool: Optional[AsyncConnectionPool] = None

    async def __aenter__(self) -> AsyncConnectionPool:
        self._pool = await init_pool(
            min_size=self.min_size,
            max_size=self.max_size,
            connection_string=self.connection_string,
        )
        return self._pool

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await close_pool()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "get_connection_string",
    "mask_conninfo",
    "init_pool",
    "close_pool",
    "DatabasePool",
]
