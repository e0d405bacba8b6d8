# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Core - Database access layer
# PURPOSE: Connection pool lifecycle for the service and the gate
# CREATED: 18 OCT 2026
# ============================================================================
"""
Repositories Module

Uses psycopg3 async with connection pooling.

Usage:
    from repositories import DatabasePool

    async with DatabasePool() as pool:
        ...
"""

from .database import DatabasePool, init_pool, close_pool, get_connection_string

__all__ = [
    "DatabasePool",
    "init_pool",
    "close_pool",
    "get_connection_string",
]
