# ============================================================================
# DEPENDENCY REGISTRY
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Dependency check declaration
# PURPOSE: Ordered registration of the dependencies the gate verifies
# CREATED: 18 OCT 2026
# ============================================================================
"""
Dependency Registry

Holds DependencyChecks in declaration order; that order is the gate's
evaluation and report order.

Usage:
    # Default checks (PostgreSQL, then Redis)
    registry = build_default_registry(pool)

    # Additional dependency
    registry.register(DependencyCheck(name="search", probe=SearchProbe()))

    gate = ReadinessGate(registry.get_all())
"""

from typing import Dict, List, Optional

from psycopg_pool import AsyncConnectionPool

from core.config import Defaults, get_defaults
from core.logging import get_logger
from health.checks.cache import RedisPingProbe
from health.checks.database import PostgresProbe
from health.core import Applicability, DependencyCheck
from health.policy import resolve_cache_applicability

logger = get_logger(__name__)


class DependencyRegistry:
    """Ordered collection of dependency checks, unique by name."""

    def __init__(self):
        self._checks: Dict[str, DependencyCheck] = {}

    def register(self, check: DependencyCheck) -> None:
        """
        Register a dependency check.

        Re-registering a name replaces the check but keeps its original
        position.
        """
        if check.name in self._checks:
            logger.warning(f"Overwriting dependency check: {check.name}")

        self._checks[check.name] = check
        logger.debug(
            f"Registered dependency check: {check.name} "
            f"(applicability={check.applicability.value})"
        )

    def unregister(self, name: str) -> bool:
        """
        Remove a check by name.

        Returns:
            True if check was removed
        """
        if name in self._checks:
            del self._checks[name]
            return True
        return False

    def get(self, name: str) -> Optional[DependencyCheck]:
        return self._checks.get(name)

    def get_all(self) -> List[DependencyCheck]:
        """All checks in declaration order."""
        return list(self._checks.values())

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks


def build_default_registry(
    pool: AsyncConnectionPool,
    defaults: Optional[Defaults] = None,
) -> DependencyRegistry:
    """
    PostgreSQL (always required) followed by Redis (conditionally required).

    Redis applicability is resolved here, once, from the cache config.
    """
    defaults = defaults or get_defaults()
    timeout = defaults.probe.timeout_seconds
    cache = defaults.cache
    cache_applicability = resolve_cache_applicability(cache)
    logger.debug(
        f"Redis applicability: {cache_applicability.value} "
        f"(target={cache.host}:{cache.port}, explicit={cache.explicitly_configured})"
    )

    registry = DependencyRegistry()
    registry.register(DependencyCheck(
        name=PostgresProbe.name,
        probe=PostgresProbe(pool, timeout_seconds=timeout),
        applicability=Applicability.REQUIRED,
    ))
    registry.register(DependencyCheck(
        name=RedisPingProbe.name,
        probe=RedisPingProbe.from_config(cache, timeout_seconds=timeout),
        applicability=cache_applicability,
        skip_reason="not configured (REDIS_URL/REDIS_HOST not set)",
    ))
    return registry


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DependencyRegistry",
    "build_default_registry",
]
