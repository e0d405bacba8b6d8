# ============================================================================
# APPLICABILITY POLICY
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Optional dependency resolution
# PURPOSE: Decide once whether the optional Redis dependency is probed
# CREATED: 18 OCT 2026
# ============================================================================
"""
Applicability Policy

The cache is the only optional dependency. Decision table:

    REDIS_URL/REDIS_HOST set          -> required
    neither set, target localhost:6379 -> defaults_detected (probe anyway)
    neither set, any other target      -> skip

defaults_detected covers docker-compose style setups where Redis listens
on the stock address without anyone configuring it. Whether production
should keep probing in that case is a policy choice, not mechanism, and
lives only here.
"""

from core.config import CacheDefaults
from health.core import Applicability


def resolve_cache_applicability(cache: CacheDefaults) -> Applicability:
    """Three-state decision for the Redis check."""
    if cache.explicitly_configured:
        return Applicability.REQUIRED
    if cache.is_default_target:
        return Applicability.DEFAULTS_DETECTED
    return Applicability.SKIP


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "resolve_cache_applicability",
]
