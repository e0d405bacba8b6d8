# ============================================================================
# READINESS PROBES
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Probe implementations
# PURPOSE: Concrete probes for the gate's dependencies
# CREATED: 18 OCT 2026
# ============================================================================
"""
Readiness Probes

- PostgresProbe: SELECT 1 over the host's AsyncConnectionPool
- RedisPingProbe: TCP connect, then raw PING / PONG handshake
"""

from health.checks.database import PostgresProbe
from health.checks.cache import PongReplyBuffer, RedisPingProbe

__all__ = [
    "PostgresProbe",
    "PongReplyBuffer",
    "RedisPingProbe",
]
