# ============================================================================
# READINESS GATE MODULE
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Startup dependency verification
# PURPOSE: Block boot until PostgreSQL (and Redis, if configured) answer
# CREATED: 18 OCT 2026
# ============================================================================
"""
Readiness Gate Module

Boot-time barrier that confirms external dependencies are reachable and
responsive before the service binds its listening socket.

Architecture:
- Probe: one liveness attempt against one dependency (never raises)
- RetryController: bounded attempts with exponential backoff
- Applicability: required | defaults_detected | skip, decided once
- ReadinessGate: evaluates all checks, writes diagnostics, returns a
  BootDecision (the caller exits on abort)

Usage:
    from health import run_startup_gate

    decision = asyncio.run(run_startup_gate())
    if decision.should_abort:
        sys.exit(decision.exit_code)
"""

from health.core import (
    Applicability,
    DependencyCheck,
    OutcomeStatus,
    Probe,
    ProbeOutcome,
    ReadinessReport,
)
from health.retry import RetryController, RetryPolicy
from health.policy import resolve_cache_applicability
from health.gate import BootDecision, ReadinessGate, EXIT_OK, EXIT_NOT_READY
from health.registry import DependencyRegistry, build_default_registry
from health.startup import run_startup_gate

__all__ = [
    # Core types
    "Applicability",
    "DependencyCheck",
    "OutcomeStatus",
    "Probe",
    "ProbeOutcome",
    "ReadinessReport",
    # Retry
    "RetryController",
    "RetryPolicy",
    # Policy
    "resolve_cache_applicability",
    # Gate
    "BootDecision",
    "ReadinessGate",
    "EXIT_OK",
    "EXIT_NOT_READY",
    # Registry
    "DependencyRegistry",
    "build_default_registry",
    # Entry
    "run_startup_gate",
]
