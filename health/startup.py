# ============================================================================
# STARTUP GATE RUNNER
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Boot entry for the readiness gate
# PURPOSE: Wire pool, default checks and gate for main.py and the CLI
# CREATED: 18 OCT 2026
# ============================================================================
"""
Startup Gate Runner

run_startup_gate() opens a short-lived pool for the PostgreSQL probe,
evaluates the default checks, closes the pool and returns the
BootDecision. The service opens its own pool once the gate has passed.
"""

from typing import Optional

from core.config import Defaults, get_defaults
from health.diagnostics import DiagnosticsSink
from health.gate import BootDecision, ReadinessGate
from health.registry import build_default_registry
from health.retry import RetryPolicy, SleepFunc
from repositories.database import DatabasePool


async def run_startup_gate(
    defaults: Optional[Defaults] = None,
    connection_string: Optional[str] = None,
    sink: Optional[DiagnosticsSink] = None,
    sleep: Optional[SleepFunc] = None,
) -> BootDecision:
    """
    Run the readiness gate once.

    Raises:
        ConfigurationError: Retry or cache settings are malformed
    """
    defaults = defaults or get_defaults()
    retry_policy = RetryPolicy.from_defaults(defaults.retry)

    async with DatabasePool(connection_string=connection_string) as pool:
        registry = build_default_registry(pool, defaults)
        gate = ReadinessGate(
            registry.get_all(),
            retry_policy=retry_policy,
            sink=sink,
            sleep=sleep,
            concurrent=defaults.probe.concurrent,
        )
        return await gate.run()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "run_startup_gate",
]
