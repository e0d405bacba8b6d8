# ============================================================================
# READINESS GATE
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Boot-time dependency barrier
# PURPOSE: Evaluate all dependency checks and decide proceed / abort
# CREATED: 18 OCT 2026
# ============================================================================
"""
Readiness Gate

Runs every declared DependencyCheck in order:

1. Skip-applicability checks are recorded as skipped (never a failure)
2. Everything else runs through its RetryController to completion
3. overall_ready = every non-skipped outcome succeeded

The gate never exits the process. decide() writes the diagnostics and
returns a BootDecision; the top-level caller exits with its exit_code.

Checks run sequentially by default, so the worst-case boot delay is the
sum of all retry budgets. concurrent=True runs them together and still
reports them in declaration order.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import List, Optional

from core.logging import get_logger, log_checkpoint
from health.core import DependencyCheck, ProbeOutcome, ReadinessReport
from health.diagnostics import DiagnosticsSink, format_failure_block
from health.retry import RetryController, RetryPolicy, SleepFunc

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_READY = 1


@dataclass(frozen=True)
class BootDecision:
    """What the top-level caller should do after the gate."""
    proceed: bool
    exit_code: int
    report: Optional[ReadinessReport] = None

    @property
    def should_abort(self) -> bool:
        return not self.proceed


class ReadinessGate:
    """
    Boot-time readiness orchestrator.

    Args:
        checks: Dependencies in evaluation/report order
        retry_policy: Default policy for checks without their own
        sink: Diagnostics sink (defaults to this module's logger)
        sleep: Delay function handed to every RetryController
        concurrent: Evaluate checks concurrently
    """

    def __init__(
        self,
        checks: List[DependencyCheck],
        retry_policy: Optional[RetryPolicy] = None,
        sink: Optional[DiagnosticsSink] = None,
        sleep: Optional[SleepFunc] = None,
        concurrent: bool = False,
    ):
        self.checks = list(checks)
        self.retry_policy = retry_policy or RetryPolicy.from_defaults()
        self.sink = sink or logger
        self._sleep = sleep
        self.concurrent = concurrent

    def _controller_for(self, check: DependencyCheck) -> RetryController:
        return RetryController(check.retry_policy or self.retry_policy, sleep=self._sleep)

    async def _evaluate_one(self, check: DependencyCheck) -> ProbeOutcome:
        if not check.applicability.should_probe:
            self.sink.info(f"⚠ {check.name} {check.skip_reason}, skipping health check")
            return ProbeOutcome.skip(check.name)

        return await self._controller_for(check).run(check.probe)

    async def evaluate(self) -> ReadinessReport:
        """Run all checks and aggregate the report."""
        start_time = time.monotonic()
        self.sink.info("🔍 Starting health checks for required services...")

        if self.concurrent:
            outcomes = list(
                await asyncio.gather(*(self._evaluate_one(c) for c in self.checks))
            )
        else:
            outcomes = []
            for check in self.checks:
                outcomes.append(await self._evaluate_one(check))

        total_duration_ms = (time.monotonic() - start_time) * 1000
        return ReadinessReport.from_outcomes(outcomes, total_duration_ms)

    def decide(self, report: ReadinessReport) -> BootDecision:
        """Write the verdict to the sink and return the boot decision."""
        if report.overall_ready:
            self.sink.info("✅ All health checks passed! Starting server...")
            log_checkpoint(
                "readiness_gate_passed",
                data={
                    "passed": [o.dependency_name for o in report.passed],
                    "skipped": [o.dependency_name for o in report.skipped],
                },
            )
            return BootDecision(proceed=True, exit_code=EXIT_OK, report=report)

        for line in format_failure_block(report.failed):
            self.sink.error(line)
        log_checkpoint(
            "readiness_gate_failed",
            data={"failed": [o.dependency_name for o in report.failed]},
        )
        return BootDecision(proceed=False, exit_code=EXIT_NOT_READY, report=report)

    async def run(self) -> BootDecision:
        """evaluate() then decide()."""
        report = await self.evaluate()
        return self.decide(report)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "EXIT_OK",
    "EXIT_NOT_READY",
    "BootDecision",
    "ReadinessGate",
]
