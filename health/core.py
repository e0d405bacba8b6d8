# ============================================================================
# READINESS CORE TYPES
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Base classes for dependency probes
# PURPOSE: Probe interface, outcome and report types
# CREATED: 18 OCT 2026
# ============================================================================
"""
Readiness Core Types

Defines the probe interface and the values that flow back to the gate.

Outcome states:
- passed: dependency answered correctly
- failed: dependency did not answer (error_detail says why)
- skipped: optional dependency not configured; counts as succeeded

Applicability (decided once, before probing):
- required: explicitly configured, probe and count failures
- defaults_detected: nothing configured but the target is the stock
  localhost default, probe and count failures
- skip: do not probe
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from core.config import get_defaults

if TYPE_CHECKING:
    from health.retry import RetryPolicy


class OutcomeStatus(str, Enum):
    """Display status of a ProbeOutcome."""
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class Applicability(str, Enum):
    """Whether a dependency takes part in the gate."""
    REQUIRED = "required"
    DEFAULTS_DETECTED = "defaults_detected"
    SKIP = "skip"

    @property
    def should_probe(self) -> bool:
        return self is not Applicability.SKIP


@dataclass(frozen=True)
class ProbeOutcome:
    """
    Result of one probe attempt, or the terminal result of a retry run.

    error_detail is set if and only if succeeded is False. A skipped
    outcome is a success with skipped=True.
    """
    succeeded: bool
    dependency_name: str
    error_detail: Optional[str] = None
    skipped: bool = False
    attempts: int = 0
    duration_ms: float = 0.0

    def __post_init__(self):
        if self.succeeded and self.error_detail is not None:
            raise ValueError("A successful outcome cannot carry an error")
        if not self.succeeded and not self.error_detail:
            raise ValueError("A failed outcome must carry an error")
        if self.skipped and not self.succeeded:
            raise ValueError("A skipped outcome must be marked succeeded")

    @classmethod
    def success(cls, dependency_name: str, duration_ms: float = 0.0) -> "ProbeOutcome":
        """Create passed outcome."""
        return cls(succeeded=True, dependency_name=dependency_name, duration_ms=duration_ms)

    @classmethod
    def failure(
        cls, dependency_name: str, error_detail: str, duration_ms: float = 0.0
    ) -> "ProbeOutcome":
        """Create failed outcome."""
        return cls(
            succeeded=False,
            dependency_name=dependency_name,
            error_detail=error_detail or "Unknown error",
            duration_ms=duration_ms,
        )

    @classmethod
    def skip(cls, dependency_name: str) -> "ProbeOutcome":
        """Create skipped outcome (not configured)."""
        return cls(succeeded=True, dependency_name=dependency_name, skipped=True)

    @classmethod
    def from_exception(
        cls, dependency_name: str, e: BaseException, duration_ms: float = 0.0
    ) -> "ProbeOutcome":
        """Create failed outcome from exception."""
        return cls.failure(dependency_name, describe_error(e), duration_ms)

    @property
    def status(self) -> OutcomeStatus:
        if self.skipped:
            return OutcomeStatus.SKIPPED
        return OutcomeStatus.PASSED if self.succeeded else OutcomeStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result: Dict[str, Any] = {
            "dependency": self.dependency_name,
            "status": self.status.value,
            "attempts": self.attempts,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.error_detail:
            result["error"] = self.error_detail
        return result


def describe_error(e: BaseException) -> str:
    """Message for an exception, falling back to its type for empty ones."""
    message = str(e).strip()
    if isinstance(e, asyncio.TimeoutError) and not message:
        return "Timed out"
    return message or type(e).__name__


@dataclass(frozen=True)
class ReadinessReport:
    """Ordered outcomes of one gate evaluation."""
    checks: Tuple[ProbeOutcome, ...]
    overall_ready: bool
    total_duration_ms: float = 0.0

    @classmethod
    def from_outcomes(
        cls, outcomes: List[ProbeOutcome], total_duration_ms: float = 0.0
    ) -> "ReadinessReport":
        """Aggregate outcomes; skipped checks never count as failures."""
        ready = all(o.succeeded for o in outcomes if not o.skipped)
        return cls(
            checks=tuple(outcomes),
            overall_ready=ready,
            total_duration_ms=total_duration_ms,
        )

    @property
    def failed(self) -> List[ProbeOutcome]:
        return [o for o in self.checks if not o.succeeded]

    @property
    def skipped(self) -> List[ProbeOutcome]:
        return [o for o in self.checks if o.skipped]

    @property
    def passed(self) -> List[ProbeOutcome]:
        return [o for o in self.checks if o.succeeded and not o.skipped]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "ready": self.overall_ready,
            "checks": [o.to_dict() for o in self.checks],
            "total_duration_ms": round(self.total_duration_ms, 2),
        }


class Probe(ABC):
    """
    Base class for dependency probes.

    Subclasses implement check(), which returns normally when the
    dependency is live and raises otherwise. check() applies
    timeout_seconds to each transport operation it performs. attempt()
    turns every exception into a failed ProbeOutcome.

    Attributes:
        name: Dependency name used in logs, reports and remediation lookup
        timeout_seconds: Bound for one transport operation

    Example:
        class EchoProbe(Probe):
            name = "echo"

            async def check(self) -> None:
                if not await ping_echo():
                    raise ProbeError("echo did not answer")
    """

    name: str = "unnamed"
    timeout_seconds: Optional[float] = None

    def __init__(self, timeout_seconds: Optional[float] = None):
        if timeout_seconds is not None:
            self.timeout_seconds = timeout_seconds
        elif self.timeout_seconds is None:
            self.timeout_seconds = get_defaults().probe.timeout_seconds

    @abstractmethod
    async def check(self) -> None:
        """
        Execute one liveness check.

        Raises:
            Exception: Any failure; converted by attempt()
        """
        pass

    async def attempt(self) -> ProbeOutcome:
        """Run one check and report it; never raises."""
        start_time = time.monotonic()
        try:
            await self.check()
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            return ProbeOutcome.from_exception(self.name, e, duration_ms)

        duration_ms = (time.monotonic() - start_time) * 1000
        return ProbeOutcome.success(self.name, duration_ms)


@dataclass
class DependencyCheck:
    """
    One dependency declared to the gate.

    retry_policy overrides the gate's default policy for this dependency.
    skip_reason is logged when applicability is skip.
    """
    name: str
    probe: Probe
    applicability: Applicability = Applicability.REQUIRED
    retry_policy: Optional["RetryPolicy"] = None
    skip_reason: str = "not configured"


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "OutcomeStatus",
    "Applicability",
    "ProbeOutcome",
    "ReadinessReport",
    "Probe",
    "DependencyCheck",
    "describe_error",
]
