# ============================================================================
# READINESS DIAGNOSTICS
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Operator-facing boot failure text
# PURPOSE: Failure block and remediation checklists per dependency
# CREATED: 18 OCT 2026
# ============================================================================
"""
Readiness Diagnostics

Builds the multi-line block written when the gate refuses to boot. Lines
go to a DiagnosticsSink: anything with info() and error() methods. The
default sink is a logger, tests pass a recorder.
"""

from typing import Dict, List, Protocol, Tuple

from health.core import ProbeOutcome

BANNER = "═" * 63

REMEDIATION: Dict[str, Tuple[str, ...]] = {
    "PostgreSQL": (
        "Ensure PostgreSQL is running",
        "Check DATABASE_URL (or POSTGRES_HOST/POSTGRES_DB/POSTGRES_USER) environment variables",
        "For Docker: docker-compose up -d postgres",
        "Wait for PostgreSQL to be fully ready",
    ),
    "Redis": (
        "Ensure Redis is running",
        "Check REDIS_HOST and REDIS_PORT (or REDIS_URL) environment variables",
        "For Docker: docker-compose up -d redis",
        "Wait for Redis to be fully ready",
    ),
}


class DiagnosticsSink(Protocol):
    """Where gate output goes."""

    def info(self, msg: str, *args, **kwargs) -> None: ...

    def error(self, msg: str, *args, **kwargs) -> None: ...


class RecordingSink:
    """Sink that keeps lines in memory (CLI --json mode and tests)."""

    def __init__(self):
        self.lines: List[Tuple[str, str]] = []

    def info(self, msg: str, *args, **kwargs) -> None:
        self.lines.append(("info", msg))

    def error(self, msg: str, *args, **kwargs) -> None:
        self.lines.append(("error", msg))

    @property
    def text(self) -> str:
        return "\n".join(line for _, line in self.lines)


def remediation_lines(dependency_name: str) -> List[str]:
    """Numbered checklist for one dependency, empty if none is known."""
    steps = REMEDIATION.get(dependency_name, ())
    if not steps:
        return []
    lines = [f"{dependency_name}:"]
    lines.extend(f"  {i}. {step}" for i, step in enumerate(steps, start=1))
    lines.append("")
    return lines


def format_failure_block(failed: List[ProbeOutcome]) -> List[str]:
    """Full diagnostic block for the failed dependencies, in report order."""
    lines = [
        "",
        BANNER,
        "❌ HEALTH CHECKS FAILED - SERVER WILL NOT START",
        BANNER,
        "",
        "The following services are not ready:",
        "",
    ]

    for outcome in failed:
        lines.append(f"  ✗ {outcome.dependency_name}")
        lines.append(f"    Error: {outcome.error_detail or 'Unknown error'}")
        if outcome.attempts:
            lines.append(f"    Attempts: {outcome.attempts}")
        lines.append("")

    lines.extend([BANNER, "HOW TO FIX:", ""])
    for outcome in failed:
        lines.extend(remediation_lines(outcome.dependency_name))

    lines.extend([BANNER, ""])
    return lines


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "REMEDIATION",
    "DiagnosticsSink",
    "RecordingSink",
    "remediation_lines",
    "format_failure_block",
]
