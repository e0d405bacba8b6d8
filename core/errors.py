# ============================================================================
# READINESS ERRORS
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Core - Exception hierarchy
# PURPOSE: Errors raised inside probes and configuration resolution
# CREATED: 18 OCT 2026
# ============================================================================
"""
Readiness Errors

Probes raise ProbeError from check(); the Probe base class converts it
(and any other exception) into a failed ProbeOutcome. ConfigurationError
is the only error that escapes the gate - it means the deployment itself
is wrong, not that a dependency is still starting.
"""

from typing import Optional


class ReadinessError(Exception):
    """Base exception for the readiness gate."""
    pass


class ProbeError(ReadinessError):
    """Raised by a probe when a dependency answered but not correctly."""

    def __init__(self, message: str, dependency: Optional[str] = None):
        self.dependency = dependency
        super().__init__(message)


class ConfigurationError(ReadinessError):
    """Raised when an environment value cannot be parsed."""

    def __init__(self, message: str, variable: Optional[str] = None, value: Optional[str] = None):
        self.variable = variable
        self.value = value
        super().__init__(message)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ReadinessError",
    "ProbeError",
    "ConfigurationError",
]
