# ============================================================================
# RETRY CONTROLLER
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Infrastructure - Bounded retry with exponential backoff
# PURPOSE: Drive probe attempts until success or budget exhausted
# CREATED: 18 OCT 2026
# ============================================================================
"""
Retry Controller

Wraps a Probe with bounded attempts and exponential backoff:

    delay after attempt n = min(initial_delay * multiplier^(n-1), max_delay)

No jitter. The delay also applies between attempts 1 and 2. Only the
terminal outcome is returned; intermediate attempts are visible in logs.
"""

import asyncio
import dataclasses
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.config import RetryDefaults, get_defaults
from core.errors import ConfigurationError
from core.logging import get_logger, log_context
from health.core import Probe, ProbeOutcome

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class RetryPolicy(BaseModel):
    """Retry configuration for one dependency."""
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=4, ge=1)
    initial_delay_seconds: float = Field(default=2.0, ge=0)
    backoff_multiplier: float = Field(default=1.5, gt=1)
    max_delay_seconds: float = Field(default=10.0, ge=0)

    def delay_after(self, attempt: int) -> float:
        """Seconds to wait after a failed attempt (1-based)."""
        if attempt < 1:
            raise ValueError(f"attempt must be >= 1, got {attempt}")
        delay = self.initial_delay_seconds * (self.backoff_multiplier ** (attempt - 1))
        return min(delay, self.max_delay_seconds)

    @property
    def total_delay_seconds(self) -> float:
        """Worst-case sleep across the whole budget."""
        return sum(self.delay_after(n) for n in range(1, self.max_attempts))

    @classmethod
    def from_defaults(cls, defaults: Optional[RetryDefaults] = None) -> "RetryPolicy":
        """
        Build from configured defaults (environment-driven).

        Raises:
            ConfigurationError: Values out of range (e.g. max_attempts=0)
        """
        defaults = defaults or get_defaults().retry
        try:
            return cls(
                max_attempts=defaults.max_attempts,
                initial_delay_seconds=defaults.initial_delay_seconds,
                backoff_multiplier=defaults.backoff_multiplier,
                max_delay_seconds=defaults.max_delay_seconds,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid retry settings: {e}")


class RetryController:
    """
    Runs a probe until it succeeds or the policy's attempts are used up.

    Args:
        policy: Retry budget
        sleep: Awaitable delay function (asyncio.sleep; injected in tests)
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        self.policy = policy or RetryPolicy.from_defaults()
        self._sleep = sleep or asyncio.sleep

    async def run(self, probe: Probe) -> ProbeOutcome:
        """
        Drive probe attempts.

        Returns:
            First successful outcome, or the failed outcome of the last
            attempt. attempts records how many were made.
        """
        max_attempts = self.policy.max_attempts
        attempt = 1

        while True:
            with log_context(dependency=probe.name, attempt=attempt):
                outcome = await probe.attempt()

                if outcome.succeeded:
                    logger.info(f"✓ {probe.name} connection successful")
                    return dataclasses.replace(outcome, attempts=attempt)

                if attempt >= max_attempts:
                    logger.error(
                        f"✗ {probe.name} connection failed after {max_attempts} attempts: "
                        f"{outcome.error_detail}"
                    )
                    return dataclasses.replace(outcome, attempts=attempt)

                delay = self.policy.delay_after(attempt)
                logger.warning(
                    f"✗ {probe.name} connection attempt {attempt}/{max_attempts} failed: "
                    f"{outcome.error_detail}. Retrying in {delay:g}s..."
                )

            await self._sleep(delay)
            attempt += 1


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "RetryPolicy",
    "RetryController",
]
