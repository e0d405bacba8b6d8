# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Tests - Fixtures shared across readiness tests
# PURPOSE: Scripted probes, recorded sleeps, clean configuration
# CREATED: 18 OCT 2026
# ============================================================================

import asyncio
from typing import List, Optional, Sequence, Union

import pytest

from core.config import reset_defaults
from core.errors import ProbeError
from health.core import Probe


class ScriptedProbe(Probe):
    """
    Probe that follows a script of results.

    Each entry is True (success) or an exception to raise. The last entry
    repeats once the script runs out.
    """

    def __init__(
        self,
        name: str,
        script: Sequence[Union[bool, BaseException]],
        delay: float = 0.0,
    ):
        super().__init__(timeout_seconds=1.0)
        self.name = name
        self.script = list(script)
        self.delay = delay
        self.calls = 0

    async def check(self) -> None:
        step = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if step is True:
            return
        raise step


@pytest.fixture(autouse=True)
def clean_defaults(monkeypatch):
    """Isolate every test from the host's REDIS_*/READINESS_* settings."""
    for var in (
        "REDIS_URL", "REDIS_HOST", "REDIS_PORT",
        "READINESS_MAX_ATTEMPTS", "READINESS_INITIAL_DELAY_SECONDS",
        "READINESS_BACKOFF_MULTIPLIER", "READINESS_MAX_DELAY_SECONDS",
        "READINESS_PROBE_TIMEOUT_SECONDS", "READINESS_CONCURRENT",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_defaults()
    yield
    reset_defaults()


@pytest.fixture
def make_probe():
    """Factory for ScriptedProbe instances."""
    def _make(
        name: str = "PostgreSQL",
        script: Optional[Sequence[Union[bool, BaseException]]] = None,
        delay: float = 0.0,
    ) -> ScriptedProbe:
        if script is None:
            script = [True]
        return ScriptedProbe(name, script, delay=delay)
    return _make


@pytest.fixture
def failing():
    """Shorthand for a ProbeError script entry."""
    def _failing(message: str = "connection refused") -> ProbeError:
        return ProbeError(message)
    return _failing


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeps():
    return SleepRecorder()
