# ============================================================================
# RETRY CONTROLLER TESTS
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Tests - Bounded retry and backoff
# PURPOSE: Verify attempt limits, backoff schedule and terminal outcomes
# CREATED: 18 OCT 2026
# ============================================================================
"""
Retry Controller Tests

Covers:
1. RetryPolicy validation and the delay formula
2. Success on first attempt (no sleep)
3. Success after failures (sleeps before each retry)
4. Exhaustion: exactly max_attempts calls, last error kept
5. Policy built from environment defaults

Run with:
    pytest tests/test_retry.py -v
"""

import asyncio

import pytest
from pydantic import ValidationError

from core.config import RetryDefaults
from core.errors import ConfigurationError
from health.core import ProbeOutcome
from health.retry import RetryController, RetryPolicy


# ============================================================================
# RETRY POLICY
# ============================================================================

class TestRetryPolicy:
    """Tests for RetryPolicy values and delay schedule."""

    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 4
        assert policy.initial_delay_seconds == 2.0
        assert policy.backoff_multiplier == 1.5
        assert policy.max_delay_seconds == 10.0

    def test_default_schedule(self):
        policy = RetryPolicy()
        assert policy.delay_after(1) == pytest.approx(2.0)
        assert policy.delay_after(2) == pytest.approx(3.0)
        assert policy.delay_after(3) == pytest.approx(4.5)

    def test_delay_capped_at_max(self):
        policy = RetryPolicy(initial_delay_seconds=4.0, backoff_multiplier=2.0, max_delay_seconds=10.0)
        assert policy.delay_after(1) == 4.0
        assert policy.delay_after(2) == 8.0
        assert policy.delay_after(3) == 10.0
        assert policy.delay_after(10) == 10.0

    def test_delays_non_decreasing(self):
        policy = RetryPolicy(max_attempts=12, initial_delay_seconds=0.5, backoff_multiplier=1.7)
        delays = [policy.delay_after(n) for n in range(1, 12)]
        assert delays == sorted(delays)
        assert max(delays) <= policy.max_delay_seconds

    def test_formula_for_every_attempt(self):
        policy = RetryPolicy(initial_delay_seconds=1.0, backoff_multiplier=3.0, max_delay_seconds=50.0)
        for n in range(1, 8):
            expected = min(1.0 * 3.0 ** (n - 1), 50.0)
            assert policy.delay_after(n) == pytest.approx(expected)

    def test_delay_after_zero_rejected(self):
        with pytest.raises(ValueError):
            RetryPolicy().delay_after(0)

    def test_total_delay(self):
        assert RetryPolicy().total_delay_seconds == pytest.approx(9.5)

    def test_max_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=0)

    def test_multiplier_must_exceed_one(self):
        with pytest.raises(ValidationError):
            RetryPolicy(backoff_multiplier=1.0)

    def test_policy_is_frozen(self):
        policy = RetryPolicy()
        with pytest.raises(ValidationError):
            policy.max_attempts = 10

    def test_from_defaults(self):
        policy = RetryPolicy.from_defaults(
            RetryDefaults(max_attempts=2, initial_delay_seconds=0.5)
        )
        assert policy.max_attempts == 2
        assert policy.initial_delay_seconds == 0.5

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("READINESS_MAX_ATTEMPTS", "7")
        monkeypatch.setenv("READINESS_MAX_DELAY_SECONDS", "30")
        policy = RetryPolicy.from_defaults()
        assert policy.max_attempts == 7
        assert policy.max_delay_seconds == 30.0

    def test_from_defaults_out_of_range(self):
        with pytest.raises(ConfigurationError):
            RetryPolicy.from_defaults(RetryDefaults(max_attempts=0))


# ============================================================================
# RETRY CONTROLLER
# ============================================================================

class TestRetryController:
    """Tests for RetryController.run()."""

    def test_first_attempt_success_no_sleep(self, make_probe, sleeps):
        probe = make_probe(script=[True])
        controller = RetryController(RetryPolicy(), sleep=sleeps)

        outcome = asyncio.run(controller.run(probe))

        assert outcome.succeeded is True
        assert outcome.error_detail is None
        assert outcome.attempts == 1
        assert probe.calls == 1
        assert sleeps.delays == []

    def test_success_after_failures(self, make_probe, failing, sleeps):
        probe = make_probe(script=[failing("refused"), failing("refused"), True])
        controller = RetryController(RetryPolicy(), sleep=sleeps)

        outcome = asyncio.run(controller.run(probe))

        assert outcome.succeeded is True
        assert outcome.attempts == 3
        assert probe.calls == 3
        assert sleeps.delays == pytest.approx([2.0, 3.0])

    def test_always_failing_uses_exact_budget(self, make_probe, failing, sleeps):
        probe = make_probe(script=[failing("first"), failing("second"), failing("third"), failing("last")])
        controller = RetryController(RetryPolicy(max_attempts=4), sleep=sleeps)

        outcome = asyncio.run(controller.run(probe))

        assert outcome.succeeded is False
        assert outcome.error_detail == "last"
        assert outcome.attempts == 4
        assert probe.calls == 4
        # No sleep after the final attempt
        assert sleeps.delays == pytest.approx([2.0, 3.0, 4.5])

    @pytest.mark.parametrize("max_attempts", [1, 2, 5, 9])
    def test_attempts_never_exceed_max(self, make_probe, failing, sleeps, max_attempts):
        probe = make_probe(script=[failing()])
        controller = RetryController(RetryPolicy(max_attempts=max_attempts), sleep=sleeps)

        outcome = asyncio.run(controller.run(probe))

        assert probe.calls == max_attempts
        assert outcome.attempts == max_attempts
        assert len(sleeps.delays) == max_attempts - 1

    def test_single_attempt_policy_never_sleeps(self, make_probe, failing, sleeps):
        probe = make_probe(script=[failing("down")])
        controller = RetryController(RetryPolicy(max_attempts=1), sleep=sleeps)

        outcome = asyncio.run(controller.run(probe))

        assert outcome.succeeded is False
        assert sleeps.delays == []

    def test_capped_schedule_in_sleeps(self, make_probe, failing, sleeps):
        policy = RetryPolicy(
            max_attempts=6, initial_delay_seconds=2.0, backoff_multiplier=2.0, max_delay_seconds=10.0,
        )
        controller = RetryController(policy, sleep=sleeps)

        asyncio.run(controller.run(make_probe(script=[failing()])))

        assert sleeps.delays == pytest.approx([2.0, 4.0, 8.0, 10.0, 10.0])

    def test_unexpected_exception_becomes_outcome(self, make_probe, sleeps):
        probe = make_probe(script=[RuntimeError("pool exhausted")])
        controller = RetryController(RetryPolicy(max_attempts=2), sleep=sleeps)

        outcome = asyncio.run(controller.run(probe))

        assert outcome.succeeded is False
        assert outcome.error_detail == "pool exhausted"

    def test_outcome_names_dependency(self, make_probe, sleeps):
        probe = make_probe(name="Redis", script=[True])
        outcome = asyncio.run(RetryController(RetryPolicy(), sleep=sleeps).run(probe))
        assert outcome.dependency_name == "Redis"

    def test_default_sleep_is_asyncio_sleep(self):
        controller = RetryController(RetryPolicy())
        assert controller._sleep is asyncio.sleep


# ============================================================================
# PROBE OUTCOME
# ============================================================================

class TestProbeOutcome:
    """Invariants on ProbeOutcome."""

    def test_failure_requires_error(self):
        with pytest.raises(ValueError):
            ProbeOutcome(succeeded=False, dependency_name="PostgreSQL")

    def test_success_rejects_error(self):
        with pytest.raises(ValueError):
            ProbeOutcome(succeeded=True, dependency_name="PostgreSQL", error_detail="boom")

    def test_skip_is_success(self):
        outcome = ProbeOutcome.skip("Redis")
        assert outcome.succeeded is True
        assert outcome.skipped is True
        assert outcome.error_detail is None
        assert outcome.status.value == "skipped"

    def test_from_exception_empty_message(self):
        outcome = ProbeOutcome.from_exception("Redis", asyncio.TimeoutError())
        assert outcome.error_detail == "Timed out"

    def test_from_exception_uses_type_name(self):
        outcome = ProbeOutcome.from_exception("Redis", ConnectionResetError())
        assert outcome.error_detail == "ConnectionResetError"

    def test_to_dict(self):
        outcome = ProbeOutcome.failure("PostgreSQL", "auth failed")
        data = outcome.to_dict()
        assert data["dependency"] == "PostgreSQL"
        assert data["status"] == "failed"
        assert data["error"] == "auth failed"
