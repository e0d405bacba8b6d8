# ============================================================================
# APPLICABILITY POLICY TESTS
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Tests - Optional Redis dependency resolution
# PURPOSE: Verify the required / defaults_detected / skip decision table
# CREATED: 18 OCT 2026
# ============================================================================
"""
Applicability Policy Tests

Run with:
    pytest tests/test_policy.py -v
"""

from unittest.mock import MagicMock

import pytest

from core.config import CacheDefaults, Defaults
from core.errors import ConfigurationError
from health.core import Applicability
from health.policy import resolve_cache_applicability
from health.registry import build_default_registry


def _resolve(env=None):
    return resolve_cache_applicability(CacheDefaults.from_env(env))


class TestDecisionTable:
    """One test per row of the decision table."""

    def test_explicit_host_required(self):
        assert _resolve({"REDIS_HOST": "cache.internal"}) == Applicability.REQUIRED

    def test_explicit_url_required(self):
        env = {"REDIS_URL": "redis://cache.internal:6380/0"}
        assert _resolve(env) == Applicability.REQUIRED

    def test_explicit_localhost_still_required(self):
        env = {"REDIS_HOST": "localhost", "REDIS_PORT": "6379"}
        assert _resolve(env) == Applicability.REQUIRED

    def test_nothing_set_probes_defaults(self):
        result = _resolve({})
        assert result == Applicability.DEFAULTS_DETECTED
        assert result.should_probe is True

    def test_non_default_port_without_host_skips(self):
        result = _resolve({"REDIS_PORT": "6380"})
        assert result == Applicability.SKIP
        assert result.should_probe is False

    def test_non_default_host_without_explicit_flag_skips(self):
        cache = CacheDefaults(host="10.0.0.5", port=6379)
        assert resolve_cache_applicability(cache) == Applicability.SKIP

    def test_loopback_address_host_counts_as_explicit(self):
        # Setting REDIS_HOST at all is an explicit configuration signal
        assert _resolve({"REDIS_HOST": "127.0.0.1"}) == Applicability.REQUIRED


class TestEnvironmentEdgeCases:
    """Empty values and parsing."""

    def test_empty_host_is_unset(self):
        assert _resolve({"REDIS_HOST": ""}) == Applicability.DEFAULTS_DETECTED

    def test_whitespace_url_is_unset(self):
        env = {"REDIS_URL": "   ", "REDIS_PORT": "6390"}
        assert _resolve(env) == Applicability.SKIP

    def test_bad_port_raises(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _resolve({"REDIS_PORT": "sixthousand"})
        assert exc_info.value.variable == "REDIS_PORT"

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("REDIS_HOST", "cache.internal")
        assert _resolve() == Applicability.REQUIRED

    def test_registry_uses_resolved_applicability(self, monkeypatch):
        monkeypatch.setenv("REDIS_PORT", "6380")
        registry = build_default_registry(MagicMock(), Defaults.from_env())
        assert registry.get("Redis").applicability == Applicability.SKIP
