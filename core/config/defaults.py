# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for retry budget, probe timeouts, cache target
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides the defaults for the startup readiness gate. Every value can be
overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides (read once, at evaluation time)
- Malformed numbers raise ConfigurationError instead of a bare ValueError
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import urlsplit

from core.errors import ConfigurationError


DEFAULT_REDIS_HOST = "localhost"
DEFAULT_REDIS_PORT = 6379


def _env(env: Mapping[str, str], name: str) -> Optional[str]:
    """Read a variable, treating empty strings as unset."""
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = _env(env, name)
    if raw is None:
        return default
    try:
        return int(raw, 10)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", variable=name, value=raw
        )


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _env(env, name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number, got {raw!r}", variable=name, value=raw
        )


@dataclass(frozen=True)
class RetryDefaults:
    """
    Defaults for the per-dependency retry budget.

    Worst case per dependency with these values: 2 + 3 + 4.5 = 9.5 seconds
    of sleep plus four probe timeouts.
    """
    max_attempts: int = 4
    initial_delay_seconds: float = 2.0
    backoff_multiplier: float = 1.5
    max_delay_seconds: float = 10.0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RetryDefaults":
        """Create from environment variables."""
        env = os.environ if env is None else env
        return cls(
            max_attempts=_env_int(env, "READINESS_MAX_ATTEMPTS", 4),
            initial_delay_seconds=_env_float(env, "READINESS_INITIAL_DELAY_SECONDS", 2.0),
            backoff_multiplier=_env_float(env, "READINESS_BACKOFF_MULTIPLIER", 1.5),
            max_delay_seconds=_env_float(env, "READINESS_MAX_DELAY_SECONDS", 10.0),
        )


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults for individual probe attempts.

    timeout_seconds bounds each transport operation (connect, query, read),
    independent of the retry budget.
    """
    timeout_seconds: float = 5.0
    concurrent: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ProbeDefaults":
        """Create from environment variables."""
        env = os.environ if env is None else env
        concurrent = (_env(env, "READINESS_CONCURRENT") or "false").lower() == "true"
        return cls(
            timeout_seconds=_env_float(env, "READINESS_PROBE_TIMEOUT_SECONDS", 5.0),
            concurrent=concurrent,
        )


@dataclass(frozen=True)
class CacheDefaults:
    """
    Redis target as seen by the readiness gate.

    redis_url and redis_host keep the raw explicit values (None if unset);
    host and port are the resolved probe target. REDIS_HOST/REDIS_PORT win
    over the URL, and the URL wins over localhost:6379.
    """
    redis_url: Optional[str] = None
    redis_host: Optional[str] = None
    host: str = DEFAULT_REDIS_HOST
    port: int = DEFAULT_REDIS_PORT

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ConfigurationError(
                f"REDIS_PORT must be between 1 and 65535, got {self.port}",
                variable="REDIS_PORT",
                value=str(self.port),
            )

    @property
    def explicitly_configured(self) -> bool:
        """True if REDIS_URL or REDIS_HOST was set."""
        return self.redis_url is not None or self.redis_host is not None

    @property
    def is_default_target(self) -> bool:
        return self.host == DEFAULT_REDIS_HOST and self.port == DEFAULT_REDIS_PORT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "CacheDefaults":
        """Create from environment variables."""
        env = os.environ if env is None else env
        redis_url = _env(env, "REDIS_URL")
        redis_host = _env(env, "REDIS_HOST")

        url_host = None
        url_port = None
        if redis_url:
            try:
                parts = urlsplit(redis_url)
                url_host = parts.hostname
                url_port = parts.port
            except ValueError as e:
                raise ConfigurationError(
                    f"REDIS_URL is malformed: {e}", variable="REDIS_URL", value=redis_url
                )

        host = redis_host or url_host or DEFAULT_REDIS_HOST
        port = _env_int(env, "REDIS_PORT", url_port or DEFAULT_REDIS_PORT)

        return cls(
            redis_url=redis_url,
            redis_host=redis_host,
            host=host,
            port=port,
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    retry: RetryDefaults = field(default_factory=RetryDefaults)
    probe: ProbeDefaults = field(default_factory=ProbeDefaults)
    cache: CacheDefaults = field(default_factory=CacheDefaults)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            retry=RetryDefaults.from_env(env),
            probe=ProbeDefaults.from_env(env),
            cache=CacheDefaults.from_env(env),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_REDIS_HOST",
    "DEFAULT_REDIS_PORT",
    "RetryDefaults",
    "ProbeDefaults",
    "CacheDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
