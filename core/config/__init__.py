# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the readiness gate.
"""

from core.config.defaults import (
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_PORT,
    RetryDefaults,
    ProbeDefaults,
    CacheDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

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
