# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Core module initialization
# PURPOSE: Export errors, configuration and logging helpers
# CREATED: 18 OCT 2026
# ============================================================================

from core.errors import ReadinessError, ProbeError, ConfigurationError
from core.config import Defaults, get_defaults, reset_defaults
from core.logging import configure_logging, get_logger, log_context

__all__ = [
    # Errors
    "ReadinessError",
    "ProbeError",
    "ConfigurationError",
    # Config
    "Defaults",
    "get_defaults",
    "reset_defaults",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]
