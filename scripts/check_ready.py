#!/usr/bin/env python
# ============================================================================
# READINESS CHECK SCRIPT
# ============================================================================
# EPOCH: 1 - READINESS GATE
# PURPOSE: Run the readiness gate once and exit with its status
# USAGE:
#   python scripts/check_ready.py                 # Check using environment
#   python scripts/check_ready.py --json          # Print report as JSON
#   python scripts/check_ready.py --max-attempts 1
# ============================================================================

import sys
import os
import argparse
import asyncio
import dataclasses
import json

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import Defaults
from core.errors import ConfigurationError
from core.logging import configure_logging
from health.diagnostics import RecordingSink
from health.startup import run_startup_gate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Verify PostgreSQL and Redis are ready to accept traffic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/check_ready.py                       # Exit 0 when ready, 1 when not
  python scripts/check_ready.py --json                # Machine-readable report
  python scripts/check_ready.py --redis-host cache    # Force a Redis target

Environment Variables:
  DATABASE_URL                      Full PostgreSQL connection string
  POSTGRES_HOST / POSTGRES_DB / ... Individual PostgreSQL components
  REDIS_URL / REDIS_HOST            Marks Redis as required
  REDIS_PORT                        Redis port (default: 6379)
  READINESS_MAX_ATTEMPTS            Attempts per dependency (default: 4)
  READINESS_PROBE_TIMEOUT_SECONDS   Per-operation timeout (default: 5)
        """
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="PostgreSQL connection string (overrides environment)"
    )
    parser.add_argument(
        "--redis-host",
        type=str,
        help="Redis host (overrides REDIS_HOST; marks Redis as required)"
    )
    parser.add_argument(
        "--redis-port",
        type=int,
        help="Redis port (overrides REDIS_PORT)"
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Attempts per dependency (overrides READINESS_MAX_ATTEMPTS)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the readiness report as JSON instead of log lines"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    return parser


def apply_overrides(defaults: Defaults, args: argparse.Namespace) -> Defaults:
    """Fold CLI flags into environment-derived defaults."""
    cache = defaults.cache
    if args.redis_host:
        cache = dataclasses.replace(cache, redis_host=args.redis_host, host=args.redis_host)
    if args.redis_port is not None:
        cache = dataclasses.replace(cache, port=args.redis_port)

    retry = defaults.retry
    if args.max_attempts is not None:
        retry = dataclasses.replace(retry, max_attempts=args.max_attempts)

    return dataclasses.replace(defaults, cache=cache, retry=retry)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose else "INFO")

    sink = RecordingSink() if args.json else None
    try:
        defaults = apply_overrides(Defaults.from_env(), args)
        decision = asyncio.run(
            run_startup_gate(defaults=defaults, connection_string=args.connection, sink=sink)
        )
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(decision.report.to_dict(), indent=2))

    return decision.exit_code


if __name__ == "__main__":
    sys.exit(main())
