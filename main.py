# ============================================================================
# READINESS GATE - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - READINESS GATE
# STATUS: Core - Process entry point
# PURPOSE: Run the readiness gate, then serve the FastAPI app
# CREATED: 18 OCT 2026
# ============================================================================
"""
Main Application

Boot sequence:
1. Configure logging
2. Run the readiness gate (PostgreSQL, then Redis if applicable)
3. Abort with the gate's exit code, before any socket is bound, if a
   required dependency never answered
4. Otherwise start the FastAPI app under uvicorn

The app itself only carries the process probes; application routes are
mounted by the host service.

Usage:
    python main.py
"""

import asyncio
import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, EPOCH
from core.errors import ConfigurationError
from core.logging import configure_logging, get_logger
from health import run_startup_gate
from repositories.database import init_pool, close_pool

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)

EXIT_CONFIG_ERROR = 2


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    The gate has already confirmed PostgreSQL; open the long-lived pool.
    """
    logger.info(f"Starting service v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE})")
    await init_pool()

    yield

    logger.info("Shutting down...")
    await close_pool()


app = FastAPI(
    title="Readiness Gate",
    description="Service that refuses to boot until its dependencies answer",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/livez")
async def liveness_probe():
    """Process is alive; reaching here means the boot gate passed."""
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Readiness Gate",
        "version": __version__,
        "epoch": EPOCH,
        "build_date": BUILD_DATE,
        "status": "running",
    }


def boot() -> int:
    """Run the gate; returns the exit code (0 = proceed)."""
    try:
        decision = asyncio.run(run_startup_gate())
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG_ERROR
    return decision.exit_code


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    exit_code = boot()
    if exit_code != 0:
        sys.exit(exit_code)

    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
