# ============================================================================
# HEALTH PROBES - EXAMPLE SERVICE
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Example service exposing /health/livez, /health/readyz, /health/infoz
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Probe Example Service

FastAPI application that:
1. Mounts the health endpoints under /health
2. Registers a URL check per entry of HEALTH_UPSTREAM_URLS
3. Registers a PostgreSQL ping check when DATABASE_URL is set
4. Logs readiness failures through the structured logger

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8080
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from psycopg_pool import AsyncConnectionPool

from __version__ import __version__, BUILD_DATE, DISTRIBUTION
from core.logging import configure_logging, get_logger, ComponentType
from healthcheck import CheckContext, HandlerConfig, HealthHandler, LoggingErrorObserver
from healthcheck.checks import AsyncPsycopgPoolPinger, check_ping, check_url

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__, ComponentType.APP)

health = HealthHandler(
    HandlerConfig.from_defaults(error_observer=LoggingErrorObserver()),
)

for upstream in filter(None, os.environ.get("HEALTH_UPSTREAM_URLS", "").split(",")):
    health.add_check(check_url(upstream.strip()))


@health.check
async def event_loop_responsive(ctx: CheckContext) -> None:
    """Passes as long as the event loop schedules tasks."""
    ctx.raise_if_done()


_pool: Optional[AsyncConnectionPool] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Opens the database pool on startup, closes it on shutdown.
    """
    global _pool

    logger.info(f"Starting health probe service v{__version__} (Build {BUILD_DATE})")

    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        _pool = AsyncConnectionPool(database_url, min_size=1, max_size=2, open=False)
        await _pool.open()
        health.add_check(check_ping(AsyncPsycopgPoolPinger(_pool)))
        logger.info("Database pool initialized")

    health.enable_info({"service": "healthz", "build_date": BUILD_DATE}, distribution=DISTRIBUTION)
    logger.info(f"Health checks initialized ({len(health.registry)} checks registered)")

    yield

    logger.info("Shutting down health probe service...")

    if _pool is not None:
        await _pool.close()
    health.close()


app = FastAPI(
    title="Health Probes",
    description="Liveness and readiness probes",
    version=__version__,
    lifespan=lifespan,
)

# Health endpoints: /health/livez, /health/readyz, /health/infoz
app.include_router(health.router, prefix="/health")


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8080"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
        log_level=logging.getLevelName(logging.getLogger().level).lower(),
    )
