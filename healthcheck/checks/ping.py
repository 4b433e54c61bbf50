# ============================================================================
# PING HEALTH CHECKS
# ============================================================================
# STATUS: Infrastructure - Connectivity probes
# PURPOSE: Readiness checks for connection types that can be pinged
# CREATED: 19 OCT 2026
# ============================================================================
"""
Ping Health Checks

A Pinger (sync) or AsyncPinger (async) wraps a connection type that can
test its remote endpoint. check_ping(pinger) turns either into a readiness
check; any error raised by ping() is reported as PingCheckFailed.

Adapters:
- PsycopgPoolPinger: psycopg_pool.ConnectionPool (runs on a worker thread)
- AsyncPsycopgPoolPinger: psycopg_pool.AsyncConnectionPool

Usage:
    pool = AsyncConnectionPool(conninfo, open=False)
    handler.add_check(check_ping(AsyncPsycopgPoolPinger(pool)))
"""

from abc import ABC, abstractmethod
from typing import Union

from psycopg_pool import AsyncConnectionPool, ConnectionPool

from core.logging import ComponentType, get_logger
from healthcheck.context import CheckContext
from healthcheck.core import Check
from healthcheck.errors import ConfigurationError, PingCheckFailed

logger = get_logger(__name__, ComponentType.PROBE)

PING_QUERY = "SELECT 1 as health_check"


# ============================================================================
# PINGER INTERFACES
# ============================================================================

class Pinger(ABC):
    """Connection that can be pinged synchronously."""

    @abstractmethod
    def ping(self, ctx: CheckContext) -> None:
        """Return if the remote endpoint is healthy, raise otherwise."""
        pass


class AsyncPinger(ABC):
    """Connection that can be pinged from the event loop."""

    @abstractmethod
    async def ping(self, ctx: CheckContext) -> None:
        """Return if the remote endpoint is healthy, raise otherwise."""
        pass


# ============================================================================
# CHECKS
# ============================================================================

class PingCheck(Check):
    """Readiness check calling a sync Pinger."""

    def __init__(self, pinger: Pinger):
        self.pinger = pinger
        self.name = f"ping:{type(pinger).__name__}"

    def check(self, ctx: CheckContext) -> None:
        try:
            self.pinger.ping(ctx)
        except Exception as e:
            logger.debug(f"Ping through {type(self.pinger).__name__} failed: {e}")
            raise PingCheckFailed(f"ping check failed: {e}") from e


class AsyncPingCheck(Check):
    """Readiness check awaiting an AsyncPinger."""

    def __init__(self, pinger: AsyncPinger):
        self.pinger = pinger
        self.name = f"ping:{type(pinger).__name__}"

    async def check(self, ctx: CheckContext) -> None:
        try:
            await self.pinger.ping(ctx)
        except Exception as e:
            logger.debug(f"Ping through {type(self.pinger).__name__} failed: {e}")
            raise PingCheckFailed(f"ping check failed: {e}") from e


def check_ping(pinger: Union[Pinger, AsyncPinger]) -> Check:
    """Create a check that pings pinger to test connectivity."""
    if isinstance(pinger, AsyncPinger):
        return AsyncPingCheck(pinger)
    if isinstance(pinger, Pinger):
        return PingCheck(pinger)
    raise ConfigurationError(f"Expected a Pinger or AsyncPinger, got {type(pinger).__name__}")


# ============================================================================
# PSYCOPG ADAPTERS
# ============================================================================

class PsycopgPoolPinger(Pinger):
    """Pings PostgreSQL through a psycopg connection pool."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    def ping(self, ctx: CheckContext) -> None:
        ctx.raise_if_done()
        with self.pool.connection(timeout=ctx.remaining()) as conn:
            row = conn.execute(PING_QUERY).fetchone()
        if not row or row[0] != 1:
            raise RuntimeError(f"unexpected ping result: {row!r}")


class AsyncPsycopgPoolPinger(AsyncPinger):
    """Pings PostgreSQL through an async psycopg connection pool."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def ping(self, ctx: CheckContext) -> None:
        async with self.pool.connection(timeout=ctx.remaining()) as conn:
            cursor = await conn.execute(PING_QUERY)
            row = await cursor.fetchone()
        if not row or row[0] != 1:
            raise RuntimeError(f"unexpected ping result: {row!r}")


__all__ = [
    "Pinger",
    "AsyncPinger",
    "PingCheck",
    "AsyncPingCheck",
    "check_ping",
    "PsycopgPoolPinger",
    "AsyncPsycopgPoolPinger",
    "PING_QUERY",
]
