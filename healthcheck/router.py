# ============================================================================
# HEALTH HANDLER
# ============================================================================
# STATUS: Infrastructure - FastAPI health endpoints
# PURPOSE: Kubernetes liveness, readiness and info probes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Handler

FastAPI router providing three probe endpoints (paths from HandlerConfig):

Endpoints:
    GET /livez   - Liveness probe (is the process alive?)
                   Always returns 204. Executes no checks.

    GET /readyz  - Readiness probe (can we serve dependent traffic?)
                   Runs all registered checks concurrently.
                   Returns 204 if every check passed, 503 otherwise.
                   The response body is always empty; failure details go
                   to the configured ErrorObserver.
                   A client disconnect cancels the running checks.

    GET /infoz   - Build/version info
                   Returns 200 with a JSON document once enable_info() was
                   called, 404 before that.

Usage:
    handler = HealthHandler()
    handler.add_check(check_url("http://localhost:1234/"))

    @handler.check
    async def cache(ctx):
        await redis.ping()

    app.include_router(handler.router, prefix="/health")
"""

import asyncio
import uuid
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, FastAPI, Request, Response

from core.logging import ComponentType, get_logger, log_context
from healthcheck.context import CheckContext
from healthcheck.config import HandlerConfig
from healthcheck.core import Check, CheckCallable, CheckFunc
from healthcheck.executor import ReadinessExecutor
from healthcheck.info import build_info_payload, read_build_info
from healthcheck.registry import CheckRegistry

logger = get_logger(__name__, ComponentType.ROUTER)

INFO_MEDIA_TYPE = "application/json; charset=UTF-8"

# Seconds between client disconnect polls during a readiness evaluation
DISCONNECT_POLL_INTERVAL = 0.1


async def _cancel_on_disconnect(request: Request, ctx: CheckContext) -> None:
    """Cancel ctx once the client of request goes away."""
    while not ctx.done():
        if await request.is_disconnected():
            logger.info("Client disconnected, cancelling readiness checks")
            ctx.cancel()
            return
        await asyncio.sleep(DISCONNECT_POLL_INTERVAL)


class HealthHandler:
    """
    Implements liveness and readiness checking.

    The handler must be mounted on an application (include_router or
    create_app) to receive requests.
    """

    def __init__(
        self,
        config: Optional[HandlerConfig] = None,
        registry: Optional[CheckRegistry] = None,
    ):
        """
        Initialize handler.

        Args:
            config: Handler configuration (environment defaults if None)
            registry: Check registry (creates an empty one if None)
        """
        self.config = config or HandlerConfig.from_defaults()
        self.registry = registry if registry is not None else CheckRegistry()
        self.executor = ReadinessExecutor(
            registry=self.registry,
            ready_timeout=self.config.ready_timeout,
            error_observer=self.config.error_observer,
        )
        self._info_payload: Optional[bytes] = None

        self.router = APIRouter(tags=["Health"])
        self.router.add_api_route(
            self.config.live_path,
            self._handle_live,
            methods=["GET"],
            status_code=204,
            response_class=Response,
            summary="Liveness probe",
        )
        self.router.add_api_route(
            self.config.ready_path,
            self._handle_ready,
            methods=["GET"],
            status_code=204,
            response_class=Response,
            summary="Readiness probe",
        )
        self.router.add_api_route(
            self.config.info_path,
            self._handle_info,
            methods=["GET"],
            response_class=Response,
            summary="Build info",
        )

    # ------------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------------

    def add_check(self, check: Union[Check, CheckCallable]) -> Check:
        """Register check as another readiness check."""
        return self.registry.register(check)

    def add_check_func(self, func: CheckCallable, name: Optional[str] = None) -> Check:
        """Register a bare function as another readiness check."""
        return self.registry.register(CheckFunc(func, name=name))

    def check(self, func: CheckCallable) -> CheckCallable:
        """
        Decorator registering a function as readiness check.

        Example:
            @handler.check
            def disk_writable(ctx):
                ...
        """
        self.add_check_func(func)
        return func

    # ------------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------------

    async def execute_ready(self, context: Optional[CheckContext] = None) -> None:
        """
        Execute all readiness checks.

        Raises:
            Exception: The first failure (see ReadinessExecutor.execute_ready)
        """
        await self.executor.execute_ready(context)

    def enable_info(
        self,
        info_data: Optional[Dict[str, Any]] = None,
        distribution: Optional[str] = None,
    ) -> None:
        """
        Enable the info endpoint.

        The payload is serialized once here and never recomputed.

        Args:
            info_data: Additional JSON fields
            distribution: Installed distribution providing the version

        Raises:
            ConfigurationError: If info_data is not JSON serializable
        """
        self._info_payload = build_info_payload(
            info_data,
            read_build_info(distribution),
        )
        logger.info(f"Info endpoint enabled at {self.config.info_path}")

    @property
    def info_enabled(self) -> bool:
        return self._info_payload is not None

    def create_app(self, **kwargs: Any) -> FastAPI:
        """Create a FastAPI application serving only the health endpoints."""
        app = FastAPI(**kwargs)
        app.include_router(self.router)
        return app

    def close(self) -> None:
        self.executor.close()

    # ------------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------------

    async def _handle_live(self) -> Response:
        return Response(status_code=204)

    async def _handle_ready(self, request: Request) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]

        ctx = CheckContext.background().with_cancel()
        watcher = asyncio.create_task(_cancel_on_disconnect(request, ctx))

        try:
            with log_context(probe="readyz", request_id=request_id):
                try:
                    await self.execute_ready(ctx)
                except Exception:
                    # Already reported to the error observer
                    return Response(status_code=503)
        finally:
            watcher.cancel()
            ctx.cancel()

        return Response(status_code=204)

    async def _handle_info(self) -> Response:
        if self._info_payload is None:
            return Response(status_code=404)

        return Response(
            content=self._info_payload,
            status_code=200,
            media_type=INFO_MEDIA_TYPE,
        )


__all__ = [
    "HealthHandler",
    "INFO_MEDIA_TYPE",
]
