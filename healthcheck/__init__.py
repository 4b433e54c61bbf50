# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Liveness and readiness probes
# PURPOSE: Kubernetes probes backed by concurrent readiness checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Module

Liveness and readiness probing for long-running services:
- /livez: Process alive (instant, never runs checks)
- /readyz: Ready to serve (all registered checks pass)
- /infoz: Version and build settings (once enabled)

Architecture:
- Check: Interface for readiness checks (sync or async)
- CheckRegistry: Thread-safe, append-only registration
- ReadinessExecutor: Concurrent execution, shared deadline, first failure wins
- HealthHandler: FastAPI routes

Usage:
    from healthcheck import HealthHandler, HandlerConfig
    from healthcheck.checks import check_url

    handler = HealthHandler(HandlerConfig(ready_timeout=5.0))
    handler.add_check(check_url("http://localhost:1234/"))

    app.include_router(handler.router, prefix="/health")
"""

from healthcheck.context import CheckContext
from healthcheck.errors import (
    HealthCheckError,
    Cancelled,
    DeadlineExceeded,
    URLCheckFailed,
    PingCheckFailed,
    ConfigurationError,
)
from healthcheck.core import Check, CheckFunc, as_check
from healthcheck.registry import CheckRegistry
from healthcheck.observer import (
    ErrorObserver,
    NoopErrorObserver,
    LoggingErrorObserver,
    CallbackErrorObserver,
    as_observer,
)
from healthcheck.executor import ReadinessExecutor
from healthcheck.config import HandlerConfig
from healthcheck.router import HealthHandler

__all__ = [
    # Core types
    "Check",
    "CheckFunc",
    "CheckContext",
    "as_check",
    # Errors
    "HealthCheckError",
    "Cancelled",
    "DeadlineExceeded",
    "URLCheckFailed",
    "PingCheckFailed",
    "ConfigurationError",
    # Registry
    "CheckRegistry",
    # Observers
    "ErrorObserver",
    "NoopErrorObserver",
    "LoggingErrorObserver",
    "CallbackErrorObserver",
    "as_observer",
    # Executor
    "ReadinessExecutor",
    # Handler
    "HandlerConfig",
    "HealthHandler",
]
