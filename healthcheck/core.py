# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Core - Check interface and error taxonomy
# PURPOSE: Readiness check abstraction shared by registry, executor, probes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Defines the check interface and re-exports the errors raised by readiness
evaluation.

A check is any object with a single ``check(ctx)`` method. Returning
normally means the check passed; raising means it failed. Checks may be
plain functions (executed on a worker thread) or coroutine functions
(executed as asyncio tasks).

Error taxonomy:
- HealthCheckError: Base class for library errors
- Cancelled: The shared context was cancelled
- DeadlineExceeded: The bounded readiness context expired
- URLCheckFailed: Any failure of the bundled URL probe
- PingCheckFailed: Any failure of the bundled ping probe
- ConfigurationError: Invalid registration/configuration (startup only)
"""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from healthcheck.context import CheckContext
from healthcheck.errors import (
    HealthCheckError,
    Cancelled,
    DeadlineExceeded,
    URLCheckFailed,
    PingCheckFailed,
    ConfigurationError,
)


# ============================================================================
# CHECK INTERFACE
# ============================================================================

CheckCallable = Callable[[CheckContext], Union[None, Awaitable[None]]]


class Check(ABC):
    """
    Base class for readiness checks.

    Subclass and implement check(). Any exception raised from check() is
    considered a check failure, including context deadlines.

    Example:
        class QueueCheck(Check):
            name = "queue"

            async def check(self, ctx: CheckContext) -> None:
                if not await broker.is_connected():
                    raise RuntimeError("broker disconnected")
    """

    name: str = "unnamed"

    @abstractmethod
    def check(self, ctx: CheckContext) -> Any:
        """
        Execute the check.

        Args:
            ctx: Cancellation/deadline context shared by all checks
                 of one readiness evaluation
        """
        pass

    @property
    def is_async(self) -> bool:
        """True if check() must be awaited instead of run on a thread."""
        return inspect.iscoroutinefunction(self.check)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class CheckFunc(Check):
    """Check implemented by a bare (sync or async) function."""

    def __init__(self, func: CheckCallable, name: Optional[str] = None):
        if not callable(func):
            raise ConfigurationError(f"Check function is not callable: {func!r}")
        self.func = func
        self.name = name or getattr(func, "__name__", type(func).__name__)

    def check(self, ctx: CheckContext) -> Any:
        return self.func(ctx)

    @property
    def is_async(self) -> bool:
        if inspect.iscoroutinefunction(self.func):
            return True
        # Callable objects with an async __call__
        return inspect.iscoroutinefunction(getattr(self.func, "__call__", None))


def as_check(check: Union[Check, CheckCallable]) -> Check:
    """
    Coerce a Check instance or a bare function into a Check.

    Raises:
        ConfigurationError: If check is neither a Check nor callable
    """
    if isinstance(check, Check):
        return check
    if callable(check):
        return CheckFunc(check)
    raise ConfigurationError(
        f"Expected a Check or a callable, got {type(check).__name__}"
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckError",
    "Cancelled",
    "DeadlineExceeded",
    "URLCheckFailed",
    "PingCheckFailed",
    "ConfigurationError",
    "Check",
    "CheckFunc",
    "CheckCallable",
    "as_check",
]
