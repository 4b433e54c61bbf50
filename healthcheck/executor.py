# ============================================================================
# READINESS EXECUTOR
# ============================================================================
# STATUS: Core - Concurrent readiness check execution
# PURPOSE: Run all registered checks under one deadline, first failure wins
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Executor

Executes readiness checks with:
- Concurrent execution (one task per registered check)
- One shared deadline for the whole evaluation
- First-failure-wins aggregation
- Optional failure observer

Execution Strategy:
1. Derive a child context bounded by the readiness timeout
2. Snapshot the registry (later registrations are not observed)
3. Start every check inside one asyncio.TaskGroup:
   - async checks run as tasks on the event loop
   - sync checks run on a thread pool created for this evaluation,
     one thread per sync check
   - an awaitable returned by a sync check is awaited on the loop
4. The first check to fail cancels the shared context and all sibling
   tasks; its exception is the result of the evaluation
5. If the deadline expires first, the result is DeadlineExceeded
6. If the caller context is cancelled first, the result is Cancelled

Sync checks cannot be interrupted. They observe cancellation through the
context (ctx.done() / ctx.wait()); a sync check that ignores it keeps its
thread until it returns, and its result is discarded. Its thread belongs
to the abandoned evaluation's pool, so later evaluations are unaffected.
"""

import asyncio
import contextvars
import functools
import inspect
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Set, Union

from core.logging import ComponentType, get_logger, log_context
from healthcheck.context import CheckContext
from healthcheck.core import Check
from healthcheck.errors import ConfigurationError, DeadlineExceeded
from healthcheck.observer import ErrorObserver, as_observer
from healthcheck.registry import CheckRegistry

logger = get_logger(__name__, ComponentType.EXECUTOR)

DEFAULT_READY_TIMEOUT = 10.0


def _resolve(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)


class ReadinessExecutor:
    """
    Executes readiness checks concurrently under a shared deadline.

    A single failing check, or the deadline, fails the whole evaluation.
    Checks are never retried and individual results are not reported.
    """

    def __init__(
        self,
        registry: Optional[CheckRegistry] = None,
        ready_timeout: float = DEFAULT_READY_TIMEOUT,
        error_observer: Union[ErrorObserver, Callable[[BaseException], None], None] = None,
    ):
        """
        Initialize executor.

        Args:
            registry: Check registry (creates an empty one if None)
            ready_timeout: Deadline for one evaluation in seconds, 0 disables it
            error_observer: Receives the failure of a failed evaluation
        """
        if ready_timeout < 0:
            raise ConfigurationError(f"ready_timeout must be >= 0, got {ready_timeout}")

        self.registry = registry if registry is not None else CheckRegistry()
        self.ready_timeout = ready_timeout
        self.error_observer = as_observer(error_observer)

        self._pools: Set[ThreadPoolExecutor] = set()
        self._pools_lock = threading.Lock()

    async def execute_ready(self, context: Optional[CheckContext] = None) -> None:
        """
        Execute all registered checks.

        Args:
            context: Caller context (e.g. bound to the inbound request);
                     a background context is used if None

        Raises:
            DeadlineExceeded: If the checks did not complete in time
            Cancelled: If the caller context was cancelled first
            Exception: The first exception raised by any check
        """
        parent = context if context is not None else CheckContext.background()
        if self.ready_timeout > 0:
            ctx = parent.with_timeout(self.ready_timeout)
        else:
            ctx = parent.with_cancel()

        start_time = time.monotonic()
        try:
            await self._execute(ctx, self.registry.snapshot())
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.info(
                f"Readiness evaluation failed after {duration_ms:.1f}ms: "
                f"{type(e).__name__}: {e}"
            )
            self._observe(e)
            raise
        finally:
            # Releases the child from the caller context and stops
            # cooperative sync checks still running.
            ctx.cancel()

    def _observe(self, error: Exception) -> None:
        """Report error to the observer; observer errors never replace it."""
        try:
            self.error_observer.observe(error)
        except Exception:
            logger.exception(
                f"Error observer {type(self.error_observer).__name__} failed"
            )

    async def _execute(self, ctx: CheckContext, checks: Sequence[Check]) -> None:
        """Run checks concurrently, raise the first failure."""
        if not checks:
            return

        failures: List[Exception] = []
        sync_count = sum(1 for check in checks if not check.is_async)
        pool = self._open_pool(sync_count) if sync_count else None

        async def run(check: Check) -> None:
            start_time = time.monotonic()
            with log_context(check=check.name):
                try:
                    await self._invoke(check, ctx, pool)
                except Exception as e:
                    failures.append(e)
                    ctx.cancel()
                    logger.debug(
                        f"Readiness check {check.name} failed "
                        f"({(time.monotonic() - start_time) * 1000:.1f}ms): {e}"
                    )
                    raise
                logger.debug(
                    f"Readiness check {check.name} passed "
                    f"({(time.monotonic() - start_time) * 1000:.1f}ms)"
                )

        async def run_all() -> None:
            async with asyncio.TaskGroup() as group:
                for check in checks:
                    group.create_task(run(check), name=f"readiness:{check.name}")

        loop = asyncio.get_running_loop()
        stopped = loop.create_future()
        ctx.add_done_callback(functools.partial(loop.call_soon_threadsafe, _resolve, stopped))

        checks_task = asyncio.create_task(run_all())
        try:
            done, _ = await asyncio.wait(
                {checks_task, stopped},
                timeout=ctx.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            checks_task.cancel()
            await asyncio.gather(checks_task, return_exceptions=True)
            if pool is not None:
                self._close_pool(pool)

        if failures:
            raise failures[0]

        if checks_task in done:
            error = checks_task.exception()
            if error is not None:
                raise error
            return

        if stopped in done and ctx.error is not None:
            raise ctx.error

        raise DeadlineExceeded(
            f"readiness checks did not complete within {self.ready_timeout}s"
        )

    async def _invoke(
        self,
        check: Check,
        ctx: CheckContext,
        pool: Optional[ThreadPoolExecutor],
    ) -> None:
        if check.is_async:
            await check.check(ctx)
            return

        loop = asyncio.get_running_loop()
        call = functools.partial(contextvars.copy_context().run, check.check, ctx)
        result = await loop.run_in_executor(pool, call)

        # Sync callables wrapping a coroutine function, e.g. lambda ctx: ping(ctx)
        if inspect.isawaitable(result):
            await result

    # ------------------------------------------------------------------------
    # Worker pools
    # ------------------------------------------------------------------------

    def _open_pool(self, size: int) -> ThreadPoolExecutor:
        pool = ThreadPoolExecutor(
            max_workers=size,
            thread_name_prefix="readiness-check",
        )
        with self._pools_lock:
            self._pools.add(pool)
        return pool

    def _close_pool(self, pool: ThreadPoolExecutor) -> None:
        with self._pools_lock:
            self._pools.discard(pool)
        pool.shutdown(wait=False, cancel_futures=True)

    def close(self) -> None:
        """Shut down the worker pools of evaluations still in flight."""
        with self._pools_lock:
            pools, self._pools = self._pools, set()
        for pool in pools:
            pool.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "ReadinessExecutor",
    "DEFAULT_READY_TIMEOUT",
]
