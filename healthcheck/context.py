# ============================================================================
# CHECK CONTEXT
# ============================================================================
# STATUS: Core - Cancellation and deadline signalling
# PURPOSE: Shared signal passed to every check of one readiness evaluation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Check Context

A CheckContext carries a cancellation flag and an optional deadline. It is
safe to share between asyncio tasks and worker threads.

Contexts form a tree:
- A child's deadline is min(parent deadline, child deadline)
- Cancelling a parent cancels all of its children
- Cancelling a child never affects the parent

Usage:
    ctx = CheckContext.background().with_timeout(10.0)

    def blocking_check(ctx: CheckContext) -> None:
        while not probe_ok():
            if ctx.wait(0.5):      # sleeps, wakes early on cancel/deadline
                ctx.raise_if_done()
"""

import threading
import time
from typing import Callable, List, Optional, Type

from healthcheck.errors import Cancelled, DeadlineExceeded, HealthCheckError


class CheckContext:
    """Cancellation/deadline signal shared by concurrently running checks."""

    def __init__(
        self,
        deadline: Optional[float] = None,
        parent: Optional["CheckContext"] = None,
    ):
        """
        Args:
            deadline: Absolute deadline on the time.monotonic() clock
            parent: Context whose cancellation and deadline are inherited
        """
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._error_type: Optional[Type[HealthCheckError]] = None
        self._children: List["CheckContext"] = []
        self._callbacks: List[Callable[[], None]] = []
        self._parent = parent

        if parent is not None and parent.deadline is not None:
            if deadline is None or parent.deadline < deadline:
                deadline = parent.deadline
        self.deadline = deadline

        if parent is not None:
            parent._attach(self)

    @classmethod
    def background(cls) -> "CheckContext":
        """Root context: never cancelled, no deadline."""
        return cls()

    def with_timeout(self, timeout: float) -> "CheckContext":
        """Derive a child context that expires after timeout seconds."""
        return CheckContext(deadline=time.monotonic() + timeout, parent=self)

    def with_cancel(self) -> "CheckContext":
        """Derive a cancellable child context with the parent's deadline."""
        return CheckContext(parent=self)

    # ------------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------------

    def cancel(self) -> None:
        """Cancel this context and all of its children. Idempotent."""
        self._finish(Cancelled)

    def _finish(self, error_type: Type[HealthCheckError]) -> None:
        with self._lock:
            if self._error_type is not None:
                return
            self._error_type = error_type
            self._event.set()
            children, self._children = self._children, []
            callbacks, self._callbacks = self._callbacks, []

        for child in children:
            child._finish(error_type)

        for callback in callbacks:
            callback()

        if self._parent is not None:
            self._parent._detach(self)

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """
        Call callback once the context is cancelled.

        Runs immediately if the context is already done. Callbacks run on
        whichever thread cancels the context. Deadline expiry is detected
        lazily and does not trigger callbacks until the context is observed.
        """
        with self._lock:
            finished = self._error_type is not None
            if not finished:
                self._callbacks.append(callback)
        if finished:
            callback()

    def _attach(self, child: "CheckContext") -> None:
        with self._lock:
            error_type = self._error_type
            if error_type is None:
                self._children.append(child)
        if error_type is not None:
            child._finish(error_type)

    def _detach(self, child: "CheckContext") -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    # ------------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------------

    @property
    def error(self) -> Optional[HealthCheckError]:
        """Cancelled or DeadlineExceeded once the context is done, else None."""
        if self._error_type is None:
            if self.deadline is not None and time.monotonic() >= self.deadline:
                self._finish(DeadlineExceeded)
            else:
                return None
        return self._error_type()

    def done(self) -> bool:
        return self.error is not None

    def remaining(self) -> Optional[float]:
        """Seconds left until the deadline, None if there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the context is done or timeout elapses.

        Returns:
            True if the context is done
        """
        limit = self.remaining()
        if timeout is not None:
            limit = timeout if limit is None else min(limit, timeout)
        self._event.wait(limit)
        return self.done()

    def raise_if_done(self) -> None:
        error = self.error
        if error is not None:
            raise error

    def __repr__(self) -> str:
        state = "active"
        if self._error_type is not None:
            state = self._error_type.__name__
        return f"<CheckContext {state} remaining={self.remaining()}>"


__all__ = [
    "CheckContext",
]
