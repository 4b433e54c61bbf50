# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Core - Readiness check registration
# PURPOSE: Thread-safe, append-only collection of readiness checks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Registry

Holds the readiness checks of one handler. Checks can be registered at any
time, including while a readiness evaluation is running.

Concurrency:
- The registry stores an immutable tuple and replaces it on every append
  (copy-on-write)
- Writers hold the lock only while building and swapping the tuple
- Readers hold the lock only while reading the tuple reference, so an
  evaluation iterates a snapshot that later appends never touch

Usage:
    registry = CheckRegistry()
    registry.register(check_url("http://localhost:8080/"))
    registry.register(lambda ctx: None)

    checks = registry.snapshot()
"""

import threading
from typing import Iterator, Tuple, Union

from core.logging import ComponentType, get_logger
from healthcheck.core import Check, CheckCallable, as_check

logger = get_logger(__name__, ComponentType.REGISTRY)


class CheckRegistry:
    """
    Registry for readiness checks.

    Insertion order is preserved but carries no meaning; checks always
    run independently of each other. The registry never shrinks.
    """

    def __init__(self):
        self._checks: Tuple[Check, ...] = ()
        self._lock = threading.Lock()

    def register(self, check: Union[Check, CheckCallable]) -> Check:
        """
        Register a readiness check.

        Args:
            check: Check instance or bare (sync or async) function

        Returns:
            The registered Check

        Raises:
            ConfigurationError: If check is neither a Check nor callable
        """
        check = as_check(check)

        with self._lock:
            self._checks = self._checks + (check,)
            count = len(self._checks)

        logger.debug(f"Registered readiness check: {check.name} ({count} total)")
        return check

    def snapshot(self) -> Tuple[Check, ...]:
        """Get the checks registered at this moment."""
        with self._lock:
            return self._checks

    def __len__(self) -> int:
        return len(self.snapshot())

    def __iter__(self) -> Iterator[Check]:
        return iter(self.snapshot())


__all__ = [
    "CheckRegistry",
]
