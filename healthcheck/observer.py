# ============================================================================
# READINESS ERROR OBSERVERS
# ============================================================================
# STATUS: Core - Failure reporting hook
# PURPOSE: Receive the aggregated failure of a failed readiness evaluation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Error Observers

The readiness endpoint never exposes failure details in its response. An
ErrorObserver receives the aggregated failure instead, exactly once per
failed evaluation, and is responsible for logging or reporting it.

Variants:
- NoopErrorObserver: Default, ignores failures
- LoggingErrorObserver: Logs failures through the application logger
- CallbackErrorObserver: Forwards failures to a plain function
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

from core.logging import get_logger
from healthcheck.errors import ConfigurationError


class ErrorObserver(ABC):
    """Receives the failure of a readiness evaluation."""

    @abstractmethod
    def observe(self, error: BaseException) -> None:
        pass


class NoopErrorObserver(ErrorObserver):
    """Observer that ignores all failures."""

    def observe(self, error: BaseException) -> None:
        return None


class LoggingErrorObserver(ErrorObserver):
    """Observer that logs readiness failures."""

    def __init__(
        self,
        logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None,
        level: int = logging.WARNING,
    ):
        self.logger = logger or get_logger("healthcheck.readiness")
        self.level = level

    def observe(self, error: BaseException) -> None:
        self.logger.log(
            self.level,
            f"Readiness check failed: {type(error).__name__}: {error}",
        )


class CallbackErrorObserver(ErrorObserver):
    """Observer that forwards failures to a function."""

    def __init__(self, callback: Callable[[BaseException], None]):
        self.callback = callback

    def observe(self, error: BaseException) -> None:
        self.callback(error)


def as_observer(
    observer: Union[ErrorObserver, Callable[[BaseException], None], None],
) -> ErrorObserver:
    """
    Coerce None, an ErrorObserver or a function into an ErrorObserver.

    Raises:
        ConfigurationError: If observer is none of the above
    """
    if observer is None:
        return NoopErrorObserver()
    if isinstance(observer, ErrorObserver):
        return observer
    if callable(observer):
        return CallbackErrorObserver(observer)
    raise ConfigurationError(
        f"Expected an ErrorObserver or a callable, got {type(observer).__name__}"
    )


__all__ = [
    "ErrorObserver",
    "NoopErrorObserver",
    "LoggingErrorObserver",
    "CallbackErrorObserver",
    "as_observer",
]
