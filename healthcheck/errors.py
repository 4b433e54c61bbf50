# ============================================================================
# HEALTH CHECK ERRORS
# ============================================================================
# STATUS: Core - Error taxonomy
# PURPOSE: Exceptions raised by checks, probes and readiness evaluation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Errors

Readiness evaluation surfaces exactly one failure per evaluation. Bundled
probes normalize their failures to one exception type each and chain the
underlying cause (``raise URLCheckFailed(...) from e``).
"""


class HealthCheckError(Exception):
    """Base class for health check errors."""


class Cancelled(HealthCheckError):
    """Raised when a check observes a cancelled context."""

    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class DeadlineExceeded(HealthCheckError, TimeoutError):
    """Raised when the bounded readiness context expires."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class URLCheckFailed(HealthCheckError):
    """URL check failed."""


class PingCheckFailed(HealthCheckError):
    """Ping check failed."""


class ConfigurationError(HealthCheckError):
    """Invalid configuration detected while setting up health checks."""


__all__ = [
    "HealthCheckError",
    "Cancelled",
    "DeadlineExceeded",
    "URLCheckFailed",
    "PingCheckFailed",
    "ConfigurationError",
]
