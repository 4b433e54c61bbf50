# ============================================================================
# HEALTH HANDLER CONFIGURATION
# ============================================================================
# STATUS: Core - Per-handler configuration
# PURPOSE: Route paths, readiness timeout and failure observer of a handler
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Handler Configuration

Each HealthHandler owns one immutable HandlerConfig. Routes are built from
it at construction time, so paths cannot change once requests are served.

Usage:
    config = HandlerConfig.from_defaults(
        ready_timeout=5.0,
        error_observer=LoggingErrorObserver(),
    )
    handler = HealthHandler(config)
"""

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from core.config import Defaults, get_defaults
from healthcheck.errors import ConfigurationError
from healthcheck.executor import DEFAULT_READY_TIMEOUT
from healthcheck.observer import ErrorObserver, NoopErrorObserver, as_observer


@dataclass(frozen=True)
class HandlerConfig:
    """Configuration for a HealthHandler."""

    live_path: str = "/livez"
    ready_path: str = "/readyz"
    info_path: str = "/infoz"

    # Seconds; 0 disables the readiness deadline
    ready_timeout: float = DEFAULT_READY_TIMEOUT

    error_observer: ErrorObserver = field(default_factory=NoopErrorObserver)

    def __post_init__(self):
        for name in ("live_path", "ready_path", "info_path"):
            path = getattr(self, name)
            if not isinstance(path, str) or not path.startswith("/"):
                raise ConfigurationError(f"{name} must start with '/', got {path!r}")

        paths = [self.live_path, self.ready_path, self.info_path]
        if len(set(paths)) != len(paths):
            raise ConfigurationError(f"Health paths must be distinct: {paths}")

        if self.ready_timeout < 0:
            raise ConfigurationError(
                f"ready_timeout must be >= 0, got {self.ready_timeout}"
            )

        object.__setattr__(self, "error_observer", as_observer(self.error_observer))

    @classmethod
    def from_defaults(
        cls,
        defaults: Optional[Defaults] = None,
        **overrides: Any,
    ) -> "HandlerConfig":
        """
        Build a config from environment-driven defaults.

        Args:
            defaults: Defaults to use (global defaults if None)
            **overrides: Explicit field values taking precedence
        """
        defaults = defaults or get_defaults()
        config = cls(
            live_path=defaults.probes.live_path,
            ready_path=defaults.probes.ready_path,
            info_path=defaults.probes.info_path,
            ready_timeout=defaults.timeouts.ready_timeout_seconds,
        )
        if overrides:
            config = replace(config, **overrides)
        return config


__all__ = [
    "HandlerConfig",
]
