# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for probe routes and timeouts
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the health endpoints. These can be overridden via
environment variables or explicitly when building a HandlerConfig.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults for probe routes.

    Paths are relative to wherever the health router is mounted.
    """
    live_path: str = "/livez"
    ready_path: str = "/readyz"
    info_path: str = "/infoz"

    @classmethod
    def from_env(cls) -> "ProbeDefaults":
        """Create from environment variables."""
        return cls(
            live_path=os.getenv("HEALTH_LIVE_PATH", "/livez"),
            ready_path=os.getenv("HEALTH_READY_PATH", "/readyz"),
            info_path=os.getenv("HEALTH_INFO_PATH", "/infoz"),
        )


@dataclass(frozen=True)
class TimeoutDefaults:
    """
    Defaults for readiness timeouts (seconds).

    A ready timeout of 0 disables the readiness deadline.
    """
    ready_timeout_seconds: float = 10.0

    # Client timeout for URL checks built without an explicit client
    url_check_timeout_seconds: float = 5.0

    @classmethod
    def from_env(cls) -> "TimeoutDefaults":
        """Create from environment variables."""
        return cls(
            ready_timeout_seconds=float(os.getenv("HEALTH_READY_TIMEOUT_SECONDS", 10.0)),
            url_check_timeout_seconds=float(os.getenv("HEALTH_URL_CHECK_TIMEOUT_SECONDS", 5.0)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    probes: ProbeDefaults = field(default_factory=ProbeDefaults)
    timeouts: TimeoutDefaults = field(default_factory=TimeoutDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            probes=ProbeDefaults.from_env(),
            timeouts=TimeoutDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeDefaults",
    "TimeoutDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
