# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the health endpoints.
"""

from core.config.defaults import (
    ProbeDefaults,
    TimeoutDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "ProbeDefaults",
    "TimeoutDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
