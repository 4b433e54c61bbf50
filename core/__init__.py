# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Shared logging and configuration for health endpoints
# CREATED: 19 OCT 2026
# ============================================================================

from core.config import Defaults, get_defaults
from core.logging import configure_logging, get_logger, log_context

__all__ = [
    # Config
    "Defaults",
    "get_defaults",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]
