# ============================================================================
# BUILD INFO
# ============================================================================
# STATUS: Core - Info endpoint payload
# PURPOSE: Collect build metadata and assemble the /infoz JSON payload
# CREATED: 19 OCT 2026
# ============================================================================
"""
Build Info

The info endpoint serves a fixed JSON document assembled once when the
endpoint is enabled:

    {
        "version": "<distribution version or empty>",
        "build_settings": {"python.version": "3.12.3", ...},
        ...caller-supplied fields
    }

"version" and "build_settings" always override caller fields with the
same keys.
"""

import json
import logging
import platform
import sys
from dataclasses import dataclass, field
from importlib import metadata
from typing import Any, Dict, Optional

from healthcheck.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildInfo:
    """Version and build settings of the running application."""
    version: str = ""
    settings: Dict[str, str] = field(default_factory=dict)


def read_build_info(distribution: Optional[str] = None) -> BuildInfo:
    """
    Read build metadata of the running application.

    Args:
        distribution: Installed distribution name to take the version from.
                      The version is empty if None or not installed.
    """
    version = ""
    if distribution:
        try:
            version = metadata.version(distribution)
        except metadata.PackageNotFoundError:
            logger.warning(f"Distribution not installed, info version left empty: {distribution}")

    settings = {
        "python.implementation": platform.python_implementation(),
        "python.version": platform.python_version(),
        "python.compiler": platform.python_compiler(),
        "platform.system": platform.system(),
        "platform.machine": platform.machine(),
        "executable": sys.executable,
    }

    return BuildInfo(version=version, settings=settings)


def build_info_payload(
    info_data: Optional[Dict[str, Any]] = None,
    build_info: Optional[BuildInfo] = None,
) -> bytes:
    """
    Serialize the info document.

    Raises:
        ConfigurationError: If info_data is not JSON serializable
    """
    build_info = build_info or read_build_info()

    data: Dict[str, Any] = dict(info_data or {})
    data["version"] = build_info.version
    data["build_settings"] = dict(build_info.settings)

    try:
        return json.dumps(data).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Info payload is not JSON serializable: {e}") from e


__all__ = [
    "BuildInfo",
    "read_build_info",
    "build_info_payload",
]
