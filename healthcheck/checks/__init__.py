# ============================================================================
# BUNDLED HEALTH CHECKS
# ============================================================================
# STATUS: Infrastructure - Ready-made readiness checks
# PURPOSE: URL reachability and connection ping probes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Bundled Health Checks

URL checks:
- check_url: GET a URL, pass on status < 400
- check_http_response: Custom method and httpx.AsyncClient

Ping checks:
- check_ping: Wrap a Pinger / AsyncPinger
- PsycopgPoolPinger / AsyncPsycopgPoolPinger: PostgreSQL pool adapters
"""

from healthcheck.checks.http import URLCheck, check_http_response, check_url
from healthcheck.checks.ping import (
    Pinger,
    AsyncPinger,
    PingCheck,
    AsyncPingCheck,
    check_ping,
    PsycopgPoolPinger,
    AsyncPsycopgPoolPinger,
)

__all__ = [
    # URL
    "URLCheck",
    "check_http_response",
    "check_url",
    # Ping
    "Pinger",
    "AsyncPinger",
    "PingCheck",
    "AsyncPingCheck",
    "check_ping",
    "PsycopgPoolPinger",
    "AsyncPsycopgPoolPinger",
]
