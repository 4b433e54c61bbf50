# ============================================================================
# URL HEALTH CHECKS
# ============================================================================
# STATUS: Infrastructure - HTTP reachability probe
# PURPOSE: Readiness check passing when a URL answers with status < 400
# CREATED: 19 OCT 2026
# ============================================================================
"""
URL Health Checks

check_url(url) issues a GET request; check_http_response(method, url, client)
allows a custom method and httpx.AsyncClient.

Every failure is reported as URLCheckFailed with the cause chained:
- The request cannot be built (bad method, bad URL)
- The request fails (connection refused, DNS, TLS, timeout)
- The response status is >= 400
"""

from typing import Optional

import httpx

from core.config import get_defaults
from core.logging import ComponentType, get_logger
from healthcheck.context import CheckContext
from healthcheck.core import Check
from healthcheck.errors import URLCheckFailed

logger = get_logger(__name__, ComponentType.PROBE)


class URLCheck(Check):
    """
    HTTP reachability check.

    Uses the given client, or a short-lived default client per invocation.
    The request timeout is bounded by the context's remaining time.
    """

    def __init__(
        self,
        url: str,
        method: str = "GET",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.method = method
        self.client = client
        self.name = f"url:{method} {url}"

    async def check(self, ctx: CheckContext) -> None:
        if self.client is not None:
            await self._request(self.client, ctx)
            return

        timeout = get_defaults().timeouts.url_check_timeout_seconds
        async with httpx.AsyncClient(timeout=timeout) as client:
            await self._request(client, ctx)

    async def _request(self, client: httpx.AsyncClient, ctx: CheckContext) -> None:
        remaining = ctx.remaining()

        try:
            if remaining is None:
                request = client.build_request(self.method, self.url)
            else:
                request = client.build_request(self.method, self.url, timeout=remaining)
        except Exception as e:
            raise URLCheckFailed(
                f"failed to create http request for {self.method} {self.url}: {e}"
            ) from e

        try:
            response = await client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise URLCheckFailed(
                f"failed to issue http request for {self.method} {self.url}: {e}"
            ) from e

        try:
            if response.status_code >= 400:
                raise URLCheckFailed(
                    f"got failing status code for {self.method} {self.url}: "
                    f"{response.status_code}"
                )
        finally:
            await response.aclose()

        logger.debug(f"URL check {self.method} {self.url}: {response.status_code}")


def check_http_response(
    method: str,
    url: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Check:
    """
    Create a check issuing a request with method to url using client.

    The check fails if the request fails or the status code is >= 400.
    If client is None a default client is used.
    """
    return URLCheck(url, method=method, client=client)


def check_url(url: str) -> Check:
    """Create a check that GETs url and expects a status code < 400."""
    return check_http_response("GET", url)


__all__ = [
    "URLCheck",
    "check_http_response",
    "check_url",
]
