# ============================================================================
# HTTP DEPENDENCY HEALTH CHECK
# ============================================================================
# STATUS: Infrastructure - HTTP dependency connectivity
# PURPOSE: Probe a dependency's health endpoint over HTTP
# ============================================================================
"""
HTTP Dependency Health Check

GETs a health URL and maps the answer:
- connection error, timeout, non-2xx: fail
- 2xx slower than the latency budget: warn
- 2xx: pass

If the dependency answers with a JSON body carrying a "status" field,
fail/down/unhealthy/error is reported as a failure and any other value
outside pass/ok/healthy/up as a warning.
"""

import logging
import time
from typing import Optional

import httpx

from health.core import Deadline, DependencyChecker, ProbeOutcome

logger = logging.getLogger(__name__)

_HEALTHY_BODY_STATUSES = {"pass", "ok", "healthy", "up"}
_FAILED_BODY_STATUSES = {"fail", "down", "unhealthy", "error"}


class HttpDependencyChecker(DependencyChecker):
    """
    Health check against an HTTP endpoint.

    Args:
        url: Absolute URL of the dependency's health endpoint
        slow_threshold_ms: Latency above which a 2xx is reported as warn
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        url: str,
        slow_threshold_ms: float = 2000.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.slow_threshold_ms = slow_threshold_ms
        self._transport = transport

    async def check(self, deadline: Deadline) -> ProbeOutcome:
        timeout = max(deadline.remaining(), 0.001)
        start = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.get(self.url)
        except httpx.TimeoutException:
            return ProbeOutcome.failed(
                f"Timed out after {timeout:.2f}s",
                latency_ms=(time.perf_counter() - start) * 1000,
                url=self.url,
            )
        except httpx.HTTPError as e:
            return ProbeOutcome.failed(
                f"Cannot connect: {type(e).__name__}: {e}",
                latency_ms=(time.perf_counter() - start) * 1000,
                url=self.url,
            )

        latency_ms = (time.perf_counter() - start) * 1000

        if not response.is_success:
            return ProbeOutcome.failed(
                f"Returned status {response.status_code}",
                latency_ms=latency_ms,
                url=self.url,
                status_code=response.status_code,
            )

        body_status = self._body_status(response)
        if body_status in _FAILED_BODY_STATUSES:
            return ProbeOutcome.failed(
                f"Reports status {body_status!r}",
                latency_ms=latency_ms,
                url=self.url,
                status_code=response.status_code,
            )
        if body_status is not None and body_status not in _HEALTHY_BODY_STATUSES:
            return ProbeOutcome.warned(
                f"Reports status {body_status!r}",
                latency_ms=latency_ms,
                url=self.url,
                status_code=response.status_code,
            )

        if latency_ms > self.slow_threshold_ms:
            return ProbeOutcome.warned(
                f"Slow response: {latency_ms:.0f}ms (budget {self.slow_threshold_ms:.0f}ms)",
                latency_ms=latency_ms,
                url=self.url,
                status_code=response.status_code,
            )

        return ProbeOutcome.passed(
            latency_ms=latency_ms,
            url=self.url,
            status_code=response.status_code,
        )

    @staticmethod
    def _body_status(response: httpx.Response) -> Optional[str]:
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict) and isinstance(data.get("status"), str):
            return data["status"].lower()
        return None


__all__ = [
    "HttpDependencyChecker",
]
