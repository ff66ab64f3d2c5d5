# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Infrastructure - FastAPI health check endpoints
# PURPOSE: Orchestrator probes and health monitoring endpoints
# ============================================================================
"""
Health Check Router

Four endpoints, each with its own contract:

    GET /health           - Basic ping. No dependency I/O, always 200.

    GET /health/live      - Liveness probe. Same contract as /health: a
                            dependency outage must never get a healthy
                            process restarted.

    GET /health/ready     - Readiness probe. Runs the readiness checks.
                            200 on pass/warn, 503 on fail.

    GET /health/detailed  - Full diagnostics. Runs readiness + detailed
                            checks and adds static service info. Always
                            200; monitoring reads the status from the body.

The render_* functions hold the contracts and return (status_code, body);
the router only awaits the aggregator and wraps the result.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from health.core import (
    CheckCategory,
    HealthReport,
    HealthStatus,
    isoformat_z,
    process_uptime,
    utc_now,
)
from health.executor import HealthAggregator

# Probes must always see a fresh answer
_NO_CACHE = {"Cache-Control": "no-store"}

DETAILED_CATEGORIES = (CheckCategory.READINESS, CheckCategory.DETAILED)


@dataclass(frozen=True)
class ServiceInfo:
    """Static diagnostics embedded in basic and detailed responses."""
    name: str
    version: str
    build_date: str
    environment: str = "development"


def _status_to_http_code(status: HealthStatus) -> int:
    """Map readiness status to HTTP status code."""
    return {
        HealthStatus.PASS: 200,
        HealthStatus.WARN: 200,
        HealthStatus.FAIL: 503,  # Service Unavailable
    }[status]


def render_basic(service: ServiceInfo) -> Tuple[int, Dict[str, Any]]:
    """Process-alive answer shared by /health and /health/live."""
    return 200, {
        "status": HealthStatus.PASS.value,
        "service": service.name,
        "version": service.version,
        "timestamp": isoformat_z(utc_now()),
        "uptime": round(process_uptime(), 3),
    }


def render_readiness(report: HealthReport) -> Tuple[int, Dict[str, Any]]:
    return _status_to_http_code(report.status), report.to_dict()


def render_detailed(report: HealthReport, service: ServiceInfo) -> Tuple[int, Dict[str, Any]]:
    body = report.to_dict()
    body.update({
        "service": service.name,
        "version": service.version,
        "buildDate": service.build_date,
        "environment": service.environment,
        "timestamp": isoformat_z(utc_now()),
        "summary": report.summary(),
    })
    return 200, body


def create_health_router(aggregator: HealthAggregator, service: ServiceInfo) -> APIRouter:
    """
    Build the /health router around an aggregator.

    Args:
        aggregator: Aggregator over the application's probe registry
        service: Static service info for basic and detailed bodies
    """
    router = APIRouter(prefix="/health", tags=["Health"])

    def _respond(result: Tuple[int, Dict[str, Any]]) -> JSONResponse:
        status_code, body = result
        return JSONResponse(status_code=status_code, content=body, headers=_NO_CACHE)

    @router.get("")
    async def basic_health():
        """Basic health check. Process alive, no dependency I/O."""
        return _respond(render_basic(service))

    @router.get("/live")
    async def liveness_probe():
        """
        Liveness probe.

        No external checks - just confirms the process is responsive.
        """
        return _respond(render_basic(service))

    @router.get("/ready")
    async def readiness_probe():
        """
        Readiness probe.

        Runs the readiness checks (payment backend, datastore). Returns
        503 only when a critical check fails.
        """
        report = await aggregator.run(CheckCategory.READINESS)
        return _respond(render_readiness(report))

    @router.get("/detailed")
    async def detailed_health():
        """
        Detailed health report.

        Runs readiness and detailed checks and embeds service info.
        Always 200.
        """
        report = await aggregator.run_many(DETAILED_CATEGORIES)
        return _respond(render_detailed(report, service))

    return router


__all__ = [
    "ServiceInfo",
    "render_basic",
    "render_readiness",
    "render_detailed",
    "create_health_router",
]
