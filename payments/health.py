# ============================================================================
# MOMO BACKEND HEALTH CHECK
# ============================================================================
# STATUS: Payments - Dependency checker for the MoMo backend
# PURPOSE: Expose the payment backend's health to the probe registry
# ============================================================================
"""
MoMo Backend Health Check

The mobile-money backend is an opaque collaborator; the only thing this
service needs from it is reachability. It registers exactly one check,
"momo", as a critical readiness check.
"""

import logging
from typing import Optional

import httpx

from core.config import HealthSettings
from health.checks.http import HttpDependencyChecker
from health.core import Check, CheckCategory
from health.registry import ProbeRegistry

logger = logging.getLogger(__name__)

CHECK_NAME = "momo"


def momo_health_url(settings: HealthSettings) -> str:
    return f"{settings.momo_base_url.rstrip('/')}/{settings.momo_health_path.lstrip('/')}"


class MomoHealthChecker(HttpDependencyChecker):
    """HTTP health check against the MoMo backend's health endpoint."""

    def __init__(
        self,
        settings: HealthSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            url=momo_health_url(settings),
            slow_threshold_ms=settings.readiness_timeout * 1000 / 2,
            transport=transport,
        )


def register_health_check(
    registry: ProbeRegistry,
    settings: HealthSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Check:
    """Register the payment backend's single readiness check."""
    check = registry.register(Check(
        name=CHECK_NAME,
        category=CheckCategory.READINESS,
        checker=MomoHealthChecker(settings, transport=transport),
        critical=True,
        timeout_seconds=settings.timeout_for(CheckCategory.READINESS),
    ))
    logger.info(f"Enabled health check: {CHECK_NAME} ({momo_health_url(settings)})")
    return check


__all__ = [
    "CHECK_NAME",
    "MomoHealthChecker",
    "momo_health_url",
    "register_health_check",
]
