# ============================================================================
# BUILT-IN CHECK REGISTRATION
# ============================================================================
# STATUS: Infrastructure - Startup wiring for built-in checks
# PURPOSE: Register the checks switched on by HEALTH_ENABLED_CHECKS
# ============================================================================
"""
Built-in Check Registration

Registers the checks this package ships, according to HealthSettings:
- process: detailed, non-critical (memory / CPU snapshot)
- datastore: readiness, critical (PostgreSQL SELECT 1)

The payment backend check is registered by the payments package itself.
"""

import logging
from typing import List

from core.config import HealthSettings
from health.checks.database import PostgresChecker
from health.checks.process import ProcessChecker
from health.core import Check, CheckCategory
from health.registry import ProbeRegistry

logger = logging.getLogger(__name__)


def register_builtin_checks(registry: ProbeRegistry, settings: HealthSettings) -> List[Check]:
    """
    Register enabled built-in checks.

    Returns:
        The checks that were registered
    """
    registered: List[Check] = []

    if settings.is_enabled("process"):
        registered.append(registry.register(Check(
            name="process",
            category=CheckCategory.DETAILED,
            checker=ProcessChecker(memory_warn_mb=settings.memory_warn_mb),
            critical=False,
            timeout_seconds=settings.timeout_for(CheckCategory.DETAILED),
        )))

    if settings.is_enabled("datastore"):
        registered.append(registry.register(Check(
            name="datastore",
            category=CheckCategory.READINESS,
            checker=PostgresChecker(settings.database_url),
            critical=True,
            timeout_seconds=settings.timeout_for(CheckCategory.READINESS),
        )))

    for check in registered:
        logger.info(f"Enabled health check: {check.name} ({check.category.value})")

    return registered


__all__ = [
    "register_builtin_checks",
]
