# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Health monitoring subsystem
# PURPOSE: Orchestrator probes and dependency health aggregation
# ============================================================================
"""
Health Check Module

Dependency health aggregation for orchestration tooling:
- /health, /health/live: process alive (no dependency I/O)
- /health/ready: readiness checks, 503 when a critical check fails
- /health/detailed: readiness + detailed checks with diagnostics

Architecture:
- DependencyChecker: capability each dependency implements
- ProbeRegistry: checks by category, frozen after startup
- HealthAggregator: parallel execution with per-check timeouts
- create_health_router: endpoint adapters

Usage:
    from health import ProbeRegistry, HealthAggregator, Check, create_health_router

    registry = ProbeRegistry()
    registry.register(Check(name="cache", category="readiness",
                            checker=MyCacheChecker(), critical=False))
    registry.freeze()

    app.include_router(create_health_router(HealthAggregator(registry), service_info))
"""

from health.core import (
    HealthStatus,
    CheckCategory,
    Deadline,
    ProbeOutcome,
    DependencyChecker,
    Check,
    CheckResult,
    HealthReport,
    derive_overall,
)
from health.errors import (
    HealthCheckError,
    DuplicateCheckError,
    RegistryFrozenError,
    CheckTimeoutError,
    CheckExecutionError,
)
from health.registry import ProbeRegistry
from health.executor import HealthAggregator
from health.router import ServiceInfo, create_health_router

__all__ = [
    # Core types
    "HealthStatus",
    "CheckCategory",
    "Deadline",
    "ProbeOutcome",
    "DependencyChecker",
    "Check",
    "CheckResult",
    "HealthReport",
    "derive_overall",
    # Errors
    "HealthCheckError",
    "DuplicateCheckError",
    "RegistryFrozenError",
    "CheckTimeoutError",
    "CheckExecutionError",
    # Registry / executor
    "ProbeRegistry",
    "HealthAggregator",
    # Router
    "ServiceInfo",
    "create_health_router",
]
