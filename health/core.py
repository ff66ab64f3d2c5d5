# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Infrastructure - Base types for health checks
# PURPOSE: Dependency checker interface, check definitions and result types
# ============================================================================
"""
Health Check Core Types

Defines the dependency checker interface and the value types that flow
through a health aggregation run.

Status derivation:
- fail: at least one critical check failed
- warn: no critical failure, but a non-critical check warned or failed
- pass: everything else (a critical check that only warns does not
        degrade the overall status)

Categories:
- liveness: process-local checks only, never dependency I/O
- readiness: dependency reachability (payment backend, datastore)
- detailed: diagnostics that only the detailed report runs
"""

import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple


_PROCESS_STARTED = time.monotonic()


def process_uptime() -> float:
    """Seconds since this module was first imported (process start)."""
    return time.monotonic() - _PROCESS_STARTED


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_z(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


class HealthStatus(str, Enum):
    """Health check status values."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class CheckCategory(str, Enum):
    """Which probe endpoint a check belongs to."""
    LIVENESS = "liveness"
    READINESS = "readiness"
    DETAILED = "detailed"


@dataclass(frozen=True)
class Deadline:
    """
    Absolute deadline for one check execution.

    Checkers use remaining() to size their own I/O timeouts. The
    aggregator enforces the same deadline from the outside.
    """
    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(expires_at=time.monotonic() + seconds)

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at


@dataclass(frozen=True)
class ProbeOutcome:
    """
    What a dependency checker reports.

    latency_ms is optional; when the checker does not measure it the
    aggregator uses its own wall-clock measurement.
    """
    status: HealthStatus
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def passed(cls, latency_ms: float = None, **details) -> "ProbeOutcome":
        return cls(status=HealthStatus.PASS, latency_ms=latency_ms, details=details)

    @classmethod
    def warned(cls, error: str, latency_ms: float = None, **details) -> "ProbeOutcome":
        return cls(status=HealthStatus.WARN, latency_ms=latency_ms, error=error, details=details)

    @classmethod
    def failed(cls, error: str, latency_ms: float = None, **details) -> "ProbeOutcome":
        return cls(status=HealthStatus.FAIL, latency_ms=latency_ms, error=error, details=details)


class DependencyChecker(ABC):
    """
    Capability every external dependency implements to report its health.

    Implementations must finish (or give up) before the deadline and
    should not raise; the aggregator still guards against both.

    Example:
        class CacheChecker(DependencyChecker):
            async def check(self, deadline: Deadline) -> ProbeOutcome:
                try:
                    await cache.ping(timeout=deadline.remaining())
                    return ProbeOutcome.passed()
                except Exception as e:
                    return ProbeOutcome.failed(str(e))
    """

    @abstractmethod
    async def check(self, deadline: Deadline) -> ProbeOutcome:
        """
        Probe the dependency.

        Args:
            deadline: Point in time by which the probe must have finished

        Returns:
            ProbeOutcome with status and optional error/details
        """
        pass


@dataclass(frozen=True)
class Check:
    """
    A registered unit of diagnostic work.

    Attributes:
        name: Unique identifier within the registry
        category: Endpoint category the check runs under
        critical: If True, a failure forces the overall status to fail
        timeout_seconds: Max execution time before the check is failed
        checker: Dependency checker that does the probing
    """
    name: str
    category: CheckCategory
    checker: DependencyChecker
    critical: bool = True
    timeout_seconds: float = 5.0

    def __post_init__(self):
        if not self.name:
            raise ValueError("Check name must not be empty")
        if not math.isfinite(self.timeout_seconds) or self.timeout_seconds <= 0:
            raise ValueError(f"Check {self.name}: timeout must be a positive finite number")
        if not isinstance(self.checker, DependencyChecker):
            raise TypeError(f"Check {self.name}: checker must implement DependencyChecker")
        object.__setattr__(self, "category", CheckCategory(self.category))


@dataclass(frozen=True)
class CheckResult:
    """Result from a single check execution."""
    name: str
    status: HealthStatus
    latency_ms: float = 0.0
    error: Optional[str] = None
    critical: bool = True
    details: Dict[str, Any] = field(default_factory=dict)
    checked_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "name": self.name,
            "status": self.status.value,
            "latencyMs": round(self.latency_ms, 2),
            "critical": self.critical,
        }
        if self.error:
            result["error"] = self.error
        if self.details:
            result["details"] = self.details
        return result


def derive_overall(results: Iterable[CheckResult]) -> HealthStatus:
    """Fold individual results into one overall status."""
    overall = HealthStatus.PASS
    for result in results:
        if result.critical:
            if result.status == HealthStatus.FAIL:
                return HealthStatus.FAIL
        elif result.status != HealthStatus.PASS:
            overall = HealthStatus.WARN
    return overall


@dataclass(frozen=True)
class HealthReport:
    """Immutable snapshot of one aggregation run."""
    status: HealthStatus
    checks: Tuple[CheckResult, ...]
    uptime_seconds: float
    latency_ms: float = 0.0
    generated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def from_results(
        cls,
        results: Sequence[CheckResult],
        uptime_seconds: Optional[float] = None,
    ) -> "HealthReport":
        """Build a report; latency is the critical path (slowest check)."""
        return cls(
            status=derive_overall(results),
            checks=tuple(results),
            uptime_seconds=process_uptime() if uptime_seconds is None else uptime_seconds,
            latency_ms=max((r.latency_ms for r in results), default=0.0),
        )

    def get(self, name: str) -> Optional[CheckResult]:
        for result in self.checks:
            if result.name == name:
                return result
        return None

    def summary(self) -> Dict[str, int]:
        """Count of results per status."""
        counts = {status.value: 0 for status in HealthStatus}
        for result in self.checks:
            counts[result.status.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": self.status.value,
            "generatedAt": isoformat_z(self.generated_at),
            "uptime": round(self.uptime_seconds, 3),
            "latencyMs": round(self.latency_ms, 2),
            "checks": [result.to_dict() for result in self.checks],
        }


__all__ = [
    "HealthStatus",
    "CheckCategory",
    "Deadline",
    "ProbeOutcome",
    "DependencyChecker",
    "Check",
    "CheckResult",
    "HealthReport",
    "derive_overall",
    "process_uptime",
]
