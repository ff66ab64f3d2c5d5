# ============================================================================
# HEALTH AGGREGATOR
# ============================================================================
# STATUS: Infrastructure - Parallel health check execution
# PURPOSE: Execute checks with timeouts and fold them into a report
# ============================================================================
"""
Health Aggregator

Executes the checks of a category with:
- One asyncio task per check, all started at once
- Per-check timeout (a Deadline is handed to the checker and enforced
  from outside with asyncio.wait_for)
- A bounded join: slowest timeout + grace, stragglers are cancelled
- Deterministic fold in registration order

No check can abort the run: timeouts, exceptions and malformed
outcomes all become failed CheckResults.
"""

import asyncio
import time
from typing import Iterable, List, Optional

from core.logging import get_logger, log_context
from health.core import (
    Check,
    CheckCategory,
    CheckResult,
    Deadline,
    HealthReport,
    HealthStatus,
    ProbeOutcome,
)
from health.errors import CheckExecutionError, CheckTimeoutError, HealthCheckError
from health.registry import ProbeRegistry

logger = get_logger(__name__)


class HealthAggregator:
    """
    Runs registered checks concurrently and builds HealthReports.

    The registry is passed in explicitly and only read.
    """

    def __init__(
        self,
        registry: ProbeRegistry,
        join_grace: float = 0.5,
    ):
        """
        Initialize aggregator.

        Args:
            registry: Probe registry to read checks from
            join_grace: Extra seconds the join waits beyond the slowest
                check timeout before cancelling what is left
        """
        self.registry = registry
        self.join_grace = join_grace

    async def run(self, category: CheckCategory) -> HealthReport:
        """Run every check of one category."""
        category = CheckCategory(category)
        return await self._run_checks(self.registry.list(category), label=category.value)

    async def run_many(self, categories: Iterable[CheckCategory]) -> HealthReport:
        """Run the checks of several categories as a single report."""
        categories = [CheckCategory(c) for c in categories]
        label = "+".join(c.value for c in categories)
        return await self._run_checks(self.registry.list_many(categories), label=label)

    async def _run_checks(self, checks: List[Check], label: str) -> HealthReport:
        if not checks:
            logger.debug(f"No health checks registered for {label}")
            return HealthReport.from_results([])

        start_time = time.monotonic()

        with log_context(category=label):
            tasks = [
                asyncio.create_task(self._execute_check(check), name=f"health-check:{check.name}")
                for check in checks
            ]
            join_timeout = max(c.timeout_seconds for c in checks) + self.join_grace

            try:
                done, pending = await asyncio.wait(tasks, timeout=join_timeout)
            except asyncio.CancelledError:
                for task in tasks:
                    task.cancel()
                raise

            for task in pending:
                task.cancel()

            results: List[CheckResult] = []
            for check, task in zip(checks, tasks):
                if task in done:
                    results.append(self._collect(check, task, start_time))
                else:
                    logger.warning(f"Health check {check.name} did not finish within the join window")
                    results.append(
                        self._failure(
                            check,
                            CheckTimeoutError(check.name, check.timeout_seconds),
                            (time.monotonic() - start_time) * 1000,
                        )
                    )

            report = HealthReport.from_results(results)

            failed = [r.name for r in results if r.status == HealthStatus.FAIL]
            logger.info(
                f"Health run {label}: {report.status.value} "
                f"({len(results)} checks, {report.latency_ms:.1f}ms)",
                extra={"failed": failed} if failed else None,
            )
            return report

    def _collect(self, check: Check, task: asyncio.Task, start_time: float) -> CheckResult:
        """Read a finished task; _execute_check itself should never raise."""
        try:
            return task.result()
        except Exception as e:
            logger.exception(f"Health check {check.name} task crashed")
            return self._failure(
                check,
                CheckExecutionError(check.name, f"{type(e).__name__}: {e}", cause=e),
                (time.monotonic() - start_time) * 1000,
            )

    async def _execute_check(self, check: Check) -> CheckResult:
        """Execute a single check with timeout."""
        start_time = time.monotonic()
        deadline = Deadline.after(check.timeout_seconds)

        with log_context(check=check.name):
            try:
                outcome = await asyncio.wait_for(
                    check.checker.check(deadline),
                    timeout=check.timeout_seconds,
                )
                if not isinstance(outcome, ProbeOutcome):
                    raise CheckExecutionError(
                        check.name,
                        f"Malformed outcome: expected ProbeOutcome, got {type(outcome).__name__}",
                    )
                try:
                    status = HealthStatus(outcome.status)
                except ValueError:
                    raise CheckExecutionError(check.name, f"Malformed outcome: unknown status {outcome.status!r}")

            except asyncio.TimeoutError:
                duration_ms = (time.monotonic() - start_time) * 1000
                logger.warning(f"Health check {check.name} timed out after {check.timeout_seconds}s")
                return self._failure(check, CheckTimeoutError(check.name, check.timeout_seconds), duration_ms)

            except HealthCheckError as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                logger.warning(f"Health check {check.name} failed: {e}")
                return self._failure(check, e, duration_ms)

            except Exception as e:
                duration_ms = (time.monotonic() - start_time) * 1000
                logger.error(f"Health check {check.name} raised: {type(e).__name__}: {e}")
                error = CheckExecutionError(check.name, f"{type(e).__name__}: {e}", cause=e)
                return self._failure(check, error, duration_ms)

            duration_ms = (time.monotonic() - start_time) * 1000
            latency_ms = outcome.latency_ms if outcome.latency_ms is not None else duration_ms

            if status == HealthStatus.FAIL:
                logger.warning(f"Health check {check.name}: fail ({outcome.error})")
            else:
                logger.debug(f"Health check {check.name}: {status.value} ({latency_ms:.1f}ms)")

            return CheckResult(
                name=check.name,
                status=status,
                latency_ms=latency_ms,
                error=outcome.error,
                critical=check.critical,
                details=dict(outcome.details),
            )

    @staticmethod
    def _failure(check: Check, error: HealthCheckError, duration_ms: float) -> CheckResult:
        cause = getattr(error, "cause", None)
        return CheckResult(
            name=check.name,
            status=HealthStatus.FAIL,
            latency_ms=duration_ms,
            error=str(error),
            critical=check.critical,
            details={"error_type": type(cause or error).__name__},
        )


__all__ = [
    "HealthAggregator",
]
