# ============================================================================
# DEPENDENCY CHECKER TESTS
# ============================================================================
# STATUS: Tests - Concrete dependency checkers
# PURPOSE: Verify HTTP, PostgreSQL, process and callable checkers
# ============================================================================
"""
Dependency Checker Tests

HTTP checks use httpx.MockTransport and PostgreSQL checks use a fake
connection factory, no real network or database traffic.

Run with:
    pytest tests/test_checks.py -v
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import psycopg
import pytest

from core.config import HealthSettings
from health.checks import (
    CallableChecker,
    HttpDependencyChecker,
    PostgresChecker,
    ProcessChecker,
    register_builtin_checks,
)
from health.core import CheckCategory, Deadline, HealthStatus, ProbeOutcome
from health.executor import HealthAggregator
from health.registry import ProbeRegistry
from payments.health import CHECK_NAME, MomoHealthChecker, momo_health_url, register_health_check


# ============================================================================
# HELPERS
# ============================================================================

def _run(checker, seconds=5.0):
    return asyncio.run(checker.check(Deadline.after(seconds)))


def _transport(status_code=200, json_data=None, error=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if error is not None:
            raise error(f"simulated {error.__name__}", request=request)
        return httpx.Response(status_code, json=json_data if json_data is not None else {"status": "ok"})
    return httpx.MockTransport(handler)


def _fake_connect(row=(1,), error=None):
    """Build a connect() double returning a fake psycopg AsyncConnection."""
    cursor = MagicMock()
    cursor.fetchone = AsyncMock(return_value=row)

    conn = MagicMock()
    conn.execute = AsyncMock(return_value=cursor)
    conn.__aenter__ = AsyncMock(return_value=conn)
    conn.__aexit__ = AsyncMock(return_value=False)

    connect = AsyncMock(return_value=conn)
    if error is not None:
        connect.side_effect = error
    return connect, conn


# ============================================================================
# HTTP CHECKER
# ============================================================================

class TestHttpDependencyChecker:
    """Tests for HttpDependencyChecker."""

    def test_2xx_passes(self):
        checker = HttpDependencyChecker("http://momo/health", transport=_transport(200))
        outcome = _run(checker)

        assert outcome.status == HealthStatus.PASS
        assert outcome.latency_ms is not None
        assert outcome.details["status_code"] == 200
        assert outcome.details["url"] == "http://momo/health"

    def test_5xx_fails(self):
        checker = HttpDependencyChecker("http://momo/health", transport=_transport(502))
        outcome = _run(checker)

        assert outcome.status == HealthStatus.FAIL
        assert "502" in outcome.error

    def test_connection_error_fails(self):
        checker = HttpDependencyChecker("http://momo/health", transport=_transport(error=httpx.ConnectError))
        outcome = _run(checker)

        assert outcome.status == HealthStatus.FAIL
        assert "Cannot connect" in outcome.error

    def test_timeout_fails(self):
        checker = HttpDependencyChecker("http://momo/health", transport=_transport(error=httpx.ReadTimeout))
        outcome = _run(checker)

        assert outcome.status == HealthStatus.FAIL
        assert "Timed out" in outcome.error

    def test_slow_response_warns(self):
        checker = HttpDependencyChecker(
            "http://momo/health",
            slow_threshold_ms=0.0,
            transport=_transport(200),
        )
        outcome = _run(checker)

        assert outcome.status == HealthStatus.WARN
        assert "Slow response" in outcome.error

    @pytest.mark.parametrize("body_status", ["degraded", "warn"])
    def test_degraded_body_status_warns(self, body_status):
        checker = HttpDependencyChecker(
            "http://momo/health",
            transport=_transport(200, {"status": body_status}),
        )
        outcome = _run(checker)

        assert outcome.status == HealthStatus.WARN
        assert body_status in outcome.error

    @pytest.mark.parametrize("body_status", ["fail", "down", "unhealthy", "ERROR"])
    def test_unhealthy_body_status_fails(self, body_status):
        checker = HttpDependencyChecker(
            "http://momo/health",
            transport=_transport(200, {"status": body_status}),
        )
        outcome = _run(checker)

        assert outcome.status == HealthStatus.FAIL
        assert body_status.lower() in outcome.error
        assert outcome.details["status_code"] == 200

    def test_non_json_body_passes(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="OK"))
        checker = HttpDependencyChecker("http://momo/health", transport=transport)
        assert _run(checker).status == HealthStatus.PASS


# ============================================================================
# POSTGRES CHECKER
# ============================================================================

class TestPostgresChecker:
    """Tests for PostgresChecker with a fake connection factory."""

    def test_select_one_passes(self):
        connect, conn = _fake_connect()
        checker = PostgresChecker("postgresql://localhost/momo", connect=connect)

        outcome = _run(checker, seconds=3.0)

        assert outcome.status == HealthStatus.PASS
        conn.execute.assert_awaited_once_with("SELECT 1")
        _, kwargs = connect.call_args
        assert kwargs["connect_timeout"] == 3

    def test_connect_timeout_is_at_least_one_second(self):
        connect, _ = _fake_connect()
        checker = PostgresChecker("postgresql://localhost/momo", connect=connect)

        _run(checker, seconds=0.2)

        _, kwargs = connect.call_args
        assert kwargs["connect_timeout"] == 1

    def test_connection_error_fails(self):
        connect, _ = _fake_connect(error=psycopg.OperationalError("could not connect to server"))
        checker = PostgresChecker("postgresql://localhost/momo", connect=connect)

        outcome = _run(checker)

        assert outcome.status == HealthStatus.FAIL
        assert "could not connect" in outcome.error

    def test_unexpected_row_fails(self):
        connect, _ = _fake_connect(row=None)
        checker = PostgresChecker("postgresql://localhost/momo", connect=connect)

        outcome = _run(checker)

        assert outcome.status == HealthStatus.FAIL
        assert "unexpected result" in outcome.error


# ============================================================================
# PROCESS CHECKER
# ============================================================================

class TestProcessChecker:
    """Tests for ProcessChecker (reads the real test process)."""

    def test_passes_under_threshold(self):
        outcome = _run(ProcessChecker(memory_warn_mb=1024 * 1024))

        assert outcome.status == HealthStatus.PASS
        assert outcome.details["rss_mb"] > 0
        assert "pid" in outcome.details

    def test_warns_over_threshold(self):
        outcome = _run(ProcessChecker(memory_warn_mb=0.001))

        assert outcome.status == HealthStatus.WARN
        assert "Resident memory" in outcome.error


# ============================================================================
# CALLABLE CHECKER
# ============================================================================

class TestCallableChecker:
    """Tests for CallableChecker."""

    def test_sync_true_passes(self):
        assert _run(CallableChecker(lambda: True)).status == HealthStatus.PASS

    def test_sync_false_fails(self):
        outcome = _run(CallableChecker(lambda: False))
        assert outcome.status == HealthStatus.FAIL
        assert outcome.error == "Check returned False"

    def test_async_outcome_passthrough(self):
        async def probe():
            return ProbeOutcome.warned("lagging")

        outcome = _run(CallableChecker(probe))
        assert outcome.status == HealthStatus.WARN

    def test_deadline_is_passed_when_requested(self):
        seen = {}

        def probe(deadline):
            seen["remaining"] = deadline.remaining()
            return True

        _run(CallableChecker(probe, pass_deadline=True), seconds=4.0)
        assert 3.0 < seen["remaining"] <= 4.0

    def test_sync_function_runs_on_own_pool(self):
        import threading

        seen = {}

        def probe():
            seen["thread"] = threading.current_thread().name
            return True

        assert _run(CallableChecker(probe)).status == HealthStatus.PASS
        assert seen["thread"].startswith("health-callable")

    def test_garbage_is_reported_as_malformed_by_aggregator(self):
        from health.core import Check

        registry = ProbeRegistry()
        registry.register(Check(name="legacy", category="readiness", checker=CallableChecker(lambda: "OK")))
        report = asyncio.run(HealthAggregator(registry).run(CheckCategory.READINESS))

        assert report.get("legacy").status == HealthStatus.FAIL
        assert "Malformed outcome" in report.get("legacy").error

    def test_blocking_sync_function_is_bounded(self):
        import threading
        from health.core import Check

        release = threading.Event()

        def blocking():
            release.wait(5.0)
            return True

        registry = ProbeRegistry()
        registry.register(Check(name="blocking", category="readiness",
                                checker=CallableChecker(blocking), timeout_seconds=0.2))
        aggregator = HealthAggregator(registry, join_grace=0.2)

        async def scenario():
            try:
                return await aggregator.run(CheckCategory.READINESS)
            finally:
                # Let the worker thread finish so asyncio.run can shut down
                release.set()

        report = asyncio.run(scenario())

        assert report.get("blocking").status == HealthStatus.FAIL
        assert "timeout" in report.get("blocking").error.lower()


# ============================================================================
# STARTUP REGISTRATION
# ============================================================================

class TestRegistration:
    """Tests for register_builtin_checks and the payments registration."""

    def test_builtin_defaults(self):
        registry = ProbeRegistry()
        registered = register_builtin_checks(registry, HealthSettings())

        assert [c.name for c in registered] == ["process"]
        process = registry.get("process")
        assert process.category == CheckCategory.DETAILED
        assert process.critical is False
        assert process.timeout_seconds == 10.0

    def test_datastore_enabled(self):
        settings = HealthSettings(
            enabled_checks=("datastore",),
            database_url="postgresql://localhost/momo",
            readiness_timeout=3.0,
        )
        registry = ProbeRegistry()
        register_builtin_checks(registry, settings)

        datastore = registry.get("datastore")
        assert registry.names() == ["datastore"]
        assert datastore.category == CheckCategory.READINESS
        assert datastore.critical is True
        assert datastore.timeout_seconds == 3.0
        assert isinstance(datastore.checker, PostgresChecker)

    def test_payments_registers_one_critical_readiness_check(self):
        registry = ProbeRegistry()
        check = register_health_check(registry, HealthSettings())

        assert registry.names() == [CHECK_NAME]
        assert check.category == CheckCategory.READINESS
        assert check.critical is True
        assert isinstance(check.checker, MomoHealthChecker)

    def test_momo_url_join(self):
        settings = HealthSettings(momo_base_url="http://momo:8080/", momo_health_path="status")
        assert momo_health_url(settings) == "http://momo:8080/status"

    def test_momo_reporting_fail_fails_readiness(self):
        registry = ProbeRegistry()
        register_health_check(registry, HealthSettings(), transport=_transport(200, {"status": "fail"}))
        report = asyncio.run(HealthAggregator(registry).run(CheckCategory.READINESS))

        assert report.status == HealthStatus.FAIL
        assert report.get("momo").status == HealthStatus.FAIL

    def test_momo_check_through_aggregator(self):
        registry = ProbeRegistry()
        register_health_check(registry, HealthSettings(), transport=_transport(503))
        report = asyncio.run(HealthAggregator(registry).run(CheckCategory.READINESS))

        assert report.status == HealthStatus.FAIL
        assert "503" in report.get("momo").error
