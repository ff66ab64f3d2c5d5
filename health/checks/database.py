# ============================================================================
# DATASTORE HEALTH CHECK
# ============================================================================
# STATUS: Infrastructure - PostgreSQL connectivity
# PURPOSE: Verify the datastore accepts connections and answers a query
# ============================================================================
"""
Datastore Health Check

Opens a short-lived psycopg async connection and runs SELECT 1. The
connect timeout is derived from the deadline handed in by the aggregator.
"""

import logging
import math
import time
from typing import Awaitable, Callable, Optional

import psycopg
from psycopg import AsyncConnection

from health.core import Deadline, DependencyChecker, ProbeOutcome

logger = logging.getLogger(__name__)

ConnectFunc = Callable[..., Awaitable[AsyncConnection]]


class PostgresChecker(DependencyChecker):
    """
    PostgreSQL connectivity health check.

    Args:
        dsn: libpq connection string or URL
        connect: Connection factory (defaults to AsyncConnection.connect)
    """

    def __init__(self, dsn: str, connect: Optional[ConnectFunc] = None):
        self.dsn = dsn
        self._connect = connect or AsyncConnection.connect

    async def check(self, deadline: Deadline) -> ProbeOutcome:
        # libpq only accepts whole seconds, minimum 1
        connect_timeout = max(1, math.ceil(deadline.remaining()))
        start = time.perf_counter()

        try:
            conn = await self._connect(self.dsn, connect_timeout=connect_timeout)
            async with conn:
                cursor = await conn.execute("SELECT 1")
                row = await cursor.fetchone()
        except psycopg.Error as e:
            return ProbeOutcome.failed(
                f"PostgreSQL connection failed: {type(e).__name__}: {e}",
                latency_ms=(time.perf_counter() - start) * 1000,
            )

        latency_ms = (time.perf_counter() - start) * 1000

        if not row or row[0] != 1:
            return ProbeOutcome.failed(
                "PostgreSQL query returned unexpected result",
                latency_ms=latency_ms,
            )

        return ProbeOutcome.passed(latency_ms=latency_ms)


__all__ = [
    "PostgresChecker",
]
