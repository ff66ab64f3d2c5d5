# ============================================================================
# CALLABLE HEALTH CHECK
# ============================================================================
# STATUS: Infrastructure - Adapter for plain check functions
# PURPOSE: Turn sync or async functions into dependency checkers
# ============================================================================
"""
Callable Health Check

Wraps a plain function so it can be registered like any other checker.
Sync functions run on a small thread pool owned by the checker, so a
blocking probe cannot stall the event loop. A probe that hangs past its
timeout keeps its worker busy, but only this checker's pool fills up.

The function may return:
- a ProbeOutcome (used as-is)
- True / False (pass / fail)
Anything else is handed to the aggregator unchanged and reported there
as a malformed outcome.
"""

import asyncio
import functools
import inspect
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from health.core import Deadline, DependencyChecker, ProbeOutcome


class CallableChecker(DependencyChecker):
    """
    Dependency checker backed by a function.

    Example:
        async def ping_cache():
            await cache.ping()
            return True

        Check(name="cache", category="readiness",
              checker=CallableChecker(ping_cache), critical=False)
    """

    def __init__(self, func: Callable[[], Any], pass_deadline: bool = False, max_workers: int = 2):
        """
        Args:
            func: Function to call (sync or async)
            pass_deadline: Call func(deadline) instead of func()
            max_workers: Threads available to a sync func
        """
        self.func = func
        self.pass_deadline = pass_deadline
        self._thread_pool = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="health-callable",
        )

    async def check(self, deadline: Deadline) -> ProbeOutcome:
        args = (deadline,) if self.pass_deadline else ()

        if inspect.iscoroutinefunction(self.func):
            result = await self.func(*args)
        else:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(self._thread_pool, functools.partial(self.func, *args))
            if inspect.isawaitable(result):
                result = await result

        if isinstance(result, bool):
            return ProbeOutcome.passed() if result else ProbeOutcome.failed("Check returned False")
        return result


__all__ = [
    "CallableChecker",
]
