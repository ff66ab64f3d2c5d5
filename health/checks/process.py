# ============================================================================
# PROCESS HEALTH CHECK
# ============================================================================
# STATUS: Infrastructure - Process diagnostics
# PURPOSE: Memory / CPU snapshot of the running process
# ============================================================================
"""
Process Health Check

Local diagnostics only, no dependency I/O. Warns when resident memory
goes above the configured threshold.
"""

import os
import platform
import sys

import psutil

from health.core import Deadline, DependencyChecker, ProbeOutcome, process_uptime


class ProcessChecker(DependencyChecker):
    """
    Basic process health check.

    Always passes unless the process is using more memory than
    memory_warn_mb, in which case it warns.
    """

    def __init__(self, memory_warn_mb: float = 1024.0):
        self.memory_warn_mb = memory_warn_mb
        self._process = psutil.Process(os.getpid())

    async def check(self, deadline: Deadline) -> ProbeOutcome:
        with self._process.oneshot():
            rss_mb = self._process.memory_info().rss / (1024 * 1024)
            cpu_percent = self._process.cpu_percent(interval=None)
            threads = self._process.num_threads()

        details = {
            "pid": self._process.pid,
            "python_version": sys.version.split()[0],
            "platform": platform.platform(),
            "uptime_seconds": round(process_uptime(), 3),
            "rss_mb": round(rss_mb, 1),
            "cpu_percent": cpu_percent,
            "threads": threads,
        }

        if rss_mb > self.memory_warn_mb:
            return ProbeOutcome.warned(
                f"Resident memory {rss_mb:.0f}MB above {self.memory_warn_mb:.0f}MB",
                **details,
            )

        return ProbeOutcome.passed(**details)


__all__ = [
    "ProcessChecker",
]
