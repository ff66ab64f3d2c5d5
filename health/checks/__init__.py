# ============================================================================
# DEPENDENCY CHECKERS
# ============================================================================
# STATUS: Infrastructure - Health check implementations
# PURPOSE: Concrete dependency checkers and their startup registration
# ============================================================================
"""
Dependency Checkers

Concrete DependencyChecker implementations:
- ProcessChecker: process memory / CPU (no I/O)
- HttpDependencyChecker: dependency health endpoint over HTTP
- PostgresChecker: datastore connectivity
- CallableChecker: wraps a plain sync or async function

register_builtin_checks() wires the ones enabled in HealthSettings.
"""

from health.checks.process import ProcessChecker
from health.checks.http import HttpDependencyChecker
from health.checks.database import PostgresChecker
from health.checks.wrappers import CallableChecker
from health.checks.startup import register_builtin_checks

__all__ = [
    "ProcessChecker",
    "HttpDependencyChecker",
    "PostgresChecker",
    "CallableChecker",
    "register_builtin_checks",
]
