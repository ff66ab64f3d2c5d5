# ============================================================================
# HEALTH CHECK ERRORS
# ============================================================================
# STATUS: Infrastructure - Health check error taxonomy
# PURPOSE: Registration-time and execution-time failures
# ============================================================================
"""
Health Check Errors

Registration errors are fatal to startup. Execution errors never leave
the aggregator: they are recovered into a failed CheckResult.
"""


class HealthCheckError(Exception):
    """Base exception for health check errors."""
    pass


class DuplicateCheckError(HealthCheckError):
    """Raised when a check name is already registered."""
    def __init__(self, check_name: str):
        self.check_name = check_name
        super().__init__(f"Health check already registered: {check_name}")


class RegistryFrozenError(HealthCheckError):
    """Raised when registering after startup has completed."""
    def __init__(self, check_name: str):
        self.check_name = check_name
        super().__init__(f"Registry is frozen, cannot register: {check_name}")


class CheckTimeoutError(HealthCheckError):
    """A check did not complete within its timeout."""
    def __init__(self, check_name: str, timeout_seconds: float):
        self.check_name = check_name
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Timeout after {timeout_seconds}s")


class CheckExecutionError(HealthCheckError):
    """A checker raised, or returned something other than a ProbeOutcome."""
    def __init__(self, check_name: str, reason: str, cause: Exception = None):
        self.check_name = check_name
        self.reason = reason
        self.cause = cause
        super().__init__(reason)


__all__ = [
    "HealthCheckError",
    "DuplicateCheckError",
    "RegistryFrozenError",
    "CheckTimeoutError",
    "CheckExecutionError",
]
