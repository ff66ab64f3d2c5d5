# ============================================================================
# SERVICE SETTINGS
# ============================================================================
# STATUS: Core - Environment-driven configuration
# PURPOSE: Typed settings for the HTTP service and the health subsystem
# ============================================================================
"""
Service Settings

Loads configuration from environment variables with sensible defaults.
Only the variables listed here are recognized; anything else in the
environment is ignored.

Design:
- Immutable dataclasses
- Fail fast: malformed values raise ConfigurationError at startup
"""

import math
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from health.core import CheckCategory


# Checks that can be switched on through HEALTH_ENABLED_CHECKS
KNOWN_CHECKS = ("process", "momo", "datastore")


class ConfigurationError(Exception):
    """Raised when an environment variable holds an unusable value."""
    def __init__(self, variable: str, message: str):
        self.variable = variable
        super().__init__(f"{variable}: {message}")


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(name, f"expected a number, got {raw!r}")
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(name, f"must be a positive finite number, got {raw!r}")
    return value


def _read_list(env: Mapping[str, str], name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = env.get(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class HealthSettings:
    """
    Settings for the health subsystem.

    Per-category default timeouts apply to checks that do not carry
    their own timeout.
    """
    liveness_timeout: float = 1.0
    readiness_timeout: float = 5.0
    detailed_timeout: float = 10.0

    enabled_checks: Tuple[str, ...] = ("process", "momo")

    # Extra wait on top of the slowest check before stragglers are cancelled
    join_grace: float = 0.5

    memory_warn_mb: float = 1024.0

    # Dependency endpoints
    momo_base_url: str = "http://localhost:8080"
    momo_health_path: str = "/health"
    database_url: Optional[str] = None

    def __post_init__(self):
        unknown = [name for name in self.enabled_checks if name not in KNOWN_CHECKS]
        if unknown:
            raise ConfigurationError(
                "HEALTH_ENABLED_CHECKS",
                f"unknown check(s) {', '.join(unknown)}; expected any of {', '.join(KNOWN_CHECKS)}",
            )
        if len(set(self.enabled_checks)) != len(self.enabled_checks):
            raise ConfigurationError("HEALTH_ENABLED_CHECKS", "check listed more than once")
        if "datastore" in self.enabled_checks and not self.database_url:
            raise ConfigurationError("DATABASE_URL", "required when the datastore check is enabled")

    @property
    def category_timeouts(self) -> Dict[CheckCategory, float]:
        return {
            CheckCategory.LIVENESS: self.liveness_timeout,
            CheckCategory.READINESS: self.readiness_timeout,
            CheckCategory.DETAILED: self.detailed_timeout,
        }

    def timeout_for(self, category: CheckCategory) -> float:
        """Default timeout (seconds) for checks in a category."""
        return self.category_timeouts[CheckCategory(category)]

    def is_enabled(self, check_name: str) -> bool:
        return check_name in self.enabled_checks

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "HealthSettings":
        """Create from environment variables."""
        env = os.environ if env is None else env
        return cls(
            liveness_timeout=_read_float(env, "HEALTH_LIVENESS_TIMEOUT", 1.0),
            readiness_timeout=_read_float(env, "HEALTH_READINESS_TIMEOUT", 5.0),
            detailed_timeout=_read_float(env, "HEALTH_DETAILED_TIMEOUT", 10.0),
            enabled_checks=_read_list(env, "HEALTH_ENABLED_CHECKS", ("process", "momo")),
            join_grace=_read_float(env, "HEALTH_JOIN_GRACE", 0.5),
            memory_warn_mb=_read_float(env, "HEALTH_MEMORY_WARN_MB", 1024.0),
            momo_base_url=env.get("MOMO_BASE_URL", "http://localhost:8080"),
            momo_health_path=env.get("MOMO_HEALTH_PATH", "/health"),
            database_url=env.get("DATABASE_URL") or None,
        )


@dataclass(frozen=True)
class ServiceSettings:
    """Configuration for the HTTP service as a whole."""

    service_name: str = "momo-health-service"
    environment: str = "development"

    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: Tuple[str, ...] = ("http://localhost:3000",)

    log_level: str = "INFO"
    log_json: bool = False

    health: HealthSettings = field(default_factory=HealthSettings)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ServiceSettings":
        """Load configuration from environment variables."""
        env = os.environ if env is None else env

        raw_port = env.get("PORT", "3001")
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError("PORT", f"expected an integer, got {raw_port!r}")

        return cls(
            service_name=env.get("SERVICE_NAME", "momo-health-service"),
            environment=env.get("APP_ENV", "development"),
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            cors_origins=_read_list(env, "CORS_ORIGIN", ("http://localhost:3000",)),
            log_level=env.get("LOG_LEVEL", "INFO"),
            log_json=env.get("LOG_FORMAT", "").lower() == "json",
            health=HealthSettings.from_env(env),
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "KNOWN_CHECKS",
    "ConfigurationError",
    "HealthSettings",
    "ServiceSettings",
]
