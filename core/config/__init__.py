# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration
# PURPOSE: Centralized configuration management
# ============================================================================
"""
Configuration Module

Provides centralized, environment-driven configuration for the service.
"""

from core.config.settings import (
    KNOWN_CHECKS,
    ConfigurationError,
    HealthSettings,
    ServiceSettings,
)

__all__ = [
    "KNOWN_CHECKS",
    "ConfigurationError",
    "HealthSettings",
    "ServiceSettings",
]
