# ============================================================================
# VERSION - MOMO HEALTH SERVICE
# ============================================================================
"""
Version information for the MoMo Health Service.

This is the single source of truth for the application version.
Updated manually for each release.
"""
__version__ = "1.0.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Build metadata
BUILD_DATE = "2026-10-19"

SERVICE_IMAGE = f"momo-health-service:v{__version__}"
CODENAME = "MoMo Health"
