# ============================================================================
# PAYMENTS MODULE
# ============================================================================
# STATUS: Payments - Mobile-money collaborator
# PURPOSE: Health capability of the MoMo payment backend
# ============================================================================
"""
Payments Module

The MoMo transaction service is fronted by this backend but treated as
a black box. Its contribution to the health subsystem is one
dependency checker, registered at startup.
"""

from payments.health import MomoHealthChecker, register_health_check

__all__ = [
    "MomoHealthChecker",
    "register_health_check",
]
