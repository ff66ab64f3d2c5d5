# ============================================================================
# PROBE REGISTRY
# ============================================================================
# STATUS: Infrastructure - Health check registration
# PURPOSE: Hold registered checks, indexed by category
# ============================================================================
"""
Probe Registry

Holds the checks the aggregator runs. Populated once during startup,
then frozen and only read per request, so no locking is needed.

Usage:
    registry = ProbeRegistry()
    registry.register(Check(name="momo", category="readiness", checker=...))
    registry.freeze()

    checks = registry.list(CheckCategory.READINESS)
"""

import logging
from typing import Dict, Iterable, List, Optional

from health.core import Check, CheckCategory
from health.errors import DuplicateCheckError, RegistryFrozenError

logger = logging.getLogger(__name__)


class ProbeRegistry:
    """
    Registry of health checks.

    Checks keep their registration order; every listing returns them
    in that order so reports are stable.
    """

    def __init__(self):
        self._checks: Dict[str, Check] = {}
        self._frozen = False

    def register(self, check: Check) -> Check:
        """
        Register a check.

        Raises:
            DuplicateCheckError: If a check with the same name exists
            RegistryFrozenError: If startup has already completed
        """
        if self._frozen:
            raise RegistryFrozenError(check.name)
        if check.name in self._checks:
            raise DuplicateCheckError(check.name)

        self._checks[check.name] = check
        logger.debug(
            f"Registered health check: {check.name} "
            f"(category={check.category.value}, critical={check.critical}, "
            f"timeout={check.timeout_seconds}s)"
        )
        return check

    def list(self, category: CheckCategory) -> List[Check]:
        """Checks for one category, in registration order."""
        category = CheckCategory(category)
        return [c for c in self._checks.values() if c.category == category]

    def list_many(self, categories: Iterable[CheckCategory]) -> List[Check]:
        """Checks belonging to any of the given categories, each once."""
        wanted = {CheckCategory(c) for c in categories}
        return [c for c in self._checks.values() if c.category in wanted]

    def get(self, name: str) -> Optional[Check]:
        """Get check by name."""
        return self._checks.get(name)

    def names(self) -> List[str]:
        return list(self._checks)

    def freeze(self) -> None:
        """Close registration; called once startup wiring is done."""
        self._frozen = True
        logger.info(f"Probe registry frozen with {len(self._checks)} checks")

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, name: str) -> bool:
        return name in self._checks


__all__ = [
    "ProbeRegistry",
]
