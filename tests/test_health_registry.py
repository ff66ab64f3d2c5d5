# ============================================================================
# PROBE REGISTRY TESTS
# ============================================================================
# STATUS: Tests - Check registration and lookup
# PURPOSE: Verify uniqueness, category listing and the startup guard
# ============================================================================
"""
Probe Registry Tests

Run with:
    pytest tests/test_health_registry.py -v
"""

import pytest

from health.core import Check, CheckCategory, DependencyChecker, ProbeOutcome
from health.errors import DuplicateCheckError, RegistryFrozenError
from health.registry import ProbeRegistry


class _NoopChecker(DependencyChecker):
    async def check(self, deadline):
        return ProbeOutcome.passed()


def _check(name, category=CheckCategory.READINESS, **kwargs):
    return Check(name=name, category=category, checker=_NoopChecker(), **kwargs)


class TestRegister:
    """Tests for ProbeRegistry.register."""

    def test_register_and_get(self):
        registry = ProbeRegistry()
        check = registry.register(_check("momo"))

        assert registry.get("momo") is check
        assert "momo" in registry
        assert len(registry) == 1

    def test_duplicate_name_rejected(self):
        registry = ProbeRegistry()
        original = registry.register(_check("momo", critical=True))

        with pytest.raises(DuplicateCheckError) as exc_info:
            registry.register(_check("momo", category=CheckCategory.DETAILED, critical=False))

        assert exc_info.value.check_name == "momo"
        # Registry unchanged
        assert len(registry) == 1
        assert registry.get("momo") is original
        assert registry.list(CheckCategory.DETAILED) == []

    def test_duplicate_across_categories_rejected(self):
        registry = ProbeRegistry()
        registry.register(_check("x", category=CheckCategory.LIVENESS))
        with pytest.raises(DuplicateCheckError):
            registry.register(_check("x", category=CheckCategory.READINESS))

    def test_register_after_freeze_rejected(self):
        registry = ProbeRegistry()
        registry.register(_check("a"))
        registry.freeze()

        with pytest.raises(RegistryFrozenError):
            registry.register(_check("b"))

        assert registry.is_frozen
        assert registry.names() == ["a"]


class TestList:
    """Tests for category listing."""

    def test_empty_category(self):
        registry = ProbeRegistry()
        assert registry.list(CheckCategory.READINESS) == []

    def test_list_by_category_in_registration_order(self):
        registry = ProbeRegistry()
        registry.register(_check("b"))
        registry.register(_check("proc", category=CheckCategory.DETAILED))
        registry.register(_check("a"))

        names = [c.name for c in registry.list(CheckCategory.READINESS)]
        assert names == ["b", "a"]

    def test_list_accepts_string_category(self):
        registry = ProbeRegistry()
        registry.register(_check("a"))
        assert [c.name for c in registry.list("readiness")] == ["a"]

    def test_list_many_is_union_without_duplicates(self):
        registry = ProbeRegistry()
        registry.register(_check("momo"))
        registry.register(_check("live", category=CheckCategory.LIVENESS))
        registry.register(_check("proc", category=CheckCategory.DETAILED))
        registry.register(_check("db"))

        checks = registry.list_many([
            CheckCategory.READINESS,
            CheckCategory.DETAILED,
            CheckCategory.READINESS,
        ])
        assert [c.name for c in checks] == ["momo", "proc", "db"]
