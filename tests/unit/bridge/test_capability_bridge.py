"""
Test suite for RuntimeCapabilityBridge.

Tests discovery order, failure handling, memoization, reset and
concurrent first-call behavior.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from convcheck.bridge import CapabilityState, RuntimeCapabilityBridge
from convcheck.capabilities.standard import StandardConversionCapability
from convcheck.project import ProjectContext
from fixtures.capabilities import (
    CountingProvider,
    FailingProvider,
    FakeCapability,
    FakeEntryPoint,
    FakeProject,
)


class TestCapabilityState:
    """Test CapabilityState snapshots."""

    def test_default_unresolved(self):
        """A fresh state is unresolved and unavailable."""
        state = CapabilityState()

        assert state.resolved is False
        assert state.capability is None
        assert state.available is False


class TestDiscoveryOrder:
    """Test well-known names first, then entry points."""

    def test_first_well_known_provider_wins(self):
        """Well-known names are tried in order; the first that builds wins."""
        first = CountingProvider()
        second = CountingProvider()
        project = FakeProject(symbols={"a:P": first, "b:P": second})
        bridge = RuntimeCapabilityBridge(project, provider_names=["missing:P", "a:P", "b:P"])

        assert bridge.get_capability() is first.capability
        assert project.loaded == ["missing:P", "a:P"]
        assert second.build_count == 0

    def test_provider_class_is_instantiated(self):
        """A provider class is instantiated with no arguments."""
        project = FakeProject(symbols={"std:P": _StandardProviderClass()})
        bridge = RuntimeCapabilityBridge(project, provider_names=["std:P"])

        assert isinstance(bridge.get_capability(), StandardConversionCapability)

    def test_failing_provider_is_skipped(self, caplog):
        """A provider raising during build is logged and skipped."""
        good = CountingProvider()
        project = FakeProject(symbols={"bad:P": FailingProvider(), "good:P": good})
        bridge = RuntimeCapabilityBridge(project, provider_names=["bad:P", "good:P"])

        with caplog.at_level(logging.INFO, logger="convcheck.bridge"):
            capability = bridge.get_capability()

        assert capability is good.capability
        assert bridge.state.provider_id == "counting"
        assert any("bad:P" in r.getMessage() for r in caplog.records)

    def test_non_provider_symbol_is_skipped(self):
        """Objects that are not providers are rejected."""
        project = FakeProject(symbols={"odd:P": object()})
        bridge = RuntimeCapabilityBridge(project, provider_names=["odd:P"])

        assert bridge.get_capability() is None

    def test_entry_points_used_when_no_well_known_provider(self):
        """The entry point scan runs only after well-known names fail."""
        found = CountingProvider()
        project = FakeProject(
            entry_points={
                "convcheck.capabilities": [
                    FakeEntryPoint("broken", ImportError("no dist")),
                    FakeEntryPoint("failing", FailingProvider()),
                    FakeEntryPoint("found", found),
                ]
            }
        )
        bridge = RuntimeCapabilityBridge(
            project,
            provider_names=["missing:P"],
            entry_point_group="convcheck.capabilities",
        )

        assert bridge.get_capability() is found.capability
        assert project.scanned == ["convcheck.capabilities"]

    def test_entry_points_not_scanned_after_success(self):
        """A well-known success stops discovery."""
        project = FakeProject(symbols={"a:P": CountingProvider()})
        bridge = RuntimeCapabilityBridge(
            project,
            provider_names=["a:P"],
            entry_point_group="convcheck.capabilities",
        )

        bridge.get_capability()

        assert project.scanned == []

    def test_discovery_disabled_skips_scan(self):
        """discovery_enabled=False never scans entry points."""
        project = FakeProject(
            entry_points={"grp": [FakeEntryPoint("found", CountingProvider())]}
        )
        bridge = RuntimeCapabilityBridge(
            project,
            entry_point_group="grp",
            discovery_enabled=False,
        )

        assert bridge.get_capability() is None
        assert project.scanned == []

    def test_nothing_found_warns(self, caplog):
        """No provider at all logs a warning and is not an error."""
        bridge = RuntimeCapabilityBridge(FakeProject("p1"), provider_names=["missing:P"])

        with caplog.at_level(logging.WARNING, logger="convcheck.bridge"):
            assert bridge.get_capability() is None

        assert bridge.state.resolved is True
        assert any("p1" in r.getMessage() for r in caplog.records)


class TestMemoization:
    """Test one discovery per session."""

    def test_success_is_memoized(self):
        """The provider builds once."""
        provider = CountingProvider()
        bridge = RuntimeCapabilityBridge(
            FakeProject(symbols={"a:P": provider}), provider_names=["a:P"]
        )

        for _ in range(5):
            bridge.get_capability()

        assert provider.build_count == 1
        assert bridge.discovery_count == 1

    def test_unavailable_is_permanent(self):
        """A failed discovery is not retried until reset."""
        project = FakeProject()
        bridge = RuntimeCapabilityBridge(project, provider_names=["missing:P"])

        assert bridge.has_capability() is False
        project.symbols["missing:P"] = CountingProvider()
        assert bridge.has_capability() is False
        assert bridge.discovery_count == 1

    def test_has_capability_forces_discovery(self):
        """has_capability() resolves on first call."""
        bridge = RuntimeCapabilityBridge(
            FakeProject(symbols={"a:P": CountingProvider()}), provider_names=["a:P"]
        )

        assert bridge.state.resolved is False
        assert bridge.has_capability() is True
        assert bridge.state.resolved is True


class TestReset:
    """Test reset()."""

    def test_reset_rediscovers(self):
        """After reset the next call runs discovery again."""
        project = FakeProject()
        bridge = RuntimeCapabilityBridge(project, provider_names=["late:P"])
        assert bridge.get_capability() is None

        late = CountingProvider()
        project.symbols["late:P"] = late
        bridge.reset()

        assert bridge.state == CapabilityState()
        assert bridge.get_capability() is late.capability
        assert bridge.discovery_count == 2

    def test_reset_notifies_listeners(self):
        """Reset listeners run on every reset."""
        calls = []
        bridge = RuntimeCapabilityBridge(FakeProject())
        bridge.add_reset_listener(lambda: calls.append("cleared"))

        bridge.reset()
        bridge.reset()

        assert calls == ["cleared", "cleared"]


class TestConcurrency:
    """Test concurrent first calls."""

    def test_single_discovery_under_race(self):
        """Concurrent first callers share one discovery outcome."""
        provider = CountingProvider(FakeCapability(), delay=0.05)
        bridge = RuntimeCapabilityBridge(
            FakeProject(symbols={"slow:P": provider}), provider_names=["slow:P"]
        )
        barrier = threading.Barrier(8)

        def call():
            barrier.wait()
            return bridge.get_capability()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: call(), range(8)))

        assert provider.build_count == 1
        assert all(r is provider.capability for r in results)


class TestDefaultProject:
    """Test discovery against the real interpreter."""

    def test_builtin_provider_by_name(self):
        """The standard provider loads through importlib."""
        bridge = RuntimeCapabilityBridge(
            ProjectContext("real"),
            provider_names=["convcheck.capabilities.standard:StandardConversionProvider"],
        )

        assert isinstance(bridge.get_capability(), StandardConversionCapability)
        assert bridge.state.provider_id == "standard"


def _StandardProviderClass():
    from convcheck.capabilities.standard import StandardConversionProvider

    return StandardConversionProvider
