"""Tests for the tool availability verifier."""

from __future__ import annotations

import pytest

from reasoning_gate.models.core import SystemHealth
from reasoning_gate.registry import InMemoryToolRegistry
from reasoning_gate.verification import ToolAvailabilityVerifier, system_health


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def small_registry() -> InMemoryToolRegistry:
    """Provide three tools, one of them unavailable."""
    registry = InMemoryToolRegistry(["read_file", "ls", "shell"])
    registry.set_available("shell", False)
    return registry


class TestSystemHealth:
    """Tests for the health thresholds."""

    @pytest.mark.parametrize(
        ("available", "total", "expected"),
        [
            (0, 0, SystemHealth.CRITICAL),
            (4, 10, SystemHealth.CRITICAL),
            (5, 10, SystemHealth.DEGRADED),
            (7, 10, SystemHealth.DEGRADED),
            (8, 10, SystemHealth.HEALTHY),
            (3, 3, SystemHealth.HEALTHY),
        ],
    )
    def test_thresholds(self, available, total, expected):
        assert system_health(available, total) == expected


class TestVerifyTool:
    """Tests for single-tool verification."""

    async def test_available_tool(self, small_registry):
        verifier = ToolAvailabilityVerifier(small_registry)
        result = await verifier.verify_tool("read_file")

        assert result.available is True
        assert result.tested is False
        assert result.error is None
        assert result.capabilities.can_read is True
        assert await verifier.is_tool_available("read_file") is True

    async def test_unknown_tool(self, small_registry):
        result = await ToolAvailabilityVerifier(small_registry).verify_tool("nope")
        assert result.available is False
        assert result.error == "Tool not found in registry"
        assert result.recommendations == ["Check tool name spelling", "Verify tool is registered"]

    async def test_unavailable_tool(self, small_registry):
        result = await ToolAvailabilityVerifier(small_registry).verify_tool("shell")
        assert result.available is False
        assert result.error == "Tool reported unavailable by registry"

    async def test_network_and_external_warnings(self):
        registry = InMemoryToolRegistry(["web_fetch", "mcp_search"])
        verifier = ToolAvailabilityVerifier(registry)

        web = await verifier.verify_tool("web_fetch")
        assert web.warnings == ["Network-dependent tool - requires internet connectivity"]

        external = await verifier.verify_tool("mcp_search")
        assert external.warnings == ["External tool - may have variable performance"]
        assert external.recommendations == ["Monitor tool response times"]


class TestCache:
    """Tests for the per-tool result cache."""

    async def test_cached_until_ttl(self, small_registry, clock):
        verifier = ToolAvailabilityVerifier(small_registry, cache_ttl=60.0, clock=clock)
        first = await verifier.verify_tool("ls")
        small_registry.set_available("ls", False)

        clock.now += 59.0
        assert await verifier.verify_tool("ls") is first

        clock.now += 1.0
        expired = await verifier.verify_tool("ls")
        assert expired is not first
        assert expired.available is False

    async def test_refresh_bypasses_cache(self, small_registry, clock):
        verifier = ToolAvailabilityVerifier(small_registry, clock=clock)
        await verifier.verify_tool("ls")
        small_registry.set_available("ls", False)
        assert (await verifier.refresh_tool("ls")).available is False

    async def test_clear_cache(self, small_registry, clock):
        verifier = ToolAvailabilityVerifier(small_registry, clock=clock)
        await verifier.verify_tool("ls")
        small_registry.unregister("ls")
        verifier.clear_cache()
        assert (await verifier.verify_tool("ls")).error == "Tool not found in registry"


class TestVerifyAllTools:
    """Tests for the system report."""

    async def test_degraded_report(self, small_registry):
        verifier = ToolAvailabilityVerifier(small_registry)
        report = await verifier.verify_all_tools()

        assert report.total_tools == 3
        assert report.available_tools == 2
        assert report.failed_tools == 1
        assert report.system_health == SystemHealth.DEGRADED
        assert report.summary == "System Health: DEGRADED - 2/3 tools available (67%)"
        assert report.recommendations == ["Fix 1 failed tools: shell"]
        assert verifier.last_report is report

    async def test_empty_registry(self, empty_registry):
        report = await ToolAvailabilityVerifier(empty_registry).verify_all_tools()
        assert report.system_health == SystemHealth.CRITICAL
        assert report.summary == "System Health: CRITICAL - 0/0 tools available (0%)"
        assert report.recommendations == []

    async def test_available_tool_names(self, small_registry):
        verifier = ToolAvailabilityVerifier(small_registry)
        assert await verifier.get_verified_available_tools() == ["read_file", "ls"]

    async def test_tools_by_capability(self, registry):
        verifier = ToolAvailabilityVerifier(registry)
        registry.set_available("edit", False)
        assert await verifier.get_tools_by_capability("can_write") == ["write_file"]
        assert await verifier.get_tools_by_capability("can_execute") == ["shell"]

    @pytest.mark.parametrize("capability", ["input_types", "can_fly"])
    async def test_unknown_capability(self, registry, capability):
        with pytest.raises(ValueError):
            await ToolAvailabilityVerifier(registry).get_tools_by_capability(capability)

    async def test_system_health_uses_last_report(self, small_registry):
        verifier = ToolAvailabilityVerifier(small_registry)
        assert await verifier.get_system_health() == SystemHealth.DEGRADED

        small_registry.set_available("shell", True)
        assert await verifier.get_system_health() == SystemHealth.DEGRADED

        await verifier.refresh_tool("shell")
        await verifier.verify_all_tools()
        assert await verifier.get_system_health() == SystemHealth.HEALTHY
