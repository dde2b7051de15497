"""Tool availability verification.

The ToolAvailabilityVerifier reports which registered tools can actually
be used, with their capabilities, and condenses the results into a system
health rating. Results are cached per tool for a fixed TTL.

Health thresholds on the share of available tools:
- below 0.5, or no tools at all: critical
- below 0.8: degraded
- otherwise: healthy
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog

from reasoning_gate.models.core import SystemHealth
from reasoning_gate.models.tools import ToolCapabilities
from reasoning_gate.models.verification import SystemVerificationReport, ToolVerificationResult

if TYPE_CHECKING:
    from reasoning_gate.models.tools import ToolDescriptor
    from reasoning_gate.registry import ToolRegistry

logger = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300.0
CRITICAL_RATIO = 0.5
DEGRADED_RATIO = 0.8
SLOW_TOOL_MS = 5000.0

_NETWORK_TOOLS = frozenset({"web_fetch", "web_search"})


def system_health(available: int, total: int) -> SystemHealth:
    """Rate system health from the number of available tools.

    Examples:
        >>> system_health(9, 10)
        <SystemHealth.HEALTHY: 'healthy'>
        >>> system_health(7, 10)
        <SystemHealth.DEGRADED: 'degraded'>
        >>> system_health(0, 0)
        <SystemHealth.CRITICAL: 'critical'>
    """
    if total == 0:
        return SystemHealth.CRITICAL
    ratio = available / total
    if ratio < CRITICAL_RATIO:
        return SystemHealth.CRITICAL
    if ratio < DEGRADED_RATIO:
        return SystemHealth.DEGRADED
    return SystemHealth.HEALTHY


class ToolAvailabilityVerifier:
    """Verifies tool availability against a registry.

    Examples:
        >>> registry = InMemoryToolRegistry(["read_file", "ls", "shell"])
        >>> registry.set_available("shell", False)
        True
        >>> verifier = ToolAvailabilityVerifier(registry)
        >>> report = await verifier.verify_all_tools()
        >>> report.summary
        'System Health: DEGRADED - 2/3 tools available (67%)'
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the verifier.

        Args:
            registry: Registry whose tools are verified
            cache_ttl: Seconds a per-tool result stays valid
            clock: Monotonic time source, in seconds
        """
        self._registry = registry
        self._cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[str, tuple[float, ToolVerificationResult]] = {}
        self._last_report: SystemVerificationReport | None = None

    @property
    def last_report(self) -> SystemVerificationReport | None:
        """The most recent system report, if any."""
        return self._last_report

    def clear_cache(self) -> None:
        """Drop every cached tool result."""
        self._cache.clear()

    async def refresh_tool(self, name: str) -> ToolVerificationResult:
        """Re-verify one tool, bypassing the cache."""
        self._cache.pop(name, None)
        return await self.verify_tool(name)

    async def verify_tool(self, name: str) -> ToolVerificationResult:
        """Verify a single tool.

        Unknown tools and tools the registry reports unavailable come back
        with ``available=False`` and an error message.
        """
        cached = self._cache.get(name)
        now = self._clock()
        if cached is not None and now - cached[0] < self._cache_ttl:
            return cached[1]

        start = time.perf_counter()
        descriptor = await self._find(name)
        if descriptor is None:
            result = ToolVerificationResult(
                tool=name,
                available=False,
                error="Tool not found in registry",
                recommendations=["Check tool name spelling", "Verify tool is registered"],
            )
        else:
            result = self._describe(descriptor, (time.perf_counter() - start) * 1000)

        self._cache[name] = (now, result)
        if not result.available:
            logger.info("tool_unavailable", tool=name, error=result.error)
        return result

    async def _find(self, name: str) -> ToolDescriptor | None:
        for descriptor in await self._registry.all_tools():
            if descriptor.name == name:
                return descriptor
        return None

    @staticmethod
    def _describe(descriptor: ToolDescriptor, elapsed_ms: float) -> ToolVerificationResult:
        warnings: list[str] = []
        recommendations: list[str] = []
        error = None

        if not descriptor.available:
            error = "Tool reported unavailable by registry"
            recommendations.append("Check tool configuration and permissions")
        if descriptor.name in _NETWORK_TOOLS:
            warnings.append("Network-dependent tool - requires internet connectivity")
        if descriptor.name.startswith("mcp_"):
            warnings.append("External tool - may have variable performance")
            recommendations.append("Monitor tool response times")

        return ToolVerificationResult(
            tool=descriptor.name,
            available=descriptor.available,
            response_time_ms=elapsed_ms,
            error=error,
            warnings=warnings,
            capabilities=descriptor.capabilities,
            recommendations=recommendations,
        )

    async def verify_all_tools(self) -> SystemVerificationReport:
        """Verify every registered tool and rate the system's health."""
        results = [
            await self.verify_tool(descriptor.name)
            for descriptor in await self._registry.all_tools()
        ]
        available = sum(1 for result in results if result.available)
        total = len(results)
        health = system_health(available, total)
        percentage = round(available / total * 100) if total else 0

        report = SystemVerificationReport(
            total_tools=total,
            available_tools=available,
            failed_tools=total - available,
            results=results,
            system_health=health,
            recommendations=self._recommendations(results),
            summary=(
                f"System Health: {health.upper()} - {available}/{total} tools available "
                f"({percentage}%)"
            ),
        )
        self._last_report = report
        logger.info("tools_verified", total=total, available=available, health=str(health))
        return report

    @staticmethod
    def _recommendations(results: Sequence[ToolVerificationResult]) -> list[str]:
        recommendations: list[str] = []
        failed = [result.tool for result in results if not result.available]
        if failed:
            recommendations.append(f"Fix {len(failed)} failed tools: {', '.join(failed)}")
        slow = [result.tool for result in results if result.response_time_ms > SLOW_TOOL_MS]
        if slow:
            recommendations.append(f"Optimize slow tools: {', '.join(slow)}")
        return recommendations

    async def get_verified_available_tools(self) -> list[str]:
        """Names of tools that verified as available."""
        report = await self.verify_all_tools()
        return [result.tool for result in report.results if result.available]

    async def get_tools_by_capability(self, capability: str) -> list[str]:
        """Names of available tools with a boolean capability set.

        Args:
            capability: A boolean ToolCapabilities field, e.g. ``can_read``

        Raises:
            ValueError: If ``capability`` is not a boolean capability flag
        """
        field = ToolCapabilities.model_fields.get(capability)
        if field is None or field.annotation not in (bool, "bool"):
            raise ValueError(f"Unknown capability: {capability}")
        report = await self.verify_all_tools()
        return [
            result.tool
            for result in report.results
            if result.available and getattr(result.capabilities, capability)
        ]

    async def is_tool_available(self, name: str) -> bool:
        """Check whether a tool verifies as available."""
        result = await self.verify_tool(name)
        return result.available

    async def get_system_health(self) -> SystemHealth:
        """Health from the last report, verifying first if there is none."""
        report = self._last_report or await self.verify_all_tools()
        return report.system_health
