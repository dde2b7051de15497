"""Tool verification models for reasoning-gate.

This module defines the per-tool verification result and the system-wide
report produced by the tool availability verifier.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from reasoning_gate.models.core import SystemHealth
from reasoning_gate.models.tools import ToolCapabilities


class ToolVerificationResult(BaseModel):
    """Outcome of verifying one tool."""

    tool: str = Field(description="Tool name that was verified")
    available: bool
    tested: bool = Field(
        default=False,
        description="Whether the tool was exercised; verification never runs tools",
    )
    response_time_ms: float = Field(default=0.0, ge=0.0)
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)
    capabilities: ToolCapabilities = Field(default_factory=ToolCapabilities)
    recommendations: list[str] = Field(default_factory=list)
    checked_at: datetime = Field(default_factory=datetime.now)


class SystemVerificationReport(BaseModel):
    """Availability report over every registered tool."""

    timestamp: datetime = Field(default_factory=datetime.now)
    total_tools: int = Field(default=0, ge=0)
    available_tools: int = Field(default=0, ge=0)
    failed_tools: int = Field(default=0, ge=0)
    results: list[ToolVerificationResult] = Field(default_factory=list)
    system_health: SystemHealth = SystemHealth.CRITICAL
    recommendations: list[str] = Field(default_factory=list)
    summary: str = ""

    @property
    def availability_ratio(self) -> float:
        """Share of verified tools that are available; 0.0 for an empty registry."""
        if self.total_tools == 0:
            return 0.0
        return self.available_tools / self.total_tools
