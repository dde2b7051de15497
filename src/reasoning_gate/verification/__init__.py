"""Tool availability verification package."""

from reasoning_gate.models.verification import SystemVerificationReport, ToolVerificationResult
from reasoning_gate.verification.verifier import ToolAvailabilityVerifier, system_health

__all__ = [
    "SystemVerificationReport",
    "ToolAvailabilityVerifier",
    "ToolVerificationResult",
    "system_health",
]
