"""Response validation models for reasoning-gate.

This module defines a generated response (text, requested tool calls and
optional reasoning) together with the typed, severity-ranked result the
response validator returns for it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from reasoning_gate.models.core import IssueType, ResponseStepType, Severity


class ToolCall(BaseModel):
    """A tool invocation requested by a response."""

    name: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    id: str | None = None
    reasoning: str | None = None


class ResponseReasoningStep(BaseModel):
    """A reasoning step carried inside a response."""

    type: ResponseStepType
    content: str
    evidence: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class AIResponse(BaseModel):
    """A candidate response submitted to the validator.

    Examples:
        >>> response = AIResponse(
        ...     content="Listing the directory.",
        ...     tool_calls=[ToolCall(name="ls", parameters={"path": "."})],
        ... )
        >>> response.reasoning is None
        True
    """

    content: str = ""
    tool_calls: list[ToolCall] = Field(default_factory=list)
    reasoning: list[ResponseReasoningStep] | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=datetime.now)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ValidationIssue(BaseModel):
    """A typed finding against a response.

    ``location`` names the offending part: ``tool_call_<n>``,
    ``reasoning_step_<n>``, ``reasoning``, ``content``, ``response``,
    ``tool_calls`` or ``validator``.
    """

    type: IssueType
    severity: Severity
    message: str
    location: str
    suggested_fix: str | None = None
    evidence: list[str] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Aggregated outcome of validating a response."""

    is_valid: bool
    score: float = Field(ge=0.0, description="Severity-weighted score; may exceed 1.0")
    issues: list[ValidationIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    corrected_response: AIResponse | None = None
    allow_execution: bool = False

    def issues_with(self, severity: Severity) -> list[ValidationIssue]:
        """Return the issues of the given severity."""
        return [issue for issue in self.issues if issue.severity == severity]


class ValidationContext(BaseModel):
    """What the caller knows about the environment the response targets."""

    available_tools: frozenset[str] = Field(default_factory=frozenset)
    working_directory: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class ValidationConstraints(BaseModel):
    """Per-call policy toggles for response validation."""

    minimum_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    allowed_tools: list[str] = Field(
        default_factory=list,
        description="If non-empty, tool calls outside this list are violations",
    )
    forbidden_operations: list[str] = Field(
        default_factory=list,
        description="Substrings that must not appear in response content",
    )
    require_reasoning: bool = False
    require_evidence: bool = False
    safety_checks: bool = True
    max_tool_calls: int = Field(default=10, ge=0)
    timeout_ms: int = Field(default=300_000, gt=0)
