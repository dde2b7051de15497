"""
Data models and type system for reasoning-gate.

This package contains all Pydantic models and enumerations used by the
three engines:

- Core enumerations (step types, tiers, statuses, issue taxonomies)
- Tool descriptors with capabilities resolved at registration time
- Plans, plan steps and step results
- Reasoning chains, steps, issues and decision points
- Responses, tool calls and validation results
- Tool verification results and system reports
"""

from __future__ import annotations

from reasoning_gate.models.core import (
    ChainStatus,
    Complexity,
    IssueType,
    ReasoningIssueType,
    ReasoningStepType,
    ResponseStepType,
    RiskLevel,
    Severity,
    StepType,
    StepValidationStatus,
    SystemHealth,
    TaskCategory,
)
from reasoning_gate.models.plan import (
    Plan,
    PlanExecutionContext,
    PlanStep,
    PlanValidation,
    StepResult,
)
from reasoning_gate.models.reasoning import (
    DecisionOption,
    DecisionPoint,
    ReasoningChain,
    ReasoningContext,
    ReasoningIssue,
    ReasoningStep,
    ReasoningValidation,
)
from reasoning_gate.models.response import (
    AIResponse,
    ResponseReasoningStep,
    ToolCall,
    ValidationConstraints,
    ValidationContext,
    ValidationIssue,
    ValidationResult,
)
from reasoning_gate.models.tools import ToolCapabilities, ToolDescriptor
from reasoning_gate.models.verification import (
    SystemVerificationReport,
    ToolVerificationResult,
)

__all__ = [
    # Core enumerations
    "ChainStatus",
    "Complexity",
    "IssueType",
    "ReasoningIssueType",
    "ReasoningStepType",
    "ResponseStepType",
    "RiskLevel",
    "Severity",
    "StepType",
    "StepValidationStatus",
    "SystemHealth",
    "TaskCategory",
    # Tool models
    "ToolCapabilities",
    "ToolDescriptor",
    # Plan models
    "Plan",
    "PlanExecutionContext",
    "PlanStep",
    "PlanValidation",
    "StepResult",
    # Reasoning models
    "DecisionOption",
    "DecisionPoint",
    "ReasoningChain",
    "ReasoningContext",
    "ReasoningIssue",
    "ReasoningStep",
    "ReasoningValidation",
    # Response models
    "AIResponse",
    "ResponseReasoningStep",
    "ToolCall",
    "ValidationConstraints",
    "ValidationContext",
    "ValidationIssue",
    "ValidationResult",
    # Verification models
    "SystemVerificationReport",
    "ToolVerificationResult",
]
