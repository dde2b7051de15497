"""Core enumerations for reasoning-gate.

This module defines the enums shared by the plan engine, the reasoning
engine and the response validator: step classifications, complexity and
risk tiers, reasoning step types, lifecycle states and issue taxonomies.
"""

from enum import StrEnum


class StepType(StrEnum):
    """Classification tag of a plan step."""

    ANALYSIS = "analysis"
    """Understand the goal and the current state."""

    TOOL_CALL = "tool_call"
    """Invoke one or more tools."""

    VERIFICATION = "verification"
    """Confirm a precondition, such as tool availability."""

    DECISION = "decision"
    """Choose between alternatives."""

    SYNTHESIS = "synthesis"
    """Combine results from earlier steps into an answer."""


class Complexity(StrEnum):
    """Estimated complexity tier of a plan step."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(StrEnum):
    """Aggregate risk of a plan, or the risk tier of a decision option."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskCategory(StrEnum):
    """Category a goal is classified into before decomposition."""

    FILE_SYSTEM = "file_system"
    CODE = "code"
    ANALYSIS = "analysis"
    GENERAL = "general"


class ReasoningStepType(StrEnum):
    """Type of a step inside a reasoning chain."""

    OBSERVATION = "observation"
    HYPOTHESIS = "hypothesis"
    VERIFICATION = "verification"
    DECISION = "decision"
    ACTION = "action"
    CONCLUSION = "conclusion"


class ResponseStepType(StrEnum):
    """Type of a reasoning step carried inside a submitted response.

    Responses may also describe ``analysis`` steps, which never enter a
    reasoning chain.
    """

    OBSERVATION = "observation"
    ANALYSIS = "analysis"
    HYPOTHESIS = "hypothesis"
    VERIFICATION = "verification"
    DECISION = "decision"
    ACTION = "action"
    CONCLUSION = "conclusion"


class StepValidationStatus(StrEnum):
    """Validation status of a reasoning step."""

    PENDING = "pending"
    VALIDATED = "validated"
    REJECTED = "rejected"


class ChainStatus(StrEnum):
    """Lifecycle status of a reasoning chain."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"


class Severity(StrEnum):
    """Severity of a validation or reasoning issue."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def blocking(self) -> bool:
        """Whether an issue of this severity invalidates its subject."""
        return self in (Severity.HIGH, Severity.CRITICAL)


class IssueType(StrEnum):
    """Types of issues the response validator can report."""

    TOOL_NOT_AVAILABLE = "tool_not_available"
    INVALID_PARAMETERS = "invalid_parameters"
    PARAMETER_MISMATCH = "parameter_mismatch"
    CONSTRAINT_VIOLATION = "constraint_violation"
    LOGICAL_INCONSISTENCY = "logical_inconsistency"
    INSUFFICIENT_EVIDENCE = "insufficient_evidence"
    HALLUCINATION_DETECTED = "hallucination_detected"
    CIRCULAR_REASONING = "circular_reasoning"
    UNSAFE_OPERATION = "unsafe_operation"
    MISSING_REASONING = "missing_reasoning"
    LOW_CONFIDENCE = "low_confidence"
    RULE_ERROR = "rule_error"


class ReasoningIssueType(StrEnum):
    """Types of issues raised against reasoning steps and chains."""

    LOGICAL_INCONSISTENCY = "logical_inconsistency"
    MISSING_EVIDENCE = "missing_evidence"
    WEAK_ASSUMPTION = "weak_assumption"
    CIRCULAR_REASONING = "circular_reasoning"
    TOOL_AVAILABILITY = "tool_availability"
    CONSTRAINT_VIOLATION = "constraint_violation"
    REJECTED_STEP = "rejected_step"


class SystemHealth(StrEnum):
    """Overall health reported by the tool availability verifier."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"
