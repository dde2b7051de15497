"""Response validation rules.

Each rule is an independent predicate over a response that returns typed,
severity-ranked issues. Rules never decide whether a response may run;
the ResponseValidator aggregates their issues into a score and a gate.

Default rule order:

1. ToolAvailabilityRule (critical)
2. ParameterValidationRule (high, critical for missing required parameters)
3. SafetyCheckRule (high)
4. ReasoningValidationRule (high / medium)
5. ConfidenceValidationRule (medium)
6. ConstraintComplianceRule (high / medium)
7. HallucinationDetectionRule (high)
8. LogicalConsistencyRule (medium)
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from reasoning_gate.models.core import IssueType, Severity
from reasoning_gate.models.response import (
    AIResponse,
    ToolCall,
    ValidationConstraints,
    ValidationContext,
    ValidationIssue,
)
from reasoning_gate.registry import infer_capabilities
from reasoning_gate.text import find_contradiction

if TYPE_CHECKING:
    from reasoning_gate.config import SafetyConfig
    from reasoning_gate.models.tools import ToolCapabilities, ToolDescriptor
    from reasoning_gate.registry import ToolRegistry


def tool_location(index: int) -> str:
    """Location tag of the tool call at ``index``."""
    return f"tool_call_{index}"


def _available_list(context: ValidationContext) -> str:
    return ", ".join(sorted(context.available_tools)) or "none"


class ValidationRule(ABC):
    """Abstract base class for response validation rules.

    Subclasses set ``name``, ``description`` and their headline
    ``severity``, and implement ``validate``.
    """

    name: str = "Rule"
    description: str = ""
    severity: Severity = Severity.MEDIUM

    @abstractmethod
    async def validate(
        self,
        response: AIResponse,
        context: ValidationContext,
        constraints: ValidationConstraints,
    ) -> list[ValidationIssue]:
        """Return the issues ``response`` raises under this rule."""
        ...


class ToolAvailabilityRule(ValidationRule):
    name = "ToolAvailability"
    description = "Checks if all requested tools are available"
    severity = Severity.CRITICAL

    async def validate(self, response, context, constraints):
        available = _available_list(context)
        return [
            ValidationIssue(
                type=IssueType.TOOL_NOT_AVAILABLE,
                severity=Severity.CRITICAL,
                message=f"Tool '{call.name}' is not available",
                location=tool_location(index),
                suggested_fix=f"Use available tools: {available}",
                evidence=[f"Available tools: {available}"],
            )
            for index, call in enumerate(response.tool_calls)
            if call.name not in context.available_tools
        ]


# Python types accepted for each JSON type name
_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
    "array": (list, tuple),
    "object": (dict,),
}


def matches_json_type(value: Any, expected: str) -> bool:
    """Check ``value`` against a JSON type name; unknown type names pass.

    Examples:
        >>> matches_json_type(3, "number")
        True
        >>> matches_json_type(True, "number")
        False
        >>> matches_json_type("x", "custom")
        True
    """
    accepted = _JSON_TYPES.get(expected)
    if accepted is None:
        return True
    if isinstance(value, bool) and expected != "boolean":
        return False
    return isinstance(value, accepted)


class ParameterValidationRule(ValidationRule):
    """Checks tool call parameters.

    A call without parameters is a high issue. When a registry is given,
    the tool's descriptor is consulted as well: a missing required
    parameter is critical and a value of the wrong JSON type is high.
    """

    name = "ParameterValidation"
    description = "Validates tool call parameters"
    severity = Severity.HIGH

    def __init__(self, registry: ToolRegistry | None = None) -> None:
        self._registry = registry

    async def validate(self, response, context, constraints):
        issues: list[ValidationIssue] = []
        for index, call in enumerate(response.tool_calls):
            location = tool_location(index)
            if not call.parameters:
                issues.append(
                    ValidationIssue(
                        type=IssueType.INVALID_PARAMETERS,
                        severity=Severity.HIGH,
                        message=f"Tool '{call.name}' called without parameters",
                        location=location,
                        suggested_fix="Provide required parameters for tool call",
                    )
                )
            if self._registry is None:
                continue
            descriptor = await self._registry.get_tool(call.name)
            if descriptor is not None:
                issues.extend(self._check_schema(call, descriptor, location))
        return issues

    @staticmethod
    def _check_schema(
        call: ToolCall,
        descriptor: ToolDescriptor,
        location: str,
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        required = descriptor.required_parameters
        for param in required:
            if param not in call.parameters:
                issues.append(
                    ValidationIssue(
                        type=IssueType.INVALID_PARAMETERS,
                        severity=Severity.CRITICAL,
                        message=f"Missing required parameter '{param}' for tool '{call.name}'",
                        location=location,
                        suggested_fix=f"Add required parameter: {param}",
                        evidence=[f"Required parameters: {', '.join(required)}"],
                    )
                )
        for param, value in call.parameters.items():
            expected = descriptor.parameter_types.get(param)
            if expected and not matches_json_type(value, expected):
                issues.append(
                    ValidationIssue(
                        type=IssueType.PARAMETER_MISMATCH,
                        severity=Severity.HIGH,
                        message=(
                            f"Parameter '{param}' type mismatch: expected {expected}, "
                            f"got {type(value).__name__}"
                        ),
                        location=location,
                        suggested_fix=f"Correct parameter type for {param}",
                        evidence=[f"Expected: {expected}", f"Actual: {type(value).__name__}"],
                    )
                )
        return issues


class SafetyCheckRule(ValidationRule):
    """Flags dangerous shell commands and writes to protected paths.

    Capabilities come from the registry descriptor when one exists and are
    otherwise inferred from the tool name. Disabled when the constraints
    turn safety checks off.
    """

    name = "SafetyCheck"
    description = "Checks for potentially unsafe operations"
    severity = Severity.HIGH

    def __init__(self, safety: SafetyConfig, registry: ToolRegistry | None = None) -> None:
        self._safety = safety
        self._registry = registry

    async def _capabilities(self, name: str) -> ToolCapabilities:
        if self._registry is not None:
            descriptor = await self._registry.get_tool(name)
            if descriptor is not None:
                return descriptor.capabilities
        return infer_capabilities(name)

    def unsafe_reason(self, call: ToolCall, capabilities: ToolCapabilities) -> str | None:
        """Return why ``call`` is unsafe, or None."""
        if capabilities.can_execute:
            command = call.parameters.get("command")
            if isinstance(command, str):
                lowered = command.lower()
                for dangerous in self._safety.dangerous_commands:
                    if dangerous.lower() in lowered:
                        return f"Command contains '{dangerous}'"
        if capabilities.can_write:
            path = call.parameters.get("file_path") or call.parameters.get("path")
            if isinstance(path, str):
                lowered = path.lower()
                for protected in self._safety.protected_paths:
                    if lowered.startswith(protected.lower()):
                        return f"Path is under protected prefix '{protected}'"
        return None

    async def validate(self, response, context, constraints):
        if not constraints.safety_checks:
            return []
        issues: list[ValidationIssue] = []
        for index, call in enumerate(response.tool_calls):
            reason = self.unsafe_reason(call, await self._capabilities(call.name))
            if reason is None:
                continue
            issues.append(
                ValidationIssue(
                    type=IssueType.UNSAFE_OPERATION,
                    severity=Severity.HIGH,
                    message=f"Tool call '{call.name}' may be unsafe",
                    location=tool_location(index),
                    suggested_fix="Use safer alternatives or add safety checks",
                    evidence=[
                        reason,
                        f"Parameters: {json.dumps(call.parameters, default=str)}",
                    ],
                )
            )
        return issues


class ReasoningValidationRule(ValidationRule):
    name = "ReasoningValidation"
    description = "Validates reasoning presence and evidence"
    severity = Severity.MEDIUM

    async def validate(self, response, context, constraints):
        if not response.reasoning:
            if constraints.require_reasoning:
                return [
                    ValidationIssue(
                        type=IssueType.MISSING_REASONING,
                        severity=Severity.HIGH,
                        message="Reasoning is required but not provided",
                        location="reasoning",
                        suggested_fix="Add explicit reasoning steps",
                        evidence=["No reasoning steps found"],
                    )
                ]
            return []
        if not constraints.require_evidence:
            return []
        return [
            ValidationIssue(
                type=IssueType.INSUFFICIENT_EVIDENCE,
                severity=Severity.MEDIUM,
                message="Reasoning step lacks supporting evidence",
                location=f"reasoning_step_{index}",
                suggested_fix="Add evidence from tool outputs or observations",
                evidence=["No evidence provided for reasoning step"],
            )
            for index, step in enumerate(response.reasoning)
            if not step.evidence
        ]


class ConfidenceValidationRule(ValidationRule):
    name = "ConfidenceValidation"
    description = "Validates self-reported confidence"
    severity = Severity.MEDIUM

    async def validate(self, response, context, constraints):
        if response.confidence is None or response.confidence >= constraints.minimum_confidence:
            return []
        return [
            ValidationIssue(
                type=IssueType.LOW_CONFIDENCE,
                severity=Severity.MEDIUM,
                message=(
                    f"Response confidence ({response.confidence:.2f}) below threshold "
                    f"({constraints.minimum_confidence})"
                ),
                location="response",
                suggested_fix="Provide more evidence or acknowledge uncertainty",
                evidence=[
                    f"Confidence: {response.confidence}",
                    f"Threshold: {constraints.minimum_confidence}",
                ],
            )
        ]


class ConstraintComplianceRule(ValidationRule):
    name = "ConstraintCompliance"
    description = "Checks compliance with caller constraints"
    severity = Severity.HIGH

    async def validate(self, response, context, constraints):
        issues: list[ValidationIssue] = []
        content = response.content.lower()
        for forbidden in constraints.forbidden_operations:
            if forbidden and forbidden.lower() in content:
                issues.append(
                    ValidationIssue(
                        type=IssueType.CONSTRAINT_VIOLATION,
                        severity=Severity.HIGH,
                        message=f"Response contains forbidden operation: {forbidden}",
                        location="content",
                        suggested_fix="Remove or replace forbidden operation",
                        evidence=[f"Forbidden: {forbidden}"],
                    )
                )

        if constraints.allowed_tools:
            allowed = ", ".join(constraints.allowed_tools)
            for index, call in enumerate(response.tool_calls):
                if call.name not in constraints.allowed_tools:
                    issues.append(
                        ValidationIssue(
                            type=IssueType.CONSTRAINT_VIOLATION,
                            severity=Severity.HIGH,
                            message=f"Tool '{call.name}' is not in allowed tools list",
                            location=tool_location(index),
                            suggested_fix=f"Use allowed tools: {allowed}",
                            evidence=[f"Allowed tools: {allowed}"],
                        )
                    )

        count = len(response.tool_calls)
        if count > constraints.max_tool_calls:
            issues.append(
                ValidationIssue(
                    type=IssueType.CONSTRAINT_VIOLATION,
                    severity=Severity.MEDIUM,
                    message=f"Too many tool calls ({count} > {constraints.max_tool_calls})",
                    location="tool_calls",
                    suggested_fix="Reduce number of tool calls or break into multiple interactions",
                    evidence=[f"Tool call count: {count}", f"Limit: {constraints.max_tool_calls}"],
                )
            )
        return issues


class HallucinationDetectionRule(ValidationRule):
    name = "HallucinationDetection"
    description = "Detects tool calls naming tools that do not exist"
    severity = Severity.HIGH

    async def validate(self, response, context, constraints):
        return [
            ValidationIssue(
                type=IssueType.HALLUCINATION_DETECTED,
                severity=Severity.HIGH,
                message=f"Hallucinated tool call: {call.name}",
                location=tool_location(index),
                suggested_fix="Use only verified available tools",
                evidence=[f"Non-existent tool: {call.name}"],
            )
            for index, call in enumerate(response.tool_calls)
            if call.name not in context.available_tools
        ]


class LogicalConsistencyRule(ValidationRule):
    """Flags opposite-polarity phrases in adjacent reasoning steps."""

    name = "LogicalConsistency"
    description = "Checks for contradictions between adjacent reasoning steps"
    severity = Severity.MEDIUM

    def __init__(self, pairs: Sequence[Sequence[str]]) -> None:
        self._pairs = [tuple(pair) for pair in pairs]

    async def validate(self, response, context, constraints):
        steps = response.reasoning or []
        issues: list[ValidationIssue] = []
        for index, (current, following) in enumerate(zip(steps, steps[1:])):
            pair = find_contradiction(current.content, following.content, self._pairs)
            if pair is None:
                continue
            issues.append(
                ValidationIssue(
                    type=IssueType.LOGICAL_INCONSISTENCY,
                    severity=Severity.MEDIUM,
                    message=f"Contradictory reasoning steps detected ('{pair[0]}' / '{pair[1]}')",
                    location=f"reasoning_step_{index}",
                    suggested_fix="Resolve contradiction in reasoning",
                    evidence=[
                        f"Step {index}: {current.content}",
                        f"Step {index + 1}: {following.content}",
                    ],
                )
            )
        return issues


def default_rules(
    safety: SafetyConfig,
    registry: ToolRegistry | None = None,
) -> list[ValidationRule]:
    """The standard rule set, in evaluation order."""
    return [
        ToolAvailabilityRule(),
        ParameterValidationRule(registry),
        SafetyCheckRule(safety, registry),
        ReasoningValidationRule(),
        ConfidenceValidationRule(),
        ConstraintComplianceRule(),
        HallucinationDetectionRule(),
        LogicalConsistencyRule(safety.contradiction_pairs),
    ]
