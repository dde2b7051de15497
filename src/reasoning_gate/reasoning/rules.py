"""Step validation rules for the reasoning engine.

Each rule inspects one reasoning step together with the steps recorded
before it and the chain's context, and returns the issues it finds. A step
carrying any high or critical issue is rejected.

Rules:
- EvidenceRule: conclusions need evidence (high)
- AssumptionRule: too many assumptions (medium)
- ConsistencyRule: hypothesis right after a conclusion (medium)
- ConstraintRule: content containing a forbidden constraint (high)
- ToolAvailabilityRule: action naming an unavailable tool (high)
- CircularReasoningRule: near-duplicate of an earlier step (high)
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from reasoning_gate.models.core import ReasoningIssueType, ReasoningStepType, Severity
from reasoning_gate.models.reasoning import ReasoningContext, ReasoningIssue, ReasoningStep
from reasoning_gate.text import compile_tool_pattern, extract_tool_tokens, jaccard_similarity


class StepRule(ABC):
    """Abstract base class for reasoning step rules."""

    name: str = "step_rule"

    @abstractmethod
    def check(
        self,
        step: ReasoningStep,
        previous: Sequence[ReasoningStep],
        context: ReasoningContext,
    ) -> list[ReasoningIssue]:
        """Return the issues ``step`` raises.

        Args:
            step: The step under validation
            previous: Steps recorded before ``step``, oldest first
            context: The owning chain's context
        """
        ...


class EvidenceRule(StepRule):
    """A conclusion without evidence is a high-severity issue."""

    name = "evidence"

    def check(self, step, previous, context):
        if step.type == ReasoningStepType.CONCLUSION and not step.evidence:
            return [
                ReasoningIssue(
                    type=ReasoningIssueType.MISSING_EVIDENCE,
                    severity=Severity.HIGH,
                    step_id=step.id,
                    description="Conclusion lacks supporting evidence",
                    suggested_fix="Add evidence from previous steps",
                )
            ]
        return []


class AssumptionRule(StepRule):
    """More than ``max_assumptions`` assumptions is a medium-severity issue."""

    name = "assumptions"

    def __init__(self, max_assumptions: int = 3) -> None:
        self.max_assumptions = max_assumptions

    def check(self, step, previous, context):
        if len(step.assumptions) > self.max_assumptions:
            return [
                ReasoningIssue(
                    type=ReasoningIssueType.WEAK_ASSUMPTION,
                    severity=Severity.MEDIUM,
                    step_id=step.id,
                    description="Too many assumptions",
                    suggested_fix="Reduce assumptions or provide more evidence",
                )
            ]
        return []


class ConsistencyRule(StepRule):
    """A hypothesis immediately after a conclusion is a medium-severity issue."""

    name = "consistency"

    def check(self, step, previous, context):
        if (
            previous
            and previous[-1].type == ReasoningStepType.CONCLUSION
            and step.type == ReasoningStepType.HYPOTHESIS
        ):
            return [
                ReasoningIssue(
                    type=ReasoningIssueType.LOGICAL_INCONSISTENCY,
                    severity=Severity.MEDIUM,
                    step_id=step.id,
                    description="New hypothesis after conclusion",
                    suggested_fix="Consider if new hypothesis is necessary",
                )
            ]
        return []


class ConstraintRule(StepRule):
    """Content containing a forbidden constraint substring is high severity."""

    name = "constraints"

    def check(self, step, previous, context):
        content = step.content.lower()
        return [
            ReasoningIssue(
                type=ReasoningIssueType.CONSTRAINT_VIOLATION,
                severity=Severity.HIGH,
                step_id=step.id,
                description=f"Violates constraint: {constraint}",
                suggested_fix="Modify approach to respect constraints",
            )
            for constraint in context.constraints
            if constraint and constraint.lower() in content
        ]


class ToolAvailabilityRule(StepRule):
    """An action step naming a tool missing from the chain's tool set is high severity."""

    name = "tool_availability"

    def __init__(self, tool_names: Iterable[str] = ()) -> None:
        self._pattern: re.Pattern[str] = compile_tool_pattern(tool_names)

    def check(self, step, previous, context):
        if step.type != ReasoningStepType.ACTION:
            return []
        available = ", ".join(sorted(context.available_tools)) or "none"
        return [
            ReasoningIssue(
                type=ReasoningIssueType.TOOL_AVAILABILITY,
                severity=Severity.HIGH,
                step_id=step.id,
                description=f"Tool '{tool}' is not available",
                suggested_fix=f"Use available tools: {available}",
            )
            for tool in extract_tool_tokens(step.content, self._pattern)
            if tool not in context.available_tools
        ]


class CircularReasoningRule(StepRule):
    """Token overlap above ``threshold`` with any earlier step is high severity."""

    name = "circular_reasoning"

    def __init__(self, threshold: float = 0.8) -> None:
        self.threshold = threshold

    def check(self, step, previous, context):
        for earlier in previous:
            if jaccard_similarity(step.content, earlier.content) > self.threshold:
                return [
                    ReasoningIssue(
                        type=ReasoningIssueType.CIRCULAR_REASONING,
                        severity=Severity.HIGH,
                        step_id=step.id,
                        description=f"Circular reasoning detected (repeats {earlier.id})",
                        suggested_fix="Provide new evidence or approach",
                    )
                ]
        return []


def default_step_rules(
    *,
    max_assumptions: int = 3,
    circular_threshold: float = 0.8,
    tool_names: Iterable[str] = (),
) -> list[StepRule]:
    """The standard rule set, in evaluation order."""
    return [
        EvidenceRule(),
        AssumptionRule(max_assumptions),
        ConsistencyRule(),
        ConstraintRule(),
        ToolAvailabilityRule(tool_names),
        CircularReasoningRule(circular_threshold),
    ]
