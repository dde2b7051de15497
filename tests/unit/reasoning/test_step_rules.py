"""Tests for reasoning step validation rules."""

from __future__ import annotations

import pytest

from reasoning_gate.models.core import ReasoningIssueType, ReasoningStepType, Severity
from reasoning_gate.models.reasoning import ReasoningContext, ReasoningStep
from reasoning_gate.reasoning import (
    AssumptionRule,
    CircularReasoningRule,
    ConsistencyRule,
    ConstraintRule,
    EvidenceRule,
    ToolAvailabilityRule,
    default_step_rules,
)


def make_step(
    step_type: ReasoningStepType, content: str, step_id: str = "step-1", **kwargs
) -> ReasoningStep:
    return ReasoningStep(id=step_id, type=step_type, content=content, **kwargs)


@pytest.fixture
def context() -> ReasoningContext:
    return ReasoningContext(available_tools={"ls", "read_file"}, constraints=["sudo"])


class TestEvidenceRule:
    """Tests for EvidenceRule."""

    def test_conclusion_without_evidence(self, context):
        issues = EvidenceRule().check(make_step(ReasoningStepType.CONCLUSION, "Done"), [], context)
        assert len(issues) == 1
        assert issues[0].type == ReasoningIssueType.MISSING_EVIDENCE
        assert issues[0].severity == Severity.HIGH
        assert issues[0].step_id == "step-1"

    def test_conclusion_with_evidence(self, context):
        step = make_step(ReasoningStepType.CONCLUSION, "Done", evidence=["tests pass"])
        assert EvidenceRule().check(step, [], context) == []

    def test_other_types_need_no_evidence(self, context):
        assert EvidenceRule().check(make_step(ReasoningStepType.HYPOTHESIS, "Maybe"), [], context) == []


class TestAssumptionRule:
    """Tests for AssumptionRule."""

    def test_limit_is_inclusive(self, context):
        step = make_step(ReasoningStepType.DECISION, "x", assumptions=["a", "b", "c"])
        assert AssumptionRule(3).check(step, [], context) == []

    def test_too_many(self, context):
        step = make_step(ReasoningStepType.DECISION, "x", assumptions=["a", "b", "c", "d"])
        issues = AssumptionRule(3).check(step, [], context)
        assert [issue.severity for issue in issues] == [Severity.MEDIUM]
        assert issues[0].description == "Too many assumptions"


class TestConsistencyRule:
    """Tests for ConsistencyRule."""

    def test_hypothesis_after_conclusion(self, context):
        previous = [make_step(ReasoningStepType.CONCLUSION, "Done", step_id="step-0")]
        issues = ConsistencyRule().check(make_step(ReasoningStepType.HYPOTHESIS, "Maybe"), previous, context)
        assert issues[0].type == ReasoningIssueType.LOGICAL_INCONSISTENCY
        assert issues[0].severity == Severity.MEDIUM

    def test_only_immediate_predecessor_counts(self, context):
        previous = [
            make_step(ReasoningStepType.CONCLUSION, "Done", step_id="step-0"),
            make_step(ReasoningStepType.OBSERVATION, "Seen", step_id="step-1"),
        ]
        step = make_step(ReasoningStepType.HYPOTHESIS, "Maybe", step_id="step-2")
        assert ConsistencyRule().check(step, previous, context) == []


class TestConstraintRule:
    """Tests for ConstraintRule."""

    def test_case_insensitive_match(self, context):
        issues = ConstraintRule().check(make_step(ReasoningStepType.ACTION, "Run SUDO make"), [], context)
        assert [issue.description for issue in issues] == ["Violates constraint: sudo"]
        assert issues[0].severity == Severity.HIGH

    def test_no_match(self, context):
        assert ConstraintRule().check(make_step(ReasoningStepType.ACTION, "Run make"), [], context) == []


class TestToolAvailabilityRule:
    """Tests for the reasoning ToolAvailabilityRule."""

    def test_unavailable_tool_in_action(self, context):
        rule = ToolAvailabilityRule(["ls", "shell"])
        issues = rule.check(make_step(ReasoningStepType.ACTION, "Use shell then ls"), [], context)
        assert [issue.description for issue in issues] == ["Tool 'shell' is not available"]
        assert issues[0].suggested_fix == "Use available tools: ls, read_file"

    def test_mcp_tools_recognised(self, context):
        rule = ToolAvailabilityRule([])
        issues = rule.check(make_step(ReasoningStepType.ACTION, "Call mcp_search"), [], context)
        assert [issue.description for issue in issues] == ["Tool 'mcp_search' is not available"]

    def test_only_action_steps(self, context):
        rule = ToolAvailabilityRule(["shell"])
        assert rule.check(make_step(ReasoningStepType.DECISION, "Use shell"), [], context) == []


class TestCircularReasoningRule:
    """Tests for CircularReasoningRule."""

    def test_high_overlap_detected(self, context):
        """Test a step sharing more than 80% of its tokens with an earlier one."""
        earlier = make_step(
            ReasoningStepType.DECISION, "the config file lives in the src directory", step_id="step-0"
        )
        step = make_step(ReasoningStepType.DECISION, "the config file lives in the src directory today")
        issues = CircularReasoningRule(0.8).check(step, [earlier], context)
        assert issues[0].type == ReasoningIssueType.CIRCULAR_REASONING
        assert issues[0].description == "Circular reasoning detected (repeats step-0)"

    def test_regardless_of_step_type(self, context):
        """Test an observation repeated as a conclusion is still circular."""
        earlier = make_step(
            ReasoningStepType.OBSERVATION, "the config file lives in the src directory", step_id="step-0"
        )
        step = make_step(
            ReasoningStepType.CONCLUSION,
            "The config file lives in the src directory today",
            evidence=["ls output"],
        )
        issues = CircularReasoningRule(0.8).check(step, [earlier], context)
        assert [issue.type for issue in issues] == [ReasoningIssueType.CIRCULAR_REASONING]
        assert issues[0].severity == Severity.HIGH

    def test_threshold_is_exclusive(self, context):
        """Test exactly 80% overlap is allowed."""
        earlier = make_step(ReasoningStepType.DECISION, "alpha beta gamma delta", step_id="step-0")
        step = make_step(ReasoningStepType.DECISION, "alpha beta gamma delta epsilon")
        assert CircularReasoningRule(0.8).check(step, [earlier], context) == []

    def test_any_earlier_step(self, context):
        previous = [
            make_step(ReasoningStepType.DECISION, "check the logs", step_id="step-0"),
            make_step(ReasoningStepType.DECISION, "something unrelated", step_id="step-1"),
        ]
        step = make_step(ReasoningStepType.DECISION, "Check the LOGS", step_id="step-2")
        assert CircularReasoningRule(0.8).check(step, previous, context)[0].step_id == "step-2"


def test_default_step_rules():
    """Test the default rule set and its order."""
    rules = default_step_rules(max_assumptions=2, tool_names=["ls"])
    assert [rule.name for rule in rules] == [
        "evidence",
        "assumptions",
        "consistency",
        "constraints",
        "tool_availability",
        "circular_reasoning",
    ]
    assert rules[1].max_assumptions == 2
