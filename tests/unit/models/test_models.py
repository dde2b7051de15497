"""
Tests for the reasoning-gate data models.

Covers enum behaviour, immutability of plans and tool descriptors, and the
field constraints that keep scores inside their ranges.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from reasoning_gate.models import (
    AIResponse,
    ChainStatus,
    DecisionOption,
    IssueType,
    Plan,
    PlanStep,
    ReasoningChain,
    ReasoningStep,
    ReasoningStepType,
    ResponseReasoningStep,
    ResponseStepType,
    RiskLevel,
    Severity,
    StepType,
    SystemVerificationReport,
    ToolCapabilities,
    ToolDescriptor,
    ValidationConstraints,
    ValidationIssue,
    ValidationResult,
)


class TestSeverity:
    """Tests for Severity."""

    @pytest.mark.parametrize(
        ("severity", "blocking"),
        [
            (Severity.LOW, False),
            (Severity.MEDIUM, False),
            (Severity.HIGH, True),
            (Severity.CRITICAL, True),
        ],
    )
    def test_blocking(self, severity, blocking):
        """Test only high and critical issues block."""
        assert severity.blocking is blocking

    def test_string_values(self):
        """Test enums compare equal to their string values."""
        assert Severity.CRITICAL == "critical"
        assert IssueType.RULE_ERROR == "rule_error"
        assert StepType.TOOL_CALL == "tool_call"


class TestToolModels:
    """Tests for tool descriptors."""

    def test_descriptor_defaults(self):
        descriptor = ToolDescriptor(name="ls")
        assert descriptor.available is True
        assert descriptor.capabilities == ToolCapabilities()
        assert descriptor.required_parameters == ()

    def test_descriptor_is_frozen(self):
        """Test descriptors cannot be mutated in place."""
        descriptor = ToolDescriptor(name="ls")
        with pytest.raises(ValidationError):
            descriptor.available = False

    def test_descriptor_requires_name(self):
        with pytest.raises(ValidationError):
            ToolDescriptor(name="")


class TestPlanModels:
    """Tests for plans and plan steps."""

    def test_plan_step_defaults(self):
        step = PlanStep(id="a", title="A", type=StepType.ANALYSIS)
        assert step.dependencies == ()
        assert step.fallback_strategy is None

    def test_plan_lookup(self):
        """Test steps can be looked up by id."""
        first = PlanStep(id="a", title="A", type=StepType.ANALYSIS)
        second = PlanStep(id="b", title="B", type=StepType.SYNTHESIS, dependencies=["a"])
        plan = Plan(goal="Do it", steps=[first, second])
        assert plan.step_ids == ["a", "b"]
        assert plan.get_step("b") is second
        assert plan.get_step("missing") is None
        assert plan.id.startswith("plan_")

    def test_plan_is_frozen(self):
        plan = Plan(goal="Do it")
        with pytest.raises(ValidationError):
            plan.goal = "Something else"


class TestReasoningModels:
    """Tests for reasoning chains and decision options."""

    def test_chain_defaults(self):
        chain = ReasoningChain(goal="Find the bug")
        assert chain.status == ChainStatus.ACTIVE
        assert chain.last_step is None
        assert chain.id.startswith("reasoning_")

    def test_touch_updates_timestamp(self):
        chain = ReasoningChain(goal="Find the bug")
        before = chain.updated_at
        chain.touch()
        assert chain.updated_at >= before

    def test_step_confidence_range(self):
        """Test confidence outside [0, 1] is rejected."""
        with pytest.raises(ValidationError):
            ReasoningStep(id="step-1", type=ReasoningStepType.DECISION, content="x", confidence=1.5)

    def test_analysis_is_response_only(self):
        """Test analysis steps are valid in responses but not in chains."""
        with pytest.raises(ValidationError):
            ReasoningStep(id="step-1", type="analysis", content="x")
        assert ResponseReasoningStep(type="analysis", content="x").type == ResponseStepType.ANALYSIS

    def test_option_defaults(self):
        option = DecisionOption(description="Use grep")
        assert option.risk_level == RiskLevel.MEDIUM
        assert option.feasibility_score == 0.0


class TestResponseModels:
    """Tests for responses and validation results."""

    def test_response_defaults(self):
        response = AIResponse()
        assert response.tool_calls == []
        assert response.reasoning is None
        assert response.confidence is None

    def test_constraints_defaults(self):
        constraints = ValidationConstraints()
        assert constraints.minimum_confidence == 0.7
        assert constraints.safety_checks is True
        assert constraints.max_tool_calls == 10

    def test_score_may_exceed_one(self):
        """Test the score is floored at zero only."""
        assert ValidationResult(is_valid=True, score=1.15).score == 1.15
        with pytest.raises(ValidationError):
            ValidationResult(is_valid=True, score=-0.1)

    def test_issues_with(self):
        issue = ValidationIssue(
            type=IssueType.LOW_CONFIDENCE,
            severity=Severity.MEDIUM,
            message="low",
            location="response",
        )
        result = ValidationResult(is_valid=True, score=0.9, issues=[issue])
        assert result.issues_with(Severity.MEDIUM) == [issue]
        assert result.issues_with(Severity.HIGH) == []


class TestVerificationModels:
    """Tests for verification reports."""

    def test_availability_ratio(self):
        report = SystemVerificationReport(total_tools=4, available_tools=3, failed_tools=1)
        assert report.availability_ratio == 0.75

    def test_empty_report_ratio(self):
        assert SystemVerificationReport().availability_ratio == 0.0
