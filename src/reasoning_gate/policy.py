"""Scoring policy for reasoning-gate.

All additive confidence, feasibility and score arithmetic lives here, on a
single frozen object, so the weights form one reviewable table:

=============================  ==========================================
Knob                           Default
=============================  ==========================================
severity_weights               critical 0.4, high 0.2, medium 0.1, low 0.05
reasoning_bonus                0.1 (response carries reasoning steps)
confidence_bonus               0.05 (self-reported confidence > 0.8)
execution_threshold            0.6 (minimum score for the execution gate)
step_base_confidence           0.5
evidence_weight / cap          0.1 per item, at most 0.3
assumption_weight / cap        0.05 per item, at most 0.2
no_assumption_bonus            0.0
step_type_bonus                observation 0.1, verification 0.2, conclusion 0.1
transition_bonus               0.1
seed_confidence                0.9
rejection_penalty              0.1 per rejected step
circular_similarity_threshold  0.8 (strictly greater triggers)
feasibility_base               0.5
tools_available_bonus          0.3 (tools_missing_penalty 0.2)
risk_adjustment                low +0.2, medium 0.0, high -0.1
pros_cons_weight               0.1
complexity_duration            low 30, medium 120, high 300
=============================  ==========================================
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from reasoning_gate.models.core import (
    Complexity,
    ReasoningStepType,
    RiskLevel,
    Severity,
)

if TYPE_CHECKING:
    from reasoning_gate.models.plan import PlanStep
    from reasoning_gate.models.reasoning import DecisionOption
    from reasoning_gate.models.response import AIResponse

# Step-type transitions that earn the transition bonus.
VALID_TRANSITIONS: frozenset[tuple[ReasoningStepType, ReasoningStepType]] = frozenset(
    {
        (ReasoningStepType.OBSERVATION, ReasoningStepType.HYPOTHESIS),
        (ReasoningStepType.HYPOTHESIS, ReasoningStepType.VERIFICATION),
        (ReasoningStepType.VERIFICATION, ReasoningStepType.CONCLUSION),
    }
)


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp ``value`` into ``[low, high]``."""
    return max(low, min(high, value))


class ScoringPolicy(BaseModel):
    """Named weight table shared by all three engines.

    Examples:
        >>> policy = ScoringPolicy()
        >>> policy.execution_threshold
        0.6
        >>> policy.severity_weights[Severity.HIGH]
        0.2
    """

    model_config = ConfigDict(frozen=True)

    # Response scoring and the execution gate
    severity_weights: dict[Severity, float] = Field(
        default_factory=lambda: {
            Severity.CRITICAL: 0.4,
            Severity.HIGH: 0.2,
            Severity.MEDIUM: 0.1,
            Severity.LOW: 0.05,
        }
    )
    reasoning_bonus: float = Field(default=0.1, ge=0.0)
    confidence_bonus: float = Field(default=0.05, ge=0.0)
    confidence_bonus_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    execution_threshold: float = Field(default=0.6, ge=0.0)

    # Reasoning step confidence
    step_base_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    evidence_weight: float = Field(default=0.1, ge=0.0)
    evidence_cap: float = Field(default=0.3, ge=0.0)
    assumption_weight: float = Field(default=0.05, ge=0.0)
    assumption_cap: float = Field(default=0.2, ge=0.0)
    no_assumption_bonus: float = Field(default=0.0, ge=0.0)
    step_type_bonus: dict[ReasoningStepType, float] = Field(
        default_factory=lambda: {
            ReasoningStepType.OBSERVATION: 0.1,
            ReasoningStepType.VERIFICATION: 0.2,
            ReasoningStepType.CONCLUSION: 0.1,
        }
    )
    transition_bonus: float = Field(default=0.1, ge=0.0)
    seed_confidence: float = Field(default=0.9, ge=0.0, le=1.0)

    # Chain-level thresholds
    rejection_penalty: float = Field(default=0.1, ge=0.0)
    circular_similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    max_assumptions: int = Field(default=3, ge=0)
    min_chain_length: int = Field(default=3, ge=1)

    # Decision option feasibility
    feasibility_base: float = Field(default=0.5, ge=0.0, le=1.0)
    tools_available_bonus: float = Field(default=0.3, ge=0.0)
    tools_missing_penalty: float = Field(default=0.2, ge=0.0)
    risk_adjustment: dict[RiskLevel, float] = Field(
        default_factory=lambda: {
            RiskLevel.LOW: 0.2,
            RiskLevel.MEDIUM: 0.0,
            RiskLevel.HIGH: -0.1,
        }
    )
    pros_cons_weight: float = Field(default=0.1, ge=0.0)

    # Plans
    complexity_duration: dict[Complexity, int] = Field(
        default_factory=lambda: {
            Complexity.LOW: 30,
            Complexity.MEDIUM: 120,
            Complexity.HIGH: 300,
        }
    )
    high_risk_step_count: int = Field(default=2, ge=0)
    max_high_complexity_steps: int = Field(default=3, ge=0)
    result_base_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    validation_pass_bonus: float = Field(default=0.3, ge=0.0)
    long_output_bonus: float = Field(default=0.1, ge=0.0)
    long_output_length: int = Field(default=50, ge=0)
    low_complexity_bonus: float = Field(default=0.1, ge=0.0)

    # ------------------------------------------------------------------
    # Reasoning

    def step_confidence(
        self,
        step_type: ReasoningStepType,
        evidence_count: int,
        assumption_count: int,
        previous_type: ReasoningStepType | None = None,
    ) -> float:
        """Confidence of a new reasoning step, clamped to [0, 1]."""
        confidence = self.step_base_confidence
        confidence += min(evidence_count * self.evidence_weight, self.evidence_cap)
        if assumption_count == 0:
            confidence += self.no_assumption_bonus
        else:
            confidence -= min(assumption_count * self.assumption_weight, self.assumption_cap)
        confidence += self.step_type_bonus.get(step_type, 0.0)
        if previous_type is not None and (previous_type, step_type) in VALID_TRANSITIONS:
            confidence += self.transition_bonus
        return clamp(confidence)

    def chain_confidence(self, validated: Iterable[float], rejected_count: int) -> float:
        """Mean confidence of validated steps minus the rejection penalty, floored at 0."""
        scores = list(validated)
        mean = sum(scores) / len(scores) if scores else 0.0
        return clamp(mean - rejected_count * self.rejection_penalty)

    def feasibility(self, option: DecisionOption, available_tools: Iterable[str]) -> float:
        """Feasibility of a decision option, clamped to [0, 1]."""
        available = set(available_tools)
        score = self.feasibility_base
        if all(tool in available for tool in option.required_tools):
            score += self.tools_available_bonus
        else:
            score -= self.tools_missing_penalty
        score += self.risk_adjustment.get(option.risk_level, 0.0)
        if len(option.pros) > len(option.cons):
            score += self.pros_cons_weight
        elif len(option.cons) > len(option.pros):
            score -= self.pros_cons_weight
        return clamp(score)

    # ------------------------------------------------------------------
    # Issues and responses

    def issue_penalty(self, severities: Iterable[Severity]) -> float:
        """Total score deduction for a collection of issue severities."""
        return sum(self.severity_weights.get(severity, 0.0) for severity in severities)

    def issue_confidence(self, severities: Iterable[Severity]) -> float:
        """1.0 minus the issue penalty, clamped to [0, 1]."""
        return clamp(1.0 - self.issue_penalty(severities))

    def response_score(self, severities: Iterable[Severity], response: AIResponse) -> float:
        """Score of a validated response; floored at 0 but not capped above."""
        score = 1.0 - self.issue_penalty(severities)
        if response.reasoning:
            score += self.reasoning_bonus
        if response.confidence is not None and response.confidence > self.confidence_bonus_threshold:
            score += self.confidence_bonus
        return max(score, 0.0)

    # ------------------------------------------------------------------
    # Plans

    def estimated_duration(self, steps: Iterable[PlanStep]) -> int:
        """Weighted sum of step complexity tiers."""
        return sum(self.complexity_duration.get(step.complexity, 0) for step in steps)

    def risk_level(self, steps: Iterable[PlanStep]) -> RiskLevel:
        """Aggregate risk from the number of high-complexity steps."""
        high = sum(1 for step in steps if step.complexity == Complexity.HIGH)
        if high > self.high_risk_step_count:
            return RiskLevel.HIGH
        if high > 0:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def result_confidence(self, step: PlanStep, output: str, validation_passed: bool) -> float:
        """Confidence of an executed plan step's result."""
        confidence = self.result_base_confidence
        if validation_passed:
            confidence += self.validation_pass_bonus
        if len(output) > self.long_output_length:
            confidence += self.long_output_bonus
        if step.complexity == Complexity.LOW:
            confidence += self.low_complexity_bonus
        return clamp(confidence)
