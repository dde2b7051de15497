"""Reasoning engine package.

Confidence-scored reasoning chains, step validation rules and decision
points with feasibility-ranked options.
"""

from reasoning_gate.reasoning.engine import ReasoningEngine
from reasoning_gate.reasoning.rules import (
    AssumptionRule,
    CircularReasoningRule,
    ConsistencyRule,
    ConstraintRule,
    EvidenceRule,
    StepRule,
    ToolAvailabilityRule,
    default_step_rules,
)

__all__ = [
    "AssumptionRule",
    "CircularReasoningRule",
    "ConsistencyRule",
    "ConstraintRule",
    "EvidenceRule",
    "ReasoningEngine",
    "StepRule",
    "ToolAvailabilityRule",
    "default_step_rules",
]
