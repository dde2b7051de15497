"""Plan engine package.

Goal classification, decomposition into dependency-ordered steps, graph
validation and ordered execution with partial-failure propagation.
"""

from reasoning_gate.planning.classifier import (
    CATEGORY_PATTERNS,
    RuleBasedClassifier,
    TaskClassifier,
)
from reasoning_gate.planning.decomposition import GoalDecomposer
from reasoning_gate.planning.engine import PlanEngine
from reasoning_gate.planning.graph import (
    dependency_graph,
    duplicate_step_ids,
    find_cycle,
    has_cycle,
    topological_order,
)
from reasoning_gate.planning.handlers import DEFAULT_HANDLERS, StepHandler, StepOutcome

__all__ = [
    "CATEGORY_PATTERNS",
    "DEFAULT_HANDLERS",
    "GoalDecomposer",
    "PlanEngine",
    "RuleBasedClassifier",
    "StepHandler",
    "StepOutcome",
    "TaskClassifier",
    "dependency_graph",
    "duplicate_step_ids",
    "find_cycle",
    "has_cycle",
    "topological_order",
]
