"""Exception hierarchy for reasoning-gate.

Only not-found lookups and structural defects are raised. Policy problems
with plans, reasoning steps and responses are returned as data.
"""

from __future__ import annotations

from collections.abc import Sequence


class ReasoningGateError(Exception):
    """Base exception for reasoning-gate errors."""


class NotFoundError(ReasoningGateError, KeyError):
    """Raised when a plan or chain id does not exist."""

    kind = "object"

    def __init__(self, object_id: str) -> None:
        super().__init__(f"{self.kind.capitalize()} {object_id} not found")
        self.object_id = object_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class PlanNotFoundError(NotFoundError):
    """Raised when a plan id does not exist."""

    kind = "plan"


class ChainNotFoundError(NotFoundError):
    """Raised when a reasoning chain id does not exist."""

    kind = "reasoning chain"


class StructuralError(ReasoningGateError):
    """Raised when a plan's step graph is malformed."""


class CyclicDependencyError(StructuralError):
    """Raised when the step dependency graph contains a cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        """Initialize the error.

        Args:
            cycle: Step ids along the detected cycle, first id repeated last
        """
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")
        self.cycle = list(cycle)


class DuplicateStepError(StructuralError):
    """Raised when two steps of one plan share an id."""

    def __init__(self, step_ids: Sequence[str]) -> None:
        super().__init__(f"Duplicate step ids: {', '.join(step_ids)}")
        self.step_ids = list(step_ids)


class InvalidPlanError(StructuralError):
    """Raised when a freshly decomposed plan fails validation."""

    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__(f"Invalid plan: {', '.join(errors)}")
        self.errors = list(errors)


class DecisionError(ReasoningGateError, ValueError):
    """Raised when a decision cannot be made."""


class CapacityError(ReasoningGateError):
    """Raised when a store has reached its capacity."""


__all__ = [
    "CapacityError",
    "ChainNotFoundError",
    "CyclicDependencyError",
    "DecisionError",
    "DuplicateStepError",
    "InvalidPlanError",
    "NotFoundError",
    "PlanNotFoundError",
    "ReasoningGateError",
    "StructuralError",
]
