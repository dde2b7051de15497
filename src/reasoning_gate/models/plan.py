"""Plan models for reasoning-gate.

This module defines the data structures produced and consumed by the plan
engine: steps with declared dependencies, the plan that owns them, the
per-step execution results and the structural validation report.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from reasoning_gate.models.core import Complexity, RiskLevel, StepType


def _plan_id() -> str:
    return f"plan_{uuid4().hex}"


class PlanStep(BaseModel):
    """A single step of a plan.

    Steps are immutable; executing a step produces a separate StepResult.

    Examples:
        >>> step = PlanStep(
        ...     id="fs-1",
        ...     title="Check File System State",
        ...     type=StepType.TOOL_CALL,
        ...     dependencies=["verification-1"],
        ...     required_tools=["ls"],
        ... )
        >>> step.complexity
        <Complexity.MEDIUM: 'medium'>
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, description="Step identifier, unique within its plan")
    title: str = Field(description="Short human-readable title")
    description: str = Field(default="", description="What the step does")
    type: StepType = Field(description="Classification tag used to dispatch execution")
    dependencies: tuple[str, ...] = Field(
        default=(),
        description="Ids of steps that must succeed before this one runs",
    )
    required_tools: tuple[str, ...] = Field(
        default=(),
        description="Tool names the step needs",
    )
    complexity: Complexity = Field(default=Complexity.MEDIUM)
    expected_output: str | None = Field(default=None)
    validation_criteria: tuple[str, ...] = Field(
        default=(),
        description="Phrases whose leading word must appear in the step output",
    )
    fallback_strategy: str | None = Field(
        default=None,
        description="Advisory text; a failed step with a fallback does not halt execution",
    )


class Plan(BaseModel):
    """A dependency-ordered decomposition of a goal.

    The goal and the tool snapshot are fixed once the plan is built.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_plan_id)
    title: str = Field(default="")
    goal: str = Field(description="The natural-language goal")
    context: str = Field(default="", description="Working context supplied by the caller")
    steps: tuple[PlanStep, ...] = Field(default=())
    estimated_duration: int = Field(default=0, ge=0)
    risk_level: RiskLevel = Field(default=RiskLevel.LOW)
    available_tools: frozenset[str] = Field(
        default_factory=frozenset,
        description="Tool names registered when the plan was built",
    )
    constraints: tuple[str, ...] = Field(default=())
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def step_ids(self) -> list[str]:
        """Ids of the plan's steps in declaration order."""
        return [step.id for step in self.steps]

    def get_step(self, step_id: str) -> PlanStep | None:
        """Return the step with the given id, or None."""
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


class StepResult(BaseModel):
    """Outcome of executing (or skipping) one plan step."""

    step_id: str
    success: bool
    output: str = ""
    tools_used: list[str] = Field(default_factory=list)
    validation_passed: bool = False
    execution_time_ms: float = Field(default=0.0, ge=0.0)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    skipped: bool = Field(
        default=False,
        description="True when the step was not attempted because an earlier step failed",
    )


class PlanValidation(BaseModel):
    """Structural validation report for a plan."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class PlanExecutionContext(BaseModel):
    """Caller-supplied context for a plan execution pass.

    ``timeout_ms`` is advisory; the caller enforces it.
    """

    user_goal: str = ""
    working_directory: str = ""
    timeout_ms: int = Field(default=300_000, gt=0)
    metadata: dict[str, Any] = Field(default_factory=dict)
