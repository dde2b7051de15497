"""Step handlers for plan execution.

A handler runs the body of one plan step. Handlers are looked up by the
step's StepType; callers can replace any of them when constructing the
PlanEngine. The defaults only describe what they did: real tool invocation
belongs to the orchestrator.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from reasoning_gate.models.core import StepType
from reasoning_gate.models.plan import PlanExecutionContext, PlanStep, StepResult


class StepOutcome(BaseModel):
    """What a step body produced."""

    output: str = ""
    tools_used: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


@runtime_checkable
class StepHandler(Protocol):
    """Protocol for step bodies.

    Raising from a handler fails the step; the exception never escapes
    ``execute_plan``.
    """

    async def __call__(
        self,
        step: PlanStep,
        context: PlanExecutionContext,
        previous: Sequence[StepResult],
    ) -> StepOutcome: ...


async def run_analysis(
    step: PlanStep, context: PlanExecutionContext, previous: Sequence[StepResult]
) -> StepOutcome:
    return StepOutcome(output=f"Analysis completed for step: {step.title}")


async def run_tool_call(
    step: PlanStep, context: PlanExecutionContext, previous: Sequence[StepResult]
) -> StepOutcome:
    return StepOutcome(
        output=f"Tool call completed for step: {step.title}",
        tools_used=list(step.required_tools),
    )


async def run_verification(
    step: PlanStep, context: PlanExecutionContext, previous: Sequence[StepResult]
) -> StepOutcome:
    return StepOutcome(output=f"Verification completed for step: {step.title}")


async def run_decision(
    step: PlanStep, context: PlanExecutionContext, previous: Sequence[StepResult]
) -> StepOutcome:
    return StepOutcome(output=f"Decision completed for step: {step.title}")


async def run_synthesis(
    step: PlanStep, context: PlanExecutionContext, previous: Sequence[StepResult]
) -> StepOutcome:
    succeeded = sum(1 for result in previous if result.success)
    return StepOutcome(
        output=(
            f"Synthesis completed. Successfully executed {succeeded} "
            f"out of {len(previous)} steps."
        )
    )


DEFAULT_HANDLERS: Mapping[StepType, StepHandler] = {
    StepType.ANALYSIS: run_analysis,
    StepType.TOOL_CALL: run_tool_call,
    StepType.VERIFICATION: run_verification,
    StepType.DECISION: run_decision,
    StepType.SYNTHESIS: run_synthesis,
}
