"""Plan engine for reasoning-gate.

The PlanEngine turns a goal into a dependency-ordered plan, validates the
plan's step graph against the tools the registry currently knows, and
executes the steps in topological order, converting step failures into
failed results instead of raising.
"""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

import structlog

from reasoning_gate.exceptions import InvalidPlanError, PlanNotFoundError
from reasoning_gate.models.core import Complexity
from reasoning_gate.models.plan import (
    Plan,
    PlanExecutionContext,
    PlanStep,
    PlanValidation,
    StepResult,
)
from reasoning_gate.planning.classifier import RuleBasedClassifier, TaskClassifier
from reasoning_gate.planning.decomposition import GoalDecomposer
from reasoning_gate.planning.graph import duplicate_step_ids, find_cycle, topological_order
from reasoning_gate.planning.handlers import DEFAULT_HANDLERS, StepHandler
from reasoning_gate.storage import InMemoryRepository, Repository

if TYPE_CHECKING:
    from reasoning_gate.models.core import StepType
    from reasoning_gate.policy import ScoringPolicy
    from reasoning_gate.registry import ToolRegistry

logger = structlog.get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _plan_title(goal: str) -> str:
    return goal.split(".")[0].strip()[:50]


class PlanEngine:
    """Builds, validates and executes plans.

    Examples:
        >>> registry = InMemoryToolRegistry(["read_file", "ls", "grep"])
        >>> engine = PlanEngine(registry)
        >>> plan = await engine.create_plan("Read the project README file")
        >>> plan.step_ids
        ['analysis-1', 'verification-1', 'fs-1', 'synthesis-1']
        >>> results = await engine.execute_plan(plan.id)
        >>> all(result.success for result in results)
        True
    """

    def __init__(
        self,
        registry: ToolRegistry,
        *,
        policy: ScoringPolicy | None = None,
        classifier: TaskClassifier | None = None,
        decomposer: GoalDecomposer | None = None,
        handlers: Mapping[StepType, StepHandler] | None = None,
        store: Repository[Plan] | None = None,
        max_plans: int | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Source of the currently known tools
            policy: Scoring policy; defaults to the configured one
            classifier: Goal classifier; defaults to RuleBasedClassifier
            decomposer: Step decomposer; defaults to GoalDecomposer
            handlers: Step bodies overriding the defaults per step type
            store: Plan store; defaults to an in-memory repository
            max_plans: Capacity of the default store; defaults to the configured one
        """
        if policy is None or (store is None and max_plans is None):
            from reasoning_gate.config import get_settings

            settings = get_settings()
            policy = policy or settings.policy
            max_plans = max_plans or settings.max_plans

        self._registry = registry
        self._policy = policy
        self._classifier = classifier or RuleBasedClassifier()
        self._decomposer = decomposer or GoalDecomposer()
        self._handlers: dict[StepType, StepHandler] = {**DEFAULT_HANDLERS, **(handlers or {})}
        self._plans: Repository[Plan] = store or InMemoryRepository(max_items=max_plans or 1000)
        self._results: dict[str, list[StepResult]] = {}

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Plan lifecycle

    async def create_plan(
        self,
        goal: str,
        context: str = "",
        constraints: Sequence[str] = (),
    ) -> Plan:
        """Decompose ``goal`` into a validated plan and store it.

        Args:
            goal: The natural-language goal
            context: Working context supplied by the caller
            constraints: Caller constraints recorded on the plan

        Returns:
            The stored plan

        Raises:
            InvalidPlanError: If the decomposed plan fails validation
            CapacityError: If the plan store is full
        """
        available = await self._registry.tool_names()
        category = self._classifier.classify(goal)
        steps = self._decomposer.decompose(goal, category, available, context)

        plan = Plan(
            title=_plan_title(goal),
            goal=goal,
            context=context,
            steps=tuple(steps),
            estimated_duration=self._policy.estimated_duration(steps),
            risk_level=self._policy.risk_level(steps),
            available_tools=available,
            constraints=tuple(constraints),
        )

        validation = await self.validate_plan(plan)
        if not validation.is_valid:
            logger.warning("plan_rejected", goal=goal, errors=validation.errors)
            raise InvalidPlanError(validation.errors)

        await self._plans.add(plan.id, plan)
        logger.info(
            "plan_created",
            plan_id=plan.id,
            category=str(category),
            steps=len(plan.steps),
            risk_level=str(plan.risk_level),
        )
        return plan

    async def validate_plan(self, plan: Plan) -> PlanValidation:
        """Check a plan's step graph and tool requirements.

        Duplicate step ids, cycles, required tools missing from the registry
        and dangling dependency ids are errors. The cycle check needs unique
        ids, so it is skipped while duplicates remain. Too many
        high-complexity steps and steps without validation criteria are
        warnings only.
        """
        errors: list[str] = []
        warnings: list[str] = []
        suggestions: list[str] = []

        duplicates = duplicate_step_ids(plan.steps)
        for step_id in duplicates:
            errors.append(f"Duplicate step id '{step_id}'")
        if duplicates:
            suggestions.append("Give every step a unique id")
        else:
            cycle = find_cycle(plan.steps)
            if cycle is not None:
                errors.append(f"Plan contains circular dependencies: {' -> '.join(cycle)}")
                suggestions.append("Remove one dependency along the cycle")

        known_tools = await self._registry.tool_names()
        for step in plan.steps:
            for tool in step.required_tools:
                if tool not in known_tools:
                    errors.append(f"Required tool '{tool}' is not available for step '{step.id}'")

        step_ids = set(plan.step_ids)
        for step in plan.steps:
            for dependency in step.dependencies:
                if dependency not in step_ids:
                    errors.append(f"Step '{step.id}' depends on non-existent step '{dependency}'")

        high_complexity = sum(1 for step in plan.steps if step.complexity == Complexity.HIGH)
        if high_complexity > self._policy.max_high_complexity_steps:
            warnings.append("Plan has many high-complexity steps, consider breaking down further")

        for step in plan.steps:
            if not step.validation_criteria:
                warnings.append(f"Step '{step.id}' lacks validation criteria")

        return PlanValidation(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
        )

    async def get_plan(self, plan_id: str) -> Plan:
        """Return a stored plan.

        Raises:
            PlanNotFoundError: If no plan has this id
        """
        plan = await self._plans.get(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return plan

    async def list_plans(self) -> list[Plan]:
        """Return every stored plan."""
        return await self._plans.values()

    async def delete_plan(self, plan_id: str) -> None:
        """Delete a plan and its execution results.

        Raises:
            PlanNotFoundError: If no plan has this id
        """
        if not await self._plans.delete(plan_id):
            raise PlanNotFoundError(plan_id)
        self._results.pop(plan_id, None)
        logger.debug("plan_deleted", plan_id=plan_id)

    async def get_execution_results(self, plan_id: str) -> list[StepResult]:
        """Results of the most recent execution pass, empty if never executed.

        Raises:
            PlanNotFoundError: If no plan has this id
        """
        await self.get_plan(plan_id)
        return list(self._results.get(plan_id, []))

    # ------------------------------------------------------------------
    # Execution

    async def execute_plan(
        self,
        plan_id: str,
        context: PlanExecutionContext | None = None,
    ) -> list[StepResult]:
        """Execute a stored plan in dependency order.

        Each step yields exactly one result. A step whose dependencies have
        not all succeeded gets a failed result without its body running. A
        failed step without a fallback halts the pass; the remaining steps
        are reported as skipped.

        Raises:
            PlanNotFoundError: If no plan has this id
            CyclicDependencyError: If the step graph contains a cycle
            DuplicateStepError: If two steps share an id
        """
        plan = await self.get_plan(plan_id)
        context = context or PlanExecutionContext(user_goal=plan.goal)
        ordered = topological_order(plan.steps)

        results: list[StepResult] = []
        succeeded: set[str] = set()
        logger.info("plan_execution_started", plan_id=plan_id, steps=len(ordered))

        for index, step in enumerate(ordered):
            unmet = [dep for dep in step.dependencies if dep not in succeeded]
            if unmet:
                logger.debug("step_dependencies_unmet", plan_id=plan_id, step_id=step.id, unmet=unmet)
                results.append(
                    StepResult(
                        step_id=step.id,
                        success=False,
                        output=f"Dependencies not satisfied: {', '.join(step.dependencies)}",
                        errors=["Dependencies not satisfied"],
                        skipped=True,
                    )
                )
                continue

            result = await self._execute_step(step, context, results)
            results.append(result)
            if result.success:
                succeeded.add(step.id)
                continue

            logger.warning(
                "step_failed",
                plan_id=plan_id,
                step_id=step.id,
                errors=result.errors,
                has_fallback=step.fallback_strategy is not None,
            )
            if not step.fallback_strategy:
                results.extend(self._skip_remaining(ordered[index + 1 :], step))
                logger.info("plan_execution_halted", plan_id=plan_id, step_id=step.id)
                break

        self._results[plan_id] = results
        logger.info(
            "plan_execution_finished",
            plan_id=plan_id,
            succeeded=len(succeeded),
            total=len(results),
        )
        return results

    async def _execute_step(
        self,
        step: PlanStep,
        context: PlanExecutionContext,
        previous: Sequence[StepResult],
    ) -> StepResult:
        start = time.perf_counter()

        errors: list[str] = []
        for tool in step.required_tools:
            if await self._registry.get_tool(tool) is None:
                errors.append(f"Required tool '{tool}' not available")
        if errors:
            return StepResult(
                step_id=step.id,
                success=False,
                output=f"Tool validation failed: {', '.join(errors)}",
                execution_time_ms=_elapsed_ms(start),
                errors=errors,
            )

        handler = self._handlers.get(step.type)
        if handler is None:
            return StepResult(
                step_id=step.id,
                success=False,
                output=f"No handler for step type '{step.type}'",
                execution_time_ms=_elapsed_ms(start),
                errors=[f"No handler for step type '{step.type}'"],
            )

        try:
            outcome = await handler(step, context, list(previous))
        except Exception as e:
            return StepResult(
                step_id=step.id,
                success=False,
                output=f"Step execution failed: {e}",
                execution_time_ms=_elapsed_ms(start),
                errors=[str(e) or type(e).__name__],
            )

        validation_passed = self._output_satisfies(step, outcome.output)
        return StepResult(
            step_id=step.id,
            success=True,
            output=outcome.output,
            tools_used=outcome.tools_used,
            validation_passed=validation_passed,
            execution_time_ms=_elapsed_ms(start),
            confidence=self._policy.result_confidence(step, outcome.output, validation_passed),
            warnings=outcome.warnings,
        )

    @staticmethod
    def _output_satisfies(step: PlanStep, output: str) -> bool:
        """Each criterion's leading word must appear in the output."""
        lowered = output.lower()
        for criterion in step.validation_criteria:
            words = criterion.lower().split()
            if words and words[0] not in lowered:
                return False
        return True

    @staticmethod
    def _skip_remaining(steps: Sequence[PlanStep], failed: PlanStep) -> list[StepResult]:
        return [
            StepResult(
                step_id=step.id,
                success=False,
                output=f"Not executed: step '{failed.id}' failed without a fallback",
                errors=["Execution halted"],
                skipped=True,
            )
            for step in steps
        ]
