"""Reasoning engine for reasoning-gate.

The ReasoningEngine owns reasoning chains: ordered, typed inference steps
whose confidence is computed from evidence, assumptions and step type.
Every step is validated on insertion. Rejected steps stay in the chain with
their issues appended to their evidence, and lower the chain's overall
confidence.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

import structlog

from reasoning_gate.exceptions import ChainNotFoundError, DecisionError
from reasoning_gate.models.core import (
    ChainStatus,
    ReasoningIssueType,
    ReasoningStepType,
    Severity,
    StepValidationStatus,
)
from reasoning_gate.models.reasoning import (
    DecisionOption,
    DecisionPoint,
    ReasoningChain,
    ReasoningContext,
    ReasoningIssue,
    ReasoningStep,
    ReasoningValidation,
)
from reasoning_gate.reasoning.rules import StepRule, default_step_rules
from reasoning_gate.storage import InMemoryRepository, Repository

if TYPE_CHECKING:
    from reasoning_gate.models.response import AIResponse, ValidationResult
    from reasoning_gate.policy import ScoringPolicy
    from reasoning_gate.registry import ToolRegistry

logger = structlog.get_logger(__name__)


def _unique(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(item for item in items if item))


class ReasoningEngine:
    """Maintains confidence-scored reasoning chains.

    Examples:
        >>> engine = ReasoningEngine()
        >>> chain = await engine.start_reasoning(
        ...     "Find the config loader", ReasoningContext(available_tools={"grep"})
        ... )
        >>> step = await engine.add_reasoning_step(
        ...     chain.id, ReasoningStepType.HYPOTHESIS, "The loader lives in config.py"
        ... )
        >>> step.confidence
        0.6
    """

    def __init__(
        self,
        registry: ToolRegistry | None = None,
        *,
        policy: ScoringPolicy | None = None,
        rules: Sequence[StepRule] | None = None,
        tool_tokens: Iterable[str] | None = None,
        store: Repository[ReasoningChain] | None = None,
        max_chains: int | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Used to fill the tool set of chains started without a context
            policy: Scoring policy; defaults to the configured one
            rules: Step rules; defaults to the standard set built from the policy
            tool_tokens: Tool names recognised in action text; defaults to the configured ones
            store: Chain store; defaults to an in-memory repository
            max_chains: Capacity of the default store; defaults to the configured one
        """
        from reasoning_gate.config import get_settings

        settings = get_settings()
        self._registry = registry
        self._policy = policy or settings.policy
        if rules is None:
            rules = default_step_rules(
                max_assumptions=self._policy.max_assumptions,
                circular_threshold=self._policy.circular_similarity_threshold,
                tool_names=settings.known_tool_tokens if tool_tokens is None else tool_tokens,
            )
        self._rules: list[StepRule] = list(rules)
        self._chains: Repository[ReasoningChain] = store or InMemoryRepository(
            max_items=max_chains or settings.max_chains
        )

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    @property
    def rules(self) -> list[StepRule]:
        return list(self._rules)

    # ------------------------------------------------------------------
    # Chain lifecycle

    async def start_reasoning(
        self,
        goal: str,
        context: ReasoningContext | None = None,
    ) -> ReasoningChain:
        """Start a chain seeded with a validated observation of the goal.

        Args:
            goal: What the chain reasons toward
            context: Tool set, constraints and budgets. Without one, the
                registry's current tools are used.

        Raises:
            CapacityError: If the chain store is full
        """
        if context is None:
            tools = await self._registry.tool_names() if self._registry else frozenset()
            context = ReasoningContext(available_tools=tools)

        chain = ReasoningChain(goal=goal, context=context)
        chain.steps.append(
            ReasoningStep(
                id="step-0",
                type=ReasoningStepType.OBSERVATION,
                content=f"Starting reasoning for goal: {goal}",
                confidence=self._policy.seed_confidence,
                evidence=[f"Goal: {goal}"],
                validation_status=StepValidationStatus.VALIDATED,
            )
        )
        chain.overall_confidence = self._overall_confidence(chain)
        await self._chains.add(chain.id, chain)
        logger.info("chain_started", chain_id=chain.id, tools=len(context.available_tools))
        return chain

    async def get_chain(self, chain_id: str) -> ReasoningChain:
        """Return a chain.

        Raises:
            ChainNotFoundError: If no chain has this id
        """
        chain = await self._chains.get(chain_id)
        if chain is None:
            raise ChainNotFoundError(chain_id)
        return chain

    async def list_active_chains(self) -> list[ReasoningChain]:
        """Return chains whose status is active."""
        return [chain for chain in await self._chains.values() if chain.status == ChainStatus.ACTIVE]

    async def delete_chain(self, chain_id: str) -> None:
        """Delete a chain.

        Raises:
            ChainNotFoundError: If no chain has this id
        """
        if not await self._chains.delete(chain_id):
            raise ChainNotFoundError(chain_id)
        logger.debug("chain_deleted", chain_id=chain_id)

    async def pause_chain(self, chain_id: str) -> bool:
        """Pause an active chain. Returns False if the chain was not active."""
        return await self._transition(chain_id, {ChainStatus.ACTIVE}, ChainStatus.PAUSED)

    async def resume_chain(self, chain_id: str) -> bool:
        """Resume a paused chain. Returns False if the chain was not paused."""
        return await self._transition(chain_id, {ChainStatus.PAUSED}, ChainStatus.ACTIVE)

    async def fail_chain(self, chain_id: str) -> bool:
        """Mark an active or paused chain as failed."""
        return await self._transition(
            chain_id, {ChainStatus.ACTIVE, ChainStatus.PAUSED}, ChainStatus.FAILED
        )

    async def _transition(
        self,
        chain_id: str,
        allowed: set[ChainStatus],
        target: ChainStatus,
    ) -> bool:
        chain = await self.get_chain(chain_id)
        if chain.status not in allowed:
            return False
        chain.status = target
        chain.touch()
        await self._chains.put(chain.id, chain)
        logger.debug("chain_status_changed", chain_id=chain_id, status=str(target))
        return True

    # ------------------------------------------------------------------
    # Steps

    async def add_reasoning_step(
        self,
        chain_id: str,
        step_type: ReasoningStepType,
        content: str,
        evidence: Sequence[str] = (),
        assumptions: Sequence[str] = (),
        alternatives: Sequence[str] = (),
    ) -> ReasoningStep:
        """Append a step, scoring and validating it first.

        A step that fails validation is still appended, with status
        ``rejected`` and its issue descriptions added to its evidence.

        Raises:
            ChainNotFoundError: If no chain has this id
            ValueError: If ``step_type`` is not a chain step type, such as a
                response-only ``analysis`` step
        """
        step_type = ReasoningStepType(step_type)
        chain = await self.get_chain(chain_id)
        previous = list(chain.steps)
        step = ReasoningStep(
            id=f"step-{len(previous)}",
            type=step_type,
            content=content,
            evidence=list(evidence),
            assumptions=list(assumptions),
            alternatives=list(alternatives),
        )
        step.confidence = self._policy.step_confidence(
            step.type,
            len(step.evidence),
            len(step.assumptions),
            previous[-1].type if previous else None,
        )

        validation = self._validate_step(step, previous, chain.context)
        if validation.is_valid:
            step.validation_status = StepValidationStatus.VALIDATED
        else:
            step.validation_status = StepValidationStatus.REJECTED
            step.evidence.append(
                f"Validation issues: {', '.join(issue.description for issue in validation.issues)}"
            )
            logger.info(
                "reasoning_step_rejected",
                chain_id=chain_id,
                step_id=step.id,
                issues=[str(issue.type) for issue in validation.issues],
            )

        chain.steps.append(step)
        chain.current_step = len(chain.steps) - 1
        chain.overall_confidence = self._overall_confidence(chain)
        chain.touch()
        await self._chains.put(chain.id, chain)

        if len(chain.steps) > chain.context.max_steps:
            logger.warning(
                "chain_step_budget_exceeded",
                chain_id=chain_id,
                steps=len(chain.steps),
                max_steps=chain.context.max_steps,
            )
        return step

    def _validate_step(
        self,
        step: ReasoningStep,
        previous: Sequence[ReasoningStep],
        context: ReasoningContext,
    ) -> ReasoningValidation:
        issues: list[ReasoningIssue] = []
        for rule in self._rules:
            issues.extend(rule.check(step, previous, context))
        return ReasoningValidation(
            is_valid=not any(issue.severity.blocking for issue in issues),
            confidence=self._policy.issue_confidence(issue.severity for issue in issues),
            issues=issues,
            suggestions=_unique(issue.suggested_fix for issue in issues),
        )

    def _overall_confidence(self, chain: ReasoningChain) -> float:
        validated = [
            step.confidence
            for step in chain.steps
            if step.validation_status == StepValidationStatus.VALIDATED
        ]
        rejected = sum(
            1 for step in chain.steps if step.validation_status == StepValidationStatus.REJECTED
        )
        return self._policy.chain_confidence(validated, rejected)

    # ------------------------------------------------------------------
    # Decisions

    async def create_decision_point(
        self,
        chain_id: str,
        question: str,
        options: Sequence[DecisionOption],
    ) -> DecisionPoint:
        """Score options by feasibility and rank them, highest first.

        Feasibility is computed against the chain's available tools. An
        action step summarising the question and options is appended to the
        chain.

        Raises:
            ChainNotFoundError: If no chain has this id
        """
        chain = await self.get_chain(chain_id)
        scored = [
            option.model_copy(
                update={
                    "feasibility_score": self._policy.feasibility(
                        option, chain.context.available_tools
                    )
                }
            )
            for option in options
        ]
        ranked = sorted(scored, key=lambda option: option.feasibility_score, reverse=True)
        decision = DecisionPoint(chain_id=chain.id, question=question, options=ranked)

        await self.add_reasoning_step(
            chain_id,
            ReasoningStepType.ACTION,
            f"Decision point: {question}",
            evidence=[f"{len(ranked)} options evaluated"],
            assumptions=["Best option will be selected based on feasibility"],
            alternatives=[option.description for option in ranked],
        )
        logger.debug("decision_point_created", chain_id=chain_id, options=len(ranked))
        return decision

    async def make_decision(
        self,
        chain_id: str,
        decision: DecisionPoint,
        rationale: str | None = None,
    ) -> DecisionOption:
        """Select the top-ranked option and record the choice as a conclusion.

        Args:
            chain_id: Chain the decision belongs to
            decision: A decision point returned by ``create_decision_point``
            rationale: Optional rationale text; the selection itself is fixed

        Raises:
            ChainNotFoundError: If no chain has this id
            DecisionError: If the decision point has no options
        """
        await self.get_chain(chain_id)
        if not decision.options:
            raise DecisionError(f"Decision point {decision.id} has no options")

        selected = decision.options[0]
        decision.selected_option = selected.id
        decision.rationale = (
            rationale
            or f"Selected based on highest feasibility score ({selected.feasibility_score:.2f})"
        )
        decision.confidence = selected.feasibility_score

        await self.add_reasoning_step(
            chain_id,
            ReasoningStepType.CONCLUSION,
            f"Decision made: {selected.description}",
            evidence=[
                f"Feasibility score: {selected.feasibility_score:.2f}",
                f"Rationale: {decision.rationale}",
            ],
            assumptions=["Option is feasible with available tools"],
        )
        logger.info("decision_made", chain_id=chain_id, option_id=selected.id)
        return selected

    # ------------------------------------------------------------------
    # Completion and chain validation

    async def complete_reasoning(self, chain_id: str, final_conclusion: str) -> ReasoningChain:
        """Append the final conclusion and mark the chain completed.

        Raises:
            ChainNotFoundError: If no chain has this id
        """
        chain = await self.get_chain(chain_id)
        await self.add_reasoning_step(
            chain_id,
            ReasoningStepType.CONCLUSION,
            final_conclusion,
            evidence=[f"Chain completed with {len(chain.steps)} steps"],
            assumptions=["All critical steps validated"],
        )
        chain = await self.get_chain(chain_id)
        chain.status = ChainStatus.COMPLETED
        chain.touch()
        await self._chains.put(chain.id, chain)
        logger.info(
            "chain_completed",
            chain_id=chain_id,
            steps=len(chain.steps),
            confidence=chain.overall_confidence,
        )
        return chain

    async def record_action(
        self,
        chain_id: str,
        response: AIResponse,
        result: ValidationResult,
    ) -> ReasoningStep:
        """Record a validated response's tool calls as an action step.

        The validation outcome becomes the step's evidence, so later steps
        can cite it.

        Raises:
            ChainNotFoundError: If no chain has this id
        """
        names = [call.name for call in response.tool_calls]
        if names:
            content = f"Executed {len(names)} tool call(s): {', '.join(names)}"
        else:
            content = "Accepted response without tool calls"
        evidence = [
            f"Validation score: {result.score:.2f}",
            f"Execution allowed: {result.allow_execution}",
            *(f"{issue.severity} {issue.type}: {issue.message}" for issue in result.issues),
        ]
        return await self.add_reasoning_step(chain_id, ReasoningStepType.ACTION, content, evidence)

    async def validate_chain(self, chain_id: str) -> ReasoningValidation:
        """Re-validate every step and check chain-level structure.

        Each step is checked against the steps before it. A step rejected
        when it was added stays a high issue even if it passes on re-check.
        A chain shorter than the policy minimum is a medium issue; a chain
        without any conclusion is a high issue.

        Raises:
            ChainNotFoundError: If no chain has this id
        """
        chain = await self.get_chain(chain_id)
        issues: list[ReasoningIssue] = []
        suggestions: list[str] = []

        for index, step in enumerate(chain.steps):
            validation = self._validate_step(step, chain.steps[:index], chain.context)
            issues.extend(validation.issues)
            suggestions.extend(validation.suggestions)
            # Appended rejection evidence can satisfy the rule that rejected it
            if step.validation_status == StepValidationStatus.REJECTED and validation.is_valid:
                issues.append(
                    ReasoningIssue(
                        type=ReasoningIssueType.REJECTED_STEP,
                        severity=Severity.HIGH,
                        step_id=step.id,
                        description=f"Step {step.id} was rejected when added",
                        suggested_fix="Revise or replace the rejected step",
                    )
                )
                suggestions.append("Revise or replace the rejected step")

        if len(chain.steps) < self._policy.min_chain_length:
            issues.append(
                ReasoningIssue(
                    type=ReasoningIssueType.LOGICAL_INCONSISTENCY,
                    severity=Severity.MEDIUM,
                    step_id="chain",
                    description="Reasoning chain is too short",
                    suggested_fix="Add more detailed reasoning steps",
                )
            )
        if not any(step.type == ReasoningStepType.CONCLUSION for step in chain.steps):
            issues.append(
                ReasoningIssue(
                    type=ReasoningIssueType.LOGICAL_INCONSISTENCY,
                    severity=Severity.HIGH,
                    step_id="chain",
                    description="No conclusion step found",
                    suggested_fix="Add a conclusion step",
                )
            )

        suggestions.extend(issue.suggested_fix for issue in issues if issue.step_id == "chain")
        return ReasoningValidation(
            is_valid=not any(issue.severity.blocking for issue in issues),
            confidence=chain.overall_confidence,
            issues=issues,
            suggestions=_unique(suggestions),
        )
