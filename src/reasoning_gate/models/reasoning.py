"""Reasoning chain models for reasoning-gate.

This module defines the structures owned by the reasoning engine: typed,
confidence-scored reasoning steps, the chain that orders them, the issues
raised while validating them, and decision points with ranked options.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from reasoning_gate.models.core import (
    ChainStatus,
    ReasoningIssueType,
    ReasoningStepType,
    RiskLevel,
    Severity,
    StepValidationStatus,
)


class ReasoningStep(BaseModel):
    """A single inference step.

    ``confidence`` is computed by the engine from evidence, assumptions and
    step type; callers never supply it.
    """

    id: str
    type: ReasoningStepType
    content: str
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    evidence: list[str] = Field(default_factory=list)
    assumptions: list[str] = Field(default_factory=list)
    alternatives: list[str] = Field(default_factory=list)
    validation_status: StepValidationStatus = StepValidationStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)


class ReasoningContext(BaseModel):
    """Execution context of a reasoning chain.

    ``timeout_ms`` and ``max_steps`` are advisory budgets; the engine only
    records and reports them.

    Examples:
        >>> ctx = ReasoningContext(available_tools={"read_file", "ls"}, constraints=["sudo"])
        >>> "ls" in ctx.available_tools
        True
    """

    available_tools: frozenset[str] = Field(default_factory=frozenset)
    working_directory: str = ""
    previous_chains: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(
        default_factory=list,
        description="Forbidden substrings; step content containing one is rejected",
    )
    timeout_ms: int = Field(default=300_000, gt=0)
    max_steps: int = Field(default=50, ge=1)
    validation_required: bool = True


class ReasoningChain(BaseModel):
    """An ordered sequence of reasoning steps toward a goal."""

    id: str = Field(default_factory=lambda: f"reasoning_{uuid4().hex}")
    goal: str
    steps: list[ReasoningStep] = Field(default_factory=list)
    current_step: int = 0
    overall_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    status: ChainStatus = ChainStatus.ACTIVE
    context: ReasoningContext = Field(default_factory=ReasoningContext)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def last_step(self) -> ReasoningStep | None:
        """The most recently appended step, if any."""
        return self.steps[-1] if self.steps else None

    def touch(self) -> None:
        """Refresh ``updated_at``."""
        self.updated_at = datetime.now()


class ReasoningIssue(BaseModel):
    """A finding against a reasoning step or a whole chain."""

    type: ReasoningIssueType
    severity: Severity
    step_id: str = Field(description="Offending step id, or 'chain' for chain-level issues")
    description: str
    suggested_fix: str = ""


class ReasoningValidation(BaseModel):
    """Result of validating a reasoning step or chain."""

    is_valid: bool
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    issues: list[ReasoningIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class DecisionOption(BaseModel):
    """A candidate answer at a decision point.

    ``feasibility_score`` is filled in by the engine when the decision point
    is created.
    """

    id: str = Field(default_factory=lambda: f"option_{uuid4().hex[:8]}")
    description: str
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.MEDIUM
    required_tools: list[str] = Field(default_factory=list)
    feasibility_score: float = Field(default=0.0, ge=0.0, le=1.0)


class DecisionPoint(BaseModel):
    """A question with options ranked by feasibility, highest first."""

    id: str = Field(default_factory=lambda: f"decision_{uuid4().hex}")
    chain_id: str
    question: str
    options: list[DecisionOption] = Field(default_factory=list)
    selected_option: str | None = None
    rationale: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=datetime.now)
