"""
reasoning-gate: goal planning, reasoning chains and response validation.

This package sits between a natural-language goal and the execution of
tool-calling actions by an automated assistant. Three engines cooperate:

- PlanEngine decomposes a goal into dependency-ordered steps, validates the
  step graph and executes it in topological order.
- ReasoningEngine keeps explicit, confidence-scored chains of inference
  steps and ranks decision options by feasibility.
- ResponseValidator checks a generated response against availability,
  safety and consistency rules before any of its tool calls may run.
"""

__version__ = "0.1.0"

# ============================================================================
# Engines
# ============================================================================
from reasoning_gate.planning import PlanEngine
from reasoning_gate.reasoning import ReasoningEngine
from reasoning_gate.validation import ResponseValidator
from reasoning_gate.verification import ToolAvailabilityVerifier

# ============================================================================
# Tools, configuration and errors
# ============================================================================
from reasoning_gate.config import SafetyConfig, Settings, configure_settings, get_settings
from reasoning_gate.exceptions import (
    CapacityError,
    ChainNotFoundError,
    CyclicDependencyError,
    DecisionError,
    DuplicateStepError,
    InvalidPlanError,
    NotFoundError,
    PlanNotFoundError,
    ReasoningGateError,
    StructuralError,
)
from reasoning_gate.policy import ScoringPolicy
from reasoning_gate.registry import InMemoryToolRegistry, ToolRegistry, infer_capabilities

__all__ = [
    "__version__",
    # Engines
    "PlanEngine",
    "ReasoningEngine",
    "ResponseValidator",
    "ToolAvailabilityVerifier",
    # Tools
    "InMemoryToolRegistry",
    "ToolRegistry",
    "infer_capabilities",
    # Configuration
    "SafetyConfig",
    "ScoringPolicy",
    "Settings",
    "configure_settings",
    "get_settings",
    # Errors
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
