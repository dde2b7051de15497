"""
Pytest configuration and shared fixtures for reasoning-gate tests.

This module provides fixtures shared across the unit tests:
- Registry fixtures with the standard tool set
- Engine fixtures for planning, reasoning and validation
- Data fixtures for sample responses and contexts
"""

from __future__ import annotations

import os

import pytest

from reasoning_gate.config import configure_settings
from reasoning_gate.models.core import ResponseStepType
from reasoning_gate.models.response import (
    AIResponse,
    ResponseReasoningStep,
    ToolCall,
    ValidationContext,
)
from reasoning_gate.planning import PlanEngine
from reasoning_gate.policy import ScoringPolicy
from reasoning_gate.reasoning import ReasoningEngine
from reasoning_gate.registry import InMemoryToolRegistry
from reasoning_gate.validation import ResponseValidator

STANDARD_TOOLS = (
    "read_file",
    "write_file",
    "edit",
    "ls",
    "grep",
    "glob",
    "shell",
    "web_fetch",
    "web_search",
)


# ============================================================================
# SETTINGS
# ============================================================================


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Give every test fresh default settings, unaffected by the environment."""
    for name in list(os.environ):
        if name.startswith("REASONING_GATE_"):
            monkeypatch.delenv(name)
    settings = configure_settings()
    yield settings
    configure_settings()


# ============================================================================
# REGISTRY FIXTURES
# ============================================================================


@pytest.fixture
def registry() -> InMemoryToolRegistry:
    """Provide a registry with the standard tool set.

    ``shell`` declares a required string ``command`` parameter.
    """
    registry = InMemoryToolRegistry(name for name in STANDARD_TOOLS if name != "shell")
    registry.register(
        "shell",
        description="Run a shell command",
        required_parameters=["command"],
        parameter_types={"command": "string"},
    )
    return registry


@pytest.fixture
def empty_registry() -> InMemoryToolRegistry:
    """Provide a registry with no tools."""
    return InMemoryToolRegistry()


# ============================================================================
# ENGINE FIXTURES
# ============================================================================


@pytest.fixture
def policy() -> ScoringPolicy:
    """Provide the default scoring policy."""
    return ScoringPolicy()


@pytest.fixture
def plan_engine(registry: InMemoryToolRegistry) -> PlanEngine:
    """Provide a plan engine over the standard registry."""
    return PlanEngine(registry)


@pytest.fixture
def reasoning_engine(registry: InMemoryToolRegistry) -> ReasoningEngine:
    """Provide a reasoning engine over the standard registry."""
    return ReasoningEngine(registry)


@pytest.fixture
def validator(registry: InMemoryToolRegistry) -> ResponseValidator:
    """Provide a response validator over the standard registry."""
    return ResponseValidator(registry)


# ============================================================================
# DATA FIXTURES
# ============================================================================


@pytest.fixture
def validation_context() -> ValidationContext:
    """Provide a validation context with the standard tool set."""
    return ValidationContext(available_tools=frozenset(STANDARD_TOOLS), working_directory="/work")


@pytest.fixture
def safe_response() -> AIResponse:
    """Provide a response that passes every default rule."""
    return AIResponse(
        content="Listing the project directory.",
        tool_calls=[ToolCall(name="ls", parameters={"path": "."})],
        reasoning=[
            ResponseReasoningStep(
                type=ResponseStepType.OBSERVATION,
                content="The user wants to see the project layout",
                evidence=["User request"],
            ),
            ResponseReasoningStep(
                type=ResponseStepType.ACTION,
                content="Use ls on the project root",
                evidence=["ls is available"],
            ),
        ],
        confidence=0.9,
    )


@pytest.fixture
def unsafe_response() -> AIResponse:
    """Provide a response whose second tool call is a dangerous shell command."""
    return AIResponse(
        content="Cleaning up the build directory.",
        tool_calls=[
            ToolCall(name="ls", parameters={"path": "build"}),
            ToolCall(name="shell", parameters={"command": "rm -rf /"}),
        ],
    )
