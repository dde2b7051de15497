"""Tests for goal decomposition."""

from __future__ import annotations

import pytest

from reasoning_gate.models.core import Complexity, StepType, TaskCategory
from reasoning_gate.planning import GoalDecomposer
from reasoning_gate.planning.decomposition import (
    ANALYSIS_STEP_ID,
    SYNTHESIS_STEP_ID,
    VERIFICATION_STEP_ID,
)

ALL_TOOLS = ["read_file", "write_file", "edit", "ls", "grep", "glob", "shell"]


class TestGoalDecomposer:
    """Tests for GoalDecomposer."""

    @pytest.mark.parametrize(
        ("category", "middle_id"),
        [
            (TaskCategory.FILE_SYSTEM, "fs-1"),
            (TaskCategory.CODE, "code-1"),
            (TaskCategory.ANALYSIS, "analysis-2"),
            (TaskCategory.GENERAL, "general-1"),
        ],
    )
    def test_plan_frame(self, category, middle_id):
        """Test every plan has the fixed analysis/verification/synthesis frame."""
        steps = GoalDecomposer().decompose("Some goal", category, ALL_TOOLS)
        ids = [step.id for step in steps]
        assert ids == [ANALYSIS_STEP_ID, VERIFICATION_STEP_ID, middle_id, SYNTHESIS_STEP_ID]

        by_id = {step.id: step for step in steps}
        assert by_id[VERIFICATION_STEP_ID].dependencies == (ANALYSIS_STEP_ID,)
        assert by_id[middle_id].dependencies == (VERIFICATION_STEP_ID,)
        assert by_id[SYNTHESIS_STEP_ID].dependencies == tuple(ids[:-1])

    def test_dependencies_reference_earlier_steps(self):
        steps = GoalDecomposer().decompose("goal", TaskCategory.CODE, ALL_TOOLS)
        seen: set[str] = set()
        for step in steps:
            assert set(step.dependencies) <= seen
            seen.add(step.id)

    def test_required_tools_limited_to_snapshot(self):
        """Test preferred tools missing from the snapshot are dropped."""
        steps = GoalDecomposer().decompose("Read a file", TaskCategory.FILE_SYSTEM, ["ls"])
        for step in steps:
            assert set(step.required_tools) <= {"ls"}
        assert steps[0].required_tools == ("ls",)

    def test_no_tools(self):
        steps = GoalDecomposer().decompose("Read a file", TaskCategory.CODE, [])
        assert all(step.required_tools == () for step in steps)

    def test_general_step_takes_first_sorted_tools(self):
        steps = GoalDecomposer().decompose(
            "Plan a holiday", TaskCategory.GENERAL, ["shell", "ls", "edit", "grep"]
        )
        general = steps[2]
        assert general.required_tools == ("edit", "grep", "ls")
        assert general.description == "Execute the requested task: Plan a holiday"
        assert general.type == StepType.TOOL_CALL

    def test_complexity_tiers(self):
        steps = GoalDecomposer().decompose("goal", TaskCategory.FILE_SYSTEM, ALL_TOOLS)
        assert [step.complexity for step in steps] == [
            Complexity.LOW,
            Complexity.LOW,
            Complexity.LOW,
            Complexity.MEDIUM,
        ]

    def test_fallbacks(self):
        """Test the frame steps carry fallbacks and the category step does not."""
        steps = GoalDecomposer().decompose("goal", TaskCategory.FILE_SYSTEM, ALL_TOOLS)
        assert [step.fallback_strategy is not None for step in steps] == [True, True, False, True]
