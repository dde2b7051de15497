"""Goal decomposition for the plan engine.

Every plan has the same frame:

1. ``analysis-1`` Analyze Request (no dependencies)
2. ``verification-1`` Verify Tool Availability (depends on analysis-1)
3. category-specific steps, each depending on verification-1
4. ``synthesis-1`` Synthesize Results (depends on every earlier step)

Preferred tools of the category steps are intersected with the tools that
were available when the plan was built, so a fresh plan never requires a
tool that is missing from its own snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from reasoning_gate.models.core import Complexity, StepType, TaskCategory
from reasoning_gate.models.plan import PlanStep

ANALYSIS_STEP_ID = "analysis-1"
VERIFICATION_STEP_ID = "verification-1"
SYNTHESIS_STEP_ID = "synthesis-1"

# Number of snapshot tools a general step picks up
GENERAL_TOOL_COUNT = 3


def _select_tools(preferred: Iterable[str], available: Sequence[str]) -> tuple[str, ...]:
    known = set(available)
    return tuple(tool for tool in preferred if tool in known)


class GoalDecomposer:
    """Rule-based decomposer producing the fixed plan frame.

    Examples:
        >>> decomposer = GoalDecomposer()
        >>> steps = decomposer.decompose(
        ...     "Read the config file", TaskCategory.FILE_SYSTEM, ["ls", "read_file"]
        ... )
        >>> [step.id for step in steps]
        ['analysis-1', 'verification-1', 'fs-1', 'synthesis-1']
    """

    def decompose(
        self,
        goal: str,
        category: TaskCategory,
        available_tools: Iterable[str],
        context: str = "",
    ) -> list[PlanStep]:
        """Build the step list for ``goal``.

        Args:
            goal: The natural-language goal
            category: Category chosen by the classifier
            available_tools: Tool names in the plan's snapshot
            context: Working context supplied by the caller

        Returns:
            Steps in declaration order; dependencies only reference earlier steps
        """
        tools = sorted(available_tools)
        steps = [
            PlanStep(
                id=ANALYSIS_STEP_ID,
                title="Analyze Request",
                description="Understand the user's goal and current context",
                type=StepType.ANALYSIS,
                complexity=Complexity.LOW,
                required_tools=_select_tools(("read_file", "ls", "grep"), tools),
                expected_output="Understanding of current state and requirements",
                validation_criteria=("Goal is clearly understood", "Context is analyzed"),
                fallback_strategy="Ask for clarification if goal is unclear",
            ),
            PlanStep(
                id=VERIFICATION_STEP_ID,
                title="Verify Tool Availability",
                description="Confirm all required tools are available and accessible",
                type=StepType.VERIFICATION,
                dependencies=(ANALYSIS_STEP_ID,),
                complexity=Complexity.LOW,
                expected_output="List of available and missing tools",
                validation_criteria=("All required tools are available",),
                fallback_strategy="Suggest alternative tools or approaches",
            ),
        ]
        steps.extend(self.category_steps(goal, category, tools))
        steps.append(
            PlanStep(
                id=SYNTHESIS_STEP_ID,
                title="Synthesize Results",
                description="Combine results from all steps and provide final answer",
                type=StepType.SYNTHESIS,
                dependencies=tuple(step.id for step in steps),
                complexity=Complexity.MEDIUM,
                expected_output="Complete answer to user's goal",
                validation_criteria=("All steps completed successfully", "Goal achieved"),
                fallback_strategy="Provide partial results with explanation",
            )
        )
        return steps

    def category_steps(
        self,
        goal: str,
        category: TaskCategory,
        available_tools: Sequence[str],
    ) -> list[PlanStep]:
        """Steps inserted between verification and synthesis for ``category``."""
        if category == TaskCategory.FILE_SYSTEM:
            return [
                PlanStep(
                    id="fs-1",
                    title="Check File System State",
                    description="Examine current file system state",
                    type=StepType.TOOL_CALL,
                    dependencies=(VERIFICATION_STEP_ID,),
                    complexity=Complexity.LOW,
                    required_tools=_select_tools(("ls", "read_file"), available_tools),
                    expected_output="Current file system state",
                    validation_criteria=("File system state is clear",),
                )
            ]
        if category == TaskCategory.CODE:
            return [
                PlanStep(
                    id="code-1",
                    title="Analyze Code Structure",
                    description="Examine existing code structure",
                    type=StepType.TOOL_CALL,
                    dependencies=(VERIFICATION_STEP_ID,),
                    complexity=Complexity.MEDIUM,
                    required_tools=_select_tools(("read_file", "grep"), available_tools),
                    expected_output="Code structure analysis",
                    validation_criteria=("Code structure is understood",),
                )
            ]
        if category == TaskCategory.ANALYSIS:
            return [
                PlanStep(
                    id="analysis-2",
                    title="Deep Analysis",
                    description="Perform detailed analysis of the target",
                    type=StepType.ANALYSIS,
                    dependencies=(VERIFICATION_STEP_ID,),
                    complexity=Complexity.MEDIUM,
                    required_tools=_select_tools(("read_file", "grep", "ls"), available_tools),
                    expected_output="Detailed analysis results",
                    validation_criteria=("Analysis is thorough and accurate",),
                )
            ]
        return [
            PlanStep(
                id="general-1",
                title="Execute General Task",
                description=f"Execute the requested task: {goal}",
                type=StepType.TOOL_CALL,
                dependencies=(VERIFICATION_STEP_ID,),
                complexity=Complexity.MEDIUM,
                required_tools=tuple(available_tools[:GENERAL_TOOL_COUNT]),
                expected_output="Task execution results",
                validation_criteria=("Task completed successfully",),
            )
        ]
