"""Dependency-graph helpers for plan steps.

Steps are loaded into a NetworkX ``DiGraph`` whose edges run from a step to
each of its dependencies. Dependency ids that do not name a step in the
sequence are ignored here; ``validate_plan`` reports them separately.

Example:
    >>> graph = dependency_graph(plan.steps)
    >>> nx.is_directed_acyclic_graph(graph)
    True
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import networkx as nx

from reasoning_gate.exceptions import CyclicDependencyError, DuplicateStepError
from reasoning_gate.models.plan import PlanStep


def duplicate_step_ids(steps: Sequence[PlanStep]) -> list[str]:
    """Return ids used by more than one step, in order of first use."""
    counts = Counter(step.id for step in steps)
    return [step_id for step_id, count in counts.items() if count > 1]


def dependency_graph(steps: Sequence[PlanStep]) -> nx.DiGraph:
    """Build the dependency graph of a single plan.

    Each node carries its ``PlanStep`` under the ``step`` attribute.

    Raises:
        DuplicateStepError: If two steps share an id
    """
    duplicates = duplicate_step_ids(steps)
    if duplicates:
        raise DuplicateStepError(duplicates)
    graph = nx.DiGraph()
    for step in steps:
        graph.add_node(step.id, step=step, complexity=str(step.complexity))
    for step in steps:
        for dependency in step.dependencies:
            if dependency in graph:
                graph.add_edge(step.id, dependency)
    return graph


def _cycle_path(graph: nx.DiGraph) -> list[str] | None:
    try:
        edges = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return None
    return [edges[0][0], *(head for _, head in edges)]


def find_cycle(steps: Sequence[PlanStep]) -> list[str] | None:
    """Find a dependency cycle by depth-first search over the step graph.

    Args:
        steps: Steps of a single plan

    Returns:
        The step ids along the first cycle found, with the starting id
        repeated at the end, or None if the graph is acyclic.

    Raises:
        DuplicateStepError: If two steps share an id

    Examples:
        >>> a = PlanStep(id="a", title="A", type="analysis", dependencies=["c"])
        >>> b = PlanStep(id="b", title="B", type="analysis", dependencies=["a"])
        >>> c = PlanStep(id="c", title="C", type="analysis", dependencies=["b"])
        >>> find_cycle([a, b, c])
        ['a', 'c', 'b', 'a']
    """
    return _cycle_path(dependency_graph(steps))


def has_cycle(steps: Sequence[PlanStep]) -> bool:
    """Check whether any step is reachable from itself."""
    return not nx.is_directed_acyclic_graph(dependency_graph(steps))


def topological_order(steps: Sequence[PlanStep]) -> list[PlanStep]:
    """Order steps so that every step follows its dependencies.

    Among steps whose dependencies are all satisfied, the one declared
    first runs first, so independent steps keep their declared order.

    Raises:
        CyclicDependencyError: If the dependency graph contains a cycle
        DuplicateStepError: If two steps share an id
    """
    graph = dependency_graph(steps)
    position = {step.id: index for index, step in enumerate(steps)}
    try:
        ordered = list(
            nx.lexicographical_topological_sort(graph.reverse(copy=False), key=position.__getitem__)
        )
    except nx.NetworkXUnfeasible:
        raise CyclicDependencyError(_cycle_path(graph) or []) from None
    return [graph.nodes[step_id]["step"] for step_id in ordered]
