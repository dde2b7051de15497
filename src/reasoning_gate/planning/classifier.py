"""Goal classifiers for the plan engine.

A classifier maps a natural-language goal to a TaskCategory, which selects
the category-specific steps inserted between the fixed analysis and
verification steps and the closing synthesis step.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from reasoning_gate.models.core import TaskCategory


class TaskClassifier(ABC):
    """Abstract base class for goal classifiers."""

    @abstractmethod
    def classify(self, goal: str) -> TaskCategory:
        """Return the category of ``goal``."""
        ...


# Checked in order; the first category with a match wins.
CATEGORY_PATTERNS: tuple[tuple[TaskCategory, re.Pattern[str]], ...] = (
    (
        TaskCategory.FILE_SYSTEM,
        re.compile(r"\b(file|directory|folder|create|delete|move|copy|read|write)\b", re.I),
    ),
    (
        TaskCategory.CODE,
        re.compile(r"\b(code|function|class|method|debug|refactor|test|compile)\b", re.I),
    ),
    (
        TaskCategory.ANALYSIS,
        re.compile(r"\b(analyze|review|examine|inspect|understand|explain)\b", re.I),
    ),
)


class RuleBasedClassifier(TaskClassifier):
    """Keyword classifier over an ordered pattern table.

    Examples:
        >>> classifier = RuleBasedClassifier()
        >>> classifier.classify("Delete the temp folder")
        <TaskCategory.FILE_SYSTEM: 'file_system'>
        >>> classifier.classify("Refactor this function")
        <TaskCategory.CODE: 'code'>
        >>> classifier.classify("Plan a holiday")
        <TaskCategory.GENERAL: 'general'>
    """

    def __init__(
        self,
        patterns: tuple[tuple[TaskCategory, re.Pattern[str]], ...] = CATEGORY_PATTERNS,
        default: TaskCategory = TaskCategory.GENERAL,
    ) -> None:
        self._patterns = patterns
        self._default = default

    def classify(self, goal: str) -> TaskCategory:
        for category, pattern in self._patterns:
            if pattern.search(goal):
                return category
        return self._default
