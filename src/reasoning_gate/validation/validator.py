"""Response validator for reasoning-gate.

The ResponseValidator runs its rule set over a candidate response, turns
the collected issues into a severity-weighted score, decides whether the
response may execute, and proposes a corrected response when individual
tool calls had to be dropped.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from reasoning_gate.models.core import IssueType, Severity
from reasoning_gate.models.response import (
    AIResponse,
    ValidationConstraints,
    ValidationContext,
    ValidationIssue,
    ValidationResult,
)
from reasoning_gate.validation.rules import ValidationRule, default_rules

if TYPE_CHECKING:
    from reasoning_gate.config import SafetyConfig
    from reasoning_gate.policy import ScoringPolicy
    from reasoning_gate.registry import ToolRegistry

logger = structlog.get_logger(__name__)

# Issue types whose tool calls are dropped from a corrected response
DROPPABLE_ISSUES = frozenset({IssueType.TOOL_NOT_AVAILABLE, IssueType.UNSAFE_OPERATION})


class ResponseValidator:
    """Validates responses before any of their tool calls execute.

    Examples:
        >>> validator = ResponseValidator()
        >>> result = await validator.validate_response(
        ...     AIResponse(content="Nothing to do."), ValidationContext()
        ... )
        >>> result.score, result.allow_execution
        (1.0, True)
    """

    def __init__(
        self,
        registry: ToolRegistry | None = None,
        *,
        policy: ScoringPolicy | None = None,
        safety: SafetyConfig | None = None,
        rules: Sequence[ValidationRule] | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            registry: Supplies the default tool set and tool descriptors
            policy: Scoring policy; defaults to the configured one
            safety: Safety tables; defaults to the configured ones
            rules: Rule set; defaults to the standard eight rules
        """
        if policy is None or safety is None:
            from reasoning_gate.config import get_settings

            settings = get_settings()
            policy = policy or settings.policy
            safety = safety or settings.safety

        self._registry = registry
        self._policy = policy
        self._safety = safety
        self._rules: list[ValidationRule] = (
            list(rules) if rules is not None else default_rules(safety, registry)
        )

    @property
    def rules(self) -> list[ValidationRule]:
        """A copy of the active rules, in evaluation order."""
        return list(self._rules)

    def add_rule(self, rule: ValidationRule) -> None:
        """Append a rule to the end of the rule set."""
        self._rules.append(rule)

    def remove_rule(self, name: str) -> bool:
        """Remove the first rule called ``name``.

        Returns:
            True if a rule was removed, False if none matched
        """
        for index, rule in enumerate(self._rules):
            if rule.name == name:
                del self._rules[index]
                return True
        return False

    async def validate_response(
        self,
        response: AIResponse,
        context: ValidationContext | None = None,
        constraints: ValidationConstraints | None = None,
    ) -> ValidationResult:
        """Validate a response.

        Args:
            response: The candidate response
            context: Available tools and environment. Without one, the
                registry's current tools are used.
            constraints: Per-call policy toggles; defaults apply if None

        Returns:
            The aggregated result. Rule failures are reported as issues
            and never raised.
        """
        if context is None:
            tools = await self._registry.tool_names() if self._registry else frozenset()
            context = ValidationContext(available_tools=tools)
        constraints = constraints or ValidationConstraints()

        issues: list[ValidationIssue] = []
        for rule in self._rules:
            try:
                issues.extend(await rule.validate(response, context, constraints))
            except Exception as e:
                logger.warning("validation_rule_failed", rule=rule.name, error=str(e))
                issues.append(
                    ValidationIssue(
                        type=IssueType.RULE_ERROR,
                        severity=Severity.MEDIUM,
                        message=f"Validation rule '{rule.name}' failed: {e}",
                        location="validator",
                        evidence=[repr(e)],
                    )
                )

        severities = [issue.severity for issue in issues]
        score = self._policy.response_score(severities, response)
        allow = self._allow_execution(issues, score, constraints)
        result = ValidationResult(
            is_valid=not any(severity.blocking for severity in severities),
            score=score,
            issues=issues,
            suggestions=self._suggestions(issues),
            corrected_response=self._correct(response, issues),
            allow_execution=allow,
        )
        logger.debug(
            "response_validated",
            issues=len(issues),
            score=round(score, 3),
            allow_execution=allow,
        )
        return result

    def _allow_execution(
        self,
        issues: Sequence[ValidationIssue],
        score: float,
        constraints: ValidationConstraints,
    ) -> bool:
        if any(issue.severity == Severity.CRITICAL for issue in issues):
            return False
        if constraints.safety_checks and any(
            issue.type == IssueType.UNSAFE_OPERATION for issue in issues
        ):
            return False
        return score >= self._policy.execution_threshold

    def _correct(
        self,
        response: AIResponse,
        issues: Sequence[ValidationIssue],
    ) -> AIResponse | None:
        flagged: set[int] = set()
        for issue in issues:
            if issue.type not in DROPPABLE_ISSUES:
                continue
            index = issue.location.removeprefix("tool_call_")
            if index != issue.location and index.isdigit():
                flagged.add(int(index))
        if not flagged:
            return None

        kept = [call for index, call in enumerate(response.tool_calls) if index not in flagged]
        logger.info("response_corrected", dropped=len(response.tool_calls) - len(kept))
        return response.model_copy(
            update={
                "tool_calls": kept,
                "content": f"{response.content}\n\n{self._safety.correction_note}",
            }
        )

    @staticmethod
    def _suggestions(issues: Sequence[ValidationIssue]) -> list[str]:
        suggestions: list[str] = []
        severities = {issue.severity for issue in issues}
        types = {issue.type for issue in issues}

        if Severity.CRITICAL in severities:
            suggestions.append("Address critical issues before proceeding")
            suggestions.append("Verify tool availability and parameter correctness")
        if Severity.HIGH in severities:
            suggestions.append("Review high-severity issues for safety and accuracy")
            suggestions.append("Consider alternative approaches for flagged operations")
        if IssueType.TOOL_NOT_AVAILABLE in types:
            suggestions.append("Use only verified available tools")
            suggestions.append("Check tool registry before attempting tool calls")
        if IssueType.MISSING_REASONING in types:
            suggestions.append("Provide explicit reasoning for complex decisions")
            suggestions.append("Include evidence to support conclusions")
        if IssueType.RULE_ERROR in types:
            suggestions.append("Inspect failing validation rules; their checks did not run")
        return list(dict.fromkeys(suggestions))
