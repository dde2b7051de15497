"""Response validation package.

Independent validation rules over candidate responses and the validator
that scores them and gates execution.
"""

from reasoning_gate.validation.rules import (
    ConfidenceValidationRule,
    ConstraintComplianceRule,
    HallucinationDetectionRule,
    LogicalConsistencyRule,
    ParameterValidationRule,
    ReasoningValidationRule,
    SafetyCheckRule,
    ToolAvailabilityRule,
    ValidationRule,
    default_rules,
    matches_json_type,
)
from reasoning_gate.validation.validator import ResponseValidator

__all__ = [
    "ConfidenceValidationRule",
    "ConstraintComplianceRule",
    "HallucinationDetectionRule",
    "LogicalConsistencyRule",
    "ParameterValidationRule",
    "ReasoningValidationRule",
    "ResponseValidator",
    "SafetyCheckRule",
    "ToolAvailabilityRule",
    "ValidationRule",
    "default_rules",
    "matches_json_type",
]
