from fixfirst.rules.conditions import (
    Condition,
    ConditionGroup,
    Logic,
    Operator,
    parse_condition_group,
)
from fixfirst.rules.evaluator import ConditionEvaluator
from fixfirst.rules.fields import MISSING, available_fields, resolve_field_path
from fixfirst.rules.models import (
    EvaluationResult,
    FailureMode,
    Rule,
    RuleCategory,
    RuleTestResult,
    Severity,
    Violation,
)

__all__ = [
    "Condition",
    "ConditionEvaluator",
    "ConditionGroup",
    "EvaluationResult",
    "FailureMode",
    "Logic",
    "MISSING",
    "Operator",
    "Rule",
    "RuleCategory",
    "RuleTestResult",
    "Severity",
    "Violation",
    "available_fields",
    "parse_condition_group",
    "resolve_field_path",
]
