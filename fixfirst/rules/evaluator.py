"""Evaluate custom rule conditions against audit data."""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

import structlog

from fixfirst.rules.conditions import (
    Condition,
    ConditionGroup,
    ConditionNode,
    Operator,
    parse_condition_group,
)
from fixfirst.rules.fields import MISSING, resolve_field_path
from fixfirst.rules.models import (
    EvaluationResult,
    FailureMode,
    Rule,
    RuleTestResult,
    Violation,
)
from fixfirst.utils import now_iso

logger = structlog.get_logger(__name__)

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_RE = re.compile(r"^0([xXoObB])([0-9a-fA-F]+)$")
_RADIX_BASE = {"x": 16, "o": 8, "b": 2}


def to_number(value: Any) -> float:
    """Numeric coercion with JavaScript ``Number()`` semantics."""
    if value is MISSING:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.copysign(math.inf, value)
    if isinstance(value, str):
        return _parse_number(value)
    if isinstance(value, (list, tuple)):
        return _parse_number(to_js_string(value))
    return math.nan


def _parse_number(text: str) -> float:
    text = text.strip()
    if not text:
        return 0.0
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    if _DECIMAL_RE.match(text):
        return float(text)
    radix = _RADIX_RE.match(text)
    if radix:
        try:
            return float(int(radix.group(2), _RADIX_BASE[radix.group(1).lower()]))
        except ValueError:
            return math.nan
    return math.nan


def to_js_string(value: Any) -> str:
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join(
            "" if item is None or item is MISSING else to_js_string(item)
            for item in value
        )
    if isinstance(value, Mapping):
        return "[object Object]"
    return str(value)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without type coercion: ``1 != "1"`` and ``True != 1``."""
    if left is MISSING or right is MISSING:
        return left is right
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _same_value_zero(left: Any, right: Any) -> bool:
    if isinstance(left, float) and isinstance(right, float):
        if math.isnan(left) and math.isnan(right):
            return True
    return strict_equals(left, right)


def _contains(field_value: Any, operand: Any) -> bool | None:
    """Containment for string or list fields; ``None`` for any other field."""
    if isinstance(field_value, str):
        return to_js_string(operand) in field_value
    if isinstance(field_value, list):
        return any(_same_value_zero(item, operand) for item in field_value)
    return None


def evaluate_condition(condition: Condition, data: Any) -> bool:
    field_value = resolve_field_path(data, condition.field)
    operator = condition.operator
    operand = condition.value

    if operator == Operator.EQUALS:
        return strict_equals(field_value, operand)
    if operator == Operator.NOT_EQUALS:
        return not strict_equals(field_value, operand)
    if operator == Operator.GREATER_THAN:
        return to_number(field_value) > to_number(operand)
    if operator == Operator.LESS_THAN:
        return to_number(field_value) < to_number(operand)
    if operator == Operator.CONTAINS:
        found = _contains(field_value, operand)
        return False if found is None else found
    if operator == Operator.NOT_CONTAINS:
        found = _contains(field_value, operand)
        return True if found is None else not found
    if operator == Operator.EXISTS:
        return field_value is not MISSING and field_value is not None
    if operator == Operator.NOT_EXISTS:
        return field_value is MISSING or field_value is None

    logger.warning("unknown_operator", operator=condition.operator_name, field=condition.field)
    return True


def evaluate_node(node: ConditionNode, data: Any) -> bool:
    if isinstance(node, ConditionGroup):
        return evaluate_group(node, data)
    return evaluate_condition(node, data)


def evaluate_group(group: ConditionGroup, data: Any) -> bool:
    if not group.conditions:
        return True

    results = [evaluate_node(child, data) for child in group.conditions]
    if group.is_and:
        return all(results)
    return any(results)


class ConditionEvaluator:
    """Decides whether audit data satisfies a rule's condition tree.

    The evaluator holds no state besides its failure mode and is safe to
    share between threads. Errors raised while building or walking a tree
    never escape ``evaluate``: they are folded into a result that passes
    (``FailureMode.OPEN``, the default) or fails (``FailureMode.CLOSED``)
    with the error message attached.
    """

    def __init__(self, failure_mode: FailureMode = FailureMode.OPEN) -> None:
        self.failure_mode = failure_mode

    def evaluate(self, rule: Rule, audit_data: Any) -> EvaluationResult:
        try:
            tree = parse_condition_group(rule.condition)
            passed = evaluate_group(tree, audit_data)
        except Exception as exc:
            logger.warning(
                "rule_evaluation_failed",
                rule_id=rule.id,
                error=str(exc),
                failure_mode=self.failure_mode.value,
            )
            return EvaluationResult(
                passed=self.failure_mode == FailureMode.OPEN,
                details={"error": str(exc)},
                error=str(exc),
            )

        return EvaluationResult(
            passed=passed,
            details={
                "ruleName": rule.name,
                "condition": rule.condition,
                "evaluatedAt": now_iso(),
            },
        )

    def evaluate_rule_set(
        self, rules: Iterable[Rule], audit_data: Any, audit_id: str | None = None
    ) -> list[Violation]:
        violations: list[Violation] = []
        for rule in rules:
            result = self.evaluate(rule, audit_data)
            if result.passed:
                continue
            violations.append(
                Violation(
                    audit_id=audit_id,
                    rule_id=rule.id,
                    message=rule.message,
                    severity=rule.severity,
                    details=result.details,
                )
            )
        return violations

    def test_rule(self, condition: Any, sample_data: Any) -> RuleTestResult:
        try:
            tree = parse_condition_group(condition)
            passed = evaluate_group(tree, sample_data)
        except Exception as exc:
            return RuleTestResult(success=False, error=str(exc))
        return RuleTestResult(
            success=True,
            passed=passed,
            message="Rule condition passed" if passed else "Rule condition failed",
        )
