"""Tests for building condition trees from stored JSON."""

import pytest

from fixfirst.errors import ConditionParseError
from fixfirst.rules.conditions import (
    Condition,
    ConditionGroup,
    Operator,
    parse_condition_group,
)
from fixfirst.rules.fields import MISSING
from fixfirst.rules.schema import condition_issues


def test_parse_nested_tree() -> None:
    tree = parse_condition_group(
        {
            "logic": "OR",
            "conditions": [
                {"field": "seo.score", "operator": "less_than", "value": 60},
                {
                    "logic": "AND",
                    "conditions": [{"field": "https.enabled", "operator": "exists"}],
                },
            ],
        }
    )
    assert isinstance(tree, ConditionGroup)
    assert tree.is_and is False
    leaf, group = tree.conditions
    assert isinstance(leaf, Condition)
    assert leaf.operator is Operator.LESS_THAN
    assert leaf.value == 60
    assert isinstance(group, ConditionGroup)
    assert group.conditions[0].value is MISSING


def test_unknown_operator_is_kept_verbatim() -> None:
    tree = parse_condition_group(
        {"logic": "AND", "conditions": [{"field": "x", "operator": "matches"}]}
    )
    leaf = tree.conditions[0]
    assert leaf.is_known_operator is False
    assert leaf.operator_name == "matches"


def test_missing_conditions_means_empty_group() -> None:
    tree = parse_condition_group({"logic": "AND"})
    assert tree.conditions == ()


def test_parse_error_reports_path() -> None:
    with pytest.raises(ConditionParseError) as excinfo:
        parse_condition_group(
            {"logic": "AND", "conditions": [{"logic": "OR", "conditions": [3]}]}
        )
    assert excinfo.value.path == "condition.conditions[0].conditions[0]"


def test_condition_issues_flags_unknown_operator() -> None:
    issues = condition_issues(
        {"logic": "AND", "conditions": [{"field": "x", "operator": "bogus"}]}
    )
    assert issues


def test_condition_issues_accepts_valid_tree() -> None:
    assert (
        condition_issues(
            {
                "logic": "AND",
                "conditions": [
                    {"field": "x", "operator": "exists"},
                    {"logic": "OR", "conditions": []},
                ],
            }
        )
        == []
    )
