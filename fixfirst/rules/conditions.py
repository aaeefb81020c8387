"""Condition tree for custom rules.

Stored rules keep their condition as plain JSON. ``parse_condition_group``
turns that JSON into a tree of ``ConditionGroup`` and ``Condition`` nodes;
the node kind is fixed here, so evaluation never has to sniff dict keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from fixfirst.errors import ConditionParseError
from fixfirst.rules.fields import MISSING


class Operator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


class Logic(str, Enum):
    AND = "AND"
    OR = "OR"


OPERATOR_VALUES = tuple(item.value for item in Operator)
LOGIC_VALUES = tuple(item.value for item in Logic)


@dataclass(frozen=True)
class Condition:
    field: str
    # Unknown operator strings are kept verbatim and evaluate as passed.
    operator: Operator | str
    value: Any = MISSING

    @property
    def is_known_operator(self) -> bool:
        return isinstance(self.operator, Operator)

    @property
    def operator_name(self) -> str:
        if isinstance(self.operator, Operator):
            return self.operator.value
        return str(self.operator)


@dataclass(frozen=True)
class ConditionGroup:
    # Raw logic string; anything other than "AND" combines like OR.
    logic: str
    conditions: tuple[ConditionNode, ...] = field(default_factory=tuple)

    @property
    def is_and(self) -> bool:
        return self.logic == Logic.AND.value


ConditionNode = Union[Condition, ConditionGroup]


def _coerce_operator(raw: Any) -> Operator | str:
    if isinstance(raw, str) and raw in OPERATOR_VALUES:
        return Operator(raw)
    return raw if isinstance(raw, str) else str(raw)


def parse_condition(raw: Any, path: str = "condition") -> ConditionNode:
    if not isinstance(raw, Mapping):
        raise ConditionParseError(
            f"expected object, got {type(raw).__name__}", path=path
        )
    # Any object carrying a "logic" key is a group, even with leaf keys.
    if "logic" in raw:
        return parse_condition_group(raw, path=path)

    field_name = raw.get("field")
    if not isinstance(field_name, str):
        raise ConditionParseError("condition 'field' must be a string", path=path)
    return Condition(
        field=field_name,
        operator=_coerce_operator(raw.get("operator")),
        value=raw["value"] if "value" in raw else MISSING,
    )


def parse_condition_group(raw: Any, path: str = "condition") -> ConditionGroup:
    if not isinstance(raw, Mapping):
        raise ConditionParseError(
            f"expected condition group object, got {type(raw).__name__}", path=path
        )
    logic = raw.get("logic")
    children = raw.get("conditions")
    if children is None:
        children = []
    if not isinstance(children, list):
        raise ConditionParseError("'conditions' must be a list", path=path)

    nodes = tuple(
        parse_condition(child, path=f"{path}.conditions[{index}]")
        for index, child in enumerate(children)
    )
    return ConditionGroup(logic=str(logic) if logic is not None else "", conditions=nodes)
