"""JSON Schemas for rule payloads and settings."""

from typing import Any

from jsonschema import Draft202012Validator

from fixfirst.constants import RULE_NAME_MAX_LENGTH
from fixfirst.rules.conditions import LOGIC_VALUES, OPERATOR_VALUES
from fixfirst.rules.models import FailureMode, RuleCategory, Severity, UserRole


CONDITION_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$defs": {
        "condition": {
            "type": "object",
            "required": ["field", "operator"],
            "properties": {
                "field": {"type": "string", "minLength": 1},
                "operator": {"enum": list(OPERATOR_VALUES)},
                "value": {},
            },
            "not": {"required": ["logic"]},
        },
        "group": {
            "type": "object",
            "required": ["logic", "conditions"],
            "properties": {
                "logic": {"enum": list(LOGIC_VALUES)},
                "conditions": {
                    "type": "array",
                    "items": {
                        "oneOf": [
                            {"$ref": "#/$defs/group"},
                            {"$ref": "#/$defs/condition"},
                        ]
                    },
                },
            },
        },
    },
    "$ref": "#/$defs/group",
}


_RULE_PROPERTIES: dict[str, Any] = {
    "name": {"type": "string", "minLength": 1, "maxLength": RULE_NAME_MAX_LENGTH},
    "description": {"type": "string"},
    "category": {"enum": [item.value for item in RuleCategory]},
    "severity": {"enum": [item.value for item in Severity]},
    "condition": {},
    "message": {"type": "string", "minLength": 1},
    "enabled": {"type": "boolean"},
}

RULE_CREATE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name", "category", "severity", "message"],
    "properties": {**_RULE_PROPERTIES, "global": {"type": "boolean"}},
}

RULE_UPDATE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": _RULE_PROPERTIES,
}

SETTINGS_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "user_id": {"type": "string", "minLength": 1},
        "role": {"enum": [item.value for item in UserRole]},
        "failure_mode": {"enum": [item.value for item in FailureMode]},
        "log_level": {"enum": ["debug", "info", "warning", "error", "critical"]},
    },
    "additionalProperties": False,
}


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def first_schema_error(validator: Draft202012Validator, payload: Any) -> str | None:
    error = next(iter(validator.iter_errors(payload)), None)
    if error is None:
        return None
    return format_schema_error(error)


def condition_issues(condition: Any) -> list[str]:
    """List schema problems in a stored condition without rejecting it."""
    return [format_schema_error(error) for error in condition_validator.iter_errors(condition)]


condition_validator = Draft202012Validator(CONDITION_SCHEMA)
rule_create_validator = Draft202012Validator(RULE_CREATE_SCHEMA)
rule_update_validator = Draft202012Validator(RULE_UPDATE_SCHEMA)
settings_validator = Draft202012Validator(SETTINGS_SCHEMA)
