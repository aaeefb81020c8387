"""Parse rule payloads and audit data documents from JSON or YAML files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from fixfirst.errors import InvalidDataFileError, InvalidRulePayloadError
from fixfirst.rules.models import Rule, RuleCategory, Severity
from fixfirst.rules.schema import (
    first_schema_error,
    rule_create_validator,
    rule_update_validator,
)
from fixfirst.utils import new_id, now_iso, read_document


def load_document(path: Path) -> Any:
    try:
        return read_document(path)
    except FileNotFoundError:
        raise InvalidDataFileError(path, "file not found")
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as exc:
        raise InvalidDataFileError(path, str(exc).splitlines()[0])


def load_mapping(path: Path) -> dict[str, Any]:
    payload = load_document(path)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidDataFileError(path, "top-level value must be an object")
    return payload


def validate_create_payload(payload: Any) -> dict[str, Any]:
    error = first_schema_error(rule_create_validator, payload)
    if error is not None:
        raise InvalidRulePayloadError(error)
    return payload


def validate_update_payload(payload: Any) -> dict[str, Any]:
    error = first_schema_error(rule_update_validator, payload)
    if error is not None:
        raise InvalidRulePayloadError(error)
    return payload


def build_rule(payload: dict[str, Any], created_by: str) -> Rule:
    stamp = now_iso()
    return Rule(
        id=new_id(),
        name=payload["name"],
        description=payload.get("description", ""),
        category=RuleCategory(payload["category"]),
        severity=Severity(payload["severity"]),
        condition=payload.get("condition"),
        message=payload["message"],
        enabled=payload.get("enabled", True),
        global_=payload.get("global", False),
        created_by=created_by,
        created_at=stamp,
        updated_at=stamp,
    )


def apply_update(rule: Rule, payload: dict[str, Any]) -> Rule:
    if "name" in payload:
        rule.name = payload["name"]
    if "description" in payload:
        rule.description = payload["description"]
    if "category" in payload:
        rule.category = RuleCategory(payload["category"])
    if "severity" in payload:
        rule.severity = Severity(payload["severity"])
    if "condition" in payload:
        rule.condition = payload["condition"]
    if "message" in payload:
        rule.message = payload["message"]
    if "enabled" in payload:
        rule.enabled = payload["enabled"]
    rule.updated_at = now_iso()
    return rule
