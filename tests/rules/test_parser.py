"""Tests for reading rule and audit data documents."""

from pathlib import Path

import pytest

from fixfirst.errors import InvalidDataFileError
from fixfirst.rules.models import RuleCategory, Severity
from fixfirst.rules.parser import apply_update, build_rule, load_document, load_mapping


def test_load_yaml_rule(tmp_path: Path) -> None:
    path = tmp_path / "rule.yaml"
    path.write_text(
        "name: missing-h1\n"
        "category: ONPAGE\n"
        "severity: ERROR\n"
        "message: Page needs exactly one H1\n"
        "condition:\n"
        "  logic: AND\n"
        "  conditions:\n"
        "    - field: content.headings.h1\n"
        "      operator: equals\n"
        "      value: 1\n",
        encoding="utf-8",
    )
    payload = load_mapping(path)
    assert payload["condition"]["conditions"][0]["value"] == 1

    rule = build_rule(payload, created_by="alice")
    assert rule.category == RuleCategory.ONPAGE
    assert rule.severity == Severity.ERROR
    assert rule.created_at == rule.updated_at


def test_load_json_document(tmp_path: Path, write_json) -> None:
    path = write_json(tmp_path / "audit.json", {"seo": {"score": 70}})
    assert load_document(path) == {"seo": {"score": 70}}


def test_empty_yaml_is_empty_mapping(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_mapping(path) == {}


def test_mapping_rejects_lists(tmp_path: Path, write_json) -> None:
    path = write_json(tmp_path / "list.json", [1, 2])
    with pytest.raises(InvalidDataFileError):
        load_mapping(path)


def test_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{oops", encoding="utf-8")
    with pytest.raises(InvalidDataFileError):
        load_document(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(InvalidDataFileError):
        load_document(tmp_path / "nope.json")


def test_apply_update_touches_only_given_fields(rule_payload: dict) -> None:
    rule = build_rule(rule_payload, created_by="alice")
    apply_update(rule, {"message": "New message"})
    assert rule.message == "New message"
    assert rule.name == "low-performance"
    assert rule.severity == Severity.WARNING
