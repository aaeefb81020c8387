"""Tests for RuleService."""

from pathlib import Path

import pytest

from fixfirst.errors import (
    InvalidRulePayloadError,
    PermissionDeniedError,
    RuleAlreadyAssignedError,
    RuleNotAssignedError,
    RuleNotFoundError,
)
from fixfirst.rules.models import FailureMode, UserRole
from fixfirst.rules.service import RuleService
from fixfirst.settings import Settings


def _service(root: Path, user_id: str = "alice", **kwargs) -> RuleService:
    return RuleService.from_settings(Settings(root=root, user_id=user_id, **kwargs))


@pytest.fixture
def service(tmp_path: Path) -> RuleService:
    return _service(tmp_path)


def test_create_rule_defaults(service: RuleService, rule_payload: dict) -> None:
    rule = service.create_rule(rule_payload)
    assert rule.id
    assert rule.enabled is True
    assert rule.global_ is False
    assert rule.created_by == "alice"
    assert service.get_rule(rule.id).name == "low-performance"


@pytest.mark.parametrize(
    "override",
    [
        {"name": ""},
        {"name": "x" * 101},
        {"category": "SOCIAL"},
        {"severity": "LOW"},
        {"message": ""},
        {"enabled": "yes"},
    ],
)
def test_create_rule_rejects_invalid_payload(
    service: RuleService, rule_payload: dict, override: dict
) -> None:
    with pytest.raises(InvalidRulePayloadError):
        service.create_rule({**rule_payload, **override})


def test_create_rule_requires_fields(service: RuleService) -> None:
    with pytest.raises(InvalidRulePayloadError):
        service.create_rule({"name": "only-name"})


def test_global_rule_requires_admin(tmp_path: Path, rule_payload: dict) -> None:
    payload = {**rule_payload, "global": True}
    with pytest.raises(PermissionDeniedError):
        _service(tmp_path).create_rule(payload)

    rule = _service(tmp_path, role=UserRole.ADMIN).create_rule(payload)
    assert rule.global_ is True


def test_update_rule_by_owner(service: RuleService, rule_payload: dict) -> None:
    rule = service.create_rule(rule_payload)
    updated = service.update_rule(
        rule.id, {"severity": "CRITICAL", "enabled": False, "global": True}
    )
    assert updated.severity.value == "CRITICAL"
    assert updated.enabled is False
    assert updated.global_ is False
    assert service.get_rule(rule.id).severity.value == "CRITICAL"


def test_update_and_delete_require_owner(tmp_path: Path, rule_payload: dict) -> None:
    rule = _service(tmp_path).create_rule(rule_payload)
    other = _service(tmp_path, user_id="bob")
    with pytest.raises(PermissionDeniedError):
        other.update_rule(rule.id, {"name": "stolen"})
    with pytest.raises(PermissionDeniedError):
        other.delete_rule(rule.id)


def test_delete_rule(service: RuleService, rule_payload: dict) -> None:
    rule = service.create_rule(rule_payload)
    service.delete_rule(rule.id)
    with pytest.raises(RuleNotFoundError):
        service.get_rule(rule.id)


def test_assign_rule_checks(service: RuleService, rule_payload: dict) -> None:
    rule = service.create_rule(rule_payload)
    with pytest.raises(RuleNotFoundError):
        service.assign_rule("p1", "missing")

    service.assign_rule("p1", rule.id)
    with pytest.raises(RuleAlreadyAssignedError):
        service.assign_rule("p1", rule.id)

    items = service.list_project_rules("p1")
    assert [(item.rule_id, found.name) for item, found in items] == [
        (rule.id, "low-performance")
    ]


def test_unassign_rule(service: RuleService, rule_payload: dict) -> None:
    rule = service.create_rule(rule_payload)
    service.assign_rule("p1", rule.id)
    service.unassign_rule("p1", rule.id)
    with pytest.raises(RuleNotAssignedError):
        service.unassign_rule("p1", rule.id)


def test_evaluate_project_rules_persists_violations(
    tmp_path: Path, rule_payload: dict
) -> None:
    owner = _service(tmp_path)
    admin = _service(tmp_path, user_id="root", role=UserRole.ADMIN)
    assigned = owner.create_rule(rule_payload)
    owner.assign_rule("p1", assigned.id)
    admin.create_rule(
        {
            **rule_payload,
            "name": "needs-https",
            "severity": "CRITICAL",
            "message": "HTTPS is disabled",
            "global": True,
            "condition": {
                "logic": "AND",
                "conditions": [
                    {"field": "https.enabled", "operator": "equals", "value": True}
                ],
            },
        }
    )

    audit_data = {"performance": {"score": 30}, "https": {"enabled": False}}
    audit_id, violations = owner.evaluate_project_rules("p1", audit_data, audit_id="a1")

    assert audit_id == "a1"
    assert [item.message for item in violations] == [
        "Performance score is too low",
        "HTTPS is disabled",
    ]
    stored = owner.list_violations("a1")
    assert len(stored) == 2
    assert {item.rule_id for item in stored} == {item.rule_id for item in violations}


def test_evaluate_project_rules_without_violations(
    service: RuleService, rule_payload: dict
) -> None:
    rule = service.create_rule(rule_payload)
    service.assign_rule("p1", rule.id)
    audit_id, violations = service.evaluate_project_rules(
        "p1", {"performance": {"score": 90}}
    )
    assert audit_id
    assert violations == []
    assert not service.repository.violations_path.exists()


def test_evaluate_broken_rule_follows_failure_mode(
    tmp_path: Path, rule_payload: dict
) -> None:
    payload = {**rule_payload, "condition": "not a tree"}
    open_service = _service(tmp_path)
    rule = open_service.create_rule(payload)
    open_service.assign_rule("p1", rule.id)
    _, violations = open_service.evaluate_project_rules("p1", {})
    assert violations == []

    closed_service = _service(tmp_path, failure_mode=FailureMode.CLOSED)
    _, violations = closed_service.evaluate_project_rules("p1", {})
    assert [item.rule_id for item in violations] == [rule.id]


def test_test_rule_delegates(service: RuleService) -> None:
    result = service.test_rule(
        {"logic": "AND", "conditions": [{"field": "a", "operator": "exists"}]},
        {"a": 1},
    )
    assert result.passed is True
