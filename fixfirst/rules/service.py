"""Custom rule management and project evaluation."""

from __future__ import annotations

from typing import Any

import structlog

from fixfirst.constants import RECENT_VIOLATIONS_LIMIT
from fixfirst.errors import (
    PermissionDeniedError,
    RuleAlreadyAssignedError,
    RuleNotAssignedError,
    RuleNotFoundError,
)
from fixfirst.rules.evaluator import ConditionEvaluator
from fixfirst.rules.fields import available_fields
from fixfirst.rules.models import ProjectRule, Rule, RuleTestResult, Violation
from fixfirst.rules.parser import (
    apply_update,
    build_rule,
    validate_create_payload,
    validate_update_payload,
)
from fixfirst.rules.repository import RulesRepository
from fixfirst.rules.schema import condition_issues
from fixfirst.settings import Settings
from fixfirst.utils import new_id

logger = structlog.get_logger(__name__)


class RuleService:
    def __init__(
        self,
        repository: RulesRepository,
        settings: Settings,
        evaluator: ConditionEvaluator | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings
        self.evaluator = evaluator or ConditionEvaluator(settings.failure_mode)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RuleService":
        return cls(repository=RulesRepository(settings.root), settings=settings)

    def list_rules(self) -> list[Rule]:
        return self.repository.list_rules(user_id=self.settings.user_id)

    def get_rule(self, rule_id: str) -> Rule:
        rule = self.repository.get_rule(rule_id)
        if rule is None:
            raise RuleNotFoundError(rule_id)
        return rule

    def recent_violations(self, rule_id: str) -> list[Violation]:
        return self.repository.recent_violations(rule_id, RECENT_VIOLATIONS_LIMIT)

    def create_rule(self, payload: Any) -> Rule:
        data = validate_create_payload(payload)
        if data.get("global", False) and not self.settings.is_admin:
            raise PermissionDeniedError("Only admins can create global rules")
        rule = build_rule(data, created_by=self.settings.user_id)
        return self.repository.save_rule(rule)

    def update_rule(self, rule_id: str, payload: Any) -> Rule:
        rule = self._owned_rule(rule_id, action="update")
        data = validate_update_payload(payload)
        return self.repository.save_rule(apply_update(rule, data))

    def delete_rule(self, rule_id: str) -> None:
        self._owned_rule(rule_id, action="delete")
        self.repository.remove_rule(rule_id)

    def _owned_rule(self, rule_id: str, action: str) -> Rule:
        rule = self.get_rule(rule_id)
        if rule.created_by != self.settings.user_id:
            raise PermissionDeniedError(f"Not authorized to {action} this rule")
        return rule

    def list_project_rules(self, project_id: str) -> list[tuple[ProjectRule, Rule | None]]:
        return [
            (item, self.repository.get_rule(item.rule_id))
            for item in self.repository.list_project_rules(project_id)
        ]

    def assign_rule(self, project_id: str, rule_id: str, enabled: bool = True) -> ProjectRule:
        self.get_rule(rule_id)
        if self.repository.get_project_rule(project_id, rule_id) is not None:
            raise RuleAlreadyAssignedError(project_id, rule_id)
        return self.repository.assign_rule(project_id, rule_id, enabled=enabled)

    def unassign_rule(self, project_id: str, rule_id: str) -> None:
        if not self.repository.unassign_rule(project_id, rule_id):
            raise RuleNotAssignedError(project_id, rule_id)

    def evaluate_project_rules(
        self, project_id: str, audit_data: Any, audit_id: str | None = None
    ) -> tuple[str, list[Violation]]:
        """Evaluate every active rule for a project and persist the violations.

        Violations are written in one batch after the whole rule set has been
        evaluated, so an interrupted run stores nothing.
        """
        audit_id = audit_id or new_id()
        rules = self.repository.active_rules_for_project(project_id)
        violations = self.evaluator.evaluate_rule_set(rules, audit_data, audit_id=audit_id)
        if violations:
            self.repository.add_violations(violations)
            logger.info(
                "violations_saved",
                project_id=project_id,
                audit_id=audit_id,
                count=len(violations),
            )
        return audit_id, violations

    def list_violations(self, audit_id: str) -> list[Violation]:
        return self.repository.list_violations(audit_id)

    def test_rule(self, condition: Any, sample_data: Any) -> RuleTestResult:
        return self.evaluator.test_rule(condition, sample_data)

    @staticmethod
    def condition_issues(condition: Any) -> list[str]:
        return condition_issues(condition)

    @staticmethod
    def available_fields() -> dict[str, dict[str, str]]:
        return available_fields()
