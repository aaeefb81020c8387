"""File-backed store for custom rules, project assignments and violations."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Any, Iterable

from fixfirst.constants import (
    CUSTOM_RULES_FILENAME,
    PROJECT_RULES_FILENAME,
    RULES_DIRNAME,
    VIOLATIONS_FILENAME,
)
from fixfirst.errors import InvalidJsonFormatError
from fixfirst.rules.models import ProjectRule, Rule, Violation
from fixfirst.utils import new_id, now_iso, read_json_safe, write_json


class RulesRepository:
    def __init__(self, root: Path) -> None:
        self._rules_dir = root / RULES_DIRNAME

    @property
    def rules_dir(self) -> Path:
        return self._rules_dir

    @property
    def rules_path(self) -> Path:
        return self._rules_dir / CUSTOM_RULES_FILENAME

    @property
    def project_rules_path(self) -> Path:
        return self._rules_dir / PROJECT_RULES_FILENAME

    @property
    def violations_path(self) -> Path:
        return self._rules_dir / VIOLATIONS_FILENAME

    def _load_list(self, path: Path) -> list[dict[str, Any]]:
        payload, error = read_json_safe(path)
        if error is not None:
            raise InvalidJsonFormatError(path, error)
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise InvalidJsonFormatError(path, "expected a JSON array")
        return [item for item in payload if isinstance(item, dict)]

    # Rules

    def _load_rules(self) -> list[Rule]:
        return [Rule.from_dict(item) for item in self._load_list(self.rules_path)]

    def _save_rules(self, rules: list[Rule]) -> None:
        write_json(self.rules_path, [rule.as_dict() for rule in rules])

    def list_rules(self, user_id: str | None = None) -> list[Rule]:
        """Global rules plus rules created by ``user_id``, newest first."""
        rules = self._load_rules()
        if user_id is not None:
            rules = [
                rule for rule in rules if rule.global_ or rule.created_by == user_id
            ]
        return sorted(rules, key=lambda rule: rule.created_at, reverse=True)

    def get_rule(self, rule_id: str) -> Rule | None:
        for rule in self._load_rules():
            if rule.id == rule_id:
                return rule
        return None

    def save_rule(self, rule: Rule) -> Rule:
        rules = self._load_rules()
        for index, existing in enumerate(rules):
            if existing.id == rule.id:
                rules[index] = rule
                break
        else:
            rules.append(rule)
        self._save_rules(rules)
        return rule

    def remove_rule(self, rule_id: str) -> bool:
        rules = self._load_rules()
        kept = [rule for rule in rules if rule.id != rule_id]
        if len(kept) == len(rules):
            return False
        self._save_rules(kept)

        assignments = self._load_project_rules()
        remaining = [item for item in assignments if item.rule_id != rule_id]
        if len(remaining) != len(assignments):
            self._save_project_rules(remaining)
        return True

    # Project assignments

    def _load_project_rules(self) -> list[ProjectRule]:
        return [
            ProjectRule.from_dict(item)
            for item in self._load_list(self.project_rules_path)
        ]

    def _save_project_rules(self, items: list[ProjectRule]) -> None:
        write_json(self.project_rules_path, [item.as_dict() for item in items])

    def list_project_rules(self, project_id: str) -> list[ProjectRule]:
        return [
            item for item in self._load_project_rules() if item.project_id == project_id
        ]

    def get_project_rule(self, project_id: str, rule_id: str) -> ProjectRule | None:
        for item in self._load_project_rules():
            if item.project_id == project_id and item.rule_id == rule_id:
                return item
        return None

    def assign_rule(
        self, project_id: str, rule_id: str, enabled: bool = True
    ) -> ProjectRule:
        items = self._load_project_rules()
        assignment = ProjectRule(
            project_id=project_id,
            rule_id=rule_id,
            enabled=enabled,
            created_at=now_iso(),
        )
        items.append(assignment)
        self._save_project_rules(items)
        return assignment

    def unassign_rule(self, project_id: str, rule_id: str) -> bool:
        items = self._load_project_rules()
        kept = [
            item
            for item in items
            if not (item.project_id == project_id and item.rule_id == rule_id)
        ]
        if len(kept) == len(items):
            return False
        self._save_project_rules(kept)
        return True

    def active_rules_for_project(self, project_id: str) -> list[Rule]:
        """Enabled project-assigned rules followed by every enabled global rule."""
        rules_by_id = {rule.id: rule for rule in self._load_rules()}
        assigned: list[Rule] = []
        for item in self.list_project_rules(project_id):
            rule = rules_by_id.get(item.rule_id)
            if item.enabled and rule is not None and rule.enabled:
                assigned.append(rule)
        global_rules = [
            rule for rule in rules_by_id.values() if rule.global_ and rule.enabled
        ]
        return assigned + global_rules

    # Violations

    def add_violations(self, violations: Iterable[Violation]) -> list[Violation]:
        """Append a batch of violations with a single write."""
        batch = list(violations)
        if not batch:
            return []
        stored = self._load_list(self.violations_path)
        stamp = now_iso()
        for violation in batch:
            if not violation.id:
                violation.id = new_id()
            if not violation.created_at:
                violation.created_at = stamp
            stored.append(violation.as_dict())
        write_json(self.violations_path, stored)
        return batch

    def list_violations(self, audit_id: str) -> list[Violation]:
        matched = [
            Violation.from_dict(item)
            for item in self._load_list(self.violations_path)
            if item.get("auditId") == audit_id
        ]
        return sorted(matched, key=lambda item: item.created_at, reverse=True)

    def recent_violations(self, rule_id: str, limit: int) -> list[Violation]:
        matched = [
            Violation.from_dict(item)
            for item in self._load_list(self.violations_path)
            if item.get("ruleId") == rule_id
        ]
        matched.sort(key=lambda item: item.created_at, reverse=True)
        return matched[:limit]

    def violation_counts(self) -> Counter:
        return Counter(
            str(item.get("ruleId")) for item in self._load_list(self.violations_path)
        )

    def assignment_counts(self) -> Counter:
        return Counter(item.rule_id for item in self._load_project_rules())
