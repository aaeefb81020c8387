import json
from collections import Counter

from rich.console import Console, Group
from rich.markup import escape
from rich.syntax import Syntax

from fixfirst.rules.models import ProjectRule, Rule, RuleTestResult, Violation
from fixfirst.tui.enums import UIStyle
from fixfirst.tui.sections import UISection
from fixfirst.tui.tables import FieldTable, RuleTable, ViolationTable
from fixfirst.utils import compact_home_path


class RulesConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_rules(
        self,
        rules: list[Rule],
        violation_counts: Counter | None = None,
        assignment_counts: Counter | None = None,
    ) -> None:
        if not rules:
            self.console.print(
                UISection.note("rules", "No rules defined.", style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap(
                "custom rules",
                RuleTable.rules_table(rules, violation_counts, assignment_counts),
                style=UIStyle.BLUE.value,
            )
        )

    def render_rule(self, rule: Rule, recent: list[Violation]) -> None:
        condition = Syntax(
            json.dumps(rule.condition, indent=2), "json", theme="ansi_dark", word_wrap=True
        )
        self.console.print(
            UISection.wrap(
                f"rule {escape(rule.name)}",
                Group(UISection.key_values(RuleTable.detail_rows(rule)), "", condition),
                style=UIStyle.BLUE.value,
            )
        )
        if recent:
            self.console.print(
                UISection.wrap(
                    "recent violations",
                    ViolationTable.violations_table(recent),
                    style=UIStyle.RED.value,
                )
            )

    def render_rule_saved(self, rule: Rule, verb: str, issues: list[str] | None = None) -> None:
        self.console.print(
            UISection.note(
                "rule",
                f"Rule {verb}: [bold]{escape(rule.name)}[/bold]\n{escape(rule.id)}",
                style=UIStyle.GREEN.value,
            )
        )
        self.render_condition_issues(issues or [])

    def render_rule_removed(self, rule: Rule) -> None:
        self.console.print(
            UISection.note(
                "rule",
                f"Removed rule: [bold]{escape(rule.name)}[/bold]\n{escape(rule.id)}",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_condition_issues(self, issues: list[str]) -> None:
        if not issues:
            return
        body = "\n".join(f"- {escape(item)}" for item in issues)
        self.console.print(
            UISection.note(
                "condition warnings",
                f"{body}\nMalformed parts evaluate as passed.",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_test_result(self, result: RuleTestResult) -> None:
        if not result.success:
            self.console.print(
                UISection.note(
                    "rule test",
                    f"Error: {escape(result.error or '')}",
                    style=UIStyle.RED.value,
                )
            )
            return
        style = UIStyle.GREEN.value if result.passed else UIStyle.YELLOW.value
        self.console.print(UISection.note("rule test", result.message, style=style))

    def render_project_rules(
        self, project_id: str, items: list[tuple[ProjectRule, Rule | None]]
    ) -> None:
        if not items:
            self.console.print(
                UISection.note(
                    "project rules",
                    f"No rules assigned to project {escape(project_id)}.",
                    style=UIStyle.YELLOW.value,
                )
            )
            return
        self.console.print(
            UISection.wrap(
                f"project {escape(project_id)}",
                RuleTable.project_rules_table(items),
                style=UIStyle.CYAN.value,
            )
        )

    def render_assignment(self, project_id: str, rule_id: str, removed: bool = False) -> None:
        verb = "unassigned from" if removed else "assigned to"
        style = UIStyle.YELLOW.value if removed else UIStyle.GREEN.value
        self.console.print(
            UISection.note(
                "project rules",
                f"Rule {escape(rule_id)} {verb} project [bold]{escape(project_id)}[/bold]",
                style=style,
            )
        )

    def render_violations(self, audit_id: str, violations: list[Violation]) -> None:
        self.console.print(
            UISection.wrap(
                "audit overview",
                ViolationTable.summary_block(audit_id, violations),
                style=UIStyle.BLUE.value,
            )
        )
        if not violations:
            self.console.print(
                UISection.note(
                    "violations", "No rule violations.", style=UIStyle.GREEN.value
                )
            )
            return
        self.console.print(
            UISection.wrap(
                "violations",
                ViolationTable.violations_table(violations),
                style=UIStyle.RED.value,
            )
        )

    def render_fields(self, fields: dict[str, dict[str, str]]) -> None:
        self.console.print(
            UISection.wrap(
                "available fields",
                FieldTable.fields_table(fields),
                style=UIStyle.CYAN.value,
            )
        )

    def render_settings(self, settings_path: str, values: dict[str, str]) -> None:
        rows = [(key, escape(str(value))) for key, value in values.items()]
        rows.append(("file", escape(compact_home_path(settings_path))))
        self.console.print(
            UISection.wrap("settings", UISection.key_values(rows), style=UIStyle.BLUE.value)
        )
