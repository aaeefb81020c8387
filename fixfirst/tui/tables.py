from collections import Counter

from rich.markup import escape
from rich.table import Column, Table

from fixfirst.rules.models import ProjectRule, Rule, Severity, Violation
from fixfirst.tui.enums import SEVERITY_STYLE, UIStyle


def _severity_text(severity: Severity) -> str:
    style = SEVERITY_STYLE.get(severity, UIStyle.WHITE.value)
    return f"[{style}]{severity.value}[/{style}]"


def _flag_text(value: bool, on: str = "yes", off: str = "no") -> str:
    if value:
        return f"[{UIStyle.GREEN.value}]{on}[/{UIStyle.GREEN.value}]"
    return f"[{UIStyle.DIM.value}]{off}[/{UIStyle.DIM.value}]"


class RuleTable:
    @staticmethod
    def rules_table(
        rules: list[Rule],
        violation_counts: Counter | None = None,
        assignment_counts: Counter | None = None,
    ) -> Table:
        violation_counts = violation_counts or Counter()
        assignment_counts = assignment_counts or Counter()
        table = Table(
            Column(header="ID", width=12, overflow="ellipsis", no_wrap=True),
            Column(header="Name", overflow="ellipsis"),
            Column(header="Category", width=16),
            Column(header="Severity", width=10),
            Column(header="Enabled", width=8),
            Column(header="Global", width=7),
            Column(header="Projects", width=8, justify="right"),
            Column(header="Violations", width=10, justify="right"),
            expand=True,
            header_style="bold",
        )
        for rule in rules:
            table.add_row(
                escape(rule.id),
                escape(rule.name),
                rule.category.value,
                _severity_text(rule.severity),
                _flag_text(rule.enabled),
                _flag_text(rule.global_),
                str(assignment_counts.get(rule.id, 0)),
                str(violation_counts.get(rule.id, 0)),
            )
        return table

    @staticmethod
    def detail_rows(rule: Rule) -> list[tuple[str, str]]:
        return [
            ("ID", escape(rule.id)),
            ("Name", escape(rule.name)),
            ("Description", escape(rule.description or "-")),
            ("Category", rule.category.value),
            ("Severity", _severity_text(rule.severity)),
            ("Message", escape(rule.message)),
            ("Enabled", _flag_text(rule.enabled)),
            ("Global", _flag_text(rule.global_)),
            ("Created by", escape(rule.created_by or "-")),
            ("Updated", rule.updated_at or "-"),
        ]

    @staticmethod
    def project_rules_table(items: list[tuple[ProjectRule, Rule | None]]) -> Table:
        table = Table(
            Column(header="Rule ID", width=12, overflow="ellipsis", no_wrap=True),
            Column(header="Name", overflow="ellipsis"),
            Column(header="Severity", width=10),
            Column(header="Assignment", width=10),
            Column(header="Rule", width=8),
            expand=True,
            header_style="bold",
        )
        for assignment, rule in items:
            if rule is None:
                table.add_row(
                    escape(assignment.rule_id),
                    f"[{UIStyle.RED.value}](missing rule)[/{UIStyle.RED.value}]",
                    "",
                    _flag_text(assignment.enabled, "enabled", "disabled"),
                    "",
                )
                continue
            table.add_row(
                escape(rule.id),
                escape(rule.name),
                _severity_text(rule.severity),
                _flag_text(assignment.enabled, "enabled", "disabled"),
                _flag_text(rule.enabled, "enabled", "disabled"),
            )
        return table


class ViolationTable:
    @staticmethod
    def summary_block(audit_id: str, violations: list[Violation]):
        counts = Counter(item.severity.value for item in violations)
        chips = [
            f"{severity.value.lower()}={counts[severity.value]}"
            for severity in Severity
            if counts.get(severity.value)
        ]
        if not chips:
            chips = ["none"]

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Audit", escape(audit_id))
        table.add_row("Violations", str(len(violations)))
        table.add_row("Severities", "  ".join(chips))
        return table

    @staticmethod
    def violations_table(violations: list[Violation]) -> Table:
        table = Table(
            Column(header="Severity", width=10),
            Column(header="Rule ID", width=12, overflow="ellipsis", no_wrap=True),
            Column(header="Rule", overflow="ellipsis", max_width=32),
            Column(header="Message", overflow="fold"),
            Column(header="Detail", overflow="ellipsis", max_width=40),
            expand=True,
            header_style="bold",
        )
        for violation in violations:
            details = violation.details or {}
            detail = str(details.get("error") or details.get("evaluatedAt") or "")
            table.add_row(
                _severity_text(violation.severity),
                escape(violation.rule_id),
                escape(str(details.get("ruleName", ""))),
                escape(violation.message),
                escape(detail),
            )
        return table


class FieldTable:
    @staticmethod
    def fields_table(fields: dict[str, dict[str, str]]) -> Table:
        table = Table(
            Column(header="Field", width=28),
            Column(header="Type", width=9),
            Column(header="Description", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for name, info in fields.items():
            table.add_row(name, info["type"], info["description"])
        return table
