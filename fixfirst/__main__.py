import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict

import click
from rich.console import Console

from fixfirst.errors import FixFirstError
from fixfirst.log import configure_logging
from fixfirst.rules.models import FailureMode, UserRole
from fixfirst.rules.parser import load_document, load_mapping
from fixfirst.rules.service import RuleService
from fixfirst.settings import Settings, SettingsRepository
from fixfirst.tui import RulesConsoleUI


def _json_option() -> Callable:
    return click.option(
        "--json", "as_json", is_flag=True, help="Print machine-readable JSON."
    )


def _input_file(name: str) -> Callable:
    return click.argument(
        name, type=click.Path(exists=True, dir_okay=False, path_type=Path)
    )


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2))


def _settings_from_obj(obj: Dict[str, Any]) -> Settings:
    repository = SettingsRepository(obj.get("root"))
    try:
        settings = repository.load()
    except FixFirstError as exc:
        raise click.ClickException(str(exc))
    configure_logging(settings.log_level)
    return settings


def _service_from_obj(obj: Dict[str, Any]) -> RuleService:
    return RuleService.from_settings(_settings_from_obj(obj))


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        return load_mapping(path)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))


def _read_document(path: Path) -> Any:
    try:
        return load_document(path)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Override the data directory (default: ~/.config/fixfirst).",
)
@click.pass_context
def cli(ctx: click.Context, root: Path | None) -> None:
    """FixFirst custom SEO rules."""
    ctx.obj = {"root": root}


@cli.command(help="List audit data fields available to rules.")
@_json_option()
@click.pass_obj
def fields(obj: Dict[str, Any], as_json: bool) -> None:
    _settings_from_obj(obj)
    catalog = RuleService.available_fields()
    if as_json:
        _echo_json(catalog)
        return
    RulesConsoleUI(Console()).render_fields(catalog)


@cli.group(help="Show or change local settings.")
def settings() -> None:
    pass


@settings.command("show", help="Show effective settings.")
@click.pass_obj
def settings_show(obj: Dict[str, Any]) -> None:
    current = _settings_from_obj(obj)
    repository = SettingsRepository(obj.get("root"))
    RulesConsoleUI(Console()).render_settings(
        str(repository.settings_path), current.as_dict()
    )


@settings.command("set", help="Persist settings to the settings file.")
@click.option("--user", "user_id", default=None, help="Acting user id.")
@click.option(
    "--role",
    type=click.Choice([item.value for item in UserRole], case_sensitive=False),
    default=None,
)
@click.option(
    "--failure-mode",
    type=click.Choice([item.value for item in FailureMode], case_sensitive=False),
    default=None,
    help="Whether a rule that errors counts as passed (open) or failed (closed).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error", "critical"]),
    default=None,
)
@click.pass_obj
def settings_set(
    obj: Dict[str, Any],
    user_id: str | None,
    role: str | None,
    failure_mode: str | None,
    log_level: str | None,
) -> None:
    repository = SettingsRepository(obj.get("root"))
    try:
        file_values = repository.load(environ={})
    except FixFirstError as exc:
        raise click.ClickException(str(exc))

    updated = replace(
        file_values,
        user_id=user_id.strip() if user_id else file_values.user_id,
        role=UserRole(role.upper()) if role else file_values.role,
        failure_mode=(
            FailureMode(failure_mode.lower()) if failure_mode else file_values.failure_mode
        ),
        log_level=log_level or file_values.log_level,
    )
    if not updated.user_id:
        raise click.ClickException("User id cannot be empty")
    repository.save(updated)
    RulesConsoleUI(Console()).render_settings(
        str(repository.settings_path), updated.as_dict()
    )


@cli.group(help="Manage custom rules.")
def rules() -> None:
    pass


@rules.command("list", help="List global rules and rules you created.")
@_json_option()
@click.pass_obj
def rules_list(obj: Dict[str, Any], as_json: bool) -> None:
    service = _service_from_obj(obj)
    try:
        items = service.list_rules()
        violation_counts = service.repository.violation_counts()
        assignment_counts = service.repository.assignment_counts()
    except FixFirstError as exc:
        raise click.ClickException(str(exc))

    if as_json:
        _echo_json([rule.as_dict() for rule in items])
        return
    RulesConsoleUI(Console()).render_rules(items, violation_counts, assignment_counts)


@rules.command("show", help="Show a rule and its latest violations.")
@click.argument("rule_id")
@_json_option()
@click.pass_obj
def rules_show(obj: Dict[str, Any], rule_id: str, as_json: bool) -> None:
    service = _service_from_obj(obj)
    try:
        rule = service.get_rule(rule_id)
        recent = service.recent_violations(rule_id)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))

    if as_json:
        payload = rule.as_dict()
        payload["violations"] = [item.as_dict() for item in recent]
        _echo_json(payload)
        return
    RulesConsoleUI(Console()).render_rule(rule, recent)


@rules.command("add", help="Create a rule from a JSON or YAML file.")
@_input_file("path")
@click.pass_obj
def rules_add(obj: Dict[str, Any], path: Path) -> None:
    service = _service_from_obj(obj)
    payload = _read_mapping(path)
    try:
        rule = service.create_rule(payload)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))
    RulesConsoleUI(Console()).render_rule_saved(
        rule, "created", service.condition_issues(rule.condition)
    )


@rules.command("update", help="Update fields of a rule you created.")
@click.argument("rule_id")
@_input_file("path")
@click.pass_obj
def rules_update(obj: Dict[str, Any], rule_id: str, path: Path) -> None:
    service = _service_from_obj(obj)
    payload = _read_mapping(path)
    try:
        rule = service.update_rule(rule_id, payload)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))
    issues = service.condition_issues(rule.condition) if "condition" in payload else []
    RulesConsoleUI(Console()).render_rule_saved(rule, "updated", issues)


@rules.command("remove", help="Delete a rule you created.")
@click.argument("rule_id")
@click.pass_obj
def rules_remove(obj: Dict[str, Any], rule_id: str) -> None:
    service = _service_from_obj(obj)
    try:
        rule = service.get_rule(rule_id)
        service.delete_rule(rule_id)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))
    RulesConsoleUI(Console()).render_rule_removed(rule)


@rules.command("test", help="Try a condition against sample audit data.")
@_input_file("condition_path")
@_input_file("data_path")
@_json_option()
@click.pass_obj
def rules_test(
    obj: Dict[str, Any], condition_path: Path, data_path: Path, as_json: bool
) -> None:
    service = _service_from_obj(obj)
    condition = _read_document(condition_path)
    sample_data = _read_document(data_path)
    result = service.test_rule(condition, sample_data)

    if as_json:
        _echo_json(result.as_dict())
    else:
        ui = RulesConsoleUI(Console())
        ui.render_test_result(result)
        if result.success:
            ui.render_condition_issues(service.condition_issues(condition))

    if not result.success:
        raise click.exceptions.Exit(1)


@cli.group(help="Manage rules assigned to projects.")
def projects() -> None:
    pass


@projects.command("rules", help="List rules assigned to a project.")
@click.argument("project_id")
@_json_option()
@click.pass_obj
def projects_rules(obj: Dict[str, Any], project_id: str, as_json: bool) -> None:
    service = _service_from_obj(obj)
    try:
        items = service.list_project_rules(project_id)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))

    if as_json:
        _echo_json(
            [
                {**item.as_dict(), "rule": rule.as_dict() if rule else None}
                for item, rule in items
            ]
        )
        return
    RulesConsoleUI(Console()).render_project_rules(project_id, items)


@projects.command("assign", help="Assign a rule to a project.")
@click.argument("project_id")
@click.argument("rule_id")
@click.option("--disabled", is_flag=True, help="Assign without enabling it.")
@click.pass_obj
def projects_assign(
    obj: Dict[str, Any], project_id: str, rule_id: str, disabled: bool
) -> None:
    service = _service_from_obj(obj)
    try:
        service.assign_rule(project_id, rule_id, enabled=not disabled)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))
    RulesConsoleUI(Console()).render_assignment(project_id, rule_id)


@projects.command("unassign", help="Remove a rule from a project.")
@click.argument("project_id")
@click.argument("rule_id")
@click.pass_obj
def projects_unassign(obj: Dict[str, Any], project_id: str, rule_id: str) -> None:
    service = _service_from_obj(obj)
    try:
        service.unassign_rule(project_id, rule_id)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))
    RulesConsoleUI(Console()).render_assignment(project_id, rule_id, removed=True)


@cli.command(help="Evaluate a project's active rules against audit data.")
@click.argument("project_id")
@_input_file("data_path")
@click.option("--audit-id", default=None, help="Audit id to record violations under.")
@_json_option()
@click.pass_obj
def evaluate(
    obj: Dict[str, Any],
    project_id: str,
    data_path: Path,
    audit_id: str | None,
    as_json: bool,
) -> None:
    service = _service_from_obj(obj)
    audit_data = _read_document(data_path)
    try:
        run_id, violations = service.evaluate_project_rules(
            project_id, audit_data, audit_id=audit_id
        )
    except FixFirstError as exc:
        raise click.ClickException(str(exc))

    if as_json:
        _echo_json(
            {"auditId": run_id, "violations": [item.as_dict() for item in violations]}
        )
    else:
        RulesConsoleUI(Console()).render_violations(run_id, violations)

    if violations:
        raise click.exceptions.Exit(1)


@cli.command(help="List recorded violations for an audit.")
@click.argument("audit_id")
@_json_option()
@click.pass_obj
def violations(obj: Dict[str, Any], audit_id: str, as_json: bool) -> None:
    service = _service_from_obj(obj)
    try:
        items = service.list_violations(audit_id)
    except FixFirstError as exc:
        raise click.ClickException(str(exc))

    if as_json:
        _echo_json([item.as_dict() for item in items])
        return
    RulesConsoleUI(Console()).render_violations(audit_id, items)


def main() -> int:
    try:
        code = cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return 2
    return code if isinstance(code, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
