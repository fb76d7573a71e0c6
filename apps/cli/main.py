"""Typer CLI entrypoint for docform."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Literal, cast

import typer

from apps.cli.format_human import render_field_summary, render_group_summary
from apps.cli.io import load_existing_types, write_json_atomic, write_yaml_atomic
from core import settings
from core.fields.classifier import generate_field_definitions
from core.fields.snapshot import field_definitions_to_payload
from core.grouping.auto_suggest import suggest_groups
from core.grouping.models import TemplateInfo
from core.rules.loader import load_default_rules
from core.rules.models import DataTypeRule, EntityRule, FieldRule, RuleKind, RuleSet
from core.rules.store import RuleStore
from core.templates.placeholder_parser import parse_placeholders_from_path
from core.utils.errors import (
    DuplicateCodeError,
    InvalidRulePatternError,
    RuleNotFoundError,
    TemplateError,
    UnknownRuleCodeError,
)

app = typer.Typer(help="Document form classification CLI", rich_markup_mode=None)
rules_app = typer.Typer(help="Manage the pattern rule store", rich_markup_mode=None)
app.add_typer(rules_app, name="rules")

ReportMode = Literal["human", "json"]
_RULE_KINDS: tuple[RuleKind, ...] = ("data_type", "field", "entity")
_LOG_LEVELS = {"debug", "info", "warning", "error"}
_RULE_FIELDS: dict[RuleKind, tuple[str, ...]] = {
    "data_type": tuple(DataTypeRule.model_fields),
    "field": tuple(FieldRule.model_fields),
    "entity": tuple(EntityRule.model_fields),
}


@app.callback()
def cli_callback(
    log_level: Annotated[
        str, typer.Option("--log-level", help="debug, info, warning or error.")
    ] = "warning",
) -> None:
    """Configure logging for every sub-command."""

    normalized = log_level.lower().strip()
    if normalized not in _LOG_LEVELS:
        typer.echo("ERROR: --log-level must be one of: debug, info, warning, error.")
        raise typer.Exit(code=1)
    logging.basicConfig(level=normalized.upper(), format="%(levelname)s %(name)s %(message)s")


@app.command("classify")
def classify_command(
    template: Annotated[Path, typer.Option(..., exists=True, dir_okay=False, file_okay=True)],
    rules: Annotated[Path | None, typer.Option(help="Rule store JSON file.")] = None,
    out: Annotated[Path | None, typer.Option(help="Write the field snapshot JSON here.")] = None,
    report: Annotated[str, typer.Option(help="human or json.")] = "human",
    strict: Annotated[
        bool, typer.Option("--strict", help="Fail on empty or unclosed placeholders.")
    ] = False,
) -> None:
    """Extract placeholders from a .docx template and classify them."""

    report_mode = _parse_report_mode(report)

    try:
        parsed = parse_placeholders_from_path(template, strict=strict)
    except TemplateError as exc:
        typer.echo("ERROR: template unsupported placeholders")
        if exc.result is not None:
            for item in exc.result.unsupported:
                typer.echo(f"  {item.kind} at {item.paragraph_path}: {item.text}")
        raise typer.Exit(code=3) from exc

    if parsed.unsupported:
        typer.echo(
            "WARNING(unsupported): unsupported placeholders detected "
            f"(count={len(parsed.unsupported)})."
        )

    definitions = generate_field_definitions(
        parsed.placeholders,
        _load_rule_set(rules),
        apply_entity_rules=settings.apply_entity_rules(),
    )
    payload = field_definitions_to_payload(definitions)

    if out is not None:
        write_json_atomic(out, payload)
        typer.echo(f"INFO: wrote {len(payload)} field definitions to {out}")

    if report_mode == "json":
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        typer.echo(render_field_summary(definitions))


@app.command("classify-keys")
def classify_keys_command(
    keys: Annotated[list[str], typer.Argument(help="Bare keys or {{key}} tokens.")],
    rules: Annotated[Path | None, typer.Option(help="Rule store JSON file.")] = None,
) -> None:
    """Classify placeholder keys without a template file."""

    placeholders = [key if key.startswith("{{") else f"{{{{{key}}}}}" for key in keys]
    definitions = generate_field_definitions(
        placeholders,
        _load_rule_set(rules),
        apply_entity_rules=settings.apply_entity_rules(),
    )
    typer.echo(json.dumps(field_definitions_to_payload(definitions), ensure_ascii=False, indent=2))


@app.command("suggest")
def suggest_command(
    names: Annotated[list[str], typer.Argument(help="Template display names or filenames.")],
    existing: Annotated[
        Path | None,
        typer.Option(exists=True, dir_okay=False, help="JSON array of existing document types."),
    ] = None,
    report: Annotated[str, typer.Option(help="human or json.")] = "human",
) -> None:
    """Suggest document-type groups for template names."""

    report_mode = _parse_report_mode(report)

    try:
        existing_types = load_existing_types(existing) if existing is not None else []
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc

    templates = [
        TemplateInfo(id=f"t{index}", display_name=name) for index, name in enumerate(names)
    ]
    groups = suggest_groups(
        templates, existing_types, min_key_length=settings.min_merge_key_length()
    )

    if report_mode == "json":
        payload = [group.model_dump(mode="json") for group in groups]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        typer.echo(render_group_summary(groups))


@rules_app.command("init")
def rules_init_command(
    store: Annotated[Path | None, typer.Option(help="Rule store JSON file.")] = None,
    defaults: Annotated[
        Path | None, typer.Option(exists=True, dir_okay=False, help="Rules YAML to seed from.")
    ] = None,
) -> None:
    """Seed the store with the default rule tables."""

    rule_store = RuleStore(store or settings.rule_store_path())
    try:
        created, updated = rule_store.initialize_defaults(load_default_rules(defaults))
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"INFO: default rules initialized (created={created}, updated={updated})")


@rules_app.command("list")
def rules_list_command(
    kind: Annotated[str, typer.Option(help="data_type, field or entity.")] = "data_type",
    store: Annotated[Path | None, typer.Option(help="Rule store JSON file.")] = None,
    active_only: Annotated[bool, typer.Option("--active-only")] = False,
) -> None:
    """List rules of one kind by priority."""

    rule_kind = _parse_kind(kind)
    rule_store = RuleStore(store or settings.rule_store_path())
    for rule in rule_store.list_rules(rule_kind, active_only=active_only):
        target = getattr(rule, "code", "") or getattr(rule, "data_type", "") or "-"
        state = "active" if rule.is_active else "inactive"
        typer.echo(
            f"{rule.id} priority={rule.priority} {state} target={target} pattern={rule.pattern}"
        )


@rules_app.command("add")
def rules_add_command(
    kind: Annotated[str, typer.Option(help="data_type, field or entity.")],
    name: Annotated[str, typer.Option()],
    pattern: Annotated[str, typer.Option()],
    store: Annotated[Path | None, typer.Option(help="Rule store JSON file.")] = None,
    rule_id: Annotated[str | None, typer.Option("--id")] = None,
    priority: Annotated[int, typer.Option()] = 0,
    code: Annotated[str | None, typer.Option(help="Data type or entity code.")] = None,
    data_type: Annotated[str | None, typer.Option()] = None,
    input_type: Annotated[str | None, typer.Option()] = None,
    entity: Annotated[str | None, typer.Option()] = None,
    group_name: Annotated[str | None, typer.Option()] = None,
    description: Annotated[str | None, typer.Option()] = None,
    inactive: Annotated[bool, typer.Option("--inactive")] = False,
) -> None:
    """Validate and store one rule; an invalid pattern exits with code 2."""

    rule_kind = _parse_kind(kind)
    payload: dict[str, Any] = {
        "id": rule_id,
        "name": name,
        "pattern": pattern,
        "priority": priority,
        "is_active": not inactive,
        "description": description,
        "code": code,
        "data_type": data_type,
        "input_type": input_type,
        "entity": entity,
        "group_name": group_name,
    }
    allowed = set(_RULE_FIELDS[rule_kind])
    payload = {key: value for key, value in payload.items() if value is not None and key in allowed}

    rule_store = RuleStore(store or settings.rule_store_path())
    try:
        rule = rule_store.create_rule(rule_kind, payload)
    except InvalidRulePatternError as exc:
        typer.echo(f"ERROR: invalid pattern: {exc}")
        raise typer.Exit(code=2) from exc
    except UnknownRuleCodeError as exc:
        typer.echo(f"ERROR: unknown {exc.kind} code: {exc.code}")
        raise typer.Exit(code=2) from exc
    except (DuplicateCodeError, ValueError) as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"INFO: created {rule_kind} rule {rule.id}")


@rules_app.command("delete")
def rules_delete_command(
    kind: Annotated[str, typer.Option(help="data_type, field or entity.")],
    rule_id: Annotated[str, typer.Option("--id")],
    store: Annotated[Path | None, typer.Option(help="Rule store JSON file.")] = None,
) -> None:
    """Delete one rule by id."""

    rule_kind = _parse_kind(kind)
    rule_store = RuleStore(store or settings.rule_store_path())
    if not rule_store.delete_rule(rule_kind, rule_id):
        typer.echo(f"ERROR: {RuleNotFoundError(rule_id)}")
        raise typer.Exit(code=1)
    typer.echo(f"INFO: deleted {rule_kind} rule {rule_id}")


@rules_app.command("export")
def rules_export_command(
    out: Annotated[Path, typer.Option(help="Destination YAML file.")],
    store: Annotated[Path | None, typer.Option(help="Rule store JSON file.")] = None,
) -> None:
    """Export the store as a rules YAML file loadable by ``rules init --defaults``."""

    rule_set = RuleStore(store or settings.rule_store_path()).snapshot()
    payload = {
        "data_type_rules": [_export_rule(rule) for rule in rule_set.data_type_rules],
        "field_rules": [_export_rule(rule) for rule in rule_set.field_rules],
        "entity_rules": [_export_rule(rule) for rule in rule_set.entity_rules],
    }
    write_yaml_atomic(out, payload)
    typer.echo(f"INFO: wrote rules to {out}")


def _load_rule_set(path: Path | None) -> RuleSet:
    store_path = path or settings.rule_store_path()
    try:
        return RuleStore(store_path).snapshot()
    except ValueError as exc:
        typer.echo(f"ERROR: {exc}")
        raise typer.Exit(code=1) from exc


def _parse_kind(kind: str) -> RuleKind:
    normalized = kind.lower().strip().replace("-", "_")
    if normalized not in _RULE_KINDS:
        typer.echo("ERROR: --kind must be one of: data_type, field, entity.")
        raise typer.Exit(code=1)
    return cast(RuleKind, normalized)


def _parse_report_mode(report: str) -> ReportMode:
    normalized = report.lower().strip()
    if normalized not in {"human", "json"}:
        typer.echo("ERROR: --report must be one of: human, json.")
        raise typer.Exit(code=1)
    return cast(ReportMode, normalized)


def _export_rule(rule: Any) -> dict[str, Any]:
    payload = rule.model_dump(mode="json", exclude_defaults=True)
    payload.setdefault("priority", rule.priority)
    return payload


def main() -> None:
    """Console script entrypoint."""

    app()


if __name__ == "__main__":
    main()
