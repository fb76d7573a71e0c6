"""Loading utilities for the default rule tables."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from core.fields.options import OPTION_TABLES
from core.rules.models import (
    RULE_MODELS,
    DataTypeRule,
    EntityRule,
    FieldRule,
    PatternRule,
    RuleKind,
    RuleSet,
    validate_rule,
)

_SECTION_KINDS: dict[str, RuleKind] = {
    "data_type_rules": "data_type",
    "field_rules": "field",
    "entity_rules": "entity",
}


def load_default_rules(path: Path | None = None) -> RuleSet:
    """Load and validate the rule tables from YAML.

    Every rule is validated the same way the rule store validates new rules, so a
    malformed default table fails loudly at load time.
    """

    rules_path = path or Path(__file__).with_name("default_rules.yaml")

    try:
        raw = yaml.safe_load(rules_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"Rules file not found: {rules_path}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in rules file: {rules_path}") from exc

    if not isinstance(raw, dict):
        raise ValueError(f"Rules file must contain a mapping: {rules_path}")

    unknown_sections = set(raw) - set(_SECTION_KINDS)
    if unknown_sections:
        raise ValueError(
            f"Unknown sections {sorted(unknown_sections)} in rules file: {rules_path}"
        )

    sections: dict[str, list[PatternRule]] = {}
    for section, kind in _SECTION_KINDS.items():
        items = raw.get(section) or []
        if not isinstance(items, list):
            raise ValueError(f"Section '{section}' must be a list: {rules_path}")
        sections[section] = [
            parse_rule(kind, _resolve_options_ref(item, rules_path), source=rules_path)
            for item in items
        ]

    return RuleSet(
        data_type_rules=tuple(_narrow(sections["data_type_rules"], DataTypeRule)),
        field_rules=tuple(_narrow(sections["field_rules"], FieldRule)),
        entity_rules=tuple(_narrow(sections["entity_rules"], EntityRule)),
    )


def parse_rule(kind: RuleKind, payload: dict[str, Any], *, source: object) -> PatternRule:
    """Validate one raw rule payload into its model.

    Raises:
        ValueError: when the payload shape is invalid.
        InvalidRulePatternError / UnknownRuleCodeError: when the rule is rejected.
    """

    model = RULE_MODELS[kind]
    try:
        rule = model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid {kind} rule schema in {source}: {exc}") from exc
    validate_rule(rule)
    return rule


def _resolve_options_ref(item: object, rules_path: Path) -> dict[str, Any]:
    if not isinstance(item, dict):
        raise ValueError(f"Rule entries must be mappings: {rules_path}")

    resolved = dict(item)
    ref = resolved.pop("options_ref", None)
    if ref is None:
        return resolved
    if ref not in OPTION_TABLES:
        raise ValueError(f"Unknown options_ref '{ref}' in rules file: {rules_path}")
    resolved["options"] = list(OPTION_TABLES[ref])
    return resolved


def _narrow(rules: list[PatternRule], model: type[PatternRule]) -> list[Any]:
    return [rule for rule in rules if isinstance(rule, model)]
