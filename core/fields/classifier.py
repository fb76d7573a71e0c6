"""Rule-driven placeholder classification.

Detection path per call:
- active data-type rules, when any are configured;
- otherwise active field rules, when any are configured;
- otherwise the built-in cascade.

Rules are tried by priority (highest first, stable for equal priorities) and
the first match wins. A rule that cannot be compiled or refers to an unknown
code is skipped with a warning; classification itself never fails.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from core.fields.builtin_classifier import detect_field_type, strip_placeholder
from core.fields.models import DataType, Entity, FieldDefinition, FieldValidation, InputType
from core.rules.codes import resolve_data_type, resolve_entity, resolve_input_type
from core.rules.models import DataTypeRule, EntityRule, FieldRule, PatternRule, RuleSet
from core.utils.errors import UnknownRuleCodeError
from core.utils.events import log_event

logger = logging.getLogger("docform.fields")

_RuleT = TypeVar("_RuleT", bound=PatternRule)


@dataclass(frozen=True)
class _PreparedRule(Generic[_RuleT]):
    rule: _RuleT
    regex: re.Pattern[str]


def generate_field_definitions(
    placeholders: Iterable[str],
    rule_set: RuleSet,
    *,
    apply_entity_rules: bool = False,
) -> dict[str, FieldDefinition]:
    """Classify every placeholder of one template.

    Args:
        placeholders: Raw tokens (``{{key}}``) in document order.
        rule_set: Snapshot of the rules in effect for this call.
        apply_entity_rules: Resolve ``entity`` with entity rules on the rule-driven
            paths. When False those paths leave the entity as ``general``.

    Returns:
        Definitions keyed by bare key, in document order, with a dense ``order``.
    """

    data_type_rules = _prepare(rule_set.data_type_rules, kind="data_type")
    field_rules = _prepare(rule_set.field_rules, kind="field")
    entity_rules = _prepare(rule_set.entity_rules, kind="entity") if apply_entity_rules else []

    # The path follows the configured active rules; a rule whose pattern does
    # not compile matches nothing but still selects its path.
    if any(rule.is_active for rule in rule_set.data_type_rules):
        path = "data_type_rules"
    elif any(rule.is_active for rule in rule_set.field_rules):
        path = "field_rules"
    else:
        path = "builtin"

    definitions: dict[str, FieldDefinition] = {}
    for placeholder in placeholders:
        key = strip_placeholder(placeholder)
        if key in definitions:
            continue

        if path == "data_type_rules":
            definition = _apply_data_type_rules(placeholder, key, data_type_rules)
        elif path == "field_rules":
            definition = _apply_field_rules(placeholder, key, field_rules)
        else:
            definition = detect_field_type(placeholder)

        # An entity set explicitly by a field rule wins over entity rules.
        if path != "builtin" and apply_entity_rules and definition.entity is Entity.GENERAL:
            definition.entity = _detect_entity(key, entity_rules)

        definition.order = len(definitions)
        definitions[key] = definition

    log_event(
        logger,
        logging.DEBUG,
        "field_definitions_generated",
        path=path,
        placeholder_count=len(definitions),
    )
    return definitions


def classify_placeholder(
    placeholder: str,
    rule_set: RuleSet,
    *,
    apply_entity_rules: bool = False,
) -> FieldDefinition:
    """Classify a single placeholder using the same path selection as a template."""

    definitions = generate_field_definitions(
        [placeholder], rule_set, apply_entity_rules=apply_entity_rules
    )
    return next(iter(definitions.values()))


def apply_data_type_rules(placeholder: str, rules: Sequence[DataTypeRule]) -> FieldDefinition:
    """Return the definition produced by the first matching data-type rule."""

    prepared = _prepare(rules, kind="data_type")
    return _apply_data_type_rules(placeholder, strip_placeholder(placeholder), prepared)


def apply_field_rules(placeholder: str, rules: Sequence[FieldRule]) -> FieldDefinition:
    """Return the definition produced by the first matching field rule."""

    prepared = _prepare(rules, kind="field")
    return _apply_field_rules(placeholder, strip_placeholder(placeholder), prepared)


def detect_entity_with_rules(key: str, rules: Sequence[EntityRule]) -> Entity:
    """Return the entity of the first matching entity rule, or ``general``."""

    return _detect_entity(strip_placeholder(key), _prepare(rules, kind="entity"))


def _prepare(rules: Iterable[_RuleT], *, kind: str) -> list[_PreparedRule[_RuleT]]:
    prepared: list[_PreparedRule[_RuleT]] = []
    for rule in sorted(rules, key=lambda item: -item.priority):
        if not rule.is_active:
            continue
        try:
            regex = re.compile(rule.pattern)
        except re.error as exc:
            log_event(
                logger,
                logging.WARNING,
                "rule_skipped_invalid_pattern",
                kind=kind,
                rule_id=rule.id,
                pattern=rule.pattern,
                error=str(exc),
            )
            continue
        prepared.append(_PreparedRule(rule=rule, regex=regex))
    return prepared


def _apply_data_type_rules(
    placeholder: str, key: str, rules: list[_PreparedRule[DataTypeRule]]
) -> FieldDefinition:
    definition = FieldDefinition(placeholder=placeholder)

    for prepared in rules:
        rule = prepared.rule
        if not rule.pattern:
            continue
        # Text is already the default; the catch-all rule would shadow nothing useful.
        if rule.code == DataType.TEXT.value and rule.pattern == ".*":
            continue
        if prepared.regex.search(key) is None:
            continue

        try:
            data_type = resolve_data_type(rule.code)
            input_type = resolve_input_type(rule.input_type) if rule.input_type else None
        except UnknownRuleCodeError as exc:
            _log_unknown_code(rule, exc)
            continue

        definition.data_type = data_type
        if input_type is not None:
            definition.input_type = input_type
        definition.description = rule.description or None
        definition.default_value = rule.default_value or None
        definition.validation = _copy_validation(rule.validation)
        _attach_options(definition, rule.options)
        return definition

    return definition


def _apply_field_rules(
    placeholder: str, key: str, rules: list[_PreparedRule[FieldRule]]
) -> FieldDefinition:
    definition = FieldDefinition(placeholder=placeholder)

    for prepared in rules:
        rule = prepared.rule
        match = prepared.regex.search(key)
        if match is None:
            continue

        try:
            data_type = resolve_data_type(rule.data_type) if rule.data_type else None
            input_type = resolve_input_type(rule.input_type) if rule.input_type else None
            entity = resolve_entity(rule.entity) if rule.entity else None
        except UnknownRuleCodeError as exc:
            _log_unknown_code(rule, exc)
            continue

        if data_type is not None:
            definition.data_type = data_type
        if input_type is not None:
            definition.input_type = input_type
        if entity is not None:
            definition.entity = entity

        if rule.group_name:
            definition.group, definition.group_order = _resolve_group(rule.group_name, match)

        definition.validation = _copy_validation(rule.validation)
        _attach_options(definition, rule.options)
        return definition

    return definition


def _detect_entity(key: str, rules: list[_PreparedRule[EntityRule]]) -> Entity:
    for prepared in rules:
        if prepared.regex.search(key) is None:
            continue
        try:
            return resolve_entity(prepared.rule.code)
        except UnknownRuleCodeError as exc:
            _log_unknown_code(prepared.rule, exc)
    return Entity.GENERAL


def _resolve_group(template: str, match: re.Match[str]) -> tuple[str, int]:
    groups = match.groups()
    group_name = template

    if "{prefix}" in group_name and len(groups) >= 1:
        group_name = group_name.replace("{prefix}", (groups[0] or "").lower())
    if "{suffix}" in group_name and len(groups) >= 2:
        group_name = group_name.replace("{suffix}", (groups[1] or "").upper())

    group_order = 0
    for value in groups:
        if value is None:
            continue
        try:
            group_order = int(value)
        except ValueError:
            continue
        break

    return group_name, group_order


def _copy_validation(validation: FieldValidation | None) -> FieldValidation | None:
    if validation is None or not validation.model_dump(exclude_defaults=True):
        return None
    return validation.model_copy(deep=True)


def _attach_options(definition: FieldDefinition, options: list[str]) -> None:
    if not options or definition.input_type is not InputType.SELECT:
        return
    if definition.validation is None:
        definition.validation = FieldValidation()
    definition.validation.options = list(options)


def _log_unknown_code(rule: PatternRule, exc: UnknownRuleCodeError) -> None:
    log_event(
        logger,
        logging.WARNING,
        "rule_skipped_unknown_code",
        rule_id=rule.id,
        kind=exc.kind,
        code=exc.code,
    )
