"""Data models for configurable pattern rules and rule-set snapshots."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from core.fields.models import FieldValidation
from core.rules.codes import resolve_data_type, resolve_entity, resolve_input_type
from core.utils.errors import InvalidRulePatternError

RuleKind = Literal["data_type", "field", "entity"]


class PatternRule(BaseModel):
    """Fields shared by every rule family.

    ``pattern`` is searched (not anchored) against the bare placeholder key.
    Higher ``priority`` rules are tried first.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    description: str = ""
    pattern: str
    priority: int = 0
    is_active: bool = True


class DataTypeRule(PatternRule):
    """Canonical rule: maps a key pattern to a data-type ``code``."""

    code: str
    input_type: str = "text"
    validation: FieldValidation | None = None
    options: list[str] = Field(default_factory=list)
    default_value: str = ""


class FieldRule(PatternRule):
    """Legacy rule consulted only when no data-type rules are configured.

    ``group_name`` may contain ``{prefix}``/``{suffix}`` resolved from the
    pattern's capture groups.
    """

    data_type: str = ""
    input_type: str = ""
    entity: str = ""
    group_name: str = ""
    validation: FieldValidation | None = None
    options: list[str] = Field(default_factory=list)


class EntityRule(PatternRule):
    """Maps a key pattern to the owner (``code``) of the placeholder value."""

    code: str
    color: str = ""
    icon: str = ""


RULE_MODELS: dict[RuleKind, type[PatternRule]] = {
    "data_type": DataTypeRule,
    "field": FieldRule,
    "entity": EntityRule,
}


@dataclass(frozen=True)
class RuleSet:
    """Read-only snapshot of the rules in effect for one classification call."""

    data_type_rules: tuple[DataTypeRule, ...] = field(default_factory=tuple)
    field_rules: tuple[FieldRule, ...] = field(default_factory=tuple)
    entity_rules: tuple[EntityRule, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> RuleSet:
        return cls()


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a rule pattern, raising ``InvalidRulePatternError`` when it is malformed."""

    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidRulePatternError(
            f"Invalid regex pattern {pattern!r}: {exc}", pattern=pattern
        ) from exc


def validate_rule(rule: PatternRule) -> None:
    """Check a rule before it is accepted into storage.

    Raises:
        InvalidRulePatternError: when the pattern does not compile.
        UnknownRuleCodeError: when a referenced code has no enumeration variant.
    """

    compile_pattern(rule.pattern)

    if isinstance(rule, DataTypeRule):
        resolve_data_type(rule.code)
        if rule.input_type:
            resolve_input_type(rule.input_type)
    elif isinstance(rule, FieldRule):
        if rule.data_type:
            resolve_data_type(rule.data_type)
        if rule.input_type:
            resolve_input_type(rule.input_type)
        if rule.entity:
            resolve_entity(rule.entity)
    elif isinstance(rule, EntityRule):
        resolve_entity(rule.code)
