"""Local JSON store for administrator-managed pattern rules.

The store is re-read on every call, so a rule edit takes effect on the next
classification. New and updated rules are validated before they are written;
rules already on disk are loaded as-is and left to the classifier to skip.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.rules.loader import parse_rule
from core.rules.models import (
    RULE_MODELS,
    DataTypeRule,
    EntityRule,
    FieldRule,
    PatternRule,
    RuleKind,
    RuleSet,
)
from core.utils.errors import DuplicateCodeError, RuleNotFoundError
from core.utils.events import log_event

logger = logging.getLogger("docform.rules")

_STORE_VERSION = 1
_SECTIONS: dict[RuleKind, str] = {
    "data_type": "data_type_rules",
    "field": "field_rules",
    "entity": "entity_rules",
}
_ID_PREFIXES: dict[RuleKind, str] = {
    "data_type": "dt_",
    "field": "rule_",
    "entity": "entity_",
}
# Data-type defaults only fill attributes an administrator left empty.
_DATA_TYPE_FILLABLE = ("pattern", "validation", "description")


class RuleStore:
    """Persist data-type, field and entity rules in a JSON file."""

    def __init__(self, store_path: Path) -> None:
        self._store_path = store_path

    def snapshot(self) -> RuleSet:
        """Return a fresh rule-set snapshot for one classification call."""

        data = self._read_data()
        return RuleSet(
            data_type_rules=tuple(_sorted(data["data_type"])),
            field_rules=tuple(_sorted(data["field"])),
            entity_rules=tuple(_sorted(data["entity"])),
        )

    def list_rules(self, kind: RuleKind, *, active_only: bool = False) -> list[PatternRule]:
        rules = _sorted(self._read_data()[kind])
        if active_only:
            return [rule for rule in rules if rule.is_active]
        return rules

    def get_rule(self, kind: RuleKind, rule_id: str) -> PatternRule:
        rules = self._read_data()[kind]
        if rule_id not in rules:
            raise RuleNotFoundError(rule_id)
        return rules[rule_id]

    def create_rule(self, kind: RuleKind, payload: Mapping[str, Any]) -> PatternRule:
        """Validate and store a new rule.

        Raises:
            InvalidRulePatternError: the pattern does not compile; nothing is stored.
            UnknownRuleCodeError: a referenced code has no enumeration variant.
            DuplicateCodeError: a data-type or entity rule with the same code exists.
            ValueError: the payload shape is invalid or the id is taken.
        """

        candidate = dict(payload)
        candidate.setdefault("id", f"{_ID_PREFIXES[kind]}{uuid.uuid4().hex[:8]}")
        rule = parse_rule(kind, candidate, source="rule payload")

        data = self._read_data()
        rules = data[kind]
        if rule.id in rules:
            raise ValueError(f"Rule id already exists: {rule.id}")
        _ensure_unique_code(rule, rules.values())

        rules[rule.id] = rule
        self._write_data(data)
        log_event(logger, logging.INFO, "rule_created", kind=kind, rule_id=rule.id)
        return rule

    def update_rule(
        self, kind: RuleKind, rule_id: str, updates: Mapping[str, Any]
    ) -> PatternRule:
        """Apply partial updates to a rule, re-validating the merged result."""

        data = self._read_data()
        rules = data[kind]
        if rule_id not in rules:
            raise RuleNotFoundError(rule_id)

        merged = rules[rule_id].model_dump()
        merged.update(updates)
        merged["id"] = rule_id
        rule = parse_rule(kind, merged, source=f"update of {rule_id}")
        _ensure_unique_code(rule, (item for key, item in rules.items() if key != rule_id))

        rules[rule_id] = rule
        self._write_data(data)
        log_event(logger, logging.INFO, "rule_updated", kind=kind, rule_id=rule_id)
        return rule

    def delete_rule(self, kind: RuleKind, rule_id: str) -> bool:
        data = self._read_data()
        if rule_id not in data[kind]:
            return False
        del data[kind][rule_id]
        self._write_data(data)
        log_event(logger, logging.INFO, "rule_deleted", kind=kind, rule_id=rule_id)
        return True

    def initialize_defaults(self, defaults: RuleSet) -> tuple[int, int]:
        """Seed default rules, returning ``(created, updated)`` counts.

        Field and entity defaults overwrite stored rules with the same id.
        Data-type defaults are matched by code and never overwrite
        administrator customizations; they only fill empty attributes.
        """

        data = self._read_data()
        created = 0
        updated = 0

        for rule in (*defaults.field_rules, *defaults.entity_rules):
            kind: RuleKind = "field" if isinstance(rule, FieldRule) else "entity"
            if rule.id in data[kind]:
                updated += 1
            else:
                created += 1
            data[kind][rule.id] = rule

        by_code = {rule.code: rule for rule in data["data_type"].values()}
        for default in defaults.data_type_rules:
            existing = by_code.get(default.code)
            if existing is None:
                data["data_type"][default.id] = default
                created += 1
                continue
            fills = {
                name: getattr(default, name)
                for name in _DATA_TYPE_FILLABLE
                if not getattr(existing, name) and getattr(default, name)
            }
            if fills:
                data["data_type"][existing.id] = existing.model_copy(update=fills)
                updated += 1

        self._write_data(data)
        log_event(
            logger, logging.INFO, "default_rules_initialized", created=created, updated=updated
        )
        return created, updated

    def _read_data(self) -> dict[RuleKind, dict[str, Any]]:
        data: dict[RuleKind, dict[str, Any]] = {kind: {} for kind in _SECTIONS}
        if not self._store_path.exists():
            return data

        try:
            raw = json.loads(self._store_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid rule store JSON: {self._store_path}") from exc

        for kind, section in _SECTIONS.items():
            model = RULE_MODELS[kind]
            for rule_id, item in raw.get(section, {}).items():
                try:
                    data[kind][rule_id] = model.model_validate(item)
                except ValidationError as exc:
                    raise ValueError(
                        f"Invalid {kind} rule '{rule_id}' in rule store: {self._store_path}"
                    ) from exc
        return data

    def _write_data(self, data: Mapping[RuleKind, Mapping[str, PatternRule]]) -> None:
        self._store_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._store_path.with_suffix(f"{self._store_path.suffix}.tmp")

        payload: dict[str, Any] = {"version": _STORE_VERSION}
        for kind, section in _SECTIONS.items():
            rules = data[kind]
            payload[section] = {key: rules[key].model_dump(mode="json") for key in sorted(rules)}

        temp_path.write_text(
            json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False),
            encoding="utf-8",
        )
        temp_path.replace(self._store_path)


def _sorted(rules: Mapping[str, PatternRule]) -> list[Any]:
    return sorted(rules.values(), key=lambda rule: (-rule.priority, rule.id))


def _ensure_unique_code(rule: PatternRule, others: Any) -> None:
    if not isinstance(rule, (DataTypeRule, EntityRule)):
        return
    for other in others:
        if getattr(other, "code", None) == rule.code:
            raise DuplicateCodeError(f"Rule with code '{rule.code}' already exists", code=rule.code)
