from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.fields.classifier import classify_placeholder
from core.fields.models import DataType
from core.rules.loader import load_default_rules
from core.rules.models import DataTypeRule, RuleSet
from core.rules.store import RuleStore
from core.utils.errors import (
    DuplicateCodeError,
    InvalidRulePatternError,
    RuleNotFoundError,
    UnknownRuleCodeError,
)


def test_store_starts_empty(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")

    assert store.snapshot() == RuleSet.empty()
    assert store.list_rules("field") == []


def test_create_rule_persists_and_assigns_id(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")

    rule = store.create_rule("data_type", {"name": "tel", "code": "phone", "pattern": "tel"})

    assert rule.id.startswith("dt_")
    assert store.get_rule("data_type", rule.id) == rule
    raw = json.loads((tmp_path / "rules.json").read_text(encoding="utf-8"))
    assert raw["version"] == 1
    assert rule.id in raw["data_type_rules"]


def test_invalid_pattern_is_rejected_and_not_stored(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    store = RuleStore(path)

    with pytest.raises(InvalidRulePatternError):
        store.create_rule(
            "field", {"id": "rule_bad", "name": "bad", "pattern": "([a-z", "data_type": "name"}
        )

    assert not path.exists()
    assert store.list_rules("field") == []


def test_unknown_code_is_rejected(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")

    with pytest.raises(UnknownRuleCodeError):
        store.create_rule("entity", {"name": "x", "code": "alien", "pattern": "^x_"})


def test_duplicate_code_and_id_are_rejected(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")
    store.create_rule("data_type", {"id": "dt_a", "name": "a", "code": "phone", "pattern": "a"})

    with pytest.raises(DuplicateCodeError):
        store.create_rule("data_type", {"name": "b", "code": "phone", "pattern": "b"})
    with pytest.raises(ValueError, match="already exists"):
        store.create_rule("data_type", {"id": "dt_a", "name": "c", "code": "email", "pattern": "c"})


def test_update_rule_revalidates(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")
    store.create_rule("field", {"id": "rule_x", "name": "x", "pattern": "x", "priority": 1})

    updated = store.update_rule("field", "rule_x", {"priority": 50})
    assert updated.priority == 50

    with pytest.raises(InvalidRulePatternError):
        store.update_rule("field", "rule_x", {"pattern": "(x"})
    assert store.get_rule("field", "rule_x").pattern == "x"

    with pytest.raises(RuleNotFoundError, match="Rule not found: missing"):
        store.update_rule("field", "missing", {"priority": 1})


def test_delete_rule(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")
    store.create_rule("entity", {"id": "entity_m", "name": "m", "code": "mother", "pattern": "^m_"})

    assert store.delete_rule("entity", "entity_m") is True
    assert store.delete_rule("entity", "entity_m") is False
    with pytest.raises(RuleNotFoundError):
        store.get_rule("entity", "entity_m")


def test_list_rules_by_priority_and_activity(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")
    store.create_rule("field", {"id": "rule_a", "name": "a", "pattern": "a", "priority": 1})
    store.create_rule(
        "field", {"id": "rule_b", "name": "b", "pattern": "b", "priority": 9, "is_active": False}
    )

    assert [rule.id for rule in store.list_rules("field")] == ["rule_b", "rule_a"]
    assert [rule.id for rule in store.list_rules("field", active_only=True)] == ["rule_a"]


def test_rule_edits_are_visible_to_next_classification(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")
    assert classify_placeholder("{{contact}}", store.snapshot()).data_type is DataType.TEXT

    store.create_rule("data_type", {"name": "c", "code": "phone", "pattern": "contact"})

    assert classify_placeholder("{{contact}}", store.snapshot()).data_type is DataType.PHONE


def test_out_of_band_invalid_rule_is_loaded_and_skipped(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text(
        json.dumps(
            {
                "version": 1,
                "data_type_rules": {
                    "dt_bad": {"id": "dt_bad", "name": "bad", "code": "phone", "pattern": "(x"},
                    "dt_ok": {"id": "dt_ok", "name": "ok", "code": "email", "pattern": "mail"},
                },
            }
        ),
        encoding="utf-8",
    )

    rules = RuleStore(path).snapshot()

    assert classify_placeholder("{{mail}}", rules).data_type is DataType.EMAIL


def test_invalid_store_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "rules.json"
    path.write_text("{", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid rule store JSON"):
        RuleStore(path).snapshot()


def test_initialize_defaults_keeps_customized_data_type_rules(tmp_path: Path) -> None:
    store = RuleStore(tmp_path / "rules.json")
    store.create_rule(
        "data_type",
        {"id": "custom_phone", "name": "my phone", "code": "phone", "pattern": "^tel$"},
    )

    created, updated = store.initialize_defaults(load_default_rules())

    phone = store.get_rule("data_type", "custom_phone")
    assert isinstance(phone, DataTypeRule)
    assert phone.pattern == "^tel$"
    assert phone.description
    assert created > 0
    assert updated == 1

    created_again, _ = store.initialize_defaults(load_default_rules())
    assert created_again == 0
