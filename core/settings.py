"""Environment-driven settings; invalid values fall back to defaults."""

from __future__ import annotations

import os
from pathlib import Path

from core.grouping.group_merger import DEFAULT_MIN_MERGE_KEY_LENGTH

DEFAULT_RULE_STORE = Path(".docform") / "rules.json"


def rule_store_path() -> Path:
    raw = os.getenv("DOCFORM_RULE_STORE")
    if raw is None or not raw.strip():
        return DEFAULT_RULE_STORE
    return Path(raw.strip())


def min_merge_key_length() -> int:
    raw = os.getenv("DOCFORM_MIN_MERGE_KEY_LENGTH")
    if raw is None:
        return DEFAULT_MIN_MERGE_KEY_LENGTH
    try:
        parsed = int(raw)
    except ValueError:
        return DEFAULT_MIN_MERGE_KEY_LENGTH
    return parsed if parsed >= 0 else DEFAULT_MIN_MERGE_KEY_LENGTH


def apply_entity_rules() -> bool:
    raw = os.getenv("DOCFORM_APPLY_ENTITY_RULES", "0").strip().lower()
    return raw in {"1", "true", "on", "yes"}
