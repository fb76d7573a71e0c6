"""JSON snapshot of field definitions persisted per template."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from core.fields.models import FieldDefinition


def field_definitions_to_payload(
    definitions: Mapping[str, FieldDefinition],
) -> dict[str, dict[str, Any]]:
    """Dump definitions with camelCase keys, omitting unset optional attributes.

    ``order`` is always present, including for the first placeholder.
    """

    payload: dict[str, dict[str, Any]] = {}
    for key, definition in definitions.items():
        item = definition.model_dump(mode="json", by_alias=True, exclude_defaults=True)
        item["placeholder"] = definition.placeholder
        item["dataType"] = definition.data_type.value
        item["entity"] = definition.entity.value
        item["inputType"] = definition.input_type.value
        item["order"] = definition.order
        payload[key] = item
    return payload


def field_definitions_to_json(definitions: Mapping[str, FieldDefinition]) -> str:
    """Serialize definitions to the stored JSON text (document order preserved)."""

    return json.dumps(
        field_definitions_to_payload(definitions),
        ensure_ascii=False,
        separators=(",", ":"),
    )


def field_definitions_from_json(raw: str) -> dict[str, FieldDefinition]:
    """Parse a stored snapshot; an empty string yields an empty mapping."""

    if not raw.strip():
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid field definitions JSON") from exc

    if not isinstance(data, dict):
        raise ValueError("Field definitions JSON must be an object")

    try:
        return {key: FieldDefinition.model_validate(item) for key, item in data.items()}
    except ValidationError as exc:
        raise ValueError(f"Invalid field definition schema: {exc}") from exc
