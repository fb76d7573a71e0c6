"""Hard-coded placeholder classification used when no rules are configured.

The cascade is order sensitive: later checks are more specific and must not
be shadowed, and subdistrict is tested before district so that
``sub_district`` never classifies as a district.
"""

from __future__ import annotations

import re

from core.fields.models import DataType, Entity, FieldDefinition, FieldValidation, InputType
from core.fields.options import (
    LUNAR_MONTH_OPTIONS,
    NAME_PREFIX_OPTIONS,
    PROVINCE_OPTIONS,
    WEEKDAY_OPTIONS,
    ZODIAC_OPTIONS,
)

_ENTITY_PREFIXES: tuple[tuple[str, Entity], ...] = (
    ("m_", Entity.MOTHER),
    ("f_", Entity.FATHER),
    ("b_", Entity.INFORMANT),
    ("r_", Entity.REGISTRAR),
)
_CHILD_FIELDS = frozenset(
    {"first_name", "last_name", "name_prefix", "id_number", "dob", "place_of_birth"}
)

_PREFIX_GROUP_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9]*)_(.+)$")
_SKIPPED_GROUP_PREFIXES = frozenset({"m", "f", "b", "r", "4d", "n"})

_FOUR_DIGIT_RE = re.compile(r"^4d_(\d+)$")
_N_NUMBER_RE = re.compile(r"^n(\d+)$")
_DOLLAR_SUFFIX_RE = re.compile(r"^\$(\d+)_([A-Za-z]+)$")
_DOLLAR_RE = re.compile(r"^\$(\d+)$")

ID_NUMBER_PATTERN = r"^\d{13}$"
FOUR_DIGIT_PATTERN = r"^\d{4}$"


def strip_placeholder(placeholder: str) -> str:
    """Return the bare key of a ``{{key}}`` token."""

    return placeholder.replace("{{", "").replace("}}", "")


def detect_entity(key: str) -> Entity:
    """Detect the owner of a key from its prefix or a fixed set of child fields."""

    for prefix, entity in _ENTITY_PREFIXES:
        if key.startswith(prefix):
            return entity
    if key in _CHILD_FIELDS:
        return Entity.CHILD
    return Entity.GENERAL


def detect_prefix_group(key: str) -> tuple[str | None, str]:
    """Split ``prefix_rest`` keys into an ad-hoc ``prefix_<prefix>`` group.

    Known entity prefixes and prefixes with dedicated patterns are not grouped.
    Returns the group name (or None) and the remaining key.
    """

    match = _PREFIX_GROUP_RE.match(key)
    if match is None:
        return None, key

    prefix = match.group(1).lower()
    if prefix in _SKIPPED_GROUP_PREFIXES:
        return None, key
    return f"prefix_{prefix}", match.group(2)


def detect_field_type(placeholder: str) -> FieldDefinition:
    """Classify one placeholder with the built-in cascade."""

    key = strip_placeholder(placeholder)
    lower_key = key.lower()
    group, _ = detect_prefix_group(key)

    definition = FieldDefinition(
        placeholder=placeholder,
        entity=detect_entity(key),
        group=group,
    )

    if "_id" in lower_key or lower_key in {"id_number", "id"}:
        return _with(
            definition,
            DataType.ID_NUMBER,
            InputType.TEXT,
            validation=FieldValidation(pattern=ID_NUMBER_PATTERN, min_length=13, max_length=13),
            description="เลขบัตรประชาชน 13 หลัก",
        )

    if "name_prefix" in lower_key or "_prefix" in lower_key:
        return _with_options(definition, DataType.NAME_PREFIX, NAME_PREFIX_OPTIONS)

    if "_age" in lower_key or lower_key == "age":
        return _with(
            definition,
            DataType.NUMBER,
            InputType.NUMBER,
            validation=FieldValidation(min=0, max=150),
        )

    if lower_key == "dob" or "date" in lower_key:
        return _with(definition, DataType.DATE, InputType.DATE)

    if lower_key == "time" or "_time" in lower_key:
        return _with(definition, DataType.TIME, InputType.TIME)

    if "weekday" in lower_key:
        return _with_options(definition, DataType.WEEKDAY, WEEKDAY_OPTIONS)

    if "_prov" in lower_key or "province" in lower_key:
        return _with_options(definition, DataType.PROVINCE, PROVINCE_OPTIONS)

    if _contains_any(lower_key, ("subdistrict", "sub_district", "sub-district", "tambon")):
        return _with(definition, DataType.SUBDISTRICT, InputType.TEXT)

    if _contains_any(lower_key, ("district", "amphoe")):
        return _with(definition, DataType.DISTRICT, InputType.TEXT)

    if "country" in lower_key:
        return _with(definition, DataType.COUNTRY, InputType.TEXT)

    if "address" in lower_key:
        return _with(definition, DataType.ADDRESS, InputType.TEXTAREA)

    if _contains_any(lower_key, ("first_name", "last_name", "maiden_name", "_name")):
        return _with(definition, DataType.NAME, InputType.TEXT)

    if _contains_any(lower_key, ("house_code", "house_no")):
        return _with(definition, DataType.HOUSE_CODE, InputType.TEXT)

    if "zodiac" in lower_key:
        return _with_options(definition, DataType.ZODIAC, ZODIAC_OPTIONS)

    if "luna" in lower_key:
        return _with_options(definition, DataType.LUNAR_MONTH, LUNAR_MONTH_OPTIONS)

    if "office" in lower_key:
        return _with(definition, DataType.TEXT, InputType.TEXT)

    if "place_of_birth" in lower_key:
        return _with(definition, DataType.ADDRESS, InputType.TEXT)

    return _detect_numeric_group(definition, key, lower_key)


def _detect_numeric_group(
    definition: FieldDefinition, key: str, lower_key: str
) -> FieldDefinition:
    if match := _FOUR_DIGIT_RE.match(key):
        return _with(
            definition,
            DataType.NUMBER,
            InputType.TEXT,
            validation=FieldValidation(pattern=FOUR_DIGIT_PATTERN, max_length=4),
            description="รหัส 4 หลัก",
            group="4d_codes",
            group_order=int(match.group(1)),
        )

    if match := _N_NUMBER_RE.match(key):
        return _with(
            definition,
            DataType.NUMBER,
            InputType.TEXT,
            description="ตัวเลข",
            group="n_numbers",
            group_order=int(match.group(1)),
        )

    if match := _DOLLAR_SUFFIX_RE.match(key):
        suffix = match.group(2).upper()
        return _with(
            definition,
            DataType.NUMBER,
            InputType.TEXT,
            description=f"ตัวเลข ({suffix})",
            group=f"dollar_numbers_{suffix}",
            group_order=int(match.group(1)),
        )

    if match := _DOLLAR_RE.match(key):
        return _with(
            definition,
            DataType.NUMBER,
            InputType.TEXT,
            description="ตัวเลข",
            group="dollar_numbers",
            group_order=int(match.group(1)),
        )

    if lower_key == "child_no":
        return _with(
            definition,
            DataType.NUMBER,
            InputType.NUMBER,
            validation=FieldValidation(min=1, max=20),
        )

    return definition


def _with(
    definition: FieldDefinition,
    data_type: DataType,
    input_type: InputType,
    **updates: object,
) -> FieldDefinition:
    return definition.model_copy(
        update={"data_type": data_type, "input_type": input_type, **updates}
    )


def _with_options(
    definition: FieldDefinition, data_type: DataType, options: tuple[str, ...]
) -> FieldDefinition:
    return _with(
        definition,
        data_type,
        InputType.SELECT,
        validation=FieldValidation(options=list(options)),
    )


def _contains_any(value: str, needles: tuple[str, ...]) -> bool:
    return any(needle in value for needle in needles)
