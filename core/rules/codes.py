"""Explicit mapping tables from rule code strings to enumeration variants."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TypeVar

from core.fields.models import DataType, Entity, InputType
from core.utils.errors import UnknownRuleCodeError

_EnumT = TypeVar("_EnumT", bound=Enum)

DATA_TYPE_CODES: Mapping[str, DataType] = MappingProxyType(
    {
        "text": DataType.TEXT,
        "id_number": DataType.ID_NUMBER,
        "date": DataType.DATE,
        "time": DataType.TIME,
        "number": DataType.NUMBER,
        "address": DataType.ADDRESS,
        "province": DataType.PROVINCE,
        "district": DataType.DISTRICT,
        "subdistrict": DataType.SUBDISTRICT,
        "country": DataType.COUNTRY,
        "name_prefix": DataType.NAME_PREFIX,
        "name": DataType.NAME,
        "weekday": DataType.WEEKDAY,
        "phone": DataType.PHONE,
        "email": DataType.EMAIL,
        "house_code": DataType.HOUSE_CODE,
        "zodiac": DataType.ZODIAC,
        "lunar_month": DataType.LUNAR_MONTH,
        "officer_name": DataType.OFFICER_NAME,
        "sex": DataType.SEX,
    }
)

INPUT_TYPE_CODES: Mapping[str, InputType] = MappingProxyType(
    {
        "text": InputType.TEXT,
        "select": InputType.SELECT,
        "date": InputType.DATE,
        "time": InputType.TIME,
        "number": InputType.NUMBER,
        "textarea": InputType.TEXTAREA,
        "checkbox": InputType.CHECKBOX,
        "radio": InputType.RADIO,
        "merged": InputType.MERGED,
        "location": InputType.LOCATION,
        "digit": InputType.DIGIT,
    }
)

ENTITY_CODES: Mapping[str, Entity] = MappingProxyType(
    {
        "child": Entity.CHILD,
        "mother": Entity.MOTHER,
        "father": Entity.FATHER,
        "informant": Entity.INFORMANT,
        "registrar": Entity.REGISTRAR,
        "witness": Entity.WITNESS,
        "general": Entity.GENERAL,
    }
)


def resolve_data_type(code: str) -> DataType:
    return _resolve(DATA_TYPE_CODES, code, "data_type")


def resolve_input_type(code: str) -> InputType:
    return _resolve(INPUT_TYPE_CODES, code, "input_type")


def resolve_entity(code: str) -> Entity:
    return _resolve(ENTITY_CODES, code, "entity")


def _resolve(table: Mapping[str, _EnumT], code: str, kind: str) -> _EnumT:
    try:
        return table[code]
    except KeyError as exc:
        raise UnknownRuleCodeError(f"Unknown {kind} code: {code!r}", code=code, kind=kind) from exc


def _assert_tables_exhaustive() -> None:
    """Fail fast when an enumeration gains a variant without a code entry."""

    for enum_cls, table in (
        (DataType, DATA_TYPE_CODES),
        (InputType, INPUT_TYPE_CODES),
        (Entity, ENTITY_CODES),
    ):
        missing = set(enum_cls) - set(table.values())
        if missing:
            raise RuntimeError(
                f"Code table for {enum_cls.__name__} is missing variants: "
                f"{sorted(item.value for item in missing)}"
            )


_assert_tables_exhaustive()
