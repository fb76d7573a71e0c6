"""Data models for placeholder field definitions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DataType(str, Enum):
    """Semantic kind of value a placeholder holds."""

    TEXT = "text"
    ID_NUMBER = "id_number"
    DATE = "date"
    TIME = "time"
    NUMBER = "number"
    ADDRESS = "address"
    PROVINCE = "province"
    DISTRICT = "district"
    SUBDISTRICT = "subdistrict"
    COUNTRY = "country"
    NAME_PREFIX = "name_prefix"
    NAME = "name"
    WEEKDAY = "weekday"
    PHONE = "phone"
    EMAIL = "email"
    HOUSE_CODE = "house_code"
    ZODIAC = "zodiac"
    LUNAR_MONTH = "lunar_month"
    OFFICER_NAME = "officer_name"
    SEX = "sex"


class Entity(str, Enum):
    """Owner of a placeholder value."""

    CHILD = "child"
    MOTHER = "mother"
    FATHER = "father"
    INFORMANT = "informant"
    REGISTRAR = "registrar"
    WITNESS = "witness"
    GENERAL = "general"


class InputType(str, Enum):
    """Form widget used to collect a placeholder value."""

    TEXT = "text"
    SELECT = "select"
    DATE = "date"
    TIME = "time"
    NUMBER = "number"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    MERGED = "merged"
    LOCATION = "location"
    DIGIT = "digit"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FieldValidation(_CamelModel):
    """Constraints attached to a field."""

    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: int | None = None
    max: int | None = None
    options: list[str] | None = None
    required: bool = False


class RadioOption(_CamelModel):
    """One choice of a radio group backed by its own placeholder."""

    placeholder: str
    label: str
    value: str


class FieldDefinition(_CamelModel):
    """Classification result for one placeholder.

    Rules:
    - ``order`` is the dense document-position index of the placeholder.
    - ``group``/``group_order`` cluster related tokens (e.g. digit boxes).
    """

    placeholder: str
    data_type: DataType = DataType.TEXT
    entity: Entity = Entity.GENERAL
    input_type: InputType = InputType.TEXT
    validation: FieldValidation | None = None
    label: str | None = None
    description: str | None = None
    group: str | None = None
    group_order: int = 0
    order: int = 0
    default_value: str | None = None
    is_merged: bool = False
    merged_fields: list[str] = Field(default_factory=list)
    separator: str | None = None
    merge_pattern: str | None = None
    is_radio_group: bool = False
    radio_group_id: str | None = None
    radio_options: list[RadioOption] = Field(default_factory=list)
