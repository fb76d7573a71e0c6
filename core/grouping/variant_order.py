"""Display ordering of template variants inside one document type."""

from __future__ import annotations

from collections.abc import Sequence

from core.grouping.models import SuggestedTemplate

# First containment hit wins, so longer labels precede the labels they contain.
VARIANT_ORDER: tuple[tuple[str, int], ...] = (
    ("ด้านหน้า", 0),
    ("ด้านหลัง", 1),
    ("ฉบับจริง", 0),
    ("ต้นฉบับ", 0),
    ("สำเนา", 2),
    ("หน้า", 0),
    ("หลัง", 1),
    ("front", 0),
    ("back", 1),
    ("original", 0),
    ("copy", 2),
    ("แบบ ก", 0),
    ("แบบก", 0),
    ("แบบ ข", 1),
    ("แบบข", 1),
    ("แบบ ค", 2),
    ("แบบค", 2),
    ("แบบ 1", 0),
    ("แบบ1", 0),
    ("แบบ 2", 1),
    ("แบบ2", 1),
    ("แบบ 3", 2),
    ("แบบ3", 2),
    ("1", 0),
    ("2", 1),
    ("3", 2),
    ("4", 3),
    ("5", 4),
)

UNKNOWN_VARIANT_OFFSET = 10
DEFAULT_VARIANT_LABELS = ("รูปแบบ 1", "รูปแบบ 2", "รูปแบบ 3", "รูปแบบ 4", "รูปแบบ 5")


def get_variant_order(variant: str, default_order: int) -> int:
    """Return the ordering key of ``variant``; unknown labels sort last."""

    normalized = variant.strip().lower()
    for label, order in VARIANT_ORDER:
        if label in normalized:
            return order
    return default_order + UNKNOWN_VARIANT_OFFSET


def default_variant_label(index: int) -> str:
    if index < len(DEFAULT_VARIANT_LABELS):
        return DEFAULT_VARIANT_LABELS[index]
    return ""


def assign_variant_orders(templates: Sequence[SuggestedTemplate]) -> list[SuggestedTemplate]:
    """Sort templates by variant and renumber ``variant_order`` densely from 0.

    The incoming ``variant_order`` is the ordering key; the sort is stable so
    templates with equal keys keep their input order.
    """

    ordered = sorted(templates, key=lambda item: item.variant_order)
    return [
        template.model_copy(update={"variant_order": position})
        for position, template in enumerate(ordered)
    ]
