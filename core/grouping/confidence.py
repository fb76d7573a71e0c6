"""Heuristic confidence of a suggested template group."""

from __future__ import annotations

from collections.abc import Sequence

from core.grouping.categories import find_category_keyword

BASE_CONFIDENCE = 0.5
EXISTING_MATCH_CONFIDENCE = 0.95

# (minimum template count, bonus); thresholds do not compound past the last.
_COUNT_BONUSES = ((2, 0.15), (3, 0.10), (4, 0.05))
_NAME_LENGTH_BONUSES = ((5, 0.10), (10, 0.05))
_KEYWORD_BONUS = 0.15
_ALL_VARIANTS_BONUS = 0.10


def calculate_confidence(variants: Sequence[str], base_name: str) -> float:
    """Score a group from its templates' detected variants and its base name.

    Args:
        variants: Detected variant of every template in the group, ``""``
            where the decomposer found none.
        base_name: Chosen display name of the group.

    Returns:
        A score in ``[0.0, 1.0]``.
    """

    confidence = BASE_CONFIDENCE
    count = len(variants)

    for minimum, bonus in _COUNT_BONUSES:
        if count >= minimum:
            confidence += bonus

    for longer_than, bonus in _NAME_LENGTH_BONUSES:
        if len(base_name) > longer_than:
            confidence += bonus

    if find_category_keyword(base_name) is not None:
        confidence += _KEYWORD_BONUS

    if count > 1 and all(variants):
        confidence += _ALL_VARIANTS_BONUS

    return round(min(confidence, 1.0), 4)
