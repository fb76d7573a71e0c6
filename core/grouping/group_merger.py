"""Greedy merge of template groups whose normalized keys overlap."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

_T = TypeVar("_T")

DEFAULT_MIN_MERGE_KEY_LENGTH = 3


def merge_similar_groups(
    group_map: Mapping[str, list[_T]],
    *,
    min_key_length: int = DEFAULT_MIN_MERGE_KEY_LENGTH,
) -> dict[str, list[_T]]:
    """Merge groups whose keys contain one another.

    Keys are visited longest first (ties keep insertion order), so the most
    specific key becomes the bucket and absorbs every shorter unconsumed key
    it overlaps with. Keys shorter than ``min_key_length`` only keep their
    exact-key group; this stops a short generic key such as ``"form"`` from
    pulling in unrelated templates.
    """

    keys = sorted(group_map, key=len, reverse=True)
    merged: dict[str, list[_T]] = {}
    used: set[str] = set()

    for key in keys:
        if key in used:
            continue
        used.add(key)
        items = list(group_map[key])

        if len(key) >= min_key_length:
            for other in keys:
                if other in used or len(other) < min_key_length:
                    continue
                if other in key or key in other:
                    items.extend(group_map[other])
                    used.add(other)

        if items:
            merged[key] = items

    return merged
