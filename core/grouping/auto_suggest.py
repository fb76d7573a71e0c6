"""Cluster unassigned templates into suggested document types.

The pass is read-compute-optionally-write: ``suggest_groups`` is pure, and
``auto_group_templates`` hands creation of new document types to a sink
supplied by the caller. A code collision reported by the sink skips that
group and the batch continues.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from core.grouping.categories import category_color, generate_code, guess_category
from core.grouping.confidence import EXISTING_MATCH_CONFIDENCE, calculate_confidence
from core.grouping.group_merger import DEFAULT_MIN_MERGE_KEY_LENGTH, merge_similar_groups
from core.grouping.models import (
    AutoGroupResult,
    ExistingDocumentType,
    SuggestedGroup,
    SuggestedTemplate,
    TemplateAssignment,
    TemplateInfo,
)
from core.grouping.name_decomposer import extract_base_and_variant, normalize_for_matching
from core.grouping.variant_order import (
    assign_variant_orders,
    default_variant_label,
    get_variant_order,
)
from core.utils.errors import DuplicateCodeError
from core.utils.events import log_event

logger = logging.getLogger("docform.grouping")

LINK_SCORE_THRESHOLD = 0.5
AUTO_GROUP_MIN_CONFIDENCE = 0.7
_MIN_COMMON_PREFIX = 3
_PREFIX_SCORE_WEIGHT = 0.6


class DocumentTypeSink(Protocol):
    """Persistence hook that creates document types during bulk assignment."""

    def create_document_type(
        self, *, code: str, name: str, category: str, color: str
    ) -> ExistingDocumentType:
        """Create and return a document type; raise DuplicateCodeError on a code clash."""
        ...


@dataclass(frozen=True)
class _NamedTemplate:
    template: TemplateInfo
    base_name: str
    variant: str


def suggest_groups(
    templates: Iterable[TemplateInfo],
    existing_types: Sequence[ExistingDocumentType] = (),
    *,
    min_key_length: int = DEFAULT_MIN_MERGE_KEY_LENGTH,
) -> list[SuggestedGroup]:
    """Suggest document-type groups for every unassigned template.

    Returns:
        Groups with at least two templates or an existing-type match, sorted
        by confidence then template count, both descending.
    """

    group_map: dict[str, list[_NamedTemplate]] = {}
    for template in templates:
        if template.is_assigned:
            continue
        base_name, variant = extract_base_and_variant(template.name)
        group_map.setdefault(normalize_for_matching(base_name), []).append(
            _NamedTemplate(template=template, base_name=base_name, variant=variant)
        )

    merged = merge_similar_groups(group_map, min_key_length=min_key_length)
    existing_keys = _existing_type_keys(existing_types)

    suggestions: list[SuggestedGroup] = []
    for members in merged.values():
        base_name = _find_best_base_name(members)
        existing = _match_existing_type(normalize_for_matching(base_name), existing_keys)

        if len(members) < 2 and existing is None:
            continue

        suggested_templates = []
        for index, member in enumerate(members):
            variant = member.variant or default_variant_label(index)
            suggested_templates.append(
                SuggestedTemplate(
                    id=member.template.id,
                    display_name=member.template.display_name,
                    filename=member.template.filename,
                    suggested_variant=variant,
                    variant_order=get_variant_order(variant, index),
                )
            )

        confidence = calculate_confidence([member.variant for member in members], base_name)
        group = SuggestedGroup(
            suggested_name=base_name,
            suggested_code=generate_code(base_name),
            suggested_category=guess_category(base_name),
            confidence=confidence,
            templates=assign_variant_orders(suggested_templates),
        )
        if existing is not None:
            group.existing_type_id = existing.id
            group.existing_type_name = existing.name
            group.confidence = EXISTING_MATCH_CONFIDENCE
        suggestions.append(group)

    suggestions.sort(key=lambda item: (-item.confidence, -len(item.templates)))

    log_event(
        logger,
        logging.INFO,
        "groups_suggested",
        group_count=len(suggestions),
        template_count=sum(len(members) for members in merged.values()),
    )
    return suggestions


def suggest_for_template(
    template: TemplateInfo,
    others: Iterable[TemplateInfo] = (),
    existing_types: Sequence[ExistingDocumentType] = (),
) -> SuggestedGroup:
    """Suggest a document type for one template.

    Related unassigned templates are listed after the template itself. The
    best-scoring active document type is linked when its score exceeds 0.5;
    the group confidence is that best score.
    """

    base_name, variant = extract_base_and_variant(template.name)
    normalized_base = normalize_for_matching(base_name)

    best_match: ExistingDocumentType | None = None
    best_score = 0.0
    for document_type in existing_types:
        if not document_type.is_active:
            continue
        score = calculate_match_score(
            normalized_base, document_type.name, document_type.name_en
        )
        if score > best_score:
            best_score = score
            best_match = document_type

    related = [
        SuggestedTemplate(
            id=template.id,
            display_name=template.display_name,
            filename=template.filename,
            suggested_variant=variant,
            variant_order=0,
        )
    ]
    for other in others:
        if other.id == template.id or other.is_assigned:
            continue
        other_base, other_variant = extract_base_and_variant(other.name)
        other_key = normalize_for_matching(other_base)
        if not other_key or not normalized_base:
            continue
        if other_key in normalized_base or normalized_base in other_key:
            related.append(
                SuggestedTemplate(
                    id=other.id,
                    display_name=other.display_name,
                    filename=other.filename,
                    suggested_variant=other_variant,
                    variant_order=len(related),
                )
            )

    group = SuggestedGroup(
        suggested_name=base_name,
        suggested_code=generate_code(base_name),
        suggested_category=guess_category(base_name),
        confidence=best_score,
        templates=related,
    )
    if best_match is not None and best_score > LINK_SCORE_THRESHOLD:
        group.existing_type_id = best_match.id
        group.existing_type_name = best_match.name
    return group


def calculate_match_score(normalized_base: str, type_name: str, type_name_en: str = "") -> float:
    """Score how well a normalized base name matches a document type.

    Exact match 1.0; containment of the Thai name 0.8, of the English name
    0.7; otherwise a common prefix longer than three characters scores
    ``prefix / shorter_length * 0.6``.
    """

    name_key = normalize_for_matching(type_name)
    name_en_key = normalize_for_matching(type_name_en)
    if not normalized_base or not name_key:
        return 0.0

    if normalized_base in (name_key, name_en_key):
        return 1.0
    if name_key in normalized_base or normalized_base in name_key:
        return 0.8
    if name_en_key and (name_en_key in normalized_base or normalized_base in name_en_key):
        return 0.7

    shorter = min(len(normalized_base), len(name_key))
    common = 0
    for left, right in zip(normalized_base, name_key):
        if left != right:
            break
        common += 1

    if common > _MIN_COMMON_PREFIX:
        return common / shorter * _PREFIX_SCORE_WEIGHT
    return 0.0


def auto_group_templates(
    suggestions: Iterable[SuggestedGroup], sink: DocumentTypeSink
) -> AutoGroupResult:
    """Turn suggestions into document types and template assignments.

    Groups with fewer than two templates and confidence below 0.7 are
    skipped. A group linked to an existing type reuses it; otherwise the sink
    creates a new type, and a DuplicateCodeError skips only that group.
    """

    result = AutoGroupResult()
    for suggestion in suggestions:
        if len(suggestion.templates) < 2 and suggestion.confidence < AUTO_GROUP_MIN_CONFIDENCE:
            continue

        if suggestion.existing_type_id:
            document_type_id = suggestion.existing_type_id
        else:
            try:
                created = sink.create_document_type(
                    code=suggestion.suggested_code,
                    name=suggestion.suggested_name,
                    category=suggestion.suggested_category,
                    color=category_color(suggestion.suggested_category),
                )
            except DuplicateCodeError as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "group_skipped_duplicate_code",
                    code=exc.code,
                    name=suggestion.suggested_name,
                )
                result.skipped_codes.append(exc.code)
                continue
            document_type_id = created.id
            result.created_types.append(created)

        for template in suggestion.templates:
            result.assignments.append(
                TemplateAssignment(
                    template_id=template.id,
                    document_type_id=document_type_id,
                    variant_name=template.suggested_variant,
                    variant_order=template.variant_order,
                )
            )

    log_event(
        logger,
        logging.INFO,
        "templates_auto_grouped",
        created=len(result.created_types),
        assigned=len(result.assignments),
        skipped=len(result.skipped_codes),
    )
    return result


def _find_best_base_name(members: Sequence[_NamedTemplate]) -> str:
    """Pick the most common base name, preferring longer names; first wins ties."""

    counts: dict[str, int] = {}
    for member in members:
        counts[member.base_name] = counts.get(member.base_name, 0) + 1

    best_name = ""
    best_score = 0
    for name, count in counts.items():
        score = count * 10 + len(name)
        if score > best_score:
            best_score = score
            best_name = name
    return best_name


def _existing_type_keys(
    existing_types: Sequence[ExistingDocumentType],
) -> list[tuple[str, ExistingDocumentType]]:
    keys: list[tuple[str, ExistingDocumentType]] = []
    for document_type in existing_types:
        for label in (document_type.name, document_type.name_en):
            key = normalize_for_matching(label)
            if key:
                keys.append((key, document_type))
    return keys


def _match_existing_type(
    normalized_base: str, keys: Sequence[tuple[str, ExistingDocumentType]]
) -> ExistingDocumentType | None:
    if not normalized_base:
        return None
    for key, document_type in keys:
        if key in normalized_base or normalized_base in key:
            return document_type
    return None
