"""Human-readable summaries for CLI output."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence

from core.fields.models import FieldDefinition
from core.grouping.models import SuggestedGroup


def render_field_summary(definitions: Mapping[str, FieldDefinition]) -> str:
    """Render one line per placeholder followed by data-type counts."""

    if not definitions:
        return "fields: none"

    lines: list[str] = [f"fields: {len(definitions)}"]
    for key, definition in definitions.items():
        parts = [
            f"{definition.order:>3}",
            key,
            f"type={definition.data_type.value}",
            f"input={definition.input_type.value}",
            f"entity={definition.entity.value}",
        ]
        if definition.group:
            parts.append(f"group={definition.group}#{definition.group_order}")
        lines.append(" ".join(parts))

    counter: Counter[str] = Counter(item.data_type.value for item in definitions.values())
    lines.append("types: " + ", ".join(f"{code}={counter[code]}" for code in sorted(counter)))
    return "\n".join(lines)


def render_group_summary(groups: Sequence[SuggestedGroup]) -> str:
    """Render suggested groups with their ordered variants."""

    if not groups:
        return "groups: none"

    lines: list[str] = [f"groups: {len(groups)}"]
    for group in groups:
        header = (
            f"- {group.suggested_name} code={group.suggested_code} "
            f"category={group.suggested_category} confidence={group.confidence:.2f}"
        )
        if group.existing_type_id:
            header += f" existing={group.existing_type_name or group.existing_type_id}"
        lines.append(header)
        for template in group.templates:
            name = template.display_name or template.filename
            lines.append(f"    {template.variant_order}: {name} [{template.suggested_variant}]")
    return "\n".join(lines)
