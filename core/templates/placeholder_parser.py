"""Placeholder extraction over body paragraphs and table cells.

Header and footer content is ignored. Paragraph text is read through
python-docx, so tokens split across runs are still found.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path

from docx import Document
from docx.document import Document as DocxDocument
from docx.table import Table
from docx.text.paragraph import Paragraph

from core.templates.models import Occurrence, ParseResult, UnsupportedOccurrence
from core.utils.errors import TemplateError

_PLACEHOLDER_RE = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_OPEN = "{{"


def parse_placeholders(document: DocxDocument, strict: bool = False) -> ParseResult:
    """Collect ``{{key}}`` tokens in document order.

    Rules:
    - A token is the shortest text between ``{{`` and the next ``}}``.
    - Empty tokens (``{{}}`` or whitespace only) are unsupported.
    - ``{{`` without a closing ``}}`` in the same paragraph is unsupported.
    - Each distinct token is listed once, at its first position.

    Args:
        document: python-docx document object.
        strict: When True, raise TemplateError if any unsupported item exists.
    """

    result = ParseResult()
    seen: set[str] = set()

    for path, paragraph in _iter_target_paragraphs(document):
        text = paragraph.text
        if _OPEN not in text:
            continue

        consumed_until = 0
        for match in _PLACEHOLDER_RE.finditer(text):
            consumed_until = match.end()
            token = match.group(0)
            if not match.group(1).strip():
                result.unsupported.append(
                    UnsupportedOccurrence(
                        kind="empty_placeholder",
                        text=token,
                        paragraph_path=path,
                        start=match.start(),
                    )
                )
                continue

            result.occurrences.append(
                Occurrence(
                    placeholder=token,
                    paragraph_path=path,
                    start=match.start(),
                    end=match.end(),
                )
            )
            if token not in seen:
                seen.add(token)
                result.placeholders.append(token)

        dangling = text.find(_OPEN, consumed_until)
        if dangling != -1:
            result.unsupported.append(
                UnsupportedOccurrence(
                    kind="unclosed_placeholder",
                    text=text[dangling:],
                    paragraph_path=path,
                    start=dangling,
                )
            )

    if strict and result.unsupported:
        raise TemplateError("Unsupported placeholders found in template", result=result)

    return result


def parse_placeholders_from_path(path: Path, strict: bool = False) -> ParseResult:
    """Load a .docx file and collect its placeholders."""

    return parse_placeholders(Document(str(path)), strict=strict)


def _iter_target_paragraphs(document: DocxDocument) -> Iterator[tuple[str, Paragraph]]:
    paragraph_index = 0
    table_index = 0
    for block in document.iter_inner_content():
        if isinstance(block, Paragraph):
            yield f"p{paragraph_index}", block
            paragraph_index += 1
        else:
            yield from _iter_table_paragraphs(block, f"t{table_index}")
            table_index += 1


def _iter_table_paragraphs(table: Table, prefix: str) -> Iterator[tuple[str, Paragraph]]:
    for row_index, row in enumerate(table.rows):
        for cell_index, cell in enumerate(row.cells):
            cell_prefix = f"{prefix}.r{row_index}.c{cell_index}"
            for paragraph_index, paragraph in enumerate(cell.paragraphs):
                yield f"{cell_prefix}.p{paragraph_index}", paragraph
            for nested_index, nested in enumerate(cell.tables):
                yield from _iter_table_paragraphs(nested, f"{cell_prefix}.t{nested_index}")
