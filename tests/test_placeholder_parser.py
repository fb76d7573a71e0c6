from __future__ import annotations

from pathlib import Path

import pytest
from docx import Document

from core.templates.placeholder_parser import parse_placeholders, parse_placeholders_from_path
from core.utils.errors import TemplateError


def test_parse_single_placeholder_in_single_run() -> None:
    document = Document()
    paragraph = document.add_paragraph()
    paragraph.add_run("AA{{id_number}}BB")

    result = parse_placeholders(document)

    assert result.placeholders == ["{{id_number}}"]
    assert result.keys == ["id_number"]
    assert len(result.occurrences) == 1
    assert result.occurrences[0].paragraph_path == "p0"
    assert result.occurrences[0].start == 2
    assert result.occurrences[0].end == 15
    assert not result.unsupported


def test_parse_cross_run_placeholder() -> None:
    document = Document()
    paragraph = document.add_paragraph()
    paragraph.add_run("ชื่อ {{m_first")
    paragraph.add_run("_name}} นามสกุล")

    result = parse_placeholders(document)

    assert result.placeholders == ["{{m_first_name}}"]
    assert not result.unsupported


def test_duplicates_keep_first_position_in_document_order() -> None:
    document = Document()
    document.add_paragraph("{{dob}} {{4d_1}}")
    table = document.add_table(rows=1, cols=2)
    table.cell(0, 0).paragraphs[0].text = "{{province}}"
    table.cell(0, 1).paragraphs[0].text = "{{dob}}"
    document.add_paragraph("{{remark}} {{4d_1}}")

    result = parse_placeholders(document)

    assert result.placeholders == ["{{dob}}", "{{4d_1}}", "{{province}}", "{{remark}}"]
    assert len(result.occurrences) == 6
    assert result.occurrences[2].paragraph_path == "t0.r0.c0.p0"
    assert result.occurrences[4].paragraph_path == "p1"


def test_nested_table_placeholders_are_found() -> None:
    document = Document()
    outer = document.add_table(rows=1, cols=1)
    inner = outer.cell(0, 0).add_table(rows=1, cols=1)
    inner.cell(0, 0).paragraphs[0].text = "{{zodiac}}"

    result = parse_placeholders(document)

    assert result.keys == ["zodiac"]


def test_empty_and_unclosed_placeholders_are_unsupported() -> None:
    document = Document()
    document.add_paragraph("{{}} and {{ok}} then {{broken")

    result = parse_placeholders(document)

    assert result.placeholders == ["{{ok}}"]
    assert [item.kind for item in result.unsupported] == [
        "empty_placeholder",
        "unclosed_placeholder",
    ]
    assert result.unsupported[1].text == "{{broken"


def test_unsupported_raises_in_strict_mode() -> None:
    document = Document()
    document.add_paragraph("{{open")

    with pytest.raises(TemplateError) as exc_info:
        parse_placeholders(document, strict=True)

    assert exc_info.value.result is not None
    assert exc_info.value.result.unsupported[0].kind == "unclosed_placeholder"


def test_parse_from_path(tmp_path: Path) -> None:
    path = tmp_path / "template.docx"
    document = Document()
    document.add_paragraph("{{sub_district}}")
    document.save(str(path))

    assert parse_placeholders_from_path(path).keys == ["sub_district"]
