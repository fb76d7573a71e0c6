from __future__ import annotations

import logging

import pytest

from core.grouping.auto_suggest import (
    auto_group_templates,
    calculate_match_score,
    suggest_for_template,
    suggest_groups,
)
from core.grouping.models import (
    ExistingDocumentType,
    SuggestedGroup,
    SuggestedTemplate,
    TemplateInfo,
)
from core.utils.errors import DuplicateCodeError


class _RecordingSink:
    def __init__(self, taken_codes: set[str] | None = None) -> None:
        self.taken_codes = taken_codes or set()
        self.created: list[ExistingDocumentType] = []

    def create_document_type(
        self, *, code: str, name: str, category: str, color: str
    ) -> ExistingDocumentType:
        if code in self.taken_codes:
            raise DuplicateCodeError(f"code exists: {code}", code=code)
        self.taken_codes.add(code)
        created = ExistingDocumentType(
            id=f"dt-{len(self.created)}", code=code, name=name, category=category, color=color
        )
        self.created.append(created)
        return created


def _template(template_id: str, name: str, document_type_id: str | None = None) -> TemplateInfo:
    return TemplateInfo(id=template_id, filename=name, document_type_id=document_type_id)


def test_front_and_back_become_one_group() -> None:
    groups = suggest_groups(
        [_template("t2", "ID Card Back.docx"), _template("t1", "ID Card Front.docx")]
    )

    assert len(groups) == 1
    group = groups[0]
    assert group.suggested_name == "ID Card"
    assert group.suggested_code == "id_card"
    assert group.suggested_category == "identification"
    assert group.confidence >= 0.65
    assert [(item.id, item.suggested_variant, item.variant_order) for item in group.templates] == [
        ("t1", "Front", 0),
        ("t2", "Back", 1),
    ]


def test_single_unmatched_template_is_not_suggested() -> None:
    assert suggest_groups([_template("t1", "สูติบัตร.docx")]) == []


def test_single_template_matching_existing_type_is_suggested() -> None:
    existing = [ExistingDocumentType(id="dt-1", code="birth", name="สูติบัตร")]

    groups = suggest_groups([_template("t1", "สูติบัตร.docx")], existing)

    assert len(groups) == 1
    assert groups[0].existing_type_id == "dt-1"
    assert groups[0].existing_type_name == "สูติบัตร"
    assert groups[0].confidence == 0.95
    assert groups[0].suggested_category == "certificate"
    assert groups[0].suggested_code.startswith("doc_")


def test_existing_type_matches_english_name() -> None:
    existing = [ExistingDocumentType(id="dt-9", code="idc", name="บัตร", name_en="ID Card")]

    groups = suggest_groups(
        [_template("a", "ID Card Front.docx"), _template("b", "ID Card Back.docx")], existing
    )

    assert groups[0].existing_type_id == "dt-9"


def test_assigned_templates_are_ignored() -> None:
    groups = suggest_groups(
        [
            _template("t1", "Form A front.docx"),
            _template("t2", "Form A back.docx", document_type_id="dt-1"),
        ]
    )

    assert groups == []


def test_templates_without_variants_get_default_labels() -> None:
    groups = suggest_groups(
        [
            TemplateInfo(id="x", display_name="ใบลา"),
            TemplateInfo(id="y", display_name="ใบลา.docx"),
        ]
    )

    assert [item.suggested_variant for item in groups[0].templates] == ["รูปแบบ 1", "รูปแบบ 2"]
    assert [item.variant_order for item in groups[0].templates] == [0, 1]


def test_groups_sorted_by_confidence_then_size() -> None:
    templates = [
        _template("a1", "Receipt 1.docx"),
        _template("a2", "Receipt 2.docx"),
        _template("b1", "บัตรประชาชน ด้านหน้า.docx"),
        _template("b2", "บัตรประชาชน ด้านหลัง.docx"),
        _template("b3", "บัตรประชาชน สำเนา.docx"),
    ]

    groups = suggest_groups(templates)

    assert [group.suggested_name for group in groups] == ["บัตรประชาชน", "Receipt"]
    assert [item.variant_order for item in groups[0].templates] == [0, 1, 2]


def test_merge_guard_is_configurable() -> None:
    templates = [_template("a", "Form B.docx"), _template("b", "Fo.docx")]

    assert suggest_groups(templates) == []
    merged = suggest_groups(templates, min_key_length=0)
    assert len(merged) == 1


@pytest.mark.parametrize(
    ("base", "name", "name_en", "expected"),
    [
        ("idcard", "ID Card", "", 1.0),
        ("idcard", "บัตร", "id card", 1.0),
        ("idcardfront", "ID Card", "", 0.8),
        ("idcardfront", "บัตร", "ID Card", 0.7),
        ("abc", "xyz", "", 0.0),
        ("", "ID Card", "", 0.0),
    ],
)
def test_calculate_match_score(base: str, name: str, name_en: str, expected: float) -> None:
    assert calculate_match_score(base, name, name_en) == expected


def test_calculate_match_score_common_prefix() -> None:
    assert calculate_match_score("passportthai", "passenger") == pytest.approx(4 / 9 * 0.6)


def test_suggest_for_template_links_best_existing_type() -> None:
    template = _template("t1", "ID Card Front.docx")
    others = [
        _template("t2", "ID Card Back.docx"),
        _template("t3", "Receipt.docx"),
        _template("t4", "ID Card Copy.docx", document_type_id="dt-x"),
    ]
    existing = [
        ExistingDocumentType(id="dt-1", code="idc", name="ID Card"),
        ExistingDocumentType(id="dt-2", code="old", name="ID Card", is_active=False),
    ]

    group = suggest_for_template(template, others, existing)

    assert group.existing_type_id == "dt-1"
    assert group.confidence == 1.0
    assert [item.id for item in group.templates] == ["t1", "t2"]
    assert [item.variant_order for item in group.templates] == [0, 1]


def test_suggest_for_template_without_good_match() -> None:
    existing = [ExistingDocumentType(id="dt-1", code="r", name="Receipt")]

    group = suggest_for_template(_template("t1", "Contract v1.docx"), [], existing)

    assert group.existing_type_id is None
    assert group.confidence == 0.0
    assert group.suggested_category == "contract"


def _group(name: str, code: str, templates: int, confidence: float, **extra: str) -> SuggestedGroup:
    return SuggestedGroup(
        suggested_name=name,
        suggested_code=code,
        suggested_category="other",
        confidence=confidence,
        templates=[
            SuggestedTemplate(
                id=f"{code}-{index}", suggested_variant=str(index), variant_order=index
            )
            for index in range(templates)
        ],
        **extra,
    )


def test_auto_group_creates_types_and_assignments() -> None:
    sink = _RecordingSink()

    result = auto_group_templates([_group("Form", "form", 2, 0.8)], sink)

    assert [item.code for item in result.created_types] == ["form"]
    assert result.created_types[0].color == "#6B7280"
    assert [(item.template_id, item.variant_order) for item in result.assignments] == [
        ("form-0", 0),
        ("form-1", 1),
    ]
    assert {item.document_type_id for item in result.assignments} == {"dt-0"}


def test_auto_group_reuses_existing_type() -> None:
    sink = _RecordingSink()

    result = auto_group_templates(
        [_group("Form", "form", 1, 0.95, existing_type_id="dt-7")], sink
    )

    assert result.created_types == []
    assert [item.document_type_id for item in result.assignments] == ["dt-7"]


def test_auto_group_skips_low_confidence_singletons() -> None:
    result = auto_group_templates([_group("Form", "form", 1, 0.5)], _RecordingSink())

    assert result.assignments == []


def test_duplicate_code_skips_group_and_continues(caplog: pytest.LogCaptureFixture) -> None:
    sink = _RecordingSink(taken_codes={"taken"})
    suggestions = [_group("Taken", "taken", 2, 0.9), _group("Fresh", "fresh", 2, 0.8)]

    with caplog.at_level(logging.WARNING, logger="docform.grouping"):
        result = auto_group_templates(suggestions, sink)

    assert result.skipped_codes == ["taken"]
    assert [item.code for item in result.created_types] == ["fresh"]
    assert {item.template_id for item in result.assignments} == {"fresh-0", "fresh-1"}
    assert "group_skipped_duplicate_code" in caplog.text
