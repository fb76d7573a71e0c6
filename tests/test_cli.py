from __future__ import annotations

import json
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from docx import Document
from typer.testing import CliRunner

from apps.cli.main import app
from core.rules.loader import load_default_rules
from core.rules.store import RuleStore

runner = CliRunner()


def _write_docx(path: Path, *, with_unclosed: bool = False) -> None:
    document = Document()
    paragraph = document.add_paragraph()
    paragraph.add_run("{{id_num")
    paragraph.add_run("ber}} {{sub_district}}")
    table = document.add_table(rows=1, cols=1)
    table.cell(0, 0).paragraphs[0].text = "{{4d_1}}"
    if with_unclosed:
        document.add_paragraph("{{broken")
    document.save(str(path))


def test_classify_writes_snapshot(tmp_path: Path) -> None:
    template = tmp_path / "template.docx"
    out = tmp_path / "out" / "fields.json"
    _write_docx(template)

    result = runner.invoke(
        app,
        [
            "classify",
            "--template",
            str(template),
            "--rules",
            str(tmp_path / "rules.json"),
            "--out",
            str(out),
        ],
    )

    assert result.exit_code == 0
    assert "type=subdistrict" in result.output
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert list(payload) == ["id_number", "sub_district", "4d_1"]
    assert payload["id_number"]["validation"]["pattern"] == r"^\d{13}$"
    assert payload["4d_1"]["group"] == "4d_codes"
    assert [item["order"] for item in payload.values()] == [0, 1, 2]


def test_classify_strict_fails_on_unclosed_placeholder(tmp_path: Path) -> None:
    template = tmp_path / "template.docx"
    _write_docx(template, with_unclosed=True)

    result = runner.invoke(
        app,
        [
            "classify",
            "--template",
            str(template),
            "--rules",
            str(tmp_path / "rules.json"),
            "--strict",
        ],
    )

    assert result.exit_code == 3
    assert "unclosed_placeholder" in result.output


def test_classify_json_report_uses_rule_store(tmp_path: Path) -> None:
    template = tmp_path / "template.docx"
    store_path = tmp_path / "rules.json"
    _write_docx(template)
    RuleStore(store_path).create_rule(
        "data_type", {"name": "codes", "code": "phone", "pattern": "^4d_"}
    )

    result = runner.invoke(
        app,
        ["classify", "--template", str(template), "--rules", str(store_path), "--report", "json"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["4d_1"]["dataType"] == "phone"
    assert payload["id_number"]["dataType"] == "text"


def test_classify_keys(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["classify-keys", "zodiac", "{{n3}}", "--rules", str(tmp_path / "rules.json")]
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["zodiac"]["inputType"] == "select"
    assert payload["n3"]["group"] == "n_numbers"


def test_suggest_json(tmp_path: Path) -> None:
    existing = tmp_path / "types.json"
    existing.write_text(
        json.dumps([{"id": "dt-1", "code": "birth", "name": "สูติบัตร"}]), encoding="utf-8"
    )

    result = runner.invoke(
        app,
        [
            "suggest",
            "ID Card Front.docx",
            "ID Card Back.docx",
            "สูติบัตร.docx",
            "--existing",
            str(existing),
            "--report",
            "json",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert [group["suggested_name"] for group in payload] == ["ID Card", "สูติบัตร"]
    assert payload[1]["existing_type_id"] == "dt-1"


def test_suggest_human_summary() -> None:
    result = runner.invoke(app, ["suggest", "Form A front", "Form A back"])

    assert result.exit_code == 0
    assert "groups: 1" in result.output
    assert "0: Form A front [front]" in result.output


def test_rules_init_list_and_export(tmp_path: Path) -> None:
    store = tmp_path / "rules.json"
    exported = tmp_path / "export.yaml"

    init = runner.invoke(app, ["rules", "init", "--store", str(store)])
    listed = runner.invoke(app, ["rules", "list", "--kind", "entity", "--store", str(store)])
    export = runner.invoke(app, ["rules", "export", "--store", str(store), "--out", str(exported)])

    assert init.exit_code == 0
    assert "created=" in init.output
    assert listed.exit_code == 0
    assert "entity_mother" in listed.output
    assert export.exit_code == 0
    data = yaml.safe_load(exported.read_text(encoding="utf-8"))
    assert len(data["entity_rules"]) == len(load_default_rules().entity_rules)
    reloaded = load_default_rules(exported)
    assert {rule.code for rule in reloaded.data_type_rules} >= {"id_number", "subdistrict"}


def test_rules_add_rejects_invalid_pattern(tmp_path: Path) -> None:
    store = tmp_path / "rules.json"

    result = runner.invoke(
        app,
        [
            "rules",
            "add",
            "--kind",
            "field",
            "--name",
            "broken",
            "--pattern",
            "([a-z",
            "--store",
            str(store),
        ],
    )

    assert result.exit_code == 2
    assert "invalid pattern" in result.output
    assert not store.exists()


def test_rules_add_and_delete(tmp_path: Path) -> None:
    store = tmp_path / "rules.json"

    added = runner.invoke(
        app,
        [
            "rules",
            "add",
            "--kind",
            "entity",
            "--id",
            "entity_w",
            "--name",
            "witness",
            "--pattern",
            "^w_",
            "--code",
            "witness",
            "--store",
            str(store),
        ],
    )
    deleted = runner.invoke(
        app, ["rules", "delete", "--kind", "entity", "--id", "entity_w", "--store", str(store)]
    )
    missing = runner.invoke(
        app, ["rules", "delete", "--kind", "entity", "--id", "entity_w", "--store", str(store)]
    )

    assert added.exit_code == 0
    assert "created entity rule entity_w" in added.output
    assert deleted.exit_code == 0
    assert missing.exit_code == 1
    assert "Rule not found: entity_w" in missing.output


def test_rules_add_unknown_code_exits_2(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        [
            "rules",
            "add",
            "--kind",
            "data_type",
            "--name",
            "blood",
            "--pattern",
            "blood",
            "--code",
            "blood_type",
            "--store",
            str(tmp_path / "rules.json"),
        ],
    )

    assert result.exit_code == 2
    assert "unknown data_type code: blood_type" in result.output


def test_invalid_kind_exits_1(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["rules", "list", "--kind", "planet", "--store", str(tmp_path / "rules.json")]
    )

    assert result.exit_code == 1
    assert "--kind must be one of" in result.output
