"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner
from schema_sync.cli import cli, main


def _samples_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "samples"


@pytest.fixture
def catalog_path(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.syspath_prepend(str(_samples_dir()))
    return str(_samples_dir() / "catalog.yaml")


def _write_drifted_catalog(tmp_path: Path) -> Path:
    owner_schema = {
        "type": "object",
        "properties": {"name": {"type": "string"}, "nickname": {"type": "string"}},
        "additionalProperties": False,
    }
    config = {
        "entities": [
            {
                "name": "Owner",
                "schema": json.dumps(owner_schema),
                "example": '{"name": 3}',
                "runtime_type": "sample_models:Owner",
            }
        ]
    }
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return path


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "schema-sync.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0
    assert output_path.exists()
    assert str(output_path.resolve()) in result.output


def test_generate_config_command_refuses_to_overwrite(tmp_path: Path, capsys) -> None:
    output_path = tmp_path / "schema-sync.yaml"
    output_path.write_text("existing", encoding="utf-8")

    exit_code = main(["generate-config", "--output", str(output_path)])

    assert exit_code == 1
    assert "already exists" in capsys.readouterr().err
    assert output_path.read_text(encoding="utf-8") == "existing"


def test_dereference_command_prints_self_contained_schema(catalog_path: str) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["dereference", "--config", catalog_path, "--entity", "Widget", "--transitive"]
    )

    assert result.exit_code == 0
    document = json.loads(result.output)
    assert sorted(document["definitions"]) == ["Owner"]
    assert document["properties"]["owner"] == {"$ref": "#/definitions/Owner"}


def test_check_commands_pass_for_sample_catalog(catalog_path: str) -> None:
    runner = CliRunner()

    consistency = runner.invoke(cli, ["check-consistency", "--config", catalog_path])
    examples = runner.invoke(cli, ["check-examples", "--config", catalog_path])

    assert consistency.exit_code == 0
    assert "ok    Owner" in consistency.output
    assert "ok    Widget" in consistency.output
    assert examples.exit_code == 0


def test_check_consistency_reports_drift(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    monkeypatch.syspath_prepend(str(_samples_dir()))
    config_path = _write_drifted_catalog(tmp_path)

    exit_code = main(["check-consistency", "--config", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    expected = "FAIL  Owner: [MissingPropertyInSchemaError] Owner: schema is missing property email"
    assert expected in captured.out
    assert "1 entities failed the consistency check." in captured.err


def test_check_examples_reports_invalid_example(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys
) -> None:
    monkeypatch.syspath_prepend(str(_samples_dir()))
    config_path = _write_drifted_catalog(tmp_path)

    exit_code = main(["check-examples", "--config", str(config_path)])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Param 'name' should be of type string" in captured.out


def test_assemble_command_writes_components_document(catalog_path: str, tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "components.json"

    result = runner.invoke(
        cli, ["assemble", "--config", catalog_path, "--output", str(output_path)]
    )

    assert result.exit_code == 0
    document = json.loads(output_path.read_text(encoding="utf-8"))
    assert sorted(document["components"]["schemas"]) == ["Owner", "Widget"]


def test_merge_schemas_command_combines_properties(tmp_path: Path) -> None:
    first = tmp_path / "first.json"
    second = tmp_path / "second.json"
    first.write_text('{"properties": {"a": {"type": "string"}}}', encoding="utf-8")
    second.write_text(
        '{"properties": {"b": {"type": "integer"}}, "required": ["b"]}', encoding="utf-8"
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["merge-schemas", str(first), str(second)])

    assert result.exit_code == 0
    merged = json.loads(result.output)
    assert sorted(merged["properties"]) == ["a", "b"]
    assert merged["required"] == ["b"]


def test_merge_schemas_command_rejects_duplicates_on_request(tmp_path: Path, capsys) -> None:
    schema = tmp_path / "schema.json"
    schema.write_text('{"properties": {"a": {"type": "string"}}}', encoding="utf-8")

    exit_code = main(["merge-schemas", str(schema), str(schema), "--strategy", "error"])

    assert exit_code == 1
    assert "duplicate property found: a" in capsys.readouterr().err
