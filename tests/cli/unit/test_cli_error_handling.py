"""CLI error-handling tests."""

from __future__ import annotations

from pathlib import Path

from schema_sync.cli import main


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["dereference", "--entity", "Widget"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--config" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["check-consistency", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option" in captured.err
    assert "--bogus" in captured.err
    assert "Traceback" not in captured.err


def test_invalid_strategy_returns_clean_click_error(capsys, tmp_path: Path) -> None:
    schema_path = tmp_path / "schema.json"
    schema_path.write_text("{}", encoding="utf-8")

    exit_code = main(["merge-schemas", str(schema_path), "--strategy", "newest"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Invalid value for '--strategy'" in captured.err


def test_missing_configuration_returns_error_exit_code(capsys, tmp_path: Path) -> None:
    exit_code = main(["assemble", "--config", str(tmp_path / "missing.yaml")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "Configuration file not found" in captured.err
    assert "Traceback" not in captured.err
