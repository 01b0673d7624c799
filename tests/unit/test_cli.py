"""CLI tests for the check, score and config commands."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from typer.testing import CliRunner

from ianitorlint.main import app
from tests.mocks import estree as es


def _dump(path: Path, *body: dict) -> Path:
    path.write_text(json.dumps(es.program(*body)), encoding="utf-8")
    return path


def _validator() -> dict:
    return es.const(
        "isUser",
        es.validator_call("strictInterface", es.object_expression("id", "name", "email")),
        line=3,
    )


def _shape_alias() -> dict:
    return es.type_alias(
        "Shape", es.union(*(es.reference(f"Shape{i}") for i in range(6))), line=7
    )


class TestCheckCommand:
    def test_json_output_and_failure_exit(self, runner: CliRunner, tmp_path: Path) -> None:
        dump = _dump(tmp_path / "user.json", _validator())
        result = runner.invoke(app, ["check", str(dump), "--format", "json"])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload == [
            {
                "type": "missingIanitorCheckType",
                "file": str(dump),
                "line": 3,
                "column": 6,
                "message": (
                    "Complex type (score: 19.0) requires Ianitor.Check<T> "
                    "annotation for type safety"
                ),
                "severity": "warning",
                "score": 19.0,
                "name": None,
            }
        ]

    def test_clean_file_exits_zero(
        self, runner: CliRunner, tmp_path: Path, capture_console: Console
    ) -> None:
        dump = _dump(tmp_path / "ok.json", _shape_alias())
        result = runner.invoke(app, ["check", str(dump)])
        assert result.exit_code == 0
        assert "No issues found in 1 file(s)." in capture_console.export_text()

    def test_entry_depth_option_reports_aliases(self, runner: CliRunner, tmp_path: Path) -> None:
        dump = _dump(tmp_path / "shape.json", _shape_alias())
        result = runner.invoke(
            app, ["check", str(dump), "--entry-depth", "1", "--format", "text"]
        )
        assert result.exit_code == 1
        assert f"{dump}:7:0: error" in result.stdout
        assert "[missingIanitorCheckType]" in result.stdout

    def test_base_threshold_option(self, runner: CliRunner, tmp_path: Path) -> None:
        dump = _dump(tmp_path / "user.json", _validator())
        result = runner.invoke(app, ["check", str(dump), "--base-threshold", "20"])
        assert result.exit_code == 0

    def test_table_summary(
        self, runner: CliRunner, tmp_path: Path, capture_console: Console
    ) -> None:
        _dump(tmp_path / "user.json", _validator())
        result = runner.invoke(app, ["check", str(tmp_path)])
        assert result.exit_code == 1
        text = capture_console.export_text()
        assert "1 problem(s) in 1 file(s)" in text
        assert "19.0" in text

    def test_undecodable_dump_is_reported_not_raised(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        _dump(tmp_path / "user.json", _validator())
        (tmp_path / "bad.json").write_bytes(b'{"x": "\xff"}')
        result = runner.invoke(app, ["check", str(tmp_path), "--format", "text"])
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert result.exit_code == 1
        assert "[parseError]" in result.stdout
        assert "[missingIanitorCheckType]" in result.stdout

    def test_missing_path_exits_two(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["check", str(tmp_path / "nope.json")])
        assert result.exit_code == 2


class TestScoreCommand:
    def test_lists_declarations(
        self, runner: CliRunner, tmp_path: Path, capture_console: Console
    ) -> None:
        dump = _dump(tmp_path / "mixed.json", _validator(), _shape_alias())
        result = runner.invoke(app, ["score", str(dump)])
        assert result.exit_code == 0
        text = capture_console.export_text()
        assert "isUser" in text
        assert "Shape" in text
        assert "validator" in text

    def test_unloadable_dump_fails(self, runner: CliRunner, tmp_path: Path) -> None:
        broken = tmp_path / "broken.json"
        broken.write_text("{", encoding="utf-8")
        result = runner.invoke(app, ["score", str(broken)])
        assert result.exit_code == 1


class TestConfigCommand:
    def test_shows_policy_and_source(
        self, runner: CliRunner, isolate_config: Path, capture_console: Console
    ) -> None:
        isolate_config.write_text("[policy]\nbaseThreshold = 12\n", encoding="utf-8")
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        text = capture_console.export_text()
        assert "policy.base_threshold" in text
        assert "12" in text
        assert f"Read {isolate_config}." in text

    def test_broken_config_enters_safe_mode(
        self, runner: CliRunner, isolate_config: Path, capture_console: Console
    ) -> None:
        isolate_config.write_text("[policy\n", encoding="utf-8")
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        text = capture_console.export_text()
        assert "Safe Mode Active" in text
        assert "defaults are in effect" in text

    def test_config_option(
        self, runner: CliRunner, tmp_path: Path, capture_console: Console
    ) -> None:
        custom = tmp_path / "custom.json"
        custom.write_text(json.dumps({"validator_namespace": "t"}), encoding="utf-8")
        result = runner.invoke(app, ["--config", str(custom), "config"])
        assert result.exit_code == 0
        assert "validator_namespace" in capture_console.export_text()
