"""Unit tests for compatible_with.cli.main.

Uses Click's test runner (CliRunner).  Probe targets live in a small module
written to ``tmp_path`` and put on ``sys.path`` for the duration of a test.
"""
from __future__ import annotations

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from compatible_with.cli.main import _guess_format, _resolve_target, cli

TARGET_MODULE = textwrap.dedent(
    '''
    from __future__ import annotations

    from pydantic import BaseModel, ConfigDict

    from compatible_with import Compatible, conversion


    class PointV1(BaseModel):
        model_config = ConfigDict(strict=True)

        x: int
        y: int


    class Point(BaseModel):
        coords: list[int]


    @conversion
    def point_from_v1(old: PointV1) -> Point:
        return Point(coords=[old.x, old.y])


    PointCompat = Compatible[PointV1, Point]
    '''
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def target_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "cli_probe_models.py").write_text(TARGET_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return tmp_path


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestGuessFormat:
    def test_yaml_extensions(self) -> None:
        assert _guess_format(Path("a.yaml")) == "yaml"
        assert _guess_format(Path("a.YML")) == "yaml"

    def test_defaults_to_json(self) -> None:
        assert _guess_format(Path("a.txt")) == "json"


class TestResolveTarget:
    def test_resolves_attribute(self, target_dir: Path) -> None:
        target = _resolve_target("cli_probe_models:PointCompat")
        assert target.__qualname__ == "Compatible[PointV1, Point]"  # type: ignore[attr-defined]

    def test_resolves_dotted_attribute(self) -> None:
        assert _resolve_target("os:path.join") is __import__("os").path.join

    def test_missing_colon_exits(self) -> None:
        with pytest.raises(SystemExit) as info:
            _resolve_target("no_colon_here")
        assert info.value.code == 1


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


class TestVersionCommand:
    def test_version_output(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "compatible-with" in result.output
        assert "0.1.0" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "probe" in result.output
        assert "version" in result.output


# ---------------------------------------------------------------------------
# probe
# ---------------------------------------------------------------------------


class TestProbeCommand:
    def test_old_document(self, runner: CliRunner, target_dir: Path) -> None:
        doc = target_dir / "point.json"
        doc.write_text('{"x": 1, "y": 2}', encoding="utf-8")
        result = runner.invoke(cli, ["probe", "cli_probe_models:PointCompat", str(doc)])
        assert result.exit_code == 0, result.output
        assert "Matched" in result.output
        assert "old" in result.output
        assert "coords" in result.output

    def test_current_document(self, runner: CliRunner, target_dir: Path) -> None:
        doc = target_dir / "point.json"
        doc.write_text('{"coords": [3, 4]}', encoding="utf-8")
        result = runner.invoke(cli, ["probe", "cli_probe_models:PointCompat", str(doc)])
        assert result.exit_code == 0, result.output
        assert "current" in result.output

    def test_json_output(self, runner: CliRunner, target_dir: Path) -> None:
        doc = target_dir / "point.json"
        doc.write_text('{"x": 5, "y": 6}', encoding="utf-8")
        result = runner.invoke(
            cli, ["probe", "cli_probe_models:PointCompat", str(doc), "--json-output"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"coords": [5, 6]}

    def test_yaml_guessed_from_extension(self, runner: CliRunner, target_dir: Path) -> None:
        doc = target_dir / "point.yaml"
        doc.write_text("x: 7\ny: 8\n", encoding="utf-8")
        result = runner.invoke(
            cli, ["probe", "cli_probe_models:PointCompat", str(doc), "--json-output"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"coords": [7, 8]}

    def test_explicit_format(self, runner: CliRunner, target_dir: Path) -> None:
        doc = target_dir / "point.txt"
        doc.write_text("coords: [1]\n", encoding="utf-8")
        result = runner.invoke(
            cli,
            ["probe", "cli_probe_models:PointCompat", str(doc), "--format", "yaml", "--json-output"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"coords": [1]}

    def test_mismatched_document_exits_1(self, runner: CliRunner, target_dir: Path) -> None:
        doc = target_dir / "point.json"
        doc.write_text('{"z": 1}', encoding="utf-8")
        result = runner.invoke(cli, ["probe", "cli_probe_models:PointCompat", str(doc)])
        assert result.exit_code == 1
        assert "Decode failed" in result.output

    def test_unknown_module_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        doc = tmp_path / "doc.json"
        doc.write_text("{}", encoding="utf-8")
        result = runner.invoke(cli, ["probe", "no_such_module_xyz:Thing", str(doc)])
        assert result.exit_code == 1
        assert "Cannot resolve" in result.output

    def test_invalid_target_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        doc = tmp_path / "doc.json"
        doc.write_text("{}", encoding="utf-8")
        result = runner.invoke(cli, ["probe", "builtins:int", str(doc)])
        assert result.exit_code == 1
        assert "Invalid target" in result.output

    def test_missing_file_is_usage_error(self, runner: CliRunner, target_dir: Path) -> None:
        result = runner.invoke(
            cli, ["probe", "cli_probe_models:PointCompat", str(target_dir / "absent.json")]
        )
        assert result.exit_code == 2

    def test_unparsable_yaml_exits_1(self, runner: CliRunner, target_dir: Path) -> None:
        doc = target_dir / "broken.yaml"
        doc.write_text("x: [1, 2\n", encoding="utf-8")
        result = runner.invoke(cli, ["probe", "cli_probe_models:PointCompat", str(doc)])
        assert result.exit_code == 1
        assert "Failed to parse input" in result.output
