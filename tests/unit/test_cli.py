"""Tests for the chartlang command line."""

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from chartlang.cli import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def chart_project(tmp_path: Path) -> Path:
    """Create a directory with a chart file and no config."""
    (tmp_path / "door.chart").write_text(
        "closed*\n  OPEN -> opened; isUnlocked\nopened\n  CLOSE -> closed > slam\n",
        encoding="utf-8",
    )
    return tmp_path


def test_parse_fixture_to_json(cli_runner: CliRunner, charts_dir: Path) -> None:
    result = cli_runner.invoke(app, ["parse", str(charts_dir / "fetch.chart")])

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["id"] == "fetch"
    assert data["initial"] == "idle"
    assert data["states"]["success"] == {"id": "success", "type": "final"}


def test_parse_to_yaml(cli_runner: CliRunner, charts_dir: Path) -> None:
    result = cli_runner.invoke(app, ["parse", str(charts_dir / "media.chart"), "-f", "yaml"])

    assert result.exit_code == 0, result.output
    data = yaml.safe_load(result.stdout)
    assert data["type"] == "parallel"
    assert data["states"]["buffering"]["on"][""][0]["target"] == "#player.video"


def test_parse_to_file(cli_runner: CliRunner, chart_project: Path) -> None:
    target = chart_project / "door.json"

    result = cli_runner.invoke(app, ["parse", str(chart_project / "door.chart"), "-o", str(target)])

    assert result.exit_code == 0, result.output
    assert "written to" in result.stdout
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["id"] == "machine"
    assert data["initial"] == "closed"
    assert data["states"]["opened"]["on"]["CLOSE"] == {"target": "closed", "actions": ["slam"]}


def test_parse_root_id_option(cli_runner: CliRunner, chart_project: Path) -> None:
    result = cli_runner.invoke(app, ["parse", str(chart_project / "door.chart"), "--root-id", "door"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["id"] == "door"


def test_parse_compact_json(cli_runner: CliRunner, chart_project: Path) -> None:
    result = cli_runner.invoke(app, ["parse", str(chart_project / "door.chart"), "--indent", "0"])

    assert result.exit_code == 0, result.output
    assert result.stdout.count("\n") == 1


def test_parse_uses_config_file(cli_runner: CliRunner, chart_project: Path) -> None:
    """Test that chartlang.toml next to the source is picked up."""
    (chart_project / "chartlang.toml").write_text(
        '[parser]\nroot_id = "door"\n\n[output]\nformat = "yaml"\n',
        encoding="utf-8",
    )

    result = cli_runner.invoke(app, ["parse", str(chart_project / "door.chart")])

    assert result.exit_code == 0, result.output
    data = yaml.safe_load(result.stdout)
    assert data["id"] == "door"


def test_parse_explicit_config(cli_runner: CliRunner, chart_project: Path, tmp_path: Path) -> None:
    config_dir = tmp_path / "settings"
    config_dir.mkdir()
    config = config_dir / "custom.toml"
    config.write_text('[output]\nformat = "yaml"\n', encoding="utf-8")

    result = cli_runner.invoke(app, ["parse", str(chart_project / "door.chart"), "-c", str(config)])

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("id: machine")


def test_parse_bad_config(cli_runner: CliRunner, chart_project: Path) -> None:
    (chart_project / "chartlang.toml").write_text('[output]\nformat = "xml"\n', encoding="utf-8")

    result = cli_runner.invoke(app, ["parse", str(chart_project / "door.chart")])

    assert result.exit_code == 1
    assert "Error loading config" in result.output


def test_parse_unknown_format(cli_runner: CliRunner, chart_project: Path) -> None:
    result = cli_runner.invoke(app, ["parse", str(chart_project / "door.chart"), "-f", "xml"])

    assert result.exit_code == 1
    assert "Unknown format" in result.output


def test_parse_grammar_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    source = tmp_path / "bad.chart"
    source.write_text("a\n  -> b\n", encoding="utf-8")

    result = cli_runner.invoke(app, ["parse", str(source)])

    assert result.exit_code == 1
    assert "needs a condition" in result.output


def test_parse_invalid_indentation(cli_runner: CliRunner, charts_dir: Path) -> None:
    result = cli_runner.invoke(app, ["parse", str(charts_dir / "broken_indent.chart")])

    assert result.exit_code == 1
    assert "Invalid indentation" in result.output


def test_parse_missing_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(app, ["parse", str(tmp_path / "nope.chart")])

    assert result.exit_code == 1
    assert "Cannot read" in result.output


def test_tokens_lines(cli_runner: CliRunner, chart_project: Path) -> None:
    result = cli_runner.invoke(app, ["tokens", str(chart_project / "door.chart")])

    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "1:1 IDENTIFIER 'closed'"
    assert lines[1] == "1:7 INITIAL_STATE"
    assert "2:1 INDENT" in lines
    assert "2:17 CONDITION 'isUnlocked'" in lines


def test_tokens_table(cli_runner: CliRunner, chart_project: Path) -> None:
    result = cli_runner.invoke(app, ["tokens", str(chart_project / "door.chart"), "--table"])

    assert result.exit_code == 0, result.output
    assert "TRANSITION_ARROW" in result.stdout
    assert "isUnlocked" in result.stdout


def test_tokens_invalid_indentation(cli_runner: CliRunner, charts_dir: Path) -> None:
    result = cli_runner.invoke(app, ["tokens", str(charts_dir / "broken_indent.chart")])

    assert result.exit_code == 1
    assert "Invalid indentation" in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.startswith("chartlang ")


def test_log_level_option(cli_runner: CliRunner, chart_project: Path) -> None:
    result = cli_runner.invoke(app, ["--log-level", "debug", "parse", str(chart_project / "door.chart")])

    assert result.exit_code == 0, result.output
