from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from covgate import __version__
from covgate.cli import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_THRESHOLD,
    create_app,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from _pytest.monkeypatch import MonkeyPatch
    from typer.testing import CliRunner

# --------------------------------------------------------------------------- #
# helpers                                                                     #
# --------------------------------------------------------------------------- #

_VALUES = ["--method", "75", "--conditional", "60", "--statement", "82.5", "--element", "72"]


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def _run(runner: CliRunner, args: list[str]) -> tuple[int, str]:
    """Invoke the CLI and return *(exit_code, output)* for convenience."""
    result = runner.invoke(create_app(), args)
    return result.exit_code, result.output


# --------------------------------------------------------------------------- #
# tests                                                                       #
# --------------------------------------------------------------------------- #


def test_cli_version_flag(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["--version"])
    assert code == EXIT_OK
    assert out.strip() == f"covgate {__version__}"


def test_cli_version_command(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["version"])
    assert code == EXIT_OK
    assert out.strip() == __version__


def test_check_passes(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["check", *_VALUES, "--target", "method=70,branch=60", "--no-color"])
    assert code == EXIT_OK
    assert "Coverage gate passed." in out


def test_check_reports_failures(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["check", *_VALUES, "--target", "method=80 stmt=90 elem=72"])
    assert code == EXIT_THRESHOLD
    assert "Threshold failed: method >= 80 (actual 75)" in out
    assert "Threshold failed: statement >= 90 (actual 82.5)" in out
    assert "element >=" not in out


def test_check_negative_target_is_always_met(cli_runner: CliRunner) -> None:
    code, _ = _run(cli_runner, ["check", *_VALUES, "--target", "method=-1 statement=-1"])
    assert code == EXIT_OK


def test_check_without_targets_is_not_enforced(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["check", *_VALUES])
    assert code == EXIT_OK
    assert "No coverage targets configured." in out


def test_check_json_output(
    tmp_path: Path,
    cli_runner: CliRunner,
    metrics_file: Callable[..., Path],
) -> None:
    metrics = metrics_file({"method": 75, "conditional": 60, "statement": 82.5, "element": 72})
    out_file = tmp_path / "out" / "gate.json"
    code, _ = _run(
        cli_runner,
        [
            "check",
            "--metrics",
            str(metrics),
            "--target",
            "method=80",
            "--minimum",
            "method=50",
            "--format",
            "json",
            "--output",
            str(out_file),
        ],
    )
    assert code == EXIT_THRESHOLD
    data = json.loads(out_file.read_text(encoding="utf-8"))
    assert data["passed"] is False
    method = next(m for m in data["metrics"] if m["metric"] == "method")
    assert method["score"] == pytest.approx(100 * 25 / 30)


def test_check_values_override_metrics_file(cli_runner: CliRunner, metrics_file: Callable[..., Path]) -> None:
    metrics = metrics_file({"method": 10, "conditional": 60, "statement": 82.5, "element": 72})
    code, _ = _run(cli_runner, ["check", "-m", str(metrics), "--method", "95", "-t", "method=90"])
    assert code == EXIT_OK


def test_check_reads_pyproject(cli_runner: CliRunner, pyproject_file: Callable[[str], Path]) -> None:
    pyproject_file(
        """
        [tool.covgate.target]
        conditional = 65
        """
    )
    code, out = _run(cli_runner, ["check", *_VALUES])
    assert code == EXIT_THRESHOLD
    assert "Threshold failed: conditional >= 65 (actual 60)" in out


def test_check_target_option_overrides_pyproject(
    cli_runner: CliRunner, pyproject_file: Callable[[str], Path]
) -> None:
    pyproject_file(
        """
        [tool.covgate.target]
        conditional = 65
        method = 70
        """
    )
    code, _ = _run(cli_runner, ["check", *_VALUES, "--target", "conditional=55"])
    assert code == EXIT_OK


def test_check_missing_metrics(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["check", "--target", "method=80"])
    assert code == EXIT_NOINPUT
    assert "requires a metrics snapshot" in out


def test_check_missing_metrics_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    code, out = _run(cli_runner, ["check", "--metrics", str(tmp_path / "nope.json")])
    assert code == EXIT_NOINPUT
    assert "metrics file not found" in out


def test_check_invalid_metrics_file(cli_runner: CliRunner, metrics_file: Callable[..., Path]) -> None:
    metrics = metrics_file({"method": 75})
    code, out = _run(cli_runner, ["check", "--metrics", str(metrics)])
    assert code == EXIT_DATAERR
    assert "invalid metrics document" in out


def test_check_partial_values(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["check", "--method", "75"])
    assert code == EXIT_DATAERR
    assert "missing coverage metric" in out


@pytest.mark.parametrize("expression", ["method", "lines=80", "method=abc"])
def test_check_bad_target_expression(cli_runner: CliRunner, expression: str) -> None:
    code, out = _run(cli_runner, ["check", *_VALUES, "--target", expression])
    assert code == EXIT_CONFIG
    assert "ERROR:" in out


def test_check_missing_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    code, out = _run(cli_runner, ["check", *_VALUES, "--config", str(tmp_path / "missing.toml")])
    assert code == EXIT_CONFIG
    assert "configuration file not found" in out


def test_check_bad_config_file(cli_runner: CliRunner, pyproject_file: Callable[[str], Path]) -> None:
    path = pyproject_file("[tool.covgate.target]\nmethod = 'high'\n")
    code, out = _run(cli_runner, ["check", *_VALUES, "--config", str(path)])
    assert code == EXIT_CONFIG
    assert "must be a number" in out


def test_check_equal_target_and_minimum(tmp_path: Path, cli_runner: CliRunner) -> None:
    out_file = tmp_path / "gate.json"
    code, _ = _run(
        cli_runner,
        [
            "check",
            *_VALUES,
            "-t",
            "method=75",
            "--minimum",
            "method=75",
            "--format",
            "json",
            "--output",
            str(out_file),
        ],
    )
    assert code == EXIT_OK
    data = json.loads(out_file.read_text(encoding="utf-8"))
    method = next(m for m in data["metrics"] if m["metric"] == "method")
    assert method["score"] == 100.0
