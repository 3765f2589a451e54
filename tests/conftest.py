from __future__ import annotations

import json
import textwrap
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from typer.testing import CliRunner

from covgate.model.metrics import MetricsSnapshot


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def snapshot() -> MetricsSnapshot:
    return MetricsSnapshot(method=75.0, conditional=60.0, statement=82.5, element=72.0)


@pytest.fixture
def metrics_file(tmp_path: Path) -> Callable[..., Path]:
    def write(data: Mapping[str, object] | str, *, filename: str = "metrics.json") -> Path:
        path = tmp_path / filename
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return write


@pytest.fixture
def pyproject_file(tmp_path: Path) -> Callable[[str], Path]:
    def write(body: str) -> Path:
        path = tmp_path / "pyproject.toml"
        path.write_text(textwrap.dedent(body), encoding="utf-8")
        return path

    return write
