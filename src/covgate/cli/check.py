from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from covgate._meta import logger
from covgate.cli._shared import configure_logging, resolve_use_color
from covgate.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_THRESHOLD,
)
from covgate.config import load_targets
from covgate.errors import ConfigError, InvalidMetricsError, MetricsFileNotFoundError, MissingMetricsError
from covgate.inputs import load_snapshot
from covgate.io import color_allowed, write_output
from covgate.model.metrics import MetricsSnapshot
from covgate.model.report import build_report
from covgate.model.targets import CoverageTarget, parse_target
from covgate.model.types import CoverageMetric
from covgate.render import OutputFormat, RenderOptions, render

if TYPE_CHECKING:
    from covgate.model.report import GateReport

_BOOL_FALSE = False


def _fail(message: str, code: int) -> typer.Exit:
    typer.echo(f"ERROR: {message}", err=True)
    return typer.Exit(code=code)


def _resolve_targets(
    *,
    config: Path | None,
    target: str | None,
    minimum: str | None,
) -> tuple[CoverageTarget, CoverageTarget]:
    if config is not None and not config.is_file():
        raise _fail(f"configuration file not found: {config}", EXIT_CONFIG)
    try:
        file_target, file_minimum = load_targets(config)
        resolved_target = _overlay(file_target, parse_target(target)) if target else file_target
        resolved_minimum = _overlay(file_minimum, parse_target(minimum)) if minimum else file_minimum
    except (ConfigError, ValueError) as exc:
        raise _fail(str(exc), EXIT_CONFIG) from exc
    return resolved_target, resolved_minimum


def _overlay(base: CoverageTarget, override: CoverageTarget) -> CoverageTarget:
    """Return *base* with every threshold set in *override* replaced."""
    merged = base
    for metric in CoverageMetric:
        value = override.threshold(metric)
        if value is not None:
            merged = merged.with_threshold(metric, value)
    return merged


def _resolve_snapshot(metrics: Path | None, values: dict[str, float | None]) -> MetricsSnapshot | None:
    given = {name: value for name, value in values.items() if value is not None}
    if metrics is not None:
        snapshot = load_snapshot(metrics)
        return replace(snapshot, **given) if given else snapshot
    if not given:
        return None
    return MetricsSnapshot.from_mapping(given)


def _build(
    *,
    metrics: Path | None,
    values: dict[str, float | None],
    target: CoverageTarget,
    minimum: CoverageTarget,
) -> GateReport:
    try:
        snapshot = _resolve_snapshot(metrics, values)
        return build_report(target, minimum, snapshot)
    except MetricsFileNotFoundError as exc:
        raise _fail(str(exc), EXIT_NOINPUT) from exc
    except MissingMetricsError as exc:
        raise _fail(f"{exc} (pass --metrics FILE or all four percentages)", EXIT_NOINPUT) from exc
    except InvalidMetricsError as exc:
        raise _fail(str(exc), EXIT_DATAERR) from exc
    except OSError as exc:
        raise _fail(str(exc), EXIT_NOINPUT) from exc


def check_cmd(
    metrics: Annotated[
        Path | None,
        typer.Option("--metrics", "-m", help="JSON file with the measured coverage percentages."),
    ] = None,
    method: Annotated[
        float | None,
        typer.Option("--method", help="Measured method coverage % (overrides --metrics)."),
    ] = None,
    conditional: Annotated[
        float | None,
        typer.Option("--conditional", help="Measured conditional (branch) coverage % (overrides --metrics)."),
    ] = None,
    statement: Annotated[
        float | None,
        typer.Option("--statement", help="Measured statement coverage % (overrides --metrics)."),
    ] = None,
    element: Annotated[
        float | None,
        typer.Option("--element", help="Measured element coverage % (overrides --metrics)."),
    ] = None,
    target: Annotated[
        str | None,
        typer.Option(
            "--target",
            "-t",
            help="Target thresholds, e.g. 'method=80,branch=70'. Negative values are always met.",
        ),
    ] = None,
    minimum: Annotated[
        str | None,
        typer.Option("--minimum", help="Minimum thresholds used as the floor of the range score."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", help="pyproject.toml holding a [tool.covgate] table."),
    ] = None,
    fmt: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = OutputFormat.HUMAN,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color output"),
    ] = _BOOL_FALSE,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color output"),
    ] = _BOOL_FALSE,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Emit diagnostic logging"),
    ] = _BOOL_FALSE,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Emit only errors"),
    ] = _BOOL_FALSE,
) -> None:
    """Check measured coverage against the configured targets."""
    configure_logging(quiet=quiet, verbose=verbose)

    resolved_target, resolved_minimum = _resolve_targets(config=config, target=target, minimum=minimum)
    if resolved_target.is_empty():
        logger.info("no coverage targets configured; the gate is not enforced")

    report = _build(
        metrics=metrics,
        values={
            CoverageMetric.METHOD.value: method,
            CoverageMetric.CONDITIONAL.value: conditional,
            CoverageMetric.STATEMENT.value: statement,
            CoverageMetric.ELEMENT.value: element,
        },
        target=resolved_target,
        minimum=resolved_minimum,
    )

    use_color = resolve_use_color(
        color=color,
        no_color=no_color,
        color_allowed=fmt is OutputFormat.HUMAN and color_allowed(output),
    )
    text = render(report, fmt=fmt.value, options=RenderOptions(color=use_color))
    write_output(text, output)

    if not report.result.passed:
        for row in report.rows:
            if row.failing:
                typer.echo(
                    f"Threshold failed: {row.metric.value} >= {row.target:g} (actual {row.actual:g})",
                    err=True,
                )
        raise typer.Exit(code=EXIT_THRESHOLD)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("check")(check_cmd)


__all__ = ["register"]
