from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from covgate.model import gate
from covgate.model.types import CoverageMetric

if TYPE_CHECKING:
    from covgate.model.metrics import MetricsSnapshot

_TARGET_PATTERN = re.compile(r"^[a-zA-Z_-]+=")

_ALIASES: dict[str, CoverageMetric] = {
    "meth": CoverageMetric.METHOD,
    "method": CoverageMetric.METHOD,
    "methods": CoverageMetric.METHOD,
    "cond": CoverageMetric.CONDITIONAL,
    "conditional": CoverageMetric.CONDITIONAL,
    "conditionals": CoverageMetric.CONDITIONAL,
    "br": CoverageMetric.CONDITIONAL,
    "branch": CoverageMetric.CONDITIONAL,
    "branches": CoverageMetric.CONDITIONAL,
    "stmt": CoverageMetric.STATEMENT,
    "statement": CoverageMetric.STATEMENT,
    "statements": CoverageMetric.STATEMENT,
    "elem": CoverageMetric.ELEMENT,
    "element": CoverageMetric.ELEMENT,
    "elements": CoverageMetric.ELEMENT,
}


@dataclass(frozen=True, slots=True)
class CoverageTarget:
    """Per-metric coverage thresholds.

    Fields
    ------
    method, conditional, statement:
        Required coverage percentage for the metric. ``None`` leaves the
        metric unenforced; a negative value is always met.
    element:
        Same as above for element coverage. Keyword-only since it is derived
        from the other three and is usually left unset.
    """

    method: float | None = None
    conditional: float | None = None
    statement: float | None = None
    element: float | None = field(default=None, kw_only=True)

    def is_empty(self) -> bool:
        """Return ``True`` if no metric carries a threshold at all."""
        return all(self.threshold(m) is None for m in CoverageMetric)

    def is_always_met(self) -> bool:
        """Return ``True`` if no threshold could ever fail (all unset or negative)."""
        return all(_never_enforced(self.threshold(m)) for m in CoverageMetric)

    def threshold(self, metric: CoverageMetric) -> float | None:
        return getattr(self, metric.value)

    def with_threshold(self, metric: CoverageMetric, value: float | None) -> CoverageTarget:
        """Return a copy of this target with *metric* set to *value*."""
        return replace(self, **{metric.value: value})

    def failing_metrics(self, snapshot: MetricsSnapshot | None) -> frozenset[CoverageMetric]:
        return gate.failing_metrics(self, snapshot)

    def healthy_metrics(self, snapshot: MetricsSnapshot | None) -> dict[CoverageMetric, float]:
        return gate.healthy_metrics(self, snapshot)

    def range_scores(
        self, minimum: CoverageTarget, snapshot: MetricsSnapshot | None
    ) -> dict[CoverageMetric, float]:
        return gate.range_scores(self, minimum, snapshot)


def _never_enforced(value: float | None) -> bool:
    return value is None or value < 0


def parse_target(expression: str) -> CoverageTarget:
    """Parse a target expression like 'method=80,branches=70 stmt=75%'."""
    if not expression or not expression.strip():
        msg = "target expression must be non-empty"
        raise ValueError(msg)

    values: dict[CoverageMetric, float] = {}
    tokens = [token.strip() for token in re.split(r"[,\s]+", expression) if token.strip()]
    for token in tokens:
        if "=" not in token or not _TARGET_PATTERN.match(token):
            msg = f"invalid target token: {token!r}"
            raise ValueError(msg)

        key, raw_value = token.split("=", 1)
        key = key.strip().lower()
        try:
            metric = _ALIASES[key]
        except KeyError as exc:
            msg = f"unknown coverage metric: {key!r}"
            raise ValueError(msg) from exc
        if metric in values:
            msg = f"duplicate {metric} constraint in {token!r}"
            raise ValueError(msg)
        values[metric] = _parse_percentage(raw_value.strip().rstrip("%"), token=token)

    return CoverageTarget(**{m.value: v for m, v in values.items()})


def _parse_percentage(value: str, *, token: str) -> float:
    # Out-of-range and negative values are legal: negatives mean "always met"
    # and the range score clamps anything above 100.
    try:
        percent = float(value)
    except ValueError as exc:
        msg = f"invalid percentage value in {token!r}: {value!r}"
        raise ValueError(msg) from exc
    if not math.isfinite(percent):
        msg = f"percentage must be finite in {token!r}: {value!r}"
        raise ValueError(msg)
    return percent


__all__ = ["CoverageTarget", "parse_target"]
