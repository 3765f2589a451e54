from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate.model.gate import evaluate
from covgate.model.types import CoverageMetric

if TYPE_CHECKING:
    from covgate.model.gate import GateResult
    from covgate.model.metrics import MetricsSnapshot
    from covgate.model.targets import CoverageTarget


@dataclass(frozen=True, slots=True)
class MetricRow:
    """One metric's line in a rendered gate report."""

    metric: CoverageMetric
    actual: float
    target: float | None
    minimum: float | None
    failing: bool
    healthy: bool
    score: float


@dataclass(frozen=True, slots=True)
class GateReport:
    """Inputs of a gate evaluation together with its result."""

    target: CoverageTarget
    minimum: CoverageTarget
    snapshot: MetricsSnapshot
    result: GateResult

    @property
    def rows(self) -> list[MetricRow]:
        return [
            MetricRow(
                metric=metric,
                actual=self.snapshot.percentage(metric),
                target=self.target.threshold(metric),
                minimum=self.minimum.threshold(metric),
                failing=metric in self.result.failing,
                healthy=metric in self.result.healthy,
                score=self.result.scores[metric],
            )
            for metric in CoverageMetric
        ]


def build_report(target: CoverageTarget, minimum: CoverageTarget, snapshot: MetricsSnapshot) -> GateReport:
    return GateReport(
        target=target,
        minimum=minimum,
        snapshot=snapshot,
        result=evaluate(target, minimum, snapshot),
    )


__all__ = ["GateReport", "MetricRow", "build_report"]
