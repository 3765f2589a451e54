"""Coverage gate evaluation.

Every function here is pure: it reads a :class:`CoverageTarget` and a
:class:`MetricsSnapshot` and returns fresh results, so evaluations can run
concurrently as long as nobody swaps the inputs out from under them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.errors import MissingMetricsError
from covgate.model.types import FULL_COVERAGE, CoverageMetric

if TYPE_CHECKING:
    from covgate.model.metrics import MetricsSnapshot
    from covgate.model.targets import CoverageTarget


@dataclass(frozen=True, slots=True)
class GateResult:
    """Outcome of evaluating a snapshot against a target and a minimum."""

    failing: frozenset[CoverageMetric]
    scores: dict[CoverageMetric, float]
    healthy: dict[CoverageMetric, float]
    enforced: bool

    @property
    def passed(self) -> bool:
        return not self.failing

    @property
    def health(self) -> float:
        """Return the weakest range score; the build is only as healthy as its worst metric."""
        return min(self.scores.values())


def failing_metrics(target: CoverageTarget, snapshot: MetricsSnapshot | None) -> frozenset[CoverageMetric]:
    """Return the metrics whose measured percentage is strictly below the target.

    Absent thresholds never fail. Negative thresholds are present but can never
    fail, since measured percentages are non-negative.
    """
    snapshot = _require_snapshot(snapshot)
    failing: set[CoverageMetric] = set()
    for metric in CoverageMetric:
        required = target.threshold(metric)
        if required is None:
            continue
        if snapshot.percentage(metric) < required:
            failing.add(metric)
    return frozenset(failing)


def healthy_metrics(target: CoverageTarget, snapshot: MetricsSnapshot | None) -> dict[CoverageMetric, float]:
    """Return ``metric -> threshold`` for every metric measured strictly above its target."""
    snapshot = _require_snapshot(snapshot)
    healthy: dict[CoverageMetric, float] = {}
    for metric in CoverageMetric:
        required = target.threshold(metric)
        if required is None:
            continue
        if snapshot.percentage(metric) > required:
            healthy[metric] = required
    return healthy


def range_scores(
    target: CoverageTarget,
    minimum: CoverageTarget,
    snapshot: MetricsSnapshot | None,
) -> dict[CoverageMetric, float]:
    """Score every metric by its position inside the ``[minimum, target]`` band.

    *target* supplies the ceiling and *minimum* the floor. All four metrics are
    always scored; unset bounds fall back to 0 and 100.
    """
    snapshot = _require_snapshot(snapshot)
    return {
        metric: calc_range_score(
            target.threshold(metric),
            minimum.threshold(metric),
            snapshot.percentage(metric),
        )
        for metric in CoverageMetric
    }


def calc_range_score(maximum: float | None, minimum: float | None, value: float) -> float:
    """Return where *value* sits between *minimum* and *maximum*, as 0..100.

    A floor above the ceiling is narrowed to a one-point band just below the
    ceiling. A zero-width band scores 100 once the value reaches it, 0 below.
    """
    full = float(FULL_COVERAGE)
    if minimum is None or minimum < 0:
        minimum = 0.0
    if maximum is None or maximum > full:
        maximum = full
    if minimum > maximum:
        minimum = maximum - 1
    if minimum == maximum:
        return full if value >= maximum else 0.0
    score = full * (value - minimum) / (maximum - minimum)
    if score < 0:
        return 0.0
    if score > full:
        return full
    return score


def evaluate(
    target: CoverageTarget,
    minimum: CoverageTarget,
    snapshot: MetricsSnapshot | None,
) -> GateResult:
    """Evaluate *snapshot* against *target*, scoring it within ``[minimum, target]``."""
    snapshot = _require_snapshot(snapshot)

    if target.is_always_met():
        logger.debug("target is always met; skipping failing-metric comparison")
        failing: frozenset[CoverageMetric] = frozenset()
    else:
        failing = failing_metrics(target, snapshot)

    result = GateResult(
        failing=failing,
        scores=range_scores(target, minimum, snapshot),
        healthy=healthy_metrics(target, snapshot),
        enforced=not target.is_empty(),
    )
    logger.debug(
        "gate evaluated: failing=%s health=%.1f",
        sorted(m.value for m in result.failing),
        result.health,
    )
    return result


def _require_snapshot(snapshot: MetricsSnapshot | None) -> MetricsSnapshot:
    if snapshot is None:
        msg = "gate evaluation requires a metrics snapshot"
        raise MissingMetricsError(msg)
    return snapshot


__all__ = [
    "GateResult",
    "calc_range_score",
    "evaluate",
    "failing_metrics",
    "healthy_metrics",
    "range_scores",
]
