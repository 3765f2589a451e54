"""Domain model for covgate (pure types + policy; no IO)."""

from .gate import GateResult, calc_range_score, evaluate, failing_metrics, healthy_metrics, range_scores
from .metrics import MetricsSnapshot, Ratio, pct
from .report import GateReport, MetricRow, build_report
from .targets import CoverageTarget, parse_target
from .types import FULL_COVERAGE, CoverageMetric

__all__ = [
    "FULL_COVERAGE",
    "CoverageMetric",
    "CoverageTarget",
    "GateReport",
    "GateResult",
    "MetricRow",
    "MetricsSnapshot",
    "Ratio",
    "build_report",
    "calc_range_score",
    "evaluate",
    "failing_metrics",
    "healthy_metrics",
    "parse_target",
    "pct",
    "range_scores",
]
