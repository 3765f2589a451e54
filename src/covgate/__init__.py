from covgate._meta import __version__, logger
from covgate.model import (
    CoverageMetric,
    CoverageTarget,
    GateResult,
    MetricsSnapshot,
    calc_range_score,
    evaluate,
    failing_metrics,
    range_scores,
)

__all__ = [
    "CoverageMetric",
    "CoverageTarget",
    "GateResult",
    "MetricsSnapshot",
    "__version__",
    "calc_range_score",
    "evaluate",
    "failing_metrics",
    "logger",
    "range_scores",
]
