from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from covgate.errors import InvalidMetricsError
from covgate.model.types import FULL_COVERAGE, CoverageMetric

if TYPE_CHECKING:
    from collections.abc import Mapping


def pct(covered: int, total: int, *, full: float = float(FULL_COVERAGE)) -> float:
    """Return the coverage percentage, defaulting to `full` when no total exists."""
    return full if total == 0 else (covered / total) * full


@dataclass(frozen=True, slots=True)
class Ratio:
    """Covered/total counts for one coverage metric."""

    covered: int
    total: int

    def __post_init__(self) -> None:
        if self.total < 0 or self.covered < 0:
            msg = f"coverage counts must be non-negative: {self.covered}/{self.total}"
            raise InvalidMetricsError(msg)
        if self.covered > self.total:
            msg = f"covered count exceeds total: {self.covered}/{self.total}"
            raise InvalidMetricsError(msg)

    @property
    def missed(self) -> int:
        return self.total - self.covered

    @property
    def percentage(self) -> float:
        return pct(self.covered, self.total)


@dataclass(frozen=True, slots=True)
class MetricsSnapshot:
    """Measured coverage percentages for a single build or report.

    Fields
    ------
    method, conditional, statement, element:
        Coverage percentage (0..100) measured for the matching
        :class:`CoverageMetric`.
    """

    method: float
    conditional: float
    statement: float
    element: float

    def __post_init__(self) -> None:
        for metric in CoverageMetric:
            value = getattr(self, metric.value)
            if isinstance(value, bool) or not isinstance(value, int | float):
                msg = f"{metric} coverage must be a number, got {value!r}"
                raise InvalidMetricsError(msg)
            if not math.isfinite(value) or value < 0:
                msg = f"{metric} coverage must be a finite non-negative percentage, got {value!r}"
                raise InvalidMetricsError(msg)

    def percentage(self, metric: CoverageMetric) -> float:
        """Return the measured percentage for *metric*."""
        return float(getattr(self, metric.value))

    def as_dict(self) -> dict[CoverageMetric, float]:
        return {metric: self.percentage(metric) for metric in CoverageMetric}

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> MetricsSnapshot:
        """Build a snapshot from a mapping keyed by metric name."""
        unknown = sorted(set(values) - {m.value for m in CoverageMetric})
        if unknown:
            msg = f"unknown coverage metric(s): {', '.join(unknown)}"
            raise InvalidMetricsError(msg)
        missing = [m.value for m in CoverageMetric if m.value not in values]
        if missing:
            msg = f"missing coverage metric(s): {', '.join(missing)}"
            raise InvalidMetricsError(msg)
        return cls(**{m.value: values[m.value] for m in CoverageMetric})

    @classmethod
    def from_ratios(cls, ratios: Mapping[CoverageMetric, Ratio]) -> MetricsSnapshot:
        """Build a snapshot from covered/total counts.

        Metrics without a ratio count as fully covered. When no element ratio
        is given it is derived from the method, conditional and statement
        counts, since element coverage is their combination.
        """
        counts = dict(ratios)
        if CoverageMetric.ELEMENT not in counts:
            parts = [counts[m] for m in CoverageMetric if m in counts]
            counts[CoverageMetric.ELEMENT] = Ratio(
                covered=sum(r.covered for r in parts),
                total=sum(r.total for r in parts),
            )
        return cls(**{
            m.value: counts[m].percentage if m in counts else float(FULL_COVERAGE) for m in CoverageMetric
        })


__all__ = ["MetricsSnapshot", "Ratio", "pct"]
