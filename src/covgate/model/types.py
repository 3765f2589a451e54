"""Shared type aliases and enumerations used across covgate."""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CoverageMetric(StrEnum):
    """The coverage dimensions a gate is evaluated along."""

    METHOD = "method"
    CONDITIONAL = "conditional"  # branch coverage
    STATEMENT = "statement"
    ELEMENT = "element"  # combined methods + conditionals + statements


FULL_COVERAGE: int = 100


__all__ = [
    "FULL_COVERAGE",
    "CoverageMetric",
]
