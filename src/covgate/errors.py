"""Centralised exception hierarchy for covgate."""

from __future__ import annotations


class CovgateError(Exception):
    """Base class for all custom covgate exceptions."""


class MissingMetricsError(CovgateError, ValueError):
    """A gate operation was asked to evaluate without a metrics snapshot."""


class InvalidMetricsError(CovgateError, ValueError):
    """Metrics were supplied but do not describe valid coverage percentages."""


class MetricsFileNotFoundError(CovgateError):
    """Metrics snapshot file could not be located on disk."""


class ConfigError(CovgateError):
    """Threshold configuration could not be loaded."""


__all__ = [
    "ConfigError",
    "CovgateError",
    "InvalidMetricsError",
    "MetricsFileNotFoundError",
    "MissingMetricsError",
]
