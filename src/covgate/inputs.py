"""Loading of already-computed metrics snapshots."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, cast

from jsonschema import ValidationError, validate

from covgate._meta import logger
from covgate.config import get_schema
from covgate.errors import InvalidMetricsError, MetricsFileNotFoundError
from covgate.model.metrics import MetricsSnapshot, Ratio
from covgate.model.types import CoverageMetric

if TYPE_CHECKING:
    from pathlib import Path


def load_snapshot(path: Path) -> MetricsSnapshot:
    """Read a metrics snapshot JSON document from *path*."""
    if not path.is_file():
        msg = f"metrics file not found: {path}"
        raise MetricsFileNotFoundError(msg)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"{path} is not valid JSON: {exc}"
        raise InvalidMetricsError(msg) from exc

    logger.debug("read metrics snapshot from %s", path)
    return parse_snapshot(data)


def parse_snapshot(data: object) -> MetricsSnapshot:
    """Validate a decoded metrics document and build a :class:`MetricsSnapshot`.

    Two shapes are accepted: four flat percentages, or a ``metrics`` object of
    ``{"covered": n, "total": m}`` ratios.
    """
    try:
        validate(data, get_schema("metrics"))
    except ValidationError as exc:
        msg = f"invalid metrics document: {exc.message}"
        raise InvalidMetricsError(msg) from exc

    document = cast("dict[str, Any]", data)
    if "metrics" not in document:
        return MetricsSnapshot.from_mapping(document)

    ratios = {
        CoverageMetric(name): Ratio(covered=counts["covered"], total=counts["total"])
        for name, counts in document["metrics"].items()
    }
    return MetricsSnapshot.from_ratios(ratios)


__all__ = ["load_snapshot", "parse_snapshot"]
