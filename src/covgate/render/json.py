from __future__ import annotations

import json
from typing import TYPE_CHECKING

from jsonschema import validate

from covgate._meta import __version__
from covgate.config import get_schema

if TYPE_CHECKING:
    from covgate.model.report import GateReport


def format_json(report: GateReport) -> str:
    """Render a gate report as JSON validated against the result schema."""
    schema = get_schema("result")
    result = report.result
    payload: dict[str, object] = {
        "schema": str(schema["$id"]),
        "schema_version": 1,
        "tool": {"name": "covgate", "version": __version__},
        "enforced": result.enforced,
        "passed": result.passed,
        "health": result.health,
        "metrics": [
            {
                "metric": row.metric.value,
                "actual": row.actual,
                "target": row.target,
                "minimum": row.minimum,
                "failing": row.failing,
                "healthy": row.healthy,
                "score": row.score,
            }
            for row in report.rows
        ],
    }

    validate(payload, schema)
    return json.dumps(payload, indent=2, sort_keys=True)


__all__ = ["format_json"]
