"""Central configuration and constants for ``covgate``."""

from __future__ import annotations

import json
import math
import tomllib
from functools import cache
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.errors import ConfigError
from covgate.model.targets import CoverageTarget
from covgate.model.types import CoverageMetric

if TYPE_CHECKING:
    from collections.abc import Mapping

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

# Default project configuration file.
PYPROJECT = "pyproject.toml"

_SCHEMA_FILES: dict[str, str] = {
    "metrics": "metrics.schema.json",
    "result": "result.schema.json",
}


@cache
def get_schema(name: str) -> dict[str, object]:
    """Load and cache one of the packaged JSON schemas."""
    try:
        filename = _SCHEMA_FILES[name]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema: {name!r}. Available schemas: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("covgate.data").joinpath(filename).read_text(encoding="utf-8"))


def load_targets(path: Path | None = None) -> tuple[CoverageTarget, CoverageTarget]:
    """Return ``(target, minimum)`` read from the ``[tool.covgate]`` table of *path*.

    A missing file or table yields empty targets.
    """
    path = path or Path(PYPROJECT)
    if not path.is_file():
        logger.debug("no configuration file at %s", path)
        return CoverageTarget(), CoverageTarget()

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"failed to read {path}: {exc}"
        raise ConfigError(msg) from exc

    section = data.get("tool", {}).get("covgate", {})
    if not isinstance(section, dict):
        msg = f"[tool.covgate] in {path} must be a table"
        raise ConfigError(msg)

    target = _target_from_table(section.get("target", {}), where=f"{path}: [tool.covgate.target]")
    minimum = _target_from_table(section.get("minimum", {}), where=f"{path}: [tool.covgate.minimum]")
    logger.debug("loaded coverage targets from %s", path)
    return target, minimum


def _target_from_table(table: object, *, where: str) -> CoverageTarget:
    if not isinstance(table, dict):
        msg = f"{where} must be a table"
        raise ConfigError(msg)

    known = {m.value for m in CoverageMetric}
    unknown = sorted(set(table) - known)
    if unknown:
        msg = f"{where}: unknown coverage metric(s): {', '.join(unknown)}"
        raise ConfigError(msg)

    return CoverageTarget(**{key: _threshold_value(table, key, where=where) for key in table})


def _threshold_value(table: Mapping[str, object], key: str, *, where: str) -> float:
    value = table[key]
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"{where}: {key} must be a number, got {value!r}"
        raise ConfigError(msg)
    if not math.isfinite(value):
        msg = f"{where}: {key} must be finite, got {value!r}"
        raise ConfigError(msg)
    return float(value)


__all__ = ["LOG_FORMAT", "PYPROJECT", "get_schema", "load_targets"]
