"""Renderers for gate reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from covgate._meta import logger
from covgate.render.human import render_human
from covgate.render.json import format_json

if TYPE_CHECKING:
    from covgate.model.report import GateReport


class OutputFormat(StrEnum):
    HUMAN = "human"
    JSON = "json"


@dataclass(frozen=True, slots=True)
class RenderOptions:
    color: bool = False


def render(report: GateReport, *, fmt: str, options: RenderOptions | None = None) -> str:
    """Render *report* in the requested output format."""
    options = options or RenderOptions()
    try:
        resolved = OutputFormat(fmt)
    except ValueError as exc:
        msg = f"Unsupported format: {fmt!r}"
        raise ValueError(msg) from exc

    logger.debug("selected renderer %s", resolved.value)
    if resolved is OutputFormat.JSON:
        return format_json(report)
    return render_human(report, color=options.color)


__all__ = ["OutputFormat", "RenderOptions", "format_json", "render", "render_human"]
