"""Serializers: convert layout results to JSON for the rendering layer."""

from __future__ import annotations

import json
from typing import Any

from ..layout.composer import RenderPlan
from ..layout.label_layout import AxisTick, LabelLayoutEngine
from ..layout.legend_layout import LegendPlacement, LegendReservation
from ..transform.hierarchy import AxisHierarchy


def serialize_hierarchy(hierarchy: AxisHierarchy) -> str:
    """Serialize one axis hierarchy as JSON string."""
    return json.dumps(hierarchy.to_dict())


def serialize_row_groups(groups: dict[str, AxisHierarchy]) -> str:
    """Serialize {group_key: AxisHierarchy} as JSON string, keeping group order."""
    return json.dumps({name: h.to_dict() for name, h in groups.items()})


def serialize_ticks(ticks: list[AxisTick], font_size: float = 11.0) -> str:
    """Serialize axis ticks as JSON string."""
    return json.dumps(LabelLayoutEngine.serialize(ticks, font_size=font_size))


def serialize_legend(
    reservation: LegendReservation,
    placement: LegendPlacement | None = None,
) -> str:
    """Serialize a legend reservation and, when known, its placement."""
    d: dict[str, Any] = {"reservation": reservation.to_dict()}
    if placement is not None:
        d["placement"] = placement.to_dict()
    return json.dumps(d)


def serialize_plan(plan: RenderPlan, **extra: Any) -> str:
    """Serialize a full render plan as JSON string.

    Keyword arguments are merged into the top-level object.
    """
    return json.dumps({**plan.to_dict(), **extra})
