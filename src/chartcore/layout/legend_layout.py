"""LegendLayoutEngine: legend space reservation, docking and item grids.

Layout happens in two calls. ``reserve_*`` runs before the plot
geometry is fixed and returns the margin the legend needs on its docked
side. ``place_*`` runs once the plot frame is final and returns the
legend origin plus the position of every item.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Sequence

from ..core.validation import validate_choice
from ..text.fitter import LabelFitter
from ..text.measure import TextMeasurer
from .geometry import Margins, Point, Rect

logger = logging.getLogger(__name__)


DOCKS = ("top", "bottom", "left", "right")
ALIGNS = ("start", "middle", "end")

# Host position names (camelCase); kebab-case forms are accepted too
LEGEND_POSITIONS = (
    "topLeft", "topCenter", "topRight",
    "topLeftStacked", "topRightStacked",
    "centerLeft", "centerRight",
    "bottomLeft", "bottomCenter", "bottomRight",
)

_HORIZONTAL_ALIGN = {"left": "start", "center": "middle", "right": "end"}

# Default sizes
DEFAULT_SWATCH_SIZE = 14.0
DEFAULT_ITEM_GAP = 6.0
DEFAULT_TEXT_CAP = 120.0
DEFAULT_ITEM_PADDING = 12.0
DEFAULT_MIN_ITEM_WIDTH = 90.0
DEFAULT_MAX_ITEM_WIDTH = 160.0
DEFAULT_EDGE_PADDING = 12.0
DEFAULT_MAX_ITEMS = 10
GRADIENT_SWATCH_WIDTH = 140.0
GRADIENT_SWATCH_HEIGHT = 14.0
# A top/bottom stacked legend may use at most this share of the height
STACKED_HEIGHT_SHARE = 0.35


@dataclass(frozen=True)
class LegendDock:
    """Docking request decoded from a legend position name."""

    dock: str
    align: str
    stacked: bool = False

    @property
    def is_horizontal_edge(self) -> bool:
        return self.dock in ("top", "bottom")

    @property
    def flows_vertically(self) -> bool:
        return not self.is_horizontal_edge or self.stacked


def _kebab(name: str) -> str:
    return re.sub(r"(?<=[a-z])(?=[A-Z])", "-", name.strip()).lower()


def parse_legend_position(name: str | LegendDock) -> LegendDock:
    """Decode a legend position name into a :class:`LegendDock`.

    Accepts host names ("topLeftStacked", "centerRight"), their
    kebab-case forms ("top-left-stacked") and bare sides ("top", "left").
    """
    if isinstance(name, LegendDock):
        return name
    tokens = _kebab(str(name)).replace("_", "-").split("-")
    stacked = bool(tokens) and tokens[-1] == "stacked"
    if stacked:
        tokens = tokens[:-1]

    dock = align = None
    if len(tokens) == 1 and tokens[0] in DOCKS:
        dock, align = tokens[0], "middle"
    elif len(tokens) == 2:
        vertical, horizontal = tokens
        if vertical in ("top", "bottom") and horizontal in _HORIZONTAL_ALIGN:
            dock, align = vertical, _HORIZONTAL_ALIGN[horizontal]
        elif vertical == "center" and horizontal in ("left", "right"):
            dock, align = horizontal, "middle"

    if dock is None or (stacked and dock not in ("top", "bottom")):
        validate_choice("legend position", name, LEGEND_POSITIONS)
    return LegendDock(dock=dock, align=align, stacked=stacked)


@dataclass(frozen=True)
class LegendReservation:
    """Space a legend needs, computed before the plot geometry is final."""

    dock: LegendDock
    margins: Margins
    kind: str                   # 'ordinal' or 'gradient'
    block_width: float
    block_height: float
    font_size: float
    categories: tuple[str, ...] = ()
    hidden_count: int = 0
    rows: int = 0
    cols: int = 0
    col_width: float = 0.0
    row_height: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.block_width <= 0 or self.block_height <= 0

    def to_dict(self) -> dict:
        return {
            "dock": self.dock.dock,
            "align": self.dock.align,
            "stacked": self.dock.stacked,
            "kind": self.kind,
            "margins": self.margins.to_dict(),
            "width": self.block_width,
            "height": self.block_height,
            "rows": self.rows,
            "cols": self.cols,
            "hiddenCount": self.hidden_count,
        }


@dataclass(frozen=True)
class LegendItem:
    """One swatch + label in an ordinal legend grid."""

    row: int
    col: int
    x: float
    y: float
    label: str
    display_label: str
    color: str

    def to_dict(self) -> dict:
        return {
            "row": self.row, "col": self.col,
            "x": self.x, "y": self.y,
            "label": self.label,
            "displayLabel": self.display_label,
            "color": self.color,
        }


@dataclass(frozen=True)
class GradientBar:
    """Swatch rectangle and end labels of a gradient legend."""

    swatch: Rect
    min_label: str
    max_label: str
    min_color: str
    max_color: str
    label_y: float

    def to_dict(self) -> dict:
        return {
            "swatch": self.swatch.to_dict(),
            "minLabel": self.min_label,
            "maxLabel": self.max_label,
            "minColor": self.min_color,
            "maxColor": self.max_color,
            "labelY": self.label_y,
        }


@dataclass(frozen=True)
class LegendPlacement:
    """Final legend position, computed once the plot frame is fixed."""

    origin: Point
    block: Rect
    font_size: float
    items: list[LegendItem] = field(default_factory=list)
    gradient: GradientBar | None = None

    def to_dict(self) -> dict:
        d = {
            "origin": self.origin.to_dict(),
            "block": self.block.to_dict(),
            "fontSize": self.font_size,
            "items": [item.to_dict() for item in self.items],
        }
        if self.gradient is not None:
            d["gradient"] = self.gradient.to_dict()
        return d


class LegendLayoutEngine:
    """Sizes, docks and lays out ordinal and gradient legends."""

    def __init__(
        self,
        measurer: TextMeasurer,
        fitter: LabelFitter | None = None,
        swatch_size: float = DEFAULT_SWATCH_SIZE,
        item_gap: float = DEFAULT_ITEM_GAP,
        text_cap: float = DEFAULT_TEXT_CAP,
        item_padding: float = DEFAULT_ITEM_PADDING,
        min_item_width: float = DEFAULT_MIN_ITEM_WIDTH,
        max_item_width: float = DEFAULT_MAX_ITEM_WIDTH,
        edge_padding: float = DEFAULT_EDGE_PADDING,
    ) -> None:
        self._measurer = measurer
        self._fitter = fitter if fitter is not None else LabelFitter(measurer)
        self._swatch = swatch_size
        self._item_gap = item_gap
        self._text_cap = text_cap
        self._item_padding = item_padding
        self._min_item_width = min_item_width
        self._max_item_width = max_item_width
        self._edge_padding = edge_padding

    # --- Reservation ---

    def row_height(self, font_size: float) -> float:
        return max(self._swatch, round(font_size) + 6.0)

    def column_width(self, labels: Sequence[str], font_size: float) -> float:
        """Uniform grid column width for ``labels``, clamped to the item width bounds."""
        label_w = self._measurer.measure_max(labels, font_size)
        width = self._swatch + self._item_gap + min(self._text_cap, label_w) + self._item_padding
        return max(self._min_item_width, min(self._max_item_width, width))

    def reserve_ordinal(
        self,
        position: str | LegendDock,
        categories: Sequence[str],
        font_size: float,
        available_width: float,
        available_height: float,
        max_items: int = DEFAULT_MAX_ITEMS,
    ) -> LegendReservation:
        """Reserve space for a categorical legend.

        Parameters
        ----------
        position : legend position name or decoded dock
        categories : category labels in legend order
        font_size : legend font size in pixels
        available_width, available_height : space the legend may use
        max_items : cap on visible items; the rest are counted as hidden
        """
        dock = parse_legend_position(position)
        shown = tuple(str(c) for c in categories[: max(0, max_items)])
        hidden = max(0, len(categories) - len(shown))
        n = len(shown)
        if n == 0:
            return LegendReservation(
                dock=dock, margins=Margins(), kind="ordinal",
                block_width=0.0, block_height=0.0, font_size=font_size,
                hidden_count=hidden,
            )

        row_h = self.row_height(font_size)
        col_w = self.column_width(shown, font_size)

        if dock.flows_vertically:
            max_height = max(0.0, available_height)
            if dock.is_horizontal_edge:
                max_height *= STACKED_HEIGHT_SHARE
            items_per_col = max(1, int(max_height // row_h))
            cols = math.ceil(n / items_per_col)
            rows = min(n, items_per_col)
        else:
            items_per_row = max(1, int(max(0.0, available_width) // col_w))
            items_per_row = min(items_per_row, n)
            rows = math.ceil(n / items_per_row)
            cols = items_per_row

        block_w = cols * col_w
        block_h = rows * row_h
        margins = self._dock_margins(dock, block_w, block_h)
        logger.debug(
            "Ordinal legend %s: %d item(s) in %dx%d grid, margins %s",
            dock, n, rows, cols, margins,
        )
        return LegendReservation(
            dock=dock, margins=margins, kind="ordinal",
            block_width=block_w, block_height=block_h, font_size=font_size,
            categories=shown, hidden_count=hidden,
            rows=rows, cols=cols, col_width=col_w, row_height=row_h,
        )

    def reserve_gradient(
        self,
        position: str | LegendDock,
        font_size: float,
        swatch_width: float = GRADIENT_SWATCH_WIDTH,
        swatch_height: float = GRADIENT_SWATCH_HEIGHT,
    ) -> LegendReservation:
        """Reserve a fixed swatch plus one text row for the min/max labels."""
        dock = parse_legend_position(position)
        text_row = max(10.0, round(font_size)) + 2.0
        block_w = swatch_width
        block_h = swatch_height + text_row
        margins = self._dock_margins(dock, block_w, block_h)
        return LegendReservation(
            dock=dock, margins=margins, kind="gradient",
            block_width=block_w, block_height=block_h, font_size=font_size,
            rows=1, cols=1, col_width=swatch_width, row_height=swatch_height,
        )

    @staticmethod
    def _dock_margins(dock: LegendDock, block_w: float, block_h: float) -> Margins:
        if dock.dock == "top":
            return Margins(top=block_h)
        if dock.dock == "bottom":
            return Margins(bottom=block_h)
        if dock.dock == "left":
            return Margins(left=block_w)
        return Margins(right=block_w)

    # --- Placement ---

    def default_frame(self, canvas_width: float, canvas_height: float) -> Rect:
        """The full canvas minus the edge padding on every side."""
        pad = self._edge_padding
        return Rect(
            x=pad, y=pad,
            width=max(0.0, canvas_width - 2 * pad),
            height=max(0.0, canvas_height - 2 * pad),
        )

    def origin(
        self,
        reservation: LegendReservation,
        canvas_width: float,
        canvas_height: float,
        frame: Rect | None = None,
    ) -> Point:
        """Top-left corner of the legend block within ``frame``."""
        frame = frame or self.default_frame(canvas_width, canvas_height)
        dock = reservation.dock
        bw, bh = reservation.block_width, reservation.block_height

        def along(start: float, extent: float, size: float) -> float:
            if dock.align == "start":
                return start
            if dock.align == "end":
                return start + extent - size
            return start + (extent - size) / 2

        if dock.dock == "top":
            x, y = along(frame.x, frame.width, bw), frame.y
        elif dock.dock == "bottom":
            x, y = along(frame.x, frame.width, bw), frame.bottom - bh
        elif dock.dock == "left":
            x, y = frame.x, along(frame.y, frame.height, bh)
        else:
            x, y = frame.right - bw, along(frame.y, frame.height, bh)
        return Point(x=max(0.0, x), y=max(0.0, y))

    def place_ordinal(
        self,
        reservation: LegendReservation,
        canvas_width: float,
        canvas_height: float,
        colors: dict[str, str],
        frame: Rect | None = None,
    ) -> LegendPlacement:
        """Grid position, truncated label and colour for every visible item."""
        origin = self.origin(reservation, canvas_width, canvas_height, frame)
        block = Rect(origin.x, origin.y, reservation.block_width, reservation.block_height)
        text_width = max(
            0.0,
            reservation.col_width - self._swatch - self._item_gap - self._item_padding,
        )
        vertical = reservation.dock.flows_vertically
        per_line = reservation.rows if vertical else reservation.cols

        items = []
        for i, label in enumerate(reservation.categories):
            if vertical:
                col, row = divmod(i, max(1, per_line))
            else:
                row, col = divmod(i, max(1, per_line))
            items.append(LegendItem(
                row=row,
                col=col,
                x=origin.x + col * reservation.col_width,
                y=origin.y + row * reservation.row_height,
                label=label,
                display_label=self._fitter.truncate(label, text_width, reservation.font_size),
                color=colors.get(label, "#cccccc"),
            ))
        return LegendPlacement(
            origin=origin, block=block, font_size=reservation.font_size, items=items,
        )

    def place_gradient(
        self,
        reservation: LegendReservation,
        canvas_width: float,
        canvas_height: float,
        min_label: str,
        max_label: str,
        colors: tuple[str, str],
        frame: Rect | None = None,
    ) -> LegendPlacement:
        """Swatch rectangle and min/max label row for a gradient legend."""
        origin = self.origin(reservation, canvas_width, canvas_height, frame)
        swatch = Rect(origin.x, origin.y, reservation.col_width, reservation.row_height)
        label_y = swatch.bottom + max(10.0, round(reservation.font_size)) + 2.0
        return LegendPlacement(
            origin=origin,
            block=Rect(origin.x, origin.y, reservation.block_width, reservation.block_height),
            font_size=reservation.font_size,
            gradient=GradientBar(
                swatch=swatch,
                min_label=min_label,
                max_label=max_label,
                min_color=colors[0],
                max_color=colors[1],
                label_y=label_y,
            ),
        )
