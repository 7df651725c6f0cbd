"""LayoutComposer: assembles hierarchies, labels and legend into a render plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from ..core.palette import COLOR_SCHEMES, category_colors
from ..core.settings import RenderSettings
from ..text.fitter import LabelFitter
from ..text.measure import TextMeasurer
from ..transform.hierarchy import AxisHierarchy, HierarchyBuilder, NodeAdapter, DEFAULT_ADAPTER
from .cell_layout import BandLayout
from .geometry import Margins, Rect
from .label_layout import AxisTick, LabelLayoutEngine, RotationResult, RotationScheduler
from .legend_layout import LegendLayoutEngine, LegendPlacement, LegendReservation


# Default sizes
DEFAULT_PADDING = 12.0          # base margin on every side of the plot
DEFAULT_HEADER_BAND = 20.0      # height of one merged-header level
DEFAULT_GROUP_GAP = 0.0         # gap between level-0 column spans
ROTATED_LABEL_MAX_WIDTH = 120.0


@dataclass(frozen=True)
class HeaderCell:
    """Pixel rectangle of one merged header span."""

    level: int
    label: str
    key: str
    rect: Rect

    def to_dict(self) -> dict:
        return {"level": self.level, "label": self.label, "key": self.key, **self.rect.to_dict()}


@dataclass
class RenderPlan:
    """Everything the rendering layer needs for one render pass."""

    width: float
    height: float
    margins: Margins
    plot_rect: Rect

    column_hierarchy: AxisHierarchy
    row_hierarchies: dict[str, AxisHierarchy] = field(default_factory=dict)

    column_bands: BandLayout | None = None
    header_cells: list[HeaderCell] = field(default_factory=list)

    rotation: RotationResult = field(default_factory=lambda: RotationResult(False, 1))
    ticks: list[AxisTick] = field(default_factory=list)
    axis_font_size: float = 11.0

    legend_reservation: LegendReservation | None = None
    legend_placement: LegendPlacement | None = None

    def to_dict(self) -> dict:
        """Serialize to a dict for JSON transfer to the rendering layer."""
        d = {
            "width": self.width,
            "height": self.height,
            "margins": self.margins.to_dict(),
            "plot": self.plot_rect.to_dict(),
            "columns": self.column_hierarchy.to_dict(),
            "rows": {name: h.to_dict() for name, h in self.row_hierarchies.items()},
            "headerCells": [cell.to_dict() for cell in self.header_cells],
            "rotate": self.rotation.should_rotate,
            "skipInterval": self.rotation.skip_interval,
            "ticks": LabelLayoutEngine.serialize(self.ticks, font_size=self.axis_font_size),
        }
        if self.column_bands is not None:
            d["columnPositions"] = self.column_bands.to_list()
            d["columnBandSize"] = self.column_bands.band_size
        if self.legend_reservation is not None:
            d["legendReservation"] = self.legend_reservation.to_dict()
        if self.legend_placement is not None:
            d["legend"] = self.legend_placement.to_dict()
        return d


class LayoutComposer:
    """Computes the render plan for one chart.

    Order of work per render:
    1. column hierarchy (reordered when numeric) and one row hierarchy per group
    2. legend reservation, folded into the base margins
    3. rotate/skip decision for the axis labels over the plot width
    4. tick instructions at band centres and merged header rectangles
    5. legend placement against the final plot frame
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        measurer: TextMeasurer | None = None,
        adapter: NodeAdapter = DEFAULT_ADAPTER,
        padding: float = DEFAULT_PADDING,
        header_band: float = DEFAULT_HEADER_BAND,
        group_gap: float = DEFAULT_GROUP_GAP,
    ) -> None:
        self._settings = settings if settings is not None else RenderSettings()
        self._measurer = measurer if measurer is not None else self._settings.create_measurer()
        self._fitter = LabelFitter(self._measurer)
        self._scheduler = RotationScheduler(self._measurer, padding=self._settings.label_padding)
        self._legend = LegendLayoutEngine(self._measurer, self._fitter)
        self._builder = HierarchyBuilder(adapter)
        self._padding = padding
        self._header_band = header_band
        self._group_gap = group_gap

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @property
    def measurer(self) -> TextMeasurer:
        return self._measurer

    def compute(
        self,
        width: float,
        height: float,
        column_root: Any = None,
        row_root: Any = None,
        axis_labels: Sequence[str] | None = None,
        legend_categories: Sequence[str] | None = None,
        legend_kind: str = "ordinal",
        legend_min: str | None = None,
        legend_max: str | None = None,
        category_color_overrides: dict[str, str] | None = None,
    ) -> RenderPlan:
        """Compute the render plan.

        Parameters
        ----------
        width, height : canvas size in pixels
        column_root : root of the column tree (None for no column hierarchy)
        row_root : root of the row tree (None for no row hierarchy)
        axis_labels : x-axis labels; defaults to the column leaves' deepest labels
        legend_categories : ordinal legend categories (ordinal legends only)
        legend_kind : 'ordinal' or 'gradient'
        legend_min, legend_max : end labels of a gradient legend
        category_color_overrides : {category: hex} colours that win over the scheme
        """
        s = self._settings

        columns = self._builder.build_columns(column_root, s.column_sort_descending)
        rows = self._builder.build_rows(row_root) if row_root is not None else {}

        # Legend reservation comes first: it shrinks the plot
        canvas = Rect(0.0, 0.0, width, height)
        base = Margins.uniform(self._padding)
        reservation = self._reserve_legend(
            canvas.inset(base), legend_kind, legend_categories,
        )
        margins = base + reservation.margins if reservation is not None else base

        header_h = self._header_band * max(0, columns.depth - 1)
        margins = margins + Margins(top=header_h)
        plot = canvas.inset(margins)

        if axis_labels is None:
            axis_labels = columns.leaf_labels()
        labels = [str(label) for label in axis_labels]

        axis_font = s.effective_font_size(
            s.axis_font_size_override, s.x_axis_font_size, width, height, 8.0, 18.0,
        )
        rotation = self._scheduler.schedule(
            labels,
            available_width=plot.width,
            font_size=axis_font,
            mode=s.rotate_labels,
            font_family=s.axis_font_family,
            rotation_angle=s.rotation_angle,
        )

        bands = BandLayout(
            n_cells=len(labels),
            extent=plot.width,
            offset=plot.x,
            gap_positions=self._group_gap_positions(columns, len(labels)),
            gap_size=self._group_gap,
        )
        ticks = LabelLayoutEngine.compute(
            labels,
            bands.centers,
            rotation,
            font_size=axis_font,
            available_width=plot.width,
            fitter=self._fitter,
            rotated_max_width=ROTATED_LABEL_MAX_WIDTH,
            font_family=s.axis_font_family,
            padding=s.label_padding,
        )
        header_cells = self._header_cells(columns, bands, plot) if len(labels) == columns.leaf_count else []

        placement = None
        if reservation is not None and not reservation.is_empty:
            placement = self._place_legend(
                reservation, width, height, plot,
                legend_min, legend_max, category_color_overrides,
            )

        return RenderPlan(
            width=width,
            height=height,
            margins=margins,
            plot_rect=plot,
            column_hierarchy=columns,
            row_hierarchies=rows,
            column_bands=bands,
            header_cells=header_cells,
            rotation=rotation,
            ticks=ticks,
            axis_font_size=axis_font,
            legend_reservation=reservation,
            legend_placement=placement,
        )

    def _legend_font_size(self, frame: Rect) -> float:
        s = self._settings
        return s.effective_font_size(
            s.legend_font_size_override, s.legend_font_size, frame.width, frame.height, 9.0, 16.0,
        )

    def _reserve_legend(
        self,
        frame: Rect,
        kind: str,
        categories: Sequence[str] | None,
    ) -> LegendReservation | None:
        s = self._settings
        if not s.show_legend:
            return None
        font_size = self._legend_font_size(frame)
        if kind == "gradient":
            return self._legend.reserve_gradient(s.legend_position, font_size)
        if kind != "ordinal":
            raise ValueError(f"Unknown legend kind '{kind}'. Use 'ordinal' or 'gradient'.")
        if not categories:
            return None
        return self._legend.reserve_ordinal(
            s.legend_position,
            list(categories),
            font_size,
            available_width=frame.width,
            available_height=frame.height,
            max_items=s.max_legend_items,
        )

    def _place_legend(
        self,
        reservation: LegendReservation,
        width: float,
        height: float,
        plot: Rect,
        legend_min: str | None,
        legend_max: str | None,
        overrides: dict[str, str] | None,
    ) -> LegendPlacement:
        s = self._settings
        frame = self._legend.default_frame(width, height)
        # Align along the plot's extent, dock against the canvas edge
        if reservation.dock.is_horizontal_edge:
            frame = Rect(plot.x, frame.y, plot.width, frame.height)
        else:
            frame = Rect(frame.x, plot.y, frame.width, plot.height)

        if reservation.kind == "gradient":
            return self._legend.place_gradient(
                reservation, width, height,
                min_label=legend_min or "0",
                max_label=legend_max or "",
                colors=COLOR_SCHEMES[s.color_scheme],
                frame=frame,
            )
        colors = category_colors(
            reservation.categories,
            scheme=s.color_scheme,
            custom_colors=s.active_custom_colors(),
            overrides=overrides,
        )
        return self._legend.place_ordinal(reservation, width, height, colors, frame=frame)

    @staticmethod
    def _group_gap_positions(columns: AxisHierarchy, n_labels: int) -> frozenset[int]:
        if columns.depth < 2 or n_labels != columns.leaf_count:
            return frozenset()
        return frozenset(span.start_leaf_index for span in columns.spans_at(0)[1:])

    def _header_cells(
        self,
        columns: AxisHierarchy,
        bands: BandLayout,
        plot: Rect,
    ) -> list[HeaderCell]:
        """Rectangles for every non-leaf level, stacked above the plot."""
        cells = []
        outer_levels = columns.depth - 1
        for level in range(outer_levels):
            y = plot.y - self._header_band * (outer_levels - level)
            for span in columns.spans_at(level):
                x0, x1 = bands.span_extent(span.start_leaf_index, span.end_leaf_index)
                cells.append(HeaderCell(
                    level=level,
                    label=span.label,
                    key=span.key,
                    rect=Rect(x0, y, x1 - x0, self._header_band),
                ))
        return cells
