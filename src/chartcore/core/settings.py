"""RenderSettings: the validated knobs the layout core consumes per render."""

from __future__ import annotations

import param

from ..layout.legend_layout import LEGEND_POSITIONS
from ..text.measure import DEFAULT_CACHE_CAPACITY, MEASURE_MODES, TextMeasurer, create_measurer
from .palette import COLOR_SCHEMES
from .validation import ROTATE_MODES, validate_hex_color


# Reference chart size for responsive text scaling
RESPONSIVE_BASE_PX = 400.0


class RenderSettings(param.Parameterized):
    """Settings supplied by the host for one visual instance.

    Only the fields the layout core reads are modelled here; anything
    purely cosmetic (colours of axis text, bold/italic) stays with the
    rendering layer.
    """

    # --- Axis labels ---
    rotate_labels = param.Selector(default="auto", objects=list(ROTATE_MODES))
    rotation_angle = param.Number(default=45.0, bounds=(0.0, 90.0))
    x_axis_font_size = param.Number(default=11.0, bounds=(6.0, 40.0))
    axis_font_family = param.String(default="Segoe UI, sans-serif")
    label_padding = param.Number(default=4.0, bounds=(0.0, None))

    # --- Legend ---
    show_legend = param.Boolean(default=True)
    legend_position = param.Selector(default="topRight", objects=list(LEGEND_POSITIONS))
    legend_font_size = param.Number(default=11.0, bounds=(6.0, 40.0))
    max_legend_items = param.Integer(default=10, bounds=(1, None))

    # --- Colours ---
    color_scheme = param.Selector(default="blues", objects=list(COLOR_SCHEMES))
    use_custom_colors = param.Boolean(default=False)
    custom_colors = param.List(default=[], item_type=str)

    # --- Responsive text (0 = auto, 6-40 = manual override) ---
    responsive_text = param.Boolean(default=True)
    font_scale_factor = param.Number(default=1.0, bounds=(0.1, 5.0))
    axis_font_size_override = param.Number(default=0.0, bounds=(0.0, 40.0))
    legend_font_size_override = param.Number(default=0.0, bounds=(0.0, 40.0))

    # --- Hierarchy ---
    column_sort_descending = param.List(default=[], item_type=bool)

    # --- Text measurement ---
    measure_text_with = param.Selector(default="agg", objects=list(MEASURE_MODES))
    text_cache_capacity = param.Integer(default=DEFAULT_CACHE_CAPACITY, bounds=(1, None))

    @param.depends("custom_colors", watch=True, on_init=True)
    def _check_custom_colors(self) -> None:
        for color in self.custom_colors:
            validate_hex_color(color)

    def active_custom_colors(self) -> list[str] | None:
        """Custom colours when enabled and non-empty, else None."""
        if self.use_custom_colors and self.custom_colors:
            return list(self.custom_colors)
        return None

    def create_measurer(self) -> TextMeasurer:
        return create_measurer(
            self.measure_text_with,
            capacity=self.text_cache_capacity,
            font_family=self.axis_font_family,
        )

    def responsive_font_size(
        self,
        base_size: float,
        width: float,
        height: float,
        min_size: float = 8.0,
        max_size: float = 24.0,
    ) -> float:
        """Scale ``base_size`` with the chart's smaller dimension.

        The dimension scale is ``min(width, height) / 400`` clamped to
        [0.5, 2.0], multiplied by the user's scale factor. Returns
        ``base_size`` unchanged when responsive text is off.
        """
        if not self.responsive_text:
            return base_size
        dimension_scale = min(width, height) / RESPONSIVE_BASE_PX
        dimension_scale = max(0.5, min(2.0, dimension_scale))
        scaled = base_size * dimension_scale * self.font_scale_factor
        return float(max(min_size, min(max_size, round(scaled))))

    def effective_font_size(
        self,
        manual_size: float,
        base_size: float,
        width: float,
        height: float,
        min_size: float = 8.0,
        max_size: float = 24.0,
    ) -> float:
        """Manual size when set (> 0, clamped), else the responsive size."""
        if manual_size > 0:
            return float(max(min_size, min(max_size, manual_size)))
        return self.responsive_font_size(base_size, width, height, min_size, max_size)
