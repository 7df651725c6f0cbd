"""Colour schemes, category palettes and gradient lookup tables."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .validation import validate_color_scheme, validate_hex_color


# Gradient endpoints per scheme (sequential legends, heat cells)
COLOR_SCHEMES: dict[str, tuple[str, str]] = {
    "blues": ("#f7fbff", "#08519c"),
    "greens": ("#f7fcf5", "#006d2c"),
    "reds": ("#fff5f0", "#a50f15"),
    "purples": ("#fcfbfd", "#54278f"),
    "warm": ("#ffffcc", "#bd0026"),
    "oranges": ("#fff5eb", "#d94701"),
    "teals": ("#f0fdfa", "#0d9488"),
    "pinks": ("#fdf2f8", "#be185d"),
    "rainbow": ("#ff0000", "#0000ff"),
    "pastel": ("#fef3c7", "#a78bfa"),
    "vibrant": ("#22d3ee", "#f43f5e"),
}

# Discrete palettes per scheme (ordinal legends, series)
SCHEME_COLORS: dict[str, list[str]] = {
    "blues": ["#08519c", "#3182bd", "#6baed6", "#9ecae1", "#c6dbef", "#deebf7"],
    "greens": ["#006d2c", "#31a354", "#74c476", "#a1d99b", "#c7e9c0", "#e5f5e0"],
    "reds": ["#a50f15", "#de2d26", "#fb6a4a", "#fc9272", "#fcbba1", "#fee5d9"],
    "purples": ["#54278f", "#756bb1", "#9e9ac8", "#bcbddc", "#dadaeb", "#f2f0f7"],
    "warm": ["#bd0026", "#f03b20", "#fd8d3c", "#fecc5c", "#ffffb2", "#ffffcc"],
    "oranges": ["#d94701", "#f16913", "#fd8d3c", "#fdae6b", "#fdd0a2", "#feedde"],
    "teals": ["#0d9488", "#14b8a6", "#2dd4bf", "#5eead4", "#99f6e4", "#ccfbf1"],
    "pinks": ["#be185d", "#db2777", "#ec4899", "#f472b6", "#f9a8d4", "#fce7f3"],
    "rainbow": ["#ef4444", "#f97316", "#eab308", "#22c55e", "#3b82f6", "#8b5cf6"],
    "pastel": ["#fcd34d", "#a3e635", "#34d399", "#22d3ee", "#a78bfa", "#f472b6"],
    "vibrant": ["#f43f5e", "#f97316", "#facc15", "#4ade80", "#22d3ee", "#a855f7"],
}

FALLBACK_PALETTE = "tab10"


def default_palette() -> list[str]:
    """The matplotlib ``tab10`` palette as hex strings."""
    import matplotlib
    from matplotlib.colors import to_hex

    cmap = matplotlib.colormaps[FALLBACK_PALETTE]
    return [to_hex(c) for c in cmap.colors]


def scheme_colors(scheme: str | None) -> list[str]:
    """Discrete colours for a scheme name; ``None`` gives the default palette."""
    if scheme is None:
        return default_palette()
    validate_color_scheme(scheme)
    return list(SCHEME_COLORS[scheme])


def category_colors(
    categories: Sequence[str],
    scheme: str | None = None,
    custom_colors: Sequence[str] | None = None,
    overrides: dict[str, str] | None = None,
) -> dict[str, str]:
    """Assign a colour to each category.

    Custom colours (when given and non-empty) replace the scheme palette.
    Per-category overrides win over both. Palettes wrap around.
    """
    if custom_colors:
        base = [validate_hex_color(c) for c in custom_colors]
    else:
        base = scheme_colors(scheme)
    overrides = overrides or {}

    colors: dict[str, str] = {}
    for i, cat in enumerate(categories):
        colors[cat] = overrides.get(cat) or base[i % len(base)]
    return colors


def contrast_color(hex_color: str) -> str:
    """Dark or light text colour for legible labels on ``hex_color``."""
    from matplotlib.colors import to_rgb

    r, g, b = to_rgb(validate_hex_color(hex_color))
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return "#333333" if luminance > 0.5 else "#ffffff"


class GradientScale:
    """Maps scalar values to colours via a 256-entry lookup table.

    The LUT is pre-computed from a two-stop matplotlib colormap built
    from ``min_color`` to ``max_color``.
    """

    __slots__ = ("_lut", "_min_color", "_max_color")

    LUT_SIZE = 256

    def __init__(self, min_color: str, max_color: str) -> None:
        self._min_color = validate_hex_color(min_color)
        self._max_color = validate_hex_color(max_color)
        self._lut = self._build_lut()

    @classmethod
    def from_scheme(cls, scheme: str) -> GradientScale:
        validate_color_scheme(scheme)
        lo, hi = COLOR_SCHEMES[scheme]
        return cls(lo, hi)

    def _build_lut(self) -> np.ndarray:
        """Build a (256, 4) uint8 RGBA lookup table."""
        from matplotlib.colors import LinearSegmentedColormap

        cmap = LinearSegmentedColormap.from_list(
            "chartcore_gradient", [self._min_color, self._max_color],
        )
        positions = np.linspace(0.0, 1.0, self.LUT_SIZE)
        rgba_float = cmap(positions)
        return np.round(rgba_float * 255).astype(np.uint8)

    @property
    def lut(self) -> np.ndarray:
        return self._lut

    @property
    def min_color(self) -> str:
        return self._min_color

    @property
    def max_color(self) -> str:
        return self._max_color

    def value_to_index(self, value: float, vmin: float, vmax: float) -> int:
        """Map a scalar value to a LUT index [0, 255]."""
        if vmax == vmin:
            return 127
        normalized = (value - vmin) / (vmax - vmin)
        clamped = max(0.0, min(1.0, normalized))
        return int(clamped * (self.LUT_SIZE - 1))

    def color_at(self, value: float, vmin: float, vmax: float) -> str:
        r, g, b, _ = self._lut[self.value_to_index(value, vmin, vmax)]
        return f"#{int(r):02x}{int(g):02x}{int(b):02x}"
