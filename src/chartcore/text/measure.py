"""TextMeasurer: memoised pixel-width measurement of label text."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Iterable, Protocol

logger = logging.getLogger(__name__)


DEFAULT_CACHE_CAPACITY = 5000
DEFAULT_FONT_FAMILY = "sans-serif"
# Average advance of a sans-serif glyph relative to the font size
FALLBACK_CHAR_WIDTH_RATIO = 0.6

MEASURE_MODES = ("agg", "heuristic")


class MeasureSurface(Protocol):
    """Anything that can report the advance width of one line of text."""

    def text_width(self, text: str, font_size: float, font_family: str) -> float:
        ...


def split_font_family(font_family: str) -> list[str]:
    """Split a CSS-style family list ("Segoe UI, sans-serif") into names."""
    names = [part.strip().strip("'\"") for part in font_family.split(",")]
    return [n for n in names if n] or [DEFAULT_FONT_FAMILY]


class AggSurface:
    """Off-screen matplotlib Agg renderer used as the measurement surface.

    Rendered at 72 dpi so that one point equals one pixel.
    """

    def __init__(self, dpi: float = 72.0) -> None:
        from matplotlib.backends.backend_agg import RendererAgg

        self._renderer = RendererAgg(1, 1, dpi)

    def text_width(self, text: str, font_size: float, font_family: str) -> float:
        from matplotlib.font_manager import FontProperties

        if not text:
            return 0.0
        prop = FontProperties(family=split_font_family(font_family), size=font_size)
        width, _, _ = self._renderer.get_text_width_height_descent(
            text, prop, ismath=False,
        )
        return float(width)


class TextMeasurer:
    """Measures label widths with an LRU cache bounded by ``capacity``.

    Each instance owns its cache, so independent renderers (and tests)
    never share measurements. Without a surface, widths fall back to
    ``len(text) * font_size * 0.6``.

    Usage::

        measurer = TextMeasurer(AggSurface())
        measurer.measure_width("February", 12)
        measurer.measure_max(["Jan", "February"], 12)
    """

    def __init__(
        self,
        surface: MeasureSurface | None = None,
        capacity: int = DEFAULT_CACHE_CAPACITY,
        font_family: str = DEFAULT_FONT_FAMILY,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}.")
        self._surface = surface
        self._capacity = int(capacity)
        self._font_family = font_family
        self._cache: OrderedDict[tuple[str, float, str], float] = OrderedDict()
        # The surface renderer and the LRU bookkeeping are both non-atomic
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def has_surface(self) -> bool:
        return self._surface is not None

    @property
    def font_family(self) -> str:
        return self._font_family

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        """Drop every cached measurement."""
        with self._lock:
            self._cache.clear()

    def measure_width(
        self,
        text: str,
        font_size: float,
        font_family: str | None = None,
    ) -> float:
        """Pixel width of ``text``; the widest line for multi-line text."""
        family = font_family or self._font_family
        if "\n" in text:
            return max(
                self.measure_width(line, font_size, family)
                for line in text.split("\n")
            )

        key = (text, float(font_size), family)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                return cached

            if self._surface is not None:
                width = self._surface.text_width(text, font_size, family)
            else:
                width = len(text) * font_size * FALLBACK_CHAR_WIDTH_RATIO

            self._cache[key] = width
            while len(self._cache) > self._capacity:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug("Evicted text width for %r", evicted[0])
            return width

    def measure_max(
        self,
        labels: Iterable[str],
        font_size: float,
        font_family: str | None = None,
    ) -> float:
        """Widest of ``labels``, or 0 for an empty set."""
        return max(
            (self.measure_width(label, font_size, font_family) for label in labels),
            default=0.0,
        )


def create_measurer(
    mode: str = "agg",
    capacity: int = DEFAULT_CACHE_CAPACITY,
    font_family: str = DEFAULT_FONT_FAMILY,
) -> TextMeasurer:
    """Build a measurer backed by the Agg surface or the character heuristic."""
    from ..core.validation import validate_choice

    validate_choice("text measurement mode", mode, MEASURE_MODES)
    surface = AggSurface() if mode == "agg" else None
    return TextMeasurer(surface, capacity=capacity, font_family=font_family)
