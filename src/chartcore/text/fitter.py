"""LabelFitter: ellipsis truncation of labels to a pixel budget."""

from __future__ import annotations

from typing import Iterable

from .measure import TextMeasurer


ELLIPSIS = "..."


class LabelFitter:
    """Truncates labels so that their measured width fits ``max_width``.

    Truncation searches the prefix length by bisection, so a label of
    length n costs O(log n) measurements.
    """

    def __init__(self, measurer: TextMeasurer, ellipsis: str = ELLIPSIS) -> None:
        self._measurer = measurer
        self._ellipsis = ellipsis

    @property
    def measurer(self) -> TextMeasurer:
        return self._measurer

    @property
    def ellipsis(self) -> str:
        return self._ellipsis

    def truncate(
        self,
        text: str,
        max_width: float,
        font_size: float,
        font_family: str | None = None,
    ) -> str:
        """Return ``text`` unchanged if it fits, else its longest fitting prefix + ellipsis.

        Multi-line text is truncated line by line. Returns the bare
        ellipsis when not even an empty prefix fits.
        """
        if not text:
            return text

        measure = self._measurer.measure_width
        if measure(text, font_size, font_family) <= max_width:
            return text

        if "\n" in text:
            return "\n".join(
                self.truncate(line, max_width, font_size, font_family)
                for line in text.split("\n")
            )

        low, high = 0, len(text)
        while low < high:
            mid = (low + high + 1) // 2
            candidate = text[:mid] + self._ellipsis
            if measure(candidate, font_size, font_family) <= max_width:
                low = mid
            else:
                high = mid - 1

        if low == 0:
            return self._ellipsis
        return text[:low] + self._ellipsis

    def truncate_all(
        self,
        labels: Iterable[str],
        max_width: float,
        font_size: float,
        font_family: str | None = None,
    ) -> list[str]:
        return [self.truncate(t, max_width, font_size, font_family) for t in labels]

    @staticmethod
    def is_truncated(original: str, shown: str) -> bool:
        """Whether ``shown`` is a shortened form of ``original`` (tooltip needed)."""
        return original != shown
