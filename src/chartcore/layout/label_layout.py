"""Axis label rotation, skipping and truncation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..core.validation import validate_rotate_mode
from ..text.fitter import LabelFitter
from ..text.measure import TextMeasurer

logger = logging.getLogger(__name__)


DEFAULT_ROTATION_ANGLE = 45.0
DEFAULT_LABEL_PADDING = 4.0


@dataclass(frozen=True)
class RotationResult:
    """Whether to rotate axis labels and which stride to render them at."""

    should_rotate: bool
    skip_interval: int


@dataclass(frozen=True)
class AxisTick:
    """A single axis label to render."""

    index: int            # leaf / category index on the axis
    text: str             # full label
    display_text: str     # label after truncation
    position: float       # pixel position along the axis (band centre)
    rotated: bool

    @property
    def truncated(self) -> bool:
        return self.display_text != self.text


class RotationScheduler:
    """Decides jointly whether to rotate labels and how many to skip.

    Modes:
    - 'auto': rotate only when it shows more labels than staying horizontal
    - 'always': always rotate, skipping as needed
    - 'never': never rotate, skipping as needed

    Results depend only on the arguments (and the measurer's widths),
    so identical calls return identical results.
    """

    def __init__(
        self,
        measurer: TextMeasurer,
        padding: float = DEFAULT_LABEL_PADDING,
    ) -> None:
        self._measurer = measurer
        self._padding = padding

    @staticmethod
    def visible_indices(count: int, skip: int) -> np.ndarray:
        """Indices rendered at stride ``skip``; the last index is always included."""
        if count <= 0:
            return np.empty(0, dtype=np.int64)
        skip = max(1, int(skip))
        indices = np.arange(0, count, skip, dtype=np.int64)
        if indices[-1] != count - 1:
            indices = np.append(indices, count - 1)
        return indices

    @staticmethod
    def visible_count(count: int, skip: int) -> int:
        if count <= 0:
            return 0
        skip = max(1, int(skip))
        strided = -(-count // skip)
        return strided + (0 if (count - 1) % skip == 0 else 1)

    def min_viable_skip(
        self,
        label_width: float,
        count: int,
        available_width: float,
    ) -> int:
        """Smallest skip at which ``label_width`` plus padding fits each visible slot.

        Falls back to ``count`` when no stride fits.
        """
        needed = label_width + self._padding
        for skip in range(1, count + 1):
            space_per_label = available_width / self.visible_count(count, skip)
            if needed <= space_per_label:
                return skip
        return count

    def schedule(
        self,
        labels: Sequence[str],
        available_width: float,
        font_size: float,
        mode: str = "auto",
        font_family: str | None = None,
        rotation_angle: float = DEFAULT_ROTATION_ANGLE,
    ) -> RotationResult:
        """Compute the rotate flag and skip interval for ``labels``.

        Parameters
        ----------
        labels : label texts in axis order
        available_width : pixel width the axis spans
        font_size : font size in pixels
        mode : 'auto', 'always', or 'never'
        font_family : font family for measurement (measurer default if None)
        rotation_angle : rotation in degrees
        """
        validate_rotate_mode(mode)
        count = len(labels)

        if count == 0:
            return RotationResult(should_rotate=False, skip_interval=1)
        if count == 1 or available_width <= 0 or font_size <= 0:
            return RotationResult(should_rotate=(mode == "always"), skip_interval=1)

        max_width = self._measurer.measure_max(labels, font_size, font_family)
        theta = math.radians(rotation_angle)
        rotated_width = max_width * math.cos(theta) + font_size * math.sin(theta)

        skip_no_rotate = self.min_viable_skip(max_width, count, available_width)
        skip_rotate = self.min_viable_skip(rotated_width, count, available_width)

        if mode == "always":
            result = RotationResult(True, skip_rotate)
        elif mode == "never":
            result = RotationResult(False, skip_no_rotate)
        elif skip_no_rotate == 1:
            result = RotationResult(False, 1)
        elif skip_rotate == 1 or skip_rotate < skip_no_rotate:
            result = RotationResult(True, skip_rotate)
        else:
            # Equal strides: horizontal text is easier to read
            result = RotationResult(False, skip_no_rotate)

        logger.debug(
            "Label rotation (%s, %d labels, %.1fpx): skip=%d/%d rotated -> %s",
            mode, count, available_width, skip_no_rotate, skip_rotate, result,
        )
        return result


class LabelLayoutEngine:
    """Turns a rotation decision into per-tick render instructions."""

    @staticmethod
    def compute(
        labels: Sequence[str],
        positions: Sequence[float] | np.ndarray,
        rotation: RotationResult,
        font_size: float,
        available_width: float,
        fitter: LabelFitter,
        rotated_max_width: float | None = None,
        font_family: str | None = None,
        padding: float = DEFAULT_LABEL_PADDING,
    ) -> list[AxisTick]:
        """Compute the ticks to draw, in axis order.

        Parameters
        ----------
        labels : label texts in axis order
        positions : pixel position of each label (same length as labels)
        rotation : result of :meth:`RotationScheduler.schedule`
        font_size : font size in pixels
        available_width : pixel width the axis spans
        fitter : truncates labels to the space each one gets
        rotated_max_width : length budget for rotated labels; None keeps
                            rotated labels whole
        font_family : font family for measurement
        padding : gap kept between horizontal labels; match the
                  scheduler's padding so fitting labels stay whole
        """
        count = len(labels)
        if count != len(positions):
            raise ValueError(
                f"Got {count} labels but {len(positions)} positions; "
                "provide one position per label."
            )
        if count == 0:
            return []

        indices = RotationScheduler.visible_indices(count, rotation.skip_interval)
        if rotation.should_rotate:
            max_width = rotated_max_width
        else:
            space_per_label = available_width / max(1, len(indices))
            max_width = max(0.0, space_per_label - padding)

        ticks = []
        for i in indices.tolist():
            text = labels[i]
            if max_width is None:
                display = text
            else:
                display = fitter.truncate(text, max_width, font_size, font_family)
            ticks.append(AxisTick(
                index=i,
                text=text,
                display_text=display,
                position=float(positions[i]),
                rotated=rotation.should_rotate,
            ))
        return ticks

    @staticmethod
    def serialize(ticks: list[AxisTick], font_size: float = 11.0) -> list[dict]:
        """Serialize ticks for JSON transfer to the rendering layer.

        Parameters
        ----------
        ticks : list[AxisTick]
            Ticks to serialize
        font_size : float
            Font size in pixels (default 11.0)
        """
        return [
            {
                "index": tick.index,
                "text": tick.text,
                "displayText": tick.display_text,
                "position": float(tick.position),
                "rotated": bool(tick.rotated),
                "truncated": tick.truncated,
                "fontSize": float(font_size),
            }
            for tick in ticks
        ]
