"""Pixel-space primitives: points, rectangles and side margins."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in pixel space."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def inset(self, margins: Margins) -> Rect:
        """The rectangle left after removing ``margins`` (never negative)."""
        return Rect(
            x=self.x + margins.left,
            y=self.y + margins.top,
            width=max(0.0, self.width - margins.horizontal),
            height=max(0.0, self.height - margins.vertical),
        )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class Margins:
    """Space reserved on each side of the plot area."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def uniform(cls, size: float) -> Margins:
        return cls(size, size, size, size)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    def __add__(self, other: Margins) -> Margins:
        return Margins(
            top=self.top + other.top,
            right=self.right + other.right,
            bottom=self.bottom + other.bottom,
            left=self.left + other.left,
        )

    def to_dict(self) -> dict:
        return {
            "top": self.top, "right": self.right,
            "bottom": self.bottom, "left": self.left,
        }
