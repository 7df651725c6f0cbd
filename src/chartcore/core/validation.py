"""Input validation with clear error messages for renderer authors."""

from __future__ import annotations

import re
from typing import Any, Iterable

import pandas as pd


ROTATE_MODES = ("auto", "always", "never")

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def validate_choice(name: str, value: Any, allowed: Iterable[str]) -> str:
    """Validate that ``value`` is one of ``allowed``."""
    allowed = tuple(allowed)
    if value not in allowed:
        raise ValueError(
            f"Unknown {name} '{value}'. Use one of: "
            + ", ".join(f"'{a}'" for a in allowed)
            + "."
        )
    return value


def validate_rotate_mode(mode: str) -> str:
    return validate_choice("rotation mode", mode, ROTATE_MODES)


def validate_color_scheme(name: str) -> str:
    from .palette import COLOR_SCHEMES

    return validate_choice("color scheme", name, COLOR_SCHEMES)


def validate_hex_color(color: str) -> str:
    """Validate a ``#rgb`` or ``#rrggbb`` colour string."""
    if not isinstance(color, str) or not _HEX_COLOR.match(color):
        raise ValueError(
            f"Invalid color '{color}'. Use a hex color like '#3b82f6' or '#fff'."
        )
    return color


def validate_frame_columns(
    df: Any,
    columns: Iterable[str],
    what: str = "hierarchy",
) -> pd.DataFrame:
    """Validate that ``df`` is a DataFrame containing every column in ``columns``."""
    if not isinstance(df, pd.DataFrame):
        raise TypeError(
            f"Expected a pandas DataFrame for the {what}, "
            f"got {type(df).__name__}."
        )
    for col in columns:
        if col not in df.columns:
            raise KeyError(
                f"Column '{col}' not found in {what} data. "
                f"Available: {list(df.columns)}"
            )
    return df
