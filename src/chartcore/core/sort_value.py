"""Sort keys for mixed-type axis values (dates, periods, numbers, text)."""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd


_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

# "Mar 2023", "mar-23", "MAR/2023"
_MONTH_YEAR = re.compile(r"^([A-Za-z]{3})[\s\-/](\d{2}|\d{4})$")
# "2023-03"
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{2})$")

# Two-digit years up to this value land in the 2000s, the rest in the 1900s.
TWO_DIGIT_YEAR_PIVOT = 79


class SortKind(Enum):
    NUMERIC = "numeric"
    TEXT = "text"


@dataclass(frozen=True)
class SortKey:
    """A totally-ordered sort key: either a number or a lowercased string."""

    kind: SortKind
    value: float | str

    @classmethod
    def numeric(cls, value: float) -> SortKey:
        return cls(SortKind.NUMERIC, float(value))

    @classmethod
    def text(cls, value: str) -> SortKey:
        return cls(SortKind.TEXT, value)

    @property
    def is_numeric(self) -> bool:
        return self.kind is SortKind.NUMERIC


def parse_period(text: str) -> int | None:
    """Parse "MMM YYYY"-style or "YYYY-MM" strings into ``year*100 + month``.

    Returns None when the text is not a recognised period.
    """
    s = text.strip()

    m = _MONTH_YEAR.match(s)
    if m:
        month = _MONTHS.get(m.group(1).lower())
        if month is None:
            return None
        year = int(m.group(2))
        if len(m.group(2)) == 2:
            year += 2000 if year <= TWO_DIGIT_YEAR_PIVOT else 1900
        return year * 100 + month

    m = _YEAR_MONTH.match(s)
    if m:
        month = int(m.group(2))
        if not 1 <= month <= 12:
            return None
        return int(m.group(1)) * 100 + month

    return None


def _text_key(text: str) -> SortKey:
    period = parse_period(text)
    if period is not None:
        return SortKey.numeric(period)
    return SortKey.text(text.lower())


def _epoch_millis(value: datetime | date) -> float:
    if not isinstance(value, datetime):
        value = datetime.combine(value, time(), tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp() * 1000.0


def _is_missing(value: Any) -> bool:
    if value is None or value is pd.NaT or value is pd.NA:
        return True
    if isinstance(value, np.datetime64):
        return bool(np.isnat(value))
    return False


def normalize_sort_value(value: Any, label: str | None = None) -> SortKey:
    """Map a raw cell value to a :class:`SortKey`.

    Parameters
    ----------
    value : raw value (datetime, date, number, bool, string, or None)
    label : display label used when ``value`` is missing or non-finite

    Never raises: anything that cannot be read as a date, period or
    number degrades to lowercased text.
    """
    fallback = label if label is not None else ""

    if _is_missing(value):
        return _text_key(fallback)

    if isinstance(value, np.datetime64):
        millis = value.astype("datetime64[ms]").astype(np.int64)
        return SortKey.numeric(float(millis))

    if isinstance(value, (datetime, date)):
        return SortKey.numeric(_epoch_millis(value))

    # bool before Number: bool is an int subclass
    if isinstance(value, (bool, np.bool_)):
        return SortKey.numeric(1.0 if value else 0.0)

    if isinstance(value, Decimal) and not value.is_finite():
        return _text_key(fallback)

    if isinstance(value, (int, Decimal)):
        try:
            return SortKey.numeric(float(value))
        except OverflowError:
            # Integers beyond float range sort at either end
            return SortKey.numeric(math.inf if value > 0 else -math.inf)

    if isinstance(value, numbers.Real):
        as_float = float(value)
        if math.isfinite(as_float):
            return SortKey.numeric(as_float)
        return _text_key(fallback)

    if isinstance(value, str):
        return _text_key(value)

    return _text_key(str(value))


def compare_sort_keys(a: SortKey, b: SortKey) -> int | None:
    """Three-way compare two keys. Returns None if their kinds differ."""
    if a.kind is not b.kind:
        return None
    if a.value < b.value:
        return -1
    if a.value > b.value:
        return 1
    return 0
