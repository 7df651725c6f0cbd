"""Shared test fixtures for chartcore."""

import pandas as pd
import pytest

from chartcore.text.fitter import LabelFitter
from chartcore.text.measure import TextMeasurer
from chartcore.transform.hierarchy import HierarchyBuilder


class CountingSurface:
    """Measurement surface with heuristic widths that records every call."""

    def __init__(self):
        self.calls = []

    def text_width(self, text, font_size, font_family):
        self.calls.append(text)
        return len(text) * font_size * 0.6


@pytest.fixture
def measurer():
    """Heuristic measurer: width = len(text) * font_size * 0.6."""
    return TextMeasurer()


@pytest.fixture
def fitter(measurer):
    return LabelFitter(measurer)


@pytest.fixture
def counting_surface():
    return CountingSurface()


@pytest.fixture
def quarter_paths():
    return [["2024", "Q1"], ["2024", "Q2"], ["2025", "Q1"]]


@pytest.fixture
def quarter_tree(quarter_paths):
    return HierarchyBuilder.from_paths(quarter_paths)


@pytest.fixture
def sales_df():
    """Pivot-style rows: two levels, a region group and one subtotal row."""
    return pd.DataFrame({
        "year": ["2024", "2024", "2025", "2024", "2024"],
        "quarter": ["Q1", "Q2", "Q1", "Q1", None],
        "region": ["North", "North", "South", "South", "North"],
        "is_total": [False, False, False, False, True],
    })
