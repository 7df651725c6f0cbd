"""Tests for LabelFitter ellipsis truncation."""

import math

import pytest

from chartcore.text.fitter import ELLIPSIS, LabelFitter
from chartcore.text.measure import TextMeasurer


LONG = "Supercalifragilisticexpialidocious"


class TestTruncate:
    def test_fitting_text_unchanged(self, fitter):
        assert fitter.truncate("Jan", 100, 12) == "Jan"

    def test_empty_text(self, fitter):
        assert fitter.truncate("", 10, 12) == ""

    def test_long_word(self, fitter, measurer):
        shown = fitter.truncate(LONG, 40, 12)
        assert shown.endswith(ELLIPSIS)
        assert measurer.measure_width(shown, 12) <= 40
        # 7.2px per char: two chars plus the ellipsis is the longest fit
        assert shown == "Su..."

    def test_bare_ellipsis_when_nothing_fits(self, fitter):
        assert fitter.truncate(LONG, 25, 12) == ELLIPSIS
        assert fitter.truncate(LONG, 5, 12) == ELLIPSIS

    def test_multiline_truncated_per_line(self, fitter):
        shown = fitter.truncate("Total Revenue\nQ1", 60, 10)
        assert shown == "Total R...\nQ1"

    def test_custom_ellipsis(self, measurer):
        fitter = LabelFitter(measurer, ellipsis="…")
        assert fitter.truncate("abcdefghij", 30, 10) == "abcd…"

    def test_is_truncated(self):
        assert LabelFitter.is_truncated("February", "Febr...")
        assert not LabelFitter.is_truncated("Jan", "Jan")

    def test_truncate_all(self, fitter):
        assert fitter.truncate_all(["Jan", "February"], 40, 10) == ["Jan", "Feb..."]


class TestTruncationProperties:
    LABELS = [
        "January", LONG, "Net revenue (USD, adjusted)", "x", "Q1 • 2024",
        "Ärger über Öl", "a b c d e f g h i j k l m n o p",
    ]

    @pytest.mark.parametrize("label", LABELS)
    @pytest.mark.parametrize("width", [22.0, 30.0, 47.5, 80.0, 200.0])
    def test_safety(self, fitter, measurer, label, width):
        # Guaranteed whenever the bare ellipsis fits (21.6px at 12px)
        shown = fitter.truncate(label, width, 12)
        assert measurer.measure_width(shown, 12) <= width

    @pytest.mark.parametrize("label", LABELS)
    @pytest.mark.parametrize("width", [5.0, 22.0, 47.5, 200.0])
    def test_idempotence(self, fitter, label, width):
        once = fitter.truncate(label, width, 12)
        assert fitter.truncate(once, width, 12) == once

    def test_logarithmic_measurements(self, counting_surface):
        fitter = LabelFitter(TextMeasurer(counting_surface))
        text = "x" * 1000
        fitter.truncate(text, 100, 10)
        # one full-width check plus at most ceil(log2(n + 1)) probes
        assert len(counting_surface.calls) <= 1 + math.ceil(math.log2(len(text) + 1))
