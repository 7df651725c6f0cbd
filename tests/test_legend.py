"""Tests for legend position parsing, space reservation and placement."""

import pytest

from chartcore.layout.geometry import Rect
from chartcore.layout.legend_layout import (
    LEGEND_POSITIONS,
    LegendDock,
    LegendLayoutEngine,
    parse_legend_position,
)


REGIONS = ["North", "South", "East", "West"]


@pytest.fixture
def engine(measurer):
    return LegendLayoutEngine(measurer)


def nonzero_sides(margins):
    return [side for side, v in margins.to_dict().items() if v != 0]


class TestParsePosition:
    @pytest.mark.parametrize("name,expected", [
        ("topLeft", LegendDock("top", "start")),
        ("topCenter", LegendDock("top", "middle")),
        ("topRight", LegendDock("top", "end")),
        ("topLeftStacked", LegendDock("top", "start", stacked=True)),
        ("topRightStacked", LegendDock("top", "end", stacked=True)),
        ("centerLeft", LegendDock("left", "middle")),
        ("centerRight", LegendDock("right", "middle")),
        ("bottomLeft", LegendDock("bottom", "start")),
        ("bottomCenter", LegendDock("bottom", "middle")),
        ("bottomRight", LegendDock("bottom", "end")),
        ("top-left-stacked", LegendDock("top", "start", stacked=True)),
        ("bottom", LegendDock("bottom", "middle")),
        ("left", LegendDock("left", "middle")),
    ])
    def test_names(self, name, expected):
        assert parse_legend_position(name) == expected

    def test_every_host_name_parses(self):
        for name in LEGEND_POSITIONS:
            parse_legend_position(name)

    @pytest.mark.parametrize("name", ["centerLeftStacked", "leftStacked", "middle", "topMiddle", ""])
    def test_invalid(self, name):
        with pytest.raises(ValueError, match="Unknown legend position"):
            parse_legend_position(name)

    def test_dock_passthrough(self):
        dock = LegendDock("right", "start")
        assert parse_legend_position(dock) is dock

    def test_flow(self):
        assert not parse_legend_position("topLeft").flows_vertically
        assert parse_legend_position("topLeftStacked").flows_vertically
        assert parse_legend_position("centerRight").flows_vertically


class TestSizing:
    def test_row_height(self, engine):
        assert engine.row_height(11) == 17
        assert engine.row_height(6) == 14

    def test_column_width_clamped(self, engine, measurer):
        assert engine.column_width(["North"], 11) == 90
        # 30 chars at 11px exceed the text cap: 14 + 6 + 120 + 12
        assert engine.column_width(["x" * 30], 11) == 152
        assert LegendLayoutEngine(measurer, text_cap=200).column_width(["x" * 30], 11) == 160


class TestReserveOrdinal:
    def test_top_flows_horizontally(self, engine):
        r = engine.reserve_ordinal("topRight", REGIONS, 11, 400, 300)
        assert (r.rows, r.cols) == (1, 4)
        assert (r.block_width, r.block_height) == (360, 17)
        assert nonzero_sides(r.margins) == ["top"]
        assert r.margins.top == 17

    def test_top_wraps_rows(self, engine):
        r = engine.reserve_ordinal("bottomLeft", REGIONS, 11, 200, 300)
        assert (r.rows, r.cols) == (2, 2)
        assert nonzero_sides(r.margins) == ["bottom"]
        assert r.margins.bottom == 34

    def test_side_flows_vertically(self, engine):
        r = engine.reserve_ordinal("centerRight", REGIONS, 11, 400, 300)
        assert (r.rows, r.cols) == (4, 1)
        assert nonzero_sides(r.margins) == ["right"]
        assert r.margins.right == 90

    def test_side_wraps_columns(self, engine):
        r = engine.reserve_ordinal("centerLeft", REGIONS, 11, 400, 40)
        assert (r.rows, r.cols) == (2, 2)
        assert r.margins.left == 180

    def test_stacked_height_capped(self, engine):
        cats = [f"Item {i}" for i in range(12)]
        r = engine.reserve_ordinal("topLeftStacked", cats, 11, 600, 100, max_items=12)
        # 35% of 100px holds two 17px rows
        assert (r.rows, r.cols) == (2, 6)
        assert r.block_height <= 35
        assert nonzero_sides(r.margins) == ["top"]

    def test_max_items(self, engine):
        cats = [f"c{i}" for i in range(15)]
        r = engine.reserve_ordinal("topRight", cats, 11, 2000, 300)
        assert len(r.categories) == 10
        assert r.hidden_count == 5

    def test_no_categories(self, engine):
        r = engine.reserve_ordinal("topRight", [], 11, 400, 300)
        assert r.is_empty
        assert nonzero_sides(r.margins) == []

    def test_tiny_space_still_one_per_line(self, engine):
        r = engine.reserve_ordinal("top", REGIONS, 11, 10, 10)
        assert (r.rows, r.cols) == (4, 1)

    def test_to_dict(self, engine):
        d = engine.reserve_ordinal("topRight", REGIONS, 11, 400, 300).to_dict()
        assert d["dock"] == "top"
        assert d["align"] == "end"
        assert d["margins"]["top"] == 17
        assert d["hiddenCount"] == 0


class TestReserveGradient:
    def test_swatch_plus_label_row(self, engine):
        r = engine.reserve_gradient("bottomCenter", 11)
        assert (r.block_width, r.block_height) == (140, 27)
        assert nonzero_sides(r.margins) == ["bottom"]

    def test_left(self, engine):
        r = engine.reserve_gradient("centerLeft", 8)
        assert r.block_height == 26
        assert r.margins.left == 140


class TestPlacement:
    def test_default_frame(self, engine):
        assert engine.default_frame(424, 324) == Rect(12, 12, 400, 300)
        assert engine.default_frame(10, 10).width == 0

    def test_top_right_alignment(self, engine):
        r = engine.reserve_ordinal("topRight", REGIONS, 11, 400, 300)
        p = engine.place_ordinal(r, 424, 324, {"North": "#ff0000"})
        assert (p.origin.x, p.origin.y) == (52, 12)
        assert [(i.row, i.col, i.x) for i in p.items] == [
            (0, 0, 52), (0, 1, 142), (0, 2, 232), (0, 3, 322),
        ]
        assert p.items[0].color == "#ff0000"
        assert p.items[1].color == "#cccccc"

    @pytest.mark.parametrize("position,x", [("topLeft", 12), ("topCenter", 32), ("topRight", 52)])
    def test_horizontal_alignment(self, engine, position, x):
        r = engine.reserve_ordinal(position, REGIONS, 11, 400, 300)
        assert engine.origin(r, 424, 324).x == x

    def test_side_centered_vertically(self, engine):
        r = engine.reserve_ordinal("centerRight", REGIONS, 11, 400, 300)
        p = engine.place_ordinal(r, 424, 324, {})
        assert (p.origin.x, p.origin.y) == (322, 128)
        assert [(i.row, i.col, i.y) for i in p.items] == [
            (0, 0, 128), (1, 0, 145), (2, 0, 162), (3, 0, 179),
        ]

    def test_bottom(self, engine):
        r = engine.reserve_ordinal("bottomLeft", REGIONS, 11, 400, 300)
        assert engine.origin(r, 424, 324).y == 312 - 17

    def test_items_inside_frame(self, engine):
        frame = Rect(12, 12, 200, 300)
        cats = [f"Category {i}" for i in range(7)]
        r = engine.reserve_ordinal("topCenter", cats, 11, frame.width, frame.height)
        p = engine.place_ordinal(r, 224, 324, {}, frame=frame)
        for item in p.items:
            assert frame.x <= item.x
            assert item.x + r.col_width <= frame.right
            assert item.y + r.row_height <= frame.bottom

    def test_long_labels_truncated(self, engine, measurer):
        label = "Category with a very long name"
        r = engine.reserve_ordinal("topLeft", [label, "B"], 11, 600, 300)
        p = engine.place_ordinal(r, 624, 324, {})
        shown = p.items[0].display_label
        assert shown.endswith("...")
        assert measurer.measure_width(shown, 11) <= r.col_width - 32
        assert p.items[1].display_label == "B"

    def test_gradient(self, engine):
        r = engine.reserve_gradient("bottomCenter", 11)
        p = engine.place_gradient(r, 424, 324, "0", "100", ("#f7fbff", "#08519c"))
        assert (p.origin.x, p.origin.y) == (142, 285)
        assert p.gradient.swatch == Rect(142, 285, 140, 14)
        assert p.gradient.label_y == 312
        d = p.to_dict()
        assert d["gradient"]["minColor"] == "#f7fbff"
        assert d["items"] == []
