"""Tests for sort-value based column leaf reordering."""

from datetime import date
from decimal import Decimal

from chartcore.transform.hierarchy import HierarchyBuilder, HierarchyLeaf
from chartcore.transform.reorder import LeafReorderEngine


def leaf(index, path, sort_values=None):
    path = tuple(path)
    return HierarchyLeaf(
        index=index,
        key=" • ".join(path),
        path=path,
        sort_values=tuple(sort_values) if sort_values is not None else path,
    )


class TestAllNumeric:
    def test_periods_are_numeric(self):
        leaves = [leaf(0, ["Mar 2023"]), leaf(1, ["2023-01"])]
        assert LeafReorderEngine.all_numeric(leaves)

    def test_any_text_disables(self):
        leaves = [leaf(0, ["Mar 2023"]), leaf(1, ["Total"])]
        assert not LeafReorderEngine.all_numeric(leaves)

    def test_no_leaves(self):
        assert not LeafReorderEngine.all_numeric([])

    def test_only_deepest_level_checked(self):
        leaves = [leaf(0, ["North", "Feb 2023"]), leaf(1, ["South", "Jan 2023"])]
        assert LeafReorderEngine.all_numeric(leaves)


class TestComputeOrder:
    def test_chronological(self):
        leaves = [leaf(0, ["Mar 2023"]), leaf(1, ["Jan 2023"]), leaf(2, ["2023-02"])]
        assert LeafReorderEngine.compute_order(leaves) == [1, 2, 0]

    def test_stable_for_equal_keys(self):
        leaves = [
            leaf(0, ["a"], [2]), leaf(1, ["b"], [1]),
            leaf(2, ["c"], [2]), leaf(3, ["d"], [1]),
        ]
        assert LeafReorderEngine.compute_order(leaves) == [1, 3, 0, 2]

    def test_descending_keeps_ties_stable(self):
        leaves = [
            leaf(0, ["a"], [2]), leaf(1, ["b"], [1]),
            leaf(2, ["c"], [2]), leaf(3, ["d"], [1]),
        ]
        assert LeafReorderEngine.compute_order(leaves, descending=[True]) == [0, 2, 1, 3]

    def test_levels_compared_in_order(self):
        leaves = [
            leaf(0, ["2024", "Q2"], [2024, 2]),
            leaf(1, ["2023", "Q4"], [2023, 4]),
            leaf(2, ["2024", "Q1"], [2024, 1]),
        ]
        assert LeafReorderEngine.compute_order(leaves) == [1, 2, 0]
        assert LeafReorderEngine.compute_order(leaves, descending=[False, True]) == [1, 0, 2]

    def test_kind_mismatch_falls_back_to_index(self):
        leaves = [leaf(0, ["five", "b"], [5, 3]), leaf(1, ["zeta", "a"], ["zeta", 1])]
        assert LeafReorderEngine.compute_order(leaves) == [0, 1]

    def test_dates(self):
        leaves = [
            leaf(0, ["Feb"], [date(2024, 2, 1)]),
            leaf(1, ["Jan"], [date(2024, 1, 1)]),
        ]
        assert LeafReorderEngine.compute_order(leaves) == [1, 0]

    def test_decimals_reorder_numerically(self):
        leaves = [leaf(0, ["10"], [Decimal("10")]), leaf(1, ["2"], [Decimal("2")])]
        assert LeafReorderEngine.all_numeric(leaves)
        assert LeafReorderEngine.compute_order(leaves) == [1, 0]

    def test_empty(self):
        assert LeafReorderEngine.compute_order([]) == []


class TestBuildColumnsReorders:
    def test_period_columns_sorted(self):
        root = HierarchyBuilder.from_paths([["Mar 2023"], ["Jan 2023"], ["Feb 2023"]])
        h = HierarchyBuilder().build_columns(root)
        assert h.leaf_keys == ["Jan 2023", "Feb 2023", "Mar 2023"]

    def test_descending(self):
        root = HierarchyBuilder.from_paths([["Jan 2023"], ["Mar 2023"], ["Feb 2023"]])
        h = HierarchyBuilder().build_columns(root, descending=[True])
        assert h.leaf_keys == ["Mar 2023", "Feb 2023", "Jan 2023"]

    def test_text_columns_keep_document_order(self):
        root = HierarchyBuilder.from_paths([["Pears"], ["Apples"]])
        h = HierarchyBuilder().build_columns(root)
        assert h.leaf_keys == ["Pears", "Apples"]
