"""LeafReorderEngine: chronological / numeric ordering of column leaves."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Sequence

from ..core.sort_value import SortKey, compare_sort_keys
from .hierarchy import HierarchyLeaf


class LeafReorderEngine:
    """Sort leaves by their normalised per-level sort keys.

    Compares level 0 first and breaks ties level by level down to the
    deepest one; the final tie-break is the original leaf index, so the
    sort is stable. Keys of different kinds (number vs text) are treated
    as incomparable and also fall back to the original index.
    """

    @staticmethod
    def all_numeric(leaves: Sequence[HierarchyLeaf]) -> bool:
        """True if every leaf's deepest sort key is numeric (and there are leaves)."""
        if not leaves:
            return False
        return all(
            leaf.path and leaf.sort_key(len(leaf.path) - 1).is_numeric
            for leaf in leaves
        )

    @staticmethod
    def compute_order(
        leaves: Sequence[HierarchyLeaf],
        descending: Sequence[bool] | None = None,
    ) -> list[int]:
        """Return positions into ``leaves`` in sorted order.

        Parameters
        ----------
        leaves : leaves in document order
        descending : per-level direction flags; levels beyond the list
                     sort ascending
        """
        depth = max((len(leaf.path) for leaf in leaves), default=0)
        descending = list(descending or [])
        flags = [descending[lvl] if lvl < len(descending) else False for lvl in range(depth)]

        keys: list[list[SortKey]] = [
            [leaf.sort_key(lvl) for lvl in range(depth)] for leaf in leaves
        ]

        def compare(a: int, b: int) -> int:
            for lvl in range(depth):
                result = compare_sort_keys(keys[a][lvl], keys[b][lvl])
                if result is None:
                    break
                if result != 0:
                    return -result if flags[lvl] else result
            return (a > b) - (a < b)

        return sorted(range(len(leaves)), key=cmp_to_key(compare))
