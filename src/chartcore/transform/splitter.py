"""SplitEngine: bucket leaves into row groups; build trees from tabular data."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import replace
from typing import Any, Sequence

import pandas as pd

from ..core.validation import validate_frame_columns
from .hierarchy import HierarchyLeaf, HierarchyNode, Role, RoleValue


DEFAULT_GROUP = "All"


class SplitEngine:
    """Partitions leaves into row-group buckets (small-multiple panels).

    Bucket order follows the first-seen order of group keys in the
    leaves. Leaves without a group key land in the ``"All"`` bucket.
    """

    @staticmethod
    def bucket_leaves(
        leaves: Sequence[HierarchyLeaf],
    ) -> dict[str, list[HierarchyLeaf]]:
        """Partition leaves by group key, renumbering indices per bucket.

        Returns
        -------
        dict[str, list[HierarchyLeaf]]
            Ordered mapping of {group_key: [leaves]}, preserving the
            relative document order of leaves within each bucket.
        """
        groups: OrderedDict[str, list[HierarchyLeaf]] = OrderedDict()
        for leaf in leaves:
            key = leaf.group_key if leaf.group_key is not None else DEFAULT_GROUP
            bucket = groups.setdefault(key, [])
            bucket.append(replace(leaf, index=len(bucket)))
        return dict(groups)


def _is_true(value: Any) -> bool:
    if value is None or value is pd.NA:
        return False
    if isinstance(value, float) and value != value:
        return False
    return bool(value)


def tree_from_frame(
    df: pd.DataFrame,
    levels: str | list[str],
    group: str | None = None,
    subtotal: str | None = None,
    sort: str | None = None,
    role: Role = Role.COLUMN,
) -> HierarchyNode:
    """Build a grouped axis tree from tabular (pivot) data.

    Parameters
    ----------
    df : pd.DataFrame
        One row per data point; rows sharing a level prefix are merged.
    levels : str or list[str]
        Column name(s) forming the hierarchy, outermost first.
    group : str, optional
        Column whose value splits leaves into row groups (GROUP role on
        the deepest node).
    subtotal : str, optional
        Boolean column flagging synthetic subtotal rows.
    sort : str, optional
        Column with raw sort values for the deepest level (dates,
        numbers); defaults to the level values themselves.
    role : Role
        Role attached to the level values.

    Returns
    -------
    HierarchyNode
        Root node (``level=None``) whose children follow the first-seen
        order of each level's values.
    """
    if isinstance(levels, str):
        levels = [levels]
    extra = [c for c in (group, subtotal, sort) if c is not None]
    validate_frame_columns(df, list(levels) + extra)

    root = HierarchyNode(children=[])
    if not levels:
        return root

    # {prefix tuple: node}, so repeated prefixes reuse the first-seen node
    index: dict[tuple, HierarchyNode] = {}
    deepest = len(levels) - 1

    for _, row in df.iterrows():
        is_subtotal = subtotal is not None and _is_true(row[subtotal])
        group_value = row[group] if group is not None else None
        parent = root
        prefix: tuple = ()
        for depth, col in enumerate(levels):
            value = row[col]
            prefix = prefix + (value,)
            if depth == deepest:
                prefix = prefix + (group_value,)
            lookup = prefix + (is_subtotal,)
            node = index.get(lookup)
            if node is None:
                values = [RoleValue(role, value, label="" if pd.isna(value) else str(value))]
                if depth == deepest:
                    if sort is not None:
                        values = [RoleValue(role, row[sort], label=values[0].label)]
                    if group is not None:
                        values.append(RoleValue(Role.GROUP, group_value))
                node = HierarchyNode(
                    values=tuple(values),
                    children=None if depth == deepest else [],
                    is_subtotal=is_subtotal,
                    level=depth,
                )
                index[lookup] = node
                parent.children.append(node)
            parent = node
            if is_subtotal:
                break
    return root
