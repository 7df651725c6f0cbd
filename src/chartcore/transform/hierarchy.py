"""HierarchyBuilder: flatten grouped row/column trees into leaves and spans.

A matrix axis arrives as a tree of grouped nodes. Rendering needs the
leaves in display order plus, for every depth level, the runs of
consecutive leaves that share the same ancestor prefix (drawn as one
merged header cell). Subtotal nodes are synthetic aggregates and are
pruned together with their subtrees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Protocol, Sequence

from ..core.sort_value import SortKey, normalize_sort_value

logger = logging.getLogger(__name__)


LABEL_SEPARATOR = " • "
FALLBACK_KEY_PREFIX = "fallback"


class Role(Enum):
    """Semantic role of a value carried by a tree node."""

    ROW = "row"
    COLUMN = "column"
    GROUP = "group"


@dataclass(frozen=True)
class RoleValue:
    """One role-tagged value on a node, with an optional display label."""

    role: Role
    value: Any
    label: str | None = None

    @property
    def display(self) -> str:
        if self.label is not None:
            return self.label
        if self.value is None:
            return ""
        return str(self.value)


@dataclass
class HierarchyNode:
    """A node of a grouped axis tree.

    ``level`` is None for nodes that sit above the rendered hierarchy
    (typically the root); such nodes contribute no label and are never
    emitted as leaves.
    """

    values: tuple[RoleValue, ...] = ()
    children: list[HierarchyNode] | None = None
    is_subtotal: bool = False
    level: int | None = None


class NodeAdapter(Protocol):
    """Read access to externally owned tree nodes."""

    def children(self, node: Any) -> Sequence[Any] | None: ...

    def is_subtotal(self, node: Any) -> bool: ...

    def level(self, node: Any) -> int | None: ...

    def values(self, node: Any) -> Sequence[RoleValue]: ...


class _HierarchyNodeAdapter:
    def children(self, node: HierarchyNode) -> Sequence[HierarchyNode] | None:
        return node.children

    def is_subtotal(self, node: HierarchyNode) -> bool:
        return node.is_subtotal

    def level(self, node: HierarchyNode) -> int | None:
        return node.level

    def values(self, node: HierarchyNode) -> Sequence[RoleValue]:
        return node.values


DEFAULT_ADAPTER: NodeAdapter = _HierarchyNodeAdapter()


@dataclass(frozen=True)
class TraversalFrame:
    """A node reached during traversal, with its accumulated ancestry.

    ``path`` and ``sort_values`` include this node's own contribution.
    """

    node: Any
    level: int | None
    path: tuple[str, ...]
    sort_values: tuple[Any, ...]
    group_parts: tuple[str, ...]
    is_leaf: bool


def traverse(
    root: Any,
    visit: Callable[[TraversalFrame], None],
    adapter: NodeAdapter = DEFAULT_ADAPTER,
) -> int:
    """Depth-first walk in document order, pruning subtotal subtrees.

    Non-group values of a node are joined into one path label; group
    values are diverted into ``group_parts`` instead. Returns the number
    of subtotal nodes pruned.
    """
    if root is None:
        return 0

    pruned = 0
    stack: list[tuple[Any, tuple[str, ...], tuple[Any, ...], tuple[str, ...]]] = [
        (root, (), (), ()),
    ]
    while stack:
        node, path, sort_values, group_parts = stack.pop()
        if adapter.is_subtotal(node):
            pruned += 1
            continue

        level = adapter.level(node)
        if level is not None:
            labels: list[str] = []
            raw: Any = None
            for rv in adapter.values(node):
                if rv.role is Role.GROUP:
                    group_parts = group_parts + (rv.display,)
                else:
                    if not labels:
                        raw = rv.value
                    labels.append(rv.display)
            if labels:
                path = path + (LABEL_SEPARATOR.join(labels),)
                sort_values = sort_values + (raw,)

        children = adapter.children(node) or ()
        visit(TraversalFrame(
            node=node,
            level=level,
            path=path,
            sort_values=sort_values,
            group_parts=group_parts,
            is_leaf=not children,
        ))
        for child in reversed(children):
            stack.append((child, path, sort_values, group_parts))

    return pruned


@dataclass(frozen=True)
class HierarchyLeaf:
    """One rendered axis position."""

    index: int
    key: str
    path: tuple[str, ...]
    group_key: str | None = None
    sort_values: tuple[Any, ...] = ()

    def sort_key(self, level: int) -> SortKey:
        """Normalised sort key for ``level``; missing levels sort as empty text."""
        label = self.path[level] if level < len(self.path) else ""
        raw = self.sort_values[level] if level < len(self.sort_values) else None
        return normalize_sort_value(raw, label)


@dataclass(frozen=True)
class AxisSpan:
    """One merged header cell at one hierarchy level."""

    level: int
    start_leaf_index: int
    end_leaf_index: int   # inclusive
    label: str
    key: str

    @property
    def leaf_count(self) -> int:
        return self.end_leaf_index - self.start_leaf_index + 1

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "start": self.start_leaf_index,
            "end": self.end_leaf_index,
            "label": self.label,
            "key": self.key,
        }


@dataclass(frozen=True)
class AxisHierarchy:
    """Leaves and per-level spans for one axis (or one row group)."""

    depth: int
    leaf_keys: list[str]
    leaf_paths: list[tuple[str, ...]]
    spans_by_level: list[list[AxisSpan]]
    key_to_path: dict[str, tuple[str, ...]] = field(default_factory=dict)
    group_key: str | None = None

    @classmethod
    def empty(cls, group_key: str | None = None) -> AxisHierarchy:
        return cls(
            depth=0, leaf_keys=[], leaf_paths=[], spans_by_level=[],
            key_to_path={}, group_key=group_key,
        )

    @property
    def leaf_count(self) -> int:
        return len(self.leaf_keys)

    def spans_at(self, level: int) -> list[AxisSpan]:
        if not 0 <= level < self.depth:
            raise IndexError(
                f"Level {level} out of range for hierarchy of depth {self.depth}."
            )
        return self.spans_by_level[level]

    def leaf_labels(self) -> list[str]:
        """Deepest label of every leaf, in display order."""
        return [path[-1] if path else key for key, path in zip(self.leaf_keys, self.leaf_paths)]

    def to_dict(self) -> dict:
        """Serialize for JSON transfer to the rendering layer."""
        return {
            "depth": self.depth,
            "groupKey": self.group_key,
            "leafKeys": list(self.leaf_keys),
            "leafPaths": [list(p) for p in self.leaf_paths],
            "spansByLevel": [
                [span.to_dict() for span in spans] for spans in self.spans_by_level
            ],
        }


def _padded(path: Sequence[str], depth: int) -> tuple[str, ...]:
    return tuple(path) + ("",) * (depth - len(path))


def build_spans(
    leaf_paths: Sequence[Sequence[str]],
    depth: int | None = None,
) -> list[list[AxisSpan]]:
    """Run-length encode leaf path prefixes, one span list per level.

    A new span starts at level L whenever the whole prefix ``path[0..L]``
    changes, so equal labels under different ancestors never merge.
    Missing levels count as empty-string labels.
    """
    if depth is None:
        depth = max((len(p) for p in leaf_paths), default=0)
    padded = [_padded(p, depth) for p in leaf_paths]

    spans_by_level: list[list[AxisSpan]] = []
    for level in range(depth):
        spans: list[AxisSpan] = []
        run_start = 0
        run_prefix: tuple[str, ...] | None = None
        for i, path in enumerate(padded):
            prefix = path[: level + 1]
            if prefix != run_prefix:
                if run_prefix is not None:
                    spans.append(_span(level, run_start, i - 1, run_prefix))
                run_start = i
                run_prefix = prefix
        if run_prefix is not None:
            spans.append(_span(level, run_start, len(padded) - 1, run_prefix))
        spans_by_level.append(spans)
    return spans_by_level


def _span(level: int, start: int, end: int, prefix: tuple[str, ...]) -> AxisSpan:
    return AxisSpan(
        level=level,
        start_leaf_index=start,
        end_leaf_index=end,
        label=prefix[-1],
        key=LABEL_SEPARATOR.join(prefix),
    )


class HierarchyBuilder:
    """Builds :class:`AxisHierarchy` objects from grouped axis trees.

    Usage::

        builder = HierarchyBuilder()
        columns = builder.build_columns(column_root, descending=[False, True])
        row_groups = builder.build_rows(row_root)   # {group_key: AxisHierarchy}
    """

    def __init__(self, adapter: NodeAdapter = DEFAULT_ADAPTER) -> None:
        self._adapter = adapter

    def collect_leaves(self, root: Any) -> list[HierarchyLeaf]:
        """Leaves of ``root`` in document order, subtotals excluded."""
        leaves: list[HierarchyLeaf] = []

        def visit(frame: TraversalFrame) -> None:
            if not frame.is_leaf or frame.level is None:
                return
            n = len(leaves)
            key = LABEL_SEPARATOR.join(frame.path) if frame.path else f"{FALLBACK_KEY_PREFIX}{n}"
            group_key = LABEL_SEPARATOR.join(frame.group_parts) if frame.group_parts else None
            leaves.append(HierarchyLeaf(
                index=n,
                key=key,
                path=frame.path,
                group_key=group_key,
                sort_values=frame.sort_values,
            ))

        pruned = traverse(root, visit, self._adapter)
        if pruned:
            logger.debug("Pruned %d subtotal node(s); %d leaves remain", pruned, len(leaves))
        return leaves

    @staticmethod
    def build(
        leaves: Sequence[HierarchyLeaf],
        group_key: str | None = None,
    ) -> AxisHierarchy:
        """Assemble an :class:`AxisHierarchy` from leaves in display order."""
        if not leaves:
            return AxisHierarchy.empty(group_key)
        depth = max(len(leaf.path) for leaf in leaves)
        leaf_paths = [leaf.path for leaf in leaves]
        return AxisHierarchy(
            depth=depth,
            leaf_keys=[leaf.key for leaf in leaves],
            leaf_paths=leaf_paths,
            spans_by_level=build_spans(leaf_paths, depth),
            key_to_path={leaf.key: leaf.path for leaf in leaves},
            group_key=group_key,
        )

    def build_columns(
        self,
        root: Any,
        descending: Sequence[bool] | None = None,
    ) -> AxisHierarchy:
        """Column hierarchy, reordered when every leaf's deepest value is numeric."""
        from .reorder import LeafReorderEngine

        leaves = self.collect_leaves(root)
        if LeafReorderEngine.all_numeric(leaves):
            order = LeafReorderEngine.compute_order(leaves, descending)
            if order != list(range(len(leaves))):
                logger.debug("Reordered %d column leaves by sort value", len(leaves))
            leaves = [leaves[i] for i in order]
        return self.build(leaves)

    def build_rows(self, root: Any) -> dict[str, AxisHierarchy]:
        """One row hierarchy per group bucket, in first-seen group order."""
        from .splitter import SplitEngine

        buckets = SplitEngine.bucket_leaves(self.collect_leaves(root))
        return {
            name: self.build(leaves, group_key=name)
            for name, leaves in buckets.items()
        }

    @staticmethod
    def from_paths(
        paths: Iterable[Sequence[Any]],
        role: Role = Role.COLUMN,
    ) -> HierarchyNode:
        """Build a tree whose leaves carry the given label paths, in order.

        Consecutive paths sharing a prefix share the same ancestor nodes.
        """
        root = HierarchyNode(children=[])
        for path in paths:
            parent = root
            for level, value in enumerate(path):
                siblings = parent.children
                last = siblings[-1] if siblings else None
                if (
                    last is not None
                    and last.level == level
                    and last.values
                    and last.values[0].value == value
                    and last.children is not None
                    and level < len(path) - 1
                ):
                    parent = last
                    continue
                node = HierarchyNode(
                    values=(RoleValue(role, value),),
                    children=[] if level < len(path) - 1 else None,
                    level=level,
                )
                siblings.append(node)
                parent = node
        return root
