"""chartcore: hierarchy flattening, label fitting and legend layout for matrix charts."""

from ._version import __version__
from .core.settings import RenderSettings
from .core.sort_value import SortKey, normalize_sort_value
from .layout.composer import LayoutComposer, RenderPlan
from .layout.label_layout import LabelLayoutEngine, RotationResult, RotationScheduler
from .layout.legend_layout import LegendLayoutEngine, parse_legend_position
from .text.fitter import LabelFitter
from .text.measure import AggSurface, TextMeasurer, create_measurer
from .transform.hierarchy import (
    AxisHierarchy,
    AxisSpan,
    HierarchyBuilder,
    HierarchyNode,
    Role,
    RoleValue,
    traverse,
)
from .transform.splitter import tree_from_frame


__all__ = [
    "__version__",
    "RenderSettings",
    "SortKey",
    "normalize_sort_value",
    "LayoutComposer",
    "RenderPlan",
    "LabelLayoutEngine",
    "RotationResult",
    "RotationScheduler",
    "LegendLayoutEngine",
    "parse_legend_position",
    "LabelFitter",
    "AggSurface",
    "TextMeasurer",
    "create_measurer",
    "AxisHierarchy",
    "AxisSpan",
    "HierarchyBuilder",
    "HierarchyNode",
    "Role",
    "RoleValue",
    "traverse",
    "tree_from_frame",
]
