# File: src/panel_topology/__init__.py
"""
Planar panel topology engine.

Consolidates coplanar structural panels into a minimal set of topologically
consistent panels, and rebuilds a single panel's boundary loops from raw,
possibly overlapping edges while keeping the Release/Support metadata of the
original edges.

Example:
    >>> from panel_topology import merge_panels, reconcile_panel
    >>> result = merge_panels(panels, property_names=["property"])
    >>> cleaned = reconcile_panel(result.panels[0])
"""

from .errors import (
    PanelTopologyError,
    GeometryConversionError,
    DegenerateInputError,
    PipelineTimeoutError,
    PropertyEquivalenceWarning,
)

from .config import (
    DISTANCE_TOLERANCE,
    ANGLE_TOLERANCE,
    GroupingMode,
    ComparisonConfig,
    TopologyConfig,
)

from .elements import (
    CurveKind,
    DOFType,
    SurfacePropertyKind,
    Line,
    Polyline,
    Arc,
    Release,
    Support,
    ConstantThickness,
    Ribbed,
    Waffle,
    LoadingPanelProperty,
    Edge,
    Opening,
    Panel,
)

from .results import (
    TopologyFailure,
    MergeResult,
    ReconcileResult,
)

from .grouping import (
    PanelGroup,
    group_panels,
    has_mergeable_edge_metadata,
)

from .merging import merge_panels

from .reconcile import (
    reconcile_panel,
    reconcile_panels,
)

from .serialization import (
    panel_from_dict,
    panel_to_dict,
    serialize_panels,
    deserialize_panels,
    serialize_merge_result,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "PanelTopologyError",
    "GeometryConversionError",
    "DegenerateInputError",
    "PipelineTimeoutError",
    "PropertyEquivalenceWarning",
    # Configuration
    "DISTANCE_TOLERANCE",
    "ANGLE_TOLERANCE",
    "GroupingMode",
    "ComparisonConfig",
    "TopologyConfig",
    # Elements
    "CurveKind",
    "DOFType",
    "SurfacePropertyKind",
    "Line",
    "Polyline",
    "Arc",
    "Release",
    "Support",
    "ConstantThickness",
    "Ribbed",
    "Waffle",
    "LoadingPanelProperty",
    "Edge",
    "Opening",
    "Panel",
    # Results
    "TopologyFailure",
    "MergeResult",
    "ReconcileResult",
    # Grouping
    "PanelGroup",
    "group_panels",
    "has_mergeable_edge_metadata",
    # Entry points
    "merge_panels",
    "reconcile_panel",
    "reconcile_panels",
    # Serialization
    "panel_from_dict",
    "panel_to_dict",
    "serialize_panels",
    "deserialize_panels",
    "serialize_merge_result",
]
