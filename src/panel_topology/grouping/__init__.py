# File: src/panel_topology/grouping/__init__.py
"""
Property equivalence grouping.

Example:
    >>> from panel_topology.grouping import group_panels
    >>> result = group_panels(panels, property_names=["property"])
    >>> print(f"{len(result.groups)} groups ({result.mode.value})")
"""

from .property_grouper import (
    PanelGroup,
    GroupingResult,
    MergePredicate,
    has_mergeable_edge_metadata,
    group_pairwise,
    group_hashed,
    group_panels,
    resolve_property,
    split_known_properties,
)

__all__ = [
    "PanelGroup",
    "GroupingResult",
    "MergePredicate",
    "has_mergeable_edge_metadata",
    "group_pairwise",
    "group_hashed",
    "group_panels",
    "resolve_property",
    "split_known_properties",
]
