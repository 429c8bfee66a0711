# File: src/panel_topology/merging/__init__.py
"""
Panel merging pipeline.

This module provides:
- Boolean union of coplanar outer loops
- Classification of merged rings and openings into (outer, holes) pairs
- Assembly of output panels from a guide panel's attributes
- The merge_panels entry point with group-local failure isolation

Example:
    >>> from panel_topology.merging import merge_panels
    >>> result = merge_panels([left, right])
    >>> len(result.panels)
    1
"""

from .outline_merger import (
    panel_outlines,
    merge_outlines,
)

from .opening_resolver import (
    ResolvedHole,
    ResolvedOutline,
    OpeningResolution,
    classify_rings,
    consolidate_holes,
    resolve_openings,
)

from .panel_assembler import (
    select_guide,
    assemble_panel,
    assemble_panels,
)

from .panel_merger import (
    coplanar_clusters,
    convertible_panels,
    merge_group,
    merge_panels,
)

__all__ = [
    # Outline union
    "panel_outlines",
    "merge_outlines",
    # Opening resolution
    "ResolvedHole",
    "ResolvedOutline",
    "OpeningResolution",
    "classify_rings",
    "consolidate_holes",
    "resolve_openings",
    # Assembly
    "select_guide",
    "assemble_panel",
    "assemble_panels",
    # Entry point
    "coplanar_clusters",
    "convertible_panels",
    "merge_group",
    "merge_panels",
]
