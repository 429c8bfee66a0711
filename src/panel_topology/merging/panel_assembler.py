# File: src/panel_topology/merging/panel_assembler.py
"""
Assembly of output panels from resolved outlines.

Each (outer, holes) pair becomes a new Panel carrying the non-geometric
attributes of a guide panel: property, name and custom data. The guide is
the caller's choice or, by default, the first panel of the group in input
order. The default is kept for compatibility and means that reordering the
input can change which attributes a merged panel carries.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from ..elements.panel_types import Opening, Panel
from ..errors import DegenerateInputError
from ..reconcile.edge_matcher import EdgeCatalog, rebuild_loop_edges, rebuild_opening
from .opening_resolver import ResolvedHole, ResolvedOutline

logger = logging.getLogger(__name__)


def select_guide(panels: Sequence[Panel], guide: Optional[Panel] = None) -> Panel:
    """Panel whose non-geometric attributes the merge result inherits."""
    if guide is not None:
        return guide
    if not panels:
        raise DegenerateInputError("Cannot select a guide panel from an empty group")
    return panels[0]


def _hole_opening(hole: ResolvedHole, catalog: EdgeCatalog, merge_collinear: bool) -> Opening:
    if hole.opening is not None:
        return replace(hole.opening, custom_data=dict(hole.opening.custom_data))
    return rebuild_opening(hole.loop, catalog, merge_collinear=merge_collinear)


def assemble_panel(
    outline: ResolvedOutline,
    guide: Panel,
    catalog: EdgeCatalog,
    merge_collinear: bool = True,
) -> Panel:
    """Build one panel from an outline, copying the guide's attributes."""
    external_edges = rebuild_loop_edges(
        outline.outer, catalog, hole=False, merge_collinear=merge_collinear
    )
    openings = tuple(_hole_opening(hole, catalog, merge_collinear) for hole in outline.holes)
    return replace(
        guide,
        external_edges=external_edges,
        openings=openings,
        custom_data=dict(guide.custom_data),
    )


def assemble_panels(
    outlines: Sequence[ResolvedOutline],
    guide: Panel,
    catalog: EdgeCatalog,
    merge_collinear: bool = True,
) -> List[Panel]:
    """Build output panels for every resolved outline.

    Args:
        outlines: Resolved (outer, holes) pairs in the catalog's frame
        guide: Panel supplying property, name and custom data
        catalog: Original edges for metadata inheritance
        merge_collinear: Fuse collinear edges with identical metadata

    Returns:
        New panels, one per outline
    """
    panels = [assemble_panel(o, guide, catalog, merge_collinear) for o in outlines]
    logger.debug(
        f"Assembled {len(panels)} panels using guide '{guide.name or '<unnamed>'}'"
    )
    return panels
