# File: src/panel_topology/merging/outline_merger.py
"""Boolean union of the outer loops of a coplanar panel group."""

import logging
from typing import List, Sequence

from ..elements.edge_geometry import panel_outline
from ..elements.panel_types import Panel
from ..geometry.kernel import union
from ..geometry.loops import Loop2, signed_area
from ..geometry.plane import PlaneFrame

logger = logging.getLogger(__name__)


def panel_outlines(panels: Sequence[Panel], frame: PlaneFrame, tolerance: float) -> List[Loop2]:
    """Outer loops of panels in a shared plane frame."""
    return [panel_outline(panel, frame, tolerance) for panel in panels]


def merge_outlines(loops: Sequence[Loop2], tolerance: float) -> List[Loop2]:
    """Union outer loops into the minimal covering set of rings.

    Disjoint loops come back one ring each; overlapping or edge-adjacent
    loops coalesce and their shared edges disappear. Voids enclosed by the
    union are returned as clockwise rings for the opening resolver.

    Args:
        loops: Outer loops in one plane frame
        tolerance: Distance tolerance

    Returns:
        Counter-clockwise outer rings and clockwise void rings
    """
    rings = union(loops, tolerance)
    outer_count = sum(1 for ring in rings if signed_area(ring) > 0)
    logger.debug(
        f"Merged {len(loops)} outlines into {outer_count} outer rings "
        f"and {len(rings) - outer_count} voids"
    )
    return rings
