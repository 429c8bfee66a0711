# File: src/panel_topology/merging/opening_resolver.py
"""
Classification of merged rings and pre-existing openings.

The union of a group's outer loops is a flat set of rings. Each ring is
classified by nesting depth (see geometry.containment): rings inside an odd
number of others are holes of their direct container, the rest are outer
loops. Islands inside voids therefore become outer loops of their own.

Openings carried over from the input panels are then assigned to the
smallest outer loop strictly containing them. Holes of one outer loop that
overlap or nest are unioned so that no two openings of a panel overlap.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import networkx as nx

from ..elements.panel_types import Opening
from ..errors import DegenerateInputError
from ..geometry.containment import (
    classify_nested,
    coincident_equal_area,
    loops_overlap,
    smallest_container,
)
from ..geometry.kernel import union
from ..geometry.loops import Loop2, drop_collinear_vertices, loop_area, rings_match, signed_area

logger = logging.getLogger(__name__)


@dataclass
class ResolvedHole:
    """A hole ring, and the input opening it reproduces if any."""
    loop: Loop2
    opening: Optional[Opening] = None


@dataclass
class ResolvedOutline:
    """An outer ring with the holes assigned to it."""
    outer: Loop2
    holes: List[ResolvedHole] = field(default_factory=list)


@dataclass
class OpeningResolution:
    """Result of resolve_openings.

    Attributes:
        outlines: (outer, holes) pairs
        orphaned: Input openings no outer loop contains
        warnings: One message per orphaned opening
    """
    outlines: List[ResolvedOutline] = field(default_factory=list)
    orphaned: List[Opening] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def classify_rings(rings: Sequence[Loop2], tolerance: float) -> List[ResolvedOutline]:
    """Pair every outer ring with the hole rings it directly contains."""
    outer_indices, hole_parents = classify_nested(rings, tolerance)
    outlines = {index: ResolvedOutline(outer=list(rings[index])) for index in outer_indices}
    for hole, parent in hole_parents.items():
        outlines[parent].holes.append(ResolvedHole(loop=list(rings[hole])))
    return [outlines[index] for index in outer_indices]


def _same_ring(a: Sequence, b: Sequence, tolerance: float) -> bool:
    if rings_match(a, b, tolerance):
        return True
    return rings_match(
        drop_collinear_vertices(a, tolerance), drop_collinear_vertices(b, tolerance), tolerance
    )


def consolidate_holes(holes: Sequence[ResolvedHole], tolerance: float) -> List[ResolvedHole]:
    """Union holes that overlap or nest inside each other.

    Raises:
        DegenerateInputError: If two holes coincide with equal area.
    """
    graph = nx.Graph()
    graph.add_nodes_from(range(len(holes)))
    for i in range(len(holes)):
        for j in range(i + 1, len(holes)):
            a, b = holes[i].loop, holes[j].loop
            if coincident_equal_area(a, b, tolerance):
                raise DegenerateInputError(
                    "Two openings coincide with equal area",
                    {"area": loop_area(a), "vertices": list(a)[:10]},
                )
            if loops_overlap(a, b, tolerance):
                graph.add_edge(i, j)

    consolidated: List[ResolvedHole] = []
    for component in sorted(nx.connected_components(graph), key=min):
        members = [holes[i] for i in sorted(component)]
        if len(members) == 1:
            consolidated.append(members[0])
            continue

        rings = union([m.loop for m in members], tolerance)
        shells = [ring for ring in rings if signed_area(ring) > 0]
        if len(shells) < len(rings):
            logger.debug(f"Dropped {len(rings) - len(shells)} solid regions enclosed by merged openings")
        for shell in shells:
            source = next((m for m in members if _same_ring(shell, m.loop, tolerance)), None)
            consolidated.append(
                ResolvedHole(loop=shell, opening=source.opening if source else None)
            )
        logger.debug(f"Consolidated {len(members)} overlapping holes into {len(shells)}")
    return consolidated


def resolve_openings(
    union_rings: Sequence[Loop2],
    openings: Sequence[Tuple[Opening, Loop2]],
    tolerance: float,
) -> OpeningResolution:
    """Build (outer, holes) pairs from union rings and input openings.

    Args:
        union_rings: Rings returned by merge_outlines
        openings: Input openings paired with their loops in the same frame
        tolerance: Distance tolerance

    Returns:
        OpeningResolution with outlines and any orphaned openings
    """
    resolution = OpeningResolution(outlines=classify_rings(union_rings, tolerance))
    outers = [outline.outer for outline in resolution.outlines]

    for opening, loop in openings:
        owner = smallest_container(loop, outers, tolerance)
        if owner is None:
            message = (
                f"Opening '{opening.name or '<unnamed>'}' is not strictly inside any "
                f"merged outline; dropped from output"
            )
            logger.warning(message)
            resolution.orphaned.append(opening)
            resolution.warnings.append(message)
            continue
        resolution.outlines[owner].holes.append(ResolvedHole(loop=list(loop), opening=opening))

    for outline in resolution.outlines:
        outline.holes = consolidate_holes(outline.holes, tolerance)

    logger.debug(
        f"Resolved {len(resolution.outlines)} outlines with "
        f"{sum(len(o.holes) for o in resolution.outlines)} holes "
        f"({len(resolution.orphaned)} orphaned openings)"
    )
    return resolution

