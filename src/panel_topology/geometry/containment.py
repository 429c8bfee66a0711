# File: src/panel_topology/geometry/containment.py
"""
Containment classification of planar loops.

Loops are classified by nesting depth: a loop enclosed by an even number of
other loops is an outer boundary, an odd number makes it a hole of its
direct (smallest) container. Islands inside holes are therefore outer
boundaries of their own.

Coincident loops are tie-broken by area: the smaller one is treated as
contained in the larger. Coincident loops of equal area cannot be ordered
and raise DegenerateInputError.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from ..errors import DegenerateInputError
from .kernel import loops_coincide, strictly_contains
from .loops import Loop2, Point2, loop_area

logger = logging.getLogger(__name__)


def coincident_equal_area(
    a: Sequence[Point2], b: Sequence[Point2], tolerance: float
) -> bool:
    """Check if two loops coincide and enclose the same area."""
    if not loops_coincide(a, b, tolerance):
        return False
    return abs(loop_area(a) - loop_area(b)) <= tolerance * tolerance


def contains(
    outer: Sequence[Point2], inner: Sequence[Point2], tolerance: float
) -> bool:
    """Strict containment with the coincident-loop tie-break applied.

    Raises:
        DegenerateInputError: If the loops coincide with equal area.
    """
    if loops_coincide(outer, inner, tolerance):
        if coincident_equal_area(outer, inner, tolerance):
            raise DegenerateInputError(
                "Coincident loops of equal area cannot be classified",
                {"area": loop_area(outer), "vertices": list(outer)[:10]},
            )
        return loop_area(inner) < loop_area(outer)
    return strictly_contains(outer, inner, tolerance)


def loops_overlap(a: Sequence[Point2], b: Sequence[Point2], tolerance: float) -> bool:
    """Check if two loops share interior area (edge or point contact excluded)."""
    first, second = Polygon(a), Polygon(b)
    if not first.intersects(second):
        return False
    return first.intersection(second).area > tolerance * tolerance


def parents(loops: Sequence[Sequence[Point2]], tolerance: float) -> List[Optional[int]]:
    """Index of the smallest loop containing each loop, or None."""
    areas = [loop_area(loop) for loop in loops]
    result: List[Optional[int]] = []
    for j, inner in enumerate(loops):
        best: Optional[int] = None
        for i, outer in enumerate(loops):
            if i == j or areas[i] + tolerance < areas[j]:
                continue
            if contains(outer, inner, tolerance):
                if best is None or areas[i] < areas[best]:
                    best = i
        result.append(best)
    return result


def classify_nested(
    loops: Sequence[Sequence[Point2]], tolerance: float
) -> Tuple[List[int], Dict[int, int]]:
    """Split loops into outer boundaries and holes by nesting depth.

    Returns:
        (outer indices, {hole index: index of its outer loop})
    """
    parent = parents(loops, tolerance)
    outers: List[int] = []
    holes: Dict[int, int] = {}
    for index in range(len(loops)):
        depth = 0
        cursor = parent[index]
        while cursor is not None and depth <= len(loops):
            depth += 1
            cursor = parent[cursor]
        if depth % 2 == 0:
            outers.append(index)
        else:
            holes[index] = parent[index]
    logger.debug(f"Classified {len(loops)} loops: {len(outers)} outer, {len(holes)} holes")
    return outers, holes


def smallest_container(
    loop: Sequence[Point2], outers: Sequence[Sequence[Point2]], tolerance: float
) -> Optional[int]:
    """Index of the smallest outer loop strictly containing ``loop``."""
    best: Optional[int] = None
    best_area = 0.0
    for index, outer in enumerate(outers):
        if contains(outer, loop, tolerance):
            outer_area = loop_area(outer)
            if best is None or outer_area < best_area:
                best, best_area = index, outer_area
    return best


def distribute_holes(
    outers: Sequence[Loop2], holes: Sequence[Loop2], tolerance: float
) -> Tuple[List[List[int]], List[int]]:
    """Assign each hole to the smallest outer loop strictly containing it.

    Returns:
        (hole indices per outer loop, indices of holes no outer contains)
    """
    assigned: List[List[int]] = [[] for _ in outers]
    orphans: List[int] = []
    for index, hole in enumerate(holes):
        owner = smallest_container(hole, outers, tolerance)
        if owner is None:
            orphans.append(index)
        else:
            assigned[owner].append(index)
    return assigned, orphans
