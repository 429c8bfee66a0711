# File: src/panel_topology/geometry/kernel.py
"""
Geometry kernel for planar loop topology.

Binds the boolean, containment and segment operations needed by the merge
and reconciliation pipelines to shapely (GEOS), and the endpoint-adjacency
walk that chains segments into loops to networkx. Every operation works on
2D loops in a panel's plane frame and takes the distance tolerance used to
snap coordinates.

Operations:
    union: Boolean union of loops, returned as a flat list of rings
    difference: Boolean difference of one loop and a set of loops
    strictly_contains: Containment without shared boundary stretches
    loops_coincide: Two rings trace the same boundary within tolerance
    intersections: All crossing/touching points of a segment pool
    split_at: Split one segment at the points lying on it
    join_into_loops: Chain segments into closed simple loops
    area: Unsigned loop area
"""

import logging
from typing import Iterable, List, Sequence

import networkx as nx
import shapely
from shapely.geometry import LinearRing, LineString, Point, Polygon
from shapely.strtree import STRtree
from shapely.validation import explain_validity

from ..errors import DegenerateInputError
from .loops import (
    Loop2,
    Point2,
    PointRegistry,
    Segment2,
    loop_area,
    orient,
    point_to_segment_distance,
    points_close,
    remove_duplicate_vertices,
    strip_closing_point,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Conversion Helpers
# =============================================================================


def loop_to_polygon(loop: Sequence[Point2], tolerance: float) -> Polygon:
    """Build a valid shapely polygon from a loop.

    Raises:
        DegenerateInputError: If the loop has fewer than three distinct
            vertices or is self-intersecting.
    """
    pts = remove_duplicate_vertices(loop, tolerance)
    if len(pts) < 3:
        raise DegenerateInputError(
            f"Loop has {len(pts)} distinct vertices; at least 3 are required",
            {"vertex_count": len(pts)},
        )
    polygon = Polygon(pts)
    if not polygon.is_valid:
        raise DegenerateInputError(
            f"Loop is not a simple polygon: {explain_validity(polygon)}",
            {"vertices": pts[:10]},
        )
    return polygon


def polygon_rings(geometry, tolerance: float) -> List[Loop2]:
    """Flatten polygonal geometry into rings.

    Exterior rings are returned counter-clockwise and interior rings
    clockwise. Rings that collapse below tolerance are skipped.
    """
    rings: List[Loop2] = []
    if geometry is None or geometry.is_empty:
        return rings

    if geometry.geom_type == "Polygon":
        polygons = [geometry]
    elif hasattr(geometry, "geoms"):
        polygons = [g for g in geometry.geoms if g.geom_type in ("Polygon", "MultiPolygon")]
        flattened = []
        for g in polygons:
            flattened.extend(g.geoms if g.geom_type == "MultiPolygon" else [g])
        polygons = flattened
    else:
        return rings

    min_area = tolerance * tolerance
    for polygon in polygons:
        if polygon.is_empty:
            continue
        shell = remove_duplicate_vertices(strip_closing_point(polygon.exterior.coords), tolerance)
        if len(shell) < 3 or loop_area(shell) <= min_area:
            continue
        rings.append(orient(shell, ccw=True))
        for interior in polygon.interiors:
            hole = remove_duplicate_vertices(strip_closing_point(interior.coords), tolerance)
            if len(hole) >= 3 and loop_area(hole) > min_area:
                rings.append(orient(hole, ccw=False))
    return rings


def _intersection_points(geometry) -> List[Point2]:
    """Points of an intersection result (collinear overlaps give end points)."""
    if geometry.is_empty:
        return []
    kind = geometry.geom_type
    if kind == "Point":
        return [(geometry.x, geometry.y)]
    if kind in ("LineString", "LinearRing"):
        coords = list(geometry.coords)
        return [tuple(coords[0][:2]), tuple(coords[-1][:2])]
    points: List[Point2] = []
    for part in getattr(geometry, "geoms", []):
        points.extend(_intersection_points(part))
    return points


# =============================================================================
# Boolean Operations
# =============================================================================


def union(loops: Iterable[Sequence[Point2]], tolerance: float) -> List[Loop2]:
    """Boolean union of closed loops.

    Overlapping and edge-adjacent loops coalesce; shared internal edges are
    not retained. Holes enclosed by the union (e.g. a courtyard surrounded by
    loops) are returned as clockwise rings alongside the outer rings.
    """
    polygons = [loop_to_polygon(loop, tolerance) for loop in loops]
    if not polygons:
        return []
    merged = shapely.union_all(polygons, grid_size=tolerance)
    rings = polygon_rings(merged, tolerance)
    logger.debug(f"Union of {len(polygons)} loops produced {len(rings)} rings")
    return rings


def difference(
    loop: Sequence[Point2], others: Iterable[Sequence[Point2]], tolerance: float
) -> List[Loop2]:
    """Boolean difference of ``loop`` minus the union of ``others``."""
    base = loop_to_polygon(loop, tolerance)
    cutters = [loop_to_polygon(other, tolerance) for other in others]
    if cutters:
        cutter = shapely.union_all(cutters, grid_size=tolerance)
        result = shapely.difference(base, cutter, grid_size=tolerance)
    else:
        result = shapely.set_precision(base, tolerance)
    return polygon_rings(result, tolerance)


# =============================================================================
# Containment
# =============================================================================


def loops_coincide(a: Sequence[Point2], b: Sequence[Point2], tolerance: float) -> bool:
    """Check if two loops trace the same boundary within tolerance."""
    ring_a = LinearRing(a)
    ring_b = LinearRing(b)
    return ring_a.hausdorff_distance(ring_b) <= tolerance


def strictly_contains(
    outer: Sequence[Point2], inner: Sequence[Point2], tolerance: float
) -> bool:
    """Check if ``outer`` encloses ``inner`` without sharing boundary.

    The inner loop must be covered by the outer loop grown by tolerance,
    and the two boundaries may meet at isolated points only. Coincident
    loops and loops sharing an edge stretch are not contained.
    """
    if loops_coincide(outer, inner, tolerance):
        return False

    outer_polygon = Polygon(outer)
    inner_polygon = Polygon(inner)
    if not outer_polygon.buffer(tolerance, join_style="mitre").covers(inner_polygon):
        return False

    outer_ring = shapely.set_precision(outer_polygon.exterior, tolerance)
    inner_ring = shapely.set_precision(inner_polygon.exterior, tolerance)
    shared = outer_ring.intersection(inner_ring)
    return shared.length <= tolerance


def area(loop: Sequence[Point2]) -> float:
    """Unsigned area enclosed by a loop."""
    return loop_area(loop)


# =============================================================================
# Segment Operations
# =============================================================================


def intersections(segments: Sequence[Segment2], tolerance: float) -> List[Point2]:
    """All points where segments cross, touch or overlap.

    Includes proper crossings, collinear overlap end points and end points
    lying on the interior of another segment within tolerance (T-junctions).
    """
    lines = [LineString(segment) for segment in segments]
    if len(lines) < 2:
        return []

    tree = STRtree(lines)
    found: List[Point2] = []
    for i, line in enumerate(lines):
        for j in tree.query(line, predicate="dwithin", distance=tolerance):
            j = int(j)
            if j <= i:
                continue
            other = lines[j]
            found.extend(_intersection_points(line.intersection(other)))
            for p in segments[j]:
                if line.distance(Point(p)) <= tolerance:
                    found.append(tuple(p))
            for p in segments[i]:
                if other.distance(Point(p)) <= tolerance:
                    found.append(tuple(p))
    return found


def split_at(segment: Segment2, points: Iterable[Point2], tolerance: float) -> List[Segment2]:
    """Split a segment at every point lying on it within tolerance.

    Points within tolerance of either end point are ignored, so a segment
    with nothing to split is returned unchanged as a one-item list.
    """
    start, end = segment
    cuts = []
    for p in points:
        dist, t = point_to_segment_distance(p, segment)
        if dist > tolerance:
            continue
        if points_close(p, start, tolerance) or points_close(p, end, tolerance):
            continue
        cuts.append((t, p))

    if not cuts:
        return [segment]

    cuts.sort()
    chain = [start]
    for _, p in cuts:
        if not points_close(chain[-1], p, tolerance):
            chain.append(p)
    if points_close(chain[-1], end, tolerance):
        chain.pop()
    chain.append(end)
    return [(chain[k], chain[k + 1]) for k in range(len(chain) - 1)]


def _split_closed_walk(walk: List[Point2]) -> List[Loop2]:
    """Split a closed vertex walk into simple cycles at repeated vertices."""
    loops: List[Loop2] = []
    stack: List[Point2] = []
    position = {}
    for node in walk + [walk[0]]:
        if node in position:
            start = position[node]
            cycle = stack[start:]
            for visited in cycle[1:]:
                del position[visited]
            del stack[start + 1:]
            if len(cycle) >= 3:
                loops.append(cycle)
            else:
                logger.debug(f"Dropping degenerate 2-vertex cycle at {node}")
        else:
            position[node] = len(stack)
            stack.append(node)
    return loops


def join_into_loops(segments: Iterable[Segment2], tolerance: float) -> List[Loop2]:
    """Chain segments into closed loops by end point adjacency.

    Each connected component of the endpoint graph must have even degree at
    every vertex; its Eulerian circuit is split into simple loops wherever
    it revisits a vertex (loops touching at a point separate there).

    Raises:
        DegenerateInputError: If a component contains an open chain.
    """
    registry = PointRegistry(tolerance)
    graph = nx.MultiGraph()
    for a, b in segments:
        a, b = registry.snap(a), registry.snap(b)
        if a == b:
            continue
        graph.add_edge(a, b)

    loops: List[Loop2] = []
    for component in sorted(nx.connected_components(graph), key=min):
        subgraph = graph.subgraph(component)
        odd = sorted(node for node, degree in subgraph.degree() if degree % 2)
        if odd:
            raise DegenerateInputError(
                f"Edges do not form closed loops: {len(odd)} dangling end points",
                {"dangling_points": odd[:10]},
            )
        walk = [u for u, _ in nx.eulerian_circuit(subgraph, source=min(component))]
        loops.extend(_split_closed_walk(walk))

    logger.debug(f"Joined {graph.number_of_edges()} segments into {len(loops)} loops")
    return loops
