# File: src/panel_topology/reconcile/edge_matcher.py
"""
Re-attachment of edge metadata to regenerated loops.

Boolean operations return bare 2D rings. This module turns a ring back into
a tuple of Edges, inheriting Release/Support from the original edges the
ring's segments came from:

1. A ring tracing an original loop vertex for vertex reuses that loop's
   edges unchanged.
2. Otherwise the ring is split at every original vertex lying on it and
   each piece is matched against the original opening edges, then the
   external edges. A piece matches an edge when its end points coincide
   with the edge's (either orientation) or it lies along the edge.
3. Consecutive collinear pieces with the same metadata are fused again.

Unmatched pieces become edges with unset (free) metadata.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from ..elements.edge_geometry import edge_points, edge_segments_2d, loop_from_edges
from ..elements.panel_types import Edge, Line, Opening, Panel
from ..errors import GeometryConversionError
from ..geometry.kernel import split_at
from ..geometry.loops import (
    Loop2,
    Point2,
    PointRegistry,
    Segment2,
    drop_collinear_vertices,
    loop_segments,
    orient,
    point_to_segment_distance,
    points_close,
    ring_alignment,
    rotate_to_min,
    segments_collinear,
)
from ..geometry.plane import PlaneFrame
from ..utils.logging_config import TRACE_LEVEL

logger = logging.getLogger(__name__)


@dataclass
class SourceLoop:
    """An original loop with its edges, in plane frame coordinates."""
    ring: Loop2
    edges: Tuple[Edge, ...]
    opening: Optional[Opening] = None


@dataclass
class EdgeCatalog:
    """Original edges of one or more coplanar panels.

    Attributes:
        frame: Plane frame the 2D coordinates are expressed in
        tolerance: Distance tolerance for every match
        loops: Original outer and opening loops
        opening_segments: (segment, edge) pairs of opening edges
        external_segments: (segment, edge) pairs of external edges
    """
    frame: PlaneFrame
    tolerance: float
    loops: List[SourceLoop] = field(default_factory=list)
    opening_segments: List[Tuple[Segment2, Edge]] = field(default_factory=list)
    external_segments: List[Tuple[Segment2, Edge]] = field(default_factory=list)

    def __post_init__(self):
        self._vertices = PointRegistry(self.tolerance)
        self._world = {}

    @classmethod
    def from_panels(
        cls, panels: Iterable[Panel], frame: PlaneFrame, tolerance: float
    ) -> "EdgeCatalog":
        catalog = cls(frame=frame, tolerance=tolerance)
        for panel in panels:
            catalog.add_loop(panel.external_edges)
            for opening in panel.openings:
                catalog.add_loop(opening.edges, opening=opening)
        return catalog

    def add_edges(self, edges: Sequence[Edge], opening: bool = False) -> None:
        """Register original edges for segment matching.

        Raises:
            GeometryConversionError: If an edge is curved or off the plane.
        """
        target = self.opening_segments if opening else self.external_segments
        for edge in edges:
            for point in edge_points(edge):
                local = self._vertices.snap(self.frame.to_local(point))
                self._world.setdefault(local, tuple(point))
            for segment in edge_segments_2d(edge, self.frame, self.tolerance):
                target.append((segment, edge))

    def add_loop(self, edges: Sequence[Edge], opening: Optional[Opening] = None) -> None:
        """Register a closed loop of original edges.

        Edges that do not chain into a closed loop (raw, overlapping input to
        the reconciler) are still registered for segment matching, but the
        loop cannot be reused as a whole.
        """
        self.add_edges(edges, opening=opening is not None)
        try:
            ring = loop_from_edges(edges, self.frame, self.tolerance)
        except GeometryConversionError as error:
            logger.debug(f"Original edges do not form one loop: {error.message}")
            return
        self.loops.append(SourceLoop(ring=ring, edges=tuple(edges), opening=opening))

    @property
    def vertices(self) -> List[Point2]:
        return self._vertices.points

    def world(self, point: Point2):
        """3D point for a frame point, preferring an original vertex."""
        existing = self._vertices.find(point)
        if existing is not None:
            return self._world[existing]
        return self.frame.to_world(point)

    def source_loop(self, ring: Sequence[Point2]) -> Optional[SourceLoop]:
        """Original loop traced by ``ring``, if any.

        Rings are compared vertex for vertex, then again with collinear
        vertices dropped from both.
        """
        for source in self.loops:
            if ring_alignment(ring, source.ring, self.tolerance) is not None:
                return source
        simplified = drop_collinear_vertices(ring, self.tolerance)
        for source in self.loops:
            reference = drop_collinear_vertices(source.ring, self.tolerance)
            if ring_alignment(simplified, reference, self.tolerance) is not None:
                return source
        return None

    def match(self, segment: Segment2) -> Optional[Edge]:
        """Original edge a segment was derived from, openings first."""
        for pool in (self.opening_segments, self.external_segments):
            for original, edge in pool:
                if _segment_matches(segment, original, self.tolerance):
                    return edge
        return None


def _segment_matches(segment: Segment2, original: Segment2, tolerance: float) -> bool:
    a, b = segment
    p, q = original
    if points_close(a, p, tolerance) and points_close(b, q, tolerance):
        return True
    if points_close(a, q, tolerance) and points_close(b, p, tolerance):
        return True
    return all(point_to_segment_distance(pt, original)[0] <= tolerance for pt in segment)


# =============================================================================
# Loop Rebuilding
# =============================================================================


def split_ring(ring: Sequence[Point2], points: Sequence[Point2], tolerance: float) -> List[Segment2]:
    """Segments of a ring split at every given point lying on it."""
    pieces: List[Segment2] = []
    for segment in loop_segments(ring):
        pieces.extend(split_at(segment, points, tolerance))
    return pieces


def _fuse_collinear(
    pieces: List[Tuple[Segment2, Optional[Edge]]], tolerance: float
) -> List[Tuple[Segment2, Optional[Edge]]]:
    def metadata(source: Optional[Edge]):
        return source.metadata if source is not None else (None, None)

    fused: List[Tuple[Segment2, Optional[Edge]]] = []
    for segment, source in pieces:
        if fused:
            previous, previous_source = fused[-1]
            if metadata(previous_source) == metadata(source) and segments_collinear(
                previous, segment, tolerance
            ):
                fused[-1] = ((previous[0], segment[1]), previous_source)
                continue
        fused.append((segment, source))

    if len(fused) > 3:
        (last, last_source), (first, first_source) = fused[-1], fused[0]
        if metadata(last_source) == metadata(first_source) and segments_collinear(
            last, first, tolerance
        ):
            fused[0] = ((last[0], first[1]), first_source)
            fused.pop()
    return fused


def rebuild_loop_edges(
    ring: Sequence[Point2],
    catalog: EdgeCatalog,
    hole: bool = False,
    merge_collinear: bool = True,
) -> Tuple[Edge, ...]:
    """Edges for a regenerated ring, inheriting original metadata.

    Args:
        ring: Ring in the catalog's frame
        catalog: Original edges
        hole: Wind the rebuilt loop clockwise instead of counter-clockwise
        merge_collinear: Fuse collinear pieces with identical metadata

    Returns:
        Edges in loop order
    """
    tolerance = catalog.tolerance
    source = catalog.source_loop(ring)
    if source is not None:
        logger.log(TRACE_LEVEL, f"Ring reuses {len(source.edges)} original edges")
        return tuple(replace(edge) for edge in source.edges)

    oriented = rotate_to_min(orient(ring, ccw=not hole))
    pieces = split_ring(oriented, catalog.vertices, tolerance)
    matched = [(segment, catalog.match(segment)) for segment in pieces]
    if merge_collinear:
        matched = _fuse_collinear(matched, tolerance)

    start = min(range(len(matched)), key=lambda i: matched[i][0][0])
    matched = matched[start:] + matched[:start]

    edges = []
    inherited = 0
    for (a, b), original in matched:
        curve = Line(catalog.world(a), catalog.world(b))
        if original is None:
            edges.append(Edge(curve=curve))
        else:
            inherited += 1
            edges.append(replace(original, curve=curve))

    logger.debug(
        f"Rebuilt ring of {len(oriented)} vertices into {len(edges)} edges "
        f"({inherited} with inherited metadata)"
    )
    return tuple(edges)


def rebuild_opening(
    ring: Sequence[Point2],
    catalog: EdgeCatalog,
    merge_collinear: bool = True,
) -> Opening:
    """Opening for a hole ring, keeping an original opening it traces."""
    source = catalog.source_loop(ring)
    if source is not None and source.opening is not None:
        return replace(source.opening, custom_data=dict(source.opening.custom_data))
    return Opening(edges=rebuild_loop_edges(ring, catalog, hole=True, merge_collinear=merge_collinear))
