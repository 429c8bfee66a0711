# File: src/panel_topology/geometry/loops.py

"""Plain-tuple utilities for closed 2D loops and line segments.

A loop is a list of (x, y) vertices, implicitly closed: the last vertex is
not repeated. A segment is a ((x, y), (x, y)) pair with direction.
"""

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

Point2 = Tuple[float, float]
Segment2 = Tuple[Point2, Point2]
Loop2 = List[Point2]


# =============================================================================
# Points and Segments
# =============================================================================


def distance(p1: Point2, p2: Point2) -> float:
    """Euclidean distance between two 2D points."""
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def points_close(p1: Point2, p2: Point2, tolerance: float) -> bool:
    """Check if two 2D points are within tolerance."""
    return distance(p1, p2) <= tolerance


def point_to_segment_distance(point: Point2, segment: Segment2) -> Tuple[float, float]:
    """Distance from a point to a segment, and parameter t along it.

    Returns:
        (distance, t) where t is 0.0 at the start and 1.0 at the end,
        clamped to [0, 1].
    """
    (x1, y1), (x2, y2) = segment
    dx = x2 - x1
    dy = y2 - y1
    seg_len_sq = dx * dx + dy * dy

    if seg_len_sq < 1e-24:
        return distance(point, segment[0]), 0.0

    t = ((point[0] - x1) * dx + (point[1] - y1) * dy) / seg_len_sq
    t = max(0.0, min(1.0, t))
    closest = (x1 + t * dx, y1 + t * dy)
    return distance(point, closest), t


def segment_length(segment: Segment2) -> float:
    return distance(segment[0], segment[1])


def reverse_segment(segment: Segment2) -> Segment2:
    return (segment[1], segment[0])


def segments_collinear(a: Segment2, b: Segment2, tolerance: float) -> bool:
    """Check if b continues a in the same direction along one straight line.

    Both end points of b must lie within tolerance of the infinite line
    through a, and the two directions must agree.
    """
    (ax1, ay1), (ax2, ay2) = a
    dx, dy = ax2 - ax1, ay2 - ay1
    length = math.hypot(dx, dy)
    if length <= tolerance:
        return False
    for px, py in b:
        offset = abs((px - ax1) * dy - (py - ay1) * dx) / length
        if offset > tolerance:
            return False
    bdx, bdy = b[1][0] - b[0][0], b[1][1] - b[0][1]
    return dx * bdx + dy * bdy > 0


def loop_segments(loop: Sequence[Point2]) -> List[Segment2]:
    """Directed segments of a closed loop."""
    count = len(loop)
    return [(loop[i], loop[(i + 1) % count]) for i in range(count)]


# =============================================================================
# Loops
# =============================================================================


def signed_area(loop: Sequence[Point2]) -> float:
    """Shoelace area, positive for counter-clockwise loops."""
    total = 0.0
    count = len(loop)
    for i in range(count):
        x1, y1 = loop[i]
        x2, y2 = loop[(i + 1) % count]
        total += x1 * y2 - x2 * y1
    return total / 2.0


def loop_area(loop: Sequence[Point2]) -> float:
    """Unsigned area enclosed by a loop."""
    return abs(signed_area(loop))


def orient(loop: Sequence[Point2], ccw: bool = True) -> Loop2:
    """Return the loop wound counter-clockwise (or clockwise)."""
    pts = list(loop)
    if (signed_area(pts) > 0) != ccw:
        pts.reverse()
    return pts


def rotate_to_min(loop: Sequence[Point2]) -> Loop2:
    """Rotate a loop to start at its lexicographically smallest vertex."""
    pts = list(loop)
    if not pts:
        return pts
    start = min(range(len(pts)), key=lambda i: (pts[i][0], pts[i][1]))
    return pts[start:] + pts[:start]


def strip_closing_point(coords: Iterable[Sequence[float]], tolerance: float = 0.0) -> Loop2:
    """Convert ring coordinates to a loop, dropping the repeated last vertex."""
    pts = [(float(c[0]), float(c[1])) for c in coords]
    if len(pts) > 1 and points_close(pts[0], pts[-1], tolerance):
        pts = pts[:-1]
    return pts


def remove_duplicate_vertices(loop: Sequence[Point2], tolerance: float) -> Loop2:
    """Drop consecutive vertices closer than tolerance."""
    result: Loop2 = []
    for p in loop:
        if not result or not points_close(result[-1], p, tolerance):
            result.append(p)
    if len(result) > 1 and points_close(result[0], result[-1], tolerance):
        result.pop()
    return result


def drop_collinear_vertices(loop: Sequence[Point2], tolerance: float) -> Loop2:
    """Remove vertices lying on the straight line between their neighbours."""
    pts = remove_duplicate_vertices(loop, tolerance)
    changed = True
    while changed and len(pts) > 3:
        changed = False
        for i in range(len(pts)):
            prev_pt, next_pt = pts[i - 1], pts[(i + 1) % len(pts)]
            dist, t = point_to_segment_distance(pts[i], (prev_pt, next_pt))
            if dist <= tolerance and 0.0 < t < 1.0:
                del pts[i]
                changed = True
                break
    return pts


def ring_alignment(
    candidate: Sequence[Point2], reference: Sequence[Point2], tolerance: float
) -> Optional[Tuple[int, bool]]:
    """Find how ``candidate`` maps onto ``reference`` vertex by vertex.

    Returns:
        (offset, reversed) such that reference[i] matches
        candidate[(offset + i) % n] (walking the candidate backwards when
        reversed is True), or None if the rings differ.
    """
    n = len(reference)
    if n == 0 or len(candidate) != n:
        return None

    for reverse in (False, True):
        cand = list(reversed(candidate)) if reverse else list(candidate)
        for offset in range(n):
            if not points_close(cand[offset], reference[0], tolerance):
                continue
            if all(
                points_close(cand[(offset + i) % n], reference[i], tolerance)
                for i in range(n)
            ):
                return offset, reverse
    return None


def rings_match(a: Sequence[Point2], b: Sequence[Point2], tolerance: float) -> bool:
    """Check if two loops have the same vertices up to rotation and direction."""
    return ring_alignment(a, b, tolerance) is not None


def loop_sets_match(
    first: Sequence[Sequence[Point2]],
    second: Sequence[Sequence[Point2]],
    tolerance: float,
) -> bool:
    """Check if two collections of loops are equal as unordered sets."""
    if len(first) != len(second):
        return False
    unmatched = list(second)
    for loop in first:
        for i, other in enumerate(unmatched):
            if rings_match(loop, other, tolerance):
                del unmatched[i]
                break
        else:
            return False
    return True


# =============================================================================
# Point Registry
# =============================================================================


class PointRegistry:
    """Snaps points onto the first registered point within tolerance.

    After snapping, later stages can compare end points by exact equality
    and use them as dictionary or graph keys.
    """

    def __init__(self, tolerance: float):
        self.tolerance = tolerance
        self._points: List[Point2] = []
        self._cell = max(tolerance, 1e-12) * 4.0
        self._grid: Dict[Tuple[int, int], List[int]] = {}

    def __len__(self) -> int:
        return len(self._points)

    @property
    def points(self) -> List[Point2]:
        return list(self._points)

    def _key(self, point: Point2) -> Tuple[int, int]:
        return (int(math.floor(point[0] / self._cell)), int(math.floor(point[1] / self._cell)))

    def find(self, point: Point2) -> Optional[Point2]:
        """Return the registered point within tolerance, if any."""
        kx, ky = self._key(point)
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for index in self._grid.get((kx + dx, ky + dy), ()):
                    candidate = self._points[index]
                    if points_close(candidate, point, self.tolerance):
                        return candidate
        return None

    def snap(self, point: Point2) -> Point2:
        """Return the canonical point for ``point``, registering it if new."""
        point = (float(point[0]), float(point[1]))
        existing = self.find(point)
        if existing is not None:
            return existing
        self._grid.setdefault(self._key(point), []).append(len(self._points))
        self._points.append(point)
        return point

    def snap_segment(self, segment: Segment2) -> Segment2:
        return (self.snap(segment[0]), self.snap(segment[1]))
