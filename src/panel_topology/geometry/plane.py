# File: src/panel_topology/geometry/plane.py

"""Plane frames for mapping planar 3D panel geometry to 2D loops.

Boolean operations run in a local 2D frame of the panel plane. The frame is
canonical for a plane: it depends only on the plane itself, not on which
panel or which vertex it was built from, so coplanar panels always share
the same local coordinates whatever order they arrive in.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ..errors import GeometryConversionError

logger = logging.getLogger(__name__)

Point2 = Tuple[float, float]
Point3 = Tuple[float, float, float]
Vector3 = Tuple[float, float, float]


# =============================================================================
# Vector Utilities
# =============================================================================


def _sub(a: Sequence[float], b: Sequence[float]) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Sequence[float], b: Sequence[float]) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _length(v: Sequence[float]) -> float:
    return math.sqrt(_dot(v, v))


def _unit(v: Sequence[float]) -> Vector3:
    length = _length(v)
    return (v[0] / length, v[1] / length, v[2] / length)


def newell_normal(points: Sequence[Point3]) -> Vector3:
    """Unnormalised polygon normal by Newell's method.

    Its length is twice the polygon area, so a near-zero result means the
    points are collinear or coincident.
    """
    nx = ny = nz = 0.0
    count = len(points)
    for i in range(count):
        x1, y1, z1 = points[i]
        x2, y2, z2 = points[(i + 1) % count]
        nx += (y1 - y2) * (z1 + z2)
        ny += (z1 - z2) * (x1 + x2)
        nz += (x1 - x2) * (y1 + y2)
    return (nx, ny, nz)


# =============================================================================
# Plane Frame
# =============================================================================


@dataclass(frozen=True)
class PlaneFrame:
    """Orthonormal frame lying in a plane.

    Attributes:
        origin: Projection of the world origin onto the plane.
        x_axis: Unit vector in the plane.
        y_axis: Unit vector in the plane, normal x x_axis.
        normal: Unit plane normal, first non-zero component positive.
    """

    origin: Point3
    x_axis: Vector3
    y_axis: Vector3
    normal: Vector3

    @classmethod
    def from_normal(cls, normal: Vector3, point_on_plane: Point3) -> "PlaneFrame":
        """Build the canonical frame of the plane through a point."""
        n = _unit(normal)
        for component in n:
            if abs(component) > 1e-12:
                if component < 0:
                    n = (-n[0], -n[1], -n[2])
                break

        # World axis least aligned with the normal, projected into the plane
        world_axes = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))
        reference = min(world_axes, key=lambda axis: abs(_dot(axis, n)))
        d = _dot(reference, n)
        x_axis = _unit((reference[0] - d * n[0], reference[1] - d * n[1], reference[2] - d * n[2]))
        y_axis = _unit(_cross(n, x_axis))

        offset = _dot(point_on_plane, n)
        origin = (n[0] * offset, n[1] * offset, n[2] * offset)
        return cls(origin=origin, x_axis=x_axis, y_axis=y_axis, normal=n)

    @classmethod
    def from_points(cls, points: Iterable[Point3], tolerance: float) -> "PlaneFrame":
        """Fit the frame of a planar vertex loop.

        Raises:
            GeometryConversionError: If the points are degenerate (collinear
                or fewer than three) or do not lie in one plane.
        """
        pts = [tuple(float(c) for c in p) for p in points]
        if len(pts) < 3:
            raise GeometryConversionError(
                f"Need at least 3 vertices to define a plane, got {len(pts)}"
            )

        normal = newell_normal(pts)
        if _length(normal) <= tolerance * tolerance:
            raise GeometryConversionError(
                "Outline vertices are collinear; cannot define a plane",
                {"vertex_count": len(pts)},
            )

        centroid = (
            sum(p[0] for p in pts) / len(pts),
            sum(p[1] for p in pts) / len(pts),
            sum(p[2] for p in pts) / len(pts),
        )
        frame = cls.from_normal(normal, centroid)
        for p in pts:
            deviation = frame.distance_to(p)
            if deviation > tolerance:
                raise GeometryConversionError(
                    f"Outline is not planar: vertex {p} is {deviation:.3g} off plane",
                    {"vertex": p, "deviation": deviation},
                )
        return frame

    @classmethod
    def from_segments(
        cls, segments: Sequence[Tuple[Point3, Point3]], tolerance: float
    ) -> "PlaneFrame":
        """Fit the frame of an unordered pool of planar segments.

        Newell's sum is additive over directed segments, so a pool made of
        closed loops gives the same normal as its loops. A pool whose loops
        cancel out falls back to the widest triangle of its vertices.

        Raises:
            GeometryConversionError: If the segments are collinear or do not
                lie in one plane.
        """
        pts = [tuple(float(c) for c in p) for segment in segments for p in segment]
        if len(pts) < 3:
            raise GeometryConversionError(
                f"Need at least 2 segments to define a plane, got {len(segments)}"
            )

        anchor = pts[0]
        normal = (0.0, 0.0, 0.0)
        for a, b in segments:
            n = _cross(_sub(a, anchor), _sub(b, anchor))
            normal = (normal[0] + n[0], normal[1] + n[1], normal[2] + n[2])

        if _length(normal) <= tolerance * tolerance:
            far = max(pts, key=lambda p: _length(_sub(p, anchor)))
            widest = max(pts, key=lambda p: _length(_cross(_sub(far, anchor), _sub(p, anchor))))
            normal = _cross(_sub(far, anchor), _sub(widest, anchor))
            if _length(normal) <= tolerance * tolerance:
                raise GeometryConversionError(
                    "Edge segments are collinear; cannot define a plane",
                    {"segment_count": len(segments)},
                )

        frame = cls.from_normal(normal, anchor)
        for p in pts:
            deviation = frame.distance_to(p)
            if deviation > tolerance:
                raise GeometryConversionError(
                    f"Edges are not planar: point {p} is {deviation:.3g} off plane",
                    {"point": p, "deviation": deviation},
                )
        return frame

    @property
    def offset(self) -> float:
        """Signed distance of the plane from the world origin along normal."""
        return _dot(self.origin, self.normal)

    def distance_to(self, point: Point3) -> float:
        """Unsigned distance of a point from the plane."""
        return abs(_dot(point, self.normal) - self.offset)

    def to_local(self, point: Point3) -> Point2:
        """Project a world point into frame coordinates."""
        v = _sub(point, self.origin)
        return (_dot(v, self.x_axis), _dot(v, self.y_axis))

    def to_world(self, point: Point2) -> Point3:
        """Map frame coordinates back to a world point on the plane."""
        u, v = point
        return (
            self.origin[0] + u * self.x_axis[0] + v * self.y_axis[0],
            self.origin[1] + u * self.x_axis[1] + v * self.y_axis[1],
            self.origin[2] + u * self.x_axis[2] + v * self.y_axis[2],
        )

    def is_coplanar(
        self, other: "PlaneFrame", tolerance: float, angle_tolerance: float
    ) -> bool:
        """Check if another frame lies in the same plane."""
        cos_angle = max(-1.0, min(1.0, abs(_dot(self.normal, other.normal))))
        if math.acos(cos_angle) > angle_tolerance:
            return False
        return abs(self.offset - other.offset) <= tolerance

    def project_all(self, points: Iterable[Point3], tolerance: float) -> List[Point2]:
        """Project points, rejecting any that are off the plane."""
        local = []
        for p in points:
            if self.distance_to(p) > tolerance:
                raise GeometryConversionError(
                    f"Point {tuple(p)} does not lie in the panel plane",
                    {"point": tuple(p), "deviation": self.distance_to(p)},
                )
            local.append(self.to_local(p))
        return local
