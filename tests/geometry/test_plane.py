# File: tests/geometry/test_plane.py
"""Unit tests for plane frames."""

import pytest

from panel_topology.errors import GeometryConversionError
from panel_topology.geometry import PlaneFrame, newell_normal


SQUARE = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]


def assert_point_close(actual, expected, tol=1e-9):
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        assert a == pytest.approx(e, abs=tol)


class TestNewellNormal:
    """Tests for newell_normal."""

    def test_counter_clockwise_square(self):
        assert_point_close(newell_normal(SQUARE), (0.0, 0.0, 2.0))

    def test_clockwise_square(self):
        assert_point_close(newell_normal(list(reversed(SQUARE))), (0.0, 0.0, -2.0))


class TestPlaneFrameFromPoints:
    """Tests for PlaneFrame.from_points."""

    def test_xy_plane_maps_to_xy(self):
        """Test the world XY plane gives identity local coordinates."""
        frame = PlaneFrame.from_points(SQUARE, 1e-6)

        assert_point_close(frame.normal, (0.0, 0.0, 1.0))
        assert_point_close(frame.to_local((3.0, 4.0, 0.0)), (3.0, 4.0))

    def test_frame_is_canonical(self):
        """Test winding and starting vertex do not change the frame."""
        a = PlaneFrame.from_points(SQUARE, 1e-6)
        b = PlaneFrame.from_points(list(reversed(SQUARE[1:] + SQUARE[:1])), 1e-6)

        assert_point_close(a.normal, b.normal)
        assert_point_close(a.x_axis, b.x_axis)
        assert_point_close(a.origin, b.origin)

    def test_round_trip_on_offset_plane(self):
        points = [(x, y, 5.0) for x, y, _ in SQUARE]
        frame = PlaneFrame.from_points(points, 1e-6)

        assert frame.offset == pytest.approx(5.0)
        for p in points:
            assert_point_close(frame.to_world(frame.to_local(p)), p)

    def test_vertical_plane(self):
        """Test a wall in the XZ plane at y = 2."""
        points = [(0.0, 2.0, 0.0), (4.0, 2.0, 0.0), (4.0, 2.0, 3.0), (0.0, 2.0, 3.0)]
        frame = PlaneFrame.from_points(points, 1e-6)

        assert_point_close(frame.normal, (0.0, 1.0, 0.0))
        for p in points:
            assert frame.distance_to(p) == pytest.approx(0.0, abs=1e-12)
            assert_point_close(frame.to_world(frame.to_local(p)), p)

    def test_too_few_points(self):
        with pytest.raises(GeometryConversionError):
            PlaneFrame.from_points(SQUARE[:2], 1e-6)

    def test_collinear_points(self):
        with pytest.raises(GeometryConversionError, match="collinear"):
            PlaneFrame.from_points([(0, 0, 0), (1, 0, 0), (2, 0, 0)], 1e-6)

    def test_non_planar_points(self):
        points = SQUARE[:3] + [(0.0, 1.0, 0.5)]
        with pytest.raises(GeometryConversionError, match="not planar"):
            PlaneFrame.from_points(points, 1e-6)


class TestPlaneFrameFromSegments:
    """Tests for PlaneFrame.from_segments."""

    def test_matches_from_points(self):
        segments = [(SQUARE[i], SQUARE[(i + 1) % 4]) for i in range(4)]

        a = PlaneFrame.from_segments(segments, 1e-6)
        b = PlaneFrame.from_points(SQUARE, 1e-6)

        assert_point_close(a.normal, b.normal)
        assert_point_close(a.x_axis, b.x_axis)
        assert a.offset == pytest.approx(b.offset)

    def test_cancelling_loops_fall_back(self):
        """Test a loop and its reverse still define the plane."""
        forward = [(SQUARE[i], SQUARE[(i + 1) % 4]) for i in range(4)]
        backward = [(b, a) for a, b in forward]

        frame = PlaneFrame.from_segments(forward + backward, 1e-6)
        assert_point_close(frame.normal, (0.0, 0.0, 1.0))

    def test_collinear_segments(self):
        with pytest.raises(GeometryConversionError):
            PlaneFrame.from_segments([((0, 0, 0), (1, 0, 0)), ((1, 0, 0), (2, 0, 0))], 1e-6)


class TestCoplanarity:
    """Tests for PlaneFrame.is_coplanar."""

    def test_same_plane_within_tolerance(self):
        a = PlaneFrame.from_points(SQUARE, 1e-6)
        b = PlaneFrame.from_points([(x + 5, y, 1e-9) for x, y, _ in SQUARE], 1e-6)
        assert a.is_coplanar(b, 1e-6, 1e-6)

    def test_parallel_offset_plane(self):
        a = PlaneFrame.from_points(SQUARE, 1e-6)
        b = PlaneFrame.from_points([(x, y, 1.0) for x, y, _ in SQUARE], 1e-6)
        assert not a.is_coplanar(b, 1e-6, 1e-6)

    def test_perpendicular_plane(self):
        a = PlaneFrame.from_points(SQUARE, 1e-6)
        b = PlaneFrame.from_points([(0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1)], 1e-6)
        assert not a.is_coplanar(b, 1e-6, 1e-6)

    def test_project_all_rejects_off_plane(self):
        frame = PlaneFrame.from_points(SQUARE, 1e-6)
        with pytest.raises(GeometryConversionError):
            frame.project_all([(0.0, 0.0, 0.1)], 1e-6)
