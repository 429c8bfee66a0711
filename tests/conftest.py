# tests/conftest.py
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest
from typing import List, Optional, Sequence, Tuple

from panel_topology.elements import (
    ConstantThickness,
    DOFType,
    Edge,
    Line,
    Opening,
    Panel,
    Release,
    Support,
)


def _point3(p, z: float = 0.0):
    return (float(p[0]), float(p[1]), float(p[2]) if len(p) > 2 else z)


def build_loop_edges(
    points: Sequence,
    release: Optional[Release] = None,
    support: Optional[Support] = None,
    z: float = 0.0,
) -> Tuple[Edge, ...]:
    """Closed loop of line edges through the given points."""
    pts = [_point3(p, z) for p in points]
    return tuple(
        Edge(curve=Line(pts[i], pts[(i + 1) % len(pts)]), release=release, support=support)
        for i in range(len(pts))
    )


def outline_of(panel: Panel) -> List[Tuple[float, float]]:
    """2D vertex loop of a panel's line edges (z dropped)."""
    return [(e.curve.start[0], e.curve.start[1]) for e in panel.external_edges]


def opening_loop(opening: Opening) -> List[Tuple[float, float]]:
    return [(e.curve.start[0], e.curve.start[1]) for e in opening.edges]


@pytest.fixture
def loop_edges():
    """Factory for closed loops of line edges."""
    return build_loop_edges


@pytest.fixture
def outline():
    """Extracts the 2D outer loop of a panel."""
    return outline_of


@pytest.fixture
def opening_outline_2d():
    """Extracts the 2D loop of an opening."""
    return opening_loop


@pytest.fixture
def slab_property():
    return ConstantThickness(name="Slab 200", thickness=0.2, material="C30/37")


@pytest.fixture
def make_opening():
    """Factory for openings."""
    def factory(points, name: str = "", release=None, support=None, custom_data=None):
        return Opening(
            edges=build_loop_edges(points, release=release, support=support),
            name=name,
            custom_data=dict(custom_data or {}),
        )
    return factory


@pytest.fixture
def make_panel(slab_property):
    """Factory for panels with line edges on z = 0 by default."""
    def factory(
        points,
        openings=(),
        name: str = "",
        property=slab_property,
        custom_data=None,
        release=None,
        support=None,
        z: float = 0.0,
    ):
        return Panel(
            external_edges=build_loop_edges(points, release=release, support=support, z=z),
            openings=tuple(openings),
            property=property,
            name=name,
            custom_data=dict(custom_data or {}),
        )
    return factory


@pytest.fixture
def left_square(make_panel):
    """Unit square [(0,0),(1,0),(1,1),(0,1)]."""
    return make_panel([(0, 0), (1, 0), (1, 1), (0, 1)], name="A")


@pytest.fixture
def right_square(make_panel):
    """Unit square sharing the edge x = 1 with left_square."""
    return make_panel([(1, 0), (2, 0), (2, 1), (1, 1)], name="B")


@pytest.fixture
def pinned_release():
    return Release(name="Pinned", rotation_x=DOFType.FREE)


@pytest.fixture
def pinned_support():
    return Support.pinned()
