# File: src/panel_topology/elements/panel_types.py

"""Value types for planar structural panels.

Defines the immutable element model consumed and produced by the merge and
reconciliation pipelines. Engine outputs are always new instances built with
dataclasses.replace; inputs are never mutated.

Key Types:
    CurveKind: Closed set of edge curve variants (line, polyline, arc)
    Release: 4-DOF end condition attached to an edge
    Support: 6-DOF restraint attached to an edge
    Edge: Curve plus optional release/support metadata
    Opening: Closed loop of edges describing a hole
    Panel: Outer loop of edges, openings and non-geometric attributes
    SurfacePropertyKind: Closed set of surface property variants
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union
from enum import Enum


Point3 = Tuple[float, float, float]


# =============================================================================
# Enumerations
# =============================================================================


class CurveKind(Enum):
    """Tag of an edge curve variant."""

    LINE = "line"
    """Straight segment between two points."""

    POLYLINE = "polyline"
    """Chain of straight segments; expanded into lines by topology code."""

    ARC = "arc"
    """Circular arc through three points; rejected by topology code."""


class DOFType(Enum):
    """Fixity of a single degree of freedom."""

    FREE = "free"
    FIXED = "fixed"
    SPRING = "spring"


class SurfacePropertyKind(Enum):
    """Tag of a surface property variant."""

    CONSTANT_THICKNESS = "constant_thickness"
    RIBBED = "ribbed"
    WAFFLE = "waffle"
    LOADING_PANEL = "loading_panel"


# =============================================================================
# Curves
# =============================================================================


@dataclass(frozen=True)
class Line:
    """Straight edge curve."""

    kind: ClassVar[CurveKind] = CurveKind.LINE

    start: Point3
    end: Point3

    def reversed(self) -> "Line":
        return Line(self.end, self.start)


@dataclass(frozen=True)
class Polyline:
    """Open chain of straight segments through ``points``."""

    kind: ClassVar[CurveKind] = CurveKind.POLYLINE

    points: Tuple[Point3, ...]

    def __post_init__(self):
        object.__setattr__(self, "points", tuple(tuple(p) for p in self.points))
        if len(self.points) < 2:
            raise ValueError("Polyline needs at least two points")

    @property
    def start(self) -> Point3:
        return self.points[0]

    @property
    def end(self) -> Point3:
        return self.points[-1]


@dataclass(frozen=True)
class Arc:
    """Circular arc defined by start, mid and end points."""

    kind: ClassVar[CurveKind] = CurveKind.ARC

    start: Point3
    mid: Point3
    end: Point3


Curve = Union[Line, Polyline, Arc]


# =============================================================================
# Edge metadata
# =============================================================================


@dataclass(frozen=True)
class Release:
    """End condition of an edge (translations and rotation about the edge).

    Attributes:
        name: Release name, e.g. "Pinned".
        translation_x: Fixity along local x.
        translation_y: Fixity along local y.
        translation_z: Fixity along local z.
        rotation_x: Fixity about the edge axis.
    """

    name: str = ""
    translation_x: DOFType = DOFType.FIXED
    translation_y: DOFType = DOFType.FIXED
    translation_z: DOFType = DOFType.FIXED
    rotation_x: DOFType = DOFType.FIXED


@dataclass(frozen=True)
class Support:
    """Restraint applied along an edge in all six degrees of freedom."""

    name: str = ""
    translation_x: DOFType = DOFType.FREE
    translation_y: DOFType = DOFType.FREE
    translation_z: DOFType = DOFType.FREE
    rotation_x: DOFType = DOFType.FREE
    rotation_y: DOFType = DOFType.FREE
    rotation_z: DOFType = DOFType.FREE

    @classmethod
    def pinned(cls) -> "Support":
        return cls(
            name="Pinned",
            translation_x=DOFType.FIXED,
            translation_y=DOFType.FIXED,
            translation_z=DOFType.FIXED,
        )

    @classmethod
    def fixed(cls) -> "Support":
        return cls(
            name="Fixed",
            translation_x=DOFType.FIXED,
            translation_y=DOFType.FIXED,
            translation_z=DOFType.FIXED,
            rotation_x=DOFType.FIXED,
            rotation_y=DOFType.FIXED,
            rotation_z=DOFType.FIXED,
        )


# =============================================================================
# Surface properties
# =============================================================================


@dataclass(frozen=True)
class ConstantThickness:
    """Solid slab or wall of uniform thickness."""

    kind: ClassVar[SurfacePropertyKind] = SurfacePropertyKind.CONSTANT_THICKNESS

    name: str = ""
    thickness: float = 0.0
    material: str = ""


@dataclass(frozen=True)
class Ribbed:
    """One-way ribbed slab."""

    kind: ClassVar[SurfacePropertyKind] = SurfacePropertyKind.RIBBED

    name: str = ""
    thickness: float = 0.0
    material: str = ""
    total_depth: float = 0.0
    spacing: float = 0.0
    stem_width: float = 0.0
    direction: str = "x"


@dataclass(frozen=True)
class Waffle:
    """Two-way ribbed (waffle) slab."""

    kind: ClassVar[SurfacePropertyKind] = SurfacePropertyKind.WAFFLE

    name: str = ""
    thickness: float = 0.0
    material: str = ""
    total_depth_x: float = 0.0
    total_depth_y: float = 0.0
    spacing_x: float = 0.0
    spacing_y: float = 0.0
    stem_width_x: float = 0.0
    stem_width_y: float = 0.0


@dataclass(frozen=True)
class LoadingPanelProperty:
    """Non-structural panel that only distributes area loads to its edges."""

    kind: ClassVar[SurfacePropertyKind] = SurfacePropertyKind.LOADING_PANEL

    name: str = ""
    load_application: str = "one_way"
    reference_edge: int = 0


SurfaceProperty = Union[ConstantThickness, Ribbed, Waffle, LoadingPanelProperty]


# =============================================================================
# Elements
# =============================================================================


@dataclass(frozen=True)
class Edge:
    """A boundary curve with optional engineering metadata.

    Attributes:
        curve: Edge geometry.
        release: End condition, None when unset (free).
        support: Restraint, None when unset (free).
        name: Optional edge name.
    """

    curve: Curve
    release: Optional[Release] = None
    support: Optional[Support] = None
    name: str = ""

    @property
    def metadata(self) -> Tuple[Optional[Release], Optional[Support]]:
        """The (release, support) pair inherited during reconstruction."""
        return (self.release, self.support)


@dataclass(frozen=True)
class Opening:
    """A hole in a panel, structurally a closed loop of edges."""

    edges: Tuple[Edge, ...]
    name: str = ""
    custom_data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "edges", tuple(self.edges))


@dataclass(frozen=True)
class Panel:
    """Planar structural panel.

    Attributes:
        external_edges: Ordered closed loop of edges bounding the panel.
        openings: Holes lying strictly inside the outer loop.
        property: Surface property (thickness/material assignment).
        name: Panel name.
        custom_data: Free-form attributes usable for equivalence comparison.
    """

    external_edges: Tuple[Edge, ...]
    openings: Tuple[Opening, ...] = ()
    property: Optional[SurfaceProperty] = None
    name: str = ""
    custom_data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "external_edges", tuple(self.external_edges))
        object.__setattr__(self, "openings", tuple(self.openings))

    def all_edges(self) -> List[Edge]:
        """External edges followed by every opening edge."""
        edges = list(self.external_edges)
        for opening in self.openings:
            edges.extend(opening.edges)
        return edges
