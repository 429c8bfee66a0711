# File: src/panel_topology/serialization.py
"""
Dictionary/JSON interchange for panels and merge results.

pydantic models mirror the element model so that documents coming from the
surrounding structural library are validated before they reach the engine.
Curves and surface properties are discriminated on their "kind" field.
Invalid documents raise pydantic.ValidationError.

Example:
    >>> data = panel_to_dict(panel)
    >>> panel_from_dict(data) == panel
    True
"""

from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from .elements.panel_types import (
    Arc,
    ConstantThickness,
    CurveKind,
    DOFType,
    Edge,
    Line,
    LoadingPanelProperty,
    Opening,
    Panel,
    Polyline,
    Release,
    Ribbed,
    SurfacePropertyKind,
    Support,
    Waffle,
)
from .results import MergeResult, ReconcileResult


# =============================================================================
# Geometry
# =============================================================================


class PointModel(BaseModel):
    """3D point coordinates."""
    x: float = Field(description="X coordinate")
    y: float = Field(description="Y coordinate")
    z: float = Field(default=0.0, description="Z coordinate")

    @classmethod
    def from_tuple(cls, point) -> "PointModel":
        return cls(x=point[0], y=point[1], z=point[2])

    def to_tuple(self):
        return (self.x, self.y, self.z)


class LineModel(BaseModel):
    """Straight edge curve."""
    kind: Literal["line"] = "line"
    start: PointModel
    end: PointModel

    def to_element(self) -> Line:
        return Line(self.start.to_tuple(), self.end.to_tuple())

    @classmethod
    def from_element(cls, curve: Line) -> "LineModel":
        return cls(start=PointModel.from_tuple(curve.start), end=PointModel.from_tuple(curve.end))


class PolylineModel(BaseModel):
    """Open chain of straight segments."""
    kind: Literal["polyline"] = "polyline"
    points: List[PointModel] = Field(min_length=2, description="Chain vertices in order")

    def to_element(self) -> Polyline:
        return Polyline(tuple(p.to_tuple() for p in self.points))

    @classmethod
    def from_element(cls, curve: Polyline) -> "PolylineModel":
        return cls(points=[PointModel.from_tuple(p) for p in curve.points])


class ArcModel(BaseModel):
    """Circular arc through three points.

    Accepted for interchange; topology operations reject arcs.
    """
    kind: Literal["arc"] = "arc"
    start: PointModel
    mid: PointModel
    end: PointModel

    def to_element(self) -> Arc:
        return Arc(self.start.to_tuple(), self.mid.to_tuple(), self.end.to_tuple())

    @classmethod
    def from_element(cls, curve: Arc) -> "ArcModel":
        return cls(
            start=PointModel.from_tuple(curve.start),
            mid=PointModel.from_tuple(curve.mid),
            end=PointModel.from_tuple(curve.end),
        )


CurveModel = Annotated[Union[LineModel, PolylineModel, ArcModel], Field(discriminator="kind")]

_CURVE_MODELS = {
    CurveKind.LINE: LineModel,
    CurveKind.POLYLINE: PolylineModel,
    CurveKind.ARC: ArcModel,
}


# =============================================================================
# Edge Metadata
# =============================================================================


class ReleaseModel(BaseModel):
    """Edge end condition."""
    name: str = ""
    translation_x: DOFType = DOFType.FIXED
    translation_y: DOFType = DOFType.FIXED
    translation_z: DOFType = DOFType.FIXED
    rotation_x: DOFType = DOFType.FIXED

    def to_element(self) -> Release:
        return Release(**self.model_dump())

    @classmethod
    def from_element(cls, release: Release) -> "ReleaseModel":
        return cls(**vars(release))


class SupportModel(BaseModel):
    """Edge restraint in six degrees of freedom."""
    name: str = ""
    translation_x: DOFType = DOFType.FREE
    translation_y: DOFType = DOFType.FREE
    translation_z: DOFType = DOFType.FREE
    rotation_x: DOFType = DOFType.FREE
    rotation_y: DOFType = DOFType.FREE
    rotation_z: DOFType = DOFType.FREE

    def to_element(self) -> Support:
        return Support(**self.model_dump())

    @classmethod
    def from_element(cls, support: Support) -> "SupportModel":
        return cls(**vars(support))


# =============================================================================
# Surface Properties
# =============================================================================


class ConstantThicknessModel(BaseModel):
    kind: Literal["constant_thickness"] = "constant_thickness"
    name: str = ""
    thickness: float = Field(default=0.0, ge=0)
    material: str = ""


class RibbedModel(BaseModel):
    kind: Literal["ribbed"] = "ribbed"
    name: str = ""
    thickness: float = Field(default=0.0, ge=0)
    material: str = ""
    total_depth: float = Field(default=0.0, ge=0)
    spacing: float = Field(default=0.0, ge=0)
    stem_width: float = Field(default=0.0, ge=0)
    direction: Literal["x", "y"] = "x"


class WaffleModel(BaseModel):
    kind: Literal["waffle"] = "waffle"
    name: str = ""
    thickness: float = Field(default=0.0, ge=0)
    material: str = ""
    total_depth_x: float = Field(default=0.0, ge=0)
    total_depth_y: float = Field(default=0.0, ge=0)
    spacing_x: float = Field(default=0.0, ge=0)
    spacing_y: float = Field(default=0.0, ge=0)
    stem_width_x: float = Field(default=0.0, ge=0)
    stem_width_y: float = Field(default=0.0, ge=0)


class LoadingPanelModel(BaseModel):
    kind: Literal["loading_panel"] = "loading_panel"
    name: str = ""
    load_application: Literal["one_way", "two_way"] = "one_way"
    reference_edge: int = Field(default=0, ge=0)


SurfacePropertyModel = Annotated[
    Union[ConstantThicknessModel, RibbedModel, WaffleModel, LoadingPanelModel],
    Field(discriminator="kind"),
]

_PROPERTY_TYPES = {
    SurfacePropertyKind.CONSTANT_THICKNESS: (ConstantThickness, ConstantThicknessModel),
    SurfacePropertyKind.RIBBED: (Ribbed, RibbedModel),
    SurfacePropertyKind.WAFFLE: (Waffle, WaffleModel),
    SurfacePropertyKind.LOADING_PANEL: (LoadingPanelProperty, LoadingPanelModel),
}


def _property_to_element(model) -> Any:
    element_type, _ = _PROPERTY_TYPES[SurfacePropertyKind(model.kind)]
    return element_type(**model.model_dump(exclude={"kind"}))


def _property_from_element(prop) -> Any:
    _, model_type = _PROPERTY_TYPES[prop.kind]
    return model_type(**vars(prop))


# =============================================================================
# Elements
# =============================================================================


class EdgeModel(BaseModel):
    """Edge curve with optional release and support."""
    curve: CurveModel
    release: Optional[ReleaseModel] = None
    support: Optional[SupportModel] = None
    name: str = ""

    def to_element(self) -> Edge:
        return Edge(
            curve=self.curve.to_element(),
            release=self.release.to_element() if self.release else None,
            support=self.support.to_element() if self.support else None,
            name=self.name,
        )

    @classmethod
    def from_element(cls, edge: Edge) -> "EdgeModel":
        return cls(
            curve=_CURVE_MODELS[edge.curve.kind].from_element(edge.curve),
            release=ReleaseModel.from_element(edge.release) if edge.release else None,
            support=SupportModel.from_element(edge.support) if edge.support else None,
            name=edge.name,
        )


class OpeningModel(BaseModel):
    """Closed loop of edges forming a hole."""
    edges: List[EdgeModel] = Field(min_length=1)
    name: str = ""
    custom_data: Dict[str, Any] = Field(default_factory=dict)

    def to_element(self) -> Opening:
        return Opening(
            edges=tuple(e.to_element() for e in self.edges),
            name=self.name,
            custom_data=dict(self.custom_data),
        )

    @classmethod
    def from_element(cls, opening: Opening) -> "OpeningModel":
        return cls(
            edges=[EdgeModel.from_element(e) for e in opening.edges],
            name=opening.name,
            custom_data=dict(opening.custom_data),
        )


class PanelModel(BaseModel):
    """Planar structural panel."""
    external_edges: List[EdgeModel] = Field(min_length=1, description="Outer loop in order")
    openings: List[OpeningModel] = Field(default_factory=list)
    property: Optional[SurfacePropertyModel] = None
    name: str = ""
    custom_data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    def to_element(self) -> Panel:
        return Panel(
            external_edges=tuple(e.to_element() for e in self.external_edges),
            openings=tuple(o.to_element() for o in self.openings),
            property=_property_to_element(self.property) if self.property else None,
            name=self.name,
            custom_data=dict(self.custom_data),
        )

    @classmethod
    def from_element(cls, panel: Panel) -> "PanelModel":
        return cls(
            external_edges=[EdgeModel.from_element(e) for e in panel.external_edges],
            openings=[OpeningModel.from_element(o) for o in panel.openings],
            property=_property_from_element(panel.property) if panel.property else None,
            name=panel.name,
            custom_data=dict(panel.custom_data),
        )


# =============================================================================
# Functions
# =============================================================================


def panel_from_dict(data: Dict[str, Any]) -> Panel:
    """Validate a panel document and build the Panel."""
    return PanelModel.model_validate(data).to_element()


def panel_to_dict(panel: Panel) -> Dict[str, Any]:
    """JSON-compatible dictionary for a panel."""
    return PanelModel.from_element(panel).model_dump(mode="json")


def serialize_panels(panels: Iterable[Panel]) -> List[Dict[str, Any]]:
    return [panel_to_dict(panel) for panel in panels]


def deserialize_panels(data: Iterable[Dict[str, Any]]) -> List[Panel]:
    return [panel_from_dict(item) for item in data]


def serialize_merge_result(result: Union[MergeResult, ReconcileResult]) -> Dict[str, Any]:
    """Summary of a merge or reconcile result including its panels."""
    data = result.to_dict()
    data["panels"] = serialize_panels(result.panels)
    return data
