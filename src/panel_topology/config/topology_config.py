# File: src/panel_topology/config/topology_config.py
"""
Configuration for panel merging and edge reconciliation.

This module defines the tolerances, grouping mode and iteration budget
shared by every stage of the engine. The distance tolerance is used
uniformly for point coincidence, containment, intersection snapping and
duplicate-edge cancellation.

Example:
    >>> config = TopologyConfig(tolerance=1e-4, max_iterations=50)
    >>> config.validate()  # Raises ValueError if invalid
    >>> comparison = ComparisonConfig(["property", "custom_data.zone"])
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from enum import Enum


# Default distance tolerance in model units
DISTANCE_TOLERANCE = 1e-6

# Default angle tolerance in radians (plane parallelism)
ANGLE_TOLERANCE = 1e-6


class GroupingMode(Enum):
    """Strategy used to partition panels before merging.

    Attributes:
        PAIRWISE: Greedy grouping with a compatibility predicate. The
            predicate is not assumed to be transitive, so the result can
            depend on input order.
        HASHED: Grouping by exact equality of the selected property values.
            This is a true equivalence relation.
    """
    PAIRWISE = "pairwise"
    HASHED = "hashed"


@dataclass
class ComparisonConfig:
    """Ordered set of property names defining mergeable panels.

    Two panels are equivalent iff every named property compares equal.
    Names may be dotted paths such as "property.thickness" or
    "custom_data.zone".

    Attributes:
        property_names: Property names, duplicates removed, order kept
    """
    property_names: Tuple[str, ...] = ()

    def __post_init__(self):
        """Normalise to an order-preserving tuple without duplicates."""
        seen = []
        for name in self.property_names:
            name = str(name).strip()
            if name and name not in seen:
                seen.append(name)
        self.property_names = tuple(seen)

    def __len__(self) -> int:
        return len(self.property_names)

    def __iter__(self):
        return iter(self.property_names)

    def without(self, names: Iterable[str]) -> "ComparisonConfig":
        """Return a copy with the given names removed."""
        dropped = set(names)
        return ComparisonConfig(
            tuple(n for n in self.property_names if n not in dropped)
        )


@dataclass
class TopologyConfig:
    """Configuration for the topology engine.

    Attributes:
        tolerance: Distance below which points and curves coincide
        angle_tolerance: Angle (radians) below which plane normals are parallel
        max_iterations: Hard cap on reconciler fix-point iterations
        grouping_mode: Explicit grouping mode, or None to infer it
            (HASHED when property names are given, PAIRWISE otherwise)
        merge_collinear_edges: Fuse consecutive collinear edges that carry
            identical release/support metadata when rebuilding loops

    Example:
        >>> config = TopologyConfig.coarse()
        >>> config.tolerance
        0.001
    """
    tolerance: float = DISTANCE_TOLERANCE
    angle_tolerance: float = ANGLE_TOLERANCE
    max_iterations: int = 100
    grouping_mode: Optional[GroupingMode] = None
    merge_collinear_edges: bool = True

    def __post_init__(self):
        """Convert grouping_mode string to enum if needed."""
        if isinstance(self.grouping_mode, str):
            self.grouping_mode = GroupingMode(self.grouping_mode)

    def validate(self) -> List[str]:
        """Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)

        Raises:
            ValueError: If any validation fails
        """
        errors = []

        if not self.tolerance > 0:
            errors.append("tolerance must be positive")
        if not self.angle_tolerance > 0:
            errors.append("angle_tolerance must be positive")
        if self.max_iterations < 1:
            errors.append(
                f"max_iterations ({self.max_iterations}) must be at least 1"
            )

        if errors:
            raise ValueError("TopologyConfig validation failed:\n" + "\n".join(errors))

        return errors

    def resolve_grouping_mode(self, property_names: Optional[Iterable[str]]) -> GroupingMode:
        """Grouping mode to use for a merge call."""
        if self.grouping_mode is not None:
            return self.grouping_mode
        return GroupingMode.HASHED if property_names else GroupingMode.PAIRWISE

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "tolerance": self.tolerance,
            "angle_tolerance": self.angle_tolerance,
            "max_iterations": self.max_iterations,
            "grouping_mode": self.grouping_mode.value if self.grouping_mode else None,
            "merge_collinear_edges": self.merge_collinear_edges,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TopologyConfig":
        """Create config from dictionary.

        Args:
            data: Dictionary with config parameters

        Returns:
            TopologyConfig instance
        """
        return cls(
            tolerance=data.get("tolerance", DISTANCE_TOLERANCE),
            angle_tolerance=data.get("angle_tolerance", ANGLE_TOLERANCE),
            max_iterations=data.get("max_iterations", 100),
            grouping_mode=data.get("grouping_mode"),
            merge_collinear_edges=data.get("merge_collinear_edges", True),
        )

    @classmethod
    def strict(cls) -> "TopologyConfig":
        """Tight tolerances for models authored in metres."""
        return cls(tolerance=1e-9, angle_tolerance=1e-9)

    @classmethod
    def coarse(cls) -> "TopologyConfig":
        """Loose tolerance for hand-edited or imported geometry."""
        return cls(tolerance=1e-3, angle_tolerance=1e-4)
