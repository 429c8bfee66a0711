# File: src/panel_topology/config/__init__.py
"""
Configuration module for the panel topology engine.

Example:
    >>> from panel_topology.config import TopologyConfig, ComparisonConfig
    >>> config = TopologyConfig(tolerance=1e-4)
"""

from .topology_config import (
    DISTANCE_TOLERANCE,
    ANGLE_TOLERANCE,
    GroupingMode,
    ComparisonConfig,
    TopologyConfig,
)

__all__ = [
    "DISTANCE_TOLERANCE",
    "ANGLE_TOLERANCE",
    "GroupingMode",
    "ComparisonConfig",
    "TopologyConfig",
]
