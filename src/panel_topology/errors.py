# File: src/panel_topology/errors.py
"""
Error taxonomy for the panel topology engine.

All fatal conditions derive from PanelTopologyError so that the merge and
reconcile entry points can isolate a failing group or panel and keep
processing the rest. Anything that is not a PanelTopologyError is a defect
and propagates to the caller unchanged.

Types:
    PanelTopologyError: Base class carrying a message and a context dict
    GeometryConversionError: Edge curve cannot be reduced to straight segments
    DegenerateInputError: Empty input, open chains, coincident loops
    PipelineTimeoutError: Reconciler fix-point exceeded its iteration budget
    PropertyEquivalenceWarning: Requested comparison property was ignored
"""

from typing import Any, Dict, Optional


class PanelTopologyError(Exception):
    """
    Base class for topology engine failures.

    Attributes:
        message: Human-readable description of the failure
        context: Optional extra details (indices, coordinates, counts)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dictionary."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "context": dict(self.context),
        }


class GeometryConversionError(PanelTopologyError):
    """Raised when an edge curve is not representable as a straight polyline.

    Also raised for outlines that are not closed chains or do not lie in a
    single plane, since neither can be converted into a planar loop.
    """


class DegenerateInputError(PanelTopologyError):
    """Raised for input the engine refuses to resolve automatically.

    Covers zero input panels, coincident equal-area loops at the containment
    tie-break, open edge chains and reconciliations that produce no panel.
    """


class PipelineTimeoutError(PanelTopologyError):
    """Raised when the reconciler fix-point does not converge in budget."""

    def __init__(
        self,
        message: str,
        iterations: int,
        limit: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.iterations = iterations
        self.limit = limit
        context = dict(context or {})
        context.update({"iterations": iterations, "limit": limit})
        super().__init__(message, context)


class PropertyEquivalenceWarning(UserWarning):
    """Emitted when a comparison property name is not found on the panels."""
