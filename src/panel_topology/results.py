# File: src/panel_topology/results.py
"""
Result containers for the merge and reconcile entry points.

Failures are group- or panel-local: an entry point returns every panel it
could build plus one TopologyFailure per group or panel that raised a
PanelTopologyError.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .elements.panel_types import Panel
from .errors import PanelTopologyError


@dataclass
class TopologyFailure:
    """A group or panel that could not be processed.

    Attributes:
        key: Group key (merge) or panel index (reconcile)
        stage: Pipeline stage that raised, e.g. "union" or "reconcile"
        error_type: Exception class name
        message: Exception message
        indices: Input indices of the panels affected
        context: Extra details attached to the exception
    """
    key: Any
    stage: str
    error_type: str
    message: str
    indices: Tuple[int, ...] = ()
    context: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(
        cls,
        error: PanelTopologyError,
        key: Any,
        stage: str,
        indices: Optional[Tuple[int, ...]] = None,
    ) -> "TopologyFailure":
        return cls(
            key=key,
            stage=stage,
            error_type=type(error).__name__,
            message=error.message,
            indices=tuple(indices or ()),
            context=dict(error.context),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": repr(self.key) if not isinstance(self.key, (str, int)) else self.key,
            "stage": self.stage,
            "error_type": self.error_type,
            "message": self.message,
            "indices": list(self.indices),
            "context": {k: repr(v) for k, v in self.context.items()},
        }


@dataclass
class MergeResult:
    """Outcome of merge_panels.

    Attributes:
        panels: Merged panels, in group order
        failures: Groups that failed, keyed by group
        warnings: Non-fatal notices (ignored property names, orphaned openings)
    """
    panels: List[Panel] = field(default_factory=list)
    failures: List[TopologyFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every group merged without failure."""
        return not self.failures

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        """Summary dictionary; panels are serialized by serialize_merge_result."""
        return {
            "panel_count": len(self.panels),
            "failure_count": self.failure_count,
            "failures": [f.to_dict() for f in self.failures],
            "warnings": list(self.warnings),
        }


@dataclass
class ReconcileResult:
    """Outcome of reconcile_panels.

    Attributes:
        panels: Reconciled panels, in input order
        failures: Panels that failed, keyed by input index
        source_indices: Input index of each output panel
    """
    panels: List[Panel] = field(default_factory=list)
    failures: List[TopologyFailure] = field(default_factory=list)
    source_indices: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "panel_count": len(self.panels),
            "failure_count": self.failure_count,
            "failures": [f.to_dict() for f in self.failures],
            "source_indices": list(self.source_indices),
        }
