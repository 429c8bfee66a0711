# File: src/panel_topology/reconcile/__init__.py
"""
Edge topology reconciliation.

This module provides:
- Re-attachment of Release/Support metadata to regenerated loops
- The per-panel reconciler (split, cancel, join, classify, emit)
- A batch entry point with per-panel failure isolation

Example:
    >>> from panel_topology.reconcile import reconcile_panel
    >>> panels = reconcile_panel(dissolved_panel, tolerance=1e-6)
"""

from .edge_matcher import (
    SourceLoop,
    EdgeCatalog,
    split_ring,
    rebuild_loop_edges,
    rebuild_opening,
)

from .edge_reconciler import (
    ClassifiedLoops,
    flatten_segments,
    split_pool,
    cancel_duplicates,
    classify_loops,
    reconcile_panel,
    reconcile_panels,
)

__all__ = [
    # Metadata re-attachment
    "SourceLoop",
    "EdgeCatalog",
    "split_ring",
    "rebuild_loop_edges",
    "rebuild_opening",
    # Reconciler
    "ClassifiedLoops",
    "flatten_segments",
    "split_pool",
    "cancel_duplicates",
    "classify_loops",
    "reconcile_panel",
    "reconcile_panels",
]
