# File: src/panel_topology/reconcile/edge_reconciler.py
"""
Edge topology reconciliation of a single panel.

Rebuilds clean boundary loops from a panel whose raw outer and opening
edges may overlap, cross or repeat (for instance after adjacent panels were
dissolved by hand), then re-attaches the original Release/Support metadata.

Pipeline:
    1. Flatten every edge into one pool of straight segments
    2. Split the pool at all intersection points
    3. Cancel reversed duplicates (a shared border seen from both sides)
    4. Join the surviving segments into closed loops
    5. Classify loops by boolean difference until the loop sets are stable
    6. Re-attach metadata from the original edges
    7. Emit one panel per outer loop with the holes it strictly contains

Step 5 is a fix-point over a worklist of loop sets. Its iteration count is
capped by TopologyConfig.max_iterations; exceeding the cap raises
PipelineTimeoutError instead of looping on malformed geometry.
"""

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config.topology_config import DISTANCE_TOLERANCE, TopologyConfig
from ..elements.edge_geometry import edge_segments
from ..elements.panel_types import Panel
from ..errors import DegenerateInputError, PanelTopologyError, PipelineTimeoutError
from ..geometry.containment import contains, distribute_holes, loops_overlap, parents
from ..geometry.kernel import difference, intersections, join_into_loops, split_at
from ..geometry.loops import (
    Loop2,
    PointRegistry,
    Segment2,
    loop_area,
    loop_sets_match,
)
from ..geometry.plane import PlaneFrame
from ..results import ReconcileResult, TopologyFailure
from ..utils.logging_config import TRACE_LEVEL
from .edge_matcher import EdgeCatalog, rebuild_loop_edges, rebuild_opening

logger = logging.getLogger(__name__)


@dataclass
class ClassifiedLoops:
    """Stable outer loops and hole loops produced by the fix-point."""
    outers: List[Loop2]
    holes: List[Loop2]
    iterations: int


# =============================================================================
# Segment Pool
# =============================================================================


def flatten_segments(panel: Panel) -> List[Tuple[tuple, tuple]]:
    """Every outer and opening edge of a panel as 3D straight segments.

    Raises:
        GeometryConversionError: If any edge is curved.
    """
    segments = []
    for edge in panel.all_edges():
        segments.extend(edge_segments(edge))
    return segments


def split_pool(segments: Sequence[Segment2], tolerance: float) -> List[Segment2]:
    """Split segments at every intersection so none cross in their interiors.

    End points are snapped onto a shared registry, so the returned segments
    can be compared by exact point equality.
    """
    registry = PointRegistry(tolerance)
    snapped = []
    for segment in segments:
        a, b = registry.snap_segment(segment)
        if a != b:
            snapped.append((a, b))

    for point in intersections(snapped, tolerance):
        registry.snap(point)
    cut_points = registry.points

    pieces: List[Segment2] = []
    for segment in snapped:
        for piece in split_at(segment, cut_points, tolerance):
            a, b = registry.snap_segment(piece)
            if a != b:
                pieces.append((a, b))

    logger.log(TRACE_LEVEL, f"Split {len(snapped)} segments into {len(pieces)} pieces")
    return pieces


def cancel_duplicates(segments: Iterable[Segment2]) -> List[Segment2]:
    """Remove segments present an even number of times.

    Occurrences are counted regardless of direction, like a symmetric
    difference: an even count removes the segment and an odd count keeps a
    single copy, in the direction that occurs more often. Segments must
    already be snapped.
    """
    counts = Counter(segments)
    kept: List[Segment2] = []
    seen = set()
    for (a, b) in counts:
        if (a, b) in seen:
            continue
        seen.add((a, b))
        seen.add((b, a))
        forward, backward = counts[(a, b)], counts.get((b, a), 0)
        if (forward + backward) % 2 == 0:
            continue
        kept.append((a, b) if forward >= backward else (b, a))

    logger.debug(f"Duplicate cancellation kept {len(kept)} of {sum(counts.values())} segments")
    return kept


# =============================================================================
# Loop Classification
# =============================================================================


def classify_loops(
    loops: Sequence[Loop2], tolerance: float, max_iterations: int
) -> ClassifiedLoops:
    """Split joined loops into outer loops and holes by boolean difference.

    Each loop set is processed by taking its largest loop as the outer
    boundary. Loops whose direct container is that outer are subtracted
    from it; loops outside it, and loops nested inside another inner loop,
    are queued as new sets. Outside loops that overlap the outer are also
    subtracted from it, so the sets never cover the same area twice. A set is final when the difference returns the
    outer and its holes unchanged; otherwise the difference result is
    queued and classified again.

    Raises:
        PipelineTimeoutError: If more than max_iterations sets are processed.
    """
    worklist: List[List[Loop2]] = [list(loops)]
    outers: List[Loop2] = []
    holes: List[Loop2] = []
    iterations = 0

    while worklist:
        iterations += 1
        if iterations > max_iterations:
            raise PipelineTimeoutError(
                f"Loop classification did not converge within {max_iterations} iterations",
                iterations=iterations - 1,
                limit=max_iterations,
                context={"pending_sets": len(worklist)},
            )

        current = sorted(worklist.pop(0), key=loop_area, reverse=True)
        outer, rest = current[0], current[1:]

        direct: List[Loop2] = []
        nested: List[Loop2] = []
        outside: List[Loop2] = []
        if rest:
            owners = parents([outer] + rest, tolerance)
            for index, loop in enumerate(rest, start=1):
                if owners[index] == 0:
                    direct.append(loop)
                elif contains(outer, loop, tolerance):
                    nested.append(loop)
                else:
                    outside.append(loop)

        overlapping = [loop for loop in outside if loops_overlap(outer, loop, tolerance)]
        if outside:
            worklist.append(outside)
        if nested:
            worklist.append(nested)

        result = difference(outer, direct + overlapping, tolerance)
        if not result:
            logger.debug("Loop set vanished under difference; dropped")
            continue

        if loop_sets_match(result, [outer] + direct, tolerance):
            logger.log(
                TRACE_LEVEL,
                f"Iteration {iterations}: stable outer with {len(direct)} holes",
            )
            outers.append(outer)
            holes.extend(direct)
        else:
            logger.log(
                TRACE_LEVEL,
                f"Iteration {iterations}: difference changed the set, requeued {len(result)} rings",
            )
            worklist.append(result)

    logger.debug(
        f"Classified {len(loops)} loops into {len(outers)} outer loops and "
        f"{len(holes)} holes in {iterations} iterations"
    )
    return ClassifiedLoops(outers=outers, holes=holes, iterations=iterations)


# =============================================================================
# Entry Points
# =============================================================================


def reconcile_panel(
    panel: Panel,
    tolerance: float = DISTANCE_TOLERANCE,
    config: Optional[TopologyConfig] = None,
) -> List[Panel]:
    """Rebuild a panel's loops from its raw edges.

    Args:
        panel: Panel with possibly overlapping or duplicated edges
        tolerance: Distance tolerance, used when no config is given
        config: Full engine configuration

    Returns:
        One panel per surviving outer loop, carrying the input panel's
        non-geometric attributes

    Raises:
        GeometryConversionError: If an edge is curved or the edges are not
            planar.
        DegenerateInputError: If the edges do not form closed loops or
            nothing survives reconciliation.
        PipelineTimeoutError: If loop classification does not converge.
    """
    config = config or TopologyConfig(tolerance=tolerance)
    config.validate()
    tolerance = config.tolerance

    raw = flatten_segments(panel)
    if not raw:
        raise DegenerateInputError("Panel has no edges to reconcile", {"panel": panel.name})

    frame = PlaneFrame.from_segments(raw, tolerance)
    local = [
        tuple(frame.project_all(segment, tolerance))
        for segment in raw
    ]

    pieces = split_pool(local, tolerance)
    remaining = cancel_duplicates(pieces)
    if not remaining:
        raise DegenerateInputError(
            "Every edge cancelled against a duplicate; no boundary remains",
            {"panel": panel.name, "segment_count": len(pieces)},
        )

    loops = join_into_loops(remaining, tolerance)
    classified = classify_loops(loops, tolerance, config.max_iterations)
    if not classified.outers:
        raise DegenerateInputError(
            "Reconciliation produced no outer loop", {"panel": panel.name}
        )

    assigned, orphans = distribute_holes(classified.outers, classified.holes, tolerance)
    if orphans:
        raise DegenerateInputError(
            f"{len(orphans)} holes are not inside any outer loop",
            {"panel": panel.name, "holes": [classified.holes[i][:4] for i in orphans]},
        )

    catalog = EdgeCatalog(frame=frame, tolerance=tolerance)
    catalog.add_loop(panel.external_edges)
    for opening in panel.openings:
        catalog.add_loop(opening.edges, opening=opening)

    merge_collinear = config.merge_collinear_edges
    output = []
    for outer, hole_indices in zip(classified.outers, assigned):
        external_edges = rebuild_loop_edges(outer, catalog, hole=False, merge_collinear=merge_collinear)
        openings = tuple(
            rebuild_opening(classified.holes[i], catalog, merge_collinear=merge_collinear)
            for i in hole_indices
        )
        output.append(
            replace(
                panel,
                external_edges=external_edges,
                openings=openings,
                custom_data=dict(panel.custom_data),
            )
        )

    logger.debug(
        f"Reconciled panel '{panel.name or '<unnamed>'}': {len(raw)} segments -> "
        f"{len(output)} panels"
    )
    return output


def reconcile_panels(
    panels: Iterable[Panel],
    tolerance: float = DISTANCE_TOLERANCE,
    config: Optional[TopologyConfig] = None,
) -> ReconcileResult:
    """Reconcile every panel, isolating failures per panel.

    Returns:
        ReconcileResult with reconciled panels and one failure per panel
        that raised a PanelTopologyError
    """
    config = config or TopologyConfig(tolerance=tolerance)
    config.validate()

    result = ReconcileResult()
    for index, panel in enumerate(panels):
        try:
            reconciled = reconcile_panel(panel, config=config)
        except PanelTopologyError as error:
            logger.warning(f"Panel {index} ('{panel.name}') failed to reconcile: {error.message}")
            result.failures.append(
                TopologyFailure.from_error(error, key=index, stage="reconcile", indices=(index,))
            )
            continue
        result.panels.extend(reconciled)
        result.source_indices.extend([index] * len(reconciled))

    logger.info(
        f"Reconciled {len(result.panels)} panels with {result.failure_count} failures"
    )
    return result
