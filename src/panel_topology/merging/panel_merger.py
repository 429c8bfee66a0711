# File: src/panel_topology/merging/panel_merger.py
"""
Merge entry point: consolidate coplanar panels into a minimal panel set.

Pipeline per group:
    group_panels -> coplanar clusters -> merge_outlines
    -> resolve_openings -> assemble_panels

Failures are group-local. A PanelTopologyError raised while merging one
group is recorded as a TopologyFailure on the result and the remaining
groups are still merged. A panel whose edges cannot be reduced to
straight loops fails alone and the rest of its group is merged without it.
Any other exception propagates.

Example:
    >>> result = merge_panels(panels, property_names=["property"])
    >>> if not result.ok:
    ...     for failure in result.failures:
    ...         print(failure.key, failure.message)
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config.topology_config import DISTANCE_TOLERANCE, TopologyConfig
from ..elements.edge_geometry import opening_outline, panel_frame, panel_outline
from ..elements.panel_types import Panel
from ..errors import DegenerateInputError, GeometryConversionError, PanelTopologyError
from ..geometry.plane import PlaneFrame
from ..grouping.property_grouper import MergePredicate, PanelGroup, group_panels
from ..reconcile.edge_matcher import EdgeCatalog
from ..results import MergeResult, TopologyFailure
from .opening_resolver import resolve_openings
from .outline_merger import merge_outlines, panel_outlines
from .panel_assembler import assemble_panels, select_guide

logger = logging.getLogger(__name__)


def coplanar_clusters(
    panels: Sequence[Panel], config: TopologyConfig
) -> List[Tuple[PlaneFrame, List[Panel]]]:
    """Partition panels by plane.

    Each cluster uses the frame of its first panel; frames are canonical so
    coplanar panels map to the same local coordinates.
    """
    clusters: List[Tuple[PlaneFrame, List[Panel]]] = []
    for panel in panels:
        frame = panel_frame(panel, config.tolerance)
        for cluster_frame, members in clusters:
            if cluster_frame.is_coplanar(frame, config.tolerance, config.angle_tolerance):
                members.append(panel)
                break
        else:
            clusters.append((frame, [panel]))
    return clusters


def convertible_panels(
    group: PanelGroup, config: TopologyConfig
) -> Tuple[PanelGroup, List[TopologyFailure]]:
    """Drop the panels of a group that cannot be reduced to straight loops.

    A panel whose outline or openings cannot be converted fails on its own,
    keyed by the group and carrying only that panel's index.
    """
    tolerance = config.tolerance
    survivors: List[int] = []
    failures: List[TopologyFailure] = []
    for index, panel in zip(group.indices, group.panels):
        try:
            frame = panel_frame(panel, tolerance)
            panel_outline(panel, frame, tolerance)
            for opening in panel.openings:
                opening_outline(opening, frame, tolerance)
        except GeometryConversionError as error:
            logger.warning(f"Panel {index} ({panel.name!r}) skipped: {error.message}")
            failures.append(
                TopologyFailure.from_error(error, key=group.key, stage="plane", indices=(index,))
            )
            continue
        survivors.append(index)
    kept = PanelGroup(
        key=group.key,
        indices=tuple(survivors),
        panels=[panel for index, panel in zip(group.indices, group.panels) if index in survivors],
    )
    return kept, failures


def merge_group(
    panels: Sequence[Panel],
    config: TopologyConfig,
    guide: Optional[Panel] = None,
) -> Tuple[List[Panel], List[str]]:
    """Merge one group of mutually compatible panels.

    Returns:
        (merged panels, warnings)

    Raises:
        PanelTopologyError: With the failing stage recorded in its context.
    """
    tolerance = config.tolerance
    group_guide = select_guide(panels, guide)
    merged: List[Panel] = []
    notes: List[str] = []

    stage = "plane"
    try:
        clusters = coplanar_clusters(panels, config)
        if len(clusters) > 1:
            logger.debug(f"Group spans {len(clusters)} planes; merging each separately")

        for frame, members in clusters:
            stage = "outline"
            loops = panel_outlines(members, frame, tolerance)
            openings = [
                (opening, opening_outline(opening, frame, tolerance))
                for panel in members
                for opening in panel.openings
            ]

            stage = "union"
            rings = merge_outlines(loops, tolerance)

            stage = "openings"
            resolution = resolve_openings(rings, openings, tolerance)
            notes.extend(resolution.warnings)

            stage = "assembly"
            catalog = EdgeCatalog.from_panels(members, frame, tolerance)
            merged.extend(
                assemble_panels(
                    resolution.outlines,
                    group_guide,
                    catalog,
                    merge_collinear=config.merge_collinear_edges,
                )
            )
    except PanelTopologyError as error:
        error.context.setdefault("stage", stage)
        raise

    return merged, notes


def merge_panels(
    panels: Iterable[Panel],
    property_names: Optional[Iterable[str]] = None,
    tolerance: float = DISTANCE_TOLERANCE,
    guide: Optional[Panel] = None,
    predicate: Optional[MergePredicate] = None,
    config: Optional[TopologyConfig] = None,
) -> MergeResult:
    """Merge coplanar, property-compatible panels.

    Args:
        panels: Input panels, never modified
        property_names: Properties defining mergeable panels (hashed mode)
        tolerance: Distance tolerance, used when no config is given
        guide: Panel whose attributes every merged panel inherits;
            defaults to the first panel of each group
        predicate: Pairwise compatibility predicate (pairwise mode)
        config: Full engine configuration

    Returns:
        MergeResult with merged panels, failures and warnings

    Raises:
        DegenerateInputError: If no panels are given.
        ValueError: If the configuration is invalid.
    """
    panels = list(panels)
    if not panels:
        raise DegenerateInputError("merge_panels needs at least one panel")

    config = config or TopologyConfig(tolerance=tolerance)
    config.validate()

    mode = config.resolve_grouping_mode(property_names)
    grouping = group_panels(panels, property_names, predicate=predicate, mode=mode)
    result = MergeResult(warnings=list(grouping.warnings))

    logger.info(
        f"Merging {len(panels)} panels in {len(grouping.groups)} groups "
        f"({grouping.mode.value} grouping)"
    )

    for group in grouping.groups:
        kept, skipped = convertible_panels(group, config)
        result.failures.extend(skipped)
        if not kept.panels:
            continue
        try:
            merged, notes = merge_group(kept.panels, config, guide)
        except PanelTopologyError as error:
            stage = error.context.get("stage", "merge")
            logger.warning(
                f"Group {group.key!r} (panels {list(kept.indices)}) failed at "
                f"{stage}: {error.message}"
            )
            result.failures.append(
                TopologyFailure.from_error(error, key=group.key, stage=stage, indices=kept.indices)
            )
            continue
        result.panels.extend(merged)
        result.warnings.extend(notes)

    logger.info(
        f"Merge produced {len(result.panels)} panels with {result.failure_count} failed groups"
    )
    return result
