# File: src/panel_topology/grouping/property_grouper.py
"""
Property equivalence grouping of panels before merging.

Two strategies partition a panel collection into mergeable groups:

- Pairwise: greedy seed scan with a compatibility predicate. A candidate
  joins a group only if the predicate holds against every member already in
  it. The predicate need not be transitive, so which group a panel lands in
  can depend on input order.
- Hashed: exact equality of the values selected by a ComparisonConfig.
  This is a true equivalence relation and does not depend on order.

Property names in hashed mode are dotted paths. The first segment resolves
against the Panel fields, then against the panel's custom_data, e.g.
"property.thickness" or "custom_data.zone" or just "zone".
"""

import logging
import warnings
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ..config.topology_config import ComparisonConfig, GroupingMode
from ..elements.panel_types import Panel
from ..errors import PropertyEquivalenceWarning

logger = logging.getLogger(__name__)

MergePredicate = Callable[[Panel, Panel], bool]

_PANEL_FIELDS = tuple(f.name for f in fields(Panel))


@dataclass
class PanelGroup:
    """Panels that may be merged together.

    Attributes:
        key: Hashed property values, or the group ordinal in pairwise mode
        indices: Input positions of the member panels
        panels: Member panels in input order
    """
    key: Any
    indices: Tuple[int, ...]
    panels: List[Panel] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.panels)


@dataclass
class GroupingResult:
    """Groups plus the decisions made while building them."""
    groups: List[PanelGroup]
    mode: GroupingMode
    property_names: Tuple[str, ...] = ()
    ignored_properties: Tuple[str, ...] = ()
    warnings: List[str] = field(default_factory=list)


# =============================================================================
# Pairwise Mode
# =============================================================================


def _metadata_sets(panel: Panel) -> Tuple[frozenset, frozenset]:
    edges = panel.all_edges()
    return (
        frozenset(edge.release for edge in edges),
        frozenset(edge.support for edge in edges),
    )


def has_mergeable_edge_metadata(panel: Panel, other: Panel) -> bool:
    """Default pairwise predicate: same sets of edge releases and supports."""
    return _metadata_sets(panel) == _metadata_sets(other)


def group_pairwise(
    panels: Sequence[Panel], predicate: Optional[MergePredicate] = None
) -> List[PanelGroup]:
    """Greedy grouping with a (possibly non-transitive) predicate.

    The first remaining panel seeds a group; each later panel joins it if
    the predicate holds against every current member.
    """
    predicate = predicate or has_mergeable_edge_metadata
    remaining = list(range(len(panels)))
    groups: List[PanelGroup] = []

    while remaining:
        members = [remaining.pop(0)]
        rest = []
        for index in remaining:
            candidate = panels[index]
            if all(predicate(panels[m], candidate) for m in members):
                members.append(index)
            else:
                rest.append(index)
        remaining = rest
        groups.append(
            PanelGroup(
                key=len(groups),
                indices=tuple(members),
                panels=[panels[m] for m in members],
            )
        )

    logger.debug(f"Pairwise grouping: {len(panels)} panels -> {len(groups)} groups")
    return groups


# =============================================================================
# Hashed Mode
# =============================================================================


_MISSING = object()


def _hashable(value: Any) -> Any:
    """Normalise a property value into a hashable grouping key."""
    if isinstance(value, dict):
        return tuple(sorted(((str(k), _hashable(v)) for k, v in value.items()), key=lambda kv: kv[0]))
    if isinstance(value, (list, tuple)):
        return tuple(_hashable(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_hashable(v) for v in value)
    if isinstance(value, Enum):
        return value
    if is_dataclass(value) and not isinstance(value, type):
        return (type(value).__name__,) + tuple(
            _hashable(getattr(value, f.name)) for f in fields(value)
        )
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


def resolve_property(panel: Panel, path: str) -> Any:
    """Value of a dotted property path on a panel, or None if absent."""
    head, *rest = path.split(".")
    if head in _PANEL_FIELDS:
        value = getattr(panel, head)
    else:
        value = panel.custom_data.get(head, _MISSING)

    for part in rest:
        if value is _MISSING or value is None:
            break
        if isinstance(value, dict):
            value = value.get(part, _MISSING)
        else:
            value = getattr(value, part, _MISSING)

    return None if value is _MISSING else value


def split_known_properties(
    panels: Sequence[Panel], property_names: Iterable[str]
) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """Separate property names the panels carry from unknown ones.

    A name is known when its first segment is a Panel field or a key of the
    first panel's custom_data.

    Returns:
        (known, ignored) names, each in request order
    """
    reference = panels[0].custom_data if panels else {}
    known, ignored = [], []
    for name in property_names:
        head = name.split(".")[0]
        if head in _PANEL_FIELDS or head in reference:
            known.append(name)
        else:
            ignored.append(name)
    return tuple(known), tuple(ignored)


def group_hashed(
    panels: Sequence[Panel], property_names: Sequence[str]
) -> List[PanelGroup]:
    """Group panels by exact equality of the selected property values."""
    buckets: Dict[Any, List[int]] = {}
    for index, panel in enumerate(panels):
        key = tuple(_hashable(resolve_property(panel, name)) for name in property_names)
        buckets.setdefault(key, []).append(index)

    groups = [
        PanelGroup(key=key, indices=tuple(indices), panels=[panels[i] for i in indices])
        for key, indices in buckets.items()
    ]
    logger.debug(
        f"Hashed grouping on {list(property_names)}: "
        f"{len(panels)} panels -> {len(groups)} groups"
    )
    return groups


# =============================================================================
# Entry Point
# =============================================================================


def group_panels(
    panels: Sequence[Panel],
    property_names: Optional[Iterable[str]] = None,
    predicate: Optional[MergePredicate] = None,
    mode: Optional[GroupingMode] = None,
) -> GroupingResult:
    """Partition panels into mergeable groups.

    Args:
        panels: Input panels
        property_names: Names defining equivalence in hashed mode
        predicate: Compatibility predicate for pairwise mode
        mode: Grouping mode; defaults to HASHED when property names are
            given and PAIRWISE otherwise

    Returns:
        GroupingResult with groups in order of first appearance
    """
    comparison = ComparisonConfig(tuple(property_names or ()))
    if mode is None:
        mode = GroupingMode.HASHED if len(comparison) else GroupingMode.PAIRWISE
    elif isinstance(mode, str):
        mode = GroupingMode(mode)

    if mode is GroupingMode.PAIRWISE:
        return GroupingResult(groups=group_pairwise(panels, predicate), mode=mode)

    known, ignored = split_known_properties(panels, comparison)
    messages = []
    for name in ignored:
        message = f"Comparison property '{name}' not found on panels; ignored"
        logger.warning(message)
        warnings.warn(message, PropertyEquivalenceWarning, stacklevel=3)
        messages.append(message)

    if not known:
        logger.info("No usable comparison properties; all panels form one group")

    return GroupingResult(
        groups=group_hashed(panels, known),
        mode=mode,
        property_names=known,
        ignored_properties=ignored,
        warnings=messages,
    )
