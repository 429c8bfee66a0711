# File: tests/merging/test_panel_merger.py
"""Tests for the merge_panels entry point."""

import pytest

from panel_topology.config import TopologyConfig
from panel_topology.elements import Arc, ConstantThickness, Edge, Line, Panel
from panel_topology.errors import DegenerateInputError, PropertyEquivalenceWarning
from panel_topology.geometry import loop_area, strictly_contains
from panel_topology.grouping import PanelGroup
from panel_topology.merging import convertible_panels, coplanar_clusters, merge_panels

TOL = 1e-6


@pytest.fixture
def arc_panel(slab_property):
    """Panel with one curved edge."""
    edges = (
        Edge(curve=Line((10.0, 0.0, 0.0), (11.0, 0.0, 0.0))),
        Edge(curve=Arc((11.0, 0.0, 0.0), (11.5, 0.5, 0.0), (11.0, 1.0, 0.0))),
        Edge(curve=Line((11.0, 1.0, 0.0), (10.0, 1.0, 0.0))),
        Edge(curve=Line((10.0, 1.0, 0.0), (10.0, 0.0, 0.0))),
    )
    return Panel(external_edges=edges, property=slab_property, name="C")


class TestMergeBasics:
    """Tests for simple merges."""

    def test_single_panel_is_unchanged(self, left_square):
        result = merge_panels([left_square])

        assert result.ok
        assert result.panels == [left_square]

    def test_adjacent_squares(self, left_square, right_square, outline):
        result = merge_panels([left_square, right_square])

        assert len(result.panels) == 1
        merged = result.panels[0]
        assert outline(merged) == [(0, 0), (2, 0), (2, 1), (0, 1)]
        assert len(merged.external_edges) == 4
        assert not any(
            edge.curve.start[0] == 1.0 and edge.curve.end[0] == 1.0
            for edge in merged.external_edges
        )

    def test_inputs_not_modified(self, left_square, right_square):
        before = (left_square.external_edges, right_square.external_edges)
        merge_panels([left_square, right_square])
        assert (left_square.external_edges, right_square.external_edges) == before

    def test_disjoint_panels_stay_separate(self, make_panel, outline):
        panels = [
            make_panel([(0, 0), (1, 0), (1, 1), (0, 1)]),
            make_panel([(5, 0), (7, 0), (7, 2), (5, 2)]),
        ]
        result = merge_panels(panels)

        assert len(result.panels) == 2
        assert sum(loop_area(outline(p)) for p in result.panels) == pytest.approx(5.0)

    def test_overlapping_panels(self, make_panel, outline):
        panels = [
            make_panel([(0, 0), (2, 0), (2, 2), (0, 2)]),
            make_panel([(1, 1), (3, 1), (3, 3), (1, 3)]),
        ]
        result = merge_panels(panels)

        assert len(result.panels) == 1
        assert loop_area(outline(result.panels[0])) == pytest.approx(7.0)

    def test_empty_input_raises(self):
        with pytest.raises(DegenerateInputError):
            merge_panels([])

    def test_invalid_config_raises(self, left_square):
        with pytest.raises(ValueError):
            merge_panels([left_square], config=TopologyConfig(tolerance=-1.0))


class TestGuideAttributes:
    """Tests for attribute inheritance."""

    def test_first_panel_is_guide(self, left_square, right_square, outline):
        forward = merge_panels([left_square, right_square]).panels[0]
        backward = merge_panels([right_square, left_square]).panels[0]

        assert outline(forward) == outline(backward)
        assert forward.name == "A"
        assert backward.name == "B"

    def test_explicit_guide(self, left_square, right_square, make_panel):
        guide = make_panel([(0, 0), (1, 0), (1, 1)], name="G", custom_data={"zone": "north"})
        merged = merge_panels([left_square, right_square], guide=guide).panels[0]

        assert merged.name == "G"
        assert merged.custom_data == {"zone": "north"}


class TestOpenings:
    """Tests for opening handling during merges."""

    def test_opening_kept(self, make_panel, make_opening):
        opening = make_opening([(1, 1), (2, 1), (2, 2), (1, 2)], name="W1")
        panels = [
            make_panel([(0, 0), (4, 0), (4, 4), (0, 4)], openings=[opening]),
            make_panel([(4, 0), (8, 0), (8, 4), (4, 4)]),
        ]
        result = merge_panels(panels)

        assert len(result.panels) == 1
        assert result.panels[0].openings == (opening,)

    def test_openings_strictly_inside(self, make_panel, make_opening, outline, opening_outline_2d):
        panels = [
            make_panel(
                [(0, 0), (4, 0), (4, 4), (0, 4)],
                openings=[make_opening([(1, 1), (2, 1), (2, 2), (1, 2)])],
            ),
            make_panel(
                [(4, 0), (8, 0), (8, 4), (4, 4)],
                openings=[make_opening([(5, 1), (7, 1), (7, 3), (5, 3)])],
            ),
        ]
        for panel in merge_panels(panels).panels:
            for opening in panel.openings:
                assert strictly_contains(outline(panel), opening_outline_2d(opening), TOL)

    def test_overlapping_openings_consolidated(self, make_panel, make_opening, opening_outline_2d):
        panels = [
            make_panel(
                [(0, 0), (4, 0), (4, 4), (0, 4)],
                openings=[make_opening([(1, 1), (3, 1), (3, 2), (1, 2)])],
            ),
            make_panel(
                [(0, 0), (6, 0), (6, 4), (0, 4)],
                openings=[make_opening([(2, 1), (4, 1), (4, 2), (2, 2)])],
            ),
        ]
        result = merge_panels(panels)

        assert len(result.panels) == 1
        openings = result.panels[0].openings
        assert len(openings) == 1
        assert loop_area(opening_outline_2d(openings[0])) == pytest.approx(3.0)

    def test_enclosed_void_becomes_opening(self, make_panel, outline, opening_outline_2d):
        strips = [
            [(0, 0), (3, 0), (3, 1), (0, 1)],
            [(0, 2), (3, 2), (3, 3), (0, 3)],
            [(0, 1), (1, 1), (1, 2), (0, 2)],
            [(2, 1), (3, 1), (3, 2), (2, 2)],
        ]
        result = merge_panels([make_panel(points) for points in strips])

        assert len(result.panels) == 1
        panel = result.panels[0]
        assert loop_area(outline(panel)) == pytest.approx(9.0)
        assert len(panel.external_edges) == 4
        assert len(panel.openings) == 1
        assert loop_area(opening_outline_2d(panel.openings[0])) == pytest.approx(1.0)

    def test_orphaned_opening_warns(self, make_panel, make_opening):
        opening = make_opening([(0, 1), (1, 1), (1, 2), (0, 2)], name="W1")
        panel = make_panel([(0, 0), (4, 0), (4, 4), (0, 4)], openings=[opening])

        result = merge_panels([panel])

        assert result.ok
        assert result.panels[0].openings == ()
        assert any("W1" in message for message in result.warnings)


class TestGrouping:
    """Tests for grouping and edge metadata during merges."""

    def test_metadata_blocks_default_merge(self, make_panel, pinned_support):
        panels = [
            make_panel([(0, 0), (1, 0), (1, 1), (0, 1)], support=pinned_support),
            make_panel([(1, 0), (2, 0), (2, 1), (1, 1)]),
        ]
        assert len(merge_panels(panels).panels) == 2

    def test_metadata_inherited_per_edge(self, make_panel, pinned_support):
        """Test edges keep the support of the panel they came from."""
        panels = [
            make_panel([(0, 0), (1, 0), (1, 1), (0, 1)], support=pinned_support),
            make_panel([(1, 0), (2, 0), (2, 1), (1, 1)]),
        ]
        result = merge_panels(panels, property_names=["property"])

        assert len(result.panels) == 1
        edges = result.panels[0].external_edges
        assert len(edges) == 6
        pinned = [e for e in edges if e.support == pinned_support]
        assert len(pinned) == 3
        assert all(e.curve.start[0] <= 1.0 and e.curve.end[0] <= 1.0 for e in pinned)

    def test_different_properties_not_merged(self, make_panel):
        thin = ConstantThickness(name="Slab 150", thickness=0.15)
        panels = [
            make_panel([(0, 0), (1, 0), (1, 1), (0, 1)]),
            make_panel([(1, 0), (2, 0), (2, 1), (1, 1)], property=thin),
        ]
        result = merge_panels(panels, property_names=["property"])
        assert len(result.panels) == 2

    def test_unknown_property_warning(self, left_square, right_square):
        with pytest.warns(PropertyEquivalenceWarning):
            result = merge_panels([left_square, right_square], property_names=["property", "colour"])

        assert len(result.panels) == 1
        assert any("colour" in message for message in result.warnings)

    def test_non_coplanar_panels_not_merged(self, make_panel, left_square):
        raised = make_panel([(1, 0), (2, 0), (2, 1), (1, 1)], z=1.0)
        result = merge_panels([left_square, raised])

        assert len(result.panels) == 2
        assert result.panels[0] == left_square
        assert result.panels[1].external_edges == raised.external_edges
        assert result.panels[1].name == "A"

    def test_coplanar_clusters(self, make_panel, left_square, right_square):
        raised = make_panel([(0, 0), (1, 0), (1, 1), (0, 1)], z=2.0)
        clusters = coplanar_clusters([left_square, raised, right_square], TopologyConfig())

        assert [len(members) for _, members in clusters] == [2, 1]


class TestFailureIsolation:
    """Tests for group-local failures."""

    def test_curved_group_fails_alone(self, left_square, right_square, arc_panel):
        result = merge_panels([left_square, arc_panel, right_square], property_names=["name"])

        assert not result.ok
        assert result.failure_count == 1
        failure = result.failures[0]
        assert failure.error_type == "GeometryConversionError"
        assert failure.stage == "plane"
        assert failure.indices == (1,)
        assert len(result.panels) == 2

    def test_curved_panel_fails_without_its_group(self, left_square, right_square, arc_panel, outline):
        """Test the siblings of a curved panel in the same group still merge."""
        result = merge_panels([left_square, arc_panel, right_square])

        assert result.failure_count == 1
        failure = result.failures[0]
        assert failure.error_type == "GeometryConversionError"
        assert failure.stage == "plane"
        assert failure.indices == (1,)
        assert len(result.panels) == 1
        assert outline(result.panels[0]) == [(0, 0), (2, 0), (2, 1), (0, 1)]
        assert result.panels[0].name == "A"

    def test_convertible_panels(self, left_square, right_square, arc_panel):
        group = PanelGroup(key=0, indices=(0, 1, 2), panels=[left_square, arc_panel, right_square])

        kept, failures = convertible_panels(group, TopologyConfig())

        assert kept.indices == (0, 2)
        assert kept.panels == [left_square, right_square]
        assert [f.indices for f in failures] == [(1,)]
        assert failures[0].key == 0

    def test_coincident_openings_fail_group(self, make_panel, make_opening):
        hole = [(1, 1), (2, 1), (2, 2), (1, 2)]
        panels = [
            make_panel([(0, 0), (4, 0), (4, 4), (0, 4)], openings=[make_opening(hole)]),
            make_panel([(2, 0), (6, 0), (6, 4), (2, 4)]),
            make_panel([(0, 0), (3, 0), (3, 4), (0, 4)], openings=[make_opening(hole)]),
        ]
        result = merge_panels(panels)

        assert result.failure_count == 1
        assert result.failures[0].stage == "openings"
        assert result.failures[0].error_type == "DegenerateInputError"
        assert result.panels == []
