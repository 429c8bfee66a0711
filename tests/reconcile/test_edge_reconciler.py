# File: tests/reconcile/test_edge_reconciler.py
"""Tests for single-panel edge reconciliation."""

import pytest

from panel_topology.config import TopologyConfig
from panel_topology.elements import Arc, Edge, Line, Panel
from panel_topology.errors import (
    DegenerateInputError,
    GeometryConversionError,
    PipelineTimeoutError,
)
from panel_topology.geometry import loop_area, loops_overlap, rings_match
from panel_topology.merging import merge_panels
from panel_topology.reconcile import (
    cancel_duplicates,
    classify_loops,
    flatten_segments,
    reconcile_panel,
    reconcile_panels,
    split_pool,
)

TOL = 1e-6


def square(x0, y0, size=1.0):
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]


@pytest.fixture
def dissolved(loop_edges, slab_property):
    """Factory for a panel whose outer edges are several raw loops."""
    def factory(*loops, openings=(), support=None, name="dissolved"):
        edges = []
        for points in loops:
            edges.extend(loop_edges(points, support=support))
        return Panel(
            external_edges=tuple(edges),
            openings=tuple(openings),
            property=slab_property,
            name=name,
            custom_data={"source": "raw"},
        )
    return factory


class TestSegmentPool:
    """Tests for split_pool and cancel_duplicates."""

    def test_flatten_segments(self, make_opening, make_panel):
        panel = make_panel(square(0, 0, 4.0), openings=[make_opening(square(1, 1))])
        assert len(flatten_segments(panel)) == 8

    def test_crossing_segments_split(self):
        pieces = split_pool([((0, 0), (2, 2)), ((0, 2), (2, 0))], TOL)
        assert len(pieces) == 4

    def test_t_junction_split(self):
        pieces = split_pool([((0, 0), (2, 0)), ((1, 0), (1, 1))], TOL)
        assert len(pieces) == 3

    def test_collinear_overlap_split(self):
        pieces = split_pool([((0, 0), (3, 0)), ((1, 0), (2, 0))], TOL)
        assert sorted(pieces) == [((0, 0), (1, 0)), ((1, 0), (2, 0)), ((1, 0), (2, 0)), ((2, 0), (3, 0))]

    def test_reversed_pair_cancels(self):
        assert cancel_duplicates([((0, 0), (1, 0)), ((1, 0), (0, 0))]) == []

    def test_same_direction_pair_cancels(self):
        assert cancel_duplicates([((0, 0), (1, 0)), ((0, 0), (1, 0))]) == []

    def test_odd_count_keeps_one(self):
        segments = [((0, 0), (1, 0))] * 3
        assert cancel_duplicates(segments) == [((0, 0), (1, 0))]

    def test_net_direction_kept(self):
        segments = [((0, 0), (1, 0)), ((1, 0), (0, 0)), ((1, 0), (0, 0))]
        assert cancel_duplicates(segments) == [((1, 0), (0, 0))]

    def test_unrelated_segments_kept(self):
        segments = [((0, 0), (1, 0)), ((1, 0), (1, 1))]
        assert cancel_duplicates(segments) == segments


class TestClassifyLoops:
    """Tests for the difference-based loop classification."""

    def test_outer_with_hole(self):
        result = classify_loops([square(1, 1), square(0, 0, 4.0)], TOL, 10)

        assert len(result.outers) == 1
        assert rings_match(result.outers[0], square(0, 0, 4.0), TOL)
        assert len(result.holes) == 1

    def test_disjoint_loops(self):
        result = classify_loops([square(0, 0), square(3, 0)], TOL, 10)

        assert len(result.outers) == 2
        assert result.holes == []
        assert result.iterations == 2

    def test_island_inside_hole(self):
        loops = [square(0, 0, 10.0), square(2, 2, 6.0), square(4, 4, 2.0)]
        result = classify_loops(loops, TOL, 10)

        assert len(result.outers) == 2
        assert len(result.holes) == 1
        assert loop_area(result.holes[0]) == pytest.approx(36.0)

    def test_overlapping_loop_subtracted(self):
        result = classify_loops([square(0, 0, 2.0), square(1, 1, 2.0)], TOL, 10)

        assert sorted(loop_area(loop) for loop in result.outers) == pytest.approx([3.0, 4.0])
        assert result.holes == []
        assert not loops_overlap(result.outers[0], result.outers[1], TOL)

    def test_iteration_cap(self):
        with pytest.raises(PipelineTimeoutError) as excinfo:
            classify_loops([square(0, 0), square(3, 0)], TOL, 1)

        assert excinfo.value.limit == 1
        assert excinfo.value.iterations == 1


class TestReconcilePanel:
    """Tests for reconcile_panel."""

    def test_clean_panel_round_trips(self, left_square):
        assert reconcile_panel(left_square) == [left_square]

    def test_clean_panel_with_opening_round_trips(self, make_panel, make_opening):
        panel = make_panel(square(0, 0, 4.0), openings=[make_opening(square(1, 1), name="W1")])
        assert reconcile_panel(panel) == [panel]

    def test_dissolved_squares_match_merge(self, dissolved, left_square, right_square, outline):
        panel = dissolved(square(0, 0), square(1, 0))

        result = reconcile_panel(panel)
        merged = merge_panels([left_square, right_square]).panels[0]

        assert len(result) == 1
        assert outline(result[0]) == outline(merged)
        assert len(result[0].external_edges) == 4
        assert result[0].name == "dissolved"
        assert result[0].custom_data == {"source": "raw"}

    def test_clockwise_neighbour_matches_merge(self, dissolved, left_square, right_square, outline):
        """Test a shared border wound the same way twice also vanishes."""
        panel = dissolved(square(0, 0), list(reversed(square(1, 0))))

        result = reconcile_panel(panel)
        merged = merge_panels([left_square, right_square]).panels[0]

        assert len(result) == 1
        assert outline(result[0]) == outline(merged)
        assert len(result[0].external_edges) == 4

    def test_overlapping_loops_do_not_overlap(self, dissolved, outline):
        panel = dissolved(square(0, 0, 2.0), square(1, 1, 2.0))

        result = reconcile_panel(panel)

        outlines = [outline(p) for p in result]
        assert sum(loop_area(loop) for loop in outlines) == pytest.approx(7.0)
        for i, first in enumerate(outlines):
            for second in outlines[i + 1:]:
                assert not loops_overlap(first, second, TOL)

    def test_support_inherited(self, dissolved, pinned_support):
        panel = dissolved(square(0, 0), square(1, 0), support=pinned_support)

        edges = reconcile_panel(panel)[0].external_edges

        assert len(edges) == 4
        assert all(edge.support == pinned_support for edge in edges)

    def test_collinear_fusing_disabled(self, dissolved):
        panel = dissolved(square(0, 0), square(1, 0))
        config = TopologyConfig(merge_collinear_edges=False)

        assert len(reconcile_panel(panel, config=config)[0].external_edges) == 6

    def test_disjoint_loops_give_two_panels(self, dissolved):
        result = reconcile_panel(dissolved(square(0, 0), square(3, 0)))

        assert len(result) == 2
        assert all(p.name == "dissolved" for p in result)

    def test_island_gives_two_panels(self, dissolved, make_opening, outline):
        panel = dissolved(
            square(0, 0, 10.0),
            square(4, 4, 2.0),
            openings=[make_opening(square(2, 2, 6.0), name="void")],
        )
        result = reconcile_panel(panel)

        assert len(result) == 2
        outer = next(p for p in result if loop_area(outline(p)) == pytest.approx(100.0))
        island = next(p for p in result if loop_area(outline(p)) == pytest.approx(4.0))
        assert [o.name for o in outer.openings] == ["void"]
        assert island.openings == ()

    def test_iteration_cap(self, dissolved):
        config = TopologyConfig(max_iterations=1)
        with pytest.raises(PipelineTimeoutError):
            reconcile_panel(dissolved(square(0, 0), square(3, 0)), config=config)

    def test_arc_rejected(self, slab_property):
        edges = (
            Edge(curve=Line((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))),
            Edge(curve=Arc((1.0, 0.0, 0.0), (1.5, 0.5, 0.0), (1.0, 1.0, 0.0))),
            Edge(curve=Line((1.0, 1.0, 0.0), (0.0, 0.0, 0.0))),
        )
        with pytest.raises(GeometryConversionError):
            reconcile_panel(Panel(external_edges=edges, property=slab_property))

    def test_open_chain_rejected(self, loop_edges):
        edges = loop_edges(square(0, 0))[:3]
        with pytest.raises(DegenerateInputError):
            reconcile_panel(Panel(external_edges=edges))

    def test_fully_cancelled_rejected(self, loop_edges):
        edges = loop_edges(square(0, 0)) + loop_edges(list(reversed(square(0, 0))))
        with pytest.raises(DegenerateInputError, match="cancelled"):
            reconcile_panel(Panel(external_edges=edges))

    def test_no_edges_rejected(self):
        with pytest.raises(DegenerateInputError):
            reconcile_panel(Panel(external_edges=()))

    def test_input_not_modified(self, dissolved):
        panel = dissolved(square(0, 0), square(1, 0))
        edges = panel.external_edges
        reconcile_panel(panel)
        assert panel.external_edges == edges
        assert len(panel.external_edges) == 8


class TestReconcilePanels:
    """Tests for reconcile_panels failure isolation."""

    def test_failures_isolated(self, left_square, right_square, loop_edges):
        broken = Panel(external_edges=loop_edges(square(5, 5))[:3], name="broken")

        result = reconcile_panels([left_square, broken, right_square])

        assert not result.ok
        assert result.panels == [left_square, right_square]
        assert result.source_indices == [0, 2]
        failure = result.failures[0]
        assert failure.key == 1
        assert failure.stage == "reconcile"
        assert failure.error_type == "DegenerateInputError"

    def test_to_dict(self, left_square):
        data = reconcile_panels([left_square]).to_dict()
        assert data == {"panel_count": 1, "failure_count": 0, "failures": [], "source_indices": [0]}
