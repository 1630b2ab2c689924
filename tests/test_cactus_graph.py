#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Tests for cactus contraction and verification.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import numpy as np
import pytest
from bubbleweaver.graph_core import (
    BiedgedGraph,
    CactusGraph,
    CactusPropertyError,
    ComponentPartition,
    InternalConsistencyError,
)

from conftest import build_cactus, build_graph, random_graph


class TestContraction:
    """Test contraction of 3-edge-connected components."""

    def test_chain_has_no_cycles(self, chain_graph):
        cactus = build_cactus(chain_graph)
        assert cactus.cycles() == []
        assert len(cactus.bridges()) == len(cactus.edges)

    def test_simple_bubble_single_cycle(self, simple_bubble_graph):
        cactus = build_cactus(simple_bubble_graph)
        cycles = cactus.cycles()

        assert len(cycles) == 1
        assert len(cycles[0]) == 6
        # 1L-1R, 1R-2L, 2L-2R and 4L-4R stay outside the cycle
        assert len(cactus.bridges()) == 4

    def test_nested_cycles(self, nested_bubble_graph):
        cactus = build_cactus(nested_bubble_graph)
        lengths = sorted(len(c) for c in cactus.cycles())
        assert lengths == [3, 3, 3, 3, 8]

    def test_cycle_edges_join_consecutive_nodes(self, nested_bubble_graph):
        cactus = build_cactus(nested_bubble_graph)
        for cycle in cactus.cycles():
            k = len(cycle.nodes)
            for i, idx in enumerate(cycle.edges):
                edge = cactus.edges[idx]
                assert {edge.node_u, edge.node_v} == {cycle.nodes[i], cycle.nodes[(i + 1) % k]}

    def test_every_edge_in_one_cycle_or_bridge(self, nested_bubble_graph):
        cactus = build_cactus(nested_bubble_graph)
        used = [idx for cycle in cactus.cycles() for idx in cycle.edges]
        assert len(used) == len(set(used))
        assert sorted(used + cactus.bridges()) == list(range(len(cactus.edges)))

    def test_hairpin_kept_as_loop(self, hairpin_graph):
        cactus = build_cactus(hairpin_graph)
        cycles = cactus.cycles()

        assert len(cycles) == 1
        assert cycles[0].is_loop
        node = cycles[0].nodes[0]
        side = cactus.edges[cycles[0].edges[0]].side_u
        assert cycles[0].sides_at(node) == (side, side)

    def test_internal_edges_dropped(self):
        # three parallel links make both sides of the link one component
        graph = build_graph(['a', 'b'], [('a', '+', 'b', '+')] * 3)
        cactus = build_cactus(graph)

        assert cactus.num_nodes == 3
        assert len(cactus.edges) == 2
        assert cactus.cycles() == []


class TestVerification:
    """Test detection of invalid partitions."""

    def test_under_merged_partition_rejected(self):
        # K4 left as singletons: every edge would lie on several cycles
        edges = [(u, v) for u in range(4) for v in range(u + 1, 4)]
        biedged = BiedgedGraph(
            num_vertices=4,
            edge_u=np.array([u for u, _ in edges], dtype=np.int64),
            edge_v=np.array([v for _, v in edges], dtype=np.int64),
            edge_kind=np.ones(len(edges), dtype=np.int8),
            segment_names=['a', 'b'],
        )
        partition = ComponentPartition(component_of=np.arange(4), num_components=4)

        with pytest.raises(CactusPropertyError) as excinfo:
            CactusGraph.from_partition(biedged, partition)
        assert isinstance(excinfo.value, InternalConsistencyError)
        assert excinfo.value.edge_id in range(len(edges))

    def test_verification_can_be_skipped(self):
        edges = [(u, v) for u in range(4) for v in range(u + 1, 4)]
        biedged = BiedgedGraph(
            num_vertices=4,
            edge_u=np.array([u for u, _ in edges], dtype=np.int64),
            edge_v=np.array([v for _, v in edges], dtype=np.int64),
            edge_kind=np.ones(len(edges), dtype=np.int8),
            segment_names=['a', 'b'],
        )
        partition = ComponentPartition(component_of=np.arange(4), num_components=4)

        cactus = CactusGraph.from_partition(biedged, partition, verify=False)
        assert len(cactus.edges) == 6

class TestRandomGraphs:
    """Test the cactus property on random graphs."""

    @pytest.mark.parametrize('seed', range(50))
    def test_contraction_is_cactus(self, seed):
        cactus = build_cactus(random_graph(seed), verify=True)

        used = [idx for cycle in cactus.cycles() for idx in cycle.edges]
        assert len(used) == len(set(used))
        assert sorted(used + cactus.bridges()) == list(range(len(cactus.edges)))
        for cycle in cactus.cycles():
            assert len(set(cycle.nodes)) == len(cycle.nodes)

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
