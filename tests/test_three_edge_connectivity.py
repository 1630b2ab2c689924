#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Tests for the 3-edge-connectivity engine.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from itertools import combinations

import numpy as np
import pytest
from bubbleweaver.graph_core import (
    BiedgedGraph,
    ThreeEdgeConnectivity,
    three_edge_connected_components,
)

from conftest import build_graph


def _vertex(graph, name, side):
    """Biedged vertex of a segment side ('L' or 'R')."""
    return 2 * graph.segment_index(name) + (1 if side == 'R' else 0)


def _groups(partition):
    return sorted(sorted(group) for group in partition.members())


def _toy_multigraph(num_vertices, edges):
    """Biedged-shaped multigraph from raw edges, for connectivity tests."""
    edge_u = np.array([u for u, _ in edges], dtype=np.int64)
    edge_v = np.array([v for _, v in edges], dtype=np.int64)
    return BiedgedGraph(
        num_vertices=num_vertices,
        edge_u=edge_u,
        edge_v=edge_v,
        edge_kind=np.ones(len(edges), dtype=np.int8),
        segment_names=[str(i) for i in range((num_vertices + 1) // 2)],
    )


def _connected(num_vertices, edges, u, v):
    """Whether u reaches v over the given edge list."""
    adjacent = [[] for _ in range(num_vertices)]
    for a, b in edges:
        adjacent[a].append(b)
        adjacent[b].append(a)
    seen = {u}
    stack = [u]
    while stack:
        node = stack.pop()
        for other in adjacent[node]:
            if other not in seen:
                seen.add(other)
                stack.append(other)
    return v in seen


def _brute_force_groups(num_vertices, edges):
    """3-edge-connected classes: pairs no cut of at most two edges separates."""
    cuts = [()] + [(i,) for i in range(len(edges))] + list(combinations(range(len(edges)), 2))
    remaining = [[e for i, e in enumerate(edges) if i not in cut] for cut in cuts]
    group_of = list(range(num_vertices))
    for u, v in combinations(range(num_vertices), 2):
        if group_of[v] != v:
            continue
        if all(_connected(num_vertices, kept, u, v) for kept in remaining):
            group_of[v] = group_of[u]
    groups = {}
    for vertex, group in enumerate(group_of):
        groups.setdefault(group, []).append(vertex)
    return sorted(groups.values())


class TestBridges:
    """Test bridge detection."""

    def test_chain_all_bridges(self, chain_graph):
        biedged = BiedgedGraph.from_graph(chain_graph)
        partition = ThreeEdgeConnectivity().find_components(biedged)

        assert partition.bridges == list(range(biedged.num_edges))
        assert partition.num_components == biedged.num_vertices

    def test_parallel_edges_not_bridges(self):
        graph = _toy_multigraph(2, [(0, 1), (0, 1)])
        partition = three_edge_connected_components(graph)
        assert partition.bridges == []
        # two parallel edges form a 2-edge-cut
        assert partition.num_components == 2

    def test_triple_parallel_edges_merge(self):
        graph = _toy_multigraph(2, [(0, 1), (0, 1), (0, 1)])
        partition = three_edge_connected_components(graph)
        assert partition.num_components == 1

    def test_hairpin_not_bridge(self, hairpin_graph):
        biedged = BiedgedGraph.from_graph(hairpin_graph)
        partition = ThreeEdgeConnectivity().find_components(biedged)
        loop = next(e for e in range(biedged.num_edges)
                    if biedged.edge_u[e] == biedged.edge_v[e])
        assert loop not in partition.bridges


class TestComponents:
    """Test 3-edge-connected component partitions."""

    def test_simple_bubble_all_singletons(self, simple_bubble_graph):
        biedged = BiedgedGraph.from_graph(simple_bubble_graph)
        partition = ThreeEdgeConnectivity().find_components(biedged)

        assert partition.num_components == biedged.num_vertices
        assert len(partition.cut_classes) == 1
        assert len(partition.cut_classes[0]) == 6

    def test_nested_bubble_boundaries_merge(self, nested_bubble_graph):
        g = nested_bubble_graph
        biedged = BiedgedGraph.from_graph(g)
        partition = ThreeEdgeConnectivity().find_components(biedged)

        inner_left = {_vertex(g, '3', 'R'), _vertex(g, '5', 'L')}
        inner_right = {_vertex(g, '6', 'R'), _vertex(g, '8', 'L')}
        groups = _groups(partition)

        assert sorted(inner_left) in groups
        assert sorted(inner_right) in groups
        assert partition.num_components == biedged.num_vertices - 2

    def test_three_paths_merge(self):
        # K_{2,3}: the two hubs are joined by three edge-disjoint paths
        graph = _toy_multigraph(5, [(0, 2), (2, 1), (0, 3), (3, 1), (0, 4), (4, 1)])
        partition = three_edge_connected_components(graph)
        assert partition.same_component(0, 1)
        assert not partition.same_component(0, 2)
        assert partition.num_components == 4

    def test_complete_graph_one_component(self):
        edges = [(u, v) for u in range(4) for v in range(u + 1, 4)]
        partition = three_edge_connected_components(_toy_multigraph(4, edges))
        assert partition.num_components == 1

    def test_ids_follow_discovery_order(self, nested_bubble_graph):
        biedged = BiedgedGraph.from_graph(nested_bubble_graph)
        partition = ThreeEdgeConnectivity().find_components(biedged)

        seen = []
        for v in partition.discovery_order:
            comp = int(partition.component_of[v])
            if comp not in seen:
                seen.append(comp)
        assert seen == list(range(partition.num_components))

    def test_seeded_runs_identical(self, nested_bubble_graph):
        biedged = BiedgedGraph.from_graph(nested_bubble_graph)
        first = ThreeEdgeConnectivity(label_seed=7).find_components(biedged)
        second = ThreeEdgeConnectivity(label_seed=7).find_components(biedged)
        other_seed = ThreeEdgeConnectivity(label_seed=99).find_components(biedged)

        assert np.array_equal(first.component_of, second.component_of)
        assert np.array_equal(first.component_of, other_seed.component_of)

    def test_multiple_connected_components(self):
        graph = build_graph(['a', 'b', 'c', 'd'], [('a', '+', 'b', '+'), ('c', '+', 'd', '+')])
        partition = three_edge_connected_components(BiedgedGraph.from_graph(graph))
        assert partition.num_components == 8
        assert len(partition.bridges) == 6


class TestRandomMultigraphs:
    """Test partitions against exhaustive cut enumeration."""

    @pytest.mark.parametrize('seed', range(40))
    def test_matches_brute_force(self, seed):
        rng = np.random.default_rng(seed)
        num_vertices = int(rng.integers(2, 8))
        num_edges = int(rng.integers(1, 11))
        edges = [(int(u), int(v)) for u, v in rng.integers(0, num_vertices, size=(num_edges, 2))]

        partition = three_edge_connected_components(_toy_multigraph(num_vertices, edges))

        assert _groups(partition) == _brute_force_groups(num_vertices, edges)

    @pytest.mark.parametrize('seed', range(10))
    def test_bridges_match_single_edge_cuts(self, seed):
        rng = np.random.default_rng(1000 + seed)
        num_vertices = int(rng.integers(2, 8))
        edges = [(int(u), int(v)) for u, v in rng.integers(0, num_vertices, size=(8, 2))]

        partition = three_edge_connected_components(_toy_multigraph(num_vertices, edges))

        expected = [i for i, (u, v) in enumerate(edges)
                    if not _connected(num_vertices, edges[:i] + edges[i + 1:], u, v)]
        assert sorted(partition.bridges) == expected

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
