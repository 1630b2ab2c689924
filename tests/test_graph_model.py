#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Tests for the bidirected graph model and path store.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from bubbleweaver.graph_core import (
    BidirectedGraph,
    DisconnectedPathError,
    DuplicatePathNameError,
    DuplicateSegmentError,
    Link,
    Orientation,
    OrientedEnd,
    PathStore,
    UnknownSegmentError,
)

F = Orientation.FORWARD
R = Orientation.REVERSE


class TestOrientation:
    """Test orientations and oriented ends."""

    def test_flip(self):
        assert F.flip() is R
        assert R.flip() is F

    def test_from_symbol(self):
        assert Orientation.from_symbol('+') is F
        assert Orientation.from_symbol('-') is R

    def test_invalid_symbol(self):
        with pytest.raises(ValueError):
            Orientation.from_symbol('x')

    def test_end_flip_and_side(self):
        end = OrientedEnd('s1', F)
        assert end.flip() == OrientedEnd('s1', R)
        assert not end.is_left
        assert end.flip().is_left
        assert str(end) == 's1+'


class TestLinks:
    """Test conversion of GFA link lines."""

    def test_gfa_link_enters_opposite_side(self):
        """L a + b + leaves a on its right side and enters b on its left side."""
        link = Link.from_gfa('a', F, 'b', F)
        assert link.end_a == OrientedEnd('a', F)
        assert link.end_b == OrientedEnd('b', R)

    def test_reverse_target(self):
        link = Link.from_gfa('a', F, 'b', R)
        assert link.end_b == OrientedEnd('b', F)

    def test_hairpin(self):
        link = Link.from_gfa('a', F, 'a', R)
        assert link.is_self_link
        assert link.is_hairpin

    def test_self_link_not_hairpin(self):
        """L a + a + joins both sides of a (a circle), not a hairpin."""
        link = Link.from_gfa('a', F, 'a', F)
        assert link.is_self_link
        assert not link.is_hairpin


class TestBidirectedGraph:
    """Test graph construction and queries."""

    def test_add_segment_and_index(self):
        graph = BidirectedGraph()
        graph.add_segment('x', length=10)
        graph.add_segment('y', sequence='ACGT')

        assert len(graph) == 2
        assert graph.segment_index('x') == 0
        assert graph.segment_index('y') == 1
        assert graph.segments['y'].length == 4

    def test_duplicate_segment(self):
        graph = BidirectedGraph()
        graph.add_segment('x')
        with pytest.raises(DuplicateSegmentError) as excinfo:
            graph.add_segment('x')
        assert excinfo.value.identifier == 'x'
        assert len(graph) == 1

    def test_unknown_segment_link_leaves_graph_unchanged(self):
        graph = BidirectedGraph()
        graph.add_segment('x')
        with pytest.raises(UnknownSegmentError) as excinfo:
            graph.add_link(OrientedEnd('x', F), OrientedEnd('missing', R))
        assert excinfo.value.identifier == 'missing'
        assert graph.links == []
        assert list(graph.neighbors(OrientedEnd('x', F))) == []

    def test_oriented_ends_left_first(self):
        graph = BidirectedGraph()
        graph.add_segment('x')
        assert graph.oriented_ends('x') == (OrientedEnd('x', R), OrientedEnd('x', F))

    def test_neighbors_restartable(self, simple_bubble_graph):
        view = simple_bubble_graph.neighbors(OrientedEnd('2', F))
        first = list(view)
        second = list(view)

        assert first == second
        assert first == [OrientedEnd('3a', R), OrientedEnd('3b', R)]
        assert len(view) == 2

    def test_parallel_links_kept(self):
        graph = BidirectedGraph()
        graph.add_segment('a')
        graph.add_segment('b')
        for _ in range(2):
            graph.add_link(OrientedEnd('a', F), OrientedEnd('b', R))

        assert len(graph.links) == 2
        assert graph.degree(OrientedEnd('a', F)) == 2
        assert graph.has_link(OrientedEnd('b', R), OrientedEnd('a', F))

    def test_hairpin_neighbors_and_degree(self, hairpin_graph):
        end = OrientedEnd('2', F)
        assert OrientedEnd('2', F) in list(hairpin_graph.neighbors(end))
        # link to 3 plus the hairpin counted twice
        assert hairpin_graph.degree(end) == 3

    def test_edge_counts(self, simple_bubble_graph):
        counts = {name: (i, o, t) for name, i, o, t in simple_bubble_graph.edge_counts()}

        assert counts['1'] == (0, 1, 1)
        assert counts['2'] == (1, 2, 3)
        assert counts['3a'] == (1, 1, 2)
        assert counts['4'] == (2, 0, 2)


class TestPathStore:
    """Test path validation and queries."""

    def test_add_valid_path(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        path = store.add_path('ref', [('1', F), ('2', F), ('3a', F), ('4', F)])

        assert len(path) == 4
        assert 'ref' in store
        assert store.names() == ['ref']

    def test_reverse_walk_is_valid(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        store.add_path('rev', [('4', R), ('3b', R), ('2', R), ('1', R)])
        assert len(store) == 1

    def test_disconnected_path(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        with pytest.raises(DisconnectedPathError) as excinfo:
            store.add_path('bad', [('1', F), ('3a', F)])
        assert excinfo.value.identifier == 'bad'
        assert excinfo.value.step_index == 1
        assert len(store) == 0

    def test_wrong_orientation_is_disconnected(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        with pytest.raises(DisconnectedPathError):
            store.add_path('bad', [('1', F), ('2', R)])

    def test_unknown_segment(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        with pytest.raises(UnknownSegmentError):
            store.add_path('bad', [('1', F), ('zz', F)])

    def test_duplicate_name(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        store.add_path('p', [('1', F), ('2', F)])
        with pytest.raises(DuplicatePathNameError):
            store.add_path('p', [('2', F), ('3a', F)])

    def test_paths_through(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        store.add_path('ref', [('1', F), ('2', F), ('3a', F), ('4', F)])
        store.add_path('alt', [('1', F), ('2', F), ('3b', F), ('4', F)])

        assert store.paths_through(OrientedEnd('2', F)) == [('ref', 1), ('alt', 1)]
        assert store.paths_through(OrientedEnd('3b', F)) == [('alt', 2)]
        assert store.paths_through(OrientedEnd('3b', R)) == []

    def test_step_offsets(self):
        graph = BidirectedGraph()
        graph.add_segment('a', sequence='ACGT')
        graph.add_segment('b')
        graph.add_segment('c', length=3)
        graph.add_link(OrientedEnd('a', F), OrientedEnd('b', R))
        graph.add_link(OrientedEnd('b', F), OrientedEnd('c', R))
        store = PathStore(graph)
        store.add_path('p', [('a', F), ('b', F), ('c', F)])

        assert store.step_offsets('p') == [0, 4, 4, 7]

    def test_subpaths_between(self, simple_bubble_graph):
        store = PathStore(simple_bubble_graph)
        store.add_path('ref', [('1', F), ('2', F), ('3a', F), ('4', F)])
        store.add_path('short', [('1', F), ('2', F)])

        subpaths = {s.path_name: s for s in store.subpaths_between('2', '4')}

        assert subpaths['ref'].start_index == 1
        assert subpaths['ref'].segment_names() == ['2', '3a', '4']
        # only reaches the first boundary, so it runs to its end
        assert subpaths['short'].segment_names() == ['2']

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
