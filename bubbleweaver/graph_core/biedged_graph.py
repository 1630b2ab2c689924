#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Biedged multigraph: the undirected form the connectivity code works on.

Each segment i is split into two vertices, 2i (left, 5') and 2i + 1
(right, 3'), joined by a grey edge. Every link becomes a black edge
between the vertices of the two ends it joins.

The graph is an arena: vertices and edges are integer ids into numpy
arrays, and adjacency is kept in CSR form.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

import numpy as np
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from .graph_model import BidirectedGraph, OrientedEnd, Orientation

logger = logging.getLogger(__name__)

GREY = 0
BLACK = 1


def end_to_vertex(segment_index: int, orientation: Orientation) -> int:
    """Biedged vertex id of a segment side."""
    return 2 * segment_index + (1 if orientation is Orientation.FORWARD else 0)


@dataclass(eq=False)
class BiedgedGraph:
    """
    Undirected multigraph over segment sides.

    Attributes:
        num_vertices: Number of vertices (local ids 0..num_vertices-1)
        edge_u: First endpoint of each edge
        edge_v: Second endpoint of each edge
        edge_kind: GREY or BLACK per edge
        segment_names: Names of the segments in this graph, by local segment
                       index (local vertex // 2)
        vertex_ids: Global vertex id of each local vertex (None = identity)
        edge_ids: Global edge id of each local edge (None = identity)
    """
    num_vertices: int
    edge_u: np.ndarray
    edge_v: np.ndarray
    edge_kind: np.ndarray
    segment_names: List[str]
    vertex_ids: Optional[np.ndarray] = None
    edge_ids: Optional[np.ndarray] = None
    _csr: Optional[Tuple[List[int], List[int], List[int]]] = field(
        default=None, repr=False, compare=False
    )

    @classmethod
    def from_graph(cls, graph: BidirectedGraph) -> 'BiedgedGraph':
        """
        Build the biedged graph of a bidirected graph.

        Grey edges come first in segment order, then black edges in link
        order, so edge ids are stable for identical input.
        """
        num_segments = len(graph.segments)
        num_links = len(graph.links)

        black_u = np.empty(num_links, dtype=np.int64)
        black_v = np.empty(num_links, dtype=np.int64)
        for i, link in enumerate(graph.links):
            black_u[i] = end_to_vertex(graph.segment_index(link.end_a.segment),
                                       link.end_a.orientation)
            black_v[i] = end_to_vertex(graph.segment_index(link.end_b.segment),
                                       link.end_b.orientation)

        grey_u = np.arange(num_segments, dtype=np.int64) * 2
        edge_u = np.concatenate([grey_u, black_u])
        edge_v = np.concatenate([grey_u + 1, black_v])
        edge_kind = np.concatenate([
            np.full(num_segments, GREY, dtype=np.int8),
            np.full(num_links, BLACK, dtype=np.int8),
        ])

        biedged = cls(
            num_vertices=2 * num_segments,
            edge_u=edge_u,
            edge_v=edge_v,
            edge_kind=edge_kind,
            segment_names=graph.segment_names(),
        )
        logger.debug(
            f"Biedged graph: {biedged.num_vertices} vertices, "
            f"{num_segments} grey edges, {num_links} black edges"
        )
        return biedged

    @property
    def num_edges(self) -> int:
        return len(self.edge_u)

    def global_vertex(self, vertex: int) -> int:
        """Global id of a local vertex."""
        return int(self.vertex_ids[vertex]) if self.vertex_ids is not None else vertex

    def global_edge(self, edge: int) -> int:
        """Global id of a local edge."""
        return int(self.edge_ids[edge]) if self.edge_ids is not None else edge

    def vertex_end(self, vertex: int) -> OrientedEnd:
        """Segment side represented by a local vertex."""
        orientation = Orientation.FORWARD if vertex % 2 else Orientation.REVERSE
        return OrientedEnd(self.segment_names[vertex // 2], orientation)

    def vertex_segment(self, vertex: int) -> str:
        """Segment name of a local vertex."""
        return self.segment_names[vertex // 2]

    def adjacency(self) -> Tuple[List[int], List[int], List[int]]:
        """
        CSR adjacency as plain lists.

        Returns:
            (indptr, neighbors, edge ids); the incidences of vertex v are
            positions indptr[v]..indptr[v+1]-1. Self-loops appear twice.
        """
        if self._csr is None:
            src = np.concatenate([self.edge_u, self.edge_v])
            dst = np.concatenate([self.edge_v, self.edge_u])
            eid = np.concatenate([np.arange(self.num_edges, dtype=np.int64)] * 2)
            order = np.argsort(src, kind='stable')
            counts = np.bincount(src, minlength=self.num_vertices)
            indptr = np.concatenate([[0], np.cumsum(counts)])
            self._csr = (indptr.tolist(), dst[order].tolist(), eid[order].tolist())
        return self._csr

    def degree(self, vertex: int) -> int:
        """Edge incidences at a vertex (self-loops count twice)."""
        indptr, _, _ = self.adjacency()
        return indptr[vertex + 1] - indptr[vertex]

    def connected_components(self) -> List[np.ndarray]:
        """
        Vertex sets of the connected components.

        Components are ordered by their lowest vertex id and each vertex
        array is sorted.
        """
        if self.num_vertices == 0:
            return []
        matrix = coo_matrix(
            (np.ones(self.num_edges, dtype=np.int8), (self.edge_u, self.edge_v)),
            shape=(self.num_vertices, self.num_vertices),
        )
        _, labels = connected_components(matrix, directed=False)

        _, first_seen = np.unique(labels, return_index=True)
        order = np.argsort(first_seen, kind='stable')
        rank = np.empty_like(order)
        rank[order] = np.arange(len(order))
        labels = rank[labels]

        sorted_vertices = np.argsort(labels, kind='stable')
        boundaries = np.cumsum(np.bincount(labels))[:-1]
        return np.split(sorted_vertices, boundaries)

    def subgraph(self, vertices: np.ndarray) -> 'BiedgedGraph':
        """
        Induced subgraph on a sorted vertex set holding whole segments.

        The result keeps global vertex and edge ids, and only the names
        of its own segments, so components can be shipped to worker
        processes independently. Connected components always hold both
        sides of each of their segments.

        Raises:
            ValueError: If the set holds only one side of some segment
        """
        vertices = np.asarray(vertices, dtype=np.int64)
        if len(vertices) % 2 or np.any(vertices[0::2] % 2) or \
                np.any(vertices[1::2] != vertices[0::2] + 1):
            raise ValueError("Subgraph vertex set must hold both sides of each segment")
        local = np.full(self.num_vertices, -1, dtype=np.int64)
        local[vertices] = np.arange(len(vertices))

        keep = (local[self.edge_u] >= 0) & (local[self.edge_v] >= 0)
        edges = np.nonzero(keep)[0]

        vertex_ids = self.vertex_ids[vertices] if self.vertex_ids is not None else vertices
        edge_ids = self.edge_ids[edges] if self.edge_ids is not None else edges

        return BiedgedGraph(
            num_vertices=len(vertices),
            edge_u=local[self.edge_u[edges]],
            edge_v=local[self.edge_v[edges]],
            edge_kind=self.edge_kind[edges],
            segment_names=[self.segment_names[v // 2] for v in vertices[0::2].tolist()],
            vertex_ids=vertex_ids,
            edge_ids=edge_ids,
        )

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
