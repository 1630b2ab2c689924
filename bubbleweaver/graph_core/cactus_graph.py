#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Cactus graph: the biedged graph with each 3-edge-connected component
contracted to one node.

- Edges crossing component boundaries are kept, internal edges dropped
- Black self-loops (hairpins) are kept as one-edge cycles
- verify() checks the cactus property: every edge lies on at most one
  simple cycle, i.e. no DFS tree edge is covered by two back edges
- decompose() splits the edges into simple cycles and bridges

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging

from .biedged_graph import BLACK, BiedgedGraph
from .errors import CactusPropertyError
from .three_edge_connectivity import ComponentPartition

logger = logging.getLogger(__name__)


# ============================================================================
# Data Structures
# ============================================================================

@dataclass(frozen=True)
class CactusEdge:
    """
    Edge of the cactus graph.

    Attributes:
        edge_id: Local biedged edge id
        node_u: Cactus node of the first endpoint
        node_v: Cactus node of the second endpoint
        side_u: Biedged vertex of the first endpoint
        side_v: Biedged vertex of the second endpoint
        kind: GREY or BLACK
    """
    edge_id: int
    node_u: int
    node_v: int
    side_u: int
    side_v: int
    kind: int

    @property
    def is_loop(self) -> bool:
        return self.node_u == self.node_v

    def other(self, node: int) -> int:
        """Node at the opposite end."""
        return self.node_v if node == self.node_u else self.node_u

    def side_at(self, node: int) -> int:
        """Biedged vertex where this edge meets ``node``."""
        return self.side_u if node == self.node_u else self.side_v


@dataclass
class CactusCycle:
    """
    Simple cycle of the cactus graph.

    ``edges[i]`` joins ``nodes[i]`` to ``nodes[(i + 1) % len(nodes)]``.
    A hairpin loop has one node and one edge.
    """
    cycle_id: int
    nodes: List[int]
    edges: List[int]
    sides: Dict[int, Tuple[int, int]] = field(default_factory=dict)

    @property
    def is_loop(self) -> bool:
        return len(self.edges) == 1

    def sides_at(self, node: int) -> Tuple[int, int]:
        """The two biedged vertices where the cycle enters and leaves ``node``."""
        return self.sides[node]

    def __len__(self) -> int:
        return len(self.edges)


# ============================================================================
# Cactus Graph
# ============================================================================

@dataclass(eq=False)
class CactusGraph:
    """
    Contracted biedged graph.

    Node ids are the component ids of the partition, so node order follows
    the DFS first-visit order of the connectivity engine.
    """
    biedged: BiedgedGraph
    partition: ComponentPartition
    edges: List[CactusEdge] = field(default_factory=list)
    node_sides: List[List[int]] = field(default_factory=list)
    _incidence: Optional[List[List[int]]] = field(default=None, repr=False)
    _decomposition: Optional[Tuple[List[CactusCycle], List[int]]] = field(default=None, repr=False)

    @classmethod
    def from_partition(cls, biedged: BiedgedGraph, partition: ComponentPartition,
                       verify: bool = True) -> 'CactusGraph':
        """
        Contract each component of a partition to a single node.

        Args:
            biedged: Graph the partition was computed on
            partition: 3-edge-connected component partition
            verify: Check the cactus property after contraction

        Raises:
            CactusPropertyError: If verification finds an edge on two cycles
        """
        component_of = partition.component_of.tolist()
        edge_u = biedged.edge_u.tolist()
        edge_v = biedged.edge_v.tolist()
        edge_kind = biedged.edge_kind.tolist()

        edges = []
        dropped = 0
        for e in range(biedged.num_edges):
            u, v = edge_u[e], edge_v[e]
            cu, cv = component_of[u], component_of[v]
            if cu != cv or (u == v and edge_kind[e] == BLACK):
                edges.append(CactusEdge(e, cu, cv, u, v, edge_kind[e]))
            else:
                dropped += 1

        cactus = cls(
            biedged=biedged,
            partition=partition,
            edges=edges,
            node_sides=partition.members(),
        )
        logger.debug(
            f"Cactus graph: {cactus.num_nodes} nodes, {len(edges)} edges "
            f"({dropped} internal edges contracted)"
        )
        if verify:
            cactus.verify()
        return cactus

    @property
    def num_nodes(self) -> int:
        return self.partition.num_components

    def incident(self, node: int) -> List[int]:
        """Indices of the edges touching a node (loops listed once)."""
        if self._incidence is None:
            incidence: List[List[int]] = [[] for _ in range(self.num_nodes)]
            for i, edge in enumerate(self.edges):
                incidence[edge.node_u].append(i)
                if not edge.is_loop:
                    incidence[edge.node_v].append(i)
            self._incidence = incidence
        return self._incidence[node]

    def verify(self):
        """
        Check the cactus property.

        Raises:
            CactusPropertyError: If an edge lies on more than one simple cycle
        """
        self.decompose()

    def cycles(self) -> List[CactusCycle]:
        """Simple cycles, hairpin loops included."""
        return self.decompose()[0]

    def bridges(self) -> List[int]:
        """Indices of edges that lie on no cycle."""
        return self.decompose()[1]

    def decompose(self) -> Tuple[List[CactusCycle], List[int]]:
        """
        Split the edges into simple cycles and bridges.

        A DFS over the nodes classifies non-loop edges as tree or back
        edges. Each back edge closes exactly one cycle with the tree path
        it spans; a tree edge spanned by two back edges would lie on two
        cycles, which a cactus forbids.
        """
        if self._decomposition is not None:
            return self._decomposition

        n = self.num_nodes
        pre = [-1] * n
        parent = [-1] * n
        parent_edge = [-1] * n
        cover = [0] * n
        order: List[int] = []
        back_edges: List[Tuple[int, int, int]] = []
        counter = 0

        for root in range(n):
            if pre[root] != -1:
                continue
            pre[root] = counter
            counter += 1
            order.append(root)
            stack = [[root, 0]]
            while stack:
                frame = stack[-1]
                node, i = frame
                incident = self.incident(node)
                if i < len(incident):
                    frame[1] = i + 1
                    idx = incident[i]
                    edge = self.edges[idx]
                    if edge.is_loop or idx == parent_edge[node]:
                        continue
                    other = edge.other(node)
                    if pre[other] == -1:
                        pre[other] = counter
                        counter += 1
                        order.append(other)
                        parent[other] = node
                        parent_edge[other] = idx
                        stack.append([other, 0])
                    elif pre[other] < pre[node]:
                        back_edges.append((idx, node, other))
                        cover[node] += 1
                        cover[other] -= 1
                else:
                    stack.pop()

        for node in reversed(order):
            if parent[node] == -1:
                continue
            if cover[node] > 1:
                edge_id = self.biedged.global_edge(self.edges[parent_edge[node]].edge_id)
                raise CactusPropertyError(
                    f"Cactus property violated: edge {edge_id} lies on {cover[node]} cycles",
                    edge_id,
                )
            cover[parent[node]] += cover[node]

        cycles: List[CactusCycle] = []
        on_cycle = [False] * len(self.edges)
        for idx, low_node, high_node in back_edges:
            # Walk up the tree from the descendant to the ancestor
            path_nodes = [low_node]
            path_edges = []
            node = low_node
            while node != high_node:
                path_edges.append(parent_edge[node])
                node = parent[node]
                path_nodes.append(node)
            path_nodes.reverse()
            path_edges.reverse()
            cycle_edges = path_edges + [idx]
            for e in cycle_edges:
                on_cycle[e] = True
            cycles.append(self._make_cycle(len(cycles), path_nodes, cycle_edges))

        for idx, edge in enumerate(self.edges):
            if edge.is_loop:
                on_cycle[idx] = True
                cycles.append(self._make_cycle(len(cycles), [edge.node_u], [idx]))

        bridges = [idx for idx in range(len(self.edges)) if not on_cycle[idx]]
        self._decomposition = (cycles, bridges)
        logger.debug(f"Cactus decomposition: {len(cycles)} cycles, {len(bridges)} bridges")
        return self._decomposition

    def _make_cycle(self, cycle_id: int, nodes: List[int], edges: List[int]) -> CactusCycle:
        """Build a cycle and record the sides it uses at each node."""
        sides = {}
        for i, node in enumerate(nodes):
            entering = self.edges[edges[i - 1]]
            leaving = self.edges[edges[i]]
            if entering.is_loop:
                sides[node] = (entering.side_u, entering.side_v)
            else:
                sides[node] = (entering.side_at(node), leaving.side_at(node))
        return CactusCycle(cycle_id=cycle_id, nodes=nodes, edges=edges, sides=sides)

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
