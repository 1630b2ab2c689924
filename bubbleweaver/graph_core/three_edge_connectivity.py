#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

3-edge-connected components of a biedged multigraph.

Algorithm:
1. Iterative DFS from the lowest unvisited vertex, assigning discovery
   numbers and low-links. A tree edge whose subtree has no back edge
   reaching above it is a bridge; bridges split the graph into its
   2-edge-connected components.
2. Every back edge gets a random 63-bit label. A tree edge's label is the
   XOR of the labels of the back edges covering it, computed bottom-up.
   Back edges never cover a bridge, so labels stay inside one
   2-edge-connected component. Two non-bridge edges form a 2-edge-cut
   exactly when their labels are equal.
3. A union-find joins the endpoints of every tree edge that is in no cut,
   plus the outer endpoints of every cut class made only of tree edges
   (the vertices above the top edge and below the bottom edge stay
   connected through at least two back edges).

Self-loops are ignored; parallel edges are told apart by edge id, so a
doubled link is never reported as a bridge.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

import numpy as np

from .biedged_graph import BiedgedGraph
from .errors import InternalConsistencyError

logger = logging.getLogger(__name__)

DEFAULT_LABEL_SEED = 20181106


@dataclass(eq=False)
class ComponentPartition:
    """
    Assignment of biedged vertices to 3-edge-connected components.

    Attributes:
        component_of: Component id of each vertex; ids follow DFS first-visit order
        num_components: Number of components
        bridges: Edge ids whose removal disconnects the graph
        cut_classes: Groups of edge ids where any two edges form a 2-edge-cut
        discovery_order: Vertices in DFS discovery order
    """
    component_of: np.ndarray
    num_components: int
    bridges: List[int] = field(default_factory=list)
    cut_classes: List[List[int]] = field(default_factory=list)
    discovery_order: List[int] = field(default_factory=list)

    def members(self) -> List[List[int]]:
        """Vertices of each component, in component id order."""
        groups: List[List[int]] = [[] for _ in range(self.num_components)]
        for vertex, comp in enumerate(self.component_of.tolist()):
            groups[comp].append(vertex)
        return groups

    def same_component(self, u: int, v: int) -> bool:
        return int(self.component_of[u]) == int(self.component_of[v])


class _UnionFind:
    """Disjoint sets over 0..n-1 with path halving and union by size."""

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.size = [1] * n

    def find(self, x: int) -> int:
        parent = self.parent
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    def union(self, a: int, b: int):
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        if self.size[ra] < self.size[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        self.size[ra] += self.size[rb]


class ThreeEdgeConnectivity:
    """
    Engine computing the 3-edge-connected partition of a BiedgedGraph.

    The label generator is seeded, so identical input always yields an
    identical partition.
    """

    def __init__(self, label_seed: Optional[int] = DEFAULT_LABEL_SEED):
        """
        Initialize the engine.

        Args:
            label_seed: Seed for the back-edge label generator
        """
        self.label_seed = DEFAULT_LABEL_SEED if label_seed is None else label_seed

    def find_components(self, graph: BiedgedGraph) -> ComponentPartition:
        """
        Partition the vertices of a graph into 3-edge-connected components.

        Args:
            graph: Biedged multigraph (any number of connected components)

        Returns:
            ComponentPartition with ids in DFS first-visit order

        Raises:
            InternalConsistencyError: If bridge detection and cut labels disagree
        """
        n = graph.num_vertices
        m = graph.num_edges
        indptr, neighbors, incident_edges = graph.adjacency()

        rng = np.random.default_rng(self.label_seed)
        back_label = rng.integers(1, np.iinfo(np.int64).max, size=m, dtype=np.int64).tolist()

        pre = [-1] * n
        low = [0] * n
        parent = [-1] * n
        parent_edge = [-1] * n
        xor_acc = [0] * n
        is_tree = [False] * m
        is_loop = [False] * m
        order: List[int] = []
        counter = 0

        # Step 1: iterative DFS with low-links and back-edge labels
        for root in range(n):
            if pre[root] != -1:
                continue
            pre[root] = low[root] = counter
            counter += 1
            order.append(root)
            stack = [[root, indptr[root]]]

            while stack:
                frame = stack[-1]
                v, i = frame
                if i < indptr[v + 1]:
                    frame[1] = i + 1
                    w = neighbors[i]
                    e = incident_edges[i]
                    if e == parent_edge[v]:
                        continue
                    if w == v:
                        is_loop[e] = True
                        continue
                    if pre[w] == -1:
                        pre[w] = low[w] = counter
                        counter += 1
                        order.append(w)
                        parent[w] = v
                        parent_edge[w] = e
                        is_tree[e] = True
                        stack.append([w, indptr[w]])
                    elif pre[w] < pre[v]:
                        # Back edge seen from its lower endpoint
                        if pre[w] < low[v]:
                            low[v] = pre[w]
                        label = back_label[e]
                        xor_acc[v] ^= label
                        xor_acc[w] ^= label
                else:
                    stack.pop()
                    p = parent[v]
                    if p != -1 and low[v] < low[p]:
                        low[p] = low[v]

        # Step 2: fold labels bottom-up; tree edge into v gets the subtree XOR
        edge_label: Dict[int, int] = {}
        bridges: List[int] = []
        for v in reversed(order):
            p = parent[v]
            if p == -1:
                continue
            e = parent_edge[v]
            label = xor_acc[v]
            is_bridge = low[v] == pre[v]
            if is_bridge != (label == 0):
                raise InternalConsistencyError(
                    f"Bridge test disagrees with cut label on edge {graph.global_edge(e)}"
                )
            if is_bridge:
                bridges.append(e)
            else:
                edge_label[e] = label
            xor_acc[p] ^= label

        for e in range(m):
            if not is_tree[e] and not is_loop[e]:
                edge_label[e] = back_label[e]

        # Group edges sharing a label; each group of 2+ is a cut class
        by_label: Dict[int, List[int]] = {}
        for e in sorted(edge_label):
            by_label.setdefault(edge_label[e], []).append(e)

        child_of = {parent_edge[v]: v for v in range(n) if parent[v] != -1}
        cut_edges = set()
        merges = []
        cut_classes = []
        for edges in by_label.values():
            if len(edges) < 2:
                continue
            cut_classes.append(edges)
            cut_edges.update(edges)
            tree_edges = [e for e in edges if is_tree[e]]
            back_edges = len(edges) - len(tree_edges)
            if back_edges > 1:
                raise InternalConsistencyError(
                    f"Cut class holds {back_edges} back edges: "
                    f"{[graph.global_edge(e) for e in edges]}"
                )
            if back_edges == 0:
                tree_edges.sort(key=lambda e: pre[child_of[e]])
                top_child = child_of[tree_edges[0]]
                bottom_child = child_of[tree_edges[-1]]
                merges.append((parent[top_child], bottom_child))

        # Step 3: union-find over uncut tree edges and class merges
        sets = _UnionFind(n)
        bridge_set = set(bridges)
        for e, v in child_of.items():
            if e not in bridge_set and e not in cut_edges:
                sets.union(parent[v], v)
        for a, b in merges:
            sets.union(a, b)

        component_of = np.empty(n, dtype=np.int64)
        component_ids: Dict[int, int] = {}
        for v in order:
            root = sets.find(v)
            if root not in component_ids:
                component_ids[root] = len(component_ids)
            component_of[v] = component_ids[root]

        logger.debug(
            f"3-edge connectivity: {n} vertices, {len(bridges)} bridges, "
            f"{len(cut_classes)} cut classes, {len(component_ids)} components"
        )

        return ComponentPartition(
            component_of=component_of,
            num_components=len(component_ids),
            bridges=sorted(bridges),
            cut_classes=cut_classes,
            discovery_order=order,
        )


def three_edge_connected_components(graph: BiedgedGraph,
                                    label_seed: Optional[int] = None) -> ComponentPartition:
    """Convenience wrapper around ThreeEdgeConnectivity.find_components."""
    return ThreeEdgeConnectivity(label_seed=label_seed).find_components(graph)

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
