#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Ultrabubble extraction: recovers the tree of nested bubbles from the
cycles of a cactus graph.

Removing the bridges of a cactus leaves clusters of cycles glued at
nodes. Each cluster is handled on its own:
- A cluster touching bridges at exactly two sides, in different nodes,
  becomes a top-level bubble between those sides. The cycles linking the
  two sides form its spine.
- Any other cluster is anchored at one node, and the cycles there become
  top-level bubbles.
Cycles hanging off a node inside a bubble become its children. They are
grouped by the pair of sides where they enter and leave that node.
Only a hairpin loop gives a size-one bubble (entrance == exit). A longer
cycle that leaves and re-enters a node through one side is cut open by
a tip: it bounds no bubble, but the cycles hanging off it are still
visited.

Bridges outside any cycle are never bubbles.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple
from collections import deque
import logging

from .cactus_graph import CactusGraph
from .graph_model import OrientedEnd

logger = logging.getLogger(__name__)


class HairpinPolicy(Enum):
    """How a hairpin self-link is reported."""
    BUBBLE = 'bubble'  # size-one bubble at the folded side
    FLAG = 'flag'      # listed in BubbleTree.hairpins, no bubble


# ============================================================================
# Result Structures
# ============================================================================

@dataclass
class Bubble:
    """
    Ultrabubble between two segment ends.

    Attributes:
        bubble_id: Identifier, unique within a BubbleTree
        entrance: End where the bubble opens
        exit: End where the bubble closes (equal to entrance for size one)
        parent: Enclosing bubble id, None for a root
        children: Nested bubble ids in sibling order
        segments: Names of the segments strictly inside the bubble
    """
    bubble_id: int
    entrance: OrientedEnd
    exit: OrientedEnd
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    segments: List[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Number of distinct boundary ends (1 or 2)."""
        return 1 if self.entrance == self.exit else 2

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def __repr__(self) -> str:
        return (f"Bubble({self.bubble_id}, {self.entrance} -> {self.exit}, "
                f"parent={self.parent}, children={self.children})")


@dataclass
class BubbleTree:
    """
    Forest of nested bubbles.

    Bubble ids follow a pre-order walk of the forest, so a parent always
    has a lower id than its children.
    """
    bubbles: Dict[int, Bubble] = field(default_factory=dict)
    roots: List[int] = field(default_factory=list)
    hairpins: List[OrientedEnd] = field(default_factory=list)

    def children(self, bubble_id: int) -> List[int]:
        return self.bubbles[bubble_id].children

    def parent(self, bubble_id: int) -> Optional[int]:
        return self.bubbles[bubble_id].parent

    def depth(self, bubble_id: int) -> int:
        """Number of bubbles on the path to the root, the bubble included."""
        depth = 1
        parent = self.bubbles[bubble_id].parent
        while parent is not None:
            depth += 1
            parent = self.bubbles[parent].parent
        return depth

    def max_depth(self) -> int:
        return max((self.depth(b) for b in self.bubbles), default=0)

    def walk(self) -> Iterator[Bubble]:
        """Pre-order walk over all bubbles, roots in order."""
        stack = list(reversed(self.roots))
        while stack:
            bubble = self.bubbles[stack.pop()]
            yield bubble
            stack.extend(reversed(bubble.children))

    @classmethod
    def merge(cls, trees: List['BubbleTree']) -> 'BubbleTree':
        """
        Concatenate independent trees, shifting ids so they stay unique.

        Trees keep their order, so merging per-component results in
        component order gives the same ids as one whole-graph run.
        """
        merged = cls()
        offset = 0
        for tree in trees:
            for bubble in tree.walk():
                new_id = bubble.bubble_id + offset
                merged.bubbles[new_id] = Bubble(
                    bubble_id=new_id,
                    entrance=bubble.entrance,
                    exit=bubble.exit,
                    parent=None if bubble.parent is None else bubble.parent + offset,
                    children=[c + offset for c in bubble.children],
                    segments=list(bubble.segments),
                )
            merged.roots.extend(r + offset for r in tree.roots)
            merged.hairpins.extend(tree.hairpins)
            offset += len(tree.bubbles)
        return merged

    def __len__(self) -> int:
        return len(self.bubbles)

    def __iter__(self) -> Iterator[Bubble]:
        return self.walk()

    def __getitem__(self, bubble_id: int) -> Bubble:
        return self.bubbles[bubble_id]


@dataclass
class _Draft:
    """Bubble under construction, before final ids are assigned."""
    entrance: int
    exit: int
    anchor: int
    parent: Optional[int]
    children: List[int] = field(default_factory=list)
    vertices: List[int] = field(default_factory=list)


# ============================================================================
# Extractor
# ============================================================================

class UltrabubbleExtractor:
    """
    Builds a BubbleTree from a verified cactus graph.

    Works with an explicit worklist over cactus nodes, so nesting depth is
    not limited by the interpreter stack. The extractor holds only its
    policy; each call works on its own _TreeBuilder, so one instance can
    serve several threads.
    """

    def __init__(self, hairpin_policy: HairpinPolicy = HairpinPolicy.BUBBLE):
        """
        Initialize extractor.

        Args:
            hairpin_policy: Report hairpin self-links as size-one bubbles or flag them
        """
        self.hairpin_policy = HairpinPolicy(hairpin_policy)

    def extract(self, cactus: CactusGraph) -> BubbleTree:
        """
        Extract the bubble tree of a cactus graph.

        Args:
            cactus: Contracted graph (cycles and bridges)

        Returns:
            BubbleTree with ids in pre-order
        """
        tree = _TreeBuilder(cactus, self.hairpin_policy).build()
        logger.debug(
            f"Extracted {len(tree)} bubbles ({len(tree.roots)} roots) "
            f"from {len(cactus.cycles())} cycles"
        )
        return tree


class _TreeBuilder:
    """State of one extraction run."""

    def __init__(self, cactus: CactusGraph, hairpin_policy: HairpinPolicy):
        self.cactus = cactus
        self.hairpin_policy = hairpin_policy
        self.cycles, self.bridges = cactus.decompose()
        self.component_of = cactus.partition.component_of.tolist()
        self.drafts: List[_Draft] = []
        self.hairpin_sides: List[int] = []

        self.node_cycles: List[List[int]] = [[] for _ in range(cactus.num_nodes)]
        for cycle in self.cycles:
            for node in cycle.nodes:
                self.node_cycles[node].append(cycle.cycle_id)

    def build(self) -> BubbleTree:
        attach: Dict[int, Set[int]] = {}
        for idx in self.bridges:
            edge = self.cactus.edges[idx]
            attach.setdefault(edge.node_u, set()).add(edge.side_u)
            attach.setdefault(edge.node_v, set()).add(edge.side_v)

        roots: List[int] = []
        for cluster in self._clusters():
            sides = sorted(
                (side for node in cluster for side in attach.get(node, ())),
                key=self._side_key,
            )
            roots.extend(self._extract_cluster(cluster, sides))
        return self._finalize(roots)

    # ------------------------------------------------------------------
    # Cluster handling
    # ------------------------------------------------------------------

    def _side_key(self, side: int) -> Tuple[int, int]:
        return (self.component_of[side], side)

    def _clusters(self) -> List[List[int]]:
        """Nodes joined through cycles, each cluster sorted, clusters by lowest node."""
        node_cycles = self.node_cycles
        seen = [False] * len(node_cycles)
        clusters = []
        for start in range(len(node_cycles)):
            if seen[start] or not node_cycles[start]:
                continue
            seen[start] = True
            cluster = [start]
            queue = deque([start])
            while queue:
                node = queue.popleft()
                for cycle_id in node_cycles[node]:
                    for other in self.cycles[cycle_id].nodes:
                        if not seen[other]:
                            seen[other] = True
                            cluster.append(other)
                            queue.append(other)
            clusters.append(sorted(cluster))
        return clusters

    def _extract_cluster(self, cluster: List[int], sides: List[int]) -> List[int]:
        """Seed the worklist for one cluster and return its root drafts."""
        component_of = self.component_of
        cycles = self.cycles
        roots: List[int] = []
        worklist = deque()

        spine_mode = (len(sides) == 2
                      and component_of[sides[0]] != component_of[sides[1]])
        if spine_mode:
            entrance, exit_side = sides
            spine = self._spine(component_of[entrance], component_of[exit_side])
            root = self._new_draft(entrance, exit_side, component_of[entrance], None)
            roots.append(root)

            spine_nodes: Dict[int, Set[int]] = {}
            for cycle_id in spine:
                for node in cycles[cycle_id].nodes:
                    spine_nodes.setdefault(node, set()).add(cycle_id)
            for node in sorted(spine_nodes):
                self.drafts[root].vertices.extend(self.cactus.node_sides[node])
                worklist.append((node, spine_nodes[node], root))
        else:
            anchor = component_of[sides[0]] if sides else cluster[0]
            worklist.append((anchor, set(), None))

        while worklist:
            node, excluded, owner = worklist.popleft()
            groups: Dict[Tuple[int, int], List[int]] = {}
            for cycle_id in self.node_cycles[node]:
                if cycle_id in excluded:
                    continue
                pair = tuple(sorted(cycles[cycle_id].sides_at(node), key=self._side_key))
                groups.setdefault(pair, []).append(cycle_id)

            for (entrance, exit_side), members in groups.items():
                loops = [c for c in members if cycles[c].is_loop]
                if loops:
                    if self.hairpin_policy is HairpinPolicy.FLAG:
                        self.hairpin_sides.extend(cycles[c].sides_at(node)[0] for c in loops)
                    else:
                        draft = self._new_draft(entrance, exit_side, node, owner)
                        self._attach(draft, owner, roots)

                members = [c for c in members if not cycles[c].is_loop]
                if not members:
                    continue

                # A longer cycle leaving and re-entering through one side is
                # cut open by a tip elsewhere: it bounds no bubble, but the
                # cycles nested in it still do.
                if entrance == exit_side:
                    target = owner
                else:
                    target = self._new_draft(entrance, exit_side, node, owner)
                    self._attach(target, owner, roots)

                for cycle_id in members:
                    for other in cycles[cycle_id].nodes:
                        if other == node:
                            continue
                        if target is not None:
                            self.drafts[target].vertices.extend(self.cactus.node_sides[other])
                        worklist.append((other, {cycle_id}, target))

        return roots

    def _attach(self, draft: int, owner: Optional[int], roots: List[int]):
        if owner is None:
            roots.append(draft)
        else:
            self.drafts[owner].children.append(draft)

    def _spine(self, start: int, target: int) -> List[int]:
        """Cycles on the unique node-cycle path from ``start`` to ``target``."""
        via: Dict[int, Optional[Tuple[int, int]]] = {start: None}
        queue = deque([start])
        while queue and target not in via:
            node = queue.popleft()
            for cycle_id in self.node_cycles[node]:
                for other in self.cycles[cycle_id].nodes:
                    if other not in via:
                        via[other] = (cycle_id, node)
                        queue.append(other)

        spine = []
        node = target
        while via[node] is not None:
            cycle_id, node = via[node]
            spine.append(cycle_id)
        spine.reverse()
        return spine

    def _new_draft(self, entrance: int, exit_side: int, anchor: int,
                   parent: Optional[int]) -> int:
        self.drafts.append(_Draft(entrance=entrance, exit=exit_side,
                                  anchor=anchor, parent=parent))
        return len(self.drafts) - 1

    # ------------------------------------------------------------------
    # Tree assembly
    # ------------------------------------------------------------------

    def _sibling_key(self, draft_index: int) -> Tuple[int, Tuple[int, int], Tuple[int, int]]:
        draft = self.drafts[draft_index]
        return (draft.anchor, self._side_key(draft.entrance), self._side_key(draft.exit))

    def _finalize(self, roots: List[int]) -> BubbleTree:
        """Sort siblings, assign pre-order ids and collect interior segments."""
        biedged = self.cactus.biedged
        drafts = self.drafts
        for draft in drafts:
            draft.children.sort(key=self._sibling_key)
        roots = sorted(roots, key=self._sibling_key)

        new_id: Dict[int, int] = {}
        preorder: List[int] = []
        stack = list(reversed(roots))
        while stack:
            index = stack.pop()
            new_id[index] = len(preorder)
            preorder.append(index)
            stack.extend(reversed(drafts[index].children))

        # Interior vertices, children first
        interior: Dict[int, Set[int]] = {}
        for index in reversed(preorder):
            vertices = set(drafts[index].vertices)
            for child in drafts[index].children:
                vertices |= interior[child]
                vertices.add(drafts[child].entrance)
                vertices.add(drafts[child].exit)
            interior[index] = vertices

        tree = BubbleTree()
        for index in preorder:
            draft = drafts[index]
            entrance = biedged.vertex_end(draft.entrance)
            exit_end = biedged.vertex_end(draft.exit)
            boundary = {entrance.segment, exit_end.segment}
            segment_ids = sorted({v // 2 for v in interior[index]})
            segments = [biedged.segment_names[s] for s in segment_ids
                        if biedged.segment_names[s] not in boundary]
            tree.bubbles[new_id[index]] = Bubble(
                bubble_id=new_id[index],
                entrance=entrance,
                exit=exit_end,
                parent=None if draft.parent is None else new_id[draft.parent],
                children=[new_id[c] for c in draft.children],
                segments=segments,
            )
        tree.roots = [new_id[r] for r in roots]
        tree.hairpins = [biedged.vertex_end(side) for side in self.hairpin_sides]
        return tree


def extract_ultrabubbles(cactus: CactusGraph,
                         hairpin_policy: HairpinPolicy = HairpinPolicy.BUBBLE) -> BubbleTree:
    """Convenience wrapper around UltrabubbleExtractor.extract."""
    return UltrabubbleExtractor(hairpin_policy=hairpin_policy).extract(cactus)

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
