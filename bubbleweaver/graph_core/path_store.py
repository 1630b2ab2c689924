#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Path store: named walks through the bidirected graph (GFA P-lines).

Paths are validated against the graph when added and never change
afterwards. They are only used to annotate bubbles when reporting.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple
from collections import defaultdict
import logging

from .errors import DisconnectedPathError, DuplicatePathNameError, UnknownSegmentError
from .graph_model import BidirectedGraph, OrientedEnd, Orientation

logger = logging.getLogger(__name__)

Step = Tuple[str, Orientation]


@dataclass(frozen=True)
class Path:
    """Immutable named sequence of oriented segment steps."""
    name: str
    steps: Tuple[Step, ...]

    def segment_names(self) -> List[str]:
        """Segment names along the path."""
        return [segment for segment, _ in self.steps]

    def __len__(self) -> int:
        return len(self.steps)


@dataclass
class SubPath:
    """Part of a path between two segments (inclusive)."""
    path_name: str
    start_index: int
    steps: List[Step] = field(default_factory=list)

    def segment_names(self) -> List[str]:
        return [segment for segment, _ in self.steps]


class PathStore:
    """
    Paths loaded from a GFA file, checked against a BidirectedGraph.

    Maintains an index from each oriented step to the places it occurs so
    the reporting layer can ask which paths traverse a bubble end.
    """

    def __init__(self, graph: BidirectedGraph):
        """
        Initialize an empty store.

        Args:
            graph: Graph the paths must walk through
        """
        self.graph = graph
        self._paths: Dict[str, Path] = {}
        self._step_index: Dict[OrientedEnd, List[Tuple[str, int]]] = defaultdict(list)

    def add_path(self, name: str, steps: Iterable[Step]) -> Path:
        """
        Validate and store a path.

        Args:
            name: Unique path name
            steps: (segment name, orientation) pairs in walk order

        Returns:
            The stored Path

        Raises:
            DuplicatePathNameError: If the name is already used
            UnknownSegmentError: If a step names a missing segment
            DisconnectedPathError: If two consecutive steps are not linked
        """
        if name in self._paths:
            raise DuplicatePathNameError(name)

        steps = tuple((segment, orient) for segment, orient in steps)
        for segment, _ in steps:
            if segment not in self.graph.segments:
                raise UnknownSegmentError(segment, context=f"path {name}")

        for i in range(1, len(steps)):
            prev_segment, prev_orient = steps[i - 1]
            segment, orient = steps[i]
            # Leave the previous step through its exit side, enter the next
            # step through the side opposite its exit side.
            exit_end = OrientedEnd(prev_segment, prev_orient)
            entry_end = OrientedEnd(segment, orient.flip())
            if not self.graph.has_link(exit_end, entry_end):
                raise DisconnectedPathError(
                    name, i,
                    f"{prev_segment}{prev_orient.value}",
                    f"{segment}{orient.value}",
                )

        path = Path(name=name, steps=steps)
        self._paths[name] = path
        for i, (segment, orient) in enumerate(steps):
            self._step_index[OrientedEnd(segment, orient)].append((name, i))
        return path

    def get(self, name: str) -> Optional[Path]:
        """Path by name, or None."""
        return self._paths.get(name)

    def names(self) -> List[str]:
        """Path names in load order."""
        return list(self._paths)

    def paths_through(self, end: OrientedEnd) -> List[Tuple[str, int]]:
        """
        Steps that leave a segment through ``end``.

        A step (s, o) traverses s in orientation o and so leaves through the
        end (s, o). Paths walking the segment the other way are found with
        ``end.flip()``.

        Returns:
            (path name, step index) pairs in path load order, then step order
        """
        return list(self._step_index.get(end, ()))

    def step_offsets(self, name: str) -> List[int]:
        """
        Base offset at which each step of a path starts.

        Segments without a known length count as zero bases. The list has
        one extra trailing entry holding the total path length.
        """
        path = self._paths[name]
        offsets = [0]
        for segment, _ in path.steps:
            length = self.graph.segments[segment].length or 0
            offsets.append(offsets[-1] + length)
        return offsets

    def subpaths_between(self, from_segment: str, to_segment: str) -> List[SubPath]:
        """
        Walks of every path between two segments.

        For each path touching either segment, take the steps from the first
        occurrence of one of them through the next occurrence of the other.
        Paths that touch only one of them run to their end.

        Args:
            from_segment: Name of one boundary segment
            to_segment: Name of the other boundary segment

        Returns:
            SubPath per path that reaches at least one boundary segment
        """
        subpaths = []
        for path in self._paths.values():
            names = path.segment_names()
            start = next(
                (i for i, segment in enumerate(names)
                 if segment == from_segment or segment == to_segment),
                None,
            )
            if start is None:
                continue

            end_segment = to_segment if names[start] == from_segment else from_segment
            steps: List[Step] = [path.steps[start]]
            for step in path.steps[start + 1:]:
                steps.append(step)
                if step[0] == end_segment:
                    break

            subpaths.append(SubPath(path_name=path.name, start_index=start, steps=steps))
        return subpaths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self):
        return iter(self._paths.values())

    def __contains__(self, name: str) -> bool:
        return name in self._paths

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
