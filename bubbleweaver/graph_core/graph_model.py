#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Bidirected graph model built from GFA segments and links.

- Segments are stored in insertion order and indexed by name
- Each segment has two oriented ends; (name, +) is the 3' side and
  (name, -) is the 5' side
- Links join two oriented ends; parallel links and self-links are kept

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple
from collections import defaultdict
import logging

from .errors import DuplicateSegmentError, UnknownSegmentError

logger = logging.getLogger(__name__)


# ============================================================================
# Core Data Structures
# ============================================================================

class Orientation(Enum):
    """Strand orientation of a segment traversal."""
    FORWARD = '+'
    REVERSE = '-'

    def flip(self) -> 'Orientation':
        """Return the opposite orientation."""
        return Orientation.REVERSE if self is Orientation.FORWARD else Orientation.FORWARD

    @classmethod
    def from_symbol(cls, symbol: str) -> 'Orientation':
        """Parse a GFA orientation symbol ('+' or '-')."""
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Invalid orientation symbol: {symbol!r}") from None

    def __str__(self) -> str:
        return self.value


class OrientedEnd(NamedTuple):
    """
    One side of a segment.

    The end is the side a traversal in ``orientation`` leaves through:
    (s, +) is the right (3') side of s, (s, -) the left (5') side.
    """
    segment: str
    orientation: Orientation

    def flip(self) -> 'OrientedEnd':
        """Return the other side of the same segment."""
        return OrientedEnd(self.segment, self.orientation.flip())

    @property
    def is_left(self) -> bool:
        """True for the 5' side."""
        return self.orientation is Orientation.REVERSE

    def __str__(self) -> str:
        return f"{self.segment}{self.orientation.value}"


@dataclass
class Segment:
    """
    GFA segment.

    The sequence is optional and only kept for reporting; the algorithms
    only use the name and the segment order.
    """
    name: str
    length: Optional[int] = None
    sequence: Optional[str] = None

    def __post_init__(self):
        """Fill in the length from the sequence if missing."""
        if self.length is None and self.sequence:
            self.length = len(self.sequence)
        elif self.sequence and self.length != len(self.sequence):
            logger.warning(
                f"Segment {self.name}: length {self.length} != sequence length {len(self.sequence)}"
            )


@dataclass(frozen=True)
class Link:
    """Undirected edge between two oriented ends."""
    end_a: OrientedEnd
    end_b: OrientedEnd

    @classmethod
    def from_gfa(cls, from_segment: str, from_orient: Orientation,
                 to_segment: str, to_orient: Orientation) -> 'Link':
        """
        Build a link from the fields of a GFA L-line.

        ``L a oa b ob`` leaves ``a`` through (a, oa) and enters ``b`` through
        the side opposite to (b, ob).
        """
        return cls(OrientedEnd(from_segment, from_orient),
                   OrientedEnd(to_segment, to_orient.flip()))

    @property
    def is_self_link(self) -> bool:
        """True if both ends lie on the same segment."""
        return self.end_a.segment == self.end_b.segment

    @property
    def is_hairpin(self) -> bool:
        """True if the link folds back onto the same side of one segment."""
        return self.end_a == self.end_b


# ============================================================================
# Bidirected Graph
# ============================================================================

@dataclass
class BidirectedGraph:
    """
    Bidirected sequence graph.

    Uses per-end adjacency lists of link indices for traversal.
    """
    segments: Dict[str, Segment] = field(default_factory=dict)
    links: List[Link] = field(default_factory=list)
    _order: Dict[str, int] = field(default_factory=dict, repr=False)
    _adjacency: Dict[OrientedEnd, List[int]] = field(
        default_factory=lambda: defaultdict(list), repr=False
    )

    def add_segment(self, name: str, length: Optional[int] = None,
                    sequence: Optional[str] = None) -> Segment:
        """Add a segment; raises DuplicateSegmentError if the name exists."""
        if name in self.segments:
            raise DuplicateSegmentError(name)
        segment = Segment(name=name, length=length, sequence=sequence)
        self._order[name] = len(self._order)
        self.segments[name] = segment
        return segment

    def add_link(self, end_a: OrientedEnd, end_b: OrientedEnd) -> Link:
        """Add a link; raises UnknownSegmentError if an end is not in the graph."""
        for end in (end_a, end_b):
            if end.segment not in self.segments:
                raise UnknownSegmentError(end.segment, context="link")
        link = Link(end_a, end_b)
        link_id = len(self.links)
        self.links.append(link)
        self._adjacency[end_a].append(link_id)
        if end_b != end_a:
            self._adjacency[end_b].append(link_id)
        return link

    def segment_index(self, name: str) -> int:
        """Insertion index of a segment."""
        try:
            return self._order[name]
        except KeyError:
            raise UnknownSegmentError(name, context="lookup") from None

    def segment_names(self) -> List[str]:
        """Segment names in insertion order."""
        return list(self.segments)

    def oriented_ends(self, name: str) -> Tuple[OrientedEnd, OrientedEnd]:
        """Both ends of a segment, left (5') side first."""
        if name not in self.segments:
            raise UnknownSegmentError(name, context="lookup")
        return (OrientedEnd(name, Orientation.REVERSE),
                OrientedEnd(name, Orientation.FORWARD))

    def neighbors(self, end: OrientedEnd) -> 'NeighborView':
        """Ends reachable from ``end`` through one link."""
        if end.segment not in self.segments:
            raise UnknownSegmentError(end.segment, context="lookup")
        return NeighborView(self, end)

    def degree(self, end: OrientedEnd) -> int:
        """Number of link incidences at an end (a hairpin counts twice)."""
        return sum(2 if self.links[i].is_hairpin else 1
                   for i in self._adjacency.get(end, ()))

    def has_link(self, end_a: OrientedEnd, end_b: OrientedEnd) -> bool:
        """True if at least one link joins the two ends."""
        for link_id in self._adjacency.get(end_a, ()):
            link = self.links[link_id]
            if (link.end_a == end_a and link.end_b == end_b) or \
               (link.end_b == end_a and link.end_a == end_b):
                return True
        return False

    def edge_counts(self) -> List[Tuple[str, int, int, int]]:
        """
        Inbound and outbound link counts for each segment.

        Returns:
            List of (name, inbound, outbound, total) in segment order, where
            inbound counts links at the left side and outbound at the right
        """
        counts = []
        for name in self.segments:
            left, right = self.oriented_ends(name)
            inbound = self.degree(left)
            outbound = self.degree(right)
            counts.append((name, inbound, outbound, inbound + outbound))
        return counts

    def __len__(self) -> int:
        return len(self.segments)


class NeighborView:
    """
    Lazy, restartable view of the ends linked to one end.

    Each iteration walks the adjacency list again, so the view can be
    consumed any number of times.
    """

    def __init__(self, graph: BidirectedGraph, end: OrientedEnd):
        self._graph = graph
        self._end = end

    def __iter__(self) -> Iterator[OrientedEnd]:
        for link_id in self._graph._adjacency.get(self._end, ()):
            link = self._graph.links[link_id]
            if link.is_hairpin:
                yield link.end_a
            elif link.end_a == self._end:
                yield link.end_b
            else:
                yield link.end_a

    def __len__(self) -> int:
        return len(self._graph._adjacency.get(self._end, ()))

    def __repr__(self) -> str:
        return f"NeighborView({self._end})"

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
