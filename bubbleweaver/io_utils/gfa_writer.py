#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

GFA Writer: writes a BidirectedGraph and its paths back out as GFA v1
(H, S, L and P lines).

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterator, TextIO

from ..graph_core.graph_model import BidirectedGraph, Link, Segment
from ..graph_core.path_store import Path as GraphPath
from ..graph_core.path_store import PathStore
from .bubble_export import _output_handle

logger = logging.getLogger(__name__)

# Links and path steps carry no overlap information
NO_OVERLAP = '0M'


# ============================================================================
#                           GFA LINES
# ============================================================================

def segment_line(segment: Segment) -> str:
    """
    S-line of a segment.

    Format: S <name> <sequence or *> [LN:i:<length>]
    """
    line = f"S\t{segment.name}\t{segment.sequence or '*'}"
    if segment.length is not None:
        line += f"\tLN:i:{segment.length}"
    return line


def link_line(link: Link) -> str:
    """
    L-line of a link.

    Format: L <from> <from_orient> <to> <to_orient> <overlap>

    The second end of a Link is the side it enters, so the GFA
    orientation of the target is its flip.
    """
    return (
        f"L\t{link.end_a.segment}\t{link.end_a.orientation.value}"
        f"\t{link.end_b.segment}\t{link.end_b.orientation.flip().value}\t{NO_OVERLAP}"
    )


def path_line(path: GraphPath) -> str:
    """
    P-line of a path.

    Format: P <name> <seg+,seg-,...> <overlaps or *>
    """
    steps = ','.join(f"{segment}{orient.value}" for segment, orient in path.steps)
    overlaps = ','.join([NO_OVERLAP] * (len(path.steps) - 1)) or '*'
    return f"P\t{path.name}\t{steps}\t{overlaps}"


def gfa_lines(graph: BidirectedGraph, paths: PathStore | None = None,
              version: str = '1.0') -> Iterator[str]:
    """Header, then segments, links and paths in graph order."""
    yield f"H\tVN:Z:{version}"
    for segment in graph.segments.values():
        yield segment_line(segment)
    for link in graph.links:
        yield link_line(link)
    if paths is not None:
        for path in paths:
            yield path_line(path)


# ============================================================================
#                           GFA EXPORT
# ============================================================================

def write_gfa(graph: BidirectedGraph, output: str | Path | TextIO,
              paths: PathStore | None = None) -> None:
    """
    Write a graph and its paths as GFA v1.

    Args:
        graph: Graph to write
        output: Output path or open text stream
        paths: Optional paths to write as P-lines
    """
    with _output_handle(output) as f:
        for line in gfa_lines(graph, paths):
            f.write(line + '\n')

    logger.info(f"GFA export complete: {len(graph.segments)} segments, "
                f"{len(graph.links)} links, {len(paths) if paths is not None else 0} paths")

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
