#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Graph selection: the part of a graph (and its paths) named by a list of
paths or segments.

Selecting by paths keeps those paths and every segment they visit.
Selecting by segments keeps those segments and every path that stays
inside them. Either way a link is kept when both of its ends lie on kept
segments, and segments, links and paths keep their original order.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Iterable, List, Set, Tuple
import logging

from .graph_model import BidirectedGraph
from .path_store import Path, PathStore

logger = logging.getLogger(__name__)


def select_paths(graph: BidirectedGraph, paths: PathStore,
                 names: Iterable[str]) -> Tuple[BidirectedGraph, PathStore]:
    """
    Subgraph walked by the named paths.

    Args:
        graph: Source graph
        paths: Paths of the source graph
        names: Path names to keep; unknown names are logged and skipped

    Returns:
        (graph, path store) holding the selection
    """
    wanted = _known(names, paths, "path")
    kept_paths = [path for path in paths if path.name in wanted]
    segments = {segment for path in kept_paths for segment in path.segment_names()}
    return _build(graph, segments, kept_paths)


def select_segments(graph: BidirectedGraph, paths: PathStore,
                    names: Iterable[str]) -> Tuple[BidirectedGraph, PathStore]:
    """
    Subgraph induced by the named segments.

    Args:
        graph: Source graph
        paths: Paths of the source graph
        names: Segment names to keep; unknown names are logged and skipped

    Returns:
        (graph, path store) holding the selection; only paths whose every
        step lies on a kept segment are included
    """
    segments = _known(names, graph.segments, "segment")
    kept_paths = [path for path in paths
                  if all(segment in segments for segment in path.segment_names())]
    return _build(graph, segments, kept_paths)


def _known(names: Iterable[str], container, kind: str) -> Set[str]:
    wanted = set()
    for name in names:
        if name in container:
            wanted.add(name)
        else:
            logger.warning(f"Unknown {kind} skipped: {name}")
    return wanted


def _build(graph: BidirectedGraph, segments: Set[str],
           kept_paths: List[Path]) -> Tuple[BidirectedGraph, PathStore]:
    selected = BidirectedGraph()
    for name, segment in graph.segments.items():
        if name in segments:
            selected.add_segment(name, length=segment.length, sequence=segment.sequence)
    for link in graph.links:
        if link.end_a.segment in segments and link.end_b.segment in segments:
            selected.add_link(link.end_a, link.end_b)

    store = PathStore(selected)
    for path in kept_paths:
        store.add_path(path.name, path.steps)

    logger.info(
        f"Selected {len(selected.segments)} of {len(graph.segments)} segments, "
        f"{len(selected.links)} links, {len(store)} paths"
    )
    return selected, store

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
