"""
BubbleWeaver v0.1.0

Graph core: bidirected graph model, biedged transform, 3-edge
connectivity, cactus contraction and ultrabubble extraction.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .errors import (
    BubbleWeaverError,
    GraphInputError,
    DuplicateSegmentError,
    UnknownSegmentError,
    DisconnectedPathError,
    DuplicatePathNameError,
    InternalConsistencyError,
    CactusPropertyError,
    GraphResourceError,
    PipelineCancelled,
)
from .graph_model import BidirectedGraph, Link, Orientation, OrientedEnd, Segment
from .path_store import Path, PathStore, SubPath
from .biedged_graph import BLACK, GREY, BiedgedGraph, end_to_vertex
from .three_edge_connectivity import (
    DEFAULT_LABEL_SEED,
    ComponentPartition,
    ThreeEdgeConnectivity,
    three_edge_connected_components,
)
from .cactus_graph import CactusCycle, CactusEdge, CactusGraph
from .ultrabubbles import (
    Bubble,
    BubbleTree,
    HairpinPolicy,
    UltrabubbleExtractor,
    extract_ultrabubbles,
)
from .selection import select_paths, select_segments

__all__ = [
    # Errors
    "BubbleWeaverError",
    "GraphInputError",
    "DuplicateSegmentError",
    "UnknownSegmentError",
    "DisconnectedPathError",
    "DuplicatePathNameError",
    "InternalConsistencyError",
    "CactusPropertyError",
    "GraphResourceError",
    "PipelineCancelled",
    # Graph model
    "BidirectedGraph",
    "Link",
    "Orientation",
    "OrientedEnd",
    "Segment",
    "Path",
    "PathStore",
    "SubPath",
    # Biedged graph
    "BLACK",
    "GREY",
    "BiedgedGraph",
    "end_to_vertex",
    # Connectivity and cactus
    "DEFAULT_LABEL_SEED",
    "ComponentPartition",
    "ThreeEdgeConnectivity",
    "three_edge_connected_components",
    "CactusCycle",
    "CactusEdge",
    "CactusGraph",
    # Bubbles
    "Bubble",
    "BubbleTree",
    "HairpinPolicy",
    "UltrabubbleExtractor",
    "extract_ultrabubbles",
    # Selection
    "select_paths",
    "select_segments",
]
