#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

GFA Reader: loads GFA v1 segments, links and paths into a
BidirectedGraph and PathStore.

Record handling:
- H: header, VN tag kept
- S: name, sequence or '*', optional LN:i: tag
- L: from, from orientation, to, to orientation, overlap (ignored)
- P: name, comma-separated oriented steps, overlaps (ignored)
- anything else (W, C, J, ...) and '#' comments are skipped

Segments are added first, then links, then paths, so records may appear
in any order in the file.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import gzip
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple, Union

from ..graph_core.errors import GraphInputError
from ..graph_core.graph_model import BidirectedGraph, Link, Orientation
from ..graph_core.path_store import PathStore, Step

logger = logging.getLogger(__name__)


class GFAFormatError(ValueError):
    """Raised when a GFA line cannot be parsed."""

    def __init__(self, message: str, line_number: int):
        super().__init__(f"GFA line {line_number}: {message}")
        self.line_number = line_number


@dataclass
class GFAContents:
    """Everything loaded from one GFA file."""
    graph: BidirectedGraph
    paths: PathStore
    version: Optional[str] = None


# Helper functions for file handling with automatic gzip detection

def is_gzipped(filepath: Union[str, Path]) -> bool:
    """True if the file name ends in a gzip suffix."""
    return Path(filepath).suffix in ('.gz', '.gzip')


def open_file(filepath: Union[str, Path], mode: str = 'r') -> TextIO:
    """
    Open file with automatic gzip detection.

    Args:
        filepath: Path to file
        mode: File mode ('r' or 'w')

    Returns:
        Text file handle
    """
    filepath = Path(filepath)

    if is_gzipped(filepath):
        return gzip.open(filepath, 'rt' if 'r' in mode else 'wt')
    return open(filepath, mode)


def _parse_orientation(symbol: str, line_number: int) -> Orientation:
    try:
        return Orientation.from_symbol(symbol)
    except ValueError:
        raise GFAFormatError(f"invalid orientation '{symbol}'", line_number) from None


def _parse_segment(parts: List[str], line_number: int) -> Tuple[str, Optional[int], Optional[str]]:
    """S <name> <sequence> [tags...]"""
    if len(parts) < 3:
        raise GFAFormatError("S-line needs a name and a sequence", line_number)
    name = parts[1]
    sequence = parts[2] if parts[2] != '*' else None

    length = None
    for tag in parts[3:]:
        if tag.startswith('LN:i:'):
            try:
                length = int(tag[5:])
            except ValueError:
                raise GFAFormatError(f"invalid LN tag '{tag}'", line_number) from None
            break
    return name, length, sequence


def _parse_link(parts: List[str], line_number: int) -> Link:
    """L <from> <from_orient> <to> <to_orient> [overlap]"""
    if len(parts) < 5:
        raise GFAFormatError("L-line needs two segments and two orientations", line_number)
    return Link.from_gfa(
        parts[1], _parse_orientation(parts[2], line_number),
        parts[3], _parse_orientation(parts[4], line_number),
    )


def _parse_path(parts: List[str], line_number: int) -> Tuple[str, List[Step]]:
    """P <name> <seg+,seg-,...> [overlaps]"""
    if len(parts) < 3:
        raise GFAFormatError("P-line needs a name and a step list", line_number)
    steps = []
    for token in parts[2].split(','):
        if len(token) < 2:
            raise GFAFormatError(f"invalid path step '{token}'", line_number)
        steps.append((token[:-1], _parse_orientation(token[-1], line_number)))
    return parts[1], steps


def parse_gfa_lines(lines, source: str = '<input>') -> GFAContents:
    """
    Build a graph and path store from GFA text lines.

    Args:
        lines: Iterable of GFA lines
        source: Name used in log messages

    Returns:
        GFAContents

    Raises:
        GFAFormatError: On malformed lines
        GraphInputError: On duplicate or unknown segments, or invalid paths
    """
    version = None
    segments: List[Tuple[int, Tuple[str, Optional[int], Optional[str]]]] = []
    links: List[Tuple[int, Link]] = []
    paths: List[Tuple[int, Tuple[str, List[Step]]]] = []
    skipped: Dict[str, int] = {}

    for line_number, raw_line in enumerate(lines, 1):
        line = raw_line.rstrip('\r\n')
        if not line or line.startswith('#'):
            continue

        parts = line.split('\t')
        record_type = parts[0]

        if record_type == 'H':
            for tag in parts[1:]:
                if tag.startswith('VN:Z:'):
                    version = tag[5:]
        elif record_type == 'S':
            segments.append((line_number, _parse_segment(parts, line_number)))
        elif record_type == 'L':
            links.append((line_number, _parse_link(parts, line_number)))
        elif record_type == 'P':
            paths.append((line_number, _parse_path(parts, line_number)))
        else:
            skipped[record_type] = skipped.get(record_type, 0) + 1

    if version and not version.startswith('1'):
        logger.warning(f"{source}: GFA version {version}, only v1 records are read")
    for record_type, count in skipped.items():
        logger.debug(f"{source}: skipped {count} '{record_type}' records")

    graph = BidirectedGraph()
    store = PathStore(graph)
    try:
        for line_number, (name, length, sequence) in segments:
            graph.add_segment(name, length=length, sequence=sequence)
        for line_number, link in links:
            graph.add_link(link.end_a, link.end_b)
        for line_number, (name, steps) in paths:
            store.add_path(name, steps)
    except GraphInputError as e:
        logger.error(f"{source}: line {line_number}: {e}")
        raise

    logger.info(
        f"Loaded {source}: {len(graph.segments)} segments, "
        f"{len(graph.links)} links, {len(store)} paths"
    )
    return GFAContents(graph=graph, paths=store, version=version)


def load_gfa(gfa_path: Union[str, Path]) -> GFAContents:
    """
    Load a GFA v1 file (plain or gzipped).

    Args:
        gfa_path: Path to the GFA file

    Returns:
        GFAContents with the graph and its paths

    Raises:
        FileNotFoundError: If gfa_path does not exist
        GFAFormatError: On malformed lines
        GraphInputError: On inconsistent graph content
    """
    gfa_path = Path(gfa_path)
    if not gfa_path.exists():
        raise FileNotFoundError(f"GFA file not found: {gfa_path}")

    logger.info(f"Loading graph from GFA: {gfa_path}")
    with open_file(gfa_path) as f:
        return parse_gfa_lines(f, source=gfa_path.name)

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
