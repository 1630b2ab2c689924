#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Bubble Export: text, JSON and BED reports of a bubble tree, and
reloading of saved JSON results.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, TextIO

from ..graph_core.graph_model import Orientation, OrientedEnd
from ..graph_core.path_store import PathStore
from ..graph_core.ultrabubbles import Bubble, BubbleTree
from ..version import __version__

logger = logging.getLogger(__name__)

FORMAT_NAME = "bubbleweaver-bubbles"


@contextmanager
def _output_handle(output: str | Path | TextIO) -> Iterator[TextIO]:
    """Yield a writable handle for a path or an already open stream."""
    if hasattr(output, 'write'):
        yield output
    else:
        with open(output, 'w') as f:
            yield f


def _end_to_dict(end: OrientedEnd) -> dict[str, str]:
    return {'segment': end.segment, 'orientation': end.orientation.value}


def _end_from_dict(data: dict[str, str]) -> OrientedEnd:
    return OrientedEnd(data['segment'], Orientation.from_symbol(data['orientation']))


# ============================================================================
#                           JSON EXPORT
# ============================================================================

def bubble_tree_to_dict(tree: BubbleTree, paths: PathStore | None = None) -> dict[str, Any]:
    """
    Convert a bubble tree to a JSON-serializable dictionary.

    Args:
        tree: Bubble tree to convert
        paths: Optional path store; adds the paths traversing each bubble

    Returns:
        Dictionary with 'bubbles', 'roots' and 'hairpins'
    """
    bubbles = []
    for bubble in tree.walk():
        entry: dict[str, Any] = {
            'id': bubble.bubble_id,
            'entrance': _end_to_dict(bubble.entrance),
            'exit': _end_to_dict(bubble.exit),
            'parent': bubble.parent,
            'children': list(bubble.children),
            'size': bubble.size,
            'depth': tree.depth(bubble.bubble_id),
            'segments': list(bubble.segments),
        }
        if paths is not None:
            entry['paths'] = sorted(_paths_through_bubble(bubble, paths))
        bubbles.append(entry)

    return {
        'format': FORMAT_NAME,
        'version': __version__,
        'bubbles': bubbles,
        'roots': list(tree.roots),
        'hairpins': [_end_to_dict(end) for end in tree.hairpins],
    }


def _paths_through_bubble(bubble: Bubble, paths: PathStore) -> set[str]:
    """Names of paths stepping through the entrance side in either direction."""
    names = set()
    for end in (bubble.entrance, bubble.entrance.flip()):
        names.update(name for name, _ in paths.paths_through(end))
    return names


def write_bubbles_json(tree: BubbleTree, output: str | Path | TextIO,
                       paths: PathStore | None = None) -> None:
    """
    Write a bubble tree as JSON.

    Args:
        tree: Bubble tree
        output: Output path or open text stream
        paths: Optional path store for per-bubble path annotation
    """
    with _output_handle(output) as f:
        json.dump(bubble_tree_to_dict(tree, paths), f, indent=2)
        f.write('\n')
    logger.info(f"Exported {len(tree)} bubbles as JSON")


def load_bubbles_json(input_path: str | Path) -> BubbleTree:
    """
    Load a bubble tree saved by write_bubbles_json.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a bubble tree export
    """
    input_path = Path(input_path)
    if not input_path.exists():
        raise FileNotFoundError(f"Bubble file not found: {input_path}")

    with open(input_path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict) or data.get('format') != FORMAT_NAME:
        raise ValueError(f"Not a BubbleWeaver bubble file: {input_path}")

    tree = BubbleTree()
    try:
        for entry in data['bubbles']:
            bubble = Bubble(
                bubble_id=int(entry['id']),
                entrance=_end_from_dict(entry['entrance']),
                exit=_end_from_dict(entry['exit']),
                parent=entry['parent'],
                children=[int(c) for c in entry['children']],
                segments=list(entry.get('segments', [])),
            )
            tree.bubbles[bubble.bubble_id] = bubble
        tree.roots = [int(r) for r in data['roots']]
        tree.hairpins = [_end_from_dict(end) for end in data.get('hairpins', [])]
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed bubble file {input_path}: {e}") from e

    logger.info(f"Loaded {len(tree)} bubbles from {input_path}")
    return tree


# ============================================================================
#                           TEXT EXPORT
# ============================================================================

def write_bubbles_text(tree: BubbleTree, output: str | Path | TextIO) -> None:
    """
    Write one tab-separated line per bubble in pre-order.

    Columns: id, entrance, exit, parent ('root' for top level), children
    (comma-separated, '.' if none), interior segments ('.' if none).
    Hairpins flagged instead of reported as bubbles follow as
    '# hairpin <end>' lines.
    """
    with _output_handle(output) as f:
        f.write("#id\tentrance\texit\tparent\tchildren\tsegments\n")
        for bubble in tree.walk():
            parent = 'root' if bubble.parent is None else str(bubble.parent)
            children = ','.join(str(c) for c in bubble.children) or '.'
            segments = ','.join(bubble.segments) or '.'
            f.write(
                f"{bubble.bubble_id}\t{bubble.entrance}\t{bubble.exit}\t"
                f"{parent}\t{children}\t{segments}\n"
            )
        for end in tree.hairpins:
            f.write(f"# hairpin {end}\n")


# ============================================================================
#                           BED EXPORT
# ============================================================================

def bubble_intervals(tree: BubbleTree, paths: PathStore,
                     reference_paths: list[str] | None = None) -> list[tuple[str, int, int, int]]:
    """
    Locate bubbles on reference paths.

    On each path the interval starts at the first step on either boundary
    segment and ends after the next step on the other one (the same
    step for a bubble whose boundary is one segment). Bubbles the path
    does not span are left out.

    Args:
        tree: Bubble tree
        paths: Path store providing steps and segment lengths
        reference_paths: Path names to use (None or empty = all paths)

    Returns:
        (path name, start, end, bubble id) tuples, 0-based half-open,
        sorted by path order, then start, then bubble id

    Raises:
        KeyError: If a requested reference path does not exist
    """
    names = list(reference_paths) if reference_paths else paths.names()
    for name in names:
        if name not in paths:
            raise KeyError(f"Unknown reference path: {name}")

    intervals = []
    for name in names:
        path = paths.get(name)
        offsets = paths.step_offsets(name)
        segment_steps: dict[str, list[int]] = {}
        for index, (segment, _) in enumerate(path.steps):
            segment_steps.setdefault(segment, []).append(index)

        located = []
        for bubble in tree.walk():
            first_segment = bubble.entrance.segment
            second_segment = bubble.exit.segment
            first_hits = segment_steps.get(first_segment, [])
            second_hits = segment_steps.get(second_segment, [])
            if not first_hits or not second_hits:
                continue

            start_index = min(first_hits[0], second_hits[0])
            other_hits = second_hits if first_hits[0] == start_index else first_hits
            end_index = next((i for i in other_hits if i >= start_index), None)
            if end_index is None:
                continue
            located.append((offsets[start_index], offsets[end_index + 1], bubble.bubble_id))

        located.sort()
        intervals.extend((name, start, end, bubble_id) for start, end, bubble_id in located)
    return intervals


def write_bubbles_bed(tree: BubbleTree, paths: PathStore, output: str | Path | TextIO,
                      reference_paths: list[str] | None = None) -> int:
    """
    Write bubble intervals on reference paths as BED6.

    The name column is ``bubble_<id>``, the score column the nesting
    depth, and the strand column '.'.

    Returns:
        Number of intervals written
    """
    intervals = bubble_intervals(tree, paths, reference_paths)
    with _output_handle(output) as f:
        for name, start, end, bubble_id in intervals:
            depth = tree.depth(bubble_id)
            f.write(f"{name}\t{start}\t{end}\tbubble_{bubble_id}\t{depth}\t.\n")

    logger.info(f"Exported {len(intervals)} bubble intervals as BED")
    return len(intervals)

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
