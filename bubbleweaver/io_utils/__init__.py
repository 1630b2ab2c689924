"""
BubbleWeaver v0.1.0

I/O Module for BubbleWeaver.

1. gfa_reader.py - GFA v1 loading (segments, links, paths)
2. bubble_export.py - Bubble reports (text, JSON, BED) and JSON reload
3. gfa_writer.py - GFA v1 output of a graph and its paths
"""

from .gfa_reader import (
    GFAContents,
    GFAFormatError,
    is_gzipped,
    load_gfa,
    open_file,
    parse_gfa_lines,
)
from .bubble_export import (
    bubble_intervals,
    bubble_tree_to_dict,
    load_bubbles_json,
    write_bubbles_bed,
    write_bubbles_json,
    write_bubbles_text,
)
from .gfa_writer import gfa_lines, link_line, path_line, segment_line, write_gfa

__all__ = [
    # GFA input
    "GFAContents",
    "GFAFormatError",
    "is_gzipped",
    "load_gfa",
    "open_file",
    "parse_gfa_lines",
    # Bubble output
    "bubble_intervals",
    "bubble_tree_to_dict",
    "load_bubbles_json",
    "write_bubbles_bed",
    "write_bubbles_json",
    "write_bubbles_text",
    # GFA output
    "gfa_lines",
    "link_line",
    "path_line",
    "segment_line",
    "write_gfa",
]
