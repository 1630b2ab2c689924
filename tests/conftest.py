#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from pathlib import Path
import tempfile
import shutil

import numpy as np

from bubbleweaver.graph_core import (
    BidirectedGraph,
    BiedgedGraph,
    CactusGraph,
    Link,
    Orientation,
    ThreeEdgeConnectivity,
)

F = Orientation.FORWARD
R = Orientation.REVERSE


def build_graph(segments, links):
    """
    Build a BidirectedGraph from segment names and GFA-style links.

    Args:
        segments: Segment names in order
        links: (from, from_orient, to, to_orient) tuples with '+'/'-' symbols
    """
    graph = BidirectedGraph()
    for name in segments:
        graph.add_segment(name)
    for a, oa, b, ob in links:
        link = Link.from_gfa(a, Orientation.from_symbol(oa), b, Orientation.from_symbol(ob))
        graph.add_link(link.end_a, link.end_b)
    return graph


def build_cactus(graph, verify=True):
    """Biedged transform, 3-edge connectivity and contraction of a whole graph."""
    biedged = BiedgedGraph.from_graph(graph)
    partition = ThreeEdgeConnectivity().find_components(biedged)
    return CactusGraph.from_partition(biedged, partition, verify=verify)


def random_graph(seed, max_segments=7, max_links=12):
    """Seeded random bidirected graph, hairpins and parallel links included."""
    rng = np.random.default_rng(seed)
    num_segments = int(rng.integers(1, max_segments + 1))
    segments = [f"s{i}" for i in range(num_segments)]
    links = []
    for _ in range(int(rng.integers(0, max_links + 1))):
        a, b = rng.integers(0, num_segments, size=2)
        oa, ob = rng.choice(['+', '-'], size=2)
        links.append((segments[a], str(oa), segments[b], str(ob)))
    return build_graph(segments, links)


# Scenario A: one bubble between 2 and 4 through 3a / 3b
SIMPLE_BUBBLE_SEGMENTS = ['1', '2', '3a', '3b', '4']
SIMPLE_BUBBLE_LINKS = [
    ('1', '+', '2', '+'),
    ('2', '+', '3a', '+'),
    ('2', '+', '3b', '+'),
    ('3a', '+', '4', '+'),
    ('3b', '+', '4', '+'),
]

# Scenario B: outer bubble 2..9 whose branches each hold a bubble
NESTED_SEGMENTS = ['1', '2', '3', '4a', '4b', '5', '6', '7a', '7b', '8', '9', '10']
NESTED_LINKS = [
    ('1', '+', '2', '+'),
    ('2', '+', '3', '+'),
    ('3', '+', '4a', '+'),
    ('3', '+', '4b', '+'),
    ('4a', '+', '5', '+'),
    ('4b', '+', '5', '+'),
    ('5', '+', '9', '+'),
    ('2', '+', '6', '+'),
    ('6', '+', '7a', '+'),
    ('6', '+', '7b', '+'),
    ('7a', '+', '8', '+'),
    ('7b', '+', '8', '+'),
    ('8', '+', '9', '+'),
    ('9', '+', '10', '+'),
]

# Scenario C: hairpin folding back onto the right side of 2
HAIRPIN_SEGMENTS = ['1', '2', '3']
HAIRPIN_LINKS = [
    ('1', '+', '2', '+'),
    ('2', '+', '3', '+'),
    ('2', '+', '2', '-'),
]

CHAIN_SEGMENTS = ['1', '2', '3', '4']
CHAIN_LINKS = [
    ('1', '+', '2', '+'),
    ('2', '+', '3', '+'),
    ('3', '+', '4', '+'),
]

SIMPLE_BUBBLE_GFA = """H\tVN:Z:1.0
S\t1\tACGT
S\t2\tGG
S\t3a\tA
S\t3b\tT
S\t4\tCCC
L\t1\t+\t2\t+\t0M
L\t2\t+\t3a\t+\t0M
L\t2\t+\t3b\t+\t0M
L\t3a\t+\t4\t+\t0M
L\t3b\t+\t4\t+\t0M
P\tref\t1+,2+,3a+,4+\t*
P\talt\t1+,2+,3b+,4+\t*
"""

# Reverse steps and a segment without sequence
STRANDED_GFA = """H\tVN:Z:1.0
S\ta\tACG
S\tb\t*\tLN:i:3
S\tc\tTTG
L\ta\t+\tb\t-\t0M
L\tb\t-\tc\t+\t0M
P\tp\ta+,b-,c+\t*
P\tq\tc-,b+,a-\t*
"""


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="bubbleweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def simple_bubble_graph():
    """Scenario A graph: 1 -> 2 -> {3a, 3b} -> 4."""
    return build_graph(SIMPLE_BUBBLE_SEGMENTS, SIMPLE_BUBBLE_LINKS)


@pytest.fixture
def nested_bubble_graph():
    """Scenario B graph: two inner bubbles on the branches of an outer one."""
    return build_graph(NESTED_SEGMENTS, NESTED_LINKS)


@pytest.fixture
def hairpin_graph():
    """Scenario C graph: chain 1 -> 2 -> 3 with a hairpin on 2+."""
    return build_graph(HAIRPIN_SEGMENTS, HAIRPIN_LINKS)


@pytest.fixture
def chain_graph():
    """Unbranched chain of four segments."""
    return build_graph(CHAIN_SEGMENTS, CHAIN_LINKS)


@pytest.fixture
def simple_bubble_gfa(temp_output_dir):
    """Scenario A written as a GFA file with two paths."""
    path = temp_output_dir / "simple_bubble.gfa"
    path.write_text(SIMPLE_BUBBLE_GFA)
    return path

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
