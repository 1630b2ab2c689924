#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Tests for strand handling of segment sequences.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from bubbleweaver.graph_core import Orientation
from bubbleweaver.utils.sequence_utils import (
    MISSING_SEQUENCE,
    oriented_sequence,
    reverse_complement,
)


class TestReverseComplement:
    """Test reverse complement."""

    def test_basic(self):
        assert reverse_complement("ATCG") == "CGAT"

    def test_keeps_case_and_n(self):
        assert reverse_complement("acgN") == "Ncgt"

    def test_unknown_characters_pass_through(self):
        assert reverse_complement("AR-") == "-RT"


class TestOrientedSequence:
    """Test sequences read along a step."""

    def test_forward_unchanged(self):
        assert oriented_sequence("AAC", Orientation.FORWARD) == "AAC"

    def test_reverse_complemented(self):
        assert oriented_sequence("AAC", Orientation.REVERSE) == "GTT"

    def test_missing_sequence(self):
        assert oriented_sequence(None, Orientation.REVERSE) == MISSING_SEQUENCE == '*'
        assert oriented_sequence("", Orientation.FORWARD) == '*'

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
