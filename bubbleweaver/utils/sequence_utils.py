"""
BubbleWeaver v0.1.0

Sequence utility functions for BubbleWeaver.

Provides the strand handling used when printing segment sequences
along path walks.
"""

from typing import Optional

from ..graph_core.graph_model import Orientation

MISSING_SEQUENCE = '*'


def reverse_complement(sequence: str) -> str:
    """
    Generate reverse complement of DNA sequence.

    Args:
        sequence: DNA sequence string

    Returns:
        Reverse complement sequence; characters outside ACGTN pass through

    Example:
        >>> reverse_complement("ATCG")
        'CGAT'
    """
    complement_map = {
        'A': 'T', 'T': 'A',
        'G': 'C', 'C': 'G',
        'N': 'N',
        'a': 't', 't': 'a',
        'g': 'c', 'c': 'g',
        'n': 'n'
    }

    return ''.join(complement_map.get(base, base) for base in reversed(sequence))


def oriented_sequence(sequence: Optional[str], orientation: Orientation) -> str:
    """
    Sequence of a segment as read in a step's orientation.

    Args:
        sequence: Forward-strand segment sequence, None if the GFA had '*'
        orientation: Step orientation

    Returns:
        The sequence, its reverse complement for reverse steps, or '*'

    Example:
        >>> oriented_sequence("AAC", Orientation.REVERSE)
        'GTT'
    """
    if not sequence:
        return MISSING_SEQUENCE
    if orientation is Orientation.REVERSE:
        return reverse_complement(sequence)
    return sequence


__all__ = [
    'MISSING_SEQUENCE',
    'reverse_complement',
    'oriented_sequence'
]
