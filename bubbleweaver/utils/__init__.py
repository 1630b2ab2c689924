"""
BubbleWeaver v0.1.0

Pipeline and sequence utilities for BubbleWeaver.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .pipeline import (
    BubblePipeline,
    CancellationToken,
    PipelineResult,
    PipelineStats,
    configure_logging,
    find_bubbles,
)
from .sequence_utils import MISSING_SEQUENCE, oriented_sequence, reverse_complement

__all__ = [
    "BubblePipeline",
    "CancellationToken",
    "PipelineResult",
    "PipelineStats",
    "configure_logging",
    "find_bubbles",
    "MISSING_SEQUENCE",
    "oriented_sequence",
    "reverse_complement",
]
