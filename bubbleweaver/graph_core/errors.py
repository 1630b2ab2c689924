#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Error taxonomy for the graph core.

Three families are kept apart so callers can message them differently:
- input errors: malformed graph content detected while building the model
- internal-consistency errors: algorithm defects, always fatal
- resource errors: the graph does not fit the configured limits or memory

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""


class BubbleWeaverError(Exception):
    """Base class for all BubbleWeaver errors."""
    pass


# ============================================================================
# Input errors
# ============================================================================

class GraphInputError(BubbleWeaverError):
    """
    Raised when graph input is invalid.

    Attributes:
        identifier: Name of the offending segment or path
    """

    def __init__(self, message: str, identifier: str):
        super().__init__(message)
        self.identifier = identifier


class DuplicateSegmentError(GraphInputError):
    """Raised when a segment name is added twice."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate segment: {name}", name)


class UnknownSegmentError(GraphInputError):
    """Raised when a link or path references a segment that was never added."""

    def __init__(self, name: str, context: str = "link"):
        super().__init__(f"Unknown segment in {context}: {name}", name)
        self.context = context


class DisconnectedPathError(GraphInputError):
    """Raised when two consecutive path steps are not joined by a link."""

    def __init__(self, path_name: str, step_index: int, from_step: str, to_step: str):
        super().__init__(
            f"Path {path_name} is disconnected at step {step_index}: "
            f"no link from {from_step} to {to_step}",
            path_name,
        )
        self.step_index = step_index


class DuplicatePathNameError(GraphInputError):
    """Raised when a path name is added twice."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate path name: {name}", name)


# ============================================================================
# Internal-consistency errors
# ============================================================================

class InternalConsistencyError(BubbleWeaverError):
    """Raised when an algorithm produces a structurally invalid result."""
    pass


class CactusPropertyError(InternalConsistencyError):
    """Raised when a contracted graph has an edge on more than one cycle."""

    def __init__(self, message: str, edge_id: int):
        super().__init__(message)
        self.edge_id = edge_id


# ============================================================================
# Resource and control errors
# ============================================================================

class GraphResourceError(BubbleWeaverError):
    """Raised when a graph exceeds the configured size or available memory."""
    pass


class PipelineCancelled(BubbleWeaverError):
    """Raised when a pipeline run is cancelled between stages."""

    def __init__(self, completed_stage: str):
        super().__init__(f"Pipeline cancelled after stage: {completed_stage}")
        self.completed_stage = completed_stage

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
