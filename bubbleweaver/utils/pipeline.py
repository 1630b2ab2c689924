#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Bubble pipeline: runs the graph core over a loaded graph.

Stages:
1. split: biedged transform, split into connected components
2. connectivity: 3-edge-connected components per connected component
3. contraction: cactus graph per connected component
4. extraction: bubble tree per connected component, merged in order

Stages 2-4 are mapped over the components, serially or with a process
pool, and each stage finishes for every component before the next one
starts. A cancellation token is checked between stages.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging
import threading
import time

from ..graph_core.biedged_graph import BiedgedGraph
from ..graph_core.cactus_graph import CactusGraph
from ..graph_core.errors import GraphResourceError, PipelineCancelled
from ..graph_core.graph_model import BidirectedGraph
from ..graph_core.three_edge_connectivity import (
    DEFAULT_LABEL_SEED,
    ComponentPartition,
    ThreeEdgeConnectivity,
)
from ..graph_core.ultrabubbles import BubbleTree, HairpinPolicy, UltrabubbleExtractor

logger = logging.getLogger(__name__)


def configure_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """
    Set up root logging for a command-line run.

    Args:
        level: Logging level name
        log_file: Optional file receiving the same records as stderr
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(Path(log_file)))
    logging.basicConfig(
        level=getattr(logging, str(level).upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


# ============================================================================
# Data Structures
# ============================================================================

class CancellationToken:
    """Flag a caller sets to stop a pipeline at the next stage boundary."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def check(self, completed_stage: str):
        """Raise PipelineCancelled if cancellation was requested."""
        if self._event.is_set():
            raise PipelineCancelled(completed_stage)


@dataclass
class PipelineStats:
    """Counts and timings from one pipeline run."""
    segments: int = 0
    links: int = 0
    vertices: int = 0
    connected_components: int = 0
    three_edge_components: int = 0
    cycles: int = 0
    bubbles: int = 0
    hairpins: int = 0
    stage_seconds: Dict[str, float] = field(default_factory=dict)

    def summary(self) -> str:
        """Return human-readable summary."""
        timing = ', '.join(f"{stage} {secs:.2f}s" for stage, secs in self.stage_seconds.items())
        return (
            f"Bubble Summary:\n"
            f"  Graph: {self.segments:,} segments, {self.links:,} links\n"
            f"  Components: {self.connected_components:,} connected, "
            f"{self.three_edge_components:,} 3-edge-connected\n"
            f"  Cactus: {self.cycles:,} cycles\n"
            f"  Bubbles: {self.bubbles:,} ({self.hairpins:,} hairpins flagged)\n"
            f"  Time: {timing}"
        )


@dataclass
class PipelineResult:
    """Bubble tree of the whole graph plus run statistics."""
    tree: BubbleTree
    stats: PipelineStats


# ============================================================================
# Stage workers (module level so process pools can pickle them)
# ============================================================================

def _connectivity_task(graph: BiedgedGraph, label_seed: int) -> ComponentPartition:
    return ThreeEdgeConnectivity(label_seed=label_seed).find_components(graph)


def _contraction_task(graph: BiedgedGraph, partition: ComponentPartition,
                      verify: bool) -> CactusGraph:
    cactus = CactusGraph.from_partition(graph, partition, verify=verify)
    cactus.decompose()
    return cactus


def _extraction_task(cactus: CactusGraph, hairpin_policy: HairpinPolicy) -> BubbleTree:
    return UltrabubbleExtractor(hairpin_policy=hairpin_policy).extract(cactus)


# ============================================================================
# Pipeline
# ============================================================================

class BubblePipeline:
    """
    Orchestrates bubble finding over the connected components of a graph.

    Components share no state, so each stage can map them over worker
    processes. Results are merged in component order (lowest vertex
    first), which makes the output independent of the worker count.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 token: Optional[CancellationToken] = None):
        """
        Initialize pipeline.

        Args:
            config: Configuration dictionary (sections graph, connectivity,
                    bubbles, execution); missing keys take defaults
            token: Cancellation token checked between stages
        """
        config = config or {}
        self.max_segments = config.get('graph', {}).get('max_segments')
        connectivity = config.get('connectivity', {})
        seed = connectivity.get('label_seed')
        self.label_seed = DEFAULT_LABEL_SEED if seed is None else seed
        self.verify_cactus = connectivity.get('verify_cactus', True)
        self.hairpin_policy = HairpinPolicy(
            config.get('bubbles', {}).get('hairpin_policy', 'bubble')
        )
        self.threads = max(1, int(config.get('execution', {}).get('threads') or 1))
        self.token = token or CancellationToken()

    def run(self, graph: BidirectedGraph) -> PipelineResult:
        """
        Find the bubble tree of a graph.

        Args:
            graph: Loaded bidirected graph

        Returns:
            PipelineResult

        Raises:
            GraphResourceError: If the graph exceeds graph.max_segments or memory
            PipelineCancelled: If the token is set before a stage starts
            InternalConsistencyError: If a stage produces an invalid structure
        """
        stats = PipelineStats(segments=len(graph.segments), links=len(graph.links))
        if self.max_segments is not None and stats.segments > self.max_segments:
            raise GraphResourceError(
                f"Graph has {stats.segments:,} segments, limit is {self.max_segments:,}"
            )

        logger.info(
            f"Finding bubbles: {stats.segments:,} segments, {stats.links:,} links "
            f"({self.threads} worker{'s' if self.threads > 1 else ''})"
        )

        self.token.check('start')
        started = time.time()
        try:
            biedged = BiedgedGraph.from_graph(graph)
            components = [biedged.subgraph(vertices)
                          for vertices in biedged.connected_components()]
        except MemoryError:
            raise GraphResourceError("Out of memory while building the biedged graph") from None
        stats.vertices = biedged.num_vertices
        stats.connected_components = len(components)
        stats.stage_seconds['split'] = time.time() - started
        logger.info(f"  {stats.vertices:,} vertices in {stats.connected_components:,} connected components")

        with self._executor() as executor:
            self.token.check('split')
            partitions = self._map_stage(
                executor, 'connectivity', _connectivity_task, stats,
                components, [self.label_seed] * len(components),
            )
            stats.three_edge_components = sum(p.num_components for p in partitions)
            logger.info(f"  {stats.three_edge_components:,} 3-edge-connected components")

            self.token.check('connectivity')
            cacti = self._map_stage(
                executor, 'contraction', _contraction_task, stats,
                components, partitions, [self.verify_cactus] * len(components),
            )
            stats.cycles = sum(len(c.cycles()) for c in cacti)
            logger.info(f"  {stats.cycles:,} cactus cycles")

            self.token.check('contraction')
            trees = self._map_stage(
                executor, 'extraction', _extraction_task, stats,
                cacti, [self.hairpin_policy] * len(cacti),
            )

        tree = BubbleTree.merge(trees)
        stats.bubbles = len(tree)
        stats.hairpins = len(tree.hairpins)
        logger.info(f"  {stats.bubbles:,} bubbles ({len(tree.roots):,} top-level)")
        return PipelineResult(tree=tree, stats=stats)

    def _executor(self):
        if self.threads > 1:
            return ProcessPoolExecutor(max_workers=self.threads)
        return _SerialExecutor()

    def _map_stage(self, executor, stage: str, task: Callable,
                   stats: PipelineStats, *task_args: Sequence) -> List[Any]:
        """Run one stage over all components and wait for every result."""
        started = time.time()
        try:
            results = list(executor.map(task, *task_args))
        except MemoryError:
            raise GraphResourceError(f"Out of memory during stage: {stage}") from None
        stats.stage_seconds[stage] = time.time() - started
        logger.debug(f"Stage {stage} finished in {stats.stage_seconds[stage]:.2f}s")
        return results


class _SerialExecutor:
    """In-process stand-in for an executor, used with a single worker."""

    def map(self, fn, *iterables):
        return map(fn, *iterables)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


def find_bubbles(graph: BidirectedGraph, config: Optional[Dict[str, Any]] = None) -> BubbleTree:
    """Run the pipeline with a configuration and return only the bubble tree."""
    return BubblePipeline(config).run(graph).tree

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
