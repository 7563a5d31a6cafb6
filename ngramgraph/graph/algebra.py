"""
Multi-level graph algebra.

Set and blend operations over NGramGraph instances. Operations return
new graphs built from clones, except ``merge`` (mutates its first
argument) and ``degrade`` (mutates its first argument's degradation
table). Levels missing from either operand are skipped.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from ngramgraph.core.exceptions import AlgebraError
from ngramgraph.graph.ngram_graph import NGramGraph
from ngramgraph.graph.unique_graph import UniqueGraph

logger = logging.getLogger(__name__)

# Importance of a vertex without weighted edges; always below any threshold.
NO_IMPORTANCE = -200000.0


def _paired_levels(a: NGramGraph, b: NGramGraph):
    """Yield ``(n, level_a, level_b)`` for every size both graphs have."""
    for n, level_a in a.iter_levels():
        level_b = b.level_by_size(n)
        if level_b is None:
            logger.debug(f"Level n={n} missing from second operand, skipped")
            continue
        yield n, level_a, level_b


def merge_level(target: UniqueGraph, source: UniqueGraph, weight_percent: float) -> None:
    """Blend every edge of ``source`` into ``target``."""
    for edge in source.edges():
        existing = target.locate_edge(edge.source, edge.target)
        if existing is None:
            # add_edge never overwrites; the pair is known to be absent here
            target.add_edge(edge.source, edge.target, edge.weight)
        else:
            new_weight = existing.weight + (edge.weight - existing.weight) * weight_percent
            target.set_edge_weight(existing, new_weight)


def merge(a: NGramGraph, b: NGramGraph, weight_percent: float) -> NGramGraph:
    """
    Merge ``b`` into ``a`` in place.

    Each edge of ``b`` already in ``a`` moves from its old weight
    towards ``b``'s by ``weight_percent`` (0 keeps ``a``, 1 adopts
    ``b``); edges only in ``b`` are inserted with ``b``'s weight.
    Merging a graph with itself does nothing.

    Args:
        a: Graph to update.
        b: Graph merged into ``a``.
        weight_percent: Tendency towards ``b``'s weights, in [0, 1].

    Returns:
        ``a``, for chaining.

    Raises:
        AlgebraError: If ``weight_percent`` is outside [0, 1].
    """
    if a is b:
        return a
    if not 0.0 <= weight_percent <= 1.0:
        raise AlgebraError(f"Merge weight must be in [0, 1], got {weight_percent}")
    for _, level_a, level_b in _paired_levels(a, b):
        merge_level(level_a, level_b, weight_percent)
    return a


def intersect(a: NGramGraph, b: NGramGraph) -> NGramGraph:
    """
    Edges whose ordered pair exists in both graphs.

    Returns:
        A new graph with ``a``'s parameters whose edge weights are the
        mean of the two operands' weights.
    """
    result = a.empty_copy()
    for n, level_a, level_b in _paired_levels(a, b):
        level_r = result.level_by_size(n)
        if level_r is None:
            continue
        # Look up edges of the smaller level in the larger one
        small, large = (level_a, level_b) if level_a.edge_count <= level_b.edge_count else (level_b, level_a)
        for edge in small.edges():
            other = large.locate_edge(edge.source, edge.target)
            if other is not None:
                level_r.add_edge(edge.source, edge.target, (edge.weight + other.weight) / 2.0)
    return result


def _remove_edges_of(graph: NGramGraph, edges: NGramGraph) -> None:
    for n, level_e in edges.iter_levels():
        level_g = graph.level_by_size(n)
        if level_g is None:
            continue
        for edge in level_e.edges():
            if not level_g.remove_edge(edge.source, edge.target):
                logger.debug(f"Edge {edge.labels} already removed")


def inverse_intersect(a: NGramGraph, b: NGramGraph) -> NGramGraph:
    """
    Union of ``a`` and ``b`` minus their intersection.

    The union keeps ``a``'s weights and adds ``b``'s other edges.
    """
    union = merge(a.clone(), b, 0.0)
    _remove_edges_of(union, intersect(a, b))
    return union


def intersect_and_delta(a: NGramGraph, b: NGramGraph) -> Tuple[NGramGraph, NGramGraph]:
    """
    Intersection and symmetric difference in one pass.

    The union is seeded from whichever graph has more edges.

    Returns:
        Tuple of (intersection, union minus intersection).
    """
    larger, smaller = (a, b) if a.length() >= b.length() else (b, a)
    union = merge(larger.clone(), smaller, 0.0)
    common = intersect(a, b)
    _remove_edges_of(union, common)
    return common, union


def all_not_in(a: NGramGraph, b: NGramGraph) -> NGramGraph:
    """Copy of ``a`` without the edges whose ordered pair is in ``b``."""
    result = a.clone()
    for _, level_r, level_b in _paired_levels(result, b):
        for edge in level_r.edges():
            if level_b.locate_edge(edge.source, edge.target) is not None:
                if not level_r.remove_edge(edge.source, edge.target):
                    logger.debug(f"Edge {edge.labels} already removed")
    return result


def degrade(a: NGramGraph, b: NGramGraph) -> None:
    """Count one degradation for every edge of ``b`` also present in ``a``."""
    for _, level_a, level_b in _paired_levels(a, b):
        for edge in level_b.edges():
            if level_a.locate_edge(edge.source, edge.target) is not None:
                a.degraded_edges[edge.key] = a.degraded_edges.get(edge.key, 0) + 1


def coexistence_importance(graph: NGramGraph, label: str) -> float:
    """
    Score of a vertex from its heaviest incident edge and neighbour count.

    ``log10((2 * max_w) ** 2.5 / max(1, (neighbours // 2) ** 2))`` using
    the largest incident weight and neighbour count found on any level.
    """
    max_weight = 0.0
    neighbours = 0
    for level in graph.levels:
        if not level.has_vertex(label):
            continue
        edges = level.incident_edges(label)
        neighbours = max(neighbours, len(edges))
        for edge in edges:
            max_weight = max(max_weight, edge.weight)

    if max_weight <= 0:
        return NO_IMPORTANCE
    return math.log10((2 * max_weight) ** 2.5 / max(1.0, float((neighbours // 2) ** 2)))


def prune(graph: NGramGraph, threshold: float) -> int:
    """
    Remove every vertex whose coexistence importance is below ``threshold``.

    Returns:
        Number of vertices removed.
    """
    removed = 0
    for n, level in graph.iter_levels():
        doomed = [
            label for label in level.vertices()
            if coexistence_importance(graph, label) < threshold
        ]
        for label in doomed:
            if level.remove_vertex(label):
                removed += 1
            else:
                logger.debug(f"Vertex {label!r} already removed from level {n}")
    logger.debug(f"Pruned {removed} vertices below importance {threshold}")
    return removed


def merge_graphs(graphs: Sequence[NGramGraph]) -> Optional[NGramGraph]:
    """
    Running-average merge of a sequence of graphs.

    The i-th graph is merged with rate ``1 - i / (i + 1)`` into a clone
    of the first. None for an empty sequence.
    """
    if not graphs:
        return None
    result = graphs[0].clone()
    for index in range(1, len(graphs)):
        rate = 1.0 - index / (index + 1.0)
        merge(result, graphs[index], rate)
    return result


def remove_noise(graphs: Sequence[NGramGraph]) -> List[NGramGraph]:
    """
    Strip the edges common to every graph from each of them.

    The inputs are left untouched.
    """
    if not graphs:
        return []
    common = graphs[0].clone()
    for other in graphs[1:]:
        common = intersect(common, other)
    return [all_not_in(graph, common) for graph in graphs]


def edge_weight_table(graph: NGramGraph) -> Dict[int, Dict[Tuple[str, str], float]]:
    """Per-size map of ordered pair to weight."""
    return {n: level.edge_weights() for n, level in graph.iter_levels()}
