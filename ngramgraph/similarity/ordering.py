"""
Orderings and structural differences between single graph levels.

Three-way comparisons (-1, 0, 1) usable as sort keys through
``functools.cmp_to_key``, plus normalized-weight differences.
"""

from itertools import zip_longest
from typing import Iterator

from ngramgraph.encoders.canonical import CanonicalCoder
from ngramgraph.encoders.vertex_coder import VertexCoder
from ngramgraph.graph.metrics import GraphMetrics
from ngramgraph.graph.unique_graph import UniqueGraph

_MISSING = object()


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_line_sequences(lines_a: Iterator[str], lines_b: Iterator[str]) -> int:
    """
    Lexicographic comparison of two line sequences, line by line.

    The sequence exhausted first is the smaller one.
    """
    for line_a, line_b in zip_longest(lines_a, lines_b, fillvalue=_MISSING):
        if line_a is _MISSING:
            return -1
        if line_b is _MISSING:
            return 1
        if line_a != line_b:
            return -1 if line_a < line_b else 1
    return 0


def compare_canonical_codes(a: UniqueGraph, b: UniqueGraph) -> int:
    """Order two levels by their lazily produced canonical code lines."""
    return compare_line_sequences(CanonicalCoder.iter_lines(a), CanonicalCoder.iter_lines(b))


def compare_ordered_weights(a: UniqueGraph, b: UniqueGraph) -> int:
    """
    Order two levels by their ``(label, weight sum)`` sequences.

    Pairs are walked in ascending weight order. Equal labels compare by
    weight; different labels compare by their first character. A level
    with pairs left over orders first.
    """
    pairs_a = GraphMetrics(a).ordered_weights()
    pairs_b = GraphMetrics(b).ordered_weights()
    for pair_a, pair_b in zip_longest(pairs_a, pairs_b, fillvalue=_MISSING):
        if pair_b is _MISSING:
            return -1
        if pair_a is _MISSING:
            return 1
        label_a, weight_a = pair_a
        label_b, weight_b = pair_b
        if label_a == label_b:
            if weight_a != weight_b:
                return -1 if weight_a < weight_b else 1
            continue
        first_a, first_b = label_a[:1], label_b[:1]
        if first_a != first_b:
            return -1 if first_a < first_b else 1
        return 0
    return 0


def structural_similarity(a: UniqueGraph, b: UniqueGraph) -> float:
    """Difference of the total normalized edge weights of two levels."""
    return a.total_normalized_weight() - b.total_normalized_weight()


def edge_structural_similarity(a: UniqueGraph, b: UniqueGraph, source: str, target: str) -> float:
    """Difference of the normalized weight of one edge in two levels."""
    return a.normalized_edge_weight(source, target) - b.normalized_edge_weight(source, target)


def compare_structural(a: UniqueGraph, b: UniqueGraph) -> int:
    """Sign of ``structural_similarity(a, b)``."""
    return _sign(structural_similarity(a, b))


def weight_range_similarity(a: UniqueGraph, b: UniqueGraph, vertex_coder: VertexCoder) -> float:
    """
    Difference of the weight range codes of two levels.

    Args:
        a: First level.
        b: Second level.
        vertex_coder: Coder shared by both levels so equal labels get equal codes.

    Returns:
        ``weight_range_code(a) - weight_range_code(b)``; 0.0 for identical levels.
    """
    return GraphMetrics(a).weight_range_code(vertex_coder) - GraphMetrics(b).weight_range_code(vertex_coder)
