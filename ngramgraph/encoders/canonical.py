"""
Canonical coder.

Encodes a graph as a sequence of lines, one per vertex in ascending
label order. The line of vertex ``v`` lists, for every vertex already
seen (``v`` itself first, then most recently seen first), the weight of
``v -> w`` followed by the weights of ``w -> v``; absent edges are
written ``0``. Identical graphs always produce identical codes.
"""

from collections import deque
from typing import Iterator, List, Optional, Tuple

from ngramgraph.encoders.base import GraphEncoder, format_weight
from ngramgraph.graph.unique_graph import UniqueGraph


def _vertex_parts(graph: UniqueGraph) -> Iterator[Tuple[str, str]]:
    """Yield the (forward, backward) part of each vertex in label order."""
    seen: deque = deque()
    for label in sorted(graph.vertices()):
        seen.appendleft(label)
        forward = [label]
        backward = [label]
        for other in seen:
            out_edge = graph.get_edge(label, other)
            in_edge = graph.get_edge(other, label)
            forward.append(format_weight(out_edge.weight) if out_edge else "0")
            backward.append(format_weight(in_edge.weight) if in_edge else "0")
        yield " ".join(forward) + " ", " ".join(backward) + " "


class CanonicalCoder(GraphEncoder):
    """Quadratic-size deterministic encoding of a single graph level."""

    @staticmethod
    def iter_lines(graph: UniqueGraph) -> Iterator[str]:
        """Lazily produce one code line (forward then backward part) per vertex."""
        for forward, backward in _vertex_parts(graph):
            yield forward + backward

    def lines(self, graph: UniqueGraph) -> List[str]:
        return list(self.iter_lines(graph))

    def encode(self, graph: UniqueGraph, start: Optional[str] = None) -> str:
        """
        Full canonical code: every forward part, then every backward part.

        ``start`` is ignored; the canonical order never depends on it.
        """
        forward: List[str] = []
        backward: List[str] = []
        for fwd, bwd in _vertex_parts(graph):
            forward.append(fwd)
            backward.append(bwd)
        return "".join(forward) + "".join(backward)


def canonical_code(graph: UniqueGraph) -> str:
    return CanonicalCoder().encode(graph)
