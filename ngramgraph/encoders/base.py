"""
Shared helpers for graph encoders.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Set, Tuple

from ngramgraph.graph.unique_graph import Edge, UniqueGraph


class GraphEncoder(ABC):
    """Turns one graph level into a deterministic string."""

    @abstractmethod
    def encode(self, graph: UniqueGraph, start: Optional[str] = None) -> str:
        """Encode ``graph``, optionally from a given start vertex."""

    @staticmethod
    def choose_start(graph: UniqueGraph) -> Optional[str]:
        """Lexicographically smallest label, or None for an empty graph."""
        labels = graph.vertices()
        return min(labels) if labels else None

    @staticmethod
    def sorted_outgoing(graph: UniqueGraph, label: str) -> List[Edge]:
        """Outgoing edges ordered by their ``source->target`` rendering."""
        return sorted(graph.outgoing_edges(label), key=lambda edge: edge.labels)

    @staticmethod
    def split_edges(graph: UniqueGraph, label: str, visited: Set[str]) -> Tuple[List[Edge], List[Edge]]:
        """Outgoing edges split into (to unvisited, to visited) targets."""
        forward, backward = [], []
        for edge in GraphEncoder.sorted_outgoing(graph, label):
            (backward if edge.target in visited else forward).append(edge)
        return forward, backward


def format_weight(weight: float) -> str:
    """Decimal rendering of a weight as used inside codes (``1.0``, ``2.5``)."""
    return repr(float(weight))
