"""
Depth-first structural encoder.

Walks a graph depth-first with an explicit stack, starting from the
smallest label or a given vertex. For each visited vertex its outgoing
edges, sorted by ``source->target``, are written as ``source->target|``:
edges to already-visited targets first, then edges that lead to new
vertices. Disconnected vertices are explored afterwards in label order.
"""

import logging
from typing import List, Optional, Set

from ngramgraph.core.exceptions import EncodingError
from ngramgraph.encoders.base import GraphEncoder
from ngramgraph.graph.unique_graph import UniqueGraph

logger = logging.getLogger(__name__)

EDGE_SEPARATOR = "|"


class DepthFirstEncoder(GraphEncoder):
    """DFS encoding of a single graph level."""

    def _explore(self, graph: UniqueGraph, start: str, visited: Set[str]) -> str:
        parts: List[str] = []
        stack = [start]
        while stack:
            label = stack.pop()
            if label in visited:
                continue
            visited.add(label)

            forward, backward = self.split_edges(graph, label, visited)
            stack.extend(edge.target for edge in forward)
            parts.extend(edge.labels + EDGE_SEPARATOR for edge in backward + forward)
        return "".join(parts)

    def encode(self, graph: UniqueGraph, start: Optional[str] = None) -> str:
        """
        Encode ``graph``.

        Args:
            graph: Level to encode.
            start: Start vertex; the smallest label by default.

        Returns:
            The encoding; empty for an empty graph.

        Raises:
            EncodingError: If ``start`` is not a vertex of the graph.
        """
        if start is None:
            start = self.choose_start(graph)
            if start is None:
                return ""
        elif not graph.has_vertex(start):
            raise EncodingError(f"Start vertex {start!r} not in graph")

        visited: Set[str] = set()
        encoded = self._explore(graph, start, visited)
        for label in sorted(graph.vertices()):
            if label not in visited:
                encoded += self._explore(graph, label, visited)
        return encoded
