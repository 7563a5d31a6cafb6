"""
Label-unique weighted directed graph.

Defines the foundational graph type of the engine: vertices are
identified by their label (an n-gram), at most one edge exists per
ordered label pair, and edge weights are mutable in place.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import networkx as nx

from ngramgraph.graph.edge_cache import EdgeLocatorCache

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 1000

EdgeKey = Tuple[str, str]


@dataclass(unsafe_hash=True)
class Edge:
    """
    Directed weighted edge between two labels.

    Identity is the ordered ``(source, target)`` pair; the weight is
    excluded from equality and hashing so it can change without
    breaking set or dict membership.
    """

    source: str
    target: str
    weight: float = field(default=1.0, compare=False)

    @property
    def key(self) -> EdgeKey:
        """Ordered label pair identifying this edge."""
        return (self.source, self.target)

    @property
    def labels(self) -> str:
        """Render as ``source->target``."""
        return f"{self.source}->{self.target}"

    def copy(self) -> "Edge":
        return Edge(self.source, self.target, self.weight)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"source": self.source, "target": self.target, "weight": self.weight}


class UniqueGraph:
    """
    Directed weighted graph with label-unique vertices.

    Labels are interned into an arena; the wrapped NetworkX digraph only
    sees integer vertex ids and carries the ``Edge`` objects as edge
    data. Duplicate inserts are reported through return values, never
    raised. Each mutating method holds the instance lock, but sequences
    of calls are not atomic.
    """

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE):
        self._graph = nx.DiGraph()
        self._labels: List[Optional[str]] = []
        self._index: Dict[str, int] = {}
        self._lock = threading.RLock()
        self._cache_size = cache_size
        self._locator = EdgeLocatorCache(max_size=cache_size)
        self.revision = 0
        self._invalidate()

    # ------------------------------------------------------------------
    # Interning
    # ------------------------------------------------------------------

    def _intern(self, label: str) -> Tuple[int, bool]:
        vid = self._index.get(label)
        if vid is not None:
            return vid, False
        vid = len(self._labels)
        self._labels.append(label)
        self._index[label] = vid
        self._graph.add_node(vid)
        return vid, True

    def _invalidate(self) -> None:
        self._in_weights: Optional[Dict[str, float]] = None
        self._out_weights: Optional[Dict[str, float]] = None
        self._total_weight: Optional[float] = None
        self._total_normalized: Optional[float] = None

    def _mutated(self) -> None:
        self.revision += 1
        self._invalidate()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_vertex(self, label: str) -> bool:
        """
        Insert a vertex if no vertex with this label exists.

        Returns:
            True if the vertex was inserted, False if it already existed.
        """
        with self._lock:
            _, added = self._intern(label)
            if added:
                self._mutated()
            return added

    def add_edge(self, source: str, target: str, weight: float = 1.0) -> Optional[Edge]:
        """
        Insert a directed edge, adding missing vertices.

        An existing ordered pair is left untouched: its weight is NOT
        overwritten. Callers that need to update must use
        ``set_edge_weight``.

        Returns:
            The new Edge, or None if the pair already existed.
        """
        with self._lock:
            src_id, _ = self._intern(source)
            dst_id, _ = self._intern(target)
            if self._graph.has_edge(src_id, dst_id):
                return None
            edge = Edge(source, target, float(weight))
            self._graph.add_edge(src_id, dst_id, edge=edge)
            self._mutated()
            self._locator.added_edge(edge, self)
            return edge

    def set_edge_weight(self, edge: Union[Edge, EdgeKey], weight: float) -> bool:
        """
        Set the weight of an existing edge in place.

        Args:
            edge: The edge, or its ``(source, target)`` pair.
            weight: New weight.

        Returns:
            True if the edge exists and was updated.
        """
        source, target = edge.key if isinstance(edge, Edge) else edge
        with self._lock:
            stored = self.get_edge(source, target)
            if stored is None:
                return False
            stored.weight = float(weight)
            if isinstance(edge, Edge) and edge is not stored:
                edge.weight = stored.weight
            self._invalidate()
            return True

    def remove_edge(self, source: str, target: str) -> bool:
        """Remove an edge. Returns False if it was not present."""
        with self._lock:
            src_id = self._index.get(source)
            dst_id = self._index.get(target)
            if src_id is None or dst_id is None or not self._graph.has_edge(src_id, dst_id):
                return False
            self._graph.remove_edge(src_id, dst_id)
            self._mutated()
            return True

    def remove_vertex(self, label: str) -> bool:
        """Remove a vertex and every incident edge. Returns False on miss."""
        with self._lock:
            vid = self._index.pop(label, None)
            if vid is None:
                return False
            self._graph.remove_node(vid)
            self._labels[vid] = None
            self._mutated()
            return True

    def clear(self) -> None:
        """Remove every vertex and edge."""
        with self._lock:
            self._graph.clear()
            self._labels = []
            self._index = {}
            self._mutated()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def locate_vertex(self, label: str) -> Optional[str]:
        """Return the stored label, or None if absent."""
        vid = self._index.get(label)
        return None if vid is None else self._labels[vid]

    def has_vertex(self, label: str) -> bool:
        return label in self._index

    def get_edge(self, source: str, target: str) -> Optional[Edge]:
        """Return the edge for an ordered pair, or None if absent."""
        src_id = self._index.get(source)
        dst_id = self._index.get(target)
        if src_id is None or dst_id is None:
            return None
        data = self._graph.get_edge_data(src_id, dst_id)
        return None if data is None else data["edge"]

    def has_edge(self, source: str, target: str) -> bool:
        return self.get_edge(source, target) is not None

    def locate_edge(self, source: str, target: str) -> Optional[Edge]:
        """Look an edge up through the graph's edge locator cache."""
        return self._locator.locate_directed_edge(self, source, target)

    @property
    def locator(self) -> EdgeLocatorCache:
        """Edge locator cache owned by this graph."""
        return self._locator

    def vertices(self) -> List[str]:
        """All vertex labels, in insertion order."""
        return [self._labels[vid] for vid in self._graph.nodes]

    def edges(self) -> List[Edge]:
        """All edges, in insertion order."""
        return [data["edge"] for _, _, data in self._graph.edges(data=True)]

    def edge_keys(self) -> List[EdgeKey]:
        return [edge.key for edge in self.edges()]

    def edge_weights(self) -> Dict[EdgeKey, float]:
        """Map of ordered pair to weight."""
        return {edge.key: edge.weight for edge in self.edges()}

    def outgoing_edges(self, label: str) -> List[Edge]:
        vid = self._index.get(label)
        if vid is None:
            return []
        return [data["edge"] for _, _, data in self._graph.out_edges(vid, data=True)]

    def incoming_edges(self, label: str) -> List[Edge]:
        vid = self._index.get(label)
        if vid is None:
            return []
        return [data["edge"] for _, _, data in self._graph.in_edges(vid, data=True)]

    def incident_edges(self, label: str) -> List[Edge]:
        """Outgoing and incoming edges; a self-loop is listed once."""
        outgoing = self.outgoing_edges(label)
        incoming = [e for e in self.incoming_edges(label) if e.source != e.target]
        return outgoing + incoming

    def successors(self, label: str) -> List[str]:
        return [edge.target for edge in self.outgoing_edges(label)]

    def predecessors(self, label: str) -> List[str]:
        return [edge.source for edge in self.incoming_edges(label)]

    def out_degree(self, label: str) -> int:
        vid = self._index.get(label)
        return 0 if vid is None else self._graph.out_degree(vid)

    def in_degree(self, label: str) -> int:
        vid = self._index.get(label)
        return 0 if vid is None else self._graph.in_degree(vid)

    @property
    def vertex_count(self) -> int:
        """Number of vertices in the graph."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Number of edges in the graph."""
        return self._graph.number_of_edges()

    def is_empty(self) -> bool:
        """True when the graph holds no edges."""
        return self._graph.number_of_edges() == 0

    def __contains__(self, item) -> bool:
        if isinstance(item, Edge):
            return self.has_edge(item.source, item.target)
        if isinstance(item, tuple):
            return self.has_edge(*item)
        return self.has_vertex(item)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.edges())

    def __repr__(self) -> str:
        return f"UniqueGraph(vertices={self.vertex_count}, edges={self.edge_count})"

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _weight_tables(self) -> Tuple[Dict[str, float], Dict[str, float]]:
        if self._in_weights is None or self._out_weights is None:
            incoming: Dict[str, float] = {}
            outgoing: Dict[str, float] = {}
            for edge in self.edges():
                outgoing[edge.source] = outgoing.get(edge.source, 0.0) + edge.weight
                incoming[edge.target] = incoming.get(edge.target, 0.0) + edge.weight
            self._in_weights = incoming
            self._out_weights = outgoing
        return self._in_weights, self._out_weights

    def incoming_weight_sum(self, label: str) -> float:
        """Sum of weights of the edges ending at ``label``."""
        return self._weight_tables()[0].get(label, 0.0)

    def outgoing_weight_sum(self, label: str) -> float:
        """Sum of weights of the edges leaving ``label``."""
        return self._weight_tables()[1].get(label, 0.0)

    def weight_sum(self, label: str) -> float:
        """Sum of incoming and outgoing weights of ``label``."""
        return self.incoming_weight_sum(label) + self.outgoing_weight_sum(label)

    def total_edge_weight(self) -> float:
        if self._total_weight is None:
            self._total_weight = sum(edge.weight for edge in self.edges())
        return self._total_weight

    def normalized_edge_weight(self, source: str, target: str) -> float:
        """
        Weight of an edge relative to its endpoints.

        ``kOut * kIn / (kOut + kIn)`` where ``kOut`` is the weight over
        the source's outgoing weight sum and ``kIn`` the weight over the
        target's incoming weight sum. Absent edges score 0.
        """
        edge = self.get_edge(source, target)
        if edge is None:
            return 0.0
        out_sum = self.outgoing_weight_sum(source)
        in_sum = self.incoming_weight_sum(target)
        if out_sum == 0.0 or in_sum == 0.0:
            return 0.0
        k_out = edge.weight / out_sum
        k_in = edge.weight / in_sum
        if k_out + k_in == 0.0:
            return 0.0
        return k_out * k_in / (k_out + k_in)

    def total_normalized_weight(self) -> float:
        if self._total_normalized is None:
            self._total_normalized = sum(
                self.normalized_edge_weight(edge.source, edge.target) for edge in self.edges()
            )
        return self._total_normalized

    def degree_ratio(self, label: str) -> float:
        """Incoming over outgoing weight; a near-zero outgoing sum counts as 0.1."""
        out_sum = self.outgoing_weight_sum(label)
        if out_sum < 1e-6:
            out_sum = 0.1
        return self.incoming_weight_sum(label) / out_sum

    def degree_ratio_sum(self) -> float:
        return sum(self.degree_ratio(label) for label in self.vertices())

    # ------------------------------------------------------------------
    # Copying and export
    # ------------------------------------------------------------------

    def clone(self) -> "UniqueGraph":
        """Deep copy with new Edge instances and independent weights."""
        with self._lock:
            copy = UniqueGraph(cache_size=self._cache_size)
            for label in self.vertices():
                copy._intern(label)
            for edge in self.edges():
                copy.add_edge(edge.source, edge.target, edge.weight)
            return copy

    def __deepcopy__(self, memo) -> "UniqueGraph":
        return self.clone()

    def same_structure(self, other: "UniqueGraph") -> bool:
        """True when both graphs have the same vertices, edges and weights."""
        return (
            set(self.vertices()) == set(other.vertices())
            and self.edge_weights() == other.edge_weights()
        )

    def to_networkx(self) -> nx.DiGraph:
        """Label-keyed NetworkX copy with ``weight`` edge attributes."""
        graph = nx.DiGraph()
        graph.add_nodes_from(self.vertices())
        for edge in self.edges():
            graph.add_edge(edge.source, edge.target, weight=edge.weight)
        return graph
