"""
Edge locator cache.

Caches, per source vertex, a snapshot of its outgoing edges keyed by
target label, so that algebra operations probing many candidate pairs
fetch each vertex's neighbourhood from the graph once. Entries are
evicted least-recently-used by a logical clock.
"""

import heapq
import logging
import weakref
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from ngramgraph.graph.unique_graph import Edge, UniqueGraph

logger = logging.getLogger(__name__)


class EdgeLocatorCache:
    """
    LRU cache of per-vertex outgoing edge maps.

    The cache binds itself to the graph it last answered for together
    with that graph's revision. A lookup against another graph, or
    against a graph mutated without going through ``added_edge``,
    resets the cache before answering. Not safe for concurrent use.
    """

    def __init__(self, max_size: int = 1000):
        if max_size < 1:
            raise ValueError(f"Cache size must be positive, got {max_size}")
        self.max_size = max_size
        self.hits = 0
        self.misses = 0
        self._entries: Dict[str, Dict[str, "Edge"]] = {}
        self._stamps: Dict[str, int] = {}
        self._access: List[Tuple[int, str]] = []
        self._clock = 0
        self._graph_ref: Optional[weakref.ref] = None
        self._revision = -1

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, label: str) -> bool:
        return label in self._entries

    @property
    def success_ratio(self) -> float:
        """Hits over total lookups; 0.0 before the first lookup."""
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def reset_cache(self) -> None:
        """Drop every entry and restart the logical clock."""
        self._entries.clear()
        self._stamps.clear()
        self._access = []
        self._clock = 0
        self._graph_ref = None
        self._revision = -1

    def reset_statistics(self) -> None:
        self.hits = 0
        self.misses = 0

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def _bound_to(self, graph: "UniqueGraph") -> bool:
        return self._graph_ref is not None and self._graph_ref() is graph

    def _sync(self, graph: "UniqueGraph") -> None:
        if self._bound_to(graph) and self._revision == graph.revision:
            return
        if self._entries:
            logger.debug("Edge cache out of date, resetting")
            self.reset_cache()
        self._graph_ref = weakref.ref(graph)
        self._revision = graph.revision

    # ------------------------------------------------------------------
    # Entry bookkeeping
    # ------------------------------------------------------------------

    def _touch(self, label: str) -> None:
        self._clock += 1
        self._stamps[label] = self._clock
        heapq.heappush(self._access, (self._clock, label))
        if len(self._access) > 4 * self.max_size:
            self._access = [(stamp, lbl) for lbl, stamp in self._stamps.items()]
            heapq.heapify(self._access)

    def _evict(self) -> None:
        while self._access and len(self._entries) > self.max_size:
            stamp, label = heapq.heappop(self._access)
            # Skip records refreshed since they were pushed
            if self._stamps.get(label) != stamp:
                continue
            del self._entries[label]
            del self._stamps[label]

    def _store(self, label: str, outgoing: Dict[str, "Edge"]) -> None:
        self._entries[label] = outgoing
        self._touch(label)
        if len(self._entries) > self.max_size:
            self._evict()

    def _outgoing(self, graph: "UniqueGraph", head: str) -> Dict[str, "Edge"]:
        self._sync(graph)
        outgoing = self._entries.get(head)
        if outgoing is None:
            self.misses += 1
            outgoing = {edge.target: edge for edge in graph.outgoing_edges(head)}
            self._store(head, outgoing)
        else:
            self.hits += 1
            self._touch(head)
        return outgoing

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def locate_directed_edge(self, graph: "UniqueGraph", head: str, tail: str) -> Optional["Edge"]:
        """
        Find the edge ``head -> tail`` in ``graph``.

        On a miss for ``head`` all of its outgoing edges are fetched
        once and cached.

        Returns:
            The edge, or None if absent.
        """
        return self._outgoing(graph, head).get(tail)

    def locate_undirected_edge(self, graph: "UniqueGraph", head: str, tail: str) -> Optional["Edge"]:
        """Find ``head -> tail``, falling back to ``tail -> head``."""
        edge = self.locate_directed_edge(graph, head, tail)
        if edge is None:
            edge = self.locate_directed_edge(graph, tail, head)
        return edge

    def outgoing_edges(self, graph: "UniqueGraph", head: str) -> Dict[str, "Edge"]:
        """Copy of the cached target-to-edge map of ``head``."""
        return dict(self._outgoing(graph, head))

    def added_edge(self, edge: "Edge", graph: Optional["UniqueGraph"] = None) -> None:
        """
        Record an edge that was just inserted into the bound graph.

        A cached outgoing map of the edge's source is updated in place;
        uncached sources are left for the next lookup. When ``graph`` is
        given and the cache had kept up with it until this insertion,
        the cache adopts the graph's new revision instead of resetting.
        """
        if graph is not None:
            if not (self._bound_to(graph) and self._revision == graph.revision - 1):
                if self._entries:
                    self.reset_cache()
                return
            self._revision = graph.revision
        outgoing = self._entries.get(edge.source)
        if outgoing is not None:
            outgoing[edge.target] = edge
