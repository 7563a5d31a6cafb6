"""
Multi-level n-gram graph.

An NGramGraph holds one UniqueGraph per n-gram size in
``[min_size, max_size]`` together with the text it was built from and a
degradation side-table. Setting the text rebuilds every level.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ngramgraph.core.config import GraphConfig, validate_graph_params
from ngramgraph.core.exceptions import IngestionError
from ngramgraph.graph.builder import GraphBuilder, WindowPolicy
from ngramgraph.graph.unique_graph import DEFAULT_CACHE_SIZE, Edge, EdgeKey, UniqueGraph

logger = logging.getLogger(__name__)


class NGramGraph:
    """
    N-gram graph over a range of n-gram sizes.

    Level ``0`` holds the ``min_size`` n-grams. Every algebra method
    returns a new graph except ``merge`` and ``degrade``, which mutate
    this graph.
    """

    def __init__(
        self,
        text: str = "",
        min_size: int = 3,
        max_size: int = 3,
        window: int = 3,
        policy: Optional[WindowPolicy] = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        policy = policy or WindowPolicy.plain()
        validate_graph_params(min_size, max_size, window, policy.sigma)

        self.min_size = min_size
        self.max_size = max_size
        self.window = window
        self.policy = policy
        self.cache_size = cache_size
        self.degraded_edges: Dict[EdgeKey, int] = {}

        self._builder = GraphBuilder(window, policy)
        self._data_string = ""
        self._levels: List[UniqueGraph] = self._empty_levels()

        if text:
            self.set_data_string(text)

    @classmethod
    def from_config(cls, text: str, config: GraphConfig, cache_size: int = DEFAULT_CACHE_SIZE) -> "NGramGraph":
        """Build a graph with the parameters held in a GraphConfig."""
        return cls(
            text,
            min_size=config.min_size,
            max_size=config.max_size,
            window=config.window,
            policy=WindowPolicy.from_name(config.policy, config.sigma),
            cache_size=cache_size,
        )

    def _empty_levels(self) -> List[UniqueGraph]:
        return [UniqueGraph(cache_size=self.cache_size) for _ in self.sizes]

    def empty_copy(self) -> "NGramGraph":
        """A graph with the same parameters and no content."""
        return NGramGraph(
            min_size=self.min_size,
            max_size=self.max_size,
            window=self.window,
            policy=self.policy,
            cache_size=self.cache_size,
        )

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    @property
    def data_string(self) -> str:
        return self._data_string

    def set_data_string(self, text: str) -> None:
        """Replace the source text, clearing and rebuilding every level."""
        self._data_string = text
        self.degraded_edges = {}
        self._levels = self._empty_levels()
        for n, graph in zip(self.sizes, self._levels):
            self._builder.build_level(graph, text, n)

    def attach_data_string(self, text: str) -> None:
        """Record the source text without rebuilding the levels."""
        self._data_string = text

    def load_data_string_from_file(self, path: Union[str, Path], encoding: str = "utf-8") -> None:
        """
        Read a file, newlines included, and use it as the source text.

        Raises:
            IngestionError: If the file cannot be read.
        """
        try:
            text = Path(path).read_text(encoding=encoding)
        except OSError as e:
            raise IngestionError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e
        self.set_data_string(text)

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    @property
    def sizes(self) -> range:
        return range(self.min_size, self.max_size + 1)

    @property
    def levels(self) -> List[UniqueGraph]:
        return list(self._levels)

    def level(self, index: int) -> UniqueGraph:
        """Level by position; index 0 is the ``min_size`` level."""
        return self._levels[index]

    def level_by_size(self, n: int) -> Optional[UniqueGraph]:
        """Level for n-gram size ``n``, or None outside the range."""
        if n < self.min_size or n > self.max_size:
            return None
        return self._levels[n - self.min_size]

    def set_level(self, n: int, graph: UniqueGraph) -> None:
        if n < self.min_size or n > self.max_size:
            raise IndexError(f"No level for n-gram size {n}")
        self._levels[n - self.min_size] = graph

    def iter_levels(self) -> Iterable[Tuple[int, UniqueGraph]]:
        """Pairs of ``(n, level)``, smallest n first."""
        return zip(self.sizes, self._levels)

    def length(self) -> int:
        """Total number of edges across all levels."""
        return sum(graph.edge_count for graph in self._levels)

    def is_empty(self) -> bool:
        """True when the ``min_size`` level holds no edges."""
        return self._levels[0].is_empty()

    def all_edges(self) -> List[Edge]:
        edges = []
        for graph in self._levels:
            edges.extend(graph.edges())
        return edges

    # ------------------------------------------------------------------
    # Item operations
    # ------------------------------------------------------------------

    def nullify(self) -> None:
        """Set every edge weight on every level to zero."""
        for graph in self._levels:
            for edge in graph.edges():
                graph.set_edge_weight(edge, 0.0)

    def delete_item(self, label: str) -> None:
        """Remove the vertex ``label`` from every level that has it."""
        for n, graph in self.iter_levels():
            if not graph.remove_vertex(label):
                logger.debug(f"Vertex {label!r} not present on level {n}")

    def degradation_degree(self, edge: Union[Edge, EdgeKey]) -> int:
        """How many times ``edge`` matched in a degrade; 0 if never."""
        key = edge.key if isinstance(edge, Edge) else tuple(edge)
        return self.degraded_edges.get(key, 0)

    def clone(self) -> "NGramGraph":
        """Deep copy: new levels, new edges, independent weights."""
        copy = self.empty_copy()
        copy._data_string = self._data_string
        copy._levels = [graph.clone() for graph in self._levels]
        copy.degraded_edges = dict(self.degraded_edges)
        return copy

    def __deepcopy__(self, memo) -> "NGramGraph":
        return self.clone()

    def same_structure(self, other: "NGramGraph") -> bool:
        """True when both graphs cover the same sizes with equal levels."""
        if list(self.sizes) != list(other.sizes):
            return False
        return all(a.same_structure(b) for a, b in zip(self._levels, other._levels))

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------

    def merge(self, other: "NGramGraph", weight_percent: float) -> "NGramGraph":
        from ngramgraph.graph import algebra
        return algebra.merge(self, other, weight_percent)

    def intersect(self, other: "NGramGraph") -> "NGramGraph":
        from ngramgraph.graph import algebra
        return algebra.intersect(self, other)

    def inverse_intersect(self, other: "NGramGraph") -> "NGramGraph":
        from ngramgraph.graph import algebra
        return algebra.inverse_intersect(self, other)

    def intersect_and_delta(self, other: "NGramGraph") -> Tuple["NGramGraph", "NGramGraph"]:
        from ngramgraph.graph import algebra
        return algebra.intersect_and_delta(self, other)

    def all_not_in(self, other: "NGramGraph") -> "NGramGraph":
        from ngramgraph.graph import algebra
        return algebra.all_not_in(self, other)

    def degrade(self, other: "NGramGraph") -> None:
        from ngramgraph.graph import algebra
        algebra.degrade(self, other)

    def prune(self, threshold: float) -> None:
        from ngramgraph.graph import algebra
        algebra.prune(self, threshold)

    def coexistence_importance(self, label: str) -> float:
        from ngramgraph.graph import algebra
        return algebra.coexistence_importance(self, label)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dot(self, size: Optional[int] = None, directed: bool = True) -> str:
        """DOT rendering of one level; the ``max_size`` level by default."""
        from ngramgraph.graph.export import graph_to_dot
        graph = self.level_by_size(self.max_size if size is None else size)
        if graph is None:
            raise IndexError(f"No level for n-gram size {size}")
        return graph_to_dot(graph, directed=directed)

    def to_dict(self) -> Dict[str, Any]:
        """Summary of parameters and level sizes."""
        return {
            "min_size": self.min_size,
            "max_size": self.max_size,
            "window": self.window,
            "policy": self.policy.name,
            "sigma": self.policy.sigma,
            "length": self.length(),
            "levels": {
                str(n): {"vertices": g.vertex_count, "edges": g.edge_count}
                for n, g in self.iter_levels()
            },
        }

    def __repr__(self) -> str:
        return (
            f"NGramGraph(min_size={self.min_size}, max_size={self.max_size}, "
            f"window={self.window}, policy={self.policy.name!r}, edges={self.length()})"
        )


def graphs_from_strings(lines: Iterable[str], **params) -> List[NGramGraph]:
    """Build one NGramGraph per string with shared parameters."""
    return [NGramGraph(line, **params) for line in lines]
