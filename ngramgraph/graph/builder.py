"""
Graph builder for constructing n-gram graphs from text.

Slides a window of length ``n`` over the input, then links every
n-gram occurrence to a bounded history of preceding occurrences
according to a window policy. Repeated co-occurrences accumulate
weight rather than overwrite it.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ngramgraph.core.config import GraphConfig, validate_graph_params
from ngramgraph.core.exceptions import ConfigurationError, GraphConstructionError
from ngramgraph.graph.unique_graph import DEFAULT_CACHE_SIZE, UniqueGraph

logger = logging.getLogger(__name__)


class PolicyKind(Enum):
    """Closed set of window policies."""

    PLAIN = "plain"
    SYMMETRIC = "symmetric"
    GAUSSIAN = "gaussian"


@dataclass(frozen=True)
class WindowPolicy:
    """
    How an n-gram is linked to its preceding neighbours.

    PLAIN links the current n-gram to each of the last ``window``
    n-grams with weight 1.0. SYMMETRIC does the same in both
    directions. GAUSSIAN looks ``3 * window`` n-grams back and weights
    the neighbour at sequential distance ``d`` by
    ``exp(-d^2 / (2 * sigma^2))``; ``sigma`` defaults to the window and
    ``symmetric`` also adds the reverse edge.
    """

    kind: PolicyKind = PolicyKind.PLAIN
    sigma: Optional[float] = None
    symmetric: bool = False

    @classmethod
    def plain(cls) -> "WindowPolicy":
        return cls(PolicyKind.PLAIN)

    @classmethod
    def symmetric_window(cls) -> "WindowPolicy":
        return cls(PolicyKind.SYMMETRIC, symmetric=True)

    @classmethod
    def gaussian(cls, sigma: Optional[float] = None, symmetric: bool = False) -> "WindowPolicy":
        return cls(PolicyKind.GAUSSIAN, sigma=sigma, symmetric=symmetric)

    @classmethod
    def from_name(cls, name: str, sigma: Optional[float] = None) -> "WindowPolicy":
        """
        Build a policy from its configuration name.

        Args:
            name: One of plain, symmetric, gaussian, gaussian_symmetric.
            sigma: Gaussian deviation, ignored by the other policies.

        Raises:
            ConfigurationError: If the name is unknown.
        """
        key = name.lower()
        if key == "plain":
            return cls.plain()
        if key == "symmetric":
            return cls.symmetric_window()
        if key == "gaussian":
            return cls.gaussian(sigma)
        if key == "gaussian_symmetric":
            return cls.gaussian(sigma, symmetric=True)
        raise ConfigurationError(f"Unknown window policy: {name}")

    @property
    def name(self) -> str:
        if self.kind is PolicyKind.GAUSSIAN and self.symmetric:
            return "gaussian_symmetric"
        return self.kind.value

    def horizon(self, window: int) -> int:
        """Number of preceding n-grams considered."""
        if self.kind is PolicyKind.GAUSSIAN:
            return 3 * window
        return window

    def weight(self, distance: int, window: int) -> float:
        """Weight contributed by a neighbour ``distance`` n-grams back."""
        if self.kind is not PolicyKind.GAUSSIAN:
            return 1.0
        sigma = self.sigma if self.sigma is not None else float(window)
        return math.exp(-(distance ** 2) / (2.0 * sigma ** 2))


def add_weight(graph: UniqueGraph, source: str, target: str, weight: float) -> None:
    """
    Add ``weight`` to the edge ``source -> target``, creating it if absent.

    ``add_edge`` never overwrites, so an existing edge is updated via
    ``set_edge_weight``.
    """
    edge = graph.locate_edge(source, target)
    if edge is None:
        graph.add_edge(source, target, weight)
    else:
        graph.set_edge_weight(edge, edge.weight + weight)


class GraphBuilder:
    """
    Builds one UniqueGraph per n-gram size from a string.

    Edges point from the current n-gram to each neighbour preceding it
    within the window.
    """

    def __init__(self, window: int = 3, policy: Optional[WindowPolicy] = None):
        if window < 1:
            raise ConfigurationError(f"Correlation window must be positive, got {window}")
        self.window = window
        self.policy = policy or WindowPolicy.plain()
        if self.policy.sigma is not None and self.policy.sigma <= 0:
            raise ConfigurationError(f"Gaussian sigma must be positive, got {self.policy.sigma}")

    @classmethod
    def from_config(cls, config: GraphConfig) -> "GraphBuilder":
        return cls(config.window, WindowPolicy.from_name(config.policy, config.sigma))

    @staticmethod
    def ngrams(text: str, n: int) -> List[str]:
        """All length-``n`` substrings of ``text``, in order of occurrence."""
        if n < 1:
            raise ConfigurationError(f"N-gram size must be positive, got {n}")
        return [text[i:i + n] for i in range(len(text) - n + 1)]

    def build_level(self, graph: UniqueGraph, text: str, n: int) -> UniqueGraph:
        """
        Populate ``graph`` with the co-occurrence graph of size-``n`` n-grams.

        A text shorter than ``n`` leaves the graph untouched.

        Args:
            graph: Graph to populate.
            text: Source text.
            n: N-gram size.

        Returns:
            The populated graph.

        Raises:
            GraphConstructionError: If ``text`` is not a string.
        """
        if not isinstance(text, str):
            raise GraphConstructionError(f"Expected text, got {type(text).__name__}")
        tokens = self.ngrams(text, n)
        horizon = self.policy.horizon(self.window)
        symmetric = self.policy.kind is PolicyKind.SYMMETRIC or self.policy.symmetric

        for i, token in enumerate(tokens):
            start = max(0, i - horizon)
            if start == i:
                graph.add_vertex(token)
                continue
            for j in range(start, i):
                neighbour = tokens[j]
                weight = self.policy.weight(i - j, self.window)
                add_weight(graph, token, neighbour, weight)
                if symmetric:
                    add_weight(graph, neighbour, token, weight)

        logger.debug(
            f"Built level n={n}: {graph.vertex_count} vertices, {graph.edge_count} edges"
        )
        return graph

    def build(
        self,
        text: str,
        min_size: int,
        max_size: int,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> List[UniqueGraph]:
        """
        Build every level from ``min_size`` to ``max_size`` inclusive.

        Returns:
            One graph per n-gram size, smallest first.

        Raises:
            ConfigurationError: If the size range is invalid.
        """
        validate_graph_params(min_size, max_size, self.window, self.policy.sigma)
        levels = []
        for n in range(min_size, max_size + 1):
            levels.append(self.build_level(UniqueGraph(cache_size=cache_size), text, n))
        return levels
