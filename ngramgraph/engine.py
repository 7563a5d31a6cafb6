"""
Main engine for the n-gram graph system.

Provides a high-level interface that builds graphs with the configured
parameters and runs comparisons, rankings and persistence on them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ngramgraph.core.config import Config, EngineConfig
from ngramgraph.core.exceptions import ConfigurationError, EncodingError, ProjectionError, SimilarityError
from ngramgraph.encoders.canonical import CanonicalCoder
from ngramgraph.encoders.dfs import DepthFirstEncoder
from ngramgraph.graph import algebra
from ngramgraph.graph.ngram_graph import NGramGraph
from ngramgraph.graph.unique_graph import UniqueGraph
from ngramgraph.similarity.ordering import structural_similarity
from ngramgraph.similarity.projection import SparseProjectionComparator
from ngramgraph.similarity.value import GraphSimilarity, NGramGraphComparator
from ngramgraph.storage.manager import GraphStore

logger = logging.getLogger(__name__)

METRICS = ("overall", "value", "containment", "size", "structural")


@dataclass
class RankedText:
    """One candidate text scored against a query."""

    text: str
    score: float
    similarity: Optional[GraphSimilarity] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {"text": self.text, "score": self.score}
        if self.similarity is not None:
            data["similarity"] = self.similarity.to_dict()
        return data


class NGramGraphEngine:
    """
    Main engine for n-gram graph analysis.

    Builds every graph from one EngineConfig so that graphs produced by
    the same engine are always comparable.
    """

    def __init__(self, config: EngineConfig = None, store: Optional[GraphStore] = None):
        self.config = config or Config.get()
        self.config.validate()
        self.comparator = NGramGraphComparator()
        self._projector: Optional[SparseProjectionComparator] = None
        self._store = store

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def build(self, text: str) -> NGramGraph:
        """Build the n-gram graph of ``text``."""
        return NGramGraph.from_config(text, self.config.graph, cache_size=self.config.cache.max_size)

    def build_many(self, texts: Iterable[str]) -> List[NGramGraph]:
        return [self.build(text) for text in texts]

    def class_graph(self, texts: Iterable[str]) -> NGramGraph:
        """
        Representative graph of a set of texts (running-average merge).

        Raises:
            ConfigurationError: If ``texts`` is empty.
        """
        merged = algebra.merge_graphs(self.build_many(texts))
        if merged is None:
            raise ConfigurationError("Cannot build a class graph from no texts")
        return merged

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare(self, text_a: str, text_b: str) -> GraphSimilarity:
        """Similarity between two texts."""
        return self.comparator.similarity(self.build(text_a), self.build(text_b))

    def compare_graphs(self, a: NGramGraph, b: NGramGraph) -> GraphSimilarity:
        return self.comparator.similarity(a, b)

    def _score(self, candidate: NGramGraph, query: NGramGraph, metric: str) -> RankedText:
        if metric == "structural":
            # Closer total weight scores higher; an identical graph scores 1.0
            difference = structural_similarity(candidate.level(0), query.level(0))
            score = 1.0 / (1.0 + abs(difference))
            return RankedText(candidate.data_string, score)
        similarity = self.comparator.similarity(candidate, query)
        score = similarity.overall_similarity if metric == "overall" else getattr(similarity, f"{metric}_similarity")
        return RankedText(candidate.data_string, score, similarity)

    def rank(self, texts: Iterable[str], query: str, metric: str = "overall") -> List[RankedText]:
        """
        Score every text against ``query``, best first.

        Results scoring below the configured threshold are dropped and
        at most ``top_k`` are returned (0 keeps all).

        Raises:
            SimilarityError: If ``metric`` is unknown.
        """
        if metric not in METRICS:
            raise SimilarityError(f"Unknown metric: {metric}", details={"allowed": list(METRICS)})

        query_graph = self.build(query)
        ranked = [self._score(self.build(text), query_graph, metric) for text in texts]
        threshold = self.config.similarity.similarity_threshold
        ranked = [r for r in ranked if r.score >= threshold]
        ranked.sort(key=lambda r: r.score, reverse=True)

        top_k = self.config.similarity.top_k
        if top_k > 0:
            ranked = ranked[:top_k]
        logger.info(f"Ranked {len(ranked)} texts against query (metric={metric})")
        return ranked

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    @property
    def projector(self) -> SparseProjectionComparator:
        """Projection comparator, drawn on first use and then reused."""
        if self._projector is None:
            self._projector = SparseProjectionComparator.from_config(self.config.projection)
        return self._projector

    def _projection_level(self, graph: NGramGraph) -> UniqueGraph:
        level = graph.level_by_size(self.config.projection.rank)
        if level is None:
            raise ProjectionError(
                f"Graph has no level of size {self.config.projection.rank}",
                details={"sizes": list(graph.sizes)},
            )
        return level

    def projection_distance(self, text_a: str, text_b: str) -> float:
        """L1 distance between the projections of two texts."""
        a = self._projection_level(self.build(text_a))
        b = self._projection_level(self.build(text_b))
        return self.projector.distance(a, b)

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def _encoding_level(self, text: str, size: Optional[int]) -> UniqueGraph:
        graph = self.build(text)
        level = graph.level_by_size(graph.max_size if size is None else size)
        if level is None:
            raise EncodingError(f"No level of size {size}", details={"sizes": list(graph.sizes)})
        return level

    def canonical_code(self, text: str, size: Optional[int] = None) -> str:
        """Canonical code of one level of ``text``; the largest n-gram size by default."""
        return CanonicalCoder().encode(self._encoding_level(text, size))

    def dfs_code(self, text: str, size: Optional[int] = None, start: Optional[str] = None) -> str:
        return DepthFirstEncoder().encode(self._encoding_level(text, size), start)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @property
    def store(self) -> GraphStore:
        if self._store is None:
            self._store = GraphStore.from_config(self.config.storage)
        return self._store

    def save(self, name: str, graph: NGramGraph) -> None:
        self.store.save_graph(name, graph)

    def load(self, name: str) -> NGramGraph:
        return self.store.load_graph(name)


def compare_texts(text_a: str, text_b: str, config: EngineConfig = None) -> GraphSimilarity:
    """
    Convenience function to compare two texts.

    Args:
        text_a: First text.
        text_b: Second text.
        config: Optional configuration.

    Returns:
        GraphSimilarity of the two texts.
    """
    return NGramGraphEngine(config).compare(text_a, text_b)
