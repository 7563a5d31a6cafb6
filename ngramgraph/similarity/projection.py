"""
Sparse random projection of graph adjacency.

A graph level over a fixed alphabet is flattened into a sparse
adjacency vector of dimension ``D = (alphabet_size ** rank) ** 2`` and
projected to ``target_dim`` dimensions with an Achlioptas-style sparse
random matrix. Distances between projections approximate distances
between the original adjacency vectors.
"""

import logging
from enum import Enum
from typing import Dict, List, Tuple, Union

import numpy as np
import scipy.sparse as sp
from sklearn.utils import check_random_state
from sklearn.utils.random import sample_without_replacement

from ngramgraph.core.config import ProjectionConfig
from ngramgraph.core.exceptions import ProjectionError
from ngramgraph.encoders.adjacency import NGramIndexer
from ngramgraph.graph.unique_graph import UniqueGraph

logger = logging.getLogger(__name__)


class Projection(Enum):
    """Sign pattern of the projection matrix."""

    # +1 and -1 each with probability 1 / (2 sqrt(D))
    RANDOM = "random"
    # One sign per column, non-zero with probability 1 / sqrt(D)
    SIGN_CONSISTENT = "sign_consistent"
    # +1 with probability 1 / sqrt(D)
    POSITIVE = "positive"


class SparseProjectionComparator:
    """
    Compares graph levels through a shared sparse random projection.

    The projection matrix is drawn once per instance, so every graph
    compared by one instance lands in the same reduced space.
    """

    def __init__(
        self,
        char_index: Dict[str, int],
        rank: int,
        target_dim: int,
        projection: Projection = Projection.RANDOM,
        random_state: Union[None, int, np.random.RandomState] = None,
    ):
        if target_dim < 1:
            raise ProjectionError(f"Target dimension must be positive, got {target_dim}")
        self.indexer = NGramIndexer(char_index, rank)
        self.rank = rank
        self.target_dim = target_dim
        self.projection = Projection(projection)
        self.feature_dim = self.indexer.ngram_count ** 2
        self._rng = check_random_state(random_state)
        self.matrix = self._create_projection_matrix()
        logger.debug(
            f"Projection matrix {self.feature_dim}x{self.target_dim} "
            f"({self.projection.value}), {self.matrix.nnz} non-zeros"
        )

    @classmethod
    def from_config(cls, config: ProjectionConfig) -> "SparseProjectionComparator":
        indexer = NGramIndexer.from_alphabet(config.alphabet, config.rank)
        return cls(
            indexer.char_index,
            config.rank,
            config.target_dim,
            Projection(config.projection),
            config.random_state,
        )

    @property
    def sigma(self) -> float:
        """Square root of the feature dimension, i.e. the n-gram count."""
        return float(self.indexer.ngram_count)

    def _create_projection_matrix(self) -> sp.csc_matrix:
        """Draw the ``feature_dim x target_dim`` projection matrix column by column."""
        density = 1.0 / self.sigma
        indices: List[np.ndarray] = []
        values: List[np.ndarray] = []
        indptr = [0]

        for _ in range(self.target_dim):
            nnz = self._rng.binomial(self.feature_dim, density)
            rows = sample_without_replacement(
                self.feature_dim, nnz, random_state=self._rng
            )
            if self.projection is Projection.RANDOM:
                signs = self._rng.choice([-1.0, 1.0], size=nnz)
            elif self.projection is Projection.SIGN_CONSISTENT:
                sign = 1.0 if self._rng.uniform() > 0.5 else -1.0
                signs = np.full(nnz, sign)
            else:
                signs = np.ones(nnz)
            indices.append(np.sort(rows))
            values.append(signs)
            indptr.append(indptr[-1] + nnz)

        data = np.concatenate(values) if values else np.array([])
        row_index = np.concatenate(indices) if indices else np.array([], dtype=int)
        return sp.csc_matrix(
            (data, row_index, np.array(indptr)),
            shape=(self.feature_dim, self.target_dim),
        )

    # ------------------------------------------------------------------
    # Vectors
    # ------------------------------------------------------------------

    def adjacency_pairs(self, graph: UniqueGraph) -> List[Tuple[int, float]]:
        """``(flat pair index, weight)`` of every indexable edge."""
        pairs = []
        for edge in graph.edges():
            index = self.indexer.pair_index(edge.source, edge.target)
            if index >= 0:
                pairs.append((index, edge.weight))
        return pairs

    def adjacency_vector(self, graph: UniqueGraph) -> sp.csr_matrix:
        """Sparse ``1 x feature_dim`` weighted adjacency row."""
        pairs = self.adjacency_pairs(graph)
        columns = np.array([index for index, _ in pairs], dtype=int)
        weights = np.array([weight for _, weight in pairs], dtype=float)
        rows = np.zeros(len(pairs), dtype=int)
        return sp.csr_matrix((weights, (rows, columns)), shape=(1, self.feature_dim))

    def project(self, graph: UniqueGraph) -> np.ndarray:
        """Dense projected vector of length ``target_dim``."""
        projected = self.adjacency_vector(graph) @ self.matrix
        return np.asarray(projected.todense()).ravel()

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def distance(self, a: UniqueGraph, b: UniqueGraph) -> float:
        """L1 distance between the projections."""
        return float(np.abs(self.project(a) - self.project(b)).sum())

    def similarity(self, a: UniqueGraph, b: UniqueGraph) -> float:
        """
        Sum of per-coordinate min/max ratios of the projections.

        RANDOM skips coordinates where either side is zero,
        SIGN_CONSISTENT compares magnitudes, POSITIVE skips coordinates
        where both sides are zero.
        """
        vec_a = self.project(a)
        vec_b = self.project(b)

        if self.projection is Projection.SIGN_CONSISTENT:
            vec_a = np.abs(vec_a)
            vec_b = np.abs(vec_b)

        low = np.minimum(vec_a, vec_b)
        high = np.maximum(vec_a, vec_b)
        if self.projection is Projection.POSITIVE:
            mask = high != 0.0
        elif self.projection is Projection.SIGN_CONSISTENT:
            mask = low != 0.0
        else:
            mask = (vec_a != 0.0) & (vec_b != 0.0)
        if not np.any(mask):
            return 0.0
        return float(np.sum(low[mask] / high[mask]))
