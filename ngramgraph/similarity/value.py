"""
Multi-level value, containment and size similarity.

Compares two n-gram graphs level by level. Larger n-gram levels weigh
more: level ``l`` has importance ``sum_{k=min}^{l} (k - min + 1)``.
Edges that were degraded in earlier comparisons contribute less.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict

from ngramgraph.graph.ngram_graph import NGramGraph

logger = logging.getLogger(__name__)


@dataclass
class GraphSimilarity:
    """Result of comparing two n-gram graphs."""

    value_similarity: float = 0.0
    containment_similarity: float = 0.0
    size_similarity: float = 0.0

    @property
    def overall_similarity(self) -> float:
        """Product of the three component similarities."""
        return self.value_similarity * self.containment_similarity * self.size_similarity

    @property
    def normalized_value_similarity(self) -> float:
        """Value similarity with the size effect factored out."""
        if self.size_similarity == 0.0:
            return 0.0
        return self.value_similarity / self.size_similarity

    def as_distance(self) -> float:
        """``1 / overall``, or infinity when the graphs share nothing."""
        overall = self.overall_similarity
        return math.inf if overall == 0.0 else 1.0 / overall

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "value_similarity": self.value_similarity,
            "containment_similarity": self.containment_similarity,
            "size_similarity": self.size_similarity,
            "overall_similarity": self.overall_similarity,
        }


def level_importance(min_size: int, n: int) -> int:
    """``sum_{k=min_size}^{n} sum_{j=min_size}^{k} 1``."""
    m = n - min_size + 1
    return m * (m + 1) // 2 if m > 0 else 0


class NGramGraphComparator:
    """
    Computes GraphSimilarity between two NGramGraph instances.

    Levels of the first graph missing from the second are skipped but
    still count towards the overall importance. Levels without edges
    contribute nothing yet also count, so a short text compared with
    itself can score below 1.0.
    """

    def similarity(self, a: NGramGraph, b: NGramGraph) -> GraphSimilarity:
        """
        Compare two graphs.

        Args:
            a: First graph; its levels drive the comparison.
            b: Second graph.

        Returns:
            GraphSimilarity with importance-weighted components.
        """
        result = GraphSimilarity()
        overall_importance = sum(level_importance(a.min_size, n) for n in a.sizes)
        if overall_importance == 0:
            return result

        for n, level_a in a.iter_levels():
            level_b = b.level_by_size(n)
            if level_b is None:
                logger.debug(f"Level n={n} missing from second graph, skipped")
                continue

            edges_a = level_a.edge_count
            edges_b = level_b.edge_count
            min_edges = min(edges_a, edges_b)
            max_edges = max(edges_a, edges_b)

            # Iterate the level with fewer edges
            small, large = (level_a, level_b) if edges_a <= edges_b else (level_b, level_a)

            value = 0.0
            containment = 0.0
            for edge in small.edges():
                found = large.locate_edge(edge.source, edge.target)
                if found is None:
                    continue
                degraded_a = a.degradation_degree(edge)
                degraded_b = b.degradation_degree(found)

                containment += 1.0 / (min_edges * max(1.0, min(degraded_a, degraded_b)))

                w_small, w_large = edge.weight, found.weight
                high = max(w_small, w_large)
                ratio = min(w_small, w_large) / high if high != 0.0 else 1.0
                value += ratio / (max_edges * max(1.0, degraded_a + degraded_b))

            size = min_edges / max(1.0, float(max_edges))

            weight = level_importance(a.min_size, n) / overall_importance
            result.value_similarity += value * weight
            result.containment_similarity += containment * weight
            result.size_similarity += size * weight

        return result

    def distance(self, a: NGramGraph, b: NGramGraph) -> float:
        return self.similarity(a, b).as_distance()
