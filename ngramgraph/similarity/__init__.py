"""
Similarity measures between n-gram graphs.

Provides the multi-level value/containment/size comparator, a sparse
random projection comparator and structural orderings of single levels.
"""

from ngramgraph.similarity.value import GraphSimilarity, NGramGraphComparator, level_importance
from ngramgraph.similarity.projection import Projection, SparseProjectionComparator
from ngramgraph.similarity.ordering import (
    compare_canonical_codes,
    compare_ordered_weights,
    compare_structural,
    structural_similarity,
    edge_structural_similarity,
    weight_range_similarity,
)

__all__ = [
    "GraphSimilarity",
    "NGramGraphComparator",
    "level_importance",
    "Projection",
    "SparseProjectionComparator",
    "compare_canonical_codes",
    "compare_ordered_weights",
    "compare_structural",
    "structural_similarity",
    "edge_structural_similarity",
    "weight_range_similarity",
]
