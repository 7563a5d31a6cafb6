"""
Unit tests for similarity computation modules.
"""

import math
import unittest

import numpy as np

from ngramgraph.core.config import ProjectionConfig
from ngramgraph.core.exceptions import ProjectionError
from ngramgraph.encoders.vertex_coder import VertexCoder
from ngramgraph.graph.metrics import GraphMetrics
from ngramgraph.graph.ngram_graph import NGramGraph
from ngramgraph.graph.unique_graph import UniqueGraph
from ngramgraph.similarity.ordering import (
    compare_line_sequences,
    compare_ordered_weights,
    compare_structural,
    edge_structural_similarity,
    structural_similarity,
    weight_range_similarity,
)
from ngramgraph.similarity.projection import Projection, SparseProjectionComparator
from ngramgraph.similarity.value import GraphSimilarity, NGramGraphComparator, level_importance

DNA = {"A": 0, "C": 1, "G": 2, "T": 3}


class TestGraphSimilarity(unittest.TestCase):
    """Tests for the similarity result."""

    def test_overall_similarity(self):
        """Test that overall similarity is the product of the components."""
        similarity = GraphSimilarity(0.5, 0.8, 0.25)

        self.assertAlmostEqual(similarity.overall_similarity, 0.1)
        self.assertAlmostEqual(similarity.normalized_value_similarity, 2.0)
        self.assertAlmostEqual(similarity.as_distance(), 10.0)

    def test_zero_similarity(self):
        """Test degenerate results."""
        similarity = GraphSimilarity()

        self.assertEqual(similarity.overall_similarity, 0.0)
        self.assertEqual(similarity.normalized_value_similarity, 0.0)
        self.assertEqual(similarity.as_distance(), math.inf)

    def test_to_dict(self):
        """Test result serialization."""
        data = GraphSimilarity(1.0, 1.0, 0.5).to_dict()

        self.assertEqual(data["size_similarity"], 0.5)
        self.assertEqual(data["overall_similarity"], 0.5)


class TestNGramGraphComparator(unittest.TestCase):
    """Tests for the multi-level comparator."""

    def setUp(self):
        self.comparator = NGramGraphComparator()

    def test_level_importance(self):
        """Test that larger levels weigh more."""
        self.assertEqual(level_importance(3, 3), 1)
        self.assertEqual(level_importance(2, 3), 3)
        self.assertEqual(level_importance(1, 3), 6)
        self.assertEqual(level_importance(3, 2), 0)

    def test_identical_graphs(self):
        """Test that a graph is fully similar to itself."""
        graph = NGramGraph("ACTAGC")

        similarity = self.comparator.similarity(graph, graph)

        self.assertAlmostEqual(similarity.value_similarity, 1.0)
        self.assertAlmostEqual(similarity.containment_similarity, 1.0)
        self.assertAlmostEqual(similarity.size_similarity, 1.0)
        self.assertAlmostEqual(similarity.overall_similarity, 1.0)

    def test_identical_multi_level_graphs(self):
        """Test identity across several levels."""
        graph_a = NGramGraph("hello hello", min_size=1, max_size=4)
        graph_b = NGramGraph("hello hello", min_size=1, max_size=4)

        similarity = self.comparator.similarity(graph_a, graph_b)

        self.assertAlmostEqual(similarity.overall_similarity, 1.0)

    def test_different_graphs(self):
        """Test graphs of equal size but different content."""
        similarity = self.comparator.similarity(NGramGraph("ACTAGC"), NGramGraph("AGTACG"))

        self.assertAlmostEqual(similarity.size_similarity, 1.0)
        self.assertLess(similarity.value_similarity, 1.0)
        self.assertLess(similarity.containment_similarity, 1.0)

    def test_partial_overlap(self):
        """Test the component formulas on a known pair."""
        graph_a = NGramGraph("ACTAGT")
        graph_b = NGramGraph("ACTACTA")

        similarity = self.comparator.similarity(graph_a, graph_b)

        # One shared edge; weights 1 and 2; 6 and 8 edges
        self.assertAlmostEqual(similarity.containment_similarity, 1 / 6)
        self.assertAlmostEqual(similarity.value_similarity, 0.5 / 8)
        self.assertAlmostEqual(similarity.size_similarity, 6 / 8)

    def test_degraded_edges_count_less(self):
        """Test that degradation on both sides lowers both components."""
        graph_a = NGramGraph("ACTAGT")
        graph_b = NGramGraph("ACTACTA")
        for _ in range(2):
            graph_a.degrade(graph_b)
            graph_b.degrade(graph_a)

        similarity = self.comparator.similarity(graph_a, graph_b)

        self.assertAlmostEqual(similarity.containment_similarity, 1 / (6 * 2))
        self.assertAlmostEqual(similarity.value_similarity, 0.5 / (8 * 4))

    def test_zero_weights(self):
        """Test that two zero weights count as equal values."""
        graph_a = NGramGraph("ACTAGC")
        graph_b = NGramGraph("ACTAGC")
        graph_a.nullify()
        graph_b.nullify()

        self.assertAlmostEqual(self.comparator.similarity(graph_a, graph_b).value_similarity, 1.0)

    def test_missing_levels_are_skipped(self):
        """Test comparing graphs that cover different sizes."""
        graph_a = NGramGraph("ACTAGT", min_size=2, max_size=3)
        graph_b = NGramGraph("ACTAGT", min_size=3, max_size=3)

        similarity = self.comparator.similarity(graph_a, graph_b)

        # Only the size-3 level (importance 3 of 4) is compared
        self.assertAlmostEqual(similarity.size_similarity, 3 / 4)

    def test_edgeless_levels_lower_self_similarity(self):
        """Test that levels without edges still count in the normaliser."""
        graph = NGramGraph("ab", min_size=1, max_size=3)

        similarity = self.comparator.similarity(graph, graph)

        # Only the size-1 level (importance 1 of 10) has an edge
        self.assertAlmostEqual(similarity.value_similarity, 0.1)
        self.assertAlmostEqual(similarity.containment_similarity, 0.1)
        self.assertAlmostEqual(similarity.size_similarity, 0.1)

    def test_distance(self):
        """Test the similarity-derived distance."""
        graph = NGramGraph("ACTAGC")

        self.assertAlmostEqual(self.comparator.distance(graph, graph), 1.0)
        self.assertEqual(self.comparator.distance(NGramGraph("AAAA"), NGramGraph("CCCC")), math.inf)


class TestSparseProjection(unittest.TestCase):
    """Tests for sparse random projection comparison."""

    def setUp(self):
        self.graph_a = NGramGraph("ACTAGTCAGT").level(0)
        self.graph_b = NGramGraph("GATTACAGAT").level(0)

    def test_matrix_shape(self):
        """Test the projection matrix dimensions."""
        comparator = SparseProjectionComparator(DNA, 3, 16, random_state=0)

        self.assertEqual(comparator.feature_dim, 64 * 64)
        self.assertEqual(comparator.matrix.shape, (4096, 16))
        self.assertEqual(comparator.sigma, 64.0)
        self.assertEqual(comparator.project(self.graph_a).shape, (16,))

    def test_sign_consistent_distance(self):
        """Test distance and similarity are well defined."""
        comparator = SparseProjectionComparator(DNA, 3, 16, Projection.SIGN_CONSISTENT, random_state=0)

        distance = comparator.distance(self.graph_a, self.graph_b)
        similarity = comparator.similarity(self.graph_a, self.graph_b)

        self.assertGreaterEqual(distance, 0.0)
        self.assertGreaterEqual(similarity, 0.0)
        self.assertFalse(math.isnan(similarity))
        self.assertEqual(comparator.distance(self.graph_a, self.graph_a), 0.0)

    def test_sign_consistent_columns(self):
        """Test that every column carries a single sign."""
        comparator = SparseProjectionComparator(DNA, 2, 32, Projection.SIGN_CONSISTENT, random_state=3)
        matrix = comparator.matrix.tocsc()

        for column in range(matrix.shape[1]):
            values = matrix[:, column].data
            if values.size:
                self.assertTrue(np.all(values == values[0]))

    def test_positive_projection(self):
        """Test that the positive projection has no negative entries."""
        comparator = SparseProjectionComparator(DNA, 3, 16, Projection.POSITIVE, random_state=1)
        projected = comparator.project(self.graph_a)

        self.assertTrue(np.all(comparator.matrix.data > 0))
        self.assertTrue(np.all(projected >= 0))
        self.assertAlmostEqual(
            comparator.similarity(self.graph_a, self.graph_a),
            float(np.count_nonzero(projected)),
        )

    def test_seed_is_reproducible(self):
        """Test that the same seed draws the same matrix."""
        first = SparseProjectionComparator(DNA, 3, 16, random_state=42)
        second = SparseProjectionComparator(DNA, 3, 16, random_state=42)

        np.testing.assert_array_equal(first.project(self.graph_a), second.project(self.graph_a))

    def test_unindexed_edges_are_ignored(self):
        """Test that n-grams outside the alphabet do not contribute."""
        comparator = SparseProjectionComparator(DNA, 3, 16, random_state=0)
        graph = NGramGraph("XYZXYZ").level(0)

        self.assertEqual(comparator.adjacency_pairs(graph), [])
        self.assertEqual(comparator.adjacency_vector(graph).nnz, 0)

    def test_from_config(self):
        """Test building from configuration."""
        config = ProjectionConfig(alphabet="ACGT", rank=2, target_dim=8, projection="positive", random_state=7)
        comparator = SparseProjectionComparator.from_config(config)

        self.assertEqual(comparator.projection, Projection.POSITIVE)
        self.assertEqual(comparator.matrix.shape, (256, 8))

    def test_invalid_dimension(self):
        """Test that a non-positive target dimension is rejected."""
        with self.assertRaises(ProjectionError):
            SparseProjectionComparator(DNA, 3, 0)


class TestOrdering(unittest.TestCase):
    """Tests for structural orderings."""

    def setUp(self):
        self.graph = NGramGraph("ACTAG").level(0)

    def test_line_sequences(self):
        """Test line-by-line comparison."""
        self.assertEqual(compare_line_sequences(iter(["a", "b"]), iter(["a", "b"])), 0)
        self.assertEqual(compare_line_sequences(iter(["a"]), iter(["a", "b"])), -1)
        self.assertEqual(compare_line_sequences(iter(["b"]), iter(["a", "c"])), 1)

    def test_structural_similarity(self):
        """Test normalized weight differences."""
        other = NGramGraph("ACTAGT").level(0)

        self.assertEqual(structural_similarity(self.graph, self.graph), 0.0)
        self.assertEqual(compare_structural(self.graph, self.graph.clone()), 0)
        self.assertEqual(
            compare_structural(self.graph, other),
            -compare_structural(other, self.graph),
        )
        self.assertEqual(edge_structural_similarity(self.graph, self.graph, "CTA", "ACT"), 0.0)

    def test_ordered_weights(self):
        """Test ordering by per-vertex weight sums."""
        self.assertEqual(compare_ordered_weights(self.graph, self.graph.clone()), 0)

        heavier = self.graph.clone()
        heavier.set_edge_weight(("TAG", "CTA"), 5.0)
        self.assertEqual(compare_ordered_weights(self.graph, heavier), -1)

    def test_weight_range_similarity(self):
        """Test weight range differences under one shared vertex coder."""
        graph_a = UniqueGraph()
        graph_a.add_edge("B", "A", 2.0)
        graph_a.add_edge("B", "C", 4.0)
        graph_a.add_edge("C", "A", 3.0)
        graph_b = UniqueGraph()
        graph_b.add_edge("B", "A", 2.0)
        graph_b.add_edge("B", "D", 4.0)
        graph_b.add_edge("D", "A", 3.0)
        graph_b.add_edge("D", "B", 2.0)
        coder = VertexCoder(start=0.5, step=0.05)
        for label in "ABCD":
            coder.put_label(label)

        similarity = weight_range_similarity(graph_a, graph_b, coder)

        expected = GraphMetrics(graph_a).weight_range_code(coder) - GraphMetrics(graph_b).weight_range_code(coder)
        self.assertAlmostEqual(similarity, expected)
        self.assertAlmostEqual(weight_range_similarity(graph_a, graph_a.clone(), coder), 0.0)
        self.assertEqual(len(coder), 4)


class TestGraphMetrics(unittest.TestCase):
    """Tests for structural statistics."""

    def setUp(self):
        self.metrics = GraphMetrics(NGramGraph("ACTAG").level(0))

    def test_variances(self):
        """Test degree and weight variances."""
        self.assertAlmostEqual(self.metrics.degree_variance(), 2.0)
        self.assertAlmostEqual(self.metrics.weight_variance(), 1.0)

    def test_vertex_entropy(self):
        """Test entropy from a vertex's share of the total weight."""
        self.assertAlmostEqual(self.metrics.vertex_entropy("ACT"), 1.0 / 3.0)
        self.assertAlmostEqual(self.metrics.total_vertex_entropy(), 1.0)

    def test_ordered_weights(self):
        """Test vertices sorted by weight sum, then label."""
        self.assertEqual(
            self.metrics.ordered_weights(),
            [("ACT", 2.0), ("CTA", 2.0), ("TAG", 2.0)],
        )

    def test_quant_value(self):
        """Test quantized codes use the shared vertex coder."""
        coder = VertexCoder(start=1.0, step=1.0)

        # CTA: in 1, out 1 -> factor 0.5
        self.assertAlmostEqual(self.metrics.quant_value("CTA", coder), 0.5)
        self.assertAlmostEqual(self.metrics.quant_value("ACT", coder), 0.0)

    def test_statistics(self):
        """Test the summary dictionary."""
        stats = self.metrics.get_statistics()

        self.assertEqual(stats["vertex_count"], 3)
        self.assertEqual(stats["edge_count"], 3)
        self.assertEqual(stats["weakly_connected_components"], 1)
        self.assertAlmostEqual(stats["density"], 0.5)
        self.assertAlmostEqual(stats["total_edge_weight"], 3.0)


if __name__ == "__main__":
    unittest.main()
