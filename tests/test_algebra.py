"""
Unit tests for the n-gram graph algebra.
"""

import math
import unittest

from ngramgraph.core.exceptions import AlgebraError
from ngramgraph.graph import algebra
from ngramgraph.graph.ngram_graph import NGramGraph


class TestMerge(unittest.TestCase):
    """Tests for merging graphs."""

    def test_merge_blends_and_inserts(self):
        """Test shared edges move towards the other graph and new ones are added."""
        graph_a = NGramGraph("ACTAGT")
        graph_b = NGramGraph("ACTACTA")

        result = graph_a.merge(graph_b, 0.5)

        self.assertIs(result, graph_a)
        self.assertEqual(graph_a.level(0).get_edge("CTA", "ACT").weight, 1.5)
        self.assertEqual(graph_a.level(0).get_edge("ACT", "TAC").weight, 1.0)
        self.assertEqual(graph_b.level(0).get_edge("CTA", "ACT").weight, 2.0)

    def test_merge_rate_bounds(self):
        """Test the two ends of the merge rate."""
        keep = NGramGraph("ACTAGT").merge(NGramGraph("ACTACTA"), 0.0)
        adopt = NGramGraph("ACTAGT").merge(NGramGraph("ACTACTA"), 1.0)

        self.assertEqual(keep.level(0).get_edge("CTA", "ACT").weight, 1.0)
        self.assertEqual(adopt.level(0).get_edge("CTA", "ACT").weight, 2.0)

    def test_self_merge_is_identity(self):
        """Test that merging a graph into itself changes nothing."""
        graph = NGramGraph("ACTACTA", min_size=2, max_size=3)
        before = graph.clone()

        for rate in (0.0, 0.3, 1.0, 7.0):
            graph.merge(graph, rate)

        self.assertTrue(graph.same_structure(before))

    def test_merge_rate_out_of_range(self):
        """Test that a rate outside [0, 1] is rejected."""
        with self.assertRaises(AlgebraError):
            NGramGraph("ACTAGT").merge(NGramGraph("ACTACTA"), 1.5)

    def test_merge_skips_missing_levels(self):
        """Test that levels absent from the target are never created."""
        graph_a = NGramGraph("ACTAGT", min_size=3, max_size=3)
        graph_b = NGramGraph("ACTAGT", min_size=2, max_size=4)

        graph_a.merge(graph_b, 0.5)

        self.assertEqual(list(graph_a.sizes), [3])
        self.assertEqual(graph_a.length(), 6)

    def test_merge_graphs_running_average(self):
        """Test the running-average class graph."""
        graphs = [NGramGraph("AAAA", 1, 1, 1), NGramGraph("AA", 1, 1, 1), NGramGraph("AAA", 1, 1, 1)]

        merged = algebra.merge_graphs(graphs)

        # 3 -> 3 + (1 - 3) / 2 = 2 -> 2 + (2 - 2) / 3 = 2
        self.assertAlmostEqual(merged.level(0).get_edge("A", "A").weight, 2.0)
        self.assertEqual(graphs[0].level(0).get_edge("A", "A").weight, 3.0)
        self.assertIsNone(algebra.merge_graphs([]))


class TestSetOperations(unittest.TestCase):
    """Tests for intersection and difference operations."""

    def setUp(self):
        self.graph_a = NGramGraph("ACTAGT", min_size=2, max_size=3)
        self.graph_b = NGramGraph("ACTACTA", min_size=2, max_size=3)

    def test_intersect(self):
        """Test that the intersection holds shared pairs with mean weights."""
        common = self.graph_a.intersect(self.graph_b)

        for n, level in common.iter_levels():
            keys_a = set(self.graph_a.level_by_size(n).edge_keys())
            keys_b = set(self.graph_b.level_by_size(n).edge_keys())
            self.assertEqual(set(level.edge_keys()), keys_a & keys_b)
        self.assertEqual(common.level_by_size(3).get_edge("CTA", "ACT").weight, 1.5)

    def test_intersect_leaves_operands_untouched(self):
        """Test that the intersection is a new graph."""
        before_a = self.graph_a.clone()
        before_b = self.graph_b.clone()

        self.graph_a.intersect(self.graph_b)

        self.assertTrue(self.graph_a.same_structure(before_a))
        self.assertTrue(self.graph_b.same_structure(before_b))

    def test_intersect_is_commutative_on_pairs(self):
        """Test that both operand orders give the same pairs."""
        ab = self.graph_a.intersect(self.graph_b)
        ba = self.graph_b.intersect(self.graph_a)

        for (_, level_ab), (_, level_ba) in zip(ab.iter_levels(), ba.iter_levels()):
            self.assertEqual(set(level_ab.edge_keys()), set(level_ba.edge_keys()))

    def test_all_not_in_partitions_edges(self):
        """Test that difference and intersection split the first graph's pairs."""
        rest = self.graph_a.all_not_in(self.graph_b)
        common = self.graph_a.intersect(self.graph_b)

        for n, level_a in self.graph_a.iter_levels():
            rest_keys = set(rest.level_by_size(n).edge_keys())
            common_keys = set(common.level_by_size(n).edge_keys())
            self.assertEqual(rest_keys | common_keys, set(level_a.edge_keys()))
            self.assertEqual(rest_keys & common_keys, set())

    def test_all_not_in_keeps_weights(self):
        """Test that surviving edges keep the first graph's weights."""
        rest = self.graph_a.all_not_in(self.graph_b)

        self.assertEqual(rest.level_by_size(3).get_edge("AGT", "TAG").weight, 1.0)
        self.assertFalse(rest.level_by_size(3).has_edge("CTA", "ACT"))

    def test_inverse_intersect(self):
        """Test that the inverse intersection is the symmetric difference."""
        delta = self.graph_a.inverse_intersect(self.graph_b)

        for n, level in delta.iter_levels():
            keys_a = set(self.graph_a.level_by_size(n).edge_keys())
            keys_b = set(self.graph_b.level_by_size(n).edge_keys())
            self.assertEqual(set(level.edge_keys()), keys_a ^ keys_b)

    def test_intersect_and_delta(self):
        """Test the combined intersection and difference."""
        common, delta = self.graph_a.intersect_and_delta(self.graph_b)

        expected_common = self.graph_a.intersect(self.graph_b)
        expected_delta = self.graph_a.inverse_intersect(self.graph_b)
        for n, level in common.iter_levels():
            self.assertEqual(set(level.edge_keys()), set(expected_common.level_by_size(n).edge_keys()))
        for n, level in delta.iter_levels():
            self.assertEqual(set(level.edge_keys()), set(expected_delta.level_by_size(n).edge_keys()))

    def test_self_intersection(self):
        """Test that a graph intersected with itself keeps all its edges."""
        common = self.graph_a.intersect(self.graph_a)

        self.assertTrue(common.same_structure(self.graph_a))
        self.assertEqual(self.graph_a.all_not_in(self.graph_a).length(), 0)

    def test_remove_noise(self):
        """Test stripping edges common to every graph."""
        graphs = [NGramGraph("ACTAGT"), NGramGraph("ACTACTA"), NGramGraph("CTACTA")]

        cleaned = algebra.remove_noise(graphs)

        self.assertEqual(len(cleaned), 3)
        for graph in cleaned:
            self.assertFalse(graph.level(0).has_edge("CTA", "ACT"))
        self.assertTrue(graphs[0].level(0).has_edge("CTA", "ACT"))
        self.assertEqual(algebra.remove_noise([]), [])


class TestDegradeAndPrune(unittest.TestCase):
    """Tests for degradation and pruning."""

    def test_degrade_counts_shared_edges(self):
        """Test degradation counts accumulate per shared pair."""
        graph_a = NGramGraph("ACTAGT")
        graph_b = NGramGraph("ACTACTA")

        graph_a.degrade(graph_b)
        graph_a.degrade(graph_b)

        self.assertEqual(graph_a.degradation_degree(("CTA", "ACT")), 2)
        self.assertEqual(graph_a.degradation_degree(("AGT", "TAG")), 0)
        self.assertEqual(graph_a.level(0).get_edge("CTA", "ACT").weight, 1.0)
        self.assertEqual(graph_b.degraded_edges, {})

    def test_coexistence_importance(self):
        """Test vertex importance from heaviest edge and neighbour count."""
        graph = NGramGraph("AAAA", min_size=1, max_size=1, window=1)

        # max weight 3, one incident edge (self-loop)
        self.assertAlmostEqual(graph.coexistence_importance("A"), math.log10(6 ** 2.5))
        self.assertEqual(graph.coexistence_importance("Z"), algebra.NO_IMPORTANCE)

    def test_zero_weight_has_no_importance(self):
        """Test that a vertex with only zero weights scores the sentinel."""
        graph = NGramGraph("ACTAGT")
        graph.nullify()

        self.assertEqual(graph.coexistence_importance("ACT"), algebra.NO_IMPORTANCE)

    def test_prune(self):
        """Test removing vertices below an importance threshold."""
        graph = NGramGraph("ACTAGT")
        graph.nullify()
        graph.level(0).set_edge_weight(("AGT", "TAG"), 10.0)

        removed = algebra.prune(graph, 0.0)

        self.assertEqual(removed, 2)
        self.assertEqual(sorted(graph.level(0).vertices()), ["AGT", "TAG"])

    def test_edge_weight_table(self):
        """Test the per-size weight table."""
        table = algebra.edge_weight_table(NGramGraph("ACTAG"))

        self.assertEqual(
            table,
            {3: {("CTA", "ACT"): 1.0, ("TAG", "ACT"): 1.0, ("TAG", "CTA"): 1.0}},
        )


if __name__ == "__main__":
    unittest.main()
