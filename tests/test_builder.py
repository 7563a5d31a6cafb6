"""
Unit tests for graph construction and the multi-level n-gram graph.
"""

import math
import tempfile
import unittest
from pathlib import Path

from ngramgraph.core.config import GraphConfig
from ngramgraph.core.exceptions import ConfigurationError, GraphConstructionError, IngestionError
from ngramgraph.graph.builder import GraphBuilder, PolicyKind, WindowPolicy
from ngramgraph.graph.export import graph_to_dot
from ngramgraph.graph.ngram_graph import NGramGraph, graphs_from_strings
from ngramgraph.graph.unique_graph import UniqueGraph


def weights_of(graph: UniqueGraph) -> dict:
    return graph.edge_weights()


class TestWindowPolicy(unittest.TestCase):
    """Tests for window policies."""

    def test_from_name(self):
        """Test building policies from configuration names."""
        for name in ("plain", "symmetric", "gaussian", "gaussian_symmetric"):
            self.assertEqual(WindowPolicy.from_name(name).name, name)

        self.assertEqual(WindowPolicy.from_name("GAUSSIAN", 2.0).sigma, 2.0)

    def test_unknown_name(self):
        """Test that an unknown policy name is rejected."""
        with self.assertRaises(ConfigurationError):
            WindowPolicy.from_name("triangular")

    def test_horizon(self):
        """Test how far back each policy looks."""
        self.assertEqual(WindowPolicy.plain().horizon(3), 3)
        self.assertEqual(WindowPolicy.symmetric_window().horizon(3), 3)
        self.assertEqual(WindowPolicy.gaussian().horizon(3), 9)

    def test_weight(self):
        """Test neighbour weights per policy."""
        self.assertEqual(WindowPolicy.plain().weight(2, 3), 1.0)
        self.assertAlmostEqual(WindowPolicy.gaussian().weight(3, 3), math.exp(-0.5))
        self.assertAlmostEqual(WindowPolicy.gaussian(sigma=1.0).weight(2, 3), math.exp(-2.0))


class TestGraphBuilder(unittest.TestCase):
    """Tests for building single levels."""

    def test_ngrams(self):
        """Test the sliding window over the text."""
        self.assertEqual(GraphBuilder.ngrams("ACTAGT", 3), ["ACT", "CTA", "TAG", "AGT"])
        self.assertEqual(GraphBuilder.ngrams("AC", 3), [])

    def test_plain_window(self):
        """Test that each n-gram links to the preceding ones in the window."""
        graph = GraphBuilder(window=3).build_level(UniqueGraph(), "ACTAGT", 3)

        self.assertEqual(
            weights_of(graph),
            {
                ("CTA", "ACT"): 1.0,
                ("TAG", "ACT"): 1.0,
                ("AGT", "ACT"): 1.0,
                ("TAG", "CTA"): 1.0,
                ("AGT", "CTA"): 1.0,
                ("AGT", "TAG"): 1.0,
            },
        )

    def test_window_bounds_history(self):
        """Test that n-grams beyond the window are not linked."""
        graph = GraphBuilder(window=1).build_level(UniqueGraph(), "ABCD", 1)

        self.assertEqual(sorted(graph.edge_keys()), [("B", "A"), ("C", "B"), ("D", "C")])

    def test_repeated_cooccurrence_accumulates(self):
        """Test that weights add up instead of being replaced."""
        graph = GraphBuilder(window=1).build_level(UniqueGraph(), "AAAA", 1)

        self.assertEqual(weights_of(graph), {("A", "A"): 3.0})

    def test_single_ngram_is_isolated_vertex(self):
        """Test that a text of exactly n characters yields one vertex."""
        graph = GraphBuilder().build_level(UniqueGraph(), "ACT", 3)

        self.assertEqual(graph.vertices(), ["ACT"])
        self.assertEqual(graph.edge_count, 0)

    def test_symmetric_window(self):
        """Test that the symmetric policy adds both directions."""
        builder = GraphBuilder(window=1, policy=WindowPolicy.symmetric_window())
        graph = builder.build_level(UniqueGraph(), "ABC", 1)

        self.assertEqual(
            sorted(graph.edge_keys()),
            [("A", "B"), ("B", "A"), ("B", "C"), ("C", "B")],
        )

    def test_gaussian_window(self):
        """Test distance-decayed weights over the widened horizon."""
        builder = GraphBuilder(window=1, policy=WindowPolicy.gaussian())
        graph = builder.build_level(UniqueGraph(), "ABCD", 1)

        self.assertEqual(graph.edge_count, 6)
        self.assertAlmostEqual(graph.get_edge("D", "C").weight, math.exp(-0.5))
        self.assertAlmostEqual(graph.get_edge("D", "B").weight, math.exp(-2.0))
        self.assertAlmostEqual(graph.get_edge("D", "A").weight, math.exp(-4.5))
        self.assertFalse(graph.has_edge("A", "D"))

    def test_gaussian_symmetric_window(self):
        """Test the symmetric Gaussian variant."""
        policy = WindowPolicy.gaussian(sigma=1.0, symmetric=True)
        graph = GraphBuilder(window=1, policy=policy).build_level(UniqueGraph(), "ABC", 1)

        self.assertEqual(policy.kind, PolicyKind.GAUSSIAN)
        self.assertAlmostEqual(graph.get_edge("A", "C").weight, math.exp(-2.0))
        self.assertAlmostEqual(graph.get_edge("C", "A").weight, math.exp(-2.0))

    def test_invalid_parameters(self):
        """Test parameter validation."""
        with self.assertRaises(ConfigurationError):
            GraphBuilder(window=0)
        with self.assertRaises(ConfigurationError):
            GraphBuilder(policy=WindowPolicy.gaussian(sigma=-1.0))
        with self.assertRaises(ConfigurationError):
            GraphBuilder().build("text", 3, 2)

    def test_non_text_input(self):
        """Test that non-string input is rejected."""
        with self.assertRaises(GraphConstructionError):
            GraphBuilder().build_level(UniqueGraph(), None, 3)

    def test_from_config(self):
        """Test building a builder from configuration."""
        builder = GraphBuilder.from_config(GraphConfig(window=4, policy="gaussian", sigma=2.0))

        self.assertEqual(builder.window, 4)
        self.assertEqual(builder.policy.sigma, 2.0)


class TestNGramGraph(unittest.TestCase):
    """Tests for the multi-level n-gram graph."""

    def test_bigram_and_trigram_levels(self):
        """Test weights of a text with repeated n-grams."""
        graph = NGramGraph("hello hello", min_size=2, max_size=3, window=3)
        bigrams = graph.level(0)
        trigrams = graph.level(1)

        for label in ("he", "el", "ll", "lo", "o ", " h"):
            self.assertTrue(bigrams.has_vertex(label))
        expected_bigram_edges = [
            ("el", "he", 2.0), ("ll", "he", 2.0), ("lo", "he", 2.0),
            ("ll", "el", 2.0), ("lo", "el", 2.0), ("o ", "el", 1.0),
            ("lo", "ll", 2.0), ("o ", "ll", 1.0), (" h", "ll", 1.0),
            ("o ", "lo", 1.0), (" h", "lo", 1.0), ("he", "lo", 1.0),
            (" h", "o ", 1.0), ("he", "o ", 1.0), ("el", "o ", 1.0),
        ]
        for source, target, weight in expected_bigram_edges:
            self.assertEqual(bigrams.get_edge(source, target).weight, weight, f"{source}->{target}")

        for label in ("hel", "ell", "llo", "lo ", "o h", " he"):
            self.assertTrue(trigrams.has_vertex(label))
        expected_trigram_edges = [
            ("ell", "hel", 2.0), ("llo", "hel", 2.0), ("lo ", "hel", 1.0),
            ("llo", "ell", 2.0), ("lo ", "ell", 1.0), ("o h", "ell", 1.0),
            ("lo ", "llo", 1.0), ("o h", "llo", 1.0), (" he", "llo", 1.0),
            ("o h", "lo ", 1.0), (" he", "lo ", 1.0), ("hel", "lo ", 1.0),
            (" he", "o h", 1.0), ("hel", "o h", 1.0), ("ell", "o h", 1.0),
            ("hel", " he", 1.0), ("ell", " he", 1.0), ("llo", " he", 1.0),
        ]
        for source, target, weight in expected_trigram_edges:
            self.assertEqual(trigrams.get_edge(source, target).weight, weight, f"{source}->{target}")

    def test_levels_longer_than_text_are_empty(self):
        """Test that sizes above the text length give empty levels."""
        graph = NGramGraph("AC", min_size=1, max_size=3, window=2)

        self.assertEqual(graph.level_by_size(1).edge_count, 1)
        self.assertEqual(graph.level_by_size(2).vertices(), ["AC"])
        self.assertEqual(graph.level_by_size(3).vertex_count, 0)
        self.assertIsNone(graph.level_by_size(4))

    def test_empty_text(self):
        """Test a graph without text."""
        graph = NGramGraph()

        self.assertTrue(graph.is_empty())
        self.assertEqual(graph.length(), 0)
        self.assertEqual(graph.data_string, "")

    def test_invalid_parameters(self):
        """Test constructor validation."""
        with self.assertRaises(ConfigurationError):
            NGramGraph("text", min_size=0)
        with self.assertRaises(ConfigurationError):
            NGramGraph("text", min_size=3, max_size=2)
        with self.assertRaises(ConfigurationError):
            NGramGraph("text", window=0)

    def test_set_data_string_rebuilds(self):
        """Test that replacing the text replaces every level."""
        graph = NGramGraph("ACTAGT")
        graph.degraded_edges[("CTA", "ACT")] = 2

        graph.set_data_string("GGGG")

        self.assertEqual(graph.data_string, "GGGG")
        self.assertEqual(graph.level(0).edge_keys(), [("GGG", "GGG")])
        self.assertEqual(graph.degraded_edges, {})

    def test_load_data_string_from_file(self):
        """Test reading the text from a file, newlines included."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "input.txt"
            path.write_text("AB\nAB", encoding="utf-8")
            graph = NGramGraph(min_size=1, max_size=1, window=1)

            graph.load_data_string_from_file(path)

        self.assertEqual(graph.data_string, "AB\nAB")
        self.assertTrue(graph.level(0).has_edge("\n", "B"))

    def test_load_missing_file(self):
        """Test reading a file that does not exist."""
        with self.assertRaises(IngestionError):
            NGramGraph().load_data_string_from_file("/nonexistent/input.txt")

    def test_clone_is_independent(self):
        """Test that mutating a clone leaves the original untouched."""
        graph = NGramGraph("ACTAGT", min_size=2, max_size=3)
        clone = graph.clone()

        clone.level(0).set_edge_weight(("CT", "AC"), 7.0)
        clone.delete_item("AGT")
        clone.degraded_edges[("CT", "AC")] = 1

        self.assertEqual(graph.level(0).get_edge("CT", "AC").weight, 1.0)
        self.assertTrue(graph.level(1).has_vertex("AGT"))
        self.assertEqual(graph.degraded_edges, {})
        self.assertFalse(graph.same_structure(clone))
        self.assertTrue(graph.same_structure(graph.clone()))

    def test_nullify(self):
        """Test zeroing every weight."""
        graph = NGramGraph("ACTAGT", min_size=2, max_size=3)
        graph.nullify()

        self.assertTrue(all(edge.weight == 0.0 for edge in graph.all_edges()))
        self.assertEqual(graph.length(), 9 + 6)

    def test_delete_item(self):
        """Test removing a vertex from every level."""
        graph = NGramGraph("ACTAGT", min_size=1, max_size=1)
        graph.delete_item("A")
        graph.delete_item("missing")

        self.assertFalse(graph.level(0).has_vertex("A"))
        self.assertTrue(graph.level(0).has_edge("G", "T"))

    def test_from_config(self):
        """Test building from a GraphConfig."""
        config = GraphConfig(min_size=1, max_size=2, window=2, policy="symmetric")
        graph = NGramGraph.from_config("ABC", config)

        self.assertEqual(list(graph.sizes), [1, 2])
        self.assertTrue(graph.level(0).has_edge("A", "B"))
        self.assertTrue(graph.level(0).has_edge("B", "A"))

    def test_graphs_from_strings(self):
        """Test building one graph per string."""
        graphs = graphs_from_strings(["ACTAGT", "GATTACA"], window=2)

        self.assertEqual([g.data_string for g in graphs], ["ACTAGT", "GATTACA"])
        self.assertEqual(graphs[0].window, 2)

    def test_to_dict(self):
        """Test the graph summary."""
        data = NGramGraph("ACTAGT").to_dict()

        self.assertEqual(data["policy"], "plain")
        self.assertEqual(data["length"], 6)
        self.assertEqual(data["levels"]["3"], {"vertices": 4, "edges": 6})

    def test_to_dot(self):
        """Test DOT rendering of a level."""
        document = NGramGraph("ACTAG").to_dot()

        self.assertTrue(document.startswith("digraph {"))
        self.assertIn('\t"CTA" -> "ACT" [label="1.00"]', document)
        self.assertIn('\t"CTA" [label="CTA"] ', document)
        self.assertTrue(document.endswith("}"))
        self.assertIn('\t"CTA" -- "ACT"', NGramGraph("ACTAG").to_dot(directed=False))
        with self.assertRaises(IndexError):
            NGramGraph("ACTAG").to_dot(size=5)

    def test_to_dot_quotes_labels(self):
        """Test that labels are quoted and kept distinct in DOT output."""
        document = NGramGraph("1a b-c", min_size=3, max_size=3).to_dot()

        self.assertIn('"1a "', document)
        self.assertIn('\t"a b" [label="a b"] ', document)
        self.assertIn('"b-c"', document)
        self.assertNotIn("b_c", document)

        graph = UniqueGraph()
        graph.add_edge("a.b", "a-b", 1.0)
        self.assertIn('\t"a.b" -> "a-b" [label="1.00"]', graph_to_dot(graph))


if __name__ == "__main__":
    unittest.main()
