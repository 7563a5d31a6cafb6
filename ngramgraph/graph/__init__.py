"""
Graph module for n-gram graph representation and construction.
"""

from ngramgraph.graph.unique_graph import Edge, UniqueGraph
from ngramgraph.graph.edge_cache import EdgeLocatorCache
from ngramgraph.graph.builder import GraphBuilder, PolicyKind, WindowPolicy
from ngramgraph.graph.ngram_graph import NGramGraph, graphs_from_strings
from ngramgraph.graph import algebra
from ngramgraph.graph.metrics import GraphMetrics
from ngramgraph.graph.export import graph_to_dot, to_cooccurrence_text

__all__ = [
    "Edge",
    "UniqueGraph",
    "EdgeLocatorCache",
    "GraphBuilder",
    "PolicyKind",
    "WindowPolicy",
    "NGramGraph",
    "graphs_from_strings",
    "algebra",
    "GraphMetrics",
    "graph_to_dot",
    "to_cooccurrence_text",
]
