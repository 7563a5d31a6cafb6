"""
Structural encoders for single graph levels.
"""

from ngramgraph.encoders.base import GraphEncoder
from ngramgraph.encoders.canonical import CanonicalCoder, canonical_code
from ngramgraph.encoders.dfs import DepthFirstEncoder
from ngramgraph.encoders.adjacency import AdjacencyEncoder, NGramIndexer, pack_bits
from ngramgraph.encoders.vertex_coder import VertexCoder

__all__ = [
    "GraphEncoder",
    "CanonicalCoder",
    "canonical_code",
    "DepthFirstEncoder",
    "AdjacencyEncoder",
    "NGramIndexer",
    "pack_bits",
    "VertexCoder",
]
