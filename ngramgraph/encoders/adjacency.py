"""
Adjacency encodings over a fixed alphabet.

N-grams of a fixed rank over a known alphabet are mapped to integer
indices, which lets a graph level be written as a flat 0/1 adjacency
string of length ``(alphabet_size ** rank) ** 2``.
"""

import logging
from typing import Dict, Optional

import numpy as np

from ngramgraph.core.exceptions import EncodingError
from ngramgraph.encoders.base import GraphEncoder
from ngramgraph.graph.unique_graph import UniqueGraph

logger = logging.getLogger(__name__)

PACK_BITS = 16


class NGramIndexer:
    """
    Maps n-grams of a given rank to ``0 .. alphabet_size ** rank - 1``.

    The character at position ``i`` contributes
    ``alphabet_size ** i * char_index[c]``. N-grams with an unseen
    character, or of another length, map to -1.
    """

    def __init__(self, char_index: Dict[str, int], rank: int):
        if not char_index:
            raise EncodingError("Character index cannot be empty")
        if rank < 1:
            raise EncodingError(f"N-gram rank must be positive, got {rank}")
        self.char_index = dict(char_index)
        self.rank = rank
        self.alphabet_size = len(self.char_index)
        self.ngram_count = self.alphabet_size ** rank

    @classmethod
    def from_alphabet(cls, alphabet: str, rank: int) -> "NGramIndexer":
        """Index characters by their position in ``alphabet``."""
        return cls({char: i for i, char in enumerate(alphabet)}, rank)

    def index(self, ngram: str) -> int:
        if len(ngram) != self.rank:
            return -1
        total = 0
        for i, char in enumerate(ngram):
            position = self.char_index.get(char)
            if position is None:
                return -1
            total += self.alphabet_size ** i * position
        return total

    def pair_index(self, source: str, target: str) -> int:
        """Flat index of an ordered n-gram pair, or -1."""
        src = self.index(source)
        dst = self.index(target)
        if src < 0 or dst < 0:
            return -1
        return src * self.ngram_count + dst


class AdjacencyEncoder(GraphEncoder):
    """0/1 adjacency matrix of one level, flattened row-major."""

    def __init__(self, char_index: Dict[str, int], rank: int):
        self.indexer = NGramIndexer(char_index, rank)

    def adjacency_matrix(self, graph: UniqueGraph) -> np.ndarray:
        size = self.indexer.ngram_count
        matrix = np.zeros(size * size, dtype=np.uint8)
        skipped = 0
        for edge in graph.edges():
            index = self.indexer.pair_index(edge.source, edge.target)
            if index < 0:
                skipped += 1
                continue
            matrix[index] = 1
        if skipped:
            logger.debug(f"Skipped {skipped} edges with unindexed n-grams")
        return matrix

    def encode(self, graph: UniqueGraph, start: Optional[str] = None) -> str:
        """Adjacency string of ``'0'``/``'1'`` characters; ``start`` is ignored."""
        return "".join("1" if bit else "0" for bit in self.adjacency_matrix(graph))

    def encode_packed(self, graph: UniqueGraph) -> str:
        return pack_bits(self.encode(graph))


def pack_bits(bits: str) -> str:
    """Pack a 0/1 string into one character per 16 bits; the tail chunk may be shorter."""
    try:
        return "".join(
            chr(int(bits[i:i + PACK_BITS], 2)) for i in range(0, len(bits), PACK_BITS)
        )
    except ValueError as e:
        raise EncodingError(f"Not a bit string: {e}") from e
