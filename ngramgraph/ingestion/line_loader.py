"""
Line-oriented input.

Turns a text file into an ordered list of stripped lines and builds one
NGramGraph per line.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Union

from ngramgraph.core.exceptions import IngestionError
from ngramgraph.graph.ngram_graph import NGramGraph

logger = logging.getLogger(__name__)


class LineLoader:
    """Reads a file as a sequence of whitespace-stripped lines."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8", skip_blank: bool = False):
        self.path = Path(path)
        self.encoding = encoding
        self.skip_blank = skip_blank

    def iter_lines(self) -> Iterator[str]:
        """
        Lazily yield stripped lines in file order.

        Raises:
            IngestionError: If the file cannot be read.
        """
        try:
            with open(self.path, "r", encoding=self.encoding) as f:
                for line in f:
                    line = line.strip()
                    if self.skip_blank and not line:
                        continue
                    yield line
        except (OSError, UnicodeDecodeError) as e:
            raise IngestionError(f"Cannot read {self.path}: {e}", details={"path": str(self.path)}) from e

    def lines(self) -> List[str]:
        return list(self.iter_lines())


def graphs_from_lines(path: Union[str, Path], skip_blank: bool = False, **params) -> List[NGramGraph]:
    """
    Build one NGramGraph per line of a file.

    Args:
        path: Input file.
        skip_blank: Drop empty lines instead of building empty graphs.
        **params: NGramGraph constructor parameters.

    Returns:
        Graphs in line order.
    """
    graphs = [NGramGraph(line, **params) for line in LineLoader(path, skip_blank=skip_blank).iter_lines()]
    logger.info(f"Built {len(graphs)} graphs from {path}")
    return graphs
