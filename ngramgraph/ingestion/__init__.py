"""
Ingestion module for reading line-oriented text input.
"""

from ngramgraph.ingestion.line_loader import LineLoader, graphs_from_lines

__all__ = ["LineLoader", "graphs_from_lines"]
