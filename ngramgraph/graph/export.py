"""
Text exports of n-gram graphs for external tooling.

Neither format is meant to be read back.
"""

import re
from typing import Dict, Optional

from ngramgraph.graph.ngram_graph import NGramGraph
from ngramgraph.graph.unique_graph import Edge, UniqueGraph

_DOT_ESCAPES = str.maketrans({"\\": "\\\\", "\"": "\\\"", "\n": "\\n"})
_SPACES = re.compile(r"\s+")


def dot_label(label: str) -> str:
    """Quoted DOT identifier for ``label``; quotes, backslashes and newlines are escaped."""
    return f'"{label.translate(_DOT_ESCAPES)}"'


def graph_to_dot(graph: UniqueGraph, directed: bool = True) -> str:
    """
    Render one graph level in Graphviz DOT syntax.

    Args:
        graph: Level to render.
        directed: Emit a ``digraph`` with ``->`` connectors, otherwise
            a ``graph`` with ``--``.

    Returns:
        The DOT document.
    """
    lines = ["digraph {" if directed else "graph {"]
    connector = "->" if directed else "--"

    for edge in graph.edges():
        source = dot_label(edge.source)
        target = dot_label(edge.target)
        weight = _SPACES.sub(" ", f"{edge.weight:4.2f}")
        lines.append(f'\t{source} {connector} {target} [label="{weight}"]')
        lines.append(f"\t{source} [label={source}] ")

    lines.append("}")
    return "\n".join(lines)


def to_cooccurrence_text(graph: NGramGraph, cooccurrence_map: Optional[Dict[str, str]] = None) -> str:
    """
    Replace each edge with a numeric id repeated ``int(weight)`` times.

    Ids are stable across calls that share ``cooccurrence_map``; new
    edges get the next free id.
    """
    if cooccurrence_map is None:
        cooccurrence_map = {}
    parts = []
    for level in graph.levels:
        for edge in level.edges():
            key = edge.labels
            if key not in cooccurrence_map:
                cooccurrence_map[key] = str(len(cooccurrence_map) + 1)
            parts.extend([cooccurrence_map[key]] * int(edge.weight))
    return "".join(f"{part} " for part in parts)


def edge_summary(edge: Edge) -> str:
    return f"{edge.labels} ({edge.weight:.2f})"
