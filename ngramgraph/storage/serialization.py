"""
JSON serialization of n-gram graphs.

The document holds the construction parameters, the source text,
every level's vertices and weighted edges and the degradation table,
so a loaded graph is structurally identical to the saved one.
"""

import json
import logging
from typing import Any, Dict

from ngramgraph.core.exceptions import StorageError
from ngramgraph.graph.builder import WindowPolicy
from ngramgraph.graph.ngram_graph import NGramGraph
from ngramgraph.graph.unique_graph import UniqueGraph

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def level_to_dict(graph: UniqueGraph) -> Dict[str, Any]:
    return {
        "vertices": graph.vertices(),
        "edges": [[e.source, e.target, e.weight] for e in graph.edges()],
    }


def graph_to_dict(graph: NGramGraph) -> Dict[str, Any]:
    """Convert a graph to a JSON-compatible dictionary."""
    return {
        "format_version": FORMAT_VERSION,
        "min_size": graph.min_size,
        "max_size": graph.max_size,
        "window": graph.window,
        "policy": graph.policy.name,
        "sigma": graph.policy.sigma,
        "data_string": graph.data_string,
        "levels": {str(n): level_to_dict(level) for n, level in graph.iter_levels()},
        "degraded_edges": [[s, t, count] for (s, t), count in graph.degraded_edges.items()],
    }


def graph_from_dict(data: Dict[str, Any]) -> NGramGraph:
    """
    Rebuild a graph from ``graph_to_dict`` output without re-running construction.

    Raises:
        StorageError: If the document is malformed.
    """
    try:
        graph = NGramGraph(
            min_size=data["min_size"],
            max_size=data["max_size"],
            window=data["window"],
            policy=WindowPolicy.from_name(data.get("policy", "plain"), data.get("sigma")),
        )
        graph.attach_data_string(data.get("data_string", ""))
        for size, level_data in data.get("levels", {}).items():
            level = graph.level_by_size(int(size))
            if level is None:
                logger.warning(f"Ignoring level {size} outside range")
                continue
            for label in level_data.get("vertices", []):
                level.add_vertex(label)
            for source, target, weight in level_data.get("edges", []):
                level.add_edge(source, target, weight)
        for source, target, count in data.get("degraded_edges", []):
            graph.degraded_edges[(source, target)] = int(count)
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed graph document: {e}") from e
    return graph


def dumps(graph: NGramGraph) -> bytes:
    """Serialize a graph to UTF-8 JSON bytes."""
    return json.dumps(graph_to_dict(graph)).encode("utf-8")


def loads(blob: bytes) -> NGramGraph:
    """
    Deserialize a graph produced by ``dumps``.

    Raises:
        StorageError: If the blob is not a valid graph document.
    """
    try:
        data = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StorageError(f"Invalid graph blob: {e}") from e
    if not isinstance(data, dict):
        raise StorageError("Invalid graph blob: not a JSON object")
    return graph_from_dict(data)
