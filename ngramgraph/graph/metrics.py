"""
Structural statistics of a single graph level.

Weight ranges, degree and weight variances, vertex entropy and the
derived quantization codes used as cheap graph fingerprints.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import networkx as nx
import numpy as np

from ngramgraph.encoders.vertex_coder import VertexCoder
from ngramgraph.graph.unique_graph import UniqueGraph

logger = logging.getLogger(__name__)


def _weight_range(weights: List[float]) -> float:
    return max(weights) - min(weights) if weights else 0.0


class GraphMetrics:
    """
    Lazily computed statistics of one UniqueGraph.

    Results are cached per instance; create a new instance after the
    graph changes.
    """

    def __init__(self, graph: UniqueGraph):
        self.graph = graph
        self._ranges: Optional[Dict[str, Tuple[float, float]]] = None
        self._entropies: Dict[str, float] = {}

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------

    def weight_ranges(self) -> Dict[str, Tuple[float, float]]:
        """Per vertex ``(incoming range, outgoing range)`` of edge weights."""
        if self._ranges is None:
            self._ranges = {
                label: (
                    _weight_range([e.weight for e in self.graph.incoming_edges(label)]),
                    _weight_range([e.weight for e in self.graph.outgoing_edges(label)]),
                )
                for label in self.graph.vertices()
            }
        return self._ranges

    def degree_ranges(self, label: str) -> Tuple[float, float]:
        return self.weight_ranges().get(label, (0.0, 0.0))

    # ------------------------------------------------------------------
    # Variances
    # ------------------------------------------------------------------

    def degree_variance(self) -> float:
        """Mean of the in-degree and out-degree total squared deviations."""
        labels = self.graph.vertices()
        if not labels:
            return 0.0
        out_deg = np.array([self.graph.out_degree(v) for v in labels], dtype=float)
        in_deg = np.array([self.graph.in_degree(v) for v in labels], dtype=float)
        out_var = float(np.sum((out_deg - out_deg.mean()) ** 2))
        in_var = float(np.sum((in_deg - in_deg.mean()) ** 2))
        return (out_var + in_var) / 2.0

    def weight_variance(self) -> float:
        """Harmonic combination of the in- and out-weight squared deviations."""
        labels = self.graph.vertices()
        if not labels:
            return 0.0
        out_w = np.array([self.graph.outgoing_weight_sum(v) for v in labels])
        in_w = np.array([self.graph.incoming_weight_sum(v) for v in labels])
        out_var = float(np.sum((out_w - out_w.mean()) ** 2))
        in_var = float(np.sum((in_w - in_w.mean()) ** 2))
        if out_var + in_var == 0.0:
            return 0.0
        return out_var * in_var / (out_var + in_var)

    def variance_ratio(self, label: str) -> float:
        """Outgoing over incoming weight variance of one vertex."""
        outgoing = np.array([e.weight for e in self.graph.outgoing_edges(label)])
        incoming = np.array([e.weight for e in self.graph.incoming_edges(label)])
        out_sum = float(np.sum((outgoing - outgoing.mean()) ** 2)) if outgoing.size else 0.0
        in_sum = float(np.sum((incoming - incoming.mean()) ** 2)) if incoming.size else 0.0
        if in_sum <= 0.0:
            in_sum = 0.1
        return out_sum / in_sum

    def total_variance_ratio(self) -> float:
        return sum(self.variance_ratio(v) for v in self.graph.vertices())

    # ------------------------------------------------------------------
    # Entropy
    # ------------------------------------------------------------------

    def vertex_entropy(self, label: str, weight: float = 1.0) -> float:
        """``(1 - incident weight / total weight) * weight``."""
        share = self._entropies.get(label)
        if share is None:
            total = self.graph.total_edge_weight()
            share = self.graph.weight_sum(label) / total if total else 0.0
            self._entropies[label] = share
        return (1.0 - share) * weight

    def total_vertex_entropy(self) -> float:
        return sum(self.vertex_entropy(v) for v in self.graph.vertices())

    # ------------------------------------------------------------------
    # Orderings and codes
    # ------------------------------------------------------------------

    def ordered_weights(self) -> List[Tuple[str, float]]:
        """``(label, weight sum)`` pairs by ascending weight, then label."""
        pairs = [(label, self.graph.weight_sum(label)) for label in self.graph.vertices()]
        return sorted(pairs, key=lambda pair: (pair[1], pair[0]))

    def quant_value(self, label: str, coder: VertexCoder) -> float:
        """Label code scaled by ``in * out / (in + out)`` of the vertex weight sums."""
        in_sum = self.graph.incoming_weight_sum(label)
        out_sum = self.graph.outgoing_weight_sum(label)
        factor = in_sum * out_sum / (in_sum + out_sum) if in_sum + out_sum else 0.0
        return coder.put_label(label) * factor

    def total_quant_value(self, coder: VertexCoder) -> float:
        return sum(self.quant_value(v, coder) for v in self.graph.vertices())

    def weight_range_code(self, coder: VertexCoder) -> float:
        """Sum over vertices of ``(w + in_range) * (w + out_range)``, ``w`` = entropy + code."""
        total = 0.0
        for label in self.graph.vertices():
            in_range, out_range = self.degree_ranges(label)
            weight = self.vertex_entropy(label) + coder.get_label(label)
            total += (weight + in_range) * (weight + out_range)
        return total

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def get_statistics(self) -> Dict[str, Any]:
        """Summary statistics as a dictionary."""
        nx_graph = self.graph.to_networkx()
        components = nx.number_weakly_connected_components(nx_graph) if nx_graph.number_of_nodes() else 0
        return {
            "vertex_count": self.graph.vertex_count,
            "edge_count": self.graph.edge_count,
            "density": nx.density(nx_graph) if nx_graph.number_of_nodes() > 1 else 0.0,
            "weakly_connected_components": components,
            "total_edge_weight": self.graph.total_edge_weight(),
            "total_normalized_weight": self.graph.total_normalized_weight(),
            "degree_variance": self.degree_variance(),
            "weight_variance": self.weight_variance(),
            "total_vertex_entropy": self.total_vertex_entropy(),
        }
