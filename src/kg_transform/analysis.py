"""Aggregate structural report for a graph."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any

from .graph.types import Graph
from .metrics import in_degrees, is_connected, out_degrees

# Length of the top in/out-degree lists.
TOP_DEGREE_COUNT = 5


@dataclass(frozen=True)
class DegreeEntry:
    """One row of a top-degree list."""

    id: str
    label: str
    degree: int


@dataclass
class GraphAnalysis:
    """Structural metrics of a graph.

    Attributes:
        node_count: Number of nodes.
        edge_count: Number of edges.
        node_types: Histogram of node ``type`` ("unknown" when absent).
        edge_types: Histogram of edge ``label`` ("unlabeled" when absent).
        top_in_degree_nodes: Highest in-degree nodes, descending.
        top_out_degree_nodes: Highest out-degree nodes, descending.
        density: edge_count / (n * (n - 1)), 0 when n <= 1.
        average_degree: Sum of in-degrees / n, 0 for an empty graph.
        is_connected: Whether the graph is connected ignoring direction.
    """

    node_count: int = 0
    edge_count: int = 0
    node_types: dict[str, int] = field(default_factory=dict)
    edge_types: dict[str, int] = field(default_factory=dict)
    top_in_degree_nodes: list[DegreeEntry] = field(default_factory=list)
    top_out_degree_nodes: list[DegreeEntry] = field(default_factory=list)
    density: float = 0.0
    average_degree: float = 0.0
    is_connected: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert the report to a freshly allocated dictionary."""
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "node_types": dict(self.node_types),
            "edge_types": dict(self.edge_types),
            "top_in_degree_nodes": [asdict(entry) for entry in self.top_in_degree_nodes],
            "top_out_degree_nodes": [asdict(entry) for entry in self.top_out_degree_nodes],
            "density": self.density,
            "average_degree": self.average_degree,
            "is_connected": self.is_connected,
        }


def _top_entries(graph: Graph, degree: dict[str, int]) -> list[DegreeEntry]:
    # sorted() is stable, so ties keep node order
    ranked = sorted(degree.items(), key=lambda item: item[1], reverse=True)
    labels = {node.id: node.label or node.id for node in graph.nodes}
    return [
        DegreeEntry(id=node_id, label=labels.get(node_id, node_id), degree=value)
        for node_id, value in ranked[:TOP_DEGREE_COUNT]
    ]


def analyze_graph(graph: Graph) -> GraphAnalysis:
    """Compute counts, type histograms, top-degree nodes, density and connectivity.

    The average degree sums in-degrees only, so it equals
    ``edge_count / node_count``.

    Args:
        graph: The graph to analyze.

    Returns:
        GraphAnalysis; zeroed metrics for an empty graph.
    """
    node_count = len(graph.nodes)
    edge_count = len(graph.edges)

    node_types = Counter(node.type or "unknown" for node in graph.nodes)
    edge_types = Counter(edge.label or "unlabeled" for edge in graph.edges)

    incoming = in_degrees(graph)
    outgoing = out_degrees(graph)

    max_edges = node_count * (node_count - 1)
    density = edge_count / max_edges if max_edges > 0 else 0.0
    average_degree = sum(incoming.values()) / node_count if node_count else 0.0

    return GraphAnalysis(
        node_count=node_count,
        edge_count=edge_count,
        node_types=dict(node_types),
        edge_types=dict(edge_types),
        top_in_degree_nodes=_top_entries(graph, incoming),
        top_out_degree_nodes=_top_entries(graph, outgoing),
        density=density,
        average_degree=average_degree,
        is_connected=is_connected(graph),
    )


__all__ = ["TOP_DEGREE_COUNT", "DegreeEntry", "GraphAnalysis", "analyze_graph"]
