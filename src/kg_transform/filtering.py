"""Predicate-based graph filtering.

Public API:
    GraphFilter: Filter criteria (node types, edge types, properties, predicate).
    filter_graph(graph, graph_filter) -> Graph
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from .graph.types import Graph, GraphEdge, GraphNode

logger = logging.getLogger(__name__)

ElementPredicate = Callable[[Union[GraphNode, GraphEdge]], bool]


@dataclass
class GraphFilter:
    """Filter criteria for graph elements.

    Empty or absent criteria are no-ops.

    Attributes:
        node_types: Keep only nodes whose ``type`` is listed.
        edge_types: Keep only edges whose ``label`` is listed.
        properties: Exact-match mapping applied to nodes and edges.
        custom_filter: Predicate called with each node and each edge.
    """

    node_types: list[str] | None = None
    edge_types: list[str] | None = None
    properties: dict[str, Any] | None = None
    custom_filter: ElementPredicate | None = None


def _matches_properties(element: GraphNode | GraphEdge, expected: dict[str, Any]) -> bool:
    """Check that every expected key is present with an equal value."""
    for key, value in expected.items():
        if key not in element.properties or element.properties[key] != value:
            return False
    return True


def filter_graph(graph: Graph, graph_filter: GraphFilter) -> Graph:
    """Filter a graph by node type, edge type, properties and a custom predicate.

    Nodes go through the type, property and custom filters in that order.
    Edges are kept only when both endpoints survived and the edge passes the
    edge-type, property and custom filters.

    Args:
        graph: The input graph.
        graph_filter: Filtering criteria.

    Returns:
        New graph with surviving elements in their original order and the
        input's metadata.
    """
    nodes = list(graph.nodes)

    if graph_filter.node_types:
        allowed = set(graph_filter.node_types)
        nodes = [node for node in nodes if node.type is not None and node.type in allowed]

    if graph_filter.properties:
        nodes = [node for node in nodes if _matches_properties(node, graph_filter.properties)]

    if graph_filter.custom_filter is not None:
        nodes = [node for node in nodes if graph_filter.custom_filter(node)]

    kept_ids = {node.id for node in nodes}
    edge_types = set(graph_filter.edge_types or ())

    edges: list[GraphEdge] = []
    for edge in graph.edges:
        if edge.source not in kept_ids or edge.target not in kept_ids:
            continue
        if edge_types and (edge.label is None or edge.label not in edge_types):
            continue
        if graph_filter.properties and not _matches_properties(edge, graph_filter.properties):
            continue
        if graph_filter.custom_filter is not None and not graph_filter.custom_filter(edge):
            continue
        edges.append(edge.clone())

    logger.debug(
        "Filtered graph: %d/%d nodes, %d/%d edges kept",
        len(nodes), len(graph.nodes), len(edges), len(graph.edges),
    )
    return Graph(
        nodes=tuple(node.clone() for node in nodes),
        edges=tuple(edges),
        metadata=graph.metadata,
    )


__all__ = ["GraphFilter", "filter_graph"]
