"""Two-graph merge with configurable conflict resolution.

Public API:
    MergeStrategy: How to resolve an identity collision.
    MergeOptions: Strategies, property-merge flags and id prefixes.
    merge_graphs(first, second, options) -> Graph
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .graph.types import Graph, GraphEdge, GraphNode

logger = logging.getLogger(__name__)


class MergeStrategy(Enum):
    """Conflict resolution for nodes/edges present in both graphs."""

    KEEP_FIRST = "keep-first"
    KEEP_SECOND = "keep-second"
    MERGE = "merge"


@dataclass
class MergeOptions:
    """Options for :func:`merge_graphs`.

    Attributes:
        node_strategy: Resolution for colliding node ids.
        edge_strategy: Resolution for colliding edge identities.
        merge_node_properties: Let MERGE union node properties (else no-op).
        merge_edge_properties: Let MERGE union edge properties (else no-op).
        node_prefix: Prepended to every node id of the second graph.
        edge_prefix: Prepended to every explicit edge id of the second graph.
    """

    node_strategy: MergeStrategy | str = MergeStrategy.KEEP_FIRST
    edge_strategy: MergeStrategy | str = MergeStrategy.KEEP_FIRST
    merge_node_properties: bool = False
    merge_edge_properties: bool = False
    node_prefix: str = ""
    edge_prefix: str = ""

    def __post_init__(self):
        if not isinstance(self.node_strategy, MergeStrategy):
            self.node_strategy = MergeStrategy(self.node_strategy)
        if not isinstance(self.edge_strategy, MergeStrategy):
            self.edge_strategy = MergeStrategy(self.edge_strategy)


def _edge_identity(edge: GraphEdge) -> str:
    """Explicit id, else ``source-target-label``."""
    return edge.id or f"{edge.source}-{edge.target}-{edge.label or ''}"


def _merge_nodes(
    first: Graph, second: Graph, options: MergeOptions
) -> tuple[list[GraphNode], dict[str, int]]:
    nodes = [node.clone() for node in first.nodes]
    index: dict[str, int] = {}
    for position, node in enumerate(nodes):
        index.setdefault(node.id, position)

    for node in second.nodes:
        node_id = f"{options.node_prefix}{node.id}"
        existing = index.get(node_id)

        if existing is None:
            index[node_id] = len(nodes)
            nodes.append(node.clone(id=node_id))
        elif options.node_strategy is MergeStrategy.KEEP_SECOND:
            nodes[existing] = node.clone(id=node_id)
        elif options.node_strategy is MergeStrategy.MERGE and options.merge_node_properties:
            current = nodes[existing]
            nodes[existing] = current.clone(properties={**current.properties, **node.properties})

    return nodes, index


def _merge_edges(
    first: Graph, second: Graph, options: MergeOptions, node_ids: set[str]
) -> list[GraphEdge]:
    edges = [edge.clone() for edge in first.edges]
    index: dict[str, int] = {}
    for position, edge in enumerate(edges):
        index.setdefault(_edge_identity(edge), position)

    unresolved = 0
    for edge in second.edges:
        source = f"{options.node_prefix}{edge.source}"
        target = f"{options.node_prefix}{edge.target}"
        if source not in node_ids or target not in node_ids:
            unresolved += 1
            continue

        edge_id = f"{options.edge_prefix}{edge.id}" if edge.id else edge.id
        candidate = edge.clone(id=edge_id, source=source, target=target)
        key = _edge_identity(candidate)
        existing = index.get(key)

        if existing is None:
            index[key] = len(edges)
            edges.append(candidate)
        elif options.edge_strategy is MergeStrategy.KEEP_SECOND:
            edges[existing] = candidate
        elif options.edge_strategy is MergeStrategy.MERGE and options.merge_edge_properties:
            current = edges[existing]
            edges[existing] = current.clone(properties={**current.properties, **edge.properties})

    if unresolved:
        logger.debug("Dropped %d edges from the second graph with unresolved endpoints", unresolved)

    kept = [edge for edge in edges if edge.source in node_ids and edge.target in node_ids]
    if len(kept) < len(edges):
        logger.debug("Dropped %d dangling edges from the first graph", len(edges) - len(kept))
    return kept


def merge_graphs(first: Graph, second: Graph, options: MergeOptions | None = None) -> Graph:
    """Merge two graphs into one.

    All nodes and edges of *first* seed the result. Each node/edge of
    *second* (ids prefixed as configured) is added when its identity is new,
    otherwise the configured strategy decides. Node identity is the id; edge
    identity is the explicit id, else ``source-target-label``. Edges whose
    endpoints are not in the merged node set are dropped.

    Args:
        first: Graph whose entries win under KEEP_FIRST.
        second: Graph merged into *first*.
        options: Merge options (KEEP_FIRST for both by default).

    Returns:
        Merged graph. Metadata carries a synthesized name and description,
        overlaid by the first then the second graph's metadata, plus a
        ``merged_from`` lineage list.
    """
    options = options or MergeOptions()

    nodes, index = _merge_nodes(first, second, options)
    edges = _merge_edges(first, second, options, set(index))

    first_name = (first.metadata or {}).get("name") or "Graph 1"
    second_name = (second.metadata or {}).get("name") or "Graph 2"
    metadata = {
        "name": f"Merged Graph: {first_name} + {second_name}",
        "description": f"Merged from {first_name} and {second_name}",
        **(first.metadata or {}),
        **(second.metadata or {}),
        "merged_from": [first_name, second_name],
    }

    logger.debug("Merged graph has %d nodes and %d edges", len(nodes), len(edges))
    return Graph(nodes=tuple(nodes), edges=tuple(edges), metadata=metadata)


__all__ = ["MergeStrategy", "MergeOptions", "merge_graphs"]
