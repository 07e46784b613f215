"""Root-seeded subgraph extraction and general graph traversal.

Public API:
    TraversalOptions: Traversal policy for subgraph extraction.
    SubgraphOptions: Roots, traversal policy, orphan and layout handling.
    extract_subgraph(graph, options) -> Graph
    TraversalStrategy: Breadth-first or depth-first visiting order.
    TraversalQuery: Options for a single-start traversal.
    traverse_graph(graph, start_node_id, query) -> TraversalResult
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .graph.types import (
    Direction,
    Graph,
    GraphEdge,
    GraphNode,
    PathInfo,
    TraversalResult,
    TraversalStatistics,
)
from .layout import LayoutOptions, apply_layout

logger = logging.getLogger(__name__)


@dataclass
class TraversalOptions:
    """Traversal policy used by :func:`extract_subgraph`.

    Attributes:
        max_depth: Maximum hops from a root (None for unbounded).
        follow_incoming: Follow edges pointing at the current node.
        follow_outgoing: Follow edges leaving the current node.
        direction: Additional restriction (outbound, inbound or any).
        relationship_types: Allow-list on edge labels; unlabeled edges pass.
        node_types: Allow-list on the type of newly reached nodes.
        exclude_nodes: Node ids never entered.
        limit: Maximum number of nodes in the result (None for unbounded).
    """

    max_depth: int | None = None
    follow_incoming: bool = True
    follow_outgoing: bool = True
    direction: Direction | str = Direction.ANY
    relationship_types: list[str] | None = None
    node_types: list[str] | None = None
    exclude_nodes: list[str] = field(default_factory=list)
    limit: int | None = None

    def __post_init__(self):
        """Validate fields and resolve the direction name."""
        if not isinstance(self.direction, Direction):
            self.direction = Direction(self.direction)
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError("max_depth cannot be negative")
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit cannot be negative")


@dataclass
class SubgraphOptions:
    """Subgraph extraction options.

    Attributes:
        root_nodes: Node ids the traversal starts from.
        traversal: Traversal policy (defaults apply when None).
        include_orphans: Append roots that did not end up in the result.
        auto_position: Run a layout pass over the extracted subgraph.
        layout_options: Layout parameters for the auto-position pass.
    """

    root_nodes: list[str]
    traversal: TraversalOptions | None = None
    include_orphans: bool = False
    auto_position: bool = False
    layout_options: LayoutOptions | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _incident_edges(graph: Graph) -> dict[str, list[tuple[int, GraphEdge]]]:
    """Map node id -> (edge index, edge) for every touching edge, in input order."""
    incident: dict[str, list[tuple[int, GraphEdge]]] = {}
    for index, edge in enumerate(graph.edges):
        incident.setdefault(edge.source, []).append((index, edge))
        if edge.target != edge.source:
            incident.setdefault(edge.target, []).append((index, edge))
    return incident


def _direction_allows(direction: Direction, outgoing: bool, incoming: bool) -> bool:
    if direction is Direction.OUTBOUND:
        return outgoing
    if direction is Direction.INBOUND:
        return incoming
    return True


# ---------------------------------------------------------------------------
# Subgraph extraction
# ---------------------------------------------------------------------------


def extract_subgraph(graph: Graph, options: SubgraphOptions) -> Graph:
    """Extract the neighbourhood of one or more root nodes with BFS.

    Every root present in the graph is seeded at depth 0. Dequeued nodes are
    added to the result until ``limit`` nodes have been collected; nodes at
    ``max_depth`` are included but not expanded. An edge is followed when it
    matches the follow flags and direction, and its label (if any) is in
    ``relationship_types``. Edges to already-visited nodes are recorded so
    connections among included nodes survive; new neighbours must also pass
    ``node_types``. Each input edge is recorded at most once, and edges to
    nodes cut off by ``limit`` are dropped.

    Visiting order follows the input edge order per node, so results are
    stable for identically ordered input.

    Args:
        graph: The input graph.
        options: Roots and traversal policy.

    Returns:
        The extracted subgraph with provenance metadata.
    """
    policy = options.traversal or TraversalOptions()
    lookup = graph.node_map()
    incident = _incident_edges(graph)

    max_depth = math.inf if policy.max_depth is None else policy.max_depth
    limit = math.inf if policy.limit is None else policy.limit
    exclude = set(policy.exclude_nodes)
    relationship_types = set(policy.relationship_types or ())
    node_types = set(policy.node_types or ())

    visited: set[str] = set()
    queue: deque[tuple[str, int]] = deque()
    for root in options.root_nodes:
        if root in lookup and root not in visited:
            visited.add(root)
            queue.append((root, 0))

    nodes: list[GraphNode] = []
    recorded: dict[int, GraphEdge] = {}

    while queue and len(nodes) < limit:
        node_id, depth = queue.popleft()
        nodes.append(lookup[node_id].clone())

        if depth >= max_depth:
            continue

        for index, edge in incident.get(node_id, ()):
            outgoing = edge.source == node_id
            incoming = edge.target == node_id

            if not (outgoing and policy.follow_outgoing or incoming and policy.follow_incoming):
                continue
            if not _direction_allows(policy.direction, outgoing, incoming):
                continue
            if relationship_types and edge.label is not None and edge.label not in relationship_types:
                continue

            neighbor_id = edge.target if outgoing else edge.source
            if neighbor_id in exclude:
                continue

            if neighbor_id in visited:
                recorded.setdefault(index, edge)
                continue

            neighbor = lookup.get(neighbor_id)
            if neighbor is None:
                continue
            if node_types and (neighbor.type is None or neighbor.type not in node_types):
                continue

            recorded.setdefault(index, edge)
            visited.add(neighbor_id)
            queue.append((neighbor_id, depth + 1))

    included = {node.id for node in nodes}

    if options.include_orphans:
        for root in options.root_nodes:
            if root in lookup and root not in included:
                nodes.append(lookup[root].clone())
                included.add(root)

    edges = [
        edge.clone()
        for edge in recorded.values()
        if edge.source in included and edge.target in included
    ]
    if len(edges) < len(recorded):
        logger.debug("Dropped %d edges to nodes cut off by the limit", len(recorded) - len(edges))

    source_metadata = graph.metadata or {}
    source_name = source_metadata.get("name") or "Unknown"
    metadata = {
        "name": f"Subgraph from {source_name}",
        "description": f"Subgraph extracted from {', '.join(options.root_nodes)}",
        **source_metadata,
        "extracted_from": source_name,
        "root_nodes": list(options.root_nodes),
    }

    subgraph = Graph(nodes=tuple(nodes), edges=tuple(edges), metadata=metadata)

    if options.auto_position and options.layout_options is not None:
        subgraph = apply_layout(subgraph, options.layout_options)

    logger.debug(
        "Extracted %d nodes and %d edges from roots %s",
        len(subgraph.nodes), len(subgraph.edges), options.root_nodes,
    )
    return subgraph


# ---------------------------------------------------------------------------
# General traversal
# ---------------------------------------------------------------------------


class TraversalStrategy(Enum):
    """Order in which :func:`traverse_graph` visits nodes."""

    BREADTH_FIRST = "breadthFirst"
    DEPTH_FIRST = "depthFirst"


@dataclass
class TraversalQuery:
    """Options for :func:`traverse_graph`.

    Attributes:
        max_depth: Maximum hops from the start node (None for unbounded).
        edge_types: Allow-list on edge labels (unlabeled edges excluded).
        direction: Which edges to follow relative to the current node.
        limit: Maximum number of returned nodes.
        node_filter: Predicate a newly reached node must satisfy.
        edge_filter: Predicate an edge must satisfy to be followed.
        include_start_node: Whether the start node is part of ``nodes``.
        strategy: Breadth-first or depth-first visiting order.
    """

    max_depth: int | None = None
    edge_types: list[str] | None = None
    direction: Direction | str = Direction.ANY
    limit: int | None = None
    node_filter: Callable[[GraphNode], bool] | None = None
    edge_filter: Callable[[GraphEdge], bool] | None = None
    include_start_node: bool = True
    strategy: TraversalStrategy | str = TraversalStrategy.BREADTH_FIRST

    def __post_init__(self):
        if not isinstance(self.direction, Direction):
            self.direction = Direction(self.direction)
        if not isinstance(self.strategy, TraversalStrategy):
            self.strategy = TraversalStrategy(self.strategy)


def traverse_graph(
    graph: Graph,
    start_node_id: str,
    query: TraversalQuery | None = None,
) -> TraversalResult:
    """Traverse from one node, recording the path used to reach every node.

    Args:
        graph: Graph to traverse.
        start_node_id: Node to start from.
        query: Traversal options.

    Returns:
        TraversalResult with visited nodes, followed edges, per-node paths and
        statistics. Empty when the start node does not exist.
    """
    started = time.perf_counter()
    query = query or TraversalQuery()
    lookup = graph.node_map()

    if start_node_id not in lookup:
        return TraversalResult()

    incident = _incident_edges(graph)
    max_depth = math.inf if query.max_depth is None else query.max_depth
    limit = math.inf if query.limit is None else query.limit
    edge_types = set(query.edge_types or ())
    depth_first = query.strategy is TraversalStrategy.DEPTH_FIRST

    visited = {start_node_id}
    paths: dict[str, PathInfo] = {start_node_id: PathInfo(node_ids=(start_node_id,))}
    followed: list[GraphEdge] = []
    nodes: list[GraphNode] = []
    reached: set[str] = {start_node_id}
    deepest = 0

    frontier: deque[tuple[str, int]] = deque([(start_node_id, 0)])
    while frontier and len(nodes) < limit:
        node_id, depth = frontier.pop() if depth_first else frontier.popleft()

        if node_id != start_node_id or query.include_start_node:
            nodes.append(lookup[node_id].clone())
        reached.add(node_id)
        deepest = max(deepest, depth)

        if depth >= max_depth:
            continue

        for _, edge in incident.get(node_id, ()):
            outgoing = edge.source == node_id
            incoming = edge.target == node_id
            if not _direction_allows(query.direction, outgoing, incoming):
                continue
            if edge_types and edge.label not in edge_types:
                continue
            if query.edge_filter is not None and not query.edge_filter(edge):
                continue

            neighbor_id = edge.target if outgoing else edge.source
            if neighbor_id in visited:
                continue
            neighbor = lookup.get(neighbor_id)
            if neighbor is None:
                continue
            if query.node_filter is not None and not query.node_filter(neighbor):
                continue

            visited.add(neighbor_id)
            parent = paths[node_id]
            paths[neighbor_id] = PathInfo(
                node_ids=parent.node_ids + (neighbor_id,),
                edge_ids=parent.edge_ids + (edge.key,),
                distance=parent.distance + 1,
            )
            followed.append(edge)
            frontier.append((neighbor_id, depth + 1))

    edges = [
        edge.clone() for edge in followed
        if edge.source in reached and edge.target in reached
    ]
    statistics = TraversalStatistics(
        nodes_visited=len(reached),
        edges_traversed=len(edges),
        max_depth_reached=deepest,
        execution_time_ms=(time.perf_counter() - started) * 1000,
    )
    return TraversalResult(
        nodes=nodes,
        edges=edges,
        paths={node_id: path for node_id, path in paths.items() if node_id in reached},
        statistics=statistics,
    )


__all__ = [
    "TraversalOptions",
    "SubgraphOptions",
    "extract_subgraph",
    "TraversalStrategy",
    "TraversalQuery",
    "traverse_graph",
]
