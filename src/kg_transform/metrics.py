"""Structural graph metrics used by every other transformation.

Philosophy:
- Pure functions over a Graph value, no caching
- Total mappings: every node id is present, isolated nodes map to 0
- Edge endpoints missing from the node list are still counted (under their
  own keys, after the node ids) so degree sums always equal the edge count

Public API:
    in_degrees(graph) -> dict[str, int]
    out_degrees(graph) -> dict[str, int]
    degrees(graph) -> dict[str, int]
    is_connected(graph) -> bool
    find_shortest_path(graph, source, target) -> list[str]
"""

from __future__ import annotations

from collections import deque

from .graph.types import Graph


def in_degrees(graph: Graph) -> dict[str, int]:
    """Count incoming edges for each node."""
    result = {node.id: 0 for node in graph.nodes}
    for edge in graph.edges:
        result[edge.target] = result.get(edge.target, 0) + 1
    return result


def out_degrees(graph: Graph) -> dict[str, int]:
    """Count outgoing edges for each node."""
    result = {node.id: 0 for node in graph.nodes}
    for edge in graph.edges:
        result[edge.source] = result.get(edge.source, 0) + 1
    return result


def degrees(graph: Graph) -> dict[str, int]:
    """Total degree (in + out) for each node in the graph.

    Unlike the directional counts, only ids of nodes in the graph appear.
    A self-loop contributes 2.
    """
    incoming = in_degrees(graph)
    outgoing = out_degrees(graph)
    return {node.id: incoming[node.id] + outgoing[node.id] for node in graph.nodes}


def _undirected_adjacency(graph: Graph) -> dict[str, set[str]]:
    adjacency: dict[str, set[str]] = {node.id: set() for node in graph.nodes}
    for edge in graph.edges:
        if edge.source in adjacency and edge.target in adjacency:
            adjacency[edge.source].add(edge.target)
            adjacency[edge.target].add(edge.source)
    return adjacency


def is_connected(graph: Graph) -> bool:
    """Check whether every node is reachable from the first one.

    Edges are treated as undirected. An empty graph is connected.
    """
    if not graph.nodes:
        return True

    adjacency = _undirected_adjacency(graph)
    start = graph.nodes[0].id
    visited = {start}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        for neighbor in adjacency[current]:
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(neighbor)

    return len(visited) == len(adjacency)


def find_shortest_path(
    graph: Graph,
    source: str,
    target: str,
    *,
    directed: bool = False,
    edge_types: list[str] | None = None,
) -> list[str]:
    """Find a fewest-hops path between two nodes with BFS.

    Args:
        graph: Graph to search.
        source: Start node id.
        target: Destination node id.
        directed: Only follow edges from source to target when True.
        edge_types: Optional allow-list on edge labels.

    Returns:
        Node ids from source to target inclusive, or an empty list when
        either node is missing or no path exists.
    """
    node_ids = {node.id for node in graph.nodes}
    if source not in node_ids or target not in node_ids:
        return []
    if source == target:
        return [source]

    neighbors: dict[str, list[str]] = {node_id: [] for node_id in node_ids}
    for edge in graph.edges:
        if edge.source not in node_ids or edge.target not in node_ids:
            continue
        if edge_types and edge.label not in edge_types:
            continue
        neighbors[edge.source].append(edge.target)
        if not directed:
            neighbors[edge.target].append(edge.source)

    previous: dict[str, str] = {}
    visited = {source}
    queue = deque([source])

    while queue:
        current = queue.popleft()
        for neighbor in neighbors[current]:
            if neighbor in visited:
                continue
            visited.add(neighbor)
            previous[neighbor] = current
            if neighbor == target:
                path = [target]
                while path[-1] != source:
                    path.append(previous[path[-1]])
                path.reverse()
                return path
            queue.append(neighbor)

    return []


__all__ = [
    "in_degrees",
    "out_degrees",
    "degrees",
    "is_connected",
    "find_shortest_path",
]
