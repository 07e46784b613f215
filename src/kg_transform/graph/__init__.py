"""Graph data model shared by the transformation modules.

Public API:
    Direction: Edge traversal direction.
    Position: Immutable 2-D node coordinate.
    GraphNode: Immutable graph node.
    GraphEdge: Immutable graph edge.
    Graph: Ordered node/edge collection with metadata.
    PathInfo: Start-to-node path recorded by a traversal.
    TraversalStatistics: Traversal counters.
    TraversalResult: Traversal result container.
"""

from __future__ import annotations

from .types import (
    Direction,
    Graph,
    GraphEdge,
    GraphNode,
    PathInfo,
    Position,
    TraversalResult,
    TraversalStatistics,
)

__all__ = [
    "Direction",
    "Position",
    "GraphNode",
    "GraphEdge",
    "Graph",
    "PathInfo",
    "TraversalStatistics",
    "TraversalResult",
]
