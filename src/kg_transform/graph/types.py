"""Graph data structures shared by every transformation.

Public API:
    Direction: Edge traversal direction enum.
    Position: Immutable 2-D coordinate written by the layout engine.
    GraphNode: Immutable node with type, properties and style.
    GraphEdge: Immutable edge connecting two nodes.
    Graph: Ordered node/edge collection with free-form metadata.
    PathInfo: Path from a traversal start node to a visited node.
    TraversalStatistics: Counters collected during a traversal.
    TraversalResult: Container for traversal results.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from ..exceptions import InvalidGraphError


class Direction(Enum):
    """Direction restriction for edge traversal."""

    OUTBOUND = "outbound"
    INBOUND = "inbound"
    ANY = "any"


@dataclass(frozen=True)
class Position:
    """Absolute 2-D coordinate of a node."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class GraphNode:
    """An immutable node in the graph.

    Attributes:
        id: Unique identifier within a graph.
        label: Display label (falls back to id when rendering).
        type: Open category tag (e.g. "Person", "Concept").
        position: Coordinate, present after a layout pass or when supplied.
        properties: Arbitrary key-value properties used for sizing/filtering.
        style: Visual overrides (size, color, shape).
    """

    id: str
    label: str | None = None
    type: str | None = None
    position: Position | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    style: dict[str, Any] = field(default_factory=dict)

    def clone(self, **changes: Any) -> GraphNode:
        """Return a copy with fresh property/style mappings and *changes* applied."""
        changes.setdefault("properties", dict(self.properties))
        changes.setdefault("style", dict(self.style))
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.label is not None:
            data["label"] = self.label
        if self.type is not None:
            data["type"] = self.type
        if self.position is not None:
            data["position"] = self.position.to_dict()
        if self.properties:
            data["properties"] = dict(self.properties)
        if self.style:
            data["style"] = dict(self.style)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphNode:
        """Create a node from its dictionary form.

        Raises:
            InvalidGraphError: If the node has no ``id``.
        """
        node_id = data.get("id")
        if node_id is None or node_id == "":
            raise InvalidGraphError(f"node is missing an id: {data!r}")

        position = data.get("position")
        if isinstance(position, dict):
            position = Position(x=float(position["x"]), y=float(position["y"]))

        return cls(
            id=str(node_id),
            label=data.get("label"),
            type=data.get("type"),
            position=position,
            properties=dict(data.get("properties") or {}),
            style=dict(data.get("style") or {}),
        )


@dataclass(frozen=True)
class GraphEdge:
    """An immutable edge in the graph.

    Attributes:
        source: Node ID of the source (tail) node.
        target: Node ID of the target (head) node.
        id: Optional explicit identifier.
        label: Relationship type (e.g. "KNOWS").
        weight: Numeric weight, assigned by attribute derivation or supplied.
        directed: Whether the relationship is directed.
        properties: Arbitrary key-value properties stored on the edge.
        style: Visual overrides (width, color).
    """

    source: str
    target: str
    id: str | None = None
    label: str | None = None
    weight: float | None = None
    directed: bool | None = None
    properties: dict[str, Any] = field(default_factory=dict)
    style: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """De-duplication identity: explicit id, else ``source-target``."""
        return self.id or f"{self.source}-{self.target}"

    def clone(self, **changes: Any) -> GraphEdge:
        """Return a copy with fresh property/style mappings and *changes* applied."""
        changes.setdefault("properties", dict(self.properties))
        changes.setdefault("style", dict(self.style))
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"source": self.source, "target": self.target}
        for name in ("id", "label", "weight", "directed"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.properties:
            data["properties"] = dict(self.properties)
        if self.style:
            data["style"] = dict(self.style)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphEdge:
        """Create an edge from its dictionary form.

        Raises:
            InvalidGraphError: If ``source`` or ``target`` is missing.
        """
        source = data.get("source")
        target = data.get("target")
        if source is None or target is None:
            raise InvalidGraphError(f"edge is missing source or target: {data!r}")

        weight = data.get("weight")
        return cls(
            source=str(source),
            target=str(target),
            id=data.get("id"),
            label=data.get("label"),
            weight=float(weight) if weight is not None else None,
            directed=data.get("directed"),
            properties=dict(data.get("properties") or {}),
            style=dict(data.get("style") or {}),
        )


@dataclass(frozen=True)
class Graph:
    """Ordered collection of nodes and edges.

    Lists passed as ``nodes``/``edges`` are stored as tuples so a graph value
    cannot be modified after construction.

    Attributes:
        nodes: Nodes in caller-supplied order.
        edges: Edges in caller-supplied order.
        metadata: Free-form mapping (name, description, lineage).
    """

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    metadata: dict[str, Any] | None = None

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]

    def node_map(self) -> dict[str, GraphNode]:
        """Map node id -> node."""
        return {node.id: node for node in self.nodes}

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert the graph to the plain-dict shape used by collaborators."""
        data: dict[str, Any] = {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Graph:
        """Create a graph from ``{"nodes": [...], "edges": [...], "metadata": {...}}``.

        Args:
            data: Dictionary with graph fields

        Returns:
            Graph instance

        Raises:
            InvalidGraphError: If a node or edge is malformed or node ids repeat.
        """
        nodes = [GraphNode.from_dict(item) for item in data.get("nodes") or []]
        seen: set[str] = set()
        for node in nodes:
            if node.id in seen:
                raise InvalidGraphError(f"duplicate node id: {node.id}")
            seen.add(node.id)

        edges = [GraphEdge.from_dict(item) for item in data.get("edges") or []]
        metadata = data.get("metadata")
        return cls(
            nodes=tuple(nodes),
            edges=tuple(edges),
            metadata=dict(metadata) if metadata is not None else None,
        )


@dataclass(frozen=True)
class PathInfo:
    """Path from the traversal start node to one visited node.

    Attributes:
        node_ids: Node ids along the path, start node first.
        edge_ids: Edge keys along the path.
        distance: Number of edges in the path.
    """

    node_ids: tuple[str, ...] = ()
    edge_ids: tuple[str, ...] = ()
    distance: int = 0


@dataclass
class TraversalStatistics:
    """Counters collected while traversing."""

    nodes_visited: int = 0
    edges_traversed: int = 0
    max_depth_reached: int = 0
    execution_time_ms: float = 0.0


@dataclass
class TraversalResult:
    """Container for graph traversal results.

    Attributes:
        nodes: Visited nodes in visiting order.
        edges: Edges followed to reach them.
        paths: Path from the start node, keyed by visited node id.
        statistics: Traversal counters.
    """

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    paths: dict[str, PathInfo] = field(default_factory=dict)
    statistics: TraversalStatistics = field(default_factory=TraversalStatistics)


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
