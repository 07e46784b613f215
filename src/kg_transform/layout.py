"""Node positioning algorithms.

Every algorithm works on an already-cloned node list and replaces each entry
with a copy carrying its new ``position``; the caller's graph is never
touched.

Public API:
    LayoutAlgorithm: Closed set of positioning algorithms.
    LayoutOptions: Canvas and simulation parameters.
    ForceSimulation: Step-wise Fruchterman-Reingold simulation.
    apply_layout(graph, options) -> Graph
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import Enum

import numpy as np

from .graph.types import Graph, GraphEdge, GraphNode, Position
from .metrics import degrees

logger = logging.getLogger(__name__)

# Margin kept free on every side of the canvas by grid/circular/random/concentric.
LAYOUT_PADDING = 50

# Distance floor for force computations (avoids the 1/d singularity).
MIN_DISTANCE = 0.1


class LayoutAlgorithm(Enum):
    """Available positioning algorithms."""

    GRID = "grid"
    CIRCULAR = "circular"
    RANDOM = "random"
    CONCENTRIC = "concentric"
    FORCE_DIRECTED = "force-directed"

    @classmethod
    def parse(cls, value: LayoutAlgorithm | str) -> LayoutAlgorithm:
        """Resolve an algorithm name, falling back to GRID for unknown names."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.warning("Unknown layout algorithm %r, falling back to grid", value)
            return cls.GRID


@dataclass
class LayoutOptions:
    """Layout parameters.

    Attributes:
        algorithm: Algorithm (enum member or its string value).
        width: Canvas width.
        height: Canvas height.
        node_spacing: Margin used to clamp force-directed positions.
        edge_length: Ideal edge length ``k``; defaults to sqrt(width*height/n).
        iterations: Force-directed iteration budget.
        seed: Seed for random placement; None gives different results per call.
    """

    algorithm: LayoutAlgorithm | str = LayoutAlgorithm.FORCE_DIRECTED
    width: float = 800
    height: float = 600
    node_spacing: float = 10
    edge_length: float | None = None
    iterations: int = 100
    seed: int | None = None

    def __post_init__(self):
        """Validate fields and resolve the algorithm name."""
        self.algorithm = LayoutAlgorithm.parse(self.algorithm)

        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if self.node_spacing < 0:
            raise ValueError("node_spacing cannot be negative")
        if self.edge_length is not None and self.edge_length <= 0:
            raise ValueError("edge_length must be positive")
        if self.iterations < 0:
            raise ValueError("iterations cannot be negative")


# ---------------------------------------------------------------------------
# Simple placements
# ---------------------------------------------------------------------------


def _place(nodes: list[GraphNode], positions: Sequence[Position]) -> None:
    for index, position in enumerate(positions):
        nodes[index] = replace(nodes[index], position=position)


def _grid_positions(count: int, width: float, height: float) -> list[Position]:
    if count == 0:
        return []
    available_width = width - LAYOUT_PADDING * 2
    available_height = height - LAYOUT_PADDING * 2

    cols = math.ceil(math.sqrt(count))
    rows = math.ceil(count / cols)
    cell_width = available_width / cols
    cell_height = available_height / rows

    return [
        Position(
            x=LAYOUT_PADDING + (index % cols) * cell_width + cell_width / 2,
            y=LAYOUT_PADDING + (index // cols) * cell_height + cell_height / 2,
        )
        for index in range(count)
    ]


def _circular_positions(count: int, width: float, height: float) -> list[Position]:
    center_x = width / 2
    center_y = height / 2
    radius = min(width, height) / 2 - LAYOUT_PADDING

    positions = []
    for index in range(count):
        angle = index / count * 2 * math.pi
        positions.append(
            Position(
                x=center_x + radius * math.cos(angle),
                y=center_y + radius * math.sin(angle),
            )
        )
    return positions


def _random_coordinates(
    count: int, width: float, height: float, rng: np.random.Generator
) -> np.ndarray:
    """Uniform (count, 2) coordinates inside the padded canvas."""
    low = np.array([LAYOUT_PADDING, LAYOUT_PADDING], dtype=float)
    high = np.array([width - LAYOUT_PADDING, height - LAYOUT_PADDING], dtype=float)
    return low + rng.random((count, 2)) * (high - low)


def _concentric_positions(
    nodes: list[GraphNode], edges: Iterable[GraphEdge], width: float, height: float
) -> dict[str, Position]:
    """Higher-degree nodes on inner rings."""
    count = len(nodes)
    if count == 0:
        return {}

    center_x = width / 2
    center_y = height / 2
    max_radius = min(width, height) / 2 - LAYOUT_PADDING

    degree = degrees(Graph(nodes=nodes, edges=tuple(edges)))
    ordered = sorted(nodes, key=lambda node: degree[node.id], reverse=True)

    ring_count = math.ceil(math.sqrt(count))
    per_ring = math.ceil(count / ring_count)

    positions: dict[str, Position] = {}
    for index, node in enumerate(ordered):
        ring = index // per_ring
        slot = index % per_ring
        radius = (ring + 1) * (max_radius / ring_count)
        angle = slot / per_ring * 2 * math.pi
        positions[node.id] = Position(
            x=center_x + radius * math.cos(angle),
            y=center_y + radius * math.sin(angle),
        )
    return positions


# ---------------------------------------------------------------------------
# Force-directed simulation
# ---------------------------------------------------------------------------


class ForceSimulation:
    """Fruchterman-Reingold style force simulation with linear cooling.

    Each step computes pairwise repulsion ``k²/d`` and per-edge attraction
    ``d²/k``, caps every node's displacement at the current temperature
    ``k * (1 - i/iterations)``, scales it by the damping factor
    ``1 - i/iterations`` and clamps positions to the canvas minus
    ``node_spacing``. The temperature for step ``i`` is computed before that
    step's displacement is applied.

    The simulation can be driven in chunks with :meth:`step` or
    :meth:`run` so callers can interleave it with other work.

    Args:
        nodes: Nodes to position. When none has a position, all are seeded
            randomly; otherwise nodes without one start at the canvas center.
        edges: Edges providing attraction. Edges with an unknown endpoint
            are ignored.
        options: Layout parameters; ``algorithm`` is ignored.
    """

    def __init__(
        self,
        nodes: Sequence[GraphNode],
        edges: Iterable[GraphEdge],
        options: LayoutOptions | None = None,
    ) -> None:
        self.options = options or LayoutOptions()
        self._nodes = list(nodes)
        self.iteration = 0
        self.iterations = self.options.iterations

        width = self.options.width
        height = self.options.height
        count = len(self._nodes)

        if self.options.edge_length is not None:
            self.k = float(self.options.edge_length)
        elif count:
            self.k = math.sqrt(width * height / count)
        else:
            self.k = 0.0

        if any(node.position is not None for node in self._nodes):
            self._positions = np.array(
                [
                    (node.position.x, node.position.y) if node.position is not None
                    else (width / 2, height / 2)
                    for node in self._nodes
                ],
                dtype=float,
            ).reshape(count, 2)
        else:
            rng = np.random.default_rng(self.options.seed)
            self._positions = _random_coordinates(count, width, height, rng)

        index = {node.id: i for i, node in enumerate(self._nodes)}
        pairs = [
            (index[edge.source], index[edge.target])
            for edge in edges
            if edge.source in index and edge.target in index
        ]
        self._edge_index = np.array(pairs, dtype=int).reshape(len(pairs), 2)

    @property
    def done(self) -> bool:
        return self.iteration >= self.iterations

    @property
    def temperature(self) -> float:
        """Displacement cap for the next step."""
        if self.iterations == 0:
            return 0.0
        return self.k * (1 - self.iteration / self.iterations)

    def _forces(self) -> np.ndarray:
        positions = self._positions
        forces = np.zeros_like(positions)
        k = self.k

        if len(positions) > 1:
            # delta[i, j] points from j to i, so k²/d along it pushes i away from j.
            delta = positions[:, None, :] - positions[None, :, :]
            distance = np.maximum(np.sqrt((delta ** 2).sum(axis=-1)), MIN_DISTANCE)
            np.fill_diagonal(distance, np.inf)
            magnitude = k * k / distance
            forces += (delta / distance[..., None] * magnitude[..., None]).sum(axis=1)

        if len(self._edge_index):
            source = self._edge_index[:, 0]
            target = self._edge_index[:, 1]
            delta = positions[target] - positions[source]
            distance = np.maximum(np.sqrt((delta ** 2).sum(axis=-1)), MIN_DISTANCE)
            pull = delta / distance[:, None] * (distance ** 2 / k)[:, None]
            np.add.at(forces, source, pull)
            np.add.at(forces, target, -pull)

        return forces

    def step(self) -> bool:
        """Run one iteration. Returns False when the budget is exhausted."""
        if self.done:
            return False
        if len(self._positions) == 0:
            self.iteration += 1
            return True

        temperature = self.temperature
        damping = 1 - self.iteration / self.iterations

        forces = self._forces()
        length = np.sqrt((forces ** 2).sum(axis=1))
        safe_length = np.where(length > 0, length, 1.0)
        scale = np.where(length > 0, np.minimum(length, temperature) / safe_length, 0.0)
        self._positions += forces * (scale * damping)[:, None]

        spacing = self.options.node_spacing
        self._positions[:, 0] = np.clip(
            self._positions[:, 0], spacing, self.options.width - spacing
        )
        self._positions[:, 1] = np.clip(
            self._positions[:, 1], spacing, self.options.height - spacing
        )

        self.iteration += 1
        return True

    def run(self, steps: int | None = None) -> int:
        """Run up to *steps* iterations (all remaining when None).

        Returns:
            Number of iterations actually executed.
        """
        executed = 0
        while (steps is None or executed < steps) and self.step():
            executed += 1
        logger.debug(
            "Force simulation ran %d steps (%d/%d) for %d nodes",
            executed, self.iteration, self.iterations, len(self._nodes),
        )
        return executed

    def positions(self) -> dict[str, Position]:
        """Current position of every node, keyed by node id."""
        return {
            node.id: Position(x=float(x), y=float(y))
            for node, (x, y) in zip(self._nodes, self._positions)
        }

    def to_nodes(self) -> list[GraphNode]:
        """Copies of the input nodes carrying their current positions."""
        current = self.positions()
        return [replace(node, position=current[node.id]) for node in self._nodes]


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _layout_grid(nodes: list[GraphNode], edges: Sequence[GraphEdge], options: LayoutOptions) -> None:
    _place(nodes, _grid_positions(len(nodes), options.width, options.height))


def _layout_circular(
    nodes: list[GraphNode], edges: Sequence[GraphEdge], options: LayoutOptions
) -> None:
    _place(nodes, _circular_positions(len(nodes), options.width, options.height))


def _layout_random(
    nodes: list[GraphNode], edges: Sequence[GraphEdge], options: LayoutOptions
) -> None:
    rng = np.random.default_rng(options.seed)
    coordinates = _random_coordinates(len(nodes), options.width, options.height, rng)
    _place(nodes, [Position(x=float(x), y=float(y)) for x, y in coordinates])


def _layout_concentric(
    nodes: list[GraphNode], edges: Sequence[GraphEdge], options: LayoutOptions
) -> None:
    positions = _concentric_positions(nodes, edges, options.width, options.height)
    _place(nodes, [positions[node.id] for node in nodes])


def _layout_force(
    nodes: list[GraphNode], edges: Sequence[GraphEdge], options: LayoutOptions
) -> None:
    simulation = ForceSimulation(nodes, edges, options)
    simulation.run()
    nodes[:] = simulation.to_nodes()


_LAYOUTS = {
    LayoutAlgorithm.GRID: _layout_grid,
    LayoutAlgorithm.CIRCULAR: _layout_circular,
    LayoutAlgorithm.RANDOM: _layout_random,
    LayoutAlgorithm.CONCENTRIC: _layout_concentric,
    LayoutAlgorithm.FORCE_DIRECTED: _layout_force,
}


def apply_layout(graph: Graph, options: LayoutOptions | None = None) -> Graph:
    """Position every node of *graph* with the configured algorithm.

    Args:
        graph: The graph to lay out.
        options: Layout parameters (force-directed on 800x600 by default).

    Returns:
        New graph whose nodes carry ``position``; edges and metadata are
        carried over.
    """
    options = options or LayoutOptions()
    algorithm = LayoutAlgorithm.parse(options.algorithm)

    nodes = [node.clone() for node in graph.nodes]
    _LAYOUTS[algorithm](nodes, graph.edges, options)

    return Graph(
        nodes=tuple(nodes),
        edges=tuple(edge.clone() for edge in graph.edges),
        metadata=graph.metadata,
    )


__all__ = [
    "LAYOUT_PADDING",
    "MIN_DISTANCE",
    "LayoutAlgorithm",
    "LayoutOptions",
    "ForceSimulation",
    "apply_layout",
]
