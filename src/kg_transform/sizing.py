"""Visual attribute derivation: node sizes, edge weights, centrality scores.

Philosophy:
- One raw value per element from a closed set of strategies
- Identical post-processing for every strategy: optional log(value + 1),
  min-max normalization (0 when all values are equal), linear rescale
- Centrality measures other than degree are approximated by degree and
  always logged as such

Public API:
    NodeSizeStrategy, NodeSizeOptions, calculate_node_sizes(graph, options) -> Graph
    EdgeWeightStrategy, EdgeWeightOptions, calculate_edge_weights(graph, options) -> Graph
    CentralityMeasure, CentralityOptions, calculate_centrality(graph, options) -> CentralityResult
    normalize_values(values, low, high, logarithmic) -> list[float]
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

from .graph.types import Graph, GraphNode
from .metrics import degrees, in_degrees, out_degrees

logger = logging.getLogger(__name__)


class NodeSizeStrategy(Enum):
    """Source of the raw value behind a node's size."""

    FIXED = "fixed"
    DEGREE = "degree"
    IN_DEGREE = "inDegree"
    OUT_DEGREE = "outDegree"
    PROPERTY = "property"
    # Approximated by total degree.
    BETWEENNESS = "betweenness"
    CLOSENESS = "closeness"
    PAGE_RANK = "pageRank"


class EdgeWeightStrategy(Enum):
    """Source of the raw value behind an edge's weight."""

    FIXED = "fixed"
    COUNT = "count"
    PROPERTY = "property"


@dataclass
class NodeSizeOptions:
    """Options for :func:`calculate_node_sizes`.

    Attributes:
        strategy: Raw value source (enum member or its string value).
        min_size: Size given to the smallest raw value.
        max_size: Size given to the largest raw value.
        property_name: Property read by the PROPERTY strategy.
        logarithmic: Apply log(value + 1) to positive values first.
    """

    strategy: NodeSizeStrategy | str = NodeSizeStrategy.DEGREE
    min_size: float = 5
    max_size: float = 30
    property_name: str | None = None
    logarithmic: bool = False

    def __post_init__(self):
        if not isinstance(self.strategy, NodeSizeStrategy):
            self.strategy = NodeSizeStrategy(self.strategy)
        if self.min_size < 0:
            raise ValueError("min_size cannot be negative")
        if self.min_size > self.max_size:
            raise ValueError("min_size cannot exceed max_size")


@dataclass
class EdgeWeightOptions:
    """Options for :func:`calculate_edge_weights`."""

    strategy: EdgeWeightStrategy | str = EdgeWeightStrategy.FIXED
    min_weight: float = 1
    max_weight: float = 5
    property_name: str | None = None
    logarithmic: bool = False

    def __post_init__(self):
        if not isinstance(self.strategy, EdgeWeightStrategy):
            self.strategy = EdgeWeightStrategy(self.strategy)
        if self.min_weight < 0:
            raise ValueError("min_weight cannot be negative")
        if self.min_weight > self.max_weight:
            raise ValueError("min_weight cannot exceed max_weight")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _numeric(value: Any) -> float | None:
    """Return *value* as a float when it is a finite real number (not bool)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def normalize_values(
    values: Sequence[float],
    low: float,
    high: float,
    logarithmic: bool = False,
) -> list[float]:
    """Map raw values linearly onto ``[low, high]``.

    Positive values are replaced by ``log(value + 1)`` first when
    *logarithmic* is set. When every value is equal the result is *low*
    everywhere.
    """
    raw = np.asarray(values, dtype=float)
    if raw.size == 0:
        return []

    if logarithmic:
        raw = np.where(raw > 0, np.log1p(np.where(raw > 0, raw, 0.0)), raw)

    lowest = raw.min()
    span = raw.max() - lowest
    if span > 0:
        normalized = (raw - lowest) / span
    else:
        normalized = np.zeros_like(raw)

    return [float(v) for v in low + normalized * (high - low)]


def _warn_approximated(measure: str) -> None:
    logger.warning(
        "Centrality measure %s is not implemented exactly; approximating with degree",
        measure,
    )


# ---------------------------------------------------------------------------
# Node sizes
# ---------------------------------------------------------------------------


def _fixed_values(graph: Graph, options: NodeSizeOptions) -> list[float]:
    return [1.0] * len(graph.nodes)


def _degree_values(graph: Graph, options: NodeSizeOptions) -> list[float]:
    degree = degrees(graph)
    return [float(degree[node.id]) for node in graph.nodes]


def _in_degree_values(graph: Graph, options: NodeSizeOptions) -> list[float]:
    degree = in_degrees(graph)
    return [float(degree[node.id]) for node in graph.nodes]


def _out_degree_values(graph: Graph, options: NodeSizeOptions) -> list[float]:
    degree = out_degrees(graph)
    return [float(degree[node.id]) for node in graph.nodes]


def _property_values(graph: Graph, options: NodeSizeOptions) -> list[float]:
    if options.property_name is None:
        return [0.0] * len(graph.nodes)
    values = []
    for node in graph.nodes:
        value = _numeric(node.properties.get(options.property_name))
        values.append(0.0 if value is None else value)
    return values


def _approximated_values(graph: Graph, options: NodeSizeOptions) -> list[float]:
    _warn_approximated(options.strategy.value)
    return _degree_values(graph, options)


_NODE_VALUES: dict[NodeSizeStrategy, Callable[[Graph, NodeSizeOptions], list[float]]] = {
    NodeSizeStrategy.FIXED: _fixed_values,
    NodeSizeStrategy.DEGREE: _degree_values,
    NodeSizeStrategy.IN_DEGREE: _in_degree_values,
    NodeSizeStrategy.OUT_DEGREE: _out_degree_values,
    NodeSizeStrategy.PROPERTY: _property_values,
    NodeSizeStrategy.BETWEENNESS: _approximated_values,
    NodeSizeStrategy.CLOSENESS: _approximated_values,
    NodeSizeStrategy.PAGE_RANK: _approximated_values,
}


def calculate_node_sizes(graph: Graph, options: NodeSizeOptions | None = None) -> Graph:
    """Derive ``style["size"]`` for every node.

    Args:
        graph: The input graph.
        options: Sizing strategy and output range (degree into [5, 30] by default).

    Returns:
        New graph whose nodes carry a size within ``[min_size, max_size]``.
    """
    options = options or NodeSizeOptions()
    raw = _NODE_VALUES[options.strategy](graph, options)
    sizes = normalize_values(raw, options.min_size, options.max_size, options.logarithmic)

    nodes = [
        node.clone(style={**node.style, "size": size})
        for node, size in zip(graph.nodes, sizes)
    ]
    return Graph(
        nodes=tuple(nodes),
        edges=tuple(edge.clone() for edge in graph.edges),
        metadata=graph.metadata,
    )


# ---------------------------------------------------------------------------
# Edge weights
# ---------------------------------------------------------------------------


def calculate_edge_weights(graph: Graph, options: EdgeWeightOptions | None = None) -> Graph:
    """Derive ``weight`` and ``style["width"]`` for every edge.

    Raw values are keyed by edge identity (explicit id, else
    ``source-target``), so edges sharing an identity share a value; the last
    one wins for PROPERTY. COUNT uses the number of edges between the same
    ordered source/target pair. Missing or non-numeric properties count as 1.

    Args:
        graph: The input graph.
        options: Weighting strategy and output range (fixed into [1, 5] by default).

    Returns:
        New graph with weighted edges.
    """
    options = options or EdgeWeightOptions()
    values: dict[str, float] = {}

    if options.strategy is EdgeWeightStrategy.COUNT:
        pair_counts = Counter((edge.source, edge.target) for edge in graph.edges)
        for edge in graph.edges:
            values[edge.key] = float(pair_counts[(edge.source, edge.target)])
    elif options.strategy is EdgeWeightStrategy.PROPERTY and options.property_name is not None:
        for edge in graph.edges:
            value = _numeric(edge.properties.get(options.property_name))
            values[edge.key] = 1.0 if value is None else value
    else:
        for edge in graph.edges:
            values[edge.key] = 1.0

    keys = list(values)
    scaled = dict(
        zip(
            keys,
            normalize_values(
                [values[key] for key in keys],
                options.min_weight,
                options.max_weight,
                options.logarithmic,
            ),
        )
    )

    edges = []
    for edge in graph.edges:
        weight = scaled[edge.key]
        edges.append(edge.clone(weight=weight, style={**edge.style, "width": weight}))

    return Graph(
        nodes=tuple(node.clone() for node in graph.nodes),
        edges=tuple(edges),
        metadata=graph.metadata,
    )


# ---------------------------------------------------------------------------
# Centrality report
# ---------------------------------------------------------------------------


class CentralityMeasure(Enum):
    """Centrality measures; only DEGREE is computed exactly."""

    DEGREE = "degree"
    BETWEENNESS = "betweenness"
    CLOSENESS = "closeness"
    PAGE_RANK = "pageRank"


@dataclass
class CentralityOptions:
    """Options for :func:`calculate_centrality`.

    Attributes:
        measure: Requested measure.
        normalize: Divide scores by ``n - 1`` (the maximum possible degree
            of a simple undirected graph).
    """

    measure: CentralityMeasure | str = CentralityMeasure.DEGREE
    normalize: bool = False

    def __post_init__(self):
        if not isinstance(self.measure, CentralityMeasure):
            self.measure = CentralityMeasure(self.measure)


@dataclass(frozen=True)
class RankedNode:
    node_id: str
    score: float
    node: GraphNode


@dataclass
class CentralityStatistics:
    mean: float = 0.0
    median: float = 0.0
    standard_deviation: float = 0.0
    min: float = 0.0
    max: float = 0.0


@dataclass
class CentralityResult:
    """Centrality scores with ranking and distribution statistics.

    Attributes:
        measure: Requested measure.
        scores: Score per node id.
        ranked_nodes: Nodes by descending score (ties keep node order).
        statistics: Distribution of the scores.
        approximated: True when the measure was approximated by degree.
    """

    measure: CentralityMeasure
    scores: dict[str, float] = field(default_factory=dict)
    ranked_nodes: list[RankedNode] = field(default_factory=list)
    statistics: CentralityStatistics = field(default_factory=CentralityStatistics)
    approximated: bool = False


def calculate_centrality(
    graph: Graph, options: CentralityOptions | None = None
) -> CentralityResult:
    """Score every node by centrality.

    Args:
        graph: The input graph.
        options: Measure and normalization.

    Returns:
        CentralityResult; empty scores and zeroed statistics for an empty graph.
    """
    options = options or CentralityOptions()
    approximated = options.measure is not CentralityMeasure.DEGREE
    if approximated:
        _warn_approximated(options.measure.value)

    degree = degrees(graph)
    count = len(graph.nodes)
    divisor = count - 1 if options.normalize and count > 1 else 1

    scores = {node.id: degree[node.id] / divisor for node in graph.nodes}
    ranked = sorted(
        (RankedNode(node_id=node.id, score=scores[node.id], node=node) for node in graph.nodes),
        key=lambda entry: entry.score,
        reverse=True,
    )

    statistics = CentralityStatistics()
    if scores:
        array = np.fromiter(scores.values(), dtype=float, count=len(scores))
        statistics = CentralityStatistics(
            mean=float(array.mean()),
            median=float(np.median(array)),
            standard_deviation=float(array.std()),
            min=float(array.min()),
            max=float(array.max()),
        )

    return CentralityResult(
        measure=options.measure,
        scores=scores,
        ranked_nodes=ranked,
        statistics=statistics,
        approximated=approximated,
    )


__all__ = [
    "NodeSizeStrategy",
    "NodeSizeOptions",
    "calculate_node_sizes",
    "EdgeWeightStrategy",
    "EdgeWeightOptions",
    "calculate_edge_weights",
    "CentralityMeasure",
    "CentralityOptions",
    "CentralityResult",
    "CentralityStatistics",
    "RankedNode",
    "calculate_centrality",
    "normalize_values",
]
