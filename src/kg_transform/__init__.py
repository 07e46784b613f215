"""kg-transform-lib: Graph transformation engine for knowledge-graph visualization."""

__version__ = "0.1.0"

from .analysis import TOP_DEGREE_COUNT, DegreeEntry, GraphAnalysis, analyze_graph
from .exceptions import GraphError, InvalidGraphError
from .filtering import GraphFilter, filter_graph
from .graph import (
    Direction,
    Graph,
    GraphEdge,
    GraphNode,
    PathInfo,
    Position,
    TraversalResult,
    TraversalStatistics,
)
from .layout import ForceSimulation, LayoutAlgorithm, LayoutOptions, apply_layout
from .merge import MergeOptions, MergeStrategy, merge_graphs
from .metrics import degrees, find_shortest_path, in_degrees, is_connected, out_degrees
from .sizing import (
    CentralityMeasure,
    CentralityOptions,
    CentralityResult,
    CentralityStatistics,
    EdgeWeightOptions,
    EdgeWeightStrategy,
    NodeSizeOptions,
    NodeSizeStrategy,
    RankedNode,
    calculate_centrality,
    calculate_edge_weights,
    calculate_node_sizes,
    normalize_values,
)
from .traversal import (
    SubgraphOptions,
    TraversalOptions,
    TraversalQuery,
    TraversalStrategy,
    extract_subgraph,
    traverse_graph,
)

__all__ = [
    # Data model
    "Direction",
    "Position",
    "GraphNode",
    "GraphEdge",
    "Graph",
    "PathInfo",
    "TraversalStatistics",
    "TraversalResult",
    # Metrics
    "in_degrees",
    "out_degrees",
    "degrees",
    "is_connected",
    "find_shortest_path",
    # Filter / extract / merge
    "GraphFilter",
    "filter_graph",
    "TraversalOptions",
    "SubgraphOptions",
    "extract_subgraph",
    "TraversalStrategy",
    "TraversalQuery",
    "traverse_graph",
    "MergeStrategy",
    "MergeOptions",
    "merge_graphs",
    # Attribute derivation
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
    # Layout
    "LayoutAlgorithm",
    "LayoutOptions",
    "ForceSimulation",
    "apply_layout",
    # Analysis
    "TOP_DEGREE_COUNT",
    "DegreeEntry",
    "GraphAnalysis",
    "analyze_graph",
    # Exceptions
    "GraphError",
    "InvalidGraphError",
]
