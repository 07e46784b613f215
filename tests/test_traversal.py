"""Tests for subgraph extraction and general traversal.

Test categories:
- TestExtractSubgraph: depth bound, direction, follow flags, relationship and
  node type screens, exclusions, limit, orphans, duplicate edges
- TestExtractionMetadata: provenance metadata and auto-positioning
- TestTraverseGraph: BFS/DFS order, paths, statistics, filters, limits
"""

from __future__ import annotations

import pytest

from kg_transform import (
    Direction,
    Graph,
    GraphEdge,
    GraphNode,
    LayoutOptions,
    SubgraphOptions,
    TraversalOptions,
    TraversalQuery,
    TraversalStrategy,
    extract_subgraph,
    traverse_graph,
)


def _ids(graph):
    return [node.id for node in graph.nodes]


def _pairs(graph):
    return [(edge.source, edge.target) for edge in graph.edges]


@pytest.fixture
def star_graph():
    """hub with typed spokes.

    Graph structure:
        hub --HAS--> a (Leaf)
        hub --HAS--> b (Leaf)
        c (Other) --POINTS--> hub
        a --LINK--> b
        d (Leaf), only reachable through c
        c --HAS--> d
    """
    nodes = [
        GraphNode(id="hub", type="Hub"),
        GraphNode(id="a", type="Leaf"),
        GraphNode(id="b", type="Leaf"),
        GraphNode(id="c", type="Other"),
        GraphNode(id="d", type="Leaf"),
    ]
    edges = [
        GraphEdge(source="hub", target="a", label="HAS"),
        GraphEdge(source="hub", target="b", label="HAS"),
        GraphEdge(source="c", target="hub", label="POINTS"),
        GraphEdge(source="a", target="b", label="LINK"),
        GraphEdge(source="c", target="d", label="HAS"),
    ]
    return Graph(nodes=nodes, edges=edges, metadata={"name": "star"})


class TestExtractSubgraph:
    def test_outbound_depth_two_on_chain(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(
                root_nodes=["n1"],
                traversal=TraversalOptions(max_depth=2, direction="outbound"),
            ),
        )
        assert _ids(result) == ["n1", "n2", "n3"]
        assert _pairs(result) == [("n1", "n2"), ("n2", "n3")]

    def test_inbound_from_tail(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(
                root_nodes=["n5"],
                traversal=TraversalOptions(max_depth=1, direction=Direction.INBOUND),
            ),
        )
        assert _ids(result) == ["n5", "n4"]

    def test_outbound_from_tail_is_root_only(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(root_nodes=["n5"], traversal=TraversalOptions(direction="outbound")),
        )
        assert _ids(result) == ["n5"]
        assert result.edges == ()

    def test_max_depth_zero_returns_roots(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(root_nodes=["n3"], traversal=TraversalOptions(max_depth=0)),
        )
        assert _ids(result) == ["n3"]

    def test_unbounded_any_direction_reaches_everything(self, chain_graph):
        result = extract_subgraph(chain_graph, SubgraphOptions(root_nodes=["n3"]))
        assert sorted(_ids(result)) == ["n1", "n2", "n3", "n4", "n5"]
        assert len(result.edges) == 4

    def test_follow_flags(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(
                root_nodes=["n3"],
                traversal=TraversalOptions(follow_outgoing=False),
            ),
        )
        assert _ids(result) == ["n3", "n2", "n1"]

    def test_depth_bound_by_hops(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(root_nodes=["n3"], traversal=TraversalOptions(max_depth=1)),
        )
        assert sorted(_ids(result)) == ["n2", "n3", "n4"]

    def test_multiple_roots_seeded_at_depth_zero(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(
                root_nodes=["n1", "n5", "missing", "n1"],
                traversal=TraversalOptions(max_depth=1, direction="outbound"),
            ),
        )
        assert _ids(result) == ["n1", "n5", "n2"]

    def test_relationship_types(self, star_graph):
        result = extract_subgraph(
            star_graph,
            SubgraphOptions(
                root_nodes=["hub"],
                traversal=TraversalOptions(relationship_types=["HAS"]),
            ),
        )
        assert _ids(result) == ["hub", "a", "b"]
        assert ("a", "b") not in _pairs(result)

    def test_unlabeled_edges_pass_relationship_filter(self):
        graph = Graph(
            nodes=[GraphNode(id="x"), GraphNode(id="y")],
            edges=[GraphEdge(source="x", target="y")],
        )
        result = extract_subgraph(
            graph,
            SubgraphOptions(root_nodes=["x"], traversal=TraversalOptions(relationship_types=["R"])),
        )
        assert _ids(result) == ["x", "y"]

    def test_node_types_screen_new_neighbors(self, star_graph):
        result = extract_subgraph(
            star_graph,
            SubgraphOptions(root_nodes=["hub"], traversal=TraversalOptions(node_types=["Leaf"])),
        )
        assert _ids(result) == ["hub", "a", "b"]
        assert ("a", "b") in _pairs(result)

    def test_exclude_nodes(self, star_graph):
        result = extract_subgraph(
            star_graph,
            SubgraphOptions(root_nodes=["hub"], traversal=TraversalOptions(exclude_nodes=["c"])),
        )
        assert "c" not in _ids(result)
        assert "d" not in _ids(result)

    def test_edges_between_visited_nodes_recorded_once(self, star_graph):
        result = extract_subgraph(star_graph, SubgraphOptions(root_nodes=["hub"]))
        pairs = _pairs(result)
        assert len(pairs) == len(set(pairs)) == 5

    def test_limit_bounds_result_nodes(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(root_nodes=["n1"], traversal=TraversalOptions(limit=2)),
        )
        assert _ids(result) == ["n1", "n2"]
        assert _pairs(result) == [("n1", "n2")]

    def test_edge_integrity_under_limit(self, star_graph):
        result = extract_subgraph(
            star_graph,
            SubgraphOptions(root_nodes=["hub"], traversal=TraversalOptions(limit=2)),
        )
        ids = set(_ids(result))
        assert len(ids) == 2
        assert all(edge.source in ids and edge.target in ids for edge in result.edges)

    def test_orphan_roots_included(self, chain_graph):
        options = SubgraphOptions(
            root_nodes=["n1", "n4"],
            traversal=TraversalOptions(limit=1),
            include_orphans=True,
        )
        result = extract_subgraph(chain_graph, options)
        assert _ids(result) == ["n1", "n4"]
        assert result.edges == ()

    def test_orphans_not_added_without_flag(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(root_nodes=["n1", "n4"], traversal=TraversalOptions(limit=1)),
        )
        assert _ids(result) == ["n1"]

    def test_missing_roots(self, chain_graph):
        result = extract_subgraph(chain_graph, SubgraphOptions(root_nodes=["zzz"]))
        assert result.nodes == ()
        assert result.edges == ()

    def test_empty_graph(self, empty_graph):
        result = extract_subgraph(empty_graph, SubgraphOptions(root_nodes=["a"]))
        assert result.nodes == ()

    def test_invalid_direction_rejected(self):
        with pytest.raises(ValueError):
            TraversalOptions(direction="sideways")


class TestExtractionMetadata:
    def test_provenance_metadata(self, chain_graph):
        result = extract_subgraph(chain_graph, SubgraphOptions(root_nodes=["n1", "n2"]))
        assert result.metadata["extracted_from"] == "chain"
        assert result.metadata["root_nodes"] == ["n1", "n2"]
        assert result.metadata["description"] == "Subgraph extracted from n1, n2"
        # source metadata overrides the synthesized name
        assert result.metadata["name"] == "chain"

    def test_synthesized_name_without_source_metadata(self):
        graph = Graph(nodes=[GraphNode(id="a")])
        result = extract_subgraph(graph, SubgraphOptions(root_nodes=["a"]))
        assert result.metadata["name"] == "Subgraph from Unknown"

    def test_auto_position(self, chain_graph):
        result = extract_subgraph(
            chain_graph,
            SubgraphOptions(
                root_nodes=["n1"],
                auto_position=True,
                layout_options=LayoutOptions(iterations=20, seed=3),
            ),
        )
        assert all(node.position is not None for node in result.nodes)
        assert all(node.position is None for node in chain_graph.nodes)

    def test_auto_position_requires_layout_options(self, chain_graph):
        result = extract_subgraph(
            chain_graph, SubgraphOptions(root_nodes=["n1"], auto_position=True)
        )
        assert all(node.position is None for node in result.nodes)


class TestTraverseGraph:
    def test_breadth_first_paths(self, star_graph):
        result = traverse_graph(star_graph, "hub")
        assert [node.id for node in result.nodes] == ["hub", "a", "b", "c", "d"]
        assert result.paths["d"].node_ids == ("hub", "c", "d")
        assert result.paths["d"].distance == 2
        assert result.paths["hub"].distance == 0
        assert result.statistics.max_depth_reached == 2

    def test_depth_first_order(self, star_graph):
        result = traverse_graph(
            star_graph, "hub", TraversalQuery(strategy=TraversalStrategy.DEPTH_FIRST)
        )
        assert [node.id for node in result.nodes] == ["hub", "c", "d", "b", "a"]

    def test_edge_ids_use_edge_key(self, chain_graph):
        result = traverse_graph(chain_graph, "n1", TraversalQuery(direction="outbound"))
        assert result.paths["n3"].edge_ids == ("n1-n2", "n2-n3")

    def test_edge_types_are_strict(self, star_graph):
        result = traverse_graph(star_graph, "hub", TraversalQuery(edge_types=["HAS"]))
        assert [node.id for node in result.nodes] == ["hub", "a", "b"]

    def test_filters(self, star_graph):
        result = traverse_graph(
            star_graph,
            "hub",
            TraversalQuery(
                node_filter=lambda node: node.type != "Other",
                edge_filter=lambda edge: edge.label != "LINK",
            ),
        )
        assert [node.id for node in result.nodes] == ["hub", "a", "b"]
        assert result.statistics.edges_traversed == 2

    def test_exclude_start_node(self, chain_graph):
        result = traverse_graph(
            chain_graph, "n1", TraversalQuery(max_depth=1, include_start_node=False)
        )
        assert [node.id for node in result.nodes] == ["n2"]
        assert result.statistics.nodes_visited == 2

    def test_limit(self, chain_graph):
        result = traverse_graph(chain_graph, "n1", TraversalQuery(limit=3))
        assert [node.id for node in result.nodes] == ["n1", "n2", "n3"]
        assert set(result.paths) == {"n1", "n2", "n3"}
        assert len(result.edges) == 2

    def test_missing_start(self, chain_graph):
        result = traverse_graph(chain_graph, "missing")
        assert result.nodes == []
        assert result.statistics.nodes_visited == 0
