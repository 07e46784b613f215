"""Tests for structural metrics.

Test categories:
- TestDegrees: in/out/total degree, isolated nodes, dangling endpoints, degree sum
- TestConnectivity: BFS connectivity scenarios
- TestShortestPath: directed/undirected BFS paths, edge type filter, missing nodes
"""

from __future__ import annotations

from kg_transform import (
    Graph,
    GraphEdge,
    GraphNode,
    degrees,
    find_shortest_path,
    in_degrees,
    is_connected,
    out_degrees,
)


def _graph(node_ids, pairs):
    return Graph(
        nodes=[GraphNode(id=node_id) for node_id in node_ids],
        edges=[GraphEdge(source=s, target=t) for s, t in pairs],
    )


class TestDegrees:
    def test_chain_degrees(self, chain_graph):
        assert in_degrees(chain_graph) == {"n1": 0, "n2": 1, "n3": 1, "n4": 1, "n5": 1}
        assert out_degrees(chain_graph) == {"n1": 1, "n2": 1, "n3": 1, "n4": 1, "n5": 0}
        assert degrees(chain_graph) == {"n1": 1, "n2": 2, "n3": 2, "n4": 2, "n5": 1}

    def test_isolated_node_maps_to_zero(self, social_graph):
        assert degrees(social_graph)["dave"] == 0
        assert in_degrees(social_graph)["dave"] == 0

    def test_degree_sum_equals_edge_count(self, social_graph):
        edge_count = len(social_graph.edges)
        assert sum(in_degrees(social_graph).values()) == edge_count
        assert sum(out_degrees(social_graph).values()) == edge_count

    def test_dangling_endpoints_still_counted(self):
        graph = _graph(["a"], [("a", "ghost")])
        incoming = in_degrees(graph)
        assert incoming == {"a": 0, "ghost": 1}
        assert sum(incoming.values()) == 1
        assert "ghost" not in degrees(graph)

    def test_self_loop_counts_twice(self):
        graph = _graph(["a"], [("a", "a")])
        assert degrees(graph) == {"a": 2}

    def test_empty_graph(self, empty_graph):
        assert degrees(empty_graph) == {}
        assert in_degrees(empty_graph) == {}


class TestConnectivity:
    def test_isolated_node_disconnects(self):
        graph = _graph(["A", "B", "C", "D"], [("A", "B"), ("B", "C")])
        assert is_connected(graph) is False

    def test_removing_isolated_node_connects(self):
        graph = _graph(["A", "B", "C"], [("A", "B"), ("B", "C")])
        assert is_connected(graph) is True

    def test_adding_edge_connects(self):
        graph = _graph(["A", "B", "C", "D"], [("A", "B"), ("B", "C"), ("C", "D")])
        assert is_connected(graph) is True

    def test_direction_is_ignored(self):
        graph = _graph(["A", "B", "C"], [("B", "A"), ("C", "B")])
        assert is_connected(graph) is True

    def test_empty_graph_is_connected(self, empty_graph):
        assert is_connected(empty_graph) is True

    def test_dangling_edge_does_not_connect(self):
        graph = _graph(["A", "B"], [("A", "ghost"), ("ghost", "B")])
        assert is_connected(graph) is False


class TestShortestPath:
    def test_undirected_path(self, chain_graph):
        assert find_shortest_path(chain_graph, "n5", "n2") == ["n5", "n4", "n3", "n2"]

    def test_directed_path_blocked(self, chain_graph):
        assert find_shortest_path(chain_graph, "n5", "n2", directed=True) == []
        assert find_shortest_path(chain_graph, "n1", "n3", directed=True) == ["n1", "n2", "n3"]

    def test_prefers_fewest_hops(self):
        graph = _graph(["a", "b", "c", "d"], [("a", "b"), ("b", "c"), ("c", "d"), ("a", "d")])
        assert find_shortest_path(graph, "a", "d") == ["a", "d"]

    def test_edge_type_filter(self, social_graph):
        path = find_shortest_path(social_graph, "alice", "carol", edge_types=["KNOWS"])
        assert path == ["alice", "bob", "carol"]

    def test_missing_endpoint(self, chain_graph):
        assert find_shortest_path(chain_graph, "n1", "nope") == []

    def test_same_node(self, chain_graph):
        assert find_shortest_path(chain_graph, "n3", "n3") == ["n3"]
