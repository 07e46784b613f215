"""Tests for the graph data model.

Test categories:
- TestGraphDataTypes: node/edge/graph dataclasses, immutability, clone, edge key
- TestGraphConversion: from_dict / to_dict and input validation
"""

from __future__ import annotations

import pytest

from kg_transform import (
    Graph,
    GraphEdge,
    GraphNode,
    InvalidGraphError,
    Position,
    TraversalResult,
)


class TestGraphDataTypes:
    """Verify the immutable data structures behave correctly."""

    def test_graph_node_defaults(self):
        node = GraphNode(id="n1")
        assert node.label is None
        assert node.type is None
        assert node.position is None
        assert node.properties == {}
        assert node.style == {}

    def test_graph_node_frozen(self):
        node = GraphNode(id="n1")
        with pytest.raises(AttributeError):
            node.id = "n2"  # type: ignore[misc]

    def test_clone_copies_mappings(self):
        node = GraphNode(id="n1", properties={"x": 1}, style={"color": "red"})
        copy = node.clone(label="One")
        copy.properties["x"] = 2
        copy.style["color"] = "blue"
        assert node.properties == {"x": 1}
        assert node.style == {"color": "red"}
        assert copy.label == "One"

    def test_edge_key_defaults_to_endpoints(self):
        assert GraphEdge(source="a", target="b").key == "a-b"
        assert GraphEdge(source="a", target="b", id="e1").key == "e1"

    def test_graph_stores_tuples(self):
        graph = Graph(nodes=[GraphNode(id="a")], edges=[])
        assert isinstance(graph.nodes, tuple)
        assert isinstance(graph.edges, tuple)
        assert graph.node_ids() == ["a"]
        assert graph.get_node("a").id == "a"
        assert graph.get_node("missing") is None

    def test_traversal_result_defaults(self):
        result = TraversalResult()
        assert result.nodes == []
        assert result.edges == []
        assert result.paths == {}
        assert result.statistics.nodes_visited == 0


class TestGraphConversion:
    """Dictionary boundary used by the content and rendering collaborators."""

    def test_from_dict_parses_all_fields(self):
        graph = Graph.from_dict(
            {
                "nodes": [
                    {"id": "a", "label": "A", "type": "T", "position": {"x": 1, "y": 2},
                     "properties": {"p": 1}, "style": {"size": 4}},
                    {"id": "b"},
                ],
                "edges": [{"source": "a", "target": "b", "label": "L", "weight": 2,
                           "directed": True}],
                "metadata": {"name": "g"},
            }
        )
        a = graph.get_node("a")
        assert a.position == Position(x=1.0, y=2.0)
        assert a.properties == {"p": 1}
        assert graph.edges[0].weight == 2.0
        assert graph.edges[0].directed is True
        assert graph.metadata == {"name": "g"}

    def test_to_dict_omits_absent_fields(self):
        graph = Graph(
            nodes=[GraphNode(id="a", position=Position(3, 4)), GraphNode(id="b")],
            edges=[GraphEdge(source="a", target="b")],
        )
        data = graph.to_dict()
        assert data["nodes"][0] == {"id": "a", "position": {"x": 3, "y": 4}}
        assert data["nodes"][1] == {"id": "b"}
        assert data["edges"][0] == {"source": "a", "target": "b"}
        assert "metadata" not in data

    def test_to_dict_round_trip(self, social_graph):
        assert Graph.from_dict(social_graph.to_dict()) == social_graph

    def test_missing_node_id_rejected(self):
        with pytest.raises(InvalidGraphError):
            Graph.from_dict({"nodes": [{"label": "no id"}]})

    def test_duplicate_node_id_rejected(self):
        with pytest.raises(InvalidGraphError, match="duplicate"):
            Graph.from_dict({"nodes": [{"id": "a"}, {"id": "a"}]})

    def test_edge_without_target_rejected(self):
        with pytest.raises(InvalidGraphError):
            Graph.from_dict({"nodes": [{"id": "a"}], "edges": [{"source": "a"}]})

    def test_empty_dict(self):
        graph = Graph.from_dict({})
        assert graph.nodes == ()
        assert graph.edges == ()
        assert graph.metadata is None
