"""Pytest configuration and shared graph fixtures for kg-transform-lib tests."""

import pytest

from kg_transform import Graph, GraphEdge, GraphNode


@pytest.fixture
def chain_graph():
    """Directed chain n1 -> n2 -> n3 -> n4 -> n5."""
    nodes = [GraphNode(id=f"n{i}", type="Step") for i in range(1, 6)]
    edges = [GraphEdge(source=f"n{i}", target=f"n{i + 1}", label="NEXT") for i in range(1, 5)]
    return Graph(nodes=nodes, edges=edges, metadata={"name": "chain"})


@pytest.fixture
def social_graph():
    """Small typed graph for filter/analysis tests.

    Graph structure:
        alice --KNOWS--> bob --KNOWS--> carol
        alice --WORKS_AT--> acme
        carol --WORKS_AT--> acme
        dave (isolated, no type)
    """
    return Graph.from_dict(
        {
            "nodes": [
                {"id": "alice", "label": "Alice", "type": "Person",
                 "properties": {"team": "core", "score": 10}},
                {"id": "bob", "label": "Bob", "type": "Person",
                 "properties": {"team": "core", "score": 3}},
                {"id": "carol", "label": "Carol", "type": "Person",
                 "properties": {"team": "infra", "score": 7}},
                {"id": "acme", "label": "Acme", "type": "Organization"},
                {"id": "dave"},
            ],
            "edges": [
                {"source": "alice", "target": "bob", "label": "KNOWS",
                 "properties": {"team": "core"}},
                {"source": "bob", "target": "carol", "label": "KNOWS"},
                {"source": "alice", "target": "acme", "label": "WORKS_AT"},
                {"source": "carol", "target": "acme", "label": "WORKS_AT"},
            ],
            "metadata": {"name": "social", "description": "people and employers"},
        }
    )


@pytest.fixture
def empty_graph():
    return Graph()
