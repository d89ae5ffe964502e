"""
Tests for the core data models.
"""

import pytest

from rdf_graphview.models import (
    GraphView,
    ObjectType,
    Triple,
    ViewEdge,
    ViewNode,
    edge_id,
)


class TestTriple:
    def test_equality_ignores_id(self):
        assert Triple("a", "p", "b", triple_id=1) == Triple("a", "p", "b", triple_id=2)

    def test_str(self):
        assert str(Triple("a", "p", "b")) == '<a> <p> "b" .'
        assert str(Triple("a", "p", "b", ObjectType.URI)) == "<a> <p> <b> ."

    def test_to_dict(self):
        data = Triple("a", "p", "b", ObjectType.BLANK, triple_id=3).to_dict()
        assert data == {
            "id": 3,
            "subject": "a",
            "predicate": "p",
            "object": "b",
            "object_type": "blank",
        }

    def test_object_type_from_value(self):
        assert ObjectType.from_value("URI") is ObjectType.URI
        assert ObjectType.from_value(ObjectType.BLANK) is ObjectType.BLANK
        with pytest.raises(ValueError):
            ObjectType.from_value("number")


class TestViewModel:
    def test_edge_id(self):
        assert edge_id("n1", "knows", "n2") == "n1-knows-n2"

    def test_node_copy_is_independent(self):
        node = ViewNode(id="a", label="A", properties={"tag": ["x", "y"]})
        clone = node.copy()
        clone.properties["tag"].append("z")
        clone.x = 5.0
        assert node.properties["tag"] == ["x", "y"]
        assert node.x == 0.0

    def test_graph_view_to_dict(self):
        view = GraphView(
            nodes=[ViewNode(id="a", label="A"), ViewNode(id="b", label="B")],
            edges=[ViewEdge(id="a-p-b", source="a", target="b", predicate="p", label="p")],
        )
        data = view.to_dict()
        assert data["node_count"] == 2
        assert data["edge_count"] == 1
        assert data["edges"][0]["source"] == "a"
        assert view.node("b").label == "B"
        assert view.node("zzz") is None
        assert view.node_ids == {"a", "b"}
