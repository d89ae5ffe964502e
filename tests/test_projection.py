"""
Tests for projecting triples into the node/edge view model.
"""

import pytest

from rdf_graphview.layout import PositionCache
from rdf_graphview.namespaces import FOAF, RDF, RDFS, NamespaceRegistry
from rdf_graphview.projection import (
    GraphProjector,
    apply_positions,
    humanize,
    local_name,
)
from rdf_graphview.store import TripleStore


@pytest.fixture
def projector():
    return GraphProjector()


# =============================================================================
# Label helpers
# =============================================================================

class TestHumanize:
    @pytest.mark.parametrize("identifier,expected", [
        ("http://example.org/people/adaLovelace", "ada Lovelace"),
        ("http://example.org/ns#hasFriend", "has Friend"),
        ("ex:works_for", "works for"),
        ("http://example.org/people/grace-hopper", "grace hopper"),
        ("knows", "knows"),
        ("http://example.org/things/", "things"),
    ])
    def test_humanize(self, identifier, expected):
        assert humanize(identifier) == expected

    def test_local_name(self):
        assert local_name("http://example.org/a/b") == "b"
        assert local_name("foaf:name") == "name"
        assert local_name("_:b0") == "_:b0"


# =============================================================================
# Projection
# =============================================================================

class TestProject:
    def test_two_people(self, projector, people_store):
        view = projector.project({"n1", "n2"}, people_store)
        assert [(n.id, n.label, n.type) for n in view.nodes] == [
            ("n1", "Ada", "Person"),
            ("n2", "Bob", "Person"),
        ]
        assert len(view.edges) == 1
        edge = view.edges[0]
        assert (edge.source, edge.target, edge.predicate) == ("n1", "n2", "knows")
        assert edge.id == "n1-knows-n2"
        assert edge.label == "knows"

    def test_hidden_endpoint_drops_edge(self, projector, people_store):
        view = projector.project({"n1"}, people_store)
        assert [n.id for n in view.nodes] == ["n1"]
        assert view.edges == []

    def test_edges_only_between_visible_nodes(self, projector):
        store = TripleStore()
        for s, o in [("a", "b"), ("b", "c"), ("c", "a"), ("a", "d")]:
            store.add(s, "link", o)
        view = projector.project({"a", "b", "c"}, store)
        ids = view.node_ids
        for edge in view.edges:
            assert edge.source in ids
            assert edge.target in ids
        assert len(view.edges) == 3

    def test_idempotent(self, projector, people_store):
        first = projector.project({"n2", "n1"}, people_store)
        second = projector.project(["n1", "n2"], people_store)
        assert first.to_dict() == second.to_dict()

    def test_duplicate_triples_give_one_edge(self, projector):
        store = TripleStore()
        store.add("a", "link", "b")
        store.add("a", "link", "b")
        view = projector.project({"a", "b"}, store)
        assert [e.id for e in view.edges] == ["a-link-b"]

    def test_label_and_type_values_are_not_edges(self, projector):
        store = TripleStore()
        store.add("n1", "label", "n2")
        store.add("n1", "type", "n2")
        store.add("n1", RDF + "type", "n2")
        store.add("n1", "knows", "n2")
        store.add("n2", "label", "Bob")
        view = projector.project({"n1", "n2"}, store)
        assert [e.predicate for e in view.edges] == ["knows"]
        assert view.node("n1").label == "n2"

    def test_custom_label_predicate_not_an_edge(self, people_store):
        projector = GraphProjector(label_predicates=["knows"])
        view = projector.project({"n1", "n2"}, people_store)
        assert view.edges == []

    def test_unknown_id_still_gets_node(self, projector, people_store):
        view = projector.project({"ghost"}, people_store)
        node = view.nodes[0]
        assert node.label == "ghost"
        assert node.type == "Resource"
        assert node.properties == {}

    def test_empty(self, projector, people_store):
        view = projector.project(set(), people_store)
        assert view.nodes == [] and view.edges == []

    def test_source_not_mutated(self, projector, people_store):
        projector.project({"n1", "n2"}, people_store)
        assert len(people_store) == 5


class TestNodeAttributes:
    def test_label_falls_back_to_identifier(self, projector):
        store = TripleStore()
        alice = "http://example.org/people/aliceSmith"
        store.add(alice, FOAF + "knows", "http://example.org/people/bob")
        node = projector.project({alice}, store).nodes[0]
        assert node.label == "alice Smith"

    def test_rdfs_label_and_rdf_type(self, projector):
        store = TripleStore()
        store.add("ex:alice", RDFS + "label", "Alice")
        store.add("ex:alice", RDF + "type", FOAF + "Person")
        node = projector.project({"ex:alice"}, store).nodes[0]
        assert node.label == "Alice"
        assert node.type == "Person"

    def test_label_predicate_priority(self, projector):
        store = TripleStore()
        store.add("x", RDFS + "label", "Formal")
        store.add("x", "label", "Short")
        node = projector.project({"x"}, store).nodes[0]
        assert node.label == "Short"

    def test_custom_predicates(self, people_store):
        projector = GraphProjector(
            label_predicates=["knows"],
            type_predicates=["missing"],
            default_type="Thing",
        )
        node = projector.project({"n1"}, people_store).nodes[0]
        assert node.label == "n2"
        assert node.type == "Thing"

    def test_properties_single_and_multi_valued(self, projector, people_store):
        people_store.add("n1", "email", "ada@example.org")
        people_store.add("n1", "email", "ada@work.example.org")
        props = projector.project({"n1"}, people_store).nodes[0].properties
        assert props["label"] == "Ada"
        assert props["knows"] == "n2"
        assert props["email"] == ["ada@example.org", "ada@work.example.org"]

    def test_property_keys_compacted(self):
        store = TripleStore()
        store.add("ex:alice", FOAF + "name", "Alice")
        projector = GraphProjector(namespaces=NamespaceRegistry())
        props = projector.project({"ex:alice"}, store).nodes[0].properties
        assert props == {"foaf:name": "Alice"}

    def test_edge_label_humanized(self, projector):
        store = TripleStore()
        store.add("ex:a", "http://example.org/ns#worksWith", "ex:b")
        view = projector.project({"ex:a", "ex:b"}, store)
        assert view.edges[0].label == "works With"


class TestResourceIds:
    def test_subjects_and_non_literal_objects(self, people_turtle):
        store = TripleStore()
        store.load(people_turtle)
        ids = GraphProjector.resource_ids(store)
        assert "http://example.org/alice" in ids
        assert "http://example.org/bob" in ids
        assert FOAF + "Person" in ids
        assert "Alice" not in ids

    def test_project_all(self, projector, people_store):
        view = projector.project_all(people_store)
        assert [n.id for n in view.nodes] == ["n1", "n2"]
        assert len(view.edges) == 1


class TestApplyPositions:
    def test_copies_cached_positions(self, projector, people_store):
        cache = PositionCache({"n1": (10.0, 20.0)})
        view = apply_positions(projector.project({"n1", "n2"}, people_store), cache)
        assert (view.node("n1").x, view.node("n1").y) == (10.0, 20.0)
        assert (view.node("n2").x, view.node("n2").y) == (0.0, 0.0)
