"""
Tests for the TripleStore, its position indexes and statistics.
"""

import polars as pl
import pytest

from rdf_graphview.models import ObjectType, Triple
from rdf_graphview.namespaces import NamespaceRegistry
from rdf_graphview.storage.indexing import PositionIndex
from rdf_graphview.store import TripleStore


@pytest.fixture
def store():
    s = TripleStore()
    s.add("ex:a", "ex:knows", "ex:b")
    s.add("ex:a", "ex:knows", "ex:c")
    s.add("ex:a", "ex:name", "A")
    s.add("ex:b", "ex:knows", "ex:c")
    s.add("ex:c", "ex:name", "C")
    return s


# =============================================================================
# PositionIndex
# =============================================================================

class TestPositionIndex:
    def test_lookup_in_insertion_order(self):
        idx = PositionIndex("subject")
        idx.add("s", 3)
        idx.add("s", 1)
        idx.add("t", 2)
        assert idx.lookup("s") == [3, 1]
        assert idx.count("s") == 2
        assert idx.lookup("missing") == []

    def test_lookup_returns_copy(self):
        idx = PositionIndex("object")
        idx.add("o", 0)
        idx.lookup("o").append(99)
        assert idx.lookup("o") == [0]

    def test_discard_drops_empty_keys(self):
        idx = PositionIndex("predicate")
        idx.add("p", 0)
        assert idx.discard("p", 0)
        assert "p" not in idx
        assert not idx.discard("p", 0)
        assert len(idx) == 0

    def test_stats(self):
        idx = PositionIndex("subject")
        idx.add("a", 0)
        idx.add("a", 1)
        idx.add("b", 2)
        stats = idx.stats()
        assert stats.position == "subject"
        assert stats.num_keys == 2
        assert stats.num_entries == 3
        assert stats.memory_bytes > 0


# =============================================================================
# Writes
# =============================================================================

class TestAdd:
    def test_ids_are_monotonic(self):
        s = TripleStore()
        assert s.add("a", "p", "b") == 0
        assert s.add("a", "p", "c") == 1
        assert s.add(Triple("x", "p", "y")) == 2

    def test_duplicates_coexist(self):
        s = TripleStore()
        s.add("a", "p", "b")
        s.add("a", "p", "b")
        assert len(s.match("a", "p", "b")) == 2

    def test_requires_all_parts(self):
        s = TripleStore()
        with pytest.raises(ValueError):
            s.add("a", "p")

    def test_add_many_accepts_tuples_and_triples(self):
        s = TripleStore()
        ids = s.add_many([
            ("a", "p", "b"),
            ("a", "p", "http://example.org/c", ObjectType.URI),
            Triple("d", "p", "e"),
        ])
        assert ids == [0, 1, 2]
        assert s.get(1).object_type == ObjectType.URI

    def test_explicit_object_type_wins(self):
        s = TripleStore()
        s.add("a", "p", "http://example.org/x", "literal")
        assert s.match("a")[0].object_type == ObjectType.LITERAL


class TestObjectTypeInference:
    @pytest.mark.parametrize("value,expected", [
        ("http://example.org/x", ObjectType.URI),
        ("https://example.org/x", ObjectType.URI),
        ("urn:isbn:123", ObjectType.URI),
        ("_:b0", ObjectType.BLANK),
        ("foaf:Person", ObjectType.URI),
        ("Person", ObjectType.LITERAL),
        ("hello world", ObjectType.LITERAL),
        ("42", ObjectType.LITERAL),
    ])
    def test_infer(self, value, expected):
        assert TripleStore().infer_object_type(value) == expected

    def test_unknown_prefix_is_literal(self):
        assert TripleStore().infer_object_type("nope:thing") == ObjectType.LITERAL


class TestNamespaceDetection:
    def test_new_base_registered_on_add(self):
        s = TripleStore()
        s.add("http://data.acme.com/people/alice", "http://data.acme.com/people/knows", "x")
        assert s.namespaces.prefix_for("http://data.acme.com/people/") == "acme"

    def test_shared_registry(self):
        ns = NamespaceRegistry()
        s = TripleStore(namespaces=ns)
        s.add("http://data.acme.com/a", "p", "o")
        assert "acme" in ns


class TestRemove:
    def test_remove_by_id(self, store):
        tid = store.match("ex:a", "ex:name")[0].triple_id
        assert store.remove(tid)
        assert store.match("ex:a", "ex:name") == []
        assert len(store) == 4

    def test_remove_unknown(self, store):
        assert not store.remove(1000)
        assert len(store) == 5

    def test_ids_not_reused(self, store):
        store.remove(4)
        assert store.add("ex:d", "ex:name", "D") == 5

    def test_remove_matching(self, store):
        assert store.remove_matching(predicate="ex:knows") == 3
        assert store.match(predicate="ex:knows") == []

    def test_removed_subject_no_longer_listed(self, store):
        store.remove_matching(subject="ex:c")
        assert "ex:c" not in store.subjects()
        assert not store.has_subject("ex:c")

    def test_clear(self, store):
        store.clear()
        assert len(store) == 0
        assert store.match() == []


class TestFunctionalPredicates:
    def test_defaults(self):
        s = TripleStore()
        for p in ("label", "type", "x", "y"):
            assert s.is_functional(p)
        assert not s.is_functional("knows")

    def test_last_write_wins(self, people_store):
        people_store.set_value("n1", "label", "Ada L.")
        values = [t.object for t in people_store.match("n1", "label")]
        assert values == ["Ada L."]

    def test_multi_valued_accumulates(self, people_store):
        people_store.set_value("n1", "knows", "n3")
        values = [t.object for t in people_store.match("n1", "knows")]
        assert values == ["n2", "n3"]

    def test_declare_functional(self, people_store):
        people_store.declare_functional("knows")
        people_store.set_value("n1", "knows", "n3")
        assert [t.object for t in people_store.match("n1", "knows")] == ["n3"]

    def test_custom_set(self):
        s = TripleStore(functional_predicates=["status"])
        assert s.functional_predicates == frozenset({"status"})
        s.set_value("a", "status", "draft")
        s.set_value("a", "status", "final")
        assert [t.object for t in s.match("a", "status")] == ["final"]

    def test_other_subjects_untouched(self, people_store):
        people_store.set_value("n1", "label", "X")
        assert [t.object for t in people_store.match("n2", "label")] == ["Bob"]


# =============================================================================
# Reads
# =============================================================================

class TestMatch:
    @pytest.mark.parametrize("s,p,o,expected", [
        (None, None, None, 5),
        ("ex:a", None, None, 3),
        (None, "ex:knows", None, 3),
        (None, None, "ex:c", 2),
        ("ex:a", "ex:knows", None, 2),
        ("ex:a", None, "ex:c", 1),
        (None, "ex:knows", "ex:c", 2),
        ("ex:a", "ex:knows", "ex:b", 1),
    ])
    def test_all_bound_combinations(self, store, s, p, o, expected):
        results = store.match(s, p, o)
        assert len(results) == expected
        for t in results:
            assert s is None or t.subject == s
            assert p is None or t.predicate == p
            assert o is None or t.object == o

    def test_no_match(self, store):
        assert store.match("ex:zzz") == []
        assert store.match("ex:a", "ex:knows", "ex:a") == []

    def test_insertion_order(self, store):
        ids = [t.triple_id for t in store.match(predicate="ex:knows")]
        assert ids == sorted(ids)

    def test_excludes_removed(self, store):
        store.remove(0)
        assert [t.triple_id for t in store.match("ex:a")] == [1, 2]

    def test_contains(self, store):
        assert ("ex:a", "ex:knows", "ex:b") in store
        assert Triple("ex:b", "ex:knows", "ex:c") in store
        assert ("ex:b", "ex:knows", "ex:a") not in store

    def test_distinct_terms(self, store):
        assert store.subjects() == ["ex:a", "ex:b", "ex:c"]
        assert store.predicates() == ["ex:knows", "ex:name"]
        assert store.objects() == ["ex:b", "ex:c", "A", "C"]


# =============================================================================
# DataFrame view and statistics
# =============================================================================

class TestDataFrame:
    def test_columns(self, store):
        df = store.to_dataframe()
        assert df.columns == ["triple_id", "subject", "predicate", "object", "object_type"]
        assert df.height == 5
        assert df.schema["triple_id"] == pl.Int64

    def test_cached_until_mutation(self, store):
        first = store.to_dataframe()
        assert store.to_dataframe() is first
        store.add("ex:d", "ex:name", "D")
        assert store.to_dataframe().height == 6

    def test_empty_store(self):
        df = TripleStore().to_dataframe()
        assert df.height == 0
        assert df.schema["subject"] == pl.Utf8


class TestStatistics:
    def test_counts(self, people_store):
        stats = people_store.statistics()
        assert stats.triple_count == 5
        assert stats.subject_count == 2
        assert stats.predicate_count == 3
        assert stats.literal_count == 5
        assert stats.blank_node_count == 0

    def test_empty(self):
        stats = TripleStore().statistics()
        assert stats.triple_count == 0
        assert stats.to_dict()["subject_count"] == 0

    def test_blank_nodes(self):
        s = TripleStore()
        s.add("_:b0", "p", "_:b1")
        assert s.statistics().blank_node_count == 2

    def test_degrees(self, store):
        assert store.degrees() == {"ex:a": 2, "ex:b": 2, "ex:c": 2}

    def test_degrees_ignore_literals(self, people_store):
        assert people_store.degrees() == {}


# =============================================================================
# Loading
# =============================================================================

class TestLoad:
    def test_load_turtle(self, people_turtle):
        s = TripleStore()
        result = s.load(people_turtle, "turtle")
        assert result.ok
        assert len(s) == 5
        assert s.match("http://example.org/alice", "http://xmlns.com/foaf/0.1/name")[0].object == "Alice"

    def test_failed_load_leaves_store_unchanged(self, store):
        result = store.load("this is { not turtle", "turtle")
        assert not result.ok
        assert len(store) == 5
