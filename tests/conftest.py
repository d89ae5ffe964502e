"""
Shared fixtures for rdf-graphview tests.
"""

import pytest

from rdf_graphview.store import TripleStore


PEOPLE_TURTLE = """
@prefix ex: <http://example.org/> .
@prefix foaf: <http://xmlns.com/foaf/0.1/> .

ex:alice a foaf:Person ;
    foaf:name "Alice" ;
    foaf:knows ex:bob .

ex:bob a foaf:Person ;
    foaf:name "Bob" .
"""


@pytest.fixture
def people_store():
    """Two people, one link between them, bare-token identifiers."""
    store = TripleStore()
    store.add("n1", "type", "Person")
    store.add("n1", "label", "Ada")
    store.add("n1", "knows", "n2")
    store.add("n2", "type", "Person")
    store.add("n2", "label", "Bob")
    return store


@pytest.fixture
def people_turtle():
    return PEOPLE_TURTLE
