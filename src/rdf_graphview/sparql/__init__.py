"""
SPARQL subset: conjunctive SELECT queries over the triple store.
"""

from rdf_graphview.sparql.ast import (
    SelectQuery,
    TriplePattern,
    WhereClause,
    Variable,
    IRI,
    Literal,
    Term,
)
from rdf_graphview.sparql.parser import SPARQLParser, parse_query
from rdf_graphview.sparql.executor import (
    SPARQLExecutor,
    QueryResult,
    execute_sparql,
)

__all__ = [
    "SelectQuery",
    "TriplePattern",
    "WhereClause",
    "Variable",
    "IRI",
    "Literal",
    "Term",
    "SPARQLParser",
    "parse_query",
    "SPARQLExecutor",
    "QueryResult",
    "execute_sparql",
]
