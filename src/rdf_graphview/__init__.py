"""
rdf-graphview: project RDF triples into laid-out node-link diagrams.

Indexed triple store, conjunctive SPARQL subset for visibility queries,
deterministic force-directed layout and viewport fitting.
"""

__version__ = "0.1.0"

from rdf_graphview.errors import (
    GraphViewError,
    ParseError,
    QueryParseError,
    UnboundProjectionError,
    NamespaceConflictError,
    LayoutConfigError,
)
from rdf_graphview.models import (
    Triple,
    ObjectType,
    ViewNode,
    ViewEdge,
    GraphView,
)
from rdf_graphview.namespaces import NamespaceRegistry
from rdf_graphview.store import TripleStore
from rdf_graphview.sparql import parse_query, SPARQLExecutor, QueryResult, execute_sparql
from rdf_graphview.formats import parse, ParseResult
from rdf_graphview.projection import GraphProjector
from rdf_graphview.layout import (
    LayoutParams,
    LayoutEngine,
    PositionCache,
    ViewportTransform,
    fit,
)
from rdf_graphview.visibility import VisibilitySet, VisibilitySetManager
from rdf_graphview.config import EngineConfig
from rdf_graphview.engine import GraphViewEngine

__all__ = [
    # Errors
    "GraphViewError",
    "ParseError",
    "QueryParseError",
    "UnboundProjectionError",
    "NamespaceConflictError",
    "LayoutConfigError",
    # Models
    "Triple",
    "ObjectType",
    "ViewNode",
    "ViewEdge",
    "GraphView",
    # Store & queries
    "NamespaceRegistry",
    "TripleStore",
    "parse_query",
    "SPARQLExecutor",
    "QueryResult",
    "execute_sparql",
    "parse",
    "ParseResult",
    # Projection & layout
    "GraphProjector",
    "LayoutParams",
    "LayoutEngine",
    "PositionCache",
    "ViewportTransform",
    "fit",
    # Engine
    "VisibilitySet",
    "VisibilitySetManager",
    "EngineConfig",
    "GraphViewEngine",
]
