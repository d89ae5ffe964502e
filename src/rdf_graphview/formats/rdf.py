"""
RDF ingestion through rdflib.

rdflib is the external decoder; this module maps its terms onto the store's
canonical ``(subject, predicate, object, object_type)`` shape and reports
decoder failures as values instead of raising.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from rdflib import BNode, Graph, Literal, URIRef

from rdf_graphview.errors import ParseError
from rdf_graphview.models import ObjectType, Triple

logger = logging.getLogger(__name__)

# Format hints and MIME types -> rdflib parser names
FORMAT_MAP = {
    "turtle": "turtle",
    "ttl": "turtle",
    "text/turtle": "turtle",
    "n3": "n3",
    "text/n3": "n3",
    "nt": "nt",
    "ntriples": "nt",
    "n-triples": "nt",
    "application/n-triples": "nt",
    "nquads": "nquads",
    "nq": "nquads",
    "application/n-quads": "nquads",
    "trig": "trig",
    "application/trig": "trig",
    "xml": "xml",
    "rdf": "xml",
    "rdf/xml": "xml",
    "application/rdf+xml": "xml",
    "json-ld": "json-ld",
    "jsonld": "json-ld",
    "application/ld+json": "json-ld",
}

DEFAULT_FORMAT = "turtle"


def resolve_format(format_hint: Optional[str]) -> str:
    """Map a user-supplied format hint to an rdflib format name."""
    if not format_hint:
        return DEFAULT_FORMAT
    return FORMAT_MAP.get(format_hint.strip().lower(), DEFAULT_FORMAT)


@dataclass
class ParseResult:
    """Outcome of decoding raw RDF text."""
    triples: list[Triple] = field(default_factory=list)
    format: str = DEFAULT_FORMAT
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "triple_count": len(self.triples),
            "triples": [t.to_dict() for t in self.triples],
            "error": str(self.error) if self.error else None,
        }


def _term(node: Any) -> tuple[str, ObjectType]:
    if isinstance(node, BNode):
        return f"_:{node}", ObjectType.BLANK
    if isinstance(node, URIRef):
        return str(node), ObjectType.URI
    if isinstance(node, Literal):
        return str(node), ObjectType.LITERAL
    return str(node), ObjectType.LITERAL


def to_triple(s: Any, p: Any, o: Any) -> Triple:
    """Convert one rdflib statement to a Triple."""
    subject, _ = _term(s)
    predicate, _ = _term(p)
    obj, kind = _term(o)
    return Triple(subject, predicate, obj, kind)


def parse(raw_text: str, format_hint: Optional[str] = DEFAULT_FORMAT, base_uri: Optional[str] = None) -> ParseResult:
    """
    Decode RDF text into triples.

    Triples are returned sorted by (subject, predicate, object) so that
    repeated loads of the same document insert in the same order.

    Args:
        raw_text: Serialized RDF document
        format_hint: Format name, file extension or MIME type
        base_uri: Base IRI for resolving relative references

    Returns:
        ParseResult; ``error`` is set and ``triples`` empty on failure
    """
    rdf_format = resolve_format(format_hint)
    graph = Graph()
    try:
        graph.parse(data=raw_text, format=rdf_format, publicID=base_uri)
    except Exception as e:
        logger.warning(f"Failed to parse RDF data as {rdf_format}: {e}")
        return ParseResult(
            format=rdf_format,
            error=ParseError(
                f"Failed to parse RDF data: {e}",
                format=rdf_format,
                detail=str(e),
            ),
        )

    triples = sorted((to_triple(s, p, o) for s, p, o in graph), key=Triple.key)
    return ParseResult(triples=triples, format=rdf_format)


def parse_or_raise(raw_text: str, format_hint: Optional[str] = DEFAULT_FORMAT) -> list[Triple]:
    """Like ``parse`` but raises ParseError on failure."""
    result = parse(raw_text, format_hint)
    if result.error is not None:
        raise result.error
    return result.triples
