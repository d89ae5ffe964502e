"""
RDF ingestion formats.
"""

from rdf_graphview.formats.rdf import (
    FORMAT_MAP,
    ParseResult,
    parse,
    parse_or_raise,
    resolve_format,
)

__all__ = [
    "FORMAT_MAP",
    "ParseResult",
    "parse",
    "parse_or_raise",
    "resolve_format",
]
