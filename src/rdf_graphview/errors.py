"""
Error taxonomy for rdf-graphview.

Parse and query failures are also surfaced as values (see ParseResult and
QueryResult); these exception types are what those results carry.
"""

from typing import Optional, Sequence


class GraphViewError(Exception):
    """Base class for all rdf-graphview errors."""


class ParseError(GraphViewError):
    """Raised when input facts cannot be decoded."""

    def __init__(self, message: str, format: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.format = format
        self.detail = detail


class QueryParseError(GraphViewError):
    """Raised when query text does not match the supported grammar."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class UnboundProjectionError(GraphViewError):
    """Raised when a SELECT variable never appears in any triple pattern."""

    def __init__(self, variables: Sequence[str]):
        self.variables = list(variables)
        names = ", ".join(f"?{v}" for v in self.variables)
        super().__init__(f"SELECT variable(s) not bound by any pattern: {names}")


class NamespaceConflictError(GraphViewError):
    """Raised when a prefix or base IRI is already bound to something else."""


class LayoutConfigError(GraphViewError, ValueError):
    """Raised for invalid layout parameters."""
