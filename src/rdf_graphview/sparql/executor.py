"""
Query executor for the supported SPARQL subset.

Evaluation is a nested-loop join over the WHERE patterns in the order they
are written: the binding set starts as one empty binding and every pattern
expands each current binding by the store triples matching it after bound
variables have been substituted. There is no join reordering.

Result rows keep the store's match order (insertion order), so re-running a
query on an unchanged store returns the same rows in the same order.
Duplicate rows are not eliminated.
"""

import logging
from dataclasses import dataclass, field
from itertools import product
from typing import Any, Optional, Union, TYPE_CHECKING

from rdf_graphview.errors import (
    GraphViewError,
    QueryParseError,
    UnboundProjectionError,
)
from rdf_graphview.models import ObjectType
from rdf_graphview.sparql.ast import (
    SelectQuery, TriplePattern, Variable, IRI, Literal, Term,
)
from rdf_graphview.sparql.parser import parse_query

if TYPE_CHECKING:
    from rdf_graphview.store import TripleStore

logger = logging.getLogger(__name__)

Binding = dict[str, str]


@dataclass
class QueryResult:
    """
    Outcome of executing a query.

    ``error`` is None on success; otherwise it holds the QueryParseError or
    UnboundProjectionError and ``bindings`` is empty.
    """
    variables: list[str] = field(default_factory=list)
    bindings: list[Binding] = field(default_factory=list)
    error: Optional[GraphViewError] = None
    identifiers: set[str] = field(default_factory=set)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __len__(self) -> int:
        return len(self.bindings)

    def visible_ids(self) -> list[str]:
        """Distinct resource identifiers across all rows, in first-seen order."""
        seen: dict[str, None] = {}
        for row in self.bindings:
            for name in self.variables:
                value = row.get(name)
                if value is not None and value in self.identifiers:
                    seen.setdefault(value, None)
        return list(seen)

    def to_dict(self) -> dict[str, Any]:
        return {
            "variables": self.variables,
            "bindings": self.bindings,
            "count": len(self.bindings),
            "error": str(self.error) if self.error else None,
            "error_type": type(self.error).__name__ if self.error else None,
        }


class SPARQLExecutor:
    """
    Executes SELECT queries against a TripleStore.

    Example:
        executor = SPARQLExecutor(store)
        result = executor.execute("SELECT ?x WHERE { ?x type Person }")
        result.bindings   # [{"x": "n1"}, {"x": "n2"}]
    """

    def __init__(self, store: "TripleStore"):
        self.store = store

    def execute(self, query_text: str) -> QueryResult:
        """
        Parse and evaluate a query, reporting failures as values.

        Returns:
            QueryResult with bindings, or with ``error`` set
        """
        try:
            return self.select(query_text)
        except (QueryParseError, UnboundProjectionError) as e:
            logger.warning(f"Query rejected: {e}")
            return QueryResult(error=e)

    def select(self, query: Union[str, SelectQuery]) -> QueryResult:
        """
        Evaluate a query, raising on failure.

        Raises:
            QueryParseError: If the text does not match the supported grammar
            UnboundProjectionError: If a SELECT variable appears in no pattern
        """
        if isinstance(query, str):
            query = parse_query(query)

        unbound = query.unbound_variables()
        if unbound:
            raise UnboundProjectionError([v.name for v in unbound])

        identifiers: set[str] = set()
        rows = self._evaluate(query, identifiers)

        projection = [v.name for v in query.projection()]
        bindings = [{name: row[name] for name in projection} for row in rows]
        if query.limit is not None:
            bindings = bindings[: query.limit]

        logger.debug(
            f"Evaluated {len(query.where.patterns)} pattern(s): {len(bindings)} row(s)"
        )
        return QueryResult(variables=projection, bindings=bindings, identifiers=identifiers)

    # =========================================================================
    # Evaluation
    # =========================================================================

    def _evaluate(self, query: SelectQuery, identifiers: set[str]) -> list[Binding]:
        bindings: list[Binding] = [{}]
        for pattern in query.where.patterns:
            expanded: list[Binding] = []
            for binding in bindings:
                expanded.extend(self._extend(pattern, binding, query.prefixes, identifiers))
            bindings = expanded
            if not bindings:
                break
        return bindings

    def _extend(
        self,
        pattern: TriplePattern,
        binding: Binding,
        prefixes: dict[str, str],
        identifiers: set[str],
    ) -> list[Binding]:
        """Expand one binding by every triple matching ``pattern``."""
        candidates = [self._candidates(term, binding, prefixes) for term in pattern.terms()]

        matches = []
        for s, p, o in product(*candidates):
            matches = self.store.match(s, p, o)
            if matches:
                break

        results = []
        for triple in matches:
            extended = dict(binding)
            consistent = True
            values = (triple.subject, triple.predicate, triple.object)
            for term, value in zip(pattern.terms(), values):
                if not isinstance(term, Variable):
                    continue
                current = extended.get(term.name)
                if current is None:
                    extended[term.name] = value
                elif current != value:
                    # Repeated variable inside one pattern, e.g. ?x p ?x
                    consistent = False
                    break
            if not consistent:
                continue

            identifiers.add(triple.subject)
            if self.store.has_subject(triple.predicate):
                identifiers.add(triple.predicate)
            if triple.object_type != ObjectType.LITERAL or self.store.has_subject(triple.object):
                identifiers.add(triple.object)
            results.append(extended)
        return results

    def _candidates(
        self,
        term: Term,
        binding: Binding,
        prefixes: dict[str, str],
    ) -> list[Optional[str]]:
        """
        Concrete values to try for one pattern position.

        Variables yield their bound value, or None (wildcard) when unbound.
        Identifiers are tried as written and in expanded/compacted form.
        """
        if isinstance(term, Variable):
            return [binding.get(term.name)]
        if isinstance(term, Literal):
            return [term.value]

        assert isinstance(term, IRI)
        forms: list[Optional[str]] = []
        if term.prefixed:
            prefix, _, local = term.value.partition(":")
            if prefix in prefixes:
                forms.append(prefixes[prefix] + local)
            forms.append(self.store.namespaces.expand(term.value))
            forms.append(term.value)
        else:
            forms.append(term.value)
            forms.append(self.store.namespaces.compact(term.value))
        return list(dict.fromkeys(forms))


def execute_sparql(store: "TripleStore", query_text: str) -> QueryResult:
    """Convenience wrapper: evaluate ``query_text`` against ``store``."""
    return SPARQLExecutor(store).execute(query_text)
