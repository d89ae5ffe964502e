"""
In-memory TripleStore with position indexes.

Triples are appended, never mutated. Each stored triple receives a monotonic
integer id used for explicit retraction. Retrieval by any combination of
bound/unbound positions is served from the subject, predicate and object
indexes; results always come back in insertion order.

Single-writer discipline: callers must not add or remove triples while a
multi-pattern query over the same store is being evaluated. Concurrent
``match`` calls are safe since they do not mutate.
"""

import logging
from dataclasses import replace
from typing import Iterable, Iterator, Optional, Union, TYPE_CHECKING

import polars as pl

from rdf_graphview.models import Triple, ObjectType
from rdf_graphview.namespaces import NamespaceRegistry, RDF, RDFS
from rdf_graphview.storage.indexing import PositionIndex
from rdf_graphview.storage.statistics import (
    GraphStatistics,
    compute_statistics,
    degree_frame,
)

if TYPE_CHECKING:
    from rdf_graphview.formats.rdf import ParseResult

logger = logging.getLogger(__name__)

URI_SCHEMES = ("http://", "https://", "urn:", "file://")

# Predicates with last-write-wins semantics unless the caller says otherwise
DEFAULT_FUNCTIONAL_PREDICATES = (
    "label",
    "type",
    "x",
    "y",
    f"{RDFS}label",
    f"{RDF}type",
)

_TRIPLE_SCHEMA = {
    "triple_id": pl.Int64,
    "subject": pl.Utf8,
    "predicate": pl.Utf8,
    "object": pl.Utf8,
    "object_type": pl.Utf8,
}


class TripleStore:
    """
    An append-biased in-memory triple store.

    Example:
        store = TripleStore()
        store.add("ex:alice", "foaf:knows", "ex:bob")
        store.match(subject="ex:alice")
    """

    def __init__(
        self,
        namespaces: Optional[NamespaceRegistry] = None,
        functional_predicates: Optional[Iterable[str]] = None,
    ):
        """
        Initialize an empty store.

        Args:
            namespaces: Registry used for object-type inference and prefix
                auto-detection. A fresh registry is created when omitted.
            functional_predicates: Predicates written with last-write-wins
                semantics by ``set_value``. Defaults to label/type/position.
        """
        self.namespaces = namespaces if namespaces is not None else NamespaceRegistry()
        self._triples: dict[int, Triple] = {}
        self._next_id = 0

        self._subject_index = PositionIndex("subject")
        self._predicate_index = PositionIndex("predicate")
        self._object_index = PositionIndex("object")

        if functional_predicates is None:
            functional_predicates = DEFAULT_FUNCTIONAL_PREDICATES
        self._functional: set[str] = set(functional_predicates)

        # Cache for the DataFrame view
        self._df_cache: Optional[pl.DataFrame] = None

    def _invalidate_cache(self):
        self._df_cache = None

    # ========== Writes ==========

    def infer_object_type(self, value: str) -> ObjectType:
        """
        Guess the object type of a raw value.

        ``_:`` prefixes are blank nodes; URI schemes and registered CURIEs are
        URIs; everything else is a literal.
        """
        if value.startswith("_:"):
            return ObjectType.BLANK
        if value.startswith(URI_SCHEMES) or self.namespaces.is_curie(value):
            return ObjectType.URI
        return ObjectType.LITERAL

    def add(
        self,
        subject: Union[Triple, str],
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
        object_type: Optional[Union[ObjectType, str]] = None,
    ) -> int:
        """
        Append a triple unconditionally.

        Accepts either a ``Triple`` or its three string parts. Duplicates are
        allowed and coexist.

        Returns:
            The id assigned to the stored triple
        """
        if isinstance(subject, Triple):
            triple = subject
        else:
            if predicate is None or obj is None:
                raise ValueError("add() needs a Triple or subject, predicate and object")
            obj = str(obj)
            if object_type is None:
                kind = self.infer_object_type(obj)
            else:
                kind = ObjectType.from_value(object_type)
            triple = Triple(subject, predicate, obj, kind)

        triple_id = self._next_id
        self._next_id += 1
        stored = replace(triple, triple_id=triple_id)
        self._triples[triple_id] = stored

        self._subject_index.add(stored.subject, triple_id)
        self._predicate_index.add(stored.predicate, triple_id)
        self._object_index.add(stored.object, triple_id)

        self.namespaces.detect(stored.subject)
        self.namespaces.detect(stored.predicate)
        if stored.object_type == ObjectType.URI:
            self.namespaces.detect(stored.object)

        self._invalidate_cache()
        return triple_id

    def add_many(self, triples: Iterable[Union[Triple, tuple]]) -> list[int]:
        """Add several triples; tuples are ``(s, p, o)`` or ``(s, p, o, type)``."""
        ids = []
        for item in triples:
            if isinstance(item, Triple):
                ids.append(self.add(item))
            else:
                ids.append(self.add(*item))
        return ids

    def remove(self, triple_id: int) -> bool:
        """
        Retract a stored triple by id.

        Returns:
            True if the triple existed
        """
        triple = self._triples.pop(triple_id, None)
        if triple is None:
            return False
        self._subject_index.discard(triple.subject, triple_id)
        self._predicate_index.discard(triple.predicate, triple_id)
        self._object_index.discard(triple.object, triple_id)
        self._invalidate_cache()
        return True

    def remove_matching(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> int:
        """Retract every triple matching the pattern; returns the count removed."""
        removed = 0
        for triple in self.match(subject, predicate, obj):
            if self.remove(triple.triple_id):
                removed += 1
        return removed

    def declare_functional(self, predicate: str) -> None:
        self._functional.add(predicate)

    def is_functional(self, predicate: str) -> bool:
        return predicate in self._functional

    @property
    def functional_predicates(self) -> frozenset[str]:
        return frozenset(self._functional)

    def set_value(
        self,
        subject: str,
        predicate: str,
        obj: str,
        object_type: Optional[Union[ObjectType, str]] = None,
    ) -> int:
        """
        Write a value honouring the predicate's cardinality policy.

        Functional predicates drop any existing ``(subject, predicate, *)``
        triples first (last write wins); other predicates accumulate.
        """
        if self.is_functional(predicate):
            self.remove_matching(subject, predicate)
        return self.add(subject, predicate, obj, object_type)

    def clear(self) -> None:
        self._triples.clear()
        self._subject_index.clear()
        self._predicate_index.clear()
        self._object_index.clear()
        self._invalidate_cache()

    def load(self, raw_text: str, format_hint: str = "turtle") -> "ParseResult":
        """
        Parse raw RDF text and add its triples.

        The store is left unchanged when parsing fails.

        Returns:
            ParseResult with the decoded triples or the parse error
        """
        from rdf_graphview.formats.rdf import parse

        result = parse(raw_text, format_hint)
        if result.ok:
            self.add_many(result.triples)
            logger.info(f"Loaded {len(result.triples)} triples ({format_hint})")
        return result

    # ========== Reads ==========

    def match(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> list[Triple]:
        """
        Return all triples whose given positions equal the pattern.

        ``None`` positions are wildcards. Candidates come from the most
        selective bound index; the remaining bound positions are checked on
        the candidates.
        """
        bound = []
        if subject is not None:
            bound.append((self._subject_index, subject))
        if predicate is not None:
            bound.append((self._predicate_index, predicate))
        if obj is not None:
            bound.append((self._object_index, obj))

        if not bound:
            return list(self._triples.values())

        index, key = min(bound, key=lambda b: b[0].count(b[1]))
        results = []
        for triple_id in index.lookup(key):
            triple = self._triples[triple_id]
            if subject is not None and triple.subject != subject:
                continue
            if predicate is not None and triple.predicate != predicate:
                continue
            if obj is not None and triple.object != obj:
                continue
            results.append(triple)
        return results

    def get(self, triple_id: int) -> Optional[Triple]:
        return self._triples.get(triple_id)

    def subjects(self) -> list[str]:
        """Distinct subjects in first-insertion order."""
        return list(self._subject_index.keys())

    def objects(self) -> list[str]:
        return list(self._object_index.keys())

    def predicates(self) -> list[str]:
        return list(self._predicate_index.keys())

    def has_subject(self, value: str) -> bool:
        return value in self._subject_index

    def __len__(self) -> int:
        return len(self._triples)

    def __iter__(self) -> Iterator[Triple]:
        return iter(list(self._triples.values()))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Triple):
            return bool(self.match(item.subject, item.predicate, item.object))
        if isinstance(item, tuple) and len(item) == 3:
            return bool(self.match(*item))
        return False

    # ========== DataFrame view ==========

    def to_dataframe(self) -> pl.DataFrame:
        """
        Materialize a string-column DataFrame of the stored triples.

        The frame is cached until the next mutation.
        """
        if self._df_cache is not None:
            return self._df_cache

        triples = list(self._triples.values())
        self._df_cache = pl.DataFrame(
            {
                "triple_id": [t.triple_id for t in triples],
                "subject": [t.subject for t in triples],
                "predicate": [t.predicate for t in triples],
                "object": [t.object for t in triples],
                "object_type": [t.object_type.value for t in triples],
            },
            schema=_TRIPLE_SCHEMA,
        )
        return self._df_cache

    def statistics(self) -> GraphStatistics:
        return compute_statistics(self.to_dataframe())

    def degrees(self) -> dict[str, int]:
        """Number of non-literal links touching each resource."""
        frame = degree_frame(self.to_dataframe())
        return dict(zip(frame["id"].to_list(), frame["degree"].to_list()))
