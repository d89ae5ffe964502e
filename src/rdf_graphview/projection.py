"""
Graph projection: triples -> node/edge view model.

``GraphProjector.project`` is a pure function of its arguments. It builds one
node per visible identifier and one edge per triple whose subject and object
are both visible. Dangling edges are dropped, never materialized. Positions
are not decided here; the layout engine owns them.
"""

import re
from typing import Iterable, Optional, Protocol, Sequence, TYPE_CHECKING

from rdf_graphview.models import (
    GraphView,
    ObjectType,
    PropertyValue,
    Triple,
    ViewEdge,
    ViewNode,
    edge_id,
)
from rdf_graphview.namespaces import RDF, RDFS

if TYPE_CHECKING:
    from rdf_graphview.layout.engine import PositionCache
    from rdf_graphview.namespaces import NamespaceRegistry

DEFAULT_LABEL_PREDICATES = ("label", f"{RDFS}label", "rdfs:label")
DEFAULT_TYPE_PREDICATES = ("type", f"{RDF}type", "rdf:type")
DEFAULT_TYPE = "Resource"

_CAMEL = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEPARATORS = re.compile(r"[_\-]+")
_SPACES = re.compile(r"\s+")


class TripleSource(Protocol):
    def match(
        self,
        subject: Optional[str] = None,
        predicate: Optional[str] = None,
        obj: Optional[str] = None,
    ) -> list[Triple]: ...


def local_name(identifier: str) -> str:
    """Trailing fragment, path segment or CURIE local part of an identifier."""
    value = identifier.rstrip("/#")
    for sep in ("#", "/"):
        if sep in value:
            value = value.rsplit(sep, 1)[1]
            break
    else:
        if ":" in value and not value.startswith("_:"):
            value = value.rsplit(":", 1)[1]
    return value or identifier


def humanize(identifier: str) -> str:
    """
    Human-readable label for an identifier.

    ``http://example.org/hasFriend`` -> ``has Friend``,
    ``ex:works_for`` -> ``works for``.
    """
    label = local_name(identifier)
    label = _CAMEL.sub(" ", label)
    label = _SEPARATORS.sub(" ", label)
    label = _SPACES.sub(" ", label).strip()
    return label or identifier


def _looks_like_identifier(value: str) -> bool:
    return "/" in value or "#" in value or ":" in value


class GraphProjector:
    """
    Turns a visible-id set plus a triple source into a GraphView.

    Example:
        projector = GraphProjector()
        view = projector.project({"n1", "n2"}, store)
    """

    def __init__(
        self,
        label_predicates: Sequence[str] = DEFAULT_LABEL_PREDICATES,
        type_predicates: Sequence[str] = DEFAULT_TYPE_PREDICATES,
        default_type: str = DEFAULT_TYPE,
        namespaces: Optional["NamespaceRegistry"] = None,
    ):
        self.label_predicates = tuple(label_predicates)
        self.type_predicates = tuple(type_predicates)
        self.default_type = default_type
        self.namespaces = namespaces

    def project(self, visible_ids: Iterable[str], source: TripleSource) -> GraphView:
        """
        Build the node/edge view for ``visible_ids``.

        Nodes and edges are sorted by id so identical inputs give identical
        output. Label and type predicates become node attributes, never
        edges, even when their value names a visible node.
        """
        visible = set(visible_ids)
        attribute_predicates = set(self.label_predicates) | set(self.type_predicates)
        nodes: list[ViewNode] = []
        edges: dict[str, ViewEdge] = {}

        for node_id in sorted(visible):
            about = source.match(node_id, None, None)
            nodes.append(self._build_node(node_id, about))

            for triple in about:
                if triple.object not in visible or triple.predicate in attribute_predicates:
                    continue
                eid = edge_id(triple.subject, triple.predicate, triple.object)
                if eid not in edges:
                    edges[eid] = ViewEdge(
                        id=eid,
                        source=triple.subject,
                        target=triple.object,
                        predicate=triple.predicate,
                        label=humanize(triple.predicate),
                    )

        return GraphView(nodes=nodes, edges=[edges[k] for k in sorted(edges)])

    def project_all(self, source: TripleSource) -> GraphView:
        """Project every subject and every non-literal object in ``source``."""
        return self.project(self.resource_ids(source), source)

    @staticmethod
    def resource_ids(source: TripleSource) -> list[str]:
        """Subjects and non-literal objects, in first-seen order."""
        seen: dict[str, None] = {}
        for triple in source.match(None, None, None):
            seen.setdefault(triple.subject, None)
            if triple.object_type != ObjectType.LITERAL:
                seen.setdefault(triple.object, None)
        return list(seen)

    def _build_node(self, node_id: str, about: list[Triple]) -> ViewNode:
        label = self._first_value(about, self.label_predicates)
        node_type = self._first_value(about, self.type_predicates)

        if node_type is not None and _looks_like_identifier(node_type):
            node_type = humanize(node_type)

        return ViewNode(
            id=node_id,
            label=label if label is not None else humanize(node_id),
            type=node_type if node_type is not None else self.default_type,
            properties=self._properties(about),
        )

    @staticmethod
    def _first_value(about: list[Triple], predicates: Sequence[str]) -> Optional[str]:
        for predicate in predicates:
            for triple in about:
                if triple.predicate == predicate:
                    return triple.object
        return None

    def _properties(self, about: list[Triple]) -> dict[str, PropertyValue]:
        properties: dict[str, PropertyValue] = {}
        for triple in about:
            key = triple.predicate
            if self.namespaces is not None:
                key = self.namespaces.compact(key)
            current = properties.get(key)
            if current is None:
                properties[key] = triple.object
            elif isinstance(current, list):
                current.append(triple.object)
            else:
                properties[key] = [current, triple.object]
        return properties


def apply_positions(view: GraphView, cache: "PositionCache") -> GraphView:
    """Copy cached (x, y) positions onto the view's nodes by id."""
    for node in view.nodes:
        position = cache.get(node.id)
        if position is not None:
            node.x, node.y = position
    return view
