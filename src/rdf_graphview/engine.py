"""
GraphViewEngine: one instance wires the store, query executor, projector,
layout engine, position cache and visibility sets together.

Callers hold a reference to the engine and call its methods; nothing is kept
in module-level state.
"""

import logging
from typing import Iterable, Optional, Union

from rdf_graphview.config import EngineConfig
from rdf_graphview.formats.rdf import ParseResult
from rdf_graphview.layout.engine import LayoutEngine, PositionCache
from rdf_graphview.layout.viewport import ViewportTransform, fit
from rdf_graphview.models import GraphView, ObjectType, ViewNode, edge_id
from rdf_graphview.namespaces import NamespaceRegistry
from rdf_graphview.projection import GraphProjector
from rdf_graphview.sparql.executor import QueryResult, SPARQLExecutor
from rdf_graphview.storage.statistics import GraphStatistics
from rdf_graphview.store import TripleStore
from rdf_graphview.visibility import VisibilitySet, VisibilitySetManager

logger = logging.getLogger(__name__)


class GraphViewEngine:
    """
    Facade over the projection pipeline.

    Example:
        engine = GraphViewEngine()
        engine.load(turtle_text, "turtle")
        view = engine.layout()
        transform = engine.fit(view.nodes)
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

        self.namespaces = NamespaceRegistry()
        for prefix, base in self.config.namespaces.items():
            self.namespaces.register(prefix, base)

        projection = self.config.projection
        self.store = TripleStore(
            namespaces=self.namespaces,
            functional_predicates=projection.functional_predicates,
        )
        self.executor = SPARQLExecutor(self.store)
        self.projector = GraphProjector(
            label_predicates=projection.label_predicates,
            type_predicates=projection.type_predicates,
            default_type=projection.default_type,
        )
        self.layout_engine = LayoutEngine(self.config.layout)
        self.positions = PositionCache()
        self.visibility = VisibilitySetManager()

    # ========== Facts ==========

    def load(self, raw_text: str, format_hint: str = "turtle") -> ParseResult:
        return self.store.load(raw_text, format_hint)

    def add(
        self,
        subject: str,
        predicate: str,
        obj: str,
        object_type: Optional[Union[ObjectType, str]] = None,
    ) -> int:
        return self.store.add(subject, predicate, obj, object_type)

    def update_node(
        self,
        node_id: str,
        label: Optional[str] = None,
        type: Optional[str] = None,
    ) -> None:
        """Overwrite a node's label and/or type (last write wins)."""
        projection = self.config.projection
        if label is not None:
            predicate = projection.label_predicates[0]
            self.store.declare_functional(predicate)
            self.store.set_value(node_id, predicate, label, ObjectType.LITERAL)
        if type is not None:
            predicate = projection.type_predicates[0]
            self.store.declare_functional(predicate)
            self.store.set_value(node_id, predicate, type)

    def delete_node(self, node_id: str) -> int:
        """Retract every triple mentioning ``node_id``; returns the count."""
        removed = self.store.remove_matching(subject=node_id)
        removed += self.store.remove_matching(obj=node_id)
        self.positions.forget(node_id)
        return removed

    def delete_edge(self, edge: str) -> int:
        """Retract the triple(s) behind an edge id; returns the count."""
        removed = 0
        for triple in self.store.match():
            if edge_id(triple.subject, triple.predicate, triple.object) == edge:
                if self.store.remove(triple.triple_id):
                    removed += 1
        return removed

    def statistics(self) -> GraphStatistics:
        return self.store.statistics()

    # ========== Queries & visibility ==========

    def execute(self, query_text: str) -> QueryResult:
        return self.executor.execute(query_text)

    def create_visibility_set(self, name: str, query: str, description: str = "") -> VisibilitySet:
        return self.visibility.create(name, query, description)

    def activate_visibility_set(self, set_id: str) -> VisibilitySet:
        return self.visibility.activate(set_id)

    def visible_ids(self) -> list[str]:
        """
        Ids selected by the active visibility set, or every resource.

        A failing active query yields no visible ids.
        """
        active = self.visibility.active
        if active is None:
            return GraphProjector.resource_ids(self.store)
        result = self.execute(active.query)
        if not result.ok:
            logger.warning(f"Visibility set '{active.name}' failed: {result.error}")
            return []
        return result.visible_ids()

    # ========== Projection & layout ==========

    def project(self, visible_ids: Optional[Iterable[str]] = None) -> GraphView:
        """Project ``visible_ids`` (default: ``visible_ids()``) with cached positions."""
        if visible_ids is None:
            visible_ids = self.visible_ids()
        view = self.projector.project(visible_ids, self.store)
        self.positions.apply(view.nodes)
        return view

    def layout(
        self,
        view: Optional[GraphView] = None,
        iterations: Optional[int] = None,
        pinned: Optional[Iterable[str]] = None,
    ) -> GraphView:
        """Lay out ``view`` (default: a fresh projection) and remember positions."""
        if view is None:
            view = self.project()
        nodes = self.layout_engine.run(
            view.nodes,
            view.edges,
            iterations=iterations,
            cache=self.positions,
            pinned=pinned,
        )
        return GraphView(nodes=nodes, edges=list(view.edges))

    def step(self, view: GraphView) -> GraphView:
        """
        Advance ``view`` by one layout iteration (one animation frame).

        Positions set with ``set_node_position`` since the last frame take
        effect here, and pins follow the position cache as in ``layout``.
        """
        nodes = self.layout_engine.step(view.nodes, view.edges, cache=self.positions)
        return GraphView(nodes=nodes, edges=list(view.edges))

    def set_node_position(self, node_id: str, x: float, y: float, pin: bool = True) -> None:
        """Place a node explicitly, pinning it by default."""
        self.positions.set(node_id, x, y, pinned=pin)

    def release_node(self, node_id: str) -> None:
        self.positions.unpin(node_id)

    def fit(
        self,
        nodes: Optional[Iterable[ViewNode]] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        padding: Optional[float] = None,
    ) -> ViewportTransform:
        """Frame ``nodes`` (default: the current projection) in the viewport."""
        viewport = self.config.viewport
        if nodes is None:
            nodes = self.project().nodes
        return fit(
            nodes,
            width if width is not None else viewport.width,
            height if height is not None else viewport.height,
            padding if padding is not None else viewport.padding,
            max_scale=viewport.max_scale,
        )
