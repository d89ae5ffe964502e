"""
Deterministic force-directed layout.

Every iteration applies, in order: pairwise repulsion, spring attraction
along edges, weak type-cluster and hub biases, collision separation,
centering, then damped integration clamped to the working rectangle.

The iteration budget is always caller-supplied; there is no convergence
detection, so ``run(..., iterations=N)`` performs exactly N steps. Batch and
stepwise (one step per animation frame) use the same ``LayoutState.step``.

Positions are carried between projections by node id through an explicit
``PositionCache`` owned by the caller. The engine itself keeps no state
between calls and never mutates the nodes it is given.
"""

import logging
import math
import zlib
from typing import Iterable, Iterator, Optional, Sequence

from rdf_graphview.layout.params import DEFAULT_LAYOUT_PARAMS, LayoutParams
from rdf_graphview.models import ViewEdge, ViewNode

logger = logging.getLogger(__name__)


def _stable_hash(value: str) -> int:
    # Process-independent, unlike hash()
    return zlib.crc32(value.encode("utf-8"))


def _unit_vector(seed: str) -> tuple[float, float]:
    angle = (_stable_hash(seed) % 3600) / 3600.0 * 2.0 * math.pi
    return math.cos(angle), math.sin(angle)


class PositionCache:
    """
    Node positions keyed by node id, carried across projection passes.

    Example:
        cache = PositionCache()
        engine.run(view.nodes, view.edges, cache=cache)
        cache.get("ex:alice")   # (x, y)
    """

    def __init__(self, positions: Optional[dict[str, tuple[float, float]]] = None):
        self._positions: dict[str, tuple[float, float]] = dict(positions or {})
        self._pinned: set[str] = set()

    def get(self, node_id: str) -> Optional[tuple[float, float]]:
        return self._positions.get(node_id)

    def set(self, node_id: str, x: float, y: float, pinned: bool = False) -> None:
        self._positions[node_id] = (float(x), float(y))
        if pinned:
            self._pinned.add(node_id)

    def pin(self, node_id: str) -> None:
        self._pinned.add(node_id)

    def unpin(self, node_id: str) -> None:
        self._pinned.discard(node_id)

    def is_pinned(self, node_id: str) -> bool:
        return node_id in self._pinned

    @property
    def pinned(self) -> frozenset[str]:
        return frozenset(self._pinned)

    def update_from(self, nodes: Iterable[ViewNode]) -> None:
        for node in nodes:
            self._positions[node.id] = (node.x, node.y)

    def apply(self, nodes: Iterable[ViewNode]) -> None:
        """Write cached positions and pin state onto ``nodes`` in place."""
        for node in nodes:
            position = self._positions.get(node.id)
            if position is not None:
                node.x, node.y = position
            node.pinned = node.id in self._pinned

    def forget(self, node_id: str) -> None:
        self._positions.pop(node_id, None)
        self._pinned.discard(node_id)

    def clear(self) -> None:
        self._positions.clear()
        self._pinned.clear()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {k: {"x": x, "y": y} for k, (x, y) in self._positions.items()}


class LayoutState:
    """
    Private working copy of one layout run.

    Holds mutable node copies, the resolved edge list as index pairs, node
    degrees and the parameters. ``step`` advances the simulation by one
    iteration.
    """

    def __init__(
        self,
        nodes: list[ViewNode],
        edges: Sequence[ViewEdge],
        params: LayoutParams,
    ):
        self.nodes = nodes
        self.params = params
        self.iteration = 0

        index = {node.id: i for i, node in enumerate(nodes)}
        self.edges: list[tuple[int, int]] = []
        for edge in edges:
            a = index.get(edge.source)
            b = index.get(edge.target)
            if a is None or b is None or a == b:
                continue
            self.edges.append((a, b))

        self.degrees = [0] * len(nodes)
        for a, b in self.edges:
            self.degrees[a] += 1
            self.degrees[b] += 1
        self.max_degree = max(self.degrees, default=0)

        self.radii = [
            params.node_radius + params.radius_per_degree * d for d in self.degrees
        ]
        self.weights = [math.sqrt(1.0 + d) for d in self.degrees]

        usable = params.width - 2 * params.padding
        self.cluster_x = [
            params.padding + (_stable_hash(node.type) % 1000) / 1000.0 * usable
            for node in nodes
        ]

        self._fx = [0.0] * len(nodes)
        self._fy = [0.0] * len(nodes)

    def run(self, iterations: int) -> None:
        for _ in range(iterations):
            self.step()

    def step(self) -> None:
        """Advance the simulation by exactly one iteration."""
        self.iteration += 1
        if not self.nodes:
            return
        n = len(self.nodes)
        self._fx = [0.0] * n
        self._fy = [0.0] * n

        self._apply_repulsion()
        self._apply_springs()
        self._apply_bias()
        self._apply_collisions()
        self._apply_centering()
        self._integrate()

    # =========================================================================
    # Forces
    # =========================================================================

    def _separation(self, i: int, j: int) -> tuple[float, float, float]:
        """
        Unit vector from node i to node j and their distance.

        Coincident nodes get a deterministic direction derived from their ids.
        """
        a, b = self.nodes[i], self.nodes[j]
        dx = b.x - a.x
        dy = b.y - a.y
        dist = math.hypot(dx, dy)
        if dist < 1e-9:
            ux, uy = _unit_vector(f"{a.id}|{b.id}")
            return ux, uy, 0.0
        return dx / dist, dy / dist, dist

    def _push(self, i: int, j: int, ux: float, uy: float, force: float) -> None:
        # Positive force pushes i and j apart along (ux, uy)
        self._fx[i] -= ux * force
        self._fy[i] -= uy * force
        self._fx[j] += ux * force
        self._fy[j] += uy * force

    def _apply_repulsion(self) -> None:
        p = self.params
        n = len(self.nodes)
        radius2 = p.interaction_radius * p.interaction_radius
        for i in range(n):
            xi, yi = self.nodes[i].x, self.nodes[i].y
            for j in range(i + 1, n):
                dx = self.nodes[j].x - xi
                dy = self.nodes[j].y - yi
                if dx * dx + dy * dy > radius2:
                    continue
                ux, uy, dist = self._separation(i, j)
                dist = max(dist, p.min_distance)
                force = p.repulsion_strength * self.weights[i] * self.weights[j] / (dist * dist)
                self._push(i, j, ux, uy, force)

    def _apply_springs(self) -> None:
        p = self.params
        for a, b in self.edges:
            ux, uy, dist = self._separation(a, b)
            ideal = p.ideal_edge_length
            if self.nodes[a].type == self.nodes[b].type:
                ideal *= p.same_type_length_factor
            # Stretched springs pull together (negative push)
            force = p.spring_strength * (dist - ideal)
            self._push(a, b, ux, uy, -force)

    def _apply_bias(self) -> None:
        p = self.params
        _, cy = p.center
        for i, node in enumerate(self.nodes):
            self._fx[i] += p.cluster_strength * (self.cluster_x[i] - node.x)
            if self.max_degree:
                share = self.degrees[i] / self.max_degree
                self._fy[i] += p.hub_strength * share * (cy - node.y)

    def _apply_collisions(self) -> None:
        p = self.params
        n = len(self.nodes)
        for i in range(n):
            for j in range(i + 1, n):
                reach = self.radii[i] + self.radii[j]
                dx = self.nodes[j].x - self.nodes[i].x
                dy = self.nodes[j].y - self.nodes[i].y
                if dx * dx + dy * dy >= reach * reach:
                    continue
                ux, uy, dist = self._separation(i, j)
                overlap = reach - dist
                self._push(i, j, ux, uy, p.collision_strength * overlap / 2.0)

    def _apply_centering(self) -> None:
        p = self.params
        cx, cy = p.center
        n = len(self.nodes)
        mean_x = sum(node.x for node in self.nodes) / n
        mean_y = sum(node.y for node in self.nodes) / n
        shift_x = (cx - mean_x) * p.center_gravity
        shift_y = (cy - mean_y) * p.center_gravity
        for i in range(n):
            self._fx[i] += shift_x
            self._fy[i] += shift_y

    def _integrate(self) -> None:
        p = self.params
        min_x, max_x = p.padding, p.width - p.padding
        min_y, max_y = p.padding, p.height - p.padding

        for i, node in enumerate(self.nodes):
            if node.pinned:
                node.vx = node.vy = 0.0
                continue

            fx, fy = self._fx[i], self._fy[i]
            if not (math.isfinite(fx) and math.isfinite(fy)):
                fx = fy = 0.0

            vx = (node.vx + fx) * p.damping
            vy = (node.vy + fy) * p.damping
            speed = math.hypot(vx, vy)
            if speed > p.max_velocity:
                scale = p.max_velocity / speed
                vx *= scale
                vy *= scale

            x = node.x + vx
            y = node.y + vy
            if x < min_x or x > max_x:
                x = min(max(x, min_x), max_x)
                vx = 0.0
            if y < min_y or y > max_y:
                y = min(max(y, min_y), max_y)
                vy = 0.0

            node.x, node.y, node.vx, node.vy = x, y, vx, vy


class LayoutEngine:
    """
    Force-directed layout over a projected node/edge set.

    Example:
        engine = LayoutEngine()
        cache = PositionCache()
        nodes = engine.run(view.nodes, view.edges, iterations=300, cache=cache)
    """

    def __init__(self, params: Optional[LayoutParams] = None):
        self.params = params or DEFAULT_LAYOUT_PARAMS

    def prepare(
        self,
        nodes: Iterable[ViewNode],
        edges: Sequence[ViewEdge],
        params: Optional[LayoutParams] = None,
        cache: Optional[PositionCache] = None,
        pinned: Optional[Iterable[str]] = None,
    ) -> LayoutState:
        """
        Build a working copy of ``nodes`` with seeded positions.

        A node's starting position comes from the cache when it has an entry,
        else from its own coordinates when they are not both zero, else from
        a deterministic point on a ring around the centre derived from its id.

        With a cache, pin state comes from the cache plus ``pinned``; the
        nodes' own ``pinned`` flags are ignored. Without one, a node is
        pinned if its flag is set or its id is in ``pinned``.
        """
        params = params or self.params
        pinned_ids = set(pinned or ())
        if cache is not None:
            pinned_ids |= cache.pinned

        working = []
        for node in nodes:
            copy = node.copy()
            cached = cache.get(copy.id) if cache is not None else None
            if cached is not None:
                copy.x, copy.y = cached
            elif copy.x == 0.0 and copy.y == 0.0:
                copy.x, copy.y = self._seed_position(copy.id, params)
            if cache is not None:
                copy.pinned = copy.id in pinned_ids
            elif copy.id in pinned_ids:
                copy.pinned = True
            if not (math.isfinite(copy.vx) and math.isfinite(copy.vy)):
                copy.vx = copy.vy = 0.0
            working.append(copy)
        return LayoutState(working, edges, params)

    @staticmethod
    def _seed_position(node_id: str, params: LayoutParams) -> tuple[float, float]:
        cx, cy = params.center
        h = _stable_hash(node_id)
        angle = (h % 3600) / 3600.0 * 2.0 * math.pi
        spread = min(params.width, params.height) / 2.0 - params.padding
        radius = spread * (0.25 + 0.5 * ((h >> 12) % 1000) / 1000.0)
        return cx + radius * math.cos(angle), cy + radius * math.sin(angle)

    def step(
        self,
        nodes: Iterable[ViewNode],
        edges: Sequence[ViewEdge],
        params: Optional[LayoutParams] = None,
        cache: Optional[PositionCache] = None,
        pinned: Optional[Iterable[str]] = None,
    ) -> list[ViewNode]:
        """
        Run one iteration and return updated copies of ``nodes``.

        Velocities travel on the returned nodes, so feeding the result back in
        frame after frame is equivalent to one batch ``run``. A ``cache`` seeds
        and pins exactly as in ``run`` and receives the new positions.
        """
        state = self.prepare(nodes, edges, params, cache=cache, pinned=pinned)
        state.step()
        if cache is not None:
            cache.update_from(state.nodes)
        return state.nodes

    def run(
        self,
        nodes: Iterable[ViewNode],
        edges: Sequence[ViewEdge],
        params: Optional[LayoutParams] = None,
        iterations: Optional[int] = None,
        cache: Optional[PositionCache] = None,
        pinned: Optional[Iterable[str]] = None,
    ) -> list[ViewNode]:
        """
        Run exactly ``iterations`` steps (default ``params.max_iterations``).

        Args:
            nodes: Projected nodes; left untouched
            edges: Projected edges; edges with unknown endpoints are ignored
            params: Overrides the engine's parameters for this call
            iterations: Step budget
            cache: Seeds starting positions and receives the final ones
            pinned: Ids of nodes held in place

        Returns:
            Laid-out copies of the nodes
        """
        params = params or self.params
        if iterations is None:
            iterations = params.max_iterations
        if iterations < 0:
            raise ValueError("iterations must be non-negative")

        state = self.prepare(nodes, edges, params, cache=cache, pinned=pinned)
        state.run(iterations)
        if cache is not None:
            cache.update_from(state.nodes)

        logger.debug(
            f"Layout ran {state.iteration} step(s) over "
            f"{len(state.nodes)} node(s) and {len(state.edges)} edge(s)"
        )
        return state.nodes
