"""
Layout parameters.

One record holds every force constant of the simulation, passed explicitly
into ``LayoutEngine.run``/``step``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict

from rdf_graphview.errors import LayoutConfigError


@dataclass(frozen=True)
class LayoutParams:
    """Force constants and working-area geometry for the layout simulation."""
    # Forces
    repulsion_strength: float = 20000.0
    ideal_edge_length: float = 150.0
    same_type_length_factor: float = 0.7
    spring_strength: float = 0.05
    damping: float = 0.88
    collision_strength: float = 0.5
    center_gravity: float = 0.005
    cluster_strength: float = 0.002
    hub_strength: float = 0.002

    # Numerical guards
    interaction_radius: float = 600.0
    min_distance: float = 1.0
    max_velocity: float = 50.0

    # Node geometry
    node_radius: float = 20.0
    radius_per_degree: float = 3.0

    # Working rectangle
    width: float = 1200.0
    height: float = 800.0
    padding: float = 50.0

    max_iterations: int = 300

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Raises:
            LayoutConfigError: If any parameter is out of range
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise LayoutConfigError(f"{f.name} must be a finite number, got {value!r}")
        if self.width <= 0 or self.height <= 0:
            raise LayoutConfigError("width and height must be positive")
        if self.padding < 0 or 2 * self.padding >= min(self.width, self.height):
            raise LayoutConfigError("padding must leave a non-empty working rectangle")
        if not 0.0 < self.damping < 1.0:
            raise LayoutConfigError(f"damping must be in (0, 1), got {self.damping}")
        if self.min_distance < 1.0:
            raise LayoutConfigError("min_distance must be at least 1")
        if self.max_iterations < 0:
            raise LayoutConfigError("max_iterations must be non-negative")
        if self.max_velocity <= 0 or self.interaction_radius <= 0:
            raise LayoutConfigError("max_velocity and interaction_radius must be positive")

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2.0, self.height / 2.0)

    def with_viewport(self, width: float, height: float) -> "LayoutParams":
        return replace(self, width=float(width), height=float(height))

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutParams":
        known = {f.name: f for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise LayoutConfigError(f"Unknown layout parameter: {key}")
            kwargs[key] = int(value) if key == "max_iterations" else float(value)
        return cls(**kwargs)


DEFAULT_LAYOUT_PARAMS = LayoutParams()
