"""
Viewport fitting: the scale/translate pair that frames a set of nodes.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Protocol


class _Positioned(Protocol):
    x: float
    y: float


@dataclass(frozen=True)
class ViewportTransform:
    """Screen = world * scale + translate."""
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def apply(self, x: float, y: float) -> tuple[float, float]:
        return (x * self.scale + self.translate_x, y * self.scale + self.translate_y)

    def invert(self, screen_x: float, screen_y: float) -> tuple[float, float]:
        return (
            (screen_x - self.translate_x) / self.scale,
            (screen_y - self.translate_y) / self.scale,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "scale": self.scale,
            "translate_x": self.translate_x,
            "translate_y": self.translate_y,
        }


def fit(
    nodes: Iterable[_Positioned],
    viewport_width: float,
    viewport_height: float,
    padding: float = 50.0,
    max_scale: float = 2.0,
) -> ViewportTransform:
    """
    Compute the transform that frames ``nodes`` in the viewport.

    The nodes' bounding box is expanded by ``padding`` on every side and
    scaled to fit (never beyond ``max_scale``), with its centre mapped to the
    viewport centre. Zero nodes, one node, or several coincident nodes give
    scale 1 with the (possibly empty) box centred.

    Args:
        nodes: Anything with ``x`` and ``y`` attributes
        viewport_width: Viewport width in screen units
        viewport_height: Viewport height in screen units
        padding: Margin added around the bounding box, in world units
        max_scale: Upper bound on zoom-in

    Returns:
        ViewportTransform
    """
    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError("viewport dimensions must be positive")

    center_x = viewport_width / 2.0
    center_y = viewport_height / 2.0

    xs = []
    ys = []
    for node in nodes:
        xs.append(float(node.x))
        ys.append(float(node.y))

    if not xs:
        return ViewportTransform(1.0, center_x, center_y)

    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)
    mid_x = (min_x + max_x) / 2.0
    mid_y = (min_y + max_y) / 2.0

    if max_x == min_x and max_y == min_y:
        return ViewportTransform(1.0, center_x - mid_x, center_y - mid_y)

    box_width = (max_x - min_x) + 2 * padding
    box_height = (max_y - min_y) + 2 * padding

    candidates = [max_scale]
    if box_width > 0:
        candidates.append(viewport_width / box_width)
    if box_height > 0:
        candidates.append(viewport_height / box_height)
    scale = min(candidates)

    return ViewportTransform(
        scale=scale,
        translate_x=center_x - scale * mid_x,
        translate_y=center_y - scale * mid_y,
    )
