"""Collider component.

Collision shapes queried by raycasts and trigger overlap tests. A collider is
centered on its entity's world pose (or on the nearest posed ancestor for
child colliders) plus ``center`` expressed in that local frame.

Shapes:

* ``SPHERE`` uses ``radius``.
* ``BOX`` is an oriented box with ``half_extents`` along local right/up/forward.
* ``QUAD`` is a flat rectangle facing local forward, sized by ``half_extents.x``
  and ``half_extents.y``; it is hit from either side.
"""

from dataclasses import dataclass
from enum import StrEnum, auto

from portal_universe.components.properties.pose import Vec3, ZERO


class ColliderShape(StrEnum):
    """Supported collision primitives."""

    SPHERE = auto()
    BOX = auto()
    QUAD = auto()


@dataclass(frozen=True)
class Collider:
    """Collision shape definition.

    Attributes:
        shape: Primitive kind.
        radius: Sphere radius (ignored for boxes and quads).
        half_extents: Box / quad half sizes along the local axes.
        center: Local offset of the shape from the owning pose.
        layer: Physics layer index (0-31) matched against query masks.
        is_trigger: Trigger volumes report overlaps instead of blocking.
    """

    shape: ColliderShape = ColliderShape.SPHERE
    radius: float = 0.5
    half_extents: Vec3 = Vec3(0.5, 0.5, 0.5)
    center: Vec3 = ZERO
    layer: int = 0
    is_trigger: bool = False
