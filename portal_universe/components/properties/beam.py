"""Beam emitter component.

Configuration surface of a continuous laser. The beam starts at the emitter's
world position and travels along its forward axis.
"""

from dataclasses import dataclass

from portal_universe.types import ALL_LAYERS, LayerMask


@dataclass(frozen=True)
class BeamEmitter:
    """Laser emitter configuration.

    Attributes:
        max_distance: Total travel budget across all hops.
        max_portal_hops: Portal traversals allowed per cast.
        exit_epsilon: Offset in front of the exit portal for continued rays.
        hit_mask: Layers the beam can hit.
        include_trigger_surfaces: Whether trigger colliders (portal volumes)
            stop the ray.
        portal_tag: Tag identifying portal surfaces lacking a Portal owner.
        enabled: Disabled emitters are not traced.
    """

    max_distance: float = 50.0
    max_portal_hops: int = 4
    exit_epsilon: float = 0.02
    hit_mask: LayerMask = ALL_LAYERS
    include_trigger_surfaces: bool = True
    portal_tag: str = "portal"
    enabled: bool = True
