"""Common type aliases and enumerations.

``RaycastFn`` is the central extension point stored on ``State`` so the
physics query backing beams and portal placement can be swapped out (the
default is :func:`portal_universe.utils.physics.scene_raycast`).
"""

from enum import StrEnum, auto
from typing import Callable, Optional, TYPE_CHECKING


# Forward declaration for RaycastFn typing to avoid circular imports:
if TYPE_CHECKING:
    from portal_universe.state import State
    from portal_universe.components import Vec3
    from portal_universe.utils.physics import RaycastHit

EntityID = int

LayerMask = int
ALL_LAYERS: LayerMask = 0xFFFFFFFF


class TriggerPolicy(StrEnum):
    """Whether a raycast reports hits on trigger colliders."""

    COLLIDE = auto()
    IGNORE = auto()


RaycastFn = Callable[
    ["State", "Vec3", "Vec3", float, LayerMask, TriggerPolicy],
    Optional["RaycastHit"],
]


class DiagnosticKind(StrEnum):
    """Categories of non-fatal events reported by portal and beam systems."""

    UNLINKED_PORTAL = auto()
    ASYMMETRIC_LINK = auto()
    MISSING_MOVER_ROOT = auto()
    MISSING_MOVEMENT = auto()
    MISSING_LOCOMOTION = auto()
    HOP_LIMIT_REACHED = auto()
