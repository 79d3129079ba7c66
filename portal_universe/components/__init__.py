"""portal_universe.components
=================================

Aggregate import surface for all ECS component dataclasses used by the engine.

The symbols re-exported here are curated so downstream code can import
components from a single place, e.g.::

    from portal_universe.components import Pose, Portal, Vec3

All component classes are simple ``@dataclass`` value objects; they carry no
behavior beyond their fields and are manipulated by systems during the step
pipeline. See the ``systems`` package for transformation logic.
"""

from .properties import BeamEmitter
from .properties import Collider, ColliderShape
from .properties import KinematicController, Locomotion, LocomotionKind, RigidBody
from .properties import Movement
from .properties import Parent
from .properties import Portal, PortalPair, PortalPhase
from .properties import IDENTITY, WORLD_FORWARD, WORLD_RIGHT, WORLD_UP, ZERO
from .properties import Pose, Rotation, Vec3
from .properties import Tag

__all__ = [
    "BeamEmitter",
    "Collider",
    "ColliderShape",
    "IDENTITY",
    "KinematicController",
    "Locomotion",
    "LocomotionKind",
    "Movement",
    "Parent",
    "Portal",
    "PortalPair",
    "PortalPhase",
    "Pose",
    "RigidBody",
    "Rotation",
    "Tag",
    "Vec3",
    "WORLD_FORWARD",
    "WORLD_RIGHT",
    "WORLD_UP",
    "ZERO",
]
