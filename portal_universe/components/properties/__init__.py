"""Property component aggregates.

This module re-exports the component dataclasses that describe an entity in a
portal scene: where it is (:class:`Pose`), what it collides as
(:class:`Collider`), how it moves (:class:`Locomotion` and the matching
:class:`KinematicController` / :class:`RigidBody`), and the portal and beam
configuration surfaces.

All properties are immutable dataclasses; creating a new instance (or removing
one from an entity) is how state changes are expressed between steps.
"""

from .beam import BeamEmitter
from .collider import Collider, ColliderShape
from .locomotion import KinematicController, Locomotion, LocomotionKind, RigidBody
from .movement import Movement
from .parent import Parent
from .portal import Portal, PortalPair, PortalPhase
from .pose import (
    IDENTITY,
    WORLD_FORWARD,
    WORLD_RIGHT,
    WORLD_UP,
    ZERO,
    Pose,
    Rotation,
    Vec3,
)
from .tag import Tag

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
