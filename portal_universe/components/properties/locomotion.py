"""Locomotion components.

Each mover declares which representation owns its motion through the
``Locomotion`` tagged variant, attached when the entity is built. Systems
dispatch on ``Locomotion.kind`` through fixed handler tables instead of
probing for components at runtime. The matching state lives in the
``KinematicController`` or ``RigidBody`` store.
"""

from dataclasses import dataclass
from enum import StrEnum, auto

from portal_universe.components.properties.pose import Vec3, ZERO


class LocomotionKind(StrEnum):
    """Authoritative motion representation of a mover."""

    KINEMATIC_CONTROLLER = auto()
    FREE_BODY = auto()
    PLAIN_TRANSFORM = auto()


@dataclass(frozen=True)
class Locomotion:
    """Tagged variant selecting the mover's motion representation."""

    kind: LocomotionKind = LocomotionKind.PLAIN_TRANSFORM


@dataclass(frozen=True)
class KinematicController:
    """Capsule-style character controller.

    Attributes:
        radius: Physical radius; used to keep exit placement clear of triggers.
        enabled: Disabled controllers neither move nor report velocity.
        velocity: Velocity reported by the controller's last move.
    """

    radius: float = 0.5
    enabled: bool = True
    velocity: Vec3 = ZERO


@dataclass(frozen=True)
class RigidBody:
    """Physics-driven body.

    Attributes:
        linear_velocity: World velocity in units per second.
        angular_velocity: World angular velocity (radians per second per axis).
        is_kinematic: Kinematic bodies are moved explicitly and ignore
            assigned velocities.
        radius: Optional physical radius used for exit clearance.
    """

    linear_velocity: Vec3 = ZERO
    angular_velocity: Vec3 = ZERO
    is_kinematic: bool = False
    radius: float = 0.0
