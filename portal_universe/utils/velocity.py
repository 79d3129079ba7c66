"""Velocity resolution for movers with several motion representations.

A mover may report velocity through its rigid body, its movement
collaborator and its kinematic controller at the same time, but only one of
them is authoritative; the others are often stale or zero. The fastest
observation is taken as representative.
"""

from typing import Optional, Tuple

from portal_universe.components import ZERO, Vec3
from portal_universe.state import State
from portal_universe.types import EntityID
from portal_universe.utils.math import sqr_magnitude


def resolve_velocity(
    rigid_body: Optional[Vec3],
    movement: Optional[Vec3],
    controller: Optional[Vec3],
) -> Vec3:
    """Return the observation with the greatest magnitude.

    Equal magnitudes resolve in argument order: rigid body, then movement
    collaborator, then controller. With no observations the zero vector is
    returned.

    Args:
        rigid_body (Vec3 | None): Free body linear velocity.
        movement (Vec3 | None): Movement collaborator's last world velocity.
        controller (Vec3 | None): Kinematic controller's reported velocity.

    Returns:
        Vec3: Representative world velocity.
    """
    best: Vec3 = ZERO
    best_sqr = -1.0
    for candidate in (rigid_body, movement, controller):
        if candidate is None:
            continue
        candidate_sqr = sqr_magnitude(candidate)
        if candidate_sqr > best_sqr:
            best, best_sqr = candidate, candidate_sqr
    return best


def observed_velocities(
    state: State, mover_id: EntityID
) -> Tuple[Optional[Vec3], Optional[Vec3], Optional[Vec3]]:
    """Collect (rigid body, movement, controller) velocities of ``mover_id``."""
    body = state.rigid_body.get(mover_id)
    movement = state.movement.get(mover_id)
    controller = state.kinematic_controller.get(mover_id)
    return (
        body.linear_velocity if body is not None else None,
        movement.last_world_velocity if movement is not None else None,
        controller.velocity if controller is not None else None,
    )


def mover_velocity(state: State, mover_id: EntityID) -> Vec3:
    """Representative world velocity of ``mover_id``."""
    return resolve_velocity(*observed_velocities(state, mover_id))
