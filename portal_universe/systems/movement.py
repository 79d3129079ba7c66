"""Mover integration system.

Advances every mover by one frame according to its locomotion kind and
applies the movement collaborator's momentum policy:

1. Controller and plain-transform movers travel with
    ``intended_velocity + external_velocity``; the result is recorded as the
    collaborator's ``last_world_velocity`` (and the controller's reported
    velocity).
2. Free bodies travel with their own ``linear_velocity``; kinematic bodies
    stay put.
3. External velocity is held for the grace window, then decays exponentially
    and snaps to zero below ``rest_speed``.
"""

import math
from dataclasses import replace

from portal_universe.components import ZERO, LocomotionKind, Movement
from portal_universe.state import State
from portal_universe.types import EntityID
from portal_universe.utils.ecs import locomotion_kind
from portal_universe.utils.math import add, magnitude, scale
from portal_universe.utils.movement import controller_move


def decay_external_velocity(movement: Movement, dt: float) -> Movement:
    """Advance the grace window or decay the external velocity by ``dt``."""
    if movement.external_velocity == ZERO:
        return replace(movement, grace_timer=0.0)
    if movement.grace_timer > 0.0:
        return replace(movement, grace_timer=max(0.0, movement.grace_timer - dt))
    factor = math.exp(-movement.momentum_decay * dt)
    external = scale(movement.external_velocity, factor)
    if magnitude(external) < movement.rest_speed:
        external = ZERO
    return replace(movement, external_velocity=external)


def _integrate_driven(state: State, entity_id: EntityID, dt: float) -> State:
    movement = state.movement.get(entity_id)
    if movement is None:
        return state
    velocity = add(movement.intended_velocity, movement.external_velocity)

    controller = state.kinematic_controller.get(entity_id)
    if controller is not None:
        if not controller.enabled:
            return state
        state = replace(
            state,
            kinematic_controller=state.kinematic_controller.set(
                entity_id, controller_move(controller, velocity)
            ),
        )

    pose = state.pose[entity_id]
    pose = replace(pose, position=add(pose.position, scale(velocity, dt)))
    movement = replace(movement, last_world_velocity=velocity)
    return replace(
        state,
        pose=state.pose.set(entity_id, pose),
        movement=state.movement.set(entity_id, movement),
    )


def _integrate_body(state: State, entity_id: EntityID, dt: float) -> State:
    body = state.rigid_body.get(entity_id)
    if body is None or body.is_kinematic:
        return state
    pose = state.pose[entity_id]
    step = scale(body.linear_velocity, dt)
    pose = replace(pose, position=add(pose.position, step))
    return replace(state, pose=state.pose.set(entity_id, pose))


def movement_system(state: State, dt: float) -> State:
    """Integrate all posed movers over ``dt`` seconds."""
    movers = set(state.locomotion) | set(state.movement)
    for entity_id in sorted(movers):
        if entity_id not in state.pose:
            continue
        if locomotion_kind(state, entity_id) == LocomotionKind.FREE_BODY:
            state = _integrate_body(state, entity_id, dt)
        else:
            state = _integrate_driven(state, entity_id, dt)

    movement = state.movement
    for entity_id, component in state.movement.items():
        movement = movement.set(entity_id, decay_external_velocity(component, dt))
    return replace(state, movement=movement)
