"""Mover pose writes and the movement collaborator interface.

Pose writes dispatch on the mover's :class:`Locomotion` kind through a fixed
handler table. The movement collaborator side exposes the two calls portals
make after a teleport: :func:`receive_momentum` and :func:`align_upright`.
"""

from dataclasses import replace
from typing import Callable, Dict

from portal_universe.components import (
    WORLD_FORWARD,
    WORLD_UP,
    ZERO,
    KinematicController,
    LocomotionKind,
    Pose,
    Rotation,
    Vec3,
)
from portal_universe.state import State
from portal_universe.types import DiagnosticKind, EntityID
from portal_universe.utils.diagnostics import report
from portal_universe.utils.ecs import locomotion_kind
from portal_universe.utils.math import (
    DEGENERATE_SQR,
    look_rotation,
    normalize,
    project_on_plane,
    sqr_magnitude,
)

PoseWriter = Callable[[State, EntityID, Pose], State]


def controller_move(
    controller: KinematicController, velocity: Vec3
) -> KinematicController:
    """Record a move on the controller; disabled controllers ignore it."""
    if not controller.enabled:
        return controller
    return replace(controller, velocity=velocity)


def _write_transform_pose(state: State, mover_id: EntityID, pose: Pose) -> State:
    return replace(state, pose=state.pose.set(mover_id, pose))


def _write_controller_pose(state: State, mover_id: EntityID, pose: Pose) -> State:
    controller = state.kinematic_controller[mover_id]
    was_enabled = controller.enabled
    # Raw pose writes only happen with the controller switched off.
    state = replace(
        state,
        kinematic_controller=state.kinematic_controller.set(
            mover_id, replace(controller, enabled=False)
        ),
    )
    state = _write_transform_pose(state, mover_id, pose)
    controller = replace(state.kinematic_controller[mover_id], enabled=was_enabled)
    # Zero-length move resynchronizes the controller with its new pose.
    controller = controller_move(controller, ZERO)
    return replace(
        state,
        kinematic_controller=state.kinematic_controller.set(mover_id, controller),
    )


def _write_body_pose(state: State, mover_id: EntityID, pose: Pose) -> State:
    body = state.rigid_body[mover_id]
    if not body.is_kinematic:
        body = replace(body, angular_velocity=ZERO)
    state = replace(state, rigid_body=state.rigid_body.set(mover_id, body))
    return _write_transform_pose(state, mover_id, pose)


POSE_WRITERS: Dict[LocomotionKind, PoseWriter] = {
    LocomotionKind.KINEMATIC_CONTROLLER: _write_controller_pose,
    LocomotionKind.FREE_BODY: _write_body_pose,
    LocomotionKind.PLAIN_TRANSFORM: _write_transform_pose,
}


def has_locomotion_state(state: State, mover_id: EntityID) -> bool:
    """True when the store matching the mover's locomotion kind has an entry."""
    kind = locomotion_kind(state, mover_id)
    if kind == LocomotionKind.KINEMATIC_CONTROLLER:
        return mover_id in state.kinematic_controller
    if kind == LocomotionKind.FREE_BODY:
        return mover_id in state.rigid_body
    return True


def pose_writer(state: State, mover_id: EntityID) -> PoseWriter:
    """Handler for the mover's locomotion kind, or the plain transform writer."""
    if not has_locomotion_state(state, mover_id):
        return _write_transform_pose
    return POSE_WRITERS[locomotion_kind(state, mover_id)]


def write_mover_pose(state: State, mover_id: EntityID, pose: Pose) -> State:
    """Place a mover, using the handler for its locomotion kind.

    A mover whose declared representation has no component falls back to a
    plain transform write and a ``MISSING_LOCOMOTION`` diagnostic.
    """
    if not has_locomotion_state(state, mover_id):
        state = report(
            state,
            DiagnosticKind.MISSING_LOCOMOTION,
            mover_id,
            f"declared {locomotion_kind(state, mover_id)} without its component; "
            "moved as a plain transform",
        )
    return pose_writer(state, mover_id)(state, mover_id, pose)


def receive_momentum(state: State, mover_id: EntityID, velocity: Vec3) -> State:
    """Inject a world velocity into the mover's movement collaborator.

    The velocity becomes the persistent external velocity and the grace
    window restarts; :func:`portal_universe.systems.movement.movement_system`
    holds it through the window and then lets it decay.
    """
    movement = state.movement.get(mover_id)
    if movement is None:
        return state
    movement = replace(
        movement,
        external_velocity=velocity,
        last_world_velocity=velocity,
        grace_timer=movement.grace_time,
    )
    return replace(state, movement=state.movement.set(mover_id, movement))


def upright_rotation(exit_rotation: Rotation, current_forward: Vec3) -> Rotation:
    """Level orientation facing the exit's horizontal heading.

    Up is world up and forward is the exit forward flattened onto the
    horizontal plane. When the exit faces straight up or down the mover's own
    flattened forward is used, then world forward.
    """
    for candidate in (exit_rotation.forward, current_forward, WORLD_FORWARD):
        flat = project_on_plane(candidate, WORLD_UP)
        if sqr_magnitude(flat) >= DEGENERATE_SQR:
            return look_rotation(normalize(flat), WORLD_UP)
    return look_rotation(WORLD_FORWARD, WORLD_UP)


def align_upright(state: State, mover_id: EntityID, exit_rotation: Rotation) -> State:
    """Re-level a mover after it leaves a portal.

    Honors ``Movement.align_upright_on_exit``; free bodies optionally lose
    their angular velocity. Movers without a movement collaborator are left
    untouched.
    """
    movement = state.movement.get(mover_id)
    pose = state.pose.get(mover_id)
    if movement is None or pose is None or not movement.align_upright_on_exit:
        return state

    rotation = upright_rotation(exit_rotation, pose.rotation.forward)
    body = state.rigid_body.get(mover_id)
    if body is not None and not body.is_kinematic and movement.zero_angular_on_align:
        state = replace(
            state,
            rigid_body=state.rigid_body.set(
                mover_id, replace(body, angular_velocity=ZERO)
            ),
        )
    write = pose_writer(state, mover_id)
    return write(state, mover_id, replace(pose, rotation=rotation))
