"""Portal teleport system.

Consumes the trigger enter events of the current frame and teleports the
mover behind each eligible overlap to the linked portal.

Per portal the re-entry guard is a two-phase machine (``IDLE`` and
``COOLDOWN_ACTIVE``) derived lazily from ``last_teleport_time``; nothing is
scheduled. An overlap is eligible when:

* the portal is linked, and the link is symmetric;
* neither the portal nor its partner is within its own re-entry block;
* the overlapping collider carries ``filter_tag`` when ``require_tag_match``.

A teleport is one ``State`` transition: destination pose, velocity remap and
delivery, upright alignment and the cooldown stamp on *both* portals. Events
are processed in order, so a cooldown armed by one event already applies to
the next event of the same frame.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict

from portal_universe.components import LocomotionKind, Vec3
from portal_universe.state import State
from portal_universe.types import DiagnosticKind, EntityID
from portal_universe.utils.diagnostics import entity_label, report
from portal_universe.utils.ecs import (
    locomotion_kind,
    mover_radius,
    owning_portal,
    resolve_mover_root,
)
from portal_universe.utils.frame import exit_clearance, exit_pose, transform_direction
from portal_universe.utils.movement import (
    align_upright,
    has_locomotion_state,
    receive_momentum,
    write_mover_pose,
)
from portal_universe.utils.physics import portal_trigger_depth
from portal_universe.utils.portal import (
    arm_cooldown,
    is_cooling_down,
    is_symmetric_link,
    linked_portal,
)
from portal_universe.utils.velocity import mover_velocity

logger = logging.getLogger(__name__)

VelocityHandler = Callable[[State, EntityID, Vec3], State]


def _deliver_to_body(state: State, mover_id: EntityID, velocity: Vec3) -> State:
    body = state.rigid_body[mover_id]
    if body.is_kinematic:
        logger.debug("Kinematic body %s ignores portal velocity", mover_id)
        return state
    body = replace(body, linear_velocity=velocity)
    return replace(state, rigid_body=state.rigid_body.set(mover_id, body))


def _deliver_to_movement(state: State, mover_id: EntityID, velocity: Vec3) -> State:
    if mover_id not in state.movement:
        return report(
            state,
            DiagnosticKind.MISSING_MOVEMENT,
            mover_id,
            "no movement collaborator to receive portal momentum",
        )
    return receive_momentum(state, mover_id, velocity)


VELOCITY_HANDLERS: Dict[LocomotionKind, VelocityHandler] = {
    LocomotionKind.KINEMATIC_CONTROLLER: _deliver_to_movement,
    LocomotionKind.FREE_BODY: _deliver_to_body,
    LocomotionKind.PLAIN_TRANSFORM: _deliver_to_movement,
}


def teleport(
    state: State, entry_id: EntityID, exit_id: EntityID, mover_id: EntityID
) -> State:
    """Move ``mover_id`` from ``entry_id`` out of ``exit_id``.

    Args:
        state (State): Current state; both portals must be posed.
        entry_id (EntityID): Portal that was entered.
        exit_id (EntityID): Linked portal the mover leaves from.
        mover_id (EntityID): Resolved mover root.

    Returns:
        State: State with the mover placed, its velocity remapped and
            delivered, and its orientation re-leveled. Cooldowns are not
            armed here (see :func:`portal_system_entity`).
    """
    entry_pose = state.pose[entry_id]
    exit_portal_pose = state.pose[exit_id]

    clearance = exit_clearance(
        state.portal[entry_id],
        mover_radius(state, mover_id),
        portal_trigger_depth(state, exit_id),
    )
    destination = exit_pose(exit_portal_pose, clearance)
    incoming = mover_velocity(state, mover_id)
    outgoing = transform_direction(entry_pose, exit_portal_pose, incoming)

    located = has_locomotion_state(state, mover_id)
    state = write_mover_pose(state, mover_id, destination)
    if not located:
        # Position-only teleport; write_mover_pose already reported it.
        return state

    kind = locomotion_kind(state, mover_id)
    state = VELOCITY_HANDLERS[kind](state, mover_id, outgoing)

    if mover_id in state.movement:
        state = align_upright(state, mover_id, destination.rotation)
    elif kind == LocomotionKind.FREE_BODY:
        # Other kinds were already reported by their velocity handler.
        state = report(
            state,
            DiagnosticKind.MISSING_MOVEMENT,
            mover_id,
            "no movement collaborator; upright alignment skipped",
        )
    return state


def portal_system_entity(
    state: State, portal_id: EntityID, collider_id: EntityID
) -> State:
    """Handle one collider entering the trigger volume of ``portal_id``."""
    portal = state.portal.get(portal_id)
    if portal is None or portal_id not in state.pose:
        return state

    pair = state.portal_pair.get(portal_id)
    if pair is None:
        return report(
            state, DiagnosticKind.UNLINKED_PORTAL, portal_id, "linked portal is not set"
        )
    if not is_symmetric_link(state, portal_id):
        return report(
            state,
            DiagnosticKind.ASYMMETRIC_LINK,
            portal_id,
            f"{pair} is not shared by both of its members",
        )
    exit_id = linked_portal(state, portal_id)

    if is_cooling_down(state, portal_id) or is_cooling_down(state, exit_id):
        return state

    if portal.require_tag_match:
        tag = state.tag.get(collider_id)
        if tag is None or tag.name != portal.filter_tag:
            return state

    mover_id = resolve_mover_root(state, collider_id)
    if mover_id is None:
        return report(
            state,
            DiagnosticKind.MISSING_MOVER_ROOT,
            collider_id,
            f"no mover root behind collider entering {entity_label(state, portal_id)}",
        )

    logger.info(
        "%s: triggered by %s, teleporting %s to %s",
        entity_label(state, portal_id),
        entity_label(state, collider_id),
        entity_label(state, mover_id),
        entity_label(state, exit_id),
    )
    state = teleport(state, portal_id, exit_id, mover_id)
    return arm_cooldown(state, portal_id, exit_id)


def portal_system(state: State) -> State:
    """Process this frame's trigger events against portal volumes."""
    for event in state.trigger_events:
        portal_id = owning_portal(state, event.trigger_id)
        if portal_id is None:
            continue
        state = portal_system_entity(state, portal_id, event.other_id)
    return state
