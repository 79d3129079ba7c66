"""Portal placement.

Aims a ray (typically from the player camera) and, when it strikes a solid
surface, moves a portal onto that surface facing out of it. Without a
``partner_id`` existing pair links are untouched, so re-placing one end of a
linked pair keeps it linked. With one, the two portals are (re)linked after
the placement through :func:`portal_universe.utils.portal.link_portals`.
"""

import logging
from dataclasses import replace
from typing import Optional

from portal_universe.components import Vec3
from portal_universe.state import State
from portal_universe.types import ALL_LAYERS, EntityID, LayerMask, TriggerPolicy
from portal_universe.utils.diagnostics import entity_label
from portal_universe.utils.frame import surface_pose
from portal_universe.utils.portal import (
    is_symmetric_link,
    link_portals,
    linked_portal,
)

logger = logging.getLogger(__name__)


def place_portal(
    state: State,
    portal_id: EntityID,
    aim_origin: Vec3,
    aim_direction: Vec3,
    aim_right: Vec3,
    max_distance: float = 200.0,
    surface_offset: float = 0.02,
    placement_mask: LayerMask = ALL_LAYERS,
    partner_id: Optional[EntityID] = None,
) -> State:
    """Place ``portal_id`` on the first solid surface along the aim ray.

    Args:
        state (State): Current state.
        portal_id (EntityID): Portal to move.
        aim_origin (Vec3): Aim ray origin.
        aim_direction (Vec3): Aim ray direction.
        aim_right (Vec3): Aim right axis; orients portals on floors and ceilings.
        max_distance (float): Maximum placement distance.
        surface_offset (float): Gap kept between the surface and the portal.
        placement_mask (LayerMask): Layers that accept portals.
        partner_id (Optional[EntityID]): Portal to pair with once placed.
            Ignored when it is ``portal_id`` itself or not a portal.

    Returns:
        State: Unchanged if nothing was hit or ``portal_id`` is not a portal;
            otherwise the portal is posed on the surface and its own collider
            is made a trigger.
    """
    if portal_id not in state.portal:
        return state
    hit = state.raycast_fn(
        state,
        aim_origin,
        aim_direction,
        max_distance,
        placement_mask,
        TriggerPolicy.IGNORE,
    )
    if hit is None:
        logger.info("No valid surface hit for %s", entity_label(state, portal_id))
        return state

    pose = surface_pose(hit.point, hit.normal, aim_right, surface_offset)
    state = replace(state, pose=state.pose.set(portal_id, pose))
    collider = state.collider.get(portal_id)
    if collider is not None and not collider.is_trigger:
        state = replace(
            state,
            collider=state.collider.set(portal_id, replace(collider, is_trigger=True)),
        )
    logger.info(
        "Placed %s at %s with normal %s",
        entity_label(state, portal_id),
        pose.position,
        hit.normal,
    )
    if partner_id is None or partner_id == portal_id:
        return state
    if partner_id not in state.portal:
        return state
    already_paired = linked_portal(state, portal_id) == partner_id
    if not (already_paired and is_symmetric_link(state, portal_id)):
        state = link_portals(state, portal_id, partner_id)
    return state
