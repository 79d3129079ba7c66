"""Portal link and cooldown helpers.

Links are stored as :class:`PortalPair` aggregates under both member ids in
``State.portal_pair``. ``link_portals`` is the only way pairs are created at
runtime; it dissolves any previous pairing of either member first, so every
portal is in at most one pair.
"""

from dataclasses import replace
from typing import Optional

from portal_universe.components import PortalPair, PortalPhase
from portal_universe.state import State
from portal_universe.types import EntityID


def unlink_portal(state: State, portal_id: EntityID) -> State:
    """Dissolve the pair containing ``portal_id`` (no-op when unlinked)."""
    pair = state.portal_pair.get(portal_id)
    if pair is None:
        return state
    portal_pair = state.portal_pair
    for member in (pair.first, pair.second):
        if portal_pair.get(member) == pair:
            portal_pair = portal_pair.remove(member)
    return replace(state, portal_pair=portal_pair)


def link_portals(state: State, first: EntityID, second: EntityID) -> State:
    """Pair two portals, replacing whatever either was linked to before.

    Raises:
        ValueError: If ``first == second``.
    """
    pair = PortalPair(first, second)
    state = unlink_portal(unlink_portal(state, first), second)
    portal_pair = state.portal_pair.update({first: pair, second: pair})
    return replace(state, portal_pair=portal_pair)


def linked_portal(state: State, portal_id: EntityID) -> Optional[EntityID]:
    """Partner of ``portal_id``, or ``None`` when the portal is not linked.

    A pair stored under ``portal_id`` that does not contain it counts as no
    link.
    """
    pair = state.portal_pair.get(portal_id)
    if pair is None or portal_id not in pair:
        return None
    return pair.other(portal_id)


def is_symmetric_link(state: State, portal_id: EntityID) -> bool:
    """True when the partner of ``portal_id`` points back through the same pair.

    Also requires the partner to exist as a posed portal.
    """
    pair = state.portal_pair.get(portal_id)
    if pair is None or portal_id not in pair:
        return False
    other = pair.other(portal_id)
    return (
        state.portal_pair.get(other) == pair
        and other in state.portal
        and other in state.pose
    )


def is_cooling_down(state: State, portal_id: EntityID) -> bool:
    """True while ``portal_id`` is within its re-entry block window."""
    portal = state.portal[portal_id]
    return state.time - portal.last_teleport_time < portal.reenter_block_time


def portal_phase(state: State, portal_id: EntityID) -> PortalPhase:
    """Re-entry guard phase of ``portal_id`` at ``state.time``."""
    if is_cooling_down(state, portal_id):
        return PortalPhase.COOLDOWN_ACTIVE
    return PortalPhase.IDLE


def arm_cooldown(state: State, *portal_ids: EntityID) -> State:
    """Stamp ``state.time`` as the last teleport time of every given portal."""
    portal = state.portal
    for portal_id in portal_ids:
        portal = portal.set(
            portal_id, replace(portal[portal_id], last_teleport_time=state.time)
        )
    return replace(state, portal=portal)
