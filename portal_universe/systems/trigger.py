"""Trigger overlap system.

Turns continuous overlap between trigger volumes and solid colliders into
discrete *enter* events: a pair that overlaps now but did not at the end of
the previous pass yields one :class:`TriggerEvent`. The current overlap set is
kept in ``State.overlaps`` for the next frame.

Colliders sharing a hierarchy root never pair with each other, so a portal's
own parts or a player's own body pieces do not trigger themselves.
"""

from dataclasses import replace
from typing import List, Set, Tuple

from pyrsistent import pset, pvector

from portal_universe.records import TriggerEvent
from portal_universe.state import State
from portal_universe.types import EntityID
from portal_universe.utils.ecs import hierarchy_root
from portal_universe.utils.physics import colliders_overlap


def current_overlaps(state: State) -> Set[Tuple[EntityID, EntityID]]:
    """All (trigger, solid) collider pairs overlapping in ``state``."""
    triggers = [eid for eid, c in state.collider.items() if c.is_trigger]
    solids = [eid for eid, c in state.collider.items() if not c.is_trigger]
    overlaps: Set[Tuple[EntityID, EntityID]] = set()
    for trigger_id in triggers:
        trigger_root = hierarchy_root(state, trigger_id)
        for other_id in solids:
            if hierarchy_root(state, other_id) == trigger_root:
                continue
            if colliders_overlap(state, trigger_id, other_id):
                overlaps.add((trigger_id, other_id))
    return overlaps


def trigger_system(state: State) -> State:
    """Record this frame's enter events and the new overlap set."""
    overlaps = current_overlaps(state)
    entered: List[TriggerEvent] = sorted(
        TriggerEvent(trigger_id, other_id)
        for trigger_id, other_id in overlaps
        if (trigger_id, other_id) not in state.overlaps
    )
    return replace(state, overlaps=pset(overlaps), trigger_events=pvector(entered))
