from __future__ import annotations

import itertools
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pyrsistent import pmap

from portal_universe.components.properties import Parent, Pose
from portal_universe.entity import Entity
from portal_universe.state import State
from portal_universe.types import EntityID
from portal_universe.levels.entity_spec import EntitySpec, STORE_FOR_COMPONENT
from portal_universe.levels.scene import Scene
from portal_universe.utils.portal import link_portals

Stores = Dict[str, Dict[EntityID, Any]]


def _empty_stores() -> Stores:
    """One plain dict per State store filled during conversion."""
    names = [*STORE_FOR_COMPONENT.values(), "entity", "pose", "parent"]
    return {name: {} for name in names}


def _materialize(
    spec: EntitySpec,
    stores: Stores,
    ids: Iterator[EntityID],
    pose: Optional[Pose] = None,
    parent: Optional[EntityID] = None,
) -> EntityID:
    """
    Give ``spec`` the next id and copy its components into ``stores``.

    Placed specs receive ``pose``; children receive a Parent link instead and
    are materialized right after their parent, depth first.
    """
    eid = next(ids)
    stores["entity"][eid] = Entity(name=spec.name)
    for store_name, component in spec.iter_components():
        stores[store_name][eid] = component
    if pose is not None:
        stores["pose"][eid] = pose
    if parent is not None:
        stores["parent"][eid] = Parent(parent)

    for child in spec.children:
        _materialize(child, stores, ids, parent=eid)
    return eid


def to_state(scene: Scene) -> State:
    """
    Build the immutable State described by ``scene``.

    - Ids start at 0 and follow placement order.
    - Portal pair references are wired once every spec exists. A reference to
      a spec that was never placed is ignored; two specs referencing each
      other produce a single pair.
    """
    stores = _empty_stores()
    ids = itertools.count()
    placed: List[Tuple[EntitySpec, EntityID]] = [
        (spec, _materialize(spec, stores, ids, pose=pose))
        for pose, spec in scene.placements
    ]

    state = State(
        raycast_fn=scene.raycast_fn,
        time=scene.time,
        **{name: pmap(store) for name, store in stores.items()},
    )

    id_of_spec = {id(spec): eid for spec, eid in placed}
    for spec, eid in placed:
        if spec.portal_pair_ref is None:
            continue
        mate_id = id_of_spec.get(id(spec.portal_pair_ref))
        if mate_id is None or mate_id == eid:
            continue
        pair = state.portal_pair.get(eid)
        if pair is not None and mate_id in pair:
            continue
        state = link_portals(state, eid, mate_id)
    return state
