"""ECS hierarchy queries.

Helpers for walking ``Parent`` links and resolving world placement without
introducing iteration logic into systems. All functions are pure and operate
on the immutable :class:`portal_universe.state.State` snapshot.
"""

from typing import List, Optional

from portal_universe.components import LocomotionKind, Pose
from portal_universe.state import State
from portal_universe.types import EntityID
from portal_universe.utils.math import add, local_to_world


def ancestors(state: State, entity_id: EntityID) -> Optional[List[EntityID]]:
    """Return ``entity_id`` followed by its parents up to the hierarchy root.

    Returns ``None`` when the parent chain loops back on itself.
    """
    chain: List[EntityID] = [entity_id]
    seen = {entity_id}
    current = state.parent.get(entity_id)
    while current is not None:
        if current.entity in seen:
            return None
        chain.append(current.entity)
        seen.add(current.entity)
        current = state.parent.get(current.entity)
    return chain


def hierarchy_root(state: State, entity_id: EntityID) -> Optional[EntityID]:
    chain = ancestors(state, entity_id)
    return chain[-1] if chain else None


def world_pose(state: State, entity_id: EntityID) -> Optional[Pose]:
    """Pose of ``entity_id``, inherited from the nearest posed ancestor."""
    chain = ancestors(state, entity_id) or []
    for eid in chain:
        pose = state.pose.get(eid)
        if pose is not None:
            return pose
    return None


def collider_pose(state: State, entity_id: EntityID) -> Optional[Pose]:
    """World pose of the collider owned by ``entity_id`` (center offset applied)."""
    collider = state.collider.get(entity_id)
    pose = world_pose(state, entity_id)
    if collider is None or pose is None:
        return None
    center = add(pose.position, local_to_world(pose.rotation, collider.center))
    return Pose(position=center, rotation=pose.rotation)


def owning_portal(state: State, entity_id: EntityID) -> Optional[EntityID]:
    """Nearest entity in the chain (inclusive) carrying a ``Portal`` component."""
    for eid in ancestors(state, entity_id) or []:
        if eid in state.portal:
            return eid
    return None


def locomotion_kind(state: State, entity_id: EntityID) -> LocomotionKind:
    locomotion = state.locomotion.get(entity_id)
    if locomotion is None:
        return LocomotionKind.PLAIN_TRANSFORM
    return locomotion.kind


def resolve_mover_root(state: State, collider_id: EntityID) -> Optional[EntityID]:
    """Entity that owns the motion of the body behind ``collider_id``.

    Preference order along the parent chain: the nearest kinematic controller,
    then the nearest free body, then the top-most ancestor. The chosen root
    must have a pose of its own; a cyclic chain or a pose-less root yields
    ``None``.
    """
    chain = ancestors(state, collider_id)
    if not chain:
        return None
    for preferred in (LocomotionKind.KINEMATIC_CONTROLLER, LocomotionKind.FREE_BODY):
        for eid in chain:
            if eid in state.locomotion and state.locomotion[eid].kind == preferred:
                return eid if eid in state.pose else None
    root = chain[-1]
    return root if root in state.pose else None


def mover_radius(state: State, mover_id: EntityID) -> Optional[float]:
    """Physical radius of a mover, if any of its representations knows it."""
    controller = state.kinematic_controller.get(mover_id)
    if controller is not None and controller.radius > 0.0:
        return controller.radius
    body = state.rigid_body.get(mover_id)
    if body is not None and body.radius > 0.0:
        return body.radius
    return None
