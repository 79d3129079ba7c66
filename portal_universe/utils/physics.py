"""Scene physics queries.

The default :data:`portal_universe.types.RaycastFn` implementation and the
shape overlap tests used by the trigger system. Both are synchronous and
side-effect free: they read collider shapes from a ``State`` and never modify
it.

Raycasts ignore a collider whose volume contains the ray origin, so a ray
starting inside a trigger volume passes out of it instead of stopping at
distance zero.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from portal_universe.components import Collider, ColliderShape, Pose, Vec3
from portal_universe.state import State
from portal_universe.types import EntityID, LayerMask, TriggerPolicy
from portal_universe.utils.ecs import collider_pose, owning_portal
from portal_universe.utils.math import (
    Array,
    magnitude,
    rotation_matrix,
    to_array,
    to_vec3,
)

# Directions whose component along an axis is below this are parallel to it.
PARALLEL_EPSILON = 1e-12


@dataclass(frozen=True)
class RaycastHit:
    """Closest surface struck by a raycast.

    Attributes:
        point: World hit point.
        normal: Unit surface normal facing the ray.
        distance: Distance from the ray origin to ``point``.
        surface_id: Entity owning the struck collider.
        portal_id: Portal associated with the collider, if any.
    """

    point: Vec3
    normal: Vec3
    distance: float
    surface_id: EntityID
    portal_id: Optional[EntityID] = None


def in_layer_mask(layer: int, mask: LayerMask) -> bool:
    return bool((mask >> layer) & 1)


def _ray_sphere(
    origin: Array, direction: Array, center: Array, radius: float
) -> Optional[Tuple[float, Array]]:
    oc = origin - center
    c = float(oc @ oc) - radius * radius
    if c <= 0.0:
        return None
    b = float(oc @ direction)
    disc = b * b - c
    if disc < 0.0:
        return None
    t = -b - float(np.sqrt(disc))
    if t < 0.0:
        return None
    normal = origin + direction * t - center
    return t, normal / np.linalg.norm(normal)


def _ray_box(
    origin: Array, direction: Array, pose: Pose, half_extents: Array
) -> Optional[Tuple[float, Array]]:
    rot = rotation_matrix(pose.rotation)
    local_origin = rot.T @ (origin - to_array(pose.position))
    local_dir = rot.T @ direction

    t_near, t_far, axis = -np.inf, np.inf, -1
    for i in range(3):
        if abs(local_dir[i]) < PARALLEL_EPSILON:
            if abs(local_origin[i]) > half_extents[i]:
                return None
            continue
        t1 = (-half_extents[i] - local_origin[i]) / local_dir[i]
        t2 = (half_extents[i] - local_origin[i]) / local_dir[i]
        if t1 > t2:
            t1, t2 = t2, t1
        if t1 > t_near:
            t_near, axis = t1, i
        t_far = min(t_far, t2)
        if t_near > t_far:
            return None
    # Behind the ray, or the origin is inside the box.
    if axis < 0 or t_near < 0.0:
        return None
    local_normal = np.zeros(3)
    local_normal[axis] = -np.sign(local_dir[axis])
    return float(t_near), rot @ local_normal


def _ray_quad(
    origin: Array, direction: Array, pose: Pose, half_extents: Array
) -> Optional[Tuple[float, Array]]:
    rot = rotation_matrix(pose.rotation)
    center = to_array(pose.position)
    normal = rot[:, 2]
    denom = float(direction @ normal)
    if abs(denom) < PARALLEL_EPSILON:
        return None
    t = float((center - origin) @ normal) / denom
    if t < 0.0:
        return None
    local = rot.T @ (origin + direction * t - center)
    if abs(local[0]) > half_extents[0] or abs(local[1]) > half_extents[1]:
        return None
    return t, normal if denom < 0.0 else -normal


def ray_collider(
    origin: Vec3, direction: Vec3, collider: Collider, pose: Pose
) -> Optional[Tuple[float, Vec3]]:
    """Distance and facing normal where a unit ray meets one collider."""
    o, d = to_array(origin), to_array(direction)
    half_extents = to_array(collider.half_extents)
    if collider.shape == ColliderShape.SPHERE:
        hit = _ray_sphere(o, d, to_array(pose.position), collider.radius)
    elif collider.shape == ColliderShape.BOX:
        hit = _ray_box(o, d, pose, half_extents)
    else:
        hit = _ray_quad(o, d, pose, half_extents)
    if hit is None:
        return None
    t, normal = hit
    return t, to_vec3(normal)


def scene_raycast(
    state: State,
    origin: Vec3,
    direction: Vec3,
    max_distance: float,
    layer_mask: LayerMask,
    trigger_policy: TriggerPolicy,
) -> Optional[RaycastHit]:
    """Closest collider hit along a ray, within ``max_distance``.

    Args:
        state (State): Scene to query.
        origin (Vec3): Ray origin.
        direction (Vec3): Ray direction (normalized here).
        max_distance (float): Maximum hit distance.
        layer_mask (LayerMask): Bit mask of layers that can be hit.
        trigger_policy (TriggerPolicy): Whether trigger colliders are hit.

    Returns:
        RaycastHit | None: Nearest hit (lowest entity id on exact ties).
    """
    length = magnitude(direction)
    if length == 0.0 or max_distance <= 0.0:
        return None
    unit = to_vec3(to_array(direction) / length)

    best: Optional[Tuple[float, Vec3, EntityID]] = None
    for eid in sorted(state.collider.keys()):
        collider = state.collider[eid]
        if not in_layer_mask(collider.layer, layer_mask):
            continue
        if collider.is_trigger and trigger_policy == TriggerPolicy.IGNORE:
            continue
        pose = collider_pose(state, eid)
        if pose is None:
            continue
        hit = ray_collider(origin, unit, collider, pose)
        if hit is None or hit[0] > max_distance:
            continue
        if best is None or hit[0] < best[0]:
            best = (hit[0], hit[1], eid)

    if best is None:
        return None
    t, normal, eid = best
    return RaycastHit(
        point=to_vec3(to_array(origin) + to_array(unit) * t),
        normal=normal,
        distance=t,
        surface_id=eid,
        portal_id=owning_portal(state, eid),
    )


def closest_point(collider: Collider, pose: Pose, point: Vec3) -> Vec3:
    """Point of a collider's volume (or quad surface) closest to ``point``."""
    center = to_array(pose.position)
    p = to_array(point)
    if collider.shape == ColliderShape.SPHERE:
        offset = p - center
        length = float(np.linalg.norm(offset))
        if length <= collider.radius:
            return point
        return to_vec3(center + offset * (collider.radius / length))

    rot = rotation_matrix(pose.rotation)
    half_extents = to_array(collider.half_extents)
    if collider.shape == ColliderShape.QUAD:
        half_extents[2] = 0.0
    local = np.clip(rot.T @ (p - center), -half_extents, half_extents)
    return to_vec3(center + rot @ local)


def bounding_radius(collider: Collider) -> float:
    if collider.shape == ColliderShape.SPHERE:
        return collider.radius
    return float(np.linalg.norm(to_array(collider.half_extents)))


def colliders_overlap(state: State, first: EntityID, second: EntityID) -> bool:
    """Overlap test between two colliders.

    Exact when either collider is a sphere. Two non-sphere shapes are tested
    with the second one's bounding sphere.
    """
    a, b = state.collider[first], state.collider[second]
    pose_a, pose_b = collider_pose(state, first), collider_pose(state, second)
    if pose_a is None or pose_b is None:
        return False
    if a.shape == ColliderShape.SPHERE and b.shape != ColliderShape.SPHERE:
        a, b, pose_a, pose_b = b, a, pose_b, pose_a
    radius = bounding_radius(b)
    nearest = to_array(closest_point(a, pose_a, pose_b.position))
    gap = nearest - to_array(pose_b.position)
    return float(gap @ gap) <= radius * radius


def _support_extent(collider: Collider, pose: Pose, axis: Array) -> float:
    """Half-width of a collider's volume measured along a unit ``axis``."""
    if collider.shape == ColliderShape.SPHERE:
        return collider.radius
    half_extents = to_array(collider.half_extents)
    if collider.shape == ColliderShape.QUAD:
        half_extents[2] = 0.0
    along = np.abs(rotation_matrix(pose.rotation).T @ axis)
    return float(along @ half_extents)


def portal_trigger_depth(state: State, portal_id: EntityID) -> float:
    """How far the trigger volumes owned by ``portal_id`` reach past its front plane.

    Zero for an unposed portal or one without trigger colliders.
    """
    portal_pose = state.pose.get(portal_id)
    if portal_pose is None:
        return 0.0
    forward = to_array(portal_pose.rotation.forward)
    depth = 0.0
    for eid, collider in state.collider.items():
        if not collider.is_trigger or owning_portal(state, eid) != portal_id:
            continue
        pose = collider_pose(state, eid)
        if pose is None:
            continue
        offset = to_array(pose.position) - to_array(portal_pose.position)
        reach = float(offset @ forward) + _support_extent(collider, pose, forward)
        depth = max(depth, reach)
    return depth
