from dataclasses import replace
from typing import Optional

import pytest

from portal_universe.components import (
    IDENTITY,
    ZERO,
    Collider,
    ColliderShape,
    Parent,
    Pose,
    Vec3,
)
from portal_universe.state import State
from portal_universe.types import ALL_LAYERS, LayerMask, TriggerPolicy
from portal_universe.utils.physics import (
    RaycastHit,
    colliders_overlap,
    portal_trigger_depth,
    scene_raycast,
)
from tests.test_utils import (
    add_entity,
    add_portal,
    add_wall,
    facing,
    make_empty_state,
    vec_close,
)

FORWARD = Vec3(0.0, 0.0, 1.0)


def cast(
    state: State,
    origin: Vec3 = ZERO,
    direction: Vec3 = FORWARD,
    max_distance: float = 100.0,
    mask: LayerMask = ALL_LAYERS,
    policy: TriggerPolicy = TriggerPolicy.COLLIDE,
) -> Optional[RaycastHit]:
    return scene_raycast(state, origin, direction, max_distance, mask, policy)


def test_raycast_hits_sphere_front() -> None:
    state, eid = add_entity(make_empty_state(), "ball", Pose(Vec3(0.0, 0.0, 5.0)))
    state = replace(state, collider=state.collider.set(eid, Collider(radius=1.0)))
    hit = cast(state)
    assert hit is not None
    assert hit.surface_id == eid
    assert hit.distance == pytest.approx(4.0)
    assert vec_close(hit.normal, Vec3(0.0, 0.0, -1.0))
    assert hit.portal_id is None


def test_raycast_ignores_sphere_containing_origin() -> None:
    state, eid = add_entity(make_empty_state(), "ball", Pose(ZERO))
    state = replace(state, collider=state.collider.set(eid, Collider(radius=1.0)))
    assert cast(state, max_distance=10.0) is None


def test_raycast_ignores_box_containing_origin() -> None:
    state, _ = add_wall(
        make_empty_state(), Pose(ZERO, IDENTITY), half_extents=Vec3(1.0, 1.0, 1.0)
    )
    assert cast(state, max_distance=10.0) is None


def test_raycast_box_reports_face_normal() -> None:
    state, wall_id = add_wall(make_empty_state(), Pose(Vec3(0.0, 0.0, 10.0)))
    hit = cast(state)
    assert hit is not None
    assert hit.surface_id == wall_id
    assert vec_close(hit.point, Vec3(0.0, 0.0, 9.5))
    assert vec_close(hit.normal, Vec3(0.0, 0.0, -1.0))


def test_raycast_quad_is_two_sided() -> None:
    state, _ = add_wall(
        make_empty_state(),
        Pose(Vec3(0.0, 0.0, 5.0)),
        half_extents=Vec3(1.0, 1.0, 0.0),
        shape=ColliderShape.QUAD,
    )
    back = cast(state, origin=Vec3(0.0, 0.0, 10.0), direction=Vec3(0.0, 0.0, -1.0))
    assert back is not None
    assert back.distance == pytest.approx(5.0)
    assert vec_close(back.normal, FORWARD)

    front = cast(state)
    assert front is not None
    assert vec_close(front.normal, Vec3(0.0, 0.0, -1.0))

    assert cast(state, origin=Vec3(3.0, 0.0, 0.0)) is None


def test_raycast_respects_layer_mask_and_distance() -> None:
    state, _ = add_wall(make_empty_state(), Pose(Vec3(0.0, 0.0, 10.0)), layer=3)
    assert cast(state, mask=ALL_LAYERS & ~(1 << 3)) is None
    assert cast(state, mask=1 << 3) is not None
    assert cast(state, max_distance=5.0) is None


def test_raycast_trigger_policy() -> None:
    state, wall_id = add_wall(make_empty_state(), Pose(Vec3(0.0, 0.0, 10.0)))
    state, portal_id = add_portal(state, Pose(Vec3(0.0, 0.0, 5.0)))

    hit = cast(state)
    assert hit is not None
    assert hit.surface_id == portal_id
    assert hit.portal_id == portal_id

    hit = cast(state, policy=TriggerPolicy.IGNORE)
    assert hit is not None
    assert hit.surface_id == wall_id


def test_raycast_zero_direction_misses() -> None:
    state, _ = add_wall(make_empty_state(), Pose(Vec3(0.0, 0.0, 10.0)))
    assert cast(state, direction=ZERO) is None


def test_sphere_box_overlap_is_exact() -> None:
    state, portal_id = add_portal(make_empty_state(), Pose(ZERO))
    state, ball_id = add_entity(state, "ball", Pose(Vec3(0.0, 0.0, 0.5)))
    state = replace(state, collider=state.collider.set(ball_id, Collider(radius=0.5)))
    assert colliders_overlap(state, portal_id, ball_id)
    assert colliders_overlap(state, ball_id, portal_id)

    state = replace(state, pose=state.pose.set(ball_id, Pose(Vec3(0.0, 0.0, 0.7))))
    assert not colliders_overlap(state, portal_id, ball_id)


def test_portal_trigger_depth_follows_portal_forward() -> None:
    pose = Pose(Vec3(10.0, 0.0, 0.0), facing(Vec3(1.0, 0.0, 0.0)))
    state, portal_id = add_portal(make_empty_state(), pose)
    assert portal_trigger_depth(state, portal_id) == pytest.approx(0.1)


def test_portal_trigger_depth_counts_child_triggers() -> None:
    state, portal_id = add_portal(make_empty_state(), Pose(ZERO))
    state, child_id = add_entity(state, "frame")
    state = replace(
        state,
        parent=state.parent.set(child_id, Parent(portal_id)),
        collider=state.collider.set(child_id, Collider(radius=0.5, is_trigger=True)),
    )
    assert portal_trigger_depth(state, portal_id) == pytest.approx(0.5)


def test_portal_trigger_depth_ignores_solid_colliders() -> None:
    state, portal_id = add_portal(make_empty_state(), Pose(ZERO))
    solid = replace(state.collider[portal_id], is_trigger=False)
    state = replace(state, collider=state.collider.set(portal_id, solid))
    assert portal_trigger_depth(state, portal_id) == 0.0
