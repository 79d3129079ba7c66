from dataclasses import replace

from portal_universe.components import (
    WORLD_UP,
    ZERO,
    Collider,
    ColliderShape,
    Pose,
    Vec3,
)
from portal_universe.systems.placement import place_portal
from portal_universe.utils.math import is_orthonormal
from portal_universe.utils.portal import linked_portal
from tests.test_utils import (
    add_portal,
    add_wall,
    make_empty_state,
    make_portal_pair_state,
    vec_close,
)

AIM_FORWARD = Vec3(0.0, 0.0, 1.0)
AIM_RIGHT = Vec3(1.0, 0.0, 0.0)


def test_portal_is_placed_on_wall_facing_out() -> None:
    state, portals = make_portal_pair_state(Pose(), Pose(Vec3(-5.0, 0.0, 0.0)))
    portal_id = portals["entry_id"]
    solid = Collider(shape=ColliderShape.BOX, half_extents=Vec3(1.0, 1.5, 0.1))
    state = replace(state, collider=state.collider.set(portal_id, solid))
    state = replace(state, pose=state.pose.remove(portal_id))
    state, _ = add_wall(state, Pose(Vec3(0.0, 1.0, 10.0)))

    state = place_portal(state, portal_id, ZERO, AIM_FORWARD, AIM_RIGHT)
    pose = state.pose[portal_id]
    assert vec_close(pose.position, Vec3(0.0, 0.0, 9.48))
    assert vec_close(pose.rotation.forward, Vec3(0.0, 0.0, -1.0))
    assert vec_close(pose.rotation.up, WORLD_UP)
    assert state.collider[portal_id].is_trigger
    assert linked_portal(state, portal_id) == portals["exit_id"]


def test_portal_on_floor_uses_aim_right() -> None:
    state, portal_id = add_portal(make_empty_state(), Pose(Vec3(0.0, 10.0, 0.0)))
    state, _ = add_wall(
        state, Pose(Vec3(0.0, -0.5, 0.0)), half_extents=Vec3(5.0, 0.5, 5.0)
    )
    state = place_portal(
        state, portal_id, Vec3(0.0, 5.0, 0.0), Vec3(0.0, -1.0, 0.0), AIM_RIGHT
    )
    pose = state.pose[portal_id]
    assert is_orthonormal(pose.rotation)
    assert vec_close(pose.rotation.forward, WORLD_UP)
    assert vec_close(pose.rotation.up, AIM_RIGHT)
    assert vec_close(pose.position, Vec3(0.0, 0.02, 0.0))


def test_placement_passes_through_triggers() -> None:
    state, portal_id = add_portal(make_empty_state(), Pose(Vec3(0.0, 0.0, -5.0)))
    state, _ = add_portal(state, Pose(Vec3(0.0, 0.0, 4.0)))
    state, _ = add_wall(state, Pose(Vec3(0.0, 0.0, 10.0)))
    state = place_portal(state, portal_id, ZERO, AIM_FORWARD, AIM_RIGHT)
    assert vec_close(state.pose[portal_id].position, Vec3(0.0, 0.0, 9.48))


def test_miss_leaves_state_unchanged() -> None:
    state, portal_id = add_portal(make_empty_state(), Pose())
    assert place_portal(state, portal_id, ZERO, AIM_FORWARD, AIM_RIGHT) == state


def test_placement_mask_filters_surfaces() -> None:
    state, portal_id = add_portal(make_empty_state(), Pose(Vec3(0.0, 0.0, -5.0)))
    state, _ = add_wall(state, Pose(Vec3(0.0, 0.0, 10.0)), layer=2)
    result = place_portal(
        state, portal_id, ZERO, AIM_FORWARD, AIM_RIGHT, placement_mask=1 << 0
    )
    assert result == state


def test_non_portal_is_not_placed() -> None:
    state, wall_id = add_wall(make_empty_state(), Pose(Vec3(0.0, 0.0, 10.0)))
    assert place_portal(state, wall_id, ZERO, AIM_FORWARD, AIM_RIGHT) == state


def test_placement_links_partner() -> None:
    state, portals = make_portal_pair_state(
        Pose(Vec3(0.0, 0.0, -5.0)), Pose(Vec3(-5.0, 0.0, 0.0)), linked=False
    )
    entry_id, exit_id = portals["entry_id"], portals["exit_id"]
    state, _ = add_wall(state, Pose(Vec3(0.0, 0.0, 10.0)))
    state = place_portal(
        state, entry_id, ZERO, AIM_FORWARD, AIM_RIGHT, partner_id=exit_id
    )
    assert linked_portal(state, entry_id) == exit_id
    assert linked_portal(state, exit_id) == entry_id
    assert state.portal_pair[entry_id] == state.portal_pair[exit_id]


def test_placement_without_hit_does_not_link() -> None:
    state, portals = make_portal_pair_state(
        Pose(), Pose(Vec3(-5.0, 0.0, 0.0)), linked=False
    )
    result = place_portal(
        state,
        portals["entry_id"],
        ZERO,
        AIM_FORWARD,
        AIM_RIGHT,
        partner_id=portals["exit_id"],
    )
    assert result == state
