import math
from dataclasses import replace

import pytest

from portal_universe.components import ZERO, Movement, Pose, Vec3
from portal_universe.systems.movement import decay_external_velocity, movement_system
from tests.test_utils import add_crate, add_entity, add_player, make_empty_state


def test_external_velocity_is_held_through_grace() -> None:
    movement = Movement(external_velocity=Vec3(4.0, 0.0, 0.0), grace_timer=0.15)
    movement = decay_external_velocity(movement, 0.1)
    assert movement.external_velocity == Vec3(4.0, 0.0, 0.0)
    assert movement.grace_timer == pytest.approx(0.05)
    movement = decay_external_velocity(movement, 0.1)
    assert movement.external_velocity == Vec3(4.0, 0.0, 0.0)
    assert movement.grace_timer == 0.0


def test_external_velocity_decays_then_rests() -> None:
    movement = Movement(external_velocity=Vec3(4.0, 0.0, 0.0), momentum_decay=2.0)
    movement = decay_external_velocity(movement, 0.1)
    assert movement.external_velocity.x == pytest.approx(4.0 * math.exp(-0.2))

    slow = Movement(external_velocity=Vec3(0.04, 0.0, 0.0), rest_speed=0.05)
    assert decay_external_velocity(slow, 0.1).external_velocity == ZERO


def test_controller_mover_moves_with_intent_plus_momentum() -> None:
    state, ids = add_player(make_empty_state(), Pose(), velocity=Vec3(0.0, 0.0, 1.0))
    root_id = ids["root_id"]
    movement = replace(state.movement[root_id], external_velocity=Vec3(2.0, 0.0, 0.0))
    state = replace(state, movement=state.movement.set(root_id, movement))

    state = movement_system(state, 0.5)
    assert state.pose[root_id].position == Vec3(1.0, 0.0, 0.5)
    assert state.kinematic_controller[root_id].velocity == Vec3(2.0, 0.0, 1.0)
    assert state.movement[root_id].last_world_velocity == Vec3(2.0, 0.0, 1.0)
    # Collider children follow their root without a pose of their own.
    assert ids["collider_id"] not in state.pose


def test_disabled_controller_does_not_move() -> None:
    state, ids = add_player(make_empty_state(), Pose(), velocity=Vec3(0.0, 0.0, 1.0))
    root_id = ids["root_id"]
    controller = replace(state.kinematic_controller[root_id], enabled=False)
    state = replace(
        state, kinematic_controller=state.kinematic_controller.set(root_id, controller)
    )
    state = movement_system(state, 0.5)
    assert state.pose[root_id] == Pose()


def test_free_bodies_move_unless_kinematic() -> None:
    up = Vec3(0.0, 2.0, 0.0)
    state, crate_id = add_crate(make_empty_state(), Pose(), velocity=up)
    state, frozen_id = add_crate(state, Pose(), velocity=up, kinematic=True)
    state = movement_system(state, 0.25)
    assert state.pose[crate_id].position == Vec3(0.0, 0.5, 0.0)
    assert state.pose[frozen_id] == Pose()


def test_pose_less_movers_are_skipped() -> None:
    state, eid = add_entity(make_empty_state(), "unplaced")
    moving = Movement(intended_velocity=Vec3(1.0, 0.0, 0.0))
    state = replace(state, movement=state.movement.set(eid, moving))
    state = movement_system(state, 1.0)
    assert eid not in state.pose
