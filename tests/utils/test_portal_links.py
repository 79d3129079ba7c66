from dataclasses import replace

import pytest

from portal_universe.components import PortalPair, PortalPhase, Pose, Vec3
from portal_universe.utils.portal import (
    arm_cooldown,
    is_cooling_down,
    is_symmetric_link,
    link_portals,
    linked_portal,
    portal_phase,
    unlink_portal,
)
from tests.test_utils import add_portal, make_portal_pair_state, with_time


def test_link_is_stored_under_both_members() -> None:
    state, ids = make_portal_pair_state(Pose(), Pose(Vec3(5.0, 0.0, 0.0)))
    entry_id, exit_id = ids["entry_id"], ids["exit_id"]
    assert state.portal_pair[entry_id] == state.portal_pair[exit_id]
    assert linked_portal(state, entry_id) == exit_id
    assert linked_portal(state, exit_id) == entry_id
    assert is_symmetric_link(state, entry_id)
    assert is_symmetric_link(state, exit_id)


def test_relinking_dissolves_previous_pair() -> None:
    state, ids = make_portal_pair_state(Pose(), Pose(Vec3(5.0, 0.0, 0.0)))
    state, third_id = add_portal(state, Pose(Vec3(-5.0, 0.0, 0.0)))
    state = link_portals(state, ids["entry_id"], third_id)
    assert linked_portal(state, ids["entry_id"]) == third_id
    assert linked_portal(state, third_id) == ids["entry_id"]
    assert linked_portal(state, ids["exit_id"]) is None


def test_unlink_portal() -> None:
    state, ids = make_portal_pair_state(Pose(), Pose(Vec3(5.0, 0.0, 0.0)))
    state = unlink_portal(state, ids["exit_id"])
    assert linked_portal(state, ids["entry_id"]) is None
    assert linked_portal(state, ids["exit_id"]) is None
    assert unlink_portal(state, ids["exit_id"]) == state


def test_self_link_is_rejected() -> None:
    state, ids = make_portal_pair_state(Pose(), Pose(Vec3(5.0, 0.0, 0.0)))
    with pytest.raises(ValueError):
        link_portals(state, ids["entry_id"], ids["entry_id"])


def test_asymmetric_link_is_detected() -> None:
    state, ids = make_portal_pair_state(
        Pose(), Pose(Vec3(5.0, 0.0, 0.0)), linked=False
    )
    state, third_id = add_portal(state, Pose(Vec3(-5.0, 0.0, 0.0)))
    entry_id, exit_id = ids["entry_id"], ids["exit_id"]
    state = replace(
        state,
        portal_pair=state.portal_pair.update(
            {
                entry_id: PortalPair(entry_id, exit_id),
                exit_id: PortalPair(exit_id, third_id),
            }
        ),
    )
    assert not is_symmetric_link(state, entry_id)


def test_partner_without_pose_is_not_symmetric() -> None:
    state, ids = make_portal_pair_state(Pose(), Pose(Vec3(5.0, 0.0, 0.0)))
    state = replace(state, pose=state.pose.remove(ids["exit_id"]))
    assert not is_symmetric_link(state, ids["entry_id"])


def test_cooldown_window() -> None:
    state, ids = make_portal_pair_state(Pose(), Pose(Vec3(5.0, 0.0, 0.0)))
    entry_id = ids["entry_id"]
    assert portal_phase(state, entry_id) == PortalPhase.IDLE

    state = arm_cooldown(with_time(state, 1.0), entry_id)
    assert state.portal[entry_id].last_teleport_time == 1.0
    assert portal_phase(with_time(state, 1.1), entry_id) == PortalPhase.COOLDOWN_ACTIVE
    assert not is_cooling_down(with_time(state, 1.25), entry_id)
    assert portal_phase(with_time(state, 1.3), entry_id) == PortalPhase.IDLE
    assert not is_cooling_down(state, ids["exit_id"])
