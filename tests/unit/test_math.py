import math

from portal_universe.components import (
    WORLD_FORWARD,
    WORLD_RIGHT,
    WORLD_UP,
    ZERO,
    Rotation,
    Vec3,
)
from portal_universe.utils.math import (
    is_finite,
    is_orthonormal,
    local_to_world,
    look_rotation,
    normalize,
    project_on_plane,
    world_to_local,
)
from tests.test_utils import vec_close


def test_look_rotation_uses_first_usable_up() -> None:
    rotation = look_rotation(WORLD_RIGHT, WORLD_UP)
    assert vec_close(rotation.forward, WORLD_RIGHT)
    assert vec_close(rotation.up, WORLD_UP)
    assert is_orthonormal(rotation)


def test_look_rotation_skips_parallel_candidates() -> None:
    rotation = look_rotation(WORLD_UP, WORLD_UP, Vec3(0.0, -2.0, 0.0))
    assert vec_close(rotation.forward, WORLD_UP)
    assert vec_close(rotation.up, WORLD_FORWARD)
    assert is_orthonormal(rotation)


def test_look_rotation_degenerate_forward() -> None:
    for forward in (ZERO, Vec3(math.nan, 0.0, 0.0), Vec3(1e-5, 0.0, 0.0)):
        rotation = look_rotation(forward, WORLD_UP)
        assert vec_close(rotation.forward, WORLD_FORWARD)
        assert is_orthonormal(rotation)


def test_normalize_zero_vector() -> None:
    assert normalize(ZERO) == ZERO
    assert vec_close(normalize(Vec3(0.0, 3.0, 4.0)), Vec3(0.0, 0.6, 0.8))


def test_project_on_plane() -> None:
    flat = project_on_plane(Vec3(1.0, 2.0, 3.0), WORLD_UP)
    assert vec_close(flat, Vec3(1.0, 0.0, 3.0))


def test_local_world_round_trip() -> None:
    rotation = look_rotation(Vec3(1.0, 1.0, 0.0), WORLD_UP)
    v = Vec3(0.5, -2.0, 1.0)
    assert vec_close(world_to_local(rotation, local_to_world(rotation, v)), v)


def test_is_orthonormal_rejects_skewed_and_mirrored() -> None:
    skewed = Rotation(WORLD_RIGHT, Vec3(1.0, 1.0, 0.0), WORLD_FORWARD)
    mirrored = Rotation(Vec3(-1.0, 0.0, 0.0), WORLD_UP, WORLD_FORWARD)
    assert not is_orthonormal(skewed)
    assert not is_orthonormal(mirrored)
    assert is_orthonormal(Rotation())


def test_is_finite() -> None:
    assert is_finite(Vec3(1.0, 2.0, 3.0))
    assert not is_finite(Vec3(math.inf, 0.0, 0.0))
