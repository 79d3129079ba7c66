"""Vector and rotation math backed by numpy.

Components store plain ``Vec3`` / ``Rotation`` value objects; these helpers
convert them to ``float64`` arrays for the linear algebra and back. Every
helper returns new values and never mutates its inputs.
"""

from typing import Iterable

import numpy as np
import numpy.typing as npt

from portal_universe.components import (
    WORLD_FORWARD,
    WORLD_RIGHT,
    WORLD_UP,
    ZERO,
    Rotation,
    Vec3,
)

Array = npt.NDArray[np.float64]

# Squared length under which a direction is treated as degenerate.
DEGENERATE_SQR = 1e-4


def to_array(v: Vec3) -> Array:
    """Return ``v`` as a float64 array of shape (3,)."""
    return np.array([v.x, v.y, v.z], dtype=np.float64)


def to_vec3(a: Iterable[float]) -> Vec3:
    """Build a ``Vec3`` from any 3-element sequence or array."""
    x, y, z = (float(c) for c in a)
    return Vec3(x, y, z)


def rotation_matrix(rotation: Rotation) -> Array:
    """Return the 3x3 matrix whose columns are right, up and forward."""
    return np.column_stack(
        [to_array(rotation.right), to_array(rotation.up), to_array(rotation.forward)]
    )


def rotation_from_matrix(m: Array) -> Rotation:
    """Inverse of :func:`rotation_matrix`."""
    return Rotation(
        right=to_vec3(m[:, 0]), up=to_vec3(m[:, 1]), forward=to_vec3(m[:, 2])
    )


def add(a: Vec3, b: Vec3) -> Vec3:
    return Vec3(a.x + b.x, a.y + b.y, a.z + b.z)


def subtract(a: Vec3, b: Vec3) -> Vec3:
    return Vec3(a.x - b.x, a.y - b.y, a.z - b.z)


def scale(v: Vec3, s: float) -> Vec3:
    return Vec3(v.x * s, v.y * s, v.z * s)


def dot(a: Vec3, b: Vec3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def sqr_magnitude(v: Vec3) -> float:
    return dot(v, v)


def magnitude(v: Vec3) -> float:
    return float(np.sqrt(sqr_magnitude(v)))


def distance(a: Vec3, b: Vec3) -> float:
    return magnitude(subtract(a, b))


def normalize(v: Vec3) -> Vec3:
    """Return ``v`` scaled to unit length, or ``ZERO`` for a zero vector."""
    length = magnitude(v)
    if length == 0.0:
        return ZERO
    return scale(v, 1.0 / length)


def project_on_plane(v: Vec3, normal: Vec3) -> Vec3:
    """Remove the component of ``v`` along the unit ``normal``."""
    return subtract(v, scale(normal, dot(v, normal)))


def is_finite(v: Vec3) -> bool:
    return bool(np.all(np.isfinite(to_array(v))))


def local_to_world(rotation: Rotation, v: Vec3) -> Vec3:
    return to_vec3(rotation_matrix(rotation) @ to_array(v))


def world_to_local(rotation: Rotation, v: Vec3) -> Vec3:
    return to_vec3(rotation_matrix(rotation).T @ to_array(v))


def look_rotation(forward: Vec3, *up_candidates: Vec3) -> Rotation:
    """Build an orthonormal rotation looking along ``forward``.

    The first candidate whose projection onto the plane perpendicular to
    ``forward`` is not degenerate becomes the up axis. World up, world forward
    and world right are always tried after the given candidates; at least one
    of them is far from any unit forward, so the result is always finite and
    orthonormal. A degenerate ``forward`` is replaced by world forward.

    Args:
        forward (Vec3): Desired local +Z axis (need not be unit length).
        *up_candidates (Vec3): Preferred up references, in priority order.

    Returns:
        Rotation: Right-handed orthonormal frame with ``forward`` as +Z.
    """
    f = to_array(forward)
    if not np.all(np.isfinite(f)) or float(f @ f) < DEGENERATE_SQR:
        f = to_array(WORLD_FORWARD)
    f = f / np.linalg.norm(f)

    up = None
    for candidate in (*up_candidates, WORLD_UP, WORLD_FORWARD, WORLD_RIGHT):
        c = to_array(candidate)
        if not np.all(np.isfinite(c)):
            continue
        projected = c - f * float(c @ f)
        if float(projected @ projected) >= DEGENERATE_SQR:
            up = projected / np.linalg.norm(projected)
            break
    assert up is not None  # one world axis is always usable

    right = np.cross(up, f)
    right = right / np.linalg.norm(right)
    up = np.cross(f, right)
    return rotation_from_matrix(np.column_stack([right, up, f]))


def is_orthonormal(rotation: Rotation, tolerance: float = 1e-6) -> bool:
    """Return True if the rotation matrix is orthonormal and right-handed."""
    m = rotation_matrix(rotation)
    if not np.all(np.isfinite(m)):
        return False
    return bool(
        np.allclose(m.T @ m, np.eye(3), atol=tolerance)
        and abs(float(np.linalg.det(m)) - 1.0) <= tolerance
    )
