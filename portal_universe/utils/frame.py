"""Portal frame transforms.

Pure functions mapping points, directions and orientations expressed relative
to one portal (the *entry*) into the frame of its partner (the *exit*).

Going through a portal means entering it against its forward axis and leaving
the partner along the partner's forward axis. The remap therefore expresses a
vector in the entry frame, turns it 180° about the local up axis and expresses
the result in the exit frame::

    M = R_exit @ diag(-1, 1, -1) @ R_entry.T

``M`` is a product of orthonormal matrices, so lengths are preserved and
``-entry.forward`` maps exactly onto ``exit.forward``.
"""

from typing import Optional, Tuple

import numpy as np

from portal_universe.components import (
    WORLD_FORWARD,
    WORLD_UP,
    Portal,
    Pose,
    Rotation,
    Vec3,
)
from portal_universe.utils.math import (
    Array,
    add,
    look_rotation,
    normalize,
    project_on_plane,
    rotation_from_matrix,
    rotation_matrix,
    scale,
    subtract,
    to_array,
    to_vec3,
)

# 180° about local up: (x, y, z) -> (-x, y, -z)
HALF_TURN = np.diag([-1.0, 1.0, -1.0])

# Gap kept between a mover's surface and the front of the exit trigger.
CLEARANCE_SKIN = 0.1


def portal_matrix(entry: Pose, exit: Pose) -> Array:
    """Return the 3x3 linear part of the entry -> exit remap."""
    entry_matrix = rotation_matrix(entry.rotation)
    return rotation_matrix(exit.rotation) @ HALF_TURN @ entry_matrix.T


def transform_direction(entry: Pose, exit: Pose, vector: Vec3) -> Vec3:
    """Remap a world direction or velocity from the entry to the exit frame."""
    return to_vec3(portal_matrix(entry, exit) @ to_array(vector))


def transform_point(entry: Pose, exit: Pose, point: Vec3) -> Vec3:
    """Remap a world point relative to the entry onto the same offset from the exit."""
    offset = to_array(subtract(point, entry.position))
    return add(exit.position, to_vec3(portal_matrix(entry, exit) @ offset))


def transform_rotation(entry: Pose, exit: Pose, rotation: Rotation) -> Rotation:
    """Remap a world orientation from the entry to the exit frame."""
    return rotation_from_matrix(portal_matrix(entry, exit) @ rotation_matrix(rotation))


def exit_pose(exit: Pose, clearance: float) -> Pose:
    """Pose at which a mover is placed when leaving through ``exit``.

    Args:
        exit (Pose): World pose of the exit portal.
        clearance (float): Distance in front of the exit plane.

    Returns:
        Pose: ``exit.position + exit.forward * clearance`` with the exit's rotation.
    """
    return Pose(
        position=add(exit.position, scale(exit.rotation.forward, clearance)),
        rotation=exit.rotation,
    )


def exit_clearance(
    portal: Portal, mover_radius: Optional[float], exit_depth: float = 0.0
) -> float:
    """Clearance used when teleporting a mover through ``portal``.

    A known radius raises the configured clearance to ``exit_depth`` (how far
    the exit trigger reaches in front of its plane) plus the radius plus
    ``CLEARANCE_SKIN``, so the mover lands fully outside the exit trigger
    volume. Without a radius the configured value is used as is.
    """
    if mover_radius is None or mover_radius <= 0.0:
        return portal.exit_clearance
    return max(portal.exit_clearance, exit_depth + mover_radius + CLEARANCE_SKIN)


def exit_ray(
    entry: Pose, exit: Pose, hit_point: Vec3, direction: Vec3, epsilon: float
) -> Tuple[Vec3, Vec3]:
    """Continue a ray that struck ``entry`` out of ``exit``.

    The in-plane offset of the hit from the entry center is remapped onto the
    exit plane and the origin is pushed ``epsilon`` along the exit forward so
    the continued ray does not immediately strike the exit surface.

    Returns:
        Tuple[Vec3, Vec3]: New origin and new unit direction.
    """
    offset = subtract(hit_point, entry.position)
    offset = project_on_plane(offset, entry.rotation.forward)
    on_exit = transform_point(entry, exit, add(entry.position, offset))
    origin = add(on_exit, scale(exit.rotation.forward, epsilon))
    return origin, normalize(transform_direction(entry, exit, direction))


def surface_pose(
    point: Vec3, normal: Vec3, right_hint: Vec3, surface_offset: float
) -> Pose:
    """Pose for a portal placed on a surface.

    Forward follows the surface normal. Up is world up projected onto the
    surface, which keeps portals upright on walls; on floors and ceilings the
    projected aim right axis is used instead, then world forward.
    """
    rotation = look_rotation(normal, WORLD_UP, right_hint, WORLD_FORWARD)
    return Pose(
        position=add(point, scale(rotation.forward, surface_offset)), rotation=rotation
    )
