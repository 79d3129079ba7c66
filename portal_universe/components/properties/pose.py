"""Pose component and its value types.

``Vec3`` and ``Rotation`` are immutable value objects (hashable, comparable)
so they can live inside persistent maps. Numeric work happens in
:mod:`portal_universe.utils.math`, which converts to and from numpy arrays.

Axis convention: +X right, +Y up, +Z forward. A ``Rotation`` stores the three
world-space axes of a local frame; they are the columns of its rotation
matrix, so ``local -> world`` is ``R @ v`` and ``world -> local`` is ``R.T @ v``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Vec3:
    """World or local 3D vector.

    Attributes:
        x: Right component.
        y: Up component.
        z: Forward component.
    """

    x: float
    y: float
    z: float


ZERO = Vec3(0.0, 0.0, 0.0)
WORLD_RIGHT = Vec3(1.0, 0.0, 0.0)
WORLD_UP = Vec3(0.0, 1.0, 0.0)
WORLD_FORWARD = Vec3(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Rotation:
    """Orthonormal orientation expressed as world-space basis axes.

    Attributes:
        right: Local +X axis in world space.
        up: Local +Y axis in world space.
        forward: Local +Z axis in world space.
    """

    right: Vec3 = WORLD_RIGHT
    up: Vec3 = WORLD_UP
    forward: Vec3 = WORLD_FORWARD


IDENTITY = Rotation()


@dataclass(frozen=True)
class Pose:
    """World placement of an entity.

    Attributes:
        position: World position.
        rotation: World orientation.
    """

    position: Vec3 = ZERO
    rotation: Rotation = IDENTITY
