"""Convenience factory functions for authoring ``EntitySpec`` objects.

Each helper returns a preconfigured :class:`EntitySpec` for a common pattern
(player, crate, wall, portal, laser). These are mutable authoring-time
blueprints converted into immutable ECS entities by ``levels.convert.to_state``.
"""

from __future__ import annotations

from typing import Optional

from portal_universe.components.properties import (
    ZERO,
    BeamEmitter,
    Collider,
    ColliderShape,
    KinematicController,
    Locomotion,
    LocomotionKind,
    Movement,
    Portal,
    RigidBody,
    Tag,
    Vec3,
)
from .entity_spec import EntitySpec

# Depth of a portal trigger volume along its forward axis.
PORTAL_DEPTH = 0.2


def create_player(radius: float = 0.5, tag: str = "Player") -> EntitySpec:
    """Controller-driven player: the root moves, a tagged child collider touches triggers."""
    return EntitySpec(
        name="player",
        locomotion=Locomotion(LocomotionKind.KINEMATIC_CONTROLLER),
        kinematic_controller=KinematicController(radius=radius),
        movement=Movement(),
        children=[
            EntitySpec(
                name="player_body",
                collider=Collider(shape=ColliderShape.SPHERE, radius=radius),
                tag=Tag(tag),
            )
        ],
    )


def create_crate(
    size: float = 1.0, velocity: Vec3 = ZERO, with_movement: bool = True
) -> EntitySpec:
    """Free-moving physics crate with a box collider."""
    half = size / 2
    return EntitySpec(
        name="crate",
        locomotion=Locomotion(LocomotionKind.FREE_BODY),
        rigid_body=RigidBody(linear_velocity=velocity, radius=half),
        movement=Movement() if with_movement else None,
        collider=Collider(shape=ColliderShape.BOX, half_extents=Vec3(half, half, half)),
    )


def create_wall(
    half_extents: Vec3 = Vec3(5.0, 5.0, 0.5), layer: int = 0, quad: bool = False
) -> EntitySpec:
    """Static solid surface; ``quad`` makes it a flat two-sided panel."""
    shape = ColliderShape.QUAD if quad else ColliderShape.BOX
    return EntitySpec(
        name="wall",
        collider=Collider(shape=shape, half_extents=half_extents, layer=layer),
    )


def create_portal(
    width: float = 2.0,
    height: float = 3.0,
    exit_clearance: float = 1.5,
    reenter_block_time: float = 0.25,
    require_tag_match: bool = False,
    filter_tag: str = "Player",
    tag: Optional[str] = "portal",
    pair: Optional[EntitySpec] = None,
) -> EntitySpec:
    """Portal with a thin trigger box. Pass ``pair`` to link it to another portal spec."""
    return EntitySpec(
        name="portal",
        portal=Portal(
            exit_clearance=exit_clearance,
            reenter_block_time=reenter_block_time,
            require_tag_match=require_tag_match,
            filter_tag=filter_tag,
        ),
        collider=Collider(
            shape=ColliderShape.BOX,
            half_extents=Vec3(width / 2, height / 2, PORTAL_DEPTH / 2),
            is_trigger=True,
        ),
        tag=Tag(tag) if tag is not None else None,
        portal_pair_ref=pair,
    )


def create_laser(
    max_distance: float = 50.0, max_portal_hops: int = 4, enabled: bool = True
) -> EntitySpec:
    """Beam emitter firing along its pose forward."""
    return EntitySpec(
        name="laser",
        beam_emitter=BeamEmitter(
            max_distance=max_distance,
            max_portal_hops=max_portal_hops,
            enabled=enabled,
        ),
    )
