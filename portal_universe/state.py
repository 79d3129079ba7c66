"""The frozen world snapshot every system reads and returns.

A :class:`State` captures the portal scene at one frame. Systems never edit it;
they build the next snapshot with ``dataclasses.replace``, so a teleport lands
as one transition and no system sees a mover halfway through it.

Layout:

* Each component type has its own ``pyrsistent.PMap`` keyed by ``EntityID``;
    an entity has a component exactly when its id is a key of that map.
* ``portal_pair`` holds every :class:`PortalPair` twice, once per member id,
    so either portal finds the same aggregate.
* ``overlaps`` and ``trigger_events`` are written by the trigger system, which
    derives per-frame enter events from continuous overlap.
* ``beam_trace`` and ``diagnostics`` are outputs of the most recent frame.

:mod:`portal_universe.step` describes the order in which systems run.
"""

from collections.abc import Sized
from dataclasses import dataclass, fields
from typing import Any, Tuple

from pyrsistent import pmap, pset, pvector
from pyrsistent.typing import PMap, PSet, PVector

from portal_universe.entity import Entity
from portal_universe.components import (
    BeamEmitter,
    Collider,
    KinematicController,
    Locomotion,
    Movement,
    Parent,
    Portal,
    PortalPair,
    Pose,
    RigidBody,
    Tag,
)
from portal_universe.records import BeamTrace, Diagnostic, TriggerEvent
from portal_universe.types import EntityID, RaycastFn


@dataclass(frozen=True)
class State:
    """Immutable ECS world state.

    Attributes:
        raycast_fn (RaycastFn): Synchronous physics query used by beams and
            portal placement.
        entity (PMap[EntityID, Entity]): Debug names of every live entity.
        pose (PMap[EntityID, Pose]): World placement of posed entities.
        parent (PMap[EntityID, Parent]): Scene hierarchy links.
        tag (PMap[EntityID, Tag]): Entity labels.
        collider (PMap[EntityID, Collider]): Collision and trigger shapes.
        portal (PMap[EntityID, Portal]): Portal configuration and cooldown stamps.
        portal_pair (PMap[EntityID, PortalPair]): Link aggregate per member portal.
        locomotion (PMap[EntityID, Locomotion]): Motion representation of movers.
        kinematic_controller (PMap[EntityID, KinematicController]): Controller state.
        rigid_body (PMap[EntityID, RigidBody]): Free / kinematic body state.
        movement (PMap[EntityID, Movement]): Movement collaborator state.
        beam_emitter (PMap[EntityID, BeamEmitter]): Laser configuration.
        overlaps (PSet[Tuple[EntityID, EntityID]]): (trigger, other) pairs
            overlapping at the end of the last trigger pass.
        trigger_events (PVector[TriggerEvent]): Enter events of this frame.
        beam_trace (PMap[EntityID, BeamTrace]): Latest trace per emitter.
        diagnostics (PVector[Diagnostic]): Reports raised this frame.
        time (float): Simulation time in seconds.
        frame (int): Frame counter (0-based).
    """

    raycast_fn: "RaycastFn"

    # Entity
    entity: PMap[EntityID, Entity] = pmap()

    # Components
    pose: PMap[EntityID, Pose] = pmap()
    parent: PMap[EntityID, Parent] = pmap()
    tag: PMap[EntityID, Tag] = pmap()
    collider: PMap[EntityID, Collider] = pmap()
    portal: PMap[EntityID, Portal] = pmap()
    portal_pair: PMap[EntityID, PortalPair] = pmap()
    locomotion: PMap[EntityID, Locomotion] = pmap()
    kinematic_controller: PMap[EntityID, KinematicController] = pmap()
    rigid_body: PMap[EntityID, RigidBody] = pmap()
    movement: PMap[EntityID, Movement] = pmap()
    beam_emitter: PMap[EntityID, BeamEmitter] = pmap()

    # Frame outputs
    overlaps: PSet[Tuple[EntityID, EntityID]] = pset()
    trigger_events: PVector[TriggerEvent] = pvector()
    beam_trace: PMap[EntityID, BeamTrace] = pmap()
    diagnostics: PVector[Diagnostic] = pvector()

    # Clock
    time: float = 0.0
    frame: int = 0

    @property
    def description(self) -> PMap[str, Any]:
        """Populated fields only, keyed by field name; empty stores are left out."""
        populated = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Sized) and len(value) == 0:
                continue
            populated[f.name] = value
        return pmap(populated)
