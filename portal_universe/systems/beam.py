"""Beam tracing system.

A beam is a bounded iterative ray-march. Each iteration casts from the current
origin with whatever distance budget is left:

* Nothing hit: the beam runs out of budget in open space and ends there.
* A portal hit with hops to spare: the travelled distance and the
    ``exit_epsilon`` push off the exit surface are spent, the ray
    continues out of the linked portal (see
    :func:`portal_universe.utils.frame.exit_ray`) and the hop counter grows.
* Anything else, including a portal once the hop limit is reached: the beam
    is absorbed at the hit point.

Every iteration either ends the trace or increments a hop counter bounded by
``max_portal_hops``, so a cast performs at most ``max_portal_hops + 1``
raycasts even between two facing portals.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from pyrsistent import pmap, pvector

from portal_universe.components import BeamEmitter, Vec3
from portal_universe.records import BeamSegment, BeamTrace
from portal_universe.state import State
from portal_universe.types import DiagnosticKind, EntityID, TriggerPolicy
from portal_universe.utils.diagnostics import entity_label, report
from portal_universe.utils.ecs import owning_portal, world_pose
from portal_universe.utils.frame import exit_ray
from portal_universe.utils.math import add, distance, magnitude, scale
from portal_universe.utils.physics import RaycastHit
from portal_universe.utils.portal import is_symmetric_link, linked_portal

logger = logging.getLogger(__name__)


def hit_portal(state: State, hit: RaycastHit, portal_tag: str) -> Optional[EntityID]:
    """Portal struck by ``hit``, found by association first and by tag second."""
    if hit.portal_id is not None:
        return hit.portal_id
    tag = state.tag.get(hit.surface_id)
    if portal_tag and tag is not None and tag.name == portal_tag:
        # Tagged surface: look for an owning portal further up the hierarchy.
        return owning_portal(state, hit.surface_id)
    return None


def continue_through(
    state: State, portal_id: EntityID, point: Vec3, direction: Vec3, epsilon: float
) -> Optional[Tuple[Vec3, Vec3]]:
    """Exit ray out of the partner of ``portal_id``, or None if it has no usable link."""
    exit_id = linked_portal(state, portal_id)
    if exit_id is None or not is_symmetric_link(state, portal_id):
        logger.debug(
            "Beam absorbed by unlinked portal %s", entity_label(state, portal_id)
        )
        return None
    entry, exit = state.pose[portal_id], state.pose[exit_id]
    return exit_ray(entry, exit, point, direction, epsilon)


def trace_beam(
    state: State, origin: Vec3, direction: Vec3, emitter: BeamEmitter
) -> BeamTrace:
    """Trace one beam cast through up to ``emitter.max_portal_hops`` portals.

    Args:
        state (State): Scene queried through ``state.raycast_fn``.
        origin (Vec3): Start of the beam.
        direction (Vec3): Initial direction (normalized here).
        emitter (BeamEmitter): Distance budget, hop limit and hit filtering.

    Returns:
        BeamTrace: Points and segments in travel order.

    Raises:
        ValueError: If ``direction`` has zero length.
    """
    length = magnitude(direction)
    if length == 0.0:
        raise ValueError("Beam direction must be non-zero")
    direction = scale(direction, 1.0 / length)
    policy = TriggerPolicy.IGNORE
    if emitter.include_trigger_surfaces:
        policy = TriggerPolicy.COLLIDE

    points: List[Vec3] = [origin]
    segments: List[BeamSegment] = []
    remaining = emitter.max_distance
    hops = 0
    absorbed_by: Optional[EntityID] = None
    hop_limit_reached = False

    while remaining > 0.0:
        hit = state.raycast_fn(
            state, origin, direction, remaining, emitter.hit_mask, policy
        )
        if hit is None:
            end = add(origin, scale(direction, remaining))
            points.append(end)
            segments.append(BeamSegment(origin, end, hops))
            logger.debug("Beam hit nothing; extends to %s", end)
            break

        points.append(hit.point)
        segments.append(BeamSegment(origin, hit.point, hops))
        logger.debug(
            "Beam hit %s at %s (distance %.2f)",
            entity_label(state, hit.surface_id),
            hit.point,
            hit.distance,
        )

        portal_id = hit_portal(state, hit, emitter.portal_tag)
        exit_ray_ = None
        if portal_id is not None:
            if hops < emitter.max_portal_hops:
                exit_ray_ = continue_through(
                    state, portal_id, hit.point, direction, emitter.exit_epsilon
                )
            else:
                hop_limit_reached = True
        if exit_ray_ is None:
            absorbed_by = hit.surface_id
            break

        # The push off the exit surface is part of the beam's length.
        remaining -= distance(origin, hit.point) + emitter.exit_epsilon
        origin, direction = exit_ray_
        hops += 1
        logger.debug(
            "Beam traversed portal %s -> %s", entity_label(state, portal_id), origin
        )

    return BeamTrace(
        points=pvector(points),
        segments=pvector(segments),
        hops=hops,
        absorbed_by=absorbed_by,
        hop_limit_reached=hop_limit_reached,
    )


def beam_system(state: State) -> State:
    """Trace every enabled, posed emitter along its forward axis.

    Traces are rebuilt from scratch each frame; emitters that are disabled or
    unplaced have no trace.
    """
    traces = pmap()
    for emitter_id in sorted(state.beam_emitter.keys()):
        emitter = state.beam_emitter[emitter_id]
        pose = world_pose(state, emitter_id)
        if not emitter.enabled or pose is None:
            continue
        trace = trace_beam(state, pose.position, pose.rotation.forward, emitter)
        traces = traces.set(emitter_id, trace)
        if trace.hop_limit_reached:
            state = report(
                state,
                DiagnosticKind.HOP_LIMIT_REACHED,
                emitter_id,
                f"beam stopped after {trace.hops} portal hops",
            )
    return replace(state, beam_trace=traces)
