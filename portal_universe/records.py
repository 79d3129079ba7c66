"""Per-frame output records.

Unlike components, these values are produced by systems during a step and
replaced (or cleared) on the next one: trigger enter events, beam traces and
diagnostics. They are stored on :class:`portal_universe.state.State` so tests
and presentation code can read them after ``step`` returns.
"""

from dataclasses import dataclass
from typing import Optional

from pyrsistent import pvector
from pyrsistent.typing import PVector

from portal_universe.components import Vec3
from portal_universe.types import DiagnosticKind, EntityID


@dataclass(frozen=True, order=True)
class TriggerEvent:
    """A solid collider entered a trigger volume this frame.

    Attributes:
        trigger_id: Entity owning the trigger collider.
        other_id: Entity owning the overlapping (non-trigger) collider.
    """

    trigger_id: EntityID
    other_id: EntityID


@dataclass(frozen=True)
class Diagnostic:
    """Non-fatal report raised by a system.

    Attributes:
        kind: Category of the report.
        entity: Entity the report is about, if any.
        message: Human readable detail.
        time: Simulation time at which it was raised.
    """

    kind: DiagnosticKind
    entity: Optional[EntityID]
    message: str
    time: float


@dataclass(frozen=True)
class BeamSegment:
    """One straight piece of a beam.

    Attributes:
        start: Segment origin (emitter, or just in front of an exit portal).
        end: Hit point, or the point where the distance budget ran out.
        hop: Number of portals traversed before this segment.
    """

    start: Vec3
    end: Vec3
    hop: int


@dataclass(frozen=True)
class BeamTrace:
    """Result of a single beam cast.

    ``points`` is the origin followed by the end point of every segment and is
    what a continuous polyline renderer draws; ``segments`` keeps the exit
    origins so a renderer can instead draw gapped per-hop pieces.

    Attributes:
        points: Origin followed by each segment end, in travel order.
        segments: Straight pieces in travel order.
        hops: Portal traversals performed.
        absorbed_by: Surface entity that stopped the beam, if any.
        hop_limit_reached: The beam stopped on a portal because it ran out of hops.
    """

    points: PVector[Vec3] = pvector()
    segments: PVector[BeamSegment] = pvector()
    hops: int = 0
    absorbed_by: Optional[EntityID] = None
    hop_limit_reached: bool = False
