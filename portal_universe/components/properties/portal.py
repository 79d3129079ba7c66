"""Portal components.

A ``Portal`` carries the per-portal configuration surface and the cooldown
timestamp; its pose lives in ``State.pose`` like any other entity. Links are
held by :class:`PortalPair` aggregates stored in ``State.portal_pair`` under
both member ids, so a portal and its partner always agree on the link.
"""

import math
from dataclasses import dataclass
from enum import StrEnum, auto

from portal_universe.types import EntityID


class PortalPhase(StrEnum):
    """Re-entry guard phase of a portal (derived from time, never stored)."""

    IDLE = auto()
    COOLDOWN_ACTIVE = auto()


@dataclass(frozen=True)
class Portal:
    """Teleport endpoint.

    Attributes:
        exit_clearance:
            Distance in front of the *linked* portal at which movers entering
            this portal are placed. Raised to clear the mover's radius when the
            radius is known.
        reenter_block_time:
            Seconds after a teleport during which this portal ignores overlaps.
        require_tag_match:
            When True, only colliders tagged ``filter_tag`` are teleported.
        filter_tag:
            Tag compared against the overlapping collider's ``Tag``.
        last_teleport_time:
            Simulation time of the last traversal through this portal or its
            partner. ``-inf`` means never.
    """

    exit_clearance: float = 1.5
    reenter_block_time: float = 0.25
    require_tag_match: bool = False
    filter_tag: str = "Player"
    last_teleport_time: float = -math.inf


@dataclass(frozen=True)
class PortalPair:
    """Symmetric link between two portal entities.

    Attributes:
        first: One member of the pair.
        second: The other member.
    """

    first: EntityID
    second: EntityID

    def __post_init__(self) -> None:
        if self.first == self.second:
            raise ValueError(f"Portal {self.first} cannot be paired with itself")

    def other(self, portal_id: EntityID) -> EntityID:
        """Return the member opposite ``portal_id``."""
        if portal_id == self.first:
            return self.second
        if portal_id == self.second:
            return self.first
        raise ValueError(f"Portal {portal_id} is not a member of {self}")

    def __contains__(self, portal_id: object) -> bool:
        return portal_id in (self.first, self.second)
