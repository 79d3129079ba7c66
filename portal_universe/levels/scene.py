from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from portal_universe.components import Pose
from portal_universe.types import RaycastFn
from portal_universe.utils.physics import scene_raycast
from .entity_spec import EntitySpec


def _empty_placements() -> List[Tuple[Pose, EntitySpec]]:
    return []


@dataclass
class Scene:
    """
    Authoring-time scene representation.
    - `placements` holds (Pose, EntitySpec) pairs in insertion order; insertion order
      decides entity ids on conversion.
    - Scene stores the raycast provider and the start time.
    - This module is State-agnostic. Use the converter (levels.convert.to_state)
      to bridge between Scene and the immutable ECS State.
    """

    raycast_fn: RaycastFn = scene_raycast
    time: float = 0.0

    placements: List[Tuple[Pose, EntitySpec]] = field(default_factory=_empty_placements)

    # -------- Scene editing API (purely authoring-time) --------

    def add(self, pose: Pose, obj: EntitySpec) -> EntitySpec:
        """
        Place an EntitySpec at pose. Returns obj so calls can be chained into wiring.
        """
        self.placements.append((pose, obj))
        return obj

    def add_many(self, items: List[Tuple[Pose, EntitySpec]]) -> None:
        """
        Place multiple EntitySpec instances. Each entry is (pose, obj).
        """
        for pose, obj in items:
            self.add(pose, obj)

    def remove(self, obj: EntitySpec) -> bool:
        """
        Remove a specific EntitySpec (by identity).
        Returns True if the object was found and removed, False otherwise.
        """
        for i, (_, o) in enumerate(self.placements):
            if o is obj:
                del self.placements[i]
                return True
        return False

    def move_obj(self, obj: EntitySpec, to_pose: Pose) -> bool:
        """
        Move a specific EntitySpec (by identity) to a new pose.
        Returns True if moved (i.e., it was found), False otherwise.
        """
        for i, (_, o) in enumerate(self.placements):
            if o is obj:
                self.placements[i] = (to_pose, obj)
                return True
        return False

    def objects(self) -> List[EntitySpec]:
        """
        Return a shallow copy of the placed objects in insertion order.
        """
        return [obj for _, obj in self.placements]
