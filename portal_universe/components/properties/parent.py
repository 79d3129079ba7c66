"""Parent component.

Links a child entity to its owner so hierarchies (e.g. a body collider under
a player root) can be walked upward when resolving the mover behind an
overlap.
"""

from dataclasses import dataclass

from portal_universe.types import EntityID


@dataclass(frozen=True)
class Parent:
    """Owner of this entity in the scene hierarchy."""

    entity: EntityID
