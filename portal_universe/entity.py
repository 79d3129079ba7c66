"""Entities and id allocation.

An entity is an ``EntityID`` plus whatever components the ``State`` stores
hold under that id. :class:`Entity` itself only carries a debug name used in
diagnostics and log lines.

Ids handed out by :func:`new_entity_id` are unique within the process and
never reused, which is what hand-built states (tests, tools) need. Scene
conversion (``levels.convert.to_state``) numbers entities from zero instead,
so converting the same scene twice yields identical states.

>>> from portal_universe.entity import new_entity_id, new_entity_ids
>>> blue_id, orange_id = new_entity_ids(2)
"""

import itertools
from dataclasses import dataclass
from typing import List

from portal_universe.types import EntityID


@dataclass(frozen=True)
class Entity:
    """Registry entry for an entity.

    Attributes:
        name: Label shown as ``name#id`` in diagnostics.
    """

    name: str = ""


_next_ids = itertools.count()


def new_entity_id() -> EntityID:
    """Allocate one process-unique entity id."""
    return next(_next_ids)


def new_entity_ids(n: int) -> List[EntityID]:
    return [new_entity_id() for _ in range(n)]
