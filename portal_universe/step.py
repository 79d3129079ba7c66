"""State reducer and frame orchestration.

This module wires the systems together in the order that implements a single
simulation frame. The exported :func:`step` is the only public entry point for
advancing the scene and is pure: it returns a *new* ``State``.

Ordering rationale:

1. Frame outputs of the previous frame (diagnostics, trigger events) are
    cleared and the clock advances.
2. ``movement_system`` integrates movers and decays portal momentum.
3. ``trigger_system`` turns overlaps into enter events against the moved
    scene.
4. ``portal_system`` teleports; it runs after triggers so that every event of
    the frame sees the cooldowns armed by earlier events.
5. ``beam_system`` traces lasers against the final poses of the frame.
"""

from dataclasses import replace

from pyrsistent import pvector

from portal_universe.state import State
from portal_universe.systems.beam import beam_system
from portal_universe.systems.movement import movement_system
from portal_universe.systems.portal import portal_system
from portal_universe.systems.trigger import trigger_system


def step(state: State, dt: float) -> State:
    """Advance the scene by one frame of ``dt`` seconds.

    Args:
        state (State): Previous immutable scene state.
        dt (float): Frame duration in seconds.

    Returns:
        State: Next state snapshot.

    Raises:
        ValueError: If ``dt`` is negative.
    """
    if dt < 0.0:
        raise ValueError(f"Frame delta must be non-negative, got {dt}")

    state = replace(
        state,
        diagnostics=pvector(),
        trigger_events=pvector(),
        time=state.time + dt,
        frame=state.frame + 1,
    )
    state = movement_system(state, dt)
    state = trigger_system(state)
    state = portal_system(state)
    state = beam_system(state)
    return state
