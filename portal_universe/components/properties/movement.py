"""Movement collaborator component.

Holds the state a character movement script keeps between frames: the input
driven ``intended_velocity`` (written by whatever polls input), a persistent
``external_velocity`` injected by portals, and the decay policy for it.

External velocity is held unchanged for ``grace_time`` seconds after it is
received, then decays exponentially at ``momentum_decay`` per second until
it drops below ``rest_speed``.
"""

from dataclasses import dataclass

from portal_universe.components.properties.pose import Vec3, ZERO


@dataclass(frozen=True)
class Movement:
    """Movement collaborator state.

    Attributes:
        intended_velocity: Input-driven world velocity for this frame.
        external_velocity: Injected velocity blended with input.
        last_world_velocity: Velocity the mover actually moved with last frame.
        momentum_decay: Exponential decay rate of external velocity (1/s).
        grace_time: Seconds external velocity is held before decaying.
        grace_timer: Remaining grace seconds.
        rest_speed: Speed below which external velocity snaps to zero.
        align_upright_on_exit: Re-level the mover after leaving a portal.
        zero_angular_on_align: Clear a free body's spin when re-leveling.
    """

    intended_velocity: Vec3 = ZERO
    external_velocity: Vec3 = ZERO
    last_world_velocity: Vec3 = ZERO
    momentum_decay: float = 2.0
    grace_time: float = 0.15
    grace_timer: float = 0.0
    rest_speed: float = 0.05
    align_upright_on_exit: bool = True
    zero_angular_on_align: bool = True
