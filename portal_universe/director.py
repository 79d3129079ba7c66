"""Scene director and the reload sequence.

``SceneDirector`` owns the running scene: the current ``State``, the
:class:`ScreenFader` service and the :class:`ReloadSequence`. Applications
construct it explicitly, call :meth:`SceneDirector.start` at startup,
:meth:`SceneDirector.update` once per frame and :meth:`SceneDirector.shutdown`
on exit.

A reload (e.g. after the player dies) is a polled state machine rather than a
suspended routine. Each update advances at most one phase, and only once the
current phase's completion condition holds:

``FADE_OUT`` (overlay reaches opaque) -> ``RELOAD_WORLD`` (scene rebuilt) ->
``SETTLE_FRAME`` (one full frame on the new scene) -> ``FADE_IN`` (overlay
reaches transparent) -> ``IDLE``.
"""

import logging
from dataclasses import dataclass, replace
from enum import StrEnum, auto
from typing import Callable, Optional

from portal_universe.fader import ScreenFader
from portal_universe.state import State
from portal_universe.step import step

logger = logging.getLogger(__name__)

SceneFactory = Callable[[], State]


class ReloadPhase(StrEnum):
    """Phases of the fade / reload / fade sequence."""

    IDLE = auto()
    FADE_OUT = auto()
    RELOAD_WORLD = auto()
    SETTLE_FRAME = auto()
    FADE_IN = auto()


@dataclass(frozen=True)
class ReloadSequence:
    """Reload sequence progress.

    Attributes:
        phase: Current phase.
        fade_out_duration: Seconds to reach an opaque overlay.
        fade_in_duration: Seconds to clear the overlay again.
    """

    phase: ReloadPhase = ReloadPhase.IDLE
    fade_out_duration: float = 1.0
    fade_in_duration: float = 1.0

    @property
    def active(self) -> bool:
        return self.phase != ReloadPhase.IDLE


def advance_reload(
    sequence: ReloadSequence,
    fader: ScreenFader,
    unscaled_dt: float,
    reload_world: Callable[[], None],
) -> ReloadSequence:
    """Poll the sequence once and return its next value."""
    if sequence.phase == ReloadPhase.FADE_OUT:
        if fader.fade_step(1.0, sequence.fade_out_duration, unscaled_dt):
            return replace(sequence, phase=ReloadPhase.RELOAD_WORLD)
    elif sequence.phase == ReloadPhase.RELOAD_WORLD:
        reload_world()
        return replace(sequence, phase=ReloadPhase.SETTLE_FRAME)
    elif sequence.phase == ReloadPhase.SETTLE_FRAME:
        return replace(sequence, phase=ReloadPhase.FADE_IN)
    elif sequence.phase == ReloadPhase.FADE_IN:
        if fader.fade_step(0.0, sequence.fade_in_duration, unscaled_dt):
            return replace(sequence, phase=ReloadPhase.IDLE)
    return sequence


class SceneDirector:
    """Runs a scene built by ``scene_factory`` and reloads it on request."""

    def __init__(
        self,
        scene_factory: SceneFactory,
        fader: ScreenFader,
        fade_duration: float = 1.0,
    ) -> None:
        self.scene_factory = scene_factory
        self.fader = fader
        self.fade_duration = fade_duration
        self.sequence = ReloadSequence()
        self._state: Optional[State] = None

    @property
    def running(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> State:
        if self._state is None:
            raise RuntimeError("SceneDirector is not running; call start() first")
        return self._state

    def start(self) -> State:
        self.fader.initialize()
        self._state = self.scene_factory()
        self.sequence = ReloadSequence()
        logger.info("Scene started")
        return self._state

    def shutdown(self) -> None:
        self.fader.teardown()
        self._state = None
        self.sequence = ReloadSequence()
        logger.info("Scene shut down")

    def request_reload(self) -> bool:
        """Begin the reload sequence; returns False if one is already running."""
        if self.sequence.active:
            return False
        self.sequence = ReloadSequence(
            phase=ReloadPhase.FADE_OUT,
            fade_out_duration=self.fade_duration,
            fade_in_duration=self.fade_duration,
        )
        logger.info("Scene reload requested")
        return True

    def _reload_world(self) -> None:
        self._state = self.scene_factory()
        logger.info("Scene reloaded")

    def update(self, dt: float) -> State:
        """Step the scene by ``dt`` and poll the reload sequence."""
        self._state = step(self.state, dt)
        self.sequence = advance_reload(
            self.sequence, self.fader, dt, self._reload_world
        )
        return self.state
