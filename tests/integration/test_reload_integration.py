import pytest

from portal_universe.components import Pose, Vec3
from portal_universe.director import (
    ReloadPhase,
    ReloadSequence,
    SceneDirector,
    advance_reload,
)
from portal_universe.fader import ScreenFader
from portal_universe.levels.convert import to_state
from portal_universe.levels.factories import create_player, create_portal
from portal_universe.levels.scene import Scene
from portal_universe.state import State


def build_state() -> State:
    scene = Scene()
    blue = create_portal()
    scene.add(Pose(), blue)
    scene.add(Pose(Vec3(10.0, 0.0, 0.0)), create_portal(pair=blue))
    scene.add(Pose(Vec3(0.0, 0.0, 3.0)), create_player())
    return to_state(scene)


def test_fader_requires_initialize() -> None:
    fader = ScreenFader()
    with pytest.raises(RuntimeError):
        fader.fade_step(1.0, 1.0, 0.1)
    fader.initialize()
    assert fader.initialized
    assert fader.alpha == 0.0
    fader.teardown()
    assert not fader.initialized


def test_fader_is_linear_and_exact() -> None:
    fader = ScreenFader()
    fader.initialize()
    assert not fader.fade_step(1.0, 1.0, 0.25)
    assert fader.alpha == pytest.approx(0.25)
    assert not fader.fade_step(1.0, 1.0, 0.5)
    assert fader.alpha == pytest.approx(0.75)
    assert fader.fade_step(1.0, 1.0, 0.5)
    assert fader.alpha == 1.0


def test_zero_duration_fade_completes_in_one_update() -> None:
    fader = ScreenFader()
    fader.initialize()
    assert fader.fade_step(1.0, 0.0, 0.0)
    assert fader.alpha == 1.0


def test_idle_sequence_does_nothing() -> None:
    fader = ScreenFader()
    fader.initialize()
    sequence = ReloadSequence()
    assert advance_reload(sequence, fader, 1.0, lambda: None) == sequence
    assert not sequence.active


def test_director_reload_sequence() -> None:
    calls: list[int] = []

    def factory() -> State:
        calls.append(1)
        return build_state()

    fader = ScreenFader()
    director = SceneDirector(factory, fader, fade_duration=0.5)
    assert not director.running
    with pytest.raises(RuntimeError):
        director.state

    director.start()
    assert fader.initialized
    assert len(calls) == 1

    assert director.request_reload()
    assert not director.request_reload()

    director.update(0.25)
    assert director.sequence.phase == ReloadPhase.FADE_OUT
    assert fader.alpha == pytest.approx(0.5)

    director.update(0.25)
    assert director.sequence.phase == ReloadPhase.RELOAD_WORLD
    assert fader.alpha == 1.0

    director.update(0.25)
    assert director.sequence.phase == ReloadPhase.SETTLE_FRAME
    assert len(calls) == 2
    assert director.state.time == 0.0

    director.update(0.25)
    assert director.sequence.phase == ReloadPhase.FADE_IN
    assert director.state.frame == 1
    assert fader.alpha == 1.0

    director.update(0.25)
    assert fader.alpha == pytest.approx(0.5)

    director.update(0.25)
    assert director.sequence.phase == ReloadPhase.IDLE
    assert fader.alpha == 0.0
    assert director.request_reload()

    director.shutdown()
    assert not director.running
    assert not fader.initialized
