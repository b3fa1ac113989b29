import pytest

pytest.importorskip("pygame")

import trajectory_sim  # noqa: E402
from trajsim.constants import BACKGROUND_COLOR, TRAJECTORY_LEN  # noqa: E402


def test_parse_args_defaults():
    args = trajectory_sim.parse_args([])
    assert args.preset == "figure-eight"
    assert args.trajectory_len == TRAJECTORY_LEN
    assert args.gravity is None
    assert args.speed == 1
    assert not args.play


def test_parse_args_rejects_unknown_preset():
    with pytest.raises(SystemExit):
        trajectory_sim.parse_args(["--preset", "nope"])


def test_safe_point_bounds():
    assert trajectory_sim._safe_point((10.4, -3.9)) == (10, -3)
    assert trajectory_sim._safe_point((1e9, 0.0)) is None
    assert trajectory_sim._safe_point((float("nan"), 0.0)) is None


def test_blend_towards_background():
    assert trajectory_sim._blend((255, 255, 255), 0.0) == BACKGROUND_COLOR
    assert trajectory_sim._blend((255, 255, 255), 1.0) == (255, 255, 255)


@pytest.mark.parametrize("length", ["0", "1", "many"])
def test_parse_args_rejects_short_trajectory_len(length):
    with pytest.raises(SystemExit):
        trajectory_sim.parse_args(["--trajectory-len", length])


def test_pause_key_pauses_playback():
    import pygame

    from trajsim.playback import PlaybackController, SimState
    from trajsim.scenarios import build_simulation, load_preset

    sim = build_simulation(load_preset("binary"), trajectory_len=10)
    controller = PlaybackController(sim, SimState.PLAYING)
    viewer = trajectory_sim.Viewer(sim, controller)

    viewer.handle_key(pygame.K_p)
    assert controller.state == SimState.PAUSED
    viewer.handle_key(pygame.K_p)
    assert controller.state == SimState.PAUSED
    viewer.handle_key(pygame.K_SPACE)
    assert controller.state == SimState.PLAYING
