import logging

from conftest import make_three_body
from trajsim.commands import SetMass, SetSpeed
from trajsim.playback import PlaybackController, SimState


def test_starts_paused_and_only_precomputes(two_body):
    sim, a, _ = two_body
    controller = PlaybackController(sim)

    assert controller.state == SimState.PAUSED
    assert controller.tick() == 0
    assert sim.data.trajectory_pos == 50
    assert sim.get_body(a).position == (0.0, 0.0)


def test_toggle_cycles_between_playing_and_paused(two_body):
    sim, _, _ = two_body
    controller = PlaybackController(sim)

    assert controller.toggle() == SimState.PLAYING
    assert controller.toggle() == SimState.PAUSED

    controller.step()
    assert controller.toggle() == SimState.PLAYING


def test_playing_advances_once_per_tick(two_body):
    sim, a, _ = two_body
    controller = PlaybackController(sim)
    controller.toggle()

    assert controller.tick() == 1
    assert sim.data.trajectory_pos == 49
    assert controller.tick() == 1
    # the second tick consumed index 1
    assert sim.get_body(a).position[0] > 0.0


def test_step_advances_once_then_pauses(two_body):
    sim, _, _ = two_body
    controller = PlaybackController(sim)
    controller.step()

    assert controller.tick() == 1
    assert controller.state == SimState.PAUSED
    assert controller.tick() == 0


def test_pause_stops_playing(two_body):
    sim, _, _ = two_body
    controller = PlaybackController(sim, SimState.PLAYING)
    assert controller.tick() == 1

    controller.pause()
    pos = sim.data.trajectory_pos

    assert controller.state == SimState.PAUSED
    assert controller.tick() == 0
    assert sim.data.trajectory_pos == pos


def test_pause_cancels_pending_step(two_body):
    sim, a, _ = two_body
    controller = PlaybackController(sim)
    controller.step()
    controller.pause()

    assert controller.tick() == 0
    assert sim.get_body(a).position == (0.0, 0.0)

    controller.pause()
    assert controller.state == SimState.PAUSED


def test_speed_controls_advances_per_tick(two_body):
    sim, _, _ = two_body
    sim.submit(SetSpeed(3))
    controller = PlaybackController(sim)
    controller.toggle()

    assert controller.tick() == 3
    assert sim.data.trajectory_pos == 49
    assert all(len(b.trajectory) == 49 for b in sim.bodies)


def test_manual_advance_works_in_any_state(two_body):
    sim, _, _ = two_body
    controller = PlaybackController(sim)

    assert controller.advance_once()
    assert controller.state == SimState.PAUSED
    assert sim.data.trajectory_pos == 49

    controller.toggle()
    assert controller.advance_once()
    assert controller.state == SimState.PLAYING


def test_edits_are_applied_before_precompute_and_advance(two_body, caplog):
    sim, a, _ = two_body
    controller = PlaybackController(sim)
    controller.toggle()
    controller.tick()

    sim.submit(SetMass(a, 10.0))
    with caplog.at_level(logging.WARNING):
        assert controller.tick() == 1

    assert "exhausted" not in caplog.text
    assert sim.get_body(a).mass == 10.0
    assert sim.data.trajectory_pos == 49


def test_playback_matches_single_precompute():
    reference = make_three_body(trajectory_len=60)
    reference.precompute()

    played = make_three_body(trajectory_len=50)
    controller = PlaybackController(played)
    controller.toggle()
    for _ in range(10):
        controller.tick()
    played.precompute()

    for ref, body in zip(reference.bodies, played.bodies):
        assert list(body.trajectory) == list(ref.trajectory)[10:]


def test_ticks_with_no_bodies_do_not_fail(empty_sim, caplog):
    controller = PlaybackController(empty_sim)
    controller.toggle()
    with caplog.at_level(logging.WARNING):
        for _ in range(3):
            assert controller.tick() == 0
        assert controller.advance_once() is False

    assert caplog.text.count("Nothing to simulate") == 1
    assert controller.status().body_count == 0


def test_status_reflects_engine(two_body):
    sim, _, _ = two_body
    controller = PlaybackController(sim)
    controller.tick()

    status = controller.status()
    assert status.state == SimState.PAUSED
    assert status.horizon_full
    assert status.trajectory_pos == status.trajectory_len == 50
    assert status.body_count == 2
    assert status.last_warning is None
