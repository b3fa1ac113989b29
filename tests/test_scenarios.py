import pytest

from trajsim.constants import MIN_TRAJECTORY_LEN
from trajsim.playback import PlaybackController, SimState
from trajsim.scenarios import (
    PRESETS,
    BodyDefinition,
    SystemDefinition,
    body_from_mapping,
    build_simulation,
    list_presets,
    load_preset,
    system_from_mapping,
)


def test_body_definition_validates_eagerly():
    with pytest.raises(ValueError):
        BodyDefinition("Bad", 0.0, 1.0, (0.0, 0.0), (0.0, 0.0))
    with pytest.raises(ValueError):
        BodyDefinition("Bad", 1.0, 0.0, (0.0, 0.0), (0.0, 0.0))
    with pytest.raises(ValueError):
        BodyDefinition("Bad", 1.0, 1.0, (float("inf"), 0.0), (0.0, 0.0))


def test_system_definition_rejects_non_finite_g():
    with pytest.raises(ValueError):
        SystemDefinition("Bad", float("nan"))


def test_body_from_mapping_accepts_asset_style_keys():
    body = body_from_mapping({
        "name": "Earth",
        "mass": 3,
        "radius": "0.5",
        "initial_pos": [10, 0],
        "velocity": [0, 1.5],
        "color": [100, 149, 237],
    })
    assert body == BodyDefinition("Earth", 3.0, 0.5, (10.0, 0.0), (0.0, 1.5), (100, 149, 237))


def test_body_from_mapping_reports_missing_fields():
    with pytest.raises(ValueError, match="velocity"):
        body_from_mapping({"name": "X", "mass": 1, "radius": 1, "position": [0, 0]})
    with pytest.raises(ValueError):
        body_from_mapping({"name": "X", "mass": "heavy", "radius": 1,
                           "position": [0, 0], "velocity": [0, 0]})


def test_system_from_mapping_builds_simulation():
    system = system_from_mapping({
        "display_name": "Pair",
        "gravitational_const": 2.0,
        "bodies": [
            {"name": "A", "mass": 1, "radius": 1, "initial_position": [0, 0], "initial_velocity": [0, 0]},
            {"name": "B", "mass": 1, "radius": 1, "initial_position": [4, 0], "initial_velocity": [0, 0]},
        ],
    })
    sim = build_simulation(system, trajectory_len=10)

    assert sim.display_name == "Pair"
    assert sim.data.gravitational_const == 2.0
    assert sim.data.trajectory_len == 10
    assert [b.name for b in sim.bodies] == ["A", "B"]
    assert sim.data.trajectory_pos == 1


def test_build_simulation_replaces_existing_bodies():
    sim = build_simulation(load_preset("sun-planets"), trajectory_len=10)
    sim.precompute()
    build_simulation(load_preset("binary"), sim=sim)

    assert [b.name for b in sim.bodies] == ["A", "B"]
    assert sim.display_name == "Binary"
    assert sim.data.trajectory_pos == 1


@pytest.mark.parametrize("length", [0, 1, -5])
def test_build_simulation_rejects_short_horizon(length):
    with pytest.raises(ValueError, match="trajectory_len"):
        build_simulation(load_preset("binary"), trajectory_len=length)


def test_short_horizon_leaves_existing_simulation_untouched():
    sim = build_simulation(load_preset("sun-planets"), trajectory_len=10)
    names = [b.name for b in sim.bodies]

    with pytest.raises(ValueError):
        build_simulation(load_preset("binary"), sim=sim, trajectory_len=1)

    assert [b.name for b in sim.bodies] == names
    assert sim.data.trajectory_len == 10
    assert sim.display_name == "Sun and planets"


def test_minimal_horizon_still_plays():
    sim = build_simulation(load_preset("binary"), trajectory_len=MIN_TRAJECTORY_LEN)
    controller = PlaybackController(sim, SimState.PLAYING)

    assert controller.tick() == 1
    assert 1 <= sim.data.trajectory_pos <= sim.data.trajectory_len


@pytest.mark.parametrize("key", sorted(PRESETS))
def test_presets_precompute_cleanly(key):
    sim = build_simulation(load_preset(key), trajectory_len=20)
    sim.precompute()
    for b in sim.bodies:
        assert len(b.trajectory) == 20
    if key != "empty":
        assert sim.last_warning is None


def test_binary_preset_keeps_center_of_mass_fixed():
    sim = build_simulation(load_preset("binary"), trajectory_len=500)
    sim.precompute()
    a, b = sim.bodies
    end_a = a.trajectory.back().position
    end_b = b.trajectory.back().position
    assert (end_a[0] + end_b[0]) / 2 == pytest.approx(0.0, abs=1e-9)
    assert (end_a[1] + end_b[1]) / 2 == pytest.approx(0.0, abs=1e-9)
    # circular orbit keeps the separation
    sep = ((end_a[0] - end_b[0]) ** 2 + (end_a[1] - end_b[1]) ** 2) ** 0.5
    assert sep == pytest.approx(20.0, rel=1e-2)


def test_sun_and_planets_has_zero_net_momentum():
    system = load_preset("sun-planets")
    px = sum(b.mass * b.initial_velocity[0] for b in system.bodies)
    py = sum(b.mass * b.initial_velocity[1] for b in system.bodies)
    assert px == pytest.approx(0.0, abs=1e-9)
    assert py == pytest.approx(0.0, abs=1e-9)


def test_list_and_unknown_presets():
    names = dict(list_presets())
    assert names["figure-eight"] == "Figure eight"
    with pytest.raises(ValueError, match="Unknown preset"):
        load_preset("nope")
