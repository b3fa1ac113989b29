import dataclasses

import pytest

from trajsim.data_models import Body, SimData, SimSnapshot, Trajectory


def test_snapshot_is_immutable():
    snap = SimSnapshot(position=(1.0, 2.0), velocity=(0.0, 0.0))
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.position = (0.0, 0.0)


def test_trajectory_starts_with_single_head():
    traj = Trajectory((1.0, 2.0), (3.0, 4.0))
    assert len(traj) == 1
    assert traj.front() == SimSnapshot((1.0, 2.0), (3.0, 4.0))
    assert traj.back() == traj.front()


def test_trajectory_is_a_fifo_of_snapshots():
    traj = Trajectory((0.0, 0.0), (1.0, 0.0))
    traj.push_back(SimSnapshot((1.0, 0.0), (1.0, 0.0)))
    traj.push_back(SimSnapshot((2.0, 0.0), (1.0, 0.0)))

    assert traj.positions() == [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]
    assert traj[2].position == (2.0, 0.0)
    assert traj.pop_front().position == (0.0, 0.0)
    assert traj.front().position == (1.0, 0.0)
    assert len(traj) == 2


def test_pop_front_on_empty_returns_none():
    traj = Trajectory((0.0, 0.0), (0.0, 0.0))
    traj.pop_front()
    assert traj.pop_front() is None
    assert traj.front() is None


def test_reset_to_front_keeps_only_head():
    traj = Trajectory((0.0, 0.0), (1.0, 0.0))
    for x in range(1, 5):
        traj.push_back(SimSnapshot((float(x), 0.0), (1.0, 0.0)))

    traj.reset_to_front()
    assert len(traj) == 1
    assert traj.front().position == (0.0, 0.0)

    traj.reset_to_front()
    assert len(traj) == 1


def test_replace_front_overwrites_present_state():
    traj = Trajectory((0.0, 0.0), (1.0, 0.0))
    traj.push_back(SimSnapshot((1.0, 0.0), (1.0, 0.0)))
    traj.replace_front(SimSnapshot((5.0, 5.0), (0.0, 0.0)))
    assert traj.front().position == (5.0, 5.0)
    assert len(traj) == 2


def test_body_owns_single_snapshot_trajectory():
    body = Body(id=1, name="Earth", mass=1.0, radius=0.5, position=(3.0, 0.0), velocity=(0.0, 1.0))
    assert len(body.trajectory) == 1
    assert body.head() == SimSnapshot((3.0, 0.0), (0.0, 1.0))
    assert body.trajectory_visible


def test_sim_data_horizon_flag():
    data = SimData(trajectory_len=10)
    assert data.trajectory_pos == 1
    assert not data.horizon_full
    data.trajectory_pos = 10
    assert data.horizon_full
