import pytest

from trajsim.data_models import SimData
from trajsim.simulation import Simulation


def make_two_body(trajectory_len=50, gravitational_const=1.0):
    sim = Simulation(SimData(gravitational_const=gravitational_const, trajectory_len=trajectory_len))
    a = sim.add_body("A", 1.0, 0.5, (0.0, 0.0), (0.0, 0.0))
    b = sim.add_body("B", 1.0, 0.5, (10.0, 0.0), (0.0, 0.0))
    return sim, a, b


def make_three_body(trajectory_len=50):
    sim = Simulation(SimData(trajectory_len=trajectory_len))
    sim.add_body("Sun", 100.0, 2.0, (0.0, 0.0), (0.0, 0.0))
    sim.add_body("Planet", 1.0, 0.5, (20.0, 0.0), (0.0, 2.2))
    sim.add_body("Moon", 0.1, 0.2, (22.0, 0.0), (0.0, 2.9))
    return sim


@pytest.fixture
def two_body():
    return make_two_body()


@pytest.fixture
def three_body():
    return make_three_body()


@pytest.fixture
def empty_sim():
    return Simulation(SimData(trajectory_len=50))
