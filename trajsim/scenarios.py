#!/usr/bin/env python3
"""
Scenario definitions and built-in presets.

A scenario is a SystemDefinition: a display name, a gravitational constant and a
list of BodyDefinitions. Definitions are plain in-memory values; whatever reads
them from disk or a UI hands them over as mappings or dataclasses.

Mapping schema accepted by body_from_mapping():
{
  "name": "Sun",
  "mass": 1000.0,
  "radius": 4.0,
  "initial_pos": [0.0, 0.0],        # "initial_position" and "position" also accepted
  "velocity": [0.0, 0.0],           # "initial_velocity" also accepted
  "color": [255, 204, 0]            # optional
}

Presets use G = 1 simulation units so that the horizon of TRAJECTORY_LEN * TIME_STEP
time units covers a few orbits.
"""
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .constants import DEFAULT_BODY_COLOR, DEFAULT_GRAVITATIONAL_CONST, MIN_TRAJECTORY_LEN
from .data_models import SimData
from .physics import center_of_mass_velocity, circular_orbit_velocity
from .simulation import Simulation
from .utils import coerce_color, try_float
from .vector_utils import Vec2, vec_is_finite, vec_sub


@dataclass(frozen=True)
class BodyDefinition:
    name: str
    mass: float
    radius: float
    initial_position: Vec2
    initial_velocity: Vec2
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR

    def __post_init__(self):
        if not (self.mass > 0):
            raise ValueError(f"{self.name}: mass must be positive, got {self.mass!r}")
        if not (self.radius > 0):
            raise ValueError(f"{self.name}: radius must be positive, got {self.radius!r}")
        if not (vec_is_finite(self.initial_position) and vec_is_finite(self.initial_velocity)):
            raise ValueError(f"{self.name}: position and velocity must be finite")


@dataclass(frozen=True)
class SystemDefinition:
    display_name: str
    gravitational_const: float = DEFAULT_GRAVITATIONAL_CONST
    bodies: Tuple[BodyDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not math.isfinite(self.gravitational_const):
            raise ValueError(f"{self.display_name}: gravitational constant must be finite")


def _vec_field(data: Mapping, *keys: str) -> Vec2:
    for key in keys:
        if key in data:
            raw = data[key]
            try:
                x, y = try_float(raw[0]), try_float(raw[1])
            except (TypeError, IndexError, KeyError):
                x = y = None
            if x is None or y is None:
                raise ValueError(f"{key} must be a pair of finite numbers, got {raw!r}")
            return (x, y)
    raise ValueError(f"missing {keys[0]}")


def body_from_mapping(data: Mapping) -> BodyDefinition:
    """Build a BodyDefinition from a plain mapping; raises ValueError on bad input."""
    name = str(data.get("name", "Body"))
    mass = try_float(data.get("mass"))
    radius = try_float(data.get("radius"))
    if mass is None or radius is None:
        raise ValueError(f"{name}: mass and radius must be numbers")
    return BodyDefinition(
        name=name,
        mass=mass,
        radius=radius,
        initial_position=_vec_field(data, "initial_pos", "initial_position", "position"),
        initial_velocity=_vec_field(data, "velocity", "initial_velocity"),
        color=coerce_color(data.get("color", DEFAULT_BODY_COLOR), DEFAULT_BODY_COLOR),
    )


def system_from_mapping(data: Mapping, bodies: Optional[List[Mapping]] = None) -> SystemDefinition:
    """Build a SystemDefinition; bodies default to data["bodies"]."""
    g = try_float(data.get("gravitational_const", DEFAULT_GRAVITATIONAL_CONST))
    if g is None:
        raise ValueError("gravitational_const must be a finite number")
    raw_bodies = bodies if bodies is not None else data.get("bodies", [])
    return SystemDefinition(
        display_name=str(data.get("display_name", "Untitled")),
        gravitational_const=g,
        bodies=tuple(body_from_mapping(b) for b in raw_bodies),
    )


def build_simulation(system: SystemDefinition, sim: Optional[Simulation] = None,
                     trajectory_len: Optional[int] = None) -> Simulation:
    """
    Load a system into a simulation, replacing any bodies it had.

    The cursor is rewound so the first tick precomputes the full horizon. A horizon
    shorter than MIN_TRAJECTORY_LEN raises ValueError before anything is touched.
    """
    if trajectory_len is not None:
        trajectory_len = int(trajectory_len)
        if trajectory_len < MIN_TRAJECTORY_LEN:
            raise ValueError(f"trajectory_len must be at least {MIN_TRAJECTORY_LEN}, got {trajectory_len}")
    if sim is None:
        data = SimData(gravitational_const=system.gravitational_const)
        if trajectory_len is not None:
            data.trajectory_len = trajectory_len
        sim = Simulation(data)
    with sim.lock:
        sim.clear()
        sim.data.gravitational_const = system.gravitational_const
        if trajectory_len is not None:
            sim.data.trajectory_len = trajectory_len
        sim.display_name = system.display_name
        for b in system.bodies:
            sim.add_body(b.name, b.mass, b.radius, b.initial_position, b.initial_velocity, b.color)
    return sim


# ============================================================
# Presets
# ============================================================

def _zero_momentum(bodies: List[BodyDefinition]) -> Tuple[BodyDefinition, ...]:
    """Shift velocities into the center-of-mass frame so the system stays in view."""
    v_cm = center_of_mass_velocity([b.mass for b in bodies], [b.initial_velocity for b in bodies])
    return tuple(
        BodyDefinition(b.name, b.mass, b.radius, b.initial_position,
                       vec_sub(b.initial_velocity, v_cm), b.color)
        for b in bodies
    )


def preset_binary() -> SystemDefinition:
    """Two equal masses on a circular orbit around their common center."""
    g = 1.0
    m = 50.0
    d = 20.0
    # Each body circles the center at d/2: v^2 = G*m / (2*d)
    v = math.sqrt(g * m / (2.0 * d))
    return SystemDefinition(
        display_name="Binary",
        gravitational_const=g,
        bodies=(
            BodyDefinition("A", m, 1.0, (-d / 2, 0.0), (0.0, -v), (255, 120, 120)),
            BodyDefinition("B", m, 1.0, (d / 2, 0.0), (0.0, v), (120, 120, 255)),
        ),
    )


def preset_figure_eight() -> SystemDefinition:
    """Equal-mass figure-eight periodic solution (Chenciner-Montgomery), G = m = 1."""
    r1 = (-0.97000436, 0.24308753)
    r2 = (0.97000436, -0.24308753)
    r3 = (0.0, 0.0)
    v1 = (0.4662036850, 0.4323657300)
    v2 = (0.4662036850, 0.4323657300)
    v3 = (-0.93240737, -0.86473146)
    return SystemDefinition(
        display_name="Figure eight",
        gravitational_const=1.0,
        bodies=(
            BodyDefinition("A", 1.0, 0.05, r1, v1, (255, 120, 120)),
            BodyDefinition("B", 1.0, 0.05, r2, v2, (120, 255, 120)),
            BodyDefinition("C", 1.0, 0.05, r3, v3, (120, 120, 255)),
        ),
    )


def preset_lagrange_triangle() -> SystemDefinition:
    """
    Three equal masses on an equilateral triangle rotating rigidly about the center.

    Net pull on each body is G*m / (sqrt(3) * R^2) toward the center, so
    omega^2 = G*m / (sqrt(3) * R^3).
    """
    g = 1.0
    m = 100.0
    radius = 10.0
    omega = math.sqrt(g * m / (math.sqrt(3.0) * radius ** 3))
    v = omega * radius

    def tangent_velocity(angle: float) -> Vec2:
        return (-math.sin(angle) * v, math.cos(angle) * v)

    bodies = []
    for name, angle, color in (("A", 0.0, (255, 120, 120)),
                               ("B", 2 * math.pi / 3, (120, 255, 120)),
                               ("C", 4 * math.pi / 3, (120, 120, 255))):
        pos = (radius * math.cos(angle), radius * math.sin(angle))
        bodies.append(BodyDefinition(name, m, 0.8, pos, tangent_velocity(angle), color))
    return SystemDefinition("Lagrange triangle", g, tuple(bodies))


def preset_sun_and_planets() -> SystemDefinition:
    """A heavy star with three planets on circular orbits."""
    g = 1.0
    sun_mass = 1000.0
    bodies = [BodyDefinition("Sun", sun_mass, 4.0, (0.0, 0.0), (0.0, 0.0), (255, 204, 0))]
    for name, mass, r, radius, color in (("Inner", 1.0, 50.0, 1.0, (188, 39, 50)),
                                         ("Middle", 2.0, 80.0, 1.5, (100, 149, 237)),
                                         ("Outer", 5.0, 120.0, 2.5, (210, 180, 140))):
        v = circular_orbit_velocity(g, sun_mass, r)
        bodies.append(BodyDefinition(name, mass, radius, (r, 0.0), (0.0, v), color))
    return SystemDefinition("Sun and planets", g, _zero_momentum(bodies))


def preset_empty() -> SystemDefinition:
    return SystemDefinition("Empty", 1.0, ())


PRESETS: Dict[str, Callable[[], SystemDefinition]] = {
    "binary": preset_binary,
    "figure-eight": preset_figure_eight,
    "lagrange": preset_lagrange_triangle,
    "sun-planets": preset_sun_and_planets,
    "empty": preset_empty,
}


def list_presets() -> List[Tuple[str, str]]:
    """Return (key, display_name) for every built-in preset."""
    return [(key, factory().display_name) for key, factory in PRESETS.items()]


def load_preset(key: str) -> SystemDefinition:
    try:
        return PRESETS[key]()
    except KeyError:
        raise ValueError(f"Unknown preset {key!r}; choose from {', '.join(PRESETS)}") from None
