#!/usr/bin/env python3
"""
Edit commands submitted by front ends and applied by Simulation.apply_pending().

Each command's apply() returns:
- True when it changed something the precomputed future depends on (mass, position,
  velocity, the body set, G, horizon length, softening) so the horizon must be invalidated,
- False when it changed presentation-only data (name, color, radius, visibility, speed),
- None when it was rejected (unknown body id or invalid value) and changed nothing.
"""
import abc
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import DEFAULT_BODY_COLOR, MIN_TRAJECTORY_LEN
from .data_models import Body, SimSnapshot
from .utils import coerce_color, try_float
from .vector_utils import Vec2, vec_add, vec_is_finite


class Command(abc.ABC):
    @abc.abstractmethod
    def apply(self, sim) -> Optional[bool]:
        ...


def _resolve(sim, body_id: int) -> Optional[Body]:
    body = sim.get_body(body_id)
    if body is None:
        sim.warn(f"No body with id {body_id}", key="unknown-body")
    return body


def _finite_vec(sim, value, what: str) -> Optional[Vec2]:
    try:
        vec = (float(value[0]), float(value[1]))
    except (TypeError, ValueError, IndexError):
        vec = None
    if vec is None or not vec_is_finite(vec):
        sim.warn(f"Rejected {what}: {value!r} is not a finite 2D vector", key=f"reject:{what}")
        return None
    return vec


@dataclass(frozen=True)
class SetMass(Command):
    body_id: int
    mass: float

    def apply(self, sim) -> Optional[bool]:
        body = _resolve(sim, self.body_id)
        if body is None:
            return None
        mass = try_float(self.mass)
        if mass is None or mass <= 0:
            sim.warn(f"Rejected mass {self.mass!r} for {body.name!r}: must be positive", key="reject:mass")
            return None
        body.mass = mass
        return True


@dataclass(frozen=True)
class SetPosition(Command):
    body_id: int
    position: Vec2

    def apply(self, sim) -> Optional[bool]:
        body = _resolve(sim, self.body_id)
        if body is None:
            return None
        pos = _finite_vec(sim, self.position, "position")
        if pos is None:
            return None
        head = body.trajectory.front()
        body.trajectory.replace_front(SimSnapshot(position=pos, velocity=head.velocity))
        body.position = pos
        return True


@dataclass(frozen=True)
class SetVelocity(Command):
    body_id: int
    velocity: Vec2

    def apply(self, sim) -> Optional[bool]:
        body = _resolve(sim, self.body_id)
        if body is None:
            return None
        vel = _finite_vec(sim, self.velocity, "velocity")
        if vel is None:
            return None
        head = body.trajectory.front()
        body.trajectory.replace_front(SimSnapshot(position=head.position, velocity=vel))
        body.velocity = vel
        return True


@dataclass(frozen=True)
class SetName(Command):
    body_id: int
    name: str

    def apply(self, sim) -> Optional[bool]:
        body = _resolve(sim, self.body_id)
        if body is None:
            return None
        body.name = str(self.name)
        return False


@dataclass(frozen=True)
class SetTrajectoryVisible(Command):
    body_id: int
    visible: bool

    def apply(self, sim) -> Optional[bool]:
        body = _resolve(sim, self.body_id)
        if body is None:
            return None
        body.trajectory_visible = bool(self.visible)
        return False


@dataclass(frozen=True)
class SetColor(Command):
    body_id: int
    color: Tuple[int, int, int]

    def apply(self, sim) -> Optional[bool]:
        body = _resolve(sim, self.body_id)
        if body is None:
            return None
        body.color = coerce_color(self.color, body.color)
        return False


@dataclass(frozen=True)
class SetRadius(Command):
    body_id: int
    radius: float

    def apply(self, sim) -> Optional[bool]:
        body = _resolve(sim, self.body_id)
        if body is None:
            return None
        radius = try_float(self.radius)
        if radius is None or radius <= 0:
            sim.warn(f"Rejected radius {self.radius!r} for {body.name!r}: must be positive", key="reject:radius")
            return None
        body.radius = radius
        return False


@dataclass(frozen=True)
class SetGravitationalConst(Command):
    value: float

    def apply(self, sim) -> Optional[bool]:
        g = try_float(self.value)
        if g is None:
            sim.warn(f"Rejected gravitational constant {self.value!r}", key="reject:gravitational_const")
            return None
        sim.data.gravitational_const = g
        return True


@dataclass(frozen=True)
class SetTrajectoryLen(Command):
    length: int

    def apply(self, sim) -> Optional[bool]:
        try:
            length = int(self.length)
        except (TypeError, ValueError):
            length = 0
        if length < MIN_TRAJECTORY_LEN:
            sim.warn(f"Rejected trajectory length {self.length!r}: must be at least {MIN_TRAJECTORY_LEN}",
                     key="reject:trajectory_len")
            return None
        sim.data.trajectory_len = length
        return True


@dataclass(frozen=True)
class SetSpeed(Command):
    speed: int

    def apply(self, sim) -> Optional[bool]:
        try:
            speed = int(self.speed)
        except (TypeError, ValueError):
            speed = 0
        if speed < 1:
            sim.warn(f"Rejected speed {self.speed!r}: must be at least 1", key="reject:speed")
            return None
        sim.data.speed = speed
        return False


@dataclass(frozen=True)
class SetSoftening(Command):
    softening: float

    def apply(self, sim) -> Optional[bool]:
        eps = try_float(self.softening)
        if eps is None or eps < 0:
            sim.warn(f"Rejected softening {self.softening!r}: must be >= 0", key="reject:softening")
            return None
        sim.data.softening = eps
        sim.integrator.set_softening(eps)
        return True


@dataclass(frozen=True)
class SpawnBody(Command):
    """
    Add a body at runtime.

    With relative_to set, velocity is taken relative to that body's present velocity,
    so a body launched while following another one keeps up with it.
    """
    name: str
    mass: float
    radius: float
    position: Vec2
    velocity: Vec2 = (0.0, 0.0)
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR
    relative_to: Optional[int] = None

    def apply(self, sim) -> Optional[bool]:
        velocity = _finite_vec(sim, self.velocity, "velocity")
        if velocity is None:
            return None
        if self.relative_to is not None:
            anchor = _resolve(sim, self.relative_to)
            if anchor is None:
                return None
            velocity = vec_add(velocity, anchor.trajectory.front().velocity)
        body_id = sim.add_body(self.name, self.mass, self.radius, self.position, velocity, self.color)
        if body_id is None:
            return None
        return True


@dataclass(frozen=True)
class RemoveBody(Command):
    body_id: int

    def apply(self, sim) -> Optional[bool]:
        if not sim.remove_body(self.body_id):
            return None
        return True
