#!/usr/bin/env python3
"""
Data models for the trajectory simulator.

This module defines the snapshot, trajectory buffer and body records shared
between the integrator, the simulation engine and any front end.

Units and usage
- positions and velocities are (x, y) tuples in simulation units; G defaults to 1.
- a Trajectory holds one SimSnapshot per discrete time index, index 0 is "now".
- Body.position / Body.velocity are the externally visible state written by playback;
  the trajectory head is what edits modify and what the integrator starts from.
- Access to Body instances is coordinated by Simulation using a lock.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, List, Optional, Tuple

from .constants import (
    DEFAULT_GRAVITATIONAL_CONST,
    DEFAULT_SOFTENING,
    DEFAULT_SPEED,
    DEFAULT_BODY_COLOR,
    TRAJECTORY_LEN,
)
from .vector_utils import Vec2


@dataclass(frozen=True)
class SimSnapshot:
    """Position and velocity of one body at one time index."""
    position: Vec2
    velocity: Vec2


class Trajectory:
    """
    Precomputed future of a single body.

    New states are appended at the tail by precomputation; playback consumes one
    state per tick from the head.
    """

    def __init__(self, initial_pos: Vec2, initial_vel: Vec2):
        self._snapshots: Deque[SimSnapshot] = deque([SimSnapshot(initial_pos, initial_vel)])

    def __len__(self) -> int:
        return len(self._snapshots)

    def __getitem__(self, index: int) -> SimSnapshot:
        return self._snapshots[index]

    def __iter__(self) -> Iterator[SimSnapshot]:
        return iter(self._snapshots)

    def front(self) -> Optional[SimSnapshot]:
        return self._snapshots[0] if self._snapshots else None

    def back(self) -> Optional[SimSnapshot]:
        return self._snapshots[-1] if self._snapshots else None

    def pop_front(self) -> Optional[SimSnapshot]:
        if not self._snapshots:
            return None
        return self._snapshots.popleft()

    def push_back(self, snapshot: SimSnapshot) -> None:
        self._snapshots.append(snapshot)

    def replace_front(self, snapshot: SimSnapshot) -> None:
        """Overwrite the present state (used by edits before invalidation)."""
        if self._snapshots:
            self._snapshots[0] = snapshot
        else:
            self._snapshots.append(snapshot)

    def reset_to_front(self) -> None:
        """Drop every future state, keeping only the head."""
        head = self.front()
        self._snapshots.clear()
        if head is not None:
            self._snapshots.append(head)

    def positions(self) -> List[Vec2]:
        return [s.position for s in self._snapshots]


@dataclass
class Body:
    """
    A celestial body in the simulation.

    Fields:
    - id: Stable identifier assigned by the engine, never reused
    - name: Display name, freely editable
    - mass: Mass (> 0), drives gravity
    - radius: Visual/picking radius (> 0), no effect on gravity
    - position: Current (x, y), written by playback
    - velocity: Current (vx, vy), written by playback
    - color: RGB tuple used for rendering
    - trajectory: Precomputed future, head first
    - trajectory_visible: Whether the front end should draw the path
    """
    id: int
    name: str
    mass: float
    radius: float
    position: Vec2
    velocity: Vec2
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR
    trajectory: Trajectory = field(init=False)
    trajectory_visible: bool = True

    def __post_init__(self):
        self.trajectory = Trajectory(self.position, self.velocity)

    def head(self) -> Optional[SimSnapshot]:
        return self.trajectory.front()


@dataclass
class SimData:
    """
    Global simulation parameters and the playback cursor.

    trajectory_pos counts already-computed indices from 0; between phases it
    equals the length of every body's trajectory.
    """
    gravitational_const: float = DEFAULT_GRAVITATIONAL_CONST
    trajectory_pos: int = 1
    trajectory_len: int = TRAJECTORY_LEN
    speed: int = DEFAULT_SPEED
    softening: float = DEFAULT_SOFTENING

    @property
    def horizon_full(self) -> bool:
        return self.trajectory_pos >= self.trajectory_len


@dataclass(frozen=True)
class BodyState:
    """Read-only view of a body handed to front ends each tick."""
    id: int
    name: str
    position: Vec2
    velocity: Vec2
    mass: float
    radius: float
    color: Tuple[int, int, int]
    trajectory_visible: bool
