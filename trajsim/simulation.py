#!/usr/bin/env python3
"""
Simulation engine: owns the bodies, precomputes their future and plays it back.

What this module does
- Keeps every Body in a flat list (the arena) addressed by stable integer ids.
- precompute(): extends every trajectory up to the configured horizon using the
  GravityIntegrator, one synchronized step at a time.
- invalidate(): drops all precomputed future states so the next precompute rebuilds
  the horizon from the present.
- advance(): consumes one snapshot from the head of every trajectory and writes it
  back to the body as its current state.
- Queues edit commands from front ends and applies them only at phase boundaries.

Threading model
- Front ends may call submit() from any thread. Everything else is expected to run
  on the thread that drives ticks. All state is guarded by a re-entrant lock.

Error handling
- Nothing here raises during normal operation. Empty body sets, exhausted trajectories,
  unknown body ids and invalid values are logged as warnings and ignored; the latest
  warning stays available in last_warning for a status line.
"""
import itertools
import logging
import threading
from collections import deque
from typing import Deque, List, Optional, Set, Tuple

from .constants import DEFAULT_BODY_COLOR
from .data_models import Body, BodyState, SimData, Trajectory
from .physics import GravityIntegrator
from .utils import coerce_color, try_float
from .vector_utils import Vec2, vec_is_finite

logger = logging.getLogger(__name__)


class Simulation:
    """
    Trajectory precomputation and playback engine.

    Between phases every body's trajectory length equals data.trajectory_pos.
    """

    def __init__(self, data: Optional[SimData] = None, integrator: Optional[GravityIntegrator] = None):
        self.lock = threading.RLock()
        self.data = data if data is not None else SimData()
        self.integrator = integrator if integrator is not None else GravityIntegrator(self.data.softening)
        self.bodies: List[Body] = []
        self.display_name: Optional[str] = None
        self.last_warning: Optional[str] = None

        self._pending: Deque = deque()
        self._ids = itertools.count(1)
        self._warned: Set[str] = set()

    # ------------------------------------------------------------
    # Body arena
    # ------------------------------------------------------------

    def add_body(self, name: str, mass: float, radius: float, position: Vec2, velocity: Vec2,
                 color: Tuple[int, int, int] = DEFAULT_BODY_COLOR,
                 trajectory_visible: bool = True) -> Optional[int]:
        """
        Insert a body and invalidate the horizon.

        Returns the new body id, or None when the parameters are rejected.
        """
        mass_f = try_float(mass)
        radius_f = try_float(radius)
        if mass_f is None or mass_f <= 0:
            self.warn(f"Rejected body {name!r}: mass must be positive, got {mass!r}", key="body:mass")
            return None
        if radius_f is None or radius_f <= 0:
            self.warn(f"Rejected body {name!r}: radius must be positive, got {radius!r}", key="body:radius")
            return None
        try:
            pos = (float(position[0]), float(position[1]))
            vel = (float(velocity[0]), float(velocity[1]))
        except (TypeError, ValueError, IndexError):
            self.warn(f"Rejected body {name!r}: position and velocity must be 2D vectors", key="body:vector")
            return None
        if not (vec_is_finite(pos) and vec_is_finite(vel)):
            self.warn(f"Rejected body {name!r}: position and velocity must be finite", key="body:finite")
            return None

        with self.lock:
            body = Body(
                id=next(self._ids),
                name=str(name),
                mass=mass_f,
                radius=radius_f,
                position=pos,
                velocity=vel,
                color=coerce_color(color, DEFAULT_BODY_COLOR),
                trajectory_visible=bool(trajectory_visible),
            )
            self.bodies.append(body)
            self.invalidate()
            logger.debug("Added body %d (%s)", body.id, body.name)
            return body.id

    def remove_body(self, body_id: int) -> bool:
        with self.lock:
            for i, b in enumerate(self.bodies):
                if b.id == body_id:
                    del self.bodies[i]
                    self.invalidate()
                    logger.debug("Removed body %d (%s)", b.id, b.name)
                    return True
        self.warn(f"No body with id {body_id}", key="unknown-body")
        return False

    def get_body(self, body_id: int) -> Optional[Body]:
        with self.lock:
            for b in self.bodies:
                if b.id == body_id:
                    return b
            return None

    def find_body(self, name: str) -> Optional[Body]:
        """First body with the given name, or None."""
        with self.lock:
            for b in self.bodies:
                if b.name == name:
                    return b
            return None

    def clear(self) -> None:
        """Drop every body and pending command, returning to an unloaded state."""
        with self.lock:
            self.bodies = []
            self._pending.clear()
            self.display_name = None
            self.last_warning = None
            self.invalidate()

    # ------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------

    def submit(self, command) -> None:
        """Queue an edit; it takes effect at the start of the next tick."""
        with self.lock:
            self._pending.append(command)

    @property
    def pending_count(self) -> int:
        with self.lock:
            return len(self._pending)

    def apply_pending(self) -> int:
        """
        Apply every queued command in submission order.

        Invalidates once if any applied command changed mass, position, velocity,
        the body set or a global parameter. Returns the number of commands that
        changed something.

        A non-empty batch replaces last_warning, so only rejections from this
        batch remain on the status line.
        """
        with self.lock:
            if self._pending:
                self.last_warning = None
            changed = 0
            needs_invalidation = False
            while self._pending:
                command = self._pending.popleft()
                result = command.apply(self)
                if result is None:
                    continue
                changed += 1
                needs_invalidation |= result
            if needs_invalidation:
                self.invalidate()
            return changed

    # ------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------

    def invalidate(self) -> None:
        """Truncate every trajectory to its head and rewind the cursor."""
        with self.lock:
            for b in self.bodies:
                b.trajectory.reset_to_front()
            self.data.trajectory_pos = 1
            self._warned.clear()

    def precompute(self) -> int:
        """
        Fill every trajectory up to the horizon.

        Each step reads all bodies at index i before any body receives index i + 1.
        Returns the number of steps computed.
        """
        with self.lock:
            if not self.bodies:
                self.warn("Nothing to simulate")
                return 0

            start = self.data.trajectory_pos - 1
            end = self.data.trajectory_len - 1
            if start >= end:
                return 0

            trajectories = [b.trajectory for b in self.bodies]
            masses = [b.mass for b in self.bodies]
            g = self.data.gravitational_const

            for i in range(start, end):
                snapshots = [t[i] for t in trajectories]
                for t, nxt in zip(trajectories, self.integrator.step_all(snapshots, masses, g)):
                    t.push_back(nxt)
                self.data.trajectory_pos += 1

            skipped = self.integrator.take_coincident_count()
            if skipped:
                self.warn(f"Skipped {skipped} coincident body pair(s) while integrating", key="coincident")

            logger.debug("Precomputed %d step(s) for %d bodies", end - start, len(self.bodies))
            return end - start

    def advance(self) -> bool:
        """
        Move every body one step forward along its trajectory.

        Returns False (after logging a warning) when there is nothing to consume.
        """
        with self.lock:
            if not self.bodies:
                self.warn("Nothing to update")
                return False
            for b in self.bodies:
                if len(b.trajectory) == 0:
                    self.warn(f"Trajectory of {b.name!r} is empty", key="empty-trajectory")
                    return False
                if len(b.trajectory) < 2:
                    self.warn("Trajectory horizon exhausted; precompute before advancing")
                    return False

            for b in self.bodies:
                snapshot = b.trajectory.pop_front()
                b.position = snapshot.position
                b.velocity = snapshot.velocity
            self.data.trajectory_pos -= 1
            return True

    # ------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------

    def states(self) -> List[BodyState]:
        with self.lock:
            return [
                BodyState(
                    id=b.id,
                    name=b.name,
                    position=b.position,
                    velocity=b.velocity,
                    mass=b.mass,
                    radius=b.radius,
                    color=b.color,
                    trajectory_visible=b.trajectory_visible,
                )
                for b in self.bodies
            ]

    def trajectory(self, body_id: int) -> Optional[Trajectory]:
        body = self.get_body(body_id)
        return body.trajectory if body is not None else None

    def trajectory_positions(self, body_id: int) -> Optional[List[Vec2]]:
        with self.lock:
            body = self.get_body(body_id)
            if body is None:
                return None
            return body.trajectory.positions()

    # ------------------------------------------------------------

    def warn(self, msg: str, key: Optional[str] = None) -> None:
        """
        Record msg as the latest warning and log it once per key until the next invalidation.

        key defaults to msg. Messages that embed a value (a rejected mass, an unknown id)
        pass a fixed key so the set of seen keys stays bounded.
        """
        key = msg if key is None else key
        with self.lock:
            self.last_warning = msg
            if key in self._warned:
                return
            self._warned.add(key)
        logger.warning(msg)
