#!/usr/bin/env python3
"""
Gravity integrator for the trajectory simulator.

Responsibilities
- Compute the pairwise gravitational acceleration on one body from the snapshots of
  every body at the same time index.
- Advance one body (or all bodies, synchronized) by one fixed step using
  semi-implicit (symplectic) Euler.
- Provide the circular orbit helper used by the built-in presets.

Numerical notes
- Contribution of body k on the target: G * m_k * normalize(d) / |d|^2 with
  d = p_k - p_target. With softening eps > 0 the Plummer form
  G * m_k * d / (|d|^2 + eps^2)^(3/2) is used instead.
- Semi-implicit Euler updates velocity first and uses the new velocity for the
  position: v' = v + a*dt, p' = p + v'*dt. It is symplectic, so orbital energy
  oscillates instead of drifting the way explicit Euler or RK4 do over a long horizon.
- Exactly coincident pairs have no defined direction; they contribute nothing and are
  counted so the caller can report them.
- Complexity: O(N^2) per step (direct summation), O(N^2 * H) for a horizon of H steps.

This module is pure compute; the only state is the softening length.
"""

import math
from typing import List, Sequence, Tuple

from .constants import DEFAULT_SOFTENING, TIME_STEP
from .data_models import SimSnapshot
from .vector_utils import Vec2, vec_add, vec_scale


class GravityIntegrator:
    """
    Fixed-step N-body integrator over immutable snapshots.

    Every call reads the snapshots of time index i and returns new snapshots for
    index i + 1; nothing passed in is modified.
    """

    def __init__(self, softening: float = DEFAULT_SOFTENING, dt: float = TIME_STEP):
        """
        Args:
            softening: Plummer softening length (>= 0), 0 for the exact inverse-square law
            dt: Time step per integration step
        """
        self.softening = max(0.0, float(softening))
        self.dt = float(dt)
        self.coincident_pairs = 0

    def set_softening(self, softening: float) -> None:
        self.softening = max(0.0, float(softening))

    def acceleration(self, target: int, snapshots: Sequence[SimSnapshot],
                     masses: Sequence[float], gravitational_const: float) -> Vec2:
        """
        Total gravitational acceleration on snapshots[target].

        Args:
            target: Index of the body being accelerated.
            snapshots: State of every body at the same time index.
            masses: Mass of every body, same order as snapshots.
            gravitational_const: G in simulation units.

        Returns:
            (ax, ay) acceleration.
        """
        eps_squared = self.softening * self.softening
        xi, yi = snapshots[target].position
        ax_total, ay_total = 0.0, 0.0

        for k, other in enumerate(snapshots):
            if k == target:
                continue

            dx = other.position[0] - xi
            dy = other.position[1] - yi
            r_squared = dx * dx + dy * dy + eps_squared

            if r_squared == 0.0:
                self.coincident_pairs += 1
                continue

            # normalize(d) / |d|^2 == d / |d|^3
            inv_r_cubed = 1.0 / (r_squared * math.sqrt(r_squared))
            magnitude = gravitational_const * masses[k] * inv_r_cubed
            ax_total += dx * magnitude
            ay_total += dy * magnitude

        return (ax_total, ay_total)

    def step_body(self, target: int, snapshots: Sequence[SimSnapshot],
                  masses: Sequence[float], gravitational_const: float) -> SimSnapshot:
        """Advance one body from index i to i + 1."""
        current = snapshots[target]
        accel = self.acceleration(target, snapshots, masses, gravitational_const)
        velocity = vec_add(current.velocity, vec_scale(accel, self.dt))
        position = vec_add(current.position, vec_scale(velocity, self.dt))
        return SimSnapshot(position=position, velocity=velocity)

    def step_all(self, snapshots: Sequence[SimSnapshot], masses: Sequence[float],
                 gravitational_const: float) -> List[SimSnapshot]:
        """
        Advance every body by one step.

        All accelerations are computed from the same input snapshots, so the result
        does not depend on body order.
        """
        return [
            self.step_body(j, snapshots, masses, gravitational_const)
            for j in range(len(snapshots))
        ]

    def take_coincident_count(self) -> int:
        """Return and reset the number of skipped coincident pairs."""
        count = self.coincident_pairs
        self.coincident_pairs = 0
        return count


def circular_orbit_velocity(gravitational_const: float, central_mass: float, orbital_radius: float) -> float:
    """
    Speed needed for a circular orbit around a much heavier central mass.

    From G * M / r^2 = v^2 / r:  v = sqrt(G * M / r)

    Returns:
        Orbital speed, or 0.0 for a non-positive radius.
    """
    if orbital_radius <= 0:
        return 0.0

    return math.sqrt(gravitational_const * central_mass / orbital_radius)


def center_of_mass_velocity(masses: Sequence[float], velocities: Sequence[Vec2]) -> Tuple[float, float]:
    """Mass-weighted mean velocity; presets subtract it so the system does not drift."""
    total = sum(masses)
    if total <= 0:
        return (0.0, 0.0)
    vx = sum(m * v[0] for m, v in zip(masses, velocities)) / total
    vy = sum(m * v[1] for m, v in zip(masses, velocities)) / total
    return (vx, vy)
