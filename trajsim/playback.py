#!/usr/bin/env python3
"""
Playback controller: Play / Pause / Step on top of the Simulation engine.

A front end calls tick() at the fixed physics rate (TICK_HZ). One tick runs the
phases in a fixed order:

1) apply queued edit commands (invalidating the horizon if needed)
2) precompute the horizon
3) advance the cursor, if Playing (speed times) or Step (once, then back to Paused)

advance_once() is a manual single advance allowed in any state; holding a key can
call it every frame.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .simulation import Simulation

logger = logging.getLogger(__name__)


class SimState(enum.Enum):
    PLAYING = "Playing"
    PAUSED = "Paused"
    STEP = "Step"


@dataclass(frozen=True)
class PlaybackStatus:
    """Snapshot of playback state for UI reflection."""
    state: SimState
    trajectory_pos: int
    trajectory_len: int
    horizon_full: bool
    body_count: int
    last_warning: Optional[str]


class PlaybackController:

    def __init__(self, sim: Simulation, state: SimState = SimState.PAUSED):
        self.sim = sim
        self.state = state

    def toggle(self) -> SimState:
        """Paused <-> Playing; a pending Step becomes Playing."""
        if self.state == SimState.PLAYING:
            self.state = SimState.PAUSED
        else:
            self.state = SimState.PLAYING
        logger.debug("Playback %s", self.state.value)
        return self.state

    def pause(self) -> None:
        """Stop playback; a pending Step is cancelled."""
        self.state = SimState.PAUSED
        logger.debug("Playback %s", self.state.value)

    def step(self) -> None:
        """Advance exactly once on the next tick, then pause."""
        self.state = SimState.STEP

    def tick(self) -> int:
        """
        Run one fixed-rate physics phase.

        Returns the number of successful advances.
        """
        sim = self.sim
        with sim.lock:
            sim.apply_pending()
            sim.precompute()

            if self.state == SimState.PAUSED or not sim.bodies:
                if self.state == SimState.STEP:
                    self.state = SimState.PAUSED
                return 0

            wanted = sim.data.speed if self.state == SimState.PLAYING else 1
            advanced = 0
            for n in range(wanted):
                if n:
                    sim.precompute()
                if not sim.advance():
                    break
                advanced += 1

            if self.state == SimState.STEP:
                self.state = SimState.PAUSED
            return advanced

    def advance_once(self) -> bool:
        """Manual single advance, independent of the current state."""
        sim = self.sim
        with sim.lock:
            sim.apply_pending()
            sim.precompute()
            return sim.advance()

    def status(self) -> PlaybackStatus:
        sim = self.sim
        with sim.lock:
            return PlaybackStatus(
                state=self.state,
                trajectory_pos=sim.data.trajectory_pos,
                trajectory_len=sim.data.trajectory_len,
                horizon_full=sim.data.horizon_full,
                body_count=len(sim.bodies),
                last_warning=sim.last_warning,
            )
