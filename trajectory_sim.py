#!/usr/bin/env python3
"""
Trajectory simulator entry point: a thin pygame viewer around the trajsim engine.

What this module does
- Loads a built-in preset into a Simulation and wraps it in a PlaybackController.
- Drives PlaybackController.tick() from a fixed-rate accumulator (TICK_HZ), decoupled
  from the display frame rate.
- Draws bodies at their current state and each visible trajectory, optionally in the
  frame of a followed body.

Controls
- Space: play/pause        P: pause              S: step once
- Right arrow (hold): advance
- F: follow next body      G: stop following     Esc: quit
- Minus / Equals: slower / faster playback
- [ / ]: halve / double G  V: toggle trajectory of the followed body
- Right click: spawn a body at the cursor (velocity relative to the followed body)

Running
1) Install: `pip install -e .`
2) Run: `python trajectory_sim.py --preset figure-eight`
"""
import argparse
import logging
import sys
from typing import Optional, Tuple

import pygame
from pygame import gfxdraw

from trajsim.commands import SetGravitationalConst, SetSpeed, SetTrajectoryVisible, SpawnBody
from trajsim.constants import (
    BACKGROUND_COLOR,
    FOLLOW_COLOR,
    HUD_COLOR,
    MIN_TRAJECTORY_LEN,
    SAFE_COORD_LIMIT,
    TICK_HZ,
    TRAJECTORY_LEN,
    VIEW_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    DEFAULT_UNITS_PER_PIXEL,
)
from trajsim.paths import relative_polyline, segments
from trajsim.playback import PlaybackController
from trajsim.scenarios import PRESETS, build_simulation, load_preset
from trajsim.simulation import Simulation

logger = logging.getLogger("trajectory_sim")

# Cap on ticks run per frame so a slow frame cannot snowball
MAX_TICKS_PER_FRAME = 16


def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def _blend(color, alpha):
    return tuple(int(bg + (c - bg) * alpha) for c, bg in zip(color, BACKGROUND_COLOR))


class Viewer:
    """
    Pygame loop: ticks physics at a fixed rate, draws bodies and trajectories.
    """

    def __init__(self, sim: Simulation, controller: PlaybackController):
        self.sim = sim
        self.controller = controller
        self.surface = None
        self.font = None
        self.clock = None
        self.units_per_pixel = DEFAULT_UNITS_PER_PIXEL
        self.center = (0.0, 0.0)
        self.follow_id: Optional[int] = None
        self.running = True

    def frame_bodies(self):
        """Fit the current bodies into the window once at startup."""
        states = self.sim.states()
        if not states:
            return
        xs = [s.position[0] for s in states]
        ys = [s.position[1] for s in states]
        self.center = ((min(xs) + max(xs)) / 2, (min(ys) + max(ys)) / 2)
        w, h = self.surface.get_size()
        span = max(max(xs) - min(xs), max(ys) - min(ys), 1.0) * 2.0
        self.units_per_pixel = span / max(min(w, h), 1)

    def world_to_screen(self, pos) -> Tuple[float, float]:
        w, h = self.surface.get_size()
        x = (pos[0] - self.center[0]) / self.units_per_pixel + w / 2
        y = h / 2 - (pos[1] - self.center[1]) / self.units_per_pixel
        return (x, y)

    def screen_to_world(self, screen) -> Tuple[float, float]:
        w, h = self.surface.get_size()
        return ((screen[0] - w / 2) * self.units_per_pixel + self.center[0],
                (h / 2 - screen[1]) * self.units_per_pixel + self.center[1])

    def run(self):
        pygame.init()
        pygame.display.set_caption(f"Trajectory Simulator - {self.sim.display_name or 'Untitled'}")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.font = pygame.font.Font(None, 20)
        self.clock = pygame.time.Clock()
        self.frame_bodies()

        tick_dt = 1.0 / TICK_HZ
        accumulator = 0.0
        while self.running:
            accumulator += self.clock.tick(VIEW_FPS) / 1000.0
            self.handle_events()

            ticks = 0
            while accumulator >= tick_dt and ticks < MAX_TICKS_PER_FRAME:
                self.controller.tick()
                accumulator -= tick_dt
                ticks += 1
            if ticks == MAX_TICKS_PER_FRAME:
                accumulator = 0.0

            self.draw()

        pygame.quit()

    def _cycle_follow(self):
        ids = [s.id for s in self.sim.states()]
        if not ids:
            self.follow_id = None
            return
        if self.follow_id not in ids:
            self.follow_id = ids[0]
        else:
            self.follow_id = ids[(ids.index(self.follow_id) + 1) % len(ids)]

    def handle_events(self):
        if pygame.key.get_pressed()[pygame.K_RIGHT]:
            self.controller.advance_once()

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            elif event.type == pygame.MOUSEWHEEL:
                self.units_per_pixel *= 1.0 / 1.1 if event.y > 0 else 1.1
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 3:
                world = self.screen_to_world(event.pos)
                self.sim.submit(SpawnBody("New Body", mass=1.0, radius=self.units_per_pixel * 5,
                                          position=world, relative_to=self.follow_id))
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

    def handle_key(self, key):
        if key == pygame.K_SPACE:
            self.controller.toggle()
        elif key == pygame.K_p:
            self.controller.pause()
        elif key == pygame.K_s:
            self.controller.step()
        elif key == pygame.K_f:
            self._cycle_follow()
        elif key == pygame.K_g:
            self.follow_id = None
        elif key in (pygame.K_LEFTBRACKET, pygame.K_RIGHTBRACKET):
            factor = 0.5 if key == pygame.K_LEFTBRACKET else 2.0
            self.sim.submit(SetGravitationalConst(self.sim.data.gravitational_const * factor))
        elif key in (pygame.K_EQUALS, pygame.K_MINUS):
            delta = 1 if key == pygame.K_EQUALS else -1
            self.sim.submit(SetSpeed(max(1, self.sim.data.speed + delta)))
        elif key == pygame.K_v and self.follow_id is not None:
            body = self.sim.get_body(self.follow_id)
            if body is not None:
                self.sim.submit(SetTrajectoryVisible(body.id, not body.trajectory_visible))
        elif key == pygame.K_ESCAPE:
            self.running = False

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        with self.sim.lock:
            states = self.sim.states()
            trajectories = {b.id: list(b.trajectory) for b in self.sim.bodies}
            trajectory_len = self.sim.data.trajectory_len
            followed = trajectories.get(self.follow_id)
            if not followed:
                followed = None
                self.follow_id = None
            else:
                self.center = followed[0].position

        for s in states:
            if not s.trajectory_visible:
                continue
            pts = relative_polyline(trajectories[s.id], followed)
            for a, b, alpha in segments(pts, trajectory_len):
                a_s = _safe_point(self.world_to_screen(a))
                b_s = _safe_point(self.world_to_screen(b))
                if a_s and b_s:
                    pygame.draw.aaline(surf, _blend(s.color, alpha), a_s, b_s)

        for s in states:
            # Paths are anchored at the trajectory heads while following
            pos = s.position
            if followed is not None and trajectories[s.id]:
                pos = trajectories[s.id][0].position
            screen_pos = _safe_point(self.world_to_screen(pos))
            if screen_pos is None:
                continue
            vis_r = int(min(50, max(2, s.radius / self.units_per_pixel)))
            gfxdraw.filled_circle(surf, screen_pos[0], screen_pos[1], vis_r, s.color)
            gfxdraw.aacircle(surf, screen_pos[0], screen_pos[1], vis_r, (0, 0, 0))
            if s.id == self.follow_id:
                gfxdraw.aacircle(surf, screen_pos[0], screen_pos[1], vis_r + 4, FOLLOW_COLOR)

        status = self.controller.status()
        lines = [
            "Space: play/pause | P: pause | S: step | Right: advance | F/G: follow/unfollow | [ ]: G | - =: speed | Right click: spawn",
            f"[{status.state.value}] G={self.sim.data.gravitational_const:g} speed={self.sim.data.speed} "
            f"horizon {status.trajectory_pos}/{status.trajectory_len} bodies={status.body_count}",
        ]
        if status.last_warning:
            lines.append(f"Warning: {status.last_warning}")
        for i, text in enumerate(lines):
            surf.blit(self.font.render(text, True, HUD_COLOR), (10, 10 + 20 * i))

        pygame.display.flip()


def _trajectory_len(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if value < MIN_TRAJECTORY_LEN:
        raise argparse.ArgumentTypeError(f"must be at least {MIN_TRAJECTORY_LEN}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive N-body trajectory simulator")
    parser.add_argument("--preset", default="figure-eight", choices=sorted(PRESETS))
    parser.add_argument("--trajectory-len", type=_trajectory_len, default=TRAJECTORY_LEN)
    parser.add_argument("--gravity", type=float, default=None, help="override the preset's gravitational constant")
    parser.add_argument("--speed", type=int, default=1, help="advances per physics tick while playing")
    parser.add_argument("--play", action="store_true", help="start playing instead of paused")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sim = build_simulation(load_preset(args.preset), trajectory_len=args.trajectory_len)
    if args.gravity is not None:
        sim.submit(SetGravitationalConst(args.gravity))
    if args.speed != 1:
        sim.submit(SetSpeed(args.speed))

    controller = PlaybackController(sim)
    if args.play:
        controller.toggle()

    logger.info("Loaded %s with %d bodies", sim.display_name, len(sim.bodies))
    Viewer(sim, controller).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
