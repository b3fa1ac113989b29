#!/usr/bin/env python3
"""
Shared constants for the trajectory simulator (simulation units, G defaults to 1).

Keeping tunables in one place keeps the engine, the playback controller and the
viewer in agreement about horizon length and tick rate.
"""

# Integration
TRAJECTORY_LEN = 12000  # precomputed future steps kept per body
TIME_STEP = 0.005  # simulation time per integration step, independent of frame rate
DEFAULT_GRAVITATIONAL_CONST = 1.0
DEFAULT_SOFTENING = 0.0  # Plummer softening length; 0 reproduces the plain inverse-square law
MIN_TRAJECTORY_LEN = 2  # head plus at least one future step

# Playback
TICK_HZ = 240.0  # fixed physics tick rate driving precompute/advance
DEFAULT_SPEED = 1  # advances per Playing tick

# Trajectory drawing
TRAJECTORY_ALPHA = 0.7  # opacity at "now", fading linearly to 0 at the horizon

# Viewer
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
VIEW_FPS = 60
DEFAULT_UNITS_PER_PIXEL = 0.05
BACKGROUND_COLOR = (10, 12, 18)
HUD_COLOR = (200, 200, 200)
FOLLOW_COLOR = (255, 255, 0)
DEFAULT_BODY_COLOR = (200, 200, 255)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
