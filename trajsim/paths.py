#!/usr/bin/env python3
"""
Trajectory polylines for drawing.

Pure presentation transforms over raw trajectories; nothing here is stored back
into the simulation.
"""
from typing import List, Optional, Sequence

from .constants import TRAJECTORY_ALPHA
from .data_models import SimSnapshot
from .vector_utils import Vec2, vec_sub


def relative_polyline(trajectory: Sequence[SimSnapshot],
                      followed: Optional[Sequence[SimSnapshot]] = None) -> List[Vec2]:
    """
    Positions of a trajectory, optionally in the frame of a followed body.

    Point i is shifted by how far the followed body has moved from its present
    position by index i, so the followed body's own path collapses onto its
    current position. Points past the end of the followed trajectory are dropped.
    """
    if not followed:
        return [s.position for s in trajectory]

    origin = followed[0].position
    n = min(len(trajectory), len(followed))
    return [
        vec_sub(trajectory[i].position, vec_sub(followed[i].position, origin))
        for i in range(n)
    ]


def fade_alpha(index: int, trajectory_len: int, alpha: float = TRAJECTORY_ALPHA) -> float:
    """Opacity of the segment starting at index: alpha at "now", 0 at the horizon."""
    if trajectory_len <= 0:
        return 0.0
    return max(0.0, alpha - alpha * index / trajectory_len)


def segments(points: Sequence[Vec2], trajectory_len: int, alpha: float = TRAJECTORY_ALPHA):
    """Yield (start, end, opacity) for consecutive point pairs."""
    for i in range(len(points) - 1):
        yield points[i], points[i + 1], fade_alpha(i, trajectory_len, alpha)
