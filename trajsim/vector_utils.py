#!/usr/bin/env python3
"""
2D vector helpers on plain (x, y) tuples.

Snapshots store tuples rather than mutable objects, so every helper returns a
new tuple.
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)


def vec_is_finite(a: Vec2) -> bool:
    return math.isfinite(a[0]) and math.isfinite(a[1])
